from datetime import date, time, timedelta
from league_scheduler.models import Division, Game, Location, Team, WeekType
from league_scheduler.services.game_operations import combine_date_and_time


class ScheduleFixtureMixin:
    """Builds locations, divisions, teams and games for scheduling tests."""

    def make_location(self, name="Downtown Gym"):
        return Location.objects.create(name=name, address="1 Main St")

    def make_division(self, location, team_count=8, **kwargs):
        fields = {
            "name": "Monday Rec",
            "location": location,
            "day": "Monday",
            "start_time": "19:00",
            "end_time": "22:00",
            "start_date": date(2025, 1, 6),
            "active": True,
            "register": False,
            "regular_season_weeks": 10,
        }
        fields.update(kwargs)
        division = Division.objects.create(**fields)
        for i in range(team_count):
            Team.objects.create(
                division=division,
                name=f"Team {i + 1}",
                short_name=f"T{i + 1}",
                code=f"T{i + 1:02d}",
            )
        return division

    def teams_of(self, division):
        return list(Team.objects.filter(division=division).order_by("id"))

    def make_game(
        self,
        division,
        home_team,
        away_team,
        week,
        completed=False,
        week_type=WeekType.REGULAR,
        game_time=time(19, 0),
        game_name=None,
    ):
        game_date = division.start_date + timedelta(weeks=week - 1)
        return Game.objects.create(
            division=division,
            game_name=game_name or f"{home_team.name} vs. {away_team.name}",
            date=combine_date_and_time(game_date, game_time),
            time=game_time,
            home_team=home_team,
            away_team=away_team,
            home_score=50 if completed else 0,
            away_score=42 if completed else 0,
            completed=completed,
            started=completed,
            week=week,
            week_type=week_type,
            is_playoff_game=week_type != WeekType.REGULAR,
        )

    def schedule_week(self, division, week, completed=False):
        """Schedule every team of the division once in the given week."""
        teams = self.teams_of(division)
        return [
            self.make_game(division, teams[i], teams[i + 1], week, completed=completed)
            for i in range(0, len(teams) - 1, 2)
        ]
