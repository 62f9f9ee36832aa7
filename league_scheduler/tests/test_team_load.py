from django.test import TestCase
from league_scheduler.exceptions import NotFoundError
from league_scheduler.services.team_load import (
    count_games_per_team,
    find_double_booked_teams,
    get_team_counts_for_week,
    get_team_schedule_counts,
)
from league_scheduler.tests.helpers import ScheduleFixtureMixin


class TeamLoadTests(ScheduleFixtureMixin, TestCase):
    def setUp(self):
        self.division = self.make_division(self.make_location(), team_count=6)
        self.t1, self.t2, self.t3, self.t4, self.t5, self.t6 = self.teams_of(self.division)

        # Week 3: t1 plays twice, t6 is idle
        self.make_game(self.division, self.t1, self.t2, 3)
        self.make_game(self.division, self.t3, self.t1, 3)
        self.make_game(self.division, self.t4, self.t5, 3)
        # Other weeks do not count
        self.make_game(self.division, self.t1, self.t6, 4)

    def test_counts_match_fixture(self):
        counts = get_team_counts_for_week(self.division.id, 3)
        self.assertEqual(
            counts,
            {
                self.t1.id: 2,
                self.t2.id: 1,
                self.t3.id: 1,
                self.t4.id: 1,
                self.t5.id: 1,
                self.t6.id: 0,
            },
        )

    def test_double_booking_is_reported_not_blocked(self):
        counts = get_team_counts_for_week(self.division.id, 3)
        self.assertEqual(find_double_booked_teams(counts), [self.t1.id])

    def test_empty_week(self):
        counts = get_team_counts_for_week(self.division.id, 7)
        self.assertEqual(set(counts.values()), {0})
        self.assertEqual(len(counts), 6)

    def test_count_games_per_team_counts_home_and_away(self):
        games = list(self.division.games.filter(week=3))
        counts = count_games_per_team(games)
        self.assertEqual(sum(counts.values()), 2 * len(games))
        self.assertNotIn(self.t6.id, counts)

    def test_schedule_counts_rows(self):
        rows = get_team_schedule_counts(self.division.id, 3)
        by_code = {row["team_code"]: row for row in rows}
        self.assertEqual(by_code["T01"]["game_count"], 2)
        self.assertEqual(by_code["T06"]["game_count"], 0)
        self.assertEqual(by_code["T06"]["team_name"], "Team 6")

    def test_unknown_division(self):
        with self.assertRaises(NotFoundError):
            get_team_counts_for_week(999999, 1)
