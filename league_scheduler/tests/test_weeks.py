from datetime import date
from types import SimpleNamespace
from django.test import SimpleTestCase, TestCase, override_settings
from league_scheduler.exceptions import ValidationError
from league_scheduler.models import Division, WeekType
from league_scheduler.services.weeks import (
    calculate_week_date,
    find_current_week,
    generate_week_structure,
    get_playoff_rounds,
    get_total_weeks,
    get_week_status,
    get_week_type,
    is_week_complete,
)
from league_scheduler.tests.helpers import ScheduleFixtureMixin


def game(completed=False, published=True):
    return SimpleNamespace(completed=completed, published=published)


class WeekStructureTests(SimpleTestCase):
    def setUp(self):
        self.division = Division(
            name="Monday Rec",
            day="Monday",
            start_date=date(2025, 1, 6),
            regular_season_weeks=10,
            has_playoffs=True,
        )

    def test_eight_teams_get_semifinal_and_final(self):
        rounds = get_playoff_rounds(self.division, team_count=8)
        self.assertEqual(rounds, [WeekType.SEMIFINAL, WeekType.FINAL])
        self.assertEqual(get_total_weeks(self.division, team_count=8), 12)

    def test_large_bracket_gets_all_three_rounds(self):
        rounds = get_playoff_rounds(self.division, team_count=12)
        self.assertEqual(
            rounds, [WeekType.QUARTERFINAL, WeekType.SEMIFINAL, WeekType.FINAL]
        )

    def test_small_divisions(self):
        self.assertEqual(get_playoff_rounds(self.division, team_count=3), [WeekType.FINAL])
        self.assertEqual(get_playoff_rounds(self.division, team_count=1), [])

    def test_no_playoffs(self):
        self.division.has_playoffs = False
        self.assertEqual(get_total_weeks(self.division, team_count=12), 10)

    @override_settings(
        LEAGUE_SCHEDULER={
            "PLAYOFF_BRACKETS": [
                {"min_teams": 6, "rounds": ["FINAL", "QUARTERFINAL", "SEMIFINAL"]},
            ]
        }
    )
    def test_bracket_policy_comes_from_settings(self):
        self.assertEqual(
            get_playoff_rounds(self.division, team_count=6),
            [WeekType.QUARTERFINAL, WeekType.SEMIFINAL, WeekType.FINAL],
        )
        self.assertEqual(get_playoff_rounds(self.division, team_count=5), [])

    def test_weeks_are_contiguous_with_playoffs_last(self):
        weeks = generate_week_structure(self.division, team_count=8)

        self.assertEqual([w.week_number for w in weeks], list(range(1, 13)))
        self.assertTrue(all(w.is_regular for w in weeks[:10]))
        self.assertEqual(weeks[10].week_type, WeekType.SEMIFINAL)
        self.assertEqual(weeks[10].label, "Semifinals")
        self.assertEqual(weeks[11].label, "Finals")
        self.assertTrue(weeks[11].is_playoff)
        self.assertEqual(weeks[6].label, "Week 7")

    def test_week_dates_follow_division_day(self):
        weeks = generate_week_structure(self.division, team_count=8)
        self.assertEqual(weeks[0].date, date(2025, 1, 6))
        self.assertEqual(weeks[1].date, date(2025, 1, 13))
        self.assertEqual(weeks[11].date, date(2025, 3, 24))

    def test_week_date_rolls_forward_to_weekday(self):
        # 2025-01-06 is a Monday; a Thursday division plays on the 9th
        self.assertEqual(calculate_week_date(date(2025, 1, 6), 1, "Thursday"), date(2025, 1, 9))
        # Starting on a Friday, a Monday division plays the following Monday
        self.assertEqual(calculate_week_date(date(2025, 1, 10), 2, "Monday"), date(2025, 1, 20))

    def test_weeks_without_start_date_have_no_date(self):
        self.division.start_date = None
        weeks = generate_week_structure(self.division, team_count=8)
        self.assertIsNone(weeks[0].date)

    def test_get_week_type(self):
        self.assertEqual(get_week_type(self.division, 3, team_count=8), WeekType.REGULAR)
        self.assertEqual(get_week_type(self.division, 12, team_count=8), WeekType.FINAL)
        with self.assertRaises(ValidationError):
            get_week_type(self.division, 13, team_count=8)


class SeasonStateTests(SimpleTestCase):
    def setUp(self):
        division = Division(name="D", day="Monday", regular_season_weeks=4, has_playoffs=False)
        self.weeks = generate_week_structure(division, team_count=4)

    def test_empty_week_is_never_complete(self):
        self.assertFalse(is_week_complete([]))
        self.assertTrue(is_week_complete([game(True), game(True)]))
        self.assertFalse(is_week_complete([game(True), game(False)]))

    def test_current_week_is_first_empty_week(self):
        games_by_week = {
            1: [game(True)],
            2: [game(True), game(True)],
            4: [game(False)],
        }
        self.assertEqual(find_current_week(self.weeks, games_by_week), 3)

    def test_current_week_is_first_incomplete_week(self):
        games_by_week = {
            1: [game(True)],
            2: [game(True), game(False)],
            3: [game(False)],
        }
        self.assertEqual(find_current_week(self.weeks, games_by_week), 2)

    def test_last_week_is_current_when_season_is_complete(self):
        games_by_week = {n: [game(True)] for n in range(1, 5)}
        self.assertEqual(find_current_week(self.weeks, games_by_week), 4)

    def test_current_week_without_structure(self):
        self.assertEqual(find_current_week([], {}), 1)

    def test_week_status(self):
        self.assertEqual(get_week_status([]), "not-started")
        self.assertEqual(get_week_status([game(True), game(True)]), "complete")
        self.assertEqual(get_week_status([game(False), game(True)]), "published")
        self.assertEqual(get_week_status([game(False, published=False)]), "draft")


class WeekStructureTeamCountTests(ScheduleFixtureMixin, TestCase):
    def test_team_count_is_read_from_division(self):
        division = self.make_division(self.make_location(), team_count=10)
        weeks = generate_week_structure(division)
        self.assertEqual(len(weeks), 13)
        self.assertEqual(weeks[10].week_type, WeekType.QUARTERFINAL)
