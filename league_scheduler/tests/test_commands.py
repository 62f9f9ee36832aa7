import json
from io import StringIO
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from league_scheduler.tests.helpers import ScheduleFixtureMixin


class ScheduleReportCommandTests(ScheduleFixtureMixin, TestCase):
    def setUp(self):
        self.location = self.make_location()
        self.division = self.make_division(self.location, team_count=4, regular_season_weeks=3)
        self.schedule_week(self.division, 1, completed=True)

    def run_command(self, *args):
        out = StringIO()
        call_command("schedule_report", *args, stdout=out)
        return out.getvalue()

    def test_overview(self):
        output = self.run_command()
        self.assertIn("Downtown Gym", output)
        self.assertIn("1/5 weeks (20%)", output)
        self.assertIn("1 division(s), 1 need attention", output)

    def test_division_weeks(self):
        output = self.run_command("--division", str(self.division.id))
        self.assertIn("Monday Rec - Downtown Gym, Mondays 19:00 - 22:00", output)
        self.assertIn("Semifinals", output)
        self.assertIn("Current week: 2 of 5", output)

    def test_json_output(self):
        output = self.run_command("--division", str(self.division.id), "--json")
        data = json.loads(output)
        self.assertEqual(data["current_week"], 2)
        self.assertEqual(data["total_weeks"], 5)

    def test_unknown_division(self):
        with self.assertRaises(CommandError):
            self.run_command("--division", "999999")
