"""
Django management command to print scheduling progress.

Usage:
    python manage.py schedule_report
    python manage.py schedule_report --location 3
    python manage.py schedule_report --division 12
    python manage.py schedule_report --division 12 --json
"""

import json
from django.core.management.base import BaseCommand, CommandError
from league_scheduler.exceptions import SchedulingError
from league_scheduler.services import get_division_schedule, get_schedule_overview


class Command(BaseCommand):
    help = "Print the schedule overview, or the week list of one division"

    def add_arguments(self, parser) -> None:
        parser.add_argument(
            "--location",
            type=int,
            default=None,
            help="Only include divisions at this location id",
        )
        parser.add_argument(
            "--division",
            type=int,
            default=None,
            help="Print the week-by-week schedule of this division id",
        )
        parser.add_argument(
            "--json",
            action="store_true",
            help="Print the raw read model as JSON",
        )

    def handle(self, *args, **options) -> None:
        try:
            if options["division"] is not None:
                data = get_division_schedule(options["division"])
            else:
                data = get_schedule_overview(location_id=options["location"])
        except SchedulingError as e:
            raise CommandError(str(e))

        if options["json"]:
            self.stdout.write(json.dumps(data, indent=2, default=str))
        elif options["division"] is not None:
            self._print_division(data)
        else:
            self._print_overview(data)

    def _print_division(self, data: dict) -> None:
        division = data["division"]
        self.stdout.write(
            f"{division['name']} - {division['location']['name']}, "
            f"{division['day']}s {division['time_range']}"
        )
        for week in data["weeks"]:
            marker = ">" if week["is_current"] else " "
            line = (
                f"{marker} {week['label']:<14} {week['date'] or '-':<12} "
                f"{len(week['games'])} game(s)  {week['status']}"
            )
            if week["is_complete"]:
                self.stdout.write(self.style.SUCCESS(line))
            else:
                self.stdout.write(line)
        self.stdout.write(
            f"Current week: {data['current_week']} of {data['total_weeks']}"
        )

    def _print_overview(self, data: dict) -> None:
        styles = {
            "not-started": self.style.ERROR,
            "in-progress": self.style.WARNING,
            "complete": self.style.SUCCESS,
        }
        for group in data["locations"]:
            self.stdout.write(group["location"]["name"])
            for division in group["divisions"]:
                line = (
                    f"  {division['division_name']:<30} "
                    f"{division['scheduled_weeks']}/{division['total_weeks']} weeks "
                    f"({division['percentage']}%)  {division['status']}"
                )
                self.stdout.write(styles[division["status"]](line))

        stats = data["stats"]
        self.stdout.write(
            f"{stats['total_divisions']} division(s), {stats['need_attention']} need attention, "
            f"{stats['fully_scheduled']} fully scheduled, {stats['total_teams']} team(s)"
        )
