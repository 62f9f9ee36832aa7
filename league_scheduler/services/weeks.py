"""
Week structure service functions.

This module derives a division's season structure (regular weeks followed by
playoff rounds) and the season state computed from a snapshot of its games.
Nothing here is stored: current week and completion are recomputed on every
read.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, List, Optional
from league_scheduler.conf import get_setting
from league_scheduler.exceptions import ValidationError
from league_scheduler.models import WEEKDAYS, WeekType

PLAYOFF_ORDER = [WeekType.QUARTERFINAL, WeekType.SEMIFINAL, WeekType.FINAL]

PLAYOFF_LABELS = {
    WeekType.QUARTERFINAL: "Quarterfinals",
    WeekType.SEMIFINAL: "Semifinals",
    WeekType.FINAL: "Finals",
}


@dataclass(frozen=True)
class WeekInfo:
    week_number: int
    week_type: str
    label: str
    date: Optional[date] = None

    @property
    def is_regular(self):
        return self.week_type == WeekType.REGULAR

    @property
    def is_playoff(self):
        return not self.is_regular


def get_playoff_rounds(division, team_count=None):
    """Return the playoff rounds for a division in bracket order."""
    if not division.has_playoffs:
        return []

    if team_count is None:
        team_count = division.team_count

    for rule in get_setting("PLAYOFF_BRACKETS"):
        if team_count >= rule["min_teams"]:
            rounds = [WeekType(r) for r in rule["rounds"]]
            # Brackets always run in ascending order regardless of how the rule lists them
            return sorted(rounds, key=PLAYOFF_ORDER.index)
    return []


def get_regular_season_weeks(division):
    weeks = division.regular_season_weeks or get_setting("DEFAULT_REGULAR_SEASON_WEEKS")
    return min(weeks, get_setting("MAX_REGULAR_SEASON_WEEKS"))


def get_total_weeks(division, team_count=None):
    """Regular season weeks plus one week per playoff round."""
    return get_regular_season_weeks(division) + len(get_playoff_rounds(division, team_count))


def calculate_week_date(start_date, week_number, day):
    """
    Get the game date of a week.

    Week 1 is the week of the division start date; the date is rolled forward
    to the division's weekday within that week.
    """
    week_start = start_date + timedelta(weeks=week_number - 1)
    diff = WEEKDAYS.index(day) - week_start.weekday()
    if diff < 0:
        diff += 7
    return week_start + timedelta(days=diff)


def generate_week_structure(division, team_count=None) -> List[WeekInfo]:
    """Generate the ordered week list for a division."""

    def week_date(week_number):
        if division.start_date is None:
            return None
        return calculate_week_date(division.start_date, week_number, division.day)

    regular_weeks = get_regular_season_weeks(division)
    weeks = [
        WeekInfo(
            week_number=number,
            week_type=WeekType.REGULAR,
            label=f"Week {number}",
            date=week_date(number),
        )
        for number in range(1, regular_weeks + 1)
    ]

    for offset, week_type in enumerate(get_playoff_rounds(division, team_count), 1):
        number = regular_weeks + offset
        weeks.append(
            WeekInfo(
                week_number=number,
                week_type=week_type,
                label=PLAYOFF_LABELS[week_type],
                date=week_date(number),
            )
        )

    return weeks


def get_week_type(division, week_number, team_count=None):
    """Get the planned type of a week number, rejecting weeks outside the season."""
    for week in generate_week_structure(division, team_count):
        if week.week_number == week_number:
            return week.week_type
    raise ValidationError(
        f"Week {week_number} is outside the season of division '{division.name}'"
    )


def is_week_complete(games):
    """A week is complete only if it has games and all of them are final."""
    return len(games) > 0 and all(game.completed for game in games)


def find_current_week(weeks: List[WeekInfo], games_by_week: Dict[int, list]) -> int:
    """
    Find the current week of a season.

    The current week is the first one that is still empty or has an unfinished
    game. Once every week is complete, the last week stays current.
    """
    if not weeks:
        return 1

    for week in weeks:
        if not is_week_complete(games_by_week.get(week.week_number, [])):
            return week.week_number
    return weeks[-1].week_number


def get_week_status(games):
    """Get the publishing status of a week's games."""
    if not games:
        return "not-started"
    if all(game.completed for game in games):
        return "complete"
    if all(game.published for game in games):
        return "published"
    return "draft"


def group_games_by_week(games):
    games_by_week = {}
    for game in games:
        games_by_week.setdefault(game.week, []).append(game)
    return games_by_week
