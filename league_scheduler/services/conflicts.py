"""
Location conflict detection service functions.

Conflicts are advisory: callers surface the warning next to a successful
save, nothing here ever blocks a write.
"""

import logging
import re
from dataclasses import dataclass
from itertools import combinations
from typing import Optional
from league_scheduler.exceptions import ValidationError
from league_scheduler.services.game_operations import local_date
from league_scheduler.services.repository import ScheduleRepository
from league_scheduler.services.weeks import group_games_by_week

logger = logging.getLogger(__name__)

TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*(AM|PM)?\s*$", re.IGNORECASE)


@dataclass
class ConflictResult:
    has_conflict: bool
    conflicting_division: Optional[object] = None
    warning: Optional[str] = None

    def as_dict(self):
        division = self.conflicting_division
        return {
            "has_conflict": self.has_conflict,
            "conflicting_division": (
                {
                    "id": division.id,
                    "name": division.name,
                    "start_time": division.start_time,
                    "end_time": division.end_time,
                }
                if division is not None
                else None
            ),
            "warning": self.warning,
        }


def parse_time(value):
    """Convert "HH:MM" (24h) or "h:mm AM/PM" into minutes since midnight."""
    match = TIME_PATTERN.match(str(value or ""))
    if not match:
        raise ValidationError(f"Invalid time format: {value}")

    hours, minutes, period = int(match.group(1)), int(match.group(2)), match.group(3)
    if period:
        if not 1 <= hours <= 12:
            raise ValidationError(f"Invalid time format: {value}")
        period = period.upper()
        if period == "PM" and hours != 12:
            hours += 12
        if period == "AM" and hours == 12:
            hours = 0
    if hours > 23 or minutes > 59:
        raise ValidationError(f"Invalid time format: {value}")

    return hours * 60 + minutes


def minutes_overlap(start1, end1, start2, end2):
    return start1 < end2 and start2 < end1


def time_ranges_overlap(start1, end1, start2, end2):
    """Half-open overlap check: ranges that only touch do not overlap."""
    return minutes_overlap(
        parse_time(start1), parse_time(end1), parse_time(start2), parse_time(end2)
    )


def _readable_bookings(divisions):
    """Pair divisions with their booking in minutes, earliest start first."""
    bookings = []
    for division in divisions:
        try:
            start, end = parse_time(division.start_time), parse_time(division.end_time)
        except ValidationError:
            logger.warning(
                f"Ignoring division {division.id} '{division.name}' in conflict check: "
                f"unreadable booking {division.time_range}"
            )
            continue
        bookings.append((start, end, division))
    return sorted(bookings, key=lambda booking: (booking[0], booking[2].id))


def format_conflict_warning(division, day):
    return (
        f"{division.name} uses this location on {day}s "
        f"from {division.start_time} - {division.end_time}"
    )


def check_location_conflict(
    location_id, day, start_time, end_time, exclude_division_id=None, repository=None
):
    """
    Check whether a location/day/time booking overlaps another division.

    When updating a division, pass its id as exclude_division_id so it does
    not conflict with its own current record. Only the proposed times are
    validated; stored divisions whose times cannot be read never conflict.
    """
    repository = repository or ScheduleRepository()
    start, end = parse_time(start_time), parse_time(end_time)

    candidates = repository.find_divisions_by_location_day(
        location_id, day, exclude_division_id=exclude_division_id
    )
    for other_start, other_end, division in _readable_bookings(candidates):
        if minutes_overlap(start, end, other_start, other_end):
            warning = format_conflict_warning(division, day)
            logger.warning(f"Location conflict: {warning}")
            return ConflictResult(
                has_conflict=True, conflicting_division=division, warning=warning
            )

    return ConflictResult(has_conflict=False)


def find_schedule_conflicts(division_id, repository=None):
    """
    Find games in a division that clash with each other.

    Reports teams playing two games at the same date and time, and the same
    matchup scheduled twice in one week.
    """
    repository = repository or ScheduleRepository()
    games = repository.find_games_by_division(division_id)

    conflicts = []
    for game1, game2 in combinations(games, 2):
        if game1.date == game2.date and game1.time == game2.time:
            teams1 = {game1.home_team_id, game1.away_team_id}
            teams2 = {game2.home_team_id, game2.away_team_id}
            if teams1 & teams2:
                conflicts.append(
                    {
                        "type": "time-conflict",
                        "games": [game1.id, game2.id],
                        "description": (
                            f"Same team playing at {game1.time.strftime('%H:%M')} "
                            f"on {local_date(game1.date).isoformat()}"
                        ),
                    }
                )

    for week, week_games in sorted(group_games_by_week(games).items()):
        for game1, game2 in combinations(week_games, 2):
            if {game1.home_team_id, game1.away_team_id} == {
                game2.home_team_id,
                game2.away_team_id,
            }:
                conflicts.append(
                    {
                        "type": "duplicate-matchup",
                        "games": [game1.id, game2.id],
                        "description": (
                            f"{game1.home_team.name} and {game1.away_team.name} "
                            f"meet twice in week {week}"
                        ),
                    }
                )

    return conflicts
