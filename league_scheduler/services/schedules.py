"""
Schedule mutation service functions.

This module contains the entry points for creating, updating, publishing and
deleting games, and for saving divisions with their advisory location
conflict warning. Every game write is validated first and then issued as its
own unit of work: batches are not atomic, and a failed item never rolls back
the items written before it.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List
from league_scheduler.exceptions import SchedulingError, ValidationError
from league_scheduler.models import WEEKDAYS, Division
from league_scheduler.services.conflicts import check_location_conflict, parse_time
from league_scheduler.services.game_operations import (
    normalize_game_data,
    validate_batch,
    validate_delete,
    validate_game_patch,
    validate_new_game,
)
from league_scheduler.services.repository import ScheduleRepository
from league_scheduler.services.weeks import generate_week_structure

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Outcome of a non-atomic batch: how many items succeeded and which failed."""

    operation: str
    succeeded: int = 0
    failures: List[str] = field(default_factory=list)
    errors: List[Dict[str, str]] = field(default_factory=list)

    @property
    def success(self):
        return not self.failures

    def add_failure(self, name, error):
        self.failures.append(name)
        self.errors.append({"game": name, "error": str(error)})

    @property
    def message(self):
        if self.success:
            return f"{self.succeeded} game(s) {self.operation} successfully"
        return f"Failed to {self.operation.rstrip('d')} games: {', '.join(self.failures)}"

    def as_dict(self):
        return {
            "success": self.success,
            self.operation: self.succeeded,
            "failures": list(self.failures),
            "errors": [dict(entry) for entry in self.errors],
            "message": self.message,
        }


def _division_context(division, repository):
    teams = repository.find_teams_by_division(division.id)
    teams_by_id = {team.id: team for team in teams}
    weeks = generate_week_structure(division, team_count=len(teams))
    return teams_by_id, weeks


def create_game(division_id, data, repository=None):
    """Validate and create a single game."""
    repository = repository or ScheduleRepository()
    division = repository.find_division(division_id)
    teams_by_id, weeks = _division_context(division, repository)

    fields = validate_new_game(division, data, teams_by_id, weeks)
    game = repository.insert_game(**fields)
    logger.info(f"Created game {game.id} '{game.game_name}' in division {division.id}")
    return game


def create_games(division_id, week, week_type, games, repository=None):
    """
    Create the games of one division week.

    The batch as a whole is checked first (size, playoff structure); then each
    game is validated and inserted on its own. Failures are reported by game
    name in the returned BatchResult.
    """
    repository = repository or ScheduleRepository()
    division = repository.find_division(division_id)
    validate_batch(week_type, games)
    teams_by_id, weeks = _division_context(division, repository)

    result = BatchResult(operation="created")
    for idx, game_data in enumerate(games):
        data = dict(normalize_game_data(game_data), week=week, week_type=week_type)
        name = str(data.get("game_name") or "").strip() or f"Game #{idx + 1}"
        try:
            fields = validate_new_game(division, data, teams_by_id, weeks)
            repository.insert_game(**fields)
            result.succeeded += 1
        except SchedulingError as e:
            logger.warning(f"Could not create game '{name}' in division {division.id}: {e}")
            result.add_failure(name, e)

    logger.info(
        f"Created {result.succeeded} of {len(games)} game(s) for division "
        f"{division.id} week {week}"
    )
    return result


def update_game(game_id, patch, repository=None):
    """Validate and apply a partial update; final games raise GameLockedError."""
    repository = repository or ScheduleRepository()
    game = repository.find_game(game_id)
    teams_by_id, weeks = _division_context(game.division, repository)

    clean = validate_game_patch(game, patch, teams_by_id, weeks)
    updated = repository.update_game(game.id, clean)
    logger.info(f"Updated game {game.id} '{updated.game_name}'")
    return updated


def update_games(patches, repository=None):
    """
    Update several games, each on its own.

    Final games are dropped from the set before any write is attempted. The
    remaining updates are independent: failures are collected by game name
    and successful updates stay in place.
    """
    repository = repository or ScheduleRepository()
    result = BatchResult(operation="updated")

    pending = []
    for patch in patches:
        game_id = patch.get("id")
        try:
            game = repository.find_game(game_id)
        except SchedulingError as e:
            result.add_failure(f"Game {game_id}", e)
            continue
        if game.completed:
            logger.debug(f"Skipping final game {game.id} in batch update")
            continue
        pending.append((game, {k: v for k, v in patch.items() if k != "id"}))

    contexts = {}
    for game, changes in pending:
        try:
            if game.division_id not in contexts:
                contexts[game.division_id] = _division_context(game.division, repository)
            teams_by_id, weeks = contexts[game.division_id]
            clean = validate_game_patch(game, changes, teams_by_id, weeks)
            repository.update_game(game.id, clean)
            result.succeeded += 1
        except SchedulingError as e:
            logger.warning(f"Could not update game '{game.game_name}': {e}")
            result.add_failure(game.game_name, e)

    return result


def delete_game(game_id, confirmed, repository=None):
    """Delete a game once the operator has confirmed it."""
    repository = repository or ScheduleRepository()
    game = repository.find_game(game_id)
    validate_delete(game, confirmed)

    repository.delete_game(game.id)
    logger.info(f"Deleted game {game_id} '{game.game_name}' (final: {game.completed})")


def publish_games(game_ids, repository=None):
    """Make games visible to players."""
    repository = repository or ScheduleRepository()
    if not game_ids:
        raise ValidationError("At least one game ID is required")

    published = repository.publish_games(game_ids)
    return {"published": published}


DIVISION_FIELDS = [
    "name",
    "location_id",
    "day",
    "start_time",
    "end_time",
    "start_date",
    "active",
    "register",
    "regular_season_weeks",
    "has_playoffs",
]

BOOKING_FIELDS = {"location_id", "day", "start_time", "end_time"}


def validate_division_data(data, partial=False):
    """Validate division fields and return the ones to save."""
    clean = {key: data[key] for key in DIVISION_FIELDS if key in data}
    errors = []

    if not partial:
        for key in ("name", "location_id", "day"):
            if not clean.get(key):
                errors.append(f"Missing required field: {key}")

    if clean.get("location_id") not in (None, ""):
        try:
            clean["location_id"] = int(clean["location_id"])
        except (ValueError, TypeError):
            errors.append(f"Invalid location ID: {clean['location_id']}")

    if "day" in clean and clean["day"] not in WEEKDAYS:
        errors.append(f"Invalid day: {clean['day']}")

    for key in ("start_time", "end_time"):
        if clean.get(key):
            try:
                parse_time(clean[key])
            except ValidationError as e:
                errors.extend(e.errors)

    if "regular_season_weeks" in clean:
        try:
            weeks = int(clean["regular_season_weeks"])
        except (ValueError, TypeError):
            weeks = 0
        if not 1 <= weeks <= 20:
            errors.append("Regular season weeks must be between 1 and 20")
        else:
            clean["regular_season_weeks"] = weeks

    if errors:
        raise ValidationError(errors)
    return clean


def _booking_warning(division, repository, exclude_division_id=None):
    if not (division.start_time and division.end_time):
        return None
    conflict = check_location_conflict(
        division.location_id,
        division.day,
        division.start_time,
        division.end_time,
        exclude_division_id=exclude_division_id,
        repository=repository,
    )
    return conflict.warning


def create_division(data, repository=None):
    """Create a division; an overlapping booking only produces a warning."""
    repository = repository or ScheduleRepository()
    clean = validate_division_data(data)

    division = repository.save_division(Division(**clean))
    warning = _booking_warning(division, repository, exclude_division_id=division.id)
    return {"division": division, "warning": warning}


def update_division(division_id, data, repository=None):
    """Update a division, re-checking its booking when location, day or times change."""
    repository = repository or ScheduleRepository()
    division = repository.find_division(division_id)
    clean = validate_division_data(data, partial=True)

    booking_changed = any(
        getattr(division, key) != value
        for key, value in clean.items()
        if key in BOOKING_FIELDS
    )
    for key, value in clean.items():
        setattr(division, key, value)
    if booking_changed and division.start_time and division.end_time:
        # A stored legacy time must be corrected before the booking can move
        parse_time(division.start_time)
        parse_time(division.end_time)
    division = repository.save_division(division)

    warning = None
    if booking_changed:
        warning = _booking_warning(division, repository, exclude_division_id=division.id)
    return {"division": division, "warning": warning}
