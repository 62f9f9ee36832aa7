"""
Game mutation validation.

This module checks game create/update/delete requests against the season
rules before anything reaches the repository:

- a game always has a name, a date, a time, two different teams from its
  division, and a week whose type matches the division's week structure
- a final game (``completed``) is locked against the general edit path
- every create and update publishes the game
- deleting a game needs an explicit confirmation
"""

import re
from datetime import date, datetime, time
from django.conf import settings
from django.utils import timezone
from league_scheduler.conf import get_setting
from league_scheduler.exceptions import (
    ConfirmationRequiredError,
    GameLockedError,
    ValidationError,
)
from league_scheduler.models import Team, WeekType

GAME_TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")

# Wire names used by clients mapped onto model field names
FIELD_ALIASES = {
    "gameName": "game_name",
    "homeTeam": "home_team",
    "awayTeam": "away_team",
    "homeTeamScore": "home_score",
    "awayTeamScore": "away_score",
    "homeScore": "home_score",
    "awayScore": "away_score",
    "status": "completed",
    "weekType": "week_type",
}

GAME_FIELDS = {
    "game_name",
    "date",
    "time",
    "home_team",
    "away_team",
    "home_score",
    "away_score",
    "completed",
    "started",
    "published",
    "week",
    "week_type",
}


def normalize_game_data(data):
    """
    Normalize game data to model field names.

    Accepts both the wire names (``homeTeam``, ``status``, ...) and the model
    names; anything else is dropped.
    """
    normalized = {}
    for key, value in (data or {}).items():
        field = FIELD_ALIASES.get(key, key)
        if field in GAME_FIELDS:
            normalized[field] = value
    return normalized


def combine_date_and_time(game_date, game_time):
    """Build one timestamp from a calendar date and a separate time of day."""
    combined = datetime(
        game_date.year, game_date.month, game_date.day, game_time.hour, game_time.minute
    )
    if settings.USE_TZ:
        return timezone.make_aware(combined)
    return combined


def local_date(value):
    """Calendar date of a stored game timestamp, in local time."""
    if timezone.is_aware(value):
        return timezone.localtime(value).date()
    return value.date()


def parse_game_date(value, errors):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value)).date()
    except (ValueError, TypeError):
        errors.append(f"Invalid date format: {value}")
        return None


def parse_game_time(value, errors):
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    match = GAME_TIME_PATTERN.match(str(value or "").strip())
    if not match:
        errors.append(f"Time must be in HH:MM format (24-hour): {value}")
        return None
    return time(int(match.group(1)), int(match.group(2)))


def parse_score(value, label, errors):
    if isinstance(value, bool):
        errors.append(f"Invalid {label}: {value}")
        return None
    try:
        score = int(str(value))
    except (ValueError, TypeError):
        errors.append(f"Invalid {label}: {value}")
        return None
    if score < 0:
        errors.append(f"{label} cannot be negative")
        return None
    return score


def resolve_team(value, teams_by_id, label, errors):
    """Resolve a team reference (instance or id) against the division's teams."""
    if value in (None, ""):
        errors.append(f"{label} is required")
        return None

    team_id = value.id if isinstance(value, Team) else value
    try:
        team = teams_by_id.get(int(team_id))
    except (ValueError, TypeError):
        team = None
    if team is None:
        errors.append(f"{label} {team_id} is not a team of this division")
    return team


def validate_game_name(value, errors):
    name = str(value or "").strip()
    if len(name) < 2:
        errors.append("Game name must be at least 2 characters")
        return None
    if len(name) > 100:
        errors.append("Game name must not exceed 100 characters")
        return None
    return name


def validate_week(week, week_type, weeks, errors):
    """Check a week number and type against the division's week structure."""
    try:
        week = int(week)
    except (ValueError, TypeError):
        errors.append(f"Invalid week number: {week}")
        return None, None

    if week_type not in WeekType.values:
        errors.append(f"Invalid week type: {week_type}")
        return week, None

    planned = {info.week_number: info.week_type for info in weeks}
    if week not in planned:
        errors.append(f"Week {week} is outside the division's season")
    elif planned[week] != week_type:
        errors.append(f"Week {week} is a {planned[week]} week, not {week_type}")

    return week, WeekType(week_type)


def validate_new_game(division, data, teams_by_id, weeks):
    """
    Validate a new game for a division and return its model fields.

    Raises ValidationError listing every problem found.
    """
    game_data = normalize_game_data(data)
    errors = []

    game_name = validate_game_name(game_data.get("game_name"), errors)

    game_date = game_time = None
    if game_data.get("date") in (None, ""):
        errors.append("Game date is required")
    else:
        game_date = parse_game_date(game_data["date"], errors)
    if game_data.get("time") in (None, ""):
        errors.append("Game time is required")
    else:
        game_time = parse_game_time(game_data["time"], errors)

    home_team = resolve_team(game_data.get("home_team"), teams_by_id, "Home team", errors)
    away_team = resolve_team(game_data.get("away_team"), teams_by_id, "Away team", errors)
    if home_team and away_team and home_team.id == away_team.id:
        errors.append("Home team and away team cannot be the same")

    week = week_type = None
    if game_data.get("week") in (None, "") or not game_data.get("week_type"):
        errors.append("Week and week type are required")
    else:
        week, week_type = validate_week(
            game_data["week"], game_data["week_type"], weeks, errors
        )

    if errors:
        raise ValidationError(errors)

    return {
        "division": division,
        "game_name": game_name,
        "date": combine_date_and_time(game_date, game_time),
        "time": game_time,
        "home_team": home_team,
        "away_team": away_team,
        "home_score": 0,
        "away_score": 0,
        "completed": False,
        "started": False,
        "published": True,
        "week": week,
        "week_type": week_type,
        "is_playoff_game": week_type != WeekType.REGULAR,
    }


def validate_game_patch(game, patch, teams_by_id, weeks):
    """
    Validate a partial update of a game and return the fields to write.

    A final game cannot be edited here at all, whatever the patch contains;
    results of final games go through the result-entry flow instead.
    """
    if game.completed:
        raise GameLockedError(game)

    game_data = normalize_game_data(patch)
    errors = []
    clean = {}

    if "game_name" in game_data:
        clean["game_name"] = validate_game_name(game_data["game_name"], errors)

    if "date" in game_data or "time" in game_data:
        # Recombine with whichever half the patch leaves unchanged
        game_date = (
            parse_game_date(game_data["date"], errors)
            if "date" in game_data
            else local_date(game.date)
        )
        game_time = (
            parse_game_time(game_data["time"], errors)
            if "time" in game_data
            else game.time
        )
        if game_date and game_time:
            clean["date"] = combine_date_and_time(game_date, game_time)
            clean["time"] = game_time

    home_team = game.home_team
    away_team = game.away_team
    if "home_team" in game_data:
        home_team = resolve_team(game_data["home_team"], teams_by_id, "Home team", errors)
        clean["home_team"] = home_team
    if "away_team" in game_data:
        away_team = resolve_team(game_data["away_team"], teams_by_id, "Away team", errors)
        clean["away_team"] = away_team
    if home_team and away_team and home_team.id == away_team.id:
        errors.append("Home team and away team cannot be the same")

    for field, label in (("home_score", "home score"), ("away_score", "away score")):
        if field in game_data:
            clean[field] = parse_score(game_data[field], label, errors)

    for field in ("completed", "started"):
        if field in game_data:
            if not isinstance(game_data[field], bool):
                errors.append(f"{field} must be true or false")
            else:
                clean[field] = game_data[field]

    if "week" in game_data or "week_type" in game_data:
        week, week_type = validate_week(
            game_data.get("week", game.week),
            game_data.get("week_type", game.week_type),
            weeks,
            errors,
        )
        clean["week"] = week
        clean["week_type"] = week_type
        clean["is_playoff_game"] = week_type != WeekType.REGULAR

    if errors:
        raise ValidationError(errors)

    # No draft state through this path
    clean["published"] = True
    return clean


def validate_delete(game, confirmed):
    """Accept a delete only with an explicit confirmation flag."""
    if confirmed is not True:
        raise ConfirmationRequiredError(
            f"Deleting game '{game.game_name}' must be confirmed"
        )


def validate_batch(week_type, games):
    """Check a batch of games for one week before any of them is written."""
    if not games:
        raise ValidationError("At least one game is required")

    max_games = get_setting("MAX_GAMES_PER_BATCH")
    if len(games) > max_games:
        raise ValidationError(f"Cannot create more than {max_games} games at once")

    if week_type not in WeekType.values:
        raise ValidationError(f"Invalid week type: {week_type}")

    validate_playoff_structure(week_type, len(games))


def validate_playoff_structure(week_type, game_count):
    """Playoff rounds need exactly the number of games their bracket implies."""
    if week_type == WeekType.REGULAR or not get_setting("ENFORCE_PLAYOFF_GAME_COUNTS"):
        return

    expected = get_setting("PLAYOFF_GAME_COUNTS").get(week_type)
    if expected and game_count != expected:
        raise ValidationError(
            f"{week_type} should have exactly {expected} game(s), but {game_count} provided"
        )
