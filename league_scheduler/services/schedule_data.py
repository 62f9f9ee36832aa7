"""
Schedule data retrieval service functions.

This module builds the read models consumed by dashboards: a division's full
week-by-week schedule and the multi-division overview grouped by location.
Each division's games are loaded once and every derived value (current week,
completion, progress) is computed from that snapshot.
"""

from django.utils import timezone
from league_scheduler.services.game_operations import local_date
from league_scheduler.services.repository import ScheduleRepository
from league_scheduler.services.team_load import count_games_per_team
from league_scheduler.services.weeks import (
    find_current_week,
    generate_week_structure,
    get_week_status,
    group_games_by_week,
    is_week_complete,
)


def format_team(team):
    return {
        "id": team.id,
        "name": team.name,
        "code": team.code,
        "short_name": team.short_name,
    }


def format_game(game):
    """Format a game for the read model, keeping the legacy "status" name."""
    return {
        "id": game.id,
        "game_name": game.game_name,
        "date": local_date(game.date).isoformat(),
        "time": game.time.strftime("%H:%M"),
        "home_team": {
            "id": game.home_team.id,
            "name": game.home_team.name,
            "code": game.home_team.code,
        },
        "away_team": {
            "id": game.away_team.id,
            "name": game.away_team.name,
            "code": game.away_team.code,
        },
        "home_score": game.home_score,
        "away_score": game.away_score,
        "published": game.published,
        "completed": game.completed,
        "status": game.completed,
        "started": game.started,
        "state": game.state.value,
        "week": game.week,
        "week_type": game.week_type,
    }


def format_division(division, team_count):
    location = division.location
    return {
        "id": division.id,
        "name": division.name,
        "location": {
            "id": location.id,
            "name": location.name,
            "address": location.address,
        },
        "day": division.day,
        "time_range": division.time_range,
        "start_date": division.start_date.isoformat() if division.start_date else None,
        "team_count": team_count,
        "lifecycle_state": division.lifecycle_state,
    }


def get_progress_status(scheduled_weeks, total_weeks):
    if scheduled_weeks == 0:
        return "not-started"
    if scheduled_weeks < total_weeks:
        return "in-progress"
    return "complete"


def get_percentage(scheduled_weeks, total_weeks):
    if not total_weeks:
        return 0
    return round(scheduled_weeks / total_weeks * 100)


def find_next_game(games):
    """Earliest game that is not final yet, by date then time."""
    pending = [game for game in games if not game.completed]
    if not pending:
        return None
    return min(pending, key=lambda game: (game.date, game.time))


def get_division_schedule(division_id, repository=None):
    """Get a division's schedule with its weeks, games and current week."""
    repository = repository or ScheduleRepository()
    division = repository.find_division(division_id)
    teams = repository.find_teams_by_division(division.id)
    games = repository.find_games_by_division(division.id)

    weeks = generate_week_structure(division, team_count=len(teams))
    games_by_week = group_games_by_week(games)
    current_week = find_current_week(weeks, games_by_week)

    week_schedules = []
    for week in weeks:
        week_games = games_by_week.get(week.week_number, [])
        week_schedules.append(
            {
                "week_number": week.week_number,
                "week_type": week.week_type.value,
                "label": week.label,
                "date": week.date.isoformat() if week.date else None,
                "is_regular": week.is_regular,
                "is_playoff": week.is_playoff,
                "games": [format_game(game) for game in week_games],
                "is_complete": is_week_complete(week_games),
                "is_current": week.week_number == current_week,
                "status": get_week_status(week_games),
            }
        )

    counts = count_games_per_team(games_by_week.get(current_week, []))

    return {
        "division": format_division(division, len(teams)),
        "teams": [format_team(team) for team in teams],
        "weeks": week_schedules,
        "current_week": current_week,
        "total_weeks": len(weeks),
        "team_counts": {team.id: counts.get(team.id, 0) for team in teams},
    }


def get_division_status(division, repository):
    """Compute the overview entry of a single division."""
    teams = repository.find_teams_by_division(division.id)
    games = repository.find_games_by_division(division.id)

    weeks = generate_week_structure(division, team_count=len(teams))
    games_by_week = group_games_by_week(games)
    total_weeks = len(weeks)
    scheduled_weeks = len(
        [week for week in weeks if games_by_week.get(week.week_number)]
    )

    next_game = find_next_game(games)

    return {
        "division_id": division.id,
        "division_name": division.name,
        "location": {
            "id": division.location.id,
            "name": division.location.name,
            "address": division.location.address,
        },
        "day": division.day,
        "time_range": division.time_range,
        "lifecycle_state": division.lifecycle_state,
        "team_count": len(teams),
        "total_weeks": total_weeks,
        "scheduled_weeks": scheduled_weeks,
        "percentage": get_percentage(scheduled_weeks, total_weeks),
        "current_week": find_current_week(weeks, games_by_week),
        "status": get_progress_status(scheduled_weeks, total_weeks),
        "next_game": (
            {
                "id": next_game.id,
                "game_name": next_game.game_name,
                "home_team": next_game.home_team.code or next_game.home_team.name,
                "away_team": next_game.away_team.code or next_game.away_team.name,
                "week": next_game.week,
                "date": local_date(next_game.date).isoformat(),
                "time": next_game.time.strftime("%H:%M"),
            }
            if next_game
            else None
        ),
    }


def get_schedule_overview(location_id=None, repository=None):
    """Get scheduling progress for all running divisions, grouped by location."""
    repository = repository or ScheduleRepository()
    divisions = repository.list_divisions_by_location(location_id)

    statuses = [get_division_status(division, repository) for division in divisions]

    locations = {}
    for status in statuses:
        location = status["location"]
        locations.setdefault(location["id"], {"location": location, "divisions": []})
        locations[location["id"]]["divisions"].append(status)

    return {
        "locations": list(locations.values()),
        "stats": {
            "total_divisions": len(statuses),
            "need_attention": len([s for s in statuses if s["status"] == "in-progress"]),
            "fully_scheduled": len([s for s in statuses if s["status"] == "complete"]),
            "total_teams": sum(s["team_count"] for s in statuses),
        },
        "generated_at": timezone.now().isoformat(),
    }


def get_schedule_progress(division_id, repository=None):
    """Get how many of a division's weeks already have games."""
    repository = repository or ScheduleRepository()
    division = repository.find_division(division_id)
    status = get_division_status(division, repository)
    return {
        "scheduled_weeks": status["scheduled_weeks"],
        "total_weeks": status["total_weeks"],
        "percentage": status["percentage"],
    }
