"""
Team load service functions.

Counts how many games each team has in a week. The counts are reported to
the caller only; whether a team playing twice in one week should be blocked
is left to the caller.
"""

from collections import Counter
from league_scheduler.services.repository import ScheduleRepository


def count_games_per_team(games):
    """Count one appearance per game for the home and the away team."""
    counts = Counter()
    for game in games:
        counts[game.home_team_id] += 1
        counts[game.away_team_id] += 1
    return dict(counts)


def find_double_booked_teams(counts):
    return sorted(team_id for team_id, count in counts.items() if count > 1)


def get_team_counts_for_week(division_id, week, repository=None):
    """Map every team of the division to its number of games in the week."""
    repository = repository or ScheduleRepository()
    repository.find_division(division_id)

    teams = repository.find_teams_by_division(division_id)
    counts = count_games_per_team(
        repository.find_games_by_division_and_week(division_id, week)
    )
    return {team.id: counts.get(team.id, 0) for team in teams}


def get_team_schedule_counts(division_id, week, repository=None):
    """Get per-team game counts for a week, formatted for the dashboard widget."""
    repository = repository or ScheduleRepository()
    repository.find_division(division_id)

    teams = repository.find_teams_by_division(division_id)
    counts = count_games_per_team(
        repository.find_games_by_division_and_week(division_id, week)
    )
    return [
        {
            "team_id": team.id,
            "team_code": team.code,
            "team_name": team.name,
            "game_count": counts.get(team.id, 0),
        }
        for team in teams
    ]
