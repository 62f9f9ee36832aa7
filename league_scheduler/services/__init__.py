"""
League scheduler services module.

This module provides the scheduling engine's service functions, kept apart
from persistence (repository) and from any transport layer.
"""

# Week structure
from .weeks import (
    WeekInfo,
    generate_week_structure,
    get_total_weeks,
    get_playoff_rounds,
    find_current_week,
    is_week_complete,
)

# Location conflicts
from .conflicts import (
    ConflictResult,
    check_location_conflict,
    find_schedule_conflicts,
)

# Team load
from .team_load import (
    count_games_per_team,
    get_team_counts_for_week,
    get_team_schedule_counts,
    find_double_booked_teams,
)

# Game and division mutations
from .schedules import (
    BatchResult,
    create_game,
    create_games,
    update_game,
    update_games,
    delete_game,
    publish_games,
    create_division,
    update_division,
)

# Schedule read models
from .schedule_data import (
    get_division_schedule,
    get_schedule_overview,
    get_schedule_progress,
)

__all__ = [
    # Week structure
    "WeekInfo",
    "generate_week_structure",
    "get_total_weeks",
    "get_playoff_rounds",
    "find_current_week",
    "is_week_complete",

    # Location conflicts
    "ConflictResult",
    "check_location_conflict",
    "find_schedule_conflicts",

    # Team load
    "count_games_per_team",
    "get_team_counts_for_week",
    "get_team_schedule_counts",
    "find_double_booked_teams",

    # Game and division mutations
    "BatchResult",
    "create_game",
    "create_games",
    "update_game",
    "update_games",
    "delete_game",
    "publish_games",
    "create_division",
    "update_division",

    # Schedule read models
    "get_division_schedule",
    "get_schedule_overview",
    "get_schedule_progress",
]
