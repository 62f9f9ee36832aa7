"""
Scheduling configuration.

Defaults live here; a project overrides any of them through the
``LEAGUE_SCHEDULER`` dict in its Django settings.
"""

from django.conf import settings


DEFAULTS = {
    "DEFAULT_REGULAR_SEASON_WEEKS": 7,
    "MAX_REGULAR_SEASON_WEEKS": 20,
    # First matching rule wins, so keep rules sorted by min_teams descending
    "PLAYOFF_BRACKETS": [
        {"min_teams": 9, "rounds": ["QUARTERFINAL", "SEMIFINAL", "FINAL"]},
        {"min_teams": 4, "rounds": ["SEMIFINAL", "FINAL"]},
        {"min_teams": 2, "rounds": ["FINAL"]},
    ],
    "MAX_GAMES_PER_BATCH": 20,
    "ENFORCE_PLAYOFF_GAME_COUNTS": True,
    "PLAYOFF_GAME_COUNTS": {
        "QUARTERFINAL": 4,
        "SEMIFINAL": 2,
        "FINAL": 1,
    },
}


def get_setting(name):
    """Return a scheduler setting, falling back to the built-in default."""
    overrides = getattr(settings, "LEAGUE_SCHEDULER", {})
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
