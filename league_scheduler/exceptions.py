"""
Domain errors raised by the scheduling services.

Batch failures and location conflicts are not errors: they are reported
through ``BatchResult`` and ``ConflictResult`` respectively.
"""


class SchedulingError(Exception):
    """Base class for every error raised by the scheduling services."""


class ValidationError(SchedulingError):
    """Missing or malformed fields, rejected before any write."""

    def __init__(self, errors):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class GameLockedError(SchedulingError):
    """A completed game was edited through the general update path."""

    def __init__(self, game):
        self.game = game
        super().__init__(
            f"Game '{game.game_name}' is final and can no longer be edited"
        )


class NotFoundError(SchedulingError):
    def __init__(self, kind, pk):
        self.kind = kind
        self.pk = pk
        super().__init__(f"{kind} not found: {pk}")


class ConfirmationRequiredError(SchedulingError):
    """A delete was requested without ``confirmed=True``."""


class InfrastructureError(SchedulingError):
    """A persistence failure, passed through unchanged and never retried."""
