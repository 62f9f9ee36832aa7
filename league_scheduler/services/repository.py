"""
Persistence collaborator for the scheduling services.

All reads and writes of divisions and games go through ScheduleRepository so
the engine never touches the ORM directly. Missing ids raise NotFoundError and
database failures are re-raised unchanged as InfrastructureError. Ids that
are not valid primary keys are treated as missing.
"""

import logging
from functools import wraps
from django.db import DatabaseError
from django.utils import timezone
from league_scheduler.exceptions import InfrastructureError, NotFoundError, ValidationError
from league_scheduler.models import Division, Game, Team

logger = logging.getLogger(__name__)


def _passthrough_db_errors(method):
    @wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except DatabaseError as e:
            logger.exception(f"Database error in {method.__name__}")
            raise InfrastructureError(str(e)) from e
    return wrapper


class ScheduleRepository:
    """Django ORM implementation of the scheduling persistence interface."""

    @_passthrough_db_errors
    def find_division(self, division_id):
        try:
            return Division.objects.select_related("location").get(pk=division_id)
        except (Division.DoesNotExist, ValueError, TypeError):
            raise NotFoundError("Division", division_id)

    @_passthrough_db_errors
    def find_game(self, game_id):
        try:
            return Game.objects.select_related(
                "division", "home_team", "away_team"
            ).get(pk=game_id)
        except (Game.DoesNotExist, ValueError, TypeError):
            raise NotFoundError("Game", game_id)

    @_passthrough_db_errors
    def find_teams_by_division(self, division_id):
        return list(Team.objects.filter(division_id=division_id).order_by("name", "id"))

    @_passthrough_db_errors
    def find_games_by_division(self, division_id):
        return list(
            Game.objects.filter(division_id=division_id)
            .select_related("home_team", "away_team")
            .order_by("week", "date", "time", "id")
        )

    @_passthrough_db_errors
    def find_games_by_division_and_week(self, division_id, week):
        return list(
            Game.objects.filter(division_id=division_id, week=week)
            .select_related("home_team", "away_team")
            .order_by("date", "time", "id")
        )

    @_passthrough_db_errors
    def find_divisions_by_location_day(self, location_id, day, exclude_division_id=None):
        """Divisions booked at a location on a weekday with both times set."""
        queryset = (
            Division.objects.filter(location_id=location_id, day=day)
            .exclude(start_time="")
            .exclude(end_time="")
        )
        if exclude_division_id is not None:
            queryset = queryset.exclude(pk=exclude_division_id)
        return list(queryset.order_by("id"))

    @_passthrough_db_errors
    def list_divisions_by_location(self, location_id=None):
        """Running divisions (active or registering), optionally for one location."""
        queryset = Division.objects.running().select_related("location")
        if location_id is not None:
            queryset = queryset.filter(location_id=location_id)
        return list(queryset.order_by("location__name", "name"))

    @_passthrough_db_errors
    def insert_game(self, **fields):
        return Game.objects.create(**fields)

    @_passthrough_db_errors
    def update_game(self, game_id, patch):
        patch = dict(patch, updated_at=timezone.now())
        updated = Game.objects.filter(pk=game_id).update(**patch)
        if not updated:
            raise NotFoundError("Game", game_id)
        return self.find_game(game_id)

    @_passthrough_db_errors
    def delete_game(self, game_id):
        deleted, _ = Game.objects.filter(pk=game_id).delete()
        if not deleted:
            raise NotFoundError("Game", game_id)

    @_passthrough_db_errors
    def publish_games(self, game_ids):
        try:
            return Game.objects.filter(pk__in=game_ids).update(published=True)
        except (ValueError, TypeError):
            raise ValidationError(f"Invalid game IDs: {game_ids}")

    @_passthrough_db_errors
    def save_division(self, division):
        division.save()
        return division
