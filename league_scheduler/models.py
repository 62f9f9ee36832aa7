from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


WEEKDAYS = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]


class WeekType(models.TextChoices):
    REGULAR = "REGULAR", "Regular season"
    QUARTERFINAL = "QUARTERFINAL", "Quarterfinals"
    SEMIFINAL = "SEMIFINAL", "Semifinals"
    FINAL = "FINAL", "Finals"


class GameState(models.TextChoices):
    SCHEDULED = "SCHEDULED", "Scheduled"
    LIVE = "LIVE", "Live"
    FINAL = "FINAL", "Final"


class Location(models.Model):
    """A facility shared by one or more divisions."""

    name = models.CharField(max_length=100)
    address = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class DivisionManager(models.Manager):
    """Custom manager with the overview filter used by dashboards."""

    def running(self):
        """Divisions that are active or have registration open."""
        return self.get_queryset().filter(models.Q(active=True) | models.Q(register=True))


class Division(models.Model):
    """A cohort of teams sharing a weekly time slot at one location for a season."""

    name = models.CharField(max_length=100)
    location = models.ForeignKey(Location, related_name="divisions", on_delete=models.PROTECT)
    day = models.CharField(
        max_length=9,
        choices=[(day, day) for day in WEEKDAYS],
        help_text="Weekday the division plays on",
    )
    start_time = models.CharField(
        max_length=8, blank=True, default="", help_text="e.g., 19:00 or 7:00 PM"
    )
    end_time = models.CharField(max_length=8, blank=True, default="")
    start_date = models.DateField(null=True, blank=True)
    active = models.BooleanField(default=False)
    register = models.BooleanField(
        default=False, help_text="Whether registration is currently open"
    )
    regular_season_weeks = models.PositiveIntegerField(
        default=7,
        validators=[MinValueValidator(1), MaxValueValidator(20)],
        help_text="Number of regular season weeks before the playoffs",
    )
    has_playoffs = models.BooleanField(
        default=True,
        help_text="Playoff rounds follow the regular season (bracket size depends on team count)",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = DivisionManager()

    class Meta:
        ordering = ["location", "name"]

    def __str__(self):
        return f"{self.name} ({self.day} {self.time_range})"

    @property
    def team_count(self):
        return self.teams.count()

    @property
    def time_range(self):
        return f"{self.start_time} - {self.end_time}"

    @property
    def lifecycle_state(self):
        """Derive the lifecycle state from the independent active/register flags."""
        if self.active:
            return "active-open" if self.register else "active-closed"
        return "registration-only" if self.register else "finished"


class Team(models.Model):
    """A team playing in a division."""

    division = models.ForeignKey(Division, related_name="teams", on_delete=models.CASCADE)
    name = models.CharField(max_length=100)
    short_name = models.CharField(max_length=50, blank=True, default="")
    code = models.CharField(max_length=10, blank=True, default="")

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class Game(models.Model):
    """Represents a single game scheduled within a division's season."""

    division = models.ForeignKey(Division, related_name="games", on_delete=models.CASCADE)
    game_name = models.CharField(max_length=100)
    date = models.DateTimeField(help_text="Game date combined with its time of day")
    time = models.TimeField()
    home_team = models.ForeignKey(Team, related_name="home_games", on_delete=models.PROTECT)
    away_team = models.ForeignKey(Team, related_name="away_games", on_delete=models.PROTECT)
    home_score = models.PositiveIntegerField(default=0)
    away_score = models.PositiveIntegerField(default=0)
    published = models.BooleanField(default=True)
    # Exposed as "status" on the wire: true means the result is final
    completed = models.BooleanField(default=False)
    started = models.BooleanField(default=False)
    week = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    week_type = models.CharField(
        max_length=12, choices=WeekType.choices, default=WeekType.REGULAR
    )
    is_playoff_game = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["week", "date", "time"]
        indexes = [
            models.Index(fields=["division", "week"]),
            models.Index(fields=["division", "week_type"]),
        ]

    def __str__(self):
        return f"Week {self.week}: {self.game_name} ({self.home_team} vs {self.away_team})"

    @property
    def state(self):
        if self.completed:
            return GameState.FINAL
        if self.started:
            return GameState.LIVE
        return GameState.SCHEDULED
