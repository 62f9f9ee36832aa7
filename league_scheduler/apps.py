from django.apps import AppConfig


class LeagueSchedulerConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "league_scheduler"
    verbose_name = "League Scheduler"
