from django.apps import AppConfig


class PlannerConfig(AppConfig):
    name = 'apps.planner'
    verbose_name = 'Calendar and Day Planner'
