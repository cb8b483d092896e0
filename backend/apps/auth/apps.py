from django.apps import AppConfig


class DashboardAuthConfig(AppConfig):
    name = 'apps.auth'
    label = 'dashboard_auth'
    verbose_name = 'Session Authentication'
