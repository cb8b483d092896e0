from django.apps import AppConfig


class BackendApiConfig(AppConfig):
    name = 'apps.backend_api'
    verbose_name = 'Backend REST API client'
