from django.apps import AppConfig


class GmbConfig(AppConfig):
    name = 'apps.gmb'
    verbose_name = 'Google My Business'
