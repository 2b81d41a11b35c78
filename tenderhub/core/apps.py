from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'tenderhub.core'

    def ready(self):
        from .cache_signals import connect_report_signals
        connect_report_signals()
