from django.apps import AppConfig


class OperationsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.operations'
    label = 'operations'
    verbose_name = 'Farm operations'

    def ready(self):
        from . import signals  # noqa: F401
