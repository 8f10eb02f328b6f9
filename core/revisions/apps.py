from django.apps import AppConfig


class RevisionsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'core.revisions'
    label = 'revisions'
    verbose_name = 'Revision History'
