"""
Work Structures App Configuration
"""

from django.apps import AppConfig


class WorkStructuresConfig(AppConfig):
    """Configuration for the Work Structures app (departments, job titles)"""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'HR.work_structures'
    label = 'work_structures'
    verbose_name = 'Work Structures'
