"""
URL configuration for console_project.

Every path here must have a rule in ``core.access_control.gate`` (or be in its
public allowlist); ``core/access_control/tests/test_gate_sync.py`` enforces it.
"""
from django.urls import path, include

urlpatterns = [
    # Authentication endpoints (login, logout, me, tokens)
    path('auth/', include('core.user_accounts.auth_urls')),

    # Permission catalog and roles
    path('permissions/', include('core.access_control.permission_urls')),
    path('roles/', include('core.access_control.urls')),

    # User management
    path('users/', include('core.user_accounts.urls')),

    # Work structures
    path('departments/', include('HR.work_structures.department_urls')),
    path('job-titles/', include('HR.work_structures.job_title_urls')),
]
