from django.contrib.auth import get_user_model
from django.core.management import call_command
from core.access_control.models import Permission, Role
from core.access_control.catalog import CoreRoles
import io

DEFAULT_PASSWORD = 'Testpass123!'


def setup_core_data():
    """Initialize core system data for tests once and suppressing print output"""
    # Check if already setup in this transaction to minimize calls
    if Role.objects.filter(code=CoreRoles.SUPER_ADMIN).exists():
        return

    # Suppress output using a dummy buffer
    buffer = io.StringIO()
    call_command('init_core_data', verbosity=0, stdout=buffer)


def create_user(email, name_en=None, password=DEFAULT_PASSWORD, role=None, permissions=(), **extra):
    """User with an optional role and direct "module:action" grants"""
    setup_core_data()
    user = get_user_model().objects.create_user(
        email=email,
        name_en=name_en or email.split('@')[0].title(),
        password=password,
        role=role,
        **extra
    )
    if permissions:
        user.direct_permissions.set(Permission.objects.filter(code__in=list(permissions)))
    return user


def create_role(name_en, permissions=(), **extra):
    """Role granting the given "module:action" ids"""
    setup_core_data()
    role = Role.objects.create(name_en=name_en, **extra)
    role.permissions.set(Permission.objects.filter(code__in=list(permissions)))
    return role


def setup_admin_permissions(user):
    """Helper to grant the super-admin role to a user"""
    setup_core_data()
    user.role = Role.objects.get(code=CoreRoles.SUPER_ADMIN)
    user.save(update_fields=['role'])
    return user
