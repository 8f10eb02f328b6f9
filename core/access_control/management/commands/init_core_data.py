"""
Initialize Core System Data

This management command populates the database with core system data:
- Permissions (every (module, action) pair in the catalog)
- System roles (super-admin with every permission)

Usage:
    python manage.py init_core_data

This is idempotent - safe to run multiple times. Labels of existing
permissions are refreshed from the catalog.
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from core.access_control.catalog import ALL_PERMISSIONS, CORE_ROLES, permission_label
from core.access_control.models import Permission, Role


class Command(BaseCommand):
    help = 'Initialize core system data (permissions, system roles)'

    def handle(self, *args, **options):
        self.stdout.write('Starting core data initialization...\n')

        with transaction.atomic():
            # 1. Permissions
            self.stdout.write('Creating permissions...')
            permissions_created = 0
            for key in ALL_PERMISSIONS:
                _, created = Permission.objects.update_or_create(
                    code=key.id,
                    defaults={
                        'module': key.module.value,
                        'action': key.action.value,
                        'name_en': permission_label(key, 'en'),
                        'name_ar': permission_label(key, 'ar'),
                    }
                )
                if created:
                    permissions_created += 1
                    self.stdout.write(f"  ✓ Created permission: {key.id}")

            self.stdout.write(self.style.SUCCESS(
                f"\n✓ Permissions: {permissions_created} created, "
                f"{len(ALL_PERMISSIONS) - permissions_created} already existed\n"
            ))

            # 2. System roles
            self.stdout.write('Creating system roles...')
            roles_created = 0
            for role_data in CORE_ROLES:
                role, created = Role.objects.get_or_create(
                    code=role_data['code'],
                    defaults={
                        'name_en': role_data['name_en'],
                        'name_ar': role_data['name_ar'],
                        'description_en': role_data['description_en'],
                        'description_ar': role_data['description_ar'],
                        'is_super_admin': role_data.get('is_super_admin', False),
                        'has_full_access': role_data.get('is_super_admin', False),
                    }
                )
                if created:
                    roles_created += 1
                    self.stdout.write(f"  ✓ Created role: {role.code}")
                else:
                    self.stdout.write(f"  - Role already exists: {role.code}")

                if role_data['permissions'] == 'ALL':
                    role.permissions.set(Permission.objects.all())
                else:
                    role.permissions.set(Permission.objects.filter(code__in=role_data['permissions']))

            self.stdout.write(self.style.SUCCESS(
                f"\n✓ Roles: {roles_created} created, {len(CORE_ROLES) - roles_created} already existed\n"
            ))

        self.stdout.write(self.style.SUCCESS('✅ Core data initialization complete'))
