"""
User Account Models
Handles user authentication and the data the permission evaluator reads.
"""
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager
from django.db import models
from django.core.exceptions import ValidationError


class CustomUserManager(BaseUserManager):
    """
    Custom user manager for CustomUser model.
    """

    def create_user(self, email, name_en, password=None, **extra_fields):
        """
        Create and save a user.

        Args:
            email: User's email address (used for authentication)
            name_en: User's name in English
            password: User's password (will be hashed)
            **extra_fields: Additional fields (name_ar, phone, role, has_full_access, ...)

        Returns:
            CustomUser: The created user instance
        """
        if not email:
            raise ValueError('Email is required')
        if not name_en:
            raise ValueError('Name is required')

        email = self.normalize_email(email)
        extra_fields.setdefault('username', email.split('@')[0])

        user = self.model(email=email, name_en=name_en, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, name_en, password=None, **extra_fields):
        """
        Create a user with full access.
        Required by Django for the createsuperuser management command.
        """
        extra_fields['has_full_access'] = True
        return self.create_user(email=email, name_en=name_en, password=password, **extra_fields)


class CustomUser(AbstractBaseUser):
    """Console user with email authentication"""
    email = models.EmailField(unique=True, db_index=True)
    username = models.CharField(max_length=150, blank=True, default='')
    name_en = models.CharField(max_length=255)
    name_ar = models.CharField(max_length=255, blank=True, default='')
    phone = models.CharField(max_length=20, blank=True, default='')
    is_active = models.BooleanField(default=True)
    has_full_access = models.BooleanField(
        default=False,
        help_text="Every permission is implicitly granted"
    )

    # Relationships
    role = models.ForeignKey(
        'access_control.Role',
        on_delete=models.PROTECT,
        related_name='users',
        null=True,
        blank=True,
        help_text="Role determines module permissions"
    )
    direct_permissions = models.ManyToManyField(
        'access_control.Permission',
        blank=True,
        related_name='users',
        help_text="Per-user grants on top of the role"
    )
    department = models.ForeignKey(
        'work_structures.Department',
        on_delete=models.SET_NULL,
        related_name='users',
        null=True,
        blank=True
    )
    job_title = models.ForeignKey(
        'work_structures.JobTitle',
        on_delete=models.SET_NULL,
        related_name='users',
        null=True,
        blank=True
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Manager
    objects = CustomUserManager()

    # Django authentication settings
    USERNAME_FIELD = 'email'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS = ['name_en']

    class Meta:
        db_table = 'custom_users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        ordering = ['name_en']

    def __str__(self):
        return f"{self.name_en} ({self.email})"

    def direct_permission_ids(self):
        return sorted(self.direct_permissions.values_list('code', flat=True))

    def to_actor_payload(self):
        """
        The ``me`` payload: what the evaluator needs to know about this user.

        Direct grants are flattened "module:action" ids; the role is embedded
        with its own permission ids so it resolves without another lookup.
        """
        role = self.role
        return {
            'id': self.pk,
            'email': self.email,
            'username': self.username,
            'name_en': self.name_en,
            'name_ar': self.name_ar,
            'is_active': self.is_active,
            'has_full_access': self.has_full_access,
            'role': None if role is None else {
                'id': role.pk,
                'name_en': role.name_en,
                'name_ar': role.name_ar,
                'is_active': role.is_active,
                'is_super_admin': role.is_super_admin,
                'has_full_access': role.has_full_access,
                'permissions': role.permission_ids(),
            },
            'permissions': self.direct_permission_ids(),
        }

    def delete(self, *args, **kwargs):
        """
        Prevent deletion of the last active full-access user.
        """
        if self.has_full_access and not CustomUser.objects.filter(
            has_full_access=True, is_active=True
        ).exclude(pk=self.pk).exists():
            raise ValidationError("Cannot delete the last active full-access user")
        return super().delete(*args, **kwargs)
