"""
API Views for authentication and user management.
"""
import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from django.contrib.auth import authenticate
from django.core.exceptions import ValidationError
from django.shortcuts import get_object_or_404
from django.utils import timezone

from console_project.pagination import auto_paginate
from console_project.response_formatter import validation_error_detail
from core.access_control.catalog import Module
from core.access_control.decorators import require_permission
from core.base.views import activity_views
from core.revisions.views import history_views
from core.user_accounts.models import CustomUser
from core.user_accounts.serializers import (
    LoginSerializer,
    UserCreateSerializer,
    UserReadSerializer,
    UserUpdateSerializer,
    actor_payload,
)
from core.user_accounts.services import UserService

logger = logging.getLogger(__name__)


# ============================================================================
# Authentication Views
# ============================================================================

@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """
    Public endpoint for user login.
    Authenticates user and returns JWT tokens plus the actor payload.

    POST /auth/login/
    - Request body: { "email": "...", "password": "..." }
    - Returns: { "user": <actor payload>, "tokens": {"refresh", "access"} }
    """
    serializer = LoginSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            {'error': 'Please provide both email and password'},
            status=status.HTTP_400_BAD_REQUEST
        )

    email = serializer.validated_data['email']
    password = serializer.validated_data['password']
    user = authenticate(request, username=email, password=password)

    if user is None:
        # Inactive users fail authenticate(); tell them apart from bad passwords
        inactive = CustomUser.objects.filter(email__iexact=email, is_active=False).first()
        if inactive is not None and inactive.check_password(password):
            logger.info("Login refused for inactive user %s", inactive.pk)
            return Response({'error': 'Account is inactive'}, status=status.HTTP_401_UNAUTHORIZED)
        return Response({'error': 'Invalid credentials'}, status=status.HTTP_401_UNAUTHORIZED)

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    refresh = RefreshToken.for_user(user)
    logger.info("User %s logged in", user.pk)

    return Response({
        'message': 'Login successful',
        'data': {
            'user': actor_payload(user),
            'tokens': {
                'refresh': str(refresh),
                'access': str(refresh.access_token)
            }
        }
    }, status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """
    Authenticated endpoint for logout.
    Blacklists the refresh token.

    POST /auth/logout/
    - Request body: { "refresh": "..." }
    """
    refresh_token = request.data.get('refresh')
    if not refresh_token:
        return Response({'error': 'Refresh token is required'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        RefreshToken(refresh_token).blacklist()
    except TokenError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    logger.info("User %s logged out", request.user.pk)
    return Response({'message': 'Logout successful'}, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me(request):
    """
    Current actor, used by clients to refresh permissions.

    GET /auth/me/
    """
    return Response(actor_payload(request.user), status=status.HTTP_200_OK)


# ============================================================================
# User Management Views
# ============================================================================

@api_view(['GET', 'POST'])
@require_permission(Module.USER_MANAGEMENT)
@auto_paginate
def user_list(request):
    """
    List all users or create a new user.

    GET /users/
    - Filters: role (ID), department (ID), is_active (boolean)
    - Search: ?search=query (email, username, names)

    POST /users/
    """
    if request.method == 'GET':
        filters = {
            'role': request.query_params.get('role'),
            'department': request.query_params.get('department'),
            'search': request.query_params.get('search'),
            'is_active': request.query_params.get('is_active'),
        }
        users = UserService.list_users(filters)
        serializer = UserReadSerializer(users, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    elif request.method == 'POST':
        serializer = UserCreateSerializer(data=request.data)
        if serializer.is_valid():
            try:
                user = UserService.create(request.user, serializer.to_dto())
                return Response(UserReadSerializer(user).data, status=status.HTTP_201_CREATED)
            except ValidationError as e:
                return Response(validation_error_detail(e), status=status.HTTP_400_BAD_REQUEST)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@require_permission(Module.USER_MANAGEMENT)
def user_detail(request, pk):
    """
    Retrieve, update or delete a user.

    GET /users/<pk>/
    PUT/PATCH /users/<pk>/
    DELETE /users/<pk>/
    """
    user = get_object_or_404(CustomUser.objects.select_related('role', 'department', 'job_title'), pk=pk)

    if request.method == 'GET':
        return Response(UserReadSerializer(user).data, status=status.HTTP_200_OK)

    elif request.method in ['PUT', 'PATCH']:
        data = request.data.copy()
        data['user_id'] = user.id

        serializer = UserUpdateSerializer(data=data)
        if serializer.is_valid():
            try:
                updated_user = UserService.update(request.user, serializer.to_dto())
                return Response(UserReadSerializer(updated_user).data, status=status.HTTP_200_OK)
            except ValidationError as e:
                return Response(validation_error_detail(e), status=status.HTTP_400_BAD_REQUEST)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    elif request.method == 'DELETE':
        try:
            UserService.delete(request.user, user.id)
            return Response(status=status.HTTP_204_NO_CONTENT)
        except ValidationError as e:
            return Response(validation_error_detail(e), status=status.HTTP_400_BAD_REQUEST)


user_toggle_activity, user_bulk_delete, user_bulk_toggle = activity_views(
    UserService, Module.USER_MANAGEMENT, UserReadSerializer
)

user_model_history, user_entity_history = history_views('User', Module.USER_MANAGEMENT)
