"""
URL configuration for the permission catalog.
Mounted at /permissions/.
"""
from django.urls import path
from core.access_control import views

app_name = 'permissions'

urlpatterns = [
    path('groups/', views.permission_groups, name='permission_groups'),
]
