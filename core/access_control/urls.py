"""
URL configuration for roles.
Mounted at /roles/. The permission catalog lives in permission_urls.py.
"""
from django.urls import path
from core.access_control import views

app_name = 'roles'

urlpatterns = [
    path('', views.role_list, name='role_list'),
    path('bulk-delete/', views.role_bulk_delete, name='role_bulk_delete'),
    path('bulk-toggle/', views.role_bulk_toggle, name='role_bulk_toggle'),
    path('history/', views.role_model_history, name='role_model_history'),
    path('history/entity/<int:pk>/', views.role_entity_history, name='role_entity_history'),
    path('<int:pk>/', views.role_detail, name='role_detail'),
    path('<int:pk>/toggle-activity/', views.role_toggle_activity, name='role_toggle_activity'),
]
