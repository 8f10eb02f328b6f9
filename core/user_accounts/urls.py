"""
URL Configuration for user management.
Mounted at /users/. Authentication endpoints are in auth_urls.py
"""
from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    path('', views.user_list, name='user_list'),
    path('bulk-delete/', views.user_bulk_delete, name='user_bulk_delete'),
    path('bulk-toggle/', views.user_bulk_toggle, name='user_bulk_toggle'),
    path('history/', views.user_model_history, name='user_model_history'),
    path('history/entity/<int:pk>/', views.user_entity_history, name='user_entity_history'),
    path('<int:pk>/', views.user_detail, name='user_detail'),
    path('<int:pk>/toggle-activity/', views.user_toggle_activity, name='user_toggle_activity'),
]
