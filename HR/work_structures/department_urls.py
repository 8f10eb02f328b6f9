"""
URL configuration for departments (mounted at /departments/).
"""
from django.urls import path
from HR.work_structures import views

app_name = 'departments'

urlpatterns = [
    path('', views.department_list, name='department_list'),
    path('bulk-delete/', views.department_bulk_delete, name='department_bulk_delete'),
    path('bulk-toggle/', views.department_bulk_toggle, name='department_bulk_toggle'),
    path('history/', views.department_model_history, name='department_model_history'),
    path('history/entity/<int:pk>/', views.department_entity_history, name='department_entity_history'),
    path('<int:pk>/', views.department_detail, name='department_detail'),
    path('<int:pk>/toggle-activity/', views.department_toggle_activity, name='department_toggle_activity'),
]
