"""
URL configuration for job titles (mounted at /job-titles/).
"""
from django.urls import path
from HR.work_structures import views

app_name = 'job_titles'

urlpatterns = [
    path('', views.job_title_list, name='job_title_list'),
    path('bulk-delete/', views.job_title_bulk_delete, name='job_title_bulk_delete'),
    path('bulk-toggle/', views.job_title_bulk_toggle, name='job_title_bulk_toggle'),
    path('history/', views.job_title_model_history, name='job_title_model_history'),
    path('history/entity/<int:pk>/', views.job_title_entity_history, name='job_title_entity_history'),
    path('<int:pk>/', views.job_title_detail, name='job_title_detail'),
    path('<int:pk>/toggle-activity/', views.job_title_toggle_activity, name='job_title_toggle_activity'),
]
