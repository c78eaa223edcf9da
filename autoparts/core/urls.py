from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView
from .views import (
    CustomTokenObtainPairView, user_me,
    audit_log_list, audit_log_entity,
    dashboard_stats,
)

urlpatterns = [
    # Auth endpoints
    path('auth/login/', CustomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me/', user_me, name='user-me'),

    # AuditLog endpoints
    path('audit-logs/', audit_log_list, name='audit-log-list'),
    path('audit-logs/<str:entity_type>/<int:entity_id>/', audit_log_entity, name='audit-log-entity'),

    # Dashboard
    path('dashboard/stats/', dashboard_stats, name='dashboard-stats'),
]
