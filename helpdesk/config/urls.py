"""
URL Configuration do Helpdesk.

Estrutura:
- /api/ - API JSON (auth, tickets, usuários, notificações, dashboard)
- /health/ - Saúde do banco e métricas de query
"""

from django.urls import include, path

from helpdesk.adapters.django_app.tickets.api_views import HealthAPIView

urlpatterns = [
    path('api/', include('helpdesk.adapters.django_app.tickets.urls')),
    path('health/', HealthAPIView.as_view(), name='health'),
]
