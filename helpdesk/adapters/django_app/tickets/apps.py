"""
Configuração do Django App do Helpdesk.

Instala a instrumentação de queries em toda conexão aberta.
"""

from django.apps import AppConfig
from django.db.backends.signals import connection_created


class TicketsConfig(AppConfig):
    """Configuração do app Tickets."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'helpdesk.adapters.django_app.tickets'
    label = 'tickets'
    verbose_name = 'Helpdesk'

    def ready(self):
        """
        Executado quando o app está pronto.

        Configura:
        - QueryMetrics via sinal connection_created
        """
        from ..shared.database import instalar_metricas

        connection_created.connect(instalar_metricas, dispatch_uid='helpdesk_query_metrics')
