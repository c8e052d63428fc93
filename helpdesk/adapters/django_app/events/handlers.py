"""
Event Handlers - Processadores de Eventos de Domínio.

Handlers são executados de forma assíncrona via Celery quando
EVENT_PUBLISHER_MODE = 'celery'. O CeleryEventPublisher envia
(event_type, event.to_dict()); aqui o evento é reconstruído pelo
EventRegistry e entregue ao NotificationFanout. Falhas de gravação
ficam no fan-out (logadas, retorno 0); a task não re-tenta.

Padrão:
    @shared_task(acks_late=True)
    def dispatch_domain_event(event_type, event_data) -> int
"""

from typing import Any, Dict
import logging

from celery import shared_task

# Registram as classes de evento no EventRegistry
import helpdesk.core.notifications.events  # noqa: F401
import helpdesk.core.tickets.events  # noqa: F401
from helpdesk.core.shared.events import EventRegistry

logger = logging.getLogger(__name__)


@shared_task(acks_late=True)
def dispatch_domain_event(event_type: str, event_data: Dict[str, Any]) -> int:
    """
    Dispatcher central para Domain Events.

    Args:
        event_type: Tipo do evento (ex: 'TicketCriadoEvent')
        event_data: Dados do evento serializado

    Returns:
        Quantidade de notificações gravadas
    """
    if event_type not in EventRegistry.tipos():
        logger.warning(f"[DISPATCHER] Evento desconhecido: {event_type}")
        return 0

    event = EventRegistry.rebuild(event_type, event_data)
    logger.info(f"[DISPATCHER] {event_type} | aggregate={event.aggregate_id}")

    from helpdesk.config.container import get_container

    fanout = get_container().notification_fanout()
    return fanout.distribuir(event)
