"""
Event Publishers - Publicadores de Eventos de Domínio.

Responsável por entregar eventos aos handlers (fan-out de notificações).
Implementações:
- LoggingEventPublisher: loga e executa handlers no processo (sync)
- CeleryEventPublisher: envia para workers Celery (produção)
- InMemoryEventPublisher: para testes

O contrato (publish, register_handler) vem de
helpdesk.core.shared.interfaces.EventPublisher.
"""

from typing import List
import json
import logging

from helpdesk.core.shared.events import DomainEvent
from helpdesk.core.shared.interfaces import EventPublisher

logger = logging.getLogger(__name__)


class LoggingEventPublisher(EventPublisher):
    """
    Publisher síncrono.

    Loga o evento e executa os handlers registrados no mesmo processo,
    depois do commit da transação que o gerou.
    """

    def __init__(self, log_level: int = logging.INFO):
        super().__init__()
        self._log_level = log_level

    def publish(self, event: DomainEvent) -> None:
        logger.log(
            self._log_level,
            f"[EVENT] {event.event_type} | "
            f"aggregate={event.aggregate_id} | "
            f"data={json.dumps(event.to_dict(), default=str)}"
        )
        self._dispatch_to_handlers(event)


class CeleryEventPublisher(EventPublisher):
    """
    Publisher que envia eventos para Celery.

    O worker reconstrói o evento (EventRegistry) e executa o fan-out.
    Handlers locais não são usados neste modo.
    """

    def __init__(self, also_log: bool = True):
        super().__init__()
        self._also_log = also_log

    def publish(self, event: DomainEvent) -> None:
        if self._also_log:
            logger.info(
                f"[EVENT->CELERY] {event.event_type} | "
                f"aggregate={event.aggregate_id}"
            )

        from .handlers import dispatch_domain_event

        try:
            dispatch_domain_event.delay(event.event_type, event.to_dict())
        except Exception as e:
            # commit já efetuado
            logger.error(f"Falha ao publicar evento no Celery: {e}", exc_info=True)


class InMemoryEventPublisher(EventPublisher):
    """
    Publisher em memória para testes.

    Armazena eventos publicados e executa handlers registrados.
    """

    def __init__(self):
        super().__init__()
        self._published_events: List[DomainEvent] = []

    def publish(self, event: DomainEvent) -> None:
        self._published_events.append(event)
        self._dispatch_to_handlers(event)

    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events.copy()

    def get_events_by_type(self, event_type: str) -> List[DomainEvent]:
        return [e for e in self._published_events if e.event_type == event_type]

    def clear(self) -> None:
        self._published_events.clear()


def get_event_publisher(use_celery: bool = False) -> EventPublisher:
    """
    Factory para obter publisher apropriado.

    Args:
        use_celery: Se deve usar Celery para processamento assíncrono

    Returns:
        Publisher configurado
    """
    if use_celery:
        return CeleryEventPublisher()
    return LoggingEventPublisher()
