"""
Interfaces (Ports) - Contratos entre Core e Adapters.

Tipos de Ports:
- Driven Ports: UnitOfWork, EventPublisher, Repository
- Driving Ports: definidos nos Use Cases de cada domínio

Princípio: Core define interfaces; Adapters implementam.
"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, Generic, List, Optional, Protocol, TypeVar
import logging

from .events import DomainEvent

logger = logging.getLogger(__name__)

T = TypeVar("T")


class UnitOfWork(ABC):
    """
    Unit of Work - Coordena transações atômicas.

    Pattern: Context Manager
        with uow:
            repo.save(entity)
            uow.publish_event(event)
        # Commit automático ao sair sem erro
        # Rollback automático se exceção

    Eventos enfileirados só são publicados após commit bem-sucedido;
    em rollback são descartados.
    """

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self) -> "UnitOfWork":
        self._begin_transaction()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False

    @abstractmethod
    def _begin_transaction(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        """
        Persiste as mudanças e publica eventos.

        Ordem:
        1. Commit da transação
        2. Publicação dos eventos enfileirados
        3. Limpeza de estado interno
        """
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        """Desfaz as mudanças e descarta eventos."""
        raise NotImplementedError

    def publish_event(self, event: DomainEvent) -> None:
        """
        Enfileira evento para publicação após commit.

        Example:
            with uow:
                ticket = TicketEntity.criar(...)
                repo.save(ticket)
                uow.publish_event(TicketCriadoEvent(aggregate_id=ticket.id, ...))
            # Evento publicado aqui, após commit
        """
        self._events.append(event)

    def collect_events(self) -> List[DomainEvent]:
        """Eventos pendentes (para testes/debug)."""
        return list(self._events)

    def clear_events(self) -> None:
        self._events.clear()


class Repository(Protocol, Generic[T]):
    """
    Interface genérica para repositórios.

    Protocol permite duck typing: adapters não precisam herdar.
    """

    def save(self, entity: T) -> None:
        ...

    def get_by_id(self, entity_id: str) -> Optional[T]:
        ...

    def delete(self, entity_id: str) -> None:
        ...


EventHandler = Callable[[DomainEvent], None]


class EventPublisher(ABC):
    """
    Interface para publicação de eventos.

    Implementações (adapters):
    - LoggingEventPublisher: loga e executa handlers no processo
    - CeleryEventPublisher: envia para workers Celery
    - InMemoryEventPublisher: testes
    """

    def __init__(self):
        self._handlers: Dict[str, List[EventHandler]] = {}

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        raise NotImplementedError

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)

    def register_handler(self, event_type: str, handler: EventHandler) -> None:
        """Registra handler para tipo de evento (nome da classe)."""
        self._handlers.setdefault(event_type, []).append(handler)

    def _dispatch_to_handlers(self, event: DomainEvent) -> None:
        """
        Despacha evento para handlers registrados.

        Falha de um handler é logada e não interrompe os demais.
        """
        for handler in self._handlers.get(event.event_type, []):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Erro em handler para {event.event_type}: {e}", exc_info=True)


UoW = UnitOfWork
