"""
Domain Events - Comunicação desacoplada entre o ciclo de vida dos
tickets e seus efeitos colaterais (notificações).

Características:
- Auto-geração de ID e timestamp
- Serializáveis para transporte (Celery) e log
- Rastreáveis via aggregate_id

Fluxo:
    - Use cases enfileiram eventos no UoW
    - O UoW publica após commit bem-sucedido
    - Handlers (fan-out de notificações) processam os eventos
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Type
import uuid


def agora() -> datetime:
    """Timestamp atual em UTC (timezone-aware)."""
    return datetime.now(timezone.utc)


@dataclass
class DomainEvent(ABC):
    """
    Classe base abstrata para Domain Events.

    Um Domain Event representa algo significativo que aconteceu
    no domínio e que pode ser relevante para outras partes do sistema.
    Nomeados no passado (TicketCriado, não CriarTicket).

    Attributes:
        event_id: Identificador único do evento
        aggregate_id: ID do agregado que gerou o evento
        occurred_at: Momento em que o evento ocorreu
        version: Versão do schema do evento
    """

    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    aggregate_id: str = ""
    occurred_at: datetime = field(default_factory=agora)
    version: int = 1

    def __post_init__(self):
        if not self.aggregate_id:
            raise ValueError("aggregate_id é obrigatório")

    @property
    @abstractmethod
    def aggregate_type(self) -> str:
        """Tipo do agregado que gerou este evento (ex: "Ticket")."""
        ...

    @property
    def event_type(self) -> str:
        """Tipo do evento (nome da classe)."""
        return self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        """
        Serializa evento para dicionário.

        Usado no envio para o Celery e no log estruturado.
        """
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "aggregate_id": self.aggregate_id,
            "aggregate_type": self.aggregate_type,
            "occurred_at": self.occurred_at.isoformat(),
            "version": self.version,
            "data": self._get_event_data(),
        }

    def _get_event_data(self) -> Dict[str, Any]:
        """Campos específicos do evento (tudo que não é da classe base)."""
        base_fields = {"event_id", "aggregate_id", "occurred_at", "version"}
        return {
            key: value
            for key, value in self.__dict__.items()
            if key not in base_fields and not key.startswith("_")
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DomainEvent":
        """
        Reconstrói evento a partir do dicionário produzido por to_dict().

        Usado pelos workers Celery para reidratar o evento recebido.
        """
        event_data = data.get("data", {})
        return cls(
            event_id=data.get("event_id", str(uuid.uuid4())),
            aggregate_id=data["aggregate_id"],
            occurred_at=datetime.fromisoformat(data["occurred_at"]),
            version=data.get("version", 1),
            **event_data,
        )

    def __repr__(self) -> str:
        return (
            f"{self.event_type}("
            f"event_id={self.event_id[:8]}..., "
            f"aggregate_id={self.aggregate_id}, "
            f"occurred_at={self.occurred_at.isoformat()}"
            f")"
        )


class EventRegistry:
    """
    Registro de classes de evento por nome.

    Permite reconstruir eventos serializados (ex: recebidos pelo Celery)
    sem que o adapter conheça cada classe concreta.
    """

    _eventos: Dict[str, Type[DomainEvent]] = {}

    @classmethod
    def register(cls, event_class: Type[DomainEvent]) -> Type[DomainEvent]:
        """Registra classe de evento. Pode ser usado como decorator."""
        cls._eventos[event_class.__name__] = event_class
        return event_class

    @classmethod
    def rebuild(cls, event_type: str, data: Dict[str, Any]) -> DomainEvent:
        """
        Reconstrói evento a partir do tipo e do dicionário serializado.

        Raises:
            KeyError: Se o tipo não foi registrado
        """
        return cls._eventos[event_type].from_dict(data)

    @classmethod
    def tipos(cls) -> list:
        """Nomes de todos os eventos registrados."""
        return sorted(cls._eventos)
