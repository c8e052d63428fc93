"""Domain Events do Domínio de Notificações."""

from dataclasses import dataclass, field
from typing import List

from helpdesk.core.shared.events import DomainEvent, EventRegistry


@EventRegistry.register
@dataclass
class AnuncioSistemaEvent(DomainEvent):
    """
    Evento: Anúncio do sistema emitido por um ADMIN.

    Attributes:
        usuarios_alvo: IDs escolhidos; vazio = todos os usuários ativos
    """

    titulo: str = ""
    mensagem: str = ""
    usuarios_alvo: List[str] = field(default_factory=list)
    ator_id: str = ""
    ator_nome: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Announcement"
