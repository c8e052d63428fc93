"""
Entidades do Domínio de Notificações.

Uma notificação pertence ao usuário alvo; a única mutação permitida
depois de criada é marcá-la como lida.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
import uuid

from helpdesk.core.shared.events import agora
from helpdesk.core.shared.exceptions import ValidationError


class NotificationType(Enum):
    """Tipos de notificação."""

    TICKET_CREATED = "TICKET_CREATED"
    TICKET_ASSIGNED = "TICKET_ASSIGNED"
    TICKET_UPDATED = "TICKET_UPDATED"
    TICKET_COMMENTED = "TICKET_COMMENTED"
    TICKET_RESOLVED = "TICKET_RESOLVED"
    TICKET_CLOSED = "TICKET_CLOSED"
    SYSTEM_ANNOUNCEMENT = "SYSTEM_ANNOUNCEMENT"


@dataclass
class NotificationEntity:
    """
    Notificação entregue a um usuário.

    Attributes:
        tipo: Tipo da notificação
        titulo / mensagem: Texto exibido
        usuario_id: Dono (alvo) da notificação
        relacionado_id: ID do ticket relacionado (None para anúncios)
        dados: Payload livre ({ticketId, ticketTitle, ...})
        lida / lida_em: Estado de leitura
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    tipo: NotificationType = NotificationType.TICKET_UPDATED
    titulo: str = ""
    mensagem: str = ""
    usuario_id: str = ""
    relacionado_id: Optional[str] = None
    dados: Dict[str, Any] = field(default_factory=dict)
    lida: bool = False
    lida_em: Optional[datetime] = None
    criado_em: datetime = field(default_factory=agora)

    @classmethod
    def criar(
        cls,
        tipo: NotificationType,
        titulo: str,
        mensagem: str,
        usuario_id: str,
        relacionado_id: Optional[str] = None,
        dados: Optional[Dict[str, Any]] = None,
    ) -> "NotificationEntity":
        """
        Raises:
            ValidationError: Se título, mensagem ou usuário ausentes
        """
        if not (titulo or "").strip():
            raise ValidationError("Título é obrigatório", field="title")
        if not (mensagem or "").strip():
            raise ValidationError("Mensagem é obrigatória", field="message")
        if not usuario_id:
            raise ValidationError("Usuário é obrigatório", field="userId")

        return cls(
            tipo=tipo,
            titulo=titulo.strip(),
            mensagem=mensagem.strip(),
            usuario_id=usuario_id,
            relacionado_id=relacionado_id,
            dados=dict(dados or {}),
        )

    def marcar_como_lida(self) -> None:
        if not self.lida:
            self.lida = True
            self.lida_em = agora()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NotificationEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
