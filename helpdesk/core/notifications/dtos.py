"""DTOs do Domínio de Notificações."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .entities import NotificationEntity


@dataclass(frozen=True)
class CriarAnuncioInputDTO:
    """
    Attributes:
        usuarios_alvo: IDs escolhidos; vazio = todos os usuários ativos
    """

    titulo: str
    mensagem: str
    usuarios_alvo: tuple = field(default_factory=tuple)


@dataclass
class NotificacaoOutputDTO:
    id: str
    tipo: str
    titulo: str
    mensagem: str
    usuario_id: str
    relacionado_id: Optional[str]
    dados: Dict[str, Any]
    lida: bool
    lida_em: Optional[datetime]
    criado_em: datetime

    @classmethod
    def from_entity(cls, entity: NotificationEntity) -> "NotificacaoOutputDTO":
        return cls(
            id=entity.id,
            tipo=entity.tipo.value,
            titulo=entity.titulo,
            mensagem=entity.mensagem,
            usuario_id=entity.usuario_id,
            relacionado_id=entity.relacionado_id,
            dados=dict(entity.dados),
            lida=entity.lida,
            lida_em=entity.lida_em,
            criado_em=entity.criado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.tipo,
            "title": self.titulo,
            "message": self.mensagem,
            "userId": self.usuario_id,
            "relatedId": self.relacionado_id,
            "data": self.dados,
            "isRead": self.lida,
            "readAt": self.lida_em.isoformat() if self.lida_em else None,
            "createdAt": self.criado_em.isoformat() if self.criado_em else None,
        }


@dataclass
class ListaNotificacoesDTO:
    """Notificações do usuário + total de não lidas."""

    items: List[NotificacaoOutputDTO]
    nao_lidas: int

    def to_dict(self) -> dict:
        return {
            "notifications": [n.to_dict() for n in self.items],
            "unreadCount": self.nao_lidas,
        }
