"""
Domain Events do Domínio de Tickets.

Eventos:
- TicketCriadoEvent: Novo ticket foi criado
- TicketAtribuidoEvent: Ticket foi atribuído/encaminhado a um usuário de suporte
- TicketStatusAlteradoEvent: Status mudou (ou foi reafirmado)
- TicketAtualizadoEvent: Campos descritivos mudaram (prioridade, categoria...)
- TicketComentadoEvent: Comentário adicionado
- TicketAnexoAdicionadoEvent: Anexo adicionado

Todos carregam o snapshot mínimo que o fan-out de notificações precisa
(título, criador, responsável e quem agiu), de modo que os handlers
não dependem de reler o ticket.

Uso:
    with uow:
        ticket = TicketEntity.criar(...)
        repo.save(ticket)
        uow.publish_event(TicketCriadoEvent.do_ticket(ticket, ator, ...))
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from helpdesk.core.shared.events import DomainEvent, EventRegistry


@dataclass
class TicketEvent(DomainEvent):
    """
    Base dos eventos de ticket.

    Attributes:
        titulo: Título do ticket no momento do evento
        criador_id: Dono do ticket
        atribuido_a_id: Responsável no momento do evento
        ator_id: Quem executou a ação
        ator_nome: Nome de quem executou (para mensagens)
    """

    titulo: str = ""
    criador_id: str = ""
    atribuido_a_id: Optional[str] = None
    ator_id: str = ""
    ator_nome: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Ticket"

    @classmethod
    def do_ticket(cls, ticket, ator, **dados: Any) -> "TicketEvent":
        """Cria evento com o snapshot comum do ticket e do ator."""
        return cls(
            aggregate_id=ticket.id,
            titulo=ticket.titulo,
            criador_id=ticket.criador_id,
            atribuido_a_id=ticket.atribuido_a_id,
            ator_id=ator.id,
            ator_nome=ator.nome,
            **dados,
        )


@EventRegistry.register
@dataclass
class TicketCriadoEvent(TicketEvent):
    """
    Evento: Ticket foi criado.

    Handlers típicos:
    - Notificar ADMIN/COORDINATOR ativos
    """

    prioridade: str = ""
    categoria: str = ""


@EventRegistry.register
@dataclass
class TicketAtribuidoEvent(TicketEvent):
    """
    Evento: Ticket foi atribuído a um usuário de suporte.

    Carrega também a mudança de status da atribuição; nenhum
    TicketStatusAlteradoEvent separado é publicado nesse caso.

    Attributes:
        atribuido_anterior_id: Responsável antes da atribuição
        status_anterior / status_novo: Status antes e depois
    """

    atribuido_anterior_id: Optional[str] = None
    status_anterior: str = ""
    status_novo: str = ""


@EventRegistry.register
@dataclass
class TicketStatusAlteradoEvent(TicketEvent):
    """
    Evento: Status do ticket foi alterado.

    Publicado também quando o novo status é igual ao anterior.
    """

    status_anterior: str = ""
    status_novo: str = ""


@EventRegistry.register
@dataclass
class TicketAtualizadoEvent(TicketEvent):
    """Evento: Campos descritivos alterados (nomes da API em `campos`)."""

    campos: List[str] = field(default_factory=list)


@EventRegistry.register
@dataclass
class TicketComentadoEvent(TicketEvent):
    """
    Evento: Comentário adicionado ao ticket.

    Attributes:
        comentario_id: ID do comentário
        interno: Se é visível apenas para staff
        conteudo_preview: Primeiros 100 caracteres
    """

    comentario_id: str = ""
    interno: bool = False
    conteudo_preview: str = ""

    def _get_event_data(self) -> Dict[str, Any]:
        data = super()._get_event_data()
        data["conteudo_preview"] = self.conteudo_preview[:100]
        return data


@EventRegistry.register
@dataclass
class TicketAnexoAdicionadoEvent(TicketEvent):
    """Evento: Anexo adicionado ao ticket."""

    anexo_id: str = ""
    nome_arquivo: str = ""
    tamanho: int = 0
