"""
Domínio de Tickets - Ciclo de vida de chamados de suporte.

Este módulo contém toda a lógica de negócio relacionada a tickets,
incluindo:
- Entidades (TicketEntity, CommentEntity, AttachmentEntity)
- Use Cases (criar, editar, atribuir, responder, comentar, listar...)
- Domain Events (consumidos pelo fan-out de notificações)
- DTOs (Input/Output Data Transfer Objects)
- Ports (Interfaces para repositórios)

Características do Domínio:
- fechado_em acompanha os estados de fechamento
- Toda operação passa pelo Authorization Gate antes de escrever
- Eventos disparados após commit para side-effects
"""

from .entities import (
    AttachmentEntity,
    CommentEntity,
    TicketEntity,
    TicketPriority,
    TicketStatus,
)
from .events import (
    TicketAnexoAdicionadoEvent,
    TicketAtribuidoEvent,
    TicketAtualizadoEvent,
    TicketComentadoEvent,
    TicketCriadoEvent,
    TicketStatusAlteradoEvent,
)
from .dtos import (
    CriarTicketInputDTO,
    AtribuirTicketInputDTO,
    TicketOutputDTO,
    ListarTicketsQueryDTO,
)
from .ports import (
    AnexoRepository,
    ComentarioRepository,
    FiltroTickets,
    TicketRepository,
)

__all__ = [
    # Entities
    "TicketEntity",
    "TicketStatus",
    "TicketPriority",
    "CommentEntity",
    "AttachmentEntity",
    # Events
    "TicketCriadoEvent",
    "TicketAtribuidoEvent",
    "TicketStatusAlteradoEvent",
    "TicketAtualizadoEvent",
    "TicketComentadoEvent",
    "TicketAnexoAdicionadoEvent",
    # DTOs
    "CriarTicketInputDTO",
    "AtribuirTicketInputDTO",
    "TicketOutputDTO",
    "ListarTicketsQueryDTO",
    # Ports
    "TicketRepository",
    "ComentarioRepository",
    "AnexoRepository",
    "FiltroTickets",
]
