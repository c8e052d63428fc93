"""
Data Transfer Objects (DTOs) do Domínio de Tickets.

Tipos de DTOs:
- Input DTOs: dados de entrada já extraídos do request
- Output DTOs: formatam dados para resposta, com as chaves
  camelCase do contrato HTTP (title, createdById, closedAt...)
- Query DTOs: filtros de listagem
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from helpdesk.core.accounts.dtos import CriarUsuarioInputDTO
from helpdesk.core.accounts.entities import UserEntity

from .entities import AttachmentEntity, CommentEntity, TicketEntity


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class CriarTicketInputDTO:
    """
    DTO de entrada para criar ticket.

    Attributes:
        titulo: Título do ticket
        descricao: Descrição detalhada
        prioridade: Nome da prioridade (default "MEDIUM")
        categoria: Categoria (default "Geral")
        tags: Tags opcionais (tuple para ser hashable)
        criador_id: Dono do ticket; vazio = o próprio ator
        novo_usuario: Dados de um usuário a ser criado como dono (staff)
    """

    titulo: str
    descricao: str
    prioridade: Optional[str] = "MEDIUM"
    categoria: Optional[str] = None
    tags: tuple = field(default_factory=tuple)
    criador_id: Optional[str] = None
    novo_usuario: Optional[CriarUsuarioInputDTO] = None


@dataclass(frozen=True)
class AtualizarTicketInputDTO:
    """
    DTO de entrada para atualização parcial (PATCH).

    Campos None não são alterados. Para mexer no responsável,
    alterar_atribuicao=True e atribuido_a_id com o novo valor
    (None remove o responsável).
    """

    ticket_id: str
    titulo: Optional[str] = None
    descricao: Optional[str] = None
    categoria: Optional[str] = None
    prioridade: Optional[str] = None
    tags: Optional[tuple] = None
    status: Optional[str] = None
    alterar_atribuicao: bool = False
    atribuido_a_id: Optional[str] = None

    @property
    def vazio(self) -> bool:
        return (
            self.titulo is None
            and self.descricao is None
            and self.categoria is None
            and self.prioridade is None
            and self.tags is None
            and self.status is None
            and not self.alterar_atribuicao
        )


@dataclass(frozen=True)
class AlterarStatusInputDTO:
    ticket_id: str
    status: str


@dataclass(frozen=True)
class AtribuirTicketInputDTO:
    """
    DTO de entrada para atribuir/encaminhar ticket.

    Attributes:
        ticket_id: ID do ticket
        atribuido_a_id: ID do usuário de suporte
        status: Status resultante (default IN_PROGRESS)
    """

    ticket_id: str
    atribuido_a_id: Optional[str]
    status: Optional[str] = None


@dataclass(frozen=True)
class ResponderTicketInputDTO:
    """
    DTO de entrada para resposta do responsável.

    Attributes:
        resposta: Texto da resposta (vira comentário público)
        acao: "respond" ou "return_to_coordination"
    """

    ticket_id: str
    resposta: str
    acao: str = "respond"


@dataclass(frozen=True)
class AdicionarComentarioInputDTO:
    ticket_id: str
    conteudo: str
    interno: bool = False


@dataclass(frozen=True)
class EditarComentarioInputDTO:
    comentario_id: str
    conteudo: str


@dataclass(frozen=True)
class AdicionarAnexoInputDTO:
    ticket_id: str
    nome_arquivo: str
    caminho: str
    tamanho: int


# =============================================================================
# QUERY DTOs (Filtros de Busca)
# =============================================================================

@dataclass(frozen=True)
class ListarTicketsQueryDTO:
    """
    Parâmetros de busca/filtro de tickets.

    Todos os filtros são combinados com AND; busca textual é
    case-insensitive sobre título, descrição e nome do criador.
    """

    busca: Optional[str] = None
    status: Optional[str] = None
    prioridade: Optional[str] = None
    categoria: Optional[str] = None
    criador_id: Optional[str] = None
    atribuido_a_id: Optional[str] = None
    pagina: int = 1
    limite: int = 10


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

def _resumo_usuario(usuario: Optional[UserEntity]) -> Optional[dict]:
    if usuario is None:
        return None
    return {"id": usuario.id, "name": usuario.nome, "email": usuario.email, "role": usuario.papel.value}


def _iso(valor: Optional[datetime]) -> Optional[str]:
    return valor.isoformat() if valor else None


@dataclass
class TicketOutputDTO:
    """
    DTO de saída completo com dados do ticket.

    Inclui resumo do criador e do responsável quando conhecidos.
    """

    id: str
    titulo: str
    descricao: str
    status: str
    prioridade: str
    categoria: str
    tags: List[str]
    criador_id: str
    atribuido_a_id: Optional[str]
    criado_em: datetime
    atualizado_em: datetime
    fechado_em: Optional[datetime]
    criador: Optional[dict] = None
    atribuido_a: Optional[dict] = None

    @classmethod
    def from_entity(
        cls,
        entity: TicketEntity,
        usuarios: Optional[Dict[str, UserEntity]] = None,
    ) -> "TicketOutputDTO":
        """
        Args:
            entity: Entidade TicketEntity
            usuarios: Mapa id -> usuário para montar os resumos (evita N+1)
        """
        usuarios = usuarios or {}
        return cls(
            id=entity.id,
            titulo=entity.titulo,
            descricao=entity.descricao,
            status=entity.status.value,
            prioridade=entity.prioridade.value,
            categoria=entity.categoria,
            tags=list(entity.tags),
            criador_id=entity.criador_id,
            atribuido_a_id=entity.atribuido_a_id,
            criado_em=entity.criado_em,
            atualizado_em=entity.atualizado_em,
            fechado_em=entity.fechado_em,
            criador=_resumo_usuario(usuarios.get(entity.criador_id)),
            atribuido_a=_resumo_usuario(usuarios.get(entity.atribuido_a_id)) if entity.atribuido_a_id else None,
        )

    def to_dict(self) -> dict:
        """Converte para dicionário (serialização JSON)."""
        return {
            "id": self.id,
            "title": self.titulo,
            "description": self.descricao,
            "status": self.status,
            "priority": self.prioridade,
            "category": self.categoria,
            "tags": self.tags,
            "createdById": self.criador_id,
            "assignedToId": self.atribuido_a_id,
            "createdAt": _iso(self.criado_em),
            "updatedAt": _iso(self.atualizado_em),
            "closedAt": _iso(self.fechado_em),
            "createdBy": self.criador,
            "assignedTo": self.atribuido_a,
        }


@dataclass
class AcaoTicketOutputDTO:
    """Resultado de encaminhamento/resposta: ticket + mensagem ao usuário."""

    ticket: TicketOutputDTO
    mensagem: str

    def to_dict(self) -> dict:
        return {"ticket": self.ticket.to_dict(), "message": self.mensagem}


@dataclass
class ComentarioOutputDTO:
    id: str
    ticket_id: str
    conteudo: str
    interno: bool
    criado_em: datetime
    autor: Optional[dict] = None

    @classmethod
    def from_entity(cls, entity: CommentEntity, autor: Optional[UserEntity] = None) -> "ComentarioOutputDTO":
        return cls(
            id=entity.id,
            ticket_id=entity.ticket_id,
            conteudo=entity.conteudo,
            interno=entity.interno,
            criado_em=entity.criado_em,
            autor=_resumo_usuario(autor) or {"id": entity.autor_id},
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ticketId": self.ticket_id,
            "content": self.conteudo,
            "isInternal": self.interno,
            "createdAt": _iso(self.criado_em),
            "author": self.autor,
        }


@dataclass
class AnexoOutputDTO:
    id: str
    ticket_id: str
    enviado_por_id: str
    nome_arquivo: str
    caminho: str
    tamanho: int
    criado_em: datetime

    @classmethod
    def from_entity(cls, entity: AttachmentEntity) -> "AnexoOutputDTO":
        return cls(
            id=entity.id,
            ticket_id=entity.ticket_id,
            enviado_por_id=entity.enviado_por_id,
            nome_arquivo=entity.nome_arquivo,
            caminho=entity.caminho,
            tamanho=entity.tamanho,
            criado_em=entity.criado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ticketId": self.ticket_id,
            "uploadedById": self.enviado_por_id,
            "fileName": self.nome_arquivo,
            "filePath": self.caminho,
            "fileSize": self.tamanho,
            "createdAt": _iso(self.criado_em),
        }


@dataclass
class EstatisticasDashboardDTO:
    """Contagens agregadas do dashboard."""

    total: int = 0
    abertos: int = 0
    em_andamento: int = 0
    resolvidos: int = 0
    fechados: int = 0
    por_prioridade: Dict[str, int] = field(default_factory=dict)
    por_categoria: Dict[str, int] = field(default_factory=dict)
    usuarios_total: int = 0
    usuarios_ativos: int = 0
    coordenadores: int = 0
    tempo_medio_resolucao_horas: float = 0.0

    def to_dict(self) -> dict:
        return {
            "tickets": {
                "total": self.total,
                "open": self.abertos,
                "inProgress": self.em_andamento,
                "resolved": self.resolvidos,
                "closed": self.fechados,
                "byPriority": self.por_prioridade,
                "byCategory": self.por_categoria,
            },
            "users": {
                "total": self.usuarios_total,
                "active": self.usuarios_ativos,
                "coordinators": self.coordenadores,
            },
            "avgResolutionTime": round(self.tempo_medio_resolucao_horas, 2),
        }
