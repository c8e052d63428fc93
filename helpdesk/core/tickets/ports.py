"""
Ports (Interfaces) do Domínio de Tickets.

Define os contratos que os Adapters de infraestrutura devem implementar
para persistência e consulta de tickets, comentários e anexos.

Tipos de Ports:
- TicketRepository: CRUD, listagem filtrada e agregações do dashboard
- ComentarioRepository: Comentários de um ticket
- AnexoRepository: Metadados de anexos de um ticket

Princípio:
    Core define interfaces → Adapters implementam
    Dependências sempre apontam para o Core
"""

from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Tuple, runtime_checkable

from helpdesk.core.shared.pagination import Paginacao

from .entities import (
    AttachmentEntity,
    CommentEntity,
    TicketEntity,
    TicketPriority,
    TicketStatus,
)


@dataclass(frozen=True)
class FiltroTickets:
    """
    Filtros já convertidos para tipos de domínio.

    Attributes:
        visivel_para_id: Se definido, restringe a tickets criados por
            ou atribuídos a este usuário (visão de papel USER)
        busca: Texto procurado em título, descrição e nome do criador
    """

    visivel_para_id: Optional[str] = None
    busca: Optional[str] = None
    status: Optional[TicketStatus] = None
    prioridade: Optional[TicketPriority] = None
    categoria: Optional[str] = None
    criador_id: Optional[str] = None
    atribuido_a_id: Optional[str] = None


@runtime_checkable
class TicketRepository(Protocol):
    """
    Interface para persistência de Tickets.

    Implementações:
    - DjangoTicketRepository (ORM)
    - InMemoryTicketRepository (para testes)

    Methods:
        save: Persiste ticket (create ou update)
        get_by_id: Busca por ID
        delete: Remove ticket
        list_filtrado: Página de tickets + total (mais recentes primeiro)
        count: Total de tickets
        contar_por: Agrupa contagem por "status", "prioridade" ou "categoria"
        media_resolucao_horas: Média de horas entre criação e fechamento
    """

    def save(self, ticket: TicketEntity) -> None:
        ...

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        ...

    def delete(self, ticket_id: str) -> None:
        ...

    def list_filtrado(
        self,
        filtro: FiltroTickets,
        paginacao: Paginacao,
    ) -> Tuple[List[TicketEntity], int]:
        ...

    def count(self) -> int:
        ...

    def contar_por(self, campo: str) -> Dict[str, int]:
        ...

    def media_resolucao_horas(self) -> float:
        """Retorna 0.0 quando não há ticket fechado."""
        ...


@runtime_checkable
class ComentarioRepository(Protocol):
    """Interface para comentários (ordem cronológica)."""

    def save(self, comentario: CommentEntity) -> None:
        ...

    def get_by_id(self, comentario_id: str) -> Optional[CommentEntity]:
        ...

    def delete(self, comentario_id: str) -> None:
        ...

    def list_by_ticket(self, ticket_id: str, incluir_internos: bool = True) -> List[CommentEntity]:
        ...

    def delete_by_ticket(self, ticket_id: str) -> None:
        ...


@runtime_checkable
class AnexoRepository(Protocol):
    """Interface para metadados de anexos."""

    def save(self, anexo: AttachmentEntity) -> None:
        ...

    def get_by_id(self, anexo_id: str) -> Optional[AttachmentEntity]:
        ...

    def delete(self, anexo_id: str) -> None:
        ...

    def list_by_ticket(self, ticket_id: str) -> List[AttachmentEntity]:
        ...

    def delete_by_ticket(self, ticket_id: str) -> None:
        ...


_CAMPOS_AGRUPAVEIS = {
    "status": lambda t: t.status.value,
    "prioridade": lambda t: t.prioridade.value,
    "categoria": lambda t: t.categoria,
}


class InMemoryTicketRepository:
    """
    Implementação em memória do TicketRepository.

    Útil para testes unitários e prototipagem. Não usar em produção!

    Args:
        usuario_repo: Opcional, usado para buscar pelo nome do criador

    Example:
        repo = InMemoryTicketRepository()
        repo.save(ticket)
        found = repo.get_by_id(ticket.id)
    """

    def __init__(self, usuario_repo=None):
        self._tickets: dict[str, TicketEntity] = {}
        self.usuario_repo = usuario_repo

    def save(self, ticket: TicketEntity) -> None:
        self._tickets[ticket.id] = ticket

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        return self._tickets.get(ticket_id)

    def delete(self, ticket_id: str) -> None:
        self._tickets.pop(ticket_id, None)

    def list_filtrado(
        self,
        filtro: FiltroTickets,
        paginacao: Paginacao,
    ) -> Tuple[List[TicketEntity], int]:
        filtrados = [t for t in self._tickets.values() if self._atende(t, filtro)]
        filtrados.sort(key=lambda t: t.criado_em, reverse=True)
        inicio = paginacao.offset
        return filtrados[inicio:inicio + paginacao.limite], len(filtrados)

    def _atende(self, ticket: TicketEntity, filtro: FiltroTickets) -> bool:
        if filtro.visivel_para_id and filtro.visivel_para_id not in (
            ticket.criador_id, ticket.atribuido_a_id
        ):
            return False
        if filtro.status and ticket.status != filtro.status:
            return False
        if filtro.prioridade and ticket.prioridade != filtro.prioridade:
            return False
        if filtro.categoria and ticket.categoria != filtro.categoria:
            return False
        if filtro.criador_id and ticket.criador_id != filtro.criador_id:
            return False
        if filtro.atribuido_a_id and ticket.atribuido_a_id != filtro.atribuido_a_id:
            return False
        if filtro.busca:
            termo = filtro.busca.lower()
            textos = [ticket.titulo, ticket.descricao, self._nome_criador(ticket)]
            if not any(termo in texto.lower() for texto in textos):
                return False
        return True

    def _nome_criador(self, ticket: TicketEntity) -> str:
        if self.usuario_repo is None:
            return ""
        criador = self.usuario_repo.get_by_id(ticket.criador_id)
        return criador.nome if criador else ""

    def count(self) -> int:
        return len(self._tickets)

    def contar_por(self, campo: str) -> Dict[str, int]:
        chave = _CAMPOS_AGRUPAVEIS[campo]
        return dict(Counter(chave(t) for t in self._tickets.values()))

    def media_resolucao_horas(self) -> float:
        tempos = [
            t.tempo_resolucao_horas for t in self._tickets.values()
            if t.tempo_resolucao_horas is not None
        ]
        return sum(tempos) / len(tempos) if tempos else 0.0

    def clear(self) -> None:
        """Limpa todos os dados (útil para testes)."""
        self._tickets.clear()


class InMemoryComentarioRepository:
    def __init__(self):
        self._comentarios: dict[str, CommentEntity] = {}

    def save(self, comentario: CommentEntity) -> None:
        self._comentarios[comentario.id] = comentario

    def get_by_id(self, comentario_id: str) -> Optional[CommentEntity]:
        return self._comentarios.get(comentario_id)

    def delete(self, comentario_id: str) -> None:
        self._comentarios.pop(comentario_id, None)

    def list_by_ticket(self, ticket_id: str, incluir_internos: bool = True) -> List[CommentEntity]:
        comentarios = [
            c for c in self._comentarios.values()
            if c.ticket_id == ticket_id and (incluir_internos or not c.interno)
        ]
        return sorted(comentarios, key=lambda c: c.criado_em)

    def delete_by_ticket(self, ticket_id: str) -> None:
        self._comentarios = {
            k: c for k, c in self._comentarios.items() if c.ticket_id != ticket_id
        }


class InMemoryAnexoRepository:
    def __init__(self):
        self._anexos: dict[str, AttachmentEntity] = {}

    def save(self, anexo: AttachmentEntity) -> None:
        self._anexos[anexo.id] = anexo

    def get_by_id(self, anexo_id: str) -> Optional[AttachmentEntity]:
        return self._anexos.get(anexo_id)

    def delete(self, anexo_id: str) -> None:
        self._anexos.pop(anexo_id, None)

    def list_by_ticket(self, ticket_id: str) -> List[AttachmentEntity]:
        anexos = [a for a in self._anexos.values() if a.ticket_id == ticket_id]
        return sorted(anexos, key=lambda a: a.criado_em)

    def delete_by_ticket(self, ticket_id: str) -> None:
        self._anexos = {
            k: a for k, a in self._anexos.items() if a.ticket_id != ticket_id
        }
