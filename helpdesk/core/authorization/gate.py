"""
Authorization Gate - decisão centralizada de permissões.

Toda verificação de papel do sistema passa por aqui: use cases e
views consultam a mesma tabela declarativa (operação x papel), o que
evita divergência de regras entre camadas.

O contexto do chamador (Ator) é sempre passado explicitamente;
nenhuma decisão lê estado global de sessão.

Example:
    gate = AuthorizationGate()
    gate.exigir(ator, Operacao.EXCLUIR_TICKET)   # ForbiddenError se negado
    if gate.pode(ator, Operacao.ATRIBUIR_TICKET):
        ...
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, FrozenSet
import logging

from helpdesk.core.accounts.entities import STAFF_ROLES, UserEntity, UserRole
from helpdesk.core.shared.exceptions import ForbiddenError

if TYPE_CHECKING:
    from helpdesk.core.tickets.entities import TicketEntity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Ator:
    """
    Quem está executando a operação.

    Attributes:
        id: ID do usuário autenticado
        papel: Papel do usuário
        nome: Nome (usado nas mensagens de notificação)
    """

    id: str
    papel: UserRole
    nome: str = ""

    @classmethod
    def from_usuario(cls, usuario: UserEntity) -> "Ator":
        return cls(id=usuario.id, papel=usuario.papel, nome=usuario.nome)

    @property
    def is_staff(self) -> bool:
        return self.papel in STAFF_ROLES


class Operacao(Enum):
    """Operações sujeitas a autorização."""

    CRIAR_TICKET = "criar_ticket"
    CRIAR_TICKET_PARA_OUTRO = "criar_ticket_para_outro"
    VER_QUALQUER_TICKET = "ver_qualquer_ticket"
    EDITAR_QUALQUER_TICKET = "editar_qualquer_ticket"
    EDITAR_PROPRIO_TICKET = "editar_proprio_ticket"
    ATRIBUIR_TICKET = "atribuir_ticket"
    RESPONDER_QUALQUER_TICKET = "responder_qualquer_ticket"
    EXCLUIR_TICKET = "excluir_ticket"
    GERENCIAR_USUARIOS = "gerenciar_usuarios"
    ALTERAR_PAPEL = "alterar_papel"
    VER_CONTATOS_SUPORTE = "ver_contatos_suporte"
    COMENTAR_INTERNO = "comentar_interno"
    MODERAR_CONTEUDO = "moderar_conteudo"
    ANUNCIAR = "anunciar"


TODOS = frozenset(UserRole)
ADMIN_COORDENACAO = frozenset({UserRole.ADMIN, UserRole.COORDINATOR})

PERMISSOES: Dict[Operacao, FrozenSet[UserRole]] = {
    Operacao.CRIAR_TICKET: TODOS,
    Operacao.CRIAR_TICKET_PARA_OUTRO: STAFF_ROLES,
    Operacao.VER_QUALQUER_TICKET: STAFF_ROLES,
    Operacao.EDITAR_QUALQUER_TICKET: STAFF_ROLES,
    Operacao.EDITAR_PROPRIO_TICKET: frozenset({UserRole.USER}),
    Operacao.ATRIBUIR_TICKET: ADMIN_COORDENACAO,
    Operacao.RESPONDER_QUALQUER_TICKET: ADMIN_COORDENACAO,
    Operacao.EXCLUIR_TICKET: frozenset({UserRole.ADMIN}),
    Operacao.GERENCIAR_USUARIOS: STAFF_ROLES,
    Operacao.ALTERAR_PAPEL: frozenset({UserRole.ADMIN}),
    Operacao.VER_CONTATOS_SUPORTE: TODOS,
    Operacao.COMENTAR_INTERNO: STAFF_ROLES,
    Operacao.MODERAR_CONTEUDO: frozenset({UserRole.ADMIN}),
    Operacao.ANUNCIAR: frozenset({UserRole.ADMIN}),
}


class AuthorizationGate:
    """
    Decide allow/deny antes de qualquer mutação.

    Regras por papel vêm de PERMISSOES; regras relacionais
    (dono do ticket, responsável atribuído) ficam nos métodos exigir_*.
    """

    def __init__(self, permissoes: Dict[Operacao, FrozenSet[UserRole]] = None):
        self._permissoes = permissoes or PERMISSOES

    def pode(self, ator: Ator, operacao: Operacao) -> bool:
        return ator.papel in self._permissoes.get(operacao, frozenset())

    def exigir(self, ator: Ator, operacao: Operacao) -> None:
        """
        Raises:
            ForbiddenError: Se o papel do ator não permite a operação
        """
        if not self.pode(ator, operacao):
            self._negar(ator, operacao.value)

    def pode_editar(self, ator: Ator, ticket: "TicketEntity") -> bool:
        """Staff edita qualquer ticket; USER apenas os que criou."""
        if self.pode(ator, Operacao.EDITAR_QUALQUER_TICKET):
            return True
        return (
            self.pode(ator, Operacao.EDITAR_PROPRIO_TICKET)
            and ticket.criador_id == ator.id
        )

    def exigir_edicao(self, ator: Ator, ticket: "TicketEntity") -> None:
        if not self.pode_editar(ator, ticket):
            self._negar(ator, Operacao.EDITAR_PROPRIO_TICKET.value)

    def pode_alterar_status(self, ator: Ator, ticket: "TicketEntity") -> bool:
        """Quem edita o ticket, e também o responsável atribuído."""
        return self.pode_editar(ator, ticket) or (
            ticket.atribuido_a_id is not None and ticket.atribuido_a_id == ator.id
        )

    def exigir_alteracao_status(self, ator: Ator, ticket: "TicketEntity") -> None:
        if not self.pode_alterar_status(ator, ticket):
            self._negar(ator, "alterar_status")

    def pode_visualizar(self, ator: Ator, ticket: "TicketEntity") -> bool:
        """Staff, criador ou responsável atribuído."""
        return (
            self.pode(ator, Operacao.VER_QUALQUER_TICKET)
            or ticket.criador_id == ator.id
            or ticket.atribuido_a_id == ator.id
        )

    def exigir_visualizacao(self, ator: Ator, ticket: "TicketEntity") -> None:
        if not self.pode_visualizar(ator, ticket):
            self._negar(ator, Operacao.VER_QUALQUER_TICKET.value)

    def pode_responder(self, ator: Ator, ticket: "TicketEntity") -> bool:
        """Responsável atribuído, ou ADMIN/COORDINATOR em qualquer ticket."""
        if self.pode(ator, Operacao.RESPONDER_QUALQUER_TICKET):
            return True
        return ticket.atribuido_a_id is not None and ticket.atribuido_a_id == ator.id

    def exigir_resposta(self, ator: Ator, ticket: "TicketEntity") -> None:
        if not self.pode_responder(ator, ticket):
            self._negar(ator, "responder_ticket", "Apenas o responsável atribuído pode responder")

    def exigir_autoria(self, ator: Ator, autor_id: str, operacao: str) -> None:
        """Comentário ou anexo: só o autor altera, ou quem modera conteúdo."""
        if autor_id != ator.id and not self.pode(ator, Operacao.MODERAR_CONTEUDO):
            self._negar(ator, operacao)

    def _negar(self, ator: Ator, operacao: str, mensagem: str = "Acesso negado") -> None:
        logger.warning(
            f"Acesso negado: usuario={ator.id} papel={ator.papel.value} operacao={operacao}"
        )
        raise ForbiddenError(mensagem, operacao=operacao)
