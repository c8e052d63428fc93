"""
Fan-out de Notificações.

Um único distribuidor genérico dirigido por uma tabela declarativa:
tipo de evento -> lista de regras. Cada regra diz quem são os
interessados, que tipo de notificação gerar e como montar título,
mensagem e dados.

Para cada evento:
1. Cada regra aplicável seleciona seus destinatários
2. Quem executou a ação é removido
3. Duplicados são removidos (ordem preservada)
4. Uma notificação por destinatário
5. Todas as notificações do evento gravadas em um único create_many

O fan-out roda depois do commit da operação de ticket; qualquer falha
aqui é logada e engolida, a mutação já está persistida.

Example:
    fanout = NotificationFanout(notificacao_repo, usuario_repo)
    fanout.registrar_em(event_publisher)
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional
import logging

from helpdesk.core.accounts.entities import UserRole
from helpdesk.core.accounts.ports import UsuarioRepository
from helpdesk.core.shared.events import DomainEvent
from helpdesk.core.shared.interfaces import EventPublisher
from helpdesk.core.tickets.entities import TicketStatus

from .entities import NotificationEntity, NotificationType
from .ports import NotificationRepository

logger = logging.getLogger(__name__)

Seletor = Callable[[Any, UsuarioRepository], Iterable[Optional[str]]]
Texto = Callable[[Any], str]
Dados = Callable[[Any], Dict[str, Any]]

PAPEIS_COORDENACAO = (UserRole.ADMIN, UserRole.COORDINATOR)


@dataclass(frozen=True)
class RegraFanout:
    """
    Regra de distribuição.

    Attributes:
        tipo: Tipo de notificação gerado
        destinatarios: Seleciona IDs interessados (None é descartado)
        titulo / mensagem / dados: Montam o conteúdo a partir do evento
        aplica: Predicado opcional; regra ignorada se retornar False
    """

    tipo: NotificationType
    destinatarios: Seletor
    titulo: Texto
    mensagem: Texto
    dados: Dados
    aplica: Optional[Callable[[Any], bool]] = None


# -----------------------------------------------------------------------------
# Seletores
# -----------------------------------------------------------------------------

def _criador_e_responsavel(evento, usuario_repo) -> List[Optional[str]]:
    return [evento.criador_id, evento.atribuido_a_id]


def _responsavel_e_criador(evento, usuario_repo) -> List[Optional[str]]:
    return [evento.atribuido_a_id, evento.criador_id]


def _criador(evento, usuario_repo) -> List[Optional[str]]:
    return [evento.criador_id]


def _coordenacao_exceto_criador(evento, usuario_repo) -> List[str]:
    return [
        u.id for u in usuario_repo.list_ativos(papeis=PAPEIS_COORDENACAO)
        if u.id != evento.criador_id
    ]


def _envolvidos_e_coordenacao(evento, usuario_repo) -> List[Optional[str]]:
    coordenacao = [u.id for u in usuario_repo.list_ativos(papeis=PAPEIS_COORDENACAO)]
    return [evento.criador_id, evento.atribuido_a_id] + coordenacao


def _interessados_no_comentario(evento, usuario_repo) -> List[Optional[str]]:
    """Comentário interno não chega a um criador sem papel de staff."""
    alvos: List[Optional[str]] = []
    if evento.interno:
        criador = usuario_repo.get_by_id(evento.criador_id)
        if criador and criador.is_staff:
            alvos.append(criador.id)
    else:
        alvos.append(evento.criador_id)
    alvos.append(evento.atribuido_a_id)
    return alvos


def _alvos_do_anuncio(evento, usuario_repo) -> List[str]:
    ativos = usuario_repo.list_ativos()
    if evento.usuarios_alvo:
        escolhidos = set(evento.usuarios_alvo)
        return [u.id for u in ativos if u.id in escolhidos]
    return [u.id for u in ativos]


# -----------------------------------------------------------------------------
# Conteúdo
# -----------------------------------------------------------------------------

def _dados_ticket(evento, **extras) -> Dict[str, Any]:
    dados = {"ticketId": evento.aggregate_id, "ticketTitle": evento.titulo}
    dados.update(extras)
    return dados


def _ref(evento) -> str:
    return f"#{evento.aggregate_id} - {evento.titulo}"


_VERBO_FECHAMENTO = {
    TicketStatus.RESOLVED.value: "resolvido",
    TicketStatus.CLOSED.value: "fechado",
    TicketStatus.CANCELLED.value: "cancelado",
}


def _status_para(*status: TicketStatus) -> Callable[[Any], bool]:
    valores = {s.value for s in status}
    return lambda evento: evento.status_novo in valores


REGRAS: Dict[str, List[RegraFanout]] = {
    "TicketCriadoEvent": [
        RegraFanout(
            tipo=NotificationType.TICKET_CREATED,
            destinatarios=_coordenacao_exceto_criador,
            titulo=lambda e: "Novo ticket criado",
            mensagem=lambda e: f"Ticket {_ref(e)} foi criado por {e.ator_nome}",
            dados=lambda e: _dados_ticket(e, createdById=e.criador_id, priority=e.prioridade),
        ),
    ],
    "TicketAtribuidoEvent": [
        RegraFanout(
            tipo=NotificationType.TICKET_ASSIGNED,
            destinatarios=_responsavel_e_criador,
            titulo=lambda e: "Ticket atribuído",
            mensagem=lambda e: f"O ticket {_ref(e)} foi encaminhado por {e.ator_nome}",
            dados=lambda e: _dados_ticket(e, assignedToId=e.atribuido_a_id, assignedById=e.ator_id),
        ),
    ],
    "TicketStatusAlteradoEvent": [
        RegraFanout(
            tipo=NotificationType.TICKET_UPDATED,
            destinatarios=_criador_e_responsavel,
            titulo=lambda e: "Status do ticket alterado",
            mensagem=lambda e: (
                f"O status do ticket #{e.aggregate_id} foi alterado de "
                f"{e.status_anterior} para {e.status_novo} por {e.ator_nome}"
            ),
            dados=lambda e: _dados_ticket(
                e, oldStatus=e.status_anterior, newStatus=e.status_novo, changedById=e.ator_id
            ),
        ),
        RegraFanout(
            tipo=NotificationType.TICKET_RESOLVED,
            destinatarios=_criador,
            titulo=lambda e: "Ticket resolvido",
            mensagem=lambda e: f"O ticket {_ref(e)} foi resolvido por {e.ator_nome}",
            dados=lambda e: _dados_ticket(e, closedById=e.ator_id),
            aplica=_status_para(TicketStatus.RESOLVED),
        ),
        RegraFanout(
            tipo=NotificationType.TICKET_CLOSED,
            destinatarios=_criador_e_responsavel,
            titulo=lambda e: "Ticket fechado",
            mensagem=lambda e: (
                f"O ticket {_ref(e)} foi {_VERBO_FECHAMENTO[e.status_novo]} por {e.ator_nome}"
            ),
            dados=lambda e: _dados_ticket(e, closedById=e.ator_id, newStatus=e.status_novo),
            aplica=_status_para(TicketStatus.CLOSED, TicketStatus.CANCELLED),
        ),
    ],
    "TicketAtualizadoEvent": [
        RegraFanout(
            tipo=NotificationType.TICKET_UPDATED,
            destinatarios=_criador_e_responsavel,
            titulo=lambda e: "Ticket atualizado",
            mensagem=lambda e: (
                f"O ticket {_ref(e)} foi atualizado por {e.ator_nome} ({', '.join(e.campos)})"
            ),
            dados=lambda e: _dados_ticket(e, fields=list(e.campos), updatedById=e.ator_id),
        ),
    ],
    "TicketComentadoEvent": [
        RegraFanout(
            tipo=NotificationType.TICKET_COMMENTED,
            destinatarios=_interessados_no_comentario,
            titulo=lambda e: "Novo comentário no ticket",
            mensagem=lambda e: f"{e.ator_nome} comentou no ticket {_ref(e)}",
            dados=lambda e: _dados_ticket(e, commentId=e.comentario_id, authorId=e.ator_id),
        ),
    ],
    "TicketAnexoAdicionadoEvent": [
        RegraFanout(
            tipo=NotificationType.TICKET_UPDATED,
            destinatarios=_envolvidos_e_coordenacao,
            titulo=lambda e: "Novo anexo no ticket",
            mensagem=lambda e: f"{e.ator_nome} adicionou um anexo no ticket {_ref(e)}",
            dados=lambda e: _dados_ticket(e, fileName=e.nome_arquivo, fileSize=e.tamanho),
        ),
    ],
    "AnuncioSistemaEvent": [
        RegraFanout(
            tipo=NotificationType.SYSTEM_ANNOUNCEMENT,
            destinatarios=_alvos_do_anuncio,
            titulo=lambda e: e.titulo,
            mensagem=lambda e: e.mensagem,
            dados=lambda e: {"announcementTitle": e.titulo, "announcementMessage": e.mensagem},
        ),
    ],
}


def _unicos(ids: Iterable[Optional[str]], excluir: Optional[str]) -> List[str]:
    vistos: List[str] = []
    for usuario_id in ids:
        if usuario_id and usuario_id != excluir and usuario_id not in vistos:
            vistos.append(usuario_id)
    return vistos


class NotificationFanout:
    """
    Distribuidor genérico de notificações a partir de Domain Events.

    Attributes:
        notificacao_repo: Destino do create_many
        usuario_repo: Consulta de papéis/usuários ativos para os seletores
        regras: Tabela evento -> regras (default REGRAS)
    """

    def __init__(
        self,
        notificacao_repo: NotificationRepository,
        usuario_repo: UsuarioRepository,
        regras: Optional[Dict[str, List[RegraFanout]]] = None,
    ):
        self.notificacao_repo = notificacao_repo
        self.usuario_repo = usuario_repo
        self.regras = regras if regras is not None else REGRAS

    def montar(self, evento: DomainEvent) -> List[NotificationEntity]:
        """Constrói as notificações do evento sem gravar nada."""
        relacionado_id = evento.aggregate_id if evento.aggregate_type == "Ticket" else None
        ator_id = getattr(evento, "ator_id", None)

        notificacoes: List[NotificationEntity] = []
        for regra in self.regras.get(evento.event_type, []):
            if regra.aplica is not None and not regra.aplica(evento):
                continue

            alvos = _unicos(regra.destinatarios(evento, self.usuario_repo), excluir=ator_id)
            if not alvos:
                continue

            titulo = regra.titulo(evento)
            mensagem = regra.mensagem(evento)
            dados = regra.dados(evento)
            notificacoes.extend(
                NotificationEntity.criar(
                    tipo=regra.tipo,
                    titulo=titulo,
                    mensagem=mensagem,
                    usuario_id=alvo,
                    relacionado_id=relacionado_id,
                    dados=dados,
                )
                for alvo in alvos
            )

        return notificacoes

    def distribuir(self, evento: DomainEvent) -> int:
        """
        Gera e grava as notificações do evento.

        Returns:
            Quantidade de notificações gravadas (0 em caso de falha)
        """
        try:
            notificacoes = self.montar(evento)
            if not notificacoes:
                return 0
            gravadas = self.notificacao_repo.create_many(notificacoes)
            logger.info(
                f"{gravadas} notificação(ões) geradas para {evento.event_type} "
                f"({evento.aggregate_id})"
            )
            return gravadas
        except Exception:
            logger.exception(
                f"Falha no fan-out de {evento.event_type} para {evento.aggregate_id}"
            )
            return 0

    __call__ = distribuir

    def registrar_em(self, publisher: EventPublisher, tipos: Optional[Iterable[str]] = None) -> None:
        """Registra o fan-out como handler de cada tipo de evento da tabela."""
        for event_type in tipos or self.regras.keys():
            publisher.register_handler(event_type, self.distribuir)
