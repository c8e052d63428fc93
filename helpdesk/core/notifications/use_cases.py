"""
Use Cases do Domínio de Notificações.

Use Cases implementados:
- ListarNotificacoesService: Notificações do usuário + não lidas
- MarcarNotificacaoLidaService: Marca uma notificação do próprio usuário
- MarcarTodasLidasService: Marca todas as não lidas do usuário
- CriarAnuncioService: Anúncio do sistema (ADMIN)

A notificação pertence ao usuário alvo: toda consulta usa o ID do ator.
"""

import logging
import uuid

from helpdesk.core.authorization.gate import Ator, AuthorizationGate, Operacao
from helpdesk.core.shared.exceptions import EntityNotFoundError, ValidationError
from helpdesk.core.shared.interfaces import UnitOfWork

from .dtos import CriarAnuncioInputDTO, ListaNotificacoesDTO, NotificacaoOutputDTO
from .events import AnuncioSistemaEvent
from .fanout import NotificationFanout
from .ports import NotificationRepository

logger = logging.getLogger(__name__)

LIMITE_PADRAO = 20
LIMITE_MAXIMO = 100


class ListarNotificacoesService:
    """Use Case: Listar notificações do usuário autenticado."""

    def __init__(self, notificacao_repo: NotificationRepository):
        self.notificacao_repo = notificacao_repo

    def execute(
        self,
        ator: Ator,
        limite: int = LIMITE_PADRAO,
        apenas_nao_lidas: bool = False,
    ) -> ListaNotificacoesDTO:
        """
        Raises:
            ValidationError: Se limite fora de 1..100
        """
        try:
            limite = int(limite)
        except (TypeError, ValueError):
            raise ValidationError("Limite inválido", field="limit")

        if limite < 1 or limite > LIMITE_MAXIMO:
            raise ValidationError(
                f"Limite deve estar entre 1 e {LIMITE_MAXIMO}",
                field="limit"
            )

        notificacoes = self.notificacao_repo.list_by_user(
            ator.id, apenas_nao_lidas=apenas_nao_lidas, limite=limite
        )
        return ListaNotificacoesDTO(
            items=[NotificacaoOutputDTO.from_entity(n) for n in notificacoes],
            nao_lidas=self.notificacao_repo.count_unread(ator.id),
        )


class MarcarNotificacaoLidaService:
    """Use Case: Marcar uma notificação como lida."""

    def __init__(self, notificacao_repo: NotificationRepository, uow: UnitOfWork):
        self.notificacao_repo = notificacao_repo
        self.uow = uow

    def execute(self, notificacao_id: str, ator: Ator) -> NotificacaoOutputDTO:
        """
        Raises:
            EntityNotFoundError: Se não existe ou pertence a outro usuário
        """
        if not notificacao_id:
            raise ValidationError("ID da notificação é obrigatório", field="notificationId")

        with self.uow:
            notificacao = self.notificacao_repo.mark_read(notificacao_id, ator.id)
            if notificacao is None:
                raise EntityNotFoundError(
                    "Notificação não encontrada",
                    entity_type="Notification",
                    entity_id=notificacao_id,
                )

        return NotificacaoOutputDTO.from_entity(notificacao)


class MarcarTodasLidasService:
    """Use Case: Marcar todas as notificações do usuário como lidas."""

    def __init__(self, notificacao_repo: NotificationRepository, uow: UnitOfWork):
        self.notificacao_repo = notificacao_repo
        self.uow = uow

    def execute(self, ator: Ator) -> int:
        with self.uow:
            marcadas = self.notificacao_repo.mark_all_read(ator.id)
        return marcadas


class CriarAnuncioService:
    """
    Use Case: Anúncio do sistema.

    Usa a mesma tabela do fan-out para montar as notificações, mas grava
    dentro da própria transação: aqui uma falha chega ao chamador.
    """

    def __init__(
        self,
        notificacao_repo: NotificationRepository,
        fanout: NotificationFanout,
        uow: UnitOfWork,
        gate: AuthorizationGate,
    ):
        self.notificacao_repo = notificacao_repo
        self.fanout = fanout
        self.uow = uow
        self.gate = gate

    def execute(self, input_dto: CriarAnuncioInputDTO, ator: Ator) -> int:
        """
        Returns:
            Quantidade de usuários notificados

        Raises:
            ForbiddenError: Se ator não é ADMIN
            ValidationError: Se título ou mensagem vazios
        """
        self.gate.exigir(ator, Operacao.ANUNCIAR)

        if not (input_dto.titulo or "").strip():
            raise ValidationError("Título é obrigatório", field="title")
        if not (input_dto.mensagem or "").strip():
            raise ValidationError("Mensagem é obrigatória", field="message")

        evento = AnuncioSistemaEvent(
            aggregate_id=str(uuid.uuid4()),
            titulo=input_dto.titulo.strip(),
            mensagem=input_dto.mensagem.strip(),
            usuarios_alvo=list(input_dto.usuarios_alvo),
            ator_id=ator.id,
            ator_nome=ator.nome,
        )

        with self.uow:
            notificacoes = self.fanout.montar(evento)
            enviadas = self.notificacao_repo.create_many(notificacoes) if notificacoes else 0

        logger.info(f"Anúncio '{evento.titulo}' enviado a {enviadas} usuário(s) por {ator.id}")
        return enviadas
