"""
Repositórios Django do Helpdesk.

Implementam as interfaces (Ports) definidas no Core.
São DRIVEN ADAPTERS - acionados pelo Core em resposta a operações.

Responsabilidades:
- Mapear entities para models e vice-versa (via Mappers)
- Sanitizar todo payload antes de escrever
- Executar queries no banco via ORM dentro de persistence_operation
- Evitar N+1 nas listagens

Princípios:
- Repository não contém lógica de negócio
- Usa Mapper para conversões
- Trata apenas persistência
"""

from typing import Dict, Iterable, List, Optional, Tuple
import logging

from django.db.models import Count, Q
from django.utils import timezone

from helpdesk.core.accounts.entities import UserEntity, UserRole
from helpdesk.core.notifications.entities import NotificationEntity
from helpdesk.core.shared.pagination import Paginacao
from helpdesk.core.shared.sanitization import sanitizar_dados
from helpdesk.core.tickets.entities import AttachmentEntity, CommentEntity, TicketEntity
from helpdesk.core.tickets.ports import FiltroTickets

from ..shared.database import persistence_operation
from .mappers import (
    AnexoMapper,
    ComentarioMapper,
    NotificationMapper,
    TicketMapper,
    UsuarioMapper,
)
from .models import (
    AttachmentModel,
    CommentModel,
    NotificationModel,
    TicketModel,
    UsuarioModel,
)

logger = logging.getLogger(__name__)


class DjangoUsuarioRepository:
    """Implementação Django do UsuarioRepository."""

    def save(self, usuario: UserEntity) -> None:
        dados = UsuarioMapper.to_model_data(usuario)
        senha_hash = dados.pop('senha_hash')
        dados = sanitizar_dados(dados)
        dados['senha_hash'] = senha_hash

        with persistence_operation("User", "save"):
            UsuarioModel.objects.update_or_create(id=usuario.id, defaults=dados)

        logger.debug(f"Usuário salvo: {usuario.id}")

    def get_by_id(self, usuario_id: str) -> Optional[UserEntity]:
        with persistence_operation("User", "get_by_id"):
            model = UsuarioModel.objects.filter(id=usuario_id).first()
        return UsuarioMapper.to_entity(model) if model else None

    def get_by_email(self, email: str) -> Optional[UserEntity]:
        email = UserEntity.normalizar_email(email)
        with persistence_operation("User", "get_by_email"):
            model = UsuarioModel.objects.filter(email=email).first()
        return UsuarioMapper.to_entity(model) if model else None

    def list_by_ids(self, ids: Iterable[str]) -> List[UserEntity]:
        ids = list(ids)
        if not ids:
            return []
        with persistence_operation("User", "list_by_ids"):
            return UsuarioMapper.to_entity_list(UsuarioModel.objects.filter(id__in=ids))

    def list_ativos(self, papeis: Optional[Iterable[UserRole]] = None) -> List[UserEntity]:
        queryset = UsuarioModel.objects.filter(ativo=True)
        if papeis is not None:
            queryset = queryset.filter(papel__in=[p.value for p in papeis])

        with persistence_operation("User", "list_ativos"):
            return UsuarioMapper.to_entity_list(queryset.order_by('nome'))

    def list_filtrado(
        self,
        papel: Optional[UserRole],
        ativo: Optional[bool],
        busca: Optional[str],
        paginacao: Paginacao,
    ) -> Tuple[List[UserEntity], int]:
        queryset = UsuarioModel.objects.all()

        if papel is not None:
            queryset = queryset.filter(papel=papel.value)
        if ativo is not None:
            queryset = queryset.filter(ativo=ativo)
        if busca:
            queryset = queryset.filter(Q(nome__icontains=busca) | Q(email__icontains=busca))

        queryset = queryset.order_by('-criado_em')

        with persistence_operation("User", "list_filtrado"):
            total = queryset.count()
            pagina = queryset[paginacao.offset:paginacao.offset + paginacao.limite]
            return UsuarioMapper.to_entity_list(pagina), total

    def count(self, ativo: Optional[bool] = None, papel: Optional[UserRole] = None) -> int:
        queryset = UsuarioModel.objects.all()
        if ativo is not None:
            queryset = queryset.filter(ativo=ativo)
        if papel is not None:
            queryset = queryset.filter(papel=papel.value)

        with persistence_operation("User", "count"):
            return queryset.count()


class DjangoTicketRepository:
    """
    Implementação Django do TicketRepository.

    Example:
        repo = DjangoTicketRepository()
        repo.save(ticket_entity)
        ticket = repo.get_by_id("uuid-here")
    """

    _CAMPOS = {
        "status": "status",
        "prioridade": "prioridade",
        "categoria": "categoria",
    }

    def save(self, ticket: TicketEntity) -> None:
        """
        Persiste ticket (create ou update).

        Note:
            Usa update_or_create; última escrita vence
        """
        dados = sanitizar_dados(TicketMapper.to_model_data(ticket))

        with persistence_operation("Ticket", "save"):
            TicketModel.objects.update_or_create(id=ticket.id, defaults=dados)

        logger.debug(f"Ticket saved: {ticket.id}")

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        with persistence_operation("Ticket", "get_by_id"):
            model = TicketModel.objects.filter(id=ticket_id).first()

        if model is None:
            logger.debug(f"Ticket not found: {ticket_id}")
            return None
        return TicketMapper.to_entity(model)

    def delete(self, ticket_id: str) -> None:
        """Remove ticket (comentários e anexos via CASCADE)."""
        with persistence_operation("Ticket", "delete"):
            deleted_count, _ = TicketModel.objects.filter(id=ticket_id).delete()

        if deleted_count > 0:
            logger.info(f"Ticket deleted: {ticket_id}")

    def list_filtrado(
        self,
        filtro: FiltroTickets,
        paginacao: Paginacao,
    ) -> Tuple[List[TicketEntity], int]:
        queryset = TicketModel.objects.all()

        if filtro.visivel_para_id:
            queryset = queryset.filter(
                Q(criador_id=filtro.visivel_para_id) | Q(atribuido_a_id=filtro.visivel_para_id)
            )
        if filtro.status:
            queryset = queryset.filter(status=filtro.status.value)
        if filtro.prioridade:
            queryset = queryset.filter(prioridade=filtro.prioridade.value)
        if filtro.categoria:
            queryset = queryset.filter(categoria=filtro.categoria)
        if filtro.criador_id:
            queryset = queryset.filter(criador_id=filtro.criador_id)
        if filtro.atribuido_a_id:
            queryset = queryset.filter(atribuido_a_id=filtro.atribuido_a_id)
        if filtro.busca:
            queryset = queryset.filter(
                Q(titulo__icontains=filtro.busca)
                | Q(descricao__icontains=filtro.busca)
                | Q(criador__nome__icontains=filtro.busca)
            )

        queryset = queryset.order_by('-criado_em')

        with persistence_operation("Ticket", "list_filtrado"):
            total = queryset.count()
            pagina = queryset[paginacao.offset:paginacao.offset + paginacao.limite]
            return TicketMapper.to_entity_list(pagina), total

    def count(self) -> int:
        with persistence_operation("Ticket", "count"):
            return TicketModel.objects.count()

    def contar_por(self, campo: str) -> Dict[str, int]:
        """
        Conta tickets agrupados por status, prioridade ou categoria.

        Returns:
            Dicionário {valor: quantidade}
        """
        coluna = self._CAMPOS[campo]
        with persistence_operation("Ticket", f"contar_por_{campo}"):
            linhas = (
                TicketModel.objects
                .order_by()
                .values(coluna)
                .annotate(total=Count('id'))
            )
            return {linha[coluna]: linha['total'] for linha in linhas}

    def media_resolucao_horas(self) -> float:
        with persistence_operation("Ticket", "media_resolucao"):
            intervalos = list(
                TicketModel.objects
                .filter(fechado_em__isnull=False)
                .values_list('criado_em', 'fechado_em')
            )

        if not intervalos:
            return 0.0
        horas = [(fechado - criado).total_seconds() / 3600 for criado, fechado in intervalos]
        return sum(horas) / len(horas)


class DjangoComentarioRepository:
    def save(self, comentario: CommentEntity) -> None:
        dados = sanitizar_dados(ComentarioMapper.to_model_data(comentario))
        with persistence_operation("Comment", "save"):
            CommentModel.objects.update_or_create(id=comentario.id, defaults=dados)

    def get_by_id(self, comentario_id: str) -> Optional[CommentEntity]:
        with persistence_operation("Comment", "get_by_id"):
            model = CommentModel.objects.filter(id=comentario_id).first()
        return ComentarioMapper.to_entity(model) if model else None

    def delete(self, comentario_id: str) -> None:
        with persistence_operation("Comment", "delete"):
            CommentModel.objects.filter(id=comentario_id).delete()

    def list_by_ticket(self, ticket_id: str, incluir_internos: bool = True) -> List[CommentEntity]:
        queryset = CommentModel.objects.filter(ticket_id=ticket_id)
        if not incluir_internos:
            queryset = queryset.filter(interno=False)

        with persistence_operation("Comment", "list_by_ticket"):
            return [ComentarioMapper.to_entity(m) for m in queryset.order_by('criado_em')]

    def delete_by_ticket(self, ticket_id: str) -> None:
        with persistence_operation("Comment", "delete_by_ticket"):
            CommentModel.objects.filter(ticket_id=ticket_id).delete()


class DjangoAnexoRepository:
    def save(self, anexo: AttachmentEntity) -> None:
        dados = sanitizar_dados(AnexoMapper.to_model_data(anexo))
        with persistence_operation("Attachment", "save"):
            AttachmentModel.objects.update_or_create(id=anexo.id, defaults=dados)

    def get_by_id(self, anexo_id: str) -> Optional[AttachmentEntity]:
        with persistence_operation("Attachment", "get_by_id"):
            model = AttachmentModel.objects.filter(id=anexo_id).first()
        return AnexoMapper.to_entity(model) if model else None

    def delete(self, anexo_id: str) -> None:
        with persistence_operation("Attachment", "delete"):
            AttachmentModel.objects.filter(id=anexo_id).delete()

    def list_by_ticket(self, ticket_id: str) -> List[AttachmentEntity]:
        with persistence_operation("Attachment", "list_by_ticket"):
            return [
                AnexoMapper.to_entity(m)
                for m in AttachmentModel.objects.filter(ticket_id=ticket_id).order_by('criado_em')
            ]

    def delete_by_ticket(self, ticket_id: str) -> None:
        with persistence_operation("Attachment", "delete_by_ticket"):
            AttachmentModel.objects.filter(ticket_id=ticket_id).delete()


class DjangoNotificationRepository:
    """
    Implementação Django do NotificationRepository.

    create_many usa um único bulk_create por lote.
    """

    def create_many(self, notificacoes: Iterable[NotificationEntity]) -> int:
        models = []
        for notificacao in notificacoes:
            model = NotificationMapper.to_model(notificacao)
            model.titulo = sanitizar_dados(model.titulo)
            model.mensagem = sanitizar_dados(model.mensagem)
            model.dados = sanitizar_dados(model.dados)
            models.append(model)

        if not models:
            return 0

        with persistence_operation("Notification", "create_many"):
            NotificationModel.objects.bulk_create(models)
        return len(models)

    def list_by_user(
        self,
        usuario_id: str,
        apenas_nao_lidas: bool = False,
        limite: int = 20,
    ) -> List[NotificationEntity]:
        queryset = NotificationModel.objects.filter(usuario_id=usuario_id)
        if apenas_nao_lidas:
            queryset = queryset.filter(lida=False)

        with persistence_operation("Notification", "list_by_user"):
            return [
                NotificationMapper.to_entity(m)
                for m in queryset.order_by('-criado_em')[:limite]
            ]

    def count_unread(self, usuario_id: str) -> int:
        with persistence_operation("Notification", "count_unread"):
            return NotificationModel.objects.filter(usuario_id=usuario_id, lida=False).count()

    def mark_read(self, notificacao_id: str, usuario_id: str) -> Optional[NotificationEntity]:
        with persistence_operation("Notification", "mark_read"):
            model = NotificationModel.objects.filter(id=notificacao_id, usuario_id=usuario_id).first()
            if model is None:
                return None

            entity = NotificationMapper.to_entity(model)
            entity.marcar_como_lida()
            NotificationModel.objects.filter(id=model.id).update(lida=True, lida_em=entity.lida_em)
        return entity

    def mark_all_read(self, usuario_id: str) -> int:
        with persistence_operation("Notification", "mark_all_read"):
            return NotificationModel.objects.filter(usuario_id=usuario_id, lida=False).update(
                lida=True, lida_em=timezone.now()
            )

    def delete_by_related(self, relacionado_id: str) -> None:
        with persistence_operation("Notification", "delete_by_related"):
            NotificationModel.objects.filter(relacionado_id=relacionado_id).delete()
