"""
Mappers para conversão entre Entities (Core) e Models (Django).

Responsabilidades:
- Entity -> dict de campos do model (payload do update_or_create)
- Model -> Entity (para uso no Core)

Princípios:
- Mappers são stateless
- Não contêm lógica de negócio
- Tratam apenas conversão de dados
"""

from typing import Any, Dict, Iterable, List

from helpdesk.core.accounts.entities import UserEntity, UserRole
from helpdesk.core.notifications.entities import NotificationEntity, NotificationType
from helpdesk.core.tickets.entities import (
    AttachmentEntity,
    CommentEntity,
    TicketEntity,
    TicketPriority,
    TicketStatus,
)

from .models import (
    AttachmentModel,
    CommentModel,
    NotificationModel,
    TicketModel,
    UsuarioModel,
)


class UsuarioMapper:
    """Mapper entre UserEntity e UsuarioModel."""

    @staticmethod
    def to_model_data(entity: UserEntity) -> Dict[str, Any]:
        return {
            'nome': entity.nome,
            'email': entity.email,
            'senha_hash': entity.senha_hash,
            'papel': entity.papel.value,
            'ativo': entity.ativo,
            'matricula': entity.matricula,
            'telefone': entity.telefone,
            'setor': entity.setor,
            'data_admissao': entity.data_admissao,
            'criado_em': entity.criado_em,
            'atualizado_em': entity.atualizado_em,
        }

    @staticmethod
    def to_entity(model: UsuarioModel) -> UserEntity:
        return UserEntity(
            id=model.id,
            nome=model.nome,
            email=model.email,
            senha_hash=model.senha_hash,
            papel=UserRole(model.papel),
            ativo=model.ativo,
            matricula=model.matricula,
            telefone=model.telefone,
            setor=model.setor,
            data_admissao=model.data_admissao,
            criado_em=model.criado_em,
            atualizado_em=model.atualizado_em,
        )

    @staticmethod
    def to_entity_list(models: Iterable[UsuarioModel]) -> List[UserEntity]:
        return [UsuarioMapper.to_entity(model) for model in models]


class TicketMapper:
    """
    Mapper para conversão entre TicketEntity e TicketModel.

    - to_model_data(): Entity -> campos do model
    - to_entity(): Model -> Entity
    - to_entity_list(): List[Model] -> List[Entity]
    """

    @staticmethod
    def to_model_data(entity: TicketEntity) -> Dict[str, Any]:
        """
        Converte TicketEntity para o payload do update_or_create.

        Note:
            Não chama .save() - deixa isso para o Repository
        """
        return {
            'titulo': entity.titulo,
            'descricao': entity.descricao,
            'categoria': entity.categoria,
            'status': entity.status.value,
            'prioridade': entity.prioridade.value,
            'criador_id': entity.criador_id,
            'atribuido_a_id': entity.atribuido_a_id,
            'tags': list(entity.tags),
            'criado_em': entity.criado_em,
            'atualizado_em': entity.atualizado_em,
            'fechado_em': entity.fechado_em,
        }

    @staticmethod
    def to_entity(model: TicketModel) -> TicketEntity:
        """
        Converte TicketModel para TicketEntity.

        Note:
            Bypassa validações do factory method .criar()
            pois dados já foram validados na criação original
        """
        return TicketEntity(
            id=model.id,
            titulo=model.titulo,
            descricao=model.descricao,
            categoria=model.categoria,
            status=TicketStatus(model.status),
            prioridade=TicketPriority(model.prioridade),
            criador_id=model.criador_id,
            atribuido_a_id=model.atribuido_a_id,
            tags=list(model.tags) if model.tags else [],
            criado_em=model.criado_em,
            atualizado_em=model.atualizado_em,
            fechado_em=model.fechado_em,
        )

    @staticmethod
    def to_entity_list(models: Iterable[TicketModel]) -> List[TicketEntity]:
        return [TicketMapper.to_entity(model) for model in models]


class ComentarioMapper:
    @staticmethod
    def to_model_data(entity: CommentEntity) -> Dict[str, Any]:
        return {
            'ticket_id': entity.ticket_id,
            'autor_id': entity.autor_id,
            'conteudo': entity.conteudo,
            'interno': entity.interno,
            'criado_em': entity.criado_em,
        }

    @staticmethod
    def to_entity(model: CommentModel) -> CommentEntity:
        return CommentEntity(
            id=model.id,
            ticket_id=model.ticket_id,
            autor_id=model.autor_id,
            conteudo=model.conteudo,
            interno=model.interno,
            criado_em=model.criado_em,
        )


class AnexoMapper:
    @staticmethod
    def to_model_data(entity: AttachmentEntity) -> Dict[str, Any]:
        return {
            'ticket_id': entity.ticket_id,
            'enviado_por_id': entity.enviado_por_id,
            'nome_arquivo': entity.nome_arquivo,
            'caminho': entity.caminho,
            'tamanho': entity.tamanho,
            'criado_em': entity.criado_em,
        }

    @staticmethod
    def to_entity(model: AttachmentModel) -> AttachmentEntity:
        return AttachmentEntity(
            id=model.id,
            ticket_id=model.ticket_id,
            enviado_por_id=model.enviado_por_id,
            nome_arquivo=model.nome_arquivo,
            caminho=model.caminho,
            tamanho=model.tamanho,
            criado_em=model.criado_em,
        )


class NotificationMapper:
    """Mapper entre NotificationEntity e NotificationModel."""

    @staticmethod
    def to_model(entity: NotificationEntity) -> NotificationModel:
        """Instância não salva, para bulk_create."""
        return NotificationModel(
            id=entity.id,
            tipo=entity.tipo.value,
            titulo=entity.titulo,
            mensagem=entity.mensagem,
            usuario_id=entity.usuario_id,
            relacionado_id=entity.relacionado_id,
            dados=entity.dados,
            lida=entity.lida,
            lida_em=entity.lida_em,
            criado_em=entity.criado_em,
        )

    @staticmethod
    def to_entity(model: NotificationModel) -> NotificationEntity:
        return NotificationEntity(
            id=model.id,
            tipo=NotificationType(model.tipo),
            titulo=model.titulo,
            mensagem=model.mensagem,
            usuario_id=model.usuario_id,
            relacionado_id=model.relacionado_id,
            dados=dict(model.dados or {}),
            lida=model.lida,
            lida_em=model.lida_em,
            criado_em=model.criado_em,
        )
