"""
Dependency Injection Container.

Configura e gerencia todas as dependências da aplicação.
Usa dependency-injector para lazy-loading e injeção automática.

Padrões:
- Singleton: Uma instância para toda app (repositories, gate, publisher)
- Factory: Nova instância por chamada (services, UoW)
- Configuration: modo do publisher (sync | celery)

O publisher síncrono recebe o NotificationFanout como handler de
todos os eventos da tabela de regras; no modo celery o fan-out roda
no worker (events.handlers.dispatch_domain_event).
"""

from typing import Optional

from dependency_injector import containers, providers
from django.conf import settings

from helpdesk.adapters.django_app.events.publishers import get_event_publisher
from helpdesk.adapters.django_app.shared.hashers import DjangoPasswordHasher
from helpdesk.adapters.django_app.shared.unit_of_work import (
    DjangoUnitOfWork,
    InMemoryUnitOfWork,
)
from helpdesk.adapters.django_app.tickets.repositories import (
    DjangoAnexoRepository,
    DjangoComentarioRepository,
    DjangoNotificationRepository,
    DjangoTicketRepository,
    DjangoUsuarioRepository,
)
from helpdesk.core.accounts import use_cases as accounts
from helpdesk.core.accounts.ports import FakePasswordHasher, InMemoryUsuarioRepository
from helpdesk.core.authorization.gate import AuthorizationGate
from helpdesk.core.notifications import use_cases as notifications
from helpdesk.core.notifications.fanout import NotificationFanout
from helpdesk.core.notifications.ports import InMemoryNotificationRepository
from helpdesk.core.shared.interfaces import EventPublisher
from helpdesk.core.tickets import use_cases as tickets
from helpdesk.core.tickets.ports import (
    InMemoryAnexoRepository,
    InMemoryComentarioRepository,
    InMemoryTicketRepository,
)


def montar_event_publisher(modo: Optional[str], fanout: NotificationFanout) -> EventPublisher:
    """Cria o publisher do modo configurado e registra o fan-out no modo sync."""
    usar_celery = modo == 'celery'
    publisher = get_event_publisher(use_celery=usar_celery)
    if not usar_celery:
        fanout.registrar_em(publisher)
    return publisher


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organização:
    - Configuration: Variáveis de ambiente/settings
    - Repositories: Persistência
    - Infrastructure: Gate, hasher, fan-out, publisher
    - Unit of Work: Transações
    - Services: Use Cases

    Example:
        container = get_container()
        service = container.criar_ticket_service()
        result = service.execute(input_dto, ator)
    """

    config = providers.Configuration()

    # =========================================================================
    # Repositories (Singleton - uma instância por app)
    # =========================================================================

    usuario_repository = providers.Singleton(DjangoUsuarioRepository)
    ticket_repository = providers.Singleton(DjangoTicketRepository)
    comentario_repository = providers.Singleton(DjangoComentarioRepository)
    anexo_repository = providers.Singleton(DjangoAnexoRepository)
    notification_repository = providers.Singleton(DjangoNotificationRepository)

    # =========================================================================
    # Infrastructure
    # =========================================================================

    authorization_gate = providers.Singleton(AuthorizationGate)
    password_hasher = providers.Singleton(DjangoPasswordHasher)

    notification_fanout = providers.Singleton(
        NotificationFanout,
        notificacao_repo=notification_repository,
        usuario_repo=usuario_repository,
    )

    event_publisher = providers.Singleton(
        montar_event_publisher,
        modo=config.event_publisher_mode,
        fanout=notification_fanout,
    )

    # =========================================================================
    # Unit of Work (Factory - nova instância por operação)
    # =========================================================================

    unit_of_work = providers.Factory(DjangoUnitOfWork, event_publisher=event_publisher)

    # =========================================================================
    # Services - Contas
    # =========================================================================

    autenticar_usuario_service = providers.Factory(
        accounts.AutenticarUsuarioService,
        usuario_repo=usuario_repository,
        hasher=password_hasher,
    )

    listar_usuarios_service = providers.Factory(
        accounts.ListarUsuariosService,
        usuario_repo=usuario_repository,
        gate=authorization_gate,
    )

    criar_usuario_service = providers.Factory(
        accounts.CriarUsuarioService,
        usuario_repo=usuario_repository,
        hasher=password_hasher,
        uow=unit_of_work,
        gate=authorization_gate,
    )

    desativar_usuario_service = providers.Factory(
        accounts.DesativarUsuarioService,
        usuario_repo=usuario_repository,
        uow=unit_of_work,
        gate=authorization_gate,
    )

    alterar_papel_service = providers.Factory(
        accounts.AlterarPapelService,
        usuario_repo=usuario_repository,
        uow=unit_of_work,
        gate=authorization_gate,
    )

    listar_contatos_suporte_service = providers.Factory(
        accounts.ListarContatosSuporteService,
        usuario_repo=usuario_repository,
        gate=authorization_gate,
    )

    # =========================================================================
    # Services - Tickets
    # =========================================================================

    criar_ticket_service = providers.Factory(
        tickets.CriarTicketService,
        ticket_repo=ticket_repository,
        usuario_repo=usuario_repository,
        hasher=password_hasher,
        uow=unit_of_work,
        gate=authorization_gate,
    )

    atualizar_ticket_service = providers.Factory(
        tickets.AtualizarTicketService,
        ticket_repo=ticket_repository,
        usuario_repo=usuario_repository,
        uow=unit_of_work,
        gate=authorization_gate,
    )

    alterar_status_service = providers.Factory(
        tickets.AlterarStatusService,
        ticket_repo=ticket_repository,
        usuario_repo=usuario_repository,
        uow=unit_of_work,
        gate=authorization_gate,
    )

    atribuir_ticket_service = providers.Factory(
        tickets.AtribuirTicketService,
        ticket_repo=ticket_repository,
        usuario_repo=usuario_repository,
        uow=unit_of_work,
        gate=authorization_gate,
    )

    responder_ticket_service = providers.Factory(
        tickets.ResponderTicketService,
        ticket_repo=ticket_repository,
        comentario_repo=comentario_repository,
        usuario_repo=usuario_repository,
        uow=unit_of_work,
        gate=authorization_gate,
    )

    adicionar_comentario_service = providers.Factory(
        tickets.AdicionarComentarioService,
        ticket_repo=ticket_repository,
        comentario_repo=comentario_repository,
        usuario_repo=usuario_repository,
        uow=unit_of_work,
        gate=authorization_gate,
    )

    listar_comentarios_service = providers.Factory(
        tickets.ListarComentariosService,
        ticket_repo=ticket_repository,
        comentario_repo=comentario_repository,
        usuario_repo=usuario_repository,
        gate=authorization_gate,
    )

    editar_comentario_service = providers.Factory(
        tickets.EditarComentarioService,
        comentario_repo=comentario_repository,
        usuario_repo=usuario_repository,
        uow=unit_of_work,
        gate=authorization_gate,
    )

    excluir_comentario_service = providers.Factory(
        tickets.ExcluirComentarioService,
        comentario_repo=comentario_repository,
        uow=unit_of_work,
        gate=authorization_gate,
    )

    adicionar_anexo_service = providers.Factory(
        tickets.AdicionarAnexoService,
        ticket_repo=ticket_repository,
        anexo_repo=anexo_repository,
        uow=unit_of_work,
        gate=authorization_gate,
    )

    listar_anexos_service = providers.Factory(
        tickets.ListarAnexosService,
        ticket_repo=ticket_repository,
        anexo_repo=anexo_repository,
        gate=authorization_gate,
    )

    obter_anexo_service = providers.Factory(
        tickets.ObterAnexoService,
        ticket_repo=ticket_repository,
        anexo_repo=anexo_repository,
        gate=authorization_gate,
    )

    excluir_anexo_service = providers.Factory(
        tickets.ExcluirAnexoService,
        anexo_repo=anexo_repository,
        uow=unit_of_work,
        gate=authorization_gate,
    )

    excluir_ticket_service = providers.Factory(
        tickets.ExcluirTicketService,
        ticket_repo=ticket_repository,
        comentario_repo=comentario_repository,
        anexo_repo=anexo_repository,
        notificacao_repo=notification_repository,
        uow=unit_of_work,
        gate=authorization_gate,
    )

    # Leitura (sem UoW)
    listar_tickets_service = providers.Factory(
        tickets.ListarTicketsService,
        ticket_repo=ticket_repository,
        usuario_repo=usuario_repository,
        gate=authorization_gate,
    )

    obter_ticket_service = providers.Factory(
        tickets.ObterTicketService,
        ticket_repo=ticket_repository,
        usuario_repo=usuario_repository,
        gate=authorization_gate,
    )

    estatisticas_dashboard_service = providers.Factory(
        tickets.EstatisticasDashboardService,
        ticket_repo=ticket_repository,
        usuario_repo=usuario_repository,
    )

    # =========================================================================
    # Services - Notificações
    # =========================================================================

    listar_notificacoes_service = providers.Factory(
        notifications.ListarNotificacoesService,
        notificacao_repo=notification_repository,
    )

    marcar_notificacao_lida_service = providers.Factory(
        notifications.MarcarNotificacaoLidaService,
        notificacao_repo=notification_repository,
        uow=unit_of_work,
    )

    marcar_todas_lidas_service = providers.Factory(
        notifications.MarcarTodasLidasService,
        notificacao_repo=notification_repository,
        uow=unit_of_work,
    )

    criar_anuncio_service = providers.Factory(
        notifications.CriarAnuncioService,
        notificacao_repo=notification_repository,
        fanout=notification_fanout,
        uow=unit_of_work,
        gate=authorization_gate,
    )


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def get_container() -> Container:
    """
    Retorna instância global do container.

    Cria se não existir (lazy initialization), lendo
    EVENT_PUBLISHER_MODE dos settings.
    """
    global _container

    if _container is None:
        _container = Container()
        _container.config.from_dict({
            'event_publisher_mode': getattr(settings, 'EVENT_PUBLISHER_MODE', 'sync'),
        })

    return _container


def reset_container() -> None:
    """Reset do container (para testes)."""
    global _container
    _container = None


# =============================================================================
# Container em memória
# =============================================================================

def criar_container_em_memoria() -> Container:
    """
    Container com implementações InMemory e publisher síncrono.

    Usado em testes de views e no fluxo completo sem banco.

    Example:
        container = criar_container_em_memoria()
        container.usuario_repository().save(admin)
    """
    container = Container()
    container.config.from_dict({'event_publisher_mode': 'sync'})

    container.usuario_repository.override(providers.Singleton(InMemoryUsuarioRepository))
    container.ticket_repository.override(
        providers.Singleton(InMemoryTicketRepository, usuario_repo=container.usuario_repository)
    )
    container.comentario_repository.override(providers.Singleton(InMemoryComentarioRepository))
    container.anexo_repository.override(providers.Singleton(InMemoryAnexoRepository))
    container.notification_repository.override(providers.Singleton(InMemoryNotificationRepository))
    container.password_hasher.override(providers.Singleton(FakePasswordHasher))
    container.unit_of_work.override(
        providers.Factory(InMemoryUnitOfWork, event_publisher=container.event_publisher)
    )

    return container
