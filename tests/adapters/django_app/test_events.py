"""
Testes dos publishers de eventos e do dispatcher Celery.

Coverage:
- Entrega aos handlers registrados (sync e em memória)
- Handler com erro não interrompe os demais
- CeleryEventPublisher: .delay com payload serializado, broker fora
- dispatch_domain_event: reconstrução do evento e fan-out; sem retry
"""

import logging
from unittest.mock import Mock, patch

import pytest

from helpdesk.adapters.django_app.events.handlers import dispatch_domain_event
from helpdesk.adapters.django_app.events.publishers import (
    CeleryEventPublisher,
    InMemoryEventPublisher,
    LoggingEventPublisher,
    get_event_publisher,
)
from helpdesk.config.container import criar_container_em_memoria, montar_event_publisher
from helpdesk.core.accounts.entities import UserEntity, UserRole
from helpdesk.core.notifications.entities import NotificationType
from helpdesk.core.tickets.events import TicketCriadoEvent, TicketStatusAlteradoEvent


def _evento(**kwargs):
    dados = dict(aggregate_id="ticket-1", titulo="Erro de login", criador_id="u1", ator_id="u1")
    dados.update(kwargs)
    return TicketCriadoEvent(**dados)


class TestPublishers:

    def test_in_memory_guarda_e_despacha(self):
        publisher = InMemoryEventPublisher()
        handler = Mock()
        publisher.register_handler("TicketCriadoEvent", handler)

        evento = _evento()
        publisher.publish(evento)
        publisher.publish(TicketStatusAlteradoEvent(aggregate_id="ticket-1", status_novo="CLOSED"))

        handler.assert_called_once_with(evento)
        assert len(publisher.get_events_by_type("TicketCriadoEvent")) == 1

        publisher.clear()
        assert publisher.published_events == []

    def test_logging_publisher_loga_e_despacha(self, caplog):
        publisher = LoggingEventPublisher()
        handler = Mock()
        publisher.register_handler("TicketCriadoEvent", handler)

        with caplog.at_level(logging.INFO):
            publisher.publish(_evento())

        handler.assert_called_once()
        assert "[EVENT] TicketCriadoEvent" in caplog.text

    def test_handler_com_erro_nao_bloqueia_os_outros(self):
        publisher = InMemoryEventPublisher()
        quebrado = Mock(side_effect=RuntimeError("falhou"))
        saudavel = Mock()
        publisher.register_handler("TicketCriadoEvent", quebrado)
        publisher.register_handler("TicketCriadoEvent", saudavel)

        publisher.publish(_evento())

        saudavel.assert_called_once()

    def test_publish_batch_mantem_ordem(self):
        publisher = InMemoryEventPublisher()

        publisher.publish_batch([_evento(aggregate_id="a"), _evento(aggregate_id="b")])

        assert [e.aggregate_id for e in publisher.published_events] == ["a", "b"]

    def test_factory(self):
        assert isinstance(get_event_publisher(), LoggingEventPublisher)
        assert isinstance(get_event_publisher(use_celery=True), CeleryEventPublisher)


class TestCeleryEventPublisher:

    def test_envia_payload_serializado(self):
        evento = _evento(prioridade="HIGH")

        with patch("helpdesk.adapters.django_app.events.handlers.dispatch_domain_event.delay") as delay:
            CeleryEventPublisher().publish(evento)

        delay.assert_called_once_with("TicketCriadoEvent", evento.to_dict())

    def test_broker_fora_nao_propaga(self, caplog):
        with patch(
            "helpdesk.adapters.django_app.events.handlers.dispatch_domain_event.delay",
            side_effect=ConnectionError("broker fora"),
        ):
            CeleryEventPublisher(also_log=False).publish(_evento())

        assert "Falha ao publicar evento no Celery" in caplog.text


class TestMontarEventPublisher:

    def test_modo_sync_registra_fanout(self):
        fanout = Mock()

        publisher = montar_event_publisher('sync', fanout)

        assert isinstance(publisher, LoggingEventPublisher)
        fanout.registrar_em.assert_called_once_with(publisher)

    def test_modo_celery_sem_handlers_locais(self):
        fanout = Mock()

        publisher = montar_event_publisher('celery', fanout)

        assert isinstance(publisher, CeleryEventPublisher)
        fanout.registrar_em.assert_not_called()


class TestDispatchDomainEvent:

    @pytest.fixture
    def container(self):
        container = criar_container_em_memoria()
        with patch("helpdesk.config.container.get_container", return_value=container):
            yield container

    def test_evento_desconhecido(self):
        assert dispatch_domain_event("EventoQueNaoExiste", {}) == 0

    def test_reconstroi_e_distribui(self, container):
        usuarios = container.usuario_repository()
        coordenador = UserEntity.criar(
            nome="Carlos Coordenador",
            email="carlos@empresa.com",
            senha_hash="fake$x",
            papel=UserRole.COORDINATOR,
        )
        usuarios.save(coordenador)
        evento = _evento(ator_nome="Pedro Cliente", prioridade="URGENT", categoria="Rede")

        gravadas = dispatch_domain_event("TicketCriadoEvent", evento.to_dict())

        assert gravadas == 1
        notificacao = container.notification_repository().all()[0]
        assert notificacao.usuario_id == coordenador.id
        assert notificacao.tipo == NotificationType.TICKET_CREATED
        assert notificacao.dados["priority"] == "URGENT"

    def test_falha_na_gravacao_nao_retenta(self, container, caplog):
        container.usuario_repository().save(
            UserEntity.criar(
                nome="Carlos Coordenador",
                email="carlos@empresa.com",
                senha_hash="fake$x",
                papel=UserRole.COORDINATOR,
            )
        )
        evento = _evento(ator_nome="Pedro Cliente", prioridade="LOW")

        with patch.object(
            container.notification_repository(), "create_many", side_effect=RuntimeError("banco fora")
        ), patch("helpdesk.adapters.django_app.events.handlers.dispatch_domain_event.retry") as retry:
            gravadas = dispatch_domain_event("TicketCriadoEvent", evento.to_dict())

        assert gravadas == 0
        retry.assert_not_called()
        assert "Falha no fan-out de TicketCriadoEvent" in caplog.text
