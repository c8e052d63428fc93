"""
Fixtures dos testes de Core.

Repositórios em memória, publisher em memória com o fan-out registrado
e um UoW em memória que publica de verdade após o "commit".
"""

import pytest

from helpdesk.adapters.django_app.events.publishers import InMemoryEventPublisher
from helpdesk.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork
from helpdesk.core.notifications.fanout import NotificationFanout
from helpdesk.core.notifications.ports import InMemoryNotificationRepository
from helpdesk.core.tickets.entities import TicketEntity
from helpdesk.core.tickets.ports import (
    InMemoryAnexoRepository,
    InMemoryComentarioRepository,
    InMemoryTicketRepository,
)


@pytest.fixture
def ticket_repo(usuario_repo):
    return InMemoryTicketRepository(usuario_repo=usuario_repo)


@pytest.fixture
def comentario_repo():
    return InMemoryComentarioRepository()


@pytest.fixture
def anexo_repo():
    return InMemoryAnexoRepository()


@pytest.fixture
def notificacao_repo():
    return InMemoryNotificationRepository()


@pytest.fixture
def fanout(notificacao_repo, usuario_repo):
    return NotificationFanout(notificacao_repo, usuario_repo)


@pytest.fixture
def publisher(fanout):
    """Publisher em memória com o fan-out registrado (modo sync)."""
    publisher = InMemoryEventPublisher()
    fanout.registrar_em(publisher)
    return publisher


@pytest.fixture
def uow(publisher):
    return InMemoryUnitOfWork(event_publisher=publisher)


@pytest.fixture
def criar_ticket(ticket_repo):
    """Factory: ticket salvo direto no repositório (sem eventos)."""

    def _criar(criador, titulo="Impressora não imprime", descricao="A impressora do setor parou ontem", **kwargs):
        atribuido_a = kwargs.pop("atribuido_a", None)
        ticket = TicketEntity.criar(
            titulo=titulo,
            descricao=descricao,
            criador_id=criador.id,
            **kwargs,
        )
        if atribuido_a is not None:
            ticket.atribuir_a(atribuido_a.id)
        ticket_repo.save(ticket)
        return ticket

    return _criar
