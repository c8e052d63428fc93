"""
Fixtures dos testes do adapter Django.

O Django já é configurado pelo conftest da raiz (SQLite em memória);
aqui ficam apenas os repositórios reais e factories que gravam no banco.
"""

import pytest

from helpdesk.adapters.django_app.tickets.repositories import (
    DjangoAnexoRepository,
    DjangoComentarioRepository,
    DjangoNotificationRepository,
    DjangoTicketRepository,
    DjangoUsuarioRepository,
)
from helpdesk.core.accounts.entities import UserEntity, UserRole
from helpdesk.core.tickets.entities import TicketEntity


@pytest.fixture
def usuario_db_repo():
    return DjangoUsuarioRepository()


@pytest.fixture
def ticket_db_repo():
    return DjangoTicketRepository()


@pytest.fixture
def comentario_db_repo():
    return DjangoComentarioRepository()


@pytest.fixture
def anexo_db_repo():
    return DjangoAnexoRepository()


@pytest.fixture
def notificacao_db_repo():
    return DjangoNotificationRepository()


@pytest.fixture
def usuario_db(db, usuario_db_repo):
    """Factory: grava um usuário no banco."""

    def _criar(nome="Usuário Banco", papel=UserRole.USER, ativo=True, email=None):
        usuario = UserEntity.criar(
            nome=nome,
            email=email or f"{nome.lower().replace(' ', '.')}@empresa.com",
            senha_hash="fake$senha123",
            papel=papel,
        )
        if not ativo:
            usuario.desativar()
        usuario_db_repo.save(usuario)
        return usuario

    return _criar


@pytest.fixture
def ticket_db(db, ticket_db_repo):
    """Factory: grava um ticket no banco."""

    def _criar(criador, titulo="Ticket de teste", descricao="Descrição do ticket de teste", **kwargs):
        ticket = TicketEntity.criar(titulo=titulo, descricao=descricao, criador_id=criador.id, **kwargs)
        ticket_db_repo.save(ticket)
        return ticket

    return _criar
