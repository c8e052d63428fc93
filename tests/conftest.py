"""
Configurações globais do Pytest para o Helpdesk.

Este arquivo é carregado automaticamente pelo pytest e:
- Configura Django (SQLite em memória) antes da coleta
- Registra markers e a opção --run-integration
- Fornece fixtures de usuários e repositórios em memória
"""

from pathlib import Path

import pytest


def pytest_configure(config):
    """Configura Django e markers."""
    import django
    from django.conf import settings

    if not settings.configured:
        settings.configure(
            DEBUG=True,
            SECRET_KEY='test-secret-key',
            DATABASES={
                'default': {
                    'ENGINE': 'django.db.backends.sqlite3',
                    'NAME': ':memory:',
                }
            },
            INSTALLED_APPS=[
                'django.contrib.contenttypes',
                'django.contrib.auth',
                'django.contrib.sessions',
                'helpdesk.adapters.django_app.tickets.apps.TicketsConfig',
            ],
            ROOT_URLCONF='helpdesk.config.urls',
            MIDDLEWARE=[
                'django.contrib.sessions.middleware.SessionMiddleware',
            ],
            SESSION_ENGINE='django.contrib.sessions.backends.cache',
            CACHES={
                'default': {
                    'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
                }
            },
            PASSWORD_HASHERS=['django.contrib.auth.hashers.MD5PasswordHasher'],
            DEFAULT_AUTO_FIELD='django.db.models.BigAutoField',
            APPEND_SLASH=False,
            USE_TZ=True,
            TIME_ZONE='America/Sao_Paulo',
            SLOW_QUERY_THRESHOLD_MS=1000,
            EVENT_PUBLISHER_MODE='sync',
        )
        django.setup()

    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


def pytest_addoption(parser):
    """Adiciona opções de linha de comando."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="run integration tests",
    )


def pytest_collection_modifyitems(config, items):
    """Pula testes de integração se --run-integration não foi informado."""
    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="use --run-integration")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


@pytest.fixture(scope="session")
def project_root():
    """Retorna o caminho raiz do projeto."""
    return Path(__file__).parent.parent


# =============================================================================
# Usuários e atores
# =============================================================================

@pytest.fixture
def usuario_repo():
    from helpdesk.core.accounts.ports import InMemoryUsuarioRepository
    return InMemoryUsuarioRepository()


@pytest.fixture
def hasher():
    from helpdesk.core.accounts.ports import FakePasswordHasher
    return FakePasswordHasher()


@pytest.fixture
def criar_usuario(usuario_repo, hasher):
    """Factory: cria e salva um usuário no repositório em memória."""
    from helpdesk.core.accounts.entities import UserEntity, UserRole

    def _criar(nome="Usuário", email=None, papel=UserRole.USER, ativo=True, senha="senha123"):
        usuario = UserEntity.criar(
            nome=nome,
            email=email or f"{nome.lower().replace(' ', '.')}@empresa.com",
            senha_hash=hasher.hash(senha),
            papel=papel,
        )
        if not ativo:
            usuario.desativar()
        usuario_repo.save(usuario)
        return usuario

    return _criar


@pytest.fixture
def admin(criar_usuario):
    from helpdesk.core.accounts.entities import UserRole
    return criar_usuario("Ana Admin", papel=UserRole.ADMIN)


@pytest.fixture
def coordenador(criar_usuario):
    from helpdesk.core.accounts.entities import UserRole
    return criar_usuario("Carlos Coordenador", papel=UserRole.COORDINATOR)


@pytest.fixture
def gerente(criar_usuario):
    from helpdesk.core.accounts.entities import UserRole
    return criar_usuario("Marta Gerente", papel=UserRole.MANAGER)


@pytest.fixture
def cliente(criar_usuario):
    from helpdesk.core.accounts.entities import UserRole
    return criar_usuario("Pedro Cliente", papel=UserRole.USER)


@pytest.fixture
def outro_cliente(criar_usuario):
    from helpdesk.core.accounts.entities import UserRole
    return criar_usuario("Julia Cliente", papel=UserRole.USER)


@pytest.fixture
def gate():
    from helpdesk.core.authorization.gate import AuthorizationGate
    return AuthorizationGate()


@pytest.fixture
def ator_de():
    """Converte UserEntity em Ator."""
    from helpdesk.core.authorization.gate import Ator
    return Ator.from_usuario
