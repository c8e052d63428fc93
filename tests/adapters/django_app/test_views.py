"""
Testes da API JSON.

Testa:
- Sessão (login/logout) e resolução do Ator
- Endpoints de tickets, usuários, notificações e dashboard
- Mapeamento de exceções de domínio para status HTTP

As views usam o container em memória (get_container é substituído),
então nenhum teste aqui toca o banco, exceto o /health/.
"""

import json
from unittest.mock import patch

import pytest
from django.test import Client, RequestFactory

from helpdesk.adapters.django_app.tickets.api_views import (
    BaseAPIView,
    json_response,
    parse_bool,
    parse_json_body,
)
from helpdesk.config.container import criar_container_em_memoria, get_container, reset_container
from helpdesk.core.accounts.entities import UserEntity, UserRole
from helpdesk.core.shared.exceptions import (
    BusinessRuleViolationError,
    EntityNotFoundError,
    ForbiddenError,
    PersistenceError,
    UnauthorizedError,
    ValidationError,
)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def rf():
    """Request Factory para criar requests."""
    return RequestFactory()


@pytest.fixture
def client():
    """Django test client."""
    return Client()


@pytest.fixture
def container():
    """Container em memória injetado nas views."""
    container = criar_container_em_memoria()
    with patch(
        'helpdesk.adapters.django_app.tickets.api_views.get_container',
        return_value=container,
    ):
        yield container


@pytest.fixture
def usuario_api(container):
    """Factory: grava usuário no repositório em memória do container."""

    def _criar(nome, papel=UserRole.USER, ativo=True):
        usuario = UserEntity.criar(
            nome=nome,
            email=f"{nome.lower().replace(' ', '.')}@empresa.com",
            senha_hash="fake$senha123",
            papel=papel,
        )
        if not ativo:
            usuario.desativar()
        container.usuario_repository().save(usuario)
        return usuario

    return _criar


@pytest.fixture
def logar(client):
    """Faz login via API e devolve o client autenticado."""

    def _logar(usuario, senha="senha123"):
        response = post_json(client, '/api/auth/login', {'email': usuario.email, 'password': senha})
        assert response.status_code == 200
        return client

    return _logar


@pytest.fixture(autouse=True)
def reset_di_container():
    """Reset container entre testes."""
    reset_container()
    yield
    reset_container()


def post_json(client, url, data, method='post'):
    return getattr(client, method)(url, data=json.dumps(data), content_type='application/json')


# =============================================================================
# Auth
# =============================================================================

class TestAuth:

    def test_login(self, client, container, usuario_api):
        usuario = usuario_api("Pedro Cliente")

        response = post_json(client, '/api/auth/login', {'email': usuario.email, 'password': 'senha123'})

        assert response.status_code == 200
        body = response.json()
        assert body['success'] is True
        assert body['data']['id'] == usuario.id
        assert 'password' not in body['data']
        assert client.session['usuario_id'] == usuario.id

    def test_login_senha_errada(self, client, container, usuario_api):
        usuario = usuario_api("Pedro Cliente")

        response = post_json(client, '/api/auth/login', {'email': usuario.email, 'password': 'errada'})

        assert response.status_code == 401
        assert response.json() == {'success': False, 'error': 'Credenciais inválidas'}

    def test_sem_sessao(self, client, container):
        response = client.get('/api/tickets')
        assert response.status_code == 401
        assert response.json()['success'] is False

    def test_usuario_desativado_perde_acesso(self, client, container, usuario_api, logar):
        usuario = usuario_api("Pedro Cliente")
        logar(usuario)

        usuario.desativar()
        container.usuario_repository().save(usuario)

        assert client.get('/api/tickets').status_code == 401

    def test_logout(self, client, container, usuario_api, logar):
        logar(usuario_api("Pedro Cliente"))

        response = client.post('/api/auth/logout')

        assert response.status_code == 200
        assert client.get('/api/notifications').status_code == 401


# =============================================================================
# Tickets
# =============================================================================

class TestTicketAPI:

    @pytest.fixture
    def pessoas(self, usuario_api):
        return {
            'admin': usuario_api("Ana Admin", UserRole.ADMIN),
            'coordenador': usuario_api("Carlos Coordenador", UserRole.COORDINATOR),
            'cliente': usuario_api("Pedro Cliente"),
            'suporte': usuario_api("Julia Suporte"),
        }

    def _criar_ticket(self, client, **extra):
        dados = {
            'title': 'Impressora não imprime',
            'description': 'A impressora do setor parou ontem',
            'priority': 'HIGH',
            'tags': ['hardware'],
        }
        dados.update(extra)
        return post_json(client, '/api/tickets', dados)

    def test_criar_ticket(self, container, pessoas, logar):
        client = logar(pessoas['cliente'])

        response = self._criar_ticket(client)

        assert response.status_code == 201
        ticket = response.json()['ticket']
        assert ticket['status'] == 'OPEN'
        assert ticket['priority'] == 'HIGH'
        assert ticket['createdById'] == pessoas['cliente'].id
        assert ticket['closedAt'] is None

        notificados = {
            n.usuario_id for n in container.notification_repository().all()
        }
        assert notificados == {pessoas['admin'].id, pessoas['coordenador'].id}

    def test_criar_ticket_invalido(self, container, pessoas, logar):
        client = logar(pessoas['cliente'])

        response = self._criar_ticket(client, title='Oi')

        assert response.status_code == 400
        assert response.json()['meta'] == {'field': 'title'}

    def test_json_invalido(self, container, pessoas, logar):
        client = logar(pessoas['cliente'])

        response = client.post('/api/tickets', data='{nao-e-json', content_type='application/json')

        assert response.status_code == 400
        assert response.json()['error'].startswith('JSON inválido')

    def test_listar_visibilidade(self, client, container, pessoas, logar):
        logar(pessoas['cliente'])
        self._criar_ticket(client)
        logar(pessoas['suporte'])
        self._criar_ticket(client, title='Sem acesso à VPN')

        response = client.get('/api/tickets')
        body = response.json()

        assert [t['title'] for t in body['tickets']] == ['Sem acesso à VPN']
        assert body['meta'] == {'total': 1, 'page': 1, 'limit': 10, 'totalPages': 1}

        logar(pessoas['admin'])
        assert client.get('/api/tickets?priority=HIGH').json()['meta']['total'] == 2

    def test_obter_ticket_de_outro_usuario(self, client, container, pessoas, logar):
        logar(pessoas['cliente'])
        ticket_id = self._criar_ticket(client).json()['ticket']['id']

        logar(pessoas['suporte'])
        response = client.get(f'/api/tickets/{ticket_id}')

        assert response.status_code == 403

    def test_ticket_inexistente(self, client, container, pessoas, logar):
        logar(pessoas['admin'])
        assert client.get('/api/tickets/nao-existe').status_code == 404

    def test_encaminhar_e_responder(self, client, container, pessoas, logar):
        logar(pessoas['cliente'])
        ticket_id = self._criar_ticket(client).json()['ticket']['id']

        logar(pessoas['coordenador'])
        response = post_json(client, f'/api/tickets/{ticket_id}/forward', {'assignedToId': pessoas['suporte'].id})
        assert response.status_code == 200
        assert response.json()['ticket']['status'] == 'IN_PROGRESS'
        assert response.json()['message']

        logar(pessoas['suporte'])
        response = post_json(
            client, f'/api/tickets/{ticket_id}/respond',
            {'response': 'Troquei o toner', 'action': 'respond'},
        )
        assert response.status_code == 200
        assert response.json()['ticket']['status'] == 'IN_PROGRESS'
        assert response.json()['message'] == 'Resposta registrada com sucesso'

        comentarios = client.get(f'/api/tickets/{ticket_id}/comments').json()['comments']
        assert [c['content'] for c in comentarios] == ['Troquei o toner']

    def test_encaminhar_sem_permissao(self, client, container, pessoas, logar):
        logar(pessoas['cliente'])
        ticket_id = self._criar_ticket(client).json()['ticket']['id']

        response = post_json(client, f'/api/tickets/{ticket_id}/forward', {'assignedToId': pessoas['suporte'].id})

        assert response.status_code == 403

    def test_alterar_status(self, client, container, pessoas, logar):
        logar(pessoas['cliente'])
        ticket_id = self._criar_ticket(client).json()['ticket']['id']

        logar(pessoas['admin'])
        response = post_json(client, f'/api/tickets/{ticket_id}/status', {'status': 'closed'})
        assert response.json()['ticket']['status'] == 'CLOSED'

        response = post_json(client, f'/api/tickets/{ticket_id}/status', {'status': 'PAUSADO'})
        assert response.status_code == 400
        assert response.json()['meta'] == {'field': 'status'}

    def test_patch(self, client, container, pessoas, logar):
        logar(pessoas['cliente'])
        ticket_id = self._criar_ticket(client).json()['ticket']['id']

        response = post_json(
            client, f'/api/tickets/{ticket_id}', {'priority': 'LOW', 'category': 'Hardware'}, method='patch'
        )

        assert response.status_code == 200
        assert response.json()['ticket']['priority'] == 'LOW'
        assert response.json()['ticket']['category'] == 'Hardware'

    def test_comentario_interno_de_usuario(self, client, container, pessoas, logar):
        logar(pessoas['cliente'])
        ticket_id = self._criar_ticket(client).json()['ticket']['id']

        response = post_json(
            client, f'/api/tickets/{ticket_id}/comments', {'content': 'Nota', 'isInternal': True}
        )

        assert response.status_code == 403

    def test_anexo(self, client, container, pessoas, logar):
        logar(pessoas['cliente'])
        ticket_id = self._criar_ticket(client).json()['ticket']['id']

        response = post_json(
            client, f'/api/tickets/{ticket_id}/attachments',
            {'fileName': 'erro.png', 'filePath': '/uploads/erro.png', 'fileSize': 'muito'},
        )
        assert response.status_code == 400

        response = post_json(
            client, f'/api/tickets/{ticket_id}/attachments',
            {'fileName': 'erro.png', 'filePath': '/uploads/erro.png', 'fileSize': 512},
        )
        assert response.status_code == 201
        assert response.json()['attachment']['fileSize'] == 512

    def test_listar_e_excluir_anexo(self, client, container, pessoas, logar):
        logar(pessoas['cliente'])
        ticket_id = self._criar_ticket(client).json()['ticket']['id']
        anexo_id = post_json(
            client, f'/api/tickets/{ticket_id}/attachments',
            {'fileName': 'erro.png', 'filePath': '/uploads/erro.png', 'fileSize': 512},
        ).json()['attachment']['id']

        anexos = client.get(f'/api/tickets/{ticket_id}/attachments').json()['attachments']
        assert [a['id'] for a in anexos] == [anexo_id]
        assert client.get(f'/api/attachments/{anexo_id}').json()['attachment']['fileName'] == 'erro.png'

        logar(pessoas['suporte'])
        assert client.get(f'/api/attachments/{anexo_id}').status_code == 403
        assert client.delete(f'/api/attachments/{anexo_id}').status_code == 403

        logar(pessoas['cliente'])
        response = client.delete(f'/api/attachments/{anexo_id}')
        assert response.status_code == 200
        assert response.json()['attachment']['fileName'] == 'erro.png'
        assert client.get(f'/api/attachments/{anexo_id}').status_code == 404
        assert client.get(f'/api/tickets/{ticket_id}/attachments').json()['attachments'] == []

    def test_editar_e_excluir_comentario(self, client, container, pessoas, logar):
        logar(pessoas['cliente'])
        ticket_id = self._criar_ticket(client).json()['ticket']['id']
        comentario_id = post_json(
            client, f'/api/tickets/{ticket_id}/comments', {'content': 'Ainda parada'}
        ).json()['comment']['id']

        response = post_json(client, f'/api/comments/{comentario_id}', {'content': 'Voltou a funcionar'}, method='patch')
        assert response.status_code == 200
        assert response.json()['comment']['content'] == 'Voltou a funcionar'

        response = post_json(client, f'/api/comments/{comentario_id}', {'content': ''}, method='patch')
        assert response.status_code == 400

        logar(pessoas['coordenador'])
        assert client.delete(f'/api/comments/{comentario_id}').status_code == 403

        logar(pessoas['admin'])
        assert client.delete(f'/api/comments/{comentario_id}').status_code == 200
        assert client.get(f'/api/tickets/{ticket_id}/comments').json()['comments'] == []
        assert client.delete(f'/api/comments/{comentario_id}').status_code == 404

    def test_excluir_apenas_admin(self, client, container, pessoas, logar):
        logar(pessoas['cliente'])
        ticket_id = self._criar_ticket(client).json()['ticket']['id']

        assert client.delete(f'/api/tickets/{ticket_id}').status_code == 403

        logar(pessoas['admin'])
        assert client.delete(f'/api/tickets/{ticket_id}').status_code == 200
        assert client.get(f'/api/tickets/{ticket_id}').status_code == 404


# =============================================================================
# Usuários, notificações, dashboard
# =============================================================================

class TestUsuariosAPI:

    def test_criar_e_listar(self, client, container, usuario_api, logar):
        logar(usuario_api("Ana Admin", UserRole.ADMIN))

        response = post_json(client, '/api/users', {
            'name': 'Novo Usuário',
            'email': 'novo@empresa.com',
            'password': 'segredo1',
            'role': 'MANAGER',
        })
        assert response.status_code == 201
        assert response.json()['user']['role'] == 'MANAGER'

        response = client.get('/api/users?role=MANAGER')
        assert [u['email'] for u in response.json()['users']] == ['novo@empresa.com']

    def test_email_duplicado(self, client, container, usuario_api, logar):
        admin = usuario_api("Ana Admin", UserRole.ADMIN)
        logar(admin)

        response = post_json(client, '/api/users', {
            'name': 'Outra Ana', 'email': admin.email, 'password': 'segredo1',
        })

        assert response.status_code == 409

    def test_alterar_papel_sem_role(self, client, container, usuario_api, logar):
        logar(usuario_api("Ana Admin", UserRole.ADMIN))
        alvo = usuario_api("Pedro Cliente")

        response = post_json(client, f'/api/users/{alvo.id}', {}, method='patch')

        assert response.status_code == 400
        assert response.json()['meta'] == {'field': 'role'}

    def test_desativar(self, client, container, usuario_api, logar):
        logar(usuario_api("Ana Admin", UserRole.ADMIN))
        alvo = usuario_api("Pedro Cliente")

        response = client.delete(f'/api/users/{alvo.id}')

        assert response.status_code == 200
        assert response.json()['user']['isActive'] is False

    def test_contatos_suporte(self, client, container, usuario_api, logar):
        usuario_api("Carlos Coordenador", UserRole.COORDINATOR)
        usuario_api("Julia Suporte")
        usuario_api("Inativo Suporte", ativo=False)
        logar(usuario_api("Pedro Cliente"))

        response = client.get('/api/users/support')

        assert response.status_code == 200
        assert [u['name'] for u in response.json()['users']] == ['Julia Suporte', 'Pedro Cliente']
        assert set(response.json()['users'][0]) == {'id', 'name', 'email', 'sector'}


class TestNotificacoesAPI:

    def test_fluxo_de_leitura(self, client, container, usuario_api, logar):
        admin = usuario_api("Ana Admin", UserRole.ADMIN)
        cliente = usuario_api("Pedro Cliente")

        logar(admin)
        response = post_json(client, '/api/notifications/announcements', {
            'title': 'Manutenção', 'message': 'Sistema fora às 22h',
        })
        assert response.status_code == 201
        assert response.json()['created'] == 1

        logar(cliente)
        body = client.get('/api/notifications?unreadOnly=true').json()
        assert body['unreadCount'] == 1
        notificacao_id = body['notifications'][0]['id']
        assert body['notifications'][0]['type'] == 'SYSTEM_ANNOUNCEMENT'

        response = post_json(client, '/api/notifications', {'notificationId': notificacao_id}, method='patch')
        assert response.json()['notification']['isRead'] is True

        response = post_json(client, '/api/notifications', {'markAllAsRead': True}, method='patch')
        assert response.json()['updated'] == 0

    def test_patch_sem_alvo(self, client, container, usuario_api, logar):
        logar(usuario_api("Pedro Cliente"))

        response = post_json(client, '/api/notifications', {}, method='patch')

        assert response.status_code == 400

    def test_limite_invalido(self, client, container, usuario_api, logar):
        logar(usuario_api("Pedro Cliente"))
        assert client.get('/api/notifications?limit=500').status_code == 400

    def test_anuncio_user_ids_invalido(self, client, container, usuario_api, logar):
        logar(usuario_api("Ana Admin", UserRole.ADMIN))

        response = post_json(client, '/api/notifications/announcements', {
            'title': 'Aviso', 'message': 'Mensagem', 'userIds': 'todos',
        })

        assert response.status_code == 400
        assert response.json()['meta'] == {'field': 'userIds'}


class TestDashboardAPI:

    def test_estatisticas(self, client, container, usuario_api, logar):
        logar(usuario_api("Carlos Coordenador", UserRole.COORDINATOR))
        post_json(client, '/api/tickets', {
            'title': 'Sem acesso à VPN', 'description': 'A VPN recusa minhas credenciais',
        })

        data = client.get('/api/dashboard/stats').json()['data']

        assert data['tickets']['total'] == 1
        assert data['tickets']['open'] == 1
        assert data['users'] == {'total': 1, 'active': 1, 'coordinators': 1}
        assert data['avgResolutionTime'] == 0.0


@pytest.mark.django_db
class TestHealthAPI:

    def test_health(self, client):
        response = client.get('/health/')

        assert response.status_code == 200
        body = response.json()
        assert body['healthy'] is True
        assert 'sqlite3' in body['engine']
        assert 'totalQueries' in body['metrics']


# =============================================================================
# Helpers e tratamento de erros
# =============================================================================

class TestHandleException:

    @pytest.mark.parametrize('erro, status', [
        (ValidationError("x", field="title"), 400),
        (UnauthorizedError(), 401),
        (ForbiddenError("x"), 403),
        (EntityNotFoundError("Ticket", "1"), 404),
        (BusinessRuleViolationError("x", rule="regra"), 422),
        (PersistenceError("x", model="Ticket", action="save"), 500),
        (ValueError("x"), 400),
        (RuntimeError("x"), 500),
    ])
    def test_status_por_excecao(self, erro, status):
        assert BaseAPIView().handle_exception(erro).status_code == status

    def test_erro_interno_nao_vaza_mensagem(self):
        response = BaseAPIView().handle_exception(PersistenceError("tabela x quebrou"))
        assert json.loads(response.content)['error'] == "Erro interno do servidor"


class TestJsonResponseHelper:

    def test_json_response_success(self):
        response = json_response(success=True, ticket={'id': '1'}, meta={'total': 1})

        assert response.status_code == 200
        assert json.loads(response.content) == {'success': True, 'ticket': {'id': '1'}, 'meta': {'total': 1}}

    def test_json_response_error(self):
        response = json_response(success=False, error="Falhou", status=400)

        assert response.status_code == 400
        assert json.loads(response.content) == {'success': False, 'error': 'Falhou'}

    def test_parse_json_body(self, rf):
        assert parse_json_body(rf.post('/', data='', content_type='application/json')) == {}
        with pytest.raises(ValueError):
            parse_json_body(rf.post('/', data='[1, 2]', content_type='application/json'))

    @pytest.mark.parametrize('valor, esperado', [
        (None, None), ('', None), ('true', True), ('1', True), ('false', False), (True, True),
    ])
    def test_parse_bool(self, valor, esperado):
        assert parse_bool(valor) is esperado


class TestContainer:

    def test_get_container_singleton(self):
        assert get_container() is get_container()

    def test_reset_container(self):
        primeiro = get_container()
        reset_container()
        assert get_container() is not primeiro

    def test_container_em_memoria_isolado(self):
        a = criar_container_em_memoria()
        b = criar_container_em_memoria()
        assert a.usuario_repository() is not b.usuario_repository()
        assert a.ticket_repository().usuario_repo is a.usuario_repository()
