"""
API Views JSON do Helpdesk.

Endpoints:
- POST /api/auth/login - Login (grava usuario_id na sessão)
- POST /api/auth/logout - Logout
- GET|POST /api/tickets - Listar / criar tickets
- GET|PATCH|DELETE /api/tickets/<id> - Obter / atualizar / excluir
- POST /api/tickets/<id>/status - Alterar status
- POST /api/tickets/<id>/forward - Encaminhar (atribuir)
- POST /api/tickets/<id>/respond - Resposta do responsável
- GET|POST /api/tickets/<id>/comments - Comentários
- GET|POST /api/tickets/<id>/attachments - Metadados de anexo
- PATCH|DELETE /api/comments/<id> - Editar / excluir comentário
- GET|DELETE /api/attachments/<id> - Obter / excluir anexo
- GET|POST /api/users - Listar / criar usuários
- GET /api/users/support - Contatos de suporte
- PATCH|DELETE /api/users/<id> - Alterar papel / desativar
- GET|PATCH /api/notifications - Listar / marcar como lidas
- POST /api/notifications/announcements - Anúncio do sistema
- GET /api/dashboard/stats - Estatísticas
- GET /health/ - Saúde do banco + métricas de query

Formato:
- Entrada: JSON com chaves camelCase (title, assignedToId...)
- Saída: JSON {success, <recurso>, meta?} ou {success: false, error, meta?}

Autenticação:
- Session (chave usuario_id); o Ator é resolvido a cada request
"""

from datetime import date
from typing import Any, Dict, Optional
import json
import logging

from django.http import HttpRequest, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from helpdesk.config.container import get_container
from helpdesk.core.accounts.dtos import (
    AutenticarInputDTO,
    CriarUsuarioInputDTO,
    ListarUsuariosQueryDTO,
)
from helpdesk.core.accounts.use_cases import obter_ator
from helpdesk.core.authorization.gate import Ator
from helpdesk.core.notifications.dtos import CriarAnuncioInputDTO
from helpdesk.core.shared.exceptions import (
    BusinessRuleViolationError,
    ConflictError,
    DomainException,
    EntityNotFoundError,
    ForbiddenError,
    PersistenceError,
    UnauthorizedError,
    ValidationError,
)
from helpdesk.core.shared.pagination import Paginacao
from helpdesk.core.tickets.dtos import (
    AdicionarAnexoInputDTO,
    AdicionarComentarioInputDTO,
    AlterarStatusInputDTO,
    AtribuirTicketInputDTO,
    AtualizarTicketInputDTO,
    CriarTicketInputDTO,
    EditarComentarioInputDTO,
    ListarTicketsQueryDTO,
    ResponderTicketInputDTO,
)

from ..shared.database import check_database_connection

logger = logging.getLogger(__name__)

SESSION_USUARIO_KEY = 'usuario_id'


# =============================================================================
# Helpers
# =============================================================================

def json_response(success: bool, data: Any = None, error: str = None,
                  status: int = 200, meta: Dict = None, **extra: Any) -> JsonResponse:
    """
    Cria resposta JSON padronizada.

    Args:
        success: Se operação foi bem sucedida
        data: Dados da resposta
        error: Mensagem de erro (se aplicável)
        status: HTTP status code
        meta: Metadados adicionais
        **extra: Chaves nomeadas do recurso (ticket, tickets, message...)
    """
    response = {'success': success}

    if data is not None:
        response['data'] = data

    if error is not None:
        response['error'] = error

    response.update(extra)

    if meta is not None:
        response['meta'] = meta

    return JsonResponse(response, status=status)


def parse_json_body(request: HttpRequest) -> Dict:
    """
    Parseia body JSON do request.

    Raises:
        ValueError: Se JSON inválido ou não for um objeto
    """
    if not request.body:
        return {}

    try:
        data = json.loads(request.body)
    except json.JSONDecodeError as e:
        raise ValueError(f"JSON inválido: {e}")

    if not isinstance(data, dict):
        raise ValueError("JSON inválido: esperado um objeto")
    return data


def parse_bool(valor: Any) -> Optional[bool]:
    """'true'/'false' de query string (ou bool do JSON); None se ausente."""
    if valor is None or valor == '':
        return None
    if isinstance(valor, bool):
        return valor
    return str(valor).strip().lower() in ('true', '1', 'yes')


def parse_tags(valor: Any) -> Optional[tuple]:
    if valor is None:
        return None
    if not isinstance(valor, list):
        raise ValidationError("Tags devem ser uma lista", field="tags")
    return tuple(str(tag) for tag in valor)


def parse_date(valor: Optional[str]) -> Optional[date]:
    if not valor:
        return None
    return date.fromisoformat(valor)


def novo_usuario_dto(data: Dict, papel: str = 'USER') -> CriarUsuarioInputDTO:
    """Monta CriarUsuarioInputDTO a partir do body camelCase."""
    return CriarUsuarioInputDTO(
        nome=data.get('name', ''),
        email=data.get('email', ''),
        senha=data.get('password', ''),
        papel=data.get('role') or papel,
        matricula=data.get('matricula'),
        telefone=data.get('phone'),
        setor=data.get('sector'),
        data_admissao=parse_date(data.get('admissionDate')),
    )


# =============================================================================
# Base API View
# =============================================================================

@method_decorator(csrf_exempt, name='dispatch')
class BaseAPIView(View):
    """
    View base para APIs JSON.

    Fornece:
    - Parsing de JSON
    - Acesso ao container DI
    - Resolução do Ator da sessão
    - Tratamento de erros padronizado
    """

    def get_container(self):
        return get_container()

    def get_service(self, service_name: str):
        """Obtém service do container."""
        return getattr(self.get_container(), service_name)()

    def parse_body(self, request: HttpRequest) -> Dict:
        return parse_json_body(request)

    def get_ator(self, request: HttpRequest) -> Ator:
        """
        Raises:
            UnauthorizedError: Sem sessão válida
        """
        usuario_repo = self.get_container().usuario_repository()
        return obter_ator(usuario_repo, request.session.get(SESSION_USUARIO_KEY))

    def handle_exception(self, e: Exception) -> JsonResponse:
        """
        Trata exceções e retorna resposta apropriada.

        Args:
            e: Exceção capturada

        Returns:
            JsonResponse com erro
        """
        if isinstance(e, ValidationError):
            return json_response(
                success=False,
                error=e.message,
                status=400,
                meta={'field': e.field}
            )

        if isinstance(e, UnauthorizedError):
            return json_response(success=False, error=e.message, status=401)

        if isinstance(e, ForbiddenError):
            return json_response(success=False, error=e.message, status=403)

        if isinstance(e, EntityNotFoundError):
            return json_response(success=False, error=e.message, status=404)

        if isinstance(e, ConflictError):
            return json_response(
                success=False,
                error=e.message,
                status=409,
                meta={'field': getattr(e, 'field', None)}
            )

        if isinstance(e, BusinessRuleViolationError):
            return json_response(
                success=False,
                error=e.message,
                status=422,
                meta={'rule': e.rule}
            )

        if isinstance(e, PersistenceError):
            logger.error(f"Erro de persistência na API: {e.to_dict()}")
            return json_response(success=False, error="Erro interno do servidor", status=500)

        if isinstance(e, DomainException):
            return json_response(success=False, error=e.message, status=400)

        if isinstance(e, ValueError):
            return json_response(success=False, error=str(e), status=400)

        # Erro inesperado
        logger.exception(f"Erro inesperado na API: {e}")
        return json_response(
            success=False,
            error="Erro interno do servidor",
            status=500
        )


# =============================================================================
# Auth
# =============================================================================

class LoginAPIView(BaseAPIView):
    """POST /api/auth/login - {email, password}"""

    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            data = self.parse_body(request)
            service = self.get_service('autenticar_usuario_service')

            usuario = service.execute(AutenticarInputDTO(
                email=data.get('email', ''),
                senha=data.get('password', ''),
            ))

            request.session.cycle_key()
            request.session[SESSION_USUARIO_KEY] = usuario.id

            logger.info(f"API: Login de {usuario.id}")
            return json_response(success=True, data=usuario.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class LogoutAPIView(BaseAPIView):
    """POST /api/auth/logout"""

    def post(self, request: HttpRequest) -> JsonResponse:
        request.session.flush()
        return json_response(success=True, message="Logout realizado")


# =============================================================================
# Tickets
# =============================================================================

class TicketListAPIView(BaseAPIView):
    """
    API para listar e criar tickets.

    GET /api/tickets - Lista tickets
    POST /api/tickets - Cria ticket
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        """
        Lista tickets visíveis ao ator.

        Query params:
        - search: Busca em título, descrição e nome do criador
        - status, priority, category: Filtros exatos
        - createdById, assignedToId: Filtros por usuário
        - page: Página (default: 1)
        - limit: Itens por página (default: 10, máx: 100)
        """
        try:
            ator = self.get_ator(request)
            paginacao = Paginacao.from_params(request.GET.get('page'), request.GET.get('limit'))

            query = ListarTicketsQueryDTO(
                busca=request.GET.get('search') or None,
                status=request.GET.get('status') or None,
                prioridade=request.GET.get('priority') or None,
                categoria=request.GET.get('category') or None,
                criador_id=request.GET.get('createdById') or None,
                atribuido_a_id=request.GET.get('assignedToId') or None,
                pagina=paginacao.pagina,
                limite=paginacao.limite,
            )

            resultado = self.get_service('listar_tickets_service').execute(query, ator)

            return json_response(
                success=True,
                tickets=[t.to_dict() for t in resultado.items],
                meta=resultado.meta(),
            )

        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Cria novo ticket.

        Body JSON:
        {
            "title": "string (obrigatório)",
            "description": "string (obrigatório)",
            "priority": "LOW|MEDIUM|HIGH|URGENT (opcional)",
            "category": "string (opcional)",
            "tags": ["string"] (opcional),
            "createdById": "string (opcional, staff)",
            "newUser": {"name", "email", "password", ...} (opcional, staff)
        }
        """
        try:
            ator = self.get_ator(request)
            data = self.parse_body(request)

            novo_usuario = data.get('newUser')
            input_dto = CriarTicketInputDTO(
                titulo=data.get('title', ''),
                descricao=data.get('description', ''),
                prioridade=data.get('priority') or 'MEDIUM',
                categoria=data.get('category'),
                tags=parse_tags(data.get('tags')) or (),
                criador_id=data.get('createdById') or None,
                novo_usuario=novo_usuario_dto(novo_usuario) if novo_usuario else None,
            )

            output = self.get_service('criar_ticket_service').execute(input_dto, ator)

            logger.info(f"API: Ticket criado: {output.id}")
            return json_response(success=True, ticket=output.to_dict(), status=201)

        except Exception as e:
            return self.handle_exception(e)


class TicketDetailAPIView(BaseAPIView):
    """
    API para operações em ticket específico.

    GET /api/tickets/<id> - Obter ticket
    PATCH /api/tickets/<id> - Atualizar ticket
    DELETE /api/tickets/<id> - Excluir ticket (ADMIN)
    """

    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            ator = self.get_ator(request)
            ticket = self.get_service('obter_ticket_service').execute(pk, ator)
            return json_response(success=True, ticket=ticket.to_dict())

        except Exception as e:
            return self.handle_exception(e)

    def patch(self, request: HttpRequest, pk: str) -> JsonResponse:
        """
        Atualiza ticket parcialmente.

        Body JSON (qualquer subconjunto):
        {
            "title", "description", "category", "priority", "tags",
            "status", "assignedToId" (null remove o responsável)
        }
        """
        try:
            ator = self.get_ator(request)
            data = self.parse_body(request)

            input_dto = AtualizarTicketInputDTO(
                ticket_id=pk,
                titulo=data.get('title'),
                descricao=data.get('description'),
                categoria=data.get('category'),
                prioridade=data.get('priority'),
                tags=parse_tags(data.get('tags')),
                status=data.get('status'),
                alterar_atribuicao='assignedToId' in data,
                atribuido_a_id=data.get('assignedToId') or None,
            )

            output = self.get_service('atualizar_ticket_service').execute(input_dto, ator)
            return json_response(success=True, ticket=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)

    def delete(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            ator = self.get_ator(request)
            self.get_service('excluir_ticket_service').execute(pk, ator)

            logger.info(f"API: Ticket {pk} excluído")
            return json_response(success=True, message="Ticket excluído com sucesso")

        except Exception as e:
            return self.handle_exception(e)


class TicketStatusAPIView(BaseAPIView):
    """POST /api/tickets/<id>/status - {status}"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            ator = self.get_ator(request)
            data = self.parse_body(request)

            output = self.get_service('alterar_status_service').execute(
                AlterarStatusInputDTO(ticket_id=pk, status=data.get('status', '')),
                ator,
            )
            return json_response(success=True, ticket=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class TicketForwardAPIView(BaseAPIView):
    """
    API para encaminhar ticket a um usuário de suporte.

    POST /api/tickets/<id>/forward - {assignedToId, status?}
    """

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            ator = self.get_ator(request)
            data = self.parse_body(request)

            output = self.get_service('atribuir_ticket_service').execute(
                AtribuirTicketInputDTO(
                    ticket_id=pk,
                    atribuido_a_id=data.get('assignedToId'),
                    status=data.get('status'),
                ),
                ator,
            )

            logger.info(f"API: Ticket {pk} encaminhado para {data.get('assignedToId')}")
            return json_response(success=True, **output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class TicketRespondAPIView(BaseAPIView):
    """
    API de resposta do responsável.

    POST /api/tickets/<id>/respond - {response, action: respond|return_to_coordination}
    """

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            ator = self.get_ator(request)
            data = self.parse_body(request)

            output = self.get_service('responder_ticket_service').execute(
                ResponderTicketInputDTO(
                    ticket_id=pk,
                    resposta=data.get('response', ''),
                    acao=data.get('action') or 'respond',
                ),
                ator,
            )
            return json_response(success=True, **output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class TicketCommentsAPIView(BaseAPIView):
    """GET|POST /api/tickets/<id>/comments"""

    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            ator = self.get_ator(request)
            comentarios = self.get_service('listar_comentarios_service').execute(pk, ator)
            return json_response(success=True, comments=[c.to_dict() for c in comentarios])

        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        """Body JSON: {"content": "string", "isInternal": bool}"""
        try:
            ator = self.get_ator(request)
            data = self.parse_body(request)

            output = self.get_service('adicionar_comentario_service').execute(
                AdicionarComentarioInputDTO(
                    ticket_id=pk,
                    conteudo=data.get('content', ''),
                    interno=bool(parse_bool(data.get('isInternal'))),
                ),
                ator,
            )
            return json_response(success=True, comment=output.to_dict(), status=201)

        except Exception as e:
            return self.handle_exception(e)


class TicketAttachmentsAPIView(BaseAPIView):
    """GET|POST /api/tickets/<id>/attachments"""

    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            ator = self.get_ator(request)
            anexos = self.get_service('listar_anexos_service').execute(pk, ator)
            return json_response(success=True, attachments=[a.to_dict() for a in anexos])

        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        """Body JSON: {"fileName", "filePath", "fileSize"}"""
        try:
            ator = self.get_ator(request)
            data = self.parse_body(request)

            try:
                tamanho = int(data.get('fileSize', 0))
            except (TypeError, ValueError):
                raise ValidationError("Tamanho do arquivo inválido", field="fileSize")

            output = self.get_service('adicionar_anexo_service').execute(
                AdicionarAnexoInputDTO(
                    ticket_id=pk,
                    nome_arquivo=data.get('fileName', ''),
                    caminho=data.get('filePath', ''),
                    tamanho=tamanho,
                ),
                ator,
            )
            return json_response(success=True, attachment=output.to_dict(), status=201)

        except Exception as e:
            return self.handle_exception(e)


class CommentDetailAPIView(BaseAPIView):
    """
    API de um comentário.

    PATCH  /api/comments/<id> - {content}
    DELETE /api/comments/<id>
    """

    def patch(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            ator = self.get_ator(request)
            data = self.parse_body(request)

            output = self.get_service('editar_comentario_service').execute(
                EditarComentarioInputDTO(comentario_id=pk, conteudo=data.get('content', '')),
                ator,
            )
            return json_response(success=True, comment=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)

    def delete(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            ator = self.get_ator(request)
            self.get_service('excluir_comentario_service').execute(pk, ator)
            return json_response(success=True, message="Comentário excluído com sucesso")

        except Exception as e:
            return self.handle_exception(e)


class AttachmentDetailAPIView(BaseAPIView):
    """GET|DELETE /api/attachments/<id>"""

    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            ator = self.get_ator(request)
            output = self.get_service('obter_anexo_service').execute(pk, ator)
            return json_response(success=True, attachment=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)

    def delete(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            ator = self.get_ator(request)
            output = self.get_service('excluir_anexo_service').execute(pk, ator)

            logger.info(f"API: Anexo {pk} excluído")
            return json_response(
                success=True, message="Anexo excluído com sucesso", attachment=output.to_dict()
            )

        except Exception as e:
            return self.handle_exception(e)


# =============================================================================
# Usuários
# =============================================================================

class UserListAPIView(BaseAPIView):
    """GET|POST /api/users"""

    def get(self, request: HttpRequest) -> JsonResponse:
        """Query params: role, isActive, search, page, limit"""
        try:
            ator = self.get_ator(request)
            paginacao = Paginacao.from_params(request.GET.get('page'), request.GET.get('limit'))

            query = ListarUsuariosQueryDTO(
                papel=request.GET.get('role') or None,
                ativo=parse_bool(request.GET.get('isActive')),
                busca=request.GET.get('search') or None,
                pagina=paginacao.pagina,
                limite=paginacao.limite,
            )

            resultado = self.get_service('listar_usuarios_service').execute(query, ator)
            return json_response(
                success=True,
                users=[u.to_dict() for u in resultado.items],
                meta=resultado.meta(),
            )

        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            ator = self.get_ator(request)
            data = self.parse_body(request)

            output = self.get_service('criar_usuario_service').execute(novo_usuario_dto(data), ator)

            logger.info(f"API: Usuário criado: {output.id}")
            return json_response(success=True, user=output.to_dict(), status=201)

        except Exception as e:
            return self.handle_exception(e)


class SupportContactsAPIView(BaseAPIView):
    """GET /api/users/support"""

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            ator = self.get_ator(request)
            contatos = self.get_service('listar_contatos_suporte_service').execute(ator)
            return json_response(success=True, users=[c.to_dict() for c in contatos])

        except Exception as e:
            return self.handle_exception(e)


class UserDetailAPIView(BaseAPIView):
    """
    PATCH /api/users/<id> - {role}
    DELETE /api/users/<id> - desativa (soft delete)
    """

    def patch(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            ator = self.get_ator(request)
            data = self.parse_body(request)

            if not data.get('role'):
                raise ValidationError("Papel é obrigatório", field="role")

            output = self.get_service('alterar_papel_service').execute(pk, data['role'], ator)
            return json_response(success=True, user=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)

    def delete(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            ator = self.get_ator(request)
            output = self.get_service('desativar_usuario_service').execute(pk, ator)
            return json_response(
                success=True,
                user=output.to_dict(),
                message="Usuário desativado com sucesso",
            )

        except Exception as e:
            return self.handle_exception(e)


# =============================================================================
# Notificações
# =============================================================================

class NotificationsAPIView(BaseAPIView):
    """
    GET /api/notifications?limit=20&unreadOnly=true
    PATCH /api/notifications - {notificationId} ou {markAllAsRead: true}
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            ator = self.get_ator(request)
            resultado = self.get_service('listar_notificacoes_service').execute(
                ator,
                limite=request.GET.get('limit') or 20,
                apenas_nao_lidas=bool(parse_bool(request.GET.get('unreadOnly'))),
            )
            return json_response(success=True, **resultado.to_dict())

        except Exception as e:
            return self.handle_exception(e)

    def patch(self, request: HttpRequest) -> JsonResponse:
        try:
            ator = self.get_ator(request)
            data = self.parse_body(request)

            if parse_bool(data.get('markAllAsRead')):
                marcadas = self.get_service('marcar_todas_lidas_service').execute(ator)
                return json_response(success=True, updated=marcadas)

            if not data.get('notificationId'):
                raise ValidationError(
                    "Informe notificationId ou markAllAsRead",
                    field="notificationId"
                )

            output = self.get_service('marcar_notificacao_lida_service').execute(
                data['notificationId'], ator
            )
            return json_response(success=True, notification=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class AnnouncementAPIView(BaseAPIView):
    """POST /api/notifications/announcements - {title, message, userIds?}"""

    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            ator = self.get_ator(request)
            data = self.parse_body(request)

            alvos = data.get('userIds') or []
            if not isinstance(alvos, list):
                raise ValidationError("userIds deve ser uma lista", field="userIds")

            enviadas = self.get_service('criar_anuncio_service').execute(
                CriarAnuncioInputDTO(
                    titulo=data.get('title', ''),
                    mensagem=data.get('message', ''),
                    usuarios_alvo=tuple(alvos),
                ),
                ator,
            )
            return json_response(
                success=True,
                created=enviadas,
                message=f"Anúncio enviado para {enviadas} usuário(s)",
                status=201,
            )

        except Exception as e:
            return self.handle_exception(e)


# =============================================================================
# Dashboard / Health
# =============================================================================

class DashboardStatsAPIView(BaseAPIView):
    """GET /api/dashboard/stats"""

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            ator = self.get_ator(request)
            estatisticas = self.get_service('estatisticas_dashboard_service').execute(ator)
            return json_response(success=True, data=estatisticas.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class HealthAPIView(View):
    """GET /health/ - 200 se o banco responde, 503 caso contrário."""

    def get(self, request: HttpRequest) -> JsonResponse:
        info = check_database_connection()
        return JsonResponse(info, status=200 if info['healthy'] else 503)
