"""
Use Cases (Application Services) do Domínio de Tickets.

Este módulo contém os casos de uso da aplicação, que orquestram
a lógica de negócio coordenando entidades, repositórios e eventos.

Use Cases implementados:
- CriarTicketService: Cria novo ticket (inclusive em nome de outro usuário)
- AtualizarTicketService: Edição parcial (PATCH)
- AlterarStatusService: Transição de status
- AtribuirTicketService: Atribui/encaminha ticket a usuário de suporte
- ResponderTicketService: Resposta do responsável atribuído
- AdicionarComentarioService / ListarComentariosService
- EditarComentarioService / ExcluirComentarioService: autor ou ADMIN
- AdicionarAnexoService: Registra metadados de anexo
- ListarAnexosService / ObterAnexoService / ExcluirAnexoService
- ExcluirTicketService: Exclusão definitiva
- ListarTicketsService: Lista com filtros, visibilidade e paginação
- ObterTicketService: Obtém ticket específico
- EstatisticasDashboardService: Agregados do dashboard

Responsabilidades dos Use Cases:
- Consultar o Authorization Gate antes de qualquer escrita
- Coordenar entidades
- Gerenciar transações (via UoW)
- Disparar eventos de domínio (publicados após commit)
- Retornar DTOs de saída
"""

from dataclasses import replace
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional
import logging

from helpdesk.core.accounts.entities import UserEntity, UserRole
from helpdesk.core.accounts.ports import PasswordHasher, UsuarioRepository
from helpdesk.core.accounts.use_cases import registrar_usuario
from helpdesk.core.authorization.gate import Ator, AuthorizationGate, Operacao
from helpdesk.core.shared.exceptions import (
    BusinessRuleViolationError,
    EntityNotFoundError,
    ValidationError,
)
from helpdesk.core.shared.interfaces import UnitOfWork
from helpdesk.core.shared.pagination import Paginacao, PaginatedResultDTO

from .dtos import (
    AcaoTicketOutputDTO,
    AdicionarAnexoInputDTO,
    AdicionarComentarioInputDTO,
    AlterarStatusInputDTO,
    AnexoOutputDTO,
    AtribuirTicketInputDTO,
    AtualizarTicketInputDTO,
    ComentarioOutputDTO,
    CriarTicketInputDTO,
    EditarComentarioInputDTO,
    EstatisticasDashboardDTO,
    ListarTicketsQueryDTO,
    ResponderTicketInputDTO,
    TicketOutputDTO,
)
from .entities import (
    AttachmentEntity,
    CommentEntity,
    TicketEntity,
    TicketPriority,
    TicketStatus,
)
from .events import (
    TicketAnexoAdicionadoEvent,
    TicketAtribuidoEvent,
    TicketAtualizadoEvent,
    TicketComentadoEvent,
    TicketCriadoEvent,
    TicketStatusAlteradoEvent,
)
from .ports import AnexoRepository, ComentarioRepository, FiltroTickets, TicketRepository

if TYPE_CHECKING:
    from helpdesk.core.notifications.ports import NotificationRepository

logger = logging.getLogger(__name__)

ACAO_RESPONDER = "respond"
ACAO_DEVOLVER = "return_to_coordination"


def carregar_ticket(ticket_repo: TicketRepository, ticket_id: str) -> TicketEntity:
    """
    Raises:
        EntityNotFoundError: Se ticket não existe
    """
    ticket = ticket_repo.get_by_id(ticket_id)
    if not ticket:
        raise EntityNotFoundError(
            "Ticket não encontrado",
            entity_type="Ticket",
            entity_id=ticket_id,
        )
    return ticket


def _mapa_usuarios(usuario_repo: UsuarioRepository, ids: Iterable[Optional[str]]) -> Dict[str, UserEntity]:
    unicos = {i for i in ids if i}
    return {u.id: u for u in usuario_repo.list_by_ids(unicos)}


def montar_saida(ticket: TicketEntity, usuario_repo: UsuarioRepository) -> TicketOutputDTO:
    usuarios = _mapa_usuarios(usuario_repo, [ticket.criador_id, ticket.atribuido_a_id])
    return TicketOutputDTO.from_entity(ticket, usuarios)


def _carregar_responsavel(usuario_repo: UsuarioRepository, usuario_id: str) -> UserEntity:
    """
    Raises:
        EntityNotFoundError: Se usuário não existe
        BusinessRuleViolationError: Se usuário está inativo
    """
    usuario = usuario_repo.get_by_id(usuario_id)
    if not usuario:
        raise EntityNotFoundError(
            "Usuário de suporte não encontrado",
            entity_type="User",
            entity_id=usuario_id,
        )
    if not usuario.ativo:
        raise BusinessRuleViolationError(
            "Usuário de suporte está inativo",
            rule="responsavel_ativo"
        )
    return usuario


class CriarTicketService:
    """
    Use Case: Criar um novo ticket.

    Regras:
    - Qualquer papel cria ticket para si mesmo
    - Apenas staff cria em nome de outro usuário existente, ou de um
      usuário novo cadastrado na hora (papel USER)

    Fluxo:
    1. Autorizar
    2. Validar e criar entidade
    3. (Opcional) cadastrar o usuário dono
    4. Persistir e disparar TicketCriadoEvent

    Example:
        service = CriarTicketService(ticket_repo, usuario_repo, hasher, uow, gate)
        output = service.execute(
            CriarTicketInputDTO(titulo="Impressora parada", descricao="Não imprime desde ontem"),
            ator,
        )
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        usuario_repo: UsuarioRepository,
        hasher: PasswordHasher,
        uow: UnitOfWork,
        gate: AuthorizationGate,
    ):
        self.ticket_repo = ticket_repo
        self.usuario_repo = usuario_repo
        self.hasher = hasher
        self.uow = uow
        self.gate = gate

    def execute(self, input_dto: CriarTicketInputDTO, ator: Ator) -> TicketOutputDTO:
        """
        Raises:
            ForbiddenError: Se USER tenta criar em nome de outro
            ValidationError: Se dados inválidos
            ConflictError: Se email do novo usuário já existe
            EntityNotFoundError: Se criador informado não existe
        """
        self.gate.exigir(ator, Operacao.CRIAR_TICKET)

        para_outro = input_dto.novo_usuario is not None or (
            bool(input_dto.criador_id) and input_dto.criador_id != ator.id
        )
        if para_outro:
            self.gate.exigir(ator, Operacao.CRIAR_TICKET_PARA_OUTRO)

        prioridade = (
            TicketPriority.from_string(input_dto.prioridade)
            if input_dto.prioridade else TicketPriority.MEDIUM
        )

        # Valida o ticket antes de cadastrar qualquer usuário
        ticket = TicketEntity.criar(
            titulo=input_dto.titulo,
            descricao=input_dto.descricao,
            criador_id=ator.id,
            prioridade=prioridade,
            categoria=input_dto.categoria,
            tags=list(input_dto.tags) if input_dto.tags else None,
        )

        with self.uow:
            if input_dto.novo_usuario is not None:
                novo = registrar_usuario(
                    replace(input_dto.novo_usuario, papel=UserRole.USER.value),
                    self.usuario_repo,
                    self.hasher,
                )
                ticket.criador_id = novo.id
            elif para_outro:
                criador = self.usuario_repo.get_by_id(input_dto.criador_id)
                if not criador:
                    raise EntityNotFoundError(
                        "Usuário criador não encontrado",
                        entity_type="User",
                        entity_id=input_dto.criador_id,
                    )
                ticket.criador_id = criador.id

            self.ticket_repo.save(ticket)

            self.uow.publish_event(
                TicketCriadoEvent.do_ticket(
                    ticket,
                    ator,
                    prioridade=ticket.prioridade.value,
                    categoria=ticket.categoria,
                )
            )

        logger.info(f"Ticket {ticket.id} criado por {ator.id} (dono: {ticket.criador_id})")
        return montar_saida(ticket, self.usuario_repo)


class AtualizarTicketService:
    """
    Use Case: Edição parcial de ticket (PATCH).

    Campos descritivos geram TicketAtualizadoEvent. Mudança de status
    gera TicketStatusAlteradoEvent, exceto quando vem de uma atribuição:
    aí só TicketAtribuidoEvent é publicado. Mudança de responsável
    exige ATRIBUIR_TICKET.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        usuario_repo: UsuarioRepository,
        uow: UnitOfWork,
        gate: AuthorizationGate,
    ):
        self.ticket_repo = ticket_repo
        self.usuario_repo = usuario_repo
        self.uow = uow
        self.gate = gate

    def execute(self, input_dto: AtualizarTicketInputDTO, ator: Ator) -> TicketOutputDTO:
        if input_dto.vazio:
            raise ValidationError("Nenhum campo para atualizar")

        prioridade = TicketPriority.from_string(input_dto.prioridade) if input_dto.prioridade else None
        novo_status = TicketStatus.from_string(input_dto.status) if input_dto.status else None

        with self.uow:
            ticket = carregar_ticket(self.ticket_repo, input_dto.ticket_id)
            self.gate.exigir_edicao(ator, ticket)
            if input_dto.alterar_atribuicao:
                self.gate.exigir(ator, Operacao.ATRIBUIR_TICKET)

            campos = ticket.atualizar_dados(
                titulo=input_dto.titulo,
                descricao=input_dto.descricao,
                categoria=input_dto.categoria,
                prioridade=prioridade,
                tags=input_dto.tags,
            )

            status_anterior = ticket.status
            responsavel_anterior = ticket.atribuido_a_id
            atribuiu = False

            if input_dto.alterar_atribuicao:
                if input_dto.atribuido_a_id:
                    _carregar_responsavel(self.usuario_repo, input_dto.atribuido_a_id)
                    ticket.atribuir_a(
                        input_dto.atribuido_a_id,
                        status=novo_status or TicketStatus.IN_PROGRESS,
                    )
                    atribuiu = True
                elif responsavel_anterior:
                    ticket.remover_responsavel()
                    campos.append("assignedToId")

            if novo_status is not None and not atribuiu:
                ticket.alterar_status(novo_status)

            self.ticket_repo.save(ticket)

            if atribuiu:
                self.uow.publish_event(
                    TicketAtribuidoEvent.do_ticket(
                        ticket,
                        ator,
                        atribuido_anterior_id=responsavel_anterior,
                        status_anterior=status_anterior.value,
                        status_novo=ticket.status.value,
                    )
                )
            elif ticket.status != status_anterior:
                self.uow.publish_event(
                    TicketStatusAlteradoEvent.do_ticket(
                        ticket,
                        ator,
                        status_anterior=status_anterior.value,
                        status_novo=ticket.status.value,
                    )
                )
            if campos:
                self.uow.publish_event(TicketAtualizadoEvent.do_ticket(ticket, ator, campos=campos))

        return montar_saida(ticket, self.usuario_repo)


class AlterarStatusService:
    """
    Use Case: Alterar status do ticket.

    Sempre publica TicketStatusAlteradoEvent, mesmo quando o status
    informado é o atual; fechado_em não é recarimbado.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        usuario_repo: UsuarioRepository,
        uow: UnitOfWork,
        gate: AuthorizationGate,
    ):
        self.ticket_repo = ticket_repo
        self.usuario_repo = usuario_repo
        self.uow = uow
        self.gate = gate

    def execute(self, input_dto: AlterarStatusInputDTO, ator: Ator) -> TicketOutputDTO:
        novo_status = TicketStatus.from_string(input_dto.status)

        with self.uow:
            ticket = carregar_ticket(self.ticket_repo, input_dto.ticket_id)
            self.gate.exigir_alteracao_status(ator, ticket)

            anterior = ticket.alterar_status(novo_status)
            self.ticket_repo.save(ticket)

            self.uow.publish_event(
                TicketStatusAlteradoEvent.do_ticket(
                    ticket,
                    ator,
                    status_anterior=anterior.value,
                    status_novo=novo_status.value,
                )
            )

        logger.info(f"Ticket {ticket.id}: {anterior.value} -> {novo_status.value} por {ator.id}")
        return montar_saida(ticket, self.usuario_repo)


class AtribuirTicketService:
    """
    Use Case: Atribuir (encaminhar) ticket a um usuário de suporte.

    Fluxo:
    1. Autorizar (ADMIN/COORDINATOR)
    2. Validar responsável (existe e está ativo)
    3. Atribuir; status vai para IN_PROGRESS ou o informado
    4. Disparar apenas TicketAtribuidoEvent (com status anterior e novo)
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        usuario_repo: UsuarioRepository,
        uow: UnitOfWork,
        gate: AuthorizationGate,
    ):
        self.ticket_repo = ticket_repo
        self.usuario_repo = usuario_repo
        self.uow = uow
        self.gate = gate

    def execute(self, input_dto: AtribuirTicketInputDTO, ator: Ator) -> AcaoTicketOutputDTO:
        """
        Raises:
            ForbiddenError: Se papel não pode atribuir
            ValidationError: Se atribuido_a_id vazio ou status inválido
            EntityNotFoundError: Se ticket ou usuário não existe
            BusinessRuleViolationError: Se usuário inativo
        """
        self.gate.exigir(ator, Operacao.ATRIBUIR_TICKET)

        if not input_dto.atribuido_a_id:
            raise ValidationError(
                "ID do usuário de suporte é obrigatório",
                field="assignedToId"
            )

        status = (
            TicketStatus.from_string(input_dto.status)
            if input_dto.status else TicketStatus.IN_PROGRESS
        )

        with self.uow:
            ticket = carregar_ticket(self.ticket_repo, input_dto.ticket_id)
            responsavel = _carregar_responsavel(self.usuario_repo, input_dto.atribuido_a_id)

            responsavel_anterior = ticket.atribuido_a_id
            status_anterior = ticket.atribuir_a(responsavel.id, status=status)
            self.ticket_repo.save(ticket)

            self.uow.publish_event(
                TicketAtribuidoEvent.do_ticket(
                    ticket,
                    ator,
                    atribuido_anterior_id=responsavel_anterior,
                    status_anterior=status_anterior.value,
                    status_novo=ticket.status.value,
                )
            )

        logger.info(f"Ticket {ticket.id} encaminhado para {responsavel.id} por {ator.id}")
        return AcaoTicketOutputDTO(
            ticket=montar_saida(ticket, self.usuario_repo),
            mensagem=f"Ticket encaminhado para {responsavel.nome}",
        )


class ResponderTicketService:
    """
    Use Case: Resposta do responsável atribuído.

    A resposta vira comentário público. Com acao="respond" o ticket
    segue IN_PROGRESS com o mesmo responsável; com
    acao="return_to_coordination" volta para OPEN sem responsável.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        comentario_repo: ComentarioRepository,
        usuario_repo: UsuarioRepository,
        uow: UnitOfWork,
        gate: AuthorizationGate,
    ):
        self.ticket_repo = ticket_repo
        self.comentario_repo = comentario_repo
        self.usuario_repo = usuario_repo
        self.uow = uow
        self.gate = gate

    def execute(self, input_dto: ResponderTicketInputDTO, ator: Ator) -> AcaoTicketOutputDTO:
        if not (input_dto.resposta or "").strip():
            raise ValidationError("Resposta é obrigatória", field="response")

        acao = input_dto.acao or ACAO_RESPONDER
        if acao not in (ACAO_RESPONDER, ACAO_DEVOLVER):
            raise ValidationError(f"Ação inválida: {acao}", field="action")

        with self.uow:
            ticket = carregar_ticket(self.ticket_repo, input_dto.ticket_id)
            self.gate.exigir_resposta(ator, ticket)

            comentario = CommentEntity.criar(
                ticket_id=ticket.id,
                autor_id=ator.id,
                conteudo=input_dto.resposta,
                interno=False,
            )

            if acao == ACAO_DEVOLVER:
                status_anterior = ticket.devolver_para_coordenacao()
                mensagem = "Ticket devolvido para a coordenação"
            else:
                status_anterior = ticket.alterar_status(TicketStatus.IN_PROGRESS)
                mensagem = "Resposta registrada com sucesso"

            self.comentario_repo.save(comentario)
            self.ticket_repo.save(ticket)

            self.uow.publish_event(
                TicketComentadoEvent.do_ticket(
                    ticket,
                    ator,
                    comentario_id=comentario.id,
                    interno=False,
                    conteudo_preview=comentario.conteudo[:100],
                )
            )
            if status_anterior != ticket.status:
                self.uow.publish_event(
                    TicketStatusAlteradoEvent.do_ticket(
                        ticket,
                        ator,
                        status_anterior=status_anterior.value,
                        status_novo=ticket.status.value,
                    )
                )

        return AcaoTicketOutputDTO(ticket=montar_saida(ticket, self.usuario_repo), mensagem=mensagem)


class AdicionarComentarioService:
    """Use Case: Comentar em ticket (interno apenas para staff)."""

    def __init__(
        self,
        ticket_repo: TicketRepository,
        comentario_repo: ComentarioRepository,
        usuario_repo: UsuarioRepository,
        uow: UnitOfWork,
        gate: AuthorizationGate,
    ):
        self.ticket_repo = ticket_repo
        self.comentario_repo = comentario_repo
        self.usuario_repo = usuario_repo
        self.uow = uow
        self.gate = gate

    def execute(self, input_dto: AdicionarComentarioInputDTO, ator: Ator) -> ComentarioOutputDTO:
        with self.uow:
            ticket = carregar_ticket(self.ticket_repo, input_dto.ticket_id)
            self.gate.exigir_visualizacao(ator, ticket)
            if input_dto.interno:
                self.gate.exigir(ator, Operacao.COMENTAR_INTERNO)

            comentario = CommentEntity.criar(
                ticket_id=ticket.id,
                autor_id=ator.id,
                conteudo=input_dto.conteudo,
                interno=input_dto.interno,
            )
            self.comentario_repo.save(comentario)

            self.uow.publish_event(
                TicketComentadoEvent.do_ticket(
                    ticket,
                    ator,
                    comentario_id=comentario.id,
                    interno=comentario.interno,
                    conteudo_preview=comentario.conteudo[:100],
                )
            )

        return ComentarioOutputDTO.from_entity(comentario, self.usuario_repo.get_by_id(ator.id))


class ListarComentariosService:
    """Use Case: Listar comentários; não-staff nunca vê os internos."""

    def __init__(
        self,
        ticket_repo: TicketRepository,
        comentario_repo: ComentarioRepository,
        usuario_repo: UsuarioRepository,
        gate: AuthorizationGate,
    ):
        self.ticket_repo = ticket_repo
        self.comentario_repo = comentario_repo
        self.usuario_repo = usuario_repo
        self.gate = gate

    def execute(self, ticket_id: str, ator: Ator) -> List[ComentarioOutputDTO]:
        ticket = carregar_ticket(self.ticket_repo, ticket_id)
        self.gate.exigir_visualizacao(ator, ticket)

        comentarios = self.comentario_repo.list_by_ticket(
            ticket.id, incluir_internos=ator.is_staff
        )
        autores = _mapa_usuarios(self.usuario_repo, [c.autor_id for c in comentarios])
        return [ComentarioOutputDTO.from_entity(c, autores.get(c.autor_id)) for c in comentarios]


def _carregar_comentario(comentario_repo: ComentarioRepository, comentario_id: str) -> CommentEntity:
    comentario = comentario_repo.get_by_id(comentario_id)
    if not comentario:
        raise EntityNotFoundError(
            "Comentário não encontrado",
            entity_type="Comment",
            entity_id=comentario_id,
        )
    return comentario


class EditarComentarioService:
    """Use Case: Editar comentário (autor ou ADMIN). Não gera notificação."""

    def __init__(
        self,
        comentario_repo: ComentarioRepository,
        usuario_repo: UsuarioRepository,
        uow: UnitOfWork,
        gate: AuthorizationGate,
    ):
        self.comentario_repo = comentario_repo
        self.usuario_repo = usuario_repo
        self.uow = uow
        self.gate = gate

    def execute(self, input_dto: EditarComentarioInputDTO, ator: Ator) -> ComentarioOutputDTO:
        with self.uow:
            comentario = _carregar_comentario(self.comentario_repo, input_dto.comentario_id)
            self.gate.exigir_autoria(ator, comentario.autor_id, "editar_comentario")

            comentario.editar(input_dto.conteudo)
            self.comentario_repo.save(comentario)

        logger.info(f"Comentário {comentario.id} editado por {ator.id}")
        return ComentarioOutputDTO.from_entity(comentario, self.usuario_repo.get_by_id(comentario.autor_id))


class ExcluirComentarioService:
    """Use Case: Excluir comentário (autor ou ADMIN)."""

    def __init__(self, comentario_repo: ComentarioRepository, uow: UnitOfWork, gate: AuthorizationGate):
        self.comentario_repo = comentario_repo
        self.uow = uow
        self.gate = gate

    def execute(self, comentario_id: str, ator: Ator) -> None:
        with self.uow:
            comentario = _carregar_comentario(self.comentario_repo, comentario_id)
            self.gate.exigir_autoria(ator, comentario.autor_id, "excluir_comentario")
            self.comentario_repo.delete(comentario.id)

        logger.info(f"Comentário {comentario_id} excluído por {ator.id}")


class AdicionarAnexoService:
    """
    Use Case: Registrar anexo.

    Apenas metadados; o arquivo é gravado pelo storage antes da chamada.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        anexo_repo: AnexoRepository,
        uow: UnitOfWork,
        gate: AuthorizationGate,
    ):
        self.ticket_repo = ticket_repo
        self.anexo_repo = anexo_repo
        self.uow = uow
        self.gate = gate

    def execute(self, input_dto: AdicionarAnexoInputDTO, ator: Ator) -> AnexoOutputDTO:
        with self.uow:
            ticket = carregar_ticket(self.ticket_repo, input_dto.ticket_id)
            self.gate.exigir_visualizacao(ator, ticket)

            anexo = AttachmentEntity.criar(
                ticket_id=ticket.id,
                enviado_por_id=ator.id,
                nome_arquivo=input_dto.nome_arquivo,
                caminho=input_dto.caminho,
                tamanho=input_dto.tamanho,
            )
            self.anexo_repo.save(anexo)

            self.uow.publish_event(
                TicketAnexoAdicionadoEvent.do_ticket(
                    ticket,
                    ator,
                    anexo_id=anexo.id,
                    nome_arquivo=anexo.nome_arquivo,
                    tamanho=anexo.tamanho,
                )
            )

        return AnexoOutputDTO.from_entity(anexo)


def _carregar_anexo(anexo_repo: AnexoRepository, anexo_id: str) -> AttachmentEntity:
    anexo = anexo_repo.get_by_id(anexo_id)
    if not anexo:
        raise EntityNotFoundError(
            "Anexo não encontrado",
            entity_type="Attachment",
            entity_id=anexo_id,
        )
    return anexo


class ListarAnexosService:
    """Use Case: Listar anexos de um ticket visível ao ator."""

    def __init__(self, ticket_repo: TicketRepository, anexo_repo: AnexoRepository, gate: AuthorizationGate):
        self.ticket_repo = ticket_repo
        self.anexo_repo = anexo_repo
        self.gate = gate

    def execute(self, ticket_id: str, ator: Ator) -> List[AnexoOutputDTO]:
        ticket = carregar_ticket(self.ticket_repo, ticket_id)
        self.gate.exigir_visualizacao(ator, ticket)
        return [AnexoOutputDTO.from_entity(a) for a in self.anexo_repo.list_by_ticket(ticket.id)]


class ObterAnexoService:
    """
    Use Case: Metadados de um anexo.

    Quem vê o ticket vê o anexo; quem enviou o anexo também.
    """

    def __init__(self, ticket_repo: TicketRepository, anexo_repo: AnexoRepository, gate: AuthorizationGate):
        self.ticket_repo = ticket_repo
        self.anexo_repo = anexo_repo
        self.gate = gate

    def execute(self, anexo_id: str, ator: Ator) -> AnexoOutputDTO:
        anexo = _carregar_anexo(self.anexo_repo, anexo_id)
        if anexo.enviado_por_id != ator.id:
            self.gate.exigir_visualizacao(ator, carregar_ticket(self.ticket_repo, anexo.ticket_id))
        return AnexoOutputDTO.from_entity(anexo)


class ExcluirAnexoService:
    """
    Use Case: Excluir anexo (quem enviou ou ADMIN).

    Remove só os metadados; apagar o arquivo é papel do storage.
    """

    def __init__(self, anexo_repo: AnexoRepository, uow: UnitOfWork, gate: AuthorizationGate):
        self.anexo_repo = anexo_repo
        self.uow = uow
        self.gate = gate

    def execute(self, anexo_id: str, ator: Ator) -> AnexoOutputDTO:
        with self.uow:
            anexo = _carregar_anexo(self.anexo_repo, anexo_id)
            self.gate.exigir_autoria(ator, anexo.enviado_por_id, "excluir_anexo")
            self.anexo_repo.delete(anexo.id)

        logger.info(f"Anexo {anexo_id} ({anexo.nome_arquivo}) excluído por {ator.id}")
        return AnexoOutputDTO.from_entity(anexo)


class ExcluirTicketService:
    """
    Use Case: Excluir ticket definitivamente (somente ADMIN).

    Comentários, anexos e notificações relacionadas saem junto.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        comentario_repo: ComentarioRepository,
        anexo_repo: AnexoRepository,
        notificacao_repo: "NotificationRepository",
        uow: UnitOfWork,
        gate: AuthorizationGate,
    ):
        self.ticket_repo = ticket_repo
        self.comentario_repo = comentario_repo
        self.anexo_repo = anexo_repo
        self.notificacao_repo = notificacao_repo
        self.uow = uow
        self.gate = gate

    def execute(self, ticket_id: str, ator: Ator) -> None:
        self.gate.exigir(ator, Operacao.EXCLUIR_TICKET)

        with self.uow:
            ticket = carregar_ticket(self.ticket_repo, ticket_id)
            self.comentario_repo.delete_by_ticket(ticket.id)
            self.anexo_repo.delete_by_ticket(ticket.id)
            self.notificacao_repo.delete_by_related(ticket.id)
            self.ticket_repo.delete(ticket.id)

        logger.info(f"Ticket {ticket_id} excluído por {ator.id}")


class ListarTicketsService:
    """
    Use Case: Listar tickets com filtros e paginação.

    Staff vê todos; USER vê os que criou ou que estão atribuídos a ele.
    Não usa UoW pois é operação de leitura.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        usuario_repo: UsuarioRepository,
        gate: AuthorizationGate,
    ):
        self.ticket_repo = ticket_repo
        self.usuario_repo = usuario_repo
        self.gate = gate

    def execute(self, query: ListarTicketsQueryDTO, ator: Ator) -> PaginatedResultDTO:
        paginacao = Paginacao(pagina=query.pagina, limite=query.limite)

        filtro = FiltroTickets(
            visivel_para_id=None if self.gate.pode(ator, Operacao.VER_QUALQUER_TICKET) else ator.id,
            busca=(query.busca or "").strip() or None,
            status=TicketStatus.from_string(query.status) if query.status else None,
            prioridade=TicketPriority.from_string(query.prioridade) if query.prioridade else None,
            categoria=query.categoria or None,
            criador_id=query.criador_id or None,
            atribuido_a_id=query.atribuido_a_id or None,
        )

        tickets, total = self.ticket_repo.list_filtrado(filtro, paginacao)

        usuarios = _mapa_usuarios(
            self.usuario_repo,
            [t.criador_id for t in tickets] + [t.atribuido_a_id for t in tickets],
        )
        return PaginatedResultDTO(
            items=[TicketOutputDTO.from_entity(t, usuarios) for t in tickets],
            total=total,
            pagina=paginacao.pagina,
            limite=paginacao.limite,
        )


class ObterTicketService:
    """Use Case: Obter detalhes de um ticket específico."""

    def __init__(
        self,
        ticket_repo: TicketRepository,
        usuario_repo: UsuarioRepository,
        gate: AuthorizationGate,
    ):
        self.ticket_repo = ticket_repo
        self.usuario_repo = usuario_repo
        self.gate = gate

    def execute(self, ticket_id: str, ator: Ator) -> TicketOutputDTO:
        """
        Raises:
            EntityNotFoundError: Se ticket não existe
            ForbiddenError: Se ator não pode ver o ticket
        """
        ticket = carregar_ticket(self.ticket_repo, ticket_id)
        self.gate.exigir_visualizacao(ator, ticket)
        return montar_saida(ticket, self.usuario_repo)


class EstatisticasDashboardService:
    """Use Case: Agregados do dashboard."""

    def __init__(self, ticket_repo: TicketRepository, usuario_repo: UsuarioRepository):
        self.ticket_repo = ticket_repo
        self.usuario_repo = usuario_repo

    def execute(self, ator: Ator) -> EstatisticasDashboardDTO:
        por_status = self.ticket_repo.contar_por("status")

        return EstatisticasDashboardDTO(
            total=self.ticket_repo.count(),
            abertos=por_status.get(TicketStatus.OPEN.value, 0),
            em_andamento=por_status.get(TicketStatus.IN_PROGRESS.value, 0),
            resolvidos=por_status.get(TicketStatus.RESOLVED.value, 0),
            fechados=por_status.get(TicketStatus.CLOSED.value, 0),
            por_prioridade=self.ticket_repo.contar_por("prioridade"),
            por_categoria=self.ticket_repo.contar_por("categoria"),
            usuarios_total=self.usuario_repo.count(),
            usuarios_ativos=self.usuario_repo.count(ativo=True),
            coordenadores=self.usuario_repo.count(ativo=True, papel=UserRole.COORDINATOR),
            tempo_medio_resolucao_horas=self.ticket_repo.media_resolucao_horas(),
        )
