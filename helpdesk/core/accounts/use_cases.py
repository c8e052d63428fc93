"""
Use Cases do Domínio de Contas.

Use Cases implementados:
- ListarUsuariosService: Lista paginada com filtros (staff)
- CriarUsuarioService: Cria conta com senha em hash (staff)
- DesativarUsuarioService: Soft delete (staff)
- AlterarPapelService: Muda papel de acesso (ADMIN)
- ListarContatosSuporteService: Diretório somente-leitura (todos)
- AutenticarUsuarioService: Verifica credenciais de login
"""

from typing import List, Optional
import logging

from helpdesk.core.authorization.gate import Ator, AuthorizationGate, Operacao
from helpdesk.core.shared.exceptions import (
    BusinessRuleViolationError,
    ConflictError,
    EntityNotFoundError,
    UnauthorizedError,
    ValidationError,
)
from helpdesk.core.shared.interfaces import UnitOfWork
from helpdesk.core.shared.pagination import Paginacao, PaginatedResultDTO

from .dtos import (
    AutenticarInputDTO,
    ContatoSuporteDTO,
    CriarUsuarioInputDTO,
    ListarUsuariosQueryDTO,
    UsuarioOutputDTO,
)
from .entities import UserEntity, UserRole
from .ports import PasswordHasher, UsuarioRepository

logger = logging.getLogger(__name__)


def registrar_usuario(
    input_dto: CriarUsuarioInputDTO,
    usuario_repo: UsuarioRepository,
    hasher: PasswordHasher,
) -> UserEntity:
    """
    Valida, gera hash e persiste novo usuário.

    Compartilhado entre CriarUsuarioService e a criação de ticket
    em nome de um usuário novo. Deve rodar dentro de um UoW aberto.

    Raises:
        ValidationError: Se dados inválidos
        ConflictError: Se email já cadastrado
    """
    UserEntity.validar_senha(input_dto.senha)
    papel = UserRole.from_string(input_dto.papel)

    if usuario_repo.get_by_email(input_dto.email):
        raise ConflictError("Email já está em uso", field="email")

    usuario = UserEntity.criar(
        nome=input_dto.nome,
        email=input_dto.email,
        senha_hash=hasher.hash(input_dto.senha),
        papel=papel,
        matricula=input_dto.matricula,
        telefone=input_dto.telefone,
        setor=input_dto.setor,
        data_admissao=input_dto.data_admissao,
    )
    usuario_repo.save(usuario)
    logger.info(f"Usuário criado: {usuario.id} ({usuario.papel.value})")
    return usuario


class ListarUsuariosService:
    """Use Case: Listar usuários com filtros e paginação."""

    def __init__(self, usuario_repo: UsuarioRepository, gate: AuthorizationGate):
        self.usuario_repo = usuario_repo
        self.gate = gate

    def execute(
        self, query: ListarUsuariosQueryDTO, ator: Ator
    ) -> PaginatedResultDTO:
        self.gate.exigir(ator, Operacao.GERENCIAR_USUARIOS)

        paginacao = Paginacao(pagina=query.pagina, limite=query.limite)
        papel = UserRole.from_string(query.papel) if query.papel else None

        usuarios, total = self.usuario_repo.list_filtrado(
            papel=papel,
            ativo=query.ativo,
            busca=query.busca,
            paginacao=paginacao,
        )

        return PaginatedResultDTO(
            items=[UsuarioOutputDTO.from_entity(u) for u in usuarios],
            total=total,
            pagina=paginacao.pagina,
            limite=paginacao.limite,
        )


class CriarUsuarioService:
    """
    Use Case: Criar conta de usuário.

    Regras:
    - Apenas staff gerencia usuários
    - Apenas ADMIN cria contas com papel diferente de USER
    - Email duplicado gera ConflictError (HTTP 409)
    """

    def __init__(
        self,
        usuario_repo: UsuarioRepository,
        hasher: PasswordHasher,
        uow: UnitOfWork,
        gate: AuthorizationGate,
    ):
        self.usuario_repo = usuario_repo
        self.hasher = hasher
        self.uow = uow
        self.gate = gate

    def execute(self, input_dto: CriarUsuarioInputDTO, ator: Ator) -> UsuarioOutputDTO:
        self.gate.exigir(ator, Operacao.GERENCIAR_USUARIOS)

        if UserRole.from_string(input_dto.papel) != UserRole.USER:
            self.gate.exigir(ator, Operacao.ALTERAR_PAPEL)

        with self.uow:
            usuario = registrar_usuario(input_dto, self.usuario_repo, self.hasher)

        return UsuarioOutputDTO.from_entity(usuario)


class DesativarUsuarioService:
    """Use Case: Desativar usuário (soft delete)."""

    def __init__(self, usuario_repo: UsuarioRepository, uow: UnitOfWork, gate: AuthorizationGate):
        self.usuario_repo = usuario_repo
        self.uow = uow
        self.gate = gate

    def execute(self, usuario_id: str, ator: Ator) -> UsuarioOutputDTO:
        self.gate.exigir(ator, Operacao.GERENCIAR_USUARIOS)

        if usuario_id == ator.id:
            raise BusinessRuleViolationError(
                "Não é possível desativar o próprio usuário",
                rule="auto_desativacao"
            )

        with self.uow:
            usuario = self.usuario_repo.get_by_id(usuario_id)
            if not usuario:
                raise EntityNotFoundError(
                    "Usuário não encontrado",
                    entity_type="User",
                    entity_id=usuario_id,
                )

            usuario.desativar()
            self.usuario_repo.save(usuario)

        logger.info(f"Usuário {usuario_id} desativado por {ator.id}")
        return UsuarioOutputDTO.from_entity(usuario)


class AlterarPapelService:
    """Use Case: Alterar papel de acesso (somente ADMIN)."""

    def __init__(self, usuario_repo: UsuarioRepository, uow: UnitOfWork, gate: AuthorizationGate):
        self.usuario_repo = usuario_repo
        self.uow = uow
        self.gate = gate

    def execute(self, usuario_id: str, novo_papel: str, ator: Ator) -> UsuarioOutputDTO:
        self.gate.exigir(ator, Operacao.ALTERAR_PAPEL)
        papel = UserRole.from_string(novo_papel)

        with self.uow:
            usuario = self.usuario_repo.get_by_id(usuario_id)
            if not usuario:
                raise EntityNotFoundError(
                    "Usuário não encontrado",
                    entity_type="User",
                    entity_id=usuario_id,
                )

            usuario.alterar_papel(papel)
            self.usuario_repo.save(usuario)

        logger.info(f"Papel de {usuario_id} alterado para {papel.value} por {ator.id}")
        return UsuarioOutputDTO.from_entity(usuario)


class ListarContatosSuporteService:
    """
    Use Case: Diretório de contatos de suporte.

    Usuários ativos com papel USER, ordenados por nome, expondo
    apenas id, nome, email e setor.
    """

    def __init__(self, usuario_repo: UsuarioRepository, gate: AuthorizationGate):
        self.usuario_repo = usuario_repo
        self.gate = gate

    def execute(self, ator: Ator) -> List[ContatoSuporteDTO]:
        self.gate.exigir(ator, Operacao.VER_CONTATOS_SUPORTE)
        usuarios = self.usuario_repo.list_ativos(papeis=[UserRole.USER])
        return [ContatoSuporteDTO.from_entity(u) for u in usuarios]


class AutenticarUsuarioService:
    """Use Case: Verificar credenciais de login."""

    def __init__(self, usuario_repo: UsuarioRepository, hasher: PasswordHasher):
        self.usuario_repo = usuario_repo
        self.hasher = hasher

    def execute(self, input_dto: AutenticarInputDTO) -> UsuarioOutputDTO:
        if not input_dto.email or not input_dto.senha:
            raise ValidationError("Email e senha são obrigatórios", field="email")

        usuario = self.usuario_repo.get_by_email(input_dto.email)

        if not usuario or not self.hasher.verificar(input_dto.senha, usuario.senha_hash):
            logger.info(f"Falha de login para {input_dto.email}")
            raise UnauthorizedError("Credenciais inválidas")

        if not usuario.ativo:
            raise UnauthorizedError("Usuário inativo")

        return UsuarioOutputDTO.from_entity(usuario)


def obter_ator(usuario_repo: UsuarioRepository, usuario_id: Optional[str]) -> Ator:
    """
    Resolve o Ator a partir do ID guardado na sessão.

    Raises:
        UnauthorizedError: Se não há sessão ou o usuário não está ativo
    """
    if not usuario_id:
        raise UnauthorizedError()

    usuario = usuario_repo.get_by_id(usuario_id)
    if not usuario or not usuario.ativo:
        raise UnauthorizedError()

    return Ator.from_usuario(usuario)
