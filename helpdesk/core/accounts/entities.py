"""
Entidades do Domínio de Contas.

Entidades:
- UserRole: Papéis de acesso (ADMIN, COORDINATOR, MANAGER, USER)
- UserEntity: Usuário do helpdesk

Regras de Negócio Encapsuladas:
- Email único (garantido pelo use case via repositório) e normalizado
- Senha com tamanho mínimo, validada antes do hash
- Desativação lógica (soft delete) em vez de remoção
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import ClassVar, Optional
import re
import uuid

from helpdesk.core.shared.events import agora
from helpdesk.core.shared.exceptions import ValidationError
from helpdesk.core.shared.sanitization import sanitizar_texto


class UserRole(Enum):
    """
    Papéis de usuário.

    Staff = ADMIN, COORDINATOR, MANAGER (em oposição ao USER comum).
    """

    ADMIN = "ADMIN"
    COORDINATOR = "COORDINATOR"
    MANAGER = "MANAGER"
    USER = "USER"

    @property
    def is_staff(self) -> bool:
        return self in STAFF_ROLES

    @classmethod
    def from_string(cls, value: str) -> "UserRole":
        """
        Converte string para enum.

        Raises:
            ValidationError: Se papel inválido
        """
        try:
            return cls[(value or "").strip().upper()]
        except KeyError:
            raise ValidationError(f"Papel inválido: {value}", field="role")


STAFF_ROLES = frozenset({UserRole.ADMIN, UserRole.COORDINATOR, UserRole.MANAGER})


@dataclass
class UserEntity:
    """
    Entidade de Domínio: Usuário.

    Invariantes:
    - Nome com 2 a 100 caracteres
    - Email em formato válido, sempre em minúsculas
    - Usuário removido é apenas desativado

    Attributes:
        id: Identificador único (UUID)
        nome: Nome de exibição
        email: Email (único)
        senha_hash: Hash da senha (nunca a senha em texto)
        papel: Papel de acesso
        ativo: Se pode acessar o sistema
        matricula: Matrícula (opcional)
        telefone: Telefone (opcional)
        setor: Setor (opcional)
        data_admissao: Data de admissão (opcional)
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    nome: str = ""
    email: str = ""
    senha_hash: str = ""
    papel: UserRole = UserRole.USER
    ativo: bool = True
    matricula: Optional[str] = None
    telefone: Optional[str] = None
    setor: Optional[str] = None
    data_admissao: Optional[date] = None
    criado_em: datetime = field(default_factory=agora)
    atualizado_em: datetime = field(default_factory=agora)

    NOME_MIN_LENGTH: ClassVar[int] = 2
    NOME_MAX_LENGTH: ClassVar[int] = 100
    SENHA_MIN_LENGTH: ClassVar[int] = 6
    EMAIL_RE: ClassVar = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

    @classmethod
    def criar(
        cls,
        nome: str,
        email: str,
        senha_hash: str,
        papel: UserRole = UserRole.USER,
        matricula: Optional[str] = None,
        telefone: Optional[str] = None,
        setor: Optional[str] = None,
        data_admissao: Optional[date] = None,
    ) -> "UserEntity":
        """
        Factory method para criar usuário com validações.

        A senha já deve chegar em hash; use validar_senha() antes
        de gerar o hash.

        Raises:
            ValidationError: Se dados inválidos
        """
        nome = sanitizar_texto(nome or "")
        cls._validar_nome(nome)
        email_normalizado = cls.normalizar_email(email)
        cls._validar_email(email_normalizado)

        if not senha_hash:
            raise ValidationError("Senha é obrigatória", field="password")

        return cls(
            nome=nome,
            email=email_normalizado,
            senha_hash=senha_hash,
            papel=papel,
            matricula=sanitizar_texto(matricula or "") or None,
            telefone=sanitizar_texto(telefone or "") or None,
            setor=sanitizar_texto(setor or "") or None,
            data_admissao=data_admissao,
        )

    @staticmethod
    def normalizar_email(email: str) -> str:
        return (email or "").strip().lower()

    @classmethod
    def validar_senha(cls, senha: str) -> None:
        """Valida senha em texto antes do hash."""
        if not senha or len(senha) < cls.SENHA_MIN_LENGTH:
            raise ValidationError(
                f"Senha deve ter pelo menos {cls.SENHA_MIN_LENGTH} caracteres",
                field="password"
            )

    @classmethod
    def _validar_nome(cls, nome: str) -> None:
        nome_limpo = (nome or "").strip()
        if len(nome_limpo) < cls.NOME_MIN_LENGTH:
            raise ValidationError(
                f"Nome deve ter pelo menos {cls.NOME_MIN_LENGTH} caracteres",
                field="name"
            )
        if len(nome_limpo) > cls.NOME_MAX_LENGTH:
            raise ValidationError(
                f"Nome deve ter no máximo {cls.NOME_MAX_LENGTH} caracteres",
                field="name"
            )

    @classmethod
    def _validar_email(cls, email: str) -> None:
        if not email:
            raise ValidationError("Email é obrigatório", field="email")
        if not cls.EMAIL_RE.match(email):
            raise ValidationError("Email inválido", field="email")

    def desativar(self) -> None:
        """Soft delete: usuário deixa de acessar, histórico é mantido."""
        self.ativo = False
        self._atualizar_timestamp()

    def alterar_papel(self, novo_papel: UserRole) -> None:
        self.papel = novo_papel
        self._atualizar_timestamp()

    def _atualizar_timestamp(self) -> None:
        self.atualizado_em = agora()

    @property
    def is_staff(self) -> bool:
        return self.papel.is_staff

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UserEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
