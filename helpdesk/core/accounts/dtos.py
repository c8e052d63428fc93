"""
Data Transfer Objects do Domínio de Contas.

- Input DTOs: dados de entrada (da API)
- Output DTOs: dados expostos (nunca o hash da senha)
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from .entities import UserEntity


@dataclass(frozen=True)
class CriarUsuarioInputDTO:
    """
    DTO de entrada para criar usuário.

    Attributes:
        nome: Nome de exibição
        email: Email (único)
        senha: Senha em texto (hash gerado no use case)
        papel: Nome do papel (default USER)
    """

    nome: str
    email: str
    senha: str
    papel: str = "USER"
    matricula: Optional[str] = None
    telefone: Optional[str] = None
    setor: Optional[str] = None
    data_admissao: Optional[date] = None


@dataclass(frozen=True)
class ListarUsuariosQueryDTO:
    """Filtros da listagem de usuários."""

    papel: Optional[str] = None
    ativo: Optional[bool] = None
    busca: Optional[str] = None
    pagina: int = 1
    limite: int = 10


@dataclass(frozen=True)
class AutenticarInputDTO:
    email: str
    senha: str


@dataclass
class UsuarioOutputDTO:
    """DTO de saída de usuário."""

    id: str
    nome: str
    email: str
    papel: str
    ativo: bool
    matricula: Optional[str]
    telefone: Optional[str]
    setor: Optional[str]
    data_admissao: Optional[date]
    criado_em: datetime

    @classmethod
    def from_entity(cls, entity: UserEntity) -> "UsuarioOutputDTO":
        return cls(
            id=entity.id,
            nome=entity.nome,
            email=entity.email,
            papel=entity.papel.value,
            ativo=entity.ativo,
            matricula=entity.matricula,
            telefone=entity.telefone,
            setor=entity.setor,
            data_admissao=entity.data_admissao,
            criado_em=entity.criado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.nome,
            "email": self.email,
            "role": self.papel,
            "isActive": self.ativo,
            "matricula": self.matricula,
            "phone": self.telefone,
            "sector": self.setor,
            "admissionDate": self.data_admissao.isoformat() if self.data_admissao else None,
            "createdAt": self.criado_em.isoformat(),
        }


@dataclass
class ContatoSuporteDTO:
    """Entrada do diretório somente-leitura de contatos de suporte."""

    id: str
    nome: str
    email: str
    setor: Optional[str] = None

    @classmethod
    def from_entity(cls, entity: UserEntity) -> "ContatoSuporteDTO":
        return cls(id=entity.id, nome=entity.nome, email=entity.email, setor=entity.setor)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.nome,
            "email": self.email,
            "sector": self.setor,
        }
