"""
Domínio de Contas - usuários, papéis e diretório de suporte.

Os use cases ficam em helpdesk.core.accounts.use_cases e não são
reexportados aqui, pois dependem do Authorization Gate, que por sua
vez depende das entidades deste pacote.
"""

from .entities import STAFF_ROLES, UserEntity, UserRole
from .ports import (
    FakePasswordHasher,
    InMemoryUsuarioRepository,
    PasswordHasher,
    UsuarioRepository,
)

__all__ = [
    "STAFF_ROLES",
    "UserEntity",
    "UserRole",
    "UsuarioRepository",
    "PasswordHasher",
    "InMemoryUsuarioRepository",
    "FakePasswordHasher",
]
