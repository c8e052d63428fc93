"""
Ports (Interfaces) do Domínio de Contas.

- UsuarioRepository: persistência de usuários
- PasswordHasher: geração e verificação de hash de senha
- InMemoryUsuarioRepository / FakePasswordHasher: implementações para testes
"""

from typing import Iterable, List, Optional, Protocol, Tuple, runtime_checkable

from helpdesk.core.shared.pagination import Paginacao

from .entities import UserEntity, UserRole


@runtime_checkable
class UsuarioRepository(Protocol):
    """
    Interface para persistência de Usuários.

    Implementações:
    - DjangoUsuarioRepository (ORM)
    - InMemoryUsuarioRepository (testes)
    """

    def save(self, usuario: UserEntity) -> None:
        ...

    def get_by_id(self, usuario_id: str) -> Optional[UserEntity]:
        ...

    def get_by_email(self, email: str) -> Optional[UserEntity]:
        ...

    def list_by_ids(self, ids: Iterable[str]) -> List[UserEntity]:
        ...

    def list_ativos(self, papeis: Optional[Iterable[UserRole]] = None) -> List[UserEntity]:
        """
        Lista usuários ativos, opcionalmente restritos aos papéis dados,
        ordenados por nome.
        """
        ...

    def list_filtrado(
        self,
        papel: Optional[UserRole],
        ativo: Optional[bool],
        busca: Optional[str],
        paginacao: Paginacao,
    ) -> Tuple[List[UserEntity], int]:
        """Retorna (página de usuários, total sem paginação)."""
        ...

    def count(self, ativo: Optional[bool] = None, papel: Optional[UserRole] = None) -> int:
        ...


class PasswordHasher(Protocol):
    """Geração e verificação de hash de senha."""

    def hash(self, senha: str) -> str:
        ...

    def verificar(self, senha: str, senha_hash: str) -> bool:
        ...


class InMemoryUsuarioRepository:
    """
    Implementação em memória do UsuarioRepository.

    Útil para testes unitários e prototipagem. Não usar em produção!
    """

    def __init__(self):
        self._usuarios: dict[str, UserEntity] = {}

    def save(self, usuario: UserEntity) -> None:
        self._usuarios[usuario.id] = usuario

    def get_by_id(self, usuario_id: str) -> Optional[UserEntity]:
        return self._usuarios.get(usuario_id)

    def get_by_email(self, email: str) -> Optional[UserEntity]:
        email = UserEntity.normalizar_email(email)
        for usuario in self._usuarios.values():
            if usuario.email == email:
                return usuario
        return None

    def list_by_ids(self, ids: Iterable[str]) -> List[UserEntity]:
        return [self._usuarios[i] for i in ids if i in self._usuarios]

    def list_ativos(self, papeis: Optional[Iterable[UserRole]] = None) -> List[UserEntity]:
        papeis = set(papeis) if papeis is not None else None
        ativos = [
            u for u in self._usuarios.values()
            if u.ativo and (papeis is None or u.papel in papeis)
        ]
        return sorted(ativos, key=lambda u: u.nome)

    def list_filtrado(
        self,
        papel: Optional[UserRole],
        ativo: Optional[bool],
        busca: Optional[str],
        paginacao: Paginacao,
    ) -> Tuple[List[UserEntity], int]:
        termo = (busca or "").lower()
        filtrados = [
            u for u in self._usuarios.values()
            if (papel is None or u.papel == papel)
            and (ativo is None or u.ativo == ativo)
            and (not termo or termo in u.nome.lower() or termo in u.email.lower())
        ]
        filtrados.sort(key=lambda u: u.criado_em, reverse=True)
        inicio = paginacao.offset
        return filtrados[inicio:inicio + paginacao.limite], len(filtrados)

    def count(self, ativo: Optional[bool] = None, papel: Optional[UserRole] = None) -> int:
        return len([
            u for u in self._usuarios.values()
            if (ativo is None or u.ativo == ativo) and (papel is None or u.papel == papel)
        ])

    def clear(self) -> None:
        self._usuarios.clear()


class FakePasswordHasher:
    """Hasher reversível apenas para testes."""

    PREFIXO = "fake$"

    def hash(self, senha: str) -> str:
        return f"{self.PREFIXO}{senha}"

    def verificar(self, senha: str, senha_hash: str) -> bool:
        return senha_hash == self.hash(senha)
