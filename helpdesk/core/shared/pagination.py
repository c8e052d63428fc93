"""
Paginação compartilhada entre as listagens (tickets, usuários).
"""

from dataclasses import dataclass, field
from typing import Any, Generic, List, Optional, TypeVar

from .exceptions import ValidationError

T = TypeVar("T")

PAGINA_PADRAO = 1
LIMITE_PADRAO = 10
LIMITE_MAXIMO = 100


@dataclass(frozen=True)
class Paginacao:
    """
    Parâmetros de paginação validados.

    Attributes:
        pagina: Número da página (1-indexed)
        limite: Itens por página (1..100)
    """

    pagina: int = PAGINA_PADRAO
    limite: int = LIMITE_PADRAO

    def __post_init__(self):
        if self.pagina < 1:
            raise ValidationError("Página deve ser maior ou igual a 1", field="page")
        if not 1 <= self.limite <= LIMITE_MAXIMO:
            raise ValidationError(
                f"Limite deve estar entre 1 e {LIMITE_MAXIMO}", field="limit"
            )

    @classmethod
    def from_params(cls, pagina: Optional[Any] = None, limite: Optional[Any] = None) -> "Paginacao":
        """Converte parâmetros de query string (podem vir como str)."""
        try:
            pagina_int = int(pagina) if pagina not in (None, "") else PAGINA_PADRAO
            limite_int = int(limite) if limite not in (None, "") else LIMITE_PADRAO
        except (TypeError, ValueError):
            raise ValidationError("Parâmetros de paginação inválidos", field="page")
        return cls(pagina=pagina_int, limite=limite_int)

    @property
    def offset(self) -> int:
        return (self.pagina - 1) * self.limite


@dataclass
class PaginatedResultDTO(Generic[T]):
    """
    DTO para resultados paginados.

    Attributes:
        items: Itens da página atual
        total: Total de itens (sem paginação)
        pagina: Página atual
        limite: Itens por página
    """

    items: List[T] = field(default_factory=list)
    total: int = 0
    pagina: int = PAGINA_PADRAO
    limite: int = LIMITE_PADRAO

    @property
    def total_paginas(self) -> int:
        if self.limite <= 0:
            return 0
        return (self.total + self.limite - 1) // self.limite

    def meta(self) -> dict:
        """Metadados no formato da API."""
        return {
            "total": self.total,
            "page": self.pagina,
            "limit": self.limite,
            "totalPages": self.total_paginas,
        }
