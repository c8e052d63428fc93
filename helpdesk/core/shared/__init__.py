"""
Shared Domain Components.

Componentes compartilhados entre todos os domínios:
- Exceções de domínio
- Interfaces (Ports)
- Base classes para Domain Events
- Paginação e sanitização de entrada
"""

from .exceptions import (
    DomainException,
    ValidationError,
    UnauthorizedError,
    ForbiddenError,
    EntityNotFoundError,
    ConflictError,
    BusinessRuleViolationError,
    PersistenceError,
)
from .events import DomainEvent, EventRegistry
from .interfaces import UnitOfWork, EventPublisher
from .pagination import Paginacao, PaginatedResultDTO
from .sanitization import sanitizar_dados, sanitizar_texto

__all__ = [
    "DomainException",
    "ValidationError",
    "UnauthorizedError",
    "ForbiddenError",
    "EntityNotFoundError",
    "ConflictError",
    "BusinessRuleViolationError",
    "PersistenceError",
    "DomainEvent",
    "EventRegistry",
    "UnitOfWork",
    "EventPublisher",
    "Paginacao",
    "PaginatedResultDTO",
    "sanitizar_dados",
    "sanitizar_texto",
]
