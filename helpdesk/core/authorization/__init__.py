"""
Authorization Gate: contexto explícito do chamador (Ator) e
tabela declarativa de permissões por operação.
"""

from .gate import Ator, AuthorizationGate, Operacao, PERMISSOES

__all__ = [
    "Ator",
    "AuthorizationGate",
    "Operacao",
    "PERMISSOES",
]
