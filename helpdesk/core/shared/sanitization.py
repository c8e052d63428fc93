"""
Sanitização de entrada antes de qualquer escrita.

Regras:
- strings: remove blocos <script>, marcações HTML e aberturas de tag
  soltas; faz trim
- '<' e '>' que não formam marcação ("a < b", "x > 0") são preservados
- dicts e listas: aplicado recursivamente
- demais tipos: inalterados

Aplicar duas vezes dá o mesmo resultado que aplicar uma; entidades
sanitizam antes de validar e os repositórios de novo antes de gravar.
"""

import re
from typing import Any

_SCRIPT_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_TAG_RE = re.compile(r"</?[a-zA-Z!?][^<>]*>")
_ABERTURA_RE = re.compile(r"<+(?=[a-zA-Z/!?])")


def sanitizar_texto(valor: str) -> str:
    """Remove scripts e marcações, depois aberturas de tag que sobraram, e faz trim."""
    sem_script = _SCRIPT_RE.sub("", valor)
    sem_tags = _TAG_RE.sub("", sem_script)
    return _ABERTURA_RE.sub("", sem_tags).strip()


def sanitizar_dados(dados: Any) -> Any:
    """
    Sanitiza recursivamente um payload antes de create/update.

    Example:
        sanitizar_dados({"titulo": "  <b>Erro</b> se x < 10 "})
        # {"titulo": "Erro se x < 10"}
    """
    if isinstance(dados, str):
        return sanitizar_texto(dados)
    if isinstance(dados, dict):
        return {chave: sanitizar_dados(valor) for chave, valor in dados.items()}
    if isinstance(dados, (list, tuple)):
        return type(dados)(sanitizar_dados(item) for item in dados)
    return dados
