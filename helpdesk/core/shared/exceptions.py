"""
Exceções de Domínio do Helpdesk.

Este módulo define exceções específicas do domínio que permitem
comunicar erros de forma clara e tipada entre as camadas.

Hierarquia:
    DomainException (base)
    ├── ValidationError (validação de entrada)         -> HTTP 400
    ├── UnauthorizedError (sem sessão válida)          -> HTTP 401
    ├── ForbiddenError (operação negada pelo gate)     -> HTTP 403
    ├── EntityNotFoundError (entidade não existe)      -> HTTP 404
    ├── ConflictError (registro duplicado)             -> HTTP 409
    ├── BusinessRuleViolationError (regra violada)     -> HTTP 422
    └── PersistenceError (falha no banco)              -> HTTP 500
"""


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.

    Todas as exceções específicas do domínio herdam desta classe,
    o que permite capturar qualquer erro de domínio de forma genérica.

    Example:
        try:
            service.execute(input_dto, ator)
        except DomainException as e:
            logger.error(f"Erro de domínio: {e}")
    """

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        """Serializa exceção para dicionário (útil para APIs)."""
        return {
            "error": self.code,
            "message": self.message,
        }


class ValidationError(DomainException):
    """
    Erro de validação de dados de entrada.

    Example:
        if len(titulo) < 5:
            raise ValidationError("Título deve ter pelo menos 5 caracteres", field="titulo")
    """

    def __init__(self, message: str, field: str = None):
        self.field = field
        code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class UnauthorizedError(DomainException):
    """Requisição sem sessão válida."""

    def __init__(self, message: str = "Não autorizado"):
        super().__init__(message, "UNAUTHORIZED")


class ForbiddenError(DomainException):
    """
    Operação negada pelo Authorization Gate.

    Lançada sempre antes de qualquer escrita, de modo que uma
    negação nunca deixa efeitos colaterais persistidos.
    """

    def __init__(self, message: str = "Acesso negado", operacao: str = None):
        self.operacao = operacao
        super().__init__(message, "FORBIDDEN")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.operacao:
            result["operacao"] = self.operacao
        return result


class EntityNotFoundError(DomainException):
    """
    Entidade não encontrada no repositório.

    Example:
        ticket = repo.get_by_id(ticket_id)
        if not ticket:
            raise EntityNotFoundError("Ticket não encontrado", "Ticket", ticket_id)
    """

    def __init__(self, message: str, entity_type: str = None, entity_id: str = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message, "ENTITY_NOT_FOUND")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.entity_type:
            result["entity_type"] = self.entity_type
        if self.entity_id:
            result["entity_id"] = self.entity_id
        return result


class ConflictError(DomainException):
    """Registro em conflito com outro já existente (ex: email duplicado)."""

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message, "CONFLICT")


class BusinessRuleViolationError(DomainException):
    """
    Violação de regra de negócio.

    Example:
        if not tecnico.ativo:
            raise BusinessRuleViolationError(
                "Usuário de suporte está inativo",
                rule="atribuido_ativo"
            )
    """

    def __init__(self, message: str, rule: str = None):
        self.rule = rule
        super().__init__(message, "BUSINESS_RULE_VIOLATION")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.rule:
            result["rule"] = self.rule
        return result


class PersistenceError(DomainException):
    """
    Falha na operação de persistência (conexão, constraint, etc).

    Carrega o contexto da operação para log estruturado.
    """

    def __init__(self, message: str, model: str = None, action: str = None):
        self.model = model
        self.action = action
        super().__init__(message, "PERSISTENCE_ERROR")

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["model"] = self.model
        result["action"] = self.action
        return result
