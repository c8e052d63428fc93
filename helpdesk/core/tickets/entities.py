"""
Entidades do Domínio de Tickets.

Entidades:
- TicketEntity: Agregado principal do domínio
- CommentEntity: Comentário (público ou interno) em um ticket
- AttachmentEntity: Metadados de arquivo anexado a um ticket
- TicketStatus / TicketPriority: Enumerações do ciclo de vida

Regras de Negócio Encapsuladas:
- Sanitização seguida de validação na criação e na edição
- fechado_em preenchido se e somente se o status é de fechamento
- Atribuição leva o ticket para IN_PROGRESS (reabrindo se resolvido)
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import ClassVar, Iterable, List, Optional
import uuid

from helpdesk.core.shared.events import agora
from helpdesk.core.shared.exceptions import ValidationError
from helpdesk.core.shared.sanitization import sanitizar_texto


class TicketStatus(Enum):
    """
    Estados possíveis de um ticket.

    Qualquer transição é permitida; RESOLVED, CLOSED e CANCELLED
    são estados de fechamento (controlam fechado_em).
    """

    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    WAITING_FOR_USER = "WAITING_FOR_USER"
    WAITING_FOR_THIRD_PARTY = "WAITING_FOR_THIRD_PARTY"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"
    CANCELLED = "CANCELLED"

    @property
    def is_fechamento(self) -> bool:
        return self in STATUS_FECHAMENTO

    @classmethod
    def from_string(cls, value: str) -> "TicketStatus":
        """
        Converte string para enum (aceita "in progress", "IN_PROGRESS"...).

        Raises:
            ValidationError: Se valor inválido
        """
        try:
            return cls[(value or "").strip().upper().replace(" ", "_")]
        except KeyError:
            raise ValidationError(f"Status inválido: {value}", field="status")


STATUS_FECHAMENTO = frozenset({
    TicketStatus.RESOLVED,
    TicketStatus.CLOSED,
    TicketStatus.CANCELLED,
})


class TicketPriority(Enum):
    """Níveis de prioridade."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"

    @classmethod
    def from_string(cls, value: str) -> "TicketPriority":
        """
        Raises:
            ValidationError: Se valor inválido
        """
        try:
            return cls[(value or "").strip().upper()]
        except KeyError:
            raise ValidationError(f"Prioridade inválida: {value}", field="priority")


def _normalizar_tags(tags: Optional[Iterable[str]]) -> List[str]:
    """Tags como conjunto ordenado: sem vazias, sem repetidas."""
    resultado: List[str] = []
    for tag in tags or []:
        tag_limpa = sanitizar_texto(str(tag))
        if tag_limpa and tag_limpa not in resultado:
            resultado.append(tag_limpa)
    return resultado


@dataclass
class TicketEntity:
    """
    Entidade de Domínio: Ticket.

    Invariantes:
    - Título com 5 a 200 caracteres
    - Descrição com 10 a 2000 caracteres
    - Categoria com 1 a 50 caracteres
    - Sempre possui criador
    - fechado_em definido se e somente se status em STATUS_FECHAMENTO

    Attributes:
        id: Identificador único (UUID)
        titulo: Título descritivo
        descricao: Descrição detalhada do problema
        categoria: Categoria livre (default "Geral")
        status: Estado atual
        prioridade: Nível de prioridade
        criador_id: ID do usuário dono do ticket
        atribuido_a_id: ID do usuário de suporte responsável
        tags: Conjunto de tags
        criado_em / atualizado_em / fechado_em: Timestamps

    Example:
        ticket = TicketEntity.criar(
            titulo="Erro de login",
            descricao="Não consigo entrar com a senha correta",
            criador_id="user123",
            prioridade=TicketPriority.HIGH,
        )
        ticket.atribuir_a("suporte456")
        ticket.alterar_status(TicketStatus.RESOLVED)
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    titulo: str = ""
    descricao: str = ""
    categoria: str = "Geral"

    status: TicketStatus = TicketStatus.OPEN
    prioridade: TicketPriority = TicketPriority.MEDIUM

    criador_id: str = ""
    atribuido_a_id: Optional[str] = None

    tags: List[str] = field(default_factory=list)

    criado_em: datetime = field(default_factory=agora)
    atualizado_em: datetime = field(default_factory=agora)
    fechado_em: Optional[datetime] = None

    TITULO_MIN_LENGTH: ClassVar[int] = 5
    TITULO_MAX_LENGTH: ClassVar[int] = 200
    DESCRICAO_MIN_LENGTH: ClassVar[int] = 10
    DESCRICAO_MAX_LENGTH: ClassVar[int] = 2000
    CATEGORIA_MAX_LENGTH: ClassVar[int] = 50
    CATEGORIA_PADRAO: ClassVar[str] = "Geral"

    @classmethod
    def criar(
        cls,
        titulo: str,
        descricao: str,
        criador_id: str,
        prioridade: TicketPriority = TicketPriority.MEDIUM,
        categoria: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
    ) -> "TicketEntity":
        """
        Factory method para criar ticket com validações.

        Ticket nasce OPEN, sem responsável e sem fechado_em.

        Raises:
            ValidationError: Se dados de entrada inválidos
        """
        titulo = sanitizar_texto(titulo or "")
        descricao = sanitizar_texto(descricao or "")
        cls._validar_titulo(titulo)
        cls._validar_descricao(descricao)
        cls._validar_criador(criador_id)
        categoria = sanitizar_texto(categoria or "") or cls.CATEGORIA_PADRAO
        cls._validar_categoria(categoria)

        return cls(
            titulo=titulo,
            descricao=descricao,
            categoria=categoria,
            criador_id=criador_id,
            prioridade=prioridade or TicketPriority.MEDIUM,
            status=TicketStatus.OPEN,
            tags=_normalizar_tags(tags),
        )

    @classmethod
    def _validar_titulo(cls, titulo: str) -> None:
        titulo_limpo = (titulo or "").strip()

        if not titulo_limpo:
            raise ValidationError("Título é obrigatório", field="title")

        if len(titulo_limpo) < cls.TITULO_MIN_LENGTH:
            raise ValidationError(
                f"Título deve ter pelo menos {cls.TITULO_MIN_LENGTH} caracteres",
                field="title"
            )

        if len(titulo_limpo) > cls.TITULO_MAX_LENGTH:
            raise ValidationError(
                f"Título deve ter no máximo {cls.TITULO_MAX_LENGTH} caracteres",
                field="title"
            )

    @classmethod
    def _validar_descricao(cls, descricao: str) -> None:
        descricao_limpa = (descricao or "").strip()

        if not descricao_limpa:
            raise ValidationError("Descrição é obrigatória", field="description")

        if len(descricao_limpa) < cls.DESCRICAO_MIN_LENGTH:
            raise ValidationError(
                f"Descrição deve ter pelo menos {cls.DESCRICAO_MIN_LENGTH} caracteres",
                field="description"
            )

        if len(descricao_limpa) > cls.DESCRICAO_MAX_LENGTH:
            raise ValidationError(
                f"Descrição deve ter no máximo {cls.DESCRICAO_MAX_LENGTH} caracteres",
                field="description"
            )

    @classmethod
    def _validar_categoria(cls, categoria: str) -> None:
        if not categoria or len(categoria) > cls.CATEGORIA_MAX_LENGTH:
            raise ValidationError(
                f"Categoria deve ter entre 1 e {cls.CATEGORIA_MAX_LENGTH} caracteres",
                field="category"
            )

    @classmethod
    def _validar_criador(cls, criador_id: str) -> None:
        if not criador_id:
            raise ValidationError("Criador é obrigatório", field="createdById")

    def alterar_status(self, novo_status: TicketStatus) -> TicketStatus:
        """
        Aplica transição de status mantendo o invariante de fechado_em.

        - Entrando em fechamento: carimba fechado_em (se ainda vazio)
        - Saindo de fechamento: limpa fechado_em

        Returns:
            Status anterior
        """
        anterior = self.status
        self.status = novo_status

        if novo_status.is_fechamento:
            if self.fechado_em is None:
                self.fechado_em = agora()
        else:
            self.fechado_em = None

        self._atualizar_timestamp()
        return anterior

    def atribuir_a(
        self,
        usuario_id: str,
        status: TicketStatus = TicketStatus.IN_PROGRESS,
    ) -> TicketStatus:
        """
        Atribui ticket a um usuário de suporte.

        Por convenção o status vai junto para IN_PROGRESS, o que
        também reabre um ticket já resolvido.

        Returns:
            Status anterior
        """
        if not usuario_id:
            raise ValidationError(
                "ID do usuário de suporte é obrigatório",
                field="assignedToId"
            )

        self.atribuido_a_id = usuario_id
        return self.alterar_status(status)

    def devolver_para_coordenacao(self) -> TicketStatus:
        """Remove o responsável e volta o ticket para a fila (OPEN)."""
        self.atribuido_a_id = None
        return self.alterar_status(TicketStatus.OPEN)

    def remover_responsavel(self) -> Optional[str]:
        """Remove o responsável sem mexer no status. Retorna o anterior."""
        anterior = self.atribuido_a_id
        self.atribuido_a_id = None
        self._atualizar_timestamp()
        return anterior

    def atualizar_dados(
        self,
        titulo: Optional[str] = None,
        descricao: Optional[str] = None,
        categoria: Optional[str] = None,
        prioridade: Optional[TicketPriority] = None,
        tags: Optional[Iterable[str]] = None,
    ) -> List[str]:
        """
        Edição parcial de campos descritivos.

        Returns:
            Nomes dos campos efetivamente alterados
        """
        alterados: List[str] = []

        if titulo is not None:
            titulo = sanitizar_texto(titulo)
            self._validar_titulo(titulo)
            if titulo != self.titulo:
                self.titulo = titulo
                alterados.append("title")

        if descricao is not None:
            descricao = sanitizar_texto(descricao)
            self._validar_descricao(descricao)
            if descricao != self.descricao:
                self.descricao = descricao
                alterados.append("description")

        if categoria is not None:
            categoria = sanitizar_texto(categoria)
            self._validar_categoria(categoria)
            if categoria != self.categoria:
                self.categoria = categoria
                alterados.append("category")

        if prioridade is not None and prioridade != self.prioridade:
            self.prioridade = prioridade
            alterados.append("priority")

        if tags is not None:
            novas = _normalizar_tags(tags)
            if novas != self.tags:
                self.tags = novas
                alterados.append("tags")

        if alterados:
            self._atualizar_timestamp()

        return alterados

    def _atualizar_timestamp(self) -> None:
        self.atualizado_em = agora()

    @property
    def esta_fechado(self) -> bool:
        return self.status.is_fechamento

    @property
    def esta_atribuido(self) -> bool:
        return self.atribuido_a_id is not None

    @property
    def tempo_resolucao_horas(self) -> Optional[float]:
        """Horas entre criação e fechamento (None se aberto)."""
        if not self.fechado_em:
            return None
        return (self.fechado_em - self.criado_em).total_seconds() / 3600

    def __repr__(self) -> str:
        return (
            f"TicketEntity("
            f"id={self.id[:8]}..., "
            f"titulo='{self.titulo[:20]}', "
            f"status={self.status.value}, "
            f"prioridade={self.prioridade.value}"
            f")"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TicketEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass
class CommentEntity:
    """
    Comentário em um ticket.

    Comentários internos só são visíveis para staff.
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    ticket_id: str = ""
    autor_id: str = ""
    conteudo: str = ""
    interno: bool = False
    criado_em: datetime = field(default_factory=agora)

    CONTEUDO_MAX_LENGTH: ClassVar[int] = 1000

    @classmethod
    def criar(cls, ticket_id: str, autor_id: str, conteudo: str, interno: bool = False) -> "CommentEntity":
        return cls(
            ticket_id=ticket_id,
            autor_id=autor_id,
            conteudo=cls._limpar_conteudo(conteudo),
            interno=bool(interno),
        )

    @classmethod
    def _limpar_conteudo(cls, conteudo: str) -> str:
        conteudo_limpo = sanitizar_texto(conteudo or "")

        if not conteudo_limpo:
            raise ValidationError("Conteúdo do comentário é obrigatório", field="content")

        if len(conteudo_limpo) > cls.CONTEUDO_MAX_LENGTH:
            raise ValidationError(
                f"Comentário deve ter no máximo {cls.CONTEUDO_MAX_LENGTH} caracteres",
                field="content"
            )

        return conteudo_limpo

    def editar(self, conteudo: str) -> None:
        """Troca o texto; visibilidade (interno) não muda na edição."""
        self.conteudo = self._limpar_conteudo(conteudo)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CommentEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass
class AttachmentEntity:
    """Metadados de anexo (o arquivo em si fica no storage)."""

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    ticket_id: str = ""
    enviado_por_id: str = ""
    nome_arquivo: str = ""
    caminho: str = ""
    tamanho: int = 0
    criado_em: datetime = field(default_factory=agora)

    NOME_MAX_LENGTH: ClassVar[int] = 255

    @classmethod
    def criar(
        cls,
        ticket_id: str,
        enviado_por_id: str,
        nome_arquivo: str,
        caminho: str,
        tamanho: int,
    ) -> "AttachmentEntity":
        nome_limpo = sanitizar_texto(nome_arquivo or "")

        if not nome_limpo or len(nome_limpo) > cls.NOME_MAX_LENGTH:
            raise ValidationError("Nome do arquivo inválido", field="fileName")

        if not caminho:
            raise ValidationError("Caminho do arquivo é obrigatório", field="filePath")

        try:
            tamanho = int(tamanho)
        except (TypeError, ValueError):
            raise ValidationError("Tamanho do arquivo inválido", field="fileSize")

        if tamanho < 0:
            raise ValidationError("Tamanho do arquivo inválido", field="fileSize")

        return cls(
            ticket_id=ticket_id,
            enviado_por_id=enviado_por_id,
            nome_arquivo=nome_limpo,
            caminho=caminho,
            tamanho=tamanho,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AttachmentEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
