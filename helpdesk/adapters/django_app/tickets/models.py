"""
Django Models do Helpdesk.

Estes models são ADAPTERS - implementam a persistência para as
entidades de domínio definidas em helpdesk/core/*/entities.py.

IMPORTANTE:
- Models NÃO contêm lógica de negócio
- Lógica de negócio fica nas Entities do Core
- Models são mapeados para/de Entities via Mappers

Relacionamentos:
- UsuarioModel: Usuários e papéis de acesso
- TicketModel: Tabela principal (criador e responsável -> UsuarioModel)
- CommentModel / AttachmentModel: Pertencem ao ticket (CASCADE)
- NotificationModel: Pertence ao usuário alvo
"""

from django.db import models
from django.utils import timezone


class UserRoleChoices(models.TextChoices):
    """Espelha UserRole do Core."""
    ADMIN = 'ADMIN', 'Administrador'
    COORDINATOR = 'COORDINATOR', 'Coordenador'
    MANAGER = 'MANAGER', 'Gestor'
    USER = 'USER', 'Usuário'


class TicketStatusChoices(models.TextChoices):
    """Espelha TicketStatus do Core."""
    OPEN = 'OPEN', 'Aberto'
    IN_PROGRESS = 'IN_PROGRESS', 'Em Andamento'
    WAITING_FOR_USER = 'WAITING_FOR_USER', 'Aguardando Usuário'
    WAITING_FOR_THIRD_PARTY = 'WAITING_FOR_THIRD_PARTY', 'Aguardando Terceiros'
    RESOLVED = 'RESOLVED', 'Resolvido'
    CLOSED = 'CLOSED', 'Fechado'
    CANCELLED = 'CANCELLED', 'Cancelado'


class TicketPriorityChoices(models.TextChoices):
    """Espelha TicketPriority do Core."""
    LOW = 'LOW', 'Baixa'
    MEDIUM = 'MEDIUM', 'Média'
    HIGH = 'HIGH', 'Alta'
    URGENT = 'URGENT', 'Urgente'


class NotificationTypeChoices(models.TextChoices):
    """Espelha NotificationType do Core."""
    TICKET_CREATED = 'TICKET_CREATED', 'Ticket criado'
    TICKET_ASSIGNED = 'TICKET_ASSIGNED', 'Ticket atribuído'
    TICKET_UPDATED = 'TICKET_UPDATED', 'Ticket atualizado'
    TICKET_COMMENTED = 'TICKET_COMMENTED', 'Ticket comentado'
    TICKET_RESOLVED = 'TICKET_RESOLVED', 'Ticket resolvido'
    TICKET_CLOSED = 'TICKET_CLOSED', 'Ticket fechado'
    SYSTEM_ANNOUNCEMENT = 'SYSTEM_ANNOUNCEMENT', 'Anúncio do sistema'


class UsuarioModel(models.Model):
    """
    Model Django para persistência de Usuários.

    Usuários nunca são apagados: desativação é soft delete (ativo=False).
    """

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único do usuário"
    )

    nome = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Nome de exibição"
    )

    email = models.EmailField(
        max_length=254,
        unique=True,
        help_text="Email de login (minúsculo)"
    )

    senha_hash = models.CharField(
        max_length=255,
        help_text="Hash da senha (django.contrib.auth.hashers)"
    )

    papel = models.CharField(
        max_length=20,
        choices=UserRoleChoices.choices,
        default=UserRoleChoices.USER,
        db_index=True,
        help_text="Papel de acesso"
    )

    ativo = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Usuário ativo (False = desativado)"
    )

    matricula = models.CharField(max_length=50, null=True, blank=True)
    telefone = models.CharField(max_length=30, null=True, blank=True)
    setor = models.CharField(max_length=100, null=True, blank=True)
    data_admissao = models.DateField(null=True, blank=True)

    criado_em = models.DateTimeField(default=timezone.now, db_index=True)
    atualizado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'usuarios'
        verbose_name = 'Usuário'
        verbose_name_plural = 'Usuários'
        ordering = ['nome']
        indexes = [
            models.Index(fields=['papel', 'ativo'], name='usuarios_papel_ativo_idx'),
        ]

    def __str__(self):
        return f"{self.nome} <{self.email}>"


class TicketModel(models.Model):
    """
    Model Django para persistência de Tickets.

    Este model é um ADAPTER que persiste dados do TicketEntity.
    NÃO contém lógica de negócio - apenas estrutura de dados.
    """

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único do ticket"
    )

    titulo = models.CharField(
        max_length=200,
        db_index=True,
        help_text="Título descritivo do ticket"
    )

    descricao = models.TextField(
        help_text="Descrição detalhada do problema"
    )

    categoria = models.CharField(
        max_length=50,
        default='Geral',
        db_index=True,
        help_text="Categoria do ticket"
    )

    status = models.CharField(
        max_length=30,
        choices=TicketStatusChoices.choices,
        default=TicketStatusChoices.OPEN,
        db_index=True,
        help_text="Estado atual do ticket"
    )

    prioridade = models.CharField(
        max_length=10,
        choices=TicketPriorityChoices.choices,
        default=TicketPriorityChoices.MEDIUM,
        db_index=True,
        help_text="Nível de prioridade"
    )

    criador = models.ForeignKey(
        UsuarioModel,
        on_delete=models.PROTECT,
        related_name='tickets_criados',
        help_text="Usuário dono do ticket"
    )

    atribuido_a = models.ForeignKey(
        UsuarioModel,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='tickets_atribuidos',
        help_text="Usuário de suporte responsável"
    )

    tags = models.JSONField(
        default=list,
        blank=True,
        help_text="Lista de tags"
    )

    criado_em = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="Data/hora de criação"
    )

    atualizado_em = models.DateTimeField(
        default=timezone.now,
        help_text="Data/hora da última atualização"
    )

    fechado_em = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Preenchido apenas em RESOLVED, CLOSED ou CANCELLED"
    )

    class Meta:
        db_table = 'tickets'
        verbose_name = 'Ticket'
        verbose_name_plural = 'Tickets'
        ordering = ['-criado_em']
        indexes = [
            models.Index(fields=['status', 'criado_em'], name='tickets_status_criado_idx'),
            models.Index(fields=['atribuido_a', 'status'], name='tickets_atrib_status_idx'),
            models.Index(fields=['criador', 'criado_em'], name='tickets_criador_criado_idx'),
        ]

    def __str__(self):
        return f"[{self.id[:8]}] {self.titulo}"

    def __repr__(self):
        return f"<TicketModel id={self.id[:8]} status={self.status}>"


class CommentModel(models.Model):
    """Comentário em ticket (interno = visível apenas para staff)."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    ticket = models.ForeignKey(
        TicketModel,
        on_delete=models.CASCADE,
        related_name='comentarios',
    )

    autor = models.ForeignKey(
        UsuarioModel,
        on_delete=models.PROTECT,
        related_name='comentarios',
    )

    conteudo = models.TextField(help_text="Texto do comentário (até 1000 caracteres)")

    interno = models.BooleanField(default=False)

    criado_em = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'ticket_comentarios'
        ordering = ['criado_em']
        indexes = [
            models.Index(fields=['ticket', 'criado_em'], name='coment_ticket_criado_idx'),
        ]

    def __str__(self):
        return f"Comentário {self.id[:8]} em {self.ticket_id[:8]}"


class AttachmentModel(models.Model):
    """Metadados de anexo; o arquivo fica no storage."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    ticket = models.ForeignKey(
        TicketModel,
        on_delete=models.CASCADE,
        related_name='anexos',
    )

    enviado_por = models.ForeignKey(
        UsuarioModel,
        on_delete=models.PROTECT,
        related_name='anexos',
    )

    nome_arquivo = models.CharField(max_length=255)
    caminho = models.CharField(max_length=500)
    tamanho = models.BigIntegerField(default=0, help_text="Tamanho em bytes")

    criado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'ticket_anexos'
        ordering = ['criado_em']

    def __str__(self):
        return self.nome_arquivo


class NotificationModel(models.Model):
    """Notificação de um usuário."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    tipo = models.CharField(
        max_length=30,
        choices=NotificationTypeChoices.choices,
        db_index=True,
    )

    titulo = models.CharField(max_length=200)
    mensagem = models.TextField()

    usuario = models.ForeignKey(
        UsuarioModel,
        on_delete=models.CASCADE,
        related_name='notificacoes',
        help_text="Dono (alvo) da notificação"
    )

    relacionado_id = models.CharField(
        max_length=36,
        null=True,
        blank=True,
        db_index=True,
        help_text="ID do ticket relacionado"
    )

    dados = models.JSONField(default=dict, blank=True)

    lida = models.BooleanField(default=False, db_index=True)
    lida_em = models.DateTimeField(null=True, blank=True)

    criado_em = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'notificacoes'
        ordering = ['-criado_em']
        indexes = [
            models.Index(fields=['usuario', 'lida'], name='notif_usuario_lida_idx'),
            models.Index(fields=['usuario', 'criado_em'], name='notif_usuario_criado_idx'),
        ]

    def __str__(self):
        return f"{self.tipo} -> {self.usuario_id}"
