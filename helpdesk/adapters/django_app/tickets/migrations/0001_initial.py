"""
Migration inicial do Helpdesk.

Cria as tabelas:
- usuarios: Usuários e papéis
- tickets: Tabela principal de tickets
- ticket_comentarios / ticket_anexos: Filhos do ticket
- notificacoes: Notificações por usuário
"""

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
    ]

    operations = [
        # =================================================================
        # Tabela: usuarios
        # =================================================================
        migrations.CreateModel(
            name='UsuarioModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID único do usuário'
                )),
                ('nome', models.CharField(
                    max_length=100,
                    db_index=True,
                    help_text='Nome de exibição'
                )),
                ('email', models.EmailField(
                    max_length=254,
                    unique=True,
                    help_text='Email de login (minúsculo)'
                )),
                ('senha_hash', models.CharField(
                    max_length=255,
                    help_text='Hash da senha (django.contrib.auth.hashers)'
                )),
                ('papel', models.CharField(
                    max_length=20,
                    choices=[
                        ('ADMIN', 'Administrador'),
                        ('COORDINATOR', 'Coordenador'),
                        ('MANAGER', 'Gestor'),
                        ('USER', 'Usuário'),
                    ],
                    default='USER',
                    db_index=True,
                    help_text='Papel de acesso'
                )),
                ('ativo', models.BooleanField(
                    default=True,
                    db_index=True,
                    help_text='Usuário ativo (False = desativado)'
                )),
                ('matricula', models.CharField(max_length=50, null=True, blank=True)),
                ('telefone', models.CharField(max_length=30, null=True, blank=True)),
                ('setor', models.CharField(max_length=100, null=True, blank=True)),
                ('data_admissao', models.DateField(null=True, blank=True)),
                ('criado_em', models.DateTimeField(
                    default=django.utils.timezone.now,
                    db_index=True
                )),
                ('atualizado_em', models.DateTimeField(
                    default=django.utils.timezone.now
                )),
            ],
            options={
                'db_table': 'usuarios',
                'verbose_name': 'Usuário',
                'verbose_name_plural': 'Usuários',
                'ordering': ['nome'],
            },
        ),
        migrations.AddIndex(
            model_name='usuariomodel',
            index=models.Index(fields=['papel', 'ativo'], name='usuarios_papel_ativo_idx'),
        ),

        # =================================================================
        # Tabela: tickets
        # =================================================================
        migrations.CreateModel(
            name='TicketModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID único do ticket'
                )),
                ('titulo', models.CharField(
                    max_length=200,
                    db_index=True,
                    help_text='Título descritivo do ticket'
                )),
                ('descricao', models.TextField(
                    help_text='Descrição detalhada do problema'
                )),
                ('categoria', models.CharField(
                    max_length=50,
                    default='Geral',
                    db_index=True,
                    help_text='Categoria do ticket'
                )),
                ('status', models.CharField(
                    max_length=30,
                    choices=[
                        ('OPEN', 'Aberto'),
                        ('IN_PROGRESS', 'Em Andamento'),
                        ('WAITING_FOR_USER', 'Aguardando Usuário'),
                        ('WAITING_FOR_THIRD_PARTY', 'Aguardando Terceiros'),
                        ('RESOLVED', 'Resolvido'),
                        ('CLOSED', 'Fechado'),
                        ('CANCELLED', 'Cancelado'),
                    ],
                    default='OPEN',
                    db_index=True,
                    help_text='Estado atual do ticket'
                )),
                ('prioridade', models.CharField(
                    max_length=10,
                    choices=[
                        ('LOW', 'Baixa'),
                        ('MEDIUM', 'Média'),
                        ('HIGH', 'Alta'),
                        ('URGENT', 'Urgente'),
                    ],
                    default='MEDIUM',
                    db_index=True,
                    help_text='Nível de prioridade'
                )),
                ('criador', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='tickets_criados',
                    to='tickets.usuariomodel',
                    help_text='Usuário dono do ticket'
                )),
                ('atribuido_a', models.ForeignKey(
                    on_delete=django.db.models.deletion.SET_NULL,
                    null=True,
                    blank=True,
                    related_name='tickets_atribuidos',
                    to='tickets.usuariomodel',
                    help_text='Usuário de suporte responsável'
                )),
                ('tags', models.JSONField(
                    default=list,
                    blank=True,
                    help_text='Lista de tags'
                )),
                ('criado_em', models.DateTimeField(
                    default=django.utils.timezone.now,
                    db_index=True,
                    help_text='Data/hora de criação'
                )),
                ('atualizado_em', models.DateTimeField(
                    default=django.utils.timezone.now,
                    help_text='Data/hora da última atualização'
                )),
                ('fechado_em', models.DateTimeField(
                    null=True,
                    blank=True,
                    help_text='Preenchido apenas em RESOLVED, CLOSED ou CANCELLED'
                )),
            ],
            options={
                'db_table': 'tickets',
                'verbose_name': 'Ticket',
                'verbose_name_plural': 'Tickets',
                'ordering': ['-criado_em'],
            },
        ),
        migrations.AddIndex(
            model_name='ticketmodel',
            index=models.Index(fields=['status', 'criado_em'], name='tickets_status_criado_idx'),
        ),
        migrations.AddIndex(
            model_name='ticketmodel',
            index=models.Index(fields=['atribuido_a', 'status'], name='tickets_atrib_status_idx'),
        ),
        migrations.AddIndex(
            model_name='ticketmodel',
            index=models.Index(fields=['criador', 'criado_em'], name='tickets_criador_criado_idx'),
        ),

        # =================================================================
        # Tabela: ticket_comentarios
        # =================================================================
        migrations.CreateModel(
            name='CommentModel',
            fields=[
                ('id', models.CharField(max_length=36, primary_key=True, serialize=False, editable=False)),
                ('ticket', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='comentarios',
                    to='tickets.ticketmodel'
                )),
                ('autor', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='comentarios',
                    to='tickets.usuariomodel'
                )),
                ('conteudo', models.TextField(help_text='Texto do comentário (até 1000 caracteres)')),
                ('interno', models.BooleanField(default=False)),
                ('criado_em', models.DateTimeField(
                    default=django.utils.timezone.now,
                    db_index=True
                )),
            ],
            options={
                'db_table': 'ticket_comentarios',
                'ordering': ['criado_em'],
            },
        ),
        migrations.AddIndex(
            model_name='commentmodel',
            index=models.Index(fields=['ticket', 'criado_em'], name='coment_ticket_criado_idx'),
        ),

        # =================================================================
        # Tabela: ticket_anexos
        # =================================================================
        migrations.CreateModel(
            name='AttachmentModel',
            fields=[
                ('id', models.CharField(max_length=36, primary_key=True, serialize=False, editable=False)),
                ('ticket', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='anexos',
                    to='tickets.ticketmodel'
                )),
                ('enviado_por', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='anexos',
                    to='tickets.usuariomodel'
                )),
                ('nome_arquivo', models.CharField(max_length=255)),
                ('caminho', models.CharField(max_length=500)),
                ('tamanho', models.BigIntegerField(default=0, help_text='Tamanho em bytes')),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                'db_table': 'ticket_anexos',
                'ordering': ['criado_em'],
            },
        ),

        # =================================================================
        # Tabela: notificacoes
        # =================================================================
        migrations.CreateModel(
            name='NotificationModel',
            fields=[
                ('id', models.CharField(max_length=36, primary_key=True, serialize=False, editable=False)),
                ('tipo', models.CharField(
                    max_length=30,
                    choices=[
                        ('TICKET_CREATED', 'Ticket criado'),
                        ('TICKET_ASSIGNED', 'Ticket atribuído'),
                        ('TICKET_UPDATED', 'Ticket atualizado'),
                        ('TICKET_COMMENTED', 'Ticket comentado'),
                        ('TICKET_RESOLVED', 'Ticket resolvido'),
                        ('TICKET_CLOSED', 'Ticket fechado'),
                        ('SYSTEM_ANNOUNCEMENT', 'Anúncio do sistema'),
                    ],
                    db_index=True
                )),
                ('titulo', models.CharField(max_length=200)),
                ('mensagem', models.TextField()),
                ('usuario', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='notificacoes',
                    to='tickets.usuariomodel',
                    help_text='Dono (alvo) da notificação'
                )),
                ('relacionado_id', models.CharField(
                    max_length=36,
                    null=True,
                    blank=True,
                    db_index=True,
                    help_text='ID do ticket relacionado'
                )),
                ('dados', models.JSONField(default=dict, blank=True)),
                ('lida', models.BooleanField(default=False, db_index=True)),
                ('lida_em', models.DateTimeField(null=True, blank=True)),
                ('criado_em', models.DateTimeField(
                    default=django.utils.timezone.now,
                    db_index=True
                )),
            ],
            options={
                'db_table': 'notificacoes',
                'ordering': ['-criado_em'],
            },
        ),
        migrations.AddIndex(
            model_name='notificationmodel',
            index=models.Index(fields=['usuario', 'lida'], name='notif_usuario_lida_idx'),
        ),
        migrations.AddIndex(
            model_name='notificationmodel',
            index=models.Index(fields=['usuario', 'criado_em'], name='notif_usuario_criado_idx'),
        ),
    ]
