#!/usr/bin/env python
"""
Setup rápido para desenvolvimento local.

Este script:
1. Configura Django settings
2. Verifica a conexão com o banco
3. Executa migrations
4. Cria o administrador inicial e dados de exemplo (opcional)

Uso:
    python scripts/quick_setup.py --admin-email admin@empresa.com --admin-password segredo
    python scripts/quick_setup.py --with-sample-data
    python scripts/quick_setup.py --check-only
"""

import argparse
import os


def setup_django():
    """Configura Django para uso standalone."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'helpdesk.config.settings')

    # SQLite se nada foi configurado no .env
    if not os.getenv('DATABASE_URL') and not os.getenv('DATABASE_ENGINE'):
        os.environ['DATABASE_URL'] = 'sqlite:///db.sqlite3'

    import django
    django.setup()


def run_migrations():
    """Executa migrations."""
    from django.core.management import call_command

    print("📦 Executando migrations...")
    call_command('migrate', verbosity=1)
    print("✅ Migrations concluídas!")


def create_admin(email, senha, nome="Administrador"):
    """Cria o ADMIN inicial (nenhum use case cria o primeiro ADMIN)."""
    from helpdesk.config.container import get_container
    from helpdesk.core.accounts.entities import UserEntity, UserRole

    container = get_container()
    repo = container.usuario_repository()

    existente = repo.get_by_email(email)
    if existente:
        print(f"ℹ️  Usuário {existente.email} já existe")
        return existente

    UserEntity.validar_senha(senha)
    admin = UserEntity.criar(
        nome=nome,
        email=email,
        senha_hash=container.password_hasher().hash(senha),
        papel=UserRole.ADMIN,
    )
    repo.save(admin)
    print(f"✅ Administrador criado: {admin.email}")
    return admin


def create_sample_data(admin):
    """Cria equipe e tickets de exemplo passando pelos use cases."""
    from helpdesk.config.container import get_container
    from helpdesk.core.accounts.dtos import CriarUsuarioInputDTO
    from helpdesk.core.authorization.gate import Ator
    from helpdesk.core.tickets.dtos import AtribuirTicketInputDTO, CriarTicketInputDTO

    container = get_container()
    ator_admin = Ator.from_usuario(admin)

    print("👥 Criando equipe de exemplo...")
    equipe = {}
    for chave, nome, papel in (
        ('coordenador', 'Carla Coordenadora', 'COORDINATOR'),
        ('suporte', 'Bruno Suporte', 'USER'),
        ('cliente', 'Diego Cliente', 'USER'),
    ):
        email = f"{chave}@exemplo.com"
        usuario = container.usuario_repository().get_by_email(email)
        if usuario is None:
            usuario = container.criar_usuario_service().execute(
                CriarUsuarioInputDTO(nome=nome, email=email, senha='senha123', papel=papel),
                ator_admin,
            )
        equipe[chave] = container.usuario_repository().get_by_id(usuario.id)
        print(f"   ✓ {nome} ({papel})")

    sample_tickets = [
        {
            'titulo': 'Sistema fora do ar',
            'descricao': 'O sistema está inacessível para todos os usuários. Erro 503 em todas as páginas.',
            'prioridade': 'URGENT',
            'categoria': 'Infraestrutura',
        },
        {
            'titulo': 'Impressora do financeiro travando',
            'descricao': 'A impressora trava a cada três páginas e precisa ser reiniciada.',
            'prioridade': 'MEDIUM',
            'categoria': 'Hardware',
        },
        {
            'titulo': 'Sem acesso à VPN',
            'descricao': 'A VPN recusa minhas credenciais desde a troca de senha.',
            'prioridade': 'HIGH',
            'categoria': 'Rede',
        },
    ]

    print("📝 Criando tickets de exemplo...")
    ator_cliente = Ator.from_usuario(equipe['cliente'])
    criados = []
    for ticket_data in sample_tickets:
        ticket = container.criar_ticket_service().execute(CriarTicketInputDTO(**ticket_data), ator_cliente)
        criados.append(ticket)
        print(f"   ✓ {ticket.titulo[:50]}")

    # Encaminhar o primeiro para o suporte
    container.atribuir_ticket_service().execute(
        AtribuirTicketInputDTO(ticket_id=criados[0].id, atribuido_a_id=equipe['suporte'].id),
        Ator.from_usuario(equipe['coordenador']),
    )

    print(f"✅ {len(criados)} tickets criados!")


def check_connection():
    """Verifica conexão com o banco."""
    from helpdesk.adapters.django_app.shared.database import health_check

    print("🔍 Verificando conexão com o banco...")

    if health_check():
        print("✅ Conexão OK!")
        return True

    print("❌ Banco indisponível")
    return False


def show_info():
    """Mostra informações do setup."""
    from django.conf import settings

    print("\n" + "=" * 60)
    print("📊 Informações do Setup")
    print("=" * 60)
    print(f"  Database Engine: {settings.DATABASES['default']['ENGINE']}")
    print(f"  Database Name: {settings.DATABASES['default']['NAME']}")
    print(f"  Event Publisher: {settings.EVENT_PUBLISHER_MODE}")
    print(f"  Debug Mode: {settings.DEBUG}")
    print("=" * 60)
    print("\n🚀 Próximos passos:")
    print("   1. django-admin runserver --settings=helpdesk.config.settings")
    print("   2. POST http://localhost:8000/api/auth/login")
    print("   3. GET  http://localhost:8000/health/")
    print("\n")


def main():
    parser = argparse.ArgumentParser(description='Setup rápido para desenvolvimento')
    parser.add_argument(
        '--with-sample-data',
        action='store_true',
        help='Criar equipe e tickets de exemplo'
    )
    parser.add_argument(
        '--check-only',
        action='store_true',
        help='Apenas verificar conexão'
    )
    parser.add_argument('--admin-email', default='admin@exemplo.com')
    parser.add_argument('--admin-password', default='admin123')

    args = parser.parse_args()

    print("\n" + "=" * 60)
    print("🔧 Helpdesk - Quick Setup")
    print("=" * 60 + "\n")

    setup_django()

    if args.check_only:
        check_connection()
        return

    if not check_connection():
        print("\n⚠️  Certifique-se de que o banco de dados está rodando.")
        print("   Para usar SQLite, defina: DATABASE_URL=sqlite:///db.sqlite3")
        return

    run_migrations()

    admin = create_admin(args.admin_email, args.admin_password)

    if args.with_sample_data:
        create_sample_data(admin)

    show_info()


if __name__ == '__main__':
    main()
