"""
Helpdesk - núcleo de gestão de tickets de suporte.

Camadas:
- core: regras de negócio puras (tickets, contas, autorização, notificações)
- adapters: Django (ORM, HTTP) e Celery (eventos assíncronos)
- config: settings, container de DI e aplicação Celery
"""

__version__ = "1.0.0"
