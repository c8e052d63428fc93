"""
Adapters Django.

- shared: Unit of Work, instrumentação do banco
- events: publicadores de eventos e tasks Celery
- tickets: app Django (models, repositórios, API JSON)
"""
