"""
Configuração do Celery para processamento assíncrono.

O Celery é usado para:
- Processar Domain Events fora do request (fan-out de notificações)

Ativado com EVENT_PUBLISHER_MODE=celery; no modo 'sync' os eventos
são entregues no próprio processo pelo LoggingEventPublisher.

Uso:
    # Iniciar worker
    celery -A helpdesk.config.celery worker -l INFO -Q events
"""

import os

from celery import Celery
from kombu import Exchange, Queue

# Definir módulo de settings do Django
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'helpdesk.config.settings')

app = Celery('helpdesk')

# Configurações CELERY_* vindas do Django
app.config_from_object('django.conf:settings', namespace='CELERY')

app.conf.update(
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',

    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,
)

app.conf.task_queues = (
    Queue('default', Exchange('default'), routing_key='default'),
    Queue('events', Exchange('events'), routing_key='events.#'),
)
app.conf.task_default_queue = 'default'

# Roteamento de tarefas para filas
app.conf.task_routes = {
    'helpdesk.adapters.django_app.events.handlers.*': {
        'queue': 'events',
        'routing_key': 'events.domain',
    },
}

app.autodiscover_tasks(['helpdesk.adapters.django_app.events'], related_name='handlers')
