"""
Domínio de Notificações.

- NotificationEntity / NotificationType
- NotificationFanout: transforma Domain Events em notificações
- Use cases de leitura, marcação e anúncios
"""

from .entities import NotificationEntity, NotificationType
from .events import AnuncioSistemaEvent
from .ports import InMemoryNotificationRepository, NotificationRepository
from .fanout import REGRAS, NotificationFanout, RegraFanout

__all__ = [
    "NotificationEntity",
    "NotificationType",
    "AnuncioSistemaEvent",
    "NotificationRepository",
    "InMemoryNotificationRepository",
    "NotificationFanout",
    "RegraFanout",
    "REGRAS",
]
