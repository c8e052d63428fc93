"""
Ports (Interfaces) do Domínio de Notificações.

- NotificationRepository: persistência de notificações
- InMemoryNotificationRepository: implementação para testes
"""

from typing import Iterable, List, Optional, Protocol, runtime_checkable

from .entities import NotificationEntity


@runtime_checkable
class NotificationRepository(Protocol):
    """
    Interface para persistência de Notificações.

    Todas as consultas de leitura/marcação são filtradas pelo dono,
    de modo que um usuário nunca enxerga notificação de outro.
    """

    def create_many(self, notificacoes: Iterable[NotificationEntity]) -> int:
        """Grava um lote de notificações. Retorna a quantidade gravada."""
        ...

    def list_by_user(
        self,
        usuario_id: str,
        apenas_nao_lidas: bool = False,
        limite: int = 20,
    ) -> List[NotificationEntity]:
        """Mais recentes primeiro."""
        ...

    def count_unread(self, usuario_id: str) -> int:
        ...

    def mark_read(self, notificacao_id: str, usuario_id: str) -> Optional[NotificationEntity]:
        """Retorna None se a notificação não existe para este usuário."""
        ...

    def mark_all_read(self, usuario_id: str) -> int:
        ...

    def delete_by_related(self, relacionado_id: str) -> None:
        ...


class InMemoryNotificationRepository:
    """
    Implementação em memória do NotificationRepository.

    Útil para testes unitários e prototipagem. Não usar em produção!
    """

    def __init__(self):
        self._notificacoes: dict[str, NotificationEntity] = {}
        self.lotes: List[int] = []

    def create_many(self, notificacoes: Iterable[NotificationEntity]) -> int:
        lote = list(notificacoes)
        for notificacao in lote:
            self._notificacoes[notificacao.id] = notificacao
        self.lotes.append(len(lote))
        return len(lote)

    def list_by_user(
        self,
        usuario_id: str,
        apenas_nao_lidas: bool = False,
        limite: int = 20,
    ) -> List[NotificationEntity]:
        encontradas = [
            n for n in self._notificacoes.values()
            if n.usuario_id == usuario_id and (not apenas_nao_lidas or not n.lida)
        ]
        encontradas.sort(key=lambda n: n.criado_em, reverse=True)
        return encontradas[:limite]

    def count_unread(self, usuario_id: str) -> int:
        return len([
            n for n in self._notificacoes.values()
            if n.usuario_id == usuario_id and not n.lida
        ])

    def mark_read(self, notificacao_id: str, usuario_id: str) -> Optional[NotificationEntity]:
        notificacao = self._notificacoes.get(notificacao_id)
        if not notificacao or notificacao.usuario_id != usuario_id:
            return None
        notificacao.marcar_como_lida()
        return notificacao

    def mark_all_read(self, usuario_id: str) -> int:
        marcadas = 0
        for notificacao in self._notificacoes.values():
            if notificacao.usuario_id == usuario_id and not notificacao.lida:
                notificacao.marcar_como_lida()
                marcadas += 1
        return marcadas

    def delete_by_related(self, relacionado_id: str) -> None:
        self._notificacoes = {
            k: n for k, n in self._notificacoes.items()
            if n.relacionado_id != relacionado_id
        }

    def all(self) -> List[NotificationEntity]:
        return list(self._notificacoes.values())

    def clear(self) -> None:
        self._notificacoes.clear()
        self.lotes.clear()
