"""
Testes dos Use Cases de Notificações.

Coverage:
- ListarNotificacoesService (limite, não lidas, isolamento por dono)
- MarcarNotificacaoLidaService / MarcarTodasLidasService
- CriarAnuncioService
"""

from datetime import timedelta

import pytest

from helpdesk.core.notifications.dtos import CriarAnuncioInputDTO
from helpdesk.core.notifications.entities import NotificationEntity, NotificationType
from helpdesk.core.notifications.use_cases import (
    CriarAnuncioService,
    ListarNotificacoesService,
    MarcarNotificacaoLidaService,
    MarcarTodasLidasService,
)
from helpdesk.core.shared.exceptions import EntityNotFoundError, ForbiddenError, ValidationError


@pytest.fixture
def notificar(notificacao_repo):
    """Factory: grava notificações para um usuário."""

    def _notificar(usuario, quantidade=1):
        criadas = [
            NotificationEntity.criar(
                NotificationType.TICKET_UPDATED,
                f"Atualização {i}",
                "Ticket atualizado",
                usuario.id,
                relacionado_id="t1",
            )
            for i in range(quantidade)
        ]
        for i, notificacao in enumerate(criadas):
            notificacao.criado_em = notificacao.criado_em + timedelta(seconds=i)
        notificacao_repo.create_many(criadas)
        return criadas

    return _notificar


class TestListarNotificacoesService:

    def test_mais_recentes_primeiro(self, notificacao_repo, notificar, cliente, ator_de):
        criadas = notificar(cliente, 3)

        resultado = ListarNotificacoesService(notificacao_repo).execute(ator_de(cliente), limite=2)

        assert [n.id for n in resultado.items] == [criadas[2].id, criadas[1].id]
        assert resultado.nao_lidas == 3
        assert resultado.to_dict()["unreadCount"] == 3

    def test_apenas_do_proprio_usuario(self, notificacao_repo, notificar, cliente, outro_cliente, ator_de):
        notificar(outro_cliente, 2)

        resultado = ListarNotificacoesService(notificacao_repo).execute(ator_de(cliente))

        assert resultado.items == []
        assert resultado.nao_lidas == 0

    def test_apenas_nao_lidas(self, notificacao_repo, notificar, cliente, ator_de):
        criadas = notificar(cliente, 2)
        notificacao_repo.mark_read(criadas[0].id, cliente.id)

        resultado = ListarNotificacoesService(notificacao_repo).execute(
            ator_de(cliente), apenas_nao_lidas=True
        )

        assert [n.id for n in resultado.items] == [criadas[1].id]

    @pytest.mark.parametrize("limite", [0, 101, "abc"])
    def test_limite_invalido(self, notificacao_repo, cliente, ator_de, limite):
        with pytest.raises(ValidationError):
            ListarNotificacoesService(notificacao_repo).execute(ator_de(cliente), limite=limite)


class TestMarcarLidas:

    def test_marcar_uma(self, notificacao_repo, uow, notificar, cliente, ator_de):
        notificacao = notificar(cliente)[0]

        output = MarcarNotificacaoLidaService(notificacao_repo, uow).execute(notificacao.id, ator_de(cliente))

        assert output.lida is True
        assert output.to_dict()["readAt"] is not None
        assert notificacao_repo.count_unread(cliente.id) == 0

    def test_notificacao_de_outro_usuario(self, notificacao_repo, uow, notificar, cliente, outro_cliente, ator_de):
        notificacao = notificar(outro_cliente)[0]

        with pytest.raises(EntityNotFoundError):
            MarcarNotificacaoLidaService(notificacao_repo, uow).execute(notificacao.id, ator_de(cliente))
        assert notificacao_repo.count_unread(outro_cliente.id) == 1

    def test_id_obrigatorio(self, notificacao_repo, uow, cliente, ator_de):
        with pytest.raises(ValidationError):
            MarcarNotificacaoLidaService(notificacao_repo, uow).execute("", ator_de(cliente))

    def test_marcar_todas(self, notificacao_repo, uow, notificar, cliente, outro_cliente, ator_de):
        notificar(cliente, 3)
        notificar(outro_cliente, 1)

        marcadas = MarcarTodasLidasService(notificacao_repo, uow).execute(ator_de(cliente))

        assert marcadas == 3
        assert notificacao_repo.count_unread(cliente.id) == 0
        assert notificacao_repo.count_unread(outro_cliente.id) == 1


class TestCriarAnuncioService:

    @pytest.fixture
    def service(self, notificacao_repo, fanout, uow, gate):
        return CriarAnuncioService(notificacao_repo, fanout, uow, gate)

    def test_anuncio_para_todos(self, service, admin, cliente, outro_cliente, gerente, ator_de, notificacao_repo, publisher):
        enviadas = service.execute(
            CriarAnuncioInputDTO(titulo="Manutenção", mensagem="Sistema fora do ar às 22h"),
            ator_de(admin),
        )

        assert enviadas == 3
        assert notificacao_repo.lotes == [3]
        assert notificacao_repo.list_by_user(admin.id) == []
        assert notificacao_repo.list_by_user(gerente.id)[0].dados == {
            "announcementTitle": "Manutenção",
            "announcementMessage": "Sistema fora do ar às 22h",
        }
        assert publisher.published_events == []

    def test_anuncio_para_alvos(self, service, admin, cliente, outro_cliente, ator_de, notificacao_repo):
        enviadas = service.execute(
            CriarAnuncioInputDTO(titulo="Aviso", mensagem="Troque sua senha", usuarios_alvo=(cliente.id,)),
            ator_de(admin),
        )

        assert enviadas == 1
        assert notificacao_repo.list_by_user(outro_cliente.id) == []

    def test_sem_destinatarios(self, service, admin, ator_de, notificacao_repo):
        assert service.execute(CriarAnuncioInputDTO(titulo="Aviso", mensagem="Ninguém"), ator_de(admin)) == 0
        assert notificacao_repo.lotes == []

    def test_apenas_admin(self, service, coordenador, cliente, ator_de, notificacao_repo):
        with pytest.raises(ForbiddenError):
            service.execute(CriarAnuncioInputDTO(titulo="Aviso", mensagem="Mensagem"), ator_de(coordenador))
        assert notificacao_repo.all() == []

    @pytest.mark.parametrize("titulo, mensagem, campo", [("", "m", "title"), ("t", "  ", "message")])
    def test_campos_obrigatorios(self, service, admin, ator_de, titulo, mensagem, campo):
        with pytest.raises(ValidationError) as exc_info:
            service.execute(CriarAnuncioInputDTO(titulo=titulo, mensagem=mensagem), ator_de(admin))
        assert exc_info.value.field == campo
