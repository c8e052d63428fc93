"""
Testes do NotificationFanout.

Os eventos são montados à mão para exercitar cada regra da tabela
sem passar pelos use cases.
"""

from unittest.mock import Mock

import pytest

from helpdesk.adapters.django_app.events.publishers import InMemoryEventPublisher
from helpdesk.core.accounts.entities import UserRole
from helpdesk.core.notifications.entities import NotificationEntity, NotificationType
from helpdesk.core.notifications.events import AnuncioSistemaEvent
from helpdesk.core.notifications.fanout import REGRAS, NotificationFanout, RegraFanout
from helpdesk.core.tickets.events import (
    TicketAnexoAdicionadoEvent,
    TicketAtribuidoEvent,
    TicketAtualizadoEvent,
    TicketComentadoEvent,
    TicketCriadoEvent,
    TicketStatusAlteradoEvent,
)


def _evento(classe, criador, ator, atribuido=None, **dados):
    return classe(
        aggregate_id="ticket-1",
        titulo="Erro de login",
        criador_id=criador.id,
        atribuido_a_id=atribuido.id if atribuido else None,
        ator_id=ator.id,
        ator_nome=ator.nome,
        **dados,
    )


def _alvos(notificacoes):
    return [n.usuario_id for n in notificacoes]


class TestMontar:
    """Seleção de destinatários e conteúdo (sem gravar)."""

    def test_criado_vai_para_coordenacao(self, fanout, admin, coordenador, gerente, cliente):
        notificacoes = fanout.montar(
            _evento(TicketCriadoEvent, cliente, cliente, prioridade="HIGH", categoria="Geral")
        )

        assert sorted(_alvos(notificacoes)) == sorted([admin.id, coordenador.id])
        assert all(n.tipo == NotificationType.TICKET_CREATED for n in notificacoes)
        assert notificacoes[0].relacionado_id == "ticket-1"
        assert notificacoes[0].dados == {
            "ticketId": "ticket-1",
            "ticketTitle": "Erro de login",
            "createdById": cliente.id,
            "priority": "HIGH",
        }
        assert "Pedro Cliente" in notificacoes[0].mensagem

    def test_criado_ignora_coordenacao_inativa(self, fanout, criar_usuario, cliente):
        criar_usuario("Admin Inativo", papel=UserRole.ADMIN, ativo=False)

        assert fanout.montar(_evento(TicketCriadoEvent, cliente, cliente)) == []

    def test_coordenador_criador_nao_recebe(self, fanout, admin, coordenador):
        notificacoes = fanout.montar(_evento(TicketCriadoEvent, coordenador, admin))
        assert notificacoes == []

    def test_atribuido(self, fanout, coordenador, cliente, outro_cliente):
        notificacoes = fanout.montar(
            _evento(TicketAtribuidoEvent, cliente, coordenador, atribuido=outro_cliente)
        )

        assert _alvos(notificacoes) == [outro_cliente.id, cliente.id]
        assert notificacoes[0].dados["assignedToId"] == outro_cliente.id

    def test_ator_excluido(self, fanout, cliente, outro_cliente):
        notificacoes = fanout.montar(
            _evento(TicketAtribuidoEvent, cliente, outro_cliente, atribuido=outro_cliente)
        )
        assert _alvos(notificacoes) == [cliente.id]

    def test_duplicados_removidos(self, fanout, gerente, cliente):
        notificacoes = fanout.montar(
            _evento(TicketAtualizadoEvent, cliente, gerente, atribuido=cliente, campos=["priority"])
        )

        assert _alvos(notificacoes) == [cliente.id]
        assert "(priority)" in notificacoes[0].mensagem

    @pytest.mark.parametrize("status, esperados", [
        ("IN_PROGRESS", {"TICKET_UPDATED"}),
        ("RESOLVED", {"TICKET_UPDATED", "TICKET_RESOLVED"}),
        ("CLOSED", {"TICKET_UPDATED", "TICKET_CLOSED"}),
        ("CANCELLED", {"TICKET_UPDATED", "TICKET_CLOSED"}),
    ])
    def test_status(self, fanout, gerente, cliente, status, esperados):
        notificacoes = fanout.montar(
            _evento(TicketStatusAlteradoEvent, cliente, gerente, status_anterior="OPEN", status_novo=status)
        )

        assert {n.tipo.value for n in notificacoes} == esperados
        assert set(_alvos(notificacoes)) == {cliente.id}

    def test_fechado_vai_para_responsavel(self, fanout, gerente, cliente, outro_cliente):
        notificacoes = fanout.montar(
            _evento(
                TicketStatusAlteradoEvent, cliente, gerente, atribuido=outro_cliente,
                status_anterior="IN_PROGRESS", status_novo="CLOSED",
            )
        )

        fechados = [n for n in notificacoes if n.tipo == NotificationType.TICKET_CLOSED]
        assert _alvos(fechados) == [cliente.id, outro_cliente.id]
        assert "fechado por Marta Gerente" in fechados[0].mensagem

    def test_comentario_publico(self, fanout, gerente, cliente, outro_cliente):
        notificacoes = fanout.montar(
            _evento(TicketComentadoEvent, cliente, gerente, atribuido=outro_cliente, comentario_id="c1")
        )

        assert _alvos(notificacoes) == [cliente.id, outro_cliente.id]
        assert notificacoes[0].dados["commentId"] == "c1"

    def test_comentario_interno_criador_staff(self, fanout, admin, coordenador, outro_cliente):
        notificacoes = fanout.montar(
            _evento(TicketComentadoEvent, coordenador, admin, atribuido=outro_cliente, interno=True)
        )
        assert _alvos(notificacoes) == [coordenador.id, outro_cliente.id]

    def test_anexo(self, fanout, admin, coordenador, cliente, outro_cliente):
        notificacoes = fanout.montar(
            _evento(
                TicketAnexoAdicionadoEvent, cliente, outro_cliente, atribuido=outro_cliente,
                nome_arquivo="log.txt", tamanho=10,
            )
        )

        assert set(_alvos(notificacoes)) == {cliente.id, admin.id, coordenador.id}
        assert notificacoes[0].dados["fileName"] == "log.txt"

    def test_anuncio_para_todos_ativos(self, fanout, admin, cliente, outro_cliente, criar_usuario):
        criar_usuario("Inativo Total", ativo=False)
        evento = AnuncioSistemaEvent(
            aggregate_id="a1", titulo="Manutenção", mensagem="Sistema fora às 22h",
            ator_id=admin.id, ator_nome=admin.nome,
        )

        notificacoes = fanout.montar(evento)

        assert set(_alvos(notificacoes)) == {cliente.id, outro_cliente.id}
        assert notificacoes[0].relacionado_id is None
        assert notificacoes[0].tipo == NotificationType.SYSTEM_ANNOUNCEMENT

    def test_anuncio_alvos_escolhidos(self, fanout, admin, cliente, outro_cliente, criar_usuario):
        inativo = criar_usuario("Inativo Total", ativo=False)
        evento = AnuncioSistemaEvent(
            aggregate_id="a1", titulo="Aviso", mensagem="Somente para você",
            usuarios_alvo=[cliente.id, inativo.id, "fantasma"],
            ator_id=admin.id,
        )

        assert _alvos(fanout.montar(evento)) == [cliente.id]

    def test_evento_sem_regra(self, usuario_repo, notificacao_repo, cliente):
        fanout = NotificationFanout(notificacao_repo, usuario_repo, regras={})
        assert fanout.montar(_evento(TicketCriadoEvent, cliente, cliente)) == []

    def test_tabela_cobre_eventos_de_ticket(self):
        assert set(REGRAS) == {
            "TicketCriadoEvent",
            "TicketAtribuidoEvent",
            "TicketStatusAlteradoEvent",
            "TicketAtualizadoEvent",
            "TicketComentadoEvent",
            "TicketAnexoAdicionadoEvent",
            "AnuncioSistemaEvent",
        }


class TestDistribuir:
    """Gravação em lote e tratamento de falhas."""

    def test_um_lote_por_evento(self, fanout, notificacao_repo, admin, coordenador, cliente):
        gravadas = fanout.distribuir(_evento(TicketCriadoEvent, cliente, cliente))

        assert gravadas == 2
        assert notificacao_repo.lotes == [2]

    def test_sem_destinatarios_nao_grava(self, fanout, notificacao_repo, cliente):
        assert fanout.distribuir(_evento(TicketCriadoEvent, cliente, cliente)) == 0
        assert notificacao_repo.lotes == []

    def test_falha_e_engolida(self, usuario_repo, admin, cliente):
        repo = Mock()
        repo.create_many.side_effect = RuntimeError("banco fora")
        fanout = NotificationFanout(repo, usuario_repo)

        assert fanout.distribuir(_evento(TicketCriadoEvent, cliente, cliente)) == 0

    def test_regra_com_erro_e_engolida(self, usuario_repo, notificacao_repo, cliente):
        def _quebra(evento, repo):
            raise KeyError("x")

        regras = {
            "TicketCriadoEvent": [
                RegraFanout(
                    tipo=NotificationType.TICKET_CREATED,
                    destinatarios=_quebra,
                    titulo=lambda e: "t",
                    mensagem=lambda e: "m",
                    dados=lambda e: {},
                )
            ]
        }
        fanout = NotificationFanout(notificacao_repo, usuario_repo, regras=regras)

        assert fanout(_evento(TicketCriadoEvent, cliente, cliente)) == 0
        assert notificacao_repo.all() == []

    def test_registrar_em_publisher(self, fanout, notificacao_repo, admin, cliente):
        publisher = InMemoryEventPublisher()
        fanout.registrar_em(publisher, tipos=["TicketCriadoEvent"])

        publisher.publish(_evento(TicketCriadoEvent, cliente, cliente))
        publisher.publish(_evento(TicketAtualizadoEvent, cliente, admin, campos=["title"]))

        assert [n.tipo for n in notificacao_repo.all()] == [NotificationType.TICKET_CREATED]


class TestNotificationEntity:

    def test_criar_e_marcar_lida(self, cliente):
        notificacao = NotificationEntity.criar(
            NotificationType.TICKET_UPDATED, " Título ", "Mensagem", cliente.id, dados={"a": 1}
        )

        assert notificacao.titulo == "Título"
        assert notificacao.lida is False

        notificacao.marcar_como_lida()
        lida_em = notificacao.lida_em
        notificacao.marcar_como_lida()

        assert notificacao.lida is True
        assert notificacao.lida_em == lida_em

    @pytest.mark.parametrize("titulo, mensagem, usuario_id", [
        ("", "m", "u"),
        ("t", " ", "u"),
        ("t", "m", ""),
    ])
    def test_campos_obrigatorios(self, titulo, mensagem, usuario_id):
        from helpdesk.core.shared.exceptions import ValidationError

        with pytest.raises(ValidationError):
            NotificationEntity.criar(NotificationType.TICKET_UPDATED, titulo, mensagem, usuario_id)
