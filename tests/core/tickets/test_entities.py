"""
Testes Unitários para Entidades do Domínio de Tickets.

Testa as regras de negócio encapsuladas nas entidades:
- Validações de criação e edição
- Invariante de fechado_em
- Atribuição e devolução
- Comentários e anexos
"""

from datetime import timedelta

import pytest

from helpdesk.core.shared.exceptions import ValidationError
from helpdesk.core.tickets.entities import (
    STATUS_FECHAMENTO,
    AttachmentEntity,
    CommentEntity,
    TicketEntity,
    TicketPriority,
    TicketStatus,
)


@pytest.fixture
def ticket():
    return TicketEntity.criar(
        titulo="Erro ao gerar relatório",
        descricao="O relatório mensal retorna página em branco",
        criador_id="user-1",
        prioridade=TicketPriority.HIGH,
        tags=["relatorio", " financeiro ", "relatorio", ""],
    )


class TestTicketEntityCriacao:
    """Testes do factory method TicketEntity.criar."""

    def test_estado_inicial(self, ticket):
        assert ticket.status == TicketStatus.OPEN
        assert ticket.prioridade == TicketPriority.HIGH
        assert ticket.categoria == "Geral"
        assert ticket.atribuido_a_id is None
        assert ticket.fechado_em is None
        assert ticket.tags == ["relatorio", "financeiro"]

    def test_id_unico(self):
        dados = dict(titulo="Título válido", descricao="Descrição suficiente", criador_id="u")
        assert TicketEntity.criar(**dados).id != TicketEntity.criar(**dados).id

    def test_trim_de_campos(self):
        ticket = TicketEntity.criar(
            titulo="   Monitor piscando  ",
            descricao="  A tela pisca ao ligar o computador  ",
            criador_id="u",
            categoria="  Hardware ",
        )

        assert ticket.titulo == "Monitor piscando"
        assert ticket.descricao == "A tela pisca ao ligar o computador"
        assert ticket.categoria == "Hardware"

    @pytest.mark.parametrize("titulo, mensagem", [
        ("", "obrigatório"),
        ("Erro", "pelo menos 5"),
        ("x" * 201, "no máximo 200"),
    ])
    def test_titulo_invalido(self, titulo, mensagem):
        with pytest.raises(ValidationError) as exc_info:
            TicketEntity.criar(titulo=titulo, descricao="Descrição suficiente", criador_id="u")

        assert exc_info.value.field == "title"
        assert mensagem in exc_info.value.message

    def test_limites_de_titulo_aceitos(self):
        TicketEntity.criar(titulo="x" * 5, descricao="Descrição suficiente", criador_id="u")
        TicketEntity.criar(titulo="x" * 200, descricao="Descrição suficiente", criador_id="u")

    @pytest.mark.parametrize("descricao", ["", "curta", "x" * 2001])
    def test_descricao_invalida(self, descricao):
        with pytest.raises(ValidationError) as exc_info:
            TicketEntity.criar(titulo="Título válido", descricao=descricao, criador_id="u")
        assert exc_info.value.field == "description"

    def test_categoria_longa(self):
        with pytest.raises(ValidationError) as exc_info:
            TicketEntity.criar(
                titulo="Título válido", descricao="Descrição suficiente", criador_id="u",
                categoria="c" * 51,
            )
        assert exc_info.value.field == "category"

    def test_criador_obrigatorio(self):
        with pytest.raises(ValidationError):
            TicketEntity.criar(titulo="Título válido", descricao="Descrição suficiente", criador_id="")


class TestTicketStatus:
    """Transições e invariante de fechado_em."""

    @pytest.mark.parametrize("status", sorted(STATUS_FECHAMENTO, key=lambda s: s.value))
    def test_fechamento_carimba_fechado_em(self, ticket, status):
        anterior = ticket.alterar_status(status)

        assert anterior == TicketStatus.OPEN
        assert ticket.fechado_em is not None
        assert ticket.esta_fechado

    def test_reabrir_limpa_fechado_em(self, ticket):
        ticket.alterar_status(TicketStatus.RESOLVED)
        ticket.alterar_status(TicketStatus.WAITING_FOR_USER)

        assert ticket.fechado_em is None

    def test_fechamento_repetido_nao_recarimba(self, ticket):
        ticket.alterar_status(TicketStatus.RESOLVED)
        primeiro = ticket.fechado_em

        ticket.alterar_status(TicketStatus.CLOSED)

        assert ticket.fechado_em == primeiro

    def test_qualquer_transicao_permitida(self, ticket):
        ticket.alterar_status(TicketStatus.CANCELLED)
        ticket.alterar_status(TicketStatus.OPEN)

        assert ticket.status == TicketStatus.OPEN

    def test_from_string(self):
        assert TicketStatus.from_string("in progress") == TicketStatus.IN_PROGRESS
        assert TicketStatus.from_string("waiting_for_third_party") == TicketStatus.WAITING_FOR_THIRD_PARTY
        with pytest.raises(ValidationError):
            TicketStatus.from_string("PAUSED")

    def test_prioridade_from_string(self):
        assert TicketPriority.from_string("urgent") == TicketPriority.URGENT
        with pytest.raises(ValidationError) as exc_info:
            TicketPriority.from_string("CRITICAL")
        assert exc_info.value.field == "priority"

    def test_tempo_resolucao(self, ticket):
        assert ticket.tempo_resolucao_horas is None

        ticket.alterar_status(TicketStatus.RESOLVED)
        ticket.fechado_em = ticket.criado_em + timedelta(hours=6)

        assert ticket.tempo_resolucao_horas == pytest.approx(6.0)


class TestTicketAtribuicao:

    def test_atribuir_vai_para_in_progress(self, ticket):
        anterior = ticket.atribuir_a("suporte-1")

        assert anterior == TicketStatus.OPEN
        assert ticket.atribuido_a_id == "suporte-1"
        assert ticket.status == TicketStatus.IN_PROGRESS
        assert ticket.esta_atribuido

    def test_atribuir_reabre_resolvido(self, ticket):
        ticket.alterar_status(TicketStatus.RESOLVED)

        ticket.atribuir_a("suporte-1")

        assert ticket.status == TicketStatus.IN_PROGRESS
        assert ticket.fechado_em is None

    def test_atribuir_com_status_explicito(self, ticket):
        ticket.atribuir_a("suporte-1", status=TicketStatus.WAITING_FOR_THIRD_PARTY)
        assert ticket.status == TicketStatus.WAITING_FOR_THIRD_PARTY

    def test_atribuir_sem_id(self, ticket):
        with pytest.raises(ValidationError) as exc_info:
            ticket.atribuir_a("")
        assert exc_info.value.field == "assignedToId"

    def test_devolver_para_coordenacao(self, ticket):
        ticket.atribuir_a("suporte-1")

        anterior = ticket.devolver_para_coordenacao()

        assert anterior == TicketStatus.IN_PROGRESS
        assert ticket.status == TicketStatus.OPEN
        assert ticket.atribuido_a_id is None

    def test_remover_responsavel_mantem_status(self, ticket):
        ticket.atribuir_a("suporte-1")

        assert ticket.remover_responsavel() == "suporte-1"
        assert ticket.status == TicketStatus.IN_PROGRESS


class TestTicketAtualizarDados:

    def test_retorna_campos_alterados(self, ticket):
        campos = ticket.atualizar_dados(
            titulo=ticket.titulo,
            categoria="Relatórios",
            prioridade=TicketPriority.URGENT,
            tags=["financeiro", "relatorio"],
        )

        assert campos == ["category", "priority", "tags"]
        assert ticket.categoria == "Relatórios"

    def test_sem_alteracao_nao_toca_timestamp(self, ticket):
        antes = ticket.atualizado_em

        assert ticket.atualizar_dados(prioridade=TicketPriority.HIGH) == []
        assert ticket.atualizado_em == antes

    def test_validacao_na_edicao(self, ticket):
        with pytest.raises(ValidationError):
            ticket.atualizar_dados(descricao="curta")
        assert ticket.descricao == "O relatório mensal retorna página em branco"


class TestCommentEntity:

    def test_criar(self):
        comentario = CommentEntity.criar("t1", "u1", "  Verificando o problema  ", interno=True)

        assert comentario.conteudo == "Verificando o problema"
        assert comentario.interno is True

    def test_conteudo_vazio(self):
        with pytest.raises(ValidationError):
            CommentEntity.criar("t1", "u1", "   ")

    def test_limite_de_tamanho(self):
        CommentEntity.criar("t1", "u1", "x" * 1000)
        with pytest.raises(ValidationError) as exc_info:
            CommentEntity.criar("t1", "u1", "x" * 1001)
        assert exc_info.value.field == "content"


class TestAttachmentEntity:

    def test_criar(self):
        anexo = AttachmentEntity.criar("t1", "u1", "log.txt", "/uploads/log.txt", "2048")
        assert anexo.tamanho == 2048

    @pytest.mark.parametrize("nome, caminho, tamanho, campo", [
        ("", "/x", 1, "fileName"),
        ("a" * 256, "/x", 1, "fileName"),
        ("log.txt", "", 1, "filePath"),
        ("log.txt", "/x", -1, "fileSize"),
        ("log.txt", "/x", "grande", "fileSize"),
    ])
    def test_invalido(self, nome, caminho, tamanho, campo):
        with pytest.raises(ValidationError) as exc_info:
            AttachmentEntity.criar("t1", "u1", nome, caminho, tamanho)
        assert exc_info.value.field == campo
