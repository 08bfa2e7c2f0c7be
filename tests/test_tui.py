import pytest

from futmais.adapters import tui as tui_mod
from futmais.adapters.tui import FutmaisTUI


@pytest.fixture
def respostas(monkeypatch):
    fila = []

    def _ask(*args, **kwargs):
        return fila.pop(0)

    monkeypatch.setattr(tui_mod.Prompt, "ask", _ask)
    return fila


def test_tui_finaliza_venda_avulsa(loja, camisa, respostas):
    loja.adicionar_ao_carrinho(camisa.id)
    respostas.extend(["Cash", ""])

    FutmaisTUI(loja=loja).finalizar_venda()

    pedido = loja.pedidos[0]
    assert pedido.forma_pagamento == "Cash"
    assert pedido.cliente_nome == "Cliente Avulso"
    assert len(loja.carrinho) == 0
    assert respostas == []


def test_tui_carrinho_vazio_nao_pergunta_nada(loja, respostas):
    FutmaisTUI(loja=loja).finalizar_venda()
    assert loja.pedidos == []


def test_tui_erro_de_dominio_nao_derruba_o_menu(loja, respostas):
    # Financeiro > novo lançamento sem descrição; o erro volta ao menu principal
    respostas.extend(["4", "2", "", "Outros", "Expense", "10", "0"])
    FutmaisTUI(loja=loja).run()
    assert loja.transacoes == []
    assert respostas == []


def test_tui_periodo_personalizado(loja, respostas):
    respostas.extend(["personalizado", "01/03/2025", "12/03/2025"])
    periodo = FutmaisTUI(loja=loja).pedir_periodo()
    assert periodo.tipo == "personalizado"
    assert periodo.rotulo() == "01/03/2025 - 12/03/2025"


def test_tui_periodo_personalizado_com_data_invalida(loja, respostas):
    respostas.extend(["personalizado", "32/13/2025"])
    with pytest.raises(ValueError):
        FutmaisTUI(loja=loja).pedir_periodo()
