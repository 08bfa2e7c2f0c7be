import json
from unittest import mock

import pytest

from futmais.domain.errors import CheckoutError, StoreError, ValidacaoError
from futmais.infra.db import connect
from futmais.usecases.loja import Loja


def _contagens(db_path):
    with connect(db_path) as c:
        return {
            t: c.execute(f"SELECT COUNT(*) FROM {t}").fetchone()[0]
            for t in ("orders", "order_items", "transactions", "customers")
        }


@pytest.fixture
def cliente(loja):
    return loja.cadastrar_cliente("Ana Souza", "21999990000")


def _encher_carrinho(loja, camisa, bola):
    loja.adicionar_ao_carrinho(camisa.id)
    loja.adicionar_ao_carrinho(camisa.id)
    loja.adicionar_ao_carrinho(bola.id)


def test_carrinho_vazio_nao_grava_nada(loja, db_path, camisa):
    antes = _contagens(db_path)
    assert loja.checkout("Pix") is None
    assert _contagens(db_path) == antes


def test_checkout_completo_com_cliente(loja, db_path, cart_path, camisa, bola, cliente):
    _encher_carrinho(loja, camisa, bola)
    res = loja.checkout("Credit", cliente.id)

    assert res.completo
    p = res.pedido
    assert p.id == "#PED-0001"
    assert (p.cliente_id, p.cliente_nome) == (cliente.id, "Ana Souza")
    assert (p.data, p.status, p.forma_pagamento) == ("12/03/2025", "Processing", "Credit")
    assert p.total == pytest.approx(620.0)
    assert [(it.produto_id, it.quantidade) for it in p.itens] == [(camisa.id, 2), (bola.id, 1)]

    # cliente
    assert loja.cliente(cliente.id).total_gasto == pytest.approx(620.0)
    # caixa
    assert res.transacao.descricao == "Venda #PED-0001 - 2 itens"
    assert (res.transacao.tipo, res.transacao.categoria) == ("Income", "Vendas")
    assert res.transacao.valor == pytest.approx(620.0)
    # estoque
    assert (loja.produto(camisa.id).estoque, loja.produto(camisa.id).status) == (13, "IN_STOCK")
    assert (loja.produto(bola.id).estoque, loja.produto(bola.id).status) == (2, "LOW_STOCK")
    # carrinho
    assert not loja.carrinho
    with open(cart_path, encoding="utf-8") as f:
        assert json.load(f) == []

    # tudo persistido
    nova = Loja.abrir(db_path=db_path, cart_path=cart_path)
    assert nova.pedido("#PED-0001").total == pytest.approx(620.0)
    assert nova.cliente(cliente.id).total_gasto == pytest.approx(620.0)
    assert nova.produto(bola.id).estoque == 2
    assert not nova.carrinho


def test_checkout_sem_cliente_e_avulso(loja, camisa):
    loja.adicionar_ao_carrinho(camisa.id)
    res = loja.checkout("Pix")
    assert res.pedido.cliente_nome == "Cliente Avulso"
    assert res.pedido.cliente_id is None


def test_cliente_desconhecido_vira_avulso(loja, camisa):
    loja.adicionar_ao_carrinho(camisa.id)
    res = loja.checkout("Cash", "CUST-NAO-EXISTE")
    assert res.pedido.cliente_nome == "Cliente Avulso"
    assert res.cliente is None


def test_forma_de_pagamento_invalida(loja, db_path, camisa):
    loja.adicionar_ao_carrinho(camisa.id)
    antes = _contagens(db_path)
    with pytest.raises(ValidacaoError):
        loja.checkout("Boleto")
    assert _contagens(db_path) == antes
    assert len(loja.carrinho) == 1


def test_estoque_nunca_fica_negativo(loja, bola):
    loja.adicionar_ao_carrinho(bola.id)
    loja.alterar_quantidade_carrinho(bola.id, 4)
    loja.checkout("Pix")
    p = loja.produto(bola.id)
    assert (p.estoque, p.status) == (0, "OUT_OF_STOCK")


def test_falha_ao_gravar_pedido_aborta_venda(loja, db_path, camisa):
    loja.adicionar_ao_carrinho(camisa.id)
    antes = _contagens(db_path)
    with mock.patch.object(loja.store.pedidos, "inserir",
                           side_effect=StoreError("orders", "INSERT", "offline")):
        with pytest.raises(CheckoutError):
            loja.checkout("Pix")
    assert _contagens(db_path) == antes
    assert loja.pedidos == []
    assert loja.produto(camisa.id).estoque == 15
    assert len(loja.carrinho) == 1


def test_falhas_depois_do_pedido_sao_reportadas(loja, db_path, camisa):
    loja.adicionar_ao_carrinho(camisa.id)
    with mock.patch.object(loja.store.transacoes, "inserir",
                           side_effect=StoreError("transactions", "INSERT", "offline")):
        res = loja.checkout("Pix")
    assert not res.completo
    assert res.transacao is None
    assert any("receita" in f for f in res.falhas)
    # o restante da venda segue
    assert loja.pedido(res.pedido.id) is not None
    assert loja.produto(camisa.id).estoque == 14
    assert not loja.carrinho


def test_produto_excluido_depois_de_ir_ao_carrinho(loja, camisa, bola):
    loja.adicionar_ao_carrinho(camisa.id)
    loja.adicionar_ao_carrinho(bola.id)
    loja.remover_produto(bola.id)
    res = loja.checkout("Debit")
    assert len(res.falhas) == 1
    assert [it.produto_nome for it in loja.store.pedidos.obter(res.pedido.id).itens] == [
        "Camisa Flamengo 2024", "Bola Oficial",
    ]


def test_ids_de_pedido_sequenciais(loja, camisa):
    ids = []
    for _ in range(3):
        loja.adicionar_ao_carrinho(camisa.id)
        ids.append(loja.checkout("Pix").pedido.id)
    assert ids == ["#PED-0001", "#PED-0002", "#PED-0003"]
    assert [p.id for p in loja.pedidos] == ["#PED-0003", "#PED-0002", "#PED-0001"]


def test_pedido_guarda_preco_da_venda(loja, db_path, cart_path, camisa):
    loja.adicionar_ao_carrinho(camisa.id)
    res = loja.checkout("Pix")
    loja.editar_produto(camisa.id, preco=999.0)
    nova = Loja.abrir(db_path=db_path, cart_path=cart_path)
    assert nova.pedido(res.pedido.id).itens[0].preco_unitario == 250.0
    assert nova.pedido(res.pedido.id).total == 250.0


def test_falha_ao_gravar_pedido_devolve_total_gasto(loja, db_path, cart_path, camisa, cliente):
    loja.adicionar_ao_carrinho(camisa.id)
    with mock.patch.object(loja.store.pedidos, "inserir",
                           side_effect=StoreError("orders", "INSERT", "offline")):
        with pytest.raises(CheckoutError):
            loja.checkout("Pix", cliente.id)
    assert loja.cliente(cliente.id).total_gasto == 0.0
    assert Loja.abrir(db_path=db_path, cart_path=cart_path).cliente(cliente.id).total_gasto == 0.0

    # nova tentativa soma a venda uma única vez
    res = loja.checkout("Pix", cliente.id)
    assert res.completo
    assert len(loja.pedidos) == 1
    assert loja.cliente(cliente.id).total_gasto == pytest.approx(250.0)
    assert Loja.abrir(db_path=db_path, cart_path=cart_path).cliente(cliente.id).total_gasto == pytest.approx(250.0)


def test_falha_no_total_gasto_nao_impede_a_venda(loja, db_path, cart_path, camisa, cliente):
    loja.adicionar_ao_carrinho(camisa.id)
    with mock.patch.object(loja.store.clientes, "atualizar",
                           side_effect=StoreError("customers", "UPDATE", "offline")):
        res = loja.checkout("Pix", cliente.id)

    assert not res.completo
    assert len(res.falhas) == 1
    assert "total gasto" in res.falhas[0]
    assert (res.pedido.cliente_id, res.pedido.cliente_nome) == (cliente.id, "Ana Souza")
    assert loja.cliente(cliente.id).total_gasto == 0.0

    nova = Loja.abrir(db_path=db_path, cart_path=cart_path)
    assert nova.pedido(res.pedido.id).total == pytest.approx(250.0)
    assert nova.produto(camisa.id).estoque == 14
    assert not nova.carrinho


def test_falha_de_estoque_em_uma_linha_mantem_as_outras(loja, db_path, cart_path, camisa, bola):
    _encher_carrinho(loja, camisa, bola)
    gravar = loja.store.produtos.atualizar

    def _falha_na_bola(id_, parcial):
        if id_ == bola.id:
            raise StoreError("products", "UPDATE", "offline")
        return gravar(id_, parcial)

    with mock.patch.object(loja.store.produtos, "atualizar", side_effect=_falha_na_bola):
        res = loja.checkout("Cash")

    assert len(res.falhas) == 1
    assert "Bola Oficial" in res.falhas[0]
    assert res.transacao is not None

    nova = Loja.abrir(db_path=db_path, cart_path=cart_path)
    assert nova.pedido(res.pedido.id).total == pytest.approx(620.0)
    assert nova.produto(camisa.id).estoque == 13
    assert nova.produto(bola.id).estoque == 3
    assert loja.produto(bola.id).estoque == 3
    assert not nova.carrinho
