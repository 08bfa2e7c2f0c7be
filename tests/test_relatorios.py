import pytest

from futmais.domain.financeiro import Periodo
from futmais.domain.models import Envio, Fornecedor, ItemPedido, Pedido, Produto
from futmais.usecases import relatorios


def test_margem_usa_custo_atual_do_produto():
    produtos = [Produto(id="p1", nome="Camisa", preco=100.0, custo=50.0)]
    pedidos = [Pedido(id="#PED-0001", cliente_nome="x", data="12/03/2025", total=200.0,
                      forma_pagamento="Pix", itens=[ItemPedido("p1", "Camisa", 100.0, 2)])]
    assert relatorios.margem_lucro(pedidos, produtos) == pytest.approx(50.0)

    produtos[0].custo = 80.0
    assert relatorios.margem_lucro(pedidos, produtos) == pytest.approx(20.0)

    # produto excluído entra com custo zero
    assert relatorios.margem_lucro(pedidos, []) == pytest.approx(100.0)
    assert relatorios.margem_lucro([], produtos) == 0.0


def test_dashboard(loja, hoje, camisa, bola):
    loja.cadastrar_produto(nome="Camisa Vasco", preco=200.0, custo=90.0, estoque=2, tipo="Jersey")
    loja.cadastrar_produto(nome="Camisa Grêmio", preco=200.0, custo=90.0, estoque=30, tipo="Jersey")

    loja.adicionar_ao_carrinho(camisa.id)
    loja.checkout("Pix")
    loja.adicionar_ao_carrinho(bola.id)
    loja.checkout("Cash")

    res = relatorios.resumo_dashboard(loja, Periodo("hoje"), hoje)
    assert res["periodo"] == "Hoje"
    assert res["receita"] == pytest.approx(370.0)
    assert res["pedidos"] == 2
    assert res["ticket_medio"] == pytest.approx(185.0)
    assert res["margem_lucro"] == pytest.approx((370.0 - 150.0) / 370.0 * 100)
    assert [p.nome for p in res["estoque_critico"]] == ["Camisa Vasco", "Camisa Flamengo 2024", "Camisa Grêmio"]
    assert [p.id for p in res["pedidos_recentes"]] == ["#PED-0002", "#PED-0001"]
    assert res["grafico"].pontos == []


def test_dashboard_sem_vendas(loja, hoje):
    res = relatorios.resumo_dashboard(loja, Periodo("total"), hoje)
    assert (res["receita"], res["pedidos"], res["ticket_medio"], res["margem_lucro"]) == (0, 0, 0.0, 0.0)
    assert res["grafico"].placeholder


def test_resumo_financeiro_mantem_lancamento_sem_data(loja, hoje):
    loja.registrar_transacao("Venda balcão", "Vendas", "Income", 500.0)
    loja.registrar_transacao("Frete", "Operacional", "Expense", 80.0, data="data perdida")
    loja.registrar_transacao("Antigo", "Outros", "Expense", 10.0, data="01/01/2024")

    res = relatorios.resumo_financeiro(loja, Periodo("hoje"), hoje=hoje)
    assert [t.descricao for t in res["extrato"]] == ["Frete", "Venda balcão"]
    assert res["totais"]["total_receitas"] == 500.0
    assert res["semanal"][3]["receitas"] == 500.0   # quarta-feira
    assert res["escala"] == 500.0

    res = relatorios.resumo_financeiro(loja, Periodo("total"), "Saídas", hoje)
    assert {t.descricao for t in res["extrato"]} == {"Frete", "Antigo"}


def test_filtro_de_tipo_vale_para_totais_e_grafico(loja, hoje, camisa):
    loja.adicionar_ao_carrinho(camisa.id)
    loja.checkout("Pix")

    res = relatorios.resumo_financeiro(loja, Periodo("total"), filtro="Entradas", hoje=hoje)
    assert [t.tipo for t in res["extrato"]] == ["Income"]
    assert res["totais"]["total_receitas"] == 250.0
    assert res["totais"]["total_despesas"] == 0.0
    assert res["totais"]["custos_operacionais"] == 0.0
    assert all(b["despesas"] == 0.0 for b in res["semanal"])
    assert res["escala"] == 250.0

    res = relatorios.resumo_financeiro(loja, Periodo("total"), filtro="Saídas", hoje=hoje)
    assert res["totais"]["total_receitas"] == 0.0
    assert res["totais"]["total_despesas"] == 1500.0
    assert res["escala"] == 1500.0


def test_detalhe_do_cliente(loja, camisa):
    ana = loja.cadastrar_cliente("Ana", "2199")
    loja.adicionar_ao_carrinho(camisa.id)
    loja.checkout("Pix", ana.id)
    loja.adicionar_ao_carrinho(camisa.id)
    loja.checkout("Pix")

    det = relatorios.detalhe_cliente(loja, ana.id)
    assert det["total_pedidos"] == 1
    assert det["ticket_medio"] == pytest.approx(250.0)
    assert relatorios.detalhe_cliente(loja, "CUST-X") is None


def test_busca_e_estatisticas_de_clientes(loja):
    loja.cadastrar_cliente("bruno", "2188", email="b@ex.com")
    loja.cadastrar_cliente("Ana", "2199")
    assert [c.nome for c in relatorios.buscar_clientes(loja.clientes)] == ["Ana", "bruno"]
    assert [c.nome for c in relatorios.buscar_clientes(loja.clientes, "EX.COM")] == ["bruno"]
    assert [c.nome for c in relatorios.buscar_clientes(loja.clientes, "2199")] == ["Ana"]
    st = relatorios.estatisticas_clientes(loja.clientes)
    assert (st["total"], st["ativos"]) == (2, 2)


def test_busca_de_produtos(loja, camisa, bola):
    assert relatorios.buscar_produtos(loja.produtos, "flamengo") == [camisa]
    assert relatorios.buscar_produtos(loja.produtos, "fla-24") == [camisa]
    assert relatorios.buscar_produtos(loja.produtos, tipo="Ball") == [bola]
    assert relatorios.buscar_produtos(loja.produtos, status="LOW_STOCK") == [bola]
    st = relatorios.estatisticas_estoque(loja.produtos)
    assert (st["total"], st["em_estoque"], st["estoque_baixo"], st["esgotados"]) == (2, 1, 1, 0)
    assert st["valor_total"] == pytest.approx(250.0 * 15 + 120.0 * 3)


def test_busca_de_pedidos():
    pedidos = [
        Pedido(id="#PED-0001", cliente_nome="Ana", data="", total=1, forma_pagamento="Pix"),
        Pedido(id="#PED-0002", cliente_nome="Bruno", data="", total=1, forma_pagamento="Pix",
               status="Delivered"),
    ]
    assert [p.id for p in relatorios.buscar_pedidos(pedidos, "bru")] == ["#PED-0002"]
    assert [p.id for p in relatorios.buscar_pedidos(pedidos, "ped-0001")] == ["#PED-0001"]
    assert [p.id for p in relatorios.buscar_pedidos(pedidos, status="Delivered")] == ["#PED-0002"]


def test_fornecedores():
    fs = [
        Fornecedor(id="S1", nome="Têxtil Sul", telefone="1", categorias=["Camisas"]),
        Fornecedor(id="S2", nome="Bolas BR", telefone="2", avaliacao=4, status="Inactive",
                   categorias=["Bolas"], contato="Carla"),
    ]
    assert relatorios.estatisticas_fornecedores(fs) == {"total": 2, "ativos": 1, "nota_maxima": 1}
    assert [f.id for f in relatorios.buscar_fornecedores(fs, "carla")] == ["S2"]
    assert [f.id for f in relatorios.buscar_fornecedores(fs, categoria="Camisas")] == ["S1"]


def test_envios():
    es = [
        Envio(id="E1", pedido_id="#PED-0001", cliente_nome="Ana", transportadora="Correios",
              codigo_rastreio="CO123"),
        Envio(id="E2", pedido_id="#PED-0002", cliente_nome="Bia", transportadora="Jadlog",
              codigo_rastreio="JA999", status="Entregue"),
    ]
    st = relatorios.estatisticas_envios(es)
    assert st == {"total": 2, "Preparação": 1, "Despachado": 0, "Em Trânsito": 0, "Entregue": 1}
    assert [e.id for e in relatorios.buscar_envios(es, "ja999")] == ["E2"]
    assert [e.id for e in relatorios.buscar_envios(es, status="Preparação")] == ["E1"]
    linha = relatorios.linha_envio(es[1])
    assert (linha["progresso"], linha["ultimo_status"]) == (100.0, "Pendente")


@pytest.mark.parametrize("busca", [
    lambda: relatorios.buscar_produtos([], status="ESGOTADO"),
    lambda: relatorios.buscar_produtos([], tipo="Chuteira"),
    lambda: relatorios.buscar_pedidos([], status="Shipped"),
    lambda: relatorios.buscar_envios([], status="Extraviado"),
])
def test_filtro_de_status_desconhecido(busca):
    with pytest.raises(ValueError):
        busca()
