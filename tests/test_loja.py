import re
from unittest import mock

import pytest

from futmais.domain.errors import StoreError, ValidacaoError
from futmais.infra.db import connect
from futmais.usecases.loja import Loja


def _contar(db_path, tabela):
    with connect(db_path) as c:
        return c.execute(f"SELECT COUNT(*) FROM {tabela}").fetchone()[0]


# ----------------------
# produtos
# ----------------------

def test_cadastro_de_produto_deriva_status_e_lanca_investimento(loja, camisa):
    assert camisa.status == "IN_STOCK"
    assert loja.produto(camisa.id) is camisa

    [tr] = loja.transacoes
    assert tr.descricao == "Investimento Estoque - Camisa Flamengo 2024 (15 un)"
    assert (tr.tipo, tr.categoria, tr.valor) == ("Expense", "Operacional", 1500.0)
    assert tr.data == "12/03/2025"


def test_produto_sem_estoque_nao_gera_investimento(loja):
    p = loja.cadastrar_produto(nome="Meião", preco=30.0, custo=10.0, estoque=0, tipo="Accessory")
    assert p.status == "OUT_OF_STOCK"
    assert loja.transacoes == []


def test_sku_gerado_quando_vazio(loja):
    p = loja.cadastrar_produto(nome="Chuteira", preco=300.0, sku="")
    assert re.fullmatch(r"SKU-\d{4}", p.sku)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"nome": "", "preco": 100.0},
        {"nome": "Camisa", "preco": None},
        {"nome": "Camisa", "preco": 100.0, "estoque": -1},
        {"nome": "Camisa", "preco": 100.0, "tipo": "Boné"},
    ],
)
def test_cadastro_de_produto_invalido_nao_grava(loja, db_path, kwargs):
    with pytest.raises(ValidacaoError):
        loja.cadastrar_produto(**kwargs)
    assert _contar(db_path, "products") == 0
    assert loja.produtos == []


def test_editar_estoque_recalcula_status(loja, camisa):
    p = loja.atualizar_estoque(camisa.id, 4)
    assert (p.estoque, p.status) == (4, "LOW_STOCK")
    assert loja.produto(camisa.id).status == "LOW_STOCK"

    recarregada = Loja.abrir(db_path=loja.store.db_path, cart_path=str(loja.carrinho.storage.path))
    assert recarregada.produto(camisa.id).status == "LOW_STOCK"


def test_status_nao_pode_ser_editado_diretamente(loja, camisa):
    with pytest.raises(ValidacaoError):
        loja.editar_produto(camisa.id, status="IN_STOCK")


def test_duplicar_produto(loja, camisa):
    copia = loja.duplicar_produto(camisa.id)
    assert copia.id != camisa.id
    assert copia.nome == "Camisa Flamengo 2024 (Cópia)"
    assert copia.sku.startswith("FLA-24-copy-")
    assert len(loja.produtos) == 2


def test_falha_no_banco_nao_altera_cache(loja, camisa):
    erro = StoreError("products", "UPDATE", "offline")
    with mock.patch.object(loja.store.produtos, "atualizar", side_effect=erro):
        with pytest.raises(StoreError):
            loja.atualizar_estoque(camisa.id, 0)
    assert loja.produto(camisa.id).estoque == 15

    with mock.patch.object(loja.store.clientes, "inserir", side_effect=StoreError("customers", "INSERT", "offline")):
        with pytest.raises(StoreError):
            loja.cadastrar_cliente("Ana", "21999990000")
    assert loja.clientes == []


def test_falha_ao_lancar_investimento_mantem_produto(loja, db_path):
    with mock.patch.object(loja.store.transacoes, "inserir",
                           side_effect=StoreError("transactions", "INSERT", "offline")):
        p = loja.cadastrar_produto(nome="Bola", preco=100.0, custo=40.0, estoque=2, tipo="Ball")
    assert loja.produto(p.id) is not None
    assert loja.transacoes == []
    assert _contar(db_path, "products") == 1


def test_remover_produto_inexistente(loja, camisa):
    with pytest.raises(StoreError):
        loja.remover_produto("nao-existe")
    assert len(loja.produtos) == 1
    loja.remover_produto(camisa.id)
    assert loja.produtos == []


# ----------------------
# clientes
# ----------------------

def test_cadastro_de_cliente(loja):
    c = loja.cadastrar_cliente("Ana Souza", "21999990000", email="ana@ex.com")
    assert c.id.startswith("CUST-")
    assert (c.status, c.total_gasto, c.membro_desde) == ("Active", 0.0, "12/03/2025")
    assert "Ana%20Souza" in c.imagem
    assert loja.cliente(c.id) is c


@pytest.mark.parametrize("nome,telefone", [("", "2199"), ("Ana", ""), ("  ", "  ")])
def test_cliente_exige_nome_e_telefone(loja, db_path, nome, telefone):
    with pytest.raises(ValidacaoError, match="Nome e Telefone"):
        loja.cadastrar_cliente(nome, telefone)
    assert _contar(db_path, "customers") == 0


def test_total_gasto_so_muda_pelo_checkout(loja):
    c = loja.cadastrar_cliente("Ana", "2199")
    with pytest.raises(ValidacaoError):
        loja.editar_cliente(c.id, total_gasto=1000.0)
    atualizado = loja.editar_cliente(c.id, status="Inactive", endereco="Rua A, 10")
    assert (atualizado.status, atualizado.endereco, atualizado.total_gasto) == ("Inactive", "Rua A, 10", 0.0)


def test_obter_cliente_inexistente(loja):
    assert loja.cliente("CUST-X") is None


# ----------------------
# fornecedores
# ----------------------

def test_cadastro_de_fornecedor(loja):
    f = loja.cadastrar_fornecedor("Têxtil Sul", "1133334444", contato="Carla",
                                  categorias=["Camisas", " Bolas ", ""])
    assert f.categorias == ["Camisas", "Bolas"]
    assert (f.avaliacao, f.status) == (5, "Active")
    with pytest.raises(ValidacaoError):
        loja.editar_fornecedor(f.id, avaliacao=6)
    assert loja.editar_fornecedor(f.id, avaliacao=3).avaliacao == 3


def test_fornecedor_exige_nome_e_telefone(loja):
    with pytest.raises(ValidacaoError):
        loja.cadastrar_fornecedor("", "11")


# ----------------------
# envios
# ----------------------

def test_cadastro_de_envio_gera_rastreio(loja):
    e = loja.cadastrar_envio("#PED-0001", "Ana", "Correios")
    assert e.status == "Preparação"
    assert e.data_compra == "12/03/2025"
    assert re.fullmatch(r"CO[0-9A-F]{8}", e.codigo_rastreio)

    e2 = loja.cadastrar_envio("#PED-0002", "Bia", "Jadlog", codigo_rastreio="JD123")
    assert e2.codigo_rastreio == "JD123"


def test_envio_exige_pedido_cliente_transportadora(loja):
    with pytest.raises(ValidacaoError):
        loja.cadastrar_envio("#PED-0001", "Ana", "")


def test_status_de_envio_pode_ir_e_voltar(loja):
    e = loja.cadastrar_envio("#PED-0001", "Ana", "Correios")
    assert loja.alterar_status_envio(e.id, "Entregue").status == "Entregue"
    assert loja.alterar_status_envio(e.id, "Despachado").status == "Despachado"
    with pytest.raises(ValidacaoError):
        loja.alterar_status_envio(e.id, "Extraviado")
    assert loja.envio(e.id).status == "Despachado"


# ----------------------
# caixa
# ----------------------

def test_lancamento_manual(loja):
    t = loja.registrar_transacao("Anúncio Instagram", "Marketing", "Expense", 200.0, status="Pago")
    assert t.id.startswith("TR-")
    assert loja.transacoes[0] is t
    assert loja.estatisticas_financeiras()["total_despesas"] == 200.0


@pytest.mark.parametrize(
    "args",
    [
        ("", "Marketing", "Expense", 10.0),
        ("Anúncio", "Viagens", "Expense", 10.0),
        ("Anúncio", "Marketing", "Saída", 10.0),
        ("Anúncio", "Marketing", "Expense", -10.0),
    ],
)
def test_lancamento_invalido(loja, args):
    with pytest.raises(ValidacaoError):
        loja.registrar_transacao(*args)


def test_sessao_recarregada_do_banco(loja, camisa, db_path, cart_path, hoje):
    loja.cadastrar_cliente("Ana", "2199")
    nova = Loja.abrir(db_path=db_path, cart_path=cart_path, relogio=lambda: hoje)
    assert [p.id for p in nova.produtos] == [camisa.id]
    assert [c.nome for c in nova.clientes] == ["Ana"]
    assert len(nova.transacoes) == 1
