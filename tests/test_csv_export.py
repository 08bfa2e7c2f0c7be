from datetime import date

import pandas as pd

from futmais.adapters import csv_export
from futmais.domain.models import Cliente, Envio, Fornecedor, TransacaoFinanceira

DIA = date(2025, 3, 12)


def _ler(caminho):
    return pd.read_csv(caminho, dtype=str, keep_default_na=False)


def test_nome_do_arquivo():
    assert csv_export.nome_arquivo("clientes", DIA) == "clientes_futmais_2025-03-12.csv"


def test_exporta_clientes(tmp_path):
    clientes = [
        Cliente(id="CUST-1", nome="Ana", telefone="2199", email="ana@ex.com",
                total_gasto=1234.5, membro_desde="01/02/2025"),
        Cliente(id="CUST-2", nome="Bruno", telefone="2188"),
    ]
    caminho = csv_export.exportar_clientes(clientes, str(tmp_path), DIA)
    assert caminho == tmp_path / "clientes_futmais_2025-03-12.csv"

    df = _ler(caminho)
    assert list(df.columns) == csv_export.COLUNAS_CLIENTES
    assert df.loc[0, "Gasto Total"] == "1234.50"
    assert df.loc[1, "Email"] == ""
    assert df.loc[1, "Status"] == "Active"


def test_exporta_fornecedores_com_categorias_juntas(tmp_path):
    fs = [Fornecedor(id="SUP-1", nome="Têxtil Sul", telefone="11", categorias=["Camisas", "Shorts"], avaliacao=4)]
    df = _ler(csv_export.exportar_fornecedores(fs, str(tmp_path), DIA))
    assert list(df.columns) == csv_export.COLUNAS_FORNECEDORES
    assert df.loc[0, "Empresa"] == "Têxtil Sul"
    assert df.loc[0, "Categorias"] == "Camisas | Shorts"
    assert df.loc[0, "Rating"] == "4"


def test_exporta_extrato(tmp_path):
    ts = [TransacaoFinanceira(id="TR-1", data="12/03/2025", descricao="Venda #PED-0001 - 2 itens",
                              categoria="Vendas", tipo="Income", valor=370.0)]
    caminho = csv_export.exportar_transacoes(ts, str(tmp_path), DIA)
    assert caminho.name == "financeiro_futmais_2025-03-12.csv"
    df = _ler(caminho)
    assert list(df.columns) == csv_export.COLUNAS_TRANSACOES
    assert df.loc[0, "Descrição"] == "Venda #PED-0001 - 2 itens"
    assert float(df.loc[0, "Valor"]) == 370.0


def test_exporta_envios_vazio_so_com_cabecalho(tmp_path):
    df = _ler(csv_export.exportar_envios([], str(tmp_path), DIA))
    assert list(df.columns) == csv_export.COLUNAS_ENVIOS
    assert df.empty


def test_exporta_envios(tmp_path):
    es = [Envio(id="SHIP-1", pedido_id="#PED-0001", cliente_nome="Ana", transportadora="Correios",
                codigo_rastreio="CO1234ABCD")]
    caminho = csv_export.exportar_envios(es, str(tmp_path), DIA)
    assert caminho.name == "logistica_2025-03-12.csv"
    df = _ler(caminho)
    assert df.loc[0, "Rastreio"] == "CO1234ABCD"
    assert df.loc[0, "Status"] == "Preparação"
    assert df.loc[0, "Previsão"] == ""
