from datetime import date

import pytest

from futmais.usecases.loja import Loja

# quarta-feira
HOJE = date(2025, 3, 12)


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "futmais_test.sqlite")


@pytest.fixture
def cart_path(tmp_path):
    return str(tmp_path / "carrinho.json")


@pytest.fixture
def loja(db_path, cart_path):
    return Loja.abrir(db_path=db_path, cart_path=cart_path, relogio=lambda: HOJE)


@pytest.fixture
def camisa(loja):
    return loja.cadastrar_produto(
        nome="Camisa Flamengo 2024", preco=250.0, custo=100.0, estoque=15,
        tipo="Jersey", time="Flamengo", liga="Brasileirão", sku="FLA-24",
    )


@pytest.fixture
def bola(loja):
    return loja.cadastrar_produto(nome="Bola Oficial", preco=120.0, custo=50.0, estoque=3, tipo="Ball")


@pytest.fixture
def hoje():
    return HOJE
