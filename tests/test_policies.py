import pytest

from futmais.domain.policies import (
    estoque_apos_venda,
    indice_etapa_envio,
    progresso_envio,
    status_por_estoque,
)


@pytest.mark.parametrize(
    "estoque,esperado",
    [
        (0, "OUT_OF_STOCK"),
        (1, "LOW_STOCK"),
        (9, "LOW_STOCK"),
        (10, "IN_STOCK"),
        (250, "IN_STOCK"),
    ],
)
def test_status_por_estoque(estoque, esperado):
    assert status_por_estoque(estoque) == esperado


def test_status_por_estoque_limite_customizado():
    assert status_por_estoque(4, limite_baixo=5) == "LOW_STOCK"
    assert status_por_estoque(5, limite_baixo=5) == "IN_STOCK"


def test_status_por_estoque_negativo():
    with pytest.raises(ValueError):
        status_por_estoque(-1)


def test_estoque_apos_venda_tem_piso_zero():
    assert estoque_apos_venda(10, 3) == 7
    assert estoque_apos_venda(2, 5) == 0


def test_etapas_de_envio():
    assert indice_etapa_envio("Preparação") == 0
    assert indice_etapa_envio("Entregue") == 3
    assert indice_etapa_envio("Extraviado") == -1
    assert progresso_envio("Preparação") == 0.0
    assert progresso_envio("Em Trânsito") == pytest.approx(200 / 3)
    assert progresso_envio("Entregue") == 100.0
    assert progresso_envio("Extraviado") == 0.0
