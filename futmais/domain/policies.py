"""
Políticas de classificação e utilidades para o catálogo e a logística.

Este módulo contém as regras de negócio que derivam estado a partir de
números: o status de estoque de um produto e a posição de um envio no
fluxo de entrega. As funções são puras e são chamadas pela camada de
aplicação a cada gravação de estoque ou alteração de envio.
"""

from __future__ import annotations

from typing import Optional

from futmais.config import DEFAULTS
from futmais.domain.models import ETAPAS_ENVIO


def status_por_estoque(estoque: int, limite_baixo: Optional[int] = None) -> str:
    """Classifica o status de estoque de um produto.

    Regras:
        - ``estoque == 0`` → ``'OUT_OF_STOCK'``
        - ``0 < estoque < limite`` → ``'LOW_STOCK'``
        - ``estoque >= limite`` → ``'IN_STOCK'``

    O limite padrão é ``DEFAULTS.limite_estoque_baixo`` (10). Não há
    histerese: um produto que oscila em torno do limite é reclassificado
    a cada gravação.

    Args:
        estoque: Quantidade atual em estoque.
        limite_baixo: Limite opcional para o status ``LOW_STOCK``.

    Returns:
        ``'OUT_OF_STOCK'``, ``'LOW_STOCK'`` ou ``'IN_STOCK'``.

    Raises:
        ValueError: se o estoque for negativo.
    """
    limite = DEFAULTS.limite_estoque_baixo if limite_baixo is None else limite_baixo
    qtd = int(estoque)
    if qtd < 0:
        raise ValueError("estoque não pode ser negativo")
    if qtd == 0:
        return "OUT_OF_STOCK"
    if qtd < limite:
        return "LOW_STOCK"
    return "IN_STOCK"


def estoque_apos_venda(estoque_atual: int, quantidade: int) -> int:
    """Estoque resultante de uma baixa, com piso em zero."""
    return max(0, int(estoque_atual) - int(quantidade))


def indice_etapa_envio(status: str) -> int:
    """Posição do status no fluxo Preparação → Entregue (0..3), ou -1."""
    try:
        return ETAPAS_ENVIO.index(status)
    except ValueError:
        return -1


def progresso_envio(status: str) -> float:
    """Percentual (0–100) do fluxo de entrega já percorrido."""
    idx = indice_etapa_envio(status)
    if idx < 0:
        return 0.0
    return idx / (len(ETAPAS_ENVIO) - 1) * 100.0
