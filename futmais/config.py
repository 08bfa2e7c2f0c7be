# futmais/config.py
"""
Configurações globais e valores padrão do sistema FutMais.
"""

import os
from dataclasses import dataclass


# Caminho padrão do banco de dados SQLite (pode ser sobrescrito por FUTMAIS_DB)
DB_PATH = os.environ.get("FUTMAIS_DB") or os.path.join(os.getcwd(), "futmais.db")

# Arquivo local onde o carrinho em andamento é mantido entre execuções
CART_PATH = os.environ.get("FUTMAIS_CART") or os.path.join(os.getcwd(), "carrinho.json")


@dataclass
class DefaultConfig:
    """Valores padrão para parâmetros do sistema."""
    limite_estoque_baixo: int = 10           # abaixo disso o produto fica LOW_STOCK
    cliente_avulso: str = "Cliente Avulso"   # rótulo de vendas sem cliente vinculado
    formato_data: str = "%d/%m/%Y"           # datas gravadas no padrão pt-BR
    prefixo_pedido: str = "#PED-"
    prefixo_arquivo_export: str = "futmais"
    export_dir: str = os.getcwd()


# Instância global dos valores padrão
DEFAULTS = DefaultConfig()
