# futmais/domain/models.py
"""
Modelos (dataclasses) do domínio.

Observação importante:
- Os valores enumerados (status, tipos, formas de pagamento) são gravados
  exatamente como aparecem aqui; o banco e os relatórios dependem deles.
- ItemPedido é uma cópia do produto no momento da venda. Alterações
  posteriores no cadastro não mexem em pedidos antigos.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


STATUS_ESTOQUE = ("IN_STOCK", "LOW_STOCK", "OUT_OF_STOCK")
TIPOS_PRODUTO = ("Jersey", "Accessory", "Ball")
STATUS_CLIENTE = ("Active", "Inactive")
STATUS_PEDIDO = ("Processing", "Delivered", "Cancelled")
FORMAS_PAGAMENTO = ("Pix", "Credit", "Debit", "Cash")
ETAPAS_ENVIO = ("Preparação", "Despachado", "Em Trânsito", "Entregue")
CATEGORIAS_TRANSACAO = ("Vendas", "Fornecedores", "Marketing", "Operacional", "Outros")
TIPOS_TRANSACAO = ("Income", "Expense")
STATUS_TRANSACAO = ("Concluído", "Pendente", "Pago", "Cancelado")


@dataclass
class Produto:
    """Item do catálogo. `status` acompanha `estoque` (ver policies)."""
    id: str
    nome: str
    preco: float = 0.0
    custo: float = 0.0
    estoque: int = 0
    status: str = "OUT_OF_STOCK"
    tipo: str = "Jersey"              # 'Jersey' | 'Accessory' | 'Ball'
    descricao: Optional[str] = None
    time: Optional[str] = None
    liga: Optional[str] = None
    tamanho: Optional[str] = None
    sku: Optional[str] = None
    imagem: Optional[str] = None


@dataclass
class Cliente:
    id: str
    nome: str
    telefone: str
    email: Optional[str] = None
    endereco: Optional[str] = None
    imagem: Optional[str] = None
    total_gasto: float = 0.0          # só aumenta, e só via checkout
    status: str = "Active"
    membro_desde: Optional[str] = None


@dataclass
class ItemCarrinho:
    produto: Produto
    quantidade: int = 1

    @property
    def subtotal(self) -> float:
        return self.produto.preco * self.quantidade


@dataclass(frozen=True)
class ItemPedido:
    """Linha de pedido congelada no momento da venda."""
    produto_id: str
    produto_nome: str
    preco_unitario: float
    quantidade: int

    @property
    def subtotal(self) -> float:
        return self.preco_unitario * self.quantidade


@dataclass
class Pedido:
    id: str
    cliente_nome: str
    data: str                         # dd/mm/aaaa
    total: float
    forma_pagamento: str              # 'Pix' | 'Credit' | 'Debit' | 'Cash'
    status: str = "Processing"
    cliente_id: Optional[str] = None
    itens: List[ItemPedido] = field(default_factory=list)


@dataclass
class Envio:
    id: str
    pedido_id: str
    cliente_nome: str
    transportadora: str
    cliente_telefone: Optional[str] = None
    descricao_produto: Optional[str] = None
    data_compra: Optional[str] = None
    codigo_rastreio: Optional[str] = None
    previsao_entrega: Optional[str] = None
    ultimo_status: Optional[str] = None
    status: str = "Preparação"
    criado_em: Optional[str] = None


@dataclass
class Fornecedor:
    id: str
    nome: str
    telefone: str
    contato: Optional[str] = None
    email: Optional[str] = None
    categorias: List[str] = field(default_factory=list)
    avaliacao: int = 5                # 1..5
    status: str = "Active"
    imagem: Optional[str] = None


@dataclass
class TransacaoFinanceira:
    """Lançamento do livro-caixa. O sinal vem de `tipo`, nunca de `valor`."""
    id: str
    data: str
    descricao: str
    categoria: str
    tipo: str                         # 'Income' | 'Expense'
    valor: float
    status: str = "Concluído"
    imagem: Optional[str] = None
