"""
Carrinho de compras do PDV.

Mantém a venda em andamento como uma lista ordenada de linhas
(produto, quantidade). Cada linha guarda uma cópia do produto tirada no
momento em que ele entrou no carrinho.

Toda mutação grava o snapshot completo no armazenamento local
configurado. Essa gravação é de melhor esforço: uma falha é registrada
no log e ignorada, nunca chega a quem chamou a operação.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Protocol

from futmais.domain.models import ItemCarrinho, Produto
from futmais.infra.logger import log_carrinho


class ArmazenamentoCarrinho(Protocol):
    def salvar(self, itens: List[ItemCarrinho]) -> None: ...
    def carregar(self) -> List[ItemCarrinho]: ...


class Carrinho:
    def __init__(self, storage: Optional[ArmazenamentoCarrinho] = None,
                 itens: Optional[List[ItemCarrinho]] = None):
        self.storage = storage
        self._itens: List[ItemCarrinho] = list(itens or [])

    @classmethod
    def restaurar(cls, storage: ArmazenamentoCarrinho) -> "Carrinho":
        """Recria o carrinho a partir do último snapshot salvo."""
        return cls(storage=storage, itens=storage.carregar())

    @property
    def itens(self) -> List[ItemCarrinho]:
        return list(self._itens)

    def __len__(self) -> int:
        return len(self._itens)

    def __bool__(self) -> bool:
        return bool(self._itens)

    def _linha(self, produto_id: str) -> Optional[ItemCarrinho]:
        return next((it for it in self._itens if it.produto.id == produto_id), None)

    def _persistir(self) -> None:
        if self.storage is None:
            return
        try:
            self.storage.salvar(self._itens)
        except Exception as e:
            log_carrinho("persist_failed", error=str(e), level="warning")

    def adicionar(self, produto: Produto) -> bool:
        """Adiciona uma unidade. Produto esgotado é ignorado (retorna False)."""
        if produto.estoque == 0:
            log_carrinho("add_rejected", produto.id, 0, motivo="sem estoque")
            return False
        linha = self._linha(produto.id)
        if linha:
            linha.quantidade += 1
        else:
            linha = ItemCarrinho(produto=replace(produto), quantidade=1)
            self._itens.append(linha)
        log_carrinho("add", produto.id, linha.quantidade)
        self._persistir()
        return True

    def remover(self, produto_id: str) -> None:
        """Remove a linha inteira, qualquer que seja a quantidade."""
        self._itens = [it for it in self._itens if it.produto.id != produto_id]
        log_carrinho("remove", produto_id)
        self._persistir()

    def alterar_quantidade(self, produto_id: str, delta: int) -> None:
        """Soma `delta` à quantidade; resultado <= 0 é descartado."""
        linha = self._linha(produto_id)
        if linha is None:
            return
        nova = linha.quantidade + int(delta)
        if nova > 0:
            linha.quantidade = nova
        log_carrinho("change_quantity", produto_id, linha.quantidade, delta=delta)
        self._persistir()

    def total(self) -> float:
        return sum((it.produto.preco * it.quantidade for it in self._itens), 0.0)

    def limpar(self) -> None:
        self._itens = []
        log_carrinho("clear")
        self._persistir()
