"""
Persistência local do carrinho em andamento.

O carrinho é a única entidade que não passa pelo banco: ele é gravado
num arquivo JSON (chave fixa, ver `config.CART_PATH`) a cada alteração,
para que uma venda interrompida possa ser retomada.

Formato: lista de pares ``{"produto": {...}, "quantidade": n}``.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict
from pathlib import Path
from typing import List

from futmais.config import CART_PATH
from futmais.domain.models import ItemCarrinho, Produto
from .logger import log_carrinho, log_file_operation


class CartStorage:
    def __init__(self, path: str = CART_PATH):
        self.path = Path(path)

    def salvar(self, itens: List[ItemCarrinho]) -> None:
        """Grava o snapshot completo. Erros de E/S são propagados."""
        payload = [{"produto": asdict(it.produto), "quantidade": it.quantidade} for it in itens]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False)
        os.replace(tmp, self.path)
        log_file_operation("cart_save", str(self.path), rows_processed=len(payload))

    def carregar(self) -> List[ItemCarrinho]:
        """Lê o snapshot salvo; arquivo ausente ou ilegível resulta em carrinho vazio."""
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                payload = json.load(f)
            itens = [
                ItemCarrinho(produto=Produto(**p["produto"]), quantidade=int(p["quantidade"]))
                for p in payload
            ]
        except (OSError, ValueError, KeyError, TypeError) as e:
            log_carrinho("load_failed", path=str(self.path), error=str(e), level="warning")
            return []
        log_file_operation("cart_load", str(self.path), rows_processed=len(itens))
        return [it for it in itens if it.quantidade > 0]
