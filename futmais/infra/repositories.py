"""
Repositórios (DAO) de acesso às coleções da loja no SQLite.

Cada coleção expõe a mesma fronteira: `listar`, `inserir`, `atualizar`
e `remover`. Os modelos usam atributos em português; o banco mantém os
nomes de coluna em inglês (ex.: `total_gasto` ↔ `total_spent`).
O mapeamento é declarado uma única vez por coleção e aplicado nos dois
sentidos por `para_registro` / `de_registro`.

Classes:
- ProdutoRepo
- ClienteRepo
- PedidoRepo (cabeçalho + itens)
- FornecedorRepo
- EnvioRepo
- TransacaoRepo
- EntityStore (agrega todas as coleções)
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Dict, Generic, List, Optional, Type, TypeVar

from .db import connect
from .migrations import apply_migrations
from .views import create_views
from .logger import log_database_operation
from futmais.domain.errors import StoreError
from futmais.domain.models import (
    Cliente,
    Envio,
    Fornecedor,
    ItemPedido,
    Pedido,
    Produto,
    TransacaoFinanceira,
)

T = TypeVar("T")

SEPARADOR_CATEGORIAS = " | "


# -------------------------
# Helpers
# -------------------------

def _juntar_categorias(val: Any) -> Optional[str]:
    if val is None:
        return None
    if isinstance(val, str):
        return val
    return SEPARADOR_CATEGORIAS.join(str(v) for v in val)


def _separar_categorias(val: Any) -> List[str]:
    if not val:
        return []
    return [p.strip() for p in str(val).split("|") if p.strip()]


def _float0(val: Any) -> float:
    return float(val) if val is not None else 0.0


def _int0(val: Any) -> int:
    return int(val) if val is not None else 0


@dataclass
class Mapeamento:
    """Associação atributo do modelo → coluna da tabela, com conversões."""
    tabela: str
    campos: Dict[str, str]
    para_banco: Dict[str, Callable[[Any], Any]] = field(default_factory=dict)
    do_banco: Dict[str, Callable[[Any], Any]] = field(default_factory=dict)
    ordem: str = "rowid"

    def coluna(self, atributo: str) -> str:
        try:
            return self.campos[atributo]
        except KeyError:
            raise ValueError(f"'{atributo}' não é um campo de {self.tabela}") from None

    def para_registro(self, valores: Dict[str, Any]) -> Dict[str, Any]:
        """Atributos do modelo → colunas do banco."""
        out: Dict[str, Any] = {}
        for attr, val in valores.items():
            conv = self.para_banco.get(attr)
            out[self.coluna(attr)] = conv(val) if conv else val
        return out

    def de_registro(self, row: Any) -> Dict[str, Any]:
        """Linha do banco → atributos do modelo."""
        row = dict(row)
        out: Dict[str, Any] = {}
        for attr, col in self.campos.items():
            if col not in row:
                continue
            val = row[col]
            conv = self.do_banco.get(attr)
            out[attr] = conv(val) if conv else val
        return out


MAP_PRODUTO = Mapeamento(
    tabela="products",
    campos={
        "id": "id", "nome": "name", "descricao": "description", "preco": "price",
        "custo": "cost", "estoque": "stock", "imagem": "image", "time": "team",
        "liga": "league", "tamanho": "size", "sku": "sku", "status": "status",
        "tipo": "type",
    },
    do_banco={"preco": _float0, "custo": _float0, "estoque": _int0},
    ordem="name COLLATE NOCASE",
)

MAP_CLIENTE = Mapeamento(
    tabela="customers",
    campos={
        "id": "id", "nome": "name", "email": "email", "telefone": "phone",
        "imagem": "image", "total_gasto": "total_spent", "status": "status",
        "membro_desde": "member_since", "endereco": "address",
    },
    do_banco={"total_gasto": _float0},
    ordem="rowid DESC",
)

MAP_PEDIDO = Mapeamento(
    tabela="orders",
    campos={
        "id": "id", "cliente_id": "customer_id", "cliente_nome": "customer_name",
        "data": "date", "total": "total", "status": "status",
        "forma_pagamento": "payment_method",
    },
    do_banco={"total": _float0},
    ordem="created_at DESC, rowid DESC",
)

MAP_FORNECEDOR = Mapeamento(
    tabela="suppliers",
    campos={
        "id": "id", "nome": "name", "contato": "contact", "email": "email",
        "telefone": "phone", "categorias": "category", "avaliacao": "rating",
        "status": "status", "imagem": "image",
    },
    para_banco={"categorias": _juntar_categorias},
    do_banco={"categorias": _separar_categorias, "avaliacao": _int0},
    ordem="rowid DESC",
)

MAP_ENVIO = Mapeamento(
    tabela="shipments",
    campos={
        "id": "id", "pedido_id": "order_id", "cliente_nome": "customer_name",
        "cliente_telefone": "customer_phone", "descricao_produto": "product_description",
        "data_compra": "purchase_date", "transportadora": "carrier",
        "codigo_rastreio": "tracking_code", "previsao_entrega": "estimated_delivery",
        "ultimo_status": "last_status", "status": "status", "criado_em": "created_at",
    },
    ordem="rowid DESC",
)

MAP_TRANSACAO = Mapeamento(
    tabela="transactions",
    campos={
        "id": "id", "data": "date", "descricao": "description", "categoria": "category",
        "tipo": "type", "valor": "amount", "status": "status", "imagem": "image",
    },
    do_banco={"valor": _float0},
    ordem="created_at DESC, rowid DESC",
)


# -------------------------
# Repositório genérico
# -------------------------

class TabelaRepo(Generic[T]):
    """CRUD de uma coleção mapeada para uma tabela."""

    modelo: Type[T]
    mapa: Mapeamento

    def __init__(self, db_path: str):
        self.db_path = db_path

    @property
    def tabela(self) -> str:
        return self.mapa.tabela

    def _falha(self, operacao: str, exc: Exception) -> StoreError:
        log_database_operation(self.tabela, operacao, 0, error=str(exc))
        return StoreError(self.tabela, operacao, str(exc))

    def _para_modelo(self, row: Any) -> T:
        return self.modelo(**self.mapa.de_registro(row))

    def _valores(self, obj: T) -> Dict[str, Any]:
        return {f.name: getattr(obj, f.name) for f in fields(obj) if f.name in self.mapa.campos}

    def listar(self) -> List[T]:
        try:
            with connect(self.db_path) as c:
                rows = c.execute(f"SELECT * FROM {self.tabela} ORDER BY {self.mapa.ordem}").fetchall()
        except sqlite3.Error as e:
            raise self._falha("SELECT", e)
        log_database_operation(self.tabela, "SELECT", len(rows))
        return [self._para_modelo(r) for r in rows]

    def obter(self, id_: str) -> Optional[T]:
        try:
            with connect(self.db_path) as c:
                row = c.execute(f"SELECT * FROM {self.tabela} WHERE id = ?", (id_,)).fetchone()
        except sqlite3.Error as e:
            raise self._falha("SELECT", e)
        return self._para_modelo(row) if row else None

    def inserir(self, obj: T) -> T:
        registro = self.mapa.para_registro(self._valores(obj))
        cols = ",".join(registro.keys())
        vals = ",".join(f":{k}" for k in registro.keys())
        try:
            with connect(self.db_path) as c:
                c.execute(f"INSERT INTO {self.tabela} ({cols}) VALUES ({vals})", registro)
        except sqlite3.Error as e:
            raise self._falha("INSERT", e)
        log_database_operation(self.tabela, "INSERT", 1, id=registro.get("id"))
        return obj

    def atualizar(self, id_: str, parcial: Dict[str, Any]) -> None:
        """Atualiza apenas os atributos informados em `parcial`."""
        parcial = {k: v for k, v in parcial.items() if k != "id"}
        if not parcial:
            return
        registro = self.mapa.para_registro(parcial)
        sets = ", ".join(f"{col} = :{col}" for col in registro.keys())
        try:
            with connect(self.db_path) as c:
                cur = c.execute(f"UPDATE {self.tabela} SET {sets} WHERE id = :_id", {**registro, "_id": id_})
                afetadas = cur.rowcount
        except sqlite3.Error as e:
            raise self._falha("UPDATE", e)
        if afetadas == 0:
            raise StoreError(self.tabela, "UPDATE", f"registro {id_} não encontrado")
        log_database_operation(self.tabela, "UPDATE", afetadas, id=id_, campos=list(registro.keys()))

    def remover(self, id_: str) -> None:
        try:
            with connect(self.db_path) as c:
                afetadas = c.execute(f"DELETE FROM {self.tabela} WHERE id = ?", (id_,)).rowcount
        except sqlite3.Error as e:
            raise self._falha("DELETE", e)
        if afetadas == 0:
            raise StoreError(self.tabela, "DELETE", f"registro {id_} não encontrado")
        log_database_operation(self.tabela, "DELETE", afetadas, id=id_)


class ProdutoRepo(TabelaRepo[Produto]):
    modelo = Produto
    mapa = MAP_PRODUTO


class ClienteRepo(TabelaRepo[Cliente]):
    modelo = Cliente
    mapa = MAP_CLIENTE


class FornecedorRepo(TabelaRepo[Fornecedor]):
    modelo = Fornecedor
    mapa = MAP_FORNECEDOR


class EnvioRepo(TabelaRepo[Envio]):
    modelo = Envio
    mapa = MAP_ENVIO


class TransacaoRepo(TabelaRepo[TransacaoFinanceira]):
    modelo = TransacaoFinanceira
    mapa = MAP_TRANSACAO


# -------------------------
# Pedidos (cabeçalho + itens)
# -------------------------

class PedidoRepo(TabelaRepo[Pedido]):
    modelo = Pedido
    mapa = MAP_PEDIDO

    def _itens_por_pedido(self, c) -> Dict[str, List[ItemPedido]]:
        out: Dict[str, List[ItemPedido]] = {}
        rows = c.execute(
            "SELECT order_id, product_id, product_name, quantity, unit_price "
            "FROM vw_itens_pedido ORDER BY id"
        ).fetchall()
        for r in rows:
            out.setdefault(r["order_id"], []).append(
                ItemPedido(
                    produto_id=r["product_id"],
                    produto_nome=r["product_name"],
                    preco_unitario=float(r["unit_price"]),
                    quantidade=int(r["quantity"]),
                )
            )
        return out

    def listar(self) -> List[Pedido]:
        """Pedidos mais recentes primeiro, já com os itens."""
        try:
            with connect(self.db_path) as c:
                rows = c.execute(f"SELECT * FROM orders ORDER BY {self.mapa.ordem}").fetchall()
                itens = self._itens_por_pedido(c)
        except sqlite3.Error as e:
            raise self._falha("SELECT", e)
        log_database_operation("orders", "SELECT", len(rows))
        pedidos = []
        for r in rows:
            p = self._para_modelo(r)
            p.itens = itens.get(p.id, [])
            pedidos.append(p)
        return pedidos

    def obter(self, id_: str) -> Optional[Pedido]:
        return next((p for p in self.listar() if p.id == id_), None)

    def inserir(self, pedido: Pedido) -> Pedido:
        """Grava cabeçalho e itens na mesma transação."""
        cab = self.mapa.para_registro(self._valores(pedido))
        itens = [
            {
                "order_id": pedido.id,
                "product_id": it.produto_id,
                "product_name": it.produto_nome,
                "quantity": it.quantidade,
                "unit_price": it.preco_unitario,
            }
            for it in pedido.itens
        ]
        cols = ",".join(cab.keys())
        vals = ",".join(f":{k}" for k in cab.keys())
        try:
            with connect(self.db_path) as c:
                c.execute(f"INSERT INTO orders ({cols}) VALUES ({vals})", cab)
                c.executemany(
                    """
                    INSERT INTO order_items (order_id, product_id, product_name, quantity, unit_price)
                    VALUES (:order_id, :product_id, :product_name, :quantity, :unit_price)
                    """,
                    itens,
                )
        except sqlite3.Error as e:
            raise self._falha("INSERT", e)
        log_database_operation("orders", "INSERT", 1, id=pedido.id, itens=len(itens))
        return pedido

    def resumo(self) -> List[Dict[str, Any]]:
        """Linhas de `vw_resumo_pedidos` (pedido, linhas e peças)."""
        try:
            with connect(self.db_path) as c:
                cur = c.execute(
                    "SELECT id, customer_name, date, total, status, payment_method, linhas, pecas "
                    "FROM vw_resumo_pedidos"
                )
                cols = [d[0] for d in cur.description]
                return [dict(zip(cols, row)) for row in cur.fetchall()]
        except sqlite3.Error as e:
            raise self._falha("SELECT", e)


# -------------------------
# Store agregado
# -------------------------

class EntityStore:
    """Ponto único de acesso às coleções persistidas."""

    def __init__(self, db_path: str, migrar: bool = True):
        self.db_path = db_path
        if migrar:
            apply_migrations(db_path)
            create_views(db_path)
        self.produtos = ProdutoRepo(db_path)
        self.clientes = ClienteRepo(db_path)
        self.pedidos = PedidoRepo(db_path)
        self.fornecedores = FornecedorRepo(db_path)
        self.envios = EnvioRepo(db_path)
        self.transacoes = TransacaoRepo(db_path)
