# futmais/infra/migrations.py
"""
Migrações de schema usando PRAGMA user_version.
As tabelas e colunas usam nomes em inglês (snake_case); o mapeamento
para os atributos dos modelos fica em `repositories`.

V1: tabelas base (catálogo, clientes, pedidos, fornecedores, envios, caixa)
V2: `order_items.product_name`, para exibir pedidos de produtos excluídos
"""

from __future__ import annotations

from typing import List
from .db import connect


SCHEMA_V1: List[str] = [
    # Catálogo
    """
    CREATE TABLE IF NOT EXISTS products (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        description TEXT,
        price REAL NOT NULL DEFAULT 0 CHECK (price >= 0),
        cost REAL NOT NULL DEFAULT 0 CHECK (cost >= 0),
        stock INTEGER NOT NULL DEFAULT 0 CHECK (stock >= 0),
        image TEXT,
        team TEXT,
        league TEXT,
        size TEXT,
        sku TEXT,
        status TEXT NOT NULL, -- 'IN_STOCK' | 'LOW_STOCK' | 'OUT_OF_STOCK'
        type TEXT NOT NULL    -- 'Jersey' | 'Accessory' | 'Ball'
    );
    """,
    # Clientes
    """
    CREATE TABLE IF NOT EXISTS customers (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        email TEXT,
        phone TEXT NOT NULL,
        image TEXT,
        total_spent REAL NOT NULL DEFAULT 0,
        status TEXT NOT NULL DEFAULT 'Active',
        member_since TEXT,
        address TEXT
    );
    """,
    # Pedidos (cabeçalho)
    """
    CREATE TABLE IF NOT EXISTS orders (
        id TEXT PRIMARY KEY,
        customer_id TEXT,
        customer_name TEXT NOT NULL,
        date TEXT NOT NULL,
        total REAL NOT NULL,
        status TEXT NOT NULL DEFAULT 'Processing',
        payment_method TEXT NOT NULL,
        created_at TEXT DEFAULT CURRENT_TIMESTAMP
    );
    """,
    # Itens de pedido (sem FK para products: o produto pode ser excluído)
    """
    CREATE TABLE IF NOT EXISTS order_items (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        order_id TEXT NOT NULL,
        product_id TEXT NOT NULL,
        quantity INTEGER NOT NULL CHECK (quantity > 0),
        unit_price REAL NOT NULL,
        FOREIGN KEY (order_id) REFERENCES orders(id) ON DELETE CASCADE
    );
    """,
    # Fornecedores (category = rótulos unidos por ' | ')
    """
    CREATE TABLE IF NOT EXISTS suppliers (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        contact TEXT,
        email TEXT,
        phone TEXT NOT NULL,
        category TEXT,
        rating INTEGER CHECK (rating BETWEEN 1 AND 5),
        status TEXT NOT NULL DEFAULT 'Active',
        image TEXT
    );
    """,
    # Envios
    """
    CREATE TABLE IF NOT EXISTS shipments (
        id TEXT PRIMARY KEY,
        order_id TEXT NOT NULL,
        customer_name TEXT NOT NULL,
        customer_phone TEXT,
        product_description TEXT,
        purchase_date TEXT,
        carrier TEXT NOT NULL,
        tracking_code TEXT,
        estimated_delivery TEXT,
        last_status TEXT,
        status TEXT NOT NULL DEFAULT 'Preparação',
        created_at TEXT
    );
    """,
    # Livro-caixa
    """
    CREATE TABLE IF NOT EXISTS transactions (
        id TEXT PRIMARY KEY,
        date TEXT NOT NULL,
        description TEXT,
        category TEXT NOT NULL,
        type TEXT NOT NULL,   -- 'Income' | 'Expense'
        amount REAL NOT NULL CHECK (amount >= 0),
        status TEXT NOT NULL DEFAULT 'Concluído',
        image TEXT,
        created_at TEXT DEFAULT CURRENT_TIMESTAMP
    );
    """,
]


def _ensure_column(conn, table: str, column: str, ddl: str) -> None:
    """Adiciona coluna se não existir."""
    cur = conn.execute(f"PRAGMA table_info({table});")
    cols = [r[1] for r in cur.fetchall()]  # r[1] é o nome da coluna
    if column not in cols:
        conn.execute(f"ALTER TABLE {table} ADD COLUMN {ddl};")


def _apply_v1(conn) -> None:
    for sql in SCHEMA_V1:
        conn.executescript(sql)


def _apply_v2(conn) -> None:
    _ensure_column(conn, "order_items", "product_name", "product_name TEXT")


def apply_migrations(db_path: str) -> None:
    """Aplica migrações incrementais de acordo com PRAGMA user_version."""
    with connect(db_path) as conn:
        ver = conn.execute("PRAGMA user_version;").fetchone()[0] or 0

        if ver < 1:
            _apply_v1(conn)
            conn.execute("PRAGMA user_version = 1;")
            ver = 1

        if ver < 2:
            _apply_v2(conn)
            conn.execute("PRAGMA user_version = 2;")
            ver = 2
