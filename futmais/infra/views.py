# futmais/infra/views.py
"""
Criação de views auxiliares para consultas frequentes.

Views criadas:
- vw_itens_pedido:   itens de pedido com o nome do produto (snapshot da
                     venda ou, para linhas antigas, o nome atual do cadastro).
- vw_resumo_pedidos: pedidos com quantidade de linhas e de peças.

Obs.:
- As views assumem que as migrações V1→V2 já foram aplicadas.
- Um conjunto de índices úteis também é criado, caso não existam.
"""

from __future__ import annotations

from .db import connect


def create_views(db_path: str) -> None:
    with connect(db_path) as c:
        c.executescript(
            """
            DROP VIEW IF EXISTS vw_itens_pedido;
            CREATE VIEW vw_itens_pedido AS
            SELECT
                oi.id,
                oi.order_id,
                oi.product_id,
                COALESCE(oi.product_name, p.name, 'Produto Removido') AS product_name,
                oi.quantity,
                oi.unit_price,
                oi.quantity * oi.unit_price AS line_total
            FROM order_items oi
            LEFT JOIN products p ON p.id = oi.product_id;

            DROP VIEW IF EXISTS vw_resumo_pedidos;
            CREATE VIEW vw_resumo_pedidos AS
            SELECT
                o.id,
                o.customer_name,
                o.date,
                o.total,
                o.status,
                o.payment_method,
                COUNT(oi.id)                   AS linhas,
                COALESCE(SUM(oi.quantity), 0)  AS pecas
            FROM orders o
            LEFT JOIN order_items oi ON oi.order_id = o.id
            GROUP BY o.id;
            """
        )

        c.executescript(
            """
            CREATE INDEX IF NOT EXISTS idx_order_items_order ON order_items(order_id);
            CREATE INDEX IF NOT EXISTS idx_orders_customer   ON orders(customer_id);
            CREATE INDEX IF NOT EXISTS idx_orders_created    ON orders(created_at);
            CREATE INDEX IF NOT EXISTS idx_transactions_type ON transactions(type, category);
            CREATE INDEX IF NOT EXISTS idx_shipments_order   ON shipments(order_id);
            """
        )
