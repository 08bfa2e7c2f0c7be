# futmais/usecases/checkout.py
"""
UC: Finalizar venda (checkout do PDV).

Passos, na ordem:
1. Cliente informado e encontrado → soma o total do carrinho ao total
   gasto dele. Falha nessa gravação é registrada e a venda continua.
   Sem cliente (ou id desconhecido) → venda para "Cliente Avulso".
2. Monta o pedido com id sequencial, data de hoje e cópia das linhas.
3. Grava cabeçalho + itens numa única transação. Se falhar, o total
   gasto do cliente volta ao valor anterior e a venda é abortada: nada
   de lançamento no caixa, baixa de estoque ou limpeza do carrinho
   (CheckoutError).
4. Lança a receita no caixa, baixa o estoque de cada linha (com piso em
   zero e status recalculado) e limpa o carrinho.

Obs.:
- O passo 4 não é desfeito se algo falhar nele; cada falha
  vai para o log e para `CheckoutResultado.falhas`.
- Não há reserva de estoque: dois terminais podem vender a mesma peça.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

from futmais.config import DEFAULTS
from futmais.adapters.parsers import formatar_data
from futmais.domain.errors import CheckoutError, FutmaisError, ValidacaoError
from futmais.domain.models import FORMAS_PAGAMENTO, Cliente, ItemPedido, Pedido, TransacaoFinanceira
from futmais.domain.policies import estoque_apos_venda
from futmais.infra.logger import log_system_event, log_transaction, log_venda

if TYPE_CHECKING:
    from futmais.usecases.loja import Loja


@dataclass
class CheckoutResultado:
    pedido: Pedido
    transacao: Optional[TransacaoFinanceira] = None
    cliente: Optional[Cliente] = None
    falhas: List[str] = field(default_factory=list)

    @property
    def completo(self) -> bool:
        return not self.falhas


def run_checkout(loja: "Loja", forma_pagamento: str,
                 cliente_id: Optional[str] = None) -> Optional[CheckoutResultado]:
    """Transforma o carrinho da sessão em pedido.

    Returns:
        O resultado da venda, ou None quando o carrinho está vazio
        (nenhuma gravação é feita).

    Raises:
        ValidacaoError: forma de pagamento desconhecida.
        CheckoutError: o pedido não pôde ser gravado.
    """
    carrinho = loja.carrinho
    if not carrinho:
        log_venda("checkout_ignored", None, 0.0, motivo="carrinho vazio")
        return None
    if forma_pagamento not in FORMAS_PAGAMENTO:
        raise ValidacaoError(f"forma de pagamento inválida: {forma_pagamento}")

    linhas = carrinho.itens
    total = carrinho.total()
    falhas: List[str] = []
    log_venda("checkout_start", None, total, linhas=len(linhas), cliente_id=cliente_id)

    # 1) cliente
    cliente = loja.cliente(cliente_id) if cliente_id else None
    cliente_nome = DEFAULTS.cliente_avulso
    gasto_anterior: Optional[float] = None
    if cliente is not None:
        cliente_nome = cliente.nome
        try:
            anterior = cliente.total_gasto
            cliente = loja.registrar_gasto(cliente.id, total)
            gasto_anterior = anterior
        except FutmaisError as e:
            falhas.append(f"total gasto do cliente {cliente.id} não atualizado: {e}")
            log_system_event("checkout_customer_update_failed",
                             {"cliente_id": cliente.id, "error": str(e)}, level="warning")
    elif cliente_id:
        log_system_event("checkout_customer_not_found", {"cliente_id": cliente_id}, level="warning")

    # 2) pedido
    pedido = Pedido(
        id=loja.proximo_id_pedido(),
        cliente_id=cliente.id if cliente is not None else None,
        cliente_nome=cliente_nome,
        data=formatar_data(loja.hoje()),
        total=total,
        status="Processing",
        forma_pagamento=forma_pagamento,
        itens=[
            ItemPedido(
                produto_id=it.produto.id,
                produto_nome=it.produto.nome,
                preco_unitario=it.produto.preco,
                quantidade=it.quantidade,
            )
            for it in linhas
        ],
    )

    # 3) gravação do pedido
    try:
        loja.store.pedidos.inserir(pedido)
    except Exception as e:
        log_transaction("checkout", {"pedido_id": pedido.id, "total": total}, error=str(e))
        log_venda("checkout_aborted", pedido.id, total, error=str(e))
        msg = f"não foi possível gravar o pedido {pedido.id}: {e}"
        if gasto_anterior is not None:
            try:
                loja.restaurar_gasto(cliente.id, gasto_anterior)
            except FutmaisError as e2:
                log_system_event("checkout_customer_revert_failed",
                                 {"cliente_id": cliente.id, "error": str(e2)}, level="error")
                msg += f" (total gasto do cliente {cliente.id} ficou com a venda somada: {e2})"
        raise CheckoutError(msg) from e
    loja.pedidos.insert(0, pedido)

    # 4) caixa, estoque, carrinho
    transacao = None
    try:
        transacao = loja.registrar_transacao(
            descricao=f"Venda {pedido.id} - {len(linhas)} itens",
            categoria="Vendas",
            tipo="Income",
            valor=total,
        )
    except FutmaisError as e:
        falhas.append(f"receita da venda não lançada: {e}")

    for it in linhas:
        atual = loja.produto(it.produto.id)
        if atual is None:
            falhas.append(f"produto {it.produto.id} não está mais no catálogo; estoque não baixado")
            continue
        try:
            loja.atualizar_estoque(atual.id, estoque_apos_venda(atual.estoque, it.quantidade))
        except FutmaisError as e:
            falhas.append(f"estoque de {atual.nome} não atualizado: {e}")

    carrinho.limpar()

    resultado = CheckoutResultado(pedido=pedido, transacao=transacao, cliente=cliente, falhas=falhas)
    log_venda("checkout_done", pedido.id, total,
              forma_pagamento=forma_pagamento, cliente=cliente_nome, falhas=len(falhas))
    log_transaction("checkout", {"pedido_id": pedido.id, "total": total},
                    result={"falhas": falhas} if falhas else "success")
    return resultado
