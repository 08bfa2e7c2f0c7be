# futmais/usecases/relatorios.py
"""
Relatórios e buscas das telas:
- painel (dashboard) por período
- financeiro (totais, gráfico semanal, extrato filtrado)
- detalhe do cliente
- estatísticas de estoque, clientes, fornecedores e envios
- buscas com filtro de pedidos, produtos, clientes, fornecedores e envios

Tudo é calculado a partir das coleções já carregadas na `Loja`; nenhum
relatório consulta o banco.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from futmais.domain.financeiro import (
    Periodo,
    agrupar_por_dia_semana,
    escala_grafico,
    filtrar_por_periodo,
    filtrar_por_tipo,
    serie_vendas,
    totais,
)
from futmais.domain.models import (
    ETAPAS_ENVIO,
    STATUS_ESTOQUE,
    STATUS_PEDIDO,
    TIPOS_PRODUTO,
    Cliente,
    Envio,
    Fornecedor,
    Pedido,
    Produto,
)
from futmais.domain.policies import progresso_envio
from futmais.infra.logger import log_system_event

TODOS = "Todos"


def _validar_filtro(valor: str, permitidos: Sequence[str], nome: str) -> None:
    if valor != TODOS and valor not in permitidos:
        raise ValueError(f"{nome} inválido: {valor}")


def _contem(termo: str, *valores: Optional[str]) -> bool:
    t = (termo or "").lower()
    return any(t in (v or "").lower() for v in valores)


# ----------------------
# 1) Painel
# ----------------------

def margem_lucro(pedidos: Sequence[Pedido], produtos: Sequence[Produto]) -> float:
    """Margem (%) usando o custo ATUAL de cada produto vendido.

    Produtos excluídos entram com custo zero.
    """
    receita = sum(p.total for p in pedidos)
    if receita == 0:
        return 0.0
    custos = {p.id: p.custo for p in produtos}
    custo_total = sum(
        custos.get(it.produto_id, 0.0) * it.quantidade
        for pedido in pedidos
        for it in pedido.itens
    )
    return (receita - custo_total) / receita * 100.0


def resumo_dashboard(loja, periodo: Periodo, hoje: Optional[date] = None) -> Dict[str, Any]:
    hoje = hoje or loja.hoje()
    pedidos = filtrar_por_periodo(loja.pedidos, periodo, hoje)
    receita = sum(p.total for p in pedidos)
    qtd = len(pedidos)
    camisas = sorted((p for p in loja.produtos if p.tipo == "Jersey"), key=lambda p: p.estoque)

    log_system_event("dashboard", {"periodo": periodo.tipo, "pedidos": qtd})
    return {
        "periodo": periodo.rotulo(),
        "receita": receita,
        "pedidos": qtd,
        "ticket_medio": receita / qtd if qtd else 0.0,
        "margem_lucro": margem_lucro(pedidos, loja.produtos),
        "estoque_critico": camisas[:4],
        "pedidos_recentes": pedidos[:5],
        "grafico": serie_vendas(pedidos, periodo),
    }


# ----------------------
# 2) Financeiro
# ----------------------

def resumo_financeiro(loja, periodo: Periodo, filtro: str = "Tudo",
                      hoje: Optional[date] = None) -> Dict[str, Any]:
    """Totais, barras por dia da semana e extrato para o período.

    O filtro Tudo/Entradas/Saídas vale para os totais, o gráfico e o
    extrato. Lançamentos com data ilegível continuam visíveis no extrato.
    """
    hoje = hoje or loja.hoje()
    no_periodo = filtrar_por_periodo(loja.transacoes, periodo, hoje, incluir_sem_data=True)
    filtradas = filtrar_por_tipo(no_periodo, filtro)
    semana = agrupar_por_dia_semana(filtradas)
    return {
        "periodo": periodo.rotulo(),
        "totais": totais(filtradas),
        "semanal": semana,
        "escala": escala_grafico(semana),
        "extrato": filtradas,
    }


# ----------------------
# 3) Clientes
# ----------------------

def detalhe_cliente(loja, cliente_id: str) -> Optional[Dict[str, Any]]:
    """Cliente com seus pedidos (por id ou por nome); None se não existir."""
    cliente = loja.cliente(cliente_id)
    if cliente is None:
        return None
    pedidos = [p for p in loja.pedidos if p.cliente_id == cliente.id or p.cliente_nome == cliente.nome]
    total = sum(p.total for p in pedidos)
    return {
        "cliente": cliente,
        "pedidos": pedidos,
        "total_pedidos": len(pedidos),
        "ticket_medio": total / len(pedidos) if pedidos else 0.0,
    }


def estatisticas_clientes(clientes: Sequence[Cliente]) -> Dict[str, Any]:
    melhor = max(clientes, key=lambda c: c.total_gasto, default=None)
    return {
        "total": len(clientes),
        "ativos": sum(1 for c in clientes if c.status == "Active"),
        "melhor": melhor,
    }


def buscar_clientes(clientes: Sequence[Cliente], termo: str = "") -> List[Cliente]:
    """Por nome, email ou telefone; resultado em ordem alfabética."""
    achados = [c for c in clientes if _contem(termo, c.nome, c.email, c.telefone)]
    return sorted(achados, key=lambda c: c.nome.lower())


# ----------------------
# 4) Estoque
# ----------------------

def estatisticas_estoque(produtos: Sequence[Produto]) -> Dict[str, Any]:
    return {
        "total": len(produtos),
        "em_estoque": sum(1 for p in produtos if p.status == "IN_STOCK"),
        "estoque_baixo": sum(1 for p in produtos if p.status == "LOW_STOCK"),
        "esgotados": sum(1 for p in produtos if p.status == "OUT_OF_STOCK"),
        "valor_total": sum(p.preco * p.estoque for p in produtos),
    }


def buscar_produtos(produtos: Sequence[Produto], termo: str = "", tipo: str = TODOS,
                    status: str = TODOS) -> List[Produto]:
    """Por nome, time ou SKU, com filtros opcionais de tipo e status."""
    _validar_filtro(tipo, TIPOS_PRODUTO, "tipo")
    _validar_filtro(status, STATUS_ESTOQUE, "status")
    return [
        p for p in produtos
        if _contem(termo, p.nome, p.time, p.sku)
        and (tipo == TODOS or p.tipo == tipo)
        and (status == TODOS or p.status == status)
    ]


# ----------------------
# 5) Pedidos
# ----------------------

def buscar_pedidos(pedidos: Sequence[Pedido], termo: str = "", status: str = TODOS) -> List[Pedido]:
    _validar_filtro(status, STATUS_PEDIDO, "status")
    return [
        p for p in pedidos
        if _contem(termo, p.id, p.cliente_nome) and (status == TODOS or p.status == status)
    ]


# ----------------------
# 6) Fornecedores
# ----------------------

def estatisticas_fornecedores(fornecedores: Sequence[Fornecedor]) -> Dict[str, int]:
    return {
        "total": len(fornecedores),
        "ativos": sum(1 for f in fornecedores if f.status == "Active"),
        "nota_maxima": sum(1 for f in fornecedores if f.avaliacao == 5),
    }


def buscar_fornecedores(fornecedores: Sequence[Fornecedor], termo: str = "",
                        categoria: str = "Todas") -> List[Fornecedor]:
    return [
        f for f in fornecedores
        if _contem(termo, f.nome, f.contato, f.email)
        and (categoria == "Todas" or categoria in f.categorias)
    ]


# ----------------------
# 7) Envios
# ----------------------

def estatisticas_envios(envios: Sequence[Envio]) -> Dict[str, int]:
    contagem = {etapa: 0 for etapa in ETAPAS_ENVIO}
    for e in envios:
        if e.status in contagem:
            contagem[e.status] += 1
    return {"total": len(envios), **contagem}


def buscar_envios(envios: Sequence[Envio], termo: str = "", status: str = TODOS) -> List[Envio]:
    """Por pedido, cliente ou código de rastreio."""
    _validar_filtro(status, ETAPAS_ENVIO, "status")
    return [
        e for e in envios
        if _contem(termo, e.pedido_id, e.cliente_nome, e.codigo_rastreio)
        and (status == TODOS or e.status == status)
    ]


def linha_envio(e: Envio) -> Dict[str, Any]:
    """Envio pronto para exibição, com o percentual do fluxo percorrido."""
    return {
        "id": e.id,
        "pedido": e.pedido_id,
        "cliente": e.cliente_nome,
        "transportadora": e.transportadora,
        "rastreio": e.codigo_rastreio,
        "status": e.status,
        "progresso": progresso_envio(e.status),
        "ultimo_status": e.ultimo_status or "Pendente",
    }
