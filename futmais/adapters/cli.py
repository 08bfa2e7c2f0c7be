# futmais/adapters/cli.py
"""
CLI do sistema FutMais (Typer).

Comandos principais:
- migrate                                 -> aplica migrações e cria views
- logs                                    -> últimas linhas dos logs
- produto add|list|stock|edit|duplicar|delete
- cliente add|list|show|edit|delete
- fornecedor add|list|delete
- envio add|list|status|delete
- carrinho add|remove|qtd|show|clear      -> venda em andamento (PDV)
- checkout                                -> finaliza a venda do carrinho
- pedidos                                 -> lista/busca pedidos
- financeiro resumo|semanal|add           -> livro-caixa
- dashboard                               -> painel do período
- exportar clientes|fornecedores|financeiro|envios -> CSV
- tui                                     -> interface interativa
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from futmais.config import CART_PATH, DB_PATH
from futmais.adapters.parsers import formatar_brl, parse_data_br, parse_data_iso, parse_valor
from futmais.adapters import csv_export
from futmais.domain.errors import FutmaisError
from futmais.domain.financeiro import Periodo, altura_relativa
from futmais.domain.models import Cliente, Envio, Fornecedor, Pedido, Produto, TransacaoFinanceira
from futmais.infra.logger import get_log_summary, log_startup
from futmais.infra.migrations import apply_migrations
from futmais.infra.views import create_views
from futmais.usecases.loja import Loja
from futmais.usecases import relatorios


app = typer.Typer(help="FutMais: PDV e retaguarda")
console = Console()

DB_OPT = typer.Option(DB_PATH, "--db", help="Caminho do SQLite")
CART_OPT = typer.Option(CART_PATH, "--carrinho", help="Arquivo local do carrinho")

COLUNAS_MONETARIAS = {"preço", "custo", "total", "valor", "gasto", "receitas", "despesas"}


# -----------------------
# TUI command
# -----------------------

@app.command("tui")
def cmd_tui(db_path: str = DB_OPT, cart_path: str = CART_OPT):
    """Inicia a interface terminal interativa (TUI)."""
    from futmais.adapters.tui import main_tui
    main_tui(db_path=db_path, cart_path=cart_path)


# -----------------------
# util
# -----------------------

@contextmanager
def _operacao():
    """Converte erros de domínio em mensagem vermelha e código de saída 1."""
    try:
        yield
    except (FutmaisError, ValueError) as e:
        console.print(f"[bold red]Erro:[/] {e}")
        raise typer.Exit(code=1)


def _abrir(db_path: str, cart_path: str) -> Loja:
    log_startup()
    return Loja.abrir(db_path=db_path, cart_path=cart_path)


def _valor(txt: Optional[str], campo: str) -> Optional[float]:
    if txt is None:
        return None
    v = parse_valor(txt)
    if v is None:
        raise ValueError(f"{campo} inválido: {txt}")
    return v


def _periodo(periodo: str, mes: Optional[str], inicio: Optional[str], fim: Optional[str]) -> Periodo:
    def _data(txt):
        if txt is None:
            return None
        d = parse_data_iso(txt) or parse_data_br(txt)
        if d is None:
            raise ValueError(f"data inválida: {txt}")
        return d
    return Periodo(tipo=periodo, mes=mes, inicio=_data(inicio), fim=_data(fim))


def _display_table(data: List[Dict[str, Any]], title: str = "Resultado") -> None:
    """Exibe os dados em tabelas formatadas usando Rich."""
    if not data:
        console.print(Panel("Nenhum dado encontrado", title=title, border_style="yellow"))
        return

    table = Table(title=title, box=box.ROUNDED)
    columns = list(data[0].keys())
    for column in columns:
        if column.lower() in COLUNAS_MONETARIAS or column.lower() in ("estoque", "qtd", "itens"):
            table.add_column(column, justify="right")
        elif column.lower() in ("data", "desde", "previsão"):
            table.add_column(column, justify="center")
        else:
            table.add_column(column)

    for row in data:
        values = []
        for col in columns:
            val = row.get(col, "")
            if col.lower() in COLUNAS_MONETARIAS and isinstance(val, (int, float)):
                values.append(formatar_brl(val))
            elif col.lower() == "status":
                values.append(_colorir_status(str(val)))
            elif val is None:
                values.append("")
            else:
                values.append(str(val))
        table.add_row(*values)

    console.print(table)


def _colorir_status(status: str) -> str:
    if status in ("OUT_OF_STOCK", "Cancelled", "Inactive", "Cancelado"):
        return f"[bold red]{status}[/]"
    if status in ("LOW_STOCK", "Processing", "Pendente", "Em Trânsito", "Despachado"):
        return f"[bold yellow]{status}[/]"
    if status in ("IN_STOCK", "Delivered", "Active", "Concluído", "Pago", "Entregue"):
        return f"[bold green]{status}[/]"
    return status


def _linha_produto(p: Produto) -> Dict[str, Any]:
    return {"id": p.id, "nome": p.nome, "tipo": p.tipo, "time": p.time or "", "sku": p.sku or "",
            "preço": p.preco, "estoque": p.estoque, "status": p.status}


def _linha_cliente(c: Cliente) -> Dict[str, Any]:
    return {"id": c.id, "nome": c.nome, "telefone": c.telefone, "email": c.email,
            "gasto": c.total_gasto, "status": c.status, "desde": c.membro_desde}


def _linha_pedido(p: Pedido) -> Dict[str, Any]:
    return {"id": p.id, "data": p.data, "cliente": p.cliente_nome, "itens": len(p.itens),
            "pagamento": p.forma_pagamento, "total": p.total, "status": p.status}


def _linha_fornecedor(f: Fornecedor) -> Dict[str, Any]:
    return {"id": f.id, "empresa": f.nome, "contato": f.contato, "telefone": f.telefone,
            "categorias": ", ".join(f.categorias), "rating": f.avaliacao, "status": f.status}


def _linha_transacao(t: TransacaoFinanceira) -> Dict[str, Any]:
    return {"id": t.id, "data": t.data, "descrição": t.descricao, "categoria": t.categoria,
            "tipo": t.tipo, "valor": t.valor, "status": t.status}


def _linha_envio(e: Envio) -> Dict[str, Any]:
    d = relatorios.linha_envio(e)
    d["progresso"] = f"{d['progresso']:.0f}%"
    return d


# -----------------------
# comandos de infra
# -----------------------

@app.command("migrate")
def cmd_migrate(db_path: str = DB_OPT):
    """Aplica migrações e recria as views auxiliares."""
    apply_migrations(db_path)
    create_views(db_path)
    typer.echo(f">> Migrações aplicadas e views criadas em: {db_path}")


@app.command("logs")
def cmd_logs(
    tipo: str = typer.Argument("system", help="transactions | vendas | carrinho | database | system"),
    linhas: int = typer.Option(50, "--linhas"),
):
    """Mostra as últimas linhas de um arquivo de log."""
    conteudo = get_log_summary(tipo, linhas)
    if conteudo is None:
        typer.echo("Logging desativado (defina FUTMAIS_LOGGING=1).")
        return
    typer.echo(conteudo)


# -----------------------
# produtos
# -----------------------

produto_app = typer.Typer(help="Catálogo de produtos")
app.add_typer(produto_app, name="produto")


@produto_app.command("add")
def cmd_produto_add(
    nome: str = typer.Option(..., "--nome"),
    preco: str = typer.Option(..., "--preco", help="Ex.: 249,90"),
    custo: str = typer.Option("0", "--custo"),
    estoque: int = typer.Option(0, "--estoque"),
    tipo: str = typer.Option("Jersey", "--tipo", help="Jersey | Accessory | Ball"),
    time: Optional[str] = typer.Option(None, "--time"),
    liga: Optional[str] = typer.Option(None, "--liga"),
    tamanho: str = typer.Option("M", "--tamanho"),
    sku: Optional[str] = typer.Option(None, "--sku", help="Gerado automaticamente se vazio"),
    db_path: str = DB_OPT,
    cart_path: str = CART_OPT,
):
    """Cadastra um produto (o estoque inicial gera despesa de investimento)."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
        p = loja.cadastrar_produto(
            nome=nome, preco=_valor(preco, "preço"), custo=_valor(custo, "custo"),
            estoque=estoque, tipo=tipo, time=time, liga=liga, tamanho=tamanho, sku=sku,
        )
    console.print(f">> Produto cadastrado: [bold]{p.nome}[/] ({p.id}) - {p.status}")


@produto_app.command("list")
def cmd_produto_list(
    busca: str = typer.Option("", "--busca", help="Nome, time ou SKU"),
    tipo: str = typer.Option(relatorios.TODOS, "--tipo"),
    status: str = typer.Option(relatorios.TODOS, "--status"),
    db_path: str = DB_OPT,
    cart_path: str = CART_OPT,
):
    """Lista o catálogo com filtros e contadores de estoque."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
        produtos = relatorios.buscar_produtos(loja.produtos, busca, tipo, status)
    _display_table([_linha_produto(p) for p in produtos], title="Estoque")
    st = relatorios.estatisticas_estoque(loja.produtos)
    console.print(
        f"[dim]Total: {st['total']} | Em estoque: {st['em_estoque']} | "
        f"Baixo: {st['estoque_baixo']} | Esgotados: {st['esgotados']} | "
        f"Valor: {formatar_brl(st['valor_total'])}[/dim]"
    )


@produto_app.command("stock")
def cmd_produto_stock(
    produto_id: str = typer.Argument(...),
    quantidade: int = typer.Argument(..., help="Nova quantidade em estoque"),
    db_path: str = DB_OPT,
    cart_path: str = CART_OPT,
):
    """Define a quantidade em estoque (status recalculado)."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
        p = loja.atualizar_estoque(produto_id, quantidade)
    console.print(f">> {p.nome}: estoque {p.estoque} ({p.status})")


@produto_app.command("edit")
def cmd_produto_edit(
    produto_id: str = typer.Argument(...),
    nome: Optional[str] = typer.Option(None, "--nome"),
    preco: Optional[str] = typer.Option(None, "--preco"),
    custo: Optional[str] = typer.Option(None, "--custo"),
    estoque: Optional[int] = typer.Option(None, "--estoque"),
    tipo: Optional[str] = typer.Option(None, "--tipo"),
    tamanho: Optional[str] = typer.Option(None, "--tamanho"),
    sku: Optional[str] = typer.Option(None, "--sku"),
    db_path: str = DB_OPT,
    cart_path: str = CART_OPT,
):
    """Altera apenas os campos informados."""
    campos = {
        "nome": nome, "preco": preco, "custo": custo, "estoque": estoque,
        "tipo": tipo, "tamanho": tamanho, "sku": sku,
    }
    campos = {k: v for k, v in campos.items() if v is not None}
    if not campos:
        typer.echo("Nada a alterar. Informe pelo menos um campo.")
        raise typer.Exit(code=1)
    with _operacao():
        for k in ("preco", "custo"):
            if k in campos:
                campos[k] = _valor(campos[k], k)
        loja = _abrir(db_path, cart_path)
        p = loja.editar_produto(produto_id, **campos)
    console.print(f">> Produto atualizado: {p.nome} ({p.status})")


@produto_app.command("duplicar")
def cmd_produto_duplicar(produto_id: str = typer.Argument(...), db_path: str = DB_OPT,
                         cart_path: str = CART_OPT):
    """Cria uma cópia do produto."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
        p = loja.duplicar_produto(produto_id)
    console.print(f">> Cópia criada: {p.nome} ({p.id})")


@produto_app.command("delete")
def cmd_produto_delete(produto_id: str = typer.Argument(...), db_path: str = DB_OPT,
                       cart_path: str = CART_OPT):
    """Exclui um produto do catálogo."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
        loja.remover_produto(produto_id)
    console.print(f">> Produto {produto_id} excluído.")


# -----------------------
# clientes
# -----------------------

cliente_app = typer.Typer(help="Cadastro de clientes")
app.add_typer(cliente_app, name="cliente")


@cliente_app.command("add")
def cmd_cliente_add(
    nome: str = typer.Option("", "--nome"),
    telefone: str = typer.Option("", "--telefone"),
    email: Optional[str] = typer.Option(None, "--email"),
    endereco: Optional[str] = typer.Option(None, "--endereco"),
    db_path: str = DB_OPT,
    cart_path: str = CART_OPT,
):
    """Cadastra um cliente (nome e telefone obrigatórios)."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
        c = loja.cadastrar_cliente(nome=nome, telefone=telefone, email=email, endereco=endereco)
    console.print(f">> Cliente cadastrado: [bold]{c.nome}[/] ({c.id})")


@cliente_app.command("list")
def cmd_cliente_list(busca: str = typer.Option("", "--busca", help="Nome, email ou telefone"),
                     db_path: str = DB_OPT, cart_path: str = CART_OPT):
    """Lista clientes em ordem alfabética."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
    clientes = relatorios.buscar_clientes(loja.clientes, busca)
    _display_table([_linha_cliente(c) for c in clientes], title="Clientes")
    st = relatorios.estatisticas_clientes(loja.clientes)
    melhor = st["melhor"]
    console.print(
        f"[dim]Total: {st['total']} | Ativos: {st['ativos']} | "
        f"Melhor cliente: {melhor.nome + ' (' + formatar_brl(melhor.total_gasto) + ')' if melhor else '-'}[/dim]"
    )


@cliente_app.command("show")
def cmd_cliente_show(cliente_id: str = typer.Argument(...), db_path: str = DB_OPT,
                     cart_path: str = CART_OPT):
    """Detalhe do cliente com histórico de pedidos."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
    det = relatorios.detalhe_cliente(loja, cliente_id)
    if det is None:
        console.print(Panel("Cliente não encontrado", border_style="red"))
        raise typer.Exit(code=1)
    c = det["cliente"]
    console.print(Panel(
        f"[bold]{c.nome}[/bold]  ({c.status})\n"
        f"Telefone: {c.telefone}\nEmail: {c.email or '-'}\nEndereço: {c.endereco or '-'}\n"
        f"Desde {c.membro_desde or '-'}\n\n"
        f"Total gasto: {formatar_brl(c.total_gasto)}\n"
        f"Pedidos: {det['total_pedidos']} | Ticket médio: {formatar_brl(det['ticket_medio'])}",
        title=c.id,
        border_style="cyan",
    ))
    _display_table([_linha_pedido(p) for p in det["pedidos"]], title="Histórico de Pedidos")


@cliente_app.command("edit")
def cmd_cliente_edit(
    cliente_id: str = typer.Argument(...),
    nome: Optional[str] = typer.Option(None, "--nome"),
    telefone: Optional[str] = typer.Option(None, "--telefone"),
    email: Optional[str] = typer.Option(None, "--email"),
    endereco: Optional[str] = typer.Option(None, "--endereco"),
    status: Optional[str] = typer.Option(None, "--status", help="Active | Inactive"),
    db_path: str = DB_OPT,
    cart_path: str = CART_OPT,
):
    """Altera dados cadastrais do cliente."""
    campos = {"nome": nome, "telefone": telefone, "email": email, "endereco": endereco, "status": status}
    campos = {k: v for k, v in campos.items() if v is not None}
    with _operacao():
        loja = _abrir(db_path, cart_path)
        c = loja.editar_cliente(cliente_id, **campos)
    console.print(f">> Cliente atualizado: {c.nome}")


@cliente_app.command("delete")
def cmd_cliente_delete(cliente_id: str = typer.Argument(...), db_path: str = DB_OPT,
                       cart_path: str = CART_OPT):
    """Exclui um cliente."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
        loja.remover_cliente(cliente_id)
    console.print(f">> Cliente {cliente_id} excluído.")


# -----------------------
# fornecedores
# -----------------------

fornecedor_app = typer.Typer(help="Cadastro de fornecedores")
app.add_typer(fornecedor_app, name="fornecedor")


@fornecedor_app.command("add")
def cmd_fornecedor_add(
    nome: str = typer.Option("", "--nome"),
    telefone: str = typer.Option("", "--telefone"),
    contato: Optional[str] = typer.Option(None, "--contato"),
    email: Optional[str] = typer.Option(None, "--email"),
    categorias: str = typer.Option("", "--categorias", help="Separadas por vírgula"),
    avaliacao: int = typer.Option(5, "--avaliacao", help="1 a 5"),
    db_path: str = DB_OPT,
    cart_path: str = CART_OPT,
):
    """Cadastra um fornecedor."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
        f = loja.cadastrar_fornecedor(
            nome=nome, telefone=telefone, contato=contato, email=email,
            categorias=categorias.split(","), avaliacao=avaliacao,
        )
    console.print(f">> Fornecedor cadastrado: [bold]{f.nome}[/] ({f.id})")


@fornecedor_app.command("list")
def cmd_fornecedor_list(
    busca: str = typer.Option("", "--busca", help="Empresa, contato ou email"),
    categoria: str = typer.Option("Todas", "--categoria"),
    db_path: str = DB_OPT,
    cart_path: str = CART_OPT,
):
    """Lista fornecedores."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
    fornecedores = relatorios.buscar_fornecedores(loja.fornecedores, busca, categoria)
    _display_table([_linha_fornecedor(f) for f in fornecedores], title="Fornecedores")
    st = relatorios.estatisticas_fornecedores(loja.fornecedores)
    console.print(f"[dim]Total: {st['total']} | Ativos: {st['ativos']} | Nota 5: {st['nota_maxima']}[/dim]")


@fornecedor_app.command("delete")
def cmd_fornecedor_delete(fornecedor_id: str = typer.Argument(...), db_path: str = DB_OPT,
                          cart_path: str = CART_OPT):
    """Exclui um fornecedor."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
        loja.remover_fornecedor(fornecedor_id)
    console.print(f">> Fornecedor {fornecedor_id} excluído.")


# -----------------------
# envios
# -----------------------

envio_app = typer.Typer(help="Logística de envios")
app.add_typer(envio_app, name="envio")


@envio_app.command("add")
def cmd_envio_add(
    pedido_id: str = typer.Option("", "--pedido"),
    cliente_nome: str = typer.Option("", "--cliente"),
    transportadora: str = typer.Option("", "--transportadora"),
    telefone: Optional[str] = typer.Option(None, "--telefone"),
    produto: Optional[str] = typer.Option(None, "--produto", help="Descrição do que foi enviado"),
    rastreio: Optional[str] = typer.Option(None, "--rastreio", help="Gerado automaticamente se vazio"),
    previsao: Optional[str] = typer.Option(None, "--previsao"),
    db_path: str = DB_OPT,
    cart_path: str = CART_OPT,
):
    """Cria um envio em Preparação."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
        e = loja.cadastrar_envio(
            pedido_id=pedido_id, cliente_nome=cliente_nome, transportadora=transportadora,
            cliente_telefone=telefone, descricao_produto=produto, codigo_rastreio=rastreio,
            previsao_entrega=previsao,
        )
    console.print(f">> Envio criado: {e.id} - rastreio [bold]{e.codigo_rastreio}[/]")


@envio_app.command("list")
def cmd_envio_list(
    busca: str = typer.Option("", "--busca", help="Pedido, cliente ou rastreio"),
    status: str = typer.Option(relatorios.TODOS, "--status"),
    db_path: str = DB_OPT,
    cart_path: str = CART_OPT,
):
    """Lista envios com progresso no fluxo de entrega."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
        envios = relatorios.buscar_envios(loja.envios, busca, status)
    _display_table([_linha_envio(e) for e in envios], title="Envios")
    st = relatorios.estatisticas_envios(loja.envios)
    console.print("[dim]" + " | ".join(f"{k}: {v}" for k, v in st.items()) + "[/dim]")


@envio_app.command("status")
def cmd_envio_status(
    envio_id: str = typer.Argument(...),
    status: str = typer.Argument(..., help="Preparação | Despachado | Em Trânsito | Entregue"),
    ultimo_status: Optional[str] = typer.Option(None, "--ultimo-status", help="Última atualização da transportadora"),
    db_path: str = DB_OPT,
    cart_path: str = CART_OPT,
):
    """Move o envio para outra etapa."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
        if ultimo_status is not None:
            e = loja.editar_envio(envio_id, status=status, ultimo_status=ultimo_status)
        else:
            e = loja.alterar_status_envio(envio_id, status)
    console.print(f">> Envio {e.id}: {e.status}")


@envio_app.command("delete")
def cmd_envio_delete(envio_id: str = typer.Argument(...), db_path: str = DB_OPT,
                     cart_path: str = CART_OPT):
    """Exclui um envio."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
        loja.remover_envio(envio_id)
    console.print(f">> Envio {envio_id} excluído.")


# -----------------------
# PDV: carrinho e checkout
# -----------------------

carrinho_app = typer.Typer(help="Carrinho da venda em andamento")
app.add_typer(carrinho_app, name="carrinho")


def _mostrar_carrinho(loja: Loja) -> None:
    linhas = [
        {"id": it.produto.id, "produto": it.produto.nome, "qtd": it.quantidade,
         "preço": it.produto.preco, "total": it.subtotal}
        for it in loja.carrinho.itens
    ]
    _display_table(linhas, title="Carrinho")
    console.print(f"[bold]Total: {formatar_brl(loja.carrinho.total())}[/bold]")


@carrinho_app.command("add")
def cmd_carrinho_add(produto_id: str = typer.Argument(...), db_path: str = DB_OPT,
                     cart_path: str = CART_OPT):
    """Adiciona uma unidade do produto."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
        if not loja.adicionar_ao_carrinho(produto_id):
            console.print("[yellow]Produto sem estoque; não adicionado.[/yellow]")
    _mostrar_carrinho(loja)


@carrinho_app.command("remove")
def cmd_carrinho_remove(produto_id: str = typer.Argument(...), db_path: str = DB_OPT,
                        cart_path: str = CART_OPT):
    """Remove a linha do produto."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
    loja.remover_do_carrinho(produto_id)
    _mostrar_carrinho(loja)


@carrinho_app.command("qtd")
def cmd_carrinho_qtd(
    produto_id: str = typer.Argument(...),
    delta: int = typer.Option(1, "--delta", help="Ex.: --delta -1"),
    db_path: str = DB_OPT,
    cart_path: str = CART_OPT,
):
    """Soma DELTA à quantidade da linha (nunca abaixo de 1)."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
    loja.alterar_quantidade_carrinho(produto_id, delta)
    _mostrar_carrinho(loja)


@carrinho_app.command("show")
def cmd_carrinho_show(db_path: str = DB_OPT, cart_path: str = CART_OPT):
    """Mostra o carrinho atual."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
    _mostrar_carrinho(loja)


@carrinho_app.command("clear")
def cmd_carrinho_clear(db_path: str = DB_OPT, cart_path: str = CART_OPT):
    """Esvazia o carrinho."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
    loja.limpar_carrinho()
    typer.echo(">> Carrinho esvaziado.")


@app.command("checkout")
def cmd_checkout(
    pagamento: str = typer.Option(..., "--pagamento", help="Pix | Credit | Debit | Cash"),
    cliente_id: Optional[str] = typer.Option(None, "--cliente", help="Id do cliente (vazio = avulso)"),
    db_path: str = DB_OPT,
    cart_path: str = CART_OPT,
):
    """Finaliza a venda do carrinho."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
        res = loja.checkout(pagamento, cliente_id)
    if res is None:
        typer.echo("Carrinho vazio. Nada a finalizar.")
        return
    p = res.pedido
    console.print(Panel(
        f"Pedido [bold]{p.id}[/bold]\nCliente: {p.cliente_nome}\n"
        f"Itens: {sum(it.quantidade for it in p.itens)}\nPagamento: {p.forma_pagamento}\n"
        f"Total: [bold green]{formatar_brl(p.total)}[/bold green]",
        title="Venda Finalizada",
        border_style="green",
    ))
    for falha in res.falhas:
        console.print(f"[yellow]Atenção:[/] {falha}")


@app.command("pedidos")
def cmd_pedidos(
    busca: str = typer.Option("", "--busca", help="Id do pedido ou nome do cliente"),
    status: str = typer.Option(relatorios.TODOS, "--status"),
    db_path: str = DB_OPT,
    cart_path: str = CART_OPT,
):
    """Lista pedidos, mais recentes primeiro."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
        pedidos = relatorios.buscar_pedidos(loja.pedidos, busca, status)
    _display_table([_linha_pedido(p) for p in pedidos], title="Pedidos")


# -----------------------
# financeiro e painel
# -----------------------

fin_app = typer.Typer(help="Livro-caixa")
app.add_typer(fin_app, name="financeiro")

PERIODO_OPT = typer.Option("total", "--periodo", help="hoje | ontem | 7dias | mes | personalizado | total")
MES_OPT = typer.Option(None, "--mes", help="AAAA-MM (período mes)")
INICIO_OPT = typer.Option(None, "--inicio", help="AAAA-MM-DD (período personalizado)")
FIM_OPT = typer.Option(None, "--fim", help="AAAA-MM-DD (período personalizado)")


@fin_app.command("resumo")
def cmd_fin_resumo(
    periodo: str = PERIODO_OPT,
    mes: Optional[str] = MES_OPT,
    inicio: Optional[str] = INICIO_OPT,
    fim: Optional[str] = FIM_OPT,
    filtro: str = typer.Option("Tudo", "--filtro", help="Tudo | Entradas | Saídas"),
    db_path: str = DB_OPT,
    cart_path: str = CART_OPT,
):
    """Totais do período e extrato filtrado."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
        res = relatorios.resumo_financeiro(loja, _periodo(periodo, mes, inicio, fim), filtro)
    t = res["totais"]
    console.print(Panel(
        f"Receitas: [green]{formatar_brl(t['total_receitas'])}[/green]\n"
        f"Despesas: [red]{formatar_brl(t['total_despesas'])}[/red]\n"
        f"Lucro líquido: [bold]{formatar_brl(t['lucro_liquido'])}[/bold]\n"
        f"Custos operacionais: {formatar_brl(t['custos_operacionais'])}",
        title=f"Financeiro - {res['periodo']}",
        border_style="cyan",
    ))
    _display_table([_linha_transacao(tr) for tr in res["extrato"]], title="Transações")


@fin_app.command("semanal")
def cmd_fin_semanal(
    periodo: str = PERIODO_OPT,
    mes: Optional[str] = MES_OPT,
    inicio: Optional[str] = INICIO_OPT,
    fim: Optional[str] = FIM_OPT,
    db_path: str = DB_OPT,
    cart_path: str = CART_OPT,
):
    """Receitas e despesas por dia da semana."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
        res = relatorios.resumo_financeiro(loja, _periodo(periodo, mes, inicio, fim))
    escala = res["escala"]
    linhas = [
        {"dia": b["dia"], "receitas": b["receitas"], "despesas": b["despesas"],
         "barra": "█" * int(altura_relativa(b["receitas"], escala) / 10)}
        for b in res["semanal"]
    ]
    _display_table(linhas, title=f"Fluxo semanal - {res['periodo']}")


@fin_app.command("add")
def cmd_fin_add(
    descricao: str = typer.Option("", "--descricao"),
    valor: str = typer.Option(..., "--valor"),
    tipo: str = typer.Option("Expense", "--tipo", help="Income | Expense"),
    categoria: str = typer.Option("Outros", "--categoria",
                                  help="Vendas | Fornecedores | Marketing | Operacional | Outros"),
    status: str = typer.Option("Concluído", "--status"),
    db_path: str = DB_OPT,
    cart_path: str = CART_OPT,
):
    """Lança uma entrada ou saída manual."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
        t = loja.registrar_transacao(descricao=descricao, categoria=categoria, tipo=tipo,
                                     valor=_valor(valor, "valor"), status=status)
    console.print(f">> Lançamento {t.id}: {t.tipo} {formatar_brl(t.valor)}")


@app.command("dashboard")
def cmd_dashboard(
    periodo: str = PERIODO_OPT,
    mes: Optional[str] = MES_OPT,
    inicio: Optional[str] = INICIO_OPT,
    fim: Optional[str] = FIM_OPT,
    db_path: str = DB_OPT,
    cart_path: str = CART_OPT,
):
    """Painel de vendas do período."""
    with _operacao():
        loja = _abrir(db_path, cart_path)
        res = relatorios.resumo_dashboard(loja, _periodo(periodo, mes, inicio, fim))
    console.print(Panel(
        f"Receita: [bold green]{formatar_brl(res['receita'])}[/bold green]\n"
        f"Pedidos: {res['pedidos']}\n"
        f"Ticket médio: {formatar_brl(res['ticket_medio'])}\n"
        f"Margem de lucro: {res['margem_lucro']:.1f}%",
        title=f"Painel - {res['periodo']}",
        border_style="blue",
    ))
    grafico = res["grafico"]
    if grafico.pontos:
        titulo = "Vendas (dados de exemplo)" if grafico.placeholder else "Vendas"
        _display_table([{"período": r, "valor": v} for r, v in grafico.pontos], title=titulo)
    _display_table([{"id": p.id, "nome": p.nome, "estoque": p.estoque, "status": p.status}
                    for p in res["estoque_critico"]], title="Camisas com menor estoque")
    _display_table([_linha_pedido(p) for p in res["pedidos_recentes"]], title="Pedidos recentes")


# -----------------------
# exportação
# -----------------------

exp_app = typer.Typer(help="Exportar listagens para CSV")
app.add_typer(exp_app, name="exportar")

DESTINO_OPT = typer.Option(None, "--destino", help="Diretório de saída (padrão: diretório atual)")


@exp_app.command("clientes")
def cmd_exp_clientes(destino: Optional[str] = DESTINO_OPT, db_path: str = DB_OPT,
                     cart_path: str = CART_OPT):
    with _operacao():
        loja = _abrir(db_path, cart_path)
        caminho = csv_export.exportar_clientes(loja.clientes, destino, loja.hoje())
    typer.echo(f">> Exportado: {caminho}")


@exp_app.command("fornecedores")
def cmd_exp_fornecedores(destino: Optional[str] = DESTINO_OPT, db_path: str = DB_OPT,
                         cart_path: str = CART_OPT):
    with _operacao():
        loja = _abrir(db_path, cart_path)
        caminho = csv_export.exportar_fornecedores(loja.fornecedores, destino, loja.hoje())
    typer.echo(f">> Exportado: {caminho}")


@exp_app.command("financeiro")
def cmd_exp_financeiro(destino: Optional[str] = DESTINO_OPT, db_path: str = DB_OPT,
                       cart_path: str = CART_OPT):
    with _operacao():
        loja = _abrir(db_path, cart_path)
        caminho = csv_export.exportar_transacoes(loja.transacoes, destino, loja.hoje())
    typer.echo(f">> Exportado: {caminho}")


@exp_app.command("envios")
def cmd_exp_envios(destino: Optional[str] = DESTINO_OPT, db_path: str = DB_OPT,
                   cart_path: str = CART_OPT):
    with _operacao():
        loja = _abrir(db_path, cart_path)
        caminho = csv_export.exportar_envios(loja.envios, destino, loja.hoje())
    typer.echo(f">> Exportado: {caminho}")


# Entry point opcional:
def main():
    app()


if __name__ == "__main__":
    main()
