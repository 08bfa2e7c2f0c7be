# futmais/adapters/tui.py
"""
TUI (Text User Interface) do FutMais usando Rich.

Interface de menus para o balcão da loja:
- PDV: catálogo, carrinho e finalização da venda
- Catálogo: cadastro e ajuste de estoque
- Clientes: cadastro e histórico
- Financeiro: resumo do período e lançamentos manuais
- Logística: envios e mudança de etapa
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt, IntPrompt, Confirm
from rich.table import Table
from rich.align import Align

from futmais.config import CART_PATH, DB_PATH
from futmais.adapters.parsers import formatar_brl, parse_data_br, parse_valor
from futmais.domain.errors import FutmaisError
from futmais.domain.financeiro import Periodo, TIPOS_PERIODO
from futmais.domain.models import ETAPAS_ENVIO, FORMAS_PAGAMENTO, TIPOS_PRODUTO
from futmais.domain.policies import progresso_envio
from futmais.infra.logger import log_startup
from futmais.usecases.loja import Loja
from futmais.usecases import relatorios


class FutmaisTUI:
    """Text User Interface para o balcão da loja."""

    def __init__(self, db_path: str = DB_PATH, cart_path: str = CART_PATH,
                 loja: Optional[Loja] = None):
        self.console = Console()
        self.loja = loja or Loja.abrir(db_path=db_path, cart_path=cart_path)

    def run(self) -> None:
        """Inicia a interface principal."""
        self.show_banner()

        while True:
            try:
                choice = self.show_main_menu()
                if choice == "1":
                    self.menu_pdv()
                elif choice == "2":
                    self.menu_catalogo()
                elif choice == "3":
                    self.menu_clientes()
                elif choice == "4":
                    self.menu_financeiro()
                elif choice == "5":
                    self.menu_logistica()
                elif choice == "0":
                    self.console.print("\n[green]Saindo do sistema...[/green]")
                    break
            except KeyboardInterrupt:
                self.console.print("\n[red]Saindo...[/red]")
                break
            except (FutmaisError, ValueError) as e:
                self.console.print(f"[red]Erro: {e}[/red]")

    def show_banner(self) -> None:
        banner = Panel.fit(
            "[bold blue]FUTMAIS[/bold blue]\n"
            "[cyan]PDV e Retaguarda[/cyan]",
            border_style="blue"
        )
        self.console.print("\n")
        self.console.print(Align.center(banner))
        self.console.print("\n")

    def show_main_menu(self) -> str:
        menu = Panel(
            "[bold]MENU PRINCIPAL[/bold]\n\n"
            "[yellow]1.[/yellow] PDV (Venda)\n"
            "[yellow]2.[/yellow] Catálogo\n"
            "[yellow]3.[/yellow] Clientes\n"
            "[yellow]4.[/yellow] Financeiro\n"
            "[yellow]5.[/yellow] Logística\n"
            "[yellow]0.[/yellow] Sair\n",
            title="Opções",
            border_style="green"
        )
        self.console.print(menu)
        return Prompt.ask("Escolha uma opção", choices=["0", "1", "2", "3", "4", "5"])

    def _submenu(self, titulo: str, opcoes: List[str], cor: str) -> str:
        linhas = "".join(f"[yellow]{i}.[/yellow] {txt}\n" for i, txt in enumerate(opcoes, start=1))
        self.console.print(Panel(
            f"[bold]{titulo.upper()}[/bold]\n\n{linhas}[yellow]0.[/yellow] Voltar\n",
            title=titulo,
            border_style=cor,
        ))
        return Prompt.ask("Escolha uma opção", choices=[str(i) for i in range(len(opcoes) + 1)])

    def _tabela(self, titulo: str, linhas: List[Dict[str, Any]]) -> None:
        if not linhas:
            self.console.print(f"[yellow]Nenhum dado encontrado em {titulo}[/yellow]")
            return
        table = Table(title=titulo, show_header=True, header_style="bold magenta")
        for coluna in linhas[0].keys():
            table.add_column(coluna)
        for linha in linhas:
            table.add_row(*(formatar_brl(v) if isinstance(v, float) else str(v if v is not None else "")
                            for v in linha.values()))
        self.console.print(table)

    # ----------------------
    # PDV
    # ----------------------

    def menu_pdv(self) -> None:
        while True:
            choice = self._submenu("PDV", [
                "Buscar produto", "Adicionar ao carrinho", "Alterar quantidade",
                "Remover do carrinho", "Ver carrinho", "Finalizar venda", "Esvaziar carrinho",
            ], "cyan")
            if choice == "0":
                break
            elif choice == "1":
                self.listar_produtos()
            elif choice == "2":
                produto_id = Prompt.ask("Id do produto")
                if not self.loja.adicionar_ao_carrinho(produto_id):
                    self.console.print("[yellow]Produto sem estoque.[/yellow]")
                self.ver_carrinho()
            elif choice == "3":
                produto_id = Prompt.ask("Id do produto")
                delta = IntPrompt.ask("Somar à quantidade (ex.: 1 ou -1)", default=1)
                self.loja.alterar_quantidade_carrinho(produto_id, delta)
                self.ver_carrinho()
            elif choice == "4":
                self.loja.remover_do_carrinho(Prompt.ask("Id do produto"))
                self.ver_carrinho()
            elif choice == "5":
                self.ver_carrinho()
            elif choice == "6":
                self.finalizar_venda()
            elif choice == "7":
                if Confirm.ask("Esvaziar o carrinho?"):
                    self.loja.limpar_carrinho()

    def ver_carrinho(self) -> None:
        self._tabela("Carrinho", [
            {"id": it.produto.id, "produto": it.produto.nome, "qtd": it.quantidade,
             "preço": it.produto.preco, "subtotal": it.subtotal}
            for it in self.loja.carrinho.itens
        ])
        self.console.print(f"[bold]Total: {formatar_brl(self.loja.carrinho.total())}[/bold]")

    def finalizar_venda(self) -> None:
        if not self.loja.carrinho:
            self.console.print("[yellow]Carrinho vazio.[/yellow]")
            return
        self.ver_carrinho()
        pagamento = Prompt.ask("Forma de pagamento", choices=list(FORMAS_PAGAMENTO), default="Pix")
        cliente_id = Prompt.ask("Id do cliente (vazio = Cliente Avulso)", default="") or None
        res = self.loja.checkout(pagamento, cliente_id)
        if res is None:
            return
        self.console.print(f"\n[green]✓ Venda {res.pedido.id} finalizada: "
                           f"{formatar_brl(res.pedido.total)} ({res.pedido.cliente_nome})[/green]")
        for falha in res.falhas:
            self.console.print(f"[yellow]Atenção: {falha}[/yellow]")

    # ----------------------
    # Catálogo
    # ----------------------

    def menu_catalogo(self) -> None:
        while True:
            choice = self._submenu("Catálogo", [
                "Listar produtos", "Cadastrar produto", "Ajustar estoque", "Excluir produto",
            ], "magenta")
            if choice == "0":
                break
            elif choice == "1":
                self.listar_produtos()
            elif choice == "2":
                self.cadastrar_produto()
            elif choice == "3":
                produto_id = Prompt.ask("Id do produto")
                p = self.loja.atualizar_estoque(produto_id, IntPrompt.ask("Nova quantidade"))
                self.console.print(f"[green]✓ {p.nome}: {p.estoque} un ({p.status})[/green]")
            elif choice == "4":
                produto_id = Prompt.ask("Id do produto")
                if Confirm.ask(f"Excluir {produto_id}?"):
                    self.loja.remover_produto(produto_id)

    def listar_produtos(self) -> None:
        termo = Prompt.ask("Buscar (nome, time ou SKU)", default="")
        self._tabela("Produtos", [
            {"id": p.id, "nome": p.nome, "sku": p.sku, "preço": p.preco,
             "estoque": p.estoque, "status": p.status}
            for p in relatorios.buscar_produtos(self.loja.produtos, termo)
        ])

    def cadastrar_produto(self) -> None:
        nome = Prompt.ask("Nome")
        preco = parse_valor(Prompt.ask("Preço (R$)"))
        custo = parse_valor(Prompt.ask("Custo (R$)", default="0")) or 0.0
        estoque = IntPrompt.ask("Estoque inicial", default=0)
        tipo = Prompt.ask("Tipo", choices=list(TIPOS_PRODUTO), default="Jersey")
        time = Prompt.ask("Time", default="") or None
        tamanho = Prompt.ask("Tamanho", default="M")
        sku = Prompt.ask("SKU (vazio = automático)", default="") or None
        p = self.loja.cadastrar_produto(nome=nome, preco=preco, custo=custo, estoque=estoque,
                                        tipo=tipo, time=time, tamanho=tamanho, sku=sku)
        self.console.print(f"[green]✓ Produto {p.nome} cadastrado ({p.sku})[/green]")

    # ----------------------
    # Clientes
    # ----------------------

    def menu_clientes(self) -> None:
        while True:
            choice = self._submenu("Clientes", [
                "Listar clientes", "Cadastrar cliente", "Detalhe do cliente",
            ], "blue")
            if choice == "0":
                break
            elif choice == "1":
                termo = Prompt.ask("Buscar (nome, email ou telefone)", default="")
                self._tabela("Clientes", [
                    {"id": c.id, "nome": c.nome, "telefone": c.telefone,
                     "gasto": c.total_gasto, "status": c.status}
                    for c in relatorios.buscar_clientes(self.loja.clientes, termo)
                ])
            elif choice == "2":
                c = self.loja.cadastrar_cliente(
                    nome=Prompt.ask("Nome"),
                    telefone=Prompt.ask("Telefone"),
                    email=Prompt.ask("Email", default="") or None,
                    endereco=Prompt.ask("Endereço", default="") or None,
                )
                self.console.print(f"[green]✓ Cliente {c.nome} cadastrado ({c.id})[/green]")
            elif choice == "3":
                det = relatorios.detalhe_cliente(self.loja, Prompt.ask("Id do cliente"))
                if det is None:
                    self.console.print("[red]Cliente não encontrado[/red]")
                    continue
                c = det["cliente"]
                self.console.print(Panel(
                    f"{c.nome} - {c.telefone}\nTotal gasto: {formatar_brl(c.total_gasto)}\n"
                    f"Pedidos: {det['total_pedidos']} | Ticket médio: {formatar_brl(det['ticket_medio'])}",
                    title=c.id, border_style="cyan",
                ))
                self._tabela("Pedidos", [
                    {"id": p.id, "data": p.data, "total": p.total, "status": p.status}
                    for p in det["pedidos"]
                ])

    # ----------------------
    # Financeiro
    # ----------------------

    def pedir_periodo(self) -> Periodo:
        tipo = Prompt.ask("Período", choices=list(TIPOS_PERIODO), default="total")
        if tipo == "mes":
            return Periodo(tipo=tipo, mes=Prompt.ask("Mês (AAAA-MM)"))
        if tipo == "personalizado":
            datas = []
            for rotulo in ("Início", "Fim"):
                txt = Prompt.ask(f"{rotulo} (dd/mm/aaaa)")
                d = parse_data_br(txt)
                if d is None:
                    raise ValueError(f"data inválida: {txt}")
                datas.append(d)
            return Periodo(tipo=tipo, inicio=datas[0], fim=datas[1])
        return Periodo(tipo=tipo)

    def menu_financeiro(self) -> None:
        while True:
            choice = self._submenu("Financeiro", ["Resumo do período", "Novo lançamento"], "yellow")
            if choice == "0":
                break
            elif choice == "1":
                res = relatorios.resumo_financeiro(self.loja, self.pedir_periodo())
                t = res["totais"]
                self.console.print(Panel(
                    f"Receitas: {formatar_brl(t['total_receitas'])}\n"
                    f"Despesas: {formatar_brl(t['total_despesas'])}\n"
                    f"Lucro líquido: {formatar_brl(t['lucro_liquido'])}",
                    title=res["periodo"], border_style="yellow",
                ))
                self._tabela("Transações", [
                    {"data": tr.data, "descrição": tr.descricao, "tipo": tr.tipo, "valor": tr.valor}
                    for tr in res["extrato"]
                ])
            elif choice == "2":
                tr = self.loja.registrar_transacao(
                    descricao=Prompt.ask("Descrição"),
                    categoria=Prompt.ask("Categoria", default="Outros"),
                    tipo=Prompt.ask("Tipo", choices=["Income", "Expense"], default="Expense"),
                    valor=parse_valor(Prompt.ask("Valor (R$)")),
                )
                self.console.print(f"[green]✓ Lançamento {tr.id} registrado[/green]")

    # ----------------------
    # Logística
    # ----------------------

    def menu_logistica(self) -> None:
        while True:
            choice = self._submenu("Logística", ["Listar envios", "Novo envio", "Mudar etapa"], "green")
            if choice == "0":
                break
            elif choice == "1":
                self._tabela("Envios", [
                    {"id": e.id, "pedido": e.pedido_id, "cliente": e.cliente_nome,
                     "rastreio": e.codigo_rastreio, "status": e.status,
                     "progresso": f"{progresso_envio(e.status):.0f}%"}
                    for e in self.loja.envios
                ])
            elif choice == "2":
                e = self.loja.cadastrar_envio(
                    pedido_id=Prompt.ask("Pedido"),
                    cliente_nome=Prompt.ask("Cliente"),
                    transportadora=Prompt.ask("Transportadora"),
                    codigo_rastreio=Prompt.ask("Rastreio (vazio = automático)", default="") or None,
                )
                self.console.print(f"[green]✓ Envio {e.id} criado, rastreio {e.codigo_rastreio}[/green]")
            elif choice == "3":
                envio_id = Prompt.ask("Id do envio")
                status = Prompt.ask("Nova etapa", choices=list(ETAPAS_ENVIO))
                e = self.loja.alterar_status_envio(envio_id, status)
                self.console.print(f"[green]✓ {e.id}: {e.status}[/green]")


def main_tui(db_path: str = DB_PATH, cart_path: str = CART_PATH):
    """Ponto de entrada principal da TUI."""
    log_startup()
    tui = FutmaisTUI(db_path=db_path, cart_path=cart_path)
    tui.run()


if __name__ == "__main__":
    main_tui()
