# futmais/usecases/loja.py
"""
Estado da sessão da loja.

`Loja` é o único dono das coleções carregadas em memória (produtos,
clientes, pedidos, fornecedores, envios e lançamentos do caixa) e do
carrinho em andamento. As telas e comandos leem dessas listas e pedem
alterações pelos métodos nomeados abaixo.

Regra de atualização: o cache só muda depois que o banco confirma a
gravação. Se o repositório levantar `StoreError`, a lista em memória
continua exatamente como estava e o erro sobe para quem chamou.
"""

from __future__ import annotations

import random
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Optional
from urllib.parse import quote
from uuid import uuid4

from futmais.config import CART_PATH, DB_PATH, DEFAULTS
from futmais.adapters.parsers import formatar_data
from futmais.domain.carrinho import Carrinho
from futmais.domain.errors import StoreError, ValidacaoError
from futmais.domain.financeiro import totais
from futmais.domain.models import (
    CATEGORIAS_TRANSACAO,
    ETAPAS_ENVIO,
    STATUS_CLIENTE,
    STATUS_TRANSACAO,
    TIPOS_PRODUTO,
    TIPOS_TRANSACAO,
    Cliente,
    Envio,
    Fornecedor,
    Pedido,
    Produto,
    TransacaoFinanceira,
)
from futmais.domain.policies import status_por_estoque
from futmais.infra.cart_storage import CartStorage
from futmais.infra.logger import log_system_event, log_transaction
from futmais.infra.repositories import EntityStore, TabelaRepo
from futmais.usecases.checkout import CheckoutResultado, run_checkout

IMAGEM_PADRAO_PRODUTO = "https://picsum.photos/200"

CAMPOS_PRODUTO = ("nome", "descricao", "preco", "custo", "estoque", "tipo",
                  "time", "liga", "tamanho", "sku", "imagem")
CAMPOS_CLIENTE = ("nome", "email", "telefone", "endereco", "imagem", "status")
CAMPOS_FORNECEDOR = ("nome", "contato", "email", "telefone", "categorias",
                     "avaliacao", "status", "imagem")
CAMPOS_ENVIO = ("pedido_id", "cliente_nome", "cliente_telefone", "descricao_produto",
                "transportadora", "codigo_rastreio", "previsao_entrega",
                "ultimo_status", "status")


# ----------------------
# util
# ----------------------

def _novo_id(prefixo: str = "") -> str:
    return f"{prefixo}{uuid4().hex[:10].upper()}"


def _vazio(val: Any) -> bool:
    return val is None or (isinstance(val, str) and not val.strip())


def _avatar(nome: str) -> str:
    return f"https://ui-avatars.com/api/?name={quote(nome)}&background=random"


def _gerar_sku() -> str:
    return f"SKU-{random.randint(0, 9999):04d}"


def _gerar_rastreio(transportadora: str) -> str:
    return f"{transportadora.strip()[:2].upper()}{uuid4().hex[:8].upper()}"


def _campos_validos(campos: Dict[str, Any], permitidos: Iterable[str], entidade: str) -> None:
    extras = sorted(set(campos) - set(permitidos))
    if extras:
        raise ValidacaoError(f"campos não editáveis em {entidade}: {', '.join(extras)}")


def _validar_numeros_produto(campos: Dict[str, Any]) -> None:
    if "preco" in campos and (campos["preco"] is None or float(campos["preco"]) < 0):
        raise ValidacaoError("preço não pode ser negativo")
    if "custo" in campos and (campos["custo"] is None or float(campos["custo"]) < 0):
        raise ValidacaoError("custo não pode ser negativo")
    if "estoque" in campos and (campos["estoque"] is None or int(campos["estoque"]) < 0):
        raise ValidacaoError("estoque não pode ser negativo")
    if "tipo" in campos and campos["tipo"] not in TIPOS_PRODUTO:
        raise ValidacaoError(f"tipo de produto inválido: {campos['tipo']}")


def _validar_avaliacao(avaliacao: Any) -> int:
    nota = int(avaliacao)
    if not 1 <= nota <= 5:
        raise ValidacaoError("avaliação deve estar entre 1 e 5")
    return nota


class Loja:
    """Sessão da aplicação: coleções em memória, carrinho e relógio."""

    def __init__(
        self,
        store: EntityStore,
        carrinho: Optional[Carrinho] = None,
        relogio: Callable[[], date] = date.today,
    ):
        self.store = store
        self.carrinho = carrinho if carrinho is not None else Carrinho()
        self.relogio = relogio
        self.produtos: List[Produto] = []
        self.clientes: List[Cliente] = []
        self.pedidos: List[Pedido] = []
        self.fornecedores: List[Fornecedor] = []
        self.envios: List[Envio] = []
        self.transacoes: List[TransacaoFinanceira] = []

    @classmethod
    def abrir(
        cls,
        db_path: str = DB_PATH,
        cart_path: str = CART_PATH,
        relogio: Callable[[], date] = date.today,
    ) -> "Loja":
        """Abre o banco (aplicando migrações), restaura o carrinho e carrega tudo."""
        loja = cls(EntityStore(db_path), Carrinho.restaurar(CartStorage(cart_path)), relogio)
        loja.carregar()
        return loja

    def hoje(self) -> date:
        return self.relogio()

    def carregar(self) -> None:
        """Recarrega todas as coleções a partir do banco."""
        log_system_event("loja_load_start", {"db_path": self.store.db_path})
        try:
            self.produtos = self.store.produtos.listar()
            self.clientes = self.store.clientes.listar()
            self.pedidos = self.store.pedidos.listar()
            self.fornecedores = self.store.fornecedores.listar()
            self.envios = self.store.envios.listar()
            self.transacoes = self.store.transacoes.listar()
        except Exception as e:
            log_system_event("loja_load_error", {"error": str(e)}, level="error")
            raise
        log_system_event("loja_load_success", {
            "produtos": len(self.produtos),
            "clientes": len(self.clientes),
            "pedidos": len(self.pedidos),
            "fornecedores": len(self.fornecedores),
            "envios": len(self.envios),
            "transacoes": len(self.transacoes),
            "carrinho": len(self.carrinho),
        })

    # ----------------------
    # consultas no cache
    # ----------------------

    @staticmethod
    def _buscar(lista: List[Any], id_: str) -> Optional[Any]:
        return next((o for o in lista if o.id == id_), None)

    def produto(self, id_: str) -> Optional[Produto]:
        return self._buscar(self.produtos, id_)

    def cliente(self, id_: str) -> Optional[Cliente]:
        return self._buscar(self.clientes, id_)

    def pedido(self, id_: str) -> Optional[Pedido]:
        return self._buscar(self.pedidos, id_)

    def fornecedor(self, id_: str) -> Optional[Fornecedor]:
        return self._buscar(self.fornecedores, id_)

    def envio(self, id_: str) -> Optional[Envio]:
        return self._buscar(self.envios, id_)

    def proximo_id_pedido(self) -> str:
        """Próximo id sequencial (#PED-0001, #PED-0002, ...)."""
        prefixo = DEFAULTS.prefixo_pedido
        maior = 0
        for p in self.pedidos:
            sufixo = p.id[len(prefixo):] if p.id.startswith(prefixo) else ""
            if sufixo.isdigit():
                maior = max(maior, int(sufixo))
        return f"{prefixo}{maior + 1:04d}"

    # ----------------------
    # gravação + cache
    # ----------------------

    def _gravar_alteracao(self, repo: TabelaRepo, lista: List[Any], id_: str,
                          parcial: Dict[str, Any]) -> Any:
        repo.atualizar(id_, parcial)
        atual = self._buscar(lista, id_)
        if atual is None:
            novo = repo.obter(id_)
            if novo is not None:
                lista.append(novo)
            return novo
        novo = replace(atual, **parcial)
        lista[lista.index(atual)] = novo
        return novo

    def _gravar_remocao(self, repo: TabelaRepo, lista: List[Any], id_: str) -> None:
        repo.remover(id_)
        lista[:] = [o for o in lista if o.id != id_]

    def _falhou(self, operacao: str, dados: Dict[str, Any], erro: Exception) -> None:
        log_transaction(operacao, dados, error=str(erro))
        log_system_event(f"{operacao}_error", {**dados, "error": str(erro)}, level="error")

    # ----------------------
    # produtos
    # ----------------------

    def cadastrar_produto(
        self,
        nome: str,
        preco: float,
        custo: float = 0.0,
        estoque: int = 0,
        tipo: str = "Jersey",
        time: Optional[str] = None,
        liga: Optional[str] = None,
        tamanho: Optional[str] = "M",
        sku: Optional[str] = None,
        imagem: Optional[str] = None,
        descricao: Optional[str] = None,
    ) -> Produto:
        """Cadastra um produto; estoque inicial com custo gera despesa de investimento.

        Raises:
            ValidacaoError: nome ou preço ausentes, números negativos, tipo inválido.
            StoreError: o banco recusou a gravação (cache inalterado).
        """
        if _vazio(nome) or _vazio(preco) or not float(preco):
            raise ValidacaoError("Nome e Preço são obrigatórios")
        _validar_numeros_produto({"preco": preco, "custo": custo or 0, "estoque": estoque or 0, "tipo": tipo})

        produto = Produto(
            id=uuid4().hex,
            nome=nome.strip(),
            preco=float(preco),
            custo=float(custo or 0),
            estoque=int(estoque or 0),
            status=status_por_estoque(int(estoque or 0)),
            tipo=tipo,
            descricao=descricao or "Novo Produto",
            time=time,
            liga=liga,
            tamanho=tamanho,
            sku=sku if not _vazio(sku) else _gerar_sku(),
            imagem=imagem or IMAGEM_PADRAO_PRODUTO,
        )
        try:
            self.store.produtos.inserir(produto)
        except Exception as e:
            self._falhou("cadastrar_produto", {"nome": produto.nome}, e)
            raise
        self.produtos.append(produto)
        log_transaction("cadastrar_produto", {"id": produto.id, "nome": produto.nome}, result="success")

        investimento = produto.custo * produto.estoque
        if investimento > 0:
            try:
                self.registrar_transacao(
                    descricao=f"Investimento Estoque - {produto.nome} ({produto.estoque} un)",
                    categoria="Operacional",
                    tipo="Expense",
                    valor=investimento,
                )
            except StoreError as e:
                log_system_event("investimento_nao_registrado",
                                 {"produto": produto.id, "valor": investimento, "error": str(e)},
                                 level="warning")
        return produto

    def duplicar_produto(self, id_: str) -> Produto:
        """Cria uma cópia do produto com nome e SKU marcados como cópia."""
        original = self.produto(id_)
        if original is None:
            raise ValidacaoError(f"produto {id_} não encontrado")
        return self.cadastrar_produto(
            nome=f"{original.nome} (Cópia)",
            preco=original.preco,
            custo=original.custo,
            estoque=original.estoque,
            tipo=original.tipo,
            time=original.time,
            liga=original.liga,
            tamanho=original.tamanho,
            sku=f"{original.sku or ''}-copy-{random.randint(0, 999)}",
            imagem=original.imagem,
            descricao=original.descricao,
        )

    def editar_produto(self, id_: str, **campos) -> Produto:
        """Altera os campos informados. O status é sempre recalculado pelo estoque."""
        _campos_validos(campos, CAMPOS_PRODUTO, "produto")
        _validar_numeros_produto(campos)
        if "nome" in campos and _vazio(campos["nome"]):
            raise ValidacaoError("Nome é obrigatório")
        for k in ("preco", "custo"):
            if k in campos:
                campos[k] = float(campos[k])
        if "estoque" in campos:
            campos["estoque"] = int(campos["estoque"])
            campos["status"] = status_por_estoque(campos["estoque"])
        try:
            produto = self._gravar_alteracao(self.store.produtos, self.produtos, id_, campos)
        except Exception as e:
            self._falhou("editar_produto", {"id": id_}, e)
            raise
        log_transaction("editar_produto", {"id": id_, "campos": sorted(campos)}, result="success")
        return produto

    def atualizar_estoque(self, id_: str, estoque: int) -> Produto:
        """Grava a nova quantidade em estoque junto com o status derivado."""
        return self.editar_produto(id_, estoque=estoque)

    def remover_produto(self, id_: str) -> None:
        try:
            self._gravar_remocao(self.store.produtos, self.produtos, id_)
        except Exception as e:
            self._falhou("remover_produto", {"id": id_}, e)
            raise
        log_transaction("remover_produto", {"id": id_}, result="success")

    # ----------------------
    # clientes
    # ----------------------

    def cadastrar_cliente(self, nome: str, telefone: str, email: Optional[str] = None,
                          endereco: Optional[str] = None) -> Cliente:
        if _vazio(nome) or _vazio(telefone):
            raise ValidacaoError("Nome e Telefone são obrigatórios")
        cliente = Cliente(
            id=_novo_id("CUST-"),
            nome=nome.strip(),
            telefone=telefone.strip(),
            email=email,
            endereco=endereco,
            imagem=_avatar(nome.strip()),
            total_gasto=0.0,
            status="Active",
            membro_desde=formatar_data(self.hoje()),
        )
        try:
            self.store.clientes.inserir(cliente)
        except Exception as e:
            self._falhou("cadastrar_cliente", {"nome": cliente.nome}, e)
            raise
        self.clientes.insert(0, cliente)
        log_transaction("cadastrar_cliente", {"id": cliente.id, "nome": cliente.nome}, result="success")
        return cliente

    def editar_cliente(self, id_: str, **campos) -> Cliente:
        """Altera dados cadastrais. O total gasto só muda pelo checkout."""
        _campos_validos(campos, CAMPOS_CLIENTE, "cliente")
        for obrigatorio in ("nome", "telefone"):
            if obrigatorio in campos and _vazio(campos[obrigatorio]):
                raise ValidacaoError("Nome e Telefone são obrigatórios")
        if "status" in campos and campos["status"] not in STATUS_CLIENTE:
            raise ValidacaoError(f"status de cliente inválido: {campos['status']}")
        try:
            cliente = self._gravar_alteracao(self.store.clientes, self.clientes, id_, campos)
        except Exception as e:
            self._falhou("editar_cliente", {"id": id_}, e)
            raise
        log_transaction("editar_cliente", {"id": id_, "campos": sorted(campos)}, result="success")
        return cliente

    def registrar_gasto(self, id_: str, valor: float) -> Cliente:
        """Soma `valor` ao total gasto do cliente (usado pelo checkout)."""
        cliente = self.cliente(id_)
        if cliente is None:
            raise ValidacaoError(f"cliente {id_} não encontrado")
        if valor < 0:
            raise ValidacaoError("o total gasto não pode diminuir")
        novo_total = cliente.total_gasto + valor
        return self._gravar_alteracao(self.store.clientes, self.clientes, id_,
                                      {"total_gasto": novo_total})

    def restaurar_gasto(self, id_: str, total_gasto: float) -> Cliente:
        """Volta o total gasto ao valor anterior a uma venda não gravada."""
        try:
            cliente = self._gravar_alteracao(self.store.clientes, self.clientes, id_,
                                             {"total_gasto": float(total_gasto)})
        except Exception as e:
            self._falhou("restaurar_gasto", {"id": id_, "total_gasto": total_gasto}, e)
            raise
        log_transaction("restaurar_gasto", {"id": id_, "total_gasto": total_gasto}, result="success")
        return cliente

    def remover_cliente(self, id_: str) -> None:
        try:
            self._gravar_remocao(self.store.clientes, self.clientes, id_)
        except Exception as e:
            self._falhou("remover_cliente", {"id": id_}, e)
            raise
        log_transaction("remover_cliente", {"id": id_}, result="success")

    # ----------------------
    # fornecedores
    # ----------------------

    def cadastrar_fornecedor(
        self,
        nome: str,
        telefone: str,
        contato: Optional[str] = None,
        email: Optional[str] = None,
        categorias: Optional[Iterable[str]] = None,
        avaliacao: int = 5,
    ) -> Fornecedor:
        if _vazio(nome) or _vazio(telefone):
            raise ValidacaoError("Nome e Telefone são obrigatórios")
        fornecedor = Fornecedor(
            id=_novo_id("SUP-"),
            nome=nome.strip(),
            telefone=telefone.strip(),
            contato=contato,
            email=email,
            categorias=[c.strip() for c in (categorias or []) if c and c.strip()],
            avaliacao=_validar_avaliacao(avaliacao),
            status="Active",
            imagem=_avatar(nome.strip()),
        )
        try:
            self.store.fornecedores.inserir(fornecedor)
        except Exception as e:
            self._falhou("cadastrar_fornecedor", {"nome": fornecedor.nome}, e)
            raise
        self.fornecedores.insert(0, fornecedor)
        log_transaction("cadastrar_fornecedor", {"id": fornecedor.id, "nome": fornecedor.nome}, result="success")
        return fornecedor

    def editar_fornecedor(self, id_: str, **campos) -> Fornecedor:
        _campos_validos(campos, CAMPOS_FORNECEDOR, "fornecedor")
        for obrigatorio in ("nome", "telefone"):
            if obrigatorio in campos and _vazio(campos[obrigatorio]):
                raise ValidacaoError("Nome e Telefone são obrigatórios")
        if "avaliacao" in campos:
            campos["avaliacao"] = _validar_avaliacao(campos["avaliacao"])
        if "categorias" in campos:
            campos["categorias"] = [c.strip() for c in campos["categorias"] or [] if c and c.strip()]
        try:
            fornecedor = self._gravar_alteracao(self.store.fornecedores, self.fornecedores, id_, campos)
        except Exception as e:
            self._falhou("editar_fornecedor", {"id": id_}, e)
            raise
        log_transaction("editar_fornecedor", {"id": id_, "campos": sorted(campos)}, result="success")
        return fornecedor

    def remover_fornecedor(self, id_: str) -> None:
        try:
            self._gravar_remocao(self.store.fornecedores, self.fornecedores, id_)
        except Exception as e:
            self._falhou("remover_fornecedor", {"id": id_}, e)
            raise
        log_transaction("remover_fornecedor", {"id": id_}, result="success")

    # ----------------------
    # envios
    # ----------------------

    def cadastrar_envio(
        self,
        pedido_id: str,
        cliente_nome: str,
        transportadora: str,
        cliente_telefone: Optional[str] = None,
        descricao_produto: Optional[str] = None,
        codigo_rastreio: Optional[str] = None,
        previsao_entrega: Optional[str] = None,
        ultimo_status: Optional[str] = None,
    ) -> Envio:
        if _vazio(pedido_id) or _vazio(cliente_nome) or _vazio(transportadora):
            raise ValidacaoError("Pedido, Cliente e Transportadora são obrigatórios")
        envio = Envio(
            id=_novo_id("SHIP-"),
            pedido_id=pedido_id.strip(),
            cliente_nome=cliente_nome.strip(),
            transportadora=transportadora.strip(),
            cliente_telefone=cliente_telefone,
            descricao_produto=descricao_produto,
            data_compra=formatar_data(self.hoje()),
            codigo_rastreio=codigo_rastreio if not _vazio(codigo_rastreio) else _gerar_rastreio(transportadora),
            previsao_entrega=previsao_entrega,
            ultimo_status=ultimo_status,
            status=ETAPAS_ENVIO[0],
            criado_em=datetime.now().isoformat(timespec="seconds"),
        )
        try:
            self.store.envios.inserir(envio)
        except Exception as e:
            self._falhou("cadastrar_envio", {"pedido_id": envio.pedido_id}, e)
            raise
        self.envios.insert(0, envio)
        log_transaction("cadastrar_envio", {"id": envio.id, "pedido_id": envio.pedido_id}, result="success")
        return envio

    def editar_envio(self, id_: str, **campos) -> Envio:
        _campos_validos(campos, CAMPOS_ENVIO, "envio")
        for obrigatorio in ("pedido_id", "cliente_nome", "transportadora"):
            if obrigatorio in campos and _vazio(campos[obrigatorio]):
                raise ValidacaoError("Pedido, Cliente e Transportadora são obrigatórios")
        if "status" in campos and campos["status"] not in ETAPAS_ENVIO:
            raise ValidacaoError(f"status de envio inválido: {campos['status']}")
        try:
            envio = self._gravar_alteracao(self.store.envios, self.envios, id_, campos)
        except Exception as e:
            self._falhou("editar_envio", {"id": id_}, e)
            raise
        log_transaction("editar_envio", {"id": id_, "campos": sorted(campos)}, result="success")
        return envio

    def alterar_status_envio(self, id_: str, status: str) -> Envio:
        """Move o envio para qualquer etapa do fluxo, inclusive para trás."""
        return self.editar_envio(id_, status=status)

    def remover_envio(self, id_: str) -> None:
        try:
            self._gravar_remocao(self.store.envios, self.envios, id_)
        except Exception as e:
            self._falhou("remover_envio", {"id": id_}, e)
            raise
        log_transaction("remover_envio", {"id": id_}, result="success")

    # ----------------------
    # caixa
    # ----------------------

    def registrar_transacao(
        self,
        descricao: str,
        categoria: str,
        tipo: str,
        valor: float,
        status: str = "Concluído",
        data: Optional[str] = None,
    ) -> TransacaoFinanceira:
        """Lança uma entrada/saída no livro-caixa (somente inclusão)."""
        if _vazio(descricao) or _vazio(valor):
            raise ValidacaoError("Descrição e Valor são obrigatórios")
        if categoria not in CATEGORIAS_TRANSACAO:
            raise ValidacaoError(f"categoria inválida: {categoria}")
        if tipo not in TIPOS_TRANSACAO:
            raise ValidacaoError(f"tipo inválido: {tipo}")
        if status not in STATUS_TRANSACAO:
            raise ValidacaoError(f"status inválido: {status}")
        if float(valor) < 0:
            raise ValidacaoError("valor não pode ser negativo; use o tipo Expense")

        transacao = TransacaoFinanceira(
            id=_novo_id("TR-"),
            data=data or formatar_data(self.hoje()),
            descricao=descricao.strip(),
            categoria=categoria,
            tipo=tipo,
            valor=float(valor),
            status=status,
        )
        try:
            self.store.transacoes.inserir(transacao)
        except Exception as e:
            self._falhou("registrar_transacao", {"descricao": transacao.descricao, "valor": transacao.valor}, e)
            raise
        self.transacoes.insert(0, transacao)
        log_transaction("registrar_transacao",
                        {"id": transacao.id, "tipo": tipo, "valor": transacao.valor},
                        result="success")
        return transacao

    def estatisticas_financeiras(self) -> Dict[str, float]:
        return totais(self.transacoes)

    # ----------------------
    # carrinho
    # ----------------------

    def adicionar_ao_carrinho(self, produto_id: str) -> bool:
        produto = self.produto(produto_id)
        if produto is None:
            raise ValidacaoError(f"produto {produto_id} não encontrado")
        return self.carrinho.adicionar(produto)

    def remover_do_carrinho(self, produto_id: str) -> None:
        self.carrinho.remover(produto_id)

    def alterar_quantidade_carrinho(self, produto_id: str, delta: int) -> None:
        self.carrinho.alterar_quantidade(produto_id, delta)

    def limpar_carrinho(self) -> None:
        self.carrinho.limpar()

    def checkout(self, forma_pagamento: str, cliente_id: Optional[str] = None) -> Optional[CheckoutResultado]:
        """Finaliza a venda do carrinho (ver `usecases.checkout.run_checkout`)."""
        return run_checkout(self, forma_pagamento, cliente_id)
