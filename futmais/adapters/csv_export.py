# futmais/adapters/csv_export.py
"""
Exportação das listagens para CSV usando pandas.

Cada exportação:
- monta um DataFrame com os cabeçalhos de exibição (pt-BR) na ordem fixa;
- grava em ``<entidade>_futmais_<AAAA-MM-DD>.csv`` no diretório pedido
  (envios saem como ``logistica_<AAAA-MM-DD>.csv``);
- devolve o caminho do arquivo gerado.

Obs.: séries de gráfico nunca são exportadas, só registros reais.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any, List, Optional, Sequence

import pandas as pd

from futmais.config import DEFAULTS
from futmais.domain.models import Cliente, Envio, Fornecedor, TransacaoFinanceira
from futmais.infra.logger import log_file_operation, log_system_event

COLUNAS_CLIENTES = ["ID", "Nome", "Email", "Telefone", "Gasto Total", "Status", "Membro Desde", "Endereço"]
COLUNAS_FORNECEDORES = ["ID", "Empresa", "Contato", "Email", "Telefone", "Categorias", "Status", "Rating"]
COLUNAS_TRANSACOES = ["ID", "Data", "Descrição", "Categoria", "Tipo", "Valor", "Status"]
COLUNAS_ENVIOS = ["ID", "Pedido", "Cliente", "Telefone", "Produto", "Transportadora", "Rastreio", "Status", "Previsão"]


def nome_arquivo(entidade: str, hoje: Optional[date] = None, com_marca: bool = True) -> str:
    hoje = hoje or date.today()
    if not com_marca:
        return f"{entidade}_{hoje.isoformat()}.csv"
    return f"{entidade}_{DEFAULTS.prefixo_arquivo_export}_{hoje.isoformat()}.csv"


def _gravar(entidade: str, colunas: List[str], linhas: List[List[Any]],
            destino: Optional[str], hoje: Optional[date], com_marca: bool = True) -> Path:
    pasta = Path(destino or DEFAULTS.export_dir)
    pasta.mkdir(parents=True, exist_ok=True)
    caminho = pasta / nome_arquivo(entidade, hoje, com_marca)
    df = pd.DataFrame(linhas, columns=colunas)
    try:
        df.to_csv(caminho, index=False, encoding="utf-8")
    except Exception as e:
        log_system_event("export_error", {"entidade": entidade, "error": str(e)}, level="error")
        raise
    log_file_operation("export", str(caminho), rows_processed=len(df))
    return caminho


def _texto(v: Any) -> str:
    return "" if v is None else str(v)


def exportar_clientes(clientes: Sequence[Cliente], destino: Optional[str] = None,
                      hoje: Optional[date] = None) -> Path:
    linhas = [
        [c.id, c.nome, _texto(c.email), c.telefone, f"{c.total_gasto:.2f}",
         c.status, _texto(c.membro_desde), _texto(c.endereco)]
        for c in clientes
    ]
    return _gravar("clientes", COLUNAS_CLIENTES, linhas, destino, hoje)


def exportar_fornecedores(fornecedores: Sequence[Fornecedor], destino: Optional[str] = None,
                          hoje: Optional[date] = None) -> Path:
    linhas = [
        [f.id, f.nome, _texto(f.contato), _texto(f.email), f.telefone,
         " | ".join(f.categorias), f.status, f.avaliacao]
        for f in fornecedores
    ]
    return _gravar("fornecedores", COLUNAS_FORNECEDORES, linhas, destino, hoje)


def exportar_transacoes(transacoes: Sequence[TransacaoFinanceira], destino: Optional[str] = None,
                        hoje: Optional[date] = None) -> Path:
    linhas = [
        [t.id, t.data, t.descricao, t.categoria, t.tipo, t.valor, t.status]
        for t in transacoes
    ]
    return _gravar("financeiro", COLUNAS_TRANSACOES, linhas, destino, hoje)


def exportar_envios(envios: Sequence[Envio], destino: Optional[str] = None,
                    hoje: Optional[date] = None) -> Path:
    linhas = [
        [e.id, e.pedido_id, e.cliente_nome, _texto(e.cliente_telefone), _texto(e.descricao_produto),
         e.transportadora, _texto(e.codigo_rastreio), e.status, _texto(e.previsao_entrega)]
        for e in envios
    ]
    return _gravar("logistica", COLUNAS_ENVIOS, linhas, destino, hoje, com_marca=False)
