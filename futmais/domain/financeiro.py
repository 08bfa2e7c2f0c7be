"""
Agregações financeiras sobre o livro-caixa e a lista de pedidos.

Nada aqui é mantido de forma incremental: cada função recebe a coleção
completa (já carregada na sessão) e recalcula o resultado do zero.
As datas dos registros estão no formato de exibição ``dd/mm/aaaa`` e
são convertidas para datas de calendário antes de qualquer comparação.

Todas as funções são puras: a data de referência dos períodos relativos
é recebida como parâmetro.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar

from futmais.adapters.parsers import parse_data_br
from futmais.domain.models import Pedido, TransacaoFinanceira

R = TypeVar("R")

TIPOS_PERIODO = ("hoje", "ontem", "7dias", "mes", "personalizado", "total")
FILTROS_TIPO = ("Tudo", "Entradas", "Saídas")
DIAS_SEMANA = ("Dom", "Seg", "Ter", "Qua", "Qui", "Sex", "Sáb")
MESES_ABREV = ("Jan", "Fev", "Mar", "Abr", "Mai", "Jun", "Jul", "Ago", "Set", "Out", "Nov", "Dez")

# Série fixa usada apenas para dar forma ao gráfico quando não há vendas.
SERIE_EXEMPLO: Tuple[Tuple[str, float], ...] = (
    ("Jan", 4000.0), ("Fev", 3000.0), ("Mar", 5000.0), ("Abr", 2780.0),
    ("Mai", 1890.0), ("Jun", 2390.0), ("Jul", 3490.0), ("Ago", 4200.0),
)


def totais(transacoes: Iterable[TransacaoFinanceira]) -> Dict[str, float]:
    """Resumo do caixa.

    Returns:
        ``total_receitas``, ``total_despesas``, ``lucro_liquido``
        (receitas − despesas) e ``custos_operacionais`` (despesas da
        categoria Operacional, usadas como aproximação do investimento
        em estoque).
    """
    receitas = despesas = operacionais = 0.0
    for t in transacoes:
        if t.tipo == "Income":
            receitas += t.valor
        else:
            despesas += t.valor
            if t.categoria == "Operacional":
                operacionais += t.valor
    return {
        "total_receitas": receitas,
        "total_despesas": despesas,
        "lucro_liquido": receitas - despesas,
        "custos_operacionais": operacionais,
    }


@dataclass(frozen=True)
class Periodo:
    """Seletor de período dos painéis.

    tipo:
        ``hoje`` | ``ontem`` | ``7dias`` | ``mes`` (usa ``mes`` = "AAAA-MM")
        | ``personalizado`` (usa ``inicio``/``fim``, inclusivos) | ``total``
    """
    tipo: str = "total"
    mes: Optional[str] = None
    inicio: Optional[date] = None
    fim: Optional[date] = None

    def __post_init__(self):
        if self.tipo not in TIPOS_PERIODO:
            raise ValueError(f"período inválido: {self.tipo}")
        if self.tipo == "mes":
            _ano_mes(self.mes)

    def rotulo(self) -> str:
        if self.tipo == "hoje":
            return "Hoje"
        if self.tipo == "ontem":
            return "Ontem"
        if self.tipo == "7dias":
            return "Últimos 7 dias"
        if self.tipo == "total":
            return "Período Total"
        if self.tipo == "mes":
            ano, mes = _ano_mes(self.mes)
            return f"{MESES_ABREV[mes - 1]} {ano}"
        if self.inicio and self.fim:
            return f"{self.inicio:%d/%m/%Y} - {self.fim:%d/%m/%Y}"
        return "Selecionar Período"

    def contem(self, d: date, hoje: date) -> bool:
        if self.tipo == "hoje":
            return d == hoje
        if self.tipo == "ontem":
            return d == hoje - timedelta(days=1)
        if self.tipo == "7dias":
            return hoje - timedelta(days=7) <= d <= hoje
        if self.tipo == "mes":
            ano, mes = _ano_mes(self.mes)
            return d.year == ano and d.month == mes
        if self.tipo == "personalizado":
            if not self.inicio or not self.fim:
                return True
            return self.inicio <= d <= self.fim
        return True


def _ano_mes(s: Optional[str]) -> Tuple[int, int]:
    # "YYYY-MM" -> (YYYY, MM)
    if not s:
        raise ValueError("informe o mês no formato AAAA-MM")
    try:
        y, m = s.split("-", 1)
        ano, mes = int(y), int(m)
    except ValueError:
        raise ValueError(f"mês inválido: {s}") from None
    if not 1 <= mes <= 12:
        raise ValueError(f"mês inválido: {s}")
    return ano, mes


def filtrar_por_periodo(
    registros: Iterable[R],
    periodo: Periodo,
    hoje: Optional[date] = None,
    incluir_sem_data: bool = False,
) -> List[R]:
    """Filtra pedidos ou transações pelo campo ``data``.

    Registros cuja data não pode ser interpretada só entram quando
    ``incluir_sem_data`` é verdadeiro (ou no período total).
    """
    hoje = hoje or date.today()
    out: List[R] = []
    for r in registros:
        if periodo.tipo == "total":
            out.append(r)
            continue
        d = parse_data_br(getattr(r, "data", None))
        if d is None:
            if incluir_sem_data:
                out.append(r)
            continue
        if periodo.contem(d, hoje):
            out.append(r)
    return out


def filtrar_por_tipo(transacoes: Iterable[TransacaoFinanceira], filtro: str = "Tudo") -> List[TransacaoFinanceira]:
    """Tudo | Entradas (Income) | Saídas (Expense)."""
    if filtro not in FILTROS_TIPO:
        raise ValueError(f"filtro inválido: {filtro}")
    if filtro == "Entradas":
        return [t for t in transacoes if t.tipo == "Income"]
    if filtro == "Saídas":
        return [t for t in transacoes if t.tipo == "Expense"]
    return list(transacoes)


def agrupar_por_dia_semana(transacoes: Iterable[TransacaoFinanceira]) -> List[Dict]:
    """Receitas e despesas somadas por dia da semana (Dom=0 … Sáb=6)."""
    buckets = [{"dia": DIAS_SEMANA[i], "receitas": 0.0, "despesas": 0.0} for i in range(7)]
    for t in transacoes:
        d = parse_data_br(t.data)
        if d is None:
            continue
        idx = (d.weekday() + 1) % 7  # weekday(): segunda=0
        if t.tipo == "Income":
            buckets[idx]["receitas"] += t.valor
        else:
            buckets[idx]["despesas"] += t.valor
    return buckets


def escala_grafico(buckets: Sequence[Dict]) -> float:
    """Maior valor individual entre todas as barras; 1 se tudo for zero."""
    maior = max((max(b["receitas"], b["despesas"]) for b in buckets), default=0.0)
    return maior or 1.0


def altura_relativa(valor: float, escala: float) -> float:
    """Altura da barra em percentual da escala."""
    return (valor / escala) * 100.0 if escala else 0.0


@dataclass
class SerieGrafico:
    """Pontos (rótulo, valor) de um gráfico.

    ``placeholder`` indica a série de exemplo exibida quando não há dados;
    ela nunca deve ir para relatórios exportados.
    """
    pontos: List[Tuple[str, float]] = field(default_factory=list)
    placeholder: bool = False


def serie_vendas(pedidos: Iterable[Pedido], periodo: Periodo) -> SerieGrafico:
    """Série do gráfico de vendas para pedidos já filtrados pelo período.

    - total / personalizado: soma por mês (``M/AAAA``) em ordem cronológica;
      sem vendas, devolve a série de exemplo marcada como placeholder.
    - mes: soma por semana do mês (``Sem 1`` … ``Sem 5``).
    - demais períodos: série vazia.
    """
    if periodo.tipo in ("total", "personalizado"):
        por_mes: Dict[Tuple[int, int], float] = defaultdict(float)
        for p in pedidos:
            d = parse_data_br(p.data)
            if d:
                por_mes[(d.year, d.month)] += p.total
        if not por_mes:
            return SerieGrafico(pontos=list(SERIE_EXEMPLO), placeholder=True)
        return SerieGrafico(
            pontos=[(f"{m}/{a}", v) for (a, m), v in sorted(por_mes.items())]
        )

    if periodo.tipo == "mes":
        semanas: Dict[int, float] = defaultdict(float)
        for p in pedidos:
            d = parse_data_br(p.data)
            if d:
                semanas[(d.day - 1) // 7 + 1] += p.total
        ultima = max([4, *semanas])  # sempre exibe ao menos 4 semanas
        return SerieGrafico(pontos=[(f"Sem {s}", semanas.get(s, 0.0)) for s in range(1, ultima + 1)])

    return SerieGrafico()
