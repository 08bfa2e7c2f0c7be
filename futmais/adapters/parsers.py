"""
Utilidades de parsing e formatação de datas e valores.

As datas do sistema são gravadas no formato de exibição pt-BR
(``dd/mm/aaaa``), não em ISO. Os relatórios precisam convertê-las de
volta para datas de calendário antes de comparar períodos; este módulo
concentra essa conversão e a formatação monetária em reais.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional

from futmais.config import DEFAULTS

_NUM_RE = re.compile(r"[-+]?\d[\d.]*(?:,\d+)?")


def parse_data_br(txt: Optional[str]) -> Optional[date]:
    """Interpreta uma data ``dd/mm/aaaa`` como data de calendário.

    Horários eventualmente presentes após a data são ignorados, de modo
    que a comparação entre registros é sempre por dia.

    Exemplos:
        "05/03/2025"          → date(2025, 3, 5)
        "5/3/2025, 14:10:00"  → date(2025, 3, 5)
        "2025-03-05"          → None

    Args:
        txt: Texto a ser interpretado.

    Returns:
        A data correspondente, ou None se o texto não tiver três partes
        numéricas separadas por ``/`` formando uma data válida.
    """
    if txt is None:
        return None
    s = str(txt).strip()
    if not s:
        return None
    # Descarta a parte de horário ("dd/mm/aaaa, hh:mm" ou "dd/mm/aaaa hh:mm")
    s = re.split(r"[,\s]", s, maxsplit=1)[0]
    parts = s.split("/")
    if len(parts) != 3:
        return None
    try:
        dia, mes, ano = (int(p) for p in parts)
        return date(ano, mes, dia)
    except ValueError:
        return None


def formatar_data(d: Optional[date] = None) -> str:
    """Formata uma data (padrão: hoje) no formato gravado pelo sistema."""
    return (d or date.today()).strftime(DEFAULTS.formato_data)


def parse_data_iso(txt: Optional[str]) -> Optional[date]:
    """Interpreta ``aaaa-mm-dd`` (formato dos filtros de período)."""
    if not txt:
        return None
    try:
        return datetime.strptime(str(txt).strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def parse_valor(txt) -> Optional[float]:
    """Interpreta valores monetários digitados pelo usuário.

    Aceita ``"12.5"``, ``"12,50"``, ``"1.234,56"`` e ``"R$ 99,90"``.
    """
    if txt is None:
        return None
    if isinstance(txt, (int, float)) and not isinstance(txt, bool):
        return float(txt)
    s = str(txt).replace("R$", "").strip()
    if not s:
        return None
    m = _NUM_RE.search(s)
    if not m:
        return None
    num = m.group(0)
    if "," in num:
        num = num.replace(".", "").replace(",", ".")
    try:
        return float(num)
    except ValueError:
        return None


def formatar_brl(valor: Optional[float]) -> str:
    """Formata um valor em reais: 1234.5 → ``'R$ 1.234,50'``."""
    v = float(valor or 0.0)
    txt = f"{abs(v):,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    return f"-R$ {txt}" if v < 0 else f"R$ {txt}"
