from datetime import date

import pytest

from futmais.adapters.parsers import (
    formatar_brl,
    formatar_data,
    parse_data_br,
    parse_data_iso,
    parse_valor,
)


@pytest.mark.parametrize(
    "txt,esperado",
    [
        ("05/03/2025", date(2025, 3, 5)),
        ("5/3/2025", date(2025, 3, 5)),
        ("12/03/2025, 14:10:00", date(2025, 3, 12)),
        ("12/03/2025 14:10", date(2025, 3, 12)),
        ("2025-03-05", None),
        ("31/02/2025", None),
        ("ontem", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_data_br(txt, esperado):
    assert parse_data_br(txt) == esperado


def test_formatar_data():
    assert formatar_data(date(2025, 1, 7)) == "07/01/2025"


def test_parse_data_iso():
    assert parse_data_iso("2025-03-01") == date(2025, 3, 1)
    assert parse_data_iso("01/03/2025") is None
    assert parse_data_iso(None) is None


@pytest.mark.parametrize(
    "txt,esperado",
    [
        ("12.5", 12.5),
        ("12,50", 12.5),
        ("1.234,56", 1234.56),
        ("R$ 99,90", 99.9),
        (42, 42.0),
        ("", None),
        ("abc", None),
        (None, None),
    ],
)
def test_parse_valor(txt, esperado):
    assert parse_valor(txt) == esperado


def test_formatar_brl():
    assert formatar_brl(1234.5) == "R$ 1.234,50"
    assert formatar_brl(0) == "R$ 0,00"
    assert formatar_brl(-10) == "-R$ 10,00"
    assert formatar_brl(None) == "R$ 0,00"
