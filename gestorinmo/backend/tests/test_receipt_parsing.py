# backend/tests/test_receipt_parsing.py
from __future__ import annotations

from datetime import date

import pytest

from app.domain.receipts import ReceiptParseError, clamp_category, parse_receipt_text, split_data_url


def test_fenced_json_reply_is_parsed():
    text = '```json\n{"amount": 42.5, "date": "2024-05-10", "description": "Arreglo grifo", "category": "Reparación"}\n```'
    r = parse_receipt_text(text)
    assert r.amount == 42.5
    assert r.expense_date == date(2024, 5, 10)
    assert r.description == "Arreglo grifo"
    assert r.category == "Reparación"


def test_object_wrapped_in_prose():
    r = parse_receipt_text('Aquí tienes: {"amount": "12,50 €", "category": "seguro"} espero que sirva')
    assert r.amount == 12.5
    assert r.category == "Seguro"
    assert r.expense_date is None


def test_fields_outside_schema_are_dropped():
    r = parse_receipt_text('{"amount": "mucho", "date": "ayer", "description": "  ", "category": "Luz"}')
    assert r.amount is None
    assert r.expense_date is None
    assert r.description is None
    assert r.category is None
    assert r.is_empty()


def test_empty_reply_is_an_empty_guess():
    assert parse_receipt_text("").is_empty()


def test_reply_without_object_raises():
    with pytest.raises(ReceiptParseError):
        parse_receipt_text("no puedo leer la imagen")
    with pytest.raises(ReceiptParseError):
        parse_receipt_text("[1, 2, 3]")


def test_clamp_category():
    assert clamp_category(" comunidad ") == "Comunidad"
    assert clamp_category("IMPUESTOS") == "Impuestos"
    assert clamp_category("Gasolina") is None
    assert clamp_category(3) is None


def test_split_data_url():
    assert split_data_url("data:image/png;base64,AAAA") == ("image/png", "AAAA")
    assert split_data_url("AAAA") == ("image/jpeg", "AAAA")


def test_amount_separators():
    assert parse_receipt_text('{"amount": "1.234,56 €"}').amount == 1234.56
    assert parse_receipt_text('{"amount": "1,234.56"}').amount == 1234.56
    assert parse_receipt_text('{"amount": "12,50"}').amount == 12.5
    assert parse_receipt_text('{"amount": "12.50"}').amount == 12.5


def test_non_finite_amount_is_dropped():
    assert parse_receipt_text('{"amount": "NaN"}').amount is None
    assert parse_receipt_text('{"amount": "inf"}').amount is None
