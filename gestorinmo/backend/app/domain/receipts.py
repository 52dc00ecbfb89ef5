# backend/app/domain/receipts.py
from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from .dates import as_date
from .records import EXPENSE_CATEGORIES

RECEIPT_PROMPT = """
Analiza esta imagen de una factura o recibo.
Extrae la siguiente información en formato JSON puro (sin markdown):

{
  "amount": (número, usa punto para decimales),
  "date": (string en formato YYYY-MM-DD, si no hay fecha usa la de hoy),
  "description": (resumen corto de 3-5 palabras del concepto),
  "category": (Elige EXACTAMENTE UNA de estas: "Reparación", "Comunidad", "Seguro", "Impuestos", "Otros")
}

Si no puedes leer la imagen, devuelve un JSON con valores vacíos o estimados.
""".strip()

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


class ReceiptParseError(ValueError):
    pass


@dataclass(frozen=True)
class ReceiptExtraction:
    """Best-effort guess. Every field may be missing."""

    amount: Optional[float] = None
    expense_date: Optional[date] = None
    description: Optional[str] = None
    category: Optional[str] = None

    def is_empty(self) -> bool:
        return self.amount is None and self.expense_date is None and not self.description and self.category is None


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text or "").strip()


def split_data_url(image: str) -> tuple[str, str]:
    """
    "data:image/png;base64,AAAA" -> ("image/png", "AAAA"). Bare base64 is assumed JPEG.
    """
    raw = (image or "").strip()
    mime = "image/jpeg"
    if raw.startswith("data:") and "," in raw:
        header, raw = raw.split(",", 1)
        m = header[5:].split(";", 1)[0].strip()
        if m:
            mime = m
    return mime, raw


def _coerce_amount(v: Any) -> Optional[float]:
    if isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        return float(v) if math.isfinite(v) else None
    if isinstance(v, str):
        s = v.replace("€", "").replace(" ", "").strip()
        # the last separator is the decimal mark: "1.234,56", "1,234.56"; a lone comma is decimal ("12,50")
        if "," in s and "." in s:
            thousands = "." if s.rfind(",") > s.rfind(".") else ","
            s = s.replace(thousands, "")
        s = s.replace(",", ".")
        try:
            amount = float(s)
        except ValueError:
            return None
        return amount if math.isfinite(amount) else None
    return None


def clamp_category(v: Any) -> Optional[str]:
    if not isinstance(v, str):
        return None
    wanted = v.strip().lower()
    for c in EXPENSE_CATEGORIES:
        if c.lower() == wanted:
            return c
    return None


def parse_receipt_text(text: str) -> ReceiptExtraction:
    """
    Model reply -> ReceiptExtraction.

    Raises ReceiptParseError only when no JSON object can be found at all;
    individual fields that don't fit the expense schema are dropped.
    """
    clean = strip_code_fences(text)
    try:
        data = json.loads(clean or "{}")
    except json.JSONDecodeError:
        # models sometimes wrap the object in prose
        start, end = clean.find("{"), clean.rfind("}")
        if start < 0 or end <= start:
            raise ReceiptParseError("no JSON object in model reply")
        try:
            data = json.loads(clean[start : end + 1])
        except json.JSONDecodeError as e:
            raise ReceiptParseError(f"invalid JSON in model reply: {e}") from e

    if not isinstance(data, dict):
        raise ReceiptParseError("model reply is not a JSON object")

    description = data.get("description")
    if not isinstance(description, str) or not description.strip():
        description = None

    return ReceiptExtraction(
        amount=_coerce_amount(data.get("amount")),
        expense_date=as_date(data.get("date")) if data.get("date") else None,
        description=description.strip() if description else None,
        category=clamp_category(data.get("category")),
    )
