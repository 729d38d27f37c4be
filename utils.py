"""
utils.py
Phone normalization/masking, import parsing, money helpers, exports.
"""

from __future__ import annotations

import base64
import math
import re

import pandas as pd

from errors import ValidationError
from models import Debtor

MIN_PHONE_DIGITS = 10
MAX_PHONE_DIGITS = 11
IMPORT_COLUMNS = ["phone", "name", "value", "due_date", "discount"]

_NON_DIGITS = re.compile(r"\D")
_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def normalize_phone(raw) -> str:
    """
    Strip every non-digit character. None => "".
    """
    if raw is None:
        return ""
    return _NON_DIGITS.sub("", str(raw))


def format_phone(raw: str) -> str:
    """
    National display mask applied while typing:
    "" / "(1" / "(11) 9999" / "(11) 99999-8888". Extra digits are dropped.
    """
    digits = normalize_phone(raw)
    if not digits:
        return ""
    if len(digits) <= 2:
        return f"({digits}"
    if len(digits) <= 7:
        return f"({digits[:2]}) {digits[2:]}"
    return f"({digits[:2]}) {digits[2:7]}-{digits[7:MAX_PHONE_DIGITS]}"


def is_complete_phone(raw: str) -> bool:
    return len(normalize_phone(raw)) >= MIN_PHONE_DIGITS


def mask_for_log(phone: str) -> str:
    digits = normalize_phone(phone)
    return f"***{digits[-4:]}" if digits else "<empty>"


def parse_number(raw) -> float:
    """
    Lenient number parsing: takes the leading numeric part ("89.90abc" -> 89.9),
    anything unparseable (or non-finite) -> 0.0.
    """
    if raw is None:
        return 0.0
    m = _LEADING_NUMBER.match(str(raw))
    if not m:
        return 0.0
    value = float(m.group(1))
    if not math.isfinite(value):
        return 0.0
    return value


def parse_import_line(line: str) -> Debtor | None:
    cols = [c.strip() for c in line.split(",")]
    cols += [""] * (len(IMPORT_COLUMNS) - len(cols))
    phone = normalize_phone(cols[0])
    if not phone:
        return None
    return Debtor(
        phone=phone,
        name=cols[1],
        value=parse_number(cols[2]),
        due_date=cols[3],
        discount=parse_number(cols[4]),
    )


def parse_import_text(text: str, skip_header: bool = False) -> list[Debtor]:
    """
    Parse pasted text / CSV content: one debtor per line,
    "phone, name, value, due date, discount". No quoting support, so a comma
    inside a name shifts the remaining fields.
    """
    lines = text.splitlines()
    if skip_header:
        lines = lines[1:]

    debtors: list[Debtor] = []
    for line in lines:
        if not line.strip():
            continue
        d = parse_import_line(line)
        if d is not None:
            debtors.append(d)
    return debtors


def parse_csv_upload(data: bytes) -> list[Debtor]:
    """
    Uploaded CSV file: same rules as pasted text, first line is a header.
    """
    return parse_import_text(data.decode("utf-8", errors="replace"), skip_header=True)


def append_debtor(existing: list[Debtor], entry: Debtor) -> list[Debtor]:
    """
    Manual add: the full list to send for a bulk replace.
    """
    if not entry.phone or not entry.name.strip():
        raise ValidationError("Fill in at least phone and name.")
    return list(existing) + [entry]


def debt_total(value: float, discount: float) -> float:
    return round(float(value) - float(discount), 2)


def format_money(amount: float) -> str:
    return f"{float(amount):.2f}"


def qr_to_data_uri(data: bytes, mime: str | None) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime or 'image/png'};base64,{encoded}"


def debtors_to_csv_bytes(debtors: list[Debtor]) -> bytes:
    df = pd.DataFrame([d.to_dict() for d in debtors], columns=IMPORT_COLUMNS)
    return df.to_csv(index=False).encode("utf-8")
