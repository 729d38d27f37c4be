"""
models.py
Lightweight domain types (debtor records, payment configuration).
"""

from __future__ import annotations
from dataclasses import asdict, dataclass

# Closed set of configuration keys
PIX_KEY = "pix_key"
QR_CODE = "qr_code"
CONFIG_KEYS = (PIX_KEY, QR_CODE)


@dataclass(frozen=True)
class Debtor:
    phone: str  # digits only
    name: str = ""
    value: float = 0.0
    due_date: str = ""  # free-text label, never parsed
    discount: float = 0.0

    @classmethod
    def from_row(cls, row) -> "Debtor":
        return cls(
            phone=str(row["phone"]),
            name=row["name"] or "",
            value=float(row["value"] or 0),
            due_date=row["due_date"] or "",
            discount=float(row["discount"] or 0),
        )

    @classmethod
    def from_dict(cls, data: dict) -> "Debtor":
        return cls(
            phone=str(data.get("phone") or ""),
            name=str(data.get("name") or ""),
            value=float(data.get("value") or 0),
            due_date=str(data.get("due_date") or ""),
            discount=float(data.get("discount") or 0),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class PixConfig:
    key: str | None
    qr_code: str | None  # data URI

    def to_dict(self) -> dict:
        return {"key": self.key, "qrCode": self.qr_code}
