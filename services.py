"""
services.py
Lookup & management operations over an injected RecordStore (no session state).
"""

from __future__ import annotations

import logging

from auth import AdminGate
from db import RecordStore
from errors import NotFound, Unauthorized, ValidationError
from models import PIX_KEY, QR_CODE, Debtor, PixConfig
from utils import mask_for_log, normalize_phone, parse_number

logger = logging.getLogger(__name__)


def debtor_from_payload(item) -> Debtor:
    if isinstance(item, Debtor):
        return item
    if not isinstance(item, dict):
        raise ValidationError("Each debtor must be an object.")
    return Debtor(
        phone=normalize_phone(item.get("phone")),
        name=str(item.get("name") or ""),
        value=parse_number(item.get("value")),
        due_date=str(item.get("due_date") or ""),
        discount=parse_number(item.get("discount")),
    )


class DebtorService:
    def __init__(self, store: RecordStore, gate: AdminGate):
        self.store = store
        self.gate = gate

    def lookup(self, phone) -> Debtor:
        digits = normalize_phone(phone)
        if not digits:
            raise ValidationError("Phone is required.")
        debtor = self.store.get_by_key(digits)
        if debtor is None:
            logger.info("Lookup miss for %s", mask_for_log(digits))
            raise NotFound("Number not found in our billing records.")
        return debtor

    def authenticate_admin(self, password) -> None:
        if not self.gate.check(password):
            logger.warning("Rejected admin login attempt")
            raise Unauthorized("Incorrect password.")

    def list_debtors(self) -> list[Debtor]:
        return self.store.list_all()

    def replace_debtors(self, items) -> int:
        if not isinstance(items, list):
            raise ValidationError("'debtors' must be a list.")
        if not items:
            self.store.delete_all()
            logger.warning("Debtor list cleared")
            return 0
        debtors = [debtor_from_payload(i) for i in items]
        inserted = self.store.replace_all(debtors)
        logger.info("Debtor list replaced: %d received, %d stored", len(debtors), inserted)
        return inserted

    def delete_debtor(self, phone) -> bool:
        removed = self.store.delete_by_key(phone)
        logger.info("Delete %s: %s", mask_for_log(str(phone)), "removed" if removed else "no match")
        return removed

    def reset(self) -> None:
        self.store.reset()
        logger.warning("System reset: all debtors and configuration wiped")

    def get_pix_config(self) -> PixConfig:
        return PixConfig(
            key=self.store.get_config(PIX_KEY),
            qr_code=self.store.get_config(QR_CODE),
        )

    def update_pix_config(self, key: str | None = None, qr_code: str | None = None) -> None:
        # Empty values are treated as "not supplied"
        if key:
            self.store.set_config(PIX_KEY, str(key))
            logger.info("Payment key updated")
        if qr_code:
            self.store.set_config(QR_CODE, str(qr_code))
            logger.info("QR image updated (%d chars)", len(str(qr_code)))
