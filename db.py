"""
db.py
SQLite record store (creates DB/tables, seeds the payment-key row, debtor CRUD).
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Mapping

from errors import StoreError
from models import CONFIG_KEYS, PIX_KEY, Debtor
from utils import normalize_phone

logger = logging.getLogger(__name__)


class RecordStore:
    """
    One sqlite file with two tables: `debtors` (keyed by digits-only phone)
    and `config` (closed key set, see models.CONFIG_KEYS).

    Every public method runs in its own connection/transaction; any sqlite
    error rolls the transaction back and is raised as StoreError.
    """

    def __init__(self, db_file: str | Path):
        self.db_file = Path(db_file)

    @contextmanager
    def get_conn(self):
        try:
            conn = sqlite3.connect(self.db_file, check_same_thread=False)
        except sqlite3.Error as exc:
            raise StoreError(f"Could not open database: {exc}") from exc
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StoreError(str(exc)) from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_db(self) -> None:
        """
        Initialize the database.
        - Create tables
        - Insert the empty payment key if it does not exist yet
        """
        self.db_file.parent.mkdir(parents=True, exist_ok=True)
        with self.get_conn() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS debtors (
                    phone TEXT PRIMARY KEY,
                    name TEXT NOT NULL DEFAULT '',
                    value REAL NOT NULL DEFAULT 0,
                    due_date TEXT NOT NULL DEFAULT '',
                    discount REAL NOT NULL DEFAULT 0
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS config (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )
            conn.execute(
                "INSERT OR IGNORE INTO config(key, value) VALUES(?, ?)",
                (PIX_KEY, ""),
            )
        logger.info("Database ready at %s", self.db_file)

    # ---------- debtors ----------

    def get_by_key(self, phone: str) -> Debtor | None:
        with self.get_conn() as conn:
            row = conn.execute(
                "SELECT * FROM debtors WHERE phone = ?", (normalize_phone(phone),)
            ).fetchone()
        return Debtor.from_row(row) if row else None

    def list_all(self) -> list[Debtor]:
        with self.get_conn() as conn:
            rows = conn.execute("SELECT * FROM debtors").fetchall()
        return [Debtor.from_row(r) for r in rows]

    def replace_all(self, records: Iterable[Debtor | Mapping]) -> int:
        """
        Delete every debtor and insert `records`, all in one transaction.
        Records whose phone normalizes to "" are skipped.
        """
        rows = []
        for rec in records:
            d = rec if isinstance(rec, Debtor) else Debtor.from_dict(rec)
            phone = normalize_phone(d.phone)
            if not phone:
                continue
            rows.append((phone, d.name, d.value, d.due_date, d.discount))

        with self.get_conn() as conn:
            conn.execute("DELETE FROM debtors")
            conn.executemany(
                "INSERT INTO debtors(phone, name, value, due_date, discount) VALUES(?,?,?,?,?)",
                rows,
            )
        return len(rows)

    def delete_by_key(self, phone: str) -> bool:
        with self.get_conn() as conn:
            cur = conn.execute(
                "DELETE FROM debtors WHERE phone = ?", (normalize_phone(phone),)
            )
            return cur.rowcount > 0

    def delete_all(self) -> None:
        with self.get_conn() as conn:
            conn.execute("DELETE FROM debtors")

    def reset(self) -> None:
        """
        Wipe debtors + configuration and reseed the empty payment key.
        """
        with self.get_conn() as conn:
            conn.execute("DELETE FROM debtors")
            conn.execute("DELETE FROM config")
            conn.execute("INSERT INTO config(key, value) VALUES(?, ?)", (PIX_KEY, ""))

    # ---------- config ----------

    def get_config(self, key: str) -> str | None:
        with self.get_conn() as conn:
            row = conn.execute("SELECT value FROM config WHERE key = ?", (key,)).fetchone()
        if row:
            return str(row["value"])
        return None

    def set_config(self, key: str, value: str) -> None:
        if key not in CONFIG_KEYS:
            raise ValueError(f"Unknown config key: {key}")
        with self.get_conn() as conn:
            conn.execute(
                """
                INSERT INTO config(key, value) VALUES(?, ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value
                """,
                (key, value),
            )
