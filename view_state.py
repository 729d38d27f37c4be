"""
view_state.py
Client-side view state machine (login -> loading -> dashboard/pix, admin panel).

The UI keeps one ViewState per browser session and only mutates it through
the transition methods below. The loading screen is a deadline, not a timer
callback: `tick(now)` advances once the deadline passes, and any competing
navigation clears it, so a stale deadline can never move the user.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from models import Debtor

DEFAULT_LOADING_SECONDS = 2.0


class View(str, Enum):
    LOGIN = "login"
    LOADING = "loading"
    DASHBOARD = "dashboard"
    PIX = "pix"
    ADMIN = "admin"


class AdminTab(str, Enum):
    IMPORT = "import"
    CLIENTS = "clients"
    PIX_CONFIG = "pix-config"


class InvalidTransition(ValueError):
    pass


@dataclass
class ViewState:
    view: View = View.LOGIN
    pending: View | None = None
    loading_deadline: float | None = None
    loading_seconds: float = DEFAULT_LOADING_SECONDS
    debtor: Debtor | None = None
    is_admin: bool = False
    admin_tab: AdminTab = AdminTab.IMPORT
    admin_debtors: list[Debtor] = field(default_factory=list)
    import_text: str = ""
    manual_entry: dict = field(default_factory=dict)
    error: str = ""
    notice: tuple[str, str] | None = None  # (level, message) shown on the next render

    def flash(self, level: str, message: str) -> None:
        self.notice = (level, message)

    def pop_notice(self) -> tuple[str, str] | None:
        notice, self.notice = self.notice, None
        return notice

    # ---------- loading ----------

    def _start_loading(self, target: View, now: float) -> None:
        self.pending = target
        self.loading_deadline = now + self.loading_seconds
        self.view = View.LOADING

    def _cancel_loading(self) -> None:
        self.pending = None
        self.loading_deadline = None

    def remaining(self, now: float) -> float:
        if self.view is not View.LOADING or self.loading_deadline is None:
            return 0.0
        return max(0.0, self.loading_deadline - now)

    def tick(self, now: float) -> bool:
        """
        Advance out of LOADING once the deadline has passed. Returns True if the view changed.
        """
        if self.view is not View.LOADING or self.pending is None or self.loading_deadline is None:
            return False
        if now < self.loading_deadline:
            return False
        self.view = self.pending
        self._cancel_loading()
        return True

    # ---------- customer flow ----------

    def lookup_succeeded(self, debtor: Debtor, now: float) -> None:
        if self.view is not View.LOGIN:
            raise InvalidTransition(f"lookup from {self.view.value}")
        self.debtor = debtor
        self.error = ""
        self._start_loading(View.DASHBOARD, now)

    def lookup_failed(self, message: str) -> None:
        self.error = message

    def request_pix(self, now: float) -> None:
        if self.view is not View.DASHBOARD or self.debtor is None:
            raise InvalidTransition(f"pix from {self.view.value}")
        self._start_loading(View.PIX, now)

    def back_to_dashboard(self) -> None:
        if self.view is not View.PIX or self.debtor is None:
            raise InvalidTransition(f"dashboard from {self.view.value}")
        self.view = View.DASHBOARD

    def logout(self) -> None:
        """
        Back to login from anywhere; drops debtor data and the admin session.
        """
        self._cancel_loading()
        self.view = View.LOGIN
        self.debtor = None
        self.is_admin = False
        self.admin_tab = AdminTab.IMPORT
        self.admin_debtors = []
        self.import_text = ""
        self.manual_entry = {}
        self.error = ""
        self.notice = None

    # ---------- admin ----------

    def admin_authenticated(self, debtors: list[Debtor]) -> None:
        self._cancel_loading()
        self.is_admin = True
        self.admin_debtors = list(debtors)
        self.view = View.ADMIN

    def open_admin(self) -> None:
        if not self.is_admin:
            raise InvalidTransition("admin panel requires authentication")
        self._cancel_loading()
        self.view = View.ADMIN

    def select_tab(self, tab: AdminTab) -> None:
        if self.view is not View.ADMIN:
            raise InvalidTransition(f"admin tab from {self.view.value}")
        self.admin_tab = AdminTab(tab)

    def set_admin_debtors(self, debtors: list[Debtor]) -> None:
        self.admin_debtors = list(debtors)

    def after_reset(self) -> None:
        """
        A full reset sends the admin back to login but keeps the admin flag.
        """
        self._cancel_loading()
        self.admin_tab = AdminTab.IMPORT
        self.admin_debtors = []
        self.debtor = None
        self.view = View.LOGIN
