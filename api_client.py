"""
api_client.py
HTTP client used by the Streamlit UI to talk to the JSON API.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from models import Debtor, PixConfig

logger = logging.getLogger(__name__)

CONNECTION_ERROR = "Could not connect to the server."


class ApiError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ApiClient:
    def __init__(self, base_url: str, session: requests.Session | None = None, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, data: dict | None = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, json=data, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error("Request %s %s failed: %s", method, path, e)
            raise ApiError(CONNECTION_ERROR) from e

        try:
            payload = response.json()
        except ValueError:
            logger.error("Non-JSON response for %s %s: HTTP %s", method, path, response.status_code)
            raise ApiError(f"Unexpected server response (HTTP {response.status_code}).", response.status_code)

        if response.status_code >= 400:
            message = payload.get("message") if isinstance(payload, dict) else None
            raise ApiError(message or f"HTTP {response.status_code}", response.status_code)
        return payload

    # ---------- customer ----------

    def lookup(self, phone: str) -> Debtor:
        payload = self._request("POST", "/api/login", {"phone": phone})
        return Debtor.from_dict(payload["debtor"])

    def get_pix_config(self) -> PixConfig:
        payload = self._request("GET", "/api/pix-config")
        return PixConfig(key=payload.get("key"), qr_code=payload.get("qrCode"))

    # ---------- admin ----------

    def admin_login(self, password: str) -> None:
        self._request("POST", "/api/admin/login", {"password": password})

    def list_debtors(self) -> list[Debtor]:
        return [Debtor.from_dict(d) for d in self._request("GET", "/api/admin/debtors")]

    def replace_debtors(self, debtors: list[Debtor]) -> None:
        self._request("POST", "/api/admin/debtors", {"debtors": [d.to_dict() for d in debtors]})

    def delete_debtor(self, phone: str) -> None:
        self._request("DELETE", f"/api/admin/debtors/{phone}")

    def reset(self) -> None:
        self._request("POST", "/api/admin/reset")

    def update_pix_config(self, key: str | None = None, qr_code: str | None = None) -> None:
        body: dict = {}
        if key is not None:
            body["key"] = key
        if qr_code is not None:
            body["qrCode"] = qr_code
        self._request("POST", "/api/admin/pix-config", body)
