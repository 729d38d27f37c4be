"""
server.py
Flask JSON API for debtor lookup, admin management and payment configuration.
Run: python server.py
"""

from __future__ import annotations

import logging
from pathlib import Path

from flask import Flask, jsonify, request, send_from_directory

from auth import AdminGate
from config import Settings, load_settings, setup_logging
from db import RecordStore
from errors import AppError, StoreError
from services import DebtorService

logger = logging.getLogger(__name__)


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def create_app(service: DebtorService, settings: Settings) -> Flask:
    app = Flask(__name__, static_folder=None)
    app.config["MAX_CONTENT_LENGTH"] = settings.max_content_length

    @app.errorhandler(AppError)
    def handle_app_error(exc: AppError):
        if isinstance(exc, StoreError):
            logger.exception("Store error on %s %s", request.method, request.path)
        return jsonify({"success": False, "message": exc.message}), exc.status_code

    @app.get("/api/health")
    def health():
        return jsonify({"status": "ok"})

    @app.post("/api/login")
    def login():
        debtor = service.lookup(_json_body().get("phone"))
        return jsonify({"success": True, "debtor": debtor.to_dict()})

    @app.post("/api/admin/login")
    def admin_login():
        service.authenticate_admin(_json_body().get("password"))
        return jsonify({"success": True})

    @app.get("/api/admin/debtors")
    def admin_debtors_list():
        return jsonify([d.to_dict() for d in service.list_debtors()])

    @app.post("/api/admin/debtors")
    def admin_debtors_replace():
        service.replace_debtors(_json_body().get("debtors"))
        return jsonify({"success": True})

    @app.delete("/api/admin/debtors/<phone>")
    def admin_debtors_delete(phone: str):
        service.delete_debtor(phone)
        return jsonify({"success": True})

    @app.post("/api/admin/reset")
    def admin_reset():
        service.reset()
        return jsonify({"success": True})

    @app.get("/api/pix-config")
    def pix_config():
        return jsonify(service.get_pix_config().to_dict())

    @app.post("/api/admin/pix-config")
    def admin_pix_config():
        data = _json_body()
        service.update_pix_config(key=data.get("key"), qr_code=data.get("qrCode"))
        return jsonify({"success": True})

    if settings.is_production:
        _register_static(app, settings.static_dir)

    return app


def _register_static(app: Flask, static_dir: Path) -> None:
    """
    Serve precompiled assets; unknown non-API paths fall back to index.html.
    """
    if not (static_dir / "index.html").exists():
        logger.warning("Static dir %s has no index.html; only the API is served", static_dir)

    @app.get("/", defaults={"path": ""})
    @app.get("/<path:path>")
    def static_files(path: str):
        if path.startswith("api/"):
            return jsonify({"success": False, "message": "Not found."}), 404
        if path and (static_dir / path).is_file():
            return send_from_directory(static_dir, path)
        return send_from_directory(static_dir, "index.html")


def build_app(settings: Settings | None = None) -> Flask:
    settings = settings or load_settings()
    store = RecordStore(settings.db_path)
    store.init_db()
    service = DebtorService(store, AdminGate.from_settings(settings))
    return create_app(service, settings)


def main() -> None:
    settings = load_settings()
    setup_logging(settings.log_level)
    logger.info("Starting in %s mode (db: %s)", settings.app_env, settings.db_path)
    app = build_app(settings)
    debug = not settings.is_production
    app.run(host=settings.host, port=settings.port, debug=debug, use_reloader=debug)


if __name__ == "__main__":
    main()
