import pytest
from pathlib import Path

import auth
from config import Settings
from db import RecordStore
from server import create_app
from services import DebtorService

ADMIN_PASSWORD = "s3cret-admin"


@pytest.fixture(scope="session")
def admin_password():
    return ADMIN_PASSWORD


@pytest.fixture(scope="session")
def admin_hash():
    return auth.hash_password(ADMIN_PASSWORD)


@pytest.fixture
def store(tmp_path):
    s = RecordStore(tmp_path / "test.db")
    s.init_db()
    return s


@pytest.fixture
def service(store, admin_hash):
    return DebtorService(store, auth.AdminGate(admin_hash))


@pytest.fixture
def settings(tmp_path):
    return Settings(
        app_env="development",
        db_path=tmp_path / "test.db",
        admin_password_hash=None,
        admin_password=None,
        host="127.0.0.1",
        port=3000,
        static_dir=Path(tmp_path / "dist"),
        api_base_url="http://testserver",
        loading_seconds=2.0,
        log_level="INFO",
        max_content_length=10 * 1024 * 1024,
    )


@pytest.fixture
def client(service, settings):
    app = create_app(service, settings)
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture
def config_rows():
    def count(store):
        with store.get_conn() as conn:
            return conn.execute("SELECT COUNT(*) AS c FROM config").fetchone()["c"]

    return count
