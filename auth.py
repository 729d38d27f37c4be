"""
auth.py
Admin gate: bcrypt-verified shared credential taken from the environment.
"""

from __future__ import annotations

import logging

import bcrypt

from config import Settings

logger = logging.getLogger(__name__)


BCRYPT_MAX_BYTES = 72
BCRYPT_ROUNDS = 12


def _credential_bytes(password: str) -> bytes:
    # bcrypt ignores (newer releases reject) anything past 72 bytes
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """
    bcrypt hash of the admin credential, as text for ADMIN_PASSWORD_HASH.
    """
    digest = bcrypt.hashpw(_credential_bytes(password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    return digest.decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_credential_bytes(password), password_hash.encode("ascii"))
    except ValueError:
        logger.error("Configured admin password hash is not a valid bcrypt hash")
        return False


class AdminGate:
    """
    Single shared credential check. Holds only a bcrypt hash; no sessions.
    """

    def __init__(self, password_hash: str | None):
        self.password_hash = password_hash
        if not password_hash:
            logger.warning("No admin credential configured; admin login is disabled")

    @classmethod
    def from_settings(cls, settings: Settings) -> "AdminGate":
        if settings.admin_password_hash:
            return cls(settings.admin_password_hash)
        if settings.admin_password:
            return cls(hash_password(settings.admin_password))
        return cls(None)

    def check(self, password) -> bool:
        if not self.password_hash or not isinstance(password, str) or not password:
            return False
        return verify_password(password, self.password_hash)


if __name__ == "__main__":
    import getpass

    print(hash_password(getpass.getpass("Admin password: ")))
