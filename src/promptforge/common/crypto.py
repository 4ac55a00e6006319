"""Cryptographic utilities for provider keys, passwords and session tokens."""

from __future__ import annotations

import base64
import hashlib
import hmac
import os
import secrets

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from promptforge.common.errors import ValidationError

# Session tokens

SESSION_PREFIX = "pf_sess_"


def generate_session_token() -> str:
    return f"{SESSION_PREFIX}{secrets.token_urlsafe(32)}"


def hash_token(raw_token: str) -> str:
    """SHA-256 of a session token; only the hash is persisted."""
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


# Passwords

PASSWORD_ITERATIONS = 390_000


def _derive(password: str, salt: bytes, iterations: int) -> bytes:
    kdf = PBKDF2HMAC(algorithm=hashes.SHA256(), length=32, salt=salt, iterations=iterations)
    return kdf.derive(password.encode("utf-8"))


def hash_password(password: str, iterations: int = PASSWORD_ITERATIONS) -> str:
    """Returns ``pbkdf2_sha256$<iterations>$<salt>$<hash>`` (urlsafe base64 parts)."""
    salt = os.urandom(16)
    digest = _derive(password, salt, iterations)
    return "$".join(
        [
            "pbkdf2_sha256",
            str(iterations),
            base64.urlsafe_b64encode(salt).decode(),
            base64.urlsafe_b64encode(digest).decode(),
        ]
    )


def verify_password(password: str, encoded: str) -> bool:
    try:
        algorithm, iterations, salt_b64, digest_b64 = encoded.split("$")
    except ValueError:
        return False
    if algorithm != "pbkdf2_sha256":
        return False
    salt = base64.urlsafe_b64decode(salt_b64)
    expected = base64.urlsafe_b64decode(digest_b64)
    return hmac.compare_digest(_derive(password, salt, int(iterations)), expected)


# Provider API Key Encryption

_ENCRYPTION_KEY: bytes | None = None


def _get_encryption_key() -> bytes:
    """Derive a Fernet key from PROMPTFORGE_ENCRYPTION_KEY."""
    global _ENCRYPTION_KEY  # noqa: PLW0603
    if _ENCRYPTION_KEY is not None:
        return _ENCRYPTION_KEY

    master = os.environ.get("PROMPTFORGE_ENCRYPTION_KEY", "promptforge-dev-encryption-key")
    salt = os.environ.get("PROMPTFORGE_ENCRYPTION_SALT", "promptforge-salt").encode()

    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=480_000,
    )
    _ENCRYPTION_KEY = base64.urlsafe_b64encode(kdf.derive(master.encode()))
    return _ENCRYPTION_KEY


def encrypt_value(plaintext: str) -> str:
    """Encrypt a string (e.g., provider API key) for storage."""
    f = Fernet(_get_encryption_key())
    return f.encrypt(plaintext.encode()).decode()


def decrypt_value(ciphertext: str) -> str:
    """Decrypt a string from storage."""
    f = Fernet(_get_encryption_key())
    try:
        return f.decrypt(ciphertext.encode()).decode()
    except InvalidToken as e:
        raise ValidationError("Stored secret could not be decrypted with the current key") from e
