"""
Salted SHA-256 password hashing.

The stored hash is ``base64(sha256(salt_bytes + utf8(password)))`` where the
salt is kept base64-encoded in its own column. The byte order must not change,
existing credentials depend on it.
"""

import base64
import hashlib
import hmac
import secrets

from groovify.config import settings


def generate_salt(length=None):
    """Return a base64-encoded salt of ``length`` random bytes."""
    raw = secrets.token_bytes(int(length or settings.SALT_LENGTH))
    return base64.b64encode(raw).decode("ascii")


def hash_password(password, salt):
    """Hash ``password`` with the base64 ``salt``. Returns None if either is None."""
    if password is None or salt is None:
        return None
    digest = hashlib.sha256()
    digest.update(base64.b64decode(salt))
    digest.update(str(password).encode("utf-8"))
    return base64.b64encode(digest.digest()).decode("ascii")


def verify_password(password, salt, stored_hash):
    computed = hash_password(password, salt)
    if computed is None or not stored_hash:
        return False
    return hmac.compare_digest(computed.encode("utf-8"), str(stored_hash).encode("utf-8"))
