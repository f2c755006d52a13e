import re

from groovify.config import settings

_USERNAME_RE = re.compile(settings.USERNAME_PATTERN)


def normalize_username(username):
    """Normalize username for case-insensitive lookups."""
    return str(username or "").strip().lower()


def clean_username(username):
    """
    Return the trimmed username if it passes the length rules, otherwise None.

    The character-set rule is applied only when ENFORCE_USERNAME_CHARSET is on.
    """
    if username is None:
        return None
    text = str(username).strip()
    if not text:
        return None
    if len(text) < settings.USERNAME_MIN_LENGTH or len(text) > settings.USERNAME_MAX_LENGTH:
        return None
    if settings.ENFORCE_USERNAME_CHARSET and not is_username_valid(text):
        return None
    return text


def is_username_valid(username):
    """True when the username contains only letters, digits, dots, underscores and hyphens."""
    if username is None:
        return False
    return _USERNAME_RE.fullmatch(str(username)) is not None


def is_password_present(password):
    return password is not None and bool(str(password).strip())


def blank_to_default(value, default):
    text = str(value or "").strip()
    return text or default
