import base64
import hashlib

from groovify.core import passwords

ZERO_SALT = base64.b64encode(b"\x00" * 16).decode("ascii")


def test_generate_salt_is_16_random_bytes():
    salt = passwords.generate_salt()
    assert len(base64.b64decode(salt)) == 16
    assert passwords.generate_salt() != salt


def test_hash_matches_salt_then_password_digest():
    expected = base64.b64encode(hashlib.sha256(b"\x00" * 16 + b"password").digest()).decode("ascii")
    assert passwords.hash_password("password", ZERO_SALT) == expected


def test_hash_encodes_password_as_utf8():
    expected = base64.b64encode(
        hashlib.sha256(b"\x00" * 16 + "pässwörd".encode("utf-8")).digest()
    ).decode("ascii")
    assert passwords.hash_password("pässwörd", ZERO_SALT) == expected


def test_hash_is_deterministic_for_same_salt():
    salt = passwords.generate_salt()
    assert passwords.hash_password("s3cret", salt) == passwords.hash_password("s3cret", salt)


def test_different_salts_give_different_hashes():
    first = passwords.hash_password("s3cret", passwords.generate_salt())
    second = passwords.hash_password("s3cret", passwords.generate_salt())
    assert first != second


def test_hash_returns_none_for_missing_inputs():
    assert passwords.hash_password(None, ZERO_SALT) is None
    assert passwords.hash_password("pw", None) is None


def test_verify_password():
    salt = passwords.generate_salt()
    stored = passwords.hash_password("s3cret", salt)
    assert passwords.verify_password("s3cret", salt, stored)
    assert not passwords.verify_password("S3cret", salt, stored)
    assert not passwords.verify_password(None, salt, stored)
    assert not passwords.verify_password("s3cret", salt, "")
