import pytest

from groovify.config import settings
from groovify.core import validation


def test_normalize_username():
    assert validation.normalize_username("  AliCe ") == "alice"
    assert validation.normalize_username(None) == ""


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(" alice ", "alice"), ("abc", "abc"), ("ab", None), ("", None), (None, None), ("a" * 33, None)],
)
def test_clean_username(raw, expected):
    assert validation.clean_username(raw) == expected


def test_clean_username_charset_flag(monkeypatch):
    assert validation.clean_username("has space") == "has space"
    monkeypatch.setattr(settings, "ENFORCE_USERNAME_CHARSET", True)
    assert validation.clean_username("has space") is None
    assert validation.clean_username("no_space.1") == "no_space.1"


def test_is_username_valid_accepts_conforming_names():
    assert validation.is_username_valid("alice_01")
    assert not validation.is_username_valid("alice!")
    assert not validation.is_username_valid(None)


def test_password_and_default_helpers():
    assert validation.is_password_present("x")
    assert not validation.is_password_present("  ")
    assert not validation.is_password_present(None)
    assert validation.blank_to_default("  ", "Fishing.jpg") == "Fishing.jpg"
    assert validation.blank_to_default(" me.png ", "Fishing.jpg") == "me.png"
