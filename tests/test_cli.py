"""Tests for the main.py command line: create-user and purge-sessions."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

import main
from auth.passwords import verify_password
from auth.store import UserStore


@pytest.fixture
def db_url(tmp_path, monkeypatch) -> str:
    url = f"sqlite:///{tmp_path / 'cli.db'}"
    monkeypatch.setattr(main, "get_settings", lambda: SimpleNamespace(database_url=url))
    return url


def _answer_password(monkeypatch, *answers: str) -> None:
    replies = iter(answers)
    monkeypatch.setattr(main.getpass, "getpass", lambda prompt="": next(replies))


def test_create_user(db_url, monkeypatch, capsys) -> None:
    _answer_password(monkeypatch, "secret1", "secret1")
    assert main.main(["create-user", "cli@x.com", "--first-name", "Ada"]) == 0
    assert "Created user cli@x.com" in capsys.readouterr().out

    store = UserStore(db_url)
    user = store.get_by_email("cli@x.com")
    store.close()
    assert user.first_name == "Ada"
    assert verify_password("secret1", user.password_hash)


def test_create_user_duplicate_fails(db_url, monkeypatch, capsys) -> None:
    _answer_password(monkeypatch, "secret1", "secret1", "secret2", "secret2")
    assert main.main(["create-user", "cli@x.com"]) == 0
    assert main.main(["create-user", "cli@x.com"]) == 1
    assert "already exists" in capsys.readouterr().out


def test_create_user_mismatched_passwords(db_url, monkeypatch) -> None:
    _answer_password(monkeypatch, "secret1", "secret2")
    assert main.main(["create-user", "cli@x.com"]) == 1


def test_purge_sessions(db_url, capsys) -> None:
    assert main.main(["purge-sessions"]) == 0
    assert "Removed 0 expired session(s)" in capsys.readouterr().out


def test_create_user_strips_email(db_url, monkeypatch) -> None:
    _answer_password(monkeypatch, " pw ", " pw ")
    assert main.main(["create-user", "  padded@x.com  "]) == 0

    store = UserStore(db_url)
    user = store.get_by_email("padded@x.com")
    store.close()
    assert user is not None
    assert verify_password(" pw ", user.password_hash)
