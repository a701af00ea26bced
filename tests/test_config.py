"""Tests for account configuration loading."""

import pytest

from mdmail import config as config_module
from mdmail.config import AccountConfig, ServerConfig, config_path, load_account, parse_account
from mdmail.errors import ConfigError


def test_load_account(config_dir):
    account = load_account("work", config_dir)

    assert account == AccountConfig(
        name="Jane Doe",
        email="jane@example.com",
        smtp=ServerConfig(hostname="smtp.example.com", username="jane@example.com", port=465),
        imap=ServerConfig(hostname="imap.example.com", username="jane@example.com", port=993),
    )


def test_default_directory(monkeypatch, tmp_path):
    monkeypatch.setattr(config_module, "user_config_dir", lambda app: str(tmp_path / app))
    assert config_path("personal") == tmp_path / "mdmail" / "personal.toml"


def test_optional_sections():
    account = parse_account(
        {
            "name": "Jane",
            "email": "jane@example.com",
            "smtp": {"hostname": "smtp.example.com", "username": "jane"},
            "html_template": "layout.html",
            "mime_types": {".md": "text/markdown"},
        }
    )

    assert account.smtp.port == 465
    assert account.imap is None
    assert account.html_template == "layout.html"
    assert account.mime_types == {".md": "text/markdown"}


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="file not found"):
        load_account("nobody", tmp_path)


def test_invalid_toml(tmp_path):
    (tmp_path / "broken.toml").write_text("name = ", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_account("broken", tmp_path)


@pytest.mark.parametrize(
    "document, message",
    [
        ('email = "a@x.com"\n[smtp]\nhostname = "h"\nusername = "u"\n', "name"),
        ('name = "A"\nemail = "a@x.com"\n', "smtp"),
        ('name = "A"\nemail = "a@x.com"\n[smtp]\nhostname = "h"\n', "smtp.username"),
        ('name = "A"\nemail = "a@x.com"\n[smtp]\nhostname = "h"\nusername = "u"\nport = "465"\n', "smtp.port"),
        ('name = "A"\nemail = "a@x.com"\nsmtp = "h"\n', "smtp"),
        ('name = "A"\nemail = "a@x.com"\nmime_types = 3\n[smtp]\nhostname = "h"\nusername = "u"\n', "mime_types"),
    ],
)
def test_invalid_schema(tmp_path, document, message):
    (tmp_path / "bad.toml").write_text(document, encoding="utf-8")
    with pytest.raises(ConfigError, match=message):
        load_account("bad", tmp_path)
