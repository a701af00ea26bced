import pytest

from mdmail.addresses import parse_mailbox, parse_mailbox_list
from mdmail.config import AccountConfig, ServerConfig

ACCOUNT_TOML = """\
name = "Jane Doe"
email = "jane@example.com"

[smtp]
hostname = "smtp.example.com"
username = "jane@example.com"
port = 465

[imap]
hostname = "imap.example.com"
username = "jane@example.com"
port = 993
"""


@pytest.fixture
def body_file(tmp_path):
    path = tmp_path / "body.md"
    path.write_text("# Hello\n\nWorld", encoding="utf-8")
    return path


@pytest.fixture
def report_file(tmp_path):
    path = tmp_path / "report.pdf"
    path.write_bytes(b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n")
    return path


@pytest.fixture
def account():
    return AccountConfig(
        name="Jane Doe",
        email="jane@example.com",
        smtp=ServerConfig(hostname="smtp.example.com", username="jane@example.com", port=465),
    )


@pytest.fixture
def config_dir(tmp_path):
    directory = tmp_path / "config"
    directory.mkdir()
    (directory / "work.toml").write_text(ACCOUNT_TOML, encoding="utf-8")
    return directory


@pytest.fixture
def sender():
    return parse_mailbox("Jane Doe <jane@example.com>")


@pytest.fixture
def to_list():
    return parse_mailbox_list(["a@x.com"], "To")


@pytest.fixture
def empty_cc():
    return parse_mailbox_list([], "Cc")


@pytest.fixture
def empty_bcc():
    return parse_mailbox_list([], "Bcc")
