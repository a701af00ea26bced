"""Account configuration.

Each account lives in its own TOML file inside the user configuration
directory, for example ``~/.config/mdmail/work.toml`` on Linux:

    name = "Jane Doe"
    email = "jane@example.com"

    [smtp]
    hostname = "smtp.example.com"
    username = "jane@example.com"
    port = 465
"""

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from platformdirs import user_config_dir

from .errors import ConfigError
from .utils import validate_account

logger = logging.getLogger(__name__)

APP_NAME = "mdmail"
DEFAULT_SMTP_PORT = 465


@dataclass(frozen=True)
class ServerConfig:
    hostname: str
    username: str
    port: int = DEFAULT_SMTP_PORT


@dataclass(frozen=True)
class AccountConfig:
    """Sender identity and SMTP relay settings for one account."""

    name: str
    email: str
    smtp: ServerConfig
    imap: ServerConfig | None = None
    html_template: str | None = None
    mime_types: Mapping[str, str] = field(default_factory=dict)


def config_dir() -> Path:
    return Path(user_config_dir(APP_NAME))


def config_path(account: str, directory: str | Path | None = None) -> Path:
    """Returns the path of the TOML file for `account`."""
    base = Path(directory) if directory else config_dir()
    return base / f"{account}.toml"


def _server(data: Mapping[str, Any], default_port: int) -> ServerConfig:
    return ServerConfig(
        hostname=data["hostname"].strip(),
        username=data["username"].strip(),
        port=data.get("port", default_port),
    )


def parse_account(data: Mapping[str, Any]) -> AccountConfig:
    """Builds an AccountConfig from a parsed TOML document.

    Raises:
        ValueError: If the document does not match the account schema.
    """
    validate_account(data)
    return AccountConfig(
        name=data["name"].strip(),
        email=data["email"].strip(),
        smtp=_server(data["smtp"], DEFAULT_SMTP_PORT),
        imap=_server(data["imap"], 993) if "imap" in data else None,
        html_template=data.get("html_template"),
        mime_types=dict(data.get("mime_types", {})),
    )


def load_account(account: str, directory: str | Path | None = None) -> AccountConfig:
    """Loads the configuration of `account`.

    Args:
        account (str): Account name, the file stem under the config directory.
        directory (str | Path, optional): Directory to look in instead of the
            platform configuration directory.

    Returns:
        AccountConfig: The parsed account.

    Raises:
        ConfigError: If the file is missing, unreadable, not TOML, or invalid.
    """
    path = config_path(account, directory)
    logger.debug("Loading account %r from %s", account, path)

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigError(str(path), "file not found") from e
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(str(path), e) from e

    try:
        return parse_account(data)
    except ValueError as e:
        raise ConfigError(str(path), e) from e
