from pathlib import Path
from re import compile as re_compile
from typing import Any, Mapping

from .errors import FileNotFound, InvalidTemplate, NotAFile

# RFC 2045 token characters
_TOKEN = r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+"
MIME_TYPE_PATTERN = re_compile(rf"^{_TOKEN}/{_TOKEN}$")

TEMPLATE_EXTENSIONS = (".html", ".htm")


def validate_path(path: str) -> Path:
    """Checks that `path` names an existing regular file.

    Args:
        path (str): Path to validate.

    Returns:
        Path: The validated path.

    Raises:
        FileNotFound: If nothing exists at `path`.
        NotAFile: If `path` is a directory or a special file.
    """
    file = Path(path)
    if not file.exists():
        raise FileNotFound(str(path))
    if not file.is_file():
        raise NotAFile(str(path))
    return file


def validate_template(file: str) -> Path:
    """Checks that `file` is an existing HTML template.

    Raises:
        InvalidTemplate: If the file does not have an HTML extension.
        FileNotFound: If the file does not exist.
        NotAFile: If the path is not a regular file.
    """
    if not str(file).lower().endswith(TEMPLATE_EXTENSIONS):
        raise InvalidTemplate(str(file))
    return validate_path(file)


def validate_mime_type(content_type: str) -> bool:
    """Returns whether `content_type` is a well-formed `type/subtype` string."""
    return isinstance(content_type, str) and bool(MIME_TYPE_PATTERN.match(content_type))


def _require_str(data: Mapping[str, Any], key: str, section: str = "") -> None:
    label = f"{section}.{key}" if section else key
    if key not in data:
        raise ValueError(f"Missing required key `{label}`.")
    if not isinstance(data[key], str) or not data[key].strip():
        raise ValueError(f"`{label}` must be a non-empty string.")


def _validate_server(data: Mapping[str, Any], section: str) -> None:
    server = data[section]
    if not isinstance(server, Mapping):
        raise ValueError(f"`{section}` must be a table.")
    _require_str(server, "hostname", section)
    _require_str(server, "username", section)
    port = server.get("port")
    if port is not None and (isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536):
        raise ValueError(f"`{section}.port` must be an integer between 1 and 65535.")


def validate_account(data: Mapping[str, Any]) -> None:
    """Validates the raw contents of an account configuration file.

    Args:
        data (Mapping): Parsed TOML document with keys:
            - `name` (str): Sender display name.
            - `email` (str): Sender address.
            - `smtp` (table): `hostname`, `username` and optional `port`.
            - `imap` (table, optional): same shape as `smtp`.
            - `html_template` (str, optional): Path to an HTML layout.
            - `mime_types` (table, optional): Extension to content type overrides.

    Raises:
        ValueError: If a key is missing or has the wrong type.
    """
    _require_str(data, "name")
    _require_str(data, "email")

    if "smtp" not in data:
        raise ValueError("Missing required table `smtp`.")
    _validate_server(data, "smtp")
    if "imap" in data:
        _validate_server(data, "imap")

    if "html_template" in data:
        _require_str(data, "html_template")

    overrides = data.get("mime_types", {})
    if not isinstance(overrides, Mapping):
        raise ValueError("`mime_types` must be a table.")
    for extension, content_type in overrides.items():
        if not isinstance(content_type, str):
            raise ValueError(f"`mime_types.{extension}` must be a string.")
