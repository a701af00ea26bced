import logging
from dataclasses import dataclass
from email.encoders import encode_base64
from email.mime.application import MIMEApplication
from email.mime.audio import MIMEAudio
from email.mime.base import MIMEBase
from email.mime.image import MIMEImage
from email.mime.text import MIMEText
from email.policy import Policy, SMTP
from mimetypes import guess_type
from os.path import basename
from pathlib import Path
from typing import Iterable, Mapping

from .errors import InvalidAttachmentName, ReadFailure
from .utils import validate_mime_type, validate_path

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"
ENCODING_TYPES = {
    "gzip": "application/gzip",
    "bzip2": "application/x-bzip2",
    "xz": "application/x-xz",
    "compress": "application/x-compress",
    "br": "application/x-brotli",
}


@dataclass(frozen=True)
class AttachmentPart:
    """A file read into memory, ready to be attached to a message."""

    display_name: str
    content_type: str
    data: bytes

    def to_mime(self, policy: Policy = SMTP) -> MIMEBase:
        """Wraps the file contents in a MIME part with an attachment disposition.

        Text files that are not valid UTF-8 are sent base64-encoded instead of
        being decoded lossily.
        """
        main_type, sub_type = self.content_type.split("/", 1)

        if main_type == "text":
            try:
                part = MIMEText(self.data.decode("utf-8"), _subtype=sub_type, _charset="utf-8", policy=policy)
            except UnicodeDecodeError:
                part = self._generic(main_type, sub_type, policy)
        elif main_type == "image":
            part = MIMEImage(self.data, _subtype=sub_type, policy=policy)
        elif main_type == "audio":
            part = MIMEAudio(self.data, _subtype=sub_type, policy=policy)
        elif main_type == "application":
            part = MIMEApplication(self.data, _subtype=sub_type, policy=policy)
        else:
            part = self._generic(main_type, sub_type, policy)

        part.add_header("Content-Disposition", "attachment", filename=self.display_name)
        return part

    def _generic(self, main_type: str, sub_type: str, policy: Policy) -> MIMEBase:
        part = MIMEBase(main_type, sub_type, policy=policy)
        part.set_payload(self.data)
        encode_base64(part)
        return part


def _extensions(path: str) -> list[str]:
    # longest compound suffix first: ".tar.gz" before ".gz"
    suffixes = [suffix.lower() for suffix in Path(path).suffixes]
    return ["".join(suffixes[i:]) for i in range(len(suffixes))]


def guess_content_type(path: str, overrides: Mapping[str, str] | None = None) -> str:
    """Infers the content type of `path` from its extension.

    Overrides may be keyed by a compound extension such as ``".tar.gz"``;
    the longest matching one wins. Compressed files the system table only
    knows by their encoding are typed after the compression format, so
    ``backup.tar.gz`` is ``application/gzip``.

    Args:
        path (str): File path; only its extension is looked at.
        overrides (Mapping[str, str], optional): Extension (``".md"``) to
            content type mappings consulted before the system table.

    Returns:
        str: The content type, ``application/octet-stream`` when unknown.

    Raises:
        ReadFailure: If the resolved content type is not a valid MIME type.
    """
    lookup = {key.lower(): value for key, value in (overrides or {}).items()}
    content_type = next((lookup[ext] for ext in _extensions(path) if ext in lookup), None)

    if content_type is None:
        content_type, encoding = guess_type(path)
        if encoding is not None:
            content_type = ENCODING_TYPES.get(encoding, DEFAULT_CONTENT_TYPE)

    if content_type is None:
        return DEFAULT_CONTENT_TYPE

    if not validate_mime_type(content_type):
        raise ReadFailure(path, ValueError(f"Invalid content type `{content_type}`"))
    return content_type


def build_attachment(path: str, overrides: Mapping[str, str] | None = None) -> AttachmentPart:
    """Reads a file and prepares it as an attachment.

    Args:
        path (str): Path to the file to attach.
        overrides (Mapping[str, str], optional): Custom extension mappings,
            see `guess_content_type`.

    Returns:
        AttachmentPart: Named after the last component of `path`.

    Raises:
        FileNotFound: If the file does not exist.
        NotAFile: If the path is a directory or special file.
        InvalidAttachmentName: If the path has no final component.
        ReadFailure: If reading fails or the content type is invalid.

    Example:
        build_attachment("reports/monthly_report.pdf")
    """
    file = validate_path(path)

    display_name = basename(str(path))
    if not display_name:
        raise InvalidAttachmentName(str(path))

    content_type = guess_content_type(str(path), overrides)

    try:
        with open(file, "rb") as f:
            data = f.read()
    except OSError as e:
        raise ReadFailure(path, e) from e

    logger.debug("Attaching %s as %s (%d bytes).", display_name, content_type, len(data))
    return AttachmentPart(display_name=display_name, content_type=content_type, data=data)


def build_attachments(paths: Iterable[str], overrides: Mapping[str, str] | None = None) -> tuple[AttachmentPart, ...]:
    """Builds one attachment per path, in order, keeping duplicates."""
    return tuple(build_attachment(path, overrides) for path in paths)
