"""Exception types raised while composing and delivering a message.

Every error carries the input that caused it (an address string, a file
path or the underlying exception) so callers can report it verbatim.
"""


class MdmailError(Exception):
    """Base class for all mdmail errors."""


class MalformedAddress(MdmailError, ValueError):
    """Raised when a string is not a valid mailbox."""

    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(f"Malformed address: {raw}")


class FileNotFound(MdmailError):
    """Raised when a path does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"{path}: No such file or directory.")


class NotAFile(MdmailError):
    """Raised when a path exists but is not a regular file."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"{path}: Not a regular file.")


class ReadFailure(MdmailError):
    """Raised when a file cannot be read or its content is unusable."""

    def __init__(self, path: str, cause: object):
        self.path = path
        self.cause = cause
        super().__init__(f"{path}: Could not read file: {cause}")


class InvalidAttachmentName(MdmailError, ValueError):
    """Raised when an attachment path has no final component to name it by."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"{path}: Attachment path has no file name.")


class InvalidTemplate(MdmailError, ValueError):
    """Raised when an HTML layout path does not name an HTML file."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"{path}: Template must be an HTML file.")


class EmptyRecipients(MdmailError):
    """Raised when a mandatory mailbox header has no mailboxes."""

    def __init__(self, role: str = "To"):
        self.role = role
        super().__init__(f"At least one `{role}` address is required.")


class BuildFailure(MdmailError):
    """Raised when the message structure cannot be built."""

    def __init__(self, cause: object):
        self.cause = cause
        super().__init__(f"Failed to build message: {cause}")


class DeliveryError(MdmailError):
    """Raised when the SMTP relay refuses or fails to take the message."""

    def __init__(self, cause: object):
        self.cause = cause
        super().__init__(f"Could not send email: {cause!r}")


class ConfigError(MdmailError):
    """Raised when an account configuration file cannot be used."""

    def __init__(self, path: str, cause: object):
        self.path = path
        self.cause = cause
        super().__init__(f"{path}: Invalid account configuration: {cause}")
