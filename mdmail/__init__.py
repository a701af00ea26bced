"""mdmail package initialization module.

This package composes an email from a markdown file, sending it both as
plain text and as rendered HTML, with optional file attachments, and
delivers it through an SMTP relay.

Modules:
    addresses (module): Parses mailbox strings for the From/To/Cc/Bcc headers.
    content (module): Renders a markdown file into the two body alternatives.
    attachments (module): Reads and types files to attach.
    core (module): Assembles the multipart message.
    delivery (module): Sends assembled messages through SMTP.
    config (module): Loads account settings from TOML files.
    utils (module): Provides validation helpers for files and settings.

Example:
    from mdmail import SendRequest, compose_message, load_account

    account = load_account("work")
    request = SendRequest(body_path="notes.md", subject="Notes", to=("team@domain.com",))
    message = compose_message(account, request)
"""

from .addresses import Mailbox, MailboxList, parse_mailbox, parse_mailbox_list
from .attachments import AttachmentPart, build_attachment, build_attachments
from .config import AccountConfig, ServerConfig, load_account
from .content import RenderedBody, render_body
from .core import MailComposer, Message, SendRequest, assemble, compose_message
from .delivery import Credentials, SmtpRelay

__all__ = [
    "AccountConfig",
    "AttachmentPart",
    "Credentials",
    "MailComposer",
    "Mailbox",
    "MailboxList",
    "Message",
    "RenderedBody",
    "SendRequest",
    "ServerConfig",
    "SmtpRelay",
    "assemble",
    "build_attachment",
    "build_attachments",
    "compose_message",
    "load_account",
    "parse_mailbox",
    "parse_mailbox_list",
    "render_body",
]
