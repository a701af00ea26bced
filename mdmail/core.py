import logging
from dataclasses import dataclass, field, replace
from email.errors import MessageError
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.policy import SMTP
from email.utils import formatdate, make_msgid
from typing import Sequence

from .addresses import Mailbox, MailboxList, parse_mailbox
from .attachments import AttachmentPart, build_attachment
from .config import AccountConfig
from .content import RenderedBody, render_body
from .errors import BuildFailure, EmptyRecipients

logger = logging.getLogger(__name__)

POLICY = SMTP
RECIPIENT_ROLES = ("To", "Cc", "Bcc")
BODY_HEADERS = ("MIME-Version", "Content-Type")


@dataclass(frozen=True)
class SendRequest:
    """What to send for a single run, as supplied on the command line."""

    body_path: str
    subject: str
    to: tuple[str, ...]
    cc: tuple[str, ...] = ()
    bcc: tuple[str, ...] = ()
    attachment_paths: tuple[str, ...] = ()
    password: str = field(default="", repr=False)


@dataclass(frozen=True)
class Message:
    """A fully assembled message and the MIME tree built from it.

    Only `assemble` creates instances; the delivery gateway reads them.
    """

    sender: Mailbox
    to: MailboxList
    cc: MailboxList
    bcc: MailboxList
    subject: str
    body: RenderedBody
    attachments: tuple[AttachmentPart, ...]
    mime: MIMEMultipart = field(repr=False, compare=False)

    def recipients(self) -> list[str]:
        """Envelope recipients: every To, Cc and Bcc address, in that order."""
        return self.to.addresses() + self.cc.addresses() + self.bcc.addresses()

    def as_bytes(self) -> bytes:
        return self.mime.as_bytes(policy=POLICY)


def _build_alternative(body: RenderedBody) -> MIMEMultipart:
    # plain first, html last: readers prefer the last alternative they support
    alternative = MIMEMultipart("alternative", policy=POLICY)
    alternative.attach(MIMEText(body.plain_text, "plain", "utf-8", policy=POLICY))
    alternative.attach(MIMEText(body.html, "html", "utf-8", policy=POLICY))
    return alternative


def _build_mime(
    sender: Mailbox,
    to: MailboxList,
    cc: MailboxList,
    bcc: MailboxList,
    subject: str,
    body: RenderedBody,
    attachments: Sequence[AttachmentPart],
) -> MIMEMultipart:
    root = _build_alternative(body)

    if attachments:
        mixed = MIMEMultipart("mixed", policy=POLICY)
        mixed.attach(root)
        for attachment in attachments:
            mixed.attach(attachment.to_mime(POLICY))
        root = mixed

    root["From"] = str(sender)
    root["Subject"] = subject
    root["To"] = to.header_value()
    if cc:
        root["Cc"] = cc.header_value()
    if bcc:
        root["Bcc"] = bcc.header_value()

    root["Date"] = formatdate(localtime=True)
    root["Message-ID"] = make_msgid(domain=sender.address.rpartition("@")[2])

    # body structure headers go after the addressing headers
    for name in BODY_HEADERS:
        value = root[name]
        del root[name]
        root[name] = value
    return root


def assemble(
    sender: Mailbox,
    to: MailboxList,
    cc: MailboxList,
    bcc: MailboxList,
    subject: str,
    body: RenderedBody,
    attachments: Sequence[AttachmentPart] = (),
) -> Message:
    """Assembles headers, body alternatives and attachments into one Message.

    The plain-text and HTML renderings are grouped in a ``multipart/alternative``
    part. With attachments, that group becomes the first child of a
    ``multipart/mixed`` container followed by each attachment in order;
    without attachments it is the top-level body. Cc and Bcc headers are
    omitted when their lists are empty.

    Args:
        sender (Mailbox): The `From` mailbox.
        to (MailboxList): Main recipients. Must not be empty.
        cc (MailboxList): Carbon copy recipients. May be empty.
        bcc (MailboxList): Blind carbon copy recipients. May be empty.
        subject (str): `Subject` header.
        body (RenderedBody): Plain text and HTML renderings.
        attachments (Sequence[AttachmentPart]): Files to attach, in order.

    Returns:
        Message: The immutable assembled message.

    Raises:
        EmptyRecipients: If `sender` is missing or `to` is empty.
        BuildFailure: If a header or part cannot be composed.
    """
    if not sender:
        raise EmptyRecipients("From")
    if not to:
        raise EmptyRecipients("To")

    attachments = tuple(attachments)
    try:
        mime = _build_mime(sender, to, cc, bcc, subject, body, attachments)
    except (ValueError, TypeError, MessageError) as e:
        raise BuildFailure(e) from e

    logger.debug(
        "Assembled message for %d recipient(s) with %d attachment(s).",
        len(to) + len(cc) + len(bcc),
        len(attachments),
    )
    return Message(
        sender=sender,
        to=to,
        cc=cc,
        bcc=bcc,
        subject=subject,
        body=body,
        attachments=attachments,
        mime=mime,
    )


class MailComposer:
    """Accumulates the pieces of a message and assembles them on `build`.

    Nothing is nested until `build` is called, so parts can be added in any
    order and the final structure depends only on what was collected.

    Example:
        composer = MailComposer(parse_mailbox("Jane <jane@example.com>"))
        composer.subject = "Weekly notes"
        composer.add_recipient("team@example.com")
        composer.set_body(render_body("notes.md"))
        composer.add_attachment(build_attachment("report.pdf"))
        message = composer.build()
    """

    def __init__(self, sender: Mailbox):
        self.sender = sender
        self.subject = ""
        self.body: RenderedBody | None = None
        self.recipients: dict[str, list[Mailbox]] = {role: [] for role in RECIPIENT_ROLES}
        self.attachments: list[AttachmentPart] = []

    def add_recipient(self, raw: str, role: str = "To") -> Mailbox:
        """Parses `raw` and adds it to the `role` header.

        Raises:
            ValueError: If `role` is not To, Cc or Bcc.
            MalformedAddress: If `raw` is not a valid mailbox.
        """
        if role not in self.recipients:
            raise ValueError(f"Unknown recipient role: {role}")
        mailbox = parse_mailbox(raw)
        self.recipients[role].append(mailbox)
        return mailbox

    def set_body(self, body: RenderedBody) -> None:
        self.body = body

    def add_attachment(self, attachment: AttachmentPart) -> None:
        self.attachments.append(attachment)

    def clear_attachments(self) -> None:
        self.attachments = []

    def mailbox_list(self, role: str) -> MailboxList:
        return MailboxList(role=role, mailboxes=tuple(self.recipients[role]))

    def build(self) -> Message:
        """Assembles everything collected so far. See `assemble`.

        Raises:
            BuildFailure: If no body was set.
        """
        if self.body is None:
            raise BuildFailure("message has no body")
        return assemble(
            self.sender,
            self.mailbox_list("To"),
            self.mailbox_list("Cc"),
            self.mailbox_list("Bcc"),
            self.subject,
            self.body,
            self.attachments,
        )


def compose_message(account: AccountConfig, request: SendRequest) -> Message:
    """Composes the message for one run from account settings and a request.

    Addresses are parsed first, so a malformed address fails before any file
    is read. Then the body is rendered and the attachments are read in order.

    Raises:
        MdmailError: Any parsing, file or assembly error, unchanged.
    """
    sender = replace(parse_mailbox(account.email), display_name=account.name)
    composer = MailComposer(sender)
    composer.subject = request.subject

    for role, raws in zip(RECIPIENT_ROLES, (request.to, request.cc, request.bcc)):
        for raw in raws:
            composer.add_recipient(raw, role)

    composer.set_body(render_body(request.body_path, template=account.html_template, subject=request.subject))

    for path in request.attachment_paths:
        composer.add_attachment(build_attachment(path, account.mime_types))

    return composer.build()
