"""Parsing of mailbox strings into structured addresses.

Accepted forms are a bare address (``user@host``) and a display-name form
(``Name <user@host>``). Only syntax is checked, never deliverability.
"""

import logging
from dataclasses import dataclass
from email.errors import HeaderParseError
from email.headerregistry import Address
from email.utils import getaddresses
from re import compile as re_compile
from typing import Iterable, Iterator

from .errors import MalformedAddress

logger = logging.getLogger(__name__)

DOMAIN_PATTERN = re_compile(r"^[^\s@.\[\]()<>,;:\\\"]+(\.[^\s@.\[\]()<>,;:\\\"]+)*$")


@dataclass(frozen=True)
class Mailbox:
    """A single address with an optional display name."""

    address: str
    display_name: str | None = None

    def to_address(self) -> Address:
        return Address(display_name=self.display_name or "", addr_spec=self.address)

    def __str__(self) -> str:
        return str(self.to_address())


@dataclass(frozen=True)
class MailboxList:
    """Ordered mailboxes that populate one header (From, To, Cc or Bcc)."""

    role: str
    mailboxes: tuple[Mailbox, ...] = ()

    def __iter__(self) -> Iterator[Mailbox]:
        return iter(self.mailboxes)

    def __len__(self) -> int:
        return len(self.mailboxes)

    def __bool__(self) -> bool:
        return bool(self.mailboxes)

    def header_value(self) -> str:
        return ", ".join(str(mailbox) for mailbox in self.mailboxes)

    def addresses(self) -> list[str]:
        return [mailbox.address for mailbox in self.mailboxes]


def _check_addr_spec(raw: str, addr_spec: str) -> None:
    # the header parser drops folding whitespace inside an address
    if addr_spec not in raw:
        raise MalformedAddress(raw)
    local, at, domain = addr_spec.rpartition("@")
    if not at or not local or not domain:
        raise MalformedAddress(raw)
    if not DOMAIN_PATTERN.match(domain):
        raise MalformedAddress(raw)


def parse_mailbox(raw: str) -> Mailbox:
    """Parses `raw` into a Mailbox.

    Args:
        raw (str): ``user@host`` or ``Name <user@host>``.

    Returns:
        Mailbox: The parsed mailbox, display name set only when present.

    Raises:
        MalformedAddress: If `raw` is not exactly one syntactically valid address.

    Example:
        >>> parse_mailbox("Jane Doe <jane@example.com>")
        Mailbox(address='jane@example.com', display_name='Jane Doe')
    """
    if not isinstance(raw, str) or not raw.strip():
        raise MalformedAddress(raw)

    parsed = getaddresses([raw])
    if len(parsed) != 1:
        raise MalformedAddress(raw)

    name, addr_spec = parsed[0]
    addr_spec = addr_spec.strip()
    _check_addr_spec(raw, addr_spec)

    mailbox = Mailbox(address=addr_spec, display_name=name.strip() or None)
    try:
        # the email package re-parses the addr-spec with the RFC 5322 grammar
        mailbox.to_address()
    except (ValueError, HeaderParseError, IndexError) as e:
        raise MalformedAddress(raw) from e

    return mailbox


def parse_mailbox_list(raws: Iterable[str], role: str = "To") -> MailboxList:
    """Parses every string in `raws`, stopping at the first malformed one.

    Args:
        raws (Iterable[str]): Address strings, in header order.
        role (str): Header the list is destined for.

    Returns:
        MailboxList: Mailboxes in input order. May be empty.

    Raises:
        MalformedAddress: For the first string that fails to parse.
    """
    mailboxes = tuple(parse_mailbox(raw) for raw in raws)
    logger.debug("Parsed %d `%s` mailbox(es).", len(mailboxes), role)
    return MailboxList(role=role, mailboxes=mailboxes)
