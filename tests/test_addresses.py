"""Tests for mailbox parsing."""

import pytest

from mdmail.addresses import Mailbox, MailboxList, parse_mailbox, parse_mailbox_list
from mdmail.errors import MalformedAddress, MdmailError


class TestParseMailbox:
    def test_bare_address(self):
        mailbox = parse_mailbox("user@example.com")
        assert mailbox == Mailbox(address="user@example.com")
        assert mailbox.display_name is None
        assert str(mailbox) == "user@example.com"

    def test_display_name_form(self):
        mailbox = parse_mailbox("Jane Doe <jane@example.com>")
        assert mailbox.address == "jane@example.com"
        assert mailbox.display_name == "Jane Doe"
        assert str(mailbox) == "Jane Doe <jane@example.com>"

    def test_surrounding_whitespace_is_stripped(self):
        assert parse_mailbox("  user@example.com  ").address == "user@example.com"

    def test_single_label_domain(self):
        assert parse_mailbox("root@localhost").address == "root@localhost"

    @pytest.mark.parametrize(
        "raw",
        [
            "user@example.com",
            "Jane Doe <jane@example.com>",
            '"Doe, Jane" <jane@mail.example.org>',
            "first.last+tag@sub.example.co.uk",
        ],
    )
    def test_round_trip(self, raw):
        mailbox = parse_mailbox(raw)
        assert parse_mailbox(str(mailbox)) == mailbox

    def test_quoted_name_with_comma(self):
        mailbox = parse_mailbox('"Doe, Jane" <jane@example.com>')
        assert mailbox.display_name == "Doe, Jane"
        assert str(mailbox) == '"Doe, Jane" <jane@example.com>'

    @pytest.mark.parametrize(
        "raw",
        [
            "not-an-email",
            "user@",
            "@example.com",
            "user@.com",
            "user@example..com",
            "Jane <>",
            "",
            "   ",
            "a@x.com, b@y.com",
            "user@exa mple.com",
            "us er@x.com",
            "Jane <user @x.com>",
        ],
    )
    def test_malformed(self, raw):
        with pytest.raises(MalformedAddress) as exc_info:
            parse_mailbox(raw)
        assert exc_info.value.raw == raw

    def test_error_names_the_input(self):
        with pytest.raises(MdmailError, match="Malformed address: not-an-email"):
            parse_mailbox("not-an-email")


class TestParseMailboxList:
    def test_keeps_order(self):
        mailboxes = parse_mailbox_list(["b@x.com", "A <a@x.com>", "c@x.com"], "Cc")
        assert isinstance(mailboxes, MailboxList)
        assert mailboxes.role == "Cc"
        assert mailboxes.addresses() == ["b@x.com", "a@x.com", "c@x.com"]
        assert len(mailboxes) == 3

    def test_empty_list_is_valid(self):
        mailboxes = parse_mailbox_list([], "Bcc")
        assert not mailboxes
        assert mailboxes.header_value() == ""

    def test_header_value(self):
        mailboxes = parse_mailbox_list(["A <a@x.com>", "b@x.com"])
        assert mailboxes.header_value() == "A <a@x.com>, b@x.com"

    def test_fails_on_first_malformed(self):
        with pytest.raises(MalformedAddress) as exc_info:
            parse_mailbox_list(["a@x.com", "broken", "also broken"])
        assert exc_info.value.raw == "broken"
