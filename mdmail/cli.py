"""Command-line interface for mdmail.

Usage:
    mdmail <account> <body.md> --subject "..." --to someone@example.com [options]

Example:
    $ mdmail work notes/weekly.md -s "Weekly notes" \\
        --to "Team <team@example.com>" --cc boss@example.com \\
        -a reports/monthly.pdf -p secret
"""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from .config import AccountConfig, load_account
from .core import Message, SendRequest, compose_message
from .delivery import Credentials, SmtpRelay
from .errors import MdmailError

console = Console()
err_console = Console(stderr=True)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    err_console.print(f"[red]Error:[/red] {escape(message)}", soft_wrap=True)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {escape(message)}", soft_wrap=True)


def send_mail(account: AccountConfig, request: SendRequest, relay: SmtpRelay | None = None) -> Message:
    """Composes the message for `request` and delivers it once."""
    message = compose_message(account, request)
    relay = relay or SmtpRelay(account.smtp.hostname, account.smtp.port)
    relay.deliver(message, Credentials(account.smtp.username, request.password))
    return message


@click.command()
@click.version_option(package_name="mdmail")
@click.argument("account")
@click.argument("path", type=click.Path(path_type=str))
@click.option("--password", "-p", prompt=True, hide_input=True, envvar="MDMAIL_PASSWORD",
              help="Password for the SMTP account.")
@click.option("--subject", "-s", required=True, help="`Subject` header.")
@click.option("--to", "to", multiple=True, required=True,
              help="`To` header: main recipient(s). Repeat for several.")
@click.option("--cc", multiple=True, help="`Cc` header: send a copy to these addresses.")
@click.option("--bcc", multiple=True, help="`Bcc` header: like Cc, hidden from other recipients.")
@click.option("--attach", "-a", "attachments", multiple=True, type=click.Path(path_type=str),
              help="File to attach. Repeat for several.")
@click.option("--config-dir", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Directory holding <account>.toml (default: platform config dir).")
@click.option("--verbose", "-v", is_flag=True, help="Log composition and delivery steps.")
def main(
    account: str,
    path: str,
    password: str,
    subject: str,
    to: tuple[str, ...],
    cc: tuple[str, ...],
    bcc: tuple[str, ...],
    attachments: tuple[str, ...],
    config_dir: Path | None,
    verbose: bool,
) -> None:
    """Send the markdown file PATH as an email from ACCOUNT.

    The body is sent both as plain text and as HTML rendered from markdown.
    ACCOUNT names a TOML file in the configuration directory.
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)

    request = SendRequest(
        body_path=path,
        subject=subject,
        to=to,
        cc=cc,
        bcc=bcc,
        attachment_paths=attachments,
        password=password,
    )

    try:
        config = load_account(account, config_dir)
        send_mail(config, request)
    except MdmailError as e:
        print_error(str(e))
        sys.exit(1)

    print_success("Email sent successfully!")
