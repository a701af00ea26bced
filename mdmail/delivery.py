import logging
from dataclasses import dataclass, field
from smtplib import SMTP, SMTP_SSL, SMTPException, SMTPRecipientsRefused
from typing import Union

from .core import Message
from .errors import DeliveryError

logger = logging.getLogger(__name__)

SSL_PORT = 465


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str = field(repr=False)


class SmtpRelay:
    """Hands assembled messages to an SMTP relay.

    Port 465 uses an implicit TLS connection; any other port connects in
    plain text and upgrades with STARTTLS before authenticating.

    Example:
        relay = SmtpRelay("smtp.domain.com")
        relay.deliver(message, Credentials("me@domain.com", "secret"))
    """

    def __init__(self, host: str, port: int = SSL_PORT, timeout: float = 30):
        """Initializes the relay.

        Args:
            host (str): SMTP server hostname or IP.
            port (int): SMTP port (default: 465).
            timeout (float): Socket timeout in seconds.
        """
        self.host = host
        self.port = port
        self.timeout = timeout

    def _connect(self, credentials: Credentials) -> Union[SMTP, SMTP_SSL]:
        """Establishes an authenticated SMTP connection.

        Returns:
            Union[SMTP, SMTP_SSL]: Authenticated SMTP connection object.
        """
        if self.port == SSL_PORT:
            smtp = SMTP_SSL(self.host, self.port, timeout=self.timeout)
        else:
            smtp = SMTP(self.host, self.port, timeout=self.timeout)

        try:
            if self.port != SSL_PORT:
                smtp.starttls()
            smtp.login(credentials.username, credentials.password)
        except Exception:
            smtp.close()
            raise
        return smtp

    def deliver(self, message: Message, credentials: Credentials) -> None:
        """Sends `message` once, to every To, Cc and Bcc recipient.

        The Bcc header is stripped from the transmitted copy; Bcc recipients
        are reached through the envelope only.

        Raises:
            DeliveryError: If connecting, authenticating or sending fails, or
                if the relay refuses any recipient.
                The transport's own exception is kept as `cause`.
        """
        recipients = message.recipients()
        logger.info("Sending %r to %d recipient(s) via %s:%s", message.subject, len(recipients), self.host, self.port)

        try:
            with self._connect(credentials) as smtp:
                refused = smtp.send_message(message.mime, from_addr=message.sender.address, to_addrs=recipients)
        except (SMTPException, OSError) as e:
            raise DeliveryError(e) from e

        if refused:
            raise DeliveryError(SMTPRecipientsRefused(refused))
        logger.info("Message accepted by %s", self.host)
