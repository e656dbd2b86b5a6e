"""SMTP email adapter.

Keeps one authenticated SMTP connection open for the life of the process and
reconnects once if the server dropped it between sends.
"""

import smtplib
import threading
from email.message import EmailMessage
from email.utils import make_msgid

import structlog

from notifications.channel.email_port import DispatchResult, EmailPort

logger = structlog.get_logger(__name__)


class SMTPEmailAdapter(EmailPort):
    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout: float = 15.0,
    ):
        self.host = host
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout
        self._connection: smtplib.SMTP | None = None
        self._lock = threading.Lock()

    def _connect(self) -> smtplib.SMTP:
        connection = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        if self.use_tls:
            connection.starttls()
        if self.username and self.password:
            connection.login(self.username, self.password)
        return connection

    def _build_message(self, to: str, subject: str, body: str, html_body: str | None) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message["Message-ID"] = make_msgid(domain="gamevault")
        message.set_content(body)
        if html_body:
            message.add_alternative(html_body, subtype="html")
        return message

    def send(
        self,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
    ) -> DispatchResult:
        message = self._build_message(to, subject, body, html_body)

        with self._lock:
            try:
                if self._connection is None:
                    self._connection = self._connect()
                try:
                    self._connection.send_message(message)
                except smtplib.SMTPServerDisconnected:
                    self._connection = self._connect()
                    self._connection.send_message(message)
            except (smtplib.SMTPException, OSError) as exc:
                self._connection = None
                logger.error("SMTP send failed", to=to, subject=subject, error=str(exc))
                return {"message_id": None, "status": "failed", "error": str(exc)}

        return {"message_id": message["Message-ID"], "status": "sent"}

    def close(self) -> None:
        with self._lock:
            if self._connection is not None:
                try:
                    self._connection.quit()
                except smtplib.SMTPException as exc:
                    logger.warning("SMTP connection did not close cleanly", error=str(exc))
                finally:
                    self._connection = None
