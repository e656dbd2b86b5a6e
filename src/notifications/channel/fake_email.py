"""In-memory email channel used when no mail host is configured.

Messages land in ``sent_emails`` so tests (and a developer without SMTP
credentials) can read back exactly what a buyer would have received. The
adapter can refuse all mail, or only mail to specific addresses, which is
how the "email failure never fails the request" paths are exercised.
"""

from uuid import uuid4

from notifications.channel.email_port import DispatchResult, EmailPort

DEFAULT_FAILURE = "Email delivery failed"


class FakeEmailAdapter(EmailPort):
    def __init__(self):
        self.sent_emails: list[dict] = []
        self.should_succeed = True
        self.failure_reason = DEFAULT_FAILURE
        self.failing_recipients: set[str] = set()
        self.closed = False

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = DEFAULT_FAILURE,
        failing_recipients: set[str] | None = None,
    ):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.failing_recipients = set(failing_recipients or ())

    def send(self, to: str, subject: str, body: str, html_body: str | None = None) -> DispatchResult:
        # Like SMTP, a closed channel reopens on the next send
        self.closed = False

        if not self.should_succeed or to in self.failing_recipients:
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        message_id = f"email-{uuid4().hex[:12]}"
        self.sent_emails.append(
            {"message_id": message_id, "to": to, "subject": subject, "body": body, "html_body": html_body}
        )
        return {"message_id": message_id, "status": "sent"}

    def close(self) -> None:
        self.closed = True

    def sent_to(self, address: str) -> list[dict]:
        return [email for email in self.sent_emails if email["to"] == address]

    def reset(self):
        self.sent_emails.clear()
        self.closed = False
        self.configure()
