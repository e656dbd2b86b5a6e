"""Transactional email dispatch.

Renders a registered template, hands it to the email channel and records
the outcome in the notifications delivery log. Email is a secondary effect
everywhere it is used: ``Mailer.send`` never raises, it logs the failure and
reports False.
"""

import structlog
from protean.utils.globals import current_domain

from notifications.channel import get_email_channel
from notifications.channel.email_port import EmailPort
from notifications.domain import notifications
from notifications.notification.notification import NotificationStatus
from notifications.notification.recording import RecordEmailDispatch
from notifications.templates import get_template
from notifications.types import NotificationType

logger = structlog.get_logger(__name__)


class Mailer:
    def __init__(self, channel: EmailPort):
        self.channel = channel

    def send(self, notification_type: NotificationType, to: str, context: dict) -> bool:
        try:
            notification_type = NotificationType(notification_type)
            content = get_template(notification_type.value).render(context)
        except Exception as exc:
            logger.error("Email could not be rendered", notification_type=str(notification_type), to=to, error=str(exc))
            return False

        try:
            result = self.channel.send(
                to=to,
                subject=content["subject"],
                body=content["body"],
                html_body=content.get("html"),
            )
        except Exception as exc:
            result = {"message_id": None, "status": "failed", "error": str(exc)}

        sent = result.get("status") == "sent"
        if sent:
            logger.info(
                "Email sent",
                notification_type=notification_type.value,
                to=to,
                message_id=result.get("message_id"),
            )
        else:
            logger.error(
                "Email channel rejected message",
                notification_type=notification_type.value,
                to=to,
                error=result.get("error", "Unknown dispatch error"),
            )

        self._record(notification_type, to, content, result, sent)
        return sent

    def _record(self, notification_type: NotificationType, to: str, content: dict, result: dict, sent: bool) -> None:
        try:
            with notifications.domain_context():
                command = RecordEmailDispatch(
                    recipient=to,
                    notification_type=notification_type.value,
                    subject=content["subject"],
                    body=content["body"],
                    status=(NotificationStatus.SENT if sent else NotificationStatus.FAILED).value,
                    message_id=result.get("message_id"),
                    failure_reason=None if sent else result.get("error", "Unknown dispatch error"),
                )
                current_domain.process(command, asynchronous=False)
        except Exception as exc:
            logger.error("Email dispatch could not be recorded", to=to, error=str(exc))


def get_mailer() -> Mailer:
    return Mailer(get_email_channel())
