"""Notification aggregate: one email handed to the email channel.

State Machine:
    PENDING → SENT
    PENDING → FAILED
    SENT, FAILED    (terminal)
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, String, Text

from notifications.domain import notifications
from notifications.types import NotificationType


class NotificationStatus(Enum):
    PENDING = "Pending"
    SENT = "Sent"
    FAILED = "Failed"


_VALID_TRANSITIONS = {
    NotificationStatus.PENDING: {NotificationStatus.SENT, NotificationStatus.FAILED},
    NotificationStatus.SENT: set(),
    NotificationStatus.FAILED: set(),
}


@notifications.aggregate
class Notification:
    recipient: String(required=True, max_length=254)
    notification_type: String(choices=NotificationType, required=True)
    subject: String(max_length=500)
    body: Text(required=True)
    status: String(choices=NotificationStatus, default=NotificationStatus.PENDING.value)
    message_id: String(max_length=255)
    failure_reason: String(max_length=500)
    created_at: DateTime()
    sent_at: DateTime()

    @classmethod
    def create(cls, recipient, notification_type, subject, body):
        return cls(
            recipient=recipient,
            notification_type=NotificationType(notification_type).value,
            subject=subject,
            body=body,
            status=NotificationStatus.PENDING.value,
            created_at=datetime.now(UTC),
        )

    def _transition_to(self, new_status: NotificationStatus) -> None:
        current = NotificationStatus(self.status)
        if new_status not in _VALID_TRANSITIONS[current]:
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {new_status.value}"]})
        self.status = new_status.value

    def mark_sent(self, message_id: str | None = None) -> None:
        self._transition_to(NotificationStatus.SENT)
        self.message_id = message_id
        self.sent_at = datetime.now(UTC)

    def mark_failed(self, reason: str) -> None:
        self._transition_to(NotificationStatus.FAILED)
        self.failure_reason = (reason or "Unknown dispatch error")[:500]
