"""Delivery log: records the outcome of each email dispatch."""

from protean import handle
from protean.fields import String, Text
from protean.utils.globals import current_domain

from notifications.domain import notifications
from notifications.notification.notification import Notification, NotificationStatus
from notifications.types import NotificationType


@notifications.command(part_of="Notification")
class RecordEmailDispatch:
    recipient: String(required=True, max_length=254)
    notification_type: String(choices=NotificationType, required=True)
    subject: String(max_length=500)
    body: Text(required=True)
    status: String(choices=NotificationStatus, required=True)
    message_id: String(max_length=255)
    failure_reason: String(max_length=500)


@notifications.command_handler(part_of=Notification)
class RecordEmailDispatchHandler:
    @handle(RecordEmailDispatch)
    def record_email_dispatch(self, command):
        notification = Notification.create(
            recipient=command.recipient,
            notification_type=command.notification_type,
            subject=command.subject,
            body=command.body,
        )
        if command.status == NotificationStatus.SENT.value:
            notification.mark_sent(command.message_id)
        else:
            notification.mark_failed(command.failure_reason)

        current_domain.repository_for(Notification).add(notification)
        return str(notification.id)


def notifications_for(recipient: str) -> list[Notification]:
    repo = current_domain.repository_for(Notification)
    return repo._dao.query.filter(recipient=recipient).order_by("created_at").all().items
