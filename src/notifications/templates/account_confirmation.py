"""Account confirmation template with the email verification link."""

from notifications.types import NotificationType


class AccountConfirmationTemplate:
    notification_type = NotificationType.ACCOUNT_CONFIRMATION.value

    @staticmethod
    def render(context: dict) -> dict:
        name = context.get("name") or "there"
        confirmation_url = context["confirmation_url"]
        return {
            "subject": "Confirm your GameVault email",
            "body": (
                f"Hi {name},\n\n"
                "Please confirm your email address by opening the link below:\n\n"
                f"{confirmation_url}\n\n"
                "If you did not create a GameVault account, you can ignore this message."
            ),
            "html": (
                f"<p>Hi {name},</p>"
                "<p>Please confirm your email address:</p>"
                f'<p><a href="{confirmation_url}">Confirm my email</a></p>'
                "<p>If you did not create a GameVault account, you can ignore this message.</p>"
            ),
        }
