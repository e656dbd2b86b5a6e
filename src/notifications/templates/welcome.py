"""Welcome template, sent when a user registers."""

from notifications.types import NotificationType


class WelcomeTemplate:
    notification_type = NotificationType.WELCOME.value

    @staticmethod
    def render(context: dict) -> dict:
        name = context.get("name") or "there"
        return {
            "subject": f"Welcome to GameVault, {name}!",
            "body": (
                f"Hi {name},\n\n"
                "Thanks for joining GameVault! Your account is ready.\n\n"
                "Browse the store for the latest releases, collector editions "
                "and digital keys.\n\n"
                "Happy gaming!\n"
                "The GameVault Team"
            ),
        }
