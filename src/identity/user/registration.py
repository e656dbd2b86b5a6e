"""User registration and email confirmation: commands, handler and mailing."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import String, Text
from protean.utils.globals import current_domain

from identity.domain import identity
from identity.user.authentication import find_user_by_email, hash_password
from identity.user.user import User, UserRole
from notifications.dispatch import Mailer
from notifications.types import NotificationType
from shared.config import get_settings

logger = structlog.get_logger(__name__)


@identity.command(part_of="User")
class RegisterUser:
    """Open a new account. The password arrives in clear and is hashed by the handler."""

    email: String(required=True, max_length=254)
    password: String(required=True, max_length=72)
    name: String(required=True, max_length=100)
    username: String(max_length=50)
    description: Text()
    role: String(choices=UserRole, default=UserRole.CLIENT.value)


@identity.command(part_of="User")
class ConfirmEmail:
    token: String(required=True, max_length=255)


@identity.command_handler(part_of=User)
class RegistrationHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        if find_user_by_email(command.email) is not None:
            raise ValidationError({"email": ["Email already exists"]})

        user = User.register(
            email=command.email,
            password_hash=hash_password(command.password),
            name=command.name,
            username=command.username,
            description=command.description,
            role=UserRole(command.role),
        )
        current_domain.repository_for(User).add(user)

        logger.info("User registered", user_id=str(user.id), role=user.role)
        return str(user.id)

    @handle(ConfirmEmail)
    def confirm_email(self, command):
        repo = current_domain.repository_for(User)
        user = repo._dao.query.filter(token_confirmation=command.token).all().first
        if user is None:
            raise ObjectNotFoundError("Confirmation token not found")

        user.confirm_email()
        repo.add(user)

        logger.info("Email confirmed", user_id=str(user.id))
        return str(user.id)


def register_user(
    mailer: Mailer,
    email: str,
    password: str,
    name: str,
    username: str | None = None,
    description: str | None = None,
    role: UserRole = UserRole.CLIENT,
) -> User:
    """Open the account, then send the confirmation and welcome emails.

    The emails go out once the account is committed; a failed send is logged
    by the mailer and does not undo the registration.
    """
    user_id = current_domain.process(
        RegisterUser(
            email=email,
            password=password,
            name=name,
            username=username,
            description=description,
            role=UserRole(role).value,
        ),
        asynchronous=False,
    )
    user = current_domain.repository_for(User).get(user_id)

    confirmation_url = f"{get_settings().public_base_url}/mail/verified-email/{user.token_confirmation}"
    mailer.send(
        NotificationType.ACCOUNT_CONFIRMATION,
        user.email,
        {"name": user.name, "confirmation_url": confirmation_url},
    )
    mailer.send(NotificationType.WELCOME, user.email, {"name": user.name})
    return user


def confirm_email(token: str) -> User:
    user_id = current_domain.process(ConfirmEmail(token=token), asynchronous=False)
    return current_domain.repository_for(User).get(user_id)
