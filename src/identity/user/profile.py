"""Account maintenance: profile edits, password change, removal and bans."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from identity.domain import identity
from identity.user.authentication import hash_password, verify_password
from identity.user.user import User, UserStatus

logger = structlog.get_logger(__name__)


def get_user(user_id: str) -> User:
    user = current_domain.repository_for(User)._dao.query.filter(id=str(user_id)).all().first
    if user is None:
        raise ObjectNotFoundError("User by ID not found")
    return user


@identity.command(part_of="User")
class UpdateProfile:
    user_id: Identifier(required=True)
    name: String(max_length=100)
    username: String(max_length=50)
    description: Text()


@identity.command(part_of="User")
class ChangePassword:
    user_id: Identifier(required=True)
    old_password: String(required=True, max_length=72)
    new_password: String(required=True, max_length=72)


@identity.command(part_of="User")
class RemoveUser:
    user_id: Identifier(required=True)


@identity.command(part_of="User")
class BanUser:
    user_id: Identifier(required=True)
    reason: String(required=True, max_length=255)


@identity.command_handler(part_of=User)
class ManageAccountHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        user = get_user(command.user_id)
        user.update_profile(name=command.name, username=command.username, description=command.description)
        current_domain.repository_for(User).add(user)

    @handle(ChangePassword)
    def change_password(self, command):
        user = get_user(command.user_id)
        if not verify_password(command.old_password, user.password):
            raise ValidationError({"oldPassword": ["Old password isn't equal to actual password."]})
        if command.old_password == command.new_password:
            raise ValidationError({"newPassword": ["New password must differ from the current one"]})

        user.password = hash_password(command.new_password)
        current_domain.repository_for(User).add(user)
        logger.info("Password changed", user_id=str(user.id))

    @handle(RemoveUser)
    def remove_user(self, command):
        user = get_user(command.user_id)
        # Already removed
        if user.status == UserStatus.INACTIVE.value:
            raise ObjectNotFoundError("User by ID not found")

        user.deactivate()
        current_domain.repository_for(User).add(user)
        logger.info("User removed", user_id=str(user.id), banned=bool(user.banned_reason))

    @handle(BanUser)
    def ban_user(self, command):
        user = get_user(command.user_id)
        user.ban(command.reason)
        current_domain.repository_for(User).add(user)
        logger.info("User banned", user_id=str(user.id), reason=user.banned_reason)


def update_profile(
    user_id: str,
    name: str | None = None,
    username: str | None = None,
    description: str | None = None,
) -> User:
    current_domain.process(
        UpdateProfile(user_id=str(user_id), name=name, username=username, description=description),
        asynchronous=False,
    )
    return get_user(user_id)


def change_password(user_id: str, old_password: str, new_password: str) -> User:
    current_domain.process(
        ChangePassword(user_id=str(user_id), old_password=old_password, new_password=new_password),
        asynchronous=False,
    )
    return get_user(user_id)


def remove_user(user_id: str) -> User:
    current_domain.process(RemoveUser(user_id=str(user_id)), asynchronous=False)
    return get_user(user_id)


def ban_user(user_id: str, reason: str) -> User:
    current_domain.process(BanUser(user_id=str(user_id), reason=reason), asynchronous=False)
    return get_user(user_id)
