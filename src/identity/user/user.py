"""User aggregate: account, credentials and public profile.

Users are soft-deleted: removing an account moves it to ``inactive``.
Banned and inactive users cannot log in.
"""

import secrets
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, String, Text

from identity.domain import identity

DEFAULT_PROFILE_IMAGE = "default_profile_picture.png"


class UserStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    BANNED = "banned"


class UserRole(Enum):
    CLIENT = "client"
    ADMIN = "admin"


def generate_confirmation_token() -> str:
    return secrets.token_hex(30)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


@identity.aggregate(schema_name="users")
class User:
    """A storefront account, either a buyer (``client``) or a staff ``admin``."""

    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254, unique=True)
    password: String(required=True, max_length=100)
    username: String(max_length=50)
    description: Text()
    profile_image: String(max_length=500, default=DEFAULT_PROFILE_IMAGE)
    profile_image_id: String(max_length=255)
    banner_image: String(max_length=500)
    banner_image_id: String(max_length=255)
    email_verified: Boolean(default=False)
    token_confirmation: String(max_length=60)
    status: String(choices=UserStatus, default=UserStatus.ACTIVE.value)
    role: String(choices=UserRole, default=UserRole.CLIENT.value)
    banned_reason: String(max_length=255)
    created_at: DateTime(default=lambda: datetime.now(UTC))

    @invariant.post
    def banned_accounts_carry_a_reason(self):
        if self.status == UserStatus.BANNED.value and not self.banned_reason:
            raise ValidationError({"reason": ["A ban reason is required"]})

    @classmethod
    def register(
        cls,
        email: str,
        password_hash: str,
        name: str,
        username: str | None = None,
        description: str | None = None,
        role: UserRole = UserRole.CLIENT,
    ) -> "User":
        name = (name or "").strip()
        if not name:
            raise ValidationError({"name": ["Name cannot be blank"]})

        return cls(
            email=normalize_email(email),
            password=password_hash,
            name=name,
            username=username,
            description=description,
            profile_image=DEFAULT_PROFILE_IMAGE,
            email_verified=False,
            token_confirmation=generate_confirmation_token(),
            status=UserStatus.ACTIVE.value,
            role=UserRole(role).value,
        )

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE.value

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    def update_profile(
        self,
        name: str | None = None,
        username: str | None = None,
        description: str | None = None,
    ) -> None:
        if name is not None:
            if not name.strip():
                raise ValidationError({"name": ["Name cannot be blank"]})
            self.name = name.strip()
        if username is not None:
            self.username = username
        if description is not None:
            self.description = description

    def confirm_email(self) -> None:
        self.email_verified = True
        self.token_confirmation = None

    def deactivate(self) -> None:
        """Soft-delete the account. Banned accounts can be removed too and keep their ban reason."""
        if self.status == UserStatus.INACTIVE.value:
            raise ValidationError({"status": ["Account is already removed"]})
        self.status = UserStatus.INACTIVE.value

    def ban(self, reason: str) -> None:
        if not reason or not reason.strip():
            raise ValidationError({"reason": ["A ban reason is required"]})
        if self.status == UserStatus.BANNED.value:
            raise ValidationError({"status": ["User is already banned"]})
        self.banned_reason = reason.strip()
        self.status = UserStatus.BANNED.value

    def set_profile_image(self, url: str, public_id: str | None) -> str | None:
        """Replace the profile image. Returns the public id of the replaced image."""
        previous = self.profile_image_id
        self.profile_image = url
        self.profile_image_id = public_id
        return previous

    def clear_profile_image(self) -> str | None:
        return self.set_profile_image(DEFAULT_PROFILE_IMAGE, None)

    def set_banner_image(self, url: str, public_id: str | None) -> str | None:
        previous = self.banner_image_id
        self.banner_image = url
        self.banner_image_id = public_id
        return previous
