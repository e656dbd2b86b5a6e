"""Credentials: password hashing, access tokens and login."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import bcrypt
import structlog
from fastapi import HTTPException
from jose import JWTError, jwt
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from identity.user.user import User, UserRole, UserStatus, normalize_email
from shared.config import get_settings

logger = structlog.get_logger(__name__)

BCRYPT_ROUNDS = 10
# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    encoded = _encode_password(password)
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_encode_password(password), password_hash.encode("utf-8"))
    except ValidationError:
        return False


def _encode_password(password: str) -> bytes:
    encoded = (password or "").encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValidationError({"password": [f"Password cannot exceed {MAX_PASSWORD_BYTES} bytes"]})
    return encoded


def unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, as carried by an access token."""

    user_id: str
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value


def create_access_token(user: User) -> str:
    settings = get_settings()
    now = datetime.now(UTC)
    claims = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=settings.jwt_expires_minutes)).timestamp()),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Principal:
    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return Principal(user_id=str(claims["sub"]), email=claims["email"], role=claims["role"])
    except (JWTError, KeyError) as exc:
        raise unauthorized("Invalid or expired token") from exc


def find_user_by_email(email: str) -> User | None:
    repo = current_domain.repository_for(User)
    return repo._dao.query.filter(email=normalize_email(email)).all().first


@dataclass(frozen=True)
class LoginResult:
    user: User
    access_token: str


def login(email: str, password: str) -> LoginResult:
    user = find_user_by_email(email)
    if user is None:
        raise ObjectNotFoundError("User not exists")

    if not verify_password(password, user.password):
        logger.info("Login rejected, bad password", user_id=str(user.id))
        raise unauthorized("Invalid credentials")

    if user.status != UserStatus.ACTIVE.value:
        logger.info("Login rejected, account not active", user_id=str(user.id), status=user.status)
        raise unauthorized(f"Account is {user.status}")

    return LoginResult(user=user, access_token=create_access_token(user))
