"""Bearer-token authentication dependencies for FastAPI routes."""

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from identity.user.authentication import Principal, decode_access_token, unauthorized
from identity.user.directory import find_contact
from identity.user.user import UserStatus

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme)) -> Principal:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise unauthorized("Missing bearer token")

    principal = decode_access_token(credentials.credentials)

    contact = find_contact(principal.user_id)
    if contact is None or contact.status != UserStatus.ACTIVE.value:
        raise unauthorized("Account is not active")
    # Role changes take effect without waiting for the token to expire
    return Principal(user_id=contact.user_id, email=contact.email, role=contact.role)


def require_admin(principal: Principal = Depends(get_current_user)) -> Principal:
    if not principal.is_admin:
        raise HTTPException(status_code=403, detail="Admin role required")
    return principal


def ensure_self_or_admin(principal: Principal, user_id: str) -> None:
    if str(principal.user_id) != str(user_id) and not principal.is_admin:
        raise HTTPException(status_code=403, detail="You can only act on your own account")
