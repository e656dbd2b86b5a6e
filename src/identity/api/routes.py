"""FastAPI endpoints for the Identity domain."""

import uuid

from fastapi import APIRouter, Depends, File, Query, UploadFile

from files.storage import FileStorage, get_storage
from files.upload import read_upload
from identity.api.schemas import (
    BanUserRequest,
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    UpdateUserRequest,
    UserResponse,
)
from identity.api.security import ensure_self_or_admin, get_current_user, require_admin
from identity.user.authentication import Principal, login
from identity.user.images import remove_profile_image, upload_banner_image, upload_profile_image
from identity.user.listing import list_users
from identity.user.profile import ban_user, change_password, get_user, remove_user, update_profile
from identity.user.registration import register_user
from notifications.dispatch import Mailer, get_mailer
from shared.pagination import MAX_PAGE_SIZE
from shared.schemas import MessageResponse, PageResponse, page_response

auth_router = APIRouter(prefix="/auth", tags=["auth"])
user_router = APIRouter(prefix="/users", tags=["users"])


# --- Auth endpoints ---


@auth_router.post("/register", status_code=201, response_model=MessageResponse)
def register(body: RegisterRequest, mailer: Mailer = Depends(get_mailer)) -> MessageResponse:
    register_user(
        mailer,
        email=body.email,
        password=body.password,
        name=body.name,
        username=body.username,
        description=body.description,
    )
    return MessageResponse(message="User registration was successful")


@auth_router.post("/login", response_model=LoginResponse)
def login_user(body: LoginRequest) -> LoginResponse:
    result = login(body.email, body.password)
    return LoginResponse(user=UserResponse.model_validate(result.user), access_token=result.access_token)


# --- User endpoints ---


@user_router.get("", response_model=PageResponse[UserResponse])
def get_users(
    limit: int = Query(..., ge=1, le=MAX_PAGE_SIZE),
    cursor: uuid.UUID | None = None,
    _: Principal = Depends(require_admin),
):
    return page_response(UserResponse, list_users(limit, str(cursor) if cursor else None))


@user_router.get("/me", response_model=UserResponse)
def get_me(principal: Principal = Depends(get_current_user)):
    return UserResponse.model_validate(get_user(principal.user_id))


@user_router.get("/{user_id}", response_model=UserResponse)
def get_user_by_id(user_id: uuid.UUID, principal: Principal = Depends(get_current_user)):
    ensure_self_or_admin(principal, str(user_id))
    return UserResponse.model_validate(get_user(str(user_id)))


@user_router.patch("/{user_id}", response_model=UserResponse)
def update_user(user_id: uuid.UUID, body: UpdateUserRequest, principal: Principal = Depends(get_current_user)):
    ensure_self_or_admin(principal, str(user_id))
    user = update_profile(str(user_id), name=body.name, username=body.username, description=body.description)
    return UserResponse.model_validate(user)


@user_router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(user_id: uuid.UUID, principal: Principal = Depends(get_current_user)):
    ensure_self_or_admin(principal, str(user_id))
    remove_user(str(user_id))
    return MessageResponse(message="User deleted successfully")


@user_router.patch("/{user_id}/password", response_model=MessageResponse)
def update_password(
    user_id: uuid.UUID,
    body: ChangePasswordRequest,
    principal: Principal = Depends(get_current_user),
):
    ensure_self_or_admin(principal, str(user_id))
    change_password(str(user_id), body.old_password, body.new_password)
    return MessageResponse(message="User password updated.")


@user_router.patch("/{user_id}/ban", response_model=UserResponse)
def ban(user_id: uuid.UUID, body: BanUserRequest, _: Principal = Depends(require_admin)):
    return UserResponse.model_validate(ban_user(str(user_id), body.reason))


@user_router.post("/{user_id}/profile-image", response_model=UserResponse)
def set_profile_image(
    user_id: uuid.UUID,
    file: UploadFile = File(...),
    principal: Principal = Depends(get_current_user),
    storage: FileStorage = Depends(get_storage),
):
    ensure_self_or_admin(principal, str(user_id))
    return UserResponse.model_validate(upload_profile_image(storage, str(user_id), read_upload(file)))


@user_router.delete("/{user_id}/profile-image", response_model=UserResponse)
def delete_profile_image(
    user_id: uuid.UUID,
    principal: Principal = Depends(get_current_user),
    storage: FileStorage = Depends(get_storage),
):
    ensure_self_or_admin(principal, str(user_id))
    return UserResponse.model_validate(remove_profile_image(storage, str(user_id)))


@user_router.post("/{user_id}/banner-image", response_model=UserResponse)
def set_banner_image(
    user_id: uuid.UUID,
    file: UploadFile = File(...),
    principal: Principal = Depends(get_current_user),
    storage: FileStorage = Depends(get_storage),
):
    ensure_self_or_admin(principal, str(user_id))
    return UserResponse.model_validate(upload_banner_image(storage, str(user_id), read_upload(file)))
