"""Profile and banner images.

The file is uploaded first and the account only points at it once the
command commits. A replaced image is deleted from storage afterwards; if
the command fails, the fresh upload is deleted instead.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from files.storage.port import FileStorage, StoredFile
from files.upload import Upload, discard_stored, upload_image
from identity.domain import identity
from identity.user.profile import get_user
from identity.user.user import User
from shared.config import get_settings


@identity.command(part_of="User")
class SetProfileImage:
    user_id: Identifier(required=True)
    url: String(required=True, max_length=500)
    public_id: String(max_length=255)


@identity.command(part_of="User")
class ClearProfileImage:
    user_id: Identifier(required=True)


@identity.command(part_of="User")
class SetBannerImage:
    user_id: Identifier(required=True)
    url: String(required=True, max_length=500)
    public_id: String(max_length=255)


@identity.command_handler(part_of=User)
class UserImagesHandler:
    """Each handler returns the public id of the image it replaced, if any."""

    @handle(SetProfileImage)
    def set_profile_image(self, command):
        user = get_user(command.user_id)
        previous = user.set_profile_image(command.url, command.public_id)
        current_domain.repository_for(User).add(user)
        return previous

    @handle(ClearProfileImage)
    def clear_profile_image(self, command):
        user = get_user(command.user_id)
        previous = user.clear_profile_image()
        current_domain.repository_for(User).add(user)
        return previous

    @handle(SetBannerImage)
    def set_banner_image(self, command):
        user = get_user(command.user_id)
        previous = user.set_banner_image(command.url, command.public_id)
        current_domain.repository_for(User).add(user)
        return previous


def _replace_image(storage: FileStorage, user_id: str, upload: Upload, folder: str, command_cls) -> User:
    get_user(user_id)
    settings = get_settings()
    stored: StoredFile = upload_image(
        storage, upload, settings.max_upload_bytes, folder=f"{settings.cloudinary_folder}/{folder}"
    )
    try:
        previous = current_domain.process(
            command_cls(user_id=str(user_id), url=stored.secure_url, public_id=stored.public_id),
            asynchronous=False,
        )
    except Exception:
        discard_stored(storage, stored.public_id)
        raise

    if previous:
        discard_stored(storage, previous)
    return get_user(user_id)


def upload_profile_image(storage: FileStorage, user_id: str, upload: Upload) -> User:
    return _replace_image(storage, user_id, upload, "users", SetProfileImage)


def upload_banner_image(storage: FileStorage, user_id: str, upload: Upload) -> User:
    return _replace_image(storage, user_id, upload, "banners", SetBannerImage)


def remove_profile_image(storage: FileStorage, user_id: str) -> User:
    previous = current_domain.process(ClearProfileImage(user_id=str(user_id)), asynchronous=False)
    if previous:
        discard_stored(storage, previous)
    return get_user(user_id)
