"""Application settings.

All configuration comes from environment variables (or a local ``.env`` file).
``GAMEVAULT_ENV`` selects the environment overlay:

- ``development`` / ``test``: external credentials are optional, missing ones
  fall back to the in-memory fake adapters.
- ``staging`` / ``production``: mail, storage and payment credentials are
  mandatory and the process refuses to start without them.
"""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

STRICT_ENVIRONMENTS = ("staging", "production")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    gamevault_env: str = "development"
    database_url: str
    database_echo: bool = False

    jwt_secret: str = Field(..., min_length=8)
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 60

    mail_host: str | None = None
    mail_port: int = 587
    mail_username: str | None = None
    mail_password: str | None = None
    mail_sender: str = "GameVault <no-reply@gamevault.local>"
    mail_use_tls: bool = True

    cloudinary_cloud_name: str | None = None
    cloudinary_api_key: str | None = None
    cloudinary_api_secret: str | None = None
    cloudinary_folder: str = "gamevault"

    mercadopago_access_token: str | None = None
    mercadopago_webhook_secret: str | None = None

    public_base_url: str = "http://localhost:8000"
    frontend_url: str = "http://localhost:3000"
    max_upload_bytes: int = 5 * 1024 * 1024
    max_main_image_bytes: int = 200 * 1024

    @model_validator(mode="after")
    def _require_credentials_in_strict_environments(self):
        if self.gamevault_env.lower() not in STRICT_ENVIRONMENTS:
            return self

        required = {
            "MAIL_HOST": self.mail_host,
            "MAIL_USERNAME": self.mail_username,
            "MAIL_PASSWORD": self.mail_password,
            "CLOUDINARY_CLOUD_NAME": self.cloudinary_cloud_name,
            "CLOUDINARY_API_KEY": self.cloudinary_api_key,
            "CLOUDINARY_API_SECRET": self.cloudinary_api_secret,
            "MERCADOPAGO_ACCESS_TOKEN": self.mercadopago_access_token,
        }
        missing = sorted(name for name, value in required.items() if not value)
        if missing:
            raise ValueError(f"Missing required settings for {self.gamevault_env}: {', '.join(missing)}")
        return self

    @property
    def is_production(self) -> bool:
        return self.gamevault_env.lower() in STRICT_ENVIRONMENTS

    @property
    def mail_configured(self) -> bool:
        return bool(self.mail_host)

    @property
    def storage_configured(self) -> bool:
        return bool(self.cloudinary_cloud_name and self.cloudinary_api_key and self.cloudinary_api_secret)

    @property
    def gateway_configured(self) -> bool:
        return bool(self.mercadopago_access_token)


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process."""
    return Settings()
