from functools import lru_cache
from typing import List
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import AnyHttpUrl, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = Field(default="SignDesk")
    environment: str = Field(default="development")
    secret_key: str = Field(default="change-me-in-production", min_length=12)
    database_url: str = Field(default="sqlite+aiosqlite:///./signdesk.db")
    storage_root: str = Field(default="./storage", description="Directory document file paths are resolved against")
    allowed_origins: List[AnyHttpUrl] = Field(default_factory=list)

    # Outbound mail
    http_timeout_seconds: float = Field(default=30.0, gt=0)
    oauth_token_url: str = Field(default="https://oauth2.googleapis.com/token")
    gmail_send_scope: str = Field(default="https://www.googleapis.com/auth/gmail.send")
    gmail_api_send_url: str = Field(default="https://gmail.googleapis.com/gmail/v1/users/me/messages/send")
    sendgrid_url: str = Field(default="https://api.sendgrid.com/v3/mail/send")
    resend_url: str = Field(default="https://api.resend.com/emails")
    mailgun_base_url: str = Field(default="https://api.mailgun.net/v3")
    brevo_url: str = Field(default="https://api.brevo.com/v3/smtp/email")
    smtp_host: str = Field(default="smtp.gmail.com")
    smtp_port: int = Field(default=587)
    sender_display_name: str = Field(default="Digital Signature System")
    default_provider: str = Field(default="sendgrid", description="Provider tag used when a settings row has none")
    default_dispatch_mode: str = Field(default="multiple", description="'single' (one mail, rest as CC) or 'multiple'")
    fanout_stop_on_error: bool = Field(default=True, description="Abort the remaining deliveries on the first failure")

    # Stamping
    signature_timezone: str = Field(default="UTC", description="IANA zone used for the stamped date")

    @model_validator(mode="after")
    def check_mail_configuration(self) -> "Settings":
        if self.default_dispatch_mode not in {"single", "multiple"}:
            raise ValueError(
                f"default_dispatch_mode must be 'single' or 'multiple', got '{self.default_dispatch_mode}'"
            )
        try:
            ZoneInfo(self.signature_timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"signature_timezone is not a known zone: '{self.signature_timezone}'") from exc
        return self


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    The same instance is returned for the whole process so every request sees
    one consistent configuration.
    """
    return Settings()


def clear_settings_cache() -> None:
    """
    Clear the cached settings instance.

    Useful for testing; the next call to get_settings() re-reads the environment.
    """
    get_settings.cache_clear()
