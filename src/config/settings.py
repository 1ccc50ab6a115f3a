from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    debug: bool = True
    cors_origins: list[str] = ["*"]

    ENVIRONMENT: str = "Production"

    # Google Sheets (service account)
    google_spreadsheet_id: str = ""
    google_service_account_email: str = ""
    google_private_key: str = ""
    google_sheet_range: str = "A:G"
    google_value_input_option: str = "RAW"

    SENTRY_DSN: str = ""
    SENTRY_TRACES_SAMPLE_RATE: float = 0.0
    SENTRY_PROFILES_SAMPLE_RATE: float = 0.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @field_validator("google_private_key", mode="after")
    @classmethod
    def unescape_newlines(cls, v: str) -> str:
        # keys pasted into env files usually carry literal "\n" sequences
        return v.replace("\\n", "\n")

    def missing_google_settings(self) -> list[str]:
        """Names of the Google settings that are not set."""
        required = {
            "GOOGLE_SPREADSHEET_ID": self.google_spreadsheet_id,
            "GOOGLE_SERVICE_ACCOUNT_EMAIL": self.google_service_account_email,
            "GOOGLE_PRIVATE_KEY": self.google_private_key,
        }
        return [name for name, value in required.items() if not value.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
