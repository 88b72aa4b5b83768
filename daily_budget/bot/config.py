"""Bot configuration using Pydantic Settings."""

import json
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Telegram settings
    telegram_bot_token: str = Field(
        default="",
        description="Telegram bot token from @BotFather",
    )

    # Access control
    allowed_users: Annotated[list[int], NoDecode] = Field(
        default_factory=list,
        description="List of allowed Telegram user IDs (empty = allow all)",
    )

    # Google Sheets
    google_sheets_id: str | None = Field(
        default=None,
        description="Spreadsheet with the monthly report sheets",
    )
    checklist_sheets_id: str | None = Field(
        default=None,
        description="Spreadsheet with one checklist per sheet",
    )
    google_credentials_path: Path | None = Field(
        default=None,
        description="Path to the service account JSON key",
    )
    google_credentials_json: str | None = Field(
        default=None,
        description="Service account JSON key as a string (takes priority over the path)",
    )
    cashbox_row: int = Field(
        default=30,
        ge=1,
        description="Row of month sheets where cashbox counts are written",
    )

    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("allowed_users", mode="before")
    @classmethod
    def parse_int_list(cls, v: Any) -> list[int]:
        """Parse comma-separated or JSON list of integers."""
        if v is None or v == "":
            return []
        if isinstance(v, int):
            return [v]
        if isinstance(v, list):
            return [int(x) for x in v]
        if isinstance(v, str):
            v = v.strip()
            # Try JSON format first: [1, 2, 3]
            if v.startswith("["):
                try:
                    parsed = json.loads(v)
                    return [int(x) for x in parsed]
                except json.JSONDecodeError:
                    pass
            # Fallback to comma-separated: 1,2,3
            return [int(x.strip()) for x in v.split(",") if x.strip()]
        return []

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        if v is None or v == "":
            return "INFO"
        level = str(v).strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level

    def credentials_info(self) -> dict | None:
        """Parse inline service account credentials.

        Raises:
            ValueError: If GOOGLE_CREDENTIALS_JSON is not a JSON object.
        """
        if not self.google_credentials_json:
            return None
        try:
            info = json.loads(self.google_credentials_json)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in GOOGLE_CREDENTIALS_JSON: {e}")
        if not isinstance(info, dict):
            raise ValueError("GOOGLE_CREDENTIALS_JSON must be a JSON object")
        return info

    def is_user_allowed(self, user_id: int) -> bool:
        """Check if user is allowed to use the bot."""
        if not self.allowed_users:
            return True
        return user_id in self.allowed_users

    def validate(self) -> list[str]:
        """Validate configuration.

        Returns:
            List of validation error messages, empty if valid.
        """
        errors = []
        if not self.telegram_bot_token:
            errors.append("TELEGRAM_BOT_TOKEN is not set")
        if not self.google_sheets_id:
            errors.append("GOOGLE_SHEETS_ID is not set")
        if not self.checklist_sheets_id:
            errors.append("CHECKLIST_SHEETS_ID is not set")
        if not self.google_credentials_json and not self.google_credentials_path:
            errors.append("Set GOOGLE_CREDENTIALS_PATH or GOOGLE_CREDENTIALS_JSON")
        elif self.google_credentials_json:
            try:
                self.credentials_info()
            except ValueError as e:
                errors.append(str(e))
        elif not self.google_credentials_path.exists():
            errors.append(f"Google credentials not found at {self.google_credentials_path}")
        return errors


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance (singleton pattern)."""
    return Settings()
