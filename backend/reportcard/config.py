"""
Application configuration loaded from environment variables.

Uses Pydantic Settings to:
1. Read from .env file automatically
2. Validate all required values exist at startup
3. Provide type-safe access throughout the app

Usage:
    from reportcard.config import settings
    print(settings.DATABASE_URL)

Note: We use a custom Settings source that prefers .env values over
empty shell environment variables, so a blank variable exported in the
shell never shadows a real value in the .env file.
"""

from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """All application configuration in one place."""

    model_config = SettingsConfigDict(
        env_file=".env",        # Load from .env file
        env_file_encoding="utf-8",
        case_sensitive=True,     # ENV_VAR must match exactly
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def prefer_dotenv_over_empty_env(cls, data):
        """If an env var is empty but .env has a value, use the .env value.

        Pydantic Settings prioritizes real env vars over .env file values,
        so an empty variable in the shell would otherwise win.
        """
        from dotenv import dotenv_values

        dotenv_vals = dotenv_values(".env")
        for key, dotenv_value in dotenv_vals.items():
            # If the field is missing or empty, use the .env value
            if dotenv_value and (key not in data or not data.get(key)):
                data[key] = dotenv_value
        return data

    # --- Database ---
    DATABASE_URL: str

    # --- School letterhead ---
    SCHOOL_NAME: str = "MagMax Educational Centre"
    SCHOOL_ADDRESS_LINE_1: str = "P. O. Box NB 481 - NII BOIMAH"
    SCHOOL_ADDRESS_LINE_2: str = "10TH AVENUE, MCCARTHY HILL, ACCRA"
    SCHOOL_PHONE: str = "0244126130 / 0594738900 / 0544263109"

    # --- Grading ---
    TERM_NUMBER: str = "3"
    MAX_COMPONENT_SCORE: float = 50.0  # Upper bound for class and exam score

    # --- PDF generation ---
    # "reportlab" draws the page locally; "remote" posts HTML to a
    # conversion service and falls back to HTML when it is unavailable.
    PDF_BACKEND: Literal["reportlab", "remote"] = "reportlab"
    PDF_SERVICE_URL: str = "https://api.html2pdf.app/v1/generate"
    PDF_SERVICE_TIMEOUT: float = 15.0

    # --- Application ---
    APP_ENV: str = "development"
    DEBUG: bool = True
    CORS_ORIGINS: str = "http://localhost:3000"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def school_address_lines(self) -> list[str]:
        """Letterhead lines printed under the school name (blanks skipped)."""
        lines = [
            self.SCHOOL_ADDRESS_LINE_1,
            self.SCHOOL_ADDRESS_LINE_2,
            self.SCHOOL_PHONE,
        ]
        return [line for line in lines if line]


# Singleton instance - import this everywhere
settings = Settings()
