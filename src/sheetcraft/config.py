"""
Configuration.

Settings are read from the process environment after loading a dotenv file:

- GOOGLE_APPLICATION_CREDENTIALS: service account key file (gspread's default
  location when unset)
- SHEETCRAFT_TARGET_LANGUAGE: language headers are translated into (default "en")
- SHEETCRAFT_LOG_LEVEL: level for configure_logging (default "WARNING")
- SHEETCRAFT_TRANSLATE_ENDPOINT: Cloud Translation v2 URL
"""

import logging
import os
from typing import Optional

import gspread
import pydantic
from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

from sheetcraft.exceptions import ValidationError
from sheetcraft.sheets.translate import TRANSLATE_URL


SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/cloud-translation",
]


class Config(BaseModel):
    # Credentials
    GOOGLE_APPLICATION_CREDENTIALS: Optional[str] = None

    # Translation
    SHEETCRAFT_TARGET_LANGUAGE: str = "en"
    SHEETCRAFT_TRANSLATE_ENDPOINT: str = TRANSLATE_URL

    # Logging
    SHEETCRAFT_LOG_LEVEL: str = "WARNING"

    @field_validator("SHEETCRAFT_LOG_LEVEL")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @staticmethod
    def from_env(dotenv_path: Optional[str] = ".env") -> "Config":
        """Load dotenv_path (if it exists) and validate the environment.

        Variables already set in the environment win over the dotenv file.

        Raises:
            ValidationError: If a variable holds an invalid value
        """
        if dotenv_path:
            load_dotenv(dotenv_path)
        try:
            return Config.model_validate(os.environ)
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid configuration: {e}") from e

    def authorize(self) -> gspread.Client:
        """Return a gspread client authorized for Sheets and Cloud Translation."""
        if self.GOOGLE_APPLICATION_CREDENTIALS:
            return gspread.service_account(
                filename=self.GOOGLE_APPLICATION_CREDENTIALS, scopes=SCOPES
            )
        return gspread.service_account(scopes=SCOPES)
