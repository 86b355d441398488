from __future__ import annotations

import os

SUPPORTED_LOCALES = ("en", "ja")


class Settings:
    PROJECT_NAME: str = "Process Designer"

    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Language of the placeholders written into markdown ("unassigned", "none")
    # and of the AI generation prompt.
    MARKDOWN_LOCALE: str = os.getenv("MARKDOWN_LOCALE", "en").strip().lower()

    @property
    def markdown_locale(self) -> str:
        if self.MARKDOWN_LOCALE in SUPPORTED_LOCALES:
            return self.MARKDOWN_LOCALE
        return "en"


settings = Settings()
