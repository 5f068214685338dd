"""Languages supported for reports, tables and summary sentences."""

from __future__ import annotations

from enum import Enum


class Language(str, Enum):
    ENGLISH = "en"
    CHINESE = "zh"

    def label(self) -> str:
        """Human readable name for logging."""

        return "Chinese" if self is Language.CHINESE else "English"
