"""Catalog of report languages offered to the user."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

DEFAULT_LANGUAGE = "en"


class UnknownLanguageError(ValueError):
    """Raised when a language code is not part of the catalog."""


@dataclass(frozen=True)
class Language:
    """A selectable report language.

    Attributes:
        code: ISO-like tag used as the external key (e.g. "kn").
        name: English display name, embedded in model instructions.
        native_name: Name written in the language itself.
    """

    code: str
    name: str
    native_name: str

    def to_dict(self) -> Dict[str, str]:
        return {"code": self.code, "name": self.name, "nativeName": self.native_name}


LANGUAGES: Tuple[Language, ...] = (
    Language("en", "English", "English"),
    Language("kn", "Kannada", "ಕನ್ನಡ"),
    Language("ta", "Tamil", "தமிழ்"),
    Language("ml", "Malayalam", "മലയാളം"),
    Language("te", "Telugu", "తెలుగు"),
    Language("hi", "Hindi", "हिन्दी"),
    Language("bn", "Bengali", "বাংলা"),
    Language("mr", "Marathi", "मराठी"),
    Language("gu", "Gujarati", "ગુજરાતી"),
)

_BY_CODE: Dict[str, Language] = {language.code: language for language in LANGUAGES}


def language_codes() -> List[str]:
    """Return the catalog codes in display order."""
    return [language.code for language in LANGUAGES]


def get_language(code: str) -> Language:
    """Return the catalog entry for `code` or raise UnknownLanguageError."""
    language = _BY_CODE.get((code or "").strip().lower())
    if language is None:
        raise UnknownLanguageError(
            f"Unsupported language '{code}'. Supported: {', '.join(language_codes())}"
        )
    return language
