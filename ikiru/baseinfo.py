"""Console base information."""

from __future__ import annotations

from enum import StrEnum


class ConsoleLanguage(StrEnum):
    """Console language, named by its lower-case code."""

    JA = "ja"
    EN = "en"
    FR = "fr"
    DE = "de"
    IT = "it"
    ES = "es"
    KO = "ko"
    NL = "nl"
    PT = "pt"
    RU = "ru"
    ZH = "zh"

    @classmethod
    def parse(cls, text: str) -> ConsoleLanguage:
        """Look up a language by its code; 'zhs' and 'zht' both mean Chinese."""
        if text in _ALIASES:
            return _ALIASES[text]
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"unknown console language {text!r}") from None


_ALIASES = {"zhs": ConsoleLanguage.ZH, "zht": ConsoleLanguage.ZH}