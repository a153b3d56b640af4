"""Wii U title identifiers."""

from __future__ import annotations

import re
from dataclasses import dataclass

_HEX_DIGITS = re.compile(r"\+?[0-9A-Fa-f]+")
_U64_LIMIT = 1 << 64


@dataclass(frozen=True, order=True)
class TitleId:
    """A 64-bit title identifier, shown as 16 lower-case hex digits."""

    id: int

    def __post_init__(self) -> None:
        if isinstance(self.id, bool) or not isinstance(self.id, int):
            raise TypeError(f"title id must be an integer, not {type(self.id).__name__}")
        if not 0 <= self.id < _U64_LIMIT:
            raise ValueError(f"title id {self.id} does not fit in 64 bits")

    @classmethod
    def parse(cls, text: str) -> TitleId:
        """Parse a title id from its hexadecimal form."""
        if not isinstance(text, str):
            raise TypeError(f"expected a string, not {type(text).__name__}")
        if _HEX_DIGITS.fullmatch(text) is None:
            raise ValueError(f"invalid title id {text!r}")
        value = int(text, 16)
        if value >= _U64_LIMIT:
            raise ValueError(f"title id {text!r} does not fit in 64 bits")
        return cls(value)

    @classmethod
    def coerce(cls, value: TitleId | int | str) -> TitleId:
        """Accept a title id, a raw integer or a hex string."""
        if isinstance(value, TitleId):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        raise TypeError(f"expected a title id hex string or raw value, not {type(value).__name__}")

    def is_game(self) -> bool:
        """Whether the title is a game; every title currently counts as one."""
        return True

    def __int__(self) -> int:
        return self.id

    def __str__(self) -> str:
        return f"{self.id:016x}"