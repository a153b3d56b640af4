"""Hashes identifying OS libraries and their exports by name."""

from __future__ import annotations

from dataclasses import dataclass

_MASK = 0xFFFFFFFF
_SEED_FIRST = 0x688BA2BA
_SEED_SECOND = 0xF64A71D5


def _rotl(value: int, shift: int) -> int:
    return ((value << shift) | (value >> (32 - shift))) & _MASK


@dataclass(frozen=True)
class NameHash:
    """A pair of 32-bit hashes derived from a name."""

    first: int
    second: int

    @classmethod
    def from_name(cls, name: str | bytes) -> NameHash:
        """Hash a name; text is hashed as its UTF-8 bytes."""
        data = name.encode("utf-8") if isinstance(name, str) else bytes(name)
        h1, h2 = _SEED_FIRST, _SEED_SECOND
        for byte in data:
            h1 = _rotl((h1 + byte) & _MASK, 3)
            h2 = _rotl(h2 ^ byte, 7)
            h1 = (h1 + h2) & _MASK
            h2 = _rotl((h2 + byte) & _MASK, 3)
        return cls(h1, h2)


@dataclass(frozen=True)
class FunctionEntry:
    """An exported OS function and the high-level handler bound to it."""

    lib_hash: NameHash
    func_hash: NameHash
    name: str
    hle_func: int


@dataclass(frozen=True)
class PointerEntry:
    """An exported OS data symbol and its virtual address."""

    lib_hash: NameHash
    func_hash: NameHash
    v_ptr: int