"""Bit-field layouts for 32-bit memory-mapped hardware registers."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, Iterable, Mapping

REGISTER_BITS = 32
_REGISTER_LIMIT = 1 << REGISTER_BITS

_EXPECTED_TYPE = "expected bool/u8/u16/u32/i8/i16/i32"
_INVALID_WIDTH = f"expected width n where 1 <= n <= {REGISTER_BITS}"
_INVALID_RANGE = "expected index 'i..j'"
_END_BEFORE_START = "expected i < j in index 'i..j'"
_IDX_RANGE_WIDTH = "cannot specify both an index range and a width"
_INVALID_IDX = "expected index 'i' or 'i..j'"
_OVERLAP = "fields must not overlap in the register"

_SINGLE = re.compile(r"\s*(\d+)\s*")
_RANGE = re.compile(r"\s*(\d+)\s*\.\.\s*(\d+)\s*")


class RegisterError(ValueError):
    """A register layout is malformed."""


class RegTy(Enum):
    """The type a register field is stored as."""

    BOOL = "bool"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"

    def width(self) -> int:
        """The default width in bits of a field of this type."""
        return _WIDTHS[self]

    @property
    def signed(self) -> bool:
        return self.value.startswith("i")

    @classmethod
    def from_name(cls, name: str) -> RegTy:
        """Look up a type by its name, such as 'u8' or 'bool'."""
        try:
            return cls(name)
        except ValueError:
            raise RegisterError(_EXPECTED_TYPE) from None


_WIDTHS = {
    RegTy.BOOL: 1,
    RegTy.U8: 8,
    RegTy.I8: 8,
    RegTy.U16: 16,
    RegTy.I16: 16,
    RegTy.U32: 32,
    RegTy.I32: 32,
}


@dataclass(frozen=True)
class Field:
    """One named field of a register.

    ``index`` is a bit position, an ``"i"`` or ``"i..j"`` string, a
    ``(start, end)`` pair or a ``range``; ``width`` is a bit count. Both
    default to following on from the previous field at the type's width.
    """

    name: str
    ty: RegTy | str
    index: int | str | tuple[int, int] | range | None = None
    width: int | str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.isidentifier():
            raise RegisterError(f"field names must be identifiers, got {self.name!r}")
        if isinstance(self.ty, str) and not isinstance(self.ty, RegTy):
            object.__setattr__(self, "ty", RegTy.from_name(self.ty))
        elif not isinstance(self.ty, RegTy):
            raise RegisterError(_EXPECTED_TYPE)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _parse_index(index: Any) -> tuple[int | None, int | None]:
    """Return the start bit and, for ranges, the width they imply."""
    if index is None:
        return None, None
    if _is_int(index):
        if index < 0:
            raise RegisterError(_INVALID_IDX)
        return index, None
    if isinstance(index, range):
        if index.step != 1:
            raise RegisterError(_INVALID_RANGE)
        start, end = index.start, index.stop
    elif isinstance(index, tuple) and len(index) == 2 and all(map(_is_int, index)):
        start, end = index
    elif isinstance(index, str):
        single = _SINGLE.fullmatch(index)
        if single is not None:
            return int(single[1]), None
        pair = _RANGE.fullmatch(index)
        if pair is None:
            raise RegisterError(_INVALID_RANGE if ".." in index else _INVALID_IDX)
        start, end = int(pair[1]), int(pair[2])
    else:
        raise RegisterError(_INVALID_IDX)
    if start < 0:
        raise RegisterError(_INVALID_RANGE)
    if start >= end:
        raise RegisterError(_END_BEFORE_START)
    return start, end - start


def _parse_width(width: Any) -> int | None:
    if width is None:
        return None
    if isinstance(width, str) and width.strip().isdigit():
        width = int(width)
    if not _is_int(width) or width < 1:
        raise RegisterError(_INVALID_WIDTH)
    return width


def _place(spec: Field, position: int) -> range:
    start, range_width = _parse_index(spec.index)
    width = _parse_width(spec.width)
    if range_width is not None and width is not None:
        raise RegisterError(_IDX_RANGE_WIDTH)
    if range_width is not None:
        width = range_width
    limit = spec.ty.width()
    if width is None:
        width = limit
    if width > limit:
        raise RegisterError(f"width {width} exceeds {limit}")
    if start is None:
        start = position
    if start + width > REGISTER_BITS:
        raise RegisterError(f"range {start}..{start + width} exceeds 0..{REGISTER_BITS}")
    return range(start, start + width)


class RegisterLayout:
    """The resolved bit positions of a register's fields."""

    fields: tuple[Field, ...]
    ranges: Mapping[str, range]
    types: Mapping[str, RegTy]
    mask: int

    def __init__(self, fields: Iterable[Field]) -> None:
        self.fields = tuple(fields)
        ranges: dict[str, range] = {}
        types: dict[str, RegTy] = {}
        position = 0
        occupied = 0
        for spec in self.fields:
            if not isinstance(spec, Field):
                raise TypeError(f"expected a Field, not {type(spec).__name__}")
            if spec.name in ranges:
                raise RegisterError(f"duplicate field {spec.name!r}")
            try:
                bits = _place(spec, position)
            except RegisterError as exc:
                raise RegisterError(f"field {spec.name!r}: {exc}") from None
            mask = ((1 << len(bits)) - 1) << bits.start
            if occupied & mask:
                raise RegisterError(f"field {spec.name!r}: {_OVERLAP}")
            occupied |= mask
            ranges[spec.name] = bits
            types[spec.name] = spec.ty
            position = bits.stop
        self.ranges = MappingProxyType(ranges)
        self.types = MappingProxyType(types)
        self.mask = occupied

    def __repr__(self) -> str:
        placed = ", ".join(f"{name}={bits.start}..{bits.stop}" for name, bits in self.ranges.items())
        return f"RegisterLayout({placed})"


def _field_property(name: str) -> property:
    return property(
        lambda self: self.get_field(name),
        lambda self, value: self.set_field(name, value),
        doc=f"The value of `{name}`.",
    )


class Register:
    """A 32-bit register made of named bit fields.

    Subclasses set ``layout`` to a ``RegisterLayout`` (or a list of
    ``Field``); each field then also becomes an attribute.
    """

    layout: ClassVar[RegisterLayout]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        layout = cls.__dict__.get("layout")
        if layout is None:
            return
        if not isinstance(layout, RegisterLayout):
            layout = RegisterLayout(layout)
            cls.layout = layout
        for name in layout.ranges:
            if name in _RESERVED:
                raise RegisterError(f"field name {name!r} clashes with a register method")
            setattr(cls, name, _field_property(name))

    def __init__(self, **kwargs: int | bool) -> None:
        layout = getattr(type(self), "layout", None)
        if layout is None:
            raise TypeError(f"{type(self).__name__} has no register layout")
        self._raw = dict.fromkeys(layout.ranges, 0)
        for name, value in kwargs.items():
            if name not in self._raw:
                raise TypeError(f"{type(self).__name__} has no field {name!r}")
            self.set_field(name, value)

    def _bits(self, name: str) -> range:
        try:
            return self.layout.ranges[name]
        except KeyError:
            raise KeyError(f"{type(self).__name__} has no field {name!r}") from None

    def get_field(self, name: str) -> int | bool:
        """The value of one field."""
        bits = self._bits(name)
        raw = self._raw[name]
        ty = self.layout.types[name]
        if ty is RegTy.BOOL:
            return bool(raw)
        if ty.signed and raw >> (len(bits) - 1):
            return raw - (1 << len(bits))
        return raw

    def set_field(self, name: str, value: int | bool) -> None:
        """Set one field; the value must fit in the field's width."""
        bits = self._bits(name)
        if isinstance(value, bool):
            value = int(value)
        elif not isinstance(value, int):
            raise TypeError(f"field {name!r} takes an integer, not {type(value).__name__}")
        width = len(bits)
        low = -(1 << (width - 1)) if self.layout.types[name].signed else 0
        if not low <= value < (1 << width):
            raise ValueError(f"value {value} does not fit in the {width} bits of {name!r}")
        self._raw[name] = value & ((1 << width) - 1)

    def get(self) -> int:
        """The register's 32-bit value assembled from its fields."""
        value = 0
        for name, bits in self.layout.ranges.items():
            value |= self._raw[name] << bits.start
        return value

    def set(self, value: int) -> None:
        """Split a 32-bit value into the register's fields."""
        if not _is_int(value) or not 0 <= value < _REGISTER_LIMIT:
            raise ValueError(f"register value {value!r} does not fit in {REGISTER_BITS} bits")
        for name, bits in self.layout.ranges.items():
            self._raw[name] = (value >> bits.start) & ((1 << len(bits)) - 1)

    def get_be(self) -> int:
        """The value whose native in-memory bytes are the register in big-endian order."""
        return int.from_bytes(self.get().to_bytes(4, "big"), sys.byteorder)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._raw == other._raw

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        values = ", ".join(f"{name}={self.get_field(name)!r}" for name in self.layout.ranges)
        return f"{type(self).__name__}({values})"


_RESERVED = frozenset(dir(Register)) | {"layout", "_raw"}


class AcrViData(Register):
    """Register at 0x0D00021C."""

    layout = RegisterLayout([Field("data", RegTy.U32)])


class AcrViAddr(Register):
    """Register at 0x0D000224."""

    layout = RegisterLayout([Field("addr", RegTy.U32)])


class AcrViCtrl(Register):
    """Register at 0x0D000228."""

    layout = RegisterLayout([Field("has_ownership", RegTy.BOOL)])


class SiCoutBuf(Register):
    """Serial interface output buffer (0x6400/0x640C/0x6418/0x6424)."""

    layout = RegisterLayout(
        [
            Field("output1", RegTy.U8),
            Field("output0", RegTy.U8),
            Field("cmd", RegTy.U8),
        ]
    )


class SiCinBufH(Register):
    """Serial interface input buffer, high word (0x6404/0x6410/0x641C/0x6428)."""

    layout = RegisterLayout(
        [
            Field("input3", RegTy.U8),
            Field("input2", RegTy.U8),
            Field("input1", RegTy.U8),
            Field("input0", RegTy.U8, width="6"),
            Field("err_latch", RegTy.BOOL),
            Field("err_stat", RegTy.BOOL),
        ]
    )


class SiCinBufL(Register):
    """Serial interface input buffer, low word (0x6408/0x6414/0x6420/0x642C)."""

    layout = RegisterLayout(
        [
            Field("input4", RegTy.U8),
            Field("input5", RegTy.U8),
            Field("input6", RegTy.U8),
            Field("input7", RegTy.U8),
        ]
    )


class SiPoll(Register):
    """Serial interface poll register (0x6430)."""

    layout = RegisterLayout(
        [
            Field("x", RegTy.U16, index="16..26"),
            Field("y", RegTy.U8, index="8"),
            Field("en", RegTy.U8, index="4..8"),
            Field("vbcpy", RegTy.U8, index="0..4"),
        ]
    )


class SiComCSR(Register):
    """Serial interface communication control/status (0x6434)."""

    layout = RegisterLayout(
        [
            Field("transfer_start", RegTy.BOOL),
            # the channel number is two bits wide
            Field("channel", RegTy.U8, width="2"),
            Field("callback_enable", RegTy.BOOL),
            Field("command_enable", RegTy.BOOL),
            Field("inlnth", RegTy.U8, width="7"),
            Field("outlnth", RegTy.U8, width="7"),
            Field("channelenable", RegTy.BOOL),
            Field("ukn_channel_num_maybe", RegTy.U8, width="2"),
            Field("rdstintmsk", RegTy.BOOL),
            Field("rdstint", RegTy.BOOL),
            Field("comerr", RegTy.BOOL),
            Field("tcintmask", RegTy.BOOL),
            Field("tcint", RegTy.BOOL),
        ]
    )


def _status_group(channel: int, index: int | None) -> list[Field]:
    names = ("unrun", "ovrun", "coll", "norep", "wrst", "rdst")
    return [
        Field(f"{name}{channel}", RegTy.BOOL, index=index if position == 0 else None)
        for position, name in enumerate(names)
    ]


class SiSR(Register):
    """Serial interface status register (0x6438)."""

    layout = RegisterLayout(
        [
            *_status_group(3, None),
            *_status_group(2, "8"),
            *_status_group(1, "16"),
            *_status_group(0, "24"),
            Field("wr", RegTy.BOOL, index="31"),
        ]
    )