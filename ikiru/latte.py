"""The Latte GPU register file and its compact serialised form."""

from __future__ import annotations

from array import array
from typing import Iterable, Iterator, Sequence

NUM_SAMPLERS_PER_STAGE = 18

RAW_SIZE = 0x10000 * 4 + 9 * 4
"""Size of the register block in bytes."""

REGISTER_COUNT = RAW_SIZE // 4

_U32_LIMIT = 1 << 32
_VGT_PRIMITIVE_TYPE = 0x8958 // 4
_TD_PS_SAMPLER_BORDER_COLOR = 0xA400 // 4

# Spans of (first register, count) kept in the compacted state. Their order and
# contents define the serialised format and must not change.
_CONFIG_SPANS = (
    (0x2232, 2), (0x2235, 1), (0x223A, 1), (0x2256, 1), (0x22C8, 1),
    (0x2300, 6), (0x2310, 12), (0x2363, 1), (0x2404, 2), (0x2542, 1),
    (0x25C5, 1), (0x260C, 1),
    # sampler border colours for the vertex, pixel and geometry stages
    (0x2900, 72), (0x2980, 72), (0x2A00, 72),
)

_CONTEXT_SPANS = (
    (0xA000, 2), (0xA003, 3), (0xA00A, 4), (0xA010, 56), (0xA050, 52),
    (0xA08C, 1), (0xA08E, 4), (0xA094, 64), (0xA0D5, 1), (0xA0E0, 32),
    (0xA100, 9), (0xA10C, 3), (0xA10F, 96), (0xA185, 10), (0xA191, 39),
    (0xA1E0, 9), (0xA200, 1), (0xA202, 7), (0xA210, 41), (0xA250, 52),
    (0xA284, 12), (0xA290, 1), (0xA292, 2), (0xA29B, 1), (0xA2A1, 1),
    (0xA2A5, 1), (0xA2A8, 2), (0xA2AC, 3), (0xA2B4, 3), (0xA2B8, 3),
    (0xA2BC, 3), (0xA2C0, 3), (0xA2C8, 1), (0xA2CA, 1), (0xA2CC, 1),
    (0xA2CE, 1), (0xA300, 9), (0xA30C, 1), (0xA312, 1), (0xA316, 2),
    (0xA343, 2), (0xA349, 3), (0xA34C, 2), (0xA351, 1), (0xA37E, 6),
)

_RESOURCE_SPANS = (
    (0xE000, 112), (0xE380, 112), (0xE460, 112), (0xE7E0, 112), (0xE8B9, 7),
    (0xE8C0, 112), (0xE930, 112), (0xECB0, 112), (0xED89, 7),
)

_SAMPLER_SPANS = ((0xF000, 54), (0xF036, 54), (0xF06C, 54))

_LOOP_CONST_SPANS = ((0xF880, 96),)

GPU_REG_SER_MAP_V1: tuple[tuple[int, int], ...] = (
    _CONFIG_SPANS + _CONTEXT_SPANS + _RESOURCE_SPANS + _SAMPLER_SPANS + _LOOP_CONST_SPANS
)


def serialized_count() -> int:
    """Number of 32-bit words in the compacted register state."""
    return sum(count for _, count in GPU_REG_SER_MAP_V1)


SERIALIZED_SIZE = serialized_count() * 4
"""Size of the compacted register state in bytes."""


def _check_index(index: object) -> int:
    if isinstance(index, bool) or not isinstance(index, int):
        raise TypeError(f"register index must be an integer, not {type(index).__name__}")
    if not 0 <= index < REGISTER_COUNT:
        raise IndexError(f"register index {index:#x} out of range")
    return index


def _check_value(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"register value must be an integer, not {type(value).__name__}")
    if not 0 <= value < _U32_LIMIT:
        raise ValueError(f"register value {value} does not fit in 32 bits")
    return value


class Registers:
    """The full GPU register file, indexed by register number."""

    RAW_SIZE = RAW_SIZE

    def __init__(self) -> None:
        self._words = array("I", [0]) * REGISTER_COUNT

    def __len__(self) -> int:
        return REGISTER_COUNT

    def __getitem__(self, index: int) -> int:
        return self._words[_check_index(index)]

    def __setitem__(self, index: int, value: int) -> None:
        self._words[_check_index(index)] = _check_value(value)

    @property
    def vgt_primitive_type(self) -> int:
        return self._words[_VGT_PRIMITIVE_TYPE]

    @vgt_primitive_type.setter
    def vgt_primitive_type(self, value: int) -> None:
        self._words[_VGT_PRIMITIVE_TYPE] = _check_value(value)

    @property
    def td_ps_sampler_border_color(self) -> tuple[int, ...]:
        start = _TD_PS_SAMPLER_BORDER_COLOR
        return tuple(self._words[start : start + NUM_SAMPLERS_PER_STAGE])

    @td_ps_sampler_border_color.setter
    def td_ps_sampler_border_color(self, values: Sequence[int]) -> None:
        values = [_check_value(v) for v in values]
        if len(values) != NUM_SAMPLERS_PER_STAGE:
            raise ValueError(f"expected {NUM_SAMPLERS_PER_STAGE} border colours, got {len(values)}")
        start = _TD_PS_SAMPLER_BORDER_COLOR
        self._words[start : start + NUM_SAMPLERS_PER_STAGE] = array("I", values)

    def serialize(self) -> Iterator[int]:
        """Yield the registers kept in the compacted state, in format order."""
        for start, count in GPU_REG_SER_MAP_V1:
            yield from self._words[start : start + count]

    @classmethod
    def from_serialized(cls, values: Iterable[int]) -> Registers:
        """Rebuild a register file from its compacted state."""
        words = [_check_value(v) for v in values]
        if len(words) != serialized_count():
            raise ValueError(f"expected {serialized_count()} registers, got {len(words)}")
        registers = cls()
        position = 0
        for start, count in GPU_REG_SER_MAP_V1:
            registers._words[start : start + count] = array("I", words[position : position + count])
            position += count
        return registers