import pytest

from ikiru.latte import (
    GPU_REG_SER_MAP_V1,
    NUM_SAMPLERS_PER_STAGE,
    Registers,
    serialized_count,
)


def test_default_state_serializes_to_zeros():
    values = list(Registers().serialize())
    assert len(values) == serialized_count()
    assert set(values) == {0}


def test_index_bounds():
    regs = Registers()
    last = Registers.RAW_SIZE // 4 - 1
    regs[last] = 1
    assert regs[last] == 1
    assert len(regs) == last + 1
    with pytest.raises(IndexError):
        regs[last + 1]
    with pytest.raises(IndexError):
        regs[-1] = 0


def test_value_range():
    regs = Registers()
    with pytest.raises(ValueError):
        regs[0] = 1 << 32
    with pytest.raises(ValueError):
        regs[0] = -1
    regs[0] = (1 << 32) - 1
    assert regs[0] == (1 << 32) - 1


def test_primitive_type_aliases_register():
    regs = Registers()
    regs.vgt_primitive_type = 4
    assert regs[0x8958 // 4] == 4
    regs[0x8958 // 4] = 9
    assert regs.vgt_primitive_type == 9


def test_border_color_aliases_registers():
    regs = Registers()
    colours = tuple(range(1, NUM_SAMPLERS_PER_STAGE + 1))
    regs.td_ps_sampler_border_color = colours
    assert regs.td_ps_sampler_border_color == colours
    assert regs[0xA400 // 4] == colours[0]
    with pytest.raises(ValueError):
        regs.td_ps_sampler_border_color = colours[:-1]


def test_serialize_order_follows_map():
    regs = Registers()
    for start, count in GPU_REG_SER_MAP_V1:
        for reg in range(start, start + count):
            regs[reg] = reg
    values = list(regs.serialize())
    assert values[:5] == [0x2232, 0x2233, 0x2235, 0x223A, 0x2256]
    assert values == [r for s, c in GPU_REG_SER_MAP_V1 for r in range(s, s + c)]


def test_unmapped_registers_are_left_out():
    regs = Registers()
    regs[0x2234] = 7
    assert 7 not in list(regs.serialize())


def test_map_fits_register_file():
    assert max(start + count for start, count in GPU_REG_SER_MAP_V1) <= len(Registers())


def test_round_trip():
    regs = Registers()
    for start, count in GPU_REG_SER_MAP_V1:
        regs[start + count - 1] = start
    rebuilt = Registers.from_serialized(regs.serialize())
    assert list(rebuilt.serialize()) == list(regs.serialize())


def test_from_serialized_wrong_length():
    with pytest.raises(ValueError):
        Registers.from_serialized([0, 1, 2])