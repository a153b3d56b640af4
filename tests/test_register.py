import sys

import pytest

from ikiru.register import (
    AcrViCtrl,
    AcrViData,
    Field,
    Register,
    RegisterError,
    RegisterLayout,
    RegTy,
    SiCinBufH,
    SiCinBufL,
    SiComCSR,
    SiCoutBuf,
    SiPoll,
    SiSR,
)

SIGNED_LAYOUT = RegisterLayout([Field("delta", RegTy.I8), Field("flag", RegTy.BOOL)])


def test_reg_ty_widths():
    names = ["bool", "u8", "u16", "u32", "i8", "i16", "i32"]
    assert [RegTy.from_name(name).width() for name in names] == [1, 8, 16, 32, 8, 16, 32]


def test_reg_ty_from_name():
    assert RegTy.from_name("u16") is RegTy.U16
    assert RegTy.from_name("bool") is RegTy.BOOL
    with pytest.raises(RegisterError):
        RegTy.from_name("u64")


def test_field_type_by_name():
    assert Field("a", "i16").ty is RegTy.I16
    with pytest.raises(RegisterError):
        Field("a", "u64")
    with pytest.raises(RegisterError):
        Field("1a", RegTy.U8)


def test_default_placement_is_sequential():
    fields = [Field("a", RegTy.BOOL), Field("b", RegTy.U8), Field("c", RegTy.U16)]
    layout = RegisterLayout(fields)
    ranges = list(layout.ranges.values())
    assert ranges[0].start == 0
    for previous, current in zip(ranges, ranges[1:]):
        assert current.start == previous.stop
    assert [len(r) for r in ranges] == [f.ty.width() for f in fields]


def test_string_width():
    layout = RegisterLayout([Field("a", RegTy.U8, width="6")])
    assert layout.ranges["a"] == range(0, 6)


def test_si_poll_explicit_indices():
    assert SiPoll(x=0x3FF).get() == 0x3FF << 16
    assert SiPoll(y=1).get() == 1 << 8
    assert SiPoll(en=0xF).get() == 0xF0
    assert SiPoll(vbcpy=0xF).get() == 0xF


def test_si_sr_groups():
    assert SiSR(unrun2=True).get() == 1 << 8
    assert SiSR(unrun1=True).get() == 1 << 16
    assert SiSR(unrun0=True).get() == 1 << 24
    assert SiSR(wr=True).get() == 1 << 31
    assert SiSR(rdst3=True).get() == 1 << 5


@pytest.mark.parametrize(
    "fields",
    [
        [Field("a", RegTy.U8, width=9)],
        [Field("a", RegTy.U8, width=0)],
        [Field("a", RegTy.U8, index="4..2")],
        [Field("a", RegTy.U8, index="0..=4")],
        [Field("a", RegTy.U8, index="x")],
        [Field("a", RegTy.U8, index="0..4", width=4)],
        [Field("a", RegTy.U8, index="28..36")],
        [Field("a", RegTy.U32), Field("b", RegTy.BOOL)],
        [Field("a", RegTy.U8, index=0), Field("b", RegTy.U8, index=4)],
        [Field("a", RegTy.U8), Field("a", RegTy.U8)],
    ],
)
def test_bad_layouts(fields):
    with pytest.raises(RegisterError):
        RegisterLayout(fields)


def test_field_name_clashing_with_method():
    with pytest.raises(RegisterError):

        class _Clash(Register):
            layout = RegisterLayout([Field("get", RegTy.U8)])


def test_fields_assemble_value():
    reg = SiPoll(x=0x3FF, vbcpy=0xF)
    assert reg.x == 0x3FF
    assert reg.get() >> 16 == 0x3FF
    assert reg.get() & 0xF == 0xF


@pytest.mark.parametrize("value", [0, 0x12345678, 0xFFFFFFFF])
def test_full_register_round_trip(value):
    reg = SiCinBufL()
    reg.set(value)
    assert reg.get() == value


def test_set_drops_unmapped_bits():
    reg = SiCoutBuf()
    reg.set(0xFFFFFFFF)
    assert reg.get() == 0xFFFFFFFF & SiCoutBuf.layout.mask
    assert reg.cmd == 0xFF


def test_status_register_all_ones():
    reg = SiSR()
    reg.set(0xFFFFFFFF)
    assert reg.get() & (1 << 6) == 0
    assert reg.wr is True
    assert reg.get_field("unrun2") is True


def test_set_get_round_trip_for_fields():
    reg = SiComCSR(transfer_start=True, inlnth=5, tcint=True)
    copy = SiComCSR()
    copy.set(reg.get())
    assert copy == reg
    assert copy.inlnth == 5


def test_bool_field():
    reg = AcrViCtrl(has_ownership=True)
    assert reg.has_ownership is True
    assert reg.get() == 1


def test_field_value_too_wide():
    reg = SiCinBufH()
    with pytest.raises(ValueError):
        reg.set_field("input0", 64)
    reg.input0 = 63
    assert reg.input0 == 63


def test_set_rejects_values_over_32_bits():
    with pytest.raises(ValueError):
        AcrViData().set(1 << 32)
    with pytest.raises(ValueError):
        AcrViData().set(-1)


def test_unknown_fields():
    with pytest.raises(KeyError):
        SiPoll().get_field("z")
    with pytest.raises(TypeError):
        SiPoll(z=1)


def test_base_register_has_no_layout():
    with pytest.raises(TypeError):
        Register()


def test_get_be_holds_big_endian_bytes():
    reg = AcrViData(data=0x12345678)
    assert reg.get_be().to_bytes(4, sys.byteorder) == reg.get().to_bytes(4, "big")


def test_signed_layout_ranges():
    assert SIGNED_LAYOUT.ranges["delta"] == range(0, 8)
    assert SIGNED_LAYOUT.ranges["flag"] == range(8, 9)


def test_signed_field_value():
    class Signed(Register):
        layout = RegisterLayout([Field("delta", RegTy.I8), Field("flag", RegTy.BOOL)])

    reg = Signed()
    Register.set_field(reg, "delta", -1)
    assert Register.get_field(reg, "delta") == -1
    assert Register.get(reg) == 0xFF


def test_signed_field_round_trip():
    class Signed(Register):
        layout = RegisterLayout([Field("delta", RegTy.I8), Field("flag", RegTy.BOOL)])

    copy = Signed()
    Register.set(copy, 0x1FF)
    assert Register.get_field(copy, "delta") == -1
    assert Register.get_field(copy, "flag") is True


@pytest.mark.parametrize("value", [-129, 256])
def test_signed_field_out_of_range(value):
    class Signed(Register):
        layout = RegisterLayout([Field("delta", RegTy.I8), Field("flag", RegTy.BOOL)])

    reg = Signed()
    with pytest.raises(ValueError):
        Register.set_field(reg, "delta", value)


def test_equality():
    assert SiPoll(x=1) == SiPoll(x=1)
    assert not SiPoll(x=1) == SiPoll(x=2)