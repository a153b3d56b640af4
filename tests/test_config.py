import tomllib
from pathlib import Path

import pytest

from ikiru.config import (
    Cfg,
    CfgError,
    ControllerKind,
    Controllers,
    EmuController,
    EventType,
    GraphicPackCfg,
    InputProfile,
    LayoutType,
    Profile,
    ShaderType,
)
from ikiru.title_id import TitleId

TITLE = TitleId(0x0005000E101C9400)


def test_de():
    expected = Controllers(
        (
            EmuController(profile="test"),
            EmuController(kind=ControllerKind.GAMEPAD),
            None,
            None,
            None,
            None,
            None,
            None,
        )
    )
    s = """
            controllers.0 = "test"
            [controllers.1]
            kind = "Gamepad"
        """
    assert Controllers.from_dict(tomllib.loads(s)) == expected


def test_controllers_round_trip():
    controllers = Controllers(
        (
            None,
            EmuController(kind="Pro", map={EventType.A, EventType.DPAD_UP}),
            EmuController(profile="test"),
        )
    )
    assert Controllers.from_dict(controllers.to_dict()) == controllers


def test_controllers_to_dict_skips_empty_slots():
    controllers = Controllers((EmuController(profile="test"), None, EmuController(kind="Classic")))
    table = controllers.to_dict()["controllers"]
    assert table == {"0": "test", "2": {"kind": "Classic", "map": {}}}


def test_controllers_getitem_and_padding():
    controllers = Controllers((EmuController(profile="test"),))
    assert len(controllers.slots) == 8
    assert controllers[0] == EmuController(profile="test")
    assert controllers[7] is None


def test_controllers_slot_out_of_range():
    with pytest.raises(ValueError):
        Controllers.from_dict({"controllers": {"8": "test"}})


def test_controllers_missing_table():
    with pytest.raises(ValueError):
        Controllers.from_dict({})


def test_custom_controller_needs_kind():
    with pytest.raises(ValueError):
        EmuController.from_value({"map": {}})


def test_unknown_controller_kind():
    with pytest.raises(ValueError):
        EmuController.from_value({"kind": "Keyboard"})


def test_controller_map_parsed():
    controller = EmuController.from_value({"kind": "Wiimote", "map": {"A": {}, "DPadUp": {}}})
    assert controller.kind is ControllerKind.WIIMOTE
    assert controller.map == frozenset({EventType.A, EventType.DPAD_UP})


def test_controller_needs_exactly_one_form():
    with pytest.raises(ValueError):
        EmuController()
    with pytest.raises(ValueError):
        EmuController(profile="test", kind=ControllerKind.PRO)


def test_input_profile_coerces():
    profile = InputProfile("pad", "Gamepad", {"Zl"})
    assert profile.kind is ControllerKind.GAMEPAD
    assert profile.map == frozenset({EventType.ZL})


def test_shader_type_values():
    assert [ShaderType(i) for i in range(3)] == list(ShaderType)
    with pytest.raises(ValueError):
        ShaderType(3)


def test_layout_names():
    assert LayoutType("Grid") is LayoutType.GRID
    assert LayoutType("Pro") is LayoutType.PRO


def test_empty_text_gives_defaults():
    assert Cfg.loads("") == Cfg()


def test_default_dump_omits_optional_parts():
    data = tomllib.loads(Cfg().dumps())
    assert data == {"game_dirs": [], "active": {}}


def test_full_round_trip():
    cfg = Cfg(
        game_dirs=[Path("games")],
        active={TITLE: "fast"},
        profile=[
            Profile(
                TITLE,
                name="fast",
                input=Controllers((EmuController(profile="test"),)),
                graphics_packs={"Resolution": GraphicPackCfg()},
            ),
            Profile(TITLE),
        ],
        layout=LayoutType.LIST,
    )
    assert Cfg.loads(cfg.dumps()) == cfg


def test_active_written_in_title_order():
    cfg = Cfg(active={TitleId(2): "b", TitleId(1): "a"})
    assert list(cfg.to_dict()["active"].values()) == ["a", "b"]


def test_profile_title_is_hex():
    assert Profile(TITLE).to_dict()["title"] == "0005000e101c9400"


def test_profile_requires_title():
    with pytest.raises(ValueError):
        Profile.from_dict({"name": "fast"})


def test_bad_toml_raises_cfg_error_with_path():
    with pytest.raises(CfgError) as info:
        Cfg.loads("game_dirs = [", "config.toml")
    assert "config.toml" in str(info.value)
    assert str(info.value).startswith("failed to parse config file")


def test_bad_layout_raises_cfg_error():
    with pytest.raises(CfgError):
        Cfg.loads('layout = "Tiles"')


def test_load_from_file(tmp_path):
    path = tmp_path / "config.toml"
    cfg = Cfg(game_dirs=[tmp_path], layout=LayoutType.PRO)
    path.write_text(cfg.dumps())
    assert Cfg.load(path) == cfg