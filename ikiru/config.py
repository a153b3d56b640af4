"""The application's configuration file and the settings it holds."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from os import PathLike
from pathlib import Path
from typing import Any, Iterable, Mapping, TypeVar

import tomli_w

from ikiru.title_id import TitleId

CONTROLLER_SLOTS = 8

_E = TypeVar("_E", bound=Enum)


class CfgError(ValueError):
    """The configuration file could not be parsed."""

    def __init__(self, reason: object, path: str | PathLike[str] | None = None) -> None:
        self.reason = str(reason)
        self.path = Path(path) if path is not None else None
        shown = self.path if self.path is not None else "<string>"
        super().__init__(f"failed to parse config file ({shown})\n{self.reason}")


class LayoutType(Enum):
    """How the hub lays out the game library."""

    GRID = "Grid"
    LIST = "List"
    PRO = "Pro"


class ShaderType(IntEnum):
    """The stage a shader runs in."""

    PIXEL = 0
    VERTEX = 1
    GEOMETRY = 2


class ControllerKind(Enum):
    """The kind of controller being emulated."""

    GAMEPAD = "Gamepad"
    PRO = "Pro"
    CLASSIC = "Classic"
    WIIMOTE = "Wiimote"


class EventType(Enum):
    """An input a controller can deliver."""

    A = "A"
    B = "B"
    X = "X"
    Y = "Y"
    L = "L"
    R = "R"
    ZL = "Zl"
    ZR = "Zr"
    DPAD_UP = "DPadUp"
    DPAD_DOWN = "DPadDown"
    DPAD_LEFT = "DPadLeft"
    DPAD_RIGHT = "DPadRight"
    START = "Start"
    SELECT = "Select"
    LSTICK_PRESS = "LStickPress"
    LSTICK_X = "LStickX"
    LSTICK_Y = "LStickY"
    RSTICK_PRESS = "RStickPress"
    RSTICK_X = "RStickX"
    RSTICK_Y = "RStickY"


def _enum(enum_cls: type[_E], value: Any, what: str) -> _E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise ValueError(f"unknown {what} {value!r}") from None


def _expect(value: Any, kind: type | tuple[type, ...], what: str) -> Any:
    if not isinstance(value, kind):
        raise TypeError(f"{what}: unexpected {type(value).__name__}")
    return value


def _parse_map(value: Any) -> frozenset[EventType]:
    table = _expect(value, Mapping, "input map")
    return frozenset(_enum(EventType, key, "input event") for key in table)


def _coerce_events(events: Iterable[EventType | str]) -> frozenset[EventType]:
    return frozenset(_enum(EventType, event, "input event") for event in events)


def _dump_map(events: frozenset[EventType]) -> dict[str, dict]:
    return {event.value: {} for event in EventType if event in events}


@dataclass(frozen=True)
class GraphicPackCfg:
    """Settings for one graphic pack."""


@dataclass(frozen=True)
class EmuController:
    """An emulated controller: either a named input profile or a custom mapping."""

    profile: str | None = None
    kind: ControllerKind | None = None
    map: frozenset[EventType] = frozenset()

    def __post_init__(self) -> None:
        if (self.profile is None) == (self.kind is None):
            raise ValueError("a controller is either a profile name or a custom kind")
        if self.profile is not None:
            _expect(self.profile, str, "controller profile")
            if self.map:
                raise ValueError("a profile controller takes no input map")
        else:
            object.__setattr__(self, "kind", _enum(ControllerKind, self.kind, "controller kind"))
        object.__setattr__(self, "map", _coerce_events(self.map))

    @classmethod
    def from_value(cls, value: Any) -> EmuController:
        """Read a profile name or a ``{kind, map}`` table."""
        if isinstance(value, str):
            return cls(profile=value)
        table = _expect(value, Mapping, "controller")
        if "kind" not in table:
            raise ValueError("missing field `kind`")
        return cls(kind=table["kind"], map=_parse_map(table.get("map", {})))

    def to_value(self) -> str | dict[str, Any]:
        """The form stored in the configuration file."""
        if self.profile is not None:
            return self.profile
        assert self.kind is not None
        return {"kind": self.kind.value, "map": _dump_map(self.map)}


def _slot_index(key: Any) -> int:
    if isinstance(key, str) and key.isdigit():
        key = int(key)
    if isinstance(key, bool) or not isinstance(key, int) or not 0 <= key < CONTROLLER_SLOTS:
        raise ValueError(f"controller slot {key!r} is not in 0..{CONTROLLER_SLOTS}")
    return key


@dataclass(frozen=True)
class Controllers:
    """The eight controller slots of the console."""

    slots: tuple[EmuController | None, ...] = (None,) * CONTROLLER_SLOTS

    def __post_init__(self) -> None:
        slots = tuple(self.slots)
        if len(slots) > CONTROLLER_SLOTS:
            raise ValueError(f"at most {CONTROLLER_SLOTS} controllers, got {len(slots)}")
        for slot in slots:
            if slot is not None and not isinstance(slot, EmuController):
                raise TypeError(f"expected an EmuController, not {type(slot).__name__}")
        object.__setattr__(self, "slots", slots + (None,) * (CONTROLLER_SLOTS - len(slots)))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Controllers:
        """Read ``{"controllers": {"<slot>": controller, ...}}``."""
        _expect(data, Mapping, "controllers")
        if "controllers" not in data:
            raise ValueError("missing field `controllers`")
        table = _expect(data["controllers"], Mapping, "controllers")
        slots: list[EmuController | None] = [None] * CONTROLLER_SLOTS
        for key, value in table.items():
            slots[_slot_index(key)] = EmuController.from_value(value)
        return cls(tuple(slots))

    def to_dict(self) -> dict[str, Any]:
        """The form stored in the configuration file; empty slots are left out."""
        return {
            "controllers": {
                str(index): slot.to_value()
                for index, slot in enumerate(self.slots)
                if slot is not None
            }
        }

    def __getitem__(self, index: int) -> EmuController | None:
        return self.slots[index]

    def __len__(self) -> int:
        return CONTROLLER_SLOTS


@dataclass(frozen=True)
class InputProfile:
    """A named, reusable controller mapping."""

    name: str
    kind: ControllerKind
    map: frozenset[EventType] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", _enum(ControllerKind, self.kind, "controller kind"))
        object.__setattr__(self, "map", _coerce_events(self.map))


@dataclass
class Profile:
    """Per-game settings; without a name the title id identifies it."""

    title: TitleId
    name: str | None = None
    input: Controllers | None = None
    graphics_packs: dict[str, GraphicPackCfg] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.title = TitleId.coerce(self.title)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Profile:
        """Read a profile table."""
        _expect(data, Mapping, "profile")
        if "title" not in data:
            raise ValueError("missing field `title`")
        name = data.get("name")
        if name is not None:
            _expect(name, str, "profile name")
        raw_input = data.get("input")
        packs = _expect(data.get("graphics_packs", {}), Mapping, "graphics_packs")
        graphics_packs = {}
        for pack, settings in packs.items():
            _expect(settings, Mapping, f"graphic pack {pack!r}")
            graphics_packs[str(pack)] = GraphicPackCfg()
        return cls(
            title=TitleId.coerce(data["title"]),
            name=name,
            input=Controllers.from_dict(raw_input) if raw_input is not None else None,
            graphics_packs=graphics_packs,
        )

    def to_dict(self) -> dict[str, Any]:
        """The form stored in the configuration file."""
        data: dict[str, Any] = {"title": str(self.title)}
        if self.name is not None:
            data["name"] = self.name
        if self.input is not None:
            data["input"] = self.input.to_dict()
        data["graphics_packs"] = {name: {} for name in self.graphics_packs}
        return data


@dataclass
class Cfg:
    """The main configuration file."""

    game_dirs: list[Path] = field(default_factory=list)
    active: dict[TitleId, str] = field(default_factory=dict)
    profile: list[Profile] = field(default_factory=list)
    layout: LayoutType | None = None

    def __post_init__(self) -> None:
        self.game_dirs = [Path(p) for p in self.game_dirs]
        self.active = dict(sorted((TitleId.coerce(k), v) for k, v in self.active.items()))
        if self.layout is not None:
            self.layout = _enum(LayoutType, self.layout, "layout")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Cfg:
        """Read the parsed configuration document."""
        _expect(data, Mapping, "config")
        dirs = _expect(data.get("game_dirs", []), list, "game_dirs")
        active = _expect(data.get("active", {}), Mapping, "active")
        profiles = _expect(data.get("profile", []), list, "profile")
        layout = data.get("layout")
        return cls(
            game_dirs=[Path(_expect(d, str, "game_dirs")) for d in dirs],
            active={
                TitleId.coerce(title): _expect(name, str, "active profile name")
                for title, name in active.items()
            },
            profile=[Profile.from_dict(p) for p in profiles],
            layout=_enum(LayoutType, layout, "layout") if layout is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        """The document written to the configuration file."""
        data: dict[str, Any] = {
            "game_dirs": [str(p) for p in self.game_dirs],
            "active": {str(title): name for title, name in sorted(self.active.items())},
        }
        if self.profile:
            data["profile"] = [p.to_dict() for p in self.profile]
        if self.layout is not None:
            data["layout"] = self.layout.value
        return data

    @classmethod
    def loads(cls, text: str | bytes, path: str | PathLike[str] | None = None) -> Cfg:
        """Parse TOML text; ``path`` names the file in error messages."""
        try:
            if isinstance(text, bytes):
                text = text.decode("utf-8")
            return cls.from_dict(tomllib.loads(text))
        except (tomllib.TOMLDecodeError, ValueError, TypeError) as exc:
            raise CfgError(exc, path) from exc

    def dumps(self) -> str:
        """The configuration as TOML text."""
        return tomli_w.dumps(self.to_dict())

    @classmethod
    def load(cls, path: str | PathLike[str]) -> Cfg:
        """Read and parse a configuration file."""
        return cls.loads(Path(path).read_bytes(), path)