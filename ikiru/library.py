"""Finding games on disk and reading their metadata."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from os import PathLike
from pathlib import Path
from types import MappingProxyType
from typing import BinaryIO, Iterable, Iterator, Mapping

from ikiru.gamexml import AppXml, MetaXml
from ikiru.title_id import TitleId

_MAX_DEPTH = 3
_FOLDER_MARKERS = frozenset({"meta", "code", "content"})
_META_ASSET = "meta/meta.xml"
_APP_ASSET = "code/app.xml"


class UnsupportedFormat(Exception):
    """Assets cannot be read from this kind of game image."""


@dataclass(frozen=True)
class GamePath:
    """Where a game lives: an unpacked folder or a disc image."""

    class Kind(Enum):
        FOLDER = "folder"
        WUX = "wux"
        WUD = "wud"

    kind: Kind
    path: Path

    def open_asset(self, path: str | PathLike[str]) -> BinaryIO:
        """Open a file of the game, given relative to its root, for reading."""
        if self.kind is GamePath.Kind.FOLDER:
            return (self.path / path).open("rb")
        raise UnsupportedFormat(f"cannot read assets from a {self.kind.value} image: {self.path}")


def _walk(root: Path) -> Iterator[Path]:
    yield root
    pending = [(root, 1)]
    while pending:
        directory, depth = pending.pop()
        try:
            children = list(directory.iterdir())
        except OSError:
            continue
        for child in children:
            yield child
            if depth < _MAX_DEPTH and child.is_dir():
                pending.append((child, depth + 1))


def _classify(path: Path) -> GamePath | None:
    try:
        if path.name in _FOLDER_MARKERS and path.suffix == "" and path.is_dir():
            return GamePath(GamePath.Kind.FOLDER, path.parent.resolve(strict=True))
        if path.suffix == ".wud" and path.is_file():
            return GamePath(GamePath.Kind.WUD, path.resolve(strict=True))
        if path.suffix == ".wux" and path.is_file():
            return GamePath(GamePath.Kind.WUX, path.resolve(strict=True))
    except (OSError, RuntimeError):
        return None
    return None


def discover_game_paths(search_paths: Iterable[str | PathLike[str]]) -> set[GamePath]:
    """Find game folders and disc images up to three levels below each search path."""
    found: set[GamePath] = set()
    for root in search_paths:
        for path in _walk(Path(root).resolve(strict=True)):
            game = _classify(path)
            if game is not None:
                found.add(game)
    return found


@dataclass
class GameEntry:
    """A game found in the library, with its metadata."""

    path: GamePath
    title: TitleId
    meta: MetaXml
    app: AppXml

    @classmethod
    def load(cls, path: GamePath) -> GameEntry:
        """Read a game's meta.xml and app.xml; the title id comes from either."""
        with path.open_asset(_META_ASSET) as stream:
            meta = MetaXml.from_xml(stream)
        with path.open_asset(_APP_ASSET) as stream:
            app = AppXml.from_xml(stream)
        try:
            title = TitleId.parse(meta.title_id)
        except ValueError:
            title = TitleId.parse(app.title_id)
        return cls(path, title, meta, app)

    def open_asset(self, path: str | PathLike[str]) -> BinaryIO:
        """Open a file of the game for reading."""
        return self.path.open_asset(path)


class GameLibrary:
    """The games found below a set of search paths, keyed by title id."""

    def __init__(self, search_paths: Iterable[str | PathLike[str]]) -> None:
        self.search_paths = frozenset(Path(p).resolve(strict=True) for p in search_paths)
        found = sorted(
            discover_game_paths(self.search_paths),
            key=lambda game: (game.kind.value, str(game.path)),
        )
        entries: dict[TitleId, GameEntry] = {}
        for game in found:
            entry = GameEntry.load(game)
            entries.setdefault(entry.title, entry)
        self._entries = dict(sorted(entries.items()))

    def entries(self) -> Mapping[TitleId, GameEntry]:
        """The games, in title id order."""
        return MappingProxyType(self._entries)