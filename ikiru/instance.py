"""The application's loaded state: configuration, profiles and game library."""

from __future__ import annotations

from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Iterable

import platformdirs

from ikiru.config import Cfg, LayoutType
from ikiru.gamecfg import GameCfg
from ikiru.library import GameLibrary

CFG_DIR_NAME = "ikiru"
CFG_FILE_NAME = "config.toml"


class CliError(Exception):
    """The configuration directory given or found cannot be used."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path

    @classmethod
    def not_dir(cls, path: Path) -> CliError:
        return cls(f"cfg directory {path} is not a directory", path)

    @classmethod
    def not_found(cls) -> CliError:
        return cls(
            "could not find cfg directory. please manually specify it with --cfg-dir or set "
            "the IKIRU_CFG_DIR environment variable"
        )


def find_cfg_dir(cfg_dir: str | PathLike[str] | None = None) -> Path:
    """The configuration directory, created when missing.

    Without an explicit directory the user's configuration directory is used.
    """
    if cfg_dir is None:
        base = platformdirs.user_config_dir()
        if not base:
            raise CliError.not_found()
        path = Path(base) / CFG_DIR_NAME
    else:
        path = Path(cfg_dir)
    if not path.exists():
        path.mkdir(parents=True, exist_ok=True)
    elif not path.is_dir():
        raise CliError.not_dir(path)
    return path


def find_cfg_file(cfg_dir: str | PathLike[str]) -> Path:
    """The configuration file in a directory, written with defaults when missing."""
    cfg_file = Path(cfg_dir) / CFG_FILE_NAME
    if not cfg_file.exists():
        cfg_file.write_text(Cfg().dumps(), encoding="utf-8")
    return cfg_file


@dataclass
class Instance:
    """Everything the application loads at start-up."""

    cfg_dir: Path
    cfg_file: Path
    cfg: Cfg
    game_library: GameLibrary
    init_layout: LayoutType = LayoutType.GRID
    game_cfgs: GameCfg = field(default_factory=GameCfg)
    append: tuple[Path, ...] = ()

    @classmethod
    def from_cli(
        cls,
        cfg_dir: str | PathLike[str] | None = None,
        append: Iterable[str | PathLike[str]] | None = None,
    ) -> Instance:
        """Load the configuration and scan its game folders plus any appended ones."""
        directory = find_cfg_dir(cfg_dir)
        cfg_file = find_cfg_file(directory)
        cfg = Cfg.load(cfg_file)
        extra = tuple(Path(p) for p in (append or ()))
        library = GameLibrary([*cfg.game_dirs, *extra])
        return cls(
            cfg_dir=directory,
            cfg_file=cfg_file,
            cfg=cfg,
            game_library=library,
            init_layout=cfg.layout if cfg.layout is not None else LayoutType.GRID,
            append=extra,
        )

    def reload(self) -> None:
        """Search the game directories for games again."""
        self.game_library = GameLibrary([*self.cfg.game_dirs, *self.append])

    def save(self) -> None:
        """Write the configuration back to its file."""
        self.cfg_file.write_text(self.cfg.dumps(), encoding="utf-8")