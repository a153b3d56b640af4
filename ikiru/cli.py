"""Command-line entry point."""

from __future__ import annotations

import argparse
import os
import sys
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Sequence

from ikiru.config import CfgError
from ikiru.emulator import EmuParams, Emulator
from ikiru.instance import CliError, Instance
from ikiru.library import GameEntry, GamePath, UnsupportedFormat
from ikiru.title_id import TitleId

CFG_DIR_ENV = "IKIRU_CFG_DIR"

_IMAGE_KINDS = {".wud": GamePath.Kind.WUD, ".wux": GamePath.Kind.WUX}


def build_parser() -> argparse.ArgumentParser:
    """The argument parser for the command line."""
    parser = argparse.ArgumentParser(prog="ikiru", description="Wii U emulator")
    parser.add_argument(
        "-c", "--cfg-dir", type=Path, default=None,
        help=f"configuration directory (also ${CFG_DIR_ENV})",
    )
    parser.add_argument(
        "-a", "--append", type=Path, action="append", default=[],
        help="add folders to the search path",
    )
    commands = parser.add_subparsers(dest="command")
    run = commands.add_parser("run", help="run a Wii U title")
    run.add_argument("title", help="title id or path to game folder/archive")
    link = commands.add_parser("link", help="link to an existing Cemu installation")
    link.add_argument("path", type=Path, help="folder holding Cemu.exe and settings.xml")
    commands.add_parser("update", help="update to the latest version")
    convert = commands.add_parser("convert", help="convert a Wii U disc image to a WUD or WUX")
    convert.add_argument("input", type=Path, help="input file or directory")
    convert.add_argument("output", type=Path, help="output path; no extension means a directory")
    return parser


def _display_name(entry: GameEntry) -> str:
    return entry.meta.longname_en or entry.meta.shortname_en or ""


def _resolve(instance: Instance, title: str) -> GameEntry:
    path = Path(title)
    if path.is_dir():
        return GameEntry.load(GamePath(GamePath.Kind.FOLDER, path.resolve()))
    if path.is_file():
        kind = _IMAGE_KINDS.get(path.suffix.lower())
        if kind is None:
            raise LookupError(f"{title} is not a game folder or archive")
        return GameEntry.load(GamePath(kind, path.resolve()))
    title_id = TitleId.parse(title)
    entry = instance.game_library.entries().get(title_id)
    if entry is None:
        raise LookupError(f"no game with title id {title_id} in the library")
    return entry


def _run(instance: Instance, title: str) -> int:
    entry = _resolve(instance, title)
    params = EmuParams(title=entry.title, paths=[*instance.cfg.game_dirs, *instance.append])
    emulator = Emulator.start(params)
    emulator.unpause()
    print(f"running {entry.title} {_display_name(entry)}".rstrip())
    return 0


def _list(instance: Instance) -> int:
    for title, entry in instance.game_library.entries().items():
        if title.is_game():
            print(f"{title}  {_display_name(entry)}".rstrip())
    instance.save()
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line; returns the exit status."""
    args = build_parser().parse_args(argv)
    cfg_dir = args.cfg_dir
    if cfg_dir is None and os.environ.get(CFG_DIR_ENV):
        cfg_dir = Path(os.environ[CFG_DIR_ENV])
    try:
        instance = Instance.from_cli(cfg_dir, args.append)
        if args.command is None:
            return _list(instance)
        if args.command == "run":
            return _run(instance, args.title)
    except (CliError, CfgError, OSError, LookupError, UnsupportedFormat, ValueError,
            ET.ParseError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(f"error: `{args.command}` is not supported", file=sys.stderr)
    return 2


if __name__ == "__main__":
    sys.exit(main())