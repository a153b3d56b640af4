# ikiru

The core of a Wii U emulator. It reads title metadata and finds games on
disk. It also models hardware registers and the GPU register block, and it
keeps the emulator configuration in a TOML file.

## Installing

```
pip install .
```

## Command line

```
ikiru --help
```

Options:

- `-c`, `--cfg-dir DIR`: the configuration directory. If it is not given,
  the `IKIRU_CFG_DIR` environment variable is used. If neither is set, the
  directory is the platform's user configuration directory followed by
  `ikiru`. A missing directory is created. A path that exists but is not a
  directory is an error.
- `-a`, `--append DIR`: search one more folder for games. The option can be
  given more than once.

The configuration file is `config.toml` inside that directory. If it is
missing, it is written with defaults.

Commands:

- Without a command, every game found in the library is printed as its title
  id and English name. The configuration file is then written back.
- `ikiru run TITLE`: `TITLE` is a title id, a game folder or a `.wud`/`.wux`
  file. The command reads the game's metadata, starts an `Emulator` for it and
  prints `running <title id> <name>`.
- `link`, `update` and `convert` are recognised, but they report that they are
  not supported and exit with status 2.

Errors go to standard error, and the command then exits with status 1.

## Library

`ikiru.title_id.TitleId` is a 64-bit title id. It is written as sixteen
lower-case hex digits:

```python
from ikiru.title_id import TitleId

title = TitleId.parse("0005000E101C9400")
print(title)  # 0005000e101c9400
```

`ikiru.gamexml` reads `code/app.xml` into `AppXml` and `meta/meta.xml` into
`MetaXml`. A missing element keeps its default value:

```python
from ikiru.gamexml import AppXml

app = AppXml.from_game_dir("/games/MyGame")
print(app.title_id, app.sdk_version)
```

`ikiru.library`:

- `discover_game_paths` finds game folders and `.wud`/`.wux` images up to
  three levels below each search path.
- `GameEntry.load` reads a game's metadata.
- `GameLibrary` keys the games it finds by title id.

`ikiru.config`:

- `Cfg` loads and dumps `config.toml`. Parse failures raise `CfgError`.
- `Profile` and `Controllers` hold per-game settings and controller slots.

`ikiru.gamecfg.GameCfg` tracks the profile that is active for each title.
`ikiru.instance.Instance` ties the configuration, the profiles and the game
library together.

`ikiru.register` describes 32-bit registers as named bit fields with
`Register`, `RegisterLayout` and `Field`. It includes the serial-interface
registers, for example `SiPoll`, `SiComCSR` and `SiSR`.
`ikiru.latte.Registers` holds the GPU register file and serialises it to and
from its compacted form.

Other modules:

- `ikiru.oshash.NameHash` computes the hash pair that names OS libraries and
  their exports.
- `ikiru.baseinfo.ConsoleLanguage` lists the console languages.
- `ikiru.emulator.Emulator` tracks uptime across pauses.

## What it does not do

- It executes no game code. There is no CPU or GPU emulation. `run` only sets
  up an `Emulator` and starts its uptime clock.
- There is no graphical window.
- Assets cannot be read from `.wud` and `.wux` disc images, which raises
  `UnsupportedFormat`. Only unpacked game folders can be loaded.
- There is no linking to other installations, no self-update and no disc
  image conversion.

## Tests

```
pip install .[test]
pytest
```