[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ikiru"
version = "0.1.0"
description = "Wii U emulator core: title metadata, game library discovery, register models and configuration"
requires-python = ">=3.11"
keywords = ["wii-u", "emulator", "title-id", "game-library", "registers"]
classifiers = [
    "Development Status :: 2 - Pre-Alpha",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
]
dependencies = [
    "tomli-w",
    "platformdirs",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
ikiru = "ikiru.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["ikiru"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
