"""Wii U emulator core: title metadata, game discovery, registers and configuration."""

__version__ = "0.1.0"