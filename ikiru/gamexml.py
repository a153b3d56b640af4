"""Reading a title's app.xml and meta.xml documents."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field, fields
from os import PathLike
from pathlib import Path
from typing import IO, Any, Callable

_UNSIGNED = re.compile(r"\+?[0-9]+")
_U32_LIMIT = 1 << 32

XmlSource = str | bytes | IO[bytes]


def _element_text(element: ET.Element | None) -> str:
    if element is None or element.text is None:
        return ""
    return element.text.strip()


def text_value(element: ET.Element | None) -> str:
    """The text of an element, or an empty string."""
    return _element_text(element)


def optional_value(element: ET.Element | None) -> str | None:
    """The text of an element, or None when it is empty."""
    return _element_text(element) or None


def u32_value(element: ET.Element) -> int:
    """The text of an element read as an unsigned 32-bit integer."""
    text = _element_text(element)
    tag = element.tag if element is not None else "?"
    if _UNSIGNED.fullmatch(text) is None:
        raise ValueError(f"<{tag}>: expected an unsigned integer, got {text!r}")
    value = int(text)
    if value >= _U32_LIMIT:
        raise ValueError(f"<{tag}>: {text} does not fit in 32 bits")
    return value


def _text(tag: str | None = None) -> Any:
    return field(default="", metadata={"convert": text_value, "tag": tag})


def _u32() -> Any:
    return field(default=0, metadata={"convert": u32_value})


def _opt() -> Any:
    return field(default=None, metadata={"convert": optional_value})


def _parse_root(source: XmlSource) -> ET.Element:
    if isinstance(source, (str, bytes)):
        return ET.fromstring(source)
    return ET.parse(source).getroot()


def _load(cls: type, source: XmlSource) -> Any:
    root = _parse_root(source)
    values = {}
    for spec in fields(cls):
        element = root.find(spec.metadata.get("tag") or spec.name)
        if element is not None:
            convert: Callable[[ET.Element], Any] = spec.metadata["convert"]
            values[spec.name] = convert(element)
    return cls(**values)


@dataclass
class AppXml:
    """The contents of code/app.xml; missing elements keep their defaults."""

    version: int = _u32()
    os_version: str = _text()
    title_id: str = _text()
    title_version: str = _text()
    sdk_version: int = _u32()
    app_type: str = _text()
    group_id: str = _text()
    os_mask: str = _text()
    common_id: str = _text()

    @classmethod
    def from_xml(cls, source: XmlSource) -> AppXml:
        """Read from XML text, bytes or a binary file object."""
        return _load(cls, source)

    @classmethod
    def from_game_dir(cls, path: str | PathLike[str]) -> AppXml:
        """Read code/app.xml below a game folder."""
        with (Path(path) / "code" / "app.xml").open("rb") as stream:
            return cls.from_xml(stream)


@dataclass
class MetaXml:
    """The contents of meta/meta.xml; missing elements keep their defaults."""

    menu_type: str = _text("type")
    access: str = _text()
    version: int = _u32()
    product_code: str = _text()
    content_platform: str = _text()
    company_code: str = _text()
    mastering_date: str = _text()
    logo_type: int = _u32()
    app_launch_type: str = _text()
    invisible_flag: str = _text()
    no_managed_flag: str = _text()
    no_event_log: str = _text()
    no_icon_database: str = _text()
    launching_flag: str = _text()
    install_flag: str = _text()
    closing_msg: int = _u32()
    title_version: int = _u32()
    title_id: str = _text()
    group_id: str = _text()
    boss_id: str = _text()
    os_version: str = _text()
    app_size: str = _text()
    common_save_size: str = _text()
    account_save_size: str = _text()
    common_boss_size: str = _text()
    account_boss_size: str = _text()
    save_no_rollback: int = _u32()
    join_game_id: str = _text()
    join_game_mode_mask: str = _text()
    bg_daemon_enable: int = _u32()
    olv_accesskey: int = _u32()
    wood_tin: int = _u32()
    e_manual: int = _u32()
    e_manual_version: int = _u32()
    region: str = _text()

    pc_cero: int = _u32()
    pc_esrb: int = _u32()
    pc_bbfc: int = _u32()
    pc_usk: int = _u32()
    pc_pegi_gen: int = _u32()
    pc_pegi_fin: int = _u32()
    pc_pegi_prt: int = _u32()
    pc_pegi_bbfc: int = _u32()
    pc_cob: int = _u32()
    pc_grb: int = _u32()
    pc_cgsrr: int = _u32()
    pc_oflc: int = _u32()
    pc_reserved0: int = _u32()
    pc_reserved1: int = _u32()
    pc_reserved2: int = _u32()
    pc_reserved3: int = _u32()

    ext_dev_nunchaku: int = _u32()
    ext_dev_classic: int = _u32()
    ext_dev_urcc: int = _u32()
    ext_dev_board: int = _u32()
    ext_dev_usb_keyboard: int = _u32()
    ext_dev_etc: int = _u32()
    ext_dev_etc_name: str | None = _opt()

    eula_version: int = _u32()
    drc_use: int = _u32()
    network_use: int = _u32()
    online_account_use: int = _u32()
    direct_boot: int = _u32()

    longname_ja: str | None = _opt()
    longname_en: str | None = _opt()
    longname_fr: str | None = _opt()
    longname_de: str | None = _opt()
    longname_it: str | None = _opt()
    longname_es: str | None = _opt()
    longname_zhs: str | None = _opt()
    longname_ko: str | None = _opt()
    longname_nl: str | None = _opt()
    longname_pt: str | None = _opt()
    longname_ru: str | None = _opt()
    longname_zht: str | None = _opt()

    shortname_ja: str | None = _opt()
    shortname_en: str | None = _opt()
    shortname_fr: str | None = _opt()
    shortname_de: str | None = _opt()
    shortname_it: str | None = _opt()
    shortname_es: str | None = _opt()
    shortname_zhs: str | None = _opt()
    shortname_ko: str | None = _opt()
    shortname_nl: str | None = _opt()
    shortname_pt: str | None = _opt()
    shortname_ru: str | None = _opt()
    shortname_zht: str | None = _opt()

    publisher_ja: str | None = _opt()
    publisher_en: str | None = _opt()
    publisher_fr: str | None = _opt()
    publisher_de: str | None = _opt()
    publisher_it: str | None = _opt()
    publisher_es: str | None = _opt()
    publisher_zhs: str | None = _opt()
    publisher_ko: str | None = _opt()
    publisher_nl: str | None = _opt()
    publisher_pt: str | None = _opt()
    publisher_ru: str | None = _opt()
    publisher_zht: str | None = _opt()

    @classmethod
    def from_xml(cls, source: XmlSource) -> MetaXml:
        """Read from XML text, bytes or a binary file object."""
        return _load(cls, source)