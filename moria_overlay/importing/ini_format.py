"""Line parser for the generic ``MoriaCppMod.ini`` settings file."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .line_formats import SKIP, Skip

INI_COMMENT_PREFIXES = (";", "#")
_TRIM_CHARS = " \t\r\n"


@dataclass(frozen=True)
class IniSection:
    name: str


@dataclass(frozen=True)
class IniKeyValue:
    key: str
    value: str


IniLine = Union[Skip, IniSection, IniKeyValue]


def _trim(text: str) -> str:
    return text.strip(_TRIM_CHARS)


def _strip_inline_comment(value: str) -> str:
    # only " ;" starts a comment, so a bare ";" stays a usable value
    for idx in range(1, len(value)):
        if value[idx] == ";" and value[idx - 1] == " ":
            return _trim(value[:idx - 1])
    return value


def parse_ini_line(line: str) -> IniLine:
    """Parse one INI line into a section header, a key/value pair or ``Skip``."""
    trimmed = _trim(line)
    if not trimmed or trimmed.startswith(INI_COMMENT_PREFIXES):
        return SKIP
    if trimmed.startswith("[") and trimmed.endswith("]"):
        name = _trim(trimmed[1:-1])
        return IniSection(name) if name else SKIP
    key, sep, value = trimmed.partition("=")
    if not sep:
        return SKIP
    key = _trim(key)
    if not key:
        return SKIP
    return IniKeyValue(key, _strip_inline_comment(_trim(value)))


__all__ = ["IniSection", "IniKeyValue", "IniLine", "parse_ini_line"]
