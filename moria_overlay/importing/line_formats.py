"""
Parsers and writers for the pipe-separated settings files.

Each ``parse_*`` function maps one line to a tagged record or ``Skip``.
Malformed lines never raise: the files are hand-edited and older builds wrote
fewer fields, so callers drop ``Skip`` results and keep reading.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from ..core.config import BIND_COUNT, MAX_ROTATION_STEP, OVERLAY_BUILD_SLOTS
from ..core.keycodes import MODIFIER_CODES
from ..models.schema import QuickBuildSlot, RemovalEntry

COMMENT_PREFIX = "#"
TYPE_RULE_PREFIX = "@"
FIELD_SEPARATOR = "|"
ROTATION_KEY = "rotation"
MODIFIER_KEY = "mod"

_INT_RE = re.compile(r"\s*[+-]?[0-9]+\s*")


@dataclass(frozen=True)
class Skip:
    """A comment, blank or malformed line."""


SKIP = Skip()


@dataclass(frozen=True)
class RemovalPosition:
    mesh_name: str
    pos_x: float
    pos_y: float
    pos_z: float

    def to_entry(self) -> RemovalEntry:
        return RemovalEntry(self.mesh_name, self.pos_x, self.pos_y, self.pos_z)


@dataclass(frozen=True)
class RemovalTypeRule:
    mesh_name: str

    def to_entry(self) -> RemovalEntry:
        return RemovalEntry(self.mesh_name, is_type_rule=True)


@dataclass(frozen=True)
class SlotEntry:
    slot_index: int
    display_name: str
    texture_name: str = ""

    def to_slot(self) -> QuickBuildSlot:
        return QuickBuildSlot(self.slot_index, self.display_name, self.texture_name)


@dataclass(frozen=True)
class RotationEntry:
    step: int


@dataclass(frozen=True)
class KeybindEntry:
    bind_index: int
    key_code: int


@dataclass(frozen=True)
class ModifierEntry:
    key_code: int


RemovalLine = Union[Skip, RemovalPosition, RemovalTypeRule]
SlotLine = Union[Skip, SlotEntry, RotationEntry]
KeybindLine = Union[Skip, KeybindEntry, ModifierEntry]


def _parse_int(text: str) -> int | None:
    if not _INT_RE.fullmatch(text):
        return None
    return int(text)


def _parse_float(text: str) -> float | None:
    if "_" in text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _is_blank_or_comment(line: str) -> bool:
    return not line.strip() or line.startswith(COMMENT_PREFIX)


def parse_removal_line(line: str) -> RemovalLine:
    """Parse ``mesh|x|y|z`` or ``@mesh`` from ``removed_instances.txt``."""
    line = line.rstrip("\r\n")
    if _is_blank_or_comment(line):
        return SKIP
    if line.startswith(TYPE_RULE_PREFIX):
        return RemovalTypeRule(line[len(TYPE_RULE_PREFIX):])
    fields = line.split(FIELD_SEPARATOR, 3)
    if len(fields) != 4:
        return SKIP
    mesh_name, raw_x, raw_y, raw_z = fields
    coords = [_parse_float(raw) for raw in (raw_x, raw_y, raw_z)]
    if any(value is None for value in coords):
        return SKIP
    pos_x, pos_y, pos_z = coords
    return RemovalPosition(mesh_name, pos_x, pos_y, pos_z)


def parse_slot_line(line: str) -> SlotLine:
    """Parse ``slot|displayName[|textureName]`` or ``rotation|step``."""
    line = line.rstrip("\r\n")
    if _is_blank_or_comment(line):
        return SKIP
    key, sep, rest = line.partition(FIELD_SEPARATOR)
    if not sep:
        return SKIP
    if key == ROTATION_KEY:
        step = _parse_int(rest)
        if step is not None and 0 <= step <= MAX_ROTATION_STEP:
            return RotationEntry(step)
        return SKIP
    slot = _parse_int(key)
    if slot is None or not 0 <= slot < OVERLAY_BUILD_SLOTS:
        return SKIP
    # texture name was added later; single-field lines are still valid
    display_name, _, texture_name = rest.partition(FIELD_SEPARATOR)
    return SlotEntry(slot, display_name, texture_name)


def parse_keybind_line(line: str) -> KeybindLine:
    """Parse ``bindIndex|code`` or ``mod|code`` from ``keybindings.txt``."""
    line = line.rstrip("\r\n")
    if _is_blank_or_comment(line):
        return SKIP
    mod_prefix = MODIFIER_KEY + FIELD_SEPARATOR
    if len(line) > len(mod_prefix) and line.startswith(mod_prefix):
        code = _parse_int(line[len(mod_prefix):])
        if code is not None and code in MODIFIER_CODES:
            return ModifierEntry(code)
        return SKIP
    raw_index, sep, raw_code = line.partition(FIELD_SEPARATOR)
    if not sep:
        return SKIP
    index = _parse_int(raw_index)
    code = _parse_int(raw_code)
    if index is None or code is None:
        return SKIP
    if 0 <= index < BIND_COUNT and 0 < code < 256:
        return KeybindEntry(index, code)
    return SKIP


def format_removal_line(entry: RemovalEntry) -> str:
    if entry.is_type_rule:
        return f"{TYPE_RULE_PREFIX}{entry.mesh_name}"
    return FIELD_SEPARATOR.join(
        [entry.mesh_name, repr(float(entry.pos_x)), repr(float(entry.pos_y)), repr(float(entry.pos_z))]
    )


def format_slot_line(slot: QuickBuildSlot) -> str:
    return FIELD_SEPARATOR.join([str(slot.slot_index), slot.display_name, slot.texture_name])


def format_rotation_line(step: int) -> str:
    return f"{ROTATION_KEY}{FIELD_SEPARATOR}{step}"


def format_keybind_line(bind_index: int, key_code: int) -> str:
    return f"{bind_index}{FIELD_SEPARATOR}{key_code}"


def format_modifier_line(key_code: int) -> str:
    return f"{MODIFIER_KEY}{FIELD_SEPARATOR}{key_code}"


__all__ = [
    "Skip",
    "SKIP",
    "RemovalPosition",
    "RemovalTypeRule",
    "SlotEntry",
    "RotationEntry",
    "KeybindEntry",
    "ModifierEntry",
    "RemovalLine",
    "SlotLine",
    "KeybindLine",
    "parse_removal_line",
    "parse_slot_line",
    "parse_keybind_line",
    "format_removal_line",
    "format_slot_line",
    "format_rotation_line",
    "format_keybind_line",
    "format_modifier_line",
]
