"""
Virtual-key code names, modifier keys and bind slots.

Handles:
* code -> display name (localized where the label is a word, literal glyphs otherwise)
* display name -> code for INI files (always the canonical English names)
* the four-way modifier cycle and its persisted tokens
* bind index <-> INI key name mapping

Both lookup directions are derived from ``KEY_DEFS`` so they cannot drift apart.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from .config import BIND_COUNT
from .localization import LocalizationTable

VK_TAB = 0x09
VK_RETURN = 0x0D
VK_SHIFT = 0x10
VK_CONTROL = 0x11
VK_MENU = 0x12
VK_SPACE = 0x20
VK_NUMPAD0 = 0x60
VK_F1 = 0x70
VK_RMENU = 0xA5

MAX_FUNCTION_KEY = 24


@dataclass(frozen=True)
class KeyDef:
    code: int
    name: str
    loc_key: str | None = None


@dataclass(frozen=True)
class ModifierDef:
    code: int
    token: str
    loc_key: str


def _build_key_defs() -> tuple[KeyDef, ...]:
    defs: list[KeyDef] = []
    defs.extend(KeyDef(VK_F1 + n - 1, f"F{n}") for n in range(1, MAX_FUNCTION_KEY + 1))
    defs.extend(KeyDef(VK_NUMPAD0 + d, f"Num{d}") for d in range(10))
    defs.extend(
        [
            KeyDef(0x6A, "Num*", "key.num_multiply"),
            KeyDef(0x6B, "Num+", "key.num_add"),
            KeyDef(0x6C, "NumSep", "key.num_separator"),
            KeyDef(0x6D, "Num-", "key.num_subtract"),
            KeyDef(0x6E, "Num.", "key.num_decimal"),
            KeyDef(0x6F, "Num/", "key.num_divide"),
        ]
    )
    # OEM punctuation keeps its glyph in every language
    defs.extend(
        [
            KeyDef(0xDC, "\\"),
            KeyDef(0xC0, "`"),
            KeyDef(0xBA, ";"),
            KeyDef(0xBB, "="),
            KeyDef(0xBC, ","),
            KeyDef(0xBD, "-"),
            KeyDef(0xBE, "."),
            KeyDef(0xBF, "/"),
            KeyDef(0xDB, "["),
            KeyDef(0xDD, "]"),
            KeyDef(0xDE, "'"),
        ]
    )
    defs.extend(
        [
            KeyDef(VK_SPACE, "Space", "key.space"),
            KeyDef(VK_TAB, "Tab", "key.tab"),
            KeyDef(VK_RETURN, "Enter", "key.enter"),
            KeyDef(0x2D, "Ins", "key.insert"),
            KeyDef(0x2E, "Del", "key.delete"),
            KeyDef(0x24, "Home", "key.home"),
            KeyDef(0x23, "End", "key.end"),
            KeyDef(0x21, "PgUp", "key.page_up"),
            KeyDef(0x22, "PgDn", "key.page_down"),
        ]
    )
    defs.extend(KeyDef(code, chr(code)) for code in range(0x30, 0x3A))
    defs.extend(KeyDef(code, chr(code)) for code in range(0x41, 0x5B))
    return tuple(defs)


KEY_DEFS: tuple[KeyDef, ...] = _build_key_defs()
_KEYS_BY_CODE: dict[int, KeyDef] = {}
for _key in KEY_DEFS:
    _KEYS_BY_CODE.setdefault(_key.code, _key)
_CODES_BY_NAME: dict[str, int] = {}
for _key in KEY_DEFS:
    _CODES_BY_NAME.setdefault(_key.name.lower(), _key.code)
del _key

_FUNCTION_KEY_RE = re.compile(r"[Ff]([0-9]{1,2})")
_HEX_CODE_RE = re.compile(r"0[xX]([0-9A-Fa-f]{2})")

MODIFIERS: tuple[ModifierDef, ...] = (
    ModifierDef(VK_SHIFT, "SHIFT", "key.shift"),
    ModifierDef(VK_CONTROL, "CTRL", "key.ctrl"),
    ModifierDef(VK_MENU, "ALT", "key.alt"),
    ModifierDef(VK_RMENU, "RALT", "key.ralt"),
)
MODIFIER_CODES: frozenset[int] = frozenset(mod.code for mod in MODIFIERS)
_MODIFIERS_BY_CODE: dict[int, ModifierDef] = {mod.code: mod for mod in MODIFIERS}
_MODIFIERS_BY_TOKEN: dict[str, ModifierDef] = {mod.token.lower(): mod for mod in MODIFIERS}

BIND_INI_KEYS: tuple[str, ...] = (
    "QuickBuild1",
    "QuickBuild2",
    "QuickBuild3",
    "QuickBuild4",
    "QuickBuild5",
    "QuickBuild6",
    "QuickBuild7",
    "QuickBuild8",
    "Rotation",
    "Target",
    "ToolbarSwap",
    "SuperDwarf",
    "RemoveTarget",
    "UndoLast",
    "RemoveAll",
    "Configuration",
    "AdvancedBuilderOpen",
)
BIND_LABEL_KEYS: tuple[str, ...] = (
    "bind.quick_build_1",
    "bind.quick_build_2",
    "bind.quick_build_3",
    "bind.quick_build_4",
    "bind.quick_build_5",
    "bind.quick_build_6",
    "bind.quick_build_7",
    "bind.quick_build_8",
    "bind.rotation",
    "bind.target",
    "bind.toolbar_swap",
    "bind.mod_menu_4",
    "bind.remove_target",
    "bind.undo_last",
    "bind.remove_all",
    "bind.configuration",
    "bind.ab_open",
)
_BIND_INDEX_BY_KEY: dict[str, int] = {key.lower(): idx for idx, key in enumerate(BIND_INI_KEYS)}


def _localized(loc_key: str | None, fallback: str, table: LocalizationTable | None) -> str:
    if loc_key is None or table is None:
        return fallback
    return table.get(loc_key) or fallback


def hex_key_name(code: int) -> str:
    return f"0x{code & 0xFF:02X}"


def code_to_name(code: int, table: LocalizationTable | None = None) -> str:
    """Return the display name for ``code``, falling back to ``0xHH``."""
    key = _KEYS_BY_CODE.get(code)
    if key is None:
        return hex_key_name(code)
    return _localized(key.loc_key, key.name, table)


def name_to_code(name: str) -> int | None:
    """
    Resolve a key name as written in INI files to its code.

    Accepts ``F1``..``F24``, every canonical name produced by
    ``code_to_name`` (case-insensitive) and ``0xHH`` literals. Returns
    ``None`` for anything else, including out-of-range forms like ``F0``.
    """
    if not name:
        return None
    match = _FUNCTION_KEY_RE.fullmatch(name)
    if match:
        number = int(match.group(1))
        if 1 <= number <= MAX_FUNCTION_KEY:
            return VK_F1 + number - 1
        return None
    code = _CODES_BY_NAME.get(name.lower())
    if code is not None:
        return code
    match = _HEX_CODE_RE.fullmatch(name)
    if match:
        value = int(match.group(1), 16)
        if 0 < value < 256:
            return value
    return None


def is_modifier_code(code: int) -> bool:
    return code in MODIFIER_CODES


def modifier_name(code: int, table: LocalizationTable | None = None) -> str:
    """Return the display label of a modifier; unknown codes read as Shift."""
    mod = _MODIFIERS_BY_CODE.get(code, MODIFIERS[0])
    return _localized(mod.loc_key, mod.token, table)


def name_to_modifier_code(name: str) -> int | None:
    mod = _MODIFIERS_BY_TOKEN.get(name.lower()) if name else None
    return mod.code if mod is not None else None


def modifier_to_persisted_form(code: int) -> str:
    return _MODIFIERS_BY_CODE.get(code, MODIFIERS[0]).token


def next_modifier(code: int) -> int:
    """Step Shift -> Ctrl -> Alt -> RightAlt -> Shift; unknown codes reset to Shift."""
    for idx, mod in enumerate(MODIFIERS):
        if mod.code == code:
            return MODIFIERS[(idx + 1) % len(MODIFIERS)].code
    return VK_SHIFT


def bind_index_to_ini_key(index: int) -> str | None:
    if 0 <= index < BIND_COUNT:
        return BIND_INI_KEYS[index]
    return None


def ini_key_to_bind_index(key: str) -> int | None:
    return _BIND_INDEX_BY_KEY.get(key.lower())


def bind_label(index: int, table: LocalizationTable | None = None) -> str:
    """Return the action label for a bind slot, or its INI key without a table entry."""
    ini_key = bind_index_to_ini_key(index)
    if ini_key is None:
        return ""
    return _localized(BIND_LABEL_KEYS[index], ini_key, table)


__all__ = [
    "VK_SHIFT",
    "VK_CONTROL",
    "VK_MENU",
    "VK_RMENU",
    "VK_F1",
    "VK_NUMPAD0",
    "KeyDef",
    "ModifierDef",
    "KEY_DEFS",
    "MODIFIERS",
    "MODIFIER_CODES",
    "BIND_INI_KEYS",
    "BIND_LABEL_KEYS",
    "hex_key_name",
    "code_to_name",
    "name_to_code",
    "is_modifier_code",
    "modifier_name",
    "name_to_modifier_code",
    "modifier_to_persisted_form",
    "next_modifier",
    "bind_index_to_ini_key",
    "ini_key_to_bind_index",
    "bind_label",
]
