"""
Localized string table.

Handles:
* compiled English defaults for every user-facing string
* merge-loading a flat ``{"key": "value"}`` override file (``en.json`` style)
* lookups that never fail

The override files are read with a small dedicated scanner instead of the
``json`` module so files saved by older builds (trailing commas, stray text
before the opening brace) keep loading exactly as they always have.
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterator, Mapping

from ..logs.logging import get_overlay_logger
from .config import DEFAULT_LANGUAGE, LOCALIZATION_DIR

EMPTY_TEXT = ""

_UTF8_BOM = b"\xef\xbb\xbf"
_JSON_WHITESPACE = " \t\n\r"
_SIMPLE_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "/": "/",
}

_LOGGER = get_overlay_logger("moria_overlay.localization")

DEFAULT_STRINGS: dict[str, str] = {
    # Keybind labels
    "bind.quick_build_1": "Quick Build 1",
    "bind.quick_build_2": "Quick Build 2",
    "bind.quick_build_3": "Quick Build 3",
    "bind.quick_build_4": "Quick Build 4",
    "bind.quick_build_5": "Quick Build 5",
    "bind.quick_build_6": "Quick Build 6",
    "bind.quick_build_7": "Quick Build 7",
    "bind.quick_build_8": "Quick Build 8",
    "bind.rotation": "Rotation",
    "bind.target": "Target",
    "bind.toolbar_swap": "Toolbar Swap",
    "bind.mod_menu_4": "Super Dwarf",
    "bind.remove_target": "Remove Target",
    "bind.undo_last": "Undo Last",
    "bind.remove_all": "Remove All",
    "bind.configuration": "Configuration",
    "bind.ab_open": "Advanced Builder Open",
    "bind.section_quick_building": "Quick Building",
    "bind.section_mod_controller": "Mod Controller",
    "bind.section_advanced_builder": "Advanced Builder",
    # Modifier keys
    "key.shift": "SHIFT",
    "key.ctrl": "CTRL",
    "key.alt": "ALT",
    "key.ralt": "RALT",
    # Key display names that are not literal glyphs
    "key.num_multiply": "Num*",
    "key.num_add": "Num+",
    "key.num_separator": "NumSep",
    "key.num_subtract": "Num-",
    "key.num_decimal": "Num.",
    "key.num_divide": "Num/",
    "key.space": "Space",
    "key.tab": "Tab",
    "key.enter": "Enter",
    "key.insert": "Ins",
    "key.delete": "Del",
    "key.home": "Home",
    "key.end": "End",
    "key.page_up": "PgUp",
    "key.page_down": "PgDn",
    # Config tabs
    "tab.optional_mods": "Optional Mods",
    "tab.key_mapping": "Key Mapping",
    "tab.hide_environment": "Hide Environment",
    # Config menu
    "ui.config_title": "Building Mod Configuration Menu",
    "ui.cheat_toggles": "Cheat Toggles",
    "ui.free_build": "  Free Build",
    "ui.free_build_on": "  Free Build  (ON)",
    "ui.free_build_desc": "  Build without materials",
    "ui.unlock_all_recipes": "Unlock All Recipes",
    "ui.set_modifier_key": "Set Modifier Key:  ",
    "ui.set_modifier_key_short": "Set Modifier Key",
    "ui.press_key": "Press key...",
    "ui.key_separator": ":  ",
    "ui.saved_removals_prefix": "Saved Removals (",
    "ui.saved_removals_suffix": " entries)",
    "ui.type_rule": "TYPE RULE",
    # Target info
    "ui.target_info_title": "Target Info",
    "ui.label_class": "Class:",
    "ui.label_name": "Name:",
    "ui.label_display": "Display:",
    "ui.label_path": "Path:",
    "ui.label_build": "Build:",
    "ui.label_recipe": "Recipe:",
    "ui.value_class_prefix": "Class:    ",
    "ui.value_name_prefix": "Name:     ",
    "ui.value_display_prefix": "Display:  ",
    "ui.value_path_prefix": "Path:     ",
    "ui.value_build_prefix": "Build:    ",
    "ui.value_recipe_prefix": "Recipe:   ",
    "ui.yes": "Yes",
    "ui.no": "No",
    "ui.info_title": "Info",
    # Overlay text
    "ovr.target": "TGT",
    "ovr.config": "CFG",
    "ovr.degree": "\u00b0",
    "ovr.hide_char": "HIDE",
    # On-screen messages
    "msg.no_hit": "[Inspect] No hit",
    "msg.actor_dump_no_hit": "[ActorDump] No hit",
    "msg.not_in_build_mode": "Not in build mode",
    "msg.slot_cleared": " cleared",
    "msg.no_recipe_selected": "No recipe selected! Click one in Build menu first.",
    "msg.build_menu_not_found": "Build menu not open or no widget found",
    "msg.recipe_not_found": "' not found in menu!",
    "msg.no_buildable_target": "No buildable target \u2014 aim at a building and press F10 first",
    "msg.build_menu_timeout": "Build menu didn't open (timeout)",
    "msg.all_recipes_unlocked": "ALL RECIPES UNLOCKED!",
    "msg.recipe_actor_not_found": "Recipe debug actor not found",
    "msg.free_build_failed": "Free Build toggle failed - debug actor not found",
    "msg.hotbar_overlay_on": "Hotbar overlay ON",
    "msg.hotbar_overlay_off": "Hotbar overlay OFF",
    "msg.already_clearing": "Already clearing hotbar...",
    "msg.wait_swap": "Wait for toolbar swap to finish",
    "msg.wait_clear": "Wait for hotbar clear to finish",
    "msg.player_not_found": "Player not found",
    "msg.inventory_not_found": "Inventory not found",
    "msg.equip_bag": "Equip a bag first!",
    "msg.clearing_hotbar": "Clearing hotbar...",
    "msg.swap_in_progress": "Swap already in progress...",
    "msg.body_inv_not_found": "BodyInventory not found!",
    "msg.containers_discovered": "Containers discovered!",
    "msg.container_discovery_failed": "Container discovery failed - swap unavailable",
    "msg.debug_actor_not_found": "Debug menu actor not found",
    "msg.hud_not_found": "MoriaHUD NOT FOUND",
    "msg.icon_probe_done": "Icon probe done (see UE4SS log)",
    "msg.builders_bar_created": "Builders bar created!",
    "msg.mod_controller_created": "Mod Controller created!",
    "msg.umg_bar_removed": "UMG bar removed",
    "msg.mc_removed": "Mod Controller removed",
    "msg.char_hidden": "Character hidden",
    "msg.char_visible": "Character visible",
    "msg.fly_on": "Fly mode ON",
    "msg.fly_off": "Fly mode OFF",
    # Save file headers
    "save.removal_header": "# MoriaCppMod removed instances",
    "save.removal_format1": "# meshName|posX|posY|posZ = single instance",
    "save.removal_format2": "# @meshName = remove ALL of this type",
    "save.quickbuild_header": "# MoriaCppMod quick-build slots (F1-F8)",
    "save.quickbuild_format": "# slot|displayName|textureName",
    "save.keybind_header": "# MoriaCppMod keybindings (index|VK_code)",
}


class _LocJsonScanner:
    """Cursor over the restricted flat-object JSON dialect."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return self.text[self.pos]

    def skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in _JSON_WHITESPACE:
            self.pos += 1

    def read_string(self) -> str | None:
        self.skip_whitespace()
        if self.at_end() or self.peek() != '"':
            return None
        text = self.text
        self.pos += 1
        out: list[str] = []
        while self.pos < len(text) and text[self.pos] != '"':
            ch = text[self.pos]
            if ch == "\\" and self.pos + 1 < len(text):
                self.pos += 1
                esc = text[self.pos]
                if esc in _SIMPLE_ESCAPES:
                    out.append(_SIMPLE_ESCAPES[esc])
                elif esc == "u":
                    if self.pos + 4 < len(text):
                        out.append(_code_point_text(text[self.pos + 1:self.pos + 5]))
                        self.pos += 4
                else:
                    out.append(esc)
            else:
                out.append(ch)
            self.pos += 1
        if self.pos < len(text):
            self.pos += 1
        return "".join(out)


def _code_point_text(digits: str) -> str:
    # non-hex characters contribute zero bits
    cp = 0
    for ch in digits:
        cp <<= 4
        try:
            cp |= int(ch, 16)
        except ValueError:
            pass
    if 0xD800 <= cp <= 0xDFFF:
        return "\ufffd"
    return chr(cp)


def parse_loc_json(data: bytes | str) -> dict[str, str]:
    """
    Extract the string pairs of a flat JSON object.

    Scanning stops at the closing brace, at the end of input, or at the first
    malformed pair; pairs read before that point are returned. An input with
    no opening brace yields an empty mapping.
    """
    if isinstance(data, bytes):
        if data.startswith(_UTF8_BOM):
            data = data[len(_UTF8_BOM):]
        text = data.decode("utf-8", errors="replace")
    else:
        text = data[1:] if data.startswith("\ufeff") else data
    start = text.find("{")
    if start < 0:
        return {}
    scanner = _LocJsonScanner(text)
    scanner.pos = start + 1
    pairs: dict[str, str] = {}
    while not scanner.at_end():
        scanner.skip_whitespace()
        if scanner.at_end() or scanner.peek() == "}":
            break
        if scanner.peek() == ",":
            scanner.pos += 1
            continue
        key = scanner.read_string()
        if key is None:
            break
        scanner.skip_whitespace()
        if scanner.at_end() or scanner.peek() != ":":
            break
        scanner.pos += 1
        value = scanner.read_string()
        if value is None:
            break
        pairs[key] = value
    return pairs


def localization_path(lang: str = DEFAULT_LANGUAGE, directory: Path | None = None) -> Path:
    """Return the override file location for ``lang``."""
    return (directory or LOCALIZATION_DIR) / f"{lang}.json"


class LocalizationTable:
    """Key to display text store owned by the host and passed to consumers."""

    def __init__(self, entries: Mapping[str, str] | None = None):
        self._table: dict[str, str] = dict(entries or {})

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, key: object) -> bool:
        return key in self._table

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def init_defaults(self) -> None:
        """Register the compiled English strings, replacing same-named entries."""
        self._table.update(DEFAULT_STRINGS)

    def get(self, key: str) -> str:
        return self._table.get(key, EMPTY_TEXT)

    def merge(self, entries: Mapping[str, str]) -> None:
        self._table.update(entries)

    def clear(self) -> None:
        self._table.clear()

    def load_overrides(self, path: Path | str) -> bool:
        """
        Merge the pairs of a localization file into the table.

        Existing keys are overwritten and absent keys are kept. Returns
        ``False`` and leaves the table untouched when the file cannot be read
        or holds no pairs.
        """
        target = Path(path)
        try:
            raw = target.read_bytes()
        except OSError as exc:
            _LOGGER.warning("Localization file %s unavailable: %s", target, exc)
            return False
        pairs = parse_loc_json(raw)
        if not pairs:
            _LOGGER.warning("Localization file %s has no string pairs", target)
            return False
        self.merge(pairs)
        _LOGGER.info("Loaded %d localized strings from %s", len(pairs), target)
        return True

    def load_language(self, lang: str = DEFAULT_LANGUAGE, directory: Path | None = None) -> bool:
        return self.load_overrides(localization_path(lang, directory))


def default_table() -> LocalizationTable:
    """Return a fresh table filled with the compiled defaults."""
    table = LocalizationTable()
    table.init_defaults()
    return table


__all__ = [
    "EMPTY_TEXT",
    "DEFAULT_STRINGS",
    "LocalizationTable",
    "parse_loc_json",
    "localization_path",
    "default_table",
]
