"""Load and save the overlay's settings files line by line."""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, Iterator, TypeVar

from ..core.config import INI_KEYBINDINGS_SECTION, INI_MODIFIER_KEY
from ..core.keycodes import ini_key_to_bind_index, name_to_code, name_to_modifier_code
from ..core.localization import LocalizationTable
from ..logs.logging import get_overlay_logger
from ..models.schema import KeybindConfig, QuickBuildConfig, RemovalEntry
from .ini_format import IniKeyValue, IniSection, parse_ini_line
from .line_formats import (
    KeybindEntry,
    ModifierEntry,
    RemovalPosition,
    RemovalTypeRule,
    RotationEntry,
    Skip,
    SlotEntry,
    format_keybind_line,
    format_modifier_line,
    format_removal_line,
    format_rotation_line,
    format_slot_line,
    parse_keybind_line,
    parse_removal_line,
    parse_slot_line,
)

_LOGGER = get_overlay_logger("moria_overlay.config_files")

T = TypeVar("T")


class ConfigFileError(RuntimeError):
    """Raised when a settings file cannot be written."""


def _read_lines(path: Path) -> Iterator[str]:
    try:
        with path.open("r", encoding="utf-8", errors="replace") as handle:
            yield from handle
    except FileNotFoundError:
        _LOGGER.info("Settings file %s not found; using empty settings", path)
    except OSError as exc:
        _LOGGER.warning("Failed to read %s: %s", path, exc)


def _parse_file(path: Path | str, parser: Callable[[str], T]) -> list[T]:
    target = Path(path)
    records: list[T] = []
    skipped = 0
    for line in _read_lines(target):
        result = parser(line)
        if isinstance(result, Skip):
            skipped += 1
            continue
        records.append(result)
    _LOGGER.debug("Parsed %s: records=%d skipped=%d", target, len(records), skipped)
    return records


def load_removals(path: Path | str) -> list[RemovalEntry]:
    entries: list[RemovalEntry] = []
    for record in _parse_file(path, parse_removal_line):
        if isinstance(record, (RemovalPosition, RemovalTypeRule)):
            entries.append(record.to_entry())
    return entries


def load_quickbuild_slots(path: Path | str) -> QuickBuildConfig:
    config = QuickBuildConfig()
    for record in _parse_file(path, parse_slot_line):
        if isinstance(record, SlotEntry):
            config.slots[record.slot_index] = record.to_slot()
        elif isinstance(record, RotationEntry):
            config.rotation_step = record.step
    return config


def load_keybindings(path: Path | str, base: KeybindConfig | None = None) -> KeybindConfig:
    """Apply ``keybindings.txt`` on top of ``base`` (or an empty config)."""
    config = KeybindConfig(dict(base.binds), base.modifier) if base is not None else KeybindConfig()
    for record in _parse_file(path, parse_keybind_line):
        if isinstance(record, KeybindEntry):
            config.binds[record.bind_index] = record.key_code
        elif isinstance(record, ModifierEntry):
            config.modifier = record.key_code
    return config


def load_ini(path: Path | str) -> dict[str, dict[str, str]]:
    """Return ``{section: {key: value}}``; keys before the first header land under ``""``."""
    sections: dict[str, dict[str, str]] = {}
    current = ""
    for record in _parse_file(path, parse_ini_line):
        if isinstance(record, IniSection):
            current = record.name
            sections.setdefault(current, {})
        elif isinstance(record, IniKeyValue):
            sections.setdefault(current, {})[record.key] = record.value
    return sections


def load_ini_keybindings(path: Path | str, base: KeybindConfig | None = None) -> KeybindConfig:
    """
    Read the ``[Keybindings]`` section of the INI file.

    Entries look like ``QuickBuild1 = F1`` and ``Modifier = SHIFT``. Unknown
    action names and unknown key names are ignored so the matching entries of
    ``base`` stay in effect.
    """
    config = KeybindConfig(dict(base.binds), base.modifier) if base is not None else KeybindConfig()
    section: dict[str, str] = {}
    for name, values in load_ini(path).items():
        if name.lower() == INI_KEYBINDINGS_SECTION.lower():
            section.update(values)
    for key, value in section.items():
        if key.lower() == INI_MODIFIER_KEY.lower():
            modifier = name_to_modifier_code(value)
            if modifier is not None:
                config.modifier = modifier
            else:
                _LOGGER.debug("Ignoring unknown modifier %r", value)
            continue
        index = ini_key_to_bind_index(key)
        code = name_to_code(value)
        if index is None or code is None:
            _LOGGER.debug("Ignoring keybinding %r = %r", key, value)
            continue
        config.binds[index] = code
    return config


def _header_lines(table: LocalizationTable | None, keys: Iterable[str]) -> list[str]:
    if table is None:
        return []
    return [text for text in (table.get(key) for key in keys) if text]


def _write_lines(path: Path | str, lines: Iterable[str]) -> None:
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("w", encoding="utf-8", newline="\n") as handle:
            for line in lines:
                handle.write(line)
                handle.write("\n")
    except OSError as exc:
        raise ConfigFileError(f"Failed to write {target}: {exc}") from exc


def save_removals(path: Path | str, entries: Iterable[RemovalEntry], table: LocalizationTable | None = None) -> None:
    lines = _header_lines(table, ("save.removal_header", "save.removal_format1", "save.removal_format2"))
    lines.extend(format_removal_line(entry) for entry in entries)
    _write_lines(path, lines)


def save_quickbuild_slots(path: Path | str, config: QuickBuildConfig, table: LocalizationTable | None = None) -> None:
    lines = _header_lines(table, ("save.quickbuild_header", "save.quickbuild_format"))
    lines.extend(format_slot_line(config.slots[idx]) for idx in sorted(config.slots))
    if config.rotation_step is not None:
        lines.append(format_rotation_line(config.rotation_step))
    _write_lines(path, lines)


def save_keybindings(path: Path | str, config: KeybindConfig, table: LocalizationTable | None = None) -> None:
    lines = _header_lines(table, ("save.keybind_header",))
    lines.extend(format_keybind_line(idx, code) for idx, code in sorted(config.binds.items()))
    lines.append(format_modifier_line(config.modifier))
    _write_lines(path, lines)


__all__ = [
    "ConfigFileError",
    "load_removals",
    "load_quickbuild_slots",
    "load_keybindings",
    "load_ini",
    "load_ini_keybindings",
    "save_removals",
    "save_quickbuild_slots",
    "save_keybindings",
]
