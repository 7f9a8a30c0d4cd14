"""Command-line inspector for the overlay's saved settings."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence, TextIO

from ..core.config import (
    BIND_COUNT,
    CONFIG_DIR,
    DEFAULT_LANGUAGE,
    DEFAULT_WRAP_WIDTH,
    INI_FILE,
    KEYBINDINGS_FILE,
    LOCALIZATION_DIR,
    QUICKBUILD_FILE,
    REMOVALS_FILE,
)
from ..core.keycodes import bind_label, ini_key_to_bind_index
from ..core.localization import LocalizationTable, localization_path
from ..core.text_utils import wrap_text
from ..importing.config_files import (
    load_ini_keybindings,
    load_keybindings,
    load_quickbuild_slots,
    load_removals,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="moria_overlay",
        description="Show the keybindings, quick-build slots and removals stored in a settings folder.",
    )
    parser.add_argument("--config-dir", type=Path, default=CONFIG_DIR, help="folder holding the settings files")
    parser.add_argument("--lang", default=DEFAULT_LANGUAGE, help="localization override to load (e.g. en, de)")
    parser.add_argument(
        "--localization-dir",
        type=Path,
        default=None,
        help="folder holding <lang>.json files (defaults to <config-dir>/Localization)",
    )
    parser.add_argument("--width", type=int, default=DEFAULT_WRAP_WIDTH, help="wrap long lines at this width")
    return parser


def render_report(config_dir: Path, table: LocalizationTable, width: int = DEFAULT_WRAP_WIDTH) -> list[str]:
    """Return the report lines for the settings stored in ``config_dir``."""
    keybinds = load_keybindings(config_dir / KEYBINDINGS_FILE)
    keybinds = load_ini_keybindings(config_dir / INI_FILE, base=keybinds)
    quickbuild = load_quickbuild_slots(config_dir / QUICKBUILD_FILE)
    removals = load_removals(config_dir / REMOVALS_FILE)
    separator = table.get("ui.key_separator") or ": "

    lines: list[str] = []
    lines.append(wrap_text(table.get("ui.set_modifier_key") or "Modifier: ", keybinds.modifier_label(table), width))
    for idx in range(BIND_COUNT):
        key = keybinds.key_name(idx, table) or "-"
        lines.append(wrap_text(bind_label(idx, table) + separator, key, width))
    for idx in sorted(quickbuild.slots):
        slot = quickbuild.slots[idx]
        value = slot.display_name if not slot.texture_name else f"{slot.display_name} ({slot.texture_name})"
        lines.append(wrap_text(bind_label(idx, table) + separator, value, width))
    if quickbuild.rotation_step is not None:
        rotation_label = bind_label(ini_key_to_bind_index("Rotation") or 0, table)
        step_text = f"{quickbuild.rotation_step}{table.get('ovr.degree')}"
        lines.append(wrap_text(rotation_label + separator, step_text, width))
    prefix = table.get("ui.saved_removals_prefix") or "Saved Removals ("
    suffix = table.get("ui.saved_removals_suffix") or " entries)"
    lines.append(f"{prefix}{len(removals)}{suffix}")
    for entry in removals:
        lines.append(wrap_text("  ", entry.display_label(table), width))
    return lines


def main(argv: Sequence[str] | None = None, out: TextIO | None = None) -> int:
    """Print the settings report; returns the process exit code."""
    args = _build_parser().parse_args(argv)
    stream = out or sys.stdout
    if args.width < 1:
        print("--width must be at least 1", file=sys.stderr)
        return 2
    table = LocalizationTable()
    table.init_defaults()
    loc_dir = args.localization_dir
    if loc_dir is None:
        loc_dir = args.config_dir / LOCALIZATION_DIR.name
    loc_file = localization_path(args.lang, loc_dir)
    if loc_file.is_file() and not table.load_overrides(loc_file):
        print(f"Localization file {loc_file} could not be loaded; using defaults.", file=sys.stderr)
    for line in render_report(args.config_dir, table, args.width):
        print(line, file=stream)
    return 0


if __name__ == "__main__":
    sys.exit(main())
