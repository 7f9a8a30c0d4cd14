"""Paths and fixed limits shared by the overlay core."""
from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

_HOME_OVERRIDE = os.environ.get("MORIA_OVERLAY_HOME", "").strip()
CONFIG_DIR = Path(_HOME_OVERRIDE).expanduser() if _HOME_OVERRIDE else BASE_DIR / "config"
LOG_DIR = CONFIG_DIR / "logs"
LOCALIZATION_DIR = CONFIG_DIR / "Localization"

REMOVALS_FILE = "removed_instances.txt"
QUICKBUILD_FILE = "quickbuild_slots.txt"
KEYBINDINGS_FILE = "keybindings.txt"
INI_FILE = "MoriaCppMod.ini"
INI_KEYBINDINGS_SECTION = "Keybindings"
INI_MODIFIER_KEY = "Modifier"

DEFAULT_LANGUAGE = "en"

BIND_COUNT = 17
OVERLAY_BUILD_SLOTS = 8
MAX_ROTATION_STEP = 90
DEFAULT_WRAP_WIDTH = 70


__all__ = [
    "BASE_DIR",
    "CONFIG_DIR",
    "LOG_DIR",
    "LOCALIZATION_DIR",
    "REMOVALS_FILE",
    "QUICKBUILD_FILE",
    "KEYBINDINGS_FILE",
    "INI_FILE",
    "INI_KEYBINDINGS_SECTION",
    "INI_MODIFIER_KEY",
    "DEFAULT_LANGUAGE",
    "BIND_COUNT",
    "OVERLAY_BUILD_SLOTS",
    "MAX_ROTATION_STEP",
    "DEFAULT_WRAP_WIDTH",
]
