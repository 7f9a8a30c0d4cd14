"""Records the overlay keeps in memory for its persisted settings."""
from __future__ import annotations

from dataclasses import dataclass, field

from ..core.keycodes import VK_SHIFT, code_to_name, modifier_name
from ..core.localization import LocalizationTable
from ..core.text_utils import extract_friendly_name


@dataclass
class RemovalEntry:
    """One removal directive: a single placed instance, or every instance of a mesh."""

    mesh_name: str
    pos_x: float = 0.0
    pos_y: float = 0.0
    pos_z: float = 0.0
    is_type_rule: bool = False

    @property
    def friendly_name(self) -> str:
        return extract_friendly_name(self.mesh_name)

    @property
    def coords_text(self) -> str:
        if self.is_type_rule:
            return ""
        return f"{self.pos_x:.1f}, {self.pos_y:.1f}, {self.pos_z:.1f}"

    def display_label(self, table: LocalizationTable | None = None) -> str:
        if self.is_type_rule:
            marker = (table.get("ui.type_rule") if table is not None else "") or "TYPE RULE"
            return f"{self.friendly_name} [{marker}]"
        return f"{self.friendly_name} ({self.coords_text})"


@dataclass
class QuickBuildSlot:
    slot_index: int
    display_name: str
    texture_name: str = ""


@dataclass
class Keybind:
    bind_index: int
    key_code: int


@dataclass
class KeybindConfig:
    """Keybinds by bind index plus the active modifier."""

    binds: dict[int, int] = field(default_factory=dict)
    modifier: int = VK_SHIFT

    def key_name(self, bind_index: int, table: LocalizationTable | None = None) -> str:
        code = self.binds.get(bind_index)
        if code is None:
            return ""
        return code_to_name(code, table)

    def modifier_label(self, table: LocalizationTable | None = None) -> str:
        return modifier_name(self.modifier, table)

    def as_keybinds(self) -> list[Keybind]:
        return [Keybind(idx, code) for idx, code in sorted(self.binds.items())]


@dataclass
class QuickBuildConfig:
    slots: dict[int, QuickBuildSlot] = field(default_factory=dict)
    rotation_step: int | None = None


__all__ = ["RemovalEntry", "QuickBuildSlot", "Keybind", "KeybindConfig", "QuickBuildConfig"]
