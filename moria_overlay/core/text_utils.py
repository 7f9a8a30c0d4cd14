"""String helpers for overlay labels and asset identifiers."""
from __future__ import annotations

from .config import DEFAULT_WRAP_WIDTH

WRAP_BREAK_CHARS = frozenset(" _/-\\")
_ASCII_DIGITS = frozenset("0123456789")


def wrap_text(prefix: str, value: str, max_line_length: int = DEFAULT_WRAP_WIDTH) -> str:
    """
    Insert newlines into ``prefix + value`` so no line exceeds ``max_line_length``.

    Each cut prefers the break character closest to the hard boundary, looking
    back no further than half a line; the break lands just after that
    character. Without one in the window the line is cut at the hard limit.
    Removing the inserted newlines always gives back ``prefix + value``.
    """
    full = prefix + value
    if max_line_length < 1:
        raise ValueError("max_line_length must be at least 1")
    if len(full) <= max_line_length:
        return full
    lines: list[str] = []
    line_start = 0
    while line_start < len(full):
        line_end = line_start + max_line_length
        if line_end >= len(full):
            lines.append(full[line_start:])
            break
        break_at = line_end
        for j in range(line_end - 1, line_start + max_line_length // 2, -1):
            if full[j] in WRAP_BREAK_CHARS:
                break_at = j + 1
                break
        lines.append(full[line_start:break_at])
        line_start = break_at
    return "\n".join(lines)


def extract_friendly_name(mesh_name: str) -> str:
    """Return the part of ``mesh_name`` before the first dash."""
    return mesh_name.split("-", 1)[0]


def component_name_to_mesh_id(name: str) -> str:
    """
    Strip the numeric disambiguation suffix from a component name.

    ``PWM_Quarry_2x2_2147476295`` becomes ``PWM_Quarry_2x2``; a suffix that is
    not purely digits (``_Large``) keeps the name intact. A trailing bare
    underscore also counts as an empty numeric suffix.
    """
    last_underscore = name.rfind("_")
    if last_underscore > 0:
        suffix = name[last_underscore + 1:]
        if all(ch in _ASCII_DIGITS for ch in suffix):
            return name[:last_underscore]
    return name


__all__ = ["WRAP_BREAK_CHARS", "wrap_text", "extract_friendly_name", "component_name_to_mesh_id"]
