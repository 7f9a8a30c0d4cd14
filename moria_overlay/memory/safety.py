"""
Page-protection checks run before dereferencing raw addresses.

Addresses found by scanning game memory are not owned references, so every
read goes through ``is_readable_memory`` first. The page metadata comes from a
``RegionProbe``: ``Win32RegionProbe`` asks ``VirtualQuery``/``VirtualQueryEx``
and ``ProcessMapsProbe`` reads the process mappings through psutil on
platforms without the Win32 API.
"""
from __future__ import annotations

import ctypes
import os
import sys
from dataclasses import dataclass
from typing import Protocol

import psutil

from ..logs.logging import LOG_DEBUG, LOG_WARNING, MEMORY_LOGGER

MEM_COMMIT = 0x1000

PAGE_NOACCESS = 0x01
PAGE_READONLY = 0x02
PAGE_READWRITE = 0x04
PAGE_WRITECOPY = 0x08
PAGE_EXECUTE = 0x10
PAGE_EXECUTE_READ = 0x20
PAGE_EXECUTE_READWRITE = 0x40
PAGE_EXECUTE_WRITECOPY = 0x80
PAGE_GUARD = 0x100
PAGE_NOCACHE = 0x200
PAGE_WRITECOMBINE = 0x400

PAGE_MODIFIER_FLAGS = PAGE_GUARD | PAGE_NOCACHE | PAGE_WRITECOMBINE
READABLE_PROTECTIONS = frozenset(
    {PAGE_READONLY, PAGE_READWRITE, PAGE_EXECUTE_READ, PAGE_EXECUTE_READWRITE}
)

_POINTER_LIMIT = 1 << (8 * ctypes.sizeof(ctypes.c_void_p))


@dataclass(frozen=True)
class RegionInfo:
    """Metadata of the memory region holding a queried address."""

    base: int
    size: int
    committed: bool
    protect: int


class RegionProbe(Protocol):
    def query(self, address: int) -> RegionInfo | None:
        """Return the region containing ``address``, or ``None`` if the query fails."""
        ...


# -----------------------------------------------------------------------------
# Win32 declarations. Only defined on Windows; other platforms use psutil.
# -----------------------------------------------------------------------------
if sys.platform == "win32":
    from ctypes import wintypes

    kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)

    class MEMORY_BASIC_INFORMATION(ctypes.Structure):
        _fields_ = [
            ("BaseAddress", ctypes.c_void_p),
            ("AllocationBase", ctypes.c_void_p),
            ("AllocationProtect", wintypes.DWORD),
            ("RegionSize", ctypes.c_size_t),
            ("State", wintypes.DWORD),
            ("Protect", wintypes.DWORD),
            ("Type", wintypes.DWORD),
        ]

    VirtualQuery = kernel32.VirtualQuery
    VirtualQuery.argtypes = [
        wintypes.LPCVOID,
        ctypes.POINTER(MEMORY_BASIC_INFORMATION),
        ctypes.c_size_t,
    ]
    VirtualQuery.restype = ctypes.c_size_t
    VirtualQueryEx = kernel32.VirtualQueryEx
    VirtualQueryEx.argtypes = [
        wintypes.HANDLE,
        wintypes.LPCVOID,
        ctypes.POINTER(MEMORY_BASIC_INFORMATION),
        ctypes.c_size_t,
    ]
    VirtualQueryEx.restype = ctypes.c_size_t


class Win32RegionProbe:
    """Query page metadata with ``VirtualQuery`` (own process) or ``VirtualQueryEx``."""

    def __init__(self, process_handle: int | None = None):
        if sys.platform != "win32":
            raise RuntimeError("Win32RegionProbe requires Windows")
        self.process_handle = process_handle

    def query(self, address: int) -> RegionInfo | None:
        if address < 0 or address >= _POINTER_LIMIT:
            return None
        mbi = MEMORY_BASIC_INFORMATION()
        if self.process_handle is None:
            written = VirtualQuery(ctypes.c_void_p(address), ctypes.byref(mbi), ctypes.sizeof(mbi))
        else:
            written = VirtualQueryEx(
                self.process_handle, ctypes.c_void_p(address), ctypes.byref(mbi), ctypes.sizeof(mbi)
            )
        if written == 0:
            return None
        return RegionInfo(
            base=mbi.BaseAddress or 0,
            size=int(mbi.RegionSize),
            committed=mbi.State == MEM_COMMIT,
            protect=int(mbi.Protect),
        )


def perms_to_protect(perms: str) -> int:
    """Translate a POSIX ``rwxp`` permission string to the matching Win32 protection."""
    readable = perms[:1] == "r"
    writable = perms[1:2] == "w"
    executable = perms[2:3] == "x"
    if readable and executable:
        return PAGE_EXECUTE_READWRITE if writable else PAGE_EXECUTE_READ
    if readable:
        return PAGE_READWRITE if writable else PAGE_READONLY
    if executable:
        return PAGE_EXECUTE
    return PAGE_NOACCESS


def _parse_map_range(addr: str) -> tuple[int, int] | None:
    start_raw, sep, end_raw = addr.partition("-")
    if not sep:
        return None
    try:
        return int(start_raw, 16), int(end_raw, 16)
    except ValueError:
        return None


class ProcessMapsProbe:
    """Query page metadata from the process mappings reported by psutil."""

    def __init__(self, pid: int | None = None):
        self.pid = pid if pid is not None else os.getpid()

    def _mappings(self) -> list:
        try:
            return list(psutil.Process(self.pid).memory_maps(grouped=False))
        except (psutil.Error, AttributeError, NotImplementedError, OSError) as exc:
            MEMORY_LOGGER.log(LOG_WARNING, f"op=maps | pid={self.pid} | status=unavailable | error={exc!r}")
            return []

    def query(self, address: int) -> RegionInfo | None:
        for mapping in self._mappings():
            bounds = _parse_map_range(str(getattr(mapping, "addr", "")))
            if bounds is None:
                continue
            start, end = bounds
            if start <= address < end:
                return RegionInfo(
                    base=start,
                    size=end - start,
                    committed=True,
                    protect=perms_to_protect(str(getattr(mapping, "perms", ""))),
                )
        return None


_DEFAULT_PROBE: RegionProbe | None = None


def default_probe() -> RegionProbe:
    """Return the probe for the current process on this platform."""
    global _DEFAULT_PROBE
    if _DEFAULT_PROBE is None:
        _DEFAULT_PROBE = Win32RegionProbe() if sys.platform == "win32" else ProcessMapsProbe()
    return _DEFAULT_PROBE


def _log_probe(level: int, addr: int, length: int, status: str, **extra: object) -> None:
    parts: list[str] = [
        "op=probe",
        f"addr=0x{int(addr):016X}",
        f"len={int(length)}",
        f"status={status}",
    ]
    for key, value in extra.items():
        parts.append(f"{key}={value}")
    MEMORY_LOGGER.log(level, " | ".join(parts))


def is_page_readable(info: RegionInfo | None) -> bool:
    if info is None or not info.committed:
        return False
    return (info.protect & ~PAGE_MODIFIER_FLAGS) in READABLE_PROTECTIONS


def is_readable_memory(address: int, size: int = 8, probe: RegionProbe | None = None) -> bool:
    """
    Return ``True`` when ``size`` bytes at ``address`` sit on readable, committed pages.

    The page holding the first byte and, for multi-byte reads, the page holding
    the last byte are checked independently so a read straddling into an
    unmapped page is rejected.
    """
    if not address or address < 0:
        return False
    active = probe or default_probe()
    if not is_page_readable(active.query(address)):
        _log_probe(LOG_DEBUG, address, size, "rejected", page="first")
        return False
    if size > 1:
        last = address + size - 1
        if not is_page_readable(active.query(last)):
            _log_probe(LOG_DEBUG, address, size, "rejected", page="last")
            return False
    return True


def read_bytes_if_readable(address: int, size: int, probe: RegionProbe | None = None) -> bytes | None:
    """
    Copy ``size`` bytes from this process's memory, or return ``None`` when unsafe.

    ``probe`` must describe the current process; an address that fails the
    check is treated as absent.
    """
    if size <= 0:
        return b""
    if not is_readable_memory(address, size, probe):
        return None
    return ctypes.string_at(address, size)


__all__ = [
    "MEM_COMMIT",
    "PAGE_NOACCESS",
    "PAGE_READONLY",
    "PAGE_READWRITE",
    "PAGE_WRITECOPY",
    "PAGE_EXECUTE",
    "PAGE_EXECUTE_READ",
    "PAGE_EXECUTE_READWRITE",
    "PAGE_EXECUTE_WRITECOPY",
    "PAGE_GUARD",
    "PAGE_NOCACHE",
    "PAGE_WRITECOMBINE",
    "READABLE_PROTECTIONS",
    "RegionInfo",
    "RegionProbe",
    "Win32RegionProbe",
    "ProcessMapsProbe",
    "perms_to_protect",
    "default_probe",
    "is_page_readable",
    "is_readable_memory",
    "read_bytes_if_readable",
]
