from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from moria_overlay.core.localization import LocalizationTable
from moria_overlay.memory.safety import RegionInfo

PAGE_SIZE = 0x1000


class SimulatedRegionProbe:
    """Region probe over a fixed list of fake regions."""

    def __init__(self, regions: list[RegionInfo] | None = None):
        self.regions: list[RegionInfo] = list(regions or [])
        self.queries: list[int] = []

    def add(self, base: int, pages: int, protect: int, committed: bool = True) -> None:
        self.regions.append(RegionInfo(base=base, size=pages * PAGE_SIZE, committed=committed, protect=protect))

    def query(self, address: int) -> RegionInfo | None:
        self.queries.append(address)
        for region in self.regions:
            if region.base <= address < region.base + region.size:
                return region
        return None


@pytest.fixture
def probe() -> SimulatedRegionProbe:
    return SimulatedRegionProbe()


@pytest.fixture
def empty_table() -> LocalizationTable:
    return LocalizationTable()


@pytest.fixture
def table() -> LocalizationTable:
    loc = LocalizationTable()
    loc.init_defaults()
    return loc


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[..., Path]:
    counter = {"n": 0}

    def _write(content: str | bytes, name: str | None = None) -> Path:
        counter["n"] += 1
        path = tmp_path / (name or f"loc_temp_{counter['n']}.json")
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_bytes(content.encode("utf-8"))
        return path

    return _write
