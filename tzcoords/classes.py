from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

import math

import pandas as pd

from tzcoords.constants import LAT_LIMIT, LON_LIMIT, TABLE_COLUMNS
from tzcoords.errors import TableBuildError


@dataclass(frozen=True)
class LatLon:
    """
    Decimal-degree coordinate pair.
    """
    lat: float
    lon: float

    def __post_init__(self):
        for name, value, limit in (("lat", self.lat, LAT_LIMIT), ("lon", self.lon, LON_LIMIT)):
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value!r}")
            if not -limit <= value <= limit:
                raise ValueError(f"{name} {value} outside [-{limit:g}, {limit:g}]")


@dataclass(frozen=True)
class ZoneEntry:
    zone: str
    coords: LatLon
    line_no: int = 0


class TableState(Enum):
    EMPTY = "empty"
    ACCUMULATING = "accumulating"
    FINALIZED = "finalized"
    FAILED = "failed"


class ZoneTable:
    """
    Zone identifier -> LatLon, built in a single pass.

    Lifecycle: EMPTY -> ACCUMULATING -> FINALIZED, or FAILED from any
    state before FINALIZED. Once finalized, keys() is exactly the
    lexicographically sorted set of identifiers and every read (items,
    iteration, to_frame) follows that order. A later insert for the same
    identifier replaces the earlier one.
    """

    def __init__(self):
        self._coords: Dict[str, LatLon] = {}
        self._keys: List[str] = []
        self.state = TableState.EMPTY

    def insert(self, entry: ZoneEntry) -> bool:
        """Add or replace an entry. Returns True when an earlier entry was replaced."""
        if self.state in (TableState.FINALIZED, TableState.FAILED):
            raise RuntimeError(f"cannot insert into a {self.state.value} zone table")
        replaced = entry.zone in self._coords
        self._coords[entry.zone] = entry.coords
        self.state = TableState.ACCUMULATING
        return replaced

    def finalize(self) -> List[str]:
        if self.state is TableState.FAILED:
            raise RuntimeError("cannot finalize a failed zone table")
        if self.state is not TableState.FINALIZED:
            self._keys = sorted(self._coords)
            self.state = TableState.FINALIZED
        return list(self._keys)

    def fail(self) -> None:
        if self.state is TableState.FINALIZED:
            raise RuntimeError("zone table is already finalized")
        self._coords.clear()
        self._keys = []
        self.state = TableState.FAILED

    @property
    def finalized(self) -> bool:
        return self.state is TableState.FINALIZED

    def _require_finalized(self):
        if not self.finalized:
            raise RuntimeError(f"zone table is {self.state.value}, not finalized")

    def keys(self) -> List[str]:
        self._require_finalized()
        return list(self._keys)

    def items(self) -> List[Tuple[str, LatLon]]:
        self._require_finalized()
        return [(zone, self._coords[zone]) for zone in self._keys]

    def to_frame(self) -> pd.DataFrame:
        """Sorted table as a DataFrame with columns zone, lat, lon."""
        rows = [(zone, ll.lat, ll.lon) for zone, ll in self.items()]
        df = pd.DataFrame(rows, columns=TABLE_COLUMNS)
        return df.astype({"zone": object, "lat": "float64", "lon": "float64"})

    def __getitem__(self, zone: str) -> LatLon:
        self._require_finalized()
        return self._coords[zone]

    def __contains__(self, zone) -> bool:
        self._require_finalized()
        return zone in self._coords

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._coords)

    def __repr__(self):
        return f"ZoneTable(state={self.state.value}, zones={len(self)})"


@dataclass(frozen=True)
class BuildResult:
    """
    Outcome of a build: a finalized table or the error that stopped it.
    """
    table: Optional[ZoneTable] = None
    error: Optional[TableBuildError] = None

    def __post_init__(self):
        if (self.table is None) == (self.error is None):
            raise ValueError("BuildResult needs exactly one of table or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> ZoneTable:
        if self.error is not None:
            raise self.error
        return self.table
