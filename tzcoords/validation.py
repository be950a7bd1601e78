from typing import Callable, Optional

import zoneinfo

import numpy as np
import pandas as pd

from tzcoords.constants import LAT_LIMIT, LON_LIMIT, TABLE_COLUMNS, ZONE_ID_RE
from tzcoords.errors import UnresolvableZone
from tzcoords.logger import get_logger

# Logging
logger = get_logger('Zone Validator')


def validate_zone(zone: str, resolver: Optional[Callable[[str], object]] = None) -> str:
    """
    Check that `zone` names a timezone the runtime can load.

    The loaded zone is discarded. `resolver` defaults to zoneinfo.ZoneInfo
    (system database, falling back to the tzdata package).
    """
    if not zone:
        raise UnresolvableZone(zone, "empty identifier")
    if not ZONE_ID_RE.match(zone):
        raise UnresolvableZone(zone, "not a Region/City identifier")

    load = resolver or zoneinfo.ZoneInfo
    try:
        load(zone)
    except (zoneinfo.ZoneInfoNotFoundError, KeyError, ValueError, OSError) as e:
        raise UnresolvableZone(zone, str(e) or type(e).__name__) from e
    return zone


def validate_table(zones_df: pd.DataFrame) -> None:
    """
    Checks on the finalized table before it is written. Raise RuntimeError on hard failures.
    """
    missing = set(TABLE_COLUMNS) - set(zones_df.columns)
    if missing:
        raise RuntimeError(f"Zone table missing required columns: {missing}")

    dup_mask = zones_df.duplicated(subset=["zone"], keep=False)
    if dup_mask.any():
        raise RuntimeError(f"Duplicate zones detected:\n{zones_df[dup_mask]}")

    lat = zones_df["lat"].to_numpy(dtype=float)
    lon = zones_df["lon"].to_numpy(dtype=float)
    bad = ~(np.isfinite(lat) & np.isfinite(lon))
    bad |= (np.abs(lat) > LAT_LIMIT) | (np.abs(lon) > LON_LIMIT)
    if bad.any():
        raise RuntimeError(f"Zones with invalid coordinates:\n{zones_df[bad]}")

    zones = zones_df["zone"].tolist()
    if zones != sorted(zones):
        raise RuntimeError("Zone table is not sorted by zone identifier.")

    logger.debug(f"Validation passed for {len(zones)} zones.")
