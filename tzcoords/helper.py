from typing import Iterator, Optional, Tuple
from importlib import resources
from pathlib import Path

import re

from tzcoords.classes import LatLon
from tzcoords.constants import (
    COMMENT_MARKER,
    COORDS_OFFSET,
    FIELD_DELIMITER,
    LAT_LIMIT,
    LAT_WIDTHS,
    LON_LIMIT,
    LON_WIDTHS,
    MIN_FIELDS,
    NAME_OFFSET,
    SIGNS,
    SYSTEM_ZONE_TAB,
    TOKEN_LENGTHS,
    TZDATA_PACKAGE,
    TZDATA_ZONE_TAB,
)
from tzcoords.errors import InputReadError, MalformedCoordinate
from tzcoords.logger import get_logger

DIGITS_RE = re.compile(r"[0-9]+")

logger = get_logger('Row Parser')


#------------------------------------------
# Coordinate decoding
#------------------------------------------
def decode_iso6709_field(field: str, raw: str, widths: dict, limit: float) -> float:
    """
    Decode one signed fixed-width field, e.g. '+404251' or '-0740023'.

    widths maps the digit count after the sign to (degrees, minutes, seconds)
    group widths. Minutes and seconds are optional 2-digit groups.
    """
    sign, digits = raw[:1], raw[1:]
    if not sign or sign not in SIGNS:
        raise MalformedCoordinate(field, raw, "missing sign")
    if len(digits) not in widths:
        expected = "/".join(str(w) for w in sorted(widths))
        raise MalformedCoordinate(field, raw, f"expected {expected} digits, got {len(digits)}")
    if not DIGITS_RE.fullmatch(digits):
        raise MalformedCoordinate(field, raw, "non-digit characters")

    deg_w, min_w, sec_w = widths[len(digits)]
    degrees = int(digits[:deg_w])
    minutes = int(digits[deg_w:deg_w + min_w]) if min_w else 0
    seconds = int(digits[deg_w + min_w:deg_w + min_w + sec_w]) if sec_w else 0

    value = degrees + minutes / 60.0 + seconds / 3600.0
    if sign == "-":
        value = -value
    if not -limit <= value <= limit:
        raise MalformedCoordinate(field, raw, f"{value:f} outside [-{limit:g}, {limit:g}]")
    return value


def parse_iso6709_pair(token: str) -> LatLon:
    """
    Decode an ISO 6709 Annex H pair such as '+404251-0740023'.

    The latitude/longitude split is the second sign character; there is
    no delimiter. Raises MalformedCoordinate naming the failing sub-field.
    """
    if len(token) not in TOKEN_LENGTHS:
        raise MalformedCoordinate(
            "token", token, f"length {len(token)} matches no latitude/longitude width combination"
        )
    if token[0] not in SIGNS:
        raise MalformedCoordinate("latitude", token, "missing sign")

    signs = [i for i, ch in enumerate(token) if ch in SIGNS]
    if len(signs) < 2:
        raise MalformedCoordinate("longitude", token, "missing sign")
    if len(signs) > 2:
        raise MalformedCoordinate("token", token, f"{len(signs)} sign characters, expected 2")

    split = signs[1]
    lat = decode_iso6709_field("latitude", token[:split], LAT_WIDTHS, LAT_LIMIT)
    lon = decode_iso6709_field("longitude", token[split:], LON_WIDTHS, LON_LIMIT)
    return LatLon(lat=lat, lon=lon)


#------------------------------------------
# Rows
#------------------------------------------
def parse_row(line: str) -> Optional[Tuple[str, str]]:
    """
    Return (coordinates, zone) for a data line, or None when the line
    is a comment or has too few tab-separated fields.
    """
    if line.startswith(COMMENT_MARKER):
        return None
    parts = line.split(FIELD_DELIMITER)
    if len(parts) < MIN_FIELDS:
        return None
    return parts[COORDS_OFFSET], parts[NAME_OFFSET]


def iter_rows(text: str) -> Iterator[Tuple[int, str, str]]:
    """Yield (line_no, coordinates, zone) for every data line, 1-based."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()

    skipped = 0
    for line_no, line in enumerate(lines, start=1):
        if line.endswith("\r"):
            line = line[:-1]
        row = parse_row(line)
        if row is None:
            skipped += 1
            continue
        coords, zone = row
        yield line_no, coords, zone

    logger.debug(f"Skipped {skipped} comment or short lines.")


#------------------------------------------
# Source table
#------------------------------------------
def default_source_path():
    """
    The host's zone1970.tab, or the copy shipped with the tzdata package.
    """
    system_tab = Path(SYSTEM_ZONE_TAB)
    if system_tab.is_file():
        return system_tab
    try:
        return resources.files(TZDATA_PACKAGE) / TZDATA_ZONE_TAB
    except ModuleNotFoundError as e:
        raise InputReadError(SYSTEM_ZONE_TAB, f"not found and tzdata is not installed ({e})") from e


def read_source_table(path) -> str:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise InputReadError(path, str(e)) from e


def source_text(source) -> str:
    """Accept table text, raw bytes or an open stream."""
    if hasattr(source, "read"):
        source = source.read()
    if isinstance(source, (bytes, bytearray)):
        try:
            return bytes(source).decode("utf-8")
        except UnicodeDecodeError as e:
            raise InputReadError("<bytes>", str(e)) from e
    return source
