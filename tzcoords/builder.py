from typing import Callable, Optional

from tzcoords.classes import BuildResult, ZoneEntry, ZoneTable
from tzcoords.errors import MalformedCoordinate, TableBuildError, UnresolvableZone
from tzcoords.helper import iter_rows, parse_iso6709_pair, source_text
from tzcoords.logger import get_logger
from tzcoords.validation import validate_zone

# Logging
logger = get_logger('Table Builder')


def build_zone_table(source, resolver: Optional[Callable[[str], object]] = None) -> BuildResult:
    """
    Decode and validate every data row of a zone1970.tab style table.

    `source` is the table as text, bytes or an open stream. The first row
    that fails to decode or validate stops the pass: the partial table is
    discarded and the result carries a TableBuildError. Otherwise the
    finalized ZoneTable is returned, keys sorted. Duplicate zones keep the
    last row's coordinates.
    """
    text = source_text(source)
    table = ZoneTable()

    for line_no, coords, zone in iter_rows(text):
        try:
            ll = parse_iso6709_pair(coords)
        except MalformedCoordinate as e:
            table.fail()
            return BuildResult(error=TableBuildError("decode", line_no, zone, coords, e))

        try:
            validate_zone(zone, resolver)
        except UnresolvableZone as e:
            table.fail()
            return BuildResult(error=TableBuildError("validate", line_no, zone, coords, e))

        if table.insert(ZoneEntry(zone, ll, line_no)):
            logger.debug(f"line {line_no}: {zone} seen before, keeping later coordinates.")

    keys = table.finalize()
    logger.info(f"Built zone table with {len(keys)} zones.")
    return BuildResult(table=table)
