"""
Constants used across the timezone coordinate generator.
"""

import re

# Source table layout (zone1970.tab): codes, coordinates, TZ, comments
COMMENT_MARKER = "#"
FIELD_DELIMITER = "\t"
COORDS_OFFSET = 1
NAME_OFFSET = 2
MIN_FIELDS = NAME_OFFSET + 1

# Default source tables
SYSTEM_ZONE_TAB = "/usr/share/zoneinfo/zone1970.tab"
TZDATA_PACKAGE = "tzdata.zoneinfo"
TZDATA_ZONE_TAB = "zone1970.tab"

# ISO 6709 Annex H: digits after the sign, (degrees, minutes, seconds)
SIGNS = "+-"
LAT_WIDTHS = {2: (2, 0, 0), 4: (2, 2, 0), 6: (2, 2, 2)}
LON_WIDTHS = {3: (3, 0, 0), 5: (3, 2, 0), 7: (3, 2, 2)}
TOKEN_LENGTHS = sorted({1 + a + 1 + b for a in LAT_WIDTHS for b in LON_WIDTHS})

LAT_LIMIT = 90.0
LON_LIMIT = 180.0

# Region/City or Region/Subregion/City
ZONE_ID_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_+\-]*(/[A-Za-z0-9_+\-]+){1,2}$")

# Output
TABLE_COLUMNS = ["zone", "lat", "lon"]
FLOAT_FORMAT = "%f"
GO_PACKAGE = "tzcoords"
EXCEL_SHEET = "Zones"
ARTIFACT_MODE = 0o644

# format name -> file suffix
OUTPUT_FORMATS = {
    "python": ".py",
    "go": ".go",
    "c": ".h",
    "csv": ".csv",
    "json": ".json",
    "xlsx": ".xlsx",
}
