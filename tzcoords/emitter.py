from pathlib import Path
from typing import Callable, Optional

import os
import tempfile

import pandas as pd

from tzcoords.classes import ZoneTable
from tzcoords.constants import ARTIFACT_MODE, EXCEL_SHEET, FLOAT_FORMAT, GO_PACKAGE, OUTPUT_FORMATS
from tzcoords.errors import OutputWriteError
from tzcoords.logger import get_logger
from tzcoords.validation import validate_table

# Logging
logger = get_logger('Emitter')


def banner(command: str, comment: str) -> str:
    return '%s Code generated by "%s"; DO NOT EDIT.\n' % (comment, command)


def infer_format(out_path) -> str:
    suffix = Path(out_path).suffix.lower()
    for fmt, fmt_suffix in OUTPUT_FORMATS.items():
        if suffix == fmt_suffix:
            return fmt
    raise OutputWriteError(out_path, f"cannot infer output format from suffix '{suffix}'")


#------------------------------------------
# Renderers
#------------------------------------------
def render_python(table: ZoneTable, command: str) -> str:
    src = banner(command, "#")
    src += """
from typing import Dict, NamedTuple


class LatLon(NamedTuple):
    lat: float
    lon: float


TO_COORDS: Dict[str, LatLon] = {
"""
    for zone, ll in table.items():
        src += ('    "%s": LatLon(lat=' + FLOAT_FORMAT + ', lon=' + FLOAT_FORMAT + '),\n') % (zone, ll.lat, ll.lon)
    src += "}\n"

    # Generated module must at least compile
    try:
        compile(src, "<generated>", "exec")
    except SyntaxError as e:
        raise OutputWriteError(None, f"internal error: invalid Python generated: {e}") from e
    return src


def render_go(table: ZoneTable, command: str) -> str:
    src = banner(command, "//")
    src += "\npackage %s\n\n" % GO_PACKAGE
    src += "// LatLon is a representative coordinate in decimal degrees.\n"
    src += "type LatLon struct {\n\tLat, Lon float64\n}\n\n"
    src += "var toCoords = map[string]LatLon{\n"

    # gofmt aligns map values one space past the longest `"key":`
    items = table.items()
    width = max((len(zone) for zone, _ in items), default=0) + 3
    for zone, ll in items:
        key = '"%s":' % zone
        src += ('\t%-*s {Lat: ' + FLOAT_FORMAT + ', Lon: ' + FLOAT_FORMAT + '},\n') % (width, key, ll.lat, ll.lon)
    src += "}\n"
    return src


def render_c(table: ZoneTable, command: str) -> str:
    src = banner(command, "//")
    src += """
typedef struct
{
    const char *timezone;
    double latitude;
    double longitude;
} TZCoords;

static TZCoords tz_coord_list[] = {
"""
    for zone, ll in table.items():
        src += ('    { "%s", ' + FLOAT_FORMAT + ', ' + FLOAT_FORMAT + ' },\n') % (zone, ll.lat, ll.lon)
    src += "};\n"
    return src


def render_csv(table: ZoneTable, command: str) -> str:
    return table.to_frame().to_csv(index=False, float_format=FLOAT_FORMAT, lineterminator="\n")


def render_json(table: ZoneTable, command: str) -> str:
    return table.to_frame().to_json(orient="records", indent=2, double_precision=6) + "\n"


RENDERERS = {
    "python": render_python,
    "go": render_go,
    "c": render_c,
    "csv": render_csv,
    "json": render_json,
}


def render(table: ZoneTable, fmt: str, command: str = "tz-coords-gen") -> str:
    """Render a finalized table as text in one of the RENDERERS formats."""
    if fmt not in RENDERERS:
        raise OutputWriteError(None, f"no text renderer for format '{fmt}'")
    return RENDERERS[fmt](table, command)


#------------------------------------------
# Writing
#------------------------------------------
def write_artifact(table: ZoneTable, out_path, fmt: Optional[str] = None, command: str = "tz-coords-gen") -> Path:
    """
    Render `table` and write it to `out_path`.

    Text formats are rendered completely before any file is opened. The
    artifact is written to a temporary file next to `out_path` and moved
    over it, so a failed write leaves any previous artifact untouched.
    Any failure is raised as OutputWriteError.
    """
    out_path = Path(out_path)
    fmt = fmt or infer_format(out_path)
    if fmt not in OUTPUT_FORMATS:
        raise OutputWriteError(out_path, f"unknown output format '{fmt}'")

    try:
        zones_df = table.to_frame()
        validate_table(zones_df)
    except RuntimeError as e:
        raise OutputWriteError(out_path, str(e)) from e

    if fmt == "xlsx":
        replace_atomically(out_path, lambda tmp: write_excel(zones_df, tmp))
    else:
        try:
            src = render(table, fmt, command)
        except OutputWriteError as e:
            raise OutputWriteError(out_path, str(e)) from e
        replace_atomically(out_path, lambda tmp: write_text(src, tmp))

    logger.info(f"Wrote {len(zones_df)} zones ({fmt}): {out_path}")
    return out_path


def replace_atomically(out_path: Path, write: Callable[[Path], None]) -> None:
    """Call write() on a temporary sibling of out_path, then os.replace it into place."""
    tmp_path = None
    try:
        fd, tmp_name = tempfile.mkstemp(dir=out_path.parent, prefix=f".{out_path.name}.", suffix=".tmp")
        os.close(fd)
        tmp_path = Path(tmp_name)
        write(tmp_path)
        os.chmod(tmp_path, ARTIFACT_MODE)
        os.replace(tmp_path, out_path)
    except (OSError, ValueError) as e:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
        raise OutputWriteError(out_path, str(e)) from e


def write_text(src: str, path: Path) -> None:
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        f.write(src)


def write_excel(zones_df: pd.DataFrame, path: Path) -> None:
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        zones_df.to_excel(writer, sheet_name=EXCEL_SHEET, index=False)
