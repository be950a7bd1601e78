"""
Generate a timezone identifier -> (lat, lon) lookup table from zone1970.tab.
"""

from typing import List, Optional

import logging
import shlex
import sys

from tzcoords.arg_parser import get_args
from tzcoords.builder import build_zone_table
from tzcoords.emitter import infer_format, write_artifact
from tzcoords.errors import TzCoordsError
from tzcoords.helper import default_source_path, read_source_table
from tzcoords.logger import get_logger, set_level

# Logging
logger = get_logger('Main')


#------------------------------------------
# Orchestrator
#------------------------------------------
def main(in_path, out_path, fmt: Optional[str] = None, command: str = "tz-coords-gen") -> int:
    """Run the whole pipeline. Returns the process exit status."""
    try:
        fmt = fmt or infer_format(out_path)
        src_path = in_path or default_source_path()
        logger.info(f"Reading source table: {src_path}")
        text = read_source_table(src_path)

        result = build_zone_table(text)
        table = result.unwrap()

        write_artifact(table, out_path, fmt, command)
    except TzCoordsError as e:
        logger.error(str(e))
        return 1
    return 0


def cli(argv: Optional[List[str]] = None) -> None:
    args = get_args(argv)
    if args.verbose:
        set_level(logging.DEBUG)

    argv = sys.argv[1:] if argv is None else argv
    command = " ".join(["tz-coords-gen"] + [shlex.quote(a) for a in argv])
    sys.exit(main(args.input_file, args.output_file, args.output_format, command))


if __name__ == "__main__":
    cli()
