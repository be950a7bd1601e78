import argparse

from tzcoords.constants import OUTPUT_FORMATS
from tzcoords.logger import get_logger

#Initialize logger
logger = get_logger('Argument Parser')


def get_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="tz-coords-gen",
        description="Generate a timezone -> coordinates lookup table from zone1970.tab",
    )

    # Define arguments
    parser.add_argument("--out", "-o", dest="output_file", required=True, help="Path to the generated file")
    parser.add_argument("--in", "-i", dest="input_file", default=None,
                        help="Path to zone1970.tab (default: system zoneinfo, then the tzdata package)")
    parser.add_argument("--format", "-f", dest="output_format", choices=sorted(OUTPUT_FORMATS), default=None,
                        help="Output format (default: from the output file suffix)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)

    logger.info(f"Input file: {args.input_file or 'default'}")
    logger.info(f"Output file: {args.output_file}")

    return args
