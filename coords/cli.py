"""
Command line front end: ``gridconvert``.

Each subcommand reads one representation and prints all three:

    gridconvert latlon 40.748333 -73.985278
    gridconvert utm 18 N 585664.121 4511315.422 --precision 3
    gridconvert mgrs 18TWL8566411315 --json

A legal UTM/UPS coordinate can still lie outside every MGRS square (the
one-tile margin around a zone). The other two representations are then
printed, the MGRS error goes to stderr and the exit status is 1.
"""

import argparse
import json
import sys
from typing import List, Optional

from common.errors import GridReferenceError, OutOfProjectionDomain
from common.logging_config import get_logger
from coords.latlon import LatLon
from coords.mgrs import MAX_PRECISION, Mgrs
from coords.utmups import UtmUps

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_PARTIAL = 1
EXIT_INVALID_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    shared = argparse.ArgumentParser(add_help=False)
    shared.add_argument("--precision", type=int, default=5,
                        help=f"MGRS digits per axis, 0..{MAX_PRECISION} (default: 5, i.e. 1 m).")
    shared.add_argument("--json", action="store_true", default=False,
                        help="Print a JSON object instead of plain lines.")

    p = argparse.ArgumentParser(
        prog="gridconvert",
        description="Convert between latitude/longitude, UTM/UPS and MGRS on WGS84.",
    )
    sub = p.add_subparsers(dest="command", required=True)

    latlon = sub.add_parser("latlon", parents=[shared],
                            help="Convert geodetic latitude and longitude (degrees).")
    latlon.add_argument("lat", type=float)
    latlon.add_argument("lon", type=float)
    latlon.add_argument("--zone", type=int, default=None,
                        help="Force a UTM zone (1..60) or UPS (0).")

    utm = sub.add_parser("utm", parents=[shared],
                         help="Convert a UTM/UPS coordinate (zone 0 is UPS).")
    utm.add_argument("zone", type=int)
    utm.add_argument("hemisphere", type=str, help="N or S.")
    utm.add_argument("easting", type=float)
    utm.add_argument("northing", type=float)

    mgrs = sub.add_parser("mgrs", parents=[shared],
                          help="Convert an MGRS reference (south-west corner).")
    mgrs.add_argument("text", type=str)
    return p


def _encode(grid: UtmUps, precision: int) -> dict:
    try:
        return {"mgrs": grid.to_mgrs(precision), "mgrs_error": None}
    except OutOfProjectionDomain as e:
        logger.debug(f"No MGRS square for {grid}: {e!r}")
        return {"mgrs": None, "mgrs_error": e}


def convert(args: argparse.Namespace) -> dict:
    """Run the conversion requested on the command line.

    Returns
    -------
    dict
        The three representations, keyed ``latlon``, ``utmups``, ``mgrs``.
        When the grid coordinate has no MGRS square, ``mgrs`` is None and
        ``mgrs_error`` holds the domain error.

    Raises
    ------
    GridReferenceError
        If the input itself is invalid.
    """
    if args.command == "latlon":
        latlon = LatLon(args.lat, args.lon)
        grid = latlon.to_utmups(zone=args.zone)
        encoded = _encode(grid, args.precision)
    elif args.command == "utm":
        grid = UtmUps(args.zone, args.hemisphere, args.easting, args.northing)
        latlon = grid.to_latlon()
        encoded = _encode(grid, args.precision)
    else:
        mgrs = Mgrs.parse(args.text)
        grid = mgrs.to_utmups()
        latlon = grid.to_latlon()
        encoded = {"mgrs": mgrs, "mgrs_error": None}
    return {"latlon": latlon, "utmups": grid, **encoded}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        result = convert(args)
    except GridReferenceError as e:
        logger.debug(f"Rejected input for '{args.command}': {e!r}")
        print(f"gridconvert: error: {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    mgrs = result["mgrs"]
    if args.json:
        print(json.dumps({
            "latlon": result["latlon"].to_dict(),
            "utmups": result["utmups"].to_dict(),
            "mgrs": None if mgrs is None else str(mgrs),
        }))
    else:
        print(result["latlon"])
        print(result["utmups"])
        if mgrs is not None:
            print(mgrs)

    if result["mgrs_error"] is not None:
        print(f"gridconvert: error: {result['mgrs_error']}", file=sys.stderr)
        return EXIT_PARTIAL
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
