"""Command-line interface for geomagnetic element computation."""

import argparse
import logging
from datetime import date, datetime, timezone
from pathlib import Path

from .coefficients import read_coefficient_file
from .engine import compute_geomagnetic_elements
from .errors import GeomagnetismError
from .geoid import read_geoid_file
from .utils.logging_utils import setup_logging


def _parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD into a calendar date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise argparse.ArgumentTypeError("Dates must be YYYY-MM-DD") from exc


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments for a single-point field evaluation."""
    parser = argparse.ArgumentParser(
        prog="python -m geomagnetism",
        description="Compute magnetic declination and field elements from a WMM-style model",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--coefficients",
        required=True,
        type=Path,
        help="Coefficient table in WMM.COF format",
    )
    parser.add_argument(
        "--lat",
        required=True,
        type=float,
        help="Geodetic latitude in degrees (-90 to 90)",
    )
    parser.add_argument(
        "--lon",
        required=True,
        type=float,
        help="Longitude in degrees, east positive",
    )
    parser.add_argument(
        "--height",
        type=float,
        default=0.0,
        help="Height above mean sea level in meters",
    )
    parser.add_argument(
        "--date",
        type=_parse_iso_date,
        default=None,
        help="Evaluation date (YYYY-MM-DD, default: today in UTC)",
    )
    parser.add_argument(
        "--geoid",
        type=Path,
        default=None,
        help="Geoid undulation grid (NPZ or WW15MGH.GRD text); heights are ellipsoidal without it",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable DEBUG-level logging",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log warnings and errors",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for geomagnetic element computation."""
    args = parse_args(argv)

    setup_logging(verbose=args.verbose, quiet=args.quiet)
    logging.captureWarnings(True)

    evaluation_date = args.date or datetime.now(timezone.utc).date()

    try:
        model = read_coefficient_file(args.coefficients)
        geoid = read_geoid_file(args.geoid) if args.geoid is not None else None
        elements = compute_geomagnetic_elements(
            model, args.lat, args.lon, args.height, evaluation_date, geoid
        )
    except GeomagnetismError as exc:
        logging.error("%s", exc)
        return 1

    print("\n" + "=" * 60)
    print(f"Model           : {model.name} (epoch {model.epoch:.1f})")
    print(f"Date            : {evaluation_date.isoformat()}")
    print(f"Location        : lat {args.lat:.4f}, lon {args.lon:.4f}, h {args.height:.1f} m")
    print("=" * 60)
    print(f"Declination  D  : {elements.declination:9.4f} deg  ({elements.declination_rate:+.4f} deg/yr)")
    print(f"Inclination  I  : {elements.inclination:9.4f} deg  ({elements.inclination_rate:+.4f} deg/yr)")
    print(f"Horizontal   H  : {elements.horizontal_intensity:9.1f} nT   ({elements.horizontal_intensity_rate:+.1f} nT/yr)")
    print(f"North        X  : {elements.north:9.1f} nT   ({elements.north_rate:+.1f} nT/yr)")
    print(f"East         Y  : {elements.east:9.1f} nT   ({elements.east_rate:+.1f} nT/yr)")
    print(f"Down         Z  : {elements.down:9.1f} nT   ({elements.down_rate:+.1f} nT/yr)")
    print(f"Total        F  : {elements.total_intensity:9.1f} nT   ({elements.total_intensity_rate:+.1f} nT/yr)")
    if elements.grid_variation is not None:
        print(f"Grid var.    GV : {elements.grid_variation:9.4f} deg  ({elements.grid_variation_rate:+.4f} deg/yr)")
    if elements.flags:
        print(f"Flags           : {', '.join(sorted(flag.value for flag in elements.flags))}")
    print("=" * 60)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
