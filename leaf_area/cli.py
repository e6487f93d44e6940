from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import (
    CSV_DELIMITERS,
    DEFAULT_H_RANGE,
    DEFAULT_L_RANGE,
    DEFAULT_REAL_DISTANCE,
    DEFAULT_S_RANGE,
    DEFAULT_UNIT,
)
from .cv_utils import draw_overlay, load_rgb, save_rgb
from .data_model import HSLRange, Point
from .errors import MeasurementError
from .export_csv import write_csv
from .session import MeasurementSession
from .ui_state import InteractionMode

logger = logging.getLogger(__name__)


def parse_points(spec: str) -> List[Point]:
    """Parse "x:y,x:y,..." into points."""
    points = []
    for token in spec.split(","):
        token = token.strip()
        if not token:
            continue
        try:
            x_str, y_str = token.split(":")
            points.append(Point(float(x_str), float(y_str)))
        except ValueError:
            raise ValueError(f"Bad point {token!r}; expected x:y") from None
    return points


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="leaf-area",
        description="Measure leaf areas inside hand-drawn regions, calibrated by a known reference length.",
    )
    parser.add_argument("image", type=Path)
    parser.add_argument("--calibration", required=True, help="Two reference points, e.g. 10:20,310:20")
    parser.add_argument("--distance", type=float, default=DEFAULT_REAL_DISTANCE,
                        help="Real length between the calibration points (default %(default)s)")
    parser.add_argument("--unit", default=DEFAULT_UNIT)
    parser.add_argument("--region", action="append", default=[], required=True,
                        help="Closed region as x:y,x:y,... (repeat for several leaves)")
    parser.add_argument("--hue", type=float, nargs=2, metavar=("MIN", "MAX"), default=list(DEFAULT_H_RANGE))
    parser.add_argument("--saturation", type=float, nargs=2, metavar=("MIN", "MAX"), default=list(DEFAULT_S_RANGE))
    parser.add_argument("--lightness", type=float, nargs=2, metavar=("MIN", "MAX"), default=list(DEFAULT_L_RANGE))
    parser.add_argument("--csv", type=Path, help="Write results to this CSV file")
    parser.add_argument("--delimiter", choices=CSV_DELIMITERS, default=",")
    parser.add_argument("--preview", type=Path, help="Write a highlighted preview image")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def run(args: argparse.Namespace) -> int:
    hsl = HSLRange(
        h_min=args.hue[0], h_max=args.hue[1],
        s_min=args.saturation[0], s_max=args.saturation[1],
        l_min=args.lightness[0], l_max=args.lightness[1],
    )
    session = MeasurementSession(hsl_range=hsl)
    rec = session.add_image(args.image.name, load_rgb(str(args.image)))

    session.set_mode(InteractionMode.CALIBRATING)
    calib = parse_points(args.calibration)
    if len(calib) != 2:
        raise ValueError("--calibration needs exactly two points")
    for p in calib:
        session.click(p.x, p.y)
    if session.save_calibration(args.distance, unit=args.unit) is None:
        raise ValueError("Calibration rejected: distance must be positive and the points distinct.")

    session.set_mode(InteractionMode.DRAWING_REGION)
    for spec in args.region:
        if not session.add_region(parse_points(spec)):
            logger.warning("Skipping region %r: needs at least 3 points", spec)

    results = session.compute_areas()
    for res in results:
        print(f"{rec.name}\t#{res.region_id}\t{res.area:.2f} {args.unit}2")
    print(f"{rec.name}\ttotal\t{rec.total_area:.2f} {args.unit}2")

    if args.csv:
        write_csv(str(args.csv), session.images, delimiter=args.delimiter, unit=args.unit)
        logger.info("Wrote %s", args.csv)
    if args.preview:
        shown = draw_overlay(
            session.preview(), rec.regions, results, rec.calibration_points,
            unit=args.unit, label=f"{args.distance:g}{args.unit}",
        )
        save_rgb(str(args.preview), shown)
        logger.info("Wrote %s", args.preview)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(message)s',
    )
    try:
        return run(args)
    except (MeasurementError, ValueError, OSError) as e:
        print(f"leaf-area: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
