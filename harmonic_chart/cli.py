"""Command line entry point: compute a chart and list its harmonic aspects."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from . import astro_engine, output
from .analysis import build_report
from .analysis.harmonics import DEFAULT_ORB, MAX_HARMONIC
from .errors import EphemerisError, InvalidArgument, UnknownBody
from .models import ChartInput

DEFAULT_OUTPUT_DIR = Path("outputs")

logger = logging.getLogger(__name__)


def parse_dt(value: str) -> datetime:
    """Return a UTC datetime from an ISO string; a trailing Z and naive values mean UTC."""

    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    dt = datetime.fromisoformat(raw)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _iso_datetime(value: str) -> datetime:
    try:
        return parse_dt(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO datetime: {value!r}") from None


def _body_keys(value: str) -> list[str]:
    keys = [k.strip().upper() for k in value.split(",") if k.strip()]
    unknown = [k for k in keys if k not in astro_engine.BODIES]
    if unknown:
        choices = ", ".join(astro_engine.BODIES)
        raise argparse.ArgumentTypeError(f"unknown body key(s) {', '.join(unknown)}; choose from {choices}")
    return keys


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="harmonic-chart",
        description="Compute body positions with Swiss Ephemeris and list harmonic aspects between them.",
    )
    parser.add_argument("--date", required=True, type=_iso_datetime, help="Chart datetime (ISO, accepts timezone).")
    parser.add_argument("--lat", required=True, type=float, help="Latitude in decimal degrees.")
    parser.add_argument("--lon", required=True, type=float, help="Longitude in decimal degrees.")
    parser.add_argument("--alt", type=float, default=0.0, help="Altitude in metres (topocentric only).")
    parser.add_argument("--name", default="chart", help="Label shown in the report header.")
    parser.add_argument(
        "--bodies",
        type=_body_keys,
        default=list(astro_engine.DEFAULT_BODIES),
        help="Comma-separated body keys (default: SO,MO,ME,VE,MA,JU,SA,UR,NE,PL).",
    )
    parser.add_argument("--orb", type=float, default=DEFAULT_ORB, help=f"Base orb in degrees (default: {DEFAULT_ORB:g}).")
    parser.add_argument(
        "--max-harmonic",
        type=int,
        default=MAX_HARMONIC,
        help=f"Highest harmonic to test (default: {MAX_HARMONIC}).",
    )
    parser.add_argument("--houses", metavar="SYSTEM", help="Also compute house cusps (e.g. K, P, W).")
    parser.add_argument("--true-positions", action="store_true", help="True positions, no light-time correction.")
    parser.add_argument("--sidereal", action="store_true", help="Sidereal zodiac (Fagan/Bradley).")
    parser.add_argument("--topocentric", action="store_true", help="Positions for an observer at --lat/--lon.")
    parser.add_argument("--heliocentric", action="store_true", help="Sun-centred positions.")
    parser.add_argument("--equatorial", action="store_true", help="Right ascension/declination output.")
    parser.add_argument(
        "--ephemeris",
        choices=[source.value for source in astro_engine.EphemerisSource],
        default=astro_engine.EphemerisSource.MOSHIER.value,
        help="Ephemeris source (default: moshier, which needs no data files).",
    )
    parser.add_argument("--ephe", help="Swiss Ephemeris directory. Defaults to SWISSEPH_EPHE env.")
    parser.add_argument("--html", help="Export the report to an HTML file.")
    parser.add_argument("--md", "--markdown", dest="md", help="Export the report to a markdown file.")
    parser.add_argument("--plain", action="store_true", help="Plain text output instead of Rich tables.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser


def resolve_output_path(path_str: str | None) -> Path | None:
    if not path_str:
        return None
    p = Path(path_str)
    if not p.is_absolute() and p.parent == Path("."):
        p = DEFAULT_OUTPUT_DIR / p
    p.parent.mkdir(parents=True, exist_ok=True)
    return p


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point.

    Usage:
        harmonic-chart --date 1979-05-08T19:57:00Z --lat 61.2181 --lon -149.9003 --topocentric
    """

    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.ephe:
        astro_engine.set_ephe_path(str(Path(args.ephe).expanduser()))

    config = astro_engine.CalculationConfig(
        true_positions=args.true_positions,
        sidereal=args.sidereal,
        topocentric=args.topocentric,
        heliocentric=args.heliocentric,
        equatorial=args.equatorial,
        ephemeris_source=astro_engine.EphemerisSource(args.ephemeris),
    )
    chart = ChartInput(
        name=args.name,
        datetime_utc=args.date,
        latitude=args.lat,
        longitude=args.lon,
        altitude=args.alt,
        house_system=args.houses or "K",
    )
    logger.debug("computing %s with flags %#x", chart, config.flags)

    try:
        bodies = astro_engine.compute_bodies(chart, args.bodies, config)
        houses = astro_engine.compute_houses(chart) if args.houses else None
        report = build_report(bodies, orb=args.orb, max_harmonic=args.max_harmonic, chart=chart, houses=houses)
    except (InvalidArgument, EphemerisError, UnknownBody) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if args.plain:
        output.print_text(report)
    else:
        output.print_rich_report(report)

    html_path = resolve_output_path(args.html)
    if html_path:
        output.export_rich_html(html_path, report)
    md_path = resolve_output_path(args.md)
    if md_path:
        md_path.write_text(output.build_markdown_report(report), encoding="utf-8")


if __name__ == "__main__":
    main()
