"""Swiss Ephemeris wrapper: calculation flags, body positions and house cusps."""

from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, NamedTuple

import swisseph as swe

from .errors import EphemerisError, InvalidArgument, UnknownBody
from .models import Body, ChartInput, Houses

logger = logging.getLogger(__name__)

EPHE_PATH = os.environ.get("SWISSEPH_EPHE")


class BodySpec(NamedTuple):
    swe_id: int
    name: str
    symbol: str


BODIES: dict[str, BodySpec] = {
    "SO": BodySpec(swe.SUN, "sun", "☉"),
    "MO": BodySpec(swe.MOON, "moon", "☽"),
    "ME": BodySpec(swe.MERCURY, "mercury", "☿"),
    "VE": BodySpec(swe.VENUS, "venus", "♀"),
    "MA": BodySpec(swe.MARS, "mars", "♂"),
    "JU": BodySpec(swe.JUPITER, "jupiter", "♃"),
    "SA": BodySpec(swe.SATURN, "saturn", "♄"),
    "UR": BodySpec(swe.URANUS, "uranus", "♅"),
    "NE": BodySpec(swe.NEPTUNE, "neptune", "♆"),
    "PL": BodySpec(swe.PLUTO, "pluto", "♇"),
    "MN": BodySpec(swe.MEAN_NODE, "mean_node", "☊"),
    "TN": BodySpec(swe.TRUE_NODE, "true_node", "☊"),
    "LI": BodySpec(swe.MEAN_APOG, "lilith", "⚸"),
    "TL": BodySpec(swe.OSCU_APOG, "true_lilith", "⚸"),
    "EA": BodySpec(swe.EARTH, "earth", "⊕"),
    "CH": BodySpec(swe.CHIRON, "chiron", "⚷"),
    "CE": BodySpec(swe.CERES, "ceres", "⚳"),
    "PA": BodySpec(swe.PALLAS, "pallas", "⚴"),
    "PH": BodySpec(swe.PHOLUS, "pholus", "Ph"),
    "JN": BodySpec(swe.JUNO, "juno", "⚵"),
    "VS": BodySpec(swe.VESTA, "vesta", "⚶"),
    # Uranian (Hamburg school) hypothetical bodies have no standard glyphs.
    "CU": BodySpec(swe.CUPIDO, "cupido", "Cu"),
    "HA": BodySpec(swe.HADES, "hades", "Ha"),
    "ZE": BodySpec(swe.ZEUS, "zeus", "Ze"),
    "KR": BodySpec(swe.KRONOS, "kronos", "Kr"),
    "AP": BodySpec(swe.APOLLON, "apollon", "Ap"),
    "AD": BodySpec(swe.ADMETOS, "admetos", "Ad"),
    "VU": BodySpec(swe.VULKANUS, "vulkanus", "Vu"),
    "PO": BodySpec(swe.POSEIDON, "poseidon", "Po"),
}

# Sun through Pluto
DEFAULT_BODIES = ["SO", "MO", "ME", "VE", "MA", "JU", "SA", "UR", "NE", "PL"]


class EphemerisSource(enum.Enum):
    MOSHIER = "moshier"
    JPL = "jpl"
    SWISS = "swiss"


_SOURCE_FLAGS = {
    EphemerisSource.MOSHIER: swe.FLG_MOSEPH,
    EphemerisSource.JPL: swe.FLG_JPLEPH,
    EphemerisSource.SWISS: swe.FLG_SWIEPH,
}


@dataclass(frozen=True)
class CalculationConfig:
    """
    Options passed to every position query.

    true_positions: skip light-time correction (true instead of apparent positions)
    sidereal:       longitudes relative to the sidereal zodiac (see set_sidereal_mode)
    topocentric:    observer on the Earth's surface (see set_topo)
    heliocentric:   Sun-centred positions
    equatorial:     right ascension / declination instead of longitude / latitude
    """

    true_positions: bool = False
    sidereal: bool = False
    topocentric: bool = False
    heliocentric: bool = False
    equatorial: bool = False
    ephemeris_source: EphemerisSource = EphemerisSource.MOSHIER

    @property
    def flags(self) -> int:
        flags = swe.FLG_SPEED
        if self.true_positions:
            flags |= swe.FLG_TRUEPOS
        if self.sidereal:
            flags |= swe.FLG_SIDEREAL
        if self.topocentric:
            flags |= swe.FLG_TOPOCTR
        if self.heliocentric:
            flags |= swe.FLG_HELCTR
        if self.equatorial:
            flags |= swe.FLG_EQUATORIAL
        return flags | _SOURCE_FLAGS[self.ephemeris_source]

    @classmethod
    def from_options(cls, **options: bool) -> "CalculationConfig":
        """
        Build a config from keyword switches.

        Moshier is used unless moshier_ephemeris=False or another source is
        requested; JPL wins over Swiss when both are set.
        """
        known = {
            "true_positions",
            "sidereal",
            "topocentric",
            "heliocentric",
            "equatorial",
            "moshier_ephemeris",
            "use_moshier_ephemeris",
            "use_jpl_ephemeris",
            "use_swiss_ephemeris",
        }
        unknown = sorted(set(options) - known)
        if unknown:
            raise InvalidArgument(f"unknown calculation options: {', '.join(unknown)}")

        if options.get("use_jpl_ephemeris"):
            source = EphemerisSource.JPL
        elif options.get("use_swiss_ephemeris"):
            source = EphemerisSource.SWISS
        elif options.get("moshier_ephemeris") is False or options.get("use_moshier_ephemeris") is False:
            source = EphemerisSource.SWISS
        else:
            source = EphemerisSource.MOSHIER

        return cls(
            true_positions=bool(options.get("true_positions", False)),
            sidereal=bool(options.get("sidereal", False)),
            topocentric=bool(options.get("topocentric", False)),
            heliocentric=bool(options.get("heliocentric", False)),
            equatorial=bool(options.get("equatorial", False)),
            ephemeris_source=source,
        )


def set_ephe_path(path: str) -> None:
    """Override the ephemeris directory used for all Swiss Ephemeris calls."""

    global EPHE_PATH
    EPHE_PATH = path
    swe.set_ephe_path(path)


def set_jpl_file(name: str) -> None:
    """Select the JPL ephemeris file (e.g. de431.eph) inside the ephemeris path."""

    swe.set_jpl_file(name)


def ensure_ephe_path(config: CalculationConfig | None = None) -> str | None:
    """
    Resolve the ephemeris path from the global setting or env var.

    Moshier needs no data files, so a missing path only raises when the
    config asks for the Swiss or JPL files.
    """

    path = EPHE_PATH or os.environ.get("SWISSEPH_EPHE")
    if path:
        swe.set_ephe_path(path)
        return path
    if config is not None and config.ephemeris_source is not EphemerisSource.MOSHIER:
        raise EphemerisError(
            f"Swiss Ephemeris path is not set; {config.ephemeris_source.value} ephemeris needs data files. "
            "Set SWISSEPH_EPHE or pass --ephe."
        )
    return None


def set_topo(latitude: float, longitude: float, altitude: float = 0.0) -> None:
    """Register the observer location used by topocentric queries."""

    logger.debug("observer set to lat=%s lon=%s alt=%s", latitude, longitude, altitude)
    swe.set_topo(longitude, latitude, altitude)


def set_sidereal_mode(mode: int = swe.SIDM_FAGAN_BRADLEY, t0: float = 0.0, ayan_t0: float = 0.0) -> None:
    """Choose the ayanamsa for sidereal queries; t0/ayan_t0 only matter for SIDM_USER."""

    swe.set_sid_mode(mode, t0, ayan_t0)


def ayanamsa(jd_ut: float) -> float:
    """Return the ayanamsa (degrees) for the current sidereal mode."""

    return swe.get_ayanamsa_ut(jd_ut)


def ayanamsa_ex(jd_ut: float, config: CalculationConfig | None = None) -> float:
    """Ayanamsa including nutation, computed with the config's ephemeris source."""

    config = config or CalculationConfig()
    try:
        _retflags, value = swe.get_ayanamsa_ex_ut(jd_ut, _SOURCE_FLAGS[config.ephemeris_source])
    except swe.Error as exc:
        raise EphemerisError(f"ayanamsa: {exc}") from exc
    return float(value)


def julian_day(dt: datetime) -> float:
    """Convert a datetime into a Julian day (UT frame). Naive datetimes are read as UTC."""

    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)

    ut_hour = (
        dt.hour
        + dt.minute / 60.0
        + dt.second / 3600.0
        + dt.microsecond / 3_600_000_000.0
    )

    return swe.julday(dt.year, dt.month, dt.day, ut_hour, swe.GREG_CAL)


def query_position(jd_ut: float, body_key: str, config: CalculationConfig | None = None) -> Body:
    """Return longitude, latitude, distance and daily speeds for one body."""

    config = config or CalculationConfig()
    try:
        spec = BODIES[body_key]
    except KeyError:
        raise UnknownBody(body_key) from None

    try:
        result = swe.calc_ut(jd_ut, spec.swe_id, config.flags)
    except swe.Error as exc:
        raise EphemerisError(f"{spec.name}: {exc}") from exc

    # pyswisseph returns either a flat tuple of floats or (position_tuple, retflag).
    if len(result) == 2 and isinstance(result[0], (tuple, list)):
        position, retflag = result
        source_flag = _SOURCE_FLAGS[config.ephemeris_source]
        if not retflag & source_flag:
            logger.warning(
                "%s: %s ephemeris unavailable, Swiss Ephemeris fell back to another source",
                spec.name,
                config.ephemeris_source.value,
            )
    else:
        position = result

    logger.debug("%s at jd %.6f: lon=%.6f", spec.name, jd_ut, position[0])
    return Body(
        name=spec.name,
        symbol=spec.symbol,
        longitude=float(position[0]),
        latitude=float(position[1]),
        distance=float(position[2]),
        speed_longitude=float(position[3]),
        speed_latitude=float(position[4]),
        speed_distance=float(position[5]),
    )


def query_houses(jd_ut: float, latitude: float, longitude: float, system: str = "K") -> Houses:
    """Compute house cusps plus Ascendant, MC, ARMC and Vertex (Koch by default)."""

    hsys = _house_system_code(system)
    try:
        cusps, ascmc = swe.houses(jd_ut, latitude, longitude, hsys)
    except swe.Error as exc:
        raise EphemerisError(f"houses ({system}): {exc}") from exc

    return Houses(
        cusps=[float(c) for c in cusps[:12]],
        ascendant=float(ascmc[0]),
        midheaven=float(ascmc[1]),
        armc=float(ascmc[2]),
        vertex=float(ascmc[3]),
    )


def query_houses_ex(
    jd_ut: float, latitude: float, longitude: float, system: str = "K", config: CalculationConfig | None = None
) -> Houses:
    """
    Like query_houses, but also returns the daily motion of every cusp and angle.

    Only the sidereal option of the config applies to houses.
    """

    hsys = _house_system_code(system)
    flags = swe.FLG_SIDEREAL if config is not None and config.sidereal else 0
    try:
        cusps, ascmc, cusp_speeds, ascmc_speeds = swe.houses_ex2(jd_ut, latitude, longitude, hsys, flags)
    except swe.Error as exc:
        raise EphemerisError(f"houses ({system}): {exc}") from exc

    return Houses(
        cusps=[float(c) for c in cusps[:12]],
        ascendant=float(ascmc[0]),
        midheaven=float(ascmc[1]),
        armc=float(ascmc[2]),
        vertex=float(ascmc[3]),
        cusp_speeds=[float(s) for s in cusp_speeds[:12]],
        angle_speeds=[float(s) for s in ascmc_speeds[:4]],
    )


def _house_system_code(system: str) -> bytes:
    if len(system) != 1 or not system.isascii() or not system.isalpha():
        raise InvalidArgument(f"house system must be a single ASCII letter, got {system!r}")
    return system.encode("ascii")


RISE_TRANSIT_EVENTS = {
    "rise": swe.CALC_RISE,
    "set": swe.CALC_SET,
    "upper_transit": swe.CALC_MTRANSIT,
    "lower_transit": swe.CALC_ITRANSIT,
}


def rise_transit(
    jd_ut: float,
    body_key: str,
    chart: ChartInput,
    event: str = "rise",
    config: CalculationConfig | None = None,
    disc_center: bool = True,
    refraction: bool = True,
    pressure: float = 0.0,
    temperature: float = 0.0,
    horizon_height: float | None = None,
) -> float | None:
    """
    Return the UT Julian day of the next rise, set or meridian transit after jd_ut.

    The observer is the chart's location. Returns None when the body does
    not cross the horizon that day (circumpolar or never rising). Passing
    horizon_height measures rise/set against a horizon at that altitude
    (degrees) instead of the mathematical one.
    """

    config = config or CalculationConfig()
    try:
        spec = BODIES[body_key]
    except KeyError:
        raise UnknownBody(body_key) from None
    try:
        rsmi = RISE_TRANSIT_EVENTS[event]
    except KeyError:
        raise InvalidArgument(f"unknown event {event!r}; choose from {', '.join(RISE_TRANSIT_EVENTS)}") from None
    if event in ("rise", "set"):
        if disc_center:
            rsmi |= swe.BIT_DISC_CENTER
        if not refraction:
            rsmi |= swe.BIT_NO_REFRACTION

    geopos = (chart.longitude, chart.latitude, chart.altitude)
    flags = _SOURCE_FLAGS[config.ephemeris_source]
    try:
        if horizon_height is None:
            res, tret = swe.rise_trans(jd_ut, spec.swe_id, rsmi, geopos, pressure, temperature, flags)
        else:
            res, tret = swe.rise_trans_true_hor(
                jd_ut, spec.swe_id, rsmi, geopos, pressure, temperature, horizon_height, flags
            )
    except swe.Error as exc:
        raise EphemerisError(f"{spec.name} {event}: {exc}") from exc

    if res < 0 or not tret or tret[0] == 0.0:
        logger.debug("%s has no %s after jd %.6f at lat=%s", spec.name, event, jd_ut, chart.latitude)
        return None
    return float(tret[0])


def compute_bodies(
    chart: ChartInput, keys: Iterable[str] = DEFAULT_BODIES, config: CalculationConfig | None = None
) -> list[Body]:
    """Query every requested body for the chart's moment, in the order given."""

    config = config or CalculationConfig()
    ensure_ephe_path(config)
    if config.topocentric:
        set_topo(chart.latitude, chart.longitude, chart.altitude)
    jd_ut = julian_day(chart.datetime_utc)
    return [query_position(jd_ut, key, config) for key in keys]


def compute_houses(chart: ChartInput) -> Houses:
    """Compute the chart's houses using its configured house system."""

    ensure_ephe_path()
    jd_ut = julian_day(chart.datetime_utc)
    return query_houses(jd_ut, chart.latitude, chart.longitude, chart.house_system)
