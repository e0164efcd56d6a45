"""Dataclasses that capture the chart data used throughout the project."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple

SIGN_ABBREVIATIONS = ["Ari", "Tau", "Gem", "Can", "Leo", "Vir", "Lib", "Sco", "Sag", "Cap", "Aqu", "Pis"]

SIGNS = [
    "Aries",
    "Taurus",
    "Gemini",
    "Cancer",
    "Leo",
    "Virgo",
    "Libra",
    "Scorpio",
    "Sagittarius",
    "Capricorn",
    "Aquarius",
    "Pisces",
]

# Classical names for the harmonics that have one.
HARMONIC_NAMES = {
    1: "conjunction",
    2: "opposition",
    3: "trine",
    4: "square",
    5: "quintile",
    6: "sextile",
    7: "septile",
    8: "semi-square",
    9: "novile",
    10: "decile",
    12: "semi-sextile",
}


@dataclass(frozen=True)
class Body:
    """Position of a single body as returned by the ephemeris."""

    name: str  # lowercase canonical name, e.g. "sun"
    symbol: str
    longitude: float
    latitude: float = 0.0
    distance: float = 0.0
    speed_longitude: float = 0.0
    speed_latitude: float = 0.0
    speed_distance: float = 0.0

    @property
    def retrograde(self) -> bool:
        return self.speed_longitude < 0


@dataclass(frozen=True)
class NormalizedPosition:
    """Sign / degree / minute rendering of an ecliptic longitude."""

    sign_index: int  # 0..11
    degree: int  # 0..29
    minute: int  # 0..59

    @property
    def sign(self) -> str:
        return SIGN_ABBREVIATIONS[self.sign_index]

    @property
    def sign_name(self) -> str:
        return SIGNS[self.sign_index]

    def to_longitude(self) -> float:
        return self.sign_index * 30.0 + self.degree + self.minute / 60.0


@dataclass(frozen=True)
class AspectMatch:
    """One harmonic whose ideal angle lies within orb of a pair's separation."""

    harmonic: int
    residual: float

    @property
    def angle(self) -> float:
        return 360.0 / self.harmonic

    @property
    def name(self) -> str:
        return HARMONIC_NAMES.get(self.harmonic, f"H{self.harmonic}")


# Unordered pair of bodies, stored in input order.
BodyPair = Tuple[Body, Body]


@dataclass
class Houses:
    """House cusps and angles for a chart."""

    cusps: list[float]  # 12 entries, 1st house first
    ascendant: float
    midheaven: float
    armc: float
    vertex: float
    # Daily motion of cusps and of (asc, mc, armc, vertex); only set by query_houses_ex
    cusp_speeds: Optional[list[float]] = None
    angle_speeds: Optional[list[float]] = None


@dataclass
class ChartInput:
    """Birth data needed to query the ephemeris."""

    name: str
    datetime_utc: datetime
    latitude: float
    longitude: float
    altitude: float = 0.0
    house_system: str = "K"


@dataclass
class ChartReport:
    """
    Everything computed for a chart: normalized positions and harmonic aspects.
    """

    bodies: List[Body]
    positions: Dict[str, NormalizedPosition]
    aspects: Dict[BodyPair, List[AspectMatch]]
    orb: float
    max_harmonic: int
    chart: Optional[ChartInput] = None
    houses: Optional[Houses] = None
    matched: List[BodyPair] = field(default_factory=list)
