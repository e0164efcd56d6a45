"""Harmonic aspect analysis for Swiss Ephemeris body positions."""

from .analysis import build_report
from .analysis.harmonics import all_pairs_aspects, find_harmonics
from .analysis.position import format_body, normalize
from .errors import EphemerisError, InvalidArgument, UnknownBody
from .models import AspectMatch, Body, ChartInput, ChartReport, Houses, NormalizedPosition

__all__ = [
    "AspectMatch",
    "Body",
    "ChartInput",
    "ChartReport",
    "Houses",
    "NormalizedPosition",
    "EphemerisError",
    "InvalidArgument",
    "UnknownBody",
    "all_pairs_aspects",
    "build_report",
    "find_harmonics",
    "format_body",
    "normalize",
]
