"""Sign / degree / minute conversion for ecliptic longitudes."""

from __future__ import annotations

import math

from ..errors import InvalidArgument
from ..models import Body, NormalizedPosition


def normalize(longitude: float) -> NormalizedPosition:
    """
    Split a longitude into zodiac sign, whole degree and rounded minute.

    Any finite real is accepted; negative values and values past 360 wrap
    using floor division. Minutes that round up to 60 carry into the degree,
    and degree 30 carries into the next sign.
    """

    if not math.isfinite(longitude):
        raise InvalidArgument(f"longitude must be finite, got {longitude!r}")

    sign, remainder = divmod(longitude, 30.0)
    # divmod can return the divisor itself for tiny negative inputs
    if remainder >= 30.0:
        sign += 1
        remainder -= 30.0
    sign_index = int(sign) % 12
    degree = int(math.floor(remainder))
    minute = int(math.floor((remainder - degree) * 60.0 + 0.5))

    if minute == 60:
        minute = 0
        degree += 1
    if degree == 30:
        degree = 0
        sign_index = (sign_index + 1) % 12

    return NormalizedPosition(sign_index=sign_index, degree=degree, minute=minute)


def format_position(position: NormalizedPosition, kind: str = "short", name: str | None = None) -> str:
    """
    Render a position as ``"8º Tau 17"`` (short) or ``"Sun 8º Tau 17"`` (full).
    """

    pos = f"{position.degree}º {position.sign} {position.minute}"
    if kind == "short":
        return pos
    if kind == "full":
        label = (name or "").capitalize()
        return f"{label} {pos}".strip()
    raise InvalidArgument(f"unknown format kind: {kind!r}")


def format_body(body: Body, kind: str = "full") -> str:
    return format_position(normalize(body.longitude), kind, body.name)
