"""Exceptions raised by harmonic_chart."""

from __future__ import annotations


class InvalidArgument(ValueError):
    """A caller passed a value outside the contract (negative orb, NaN longitude, ...)."""


class EphemerisError(RuntimeError):
    """The Swiss Ephemeris query failed or is not configured."""


class UnknownBody(KeyError):
    """Body key not present in the body table."""
