"""Harmonic aspect detection between pairs of bodies."""

from __future__ import annotations

import logging
import math
import numbers
from typing import Dict, List, Sequence

from ..errors import InvalidArgument
from ..models import AspectMatch, Body, BodyPair

logger = logging.getLogger(__name__)

DEFAULT_ORB = 12.0
MAX_HARMONIC = 31


def _check_params(orb: float, max_harmonic: int) -> None:
    if not math.isfinite(orb):
        raise InvalidArgument(f"orb must be finite, got {orb!r}")
    if orb < 0:
        raise InvalidArgument(f"orb must be >= 0, got {orb!r}")
    # bool is an Integral subclass
    if isinstance(max_harmonic, bool) or not isinstance(max_harmonic, numbers.Integral):
        raise InvalidArgument(f"max_harmonic must be an integer, got {max_harmonic!r}")
    if max_harmonic < 1:
        raise InvalidArgument(f"max_harmonic must be >= 1, got {max_harmonic!r}")


def find_harmonics(
    degree1: float, degree2: float, orb: float = DEFAULT_ORB, max_harmonic: int = MAX_HARMONIC
) -> List[AspectMatch]:
    """
    Return every harmonic 1..max_harmonic whose ideal angle (360/n) is within
    orb/n of the separation between the two longitudes.

    The separation is the plain absolute difference; it is not wrapped into
    0-180, so 355° vs 5° measures as 350° apart. The orb shrinks with the
    harmonic number, so higher harmonics need a tighter fit.
    """

    _check_params(orb, max_harmonic)
    if not (math.isfinite(degree1) and math.isfinite(degree2)):
        raise InvalidArgument(f"longitudes must be finite, got {degree1!r}, {degree2!r}")
    return _scan(degree1, degree2, orb, max_harmonic)


def _scan(degree1: float, degree2: float, orb: float, max_harmonic: int) -> List[AspectMatch]:
    separation = abs(degree1 - degree2)
    matches: List[AspectMatch] = []
    for harmonic in range(1, max_harmonic + 1):
        difference = abs(360.0 / harmonic - separation)
        if difference <= orb / harmonic:
            matches.append(AspectMatch(harmonic=harmonic, residual=difference))
    return matches


def all_pairs_aspects(
    bodies: Sequence[Body], orb: float = DEFAULT_ORB, max_harmonic: int = MAX_HARMONIC
) -> Dict[BodyPair, List[AspectMatch]]:
    """
    Run the harmonic scan over every unordered pair of bodies.

    Pairs are keyed as (earlier, later) in input order and inserted in the
    order (b0, b1), (b0, b2), ..., (b1, b2), ...; pairs without matches map to
    an empty list. The input sequence is left untouched.
    """

    _check_params(orb, max_harmonic)
    for body in bodies:
        if not math.isfinite(body.longitude):
            raise InvalidArgument(f"{body.name}: longitude must be finite, got {body.longitude!r}")

    result: Dict[BodyPair, List[AspectMatch]] = {}
    n = len(bodies)
    for i in range(n):
        first = bodies[i]
        for j in range(i + 1, n):
            second = bodies[j]
            result[(first, second)] = _scan(first.longitude, second.longitude, orb, max_harmonic)
    logger.debug("scanned %d pairs across %d bodies (orb=%s, max_harmonic=%d)", len(result), n, orb, max_harmonic)
    return result


def aspects_between(aspects: Dict[BodyPair, List[AspectMatch]], a: Body, b: Body) -> List[AspectMatch]:
    """Look up the matches for a pair regardless of the order it was stored in."""
    if (a, b) in aspects:
        return aspects[(a, b)]
    return aspects.get((b, a), [])


def matched_pairs(aspects: Dict[BodyPair, List[AspectMatch]]) -> Dict[BodyPair, List[AspectMatch]]:
    """Keep only the pairs with at least one harmonic match."""
    return {pair: matches for pair, matches in aspects.items() if matches}
