from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..models import Body, ChartInput, ChartReport, Houses
from .harmonics import DEFAULT_ORB, MAX_HARMONIC, all_pairs_aspects, matched_pairs
from .position import normalize

logger = logging.getLogger(__name__)


def build_report(
    bodies: Sequence[Body],
    orb: float = DEFAULT_ORB,
    max_harmonic: int = MAX_HARMONIC,
    chart: Optional[ChartInput] = None,
    houses: Optional[Houses] = None,
) -> ChartReport:
    """
    Build the full chart report:
    - sign / degree / minute for every body
    - harmonic aspects for every pair of bodies
    """

    aspects = all_pairs_aspects(bodies, orb=orb, max_harmonic=max_harmonic)
    positions = {body.name: normalize(body.longitude) for body in bodies}
    matched = list(matched_pairs(aspects))
    logger.debug("%d of %d pairs have harmonic matches", len(matched), len(aspects))

    return ChartReport(
        bodies=list(bodies),
        positions=positions,
        aspects=aspects,
        orb=orb,
        max_harmonic=max_harmonic,
        chart=chart,
        houses=houses,
        matched=matched,
    )
