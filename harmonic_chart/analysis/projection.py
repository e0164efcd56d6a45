from __future__ import annotations

import math
from typing import Dict, Iterable, Tuple

from ..errors import InvalidArgument
from ..models import Body

# Canvas defaults: 800x800 px with the wheel drawn at a 300 px radius.
CANVAS_SIZE = 800.0
CHART_RADIUS = 300.0


def polar_to_cartesian(
    longitude: float, radius: float, center: Tuple[float, float] = (0.0, 0.0)
) -> Tuple[float, float]:
    """Project a longitude (degrees) at the given radius onto x/y coordinates."""
    if radius < 0:
        raise InvalidArgument(f"radius must be >= 0, got {radius!r}")
    angle = math.radians(longitude)
    cx, cy = center
    return cx + radius * math.cos(angle), cy + radius * math.sin(angle)


def chart_points(
    bodies: Iterable[Body],
    radius: float = CHART_RADIUS,
    center: Tuple[float, float] = (CANVAS_SIZE / 2, CANVAS_SIZE / 2),
) -> Dict[str, Tuple[float, float]]:
    return {body.name: polar_to_cartesian(body.longitude, radius, center) for body in bodies}
