"""Synthetic random-walk time series generation."""

from __future__ import annotations

import math
import random
import sys
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from models.points import Point

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)
TIME_STEP = timedelta(hours=1)

# Rounding past the precision of a double would only add noise.
MAX_DECIMAL_PLACES = sys.float_info.dig


def round_half_away_from_zero(value: float, decimal_places: int) -> float:
    """Round ``value`` to ``decimal_places`` digits, ties moving away from zero."""
    if decimal_places > MAX_DECIMAL_PLACES:
        return value
    power = 10.0 ** max(decimal_places, 0)
    scaled = abs(value) * power
    whole = math.floor(scaled)
    if scaled - whole >= 0.5:
        whole += 1
    rounded = whole / power
    if value < 0 and rounded:
        return -rounded
    return rounded


def generate_points(
    point_count: int,
    decimal_places: int,
    rng: Optional[random.Random] = None,
) -> List[Point]:
    """Build ``point_count`` hourly points whose values follow a random walk.

    The walk starts at a uniform value in ``[0, 1)`` and moves by a uniform
    step in ``[-0.5, 0.5)`` before every emitted point. Only the emitted value
    is rounded; the running value keeps full precision. A non-positive count
    yields an empty list.
    """
    source = rng or random
    points: List[Point] = []
    running = source.random()
    for index in range(max(point_count, 0)):
        running += source.random() - 0.5
        points.append(
            Point(
                time=BASE_TIME + index * TIME_STEP,
                value=round_half_away_from_zero(running, decimal_places),
            )
        )
    return points
