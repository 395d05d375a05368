"""Unit tests for the random-walk point generator."""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

import pytest

from services.generator import BASE_TIME, generate_points, round_half_away_from_zero


def test_generate_returns_exact_count_with_hourly_timestamps() -> None:
    points = generate_points(50, 3)

    assert len(points) == 50
    assert points[0].time == datetime(2024, 1, 1, tzinfo=timezone.utc)
    for index, point in enumerate(points):
        assert point.time == BASE_TIME + timedelta(hours=index)
    for earlier, later in zip(points, points[1:]):
        assert later.time - earlier.time == timedelta(hours=1)


@pytest.mark.parametrize("decimal_places", [0, 1, 2, 5])
def test_values_respect_decimal_places(decimal_places: int) -> None:
    points = generate_points(200, decimal_places)
    power = 10 ** decimal_places

    for point in points:
        scaled = point.value * power
        assert abs(scaled - round(scaled)) < 1e-6


@pytest.mark.parametrize("point_count", [0, -1, -100])
def test_non_positive_count_yields_empty_sequence(point_count: int) -> None:
    assert generate_points(point_count, 2) == []


def test_epoch_millis_matches_base_time() -> None:
    points = generate_points(3, 2)

    assert [point.epoch_millis for point in points] == [
        1704067200000,
        1704070800000,
        1704074400000,
    ]


def test_walk_keeps_unrounded_running_value() -> None:
    rng = random.Random(42)
    points = generate_points(5, 0, rng=rng)

    replay = random.Random(42)
    running = replay.random()
    expected = []
    for _ in range(5):
        running += replay.random() - 0.5
        expected.append(round_half_away_from_zero(running, 0))

    assert [point.value for point in points] == expected


def test_seeded_generators_are_reproducible() -> None:
    first = generate_points(10, 4, rng=random.Random(3))
    second = generate_points(10, 4, rng=random.Random(3))

    assert first == second


@pytest.mark.parametrize(
    ("value", "decimal_places", "expected"),
    [
        (2.5, 0, 3.0),
        (-2.5, 0, -3.0),
        (0.125, 2, 0.13),
        (-0.125, 2, -0.13),
        (1.234, 2, 1.23),
        (-0.0004, 3, 0.0),
        (0.49999999999999994, 0, 0.0),
        (-0.49999999999999994, 0, 0.0),
    ],
)
def test_round_half_away_from_zero(value: float, decimal_places: int, expected: float) -> None:
    assert round_half_away_from_zero(value, decimal_places) == expected


def test_round_beyond_double_precision_is_identity() -> None:
    assert round_half_away_from_zero(0.1234567890123456789, 30) == 0.1234567890123456789
