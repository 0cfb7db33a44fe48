from __future__ import annotations

import math
import random

import pytest

from archetypal.sim.core.errors import InvalidCircumferenceError
from archetypal.sim.geometry.metric_space import Circle, Line, SpaceKind, euclidean_toroid

TOLERANCE = 1e-9
CIRCUMFERENCE = math.sqrt(math.e) * 4.0

_rng = random.Random(2024)
TRIPLES = [tuple(_rng.uniform(-40.0, 40.0) for _ in range(3)) for _ in range(40)]
TRIPLES += [(0.0, 0.0, 0.0), (CIRCUMFERENCE / 2, -CIRCUMFERENCE / 2, CIRCUMFERENCE), (1e-12, -1e-12, 3.0)]

SPACES = [
    pytest.param(Line(), id="line"),
    pytest.param(Circle(CIRCUMFERENCE), id="circle"),
    pytest.param(Circle(1.0), id="unit-circle"),
]


def _close(space, a: float, b: float) -> bool:
    return space.distance(a, b) < TOLERANCE


@pytest.mark.parametrize("space", SPACES)
@pytest.mark.parametrize("a,b,c", TRIPLES)
def test_sum_is_a_commutative_group(space, a, b, c):
    assert space.sum(a, b) == space.sum(b, a)
    assert _close(space, space.sum(space.sum(a, b), c), space.sum(a, space.sum(b, c)))
    assert _close(space, space.sum(space.sum(a, b), c), space.sum(a, b, c))
    normalized = space.sum(a)
    assert space.sum(0.0, normalized) == normalized
    assert _close(space, space.sum(space.invert(a), a), 0.0)


@pytest.mark.parametrize("space", SPACES)
@pytest.mark.parametrize("a,b,c", TRIPLES)
def test_distance_is_a_metric(space, a, b, c):
    assert space.distance(a, b) == space.distance(b, a)
    assert space.distance(a, b) >= 0.0
    assert space.distance(a, a) == 0.0
    assert space.distance(a, b) + space.distance(b, c) >= space.distance(a, c) - TOLERANCE


@pytest.mark.parametrize("space", SPACES)
@pytest.mark.parametrize("a,b,c", TRIPLES)
def test_invert_is_an_involution_fixing_zero(space, a, b, c):
    assert _close(space, space.invert(space.invert(a)), a)
    assert space.invert(0.0) == 0.0


@pytest.mark.parametrize("a,b,c", TRIPLES)
def test_circle_distance_wraps_and_never_exceeds_half_circumference(a, b, c):
    circle = Circle(CIRCUMFERENCE)
    assert circle.distance(a, a + CIRCUMFERENCE) < TOLERANCE
    for x, y in ((a, b), (b, c), (a, c)):
        assert circle.distance(x, y) <= CIRCUMFERENCE / 2


def test_distance_between_ends_of_circle_is_small():
    circle = Circle(1.0)
    one_degree = 1.0 / 10.0
    minus_one_degree = 9.0 / 10.0

    assert circle.distance(one_degree, minus_one_degree) == pytest.approx(2 * one_degree, abs=1e-9)


def test_circle_distance_grows_then_shrinks_around_the_loop():
    circle = Circle(CIRCUMFERENCE)
    steps = [circle.distance(CIRCUMFERENCE * n / 20.0, 0.0) for n in range(21)]

    assert steps[10] == pytest.approx(CIRCUMFERENCE / 2)
    assert steps[0] == pytest.approx(0.0)
    assert steps[20] == pytest.approx(0.0, abs=1e-9)
    assert all(earlier <= later for earlier, later in zip(steps[:10], steps[1:11]))


def test_circle_sum_normalizes_into_half_open_range():
    circle = Circle(10.0)

    assert circle.sum(6.0) == pytest.approx(-4.0)
    assert circle.sum(7.0, 7.0) == pytest.approx(4.0)
    assert circle.chart(circle.sum(6.0)) == pytest.approx(6.0)


def test_circle_sum_maps_the_antipode_to_the_positive_half():
    circle = Circle(10.0)

    assert circle.sum(15.0) == 5.0
    assert circle.sum(-5.0) == 5.0
    assert circle.invert(5.0) == 5.0
    assert circle.distance(0.0, 5.0) == 5.0
    assert circle.distance(-5.0, 5.0) == 0.0


@pytest.mark.parametrize("circumference", [0.0, -3.0, math.inf, math.nan])
def test_non_positive_circumference_is_rejected(circumference):
    with pytest.raises(InvalidCircumferenceError):
        Circle(circumference)
    with pytest.raises(ValueError):
        euclidean_toroid(circumference, 10.0)


def test_spaces_are_tagged_by_kind():
    assert Line().kind is SpaceKind.LINE
    assert Circle(2.0).kind is SpaceKind.CIRCLE
    assert Circle(2.0) == Circle(2.0)
    assert Circle(2.0) != Circle(3.0)
    assert euclidean_toroid(3.0, 4.0).periodic
