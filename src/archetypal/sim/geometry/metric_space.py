"""One and two dimensional metric spaces.

A ``MetricSpace1D`` describes how a single coordinate axis adds, measures and
negates values. Every realization satisfies:

- ``sum`` is commutative and associative, ``sum(0, a) == a`` and
  ``sum(invert(a), a) == 0``
- ``distance`` is symmetric, non-negative, zero exactly on equal inputs and
  obeys the triangle inequality
- ``invert(invert(a)) == a`` and ``invert(0) == 0``

A ``MetricSpace2D`` is the cartesian product of two such axes.
"""
from __future__ import annotations

import math
from enum import Enum

from ..core.errors import InvalidCircumferenceError, SpaceMismatchError
from .vector import Vector


class SpaceKind(str, Enum):
    LINE = "line"
    CIRCLE = "circle"


class MetricSpace1D:
    kind: SpaceKind

    def sum(self, *scalars: float) -> float:
        raise NotImplementedError

    def distance(self, a: float, b: float) -> float:
        raise NotImplementedError

    def invert(self, a: float) -> float:
        raise NotImplementedError

    def chart(self, a: float) -> float:
        """Map a coordinate onto the render chart of this axis."""
        raise NotImplementedError


class Line(MetricSpace1D):
    """The real numbers, unbounded above and below."""

    kind = SpaceKind.LINE

    def sum(self, *scalars: float) -> float:
        return math.fsum(scalars)

    def distance(self, a: float, b: float) -> float:
        return abs(a - b)

    def invert(self, a: float) -> float:
        return -a

    def chart(self, a: float) -> float:
        return a

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Line)

    def __hash__(self) -> int:
        return hash(self.kind)

    def __repr__(self) -> str:
        return "Line()"


class Circle(MetricSpace1D):
    """A periodic axis of the given circumference.

    Coordinates behave like an arc length parameter, normalized into
    ``(-C/2, C/2]`` by ``sum``.
    """

    kind = SpaceKind.CIRCLE

    def __init__(self, circumference: float) -> None:
        if not math.isfinite(circumference) or circumference <= 0:
            raise InvalidCircumferenceError(circumference)
        self.circumference = float(circumference)
        self._line = Line()

    def sum(self, *scalars: float) -> float:
        half = self.circumference / 2
        result = math.remainder(self._line.sum(*scalars), self.circumference)
        if result == -half:
            return half
        return result

    def distance(self, a: float, b: float) -> float:
        return abs(math.remainder(self._line.distance(a, b), self.circumference))

    def invert(self, a: float) -> float:
        # C - (a mod C), folded back into the normalized range so 0 stays fixed
        return self.sum(-a)

    def chart(self, a: float) -> float:
        return a % self.circumference

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Circle) and other.circumference == self.circumference

    def __hash__(self) -> int:
        return hash((self.kind, self.circumference))

    def __repr__(self) -> str:
        return f"Circle({self.circumference!r})"


class MetricSpace2D:
    """Cartesian product of two independent ``MetricSpace1D`` axes."""

    def __init__(self, x_axis: MetricSpace1D, y_axis: MetricSpace1D) -> None:
        self.x_axis = x_axis
        self.y_axis = y_axis

    @property
    def periodic(self) -> bool:
        return SpaceKind.CIRCLE in (self.x_axis.kind, self.y_axis.kind)

    def geodesic_displacement(self, p1: Vector, p2: Vector) -> tuple[float, float]:
        """Signed shortest path from ``p1`` to ``p2`` on each axis."""
        if p1.space is not self or p2.space is not self:
            raise SpaceMismatchError(f"vectors of {p1.space!r} and {p2.space!r} measured in {self!r}")
        return self.geodesic_diff(p1.x, p2.x, p1.y, p2.y)

    def geodesic_diff(self, x1: float, x2: float, y1: float, y2: float) -> tuple[float, float]:
        x_axis = self.x_axis
        y_axis = self.y_axis
        delta_x = x_axis.sum(x_axis.invert(x1), x2)
        delta_y = y_axis.sum(y_axis.invert(y1), y2)
        return delta_x, delta_y

    def distance(self, v1: Vector, v2: Vector) -> float:
        delta_x, delta_y = self.geodesic_displacement(v1, v2)
        return math.sqrt(delta_x * delta_x + delta_y * delta_y)

    def zero_vector(self) -> Vector:
        return Vector(self, 0.0, 0.0)

    def new_vector(self, x: float, y: float) -> Vector:
        return Vector(self, self.x_axis.sum(x), self.y_axis.sum(y))

    def embed(self, vector: Vector) -> Vector:
        """Re-express ``vector`` (from any space) as a vector of this space."""
        return self.new_vector(vector.x, vector.y)

    def chart(self, vector: Vector) -> tuple[float, float]:
        return self.x_axis.chart(vector.x), self.y_axis.chart(vector.y)

    def __repr__(self) -> str:
        return f"MetricSpace2D({self.x_axis!r}, {self.y_axis!r})"


def euclidean_plane() -> MetricSpace2D:
    """An infinite plane with no periodic boundaries."""
    line = Line()
    return MetricSpace2D(line, line)


def euclidean_toroid(width: float, height: float) -> MetricSpace2D:
    """A plane with periodic boundaries on both axes.

    Agents leaving through one edge reappear at the opposite edge.
    """
    return MetricSpace2D(Circle(width), Circle(height))
