from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.errors import SpaceMismatchError

if TYPE_CHECKING:
    from .metric_space import MetricSpace2D


class Vector:
    """A point or displacement bound to a ``MetricSpace2D``.

    Mutating operations (``accumulate``, ``scale``, ``subtract``, ``update``)
    change the receiver and return it for chaining; ``times`` and ``minus``
    return a new vector.
    """

    __slots__ = ("space", "x", "y")

    def __init__(self, space: "MetricSpace2D", x: float = 0.0, y: float = 0.0) -> None:
        self.space = space
        self.x = x
        self.y = y

    def _check(self, other: "Vector") -> None:
        if other.space is not self.space:
            raise SpaceMismatchError(f"cannot combine a vector of {other.space!r} with one of {self.space!r}")

    def accumulate(self, *vectors: "Vector") -> "Vector":
        """Add every vector to this one with a single N-ary sum per axis."""
        xs = [self.x]
        ys = [self.y]
        for summand in vectors:
            self._check(summand)
            xs.append(summand.x)
            ys.append(summand.y)
        self.x = self.space.x_axis.sum(*xs)
        self.y = self.space.y_axis.sum(*ys)
        return self

    def update(self, x: float, y: float) -> "Vector":
        self.x = self.space.x_axis.sum(x)
        self.y = self.space.y_axis.sum(y)
        return self

    def scale(self, scalar: float) -> "Vector":
        self.x = self.space.x_axis.sum(scalar * self.x)
        self.y = self.space.y_axis.sum(scalar * self.y)
        return self

    def times(self, scalar: float) -> "Vector":
        return Vector(self.space, self.x, self.y).scale(scalar)

    def subtract(self, vector: "Vector") -> "Vector":
        # self - vector is the geodesic path from vector to self
        self._check(vector)
        self.x, self.y = self.space.geodesic_displacement(vector, self)
        return self

    def minus(self, vector: "Vector") -> "Vector":
        return Vector(self.space, self.x, self.y).subtract(vector)

    def magnitude(self) -> float:
        return self.space.distance(self, self.space.zero_vector())

    def dot(self, vector: "Vector") -> float:
        """Scalar product, taken on coordinates normalized by each axis.

        ``u.dot(u) == u.magnitude() ** 2`` and perpendicular vectors give 0.
        """
        self._check(vector)
        x_norm = self.space.x_axis.sum
        y_norm = self.space.y_axis.sum
        return x_norm(self.x) * x_norm(vector.x) + y_norm(self.y) * y_norm(vector.y)

    def __repr__(self) -> str:
        return f"Vector(x={self.x!r}, y={self.y!r})"
