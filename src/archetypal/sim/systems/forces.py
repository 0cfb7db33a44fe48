from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, Iterator, Mapping

from ..core.errors import IncompleteChargesError
from ..geometry.vector import Vector
from .charges import Charges, Field

if TYPE_CHECKING:
    from ..core.neighbourhood import Neighbourhood

# (accumulator, neighbourhood, effective charge) -> None. Only mutates the accumulator.
Action = Callable[[Vector, "Neighbourhood", float], None]

_MIN_SEPARATION = 1e-9


def separation(acc: Vector, neighbourhood: "Neighbourhood", charge: float) -> None:
    """Push away from each neighbour with strength ``charge / distance``."""
    if charge == 0.0 or not neighbourhood.population():
        return
    space = acc.space
    terms = []
    for displacement, distance in zip(neighbourhood.displacements, neighbourhood.distances):
        if distance < _MIN_SEPARATION:
            # coincident agents have no direction to separate along
            continue
        weight = charge / (distance * distance)
        terms.append(space.new_vector(displacement.x * weight, displacement.y * weight))
    acc.accumulate(*terms)


def cohesion(acc: Vector, neighbourhood: "Neighbourhood", charge: float) -> None:
    """Pull towards the centroid of the neighbourhood."""
    count = neighbourhood.population()
    if charge == 0.0 or not count:
        return
    # displacements point from each neighbour to the owner, the centroid offset is minus their mean
    centroid_x = -math.fsum(d.x for d in neighbourhood.displacements) / count
    centroid_y = -math.fsum(d.y for d in neighbourhood.displacements) / count
    acc.accumulate(acc.space.new_vector(centroid_x * charge, centroid_y * charge))


def alignment(acc: Vector, neighbourhood: "Neighbourhood", charge: float) -> None:
    """Steer towards the mean velocity of the neighbourhood."""
    count = neighbourhood.population()
    if charge == 0.0 or not count:
        return
    velocities = list(neighbourhood.velocities())
    own = neighbourhood.owner.velocity
    mean_x = math.fsum(v.x for v in velocities) / count
    mean_y = math.fsum(v.y for v in velocities) / count
    acc.accumulate(acc.space.new_vector((mean_x - own.x) * charge, (mean_y - own.y) * charge))


ACTIONS: Dict[Field, Action] = {
    Field.SEPARATION: separation,
    Field.COHESION: cohesion,
    Field.ALIGNMENT: alignment,
}


@dataclass(frozen=True)
class Force:
    """One field's source charge bound to that field's action."""

    source_charge: float
    field: Field

    @property
    def action(self) -> Action:
        return ACTIONS[self.field]

    def apply(self, acc: Vector, neighbourhood: "Neighbourhood", sensitivity: float) -> None:
        self.action(acc, neighbourhood, self.source_charge * sensitivity)


class Forces(Mapping[Field, Force]):
    """The action of a set of source charges on a subject with its own charges."""

    def __init__(self, forces: Mapping[Field, Force]) -> None:
        self._forces: Dict[Field, Force] = dict(forces)

    @classmethod
    def from_charges(cls, source: Charges) -> "Forces":
        return cls({field: Force(charge, field) for field, charge in source.items()})

    def __getitem__(self, field: Field) -> Force:
        return self._forces[field]

    def __iter__(self) -> Iterator[Field]:
        return iter(self._forces)

    def __len__(self) -> int:
        return len(self._forces)

    def charges(self) -> Charges:
        return Charges({field: force.source_charge for field, force in self._forces.items()})

    def act(self, acc: Vector, subject: Charges, neighbourhood: "Neighbourhood") -> Vector:
        """Accumulate every field's force on ``acc``, scaled by the subject's charges."""
        missing = [field for field in Field if field not in self._forces]
        if missing:
            raise IncompleteChargesError(missing[0])
        for field in Field:
            self._forces[field].apply(acc, neighbourhood, subject[field])
        return acc
