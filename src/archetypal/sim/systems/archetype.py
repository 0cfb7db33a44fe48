from __future__ import annotations

from dataclasses import dataclass

from .charges import Charges
from .forces import Forces


@dataclass(frozen=True, eq=False)
class Archetype:
    """Behavioural identity shared read-only by any number of agents.

    ``influence`` is how strongly agents of this archetype act on others,
    ``sensitivity`` how strongly they are acted upon.
    """

    influence: Forces
    sensitivity: Charges

    def __post_init__(self) -> None:
        object.__setattr__(self, "sensitivity", self.sensitivity.readonly())

    @classmethod
    def define(cls, influence: Charges, sensitivity: Charges) -> "Archetype":
        return cls(Forces.from_charges(influence), sensitivity)

    @classmethod
    def define_reciprocal(cls, charges: Charges) -> "Archetype":
        return cls.define(charges, charges)


def default_archetype(charge: float = 1.0) -> Archetype:
    """Separation, cohesion and alignment all active at the same charge."""
    return Archetype.define_reciprocal(Charges.uniform(charge))
