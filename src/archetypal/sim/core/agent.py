from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..geometry.vector import Vector

if TYPE_CHECKING:
    from ..systems.archetype import Archetype
    from .neighbourhood import Neighbourhood


@dataclass(slots=True, eq=False)
class Agent:
    index: int
    position: Vector
    velocity: Vector
    acceleration: Vector
    archetype: "Archetype"
    neighbourhood: "Neighbourhood"

    def speed(self) -> float:
        return self.velocity.magnitude()
