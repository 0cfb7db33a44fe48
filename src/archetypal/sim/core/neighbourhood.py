from __future__ import annotations

import weakref
from typing import TYPE_CHECKING, Iterator, List

from ..geometry.vector import Vector

if TYPE_CHECKING:
    from .agent import Agent
    from .state import State


class Neighbourhood:
    """The other agents strictly within ``radius`` of one owner agent.

    Rebuilt every tick from the bound ``State``'s displacement matrix, after
    the matrices are refreshed and before any force reads it. Neighbours are
    kept in ascending agent index order.

    The state is only borrowed through a weak proxy; its owner keeps it alive.
    """

    def __init__(self, owner_index: int, radius: float) -> None:
        self.owner_index = owner_index
        self.radius = radius
        self._indices: List[int] = []
        self._displacements: List[Vector | None] = []
        self._distances: List[float] = []
        self._count = 0
        self._state: State | None = None

    def init(self, state: "State") -> "Neighbourhood":
        """Bind to ``state`` and size the buffers for its whole population."""
        self._state = weakref.proxy(state)
        capacity = max(state.population() - 1, 0)
        self._indices = [0] * capacity
        self._displacements = [None] * capacity
        self._distances = [0.0] * capacity
        self._count = 0
        return self

    @property
    def state(self) -> "State":
        if self._state is None:
            raise RuntimeError(f"neighbourhood of agent {self.owner_index} is not bound to a state")
        return self._state

    @property
    def owner(self) -> "Agent":
        return self.state.agents[self.owner_index]

    @property
    def indices(self) -> List[int]:
        return self._indices[: self._count]

    @property
    def displacements(self) -> List[Vector]:
        return self._displacements[: self._count]

    @property
    def distances(self) -> List[float]:
        return self._distances[: self._count]

    def calculate_displacements(self) -> List[Vector]:
        state = self.state
        owner = self.owner_index
        radius = self.radius
        distance_row = state.distances[owner]
        indices = self._indices
        displacements = self._displacements
        distances = self._distances
        count = 0
        for index, displacement in enumerate(state.displacements[owner]):
            if index == owner:
                continue
            distance = distance_row[index]
            if distance < radius:
                indices[count] = index
                displacements[count] = displacement
                distances[count] = distance
                count += 1
        self._count = count
        return self.displacements

    def population(self) -> int:
        return self._count

    def neighbours(self) -> Iterator["Agent"]:
        agents = self.state.agents
        for index in self.indices:
            yield agents[index]

    def velocities(self) -> Iterator[Vector]:
        for agent in self.neighbours():
            yield agent.velocity
