from __future__ import annotations

from typing import List, Sequence

from ..geometry.metric_space import MetricSpace2D
from ..geometry.vector import Vector
from .agent import Agent
from .errors import InvalidPopulationError


class State:
    """Snapshot of every agent plus the cached pairwise matrices.

    ``displacements[i][j]`` is the geodesic ``position[i] - position[j]`` and
    ``distances[i][j]`` its magnitude, so
    ``displacements[i][j] == -displacements[j][i]`` and
    ``distances[i][j] == distances[j][i]``, with zero diagonals. Both matrices
    are allocated once here and recomputed in place every tick.
    """

    def __init__(self, coordinate_system: MetricSpace2D, agents: Sequence[Agent]) -> None:
        if len(agents) < 1:
            raise InvalidPopulationError(len(agents))
        self.coordinate_system = coordinate_system
        self.agents: List[Agent] = list(agents)
        population = len(self.agents)
        self.displacements: List[List[Vector]] = [
            [coordinate_system.zero_vector() for _ in range(population)] for _ in range(population)
        ]
        self.distances: List[List[float]] = [[0.0] * population for _ in range(population)]
        for agent in self.agents:
            agent.neighbourhood.init(self)

    def population(self) -> int:
        return len(self.agents)

    def calculate_displacements(self) -> List[List[Vector]]:
        displacements = self.displacements
        agents = self.agents
        for i in range(len(displacements)):
            displacements[i][i].scale(0)
            position = agents[i].position
            for j in range(i):
                forward = displacements[i][j]
                forward.scale(0).accumulate(position).subtract(agents[j].position)
                displacements[j][i].scale(0).subtract(forward)
        return displacements

    def calculate_distances(self) -> List[List[float]]:
        distances = self.distances
        displacements = self.displacements
        for i in range(len(distances)):
            distances[i][i] = 0.0
            for j in range(i):
                distances[i][j] = displacements[i][j].magnitude()
                distances[j][i] = distances[i][j]
        return distances
