"""Scenario: owns the simulation state, clock and tick pipeline.

A ``Scenario`` is single-writer. ``evolve`` runs one tick to completion and
nothing inside it suspends, so callers that compute ticks off their main
control path must serialize access to a scenario themselves.
"""
from __future__ import annotations

import logging
from datetime import timedelta
from time import perf_counter
from typing import List

from ..geometry.metric_space import MetricSpace2D, euclidean_plane, euclidean_toroid
from ..systems import metrics as metrics_system
from ..systems.archetype import Archetype, default_archetype
from ..types.metrics import TickMetrics
from ..types.snapshot import Coords, Frame, Snapshot, SnapshotWorld
from ..utils.math2d import _clamp_length_xy_f
from .agent import Agent
from .config import SimulationConfig
from .errors import InvalidPopulationError, InvalidTimeStepError
from .neighbourhood import Neighbourhood
from .rng import DeterministicRng
from .state import State

logger = logging.getLogger(__name__)


class Scenario:
    def __init__(
        self,
        state: State,
        time_step: timedelta,
        velocities: MetricSpace2D,
        max_speed: float,
        width: float,
        height: float,
    ) -> None:
        if time_step <= timedelta(0):
            raise InvalidTimeStepError(time_step)
        self.state = state
        self.time = timedelta(0)
        self.time_step = time_step
        self.tick = 0
        self.positions = state.coordinate_system
        self.velocities = velocities
        self.max_speed = max_speed
        self.width = width
        self.height = height
        self._metrics: TickMetrics | None = None

    @property
    def metrics(self) -> TickMetrics | None:
        return self._metrics

    def evolve(self) -> None:
        """Advance the simulation by exactly one time step."""
        start = perf_counter()
        delta_t = self.time_step.total_seconds()
        self.cache_warmup()
        self.calculate_forces()
        self.integrate_forces(delta_t)
        self.apply_constraints()
        self.integrate_velocities(delta_t)
        self.time += self.time_step
        self.tick += 1
        elapsed_ms = (perf_counter() - start) * 1000.0
        self._metrics = metrics_system.create_metrics(
            self.tick, self.time.total_seconds(), self.state, elapsed_ms
        )
        logger.debug("tick %d evolved in %.3f ms", self.tick, elapsed_ms)

    def cache_warmup(self) -> None:
        self.state.calculate_displacements()
        self.state.calculate_distances()
        for agent in self.state.agents:
            agent.neighbourhood.calculate_displacements()

    def calculate_forces(self) -> None:
        for agent in self.state.agents:
            archetype = agent.archetype
            agent.acceleration.scale(0)
            archetype.influence.act(agent.acceleration, archetype.sensitivity, agent.neighbourhood)

    def integrate_forces(self, delta_t: float) -> None:
        for agent in self.state.agents:
            agent.velocity.accumulate(agent.acceleration.times(delta_t))

    def apply_constraints(self) -> None:
        max_speed = self.max_speed
        for agent in self.state.agents:
            velocity = agent.velocity
            velocity.update(*_clamp_length_xy_f(velocity.x, velocity.y, max_speed))

    def integrate_velocities(self, delta_t: float) -> None:
        positions = self.positions
        for agent in self.state.agents:
            agent.position.accumulate(positions.embed(agent.velocity.times(delta_t)))

    def snapshot(self) -> Snapshot:
        return Snapshot(
            tick=self.tick,
            time=self.time.total_seconds(),
            frame=snapshot_frame(self.state),
            world=SnapshotWorld(width=self.width, height=self.height, toroidal=self.positions.periodic),
            metrics=self._metrics,
        )

    def next_frame(self) -> Frame:
        self.evolve()
        return snapshot_frame(self.state)


def snapshot_frame(state: State) -> Frame:
    """Each agent's position in render coordinates, in agent index order."""
    chart = state.coordinate_system.chart
    return [Coords(*chart(agent.position)) for agent in state.agents]


def _spawn_agents(
    positions: MetricSpace2D,
    velocities: MetricSpace2D,
    population: int,
    archetype: Archetype,
    radius: float,
    max_speed: float,
    width: float,
    height: float,
    rng: DeterministicRng | None,
) -> List[Agent]:
    agents: List[Agent] = []
    for index in range(population):
        if rng is None:
            position = positions.zero_vector()
            velocity = velocities.zero_vector()
        else:
            position = positions.new_vector(rng.next_range(0, width), rng.next_range(0, height))
            # plane polar keeps the initial speed under the cap
            initial = rng.next_polar(max_speed)
            velocity = velocities.new_vector(initial.x, initial.y)
        agents.append(
            Agent(
                index=index,
                position=position,
                velocity=velocity,
                acceleration=velocities.zero_vector(),
                archetype=archetype,
                neighbourhood=Neighbourhood(index, radius),
            )
        )
    return agents


def initialise_scenario(
    time_step: timedelta,
    width: float,
    height: float,
    population: int,
    archetype: Archetype | None = None,
    *,
    max_speed: float = 10.0,
    neighbourhood_radius: float = 50.0,
    toroidal: bool = True,
    seed: int | None = 42,
) -> Scenario:
    """Set up a scenario of ``population`` agents sharing one archetype.

    Positions live on a ``width`` x ``height`` torus (or an unbounded plane when
    ``toroidal`` is false), velocities on an unbounded plane. With ``seed`` set
    to ``None`` every agent starts at rest at the origin.
    """
    if population < 1:
        raise InvalidPopulationError(population)
    if time_step <= timedelta(0):
        raise InvalidTimeStepError(time_step)
    if archetype is None:
        archetype = default_archetype()
    positions = euclidean_toroid(width, height) if toroidal else euclidean_plane()
    velocities = euclidean_plane()
    rng = None if seed is None else DeterministicRng(seed)
    agents = _spawn_agents(
        positions, velocities, population, archetype, neighbourhood_radius, max_speed, width, height, rng
    )
    state = State(positions, agents)
    logger.info(
        "initialised scenario: population=%d size=%gx%g toroidal=%s dt=%s",
        population,
        width,
        height,
        toroidal,
        time_step,
    )
    return Scenario(state, time_step, velocities, max_speed, width, height)


def scenario_from_config(config: SimulationConfig) -> Scenario:
    return initialise_scenario(
        config.time_step_delta,
        config.width,
        config.height,
        config.population,
        config.archetype.to_archetype(),
        max_speed=config.max_speed,
        neighbourhood_radius=config.neighbourhood_radius,
        toroidal=config.toroidal,
        seed=config.seed if config.randomise else None,
    )
