from __future__ import annotations

from datetime import timedelta

import gc
import weakref

import pytest

from archetypal.sim.core.agent import Agent
from archetypal.sim.core.errors import InvalidPopulationError
from archetypal.sim.core.neighbourhood import Neighbourhood
from archetypal.sim.core.scenario import initialise_scenario
from archetypal.sim.core.state import State
from archetypal.sim.geometry.metric_space import euclidean_plane


def _scenario(population: int, toroidal: bool = True, seed: int | None = 3, radius: float = 50.0):
    return initialise_scenario(
        timedelta(seconds=1 / 60),
        120.0,
        80.0,
        population,
        toroidal=toroidal,
        seed=seed,
        neighbourhood_radius=radius,
    )


def _place(scenario, points):
    for agent, (x, y) in zip(scenario.state.agents, points):
        agent.position.update(x, y)


@pytest.mark.parametrize("population", [1, 2, 7, 25])
@pytest.mark.parametrize("toroidal", [True, False])
def test_distances_are_symmetric_with_zero_diagonal(population, toroidal):
    state = _scenario(population, toroidal=toroidal).state

    state.calculate_displacements()
    distances = state.calculate_distances()

    assert len(distances) == population
    for i in range(population):
        assert distances[i][i] == 0.0
        for j in range(population):
            assert distances[i][j] == distances[j][i]
            assert distances[i][j] >= 0.0


@pytest.mark.parametrize("toroidal", [True, False])
def test_displacements_are_antisymmetric_with_zero_diagonal(toroidal):
    state = _scenario(12, toroidal=toroidal).state

    displacements = state.calculate_displacements()

    for i in range(12):
        assert (displacements[i][i].x, displacements[i][i].y) == (0.0, 0.0)
        for j in range(12):
            assert displacements[i][j].x == pytest.approx(-displacements[j][i].x, abs=1e-9)
            assert displacements[i][j].y == pytest.approx(-displacements[j][i].y, abs=1e-9)


def test_displacement_points_from_the_column_agent_to_the_row_agent():
    scenario = _scenario(2, toroidal=False, seed=None)
    _place(scenario, [(10.0, 5.0), (4.0, 7.0)])

    displacements = scenario.state.calculate_displacements()
    distances = scenario.state.calculate_distances()

    assert (displacements[0][1].x, displacements[0][1].y) == pytest.approx((6.0, -2.0))
    assert (displacements[1][0].x, displacements[1][0].y) == pytest.approx((-6.0, 2.0))
    assert distances[0][1] == pytest.approx(40.0 ** 0.5)


def test_displacements_wrap_around_the_torus():
    scenario = _scenario(2, seed=None)
    _place(scenario, [(1.0, 1.0), (119.0, 79.0)])

    scenario.state.calculate_displacements()
    distances = scenario.state.calculate_distances()

    assert distances[0][1] == pytest.approx(8.0 ** 0.5)


def test_matrices_are_reused_and_recalculation_is_idempotent():
    state = _scenario(15).state
    rows = state.displacements
    first_cell = state.displacements[3][1]

    state.calculate_displacements()
    state.calculate_distances()
    first = ([[(v.x, v.y) for v in row] for row in state.displacements], [list(row) for row in state.distances])
    state.calculate_displacements()
    state.calculate_distances()
    second = ([[(v.x, v.y) for v in row] for row in state.displacements], [list(row) for row in state.distances])

    assert first == second
    assert state.displacements is rows
    assert state.displacements[3][1] is first_cell


def test_empty_state_is_rejected():
    with pytest.raises(InvalidPopulationError):
        State(euclidean_plane(), [])


def test_neighbourhood_filters_by_strict_radius_in_index_order():
    scenario = _scenario(5, toroidal=False, seed=None, radius=2.0)
    _place(scenario, [(0.0, 0.0), (1.0, 0.0), (2.0, 0.0), (5.0, 0.0), (1.5, 0.0)])

    scenario.cache_warmup()
    neighbourhoods = [agent.neighbourhood for agent in scenario.state.agents]

    # agent 2 sits exactly on the radius of agent 0
    assert neighbourhoods[0].indices == [1, 4]
    assert neighbourhoods[1].indices == [0, 2, 4]
    assert neighbourhoods[3].indices == []
    assert neighbourhoods[3].population() == 0
    assert neighbourhoods[4].population() == 3
    assert [(d.x, d.y) for d in neighbourhoods[0].displacements] == pytest.approx([(-1.0, 0.0), (-1.5, 0.0)])
    assert neighbourhoods[1].distances == pytest.approx([1.0, 1.0, 0.5])
    assert [agent.index for agent in neighbourhoods[1].neighbours()] == [0, 2, 4]


def test_neighbourhood_is_recomputed_each_tick():
    scenario = _scenario(2, toroidal=False, seed=None, radius=2.0)
    _place(scenario, [(0.0, 0.0), (1.0, 0.0)])
    scenario.cache_warmup()
    assert scenario.state.agents[0].neighbourhood.population() == 1

    _place(scenario, [(0.0, 0.0), (10.0, 0.0)])
    scenario.cache_warmup()
    assert scenario.state.agents[0].neighbourhood.population() == 0


def test_unbound_neighbourhood_reports_missing_state():
    neighbourhood = Neighbourhood(owner_index=0, radius=1.0)

    with pytest.raises(RuntimeError):
        neighbourhood.calculate_displacements()


def test_neighbourhood_buffers_are_sized_to_the_population():
    scenario = _scenario(4, toroidal=False, seed=None, radius=100.0)
    _place(scenario, [(0.0, 0.0), (1.0, 0.0), (2.0, 0.0), (3.0, 0.0)])

    scenario.cache_warmup()
    neighbourhood = scenario.state.agents[2].neighbourhood

    assert neighbourhood.indices == [0, 1, 3]
    assert neighbourhood.population() == 3
    assert len(neighbourhood.displacements) == len(neighbourhood.distances) == 3


def test_state_is_released_without_the_cycle_collector():
    scenario = _scenario(3)
    state_ref = weakref.ref(scenario.state)
    agents = scenario.state.agents

    gc.disable()
    try:
        del scenario
        assert state_ref() is None
    finally:
        gc.enable()
    with pytest.raises(ReferenceError):
        agents[0].neighbourhood.calculate_displacements()


def test_agents_use_slots():
    agent = _scenario(1).state.agents[0]

    assert isinstance(agent, Agent)
    assert not hasattr(agent, "__dict__")
