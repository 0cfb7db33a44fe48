from __future__ import annotations

from typing import TYPE_CHECKING

from ..types.metrics import TickMetrics

if TYPE_CHECKING:
    from ..core.state import State


def create_metrics(tick: int, time: float, state: "State", duration_ms: float) -> TickMetrics:
    population = state.population()
    neighbour_checks = 0
    speed_sum = 0.0
    max_speed = 0.0
    for agent in state.agents:
        neighbour_checks += agent.neighbourhood.population()
        speed = agent.speed()
        speed_sum += speed
        if speed > max_speed:
            max_speed = speed
    return TickMetrics(
        tick=tick,
        time=time,
        population=population,
        neighbour_checks=neighbour_checks,
        average_neighbours=neighbour_checks / population,
        average_speed=speed_sum / population,
        max_speed=max_speed,
        tick_duration_ms=duration_ms,
    )
