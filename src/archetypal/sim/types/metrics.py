from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class TickMetrics:
    tick: int
    time: float
    population: int
    neighbour_checks: int
    average_neighbours: float
    average_speed: float
    max_speed: float
    tick_duration_ms: float = 0.0
