from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .metrics import TickMetrics


@dataclass(slots=True, frozen=True)
class Coords:
    x: float
    y: float


Frame = List[Coords]


@dataclass(slots=True)
class SnapshotWorld:
    width: float
    height: float
    toroidal: bool


@dataclass(slots=True)
class Snapshot:
    tick: int
    time: float
    frame: Frame
    world: SnapshotWorld
    metrics: Optional[TickMetrics]
