from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import timedelta
from pathlib import Path
from typing import Dict

import yaml

from ..systems.archetype import Archetype
from ..systems.charges import Charges, Field


def _uniform_charges(charge: float = 1.0) -> Dict[str, float]:
    return {item.name.lower(): charge for item in Field}


@dataclass
class ArchetypeConfig:
    influence: Dict[str, float] = field(default_factory=_uniform_charges)
    sensitivity: Dict[str, float] = field(default_factory=_uniform_charges)

    @staticmethod
    def reciprocal(charges: Dict[str, float]) -> "ArchetypeConfig":
        return ArchetypeConfig(influence=dict(charges), sensitivity=dict(charges))

    def to_archetype(self) -> Archetype:
        return Archetype.define(Charges(self.influence), Charges(self.sensitivity))


@dataclass
class SimulationConfig:
    time_step: float = 1.0 / 60.0
    width: float = 800.0
    height: float = 400.0
    population: int = 100
    max_speed: float = 10.0
    neighbourhood_radius: float = 50.0
    toroidal: bool = True
    randomise: bool = True
    seed: int = 42
    archetype: ArchetypeConfig = field(default_factory=ArchetypeConfig)

    @property
    def time_step_delta(self) -> timedelta:
        return timedelta(seconds=self.time_step)

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        return load_config(data)


@dataclass
class AppConfig:
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    frame_digits: int = 2
    initial_frame_request: int = 60
    max_frame_request: int = 600


def load_config(raw: dict) -> SimulationConfig:
    known = {item.name for item in fields(SimulationConfig)}
    unknown = set(raw) - known
    if unknown:
        raise ValueError(f"Unknown simulation config keys: {', '.join(sorted(unknown))}")

    archetype_raw = raw.get("archetype", {}) or {}
    if not archetype_raw:
        archetype = ArchetypeConfig()
    elif "reciprocal" in archetype_raw:
        archetype = ArchetypeConfig.reciprocal(archetype_raw["reciprocal"])
    else:
        # fields left out of either mapping default to zero charge
        archetype = ArchetypeConfig(
            influence=dict(archetype_raw.get("influence", {})),
            sensitivity=dict(archetype_raw.get("sensitivity", {})),
        )
    for charges in (archetype.influence, archetype.sensitivity):
        for name in charges:
            Field.parse(name)

    sim_values = {k: v for k, v in raw.items() if k != "archetype"}
    return SimulationConfig(archetype=archetype, **sim_values)
