from __future__ import annotations


class SimulationError(Exception):
    """Base class for every error raised by the simulation core."""


class InvalidCircumferenceError(SimulationError, ValueError):
    def __init__(self, circumference: float) -> None:
        super().__init__(f"circumference must be strictly positive, got {circumference!r}")
        self.circumference = circumference


class InvalidPopulationError(SimulationError, ValueError):
    def __init__(self, population: int) -> None:
        super().__init__(f"population must be at least 1, got {population!r}")
        self.population = population


class InvalidTimeStepError(SimulationError, ValueError):
    def __init__(self, time_step: object) -> None:
        super().__init__(f"time step must be strictly positive, got {time_step!r}")
        self.time_step = time_step


class SpaceMismatchError(SimulationError, TypeError):
    """Raised when two vectors from different metric spaces are combined."""


class IncompleteChargesError(SimulationError, KeyError):
    def __init__(self, field: object) -> None:
        super().__init__(f"no force bound for field {field!r}")
        self.field = field
