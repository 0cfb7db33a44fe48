from __future__ import annotations

from enum import IntEnum
from typing import Callable, Dict, Iterator, Mapping, Tuple


class Field(IntEnum):
    """Label of one of the forces present in the simulation physics."""

    SEPARATION = 0
    COHESION = 1
    ALIGNMENT = 2

    @classmethod
    def parse(cls, name: str | "Field") -> "Field":
        if isinstance(name, Field):
            return name
        try:
            return cls[str(name).strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown field: {name}") from None

    def basis_charges(self, charge: float) -> "Charges":
        return Charges.basis(self, charge)


FIELD_COUNT = len(Field)

Transform = Callable[[Field, float], float]


class Charges:
    """Charge per field, always populated for every ``Field``.

    Used both for how strongly a body feels each force (sensitivity) and for
    how strongly it exerts it (influence).
    """

    __slots__ = ("_values", "_readonly")

    def __init__(self, values: Mapping[Field | str, float] | None = None) -> None:
        self._values = [0.0] * FIELD_COUNT
        self._readonly = False
        if values:
            for field, charge in values.items():
                self._values[Field.parse(field)] = float(charge)

    @classmethod
    def basis(cls, field: Field, charge: float) -> "Charges":
        return cls({field: charge})

    @classmethod
    def uniform(cls, charge: float) -> "Charges":
        return cls({field: charge for field in Field})

    def __getitem__(self, field: Field | str) -> float:
        return self._values[Field.parse(field)]

    def __setitem__(self, field: Field | str, charge: float) -> None:
        self._ensure_writable()
        self._values[Field.parse(field)] = float(charge)

    def _ensure_writable(self) -> None:
        if self._readonly:
            raise TypeError("read-only charges do not support assignment")

    def __iter__(self) -> Iterator[Field]:
        return iter(Field)

    def __len__(self) -> int:
        return FIELD_COUNT

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Charges):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        inner = ", ".join(f"{field.name.lower()}={charge!r}" for field, charge in self.items())
        return f"Charges({inner})"

    def items(self) -> Iterator[Tuple[Field, float]]:
        for field in Field:
            yield field, self._values[field]

    def as_dict(self) -> Dict[str, float]:
        return {field.name.lower(): charge for field, charge in self.items()}

    def copy(self) -> "Charges":
        clone = Charges()
        clone._values = list(self._values)
        return clone

    def readonly(self) -> "Charges":
        """Copy of these charges that rejects every later mutation."""
        clone = self.copy()
        clone._readonly = True
        return clone

    def apply(self, transform: Transform) -> "Charges":
        """Replace every charge in place with ``transform(field, charge)``."""
        self._ensure_writable()
        for field in Field:
            self._values[field] = float(transform(field, self._values[field]))
        return self

    def add(self) -> Transform:
        """Transform that adds these charges to whichever ``Charges`` applies it.

            a, b = Field.ALIGNMENT.basis_charges(1), Field.COHESION.basis_charges(1)
            b.apply(a.add())  # Charges(separation=0.0, cohesion=1.0, alignment=1.0)
        """
        values = list(self._values)

        def _add(field: Field, charge: float) -> float:
            return charge + values[field]

        return _add
