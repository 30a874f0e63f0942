"""Connascence models based on Meilir Page-Jones' taxonomy.

Connascence describes how much two components must change together to
stay correct. Only the static forms are detectable from source, ordered
weakest to strongest:

    1. Name      - agreement on the name of something
    2. Type      - agreement on the type of something
    3. Meaning   - agreement on the meaning of particular values
    4. Position  - agreement on the order of elements
    5. Algorithm - agreement on a particular algorithm
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ConnascenceType(Enum):
    """Static connascence forms, in order of increasing strength."""

    NAME = "Name"
    TYPE = "Type"
    MEANING = "Meaning"
    POSITION = "Position"
    ALGORITHM = "Algorithm"

    def __str__(self) -> str:
        return self.value

    def strength(self) -> float:
        """Coupling strength in [0, 1]; higher = stronger coupling."""
        return _STRENGTH[self]

    def description(self) -> str:
        return _DESCRIPTION[self]

    def refactoring_suggestion(self) -> str:
        return _SUGGESTION[self]


_STRENGTH: dict[ConnascenceType, float] = {
    ConnascenceType.NAME: 0.2,
    ConnascenceType.TYPE: 0.4,
    ConnascenceType.MEANING: 0.6,
    ConnascenceType.POSITION: 0.7,
    ConnascenceType.ALGORITHM: 0.9,
}

_DESCRIPTION: dict[ConnascenceType, str] = {
    ConnascenceType.NAME: "Agreement on names (renaming affects both)",
    ConnascenceType.TYPE: "Agreement on types (type changes affect both)",
    ConnascenceType.MEANING: "Agreement on semantic values (magic values)",
    ConnascenceType.POSITION: "Agreement on ordering (positional coupling)",
    ConnascenceType.ALGORITHM: "Agreement on algorithm (algorithm changes affect both)",
}

_SUGGESTION: dict[ConnascenceType, str] = {
    ConnascenceType.NAME: "Use IDE rename refactoring to change safely",
    ConnascenceType.TYPE: "Consider using traits/generics to reduce type coupling",
    ConnascenceType.MEANING: "Replace magic values with named constants or enums",
    ConnascenceType.POSITION: "Use named parameters or builder pattern",
    ConnascenceType.ALGORITHM: "Extract algorithm into shared module with clear contract",
}


@dataclass
class ConnascenceInstance:
    """One detected connascence between a module and a target."""

    connascence_type: ConnascenceType
    source: str  # module the coupling was recorded in
    target: str  # name, type, function or location coupled to
    context: str
    line: Optional[int] = None


@dataclass
class ConnascenceStats:
    """Running counts and weighted strength of recorded connascence."""

    by_type: dict[ConnascenceType, int] = field(default_factory=dict)
    total: int = 0
    weighted_strength: float = 0.0

    def add(self, connascence_type: ConnascenceType) -> None:
        self.by_type[connascence_type] = self.by_type.get(connascence_type, 0) + 1
        self.total += 1
        self.weighted_strength += connascence_type.strength()

    def average_strength(self) -> float:
        if self.total == 0:
            return 0.0
        return self.weighted_strength / self.total

    def count(self, connascence_type: ConnascenceType) -> int:
        return self.by_type.get(connascence_type, 0)

    def percentage(self, connascence_type: ConnascenceType) -> float:
        if self.total == 0:
            return 0.0
        return self.count(connascence_type) / self.total * 100.0
