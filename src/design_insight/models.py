"""Structural-counts record supplied per module by the module scanner."""

from dataclasses import dataclass, field
from typing import List


@dataclass
class ModuleStructure:
    """Pre-built structural facts for one module.

    Type counts and dependency lists come from the caller; the analyzers
    copy them into their metrics without recomputing or validating them.
    """

    name: str
    path: str
    public_type_count: int = 0
    private_type_count: int = 0
    external_deps: List[str] = field(default_factory=list)
    internal_deps: List[str] = field(default_factory=list)

    @property
    def dependency_count(self) -> int:
        return len(self.external_deps) + len(self.internal_deps)
