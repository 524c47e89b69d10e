"""
Configuration for the learners.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional


class SolverMethod(Enum):
    """How transition rows are solved from the base matrix."""
    GF2 = "gf2"                        # exact elimination over GF(2)
    REAL_EMBEDDING = "real_embedding"  # real solve, round, mod 2


@dataclass
class LearnerConfig:
    """Parameters shared by the exact and heuristic learners."""

    # Example interpretation
    closed_world: bool = False
    coverage_length: Optional[int] = None  # overrides the computed full-coverage length

    # Iteration caps
    max_iterations: int = 100  # closure fixpoint passes per round
    max_rounds: int = 25       # counterexample-driven rounds

    # Heuristic table selection
    min_column_fraction: float = 1 / 3
    min_column_count: int = 5
    expansion_fraction: float = 0.5
    expansion_count: int = 2

    # Exhaustive search over unknown entries
    max_search_unknowns: int = 20

    solver: SolverMethod = SolverMethod.GF2
    minimize: bool = True
    heuristic_fallback: bool = False
    verbose: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for serialization."""
        result = asdict(self)
        result['solver'] = self.solver.value
        return result
