"""
Configuration presets for the learners compared in the benchmarks.

Each preset names how a hypothesis is obtained for a grammar: exact or
heuristic learning from an exhaustive example set, or active learning with
a PAC equivalence oracle.
"""

from dataclasses import dataclass
from typing import Dict, Any, Optional, List
from enum import Enum

from core.config import LearnerConfig, SolverMethod


class LearnerType(Enum):
    """Available learning modes for benchmarking."""
    EXACT = "exact"
    HEURISTIC = "heuristic"
    FALLBACK = "fallback"
    ACTIVE_PAC = "active_pac"


@dataclass
class BenchmarkConfig:
    """Configuration for one benchmarked learning mode."""

    learner_type: LearnerType

    # Training data
    train_max_length: int = 8       # every word up to this length is labeled
    closed_world: bool = False

    # Learner parameters
    coverage_length: Optional[int] = None
    max_rounds: int = 25
    max_search_unknowns: int = 12   # keeps the exhaustive search short in batch runs
    solver: SolverMethod = SolverMethod.GF2
    minimize: bool = True

    # PAC oracle parameters (active learning only)
    epsilon: float = 0.01   # Error tolerance
    delta: float = 0.01     # Confidence parameter
    max_length: int = 15    # Maximum word length for sampling
    distribution: str = 'uniform'

    def to_learner_config(self) -> LearnerConfig:
        """Learner configuration for this preset."""
        return LearnerConfig(
            closed_world=self.closed_world,
            coverage_length=self.coverage_length,
            max_rounds=self.max_rounds,
            max_search_unknowns=self.max_search_unknowns,
            solver=self.solver,
            minimize=self.minimize,
            heuristic_fallback=self.learner_type == LearnerType.FALLBACK,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for serialization."""
        result = {
            'learner_type': self.learner_type.value,
            'solver': self.solver.value,
            'minimize': self.minimize,
            'max_rounds': self.max_rounds,
        }

        if self.learner_type == LearnerType.ACTIVE_PAC:
            result.update({
                'epsilon': self.epsilon,
                'delta': self.delta,
                'max_length': self.max_length,
                'distribution': self.distribution,
            })
        else:
            result.update({
                'train_max_length': self.train_max_length,
                'closed_world': self.closed_world,
                'coverage_length': self.coverage_length,
                'max_search_unknowns': self.max_search_unknowns,
            })
        return result


def get_default_configs() -> Dict[str, BenchmarkConfig]:
    """Get default configurations for each learning mode."""
    return {
        "exact": BenchmarkConfig(
            learner_type=LearnerType.EXACT,
            train_max_length=8,
            coverage_length=4,  # rows up to length 4 stay fully labeled
        ),
        "heuristic": BenchmarkConfig(
            learner_type=LearnerType.HEURISTIC,
            train_max_length=6,
        ),
        "fallback": BenchmarkConfig(
            learner_type=LearnerType.FALLBACK,
            train_max_length=6,
        ),
        "active_pac": BenchmarkConfig(
            learner_type=LearnerType.ACTIVE_PAC,
            epsilon=0.01,
            delta=0.01,
            distribution='uniform',
            max_length=15,
        ),
    }


def get_solver_configs(train_max_length: int = 6) -> Dict[str, BenchmarkConfig]:
    """Heuristic learning with each transition solver."""
    return {
        f"heuristic_{solver.value}": BenchmarkConfig(
            learner_type=LearnerType.HEURISTIC,
            train_max_length=train_max_length,
            solver=solver,
        )
        for solver in SolverMethod
    }


def select_configs(names: Optional[List[str]]) -> Dict[str, BenchmarkConfig]:
    """Filter the default and solver presets by name (all defaults when None)."""
    available = {**get_default_configs(), **get_solver_configs()}
    if names is None:
        return get_default_configs()
    configs = {}
    for name in names:
        if name in available:
            configs[name] = available[name]
        else:
            print(f"Warning: Unknown learner configuration '{name}', skipping")
    return configs
