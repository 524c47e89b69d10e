"""
Benchmarking framework for comparing the learners on the Tomita grammars,
and the active-to-passive experiment on DFA targets.
"""

from .benchmark_runner import BenchmarkRunner
from .metrics import LearningMetrics, BenchmarkResults
from .learner_configs import BenchmarkConfig, LearnerType, get_default_configs
from .experiment import ExperimentReport, run_dfa_experiment

__all__ = [
    "BenchmarkRunner",
    "LearningMetrics",
    "BenchmarkResults",
    "BenchmarkConfig",
    "LearnerType",
    "get_default_configs",
    "ExperimentReport",
    "run_dfa_experiment"
]
