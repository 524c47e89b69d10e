"""Core components for learning GF(2) multiplicity automata."""

from .words import EMPTY, UNKNOWN, ExampleStore, OracleStore, format_word, parse_word
from .config import LearnerConfig, SolverMethod
from .results import IssueKind, LearningIssue, LearningResult, LearningStatus
from .hypothesis import Hypothesis, equivalent, find_distinguishing_word, verify
from .minimization import minimize
from .observation_table import ObservationTable
from .learner import ExactLearner, learn_from_examples, learn_with_oracles
from .heuristic_learner import HeuristicLearner
from .dfa import DFA, load_dfa

__all__ = [
    "EMPTY", "UNKNOWN", "ExampleStore", "OracleStore", "format_word", "parse_word",
    "LearnerConfig", "SolverMethod",
    "IssueKind", "LearningIssue", "LearningResult", "LearningStatus",
    "Hypothesis", "equivalent", "find_distinguishing_word", "verify",
    "minimize", "ObservationTable",
    "ExactLearner", "HeuristicLearner", "learn_from_examples", "learn_with_oracles",
    "DFA", "load_dfa",
]
