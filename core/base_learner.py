"""
Shared run bookkeeping for the learners: progress output, the minimization
guard and the conversion of a run into a LearningResult.
"""

import time
from typing import Any, Callable, Dict, List, Optional

from .config import LearnerConfig
from .hypothesis import Hypothesis, find_counterexample, verify
from .minimization import minimize
from .results import IssueKind, LearningIssue, LearningResult, LearningStatus
from .words import ExampleStore, Word


class Learner:
    """Base class for learners working on an example store."""

    name = "Learner"

    def __init__(self, store: ExampleStore, config: Optional[LearnerConfig] = None,
                 minimizer: Callable[[Hypothesis], Hypothesis] = minimize):
        """
        Args:
            store: Labeled examples (or an oracle-backed store)
            config: Learner configuration
            minimizer: Minimization service applied to the final hypothesis
        """
        self.store = store
        self.config = config or LearnerConfig()
        self.minimizer = minimizer

        self.start_time = None
        self.issues: List[LearningIssue] = []
        self.counterexamples: List[Word] = []
        self.rounds = 0
        self.dimension_before_minimization = None
        self.final_hypothesis: Optional[Hypothesis] = None

    def _log(self, message: str):
        if self.config.verbose:
            print(message)

    def _report(self, issue: LearningIssue):
        self.issues.append(issue)
        self._log(f"  {issue}")

    def _minimize(self, hypothesis: Hypothesis) -> Hypothesis:
        """
        Minimize the hypothesis, keeping the original when the minimized one
        misclassifies any known example or is not smaller.
        """
        self.dimension_before_minimization = hypothesis.dimension
        if not self.config.minimize:
            return hypothesis
        if find_counterexample(hypothesis, self.store) is not None:
            self._log("  Hypothesis already misclassifies examples, skipping minimization")
            return hypothesis

        minimized = self.minimizer(hypothesis)
        report = verify(minimized, self.store)
        if not report.is_consistent:
            self._report(LearningIssue(
                IssueKind.MINIMIZATION_REGRESSION,
                "Minimization introduced errors, keeping original",
                report.misclassified))
            return hypothesis
        if minimized.dimension < hypothesis.dimension:
            self._log(f"  Minimized: dimension {hypothesis.dimension} -> {minimized.dimension}")
            return minimized
        return hypothesis

    def _result(self, hypothesis: Optional[Hypothesis], consistent: bool) -> LearningResult:
        if hypothesis is None:
            status = LearningStatus.FAILED
        elif consistent:
            status = LearningStatus.SUCCESS
        else:
            status = LearningStatus.PARTIAL
        self.final_hypothesis = hypothesis
        return LearningResult(status=status, hypothesis=hypothesis,
                              issues=list(self.issues), statistics=self.get_statistics())

    def get_statistics(self) -> Dict[str, Any]:
        """
        Return learning statistics.

        Returns:
            Dictionary with performance metrics
        """
        hypothesis = self.final_hypothesis
        return {
            "learner": self.name,
            "rounds": self.rounds,
            "total_time": time.time() - self.start_time if self.start_time else 0.0,
            "dimension": hypothesis.dimension if hypothesis is not None else 0,
            "dimension_before_minimization": self.dimension_before_minimization,
            "counterexamples": len(self.counterexamples),
            "counterexample_lengths": [len(w) for w in self.counterexamples],
            "examples": len(self.store),
            "derived_labels": len(self.store.derived),
        }

    def print_summary(self):
        """Print learning summary."""
        stats = self.get_statistics()

        print("\n" + "="*50)
        print(f"{self.name} Summary")
        print("="*50)

        print(f"Rounds: {stats['rounds']}")
        print(f"Total time: {stats['total_time']:.2f}s")
        print(f"Final dimension: {stats['dimension']}")
        if stats['dimension_before_minimization'] is not None:
            print(f"Dimension before minimization: {stats['dimension_before_minimization']}")
        print(f"Counterexamples: {stats['counterexamples']}")
        print(f"Examples: {stats['examples']} (derived labels: {stats['derived_labels']})")

        if self.issues:
            print(f"\nIssues:")
            for issue in self.issues:
                print(f"  {issue}")

        print("="*50)
