"""
Exact learning of GF(2) multiplicity automata from an observation table.

The run alternates between closing the table, constructing a hypothesis and
checking it, either against every known example or against an equivalence
oracle. A counterexample adds its prefixes as rows and its suffixes as
columns, which forces a new independent row whenever the needed labels are
available.
"""

import time
from typing import Callable, Optional, Tuple

from .base_learner import Learner
from .config import LearnerConfig
from .heuristic_learner import HeuristicLearner
from .hypothesis import Hypothesis, find_counterexample
from .minimization import minimize
from .observation_table import ObservationTable
from .results import (IssueKind, LearningError, LearningIssue, LearningResult,
                      NotConverged)
from .words import ExampleStore, OracleStore, Word, format_word


class ExactLearner(Learner):
    """Observation-table learner that only uses known labels."""

    name = "Exact M2MA Learner"

    def __init__(self, store: ExampleStore, config: Optional[LearnerConfig] = None,
                 equivalence_oracle=None,
                 minimizer: Callable[[Hypothesis], Hypothesis] = minimize):
        """
        Initialize the learner.

        Args:
            store: Labeled examples, or an OracleStore for active learning
            config: Learner configuration
            equivalence_oracle: Optional oracle replacing the example check
            minimizer: Minimization service
        """
        super().__init__(store, config, minimizer)
        self.equivalence_oracle = equivalence_oracle
        self.table = ObservationTable(store, self.config)

    def run(self) -> LearningResult:
        """
        Execute the learning loop.

        Returns:
            LearningResult; FAILED with the missing words when the examples
            cannot close the table
        """
        self.start_time = time.time()
        self.table.extract()
        self.table.build()
        self.table.find_basis()
        self._log(f"Table seeded: {len(self.table.prefixes)} prefixes x "
                  f"{len(self.table.suffixes)} suffixes "
                  f"(full coverage up to length {self.table.coverage_length})")

        hypothesis = None
        try:
            while True:
                self.rounds += 1
                passes = self.table.make_closed()
                hypothesis = self.table.construct_hypothesis()
                self._log(f"Round {self.rounds}: hypothesis of dimension {hypothesis.dimension} "
                          f"({passes} closure passes)")

                counterexample = self._find_counterexample(hypothesis)
                if counterexample is None:
                    break

                self.counterexamples.append(counterexample)
                self._log(f"  Counterexample: '{format_word(counterexample)}' "
                          f"(length {len(counterexample)})")
                if self.rounds >= self.config.max_rounds:
                    raise NotConverged(
                        f"Hypothesis still wrong after {self.rounds} rounds",
                        [counterexample], count=self.rounds)
                if not self.table.add_counterexample(counterexample):
                    self._report(LearningIssue(
                        IssueKind.UNRESOLVED_COUNTEREXAMPLE,
                        "Counterexample adds no new rows or columns",
                        [counterexample]))
                    return self._result(hypothesis, consistent=False)

        except LearningError as e:
            self._report(e.issue)
            return self._result(hypothesis, consistent=False)

        hypothesis = self._minimize(hypothesis)
        self._log(f"Learned hypothesis of dimension {hypothesis.dimension} "
                  f"in {self.rounds} rounds")
        return self._result(hypothesis, consistent=True)

    def _find_counterexample(self, hypothesis: Hypothesis) -> Optional[Word]:
        if self.equivalence_oracle is not None:
            counterexample = self.equivalence_oracle.find_counterexample(
                hypothesis, iteration=self.rounds)
            return tuple(counterexample) if counterexample is not None else None
        return find_counterexample(hypothesis, self.store)

    def get_statistics(self):
        stats = super().get_statistics()
        stats["table_stats"] = self.table.get_statistics()
        if isinstance(self.store, OracleStore):
            stats["membership_queries"] = self.store.query_count
        return stats


def learn_from_examples(store: ExampleStore, config: Optional[LearnerConfig] = None,
                        heuristic: bool = False) -> LearningResult:
    """
    Learn a hypothesis from labeled examples.

    Args:
        store: Labeled examples
        config: Learner configuration; closed_world reads unlabeled words
            as negative for this run, heuristic_fallback retries with the
            heuristic learner when the examples cannot close the table
        heuristic: Use the heuristic learner directly

    Returns:
        LearningResult of the run that produced the answer
    """
    config = config or LearnerConfig()
    store = store.view(closed_world=True if config.closed_world else None)
    if heuristic:
        return HeuristicLearner(store, config).run()

    result = ExactLearner(store, config).run()
    if config.heuristic_fallback and result.has_issue(IssueKind.INSUFFICIENT_INFORMATION):
        if config.verbose:
            print(f"Exact learning needs {len(result.missing_words)} more labels, "
                  f"falling back to the heuristic learner")
        fallback = HeuristicLearner(store, config).run()
        fallback.issues = result.issues + fallback.issues
        fallback.statistics["exact_status"] = result.status.value
        return fallback
    return result


def learn_with_oracles(membership_oracle, equivalence_oracle,
                       config: Optional[LearnerConfig] = None) -> Tuple[LearningResult, OracleStore]:
    """
    Active learning: every table cell is answered by the membership oracle.

    Args:
        membership_oracle: MembershipOracle answering table cells
        equivalence_oracle: EquivalenceOracle checking hypotheses
        config: Learner configuration

    Returns:
        (LearningResult, OracleStore holding every queried word)
    """
    config = config or LearnerConfig()
    coverage = config.coverage_length if config.coverage_length is not None else 1
    store = OracleStore(membership_oracle, coverage_length=coverage)
    learner = ExactLearner(store, config, equivalence_oracle=equivalence_oracle)
    return learner.run(), store
