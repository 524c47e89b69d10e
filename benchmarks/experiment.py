"""
Active-to-passive learning experiment on a target DFA.

Phase 1 learns the DFA's language actively, answering every membership
query from the DFA and recording it. Phase 2 learns again, this time only
from the recorded queries used as a fixed example set (optionally shuffled
and extended with redundant examples). Both hypotheses are then checked
against the DFA for exact equivalence.
"""

from dataclasses import dataclass, field, asdict, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from core.config import LearnerConfig
from core.dfa import DFA
from core.hypothesis import find_distinguishing_word, verify
from core.heuristic_learner import HeuristicLearner
from core.learner import ExactLearner, learn_with_oracles
from core.results import IssueKind
from core.sample_io import add_redundant_examples, load_examples, save_examples, shuffle_samples
from core.words import format_word
from oracles import DFAEquivalenceOracle, DFAOracle, ExampleSetOracle, PACEquivalenceOracle


@dataclass
class ExperimentReport:
    """Outcome of both learning phases."""

    dfa_states: int = 0
    minimal_dfa_states: int = 0

    # Phase 1: active learning
    phase1_status: str = "failed"
    phase1_dimension: int = 0
    phase1_equivalent: bool = False
    queries_collected: int = 0

    # Phase 2: learning from the collected queries
    examples_used: int = 0
    variations_applied: bool = False
    phase2_status: str = "failed"
    phase2_learner: str = ""
    phase2_dimension: int = 0
    phase2_query_accuracy: float = 0.0
    phase2_equivalent: bool = False
    distinguishing_word: Optional[str] = None

    files: Dict[str, str] = field(default_factory=dict)

    @property
    def dimensions_match(self) -> bool:
        return self.phase1_dimension == self.phase2_dimension

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result['dimensions_match'] = self.dimensions_match
        return result


def run_dfa_experiment(dfa: DFA,
                       output_dir: Union[str, Path] = "experiment_results",
                       name: str = "dfa",
                       config: Optional[LearnerConfig] = None,
                       exact_equivalence: bool = True,
                       max_test_length: int = 25,
                       num_tests: int = 1000,
                       apply_variations: bool = False,
                       num_additional: int = 50,
                       min_length: int = 3,
                       max_length: int = 8,
                       seed: Optional[int] = None) -> ExperimentReport:
    """
    Run both phases of the experiment.

    Args:
        dfa: Target automaton
        output_dir: Directory for the collected query files
        name: Prefix of the written files
        config: Learner configuration for both phases
        exact_equivalence: Check phase 1 hypotheses exactly against the DFA;
            otherwise test num_tests random words up to max_test_length
        max_test_length: Longest random test word
        num_tests: Random test words per equivalence query
        apply_variations: Shuffle the queries and add redundant examples
        num_additional: Redundant examples to add
        min_length: Shortest redundant example
        max_length: Longest redundant example
        seed: Random seed for testing and variations

    Returns:
        ExperimentReport
    """
    config = config or LearnerConfig()
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    report = ExperimentReport(dfa_states=len(dfa), minimal_dfa_states=len(dfa.minimize()))
    target = dfa.to_hypothesis()

    print("=" * 60)
    print("PHASE 1: Active learning from the DFA")
    print("=" * 60)
    print(f"  {dfa}")
    if dfa.missing_transitions():
        print(f"  WARNING: DFA has {dfa.missing_transitions()} missing transitions "
              f"(words with undefined transitions will be rejected)")

    membership_oracle = DFAOracle(dfa)
    if exact_equivalence:
        equivalence_oracle = DFAEquivalenceOracle(dfa, membership_oracle)
    else:
        equivalence_oracle = PACEquivalenceOracle(
            membership_oracle, max_length=max_test_length, distribution="uniform",
            sample_size=num_tests, seed=seed)
    phase1, _ = learn_with_oracles(membership_oracle, equivalence_oracle, config)

    report.phase1_status = phase1.status.value
    report.queries_collected = len(membership_oracle.query_log)
    if phase1.hypothesis is not None:
        report.phase1_dimension = phase1.hypothesis.dimension
        report.phase1_equivalent = find_distinguishing_word(phase1.hypothesis, target) is None

    print(f"\nPhase 1 Results:")
    print(f"  Status: {report.phase1_status}")
    print(f"  Learned dimension: {report.phase1_dimension}")
    print(f"  Queries collected: {report.queries_collected}")

    queries_file = output_dir / f"{name}_queries.json"
    save_examples(membership_oracle.to_example_store(), queries_file,
                  metadata={"source": "membership queries", "dfa_states": len(dfa)})
    report.files['queries'] = str(queries_file)
    phase2_file = queries_file

    if apply_variations:
        print("\nAPPLYING EXPERIMENT VARIATIONS")
        shuffled_file = output_dir / f"{name}_queries_shuffled.json"
        shuffle_samples(phase2_file, shuffled_file, seed=seed)
        store = load_examples(shuffled_file)
        add_redundant_examples(store, dfa, num_additional, min_length, max_length, seed=seed)
        redundant_file = output_dir / f"{name}_queries_shuffled_redundant.json"
        save_examples(store, redundant_file)
        report.files['shuffled'] = str(shuffled_file)
        report.files['redundant'] = str(redundant_file)
        report.variations_applied = True
        phase2_file = redundant_file

    print("\n" + "=" * 60)
    print("PHASE 2: Learning from the collected examples")
    print("=" * 60)
    store = load_examples(phase2_file)
    report.examples_used = len(store)
    print(f"  Positive examples: {len(store.positive)}")
    print(f"  Negative examples: {len(store.negative)}")

    # The collected queries cover exactly the table phase 1 built from this length
    coverage = config.coverage_length if config.coverage_length is not None else 1
    phase2_config = replace(config, coverage_length=coverage)
    learner = ExactLearner(store, phase2_config, equivalence_oracle=ExampleSetOracle(store))
    phase2 = learner.run()
    if phase2.has_issue(IssueKind.INSUFFICIENT_INFORMATION):
        print(f"  Exact learning needs {len(phase2.missing_words)} more labels, "
              f"falling back to the heuristic learner")
        learner = HeuristicLearner(store, phase2_config)
        phase2 = learner.run()
    report.phase2_status = phase2.status.value
    report.phase2_learner = learner.name

    if phase2.hypothesis is not None:
        report.phase2_dimension = phase2.hypothesis.dimension
        report.phase2_query_accuracy = verify(phase2.hypothesis, store).accuracy
        word = find_distinguishing_word(phase2.hypothesis, target)
        report.phase2_equivalent = word is None
        if word is not None:
            report.distinguishing_word = format_word(word)

    print("\n" + "=" * 60)
    print("COMPARISON")
    print("=" * 60)
    print(f"Phase 1: dimension {report.phase1_dimension}, equivalent to DFA: {report.phase1_equivalent}")
    print(f"Phase 2: dimension {report.phase2_dimension} ({report.phase2_learner}), "
          f"equivalent to DFA: {report.phase2_equivalent}")
    if report.dimensions_match:
        print(f"  ✓ Dimensions match: {report.phase1_dimension}")
    else:
        print(f"  ✗ Dimensions differ: {report.phase1_dimension} vs {report.phase2_dimension}")
    if report.distinguishing_word is not None:
        print(f"  Distinguishing word: '{report.distinguishing_word}'")
    print(f"  Accuracy on collected examples: {report.phase2_query_accuracy:.2%}")

    return report
