"""
PAC (Probably Approximately Correct) Equivalence Oracle

Implements statistical sampling-based equivalence checking:
- Draws random words according to a length distribution
- Provides probabilistic guarantees on finding counterexamples
- Black-box approach (only membership queries needed)
"""

import random
import time
import numpy as np
from typing import Optional, Dict, Any

from core.hypothesis import Hypothesis
from core.words import Word, format_word

from .base_oracle import EquivalenceOracle, MembershipOracle


class PACEquivalenceOracle(EquivalenceOracle):
    """
    PAC equivalence oracle using statistical sampling.

    Guarantees: With probability at least (1 - δ), if the hypothesis
    has error rate > ε, we will find a counterexample.
    """

    def __init__(self, membership_oracle: MembershipOracle,
                 epsilon: float = 0.1,
                 delta: float = 0.1,
                 max_length: int = 30,
                 distribution: str = "geometric",
                 sample_size: Optional[int] = None,
                 seed: Optional[int] = None,
                 verbose: bool = True):
        """
        Initialize PAC oracle.

        Args:
            membership_oracle: Oracle labeling sampled words
            epsilon: Error tolerance (default 0.1)
            delta: Confidence parameter (default 0.1)
            max_length: Maximum word length to test
            distribution: Length distribution ("uniform" or "geometric")
            sample_size: Fixed number of samples per query (overrides the PAC bound)
            seed: Random seed for reproducible sampling

        Raises:
            ValueError: Unknown distribution
        """
        super().__init__(membership_oracle.alphabet, membership_oracle)
        if distribution not in ("uniform", "geometric"):
            raise ValueError(f"Unknown distribution: {distribution}")
        self.epsilon = epsilon
        self.delta = delta
        self.max_length = max_length
        self.distribution = distribution
        self.fixed_sample_size = sample_size
        self.verbose = verbose

        self.random = random.Random(seed)
        self.np_random = np.random.default_rng(seed)

        # Track round number for proper PAC bounds
        self.round = 0

        # PAC-specific statistics
        self.total_samples = 0

    def sample_size(self) -> int:
        """
        Samples for the current round.

        m = (1/ε) * (ln(1/δ) + round * ln(2))
        """
        if self.fixed_sample_size is not None:
            return self.fixed_sample_size
        return int(np.ceil((1.0 / self.epsilon) * (np.log(1.0 / self.delta) + self.round * np.log(2))))

    def find_counterexample(self, hypothesis: Hypothesis, iteration: int,
                            time_limit: Optional[float] = None) -> Optional[Word]:
        """
        Find counterexample using PAC sampling.

        Args:
            hypothesis: Current hypothesis
            iteration: Learning round
            time_limit: Optional time limit

        Returns:
            Counterexample word or None
        """
        self.round += 1
        sample_size = self.sample_size()

        if self.verbose:
            print(f"\nPAC Equivalence Query (iteration {iteration})")
            print(f"  Round: {self.round}")
            print(f"  Sample size: {sample_size} (ε={self.epsilon}, δ={self.delta})")
            print(f"  Distribution: {self.distribution}")

        start_time = time.time()
        samples_checked = 0
        self.total_queries += 1

        for _ in range(sample_size):
            if time_limit and (time.time() - start_time) > time_limit:
                if self.verbose:
                    print(f"  Time limit reached after {samples_checked} samples")
                break

            word = self._sample_word()
            samples_checked += 1

            if hypothesis.evaluate(word) != self.membership_oracle.classify_word(word):
                self.counterexamples_found += 1
                self.total_time += time.time() - start_time
                self.total_samples += samples_checked
                if self.verbose:
                    print(f"  Counterexample found: '{format_word(word)}' (length {len(word)})")
                    print(f"  Samples checked: {samples_checked}")
                return word

        # No counterexample found
        self.total_samples += samples_checked
        self.total_time += time.time() - start_time
        if self.verbose:
            print(f"  No counterexample found in {samples_checked} samples")
        return None

    def _sample_word(self) -> Word:
        """Sample a word according to the chosen distribution."""
        if self.distribution == "uniform":
            # Uniform over lengths 0 to max_length
            length = self.random.randint(0, self.max_length)
        else:
            # Geometric distribution favoring shorter words
            # P(length = k) = (1-p)^k * p
            p = 0.2  # Higher p means shorter words on average
            length = min(int(self.np_random.geometric(p)) - 1, self.max_length)

        return tuple(self.random.choice(self.alphabet) for _ in range(length))

    def get_statistics(self) -> Dict[str, Any]:
        """Return oracle statistics."""
        stats = super().get_statistics()
        stats.update({
            'total_samples': self.total_samples,
            'current_round': self.round,
            'current_sample_size': self.sample_size(),
            'epsilon': self.epsilon,
            'delta': self.delta,
            'distribution': self.distribution,
            'avg_samples_per_counterexample': (
                self.total_samples / max(1, self.counterexamples_found)
            )
        })
        return stats
