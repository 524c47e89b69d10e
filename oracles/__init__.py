"""Membership and equivalence oracles for active learning."""

from .base_oracle import EquivalenceOracle, FunctionOracle, MembershipOracle
from .example_oracle import ExampleSetOracle
from .dfa_oracle import DFAEquivalenceOracle, DFAOracle
from .pac_oracle import PACEquivalenceOracle

__all__ = [
    'MembershipOracle',
    'FunctionOracle',
    'EquivalenceOracle',
    'ExampleSetOracle',
    'DFAOracle',
    'DFAEquivalenceOracle',
    'PACEquivalenceOracle'
]
