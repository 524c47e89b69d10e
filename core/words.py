"""
Words, labels and the example store.

A word is a tuple of symbols. Its text form joins the symbols with single
spaces, so the empty string encodes the empty word. Labels are three-valued:
1 (positive), 0 (negative) and UNKNOWN for words no example covers.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple
from itertools import product
import copy

Word = Tuple[str, ...]

EMPTY: Word = ()
UNKNOWN = -1


def parse_word(text: str) -> Word:
    """Decode the space-separated text form of a word."""
    return tuple(text.split())


def format_word(word: Sequence[str]) -> str:
    """Encode a word as space-separated symbols ("" for the empty word)."""
    return " ".join(word)


def concat(prefix: Word, suffix: Word) -> Word:
    return prefix + suffix


def prefixes_of(word: Word) -> List[Word]:
    """All prefixes of word, shortest first, including the empty word and word itself."""
    return [word[:i] for i in range(len(word) + 1)]


def suffixes_of(word: Word) -> List[Word]:
    """All suffixes of word, longest first, including word itself and the empty word."""
    return [word[i:] for i in range(len(word) + 1)]


def all_words(alphabet: Sequence[str], max_length: int) -> List[Word]:
    """
    Enumerate every word of length <= max_length in canonical order.

    Args:
        alphabet: Ordered symbols
        max_length: Longest length to generate (negative gives no words)

    Returns:
        Words sorted by length, then by alphabet order
    """
    words = []
    for length in range(max_length + 1):
        words.extend(product(alphabet, repeat=length))
    return [tuple(w) for w in words]


def word_sort_key(alphabet: Sequence[str]):
    """
    Build a sort key for the canonical order: length first, then
    lexicographic by the symbol's position in the alphabet.
    """
    index = {symbol: i for i, symbol in enumerate(alphabet)}

    def key(word: Word):
        return (len(word), tuple(index.get(s, len(index)) for s in word), word)

    return key


class ExampleStore:
    """Labeled example words with three-valued lookup."""

    def __init__(self, alphabet: Sequence[str],
                 positive: Iterable[Word] = (),
                 negative: Iterable[Word] = (),
                 closed_world: bool = False):
        """
        Initialize the store.

        Args:
            alphabet: Ordered input alphabet
            positive: Words labeled 1
            negative: Words labeled 0
            closed_world: Treat every unlabeled word as negative

        Raises:
            ValueError: A word uses a symbol outside the alphabet or is
                labeled both positive and negative
        """
        self.alphabet = list(alphabet)
        if len(set(self.alphabet)) != len(self.alphabet):
            raise ValueError(f"Alphabet has repeated symbols: {self.alphabet}")
        self.closed_world = closed_world
        self._key = word_sort_key(self.alphabet)

        self.positive: Set[Word] = set()
        self.negative: Set[Word] = set()
        for word in positive:
            self.add_example(word, 1)
        for word in negative:
            self.add_example(word, 0)

        # Labels inferred by heuristics; never treated as ground truth
        self.derived: Dict[Word, int] = {}

    def add_example(self, word: Sequence[str], label: int):
        """Add a ground-truth example."""
        word = tuple(word)
        self._check_symbols(word)
        if label not in (0, 1):
            raise ValueError(f"Label must be 0 or 1, got {label!r}")
        if label == 1:
            if word in self.negative:
                raise ValueError(f"Word '{format_word(word)}' is labeled both positive and negative")
            self.positive.add(word)
        else:
            if word in self.positive:
                raise ValueError(f"Word '{format_word(word)}' is labeled both positive and negative")
            self.negative.add(word)

    def _check_symbols(self, word: Word):
        for symbol in word:
            if symbol not in self.alphabet:
                raise ValueError(f"Symbol '{symbol}' in '{format_word(word)}' is not in the alphabet")

    def lookup(self, word: Word, use_derived: bool = False) -> int:
        """
        Label of a word.

        Args:
            word: Word to look up
            use_derived: Also consult labels inferred by heuristics

        Returns:
            1, 0, or UNKNOWN (0 instead of UNKNOWN in closed-world mode)
        """
        if word in self.positive:
            return 1
        if word in self.negative:
            return 0
        if use_derived and word in self.derived:
            return self.derived[word]
        return 0 if self.closed_world else UNKNOWN

    def is_known(self, word: Word) -> bool:
        return word in self.positive or word in self.negative

    def add_derived(self, word: Word, label: int):
        """Record a label inferred for a word without ground truth."""
        if not self.is_known(word):
            self.derived[word] = label

    def is_derived(self, word: Word) -> bool:
        return word in self.derived and not self.is_known(word)

    def derived_labels(self) -> Dict[Word, int]:
        return dict(self.derived)

    def view(self, closed_world: Optional[bool] = None) -> 'ExampleStore':
        """
        Store for a single learning run.

        The view shares the ground-truth examples but has its own
        closed-world flag and starts without derived labels, so nothing a
        run changes leaks back into this store.

        Args:
            closed_world: Reading for the view (None keeps this store's)
        """
        run_store = copy.copy(self)
        if closed_world is not None:
            run_store.closed_world = closed_world
        run_store.derived = {}
        return run_store

    def sort_words(self, words: Iterable[Word]) -> List[Word]:
        """Sort words into canonical order."""
        return sorted(words, key=self._key)

    def positives(self) -> List[Word]:
        return self.sort_words(self.positive)

    def negatives(self) -> List[Word]:
        return self.sort_words(self.negative)

    def known_words(self) -> List[Word]:
        return self.sort_words(self.positive | self.negative)

    def labeled_examples(self) -> List[Tuple[Word, int]]:
        """All ground-truth examples as (word, label) in canonical order."""
        return [(w, self.lookup(w)) for w in self.known_words()]

    def prefixes(self) -> List[Word]:
        """Every prefix of every known word, in canonical order."""
        found = set()
        for word in self.positive | self.negative:
            found.update(prefixes_of(word))
        return self.sort_words(found)

    def suffixes(self, max_length: Optional[int] = None) -> List[Word]:
        """
        Every suffix of every known word, in canonical order.

        Args:
            max_length: Only keep suffixes at most this long
        """
        found = set()
        for word in self.positive | self.negative:
            for suffix in suffixes_of(word):
                if max_length is None or len(suffix) <= max_length:
                    found.add(suffix)
        return self.sort_words(found)

    def has_full_coverage(self, length: int) -> bool:
        """Check that every word of exactly this length is labeled."""
        count = sum(1 for w in self.positive | self.negative if len(w) == length)
        return count >= len(self.alphabet) ** length

    def max_full_coverage_length(self) -> int:
        """
        Largest L such that every word of length <= L has a ground-truth label.

        Returns:
            L, or -1 when even the empty word is unlabeled
        """
        known = self.positive | self.negative
        max_length = max((len(w) for w in known), default=0)
        for length in range(max_length + 1):
            if not self.has_full_coverage(length):
                return length - 1
        return max_length

    def __len__(self) -> int:
        return len(self.positive) + len(self.negative)

    def __contains__(self, word) -> bool:
        return self.is_known(tuple(word))

    def __str__(self) -> str:
        return (f"ExampleStore(|Σ|={len(self.alphabet)}, positive={len(self.positive)}, "
                f"negative={len(self.negative)}, closed_world={self.closed_world})")


class OracleStore(ExampleStore):
    """
    Example store backed by a membership oracle.

    Unlabeled words are answered by the oracle and recorded as examples, so
    the store doubles as a log of every word the learner needed.
    """

    def __init__(self, oracle, coverage_length: int = 1):
        """
        Args:
            oracle: MembershipOracle answering queries
            coverage_length: Length up to which the learner seeds its
                suffixes; every word is answerable, so this bounds the
                initial table rather than the data
        """
        super().__init__(oracle.alphabet)
        self.oracle = oracle
        self.coverage_length = coverage_length
        self.query_count = 0

    def lookup(self, word: Word, use_derived: bool = False) -> int:
        if not self.is_known(word):
            self._check_symbols(word)
            self.query_count += 1
            self.add_example(word, self.oracle.membership_query(word))
        return super().lookup(word, use_derived)

    def max_full_coverage_length(self) -> int:
        return self.coverage_length
