"""
Reading and writing example sets.

Example files are JSON documents of the form

    {
      "metadata": {"alphabet": ["a", "b"]},
      "Positive sample": ["", "a a"],
      "Negative sample": ["a", "b"]
    }

where each word is written as space-separated symbols.
"""

import json
import random
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from .words import ExampleStore, Word, format_word, parse_word

POSITIVE_KEY = "Positive sample"
NEGATIVE_KEY = "Negative sample"


def examples_from_dict(data: Dict[str, Any], closed_world: bool = False) -> ExampleStore:
    """
    Build an example store from a parsed JSON document.

    Args:
        data: Document with an alphabet (under "metadata" or top level)
            and the two sample lists
        closed_world: Treat unlabeled words as negative

    Raises:
        ValueError: Missing alphabet, unknown symbol or conflicting labels
    """
    alphabet = data.get("metadata", {}).get("alphabet", data.get("alphabet"))
    if not alphabet:
        raise ValueError("Example file does not declare an alphabet")
    positive = [parse_word(w) for w in data.get(POSITIVE_KEY, [])]
    negative = [parse_word(w) for w in data.get(NEGATIVE_KEY, [])]
    return ExampleStore(alphabet, positive, negative, closed_world=closed_world)


def load_examples(path: Union[str, Path], closed_world: bool = False) -> ExampleStore:
    """Load an example store from a JSON file."""
    with open(path, 'r') as f:
        data = json.load(f)
    return examples_from_dict(data, closed_world=closed_world)


def write_samples(path: Union[str, Path], alphabet: Sequence[str],
                  positive: Sequence[Word], negative: Sequence[Word],
                  metadata: Optional[Dict[str, Any]] = None):
    """Write sample lists in the given order."""
    document = {
        "metadata": {"alphabet": list(alphabet), **(metadata or {})},
        POSITIVE_KEY: [format_word(w) for w in positive],
        NEGATIVE_KEY: [format_word(w) for w in negative],
    }
    with open(path, 'w') as f:
        json.dump(document, f, indent=2)


def save_examples(store: ExampleStore, path: Union[str, Path],
                  metadata: Optional[Dict[str, Any]] = None):
    """Write the ground-truth examples of a store, in canonical order."""
    write_samples(path, store.alphabet, store.positives(), store.negatives(), metadata)


def shuffle_samples(input_path: Union[str, Path], output_path: Union[str, Path],
                    seed: Optional[int] = None) -> ExampleStore:
    """
    Copy an example file with both sample lists shuffled.

    Returns:
        The loaded examples (shuffling does not change the set)
    """
    store = load_examples(input_path)
    rng = random.Random(seed)
    positive, negative = store.positives(), store.negatives()
    rng.shuffle(positive)
    rng.shuffle(negative)
    write_samples(output_path, store.alphabet, positive, negative)
    print(f"  Written shuffled samples to: {output_path}")
    return store


def add_redundant_examples(store: ExampleStore, dfa, count: int,
                           min_length: int = 1, max_length: int = 10,
                           seed: Optional[int] = None,
                           max_attempts: Optional[int] = None) -> List[Word]:
    """
    Add random new words labeled by a DFA to the store.

    Args:
        store: Examples to extend in place
        dfa: Labeling automaton (anything with accepts)
        count: Number of new examples wanted
        min_length: Shortest random word
        max_length: Longest random word
        seed: Random seed
        max_attempts: Give up after this many draws (default 100 x count)

    Returns:
        The words added, which may be fewer than count
    """
    rng = random.Random(seed)
    max_attempts = max_attempts if max_attempts is not None else 100 * count
    added: List[Word] = []
    attempts = 0
    while len(added) < count and attempts < max_attempts:
        attempts += 1
        length = rng.randint(min_length, max_length)
        word = tuple(rng.choice(store.alphabet) for _ in range(length))
        if store.is_known(word):
            continue
        store.add_example(word, 1 if dfa.accepts(word) else 0)
        added.append(word)

    positives = sum(1 for w in added if store.lookup(w) == 1)
    print(f"  Added {positives} positive and {len(added) - positives} negative examples")
    return added
