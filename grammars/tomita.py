"""
Tomita Grammars Implementation
Based on Tomita (1982) - classic benchmark grammars for automaton learning

Words are sequences over the symbols "0" and "1".
"""

from typing import Callable, Sequence, Tuple, List
import re

from core.words import ExampleStore, Word, all_words

TOMITA_ALPHABET = ["0", "1"]


def _text(word: Sequence[str]) -> str:
    return "".join(word)


def tomita_1(word: Sequence[str]) -> bool:
    """
    Tomita Grammar 1: 1*
    Accepts words containing only 1s (no 0s allowed).
    """
    return "0" not in word


def tomita_2(word: Sequence[str]) -> bool:
    """
    Tomita Grammar 2: (10)*
    Accepts words that are repetitions of "10".
    """
    return _text(word) == "10" * (len(word) // 2)


# Not tomita 3: words containing an odd series of consecutive ones and then later an odd series of consecutive zeros
_not_tomita_3 = re.compile("((0|1)*0)*1(11)*(0(0|1)*1)*0(00)*(1(0|1)*)*$")


def tomita_3(word: Sequence[str]) -> bool:
    """
    Tomita Grammar 3: Complement of specific pattern
    Accepts words that are NOT:
    - words containing an odd series of consecutive ones and then later an odd series of consecutive zeros
    """
    return _not_tomita_3.match(_text(word)) is None


def tomita_4(word: Sequence[str]) -> bool:
    """
    Tomita Grammar 4: No three consecutive 0s
    Accepts words that don't contain "000".
    """
    return "000" not in _text(word)


def tomita_5(word: Sequence[str]) -> bool:
    """
    Tomita Grammar 5: Even 0s and even 1s
    Accepts words with even count of both 0s and 1s.
    """
    word = list(word)
    return (word.count("0") % 2 == 0) and (word.count("1") % 2 == 0)


def tomita_6(word: Sequence[str]) -> bool:
    """
    Tomita Grammar 6: Difference of 0s and 1s divisible by 3
    Accepts words where (#0s - #1s) mod 3 = 0.
    """
    word = list(word)
    return ((word.count("0") - word.count("1")) % 3) == 0


def tomita_7(word: Sequence[str]) -> bool:
    """
    Tomita Grammar 7: At most one occurrence of "10"
    Accepts words with at most one occurrence of the substring "10".
    """
    return _text(word).count("10") <= 1


# Dictionary of all Tomita grammars
TOMITA_GRAMMARS = {
    1: (tomita_1, "1* (no zeros allowed)"),
    2: (tomita_2, "(10)* (alternating 10 pattern)"),
    3: (tomita_3, "complement of odd consecutive 1s then odd consecutive 0s"),
    4: (tomita_4, "no three consecutive 0s"),
    5: (tomita_5, "even 0s AND even 1s"),
    6: (tomita_6, "(#0s - #1s) mod 3 = 0"),
    7: (tomita_7, "at most one occurrence of '10'")
}


def get_tomita_grammar(grammar_id: int) -> Tuple[Callable[[Sequence[str]], bool], str]:
    """
    Get Tomita grammar function and description by ID.

    Args:
        grammar_id: Grammar ID (1-7)

    Returns:
        Tuple of (grammar_function, description)
    """
    if grammar_id not in TOMITA_GRAMMARS:
        raise ValueError(f"Unknown Tomita grammar ID: {grammar_id}. Valid IDs are 1-7.")
    return TOMITA_GRAMMARS[grammar_id]


def generate_binary_words(max_length: int) -> List[Word]:
    """
    Generate all binary words up to max_length, shortest first.

    Args:
        max_length: Maximum word length

    Returns:
        List of words including the empty word
    """
    return all_words(TOMITA_ALPHABET, max_length)


def make_example_store(grammar_id: int, max_length: int,
                       closed_world: bool = False) -> ExampleStore:
    """
    Label every binary word up to max_length with a Tomita grammar.

    Args:
        grammar_id: Grammar ID (1-7)
        max_length: Longest labeled word
        closed_world: Treat longer words as negative

    Returns:
        Example store with full coverage up to max_length
    """
    grammar, _ = get_tomita_grammar(grammar_id)
    store = ExampleStore(TOMITA_ALPHABET, closed_world=closed_world)
    for word in generate_binary_words(max_length):
        store.add_example(word, 1 if grammar(word) else 0)
    return store
