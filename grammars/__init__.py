"""Benchmark grammars for learning experiments."""

from .tomita import (
    tomita_1, tomita_2, tomita_3, tomita_4,
    tomita_5, tomita_6, tomita_7,
    TOMITA_ALPHABET,
    TOMITA_GRAMMARS,
    get_tomita_grammar,
    generate_binary_words,
    make_example_store
)

__all__ = [
    'tomita_1', 'tomita_2', 'tomita_3', 'tomita_4',
    'tomita_5', 'tomita_6', 'tomita_7',
    'TOMITA_ALPHABET',
    'TOMITA_GRAMMARS',
    'get_tomita_grammar',
    'generate_binary_words',
    'make_example_store'
]
