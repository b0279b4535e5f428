"""
ucon.parse - Token-level parsing
================================

    scanner     - line tokenizer shared by the units file and the console
    unit_expr   - unit expression syntax (literals, prefixes, recall)
    number      - value tokens
"""

from .number import NumberExpr, parse_number_expr
from .scanner import Token, tokenize, split_words
from .unit_expr import (
    PREFIXES,
    Literal,
    PrefixedLiteral,
    PrefixedRecall,
    Recall,
    parse_unit_expr,
    prefix_multiplier,
)

__all__ = [
    'NumberExpr', 'parse_number_expr',
    'Token', 'tokenize', 'split_words',
    'PREFIXES', 'Literal', 'PrefixedLiteral', 'Recall', 'PrefixedRecall',
    'parse_unit_expr', 'prefix_multiplier',
]
