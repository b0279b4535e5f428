"""
Test Line Scanner
=================
"""

import pytest

from ucon.parse.scanner import ScanError, split_words, tokenize


def _texts(tokens):
    return [t.text for t in tokens]


def test_tokenize_keeps_delimiters_and_whitespace():
    tokens = tokenize("aliases = in, inch", "=,")

    assert _texts(tokens) == ["aliases ", "=", " in", ",", " inch"]
    assert [t.delim for t in tokens] == [False, True, False, True, False]


def test_tokenize_empty_fields():
    assert _texts(tokenize("a,,b", ",")) == ["a", ",", "", ",", "b"]
    assert _texts(tokenize("", ",")) == [""]


def test_tokenize_stops_at_comment_and_newline():
    assert _texts(tokenize("[inch]  # the inch\n", "[]")) == ["", "[", "inch", "]", "  "]
    assert _texts(tokenize("x = 1\r\n", "=")) == ["x ", "=", " 1"]


def test_tokenize_escapes():
    assert _texts(tokenize(r"a\,b,c", ",")) == ["a,b", ",", "c"]
    assert _texts(tokenize(r"a\#b # c", ",")) == ["a#b "]
    assert _texts(tokenize(r"\\", ",")) == ["\\"]


def test_tokenize_keep_escapes():
    assert _texts(tokenize(r"\_x mm", " ", keep_escapes=True)) == [r"\_x", " ", "mm"]


def test_tokenize_columns():
    tokens = tokenize("ab=cd", "=")
    assert [t.column for t in tokens] == [0, 2, 3]


@pytest.mark.parametrize("line", ["abc\\", "abc\\\n"])
def test_tokenize_dangling_escape(line):
    with pytest.raises(ScanError):
        tokenize(line, ",")


def test_split_words():
    assert split_words("  1\tin   mm  ") == ["1", "in", "mm"]
    assert split_words("1 in mm # inch to mm") == ["1", "in", "mm"]
    assert split_words(r"1 \_odd mm") == ["1", r"\_odd", "mm"]
    assert split_words("   ") == []


def test_token_is_blank():
    tokens = tokenize("  =", "=")
    assert tokens[0].is_blank
    assert not tokens[1].is_blank
