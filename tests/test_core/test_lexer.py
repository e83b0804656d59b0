import pytest

from funcfeatures.errors import UnmatchedDelimiterError
from funcfeatures.core.lexer import (
    skip_string, skip_comment, skip_lexeme, is_keyword_at, iter_code,
    logical_line_end, expression_end, split_top_level)


def test_skip_string():
    text = "x = 'a(b' + 1"
    assert skip_string(text, 4) == 9
    assert text[9:] == " + 1"


def test_skip_string_escaped_quote():
    text = r"'a\'b' + 1"
    assert skip_string(text, 0) == 6


def test_skip_triple_quoted_string():
    text = '"""a"b\n"c"""d'
    assert skip_string(text, 0) == len(text) - 1


def test_skip_empty_string():
    assert skip_string("'' + 1", 0) == 2


def test_unmatched_quote():
    with pytest.raises(UnmatchedDelimiterError) as e:
        skip_string("'''abc'", 0)
    assert e.value.delimiter == "'''"


def test_skip_comment():
    text = "a # (\nb"
    assert skip_comment(text, 2) == 5
    assert skip_comment("a # (", 2) == 5


def test_skip_lexeme():
    assert skip_lexeme("'a'b", 0) == 3
    assert skip_lexeme("#a\nb", 0) == 2
    assert skip_lexeme("ab", 0) is None


def test_is_keyword_at():
    assert is_keyword_at("lambda x: x", 0, "lambda")
    assert is_keyword_at("(lambda: 1)", 1, "lambda")
    assert not is_keyword_at("lambdas", 0, "lambda")
    assert not is_keyword_at("my_lambda", 3, "lambda")


def test_iter_code():
    text = "a'b'c#d\ne"
    assert "".join(c for _, c in iter_code(text)) == "ac\ne"


def test_logical_line_end():
    text = "f(a,\n  b)\nc"
    assert logical_line_end(text) == 9

    text = "a = 1 + \\\n  2\nb"
    assert logical_line_end(text) == 13

    text = "a = ')'\nb"
    assert logical_line_end(text) == 7


def test_expression_end():
    text = "f = lambda x, y: (x, y), 2"
    start = text.index("lambda")
    assert text[start:expression_end(text, start)] == "lambda x, y: (x, y)"


def test_expression_end_closing_bracket():
    text = "g(lambda x: x)"
    assert text[2:expression_end(text, 2)] == "lambda x: x"


def test_expression_end_nested_lambda():
    text = "[lambda x: lambda y: x + y]"
    assert text[1:expression_end(text, 1)] == "lambda x: lambda y: x + y"


def test_expression_end_comprehension():
    text = "[lambda: i for i in range(3)]"
    assert text[1:expression_end(text, 1)] == "lambda: i"


def test_expression_end_comment():
    text = "f = lambda: 1  # a comment\nb"
    start = text.index("lambda")
    assert text[start:expression_end(text, start)] == "lambda: 1"


def test_expression_end_dict_value():
    text = "{'a': lambda: 1, 'b': 2}"
    start = text.index("lambda")
    assert text[start:expression_end(text, start)] == "lambda: 1"


def test_split_top_level():
    assert split_top_level("a, b=(1, 2), c=','") == ["a", " b=(1, 2)", " c=','"]
    assert split_top_level("x, y: x", ":") == ["x, y", " x"]
