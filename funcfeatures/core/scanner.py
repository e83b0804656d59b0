"""
Splits the source text of a callable into a head, a parameter list and a body.

The scanner is a single left-to-right pass over the text.
It does not parse Python; it only needs to find the boundaries
of the parameter list, which means stepping over everything
that can legally contain unbalanced brackets:
string literals (all four quote kinds) and comments.
"""

import re
from collections import namedtuple

from funcfeatures.errors import UnmatchedDelimiterError, NoParameterListError
from funcfeatures.core.lexer import skip_lexeme, is_keyword_at, OPENING, CLOSING
from funcfeatures.utils import collapse


LAMBDA_HEAD = re.compile(r"lambda\b")
CLASS_HEAD = re.compile(r"class\b")


class Segments(namedtuple('Segments', 'symbol_name head params body implicit')):
    """
    Parts of the source text of a callable.

    ``head + params + body`` is equal to the normalized source text.
    ``symbol_name`` is the first top-level bracketed clause before
    the parameter list (the type parameters in ``def f[T](x)``), or ``None``.
    ``implicit`` is ``True`` if there is no parenthesized parameter list
    (lambdas, and classes without a base list).
    """

    __slots__ = ()


def _split(raw, params_start, params_end, symbol_start=-1, symbol_end=-1, implicit=False):
    if symbol_start != -1:
        symbol_name = collapse(raw[symbol_start:symbol_end + 1]).strip()
    else:
        symbol_name = None

    # Segment boundaries are never in the middle of a whitespace run,
    # so collapsing the parts separately is the same as collapsing the whole.
    return Segments(
        symbol_name=symbol_name,
        head=collapse(raw[:params_start]),
        params=collapse(raw[params_start:params_end]),
        body=collapse(raw[params_end:]),
        implicit=implicit)


def _scan_lambda(raw, keyword_end):
    # Lambdas in default values have header colons of their own,
    # the first unclaimed one ends the parameters.
    depth = 0
    pending = 0
    i = keyword_end
    while i < len(raw):
        next_i = skip_lexeme(raw, i)
        if next_i is not None:
            i = next_i
            continue

        c = raw[i]
        if c in OPENING:
            depth += 1
        elif c in CLOSING:
            depth -= 1
        elif depth == 0 and is_keyword_at(raw, i, 'lambda'):
            pending += 1
            i += len('lambda')
            continue
        elif c == ':' and depth == 0:
            if pending == 0:
                header_colon = i
                break
            pending -= 1
        i += 1
    else:
        raise NoParameterListError(
            "There is no parameter list terminator in the lambda, cannot parse the callable")

    params_start = keyword_end
    while params_start < header_colon and raw[params_start].isspace():
        params_start += 1

    return _split(raw, params_start, header_colon, implicit=True)


def scan(raw):
    """
    Splits the source text ``raw`` (a dedented definition, as produced by the normalizer)
    into ``Segments``.
    Raises ``UnmatchedDelimiterError`` if a string literal or a bracket is not closed,
    and ``NoParameterListError`` if the parameter list cannot be found.
    """

    raw = raw.strip()

    # A lambda is the only callable without a parenthesized parameter list.
    lambda_head = LAMBDA_HEAD.match(raw)
    if lambda_head is not None:
        return _scan_lambda(raw, lambda_head.end())

    depth = 0
    params_start = -1
    params_end = -1
    header_colon = -1

    # Only the first top-level bracket pair before the parameter list is captured.
    square_depth = 0
    symbol_start = -1
    symbol_end = -1

    i = 0
    while i < len(raw):
        next_i = skip_lexeme(raw, i)
        if next_i is not None:
            i = next_i
            continue

        c = raw[i]

        if params_start == -1 and depth == 0:
            if c == '[':
                if square_depth == 0 and symbol_start == -1:
                    symbol_start = i
                square_depth += 1
                i += 1
                continue

            if c == ']' and square_depth > 0:
                square_depth -= 1
                if square_depth == 0 and symbol_end == -1:
                    symbol_end = i
                i += 1
                continue

            # Parentheses inside the symbol brackets belong to the symbol
            if square_depth > 0:
                i += 1
                continue

        if c == '(':
            depth += 1
            if params_start == -1:
                params_start = i
        elif c == ')' and params_start != -1:
            depth -= 1
            if depth == 0:
                params_end = i + 1
                break
        elif c == ':' and params_start == -1:
            header_colon = i
            break

        i += 1

    if square_depth > 0:
        raise UnmatchedDelimiterError('[')

    if params_start != -1:
        if params_end == -1:
            raise UnmatchedDelimiterError('(')
        return _split(raw, params_start, params_end, symbol_start, symbol_end)

    # A class without a base list is the only definition
    # that can reach the end of its header without parentheses.
    if header_colon != -1 and CLASS_HEAD.match(raw):
        return _split(
            raw, header_colon, header_colon, symbol_start, symbol_end, implicit=True)

    raise NoParameterListError(
        "There is no parameter list in the source text, cannot parse the callable")
