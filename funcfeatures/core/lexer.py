"""
Lexical helpers shared by the segment scanner and the source normalizer.

These functions know just enough of the Python lexical structure
to step over string literals and comments, which are the only places
where unbalanced brackets can legally appear in a definition.
All indices are positions in the scanned string.
"""

import re

from funcfeatures.errors import UnmatchedDelimiterError


QUOTES = ("'", '"')
COMMENT = "#"

OPENING = "([{"
CLOSING = ")]}"

IDENTIFIER_CHAR = re.compile(r"\w")


def skip_string(text, index):
    """
    Returns the index right after the string literal
    whose opening quote is at ``text[index]``.
    A backslash always escapes the following character.
    """
    quote = text[index]
    delimiter = quote * 3 if text.startswith(quote * 3, index) else quote

    i = index + len(delimiter)
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text.startswith(delimiter, i):
            return i + len(delimiter)
        i += 1

    raise UnmatchedDelimiterError(delimiter)


def skip_comment(text, index):
    """
    Returns the index of the newline ending the comment starting at ``text[index]``
    (or the length of the text for a comment on the last line).
    """
    end = text.find("\n", index)
    return len(text) if end == -1 else end


def skip_lexeme(text, index):
    """
    If a string literal or a comment starts at ``text[index]``,
    returns the index right after it, otherwise returns ``None``.
    """
    c = text[index]
    if c in QUOTES:
        return skip_string(text, index)
    if c == COMMENT:
        return skip_comment(text, index)
    return None


def is_keyword_at(text, index, keyword):
    """
    Checks that ``keyword`` starts at ``text[index]`` as a whole word.
    """
    if not text.startswith(keyword, index):
        return False
    if index > 0 and IDENTIFIER_CHAR.match(text[index - 1]):
        return False
    end = index + len(keyword)
    if end < len(text) and IDENTIFIER_CHAR.match(text[end]):
        return False
    return True


def iter_code(text, start=0):
    """
    Yields ``(index, char)`` for every character of ``text`` from ``start``
    that is outside of string literals and comments.
    """
    i = start
    while i < len(text):
        next_i = skip_lexeme(text, i)
        if next_i is not None:
            i = next_i
            continue
        yield i, text[i]
        i += 1


def logical_line_end(text, start=0):
    """
    Returns the index of the newline ending the logical line
    that starts at ``text[start]`` (or the length of the text).
    Newlines inside brackets or after a backslash do not end a logical line.
    """
    depth = 0
    for i, c in iter_code(text, start):
        if c in OPENING:
            depth += 1
        elif c in CLOSING:
            depth -= 1
        elif c == "\n" and depth <= 0 and (i == 0 or text[i - 1] != "\\"):
            return i
    return len(text)


def expression_end(text, start, pending_colons=0):
    """
    Returns the index right after the expression starting at ``text[start]``.

    The expression ends before a bracket it did not open, before a comma,
    semicolon or a ``for`` keyword at its own nesting level,
    or before the end of the logical line.
    ``pending_colons`` is the number of ``lambda`` headers that are open
    at ``start``; commas and colons belonging to them are part of the expression.
    """
    depth = 0
    end = len(text)
    for i, c in iter_code(text, start):
        if c in OPENING:
            depth += 1
            continue
        if c in CLOSING:
            if depth == 0:
                end = i
                break
            depth -= 1
            continue
        if depth > 0:
            continue
        if c == "\n" and (i == 0 or text[i - 1] != "\\"):
            end = i
            break
        if c == ";":
            end = i
            break
        if c == ",":
            if pending_colons == 0:
                end = i
                break
        elif c == ":":
            if pending_colons == 0:
                end = i
                break
            pending_colons -= 1
        elif is_keyword_at(text, i, "lambda"):
            pending_colons += 1
        elif pending_colons == 0 and is_keyword_at(text, i, "for"):
            end = i
            break

    # Comments are skipped by ``iter_code()``, but must not become a part
    # of the expression if they end it.
    comment = _comment_start(text, start, end)
    if comment is not None:
        end = comment
    return len(text[:end].rstrip()) if end > start else end


def _comment_start(text, start, end):
    i = start
    while i < end:
        if text[i] == COMMENT:
            return i
        next_i = skip_lexeme(text, i)
        i = next_i if next_i is not None else i + 1
    return None


def split_top_level(text, separator=","):
    """
    Splits ``text`` by ``separator`` characters that are outside of brackets,
    string literals and comments.
    """
    parts = []
    depth = 0
    last = 0
    for i, c in iter_code(text):
        if c in OPENING:
            depth += 1
        elif c in CLOSING:
            depth -= 1
        elif c == separator and depth == 0:
            parts.append(text[last:i])
            last = i + 1
    parts.append(text[last:])
    return parts
