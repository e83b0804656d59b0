import re


_INDENT = re.compile(r"[ \t]*")
_WHITESPACE = re.compile(r"\s+")


def unshift(source):
    """
    Shift source to the left so that its least indented line
    starts with zero indentation.
    Lines indented with a different whitespace prefix are left as they are.
    """
    source = source.rstrip("\n ").lstrip("\n")
    lines = [line.rstrip() for line in source.split("\n")]

    indents = [_INDENT.match(line).group(0) for line in lines if len(line) > 0]
    indent = min(indents, key=len) if len(indents) > 0 else ""

    shifted_lines = []
    for line in lines:
        if line.startswith(indent):
            shifted_lines.append(line[len(indent):])
        else:
            shifted_lines.append(line.lstrip())
    return "\n".join(shifted_lines)


def collapse(text):
    """
    Replace every whitespace run in ``text`` with a single space.
    Unlike ``justify()``, the ends of the string are kept as they are.
    """
    return _WHITESPACE.sub(" ", text)


def justify(text):
    """
    Collapse whitespace runs to single spaces and trim the result.
    """
    return collapse(text).strip()


def truncate(text, width):
    """
    Cut ``text`` down to ``width`` characters, marking the cut with an ellipsis.
    """
    if len(text) > width:
        return text[:width] + "..."
    return text
