"""
Canonical source text of callables.

The text is obtained with ``inspect.getsource``, captured when this module is imported
and checked for tampering, so that later replacements of ``inspect.getsource``
(mocks, instrumentation) cannot influence the classification.
"""

import inspect
import logging
from collections import namedtuple

from funcfeatures.errors import TamperedRuntimeError
from funcfeatures.core.callable import inspect_callable
from funcfeatures.core.containers import identityweakdict
from funcfeatures.core.lexer import (
    iter_code, is_keyword_at, logical_line_end, expression_end, split_top_level)
from funcfeatures.utils import unshift, justify


logger = logging.getLogger(__name__)


class SourceText(namedtuple('SourceText', 'raw text decorators native')):
    """
    Normalized source text of a single callable.

    ``raw`` is the dedented definition without decorators,
    ``text`` is ``raw`` with whitespace collapsed,
    ``decorators`` is a tuple of decorator expressions,
    ``native`` is ``True`` if the text was synthesized
    because no source was available.
    """

    __slots__ = ()


class _Omitted(object):
    # Stands for a default value in synthesized signatures.

    def __repr__(self):
        return "..."


_OMITTED = _Omitted()


def verify_primitive(primitive):
    """
    Checks that ``primitive`` is a genuine source serializer:
    it exists, it is callable, and it can serialize its own definition.
    Raises ``TamperedRuntimeError`` otherwise.
    """

    if primitive is None:
        raise TamperedRuntimeError(
            "The source serialization primitive is missing. It has definitely been tampered with!")

    if not callable(primitive):
        raise TamperedRuntimeError(
            "The source serialization primitive is not callable. "
            "It has definitely been tampered with!")

    try:
        own_source = primitive(primitive)
    except Exception as e:
        raise TamperedRuntimeError(
            "The source serialization primitive cannot serialize itself ({error}). "
            "It has definitely been tampered with!".format(error=repr(e)))

    if not isinstance(own_source, str):
        raise TamperedRuntimeError(
            "The source serialization primitive does not return a string. "
            "It has definitely been tampered with!")

    name = getattr(primitive, '__name__', None)
    if not isinstance(name, str) or ("def " + name + "(") not in own_source:
        raise TamperedRuntimeError(
            "The source serialization primitive does not serialize its own definition. "
            "It has definitely been tampered with!")


def split_decorators(raw):
    """
    Separates leading decorators from a dedented definition.
    Returns a tuple ``(decorators, definition)``.
    """
    decorators = []
    i = 0
    while i < len(raw):
        c = raw[i]
        if c.isspace():
            i += 1
        elif c == '#':
            newline = raw.find('\n', i)
            i = len(raw) if newline == -1 else newline
        elif c == '@':
            end = logical_line_end(raw, i + 1)
            decorators.append(justify(_strip_comment(raw[i + 1:end])))
            i = end
        else:
            break
    return tuple(decorators), raw[i:]


def _strip_comment(line):
    # ``iter_code()`` skips comments, so the last code character ends the expression.
    last = -1
    for i, c in iter_code(line):
        if not c.isspace():
            last = i
    return line[:last + 1]


def _parameter_names(params):
    names = []
    for part in split_top_level(params):
        part = part.strip()
        if part in ('', '/', '*'):
            continue
        names.append(part.lstrip('*').split('=')[0].strip())
    return names


def _lambda_expressions(raw):
    for i, c in iter_code(raw):
        if c == 'l' and is_keyword_at(raw, i, 'lambda'):
            yield raw[i:expression_end(raw, i)]


def isolate_lambda(raw, func):
    """
    Cuts the expression of the lambda ``func`` out of the statement
    that ``inspect.getsource()`` returns for it.
    If several lambdas in the statement have the same parameter names,
    the first one is taken.
    """
    try:
        expected = list(inspect.signature(func).parameters)
    except (TypeError, ValueError):
        expected = None

    first = None
    for expression in _lambda_expressions(raw):
        if first is None:
            first = expression

        if expected is None:
            break

        header = split_top_level(expression[len('lambda'):], ':')[0]
        if _parameter_names(header) == expected:
            return expression

    if first is None:
        logger.debug("No lambda expression found in the source of %r", func)
        return raw
    return first


def _signature_text(obj):
    try:
        signature = inspect.signature(obj)
    except (TypeError, ValueError):
        return "(*args, **kwargs)"

    parameters = [
        param.replace(
            annotation=inspect.Parameter.empty,
            default=inspect.Parameter.empty if param.default is inspect.Parameter.empty
                else _OMITTED)
        for param in signature.parameters.values()]
    signature = signature.replace(
        parameters=parameters, return_annotation=inspect.Signature.empty)
    return str(signature)


def synthesize(obj):
    """
    Builds stub source text for a callable without retrievable source.
    """
    name = getattr(obj, '__name__', None)
    if not isinstance(name, str):
        name = type(obj).__name__

    if isinstance(obj, type):
        bases = [base.__name__ for base in obj.__bases__]
        if len(bases) == 1:
            bases_text = "(" + bases[0] + ",)"
        else:
            bases_text = "(" + ", ".join(bases) + ")"
        return "type(" + repr(name) + ", " + bases_text + ", {...})"

    signature = _signature_text(obj)

    if name == '<lambda>':
        params = signature[1:-1]
        return "lambda" + (" " + params if params else "") + ": ..."

    if inspect.iscoroutinefunction(obj) or inspect.isasyncgenfunction(obj):
        prefix = "async def "
    else:
        prefix = "def "
    return prefix + name + signature + ": ..."


class SourceNormalizer(object):
    """
    Returns the normalized source text (a ``SourceText`` object) of a callable,
    computing it once per callable object.
    """

    def __init__(self, primitive):
        verify_primitive(primitive)
        self._primitive = primitive
        self._cache = identityweakdict()

    def __call__(self, obj):
        source_text = self._cache.get(obj)
        if source_text is not None:
            return source_text

        source_text = self._normalize(obj)

        try:
            self._cache[obj] = source_text
        except TypeError:
            logger.debug("Cannot cache the source of %r: it does not support weak references", obj)

        return source_text

    def _normalize(self, obj):
        subject = inspect_callable(obj).func_obj

        try:
            source = self._primitive(subject)
        except (OSError, TypeError) as e:
            logger.debug("No source for %r (%s), synthesizing a stub", subject, e)
            raw = synthesize(subject)
            return SourceText(raw=raw, text=justify(raw), decorators=(), native=True)

        decorators, raw = split_decorators(unshift(source))
        if getattr(subject, '__name__', None) == '<lambda>':
            raw = isolate_lambda(raw, subject)
        raw = raw.strip()

        return SourceText(raw=raw, text=justify(raw), decorators=decorators, native=False)


# Captured at import, before anything else gets a chance to replace it.
normalize = SourceNormalizer(inspect.getsource)
