import inspect
import logging
import re

from funcfeatures.errors import (
    InvalidArgumentError, IndeterminateProbeError, LogicInconsistencyError)
from funcfeatures.core.callable import inspect_callable
from funcfeatures.core.containers import immutableadict, identityweakdict
from funcfeatures.core.logic import nand, implies, validate
from funcfeatures.core.prober import Prober, YES, UNKNOWN
from funcfeatures.core.scanner import scan, LAMBDA_HEAD, CLASS_HEAD
from funcfeatures.core.source import normalize
from funcfeatures.core.tracker import tracker as default_tracker
from funcfeatures.utils import truncate


logger = logging.getLogger(__name__)


DIAGNOSTIC_WIDTH = 100

ASYNC_HEAD = re.compile(r"async\s+def\b")

ASYNC_FLAGS = inspect.CO_COROUTINE | inspect.CO_ASYNC_GENERATOR
GENERATOR_FLAGS = inspect.CO_GENERATOR | inspect.CO_ASYNC_GENERATOR

FEATURE_RULES = (
    nand('is_arrow', 'is_constructor'),
    nand('is_arrow', 'is_member_method'),
    nand('is_arrow', 'is_class'),
    nand('is_async', 'is_constructor'),
    nand('is_async', 'is_class'),
    nand('is_member_method', 'is_constructor'),
    nand('is_member_method', 'is_class'),
    nand('is_generator', 'is_constructor'),
    nand('is_generator', 'is_class'),
    nand('is_proxy', 'is_bound'),
    nand('is_classic', 'is_class'),
    implies(dict(is_class=True), dict(is_constructor=True)),
    implies(dict(is_classic=True), dict(is_constructor=True)),
    )


class FeatureRecord(immutableadict):
    """
    Features of a callable.
    Values are accessible both as items and as attributes (``record.is_arrow``).
    """

    def __repr__(self):
        return "FeatureRecord(" + dict.__repr__(self) + ")"


def _code_flags(obj):
    code = getattr(obj, '__code__', None)
    flags = getattr(code, 'co_flags', None)
    return flags if isinstance(flags, int) else None


class Analysis(object):
    """
    Structural and behavioral features of a single (unwrapped) callable.
    Every feature is computed on first access.
    """

    def __init__(self, subject, source_text, segments, prober):
        self.subject = subject
        self.source_text = source_text
        self.segments = segments
        self._prober = prober

        self._is_constructor = None
        self._is_class = None
        self._is_async = None
        self._is_generator = None
        self._is_member_method = None
        self._inspected = None

    @property
    def is_arrow(self):
        return LAMBDA_HEAD.match(self.segments.head) is not None

    def _decided(self, result, what):
        if result == UNKNOWN:
            raise IndeterminateProbeError(
                "Cannot determine whether {subject} {what}\n{dump}".format(
                    subject=repr(self.subject), what=what, dump=self.dump()))
        return result == YES

    @property
    def is_constructor(self):
        if self._is_constructor is None:
            self._is_constructor = self._decided(
                self._prober.probe_constructible(self.subject), "is a constructor")
        return self._is_constructor

    @property
    def is_class(self):
        # Only the text tells a ``class`` statement from other ways
        # of creating a type; the probe confirms the statement did produce one.
        if self._is_class is None:
            self._is_class = (
                CLASS_HEAD.match(self.segments.head) is not None
                and self._decided(
                    self._prober.probe_class_only(self.subject), "can only be constructed"))
        return self._is_class

    @property
    def is_classic(self):
        return self.is_constructor and not self.is_class

    @property
    def inspected(self):
        if self._inspected is None:
            self._inspected = inspect_callable(self.subject)
        return self._inspected

    @property
    def is_member_method(self):
        if self._is_member_method is None:
            self._is_member_method = (
                not self.is_arrow
                and not self.is_class
                and self.inspected.is_member)
        return self._is_member_method

    @property
    def is_async(self):
        # Callable instances are judged by their ``__call__``, methods by their function
        if self._is_async is None:
            routine = self.inspected.func_obj
            if inspect.iscoroutinefunction(routine) or inspect.isasyncgenfunction(routine):
                self._is_async = True
            else:
                flags = _code_flags(routine)
                if flags is not None:
                    self._is_async = bool(flags & ASYNC_FLAGS)
                else:
                    self._is_async = ASYNC_HEAD.match(self.segments.head) is not None
        return self._is_async

    @property
    def is_generator(self):
        if self._is_generator is None:
            routine = self.inspected.func_obj
            if inspect.isgeneratorfunction(routine) or inspect.isasyncgenfunction(routine):
                self._is_generator = True
            else:
                flags = _code_flags(routine)
                self._is_generator = (
                    flags is not None and bool(flags & GENERATOR_FLAGS))
        return self._is_generator

    def dump(self):
        """
        Returns a short description of the analyzed source for diagnostic messages.
        """
        name = getattr(self.subject, '__qualname__', None) or repr(self.subject)
        segments = self.segments
        return (
            "    name  : {name}\n"
            "    head  : {head}\n"
            "    params: {params}\n"
            "    body  : {body}").format(
                name=name,
                head=truncate(segments.head, DIAGNOSTIC_WIDTH),
                params=truncate(segments.params, DIAGNOSTIC_WIDTH),
                body=truncate(segments.body, DIAGNOSTIC_WIDTH))


class Classifier(object):
    """
    Builds feature records of callables.

    ``tracker`` supplies the wrapping provenance and the raw wrapping primitives
    for the probes (the process-wide tracker by default),
    ``normalizer`` returns ``SourceText`` objects (the module-level ``normalize`` by default),
    ``rules`` are the consistency rules checked before a record is returned.
    """

    def __init__(self, tracker=None, normalizer=None, rules=None):
        self.tracker = tracker if tracker is not None else default_tracker
        self.normalizer = normalizer if normalizer is not None else normalize
        self.rules = rules if rules is not None else FEATURE_RULES
        self.prober = Prober(self.tracker)
        self._segments = identityweakdict()

    def segments(self, subject):
        """
        Returns the ``Segments`` of the source text of ``subject``, computing them once.
        """
        segments = self._segments.get(subject)
        if segments is None:
            segments = scan(self.normalizer(subject).raw)
            try:
                self._segments[subject] = segments
            except TypeError:
                logger.debug(
                    "Cannot cache the segments of %r: it does not support weak references", subject)
        return segments

    def analyse(self, subject):
        return Analysis(subject, self.normalizer(subject), self.segments(subject), self.prober)

    def classify(self, candidate):
        """
        Returns the ``FeatureRecord`` of ``candidate``.
        """
        if not callable(candidate):
            raise InvalidArgumentError(
                "Expected a callable, got an object of type " + type(candidate).__name__)

        tracker = self.tracker
        source = tracker.get_source(candidate)
        analysis = self.analyse(source)

        features = dict(
            is_constructor=analysis.is_constructor,
            is_class=analysis.is_class,
            is_classic=analysis.is_classic,
            # The current state describes the exact object handed in
            is_proxy=tracker.is_proxy(candidate),
            is_bound=tracker.is_bound(candidate),
            was_proxy=tracker.was_proxy(candidate),
            was_bound=tracker.was_bound(candidate),
            is_arrow=analysis.is_arrow,
            is_async=analysis.is_async,
            is_member_method=analysis.is_member_method,
            is_generator=analysis.is_generator,
            target=candidate,
            source=source)

        violations = validate(features, self.rules)
        if len(violations) > 0:
            raise LogicInconsistencyError(violations, analysis.dump())

        return FeatureRecord(features)


_classifier = Classifier()


def get_features(candidate):
    """
    Returns the ``FeatureRecord`` of ``candidate`` using the process-wide tracker.
    """
    return _classifier.classify(candidate)
