"""
Exceptions raised while classifying callables.

Every exception derives from ``FeatureError`` and from the closest builtin
exception, so callers can catch either the package-wide base class or the
builtin one.
"""


class FeatureError(Exception):
    """
    Base class for all errors raised by ``funcfeatures``.
    """


class InvalidArgumentError(FeatureError, TypeError):
    """
    Raised when the object handed to the classifier is not callable.
    """


class TamperedRuntimeError(FeatureError, RuntimeError):
    """
    Raised when the source serialization primitive cannot be trusted.
    Nothing derived from source text is meaningful after this error.
    """


class SegmentationError(FeatureError, ValueError):
    """
    Raised when the source text of a callable cannot be split
    into a head, a parameter list and a body.
    """


class UnmatchedDelimiterError(SegmentationError):

    def __init__(self, delimiter, message=None):
        if message is None:
            message = (
                "There is an unmatched " + repr(delimiter)
                + " in the source text, cannot parse the callable")
        SegmentationError.__init__(self, message)
        self.delimiter = delimiter


class NoParameterListError(SegmentationError):
    pass


class IndeterminateProbeError(FeatureError, RuntimeError):
    """
    Raised when a behavioral probe ends with an error it does not recognize,
    so the probed property can be neither confirmed nor refuted.
    """


class LogicInconsistencyError(FeatureError, AssertionError):
    """
    Raised when an assembled feature record contradicts itself.
    This indicates a bug in the classification logic
    or a runtime shape the classifier does not anticipate.
    """

    def __init__(self, violations, diagnostics=""):
        message = "Inconsistent features:\n " + "\n ".join(violations)
        if diagnostics:
            message += "\n" + diagnostics
        FeatureError.__init__(self, message)
        self.violations = list(violations)
        self.diagnostics = diagnostics
