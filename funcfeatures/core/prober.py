"""
Behavioral probes.

Whether a callable can construct objects is decided by trying it
through an interception layer that never runs the callable's own code,
and by recognizing the exact error the runtime raises when it refuses.
An error that is not recognized does not lead to a guess:
the probe reports ``UNKNOWN`` and the caller decides what to do.
"""

import inspect
import logging


logger = logging.getLogger(__name__)


YES = 'yes'
NO = 'no'
UNKNOWN = 'unknown'


# The slot of ``type`` serving direct calls of classes (``cls(...)``).
# Binding it to an object does not call anything.
CONSTRUCTION_SLOT = type.__dict__['__call__']

# ``object.__new__(X)``: X is not a type object
# descriptor '__call__' for 'type' objects doesn't apply to a 'X' object
NOT_CONSTRUCTIBLE_MARKERS = ("is not a type object", "doesn't apply to a")

# Raised for types that cannot be allocated generically,
# but are constructors nevertheless.
GUARDED_CONSTRUCTION_MARKERS = ("is not safe, use", "Can't instantiate abstract class")


def _has_finalizer(subject):
    return inspect.getattr_static(subject, '__del__', None) is not None


class Prober(object):
    """
    Runs behavioral probes on callables.
    Interception wrappers are created with ``tracker.bind_unwrapped()``,
    so probing leaves no trace in the tracker.
    """

    def __init__(self, tracker):
        self._tracker = tracker

    def _attempt(self, what, subject, attempt, not_markers, yes_markers=()):
        try:
            attempt()
        except TypeError as e:
            message = str(e)
            if any(marker in message for marker in not_markers):
                return NO
            if any(marker in message for marker in yes_markers):
                return YES
            logger.warning(
                "Unrecognized error while probing whether %r %s: %s", subject, what, message)
            return UNKNOWN
        except Exception:
            logger.exception(
                "An unknown error occurred while probing whether %r %s", subject, what)
            raise
        return YES

    def probe_constructible(self, subject):
        """
        Checks whether ``subject`` constructs objects.
        The construction is intercepted: a blank object is allocated
        without calling ``__new__`` or ``__init__`` of the subject.
        Subjects with a finalizer are not allocated at all
        (the finalizer would run on the blank object);
        for them the construction slot is bound without being called.
        """
        if _has_finalizer(subject):
            construct = self._tracker.bind_unwrapped(CONSTRUCTION_SLOT.__get__, subject)
        else:
            construct = self._tracker.bind_unwrapped(object.__new__, subject)

        return self._attempt(
            "is a constructor", subject, construct,
            NOT_CONSTRUCTIBLE_MARKERS, GUARDED_CONSTRUCTION_MARKERS)

    def probe_class_only(self, subject):
        """
        Checks whether a direct call of ``subject`` is served by type construction,
        that is, whether ``subject`` can only be used to construct objects.
        The construction slot is bound to the subject, but never called.
        """
        bind_construction = self._tracker.bind_unwrapped(CONSTRUCTION_SLOT.__get__, subject)
        return self._attempt(
            "can only be constructed", subject, bind_construction,
            NOT_CONSTRUCTIBLE_MARKERS[1:])
