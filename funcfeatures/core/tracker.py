"""
Tracking of wrapping transformations.

A callable produced by ``functools.partial`` (a bound callable)
or by ``functools.update_wrapper``/``functools.wraps`` (a proxy)
does not reliably reveal what it wraps and how many times it was wrapped.
The tracker replaces these two primitives in the ``functools`` module
with instrumented versions that behave the same way,
but record the provenance of every result in a side table.
"""

import copyreg
import functools
import logging
import threading

from funcfeatures.core.containers import identityweakdict


logger = logging.getLogger(__name__)


IS_PROXY = 0b0001
IS_BOUND = 0b0010
WAS_PROXY = 0b0100
WAS_BOUND = 0b1000

_CURRENT_TO_PAST = ((IS_PROXY, WAS_PROXY), (IS_BOUND, WAS_BOUND))

# The primitives as they are before any instrumentation.
_functools_partial = functools.partial
_functools_update_wrapper = functools.update_wrapper

_install_lock = threading.Lock()
_active = None


def demote(state):
    """
    Turns the current-state bits of ``state`` into the corresponding "was" bits.
    """
    for current, past in _CURRENT_TO_PAST:
        if state & current:
            state = (state & ~current) | past
    return state


def _rebuild_partial(func):
    # Resolved at load time, so the result is tracked if a tracker is installed then.
    return functools.partial(func)


def _reduce_partial(obj):
    return (
        _rebuild_partial, (obj.func,),
        (obj.func, obj.args, obj.keywords or None, obj.__dict__ or None))


class _PartialType(type):
    # Original partial objects (created before installation, or with ``bind_unwrapped()``)
    # must still pass ``isinstance(obj, functools.partial)`` checks.
    # Subclasses defined by users keep the usual semantics.

    def __instancecheck__(cls, obj):
        if cls is partial:
            return isinstance(obj, _functools_partial)
        return type.__instancecheck__(cls, obj)

    def __subclasscheck__(cls, subclass):
        if cls is partial:
            return issubclass(subclass, _functools_partial)
        return type.__subclasscheck__(cls, subclass)


class partial(_functools_partial, metaclass=_PartialType):
    """
    An instrumented ``functools.partial`` reporting every new object
    to the active tracker.
    """

    __slots__ = ()

    def __new__(cls, *args, **keywords):
        self = _functools_partial.__new__(cls, *args, **keywords)
        tracker = _active
        if tracker is not None:
            tracker.record_wrap(args[0], self, IS_BOUND)
        return self

    def __reduce__(self):
        if type(self) is partial:
            return _reduce_partial(self)
        return _functools_partial.__reduce__(self)


# Reprs refer to ``functools.partial``,
# which resolves to this class while a tracker is installed and to the original otherwise.
partial.__module__ = 'functools'


def update_wrapper(
        wrapper, wrapped,
        assigned=functools.WRAPPER_ASSIGNMENTS, updated=functools.WRAPPER_UPDATES):
    result = _functools_update_wrapper(wrapper, wrapped, assigned, updated)
    tracker = _active
    if tracker is not None:
        tracker.record_wrap(wrapped, result, IS_PROXY)
    return result


_functools_update_wrapper(update_wrapper, _functools_update_wrapper)


class Tracker(object):
    """
    A side table of wrapping provenance.

    For every callable produced by an instrumented primitive, the tracker knows
    its ultimate source (the first callable in the chain that was not produced
    by a wrapping primitive) and a bitmask of ``IS_PROXY``, ``IS_BOUND``,
    ``WAS_PROXY`` and ``WAS_BOUND``.
    The tracker only associates data with callables; it does not keep them alive.

    Only one tracker is active (installed) at a time.
    """

    def __init__(self):
        self._sources = identityweakdict()
        self._states = identityweakdict()

    @property
    def installed(self):
        return _active is self

    def install(self):
        """
        Instruments ``functools.partial`` and ``functools.update_wrapper``
        and makes this tracker the one receiving the records.
        Calling it again on an installed tracker does nothing.
        """
        global _active
        with _install_lock:
            if _active is self:
                return self

            if _active is None:
                functools.partial = partial
                functools.update_wrapper = update_wrapper
                # Original partial objects are pickled by reference to ``functools.partial``,
                # which no longer names their type.
                copyreg.pickle(_functools_partial, _reduce_partial)
                logger.info(
                    "'functools.partial' and 'functools.update_wrapper' are instrumented "
                    "for wrapper tracking")
            _active = self
        return self

    def uninstall(self):
        """
        Restores the original ``functools`` primitives if this tracker is installed.
        Records made so far are kept.
        """
        global _active
        with _install_lock:
            if _active is not self:
                return
            functools.partial = _functools_partial
            functools.update_wrapper = _functools_update_wrapper
            copyreg.dispatch_table.pop(_functools_partial, None)
            _active = None
        logger.info("'functools.partial' and 'functools.update_wrapper' are restored")

    def record_wrap(self, target, result, kind):
        """
        Records that ``result`` was produced from ``target``
        by a wrapping primitive of the given ``kind`` (``IS_PROXY`` or ``IS_BOUND``).
        """
        if result is target or not callable(target):
            return

        source = self._sources.get(target, target)
        state = kind | demote(self._states.get(target, 0))
        # A callable can be wrapped in place more than once (``update_wrapper()``
        # applied twice); what it was before is never forgotten.
        state |= demote(self._states.get(result, 0)) & (WAS_PROXY | WAS_BOUND)

        try:
            self._sources[result] = source
            self._states[result] = state
        except TypeError:
            logger.debug(
                "Cannot track %r: it does not support weak references", result)

    def _has(self, obj, bit):
        return bool(self._states.get(obj, 0) & bit)

    def is_proxy(self, obj):
        return self._has(obj, IS_PROXY)

    def is_bound(self, obj):
        return self._has(obj, IS_BOUND)

    def was_proxy(self, obj):
        return self._has(obj, WAS_PROXY)

    def was_bound(self, obj):
        return self._has(obj, WAS_BOUND)

    def get_source(self, obj):
        """
        Returns the ultimate source of ``obj``, or ``obj`` itself if it is not tracked.
        """
        return self._sources.get(obj, obj)

    def create_unwrapped_proxy(self, wrapper, wrapped, **kwds):
        """
        Calls the original ``functools.update_wrapper``; the result is not tracked.
        """
        return _functools_update_wrapper(wrapper, wrapped, **kwds)

    def bind_unwrapped(self, func, *args, **kwds):
        """
        Calls the original ``functools.partial``; the result is not tracked.
        """
        return _functools_partial(func, *args, **kwds)


def active_tracker():
    """
    Returns the installed tracker, or ``None``.
    """
    return _active


# The process-wide tracker. It is installed when ``funcfeatures`` is imported.
tracker = Tracker()
