"""
Container types used across the package.

The classes in this module have lowercase names to match the built-in
``dict``, ``set`` and ``frozenset`` they stand next to.
The prefix 'immutable' marks the containers that are changed with pure methods
(returning a new container instead of changing the existing one).
"""

import weakref


class immutabledict(dict):
    """
    An immutable version of ``dict``.

    Mutating syntax (``del d[k]``, ``d[k] = v``, ``d |= other``)
    and the mutating methods of ``dict`` are prohibited;
    pure methods ``set`` and ``update`` return the new dictionary instead.
    If a pure method does not change the dictionary,
    the source dictionary itself is returned as the new dictionary.
    """

    def _mutate(self, *args, **kwds):
        raise AttributeError("Immutable dict does not support mutation")

    __setitem__ = __delitem__ = __ior__ = _mutate
    clear = pop = popitem = setdefault = _mutate

    def set(self, key, value):
        if key in self and self[key] is value:
            return self
        else:
            new_dict = self.__class__(self)
            dict.__setitem__(new_dict, key, value)
            return new_dict

    def update(self, *args, **kwds):

        if len(kwds) == 0 and len(args) == 0:
            return self

        new_vals = dict(args[0]) if len(args) > 0 else {}

        new_vals.update(kwds)

        for kwd, value in new_vals.items():
            if self.get(kwd, None) is not value:
                break
        else:
            return self

        new_dict = self.__class__(self)
        dict.update(new_dict, new_vals)
        return new_dict

    def __repr__(self):
        return "immutabledict(" + dict.__repr__(self) + ")"


class immutableadict(immutabledict):
    """
    A subclass of ``immutabledict`` with values being accessible as attributes
    (e.g. ``d['a']`` is equivalent to ``d.a``).
    """

    def __getattr__(self, attr):
        try:
            return self[attr]
        except KeyError:
            raise AttributeError(attr)

    def __setattr__(self, attr, value):
        raise AttributeError("Immutable dict does not support mutating attribute setting")

    def __delattr__(self, attr):
        raise AttributeError("Immutable dict does not support mutating attribute deletion")

    def __repr__(self):
        return "immutableadict(" + dict.__repr__(self) + ")"


class identityweakdict(object):
    """
    A mapping keyed by object identity that does not keep its keys alive.

    Unlike ``weakref.WeakKeyDictionary``, keys are never compared with ``==``,
    so two equal but distinct objects get separate entries,
    and objects with an unusual ``__eq__`` or ``__hash__`` can be used as keys.
    An entry disappears when its key is garbage-collected.
    Setting a key that does not support weak references raises ``TypeError``.
    """

    def __init__(self):
        self._data = {}

    def __setitem__(self, key, value):
        ident = id(key)
        data = self._data

        def remove(ref):
            entry = data.get(ident)
            if entry is not None and entry[0] is ref:
                del data[ident]

        data[ident] = (weakref.ref(key, remove), value)

    def _entry(self, key):
        entry = self._data.get(id(key))
        # The id of a collected key may already belong to a new object
        # whose removal callback has not run yet.
        if entry is None or entry[0]() is not key:
            return None
        return entry

    def get(self, key, default=None):
        entry = self._entry(key)
        return default if entry is None else entry[1]

    def __getitem__(self, key):
        entry = self._entry(key)
        if entry is None:
            raise KeyError(key)
        return entry[1]

    def __contains__(self, key):
        return self._entry(key) is not None

    def __delitem__(self, key):
        if self._entry(key) is None:
            raise KeyError(key)
        del self._data[id(key)]

    def __len__(self):
        return sum(1 for ref, _ in self._data.values() if ref() is not None)

    def __repr__(self):
        return "identityweakdict(<" + str(len(self)) + " entries>)"
