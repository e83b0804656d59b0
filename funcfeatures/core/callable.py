import types

from funcfeatures.errors import InvalidArgumentError


WrapperDescriptorType = type(str.__getitem__)
MethodWrapperType = type("a".__getitem__)

# Objects that carry their own name, qualified name and (possibly) source.
ROUTINE_TYPES = (
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodDescriptorType,
    types.ClassMethodDescriptorType,
    WrapperDescriptorType,
    )


class Callable(object):

    # Type of calls:
    # - function (including lambdas)
    # - type (construction)
    # - bound method (instance method, or class method bound to a type)
    # - builtin method wrapper
    # - object with a __call__ method

    def __init__(self, func_obj, self_obj=None, init=False):
        self.func_obj = func_obj
        self.self_obj = self_obj
        self.init = init

    def __eq__(self, other):
        return (self.func_obj is other.func_obj
            and self.self_obj is other.self_obj
            and self.init == other.init)

    def __repr__(self):
        return "Callable({func}, self_obj={self_obj}, init={init})".format(
            func=repr(self.func_obj), self_obj=repr(self.self_obj), init=self.init)

    @property
    def owner_name(self):
        """
        Returns the name of the class owning the callable
        according to its qualified name, or ``None`` if the callable
        is defined at module level or inside a function.
        """
        qualname = getattr(self.func_obj, '__qualname__', None)
        if not isinstance(qualname, str):
            return None
        parts = qualname.split('.')
        if len(parts) < 2 or parts[-2] == '<locals>':
            return None
        return parts[-2]

    @property
    def is_member(self):
        """
        Whether the callable is a routine owned by an object or a class.
        """
        if self.init:
            return False
        return self.self_obj is not None or self.owner_name is not None


def inspect_callable(obj):

    if type(obj) in ROUTINE_TYPES:
        if isinstance(obj, types.BuiltinFunctionType):
            # Builtin functions of a module have the module as ``__self__``.
            self_obj = getattr(obj, '__self__', None)
            if isinstance(self_obj, types.ModuleType):
                self_obj = None
            return Callable(obj, self_obj=self_obj)
        return Callable(obj)

    if isinstance(obj, type):
        return Callable(obj, init=True)

    if type(obj) == types.MethodType:
        return Callable(obj.__func__, self_obj=obj.__self__)

    if type(obj) == MethodWrapperType:
        return Callable(
            getattr(obj.__objclass__, obj.__name__),
            self_obj=obj.__self__)

    if hasattr(obj, '__call__'):
        return inspect_callable(obj.__call__)

    raise InvalidArgumentError(repr(obj) + " is not callable")
