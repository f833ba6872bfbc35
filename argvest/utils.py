"""
Argvest utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the schema, model and parser layers.

Overview
- UnsetType / Unset
  • Singleton sentinel for "value not provided", distinct from None (None is the
    parsed value of an absent option, so it cannot double as "not provided").
- nullify(object, default=None)
  • Replace Unset with a concrete default, preserve every other value.
- rename("name")
  • Decorator assigning a stable __name__/__qualname__ to generated callables.
- StorageGuard / view("attr")
  • Write-once records: fields are stored while the record is being built,
    then only readable through views.
- kebab(identifier)
  • Derive the external name of a field from its Python identifier.
"""
import functools
from contextlib import contextmanager
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    "no value given" marker, used where None is a meaningful value.

    - falsy, printed as "Unset".
    - one instance per process; copies and pickles resolve to it.
    - cannot be subclassed.
    """

    @functools.cache
    def __new__(cls):
        return object.__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")


Unset = UnsetType()


def nullify(object, default=None, /):
    """
    return `default` when `object` is Unset; otherwise return `object`.

    falsy values such as None, 0 or "" are preserved, only the sentinel is replaced.
    """
    return default if object is Unset else object


def rename(name, /):
    """decorator giving a generated function a stable name (both __name__ and __qualname__)."""
    if not isinstance(name, str):
        raise TypeError("rename() argument must be a string")

    def decorator(function):
        function.__name__ = function.__qualname__ = name
        return function

    return decorator


class StorageGuard:
    """
    base of the write-once records (Opt, descriptors, model, harvester).

    fields live under '-<name>' keys, which are not valid identifiers and
    therefore never reachable with the dot syntax. They can only be written
    inside the `with` block of __new__:

        with super().__new__(cls) as self:
            setattr(self, "-info", info)

    once the block exits the record is sealed: every setattr/delattr fails,
    and '-<name>' keys are only reachable through view().
    """
    __slots__ = ("__sealed",)

    @contextmanager
    def __new__(cls):
        self = object.__new__(cls)
        object.__setattr__(self, "_StorageGuard__sealed", False)
        try:
            yield self
        finally:
            object.__setattr__(self, "_StorageGuard__sealed", True)

    def __getattribute__(self, name, /):
        if name[:1] == "-":
            raise AttributeError("%r is a hidden field of %s" % (name, type(self).__name__))
        return object.__getattribute__(self, name)

    def __setattr__(self, name, value, /):
        if name[:1] != "-" or self.__sealed:
            raise AttributeError("%s objects are immutable" % type(self).__name__)
        object.__setattr__(self, name, value)

    def __delattr__(self, name, /):
        raise AttributeError("%s objects are immutable" % type(self).__name__)


def view(name):
    """
    read-only property over the hidden field '-<name>'.

    lists are returned as tuples and dicts as MappingProxyType, so a record
    never hands out a container its caller could mutate.
    """

    @rename(name)
    def getter(self):
        value = object.__getattribute__(self, "-" + name)
        match value:
            case list():
                return tuple(value)
            case dict():
                return MappingProxyType(value)
        return value

    return property(getter)


def kebab(identifier, /):
    """external name of a field: underscores become hyphens ("bind_address" → "bind-address")."""
    if not isinstance(identifier, str):
        raise TypeError("kebab() argument must be a string")
    return identifier.replace("_", "-")


__all__ = (
    "UnsetType",
    "Unset",
    "nullify",
    "rename",
    "StorageGuard",
    "view",
    "kebab",
)
