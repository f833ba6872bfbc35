"""
Scalar converters and collection finalizers.

Both are closed registries keyed by type: adding a supported type means adding a
table entry. Lookups happen once, at build time; an unknown type is a SchemaError.
Converters are pure functions from a raw token to a value and raise ValueError
on malformed text.
"""
import builtins
import enum
import functools
import pathlib
import re
from collections.abc import Sequence, MutableSequence, Set, MutableSet

from .faults import FaultCode, SchemaError
from .utils import rename

INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1


def _string(token, /):
    return token


def _integer(token, /):
    if not re.fullmatch(r"[+-]?[0-9]+", token):
        raise ValueError("invalid integer %r" % token)
    value = int(token)
    if not INT_MIN <= value <= INT_MAX:
        raise ValueError("integer %r out of 32-bit range" % token)
    return value


def _number(token, /):
    if not re.fullmatch(r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|NaN|Infinity)", token):
        raise ValueError("invalid number %r" % token)
    return float(token)


def _boolean(token, /):
    match token:
        case "true":
            return True
        case "false":
            return False
    raise ValueError("invalid boolean %r (expected 'true' or 'false')" % token)


_CONVERTERS = {
    str: _string,
    pathlib.Path: pathlib.Path,
    int: _integer,
    float: _number,
    bool: _boolean,
}

_COLLECTORS = {
    list: list,
    tuple: tuple,
    set: set,
    frozenset: frozenset,
    Sequence: tuple,
    MutableSequence: list,
    Set: frozenset,
    MutableSet: set,
}


@functools.cache
def _enumeration(type, /):
    @rename(type.__name__.lower())
    def convert(token, /):
        try:
            return type[token]
        except KeyError:
            raise ValueError("%r is not one of %s" % (token, ", ".join(type.__members__))) from None
    return convert


def _is_enum(type, /):
    try:
        return isinstance(type, builtins.type) and issubclass(type, enum.Enum)
    except TypeError:
        return False


def is_scalar(type, /):
    """whether a converter exists for the given type."""
    try:
        if type in _CONVERTERS:
            return True
    except TypeError:
        return False
    return _is_enum(type)


def converter(type, /, *, field=None):
    """
    return the converter for a scalar type.

    raises
    - SchemaError: no known conversion for the type.
    """
    try:
        return _CONVERTERS[type]
    except (KeyError, TypeError):
        pass
    if _is_enum(type):
        return _enumeration(type)
    raise SchemaError("no known conversion from a string to %r for field %r" % (type, field),
                      field=field, code=FaultCode.UNSUPPORTED_TYPE)


def is_collection(type, /):
    """whether a finalizer exists for the given container origin."""
    try:
        return type in _COLLECTORS
    except TypeError:
        return False


def collector(type, /, *, field=None):
    """
    return the finalizer for a container origin (list, tuple, set, frozenset, ...).

    list-like finalizers keep order and duplicates, set-like ones de-duplicate.

    raises
    - SchemaError: the container cannot be built.
    """
    try:
        return _COLLECTORS[type]
    except (KeyError, TypeError):
        raise SchemaError("don't know how to create a %r for field %r" % (type, field),
                          field=field, code=FaultCode.UNSUPPORTED_COLLECTION) from None


__all__ = (
    "is_scalar",
    "is_collection",
    "converter",
    "collector",
)
