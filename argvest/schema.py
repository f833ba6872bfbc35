r"""
Argvest schema definition: what a command line looks like, before any parsing.

Overview
- Kind: the four field kinds (positional, optional, flag, variadic).
- Opt: optional per-field metadata (name, abbrev, help, value help, forced kind).
- Field: one declared field (identifier, type, metadata), the unit build() consumes.
- fields_of(schema): reflect a dataclass or a typing.NamedTuple into Fields.
- declare(identifier, type, metadata): build one Field by hand (builder style).

Metadata attachment
- Annotated[T, Opt(...)] on the annotation, or
- dataclasses.field(metadata={"opt": Opt(...)}) on a dataclass field.

Example
    >>> @dataclass
    ... class Options:
    ...     config_file: Annotated[Path, Opt(help="the configuration file")]
    ...     bind_address: Annotated[str | None, Opt(value_help="address")] = None
    ...     verbose: bool | None = None
    ...     filenames: list[str] = field(default_factory=list)
    >>> [f.identifier for f in fields_of(Options)]
    ['config_file', 'bind_address', 'verbose', 'filenames']
"""
import dataclasses
import enum
import functools
import operator
import re
import types
import typing
from typing import Annotated, NamedTuple

from .faults import FaultCode, SchemaError
from .utils import Unset, UnsetType, StorageGuard, rename, view


class Kind(enum.Enum):
    """field kinds; FLAG is an OPTIONAL specialized to booleans with no value token."""
    POSITIONAL = "positional"
    OPTIONAL = "optional"
    FLAG = "flag"
    VARIADIC = "variadic"

    def __repr__(self):
        return "%s.%s" % (type(self).__name__, self.name)


class ArgumentType(type):
    """
    Metaclass for the immutable records of the schema and model layers.

    Responsibilities
    - expose every name listed in __fields__ as a read-only property backed by
      the guarded '-<name>' storage (see utils.view and utils.StorageGuard).
    - provide a stable __repr__/__rich_repr__ built from __fields__.
    - derive __typename__ from the class name ("PositionalArg" → "positional-arg").
    - seal the class against subclassing.
    """

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                field: view(field) for field in namespace.get("__fields__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return "%s(%s)" % (
                type(self).__name__,
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            )
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for field in type(self).__fields__:
                yield field, getattr(self, field)
        self.__rich_repr__ = __rich_repr__

        @rename("__init_subclass__")
        def __init_subclass__(cls, **options):  # NOQA: F-841
            raise TypeError("type %r is not an acceptable base type" % self.__name__)
        self.__init_subclass__ = classmethod(__init_subclass__)

        return self


def _sanitize_text(key, value, /):
    """validate one textual metadata entry; an empty string stands for Unset."""
    if not isinstance(value, str | UnsetType):
        raise SchemaError("opt %r must be a string" % key, code=FaultCode.INVALID_METADATA)
    return value or Unset


class Opt(StorageGuard, metaclass=ArgumentType):
    """
    refine how one field appears on the command line (every entry is optional).

    - name: external name, defaults to the identifier with '_' replaced by '-'.
    - abbrev: one-character short form, defaults to the first character of name.
    - help: description line used by the help text, defaults to "".
    - value_help: label of the value in option forms, defaults to name.
    - kind: a Kind forcing the classification instead of inferring it from the type.

    texts are kept as written; an empty string is the same as leaving the entry out.
    """
    __fields__ = ("name", "abbrev", "help", "value_help", "kind")

    def __new__(cls, *, name=Unset, abbrev=Unset, help=Unset, value_help=Unset, kind=Unset):
        name = _sanitize_text("name", name)
        if isinstance(name, str) and (name.startswith("-") or re.search(r"[\s:=]", name)):
            raise SchemaError("opt 'name' cannot start with '-' or contain spaces, ':' or '='",
                              code=FaultCode.INVALID_METADATA)
        abbrev = _sanitize_text("abbrev", abbrev)
        if isinstance(abbrev, str) and (len(abbrev) != 1 or abbrev in "-:=" or abbrev.isspace()):
            raise SchemaError("opt 'abbrev' must be a single visible character other than '-', ':' or '='",
                              code=FaultCode.INVALID_METADATA)
        if not isinstance(kind, Kind | UnsetType):
            raise SchemaError("opt 'kind' must be a Kind", code=FaultCode.INVALID_METADATA)

        with super().__new__(cls) as self:
            setattr(self, "-name", name)
            setattr(self, "-abbrev", abbrev)
            setattr(self, "-help", _sanitize_text("help", help))
            setattr(self, "-value_help", _sanitize_text("value_help", value_help))
            setattr(self, "-kind", kind)
        return self


class Field(NamedTuple):
    """one declared field: Python identifier, declared type and Opt metadata (or Unset)."""
    identifier: str
    type: typing.Any
    metadata: typing.Any = Unset


def _unannotate(type, /):
    """strip Annotated from a type, or from the members of a union; return (type, extras)."""
    origin = typing.get_origin(type)
    if origin is Annotated:
        return typing.get_args(type)[0], list(type.__metadata__)
    if origin in (typing.Union, types.UnionType):
        members, extras = [], []
        for member in typing.get_args(type):
            member, found = _unannotate(member)
            members.append(member)
            extras.extend(found)
        if extras:
            return typing.Union[tuple(members)], extras
    return type, []


def declare(identifier, type, metadata=Unset, /):
    """
    build a Field, unwrapping Annotated[T, Opt(...)] (or Annotated[T, Opt(...)] | None).

    raises
    - SchemaError: invalid identifier, metadata that is not an Opt, or more than one Opt.
    """
    if not isinstance(identifier, str) or not identifier.isidentifier():
        raise SchemaError("field identifier %r must be a valid identifier" % (identifier,),
                          code=FaultCode.INVALID_SCHEMA)

    opts = [] if metadata is Unset else [metadata]
    type, extras = _unannotate(type)
    opts.extend(extra for extra in extras if isinstance(extra, Opt))

    if any(not isinstance(opt, Opt) for opt in opts):
        raise SchemaError("metadata of field %r must be an Opt" % identifier,
                          field=identifier, code=FaultCode.INVALID_METADATA)
    if len(opts) > 1:
        raise SchemaError("field %r declares more than one Opt" % identifier,
                          field=identifier, code=FaultCode.INVALID_METADATA)

    return Field(identifier, type, opts[0] if opts else Unset)


def fields_of(schema, /):
    """
    reflect a dataclass or a typing.NamedTuple into an ordered list of Fields.

    order is the declaration order of the class; dataclass fields with init=False
    are skipped since they cannot be passed to the constructor.

    raises
    - SchemaError: schema is neither a dataclass nor a named tuple, or its
      annotations cannot be resolved.
    """
    if not isinstance(schema, type):
        raise SchemaError("schema must be a class, not %r" % (schema,), code=FaultCode.INVALID_SCHEMA)

    if dataclasses.is_dataclass(schema):
        members = [
            (field.name, field.metadata.get("opt", Unset))
            for field in dataclasses.fields(schema) if field.init
        ]
    elif issubclass(schema, tuple) and hasattr(schema, "_fields"):
        members = [(name, Unset) for name in schema._fields]
    else:
        raise SchemaError("schema %r must be a dataclass or a named tuple" % schema.__name__,
                          code=FaultCode.INVALID_SCHEMA)

    try:
        hints = typing.get_type_hints(schema, include_extras=True)
    except (NameError, TypeError) as exception:
        raise SchemaError("cannot resolve the annotations of %r" % schema.__name__,
                          code=FaultCode.INVALID_SCHEMA) from exception

    try:
        return [declare(name, hints[name], metadata) for name, metadata in members]
    except KeyError as exception:
        raise SchemaError("field %r of %r has no annotation" % (exception.args[0], schema.__name__),
                          field=exception.args[0], code=FaultCode.INVALID_SCHEMA) from None


__all__ = (
    "Kind",
    "ArgumentType",
    "Opt",
    "Field",
    "declare",
    "fields_of",
)
