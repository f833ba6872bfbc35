"""
Argvest argument model: the validated, immutable shape of a command line.

Descriptors
- Info: external name, abbrev, help and value help of one field.
- PositionalArg: required value matched by encounter order of non-option tokens.
- OptionalArg: value keyed by '-<abbrev>' or '--<name>'; a flag when it wraps a
  boolean (presence alone sets True), repeatable when it carries a collector.
- VariadicArg: the single trailing field collecting every remaining token.

ArgumentModel
- positionals: tuple of PositionalArg in declaration order.
- optionals: tuple of every OptionalArg in declaration order, including those
  whose tokens were all taken by a later field.
- options: read-only mapping from option token to OptionalArg; both tokens of a
  field map to the same descriptor.
- variadic: VariadicArg or None.
- size: number of slots (one per declared field).
- factory: callable receiving the slots positionally, in declaration order.

build(fields, factory=Unset)
- classifies every field, enforces the positional → option → variadic order,
  resolves converters and collectors once, and returns an ArgumentModel that can
  be shared by any number of concurrent parse()/render() calls.
"""
import collections
import logging
import types
import typing
from types import MappingProxyType

from .converters import converter, collector, is_collection, is_scalar
from .faults import FaultCode, SchemaError
from .schema import ArgumentType, Field, Kind, declare
from .utils import Unset, StorageGuard, kebab, nullify

logger = logging.getLogger(__name__)


class Info(StorageGuard, metaclass=ArgumentType):
    """names and help texts of one field, with defaults already resolved."""
    __fields__ = ("name", "abbrev", "help", "value_help")

    def __new__(cls, name, abbrev, help, value_help):
        with super().__new__(cls) as self:
            setattr(self, "-name", name)
            setattr(self, "-abbrev", abbrev)
            setattr(self, "-help", help)
            setattr(self, "-value_help", value_help)
        return self

    @classmethod
    def create(cls, identifier, metadata=Unset, /):
        """resolve the defaults of an Opt (or of no Opt at all) for a field identifier."""
        name = nullify(getattr(metadata, "name", Unset), kebab(identifier))
        return cls(
            name,
            nullify(getattr(metadata, "abbrev", Unset), name[0]),
            nullify(getattr(metadata, "help", Unset), ""),
            nullify(getattr(metadata, "value_help", Unset), name),
        )

    @property
    def description(self):
        return "%s: %s" % (self.name, self.help)


class PositionalArg(StorageGuard, metaclass=ArgumentType):
    __fields__ = ("info", "converter", "position")
    kind = Kind.POSITIONAL

    def __new__(cls, info, converter, position):
        with super().__new__(cls) as self:
            setattr(self, "-info", info)
            setattr(self, "-converter", converter)
            setattr(self, "-position", position)
        return self


class OptionalArg(StorageGuard, metaclass=ArgumentType):
    __fields__ = ("info", "converter", "position", "flag", "collector")

    def __new__(cls, info, converter, position, flag=False, collector=Unset):
        with super().__new__(cls) as self:
            setattr(self, "-info", info)
            setattr(self, "-converter", converter)
            setattr(self, "-position", position)
            setattr(self, "-flag", flag)
            setattr(self, "-collector", collector)
        return self

    @property
    def kind(self):
        return Kind.FLAG if self.flag else Kind.OPTIONAL

    @property
    def repeatable(self):
        return self.collector is not Unset

    def form(self, token, /):
        """one usage form of this option: the bare token for flags, token + value help otherwise."""
        return token if self.flag else "%s %s" % (token, self.info.value_help)


class VariadicArg(StorageGuard, metaclass=ArgumentType):
    __fields__ = ("info", "converter", "position", "collector")
    kind = Kind.VARIADIC

    def __new__(cls, info, converter, position, collector):
        with super().__new__(cls) as self:
            setattr(self, "-info", info)
            setattr(self, "-converter", converter)
            setattr(self, "-position", position)
            setattr(self, "-collector", collector)
        return self


class ArgumentModel(StorageGuard, metaclass=ArgumentType):
    __fields__ = ("positionals", "optionals", "options", "variadic", "size", "factory")

    def __new__(cls, positionals, optionals, options, variadic, size, factory):
        with super().__new__(cls) as self:
            setattr(self, "-positionals", tuple(positionals))
            setattr(self, "-optionals", tuple(optionals))
            setattr(self, "-options", MappingProxyType(dict(options)))
            setattr(self, "-variadic", variadic)
            setattr(self, "-size", size)
            setattr(self, "-factory", factory)
        return self

    @property
    def descriptors(self):
        """every descriptor in declaration order."""
        variadic = () if self.variadic is None else (self.variadic,)
        return [*self.positionals, *self.optionals, *variadic]


def _optional(type, /):
    """return T for `T | None` / `Optional[T]`, Unset for anything else."""
    if typing.get_origin(type) not in (typing.Union, types.UnionType):
        return Unset
    arguments = typing.get_args(type)
    if len(arguments) != 2 or types.NoneType not in arguments:
        return Unset
    return next(argument for argument in arguments if argument is not types.NoneType)


def _collection(type, /):
    """return (origin, element) for list[T], set[T], tuple[T, ...], ...; Unset for anything else."""
    origin = typing.get_origin(type)
    if not is_collection(origin):
        return Unset
    arguments = typing.get_args(type)
    if origin is tuple:
        if len(arguments) != 2 or arguments[1] is not Ellipsis:
            return Unset
        return origin, arguments[0]
    if len(arguments) != 1:
        return Unset
    return origin, arguments[0]


def _infer(field, last, /):
    """kind of a field without explicit Opt.kind; Unset when the type fits no kind."""
    if is_scalar(field.type):
        return Kind.POSITIONAL
    if (wrapped := _optional(field.type)) is not Unset:
        return Kind.FLAG if wrapped is bool else Kind.OPTIONAL
    if last and _collection(field.type) is not Unset:
        return Kind.VARIADIC
    return Unset


def _mismatch(field, kind, /):
    return SchemaError("field %r of type %r cannot be %s" % (field.identifier, field.type, kind.value),
                       field=field.identifier, code=FaultCode.KIND_MISMATCH)


def _describe(field, kind, position, /):
    """build the descriptor of one field for an already decided kind."""
    identifier = field.identifier
    info = Info.create(identifier, field.metadata)
    scalar = nullify(_optional(field.type), field.type)

    match kind:
        case Kind.POSITIONAL:
            if _collection(scalar) is not Unset:
                raise _mismatch(field, kind)
            return PositionalArg(info, converter(scalar, field=identifier), position)
        case Kind.FLAG:
            if scalar is not bool:
                raise _mismatch(field, kind)
            return OptionalArg(info, converter(bool, field=identifier), position, flag=True)
        case Kind.OPTIONAL:
            if (collection := _collection(scalar)) is not Unset:
                origin, element = collection
                return OptionalArg(info, converter(element, field=identifier), position,
                                   collector=collector(origin, field=identifier))
            return OptionalArg(info, converter(scalar, field=identifier), position, flag=scalar is bool)
        case Kind.VARIADIC:
            if (collection := _collection(field.type)) is Unset:
                raise _mismatch(field, kind)
            origin, element = collection
            return VariadicArg(info, converter(element, field=identifier), position,
                               collector(origin, field=identifier))


def _arguments(identifiers, /):
    """default factory: a named tuple over the field identifiers."""
    return collections.namedtuple("Arguments", identifiers)


def build(fields, factory=Unset, /):
    """
    classify a field list into an ArgumentModel.

    parameters
    - fields: iterable of Field (or (identifier, type[, metadata]) tuples), in declaration order.
    - factory: callable receiving one value per field positionally; defaults to a
      named tuple over the identifiers.

    classification (explicit Opt.kind wins over inference)
    - scalar type → positional
    - `T | None` → optional, flag when T is bool
    - container as the last field → variadic

    raises
    - SchemaError: misplaced field, unsupported scalar or container type, a kind
      forced onto an incompatible type, duplicated identifiers.
    """
    fields = [field if isinstance(field, Field) else declare(*field) for field in fields]
    identifiers = [field.identifier for field in fields]
    if len(set(identifiers)) != len(identifiers):
        raise SchemaError("field identifiers must be unique", code=FaultCode.INVALID_SCHEMA)

    positionals = []
    optionals = []
    options = {}
    variadic = None
    phase = Kind.POSITIONAL

    for position, field in enumerate(fields):
        last = position == len(fields) - 1
        kind = getattr(field.metadata, "kind", Unset)
        if kind is Unset:
            kind = _infer(field, last)
        if kind is Unset:
            raise SchemaError("unrecognized type %r for field %r" % (field.type, field.identifier),
                              field=field.identifier, code=FaultCode.UNSUPPORTED_TYPE)

        match kind:
            case Kind.POSITIONAL if phase is not Kind.POSITIONAL:
                raise SchemaError("positional field %r must be declared before any option" % field.identifier,
                                  field=field.identifier, code=FaultCode.MISPLACED_FIELD)
            case Kind.VARIADIC if not last:
                raise SchemaError("variadic field %r must be the last field" % field.identifier,
                                  field=field.identifier, code=FaultCode.MISPLACED_FIELD)

        descriptor = _describe(field, kind, position)
        match descriptor:
            case PositionalArg():
                positionals.append(descriptor)
            case OptionalArg():
                phase = Kind.OPTIONAL
                optionals.append(descriptor)
                for token in ("-" + descriptor.info.abbrev, "--" + descriptor.info.name):
                    if (previous := options.get(token)) is not None:
                        logger.warning("option %s of field %r overrides the one of field %r",
                                       token, descriptor.info.name, previous.info.name)
                    options[token] = descriptor
            case VariadicArg():
                variadic = descriptor
        logger.debug("field %r classified as %s", field.identifier, descriptor.kind.value)

    if factory is Unset:
        try:
            factory = _arguments(identifiers)
        except ValueError as exception:
            raise SchemaError("cannot build a default factory over %r" % identifiers,
                              code=FaultCode.INVALID_SCHEMA) from exception
    elif not callable(factory):
        raise SchemaError("factory must be callable", code=FaultCode.INVALID_SCHEMA)

    return ArgumentModel(positionals, optionals, options, variadic, len(fields), factory)


__all__ = (
    "Info",
    "PositionalArg",
    "OptionalArg",
    "VariadicArg",
    "ArgumentModel",
    "build",
)
