r"""
Argvest parser: scan a raw argument vector against an ArgumentModel.

Scanning (single left-to-right pass, one token of lookahead taken on demand)
- a token starting with '-' is an option token:
  • compact form: split at the first ':' or '=' into key and inline value
    ('--level:error', '--level=error', '-l=error').
  • spaced form: the key alone; a non-flag option takes the next token as its
    value, a flag behaves as if its inline value were "true".
  • an unknown key fails with UnknownOptionError.
- any other token fills the next positional field; once every positional is
  filled it goes to the variadic field, or fails with UnexpectedArgumentError.
- positionals and options may be interleaved freely.

Afterwards
- an unfilled positional fails with MissingRequiredArgumentError.
- repeatable options and the variadic field are finalized by their collector.
- the slots are handed to the model factory in declaration order.

Every failure aborts the whole parse; nothing is accumulated and no partial value
escapes. The model is only read, so parse() is reentrant.
"""
import logging
from collections.abc import Sequence

from .faults import (
    ConversionError,
    MissingRequiredArgumentError,
    UnexpectedArgumentError,
    UnknownOptionError,
)
from .utils import Unset

logger = logging.getLogger(__name__)


def split(token, /):
    """
    split a compact option token at its first ':' or '=' delimiter.

    returns
    - (key, value) when a delimiter exists; value may be empty.
    - (token, None) otherwise.
    """
    for index, char in enumerate(token):
        if char in ":=":
            return token[:index], token[index + 1:]
    return token, None


def convert(descriptor, value, /, *, token=None):
    """apply the converter of a descriptor, turning any ValueError/TypeError into ConversionError."""
    try:
        return descriptor.converter(value)
    except (ValueError, TypeError) as exception:
        raise ConversionError(
            "invalid value %r for argument %r" % (value, descriptor.info.name),
            field=descriptor.info.name,
            token=value if token is None else token,
            hint=str(exception),
        ) from exception


def parse(model, args, /):
    """
    parse raw tokens into the value built by the model factory.

    raises
    - TypeError: args is not a sequence of strings.
    - UnknownOptionError: an option token matches no registered option.
    - ConversionError: a value cannot be converted to its field type.
    - UnexpectedArgumentError: a non-option token is left with no field to fill.
    - MissingRequiredArgumentError: a positional field, or the value of an option, is missing.
    """
    if isinstance(args, str) or not isinstance(args, Sequence):
        raise TypeError("parse() arguments must be a sequence of strings")
    if not all(isinstance(arg, str) for arg in args):
        raise TypeError("parse() arguments must be strings")

    slots = [None] * model.size
    repeats = {descriptor: [] for descriptor in model.optionals if descriptor.repeatable}
    variadics = [] if model.variadic is not None else Unset
    cursor = 0

    index = 0
    while index < len(args):
        token = args[index]
        index += 1

        if token.startswith("-"):
            key, value = split(token)
            try:
                descriptor = model.options[key]
            except KeyError:
                raise UnknownOptionError(
                    "unknown option %r" % token,
                    token=token,
                    hint="known options are %s" % (", ".join(model.options) or "none"),
                ) from None
            if value is None:
                if descriptor.flag:
                    value = "true"
                elif index < len(args):
                    value = args[index]
                    index += 1
                else:
                    raise MissingRequiredArgumentError(
                        "option %r requires a value" % token,
                        token=token,
                        field=descriptor.info.name,
                        hint="pass it as %s" % descriptor.form(token),
                    )
            if descriptor.repeatable:
                repeats[descriptor].append(convert(descriptor, value, token=token))
            else:
                slots[descriptor.position] = convert(descriptor, value, token=token)
            continue

        if cursor < len(model.positionals):
            descriptor = model.positionals[cursor]
            slots[descriptor.position] = convert(descriptor, token)
            cursor += 1
            continue

        if variadics is not Unset:
            variadics.append(convert(model.variadic, token))
            continue

        raise UnexpectedArgumentError(
            "unexpected argument %r" % token,
            token=token,
            hint="this command takes %d positional argument(s)" % len(model.positionals),
        )

    if cursor < len(model.positionals):
        missing = [descriptor.info.name for descriptor in model.positionals[cursor:]]
        raise MissingRequiredArgumentError(
            "required arguments are not provided: %s" % ", ".join(missing),
            field=missing[0],
            hint="missing %s" % " ".join("<%s>" % name for name in missing),
        )

    for descriptor, values in repeats.items():
        slots[descriptor.position] = descriptor.collector(values)
    if variadics is not Unset:
        slots[model.variadic.position] = model.variadic.collector(variadics)

    logger.debug("parsed %d argument(s) into %d slot(s)", len(args), model.size)
    return model.factory(*slots)


__all__ = (
    "split",
    "convert",
    "parse",
)
