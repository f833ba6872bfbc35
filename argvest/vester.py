"""
ArgVester: a command line arguments harvester built from a class.

What this module provides
- ArgVester.create(schema): reflect a dataclass or named tuple, build its model once.
- ArgVester.of(fields, factory): same from an explicit field list (builder style).
- parse(args): populate a fresh schema instance, or raise an ArgumentParsingException.
- to_help(application) / print_help(application): usage text from the same model.
- harvest(args): parse sys.argv[1:] by default; on a bad command line, print the
  fault and the usage on stderr (rich) and exit with status 1.

Quick start
    from dataclasses import dataclass, field
    from pathlib import Path
    from typing import Annotated

    from argvest import ArgVester, Opt

    @dataclass(frozen=True)
    class Options:
        config_file: Annotated[Path, Opt(help="the configuration file")]
        bind_address: Annotated[str | None, Opt(value_help="address")] = None
        verbose: bool | None = None
        filenames: list[str] = field(default_factory=list)

    options = ArgVester.create(Options).harvest()

The instance is immutable and may be shared between threads.
"""
import logging
import os.path
import sys

from rich.console import Console

from .faults import ArgumentParsingException, trigger
from .model import build
from .parsing import parse
from .rendering import highlight, render
from .schema import fields_of
from .utils import Unset, StorageGuard, nullify

logger = logging.getLogger(__name__)


def _program():
    """default application name: __prog__ of __main__, else the script name."""
    main = __import__("__main__")
    try:
        return main.__prog__
    except AttributeError:
        pass
    return os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "app"


class ArgVester(StorageGuard):
    """
    arguments harvester bound to one schema.

    instances are created through create() or of(); the model is built once and
    reused for every parse()/to_help() call.
    """

    def __new__(cls, model, schema=Unset, /):
        with super().__new__(cls) as self:
            setattr(self, "-model", model)
            setattr(self, "-schema", schema)
        return self

    @property
    def model(self):
        return object.__getattribute__(self, "-model")

    @property
    def schema(self):
        return nullify(object.__getattribute__(self, "-schema"))

    @classmethod
    def create(cls, schema, /):
        """
        build a harvester from a dataclass or a typing.NamedTuple.

        raises
        - SchemaError: the class does not describe a valid command line.
        """
        fields = fields_of(schema)
        identifiers = [field.identifier for field in fields]

        def factory(*slots):
            return schema(**dict(zip(identifiers, slots)))

        model = build(fields, factory)
        logger.debug("harvester created for %s with %d field(s)", schema.__qualname__, len(fields))
        return cls(model, schema)

    @classmethod
    def of(cls, fields, factory=Unset, /):
        """build a harvester from an explicit field list (see model.build)."""
        return cls(build(fields, factory))

    def parse(self, args, /):
        """parse raw tokens; see parsing.parse for the raised faults."""
        return parse(self.model, args)

    def to_help(self, application, /):
        """help text for the given application name (pure, deterministic)."""
        return render(self.model, application)

    def print_help(self, application=Unset, /, *, console=Unset, colorful=True):
        """print the help text through rich (stdout by default)."""
        console = nullify(console, Console())
        console.print(highlight(self.to_help(nullify(application, _program())), colorful=colorful), end="")

    def harvest(self, args=Unset, /, *, prog=Unset, fancy=False, colorful=True):
        """
        parse sys.argv[1:] (or args) like a command line program would.

        on ArgumentParsingException the fault is rendered on stderr together with
        the help text and the process exits with status 1.
        """
        args = nullify(args, sys.argv[1:])
        prog = nullify(prog, _program())
        try:
            return self.parse(args)
        except ArgumentParsingException as exception:
            logger.debug("bad command line: %s", exception.message)
            trigger(
                exception,
                shell=True,
                fancy=fancy,
                colorful=colorful,
                prog=prog,
                usage=self.to_help(prog),
            )

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, self.schema if self.schema is not None else self.model)

    def __rich_repr__(self):
        yield "schema", self.schema
        yield "model", self.model


__all__ = (
    "ArgVester",
)
