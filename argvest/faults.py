"""
Argvest faults (schema errors, parsing errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault. Codes are
  grouped by domain so logs and searches stay predictable.
- SchemaError: build-time fault. The schema given to build() is wrong; this is a
  programming error and is never rendered for end users.
- ArgumentParsingException and its four kinds: run-time faults raised by parse()
  for a bad command line. They know how to render themselves through rich.
- trigger(): central entry point to surface a parsing fault (raise, or print and
  exit in shell mode).

Integration
- build() raises SchemaError directly.
- parse() raises the first ArgumentParsingException it meets; nothing is
  accumulated and no partial value is returned.
- ArgVester.harvest() catches the exception and calls trigger(fault, shell=True, ...).

Configuration
- The host application may define in __main__:
  • __prog__: program name shown in fault headers.
  • __styles__: mapping overriding the rich styles below.
  • __codes__: mapping from FaultCode to a custom label.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, nullify

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - parsing (111xx): command line faults, recoverable by the caller.
    - schema (211xx): schema definition faults, raised once at build time.
    """
    # --- parsing errors (11xxx) ---
    UNKNOWN_OPTION              = 11112
    UNEXPECTED_ARGUMENT         = 11121
    CONVERSION_FAILED           = 11124
    MISSING_REQUIRED_ARGUMENT   = 11125

    # --- schema errors (21xxx) ---
    INVALID_METADATA            = 21101
    INVALID_SCHEMA              = 21102
    MISPLACED_FIELD             = 21111
    UNSUPPORTED_TYPE            = 21112
    UNSUPPORTED_COLLECTION      = 21113
    KIND_MISMATCH               = 21114

    def normalize(self):
        """label shown in fault headers: the host __codes__ entry for this code, else its number."""
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class SchemaError(TypeError):
    """
    raised by build() when a schema cannot describe a command line.

    examples: a positional declared after an option, a type with no known
    conversion, a collection that is not the last field.
    """

    def __init__(self, message, /, *, field=Unset, code=FaultCode.INVALID_SCHEMA):
        super().__init__(message)
        self.message = message
        self.field = nullify(field)
        self.code = code


class ArgumentParsingException(Exception):
    """
    base of every fault raised by parse() for a bad command line.

    instances carry a message and read-only options (token, field, hint, and
    any rendering option merged by trigger()). The message text is not part of
    the contract; the concrete class is.
    """
    code = Unset
    title = "invalid command line"

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def token(self):
        """raw command line token involved in the fault, or None."""
        return self.options.get("token")

    @property
    def field(self):
        """external name of the field involved in the fault, or None."""
        return self.options.get("field")

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)

        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })
        styles.update(getattr(main, "__styles__", {}))

        def text(fragment, style=""):
            return Text(str(fragment or ""), styles[style] if colorful else "")

        prog = text(self.options.get("prog", getattr(main, "__prog__", "")), "prog-name")
        code = self.code.normalize() if self.code else "-"

        header = Text.assemble("[ ", prog, " — ", text(code, "code"), " | ", text(self.title.title(), "error-title"), " ]")
        message = text(self.message, "error-message")
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if usage := self.options.get("usage"):
            console.print(Text(usage), end="")
        sys.exit(1)

    def __replace__(self, **overrides):
        return type(self)(self.message, **(dict(self.options) | overrides))


class UnknownOptionError(ArgumentParsingException):
    code = FaultCode.UNKNOWN_OPTION
    title = "unknown option"


class ConversionError(ArgumentParsingException):
    code = FaultCode.CONVERSION_FAILED
    title = "invalid value"


class UnexpectedArgumentError(ArgumentParsingException):
    code = FaultCode.UNEXPECTED_ARGUMENT
    title = "unexpected argument"


class MissingRequiredArgumentError(ArgumentParsingException):
    code = FaultCode.MISSING_REQUIRED_ARGUMENT
    title = "missing argument"


def trigger(fault, /, **options):
    """
    surface a parsing fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ArgumentParsingException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode (shell=True) the fault is printed on stderr through rich and the
      process exits with status 1; otherwise the merged fault is raised.

    typical options
    - shell, fancy, colorful, prog, usage.
    """
    if not all(callable(getattr(fault, hook, None)) for hook in ("__trigger__", "__replace__")):
        raise TypeError("trigger() expects a parsing fault, got %r" % type(fault).__name__)
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "SchemaError",
    "ArgumentParsingException",
    "UnknownOptionError",
    "ConversionError",
    "UnexpectedArgumentError",
    "MissingRequiredArgumentError",
    "trigger",
)
