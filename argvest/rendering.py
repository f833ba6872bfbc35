r"""
Argvest help renderer: derive the usage text from an ArgumentModel.

Format (every line ends with a newline)

    netapp <config-file> [options] <filenames...>
      with:
        config-file: the configuration file
        filenames: file names exposed as services

      options:
        bind-address: bind address of the service
          -b address or --bind-address address
        verbose: logged data verbose mode
          -v or --verbose

- usage line: application, positionals in declaration order, "[options]" when
  any option exists, then the variadic field.
- "with:" lists positionals then the variadic field; omitted when both are absent.
- "options:" groups the tokens of each option (short then long), entries sorted
  by name; omitted without options.

render() is a pure function of the model: same model, same text.
"""
from rich.text import Text

from .schema import Kind

DESCRIPTION_INDENT = " " * 4
FORM_INDENT = " " * 6


def usage(model, application, /):
    """the first line of the help text, without its newline."""
    head = " ".join([application, *("<%s>" % descriptor.info.name for descriptor in model.positionals)])
    middle = " [options] " if model.options else " "
    tail = "<%s...>" % model.variadic.info.name if model.variadic is not None else ""
    return head + middle + tail


def _grouped(model, /):
    """(descriptor, tokens) pairs, one per option field, sorted by name."""
    groups = {}
    for token, descriptor in model.options.items():
        groups.setdefault(descriptor, []).append(token)
    return sorted(groups.items(), key=lambda item: item[0].info.name)


def render(model, application, /):
    """return the help text of a model for the given application name."""
    if not isinstance(application, str):
        raise TypeError("render() application name must be a string")

    lines = [usage(model, application)]

    described = [
        descriptor for descriptor in model.descriptors
        if descriptor.kind in (Kind.POSITIONAL, Kind.VARIADIC)
    ]
    if described:
        lines.append("  with:")
        lines.extend(DESCRIPTION_INDENT + descriptor.info.description for descriptor in described)

    if model.options:
        lines.append("")
        lines.append("  options:")
        for descriptor, tokens in _grouped(model):
            lines.append(DESCRIPTION_INDENT + descriptor.info.description)
            lines.append(FORM_INDENT + " or ".join(map(descriptor.form, tokens)))

    return "\n".join(lines) + "\n"


def highlight(text, /, *, colorful=True):
    """
    rich rendition of a help text: usage line in bold, block titles and field
    names tinted. The plain characters are exactly those of render().
    """
    result = Text()
    for number, line in enumerate(text.splitlines(keepends=True)):
        if not colorful:
            result.append(line)
        elif number == 0:
            result.append(line, style="bold #E6E6F0")
        elif line.strip() in ("with:", "options:"):
            result.append(line, style="bold #FF4DA6")
        elif line.startswith(FORM_INDENT):
            result.append(line, style="#9CE19C")
        elif ": " in line:
            name, separator, rest = line.partition(": ")
            result.append(name, style="bold #00E5FF")
            result.append(separator + rest)
        else:
            result.append(line)
    return result


__all__ = (
    "usage",
    "render",
    "highlight",
)
