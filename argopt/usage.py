"""
Usage text derived from a contract's metadata.

Layout (UNIX style)

    USAGE
    app --path=file [--verbose] files

    ARGUMENTS
    files       Files to process

    OPTIONS
    --path=file Where to write the result
     -p
    --verbose   Print every step

- the summary lists required options first, then optional ones in brackets,
  each group sorted case-insensitively, then the value collector;
- headers and aliases share one left column, descriptions are wrapped in the
  right column and aliases fill the rows below their header.
"""
import itertools
import logging
import os
import sys

from rich.console import Console

from .fields import FieldKind, describe
from .tokens import OptionStyle
from .utils import Unset

logger = logging.getLogger(__name__)


def wrap(text, width, /):
    """
    Break text into lines of at most 'width' characters.

    Lines break at the last space at or before the limit (the run of spaces is dropped);
    a word longer than the limit is cut at the limit. Empty text yields [""].
    """
    if width < 1:
        raise ValueError("wrap() width must be at least 1")

    lines = []
    while len(text) > width:
        cut = text.rfind(" ", 0, width + 1)
        if cut < 1:
            lines.append(text[:width])
            text = text[width:]
        else:
            lines.append(text[:cut].rstrip(" "))
            text = text[cut:].lstrip(" ")
    lines.append(text)
    return lines


def _executable():
    return getattr(__import__("__main__"), "__prog__", None) or os.path.basename(sys.argv[0])


def _summary(executable, options, collector, style, /):
    def render(descriptor):
        rendered = style.prefix + descriptor.name
        if descriptor.metavar:
            rendered += style.separator + descriptor.metavar
        return rendered

    parts = [executable]
    parts.extend(render(descriptor) for descriptor in options if descriptor.required)
    parts.extend("[%s]" % render(descriptor) for descriptor in options if not descriptor.required)
    if collector is not None:
        parts.append(collector.display)
    return " ".join(parts)


def _rows(descriptor, column, width, style, /):
    left = [descriptor.header(style)]
    left.extend(" " + style.alias_prefix + alias for alias in sorted(descriptor.aliases, key=str.casefold))
    right = wrap(descriptor.descr, max(width - column, 1))
    return [
        (header.ljust(column) + line)
        for header, line in itertools.zip_longest(left, right, fillvalue="")
    ]


def get_description(contract, /, executable=None, width=100, style=OptionStyle.UNIX):
    """
    Format the usage text of a contract.

    Parameters
    - contract: contract class or instance.
    - executable: program name shown first in the summary (None: __main__.__prog__
      when defined, otherwise the base name of sys.argv[0]).
    - width: maximum line width used for wrapping (at least 1).
    - style: OptionStyle deciding prefixes and separators.

    Returns
    - the text, starting and ending with a newline; identical inputs give identical text.

    Raises
    - ContractError when the contract is declared incorrectly.
    """
    if not isinstance(style, OptionStyle):
        raise TypeError("style must be an OptionStyle")
    if width < 1:
        raise ValueError("width must be at least 1")

    descriptors = describe(contract)
    collector = next((d for d in descriptors if d.kind is FieldKind.VALUE_COLLECTOR), None)
    options = sorted(
        (d for d in descriptors if d.kind not in (FieldKind.VALUE_COLLECTOR, FieldKind.EXCLUDED)),
        key=lambda descriptor: descriptor.name.casefold(),
    )
    if executable is None:
        executable = _executable()

    column = max(
        itertools.chain(
            (len(descriptor.header(style)) for descriptor in options),
            (len(" " + style.alias_prefix + alias) for descriptor in options for alias in descriptor.aliases),
            (len(collector.display),) if collector is not None else (),
        ),
        default=0,
    ) + 1
    logger.debug("usage column at %d for width %d", column, width)

    blocks = ["\n".join(["USAGE", *wrap(_summary(executable, options, collector, style), width)])]
    if collector is not None:
        blocks.append("\n".join(["ARGUMENTS", *_rows(collector, column, width, style)]))
    if options:
        blocks.append("\n".join(["OPTIONS", *itertools.chain.from_iterable(
            _rows(descriptor, column, width, style) for descriptor in options
        )]))
    return "\n" + "\n\n".join(blocks) + "\n"


def print_usage(contract, /, executable=None, width=Unset, style=OptionStyle.UNIX, console=Unset):
    """
    Print the usage text through rich (no markup, emoji or highlighting).

    width defaults to the console width; console defaults to a stdout Console.
    """
    if console is Unset:
        console = Console()
    if width is Unset:
        width = console.width
    console.print(
        get_description(contract, executable, width, style),
        markup=False,
        highlight=False,
        emoji=False,
        soft_wrap=True,
        end="",
    )


__all__ = (
    "wrap",
    "get_description",
    "print_usage",
)
