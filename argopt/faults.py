"""
Argopt faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every issue the binder
  can surface. Codes are grouped by domain to keep messages searchable.
- ArgoptException / ArgoptWarning: base types carrying message + options that
  know how to render themselves through rich in a short, actionable way.
- ContractError: configuration mistakes in a contract (raised immediately).
- InputError, FormatFailure, MalformedTokenError: user-input problems. These are
  never raised to the caller of parse(); the engine collects them as parsing
  errors and keeps going.
- report(): render a batch of parsing errors to stderr.

Host configuration (optional attributes on __main__)
- __prog__: program name shown in fault headers.
- __styles__: palette overrides for the rich renderers.
- __codes__: relabel fault codes (FaultCode -> str).
"""
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce


class FaultCode(IntEnum):
    """
    canonical fault codes used across the binder (stable identifiers).

    grouping (by high-level domain)
    - contract errors (21xxx)
      • NOT_A_CONTRACT, FROZEN_CONTRACT, INVALID_METADATA, DUPLICATED_COLLECTOR,
        UNKNOWN_AUXILIARY, MISPLACED_DELIMITER, UNSUPPORTED_TYPE
    - input errors (22xxx)
      • MALFORMED_TOKEN, INVALID_VALUE, MISSING_VALUE, INVALID_ELEMENT
    - warnings (23xxx)
      • IGNORED_INLINE_VALUE
    """
    # --- contract (configuration) errors ---
    NOT_A_CONTRACT          = 21101
    FROZEN_CONTRACT         = 21102
    INVALID_METADATA        = 21111
    DUPLICATED_COLLECTOR    = 21112
    UNKNOWN_AUXILIARY       = 21113
    MISPLACED_DELIMITER     = 21114
    UNSUPPORTED_TYPE        = 21115

    # --- user input errors ---
    MALFORMED_TOKEN         = 22111
    INVALID_VALUE           = 22112
    MISSING_VALUE           = 22113
    INVALID_ELEMENT         = 22114

    # --- warnings ---
    IGNORED_INLINE_VALUE    = 23111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


_palette = {
    # header parts
    "prog-name": "bold #E6E6F0",
    "error-code": "bold #00E5FF",
    "error-title": "bold #FF4DA6",
    "warning-code": "bold #FFB400",
    "warning-title": "bold #FFC2E0",

    # body
    "error-message": "#C8C8D0",
    "warning-message": "#D6D6DE",
    "token": "bold #FFD600",
    "hint-arrow": "#9CE19C dim",
    "hint": "italic #9CE19C",
}


def _render(fault, kind, /):
    """
    shared rich renderer for exceptions and warnings.

    options read from the fault
    - colorful (default True), fancy (default False), prog, code, title, hint, token.
    """
    main = __import__("__main__")
    styles = defaultdict(str, _palette | getattr(main, "__styles__", {}))
    colorful = fault.options.get("colorful", True)

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    prog = coalesce(fault.options.get("prog", Unset), getattr(main, "__prog__", "argopt"))
    code = fault.options.get("code")

    header = Text.assemble(
        "[ ",
        text(prog, styler("prog-name")),
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "?", styler(kind + "-code")),
        " | ",
        text(str(fault.options.get("title", kind)).title(), styler(kind + "-title")),
        " ]",
    )
    message = text(fault.message, styler(kind + "-message"))
    if token := fault.options.get("token"):
        message = Text.assemble(message, " (", text(repr(token), styler("token")), ")")
    body = [message]
    if hint := fault.options.get("hint"):
        body.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

    if fault.options.get("fancy", False):
        return Panel(Group(*body), title=header, title_align="left")
    return Group(header, *body)


class ArgoptException(Exception):
    """
    base for every argopt error: a message plus read-only options.

    typical options
    - code: FaultCode, title: short lowercase title, hint: one actionable sentence,
      plus any context (token, field, value, index...).
    """

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError("fault message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        return _render(self, "error")

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        fault = type(self)(self.message, **{**self.options, **overrides})
        fault.__cause__ = self.__cause__
        return fault


class ContractError(ArgoptException, TypeError):
    """
    a contract is declared incorrectly (programming error, raised immediately).
    """


class InputError(ArgoptException, ValueError):
    """
    user input could not be bound; collected by the engine, never raised to the caller.
    """


class FormatFailure(InputError):
    """
    a raw value could not be coerced into the field's declared type.
    """


class MalformedTokenError(InputError):
    """
    an option token is shaped in a way its field cannot accept (e.g. '--name+' on a non-flag).
    """


class ArgoptWarning(ABC, Warning):
    """
    base for argopt warnings, rendered like exceptions but never fatal.
    """

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError("fault message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        return _render(self, "warning")

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class IgnoredInlineValueWarning(ArgoptWarning): ...


def report(errors, /, *, prog=Unset, console=Unset, colorful=True, fancy=False):
    """
    render parsing errors through rich.

    parameters
    - errors: iterable of ParsingError (or any fault exposing a 'cause' or being a fault itself).
    - prog: program name for headers (defaults to __main__.__prog__ or "argopt").
    - console: rich Console to print to (defaults to a stderr console).
    - colorful/fancy: plain vs. styled output, flat vs. panel layout.

    returns
    - the number of rendered errors.
    """
    if console is Unset:
        console = Console(stderr=True)
    options = {"colorful": colorful, "fancy": fancy}
    if prog is not Unset:
        options["prog"] = prog

    renders = []
    for error in errors:
        fault = getattr(error, "cause", error)
        token = getattr(error, "token", Unset)
        if token is not Unset:
            fault = fault.__replace__(token=token, **options)
        else:
            fault = fault.__replace__(**options)
        renders.append(fault)

    if not renders:
        return 0

    title = "%d parsing error%s" % (len(renders), "" if len(renders) == 1 else "s")
    if fancy:
        console.print(Panel(Group(*renders), title=title, title_align="left"))
    else:
        console.print(Group(Text(title, style="bold" if colorful else ""), *renders))
    return len(renders)


__all__ = (
    "FaultCode",
    "ArgoptException",
    "ContractError",
    "InputError",
    "FormatFailure",
    "MalformedTokenError",
    "ArgoptWarning",
    "IgnoredInlineValueWarning",
    "report",
)
