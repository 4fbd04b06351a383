"""
Token recognition for option references.

A raw command-line token is either opaque text (a value) or a reference to an
option. Recognition depends only on the active OptionStyle:

- UNIX:    '-name' or '--name', inline value after '='   (--name=value)
- WINDOWS: '/name', inline value after ':'               (/name:value)

A trailing '+' or '-' on the name is a switch (--debug+, /debug-): it is
stripped from the name and turned into an implied boolean before the name is
resolved against a contract.
"""
import enum
import re
from typing import NamedTuple

from .utils import Unset


class OptionStyle(enum.IntEnum):
    """
    Command-line syntax style.

    Attributes (per member)
    - prefix: prefix used when rendering option names in help ('--' or '/').
    - alias_prefix: prefix used when rendering aliases in help ('-' or '/').
    - separator: inline value separator ('=' or ':').
    - pattern: compiled recognizer; group 1 is the option name (switch included).
    """
    WINDOWS = 1
    UNIX = 2

    @property
    def prefix(self):
        return "/" if self is OptionStyle.WINDOWS else "--"

    @property
    def alias_prefix(self):
        return "/" if self is OptionStyle.WINDOWS else "-"

    @property
    def separator(self):
        return ":" if self is OptionStyle.WINDOWS else "="

    @property
    def pattern(self):
        return _patterns[self]


_patterns = {
    OptionStyle.WINDOWS: re.compile(r"/([^:]+)"),
    OptionStyle.UNIX: re.compile(r"--?([^=]+)"),
}


class Token(NamedTuple):
    """
    A recognized option reference.

    - raw: the token exactly as received.
    - name: the option name, switch removed.
    - value: inline value (may be ""), or Unset when the token has no separator.
    - switch: True for a trailing '+', False for '-', Unset otherwise.
    """
    raw: str
    name: str
    value: object = Unset
    switch: object = Unset


def match(token, /, style=OptionStyle.UNIX):
    """
    Recognize an option reference.

    Returns
    - None when the token does not start with the style's prefix (opaque text).
    - Token(raw, name, value, switch) otherwise.

    Examples (UNIX)
    - "--Lulz=foo"  -> Token("--Lulz=foo", "Lulz", "foo", Unset)
    - "-Lulz="      -> Token("-Lulz=", "Lulz", "", Unset)
    - "--debug+"    -> Token("--debug+", "debug", Unset, True)
    - "foo=bar"     -> None
    """
    if not isinstance(token, str):
        raise TypeError("tokens must be strings")
    if not isinstance(style, OptionStyle):
        raise TypeError("style must be an OptionStyle")

    matched = style.pattern.match(token)
    if not matched:
        return None

    name = matched[1]
    value = Unset
    if len(token) > matched.end():
        # the character at matched.end() is the separator
        value = token[matched.end() + 1:]

    switch = Unset
    if name.endswith(("+", "-")):
        switch = name[-1] == "+"
        name = name[:-1]

    return Token(token, name, value, switch)


__all__ = (
    "OptionStyle",
    "Token",
    "match",
)
