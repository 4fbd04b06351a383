"""
Binding engine: command-line tokens -> populated contract.

parse() walks the token stream once, left to right:

- opaque tokens and options no field answers to are kept as leftovers, verbatim;
- flags take their value from a switch ('+'/'-'), an inline value or nothing (True);
- complex flags with a switch set the flag, then value the auxiliary field;
- everything else takes the inline value or consumes the next token.

Nothing a user types is ever raised to the caller: coercion failures and malformed
tokens are collected as ParsingError entries and the walk goes on. Only contract
mistakes (ContractError, from describe()) propagate.
"""
import dataclasses
import logging
import warnings
from collections import deque

from rich.console import Group
from rich.pretty import Pretty
from rich.text import Text

from .coercion import coerce, sequence
from .faults import FaultCode, FormatFailure, IgnoredInlineValueWarning, MalformedTokenError
from .fields import FieldKind, describe, resolve
from .tokens import OptionStyle, match as match_token
from .utils import Unset, mirror

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, eq=False)
class ParsingError:
    """
    One rejected token: the token as received and the failure it caused.

    Two parsing errors are equal when they blame the same token with the same
    fault code and message, whatever the exception instances are.
    """
    token: str
    cause: Exception

    @property
    def code(self):
        return getattr(self.cause, "code", None)

    @property
    def message(self):
        return getattr(self.cause, "message", str(self.cause))

    def __eq__(self, other):
        if not isinstance(other, ParsingError):
            return NotImplemented
        return (self.token, self.code, self.message) == (other.token, other.code, other.message)

    def __hash__(self):
        return hash((self.token, self.code, self.message))

    def __rich__(self):
        if hasattr(self.cause, "__replace__"):
            return self.cause.__replace__(token=self.token)
        return Text("%s (%r)" % (self.message, self.token))


class ParseResult:
    """
    Outcome of parse(): the bound contract, the leftover tokens and the parsing errors.
    """

    contract = property(lambda self: self._contract)
    values = mirror("values")
    errors = mirror("errors")

    def __init__(self, contract, values, errors):
        self._contract = contract
        self._values = list(values)
        self._errors = tuple(errors)

    @property
    def valid(self):
        return not self._errors

    def __repr__(self):
        return "parse-result(contract=%r, values=%r, errors=%d)" % (
            self._contract, list(self._values), len(self._errors)
        )

    def __rich__(self):
        renders = [Pretty(self._contract)]
        if self._values:
            renders.append(Text("leftovers: " + " ".join(self._values), style="dim"))
        renders.extend(self._errors)
        return Group(*renders)


def _assign(contract, descriptor, value, /):
    logger.debug("%s <- %r", descriptor.field, value)
    setattr(contract, descriptor.field, value)


def _collect(contract, descriptor, leftovers, errors, /):
    """
    Bind leftovers into the value collector (all of them, or the first for scalars).
    """
    container, element = sequence(descriptor.type)
    if container is None:
        if not leftovers:
            return
        try:
            value = coerce(leftovers[0], element)
        except FormatFailure as failure:
            errors.append(ParsingError(leftovers[0], failure))
            return
        if value is not Unset:
            _assign(contract, descriptor, value)
        return

    result = []
    for leftover in leftovers:
        try:
            value = coerce(leftover, element)
        except FormatFailure as failure:
            errors.append(ParsingError(leftover, failure))
            return
        if value is Unset:
            return
        result.append(value)
    _assign(contract, descriptor, container(result))


def parse(contract, tokens, /, style=OptionStyle.UNIX):
    """
    Bind command-line tokens into a contract.

    Parameters
    - contract: a contract class (instantiated without arguments) or an instance,
      bound in place.
    - tokens: iterable of str, typically sys.argv[1:].
    - style: OptionStyle.UNIX (--name=value) or OptionStyle.WINDOWS (/name:value).

    Returns
    - ParseResult(contract, values, errors); values are the leftover tokens in
      arrival order, errors the ParsingError entries in arrival order.

    Raises
    - ContractError when the contract is declared incorrectly.
    - TypeError when a token is not a string or the style is not an OptionStyle.
    """
    descriptors = describe(contract)
    if isinstance(contract, type):
        contract = contract()

    stream = deque(tokens)
    leftovers = []
    errors = []
    while stream:
        token = stream.popleft()
        matched = match_token(token, style)
        if matched is None:
            logger.debug("%r is a value", token)
            leftovers.append(token)
            continue

        descriptor = resolve(descriptors, matched.name)
        if descriptor is None:
            logger.debug("%r matches no option", token)
            leftovers.append(token)
            continue

        # the field receiving the value; a switched complex flag hands over to its auxiliary
        target = descriptor
        if matched.switch is not Unset:
            match descriptor.kind:
                case FieldKind.FLAG:
                    _assign(contract, descriptor, matched.switch)
                    if matched.value is not Unset:
                        warnings.warn(IgnoredInlineValueWarning(
                            "inline value %r ignored for switched flag %r" % (matched.value, token),
                            code=FaultCode.IGNORED_INLINE_VALUE,
                            title="ignored inline value",
                            token=token,
                            hint="use either a switch or a value, not both",
                        ), stacklevel=2)
                    continue
                case FieldKind.COMPLEX_FLAG:
                    _assign(contract, descriptor, matched.switch)
                    target = descriptor.auxiliary
                case _:
                    errors.append(ParsingError(token, MalformedTokenError(
                        "option %r is not a flag and cannot be switched on or off" % descriptor.name,
                        code=FaultCode.MALFORMED_TOKEN,
                        title="malformed option",
                        hint="drop the trailing '+'/'-' and pass a value instead",
                    )))
                    continue

        if matched.value is not Unset:
            value = matched.value
        elif target.kind.flaggable:
            _assign(contract, target, True)
            continue
        elif stream:
            value = stream.popleft()
        else:
            value = Unset

        try:
            value = coerce(value, target.type, target.delimiter)
        except FormatFailure as failure:
            logger.debug("%r rejected: %s", token, failure.message)
            errors.append(ParsingError(token, failure))
            continue
        if value is not Unset:
            _assign(contract, target, value)

    for descriptor in descriptors:
        if descriptor.kind is FieldKind.VALUE_COLLECTOR:
            _collect(contract, descriptor, leftovers, errors)
            break

    return ParseResult(contract, leftovers, errors)


__all__ = (
    "ParsingError",
    "ParseResult",
    "parse",
)
