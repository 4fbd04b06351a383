"""
Value coercion: raw command-line text -> typed field values.

Contract
- coerce(value, type, /, delimiter=None) returns the converted value, or Unset to
  signal "leave the field untouched" (an enum name that does not match).
- Failures raise FormatFailure; the binding engine turns them into parsing errors.
- value may be Unset when an option had no value available at all.

Per-kind policies
- bool: "1", "true", "yes" (any case) are True; blank, missing and anything else are False.
- Enum: case-insensitive member-name lookup; no match -> Unset (no error).
- int / float: ASCII literal parsing without digit separators (locale independent);
  malformed text fails.
- str: passthrough, including "".
- sequences: split on a literal delimiter, every segment coerced by the element type;
  one bad segment fails the whole value.
- other classes: called with the raw text (pathlib.Path, decimal.Decimal, ...).
"""
import builtins
import collections.abc
import enum
import logging
import types
import typing

from .faults import ContractError, FaultCode, FormatFailure
from .utils import Unset, ordinal

logger = logging.getLogger(__name__)

_containers = {
    list: list,
    tuple: tuple,
    set: set,
    frozenset: frozenset,
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    collections.abc.Collection: list,
    collections.abc.Iterable: list,
    collections.abc.Set: frozenset,
    collections.abc.MutableSet: set,
}


def unwrap(hint, /):
    """
    Strip Optional[...] / X | None and Annotated[...] from an annotation.

    Unions of several non-None types are rejected (ContractError): there is no
    single conversion for them.
    """
    if typing.get_origin(hint) is typing.Annotated:
        hint = typing.get_args(hint)[0]

    if typing.get_origin(hint) in (typing.Union, types.UnionType):
        arguments = [argument for argument in typing.get_args(hint) if argument is not type(None)]
        if len(arguments) != 1:
            raise ContractError(
                "cannot coerce values into %r (ambiguous union)" % (hint,),
                code=FaultCode.UNSUPPORTED_TYPE,
                title="unsupported type",
                hint="annotate the field with a single type, optionally '| None'",
            )
        return unwrap(arguments[0])
    return hint


def sequence(hint, /):
    """
    Split a sequence annotation into (container, element type).

    Returns (None, hint) when the annotation is not a sequence. Strings are not
    sequences here. Bare list/tuple/set default to str elements.
    """
    hint = unwrap(hint)
    origin = typing.get_origin(hint) or hint
    if origin in (str, bytes) or origin not in _containers:
        return None, hint

    arguments = typing.get_args(hint)
    if origin is tuple and arguments and arguments[-1] is not Ellipsis:
        raise ContractError(
            "cannot coerce values into %r (fixed-length tuple)" % (hint,),
            code=FaultCode.UNSUPPORTED_TYPE,
            title="unsupported type",
            hint="use tuple[X, ...] or list[X]",
        )
    element = unwrap(arguments[0]) if arguments else str
    if typing.get_origin(element) in _containers or element in _containers:
        raise ContractError(
            "cannot coerce values into %r (nested sequences)" % (hint,),
            code=FaultCode.UNSUPPORTED_TYPE,
            title="unsupported type",
        )
    return _containers[origin], element


def check(hint, /):
    """
    Validate that values can be coerced into an annotation; raise ContractError otherwise.
    """
    _, element = sequence(hint)
    if element is typing.Any or element is object:
        return
    if not isinstance(element, type):
        raise ContractError(
            "cannot coerce values into %r" % (element,),
            code=FaultCode.UNSUPPORTED_TYPE,
            title="unsupported type",
            hint="annotate the field with a concrete class (str, int, float, bool, an Enum, ...)",
        )


def _boolean(value):
    if value is Unset or not value.strip():
        return False
    return value.lower() in ("1", "true", "yes")


def _enumeration(value, type):
    members = {name.casefold(): member for name, member in type.__members__.items()}
    try:
        return members[value.casefold()]
    except KeyError:
        logger.debug("ignoring %r: not a member of %s", value, type.__name__)
        return Unset


def convert(value, type, /):
    """
    Coerce one scalar value (no sequences, no delimiter).
    """
    if type is bool:
        return _boolean(value)

    if value is Unset:
        raise FormatFailure(
            "a value is required but none was given",
            code=FaultCode.MISSING_VALUE,
            title="missing value",
            hint="pass the value inline (--name=value) or as the next token",
        )

    if type is str or type is typing.Any or type is object:
        return value
    if isinstance(type, builtins.type) and issubclass(type, enum.Enum):
        return _enumeration(value, type)

    try:
        # int() and float() also take underscores and non-ASCII digits
        if type in (int, float) and (not value.isascii() or "_" in value):
            raise ValueError("not an invariant number: %r" % (value,))
        return type(value)
    except (TypeError, ValueError) as exception:
        raise FormatFailure(
            "%r is not a valid %s" % (value, getattr(type, "__name__", type)),
            code=FaultCode.INVALID_VALUE,
            title="invalid value",
            value=value,
            hint="check the expected format of this option",
        ) from exception


def coerce(value, type, /, delimiter=None):
    """
    Coerce a raw value (or Unset) into the given annotation.

    Parameters
    - value: str | Unset
    - type: the field annotation (Optional/Annotated are unwrapped).
    - delimiter: literal separator for sequence annotations (None: the single value
      becomes a one-element sequence).

    Returns
    - the converted value, or Unset when the field must be left untouched.

    Raises
    - FormatFailure: malformed or missing value; for delimited values, a single
      failure for the whole field (the element failure is chained as its cause).
    """
    container, element = sequence(type)
    if container is None:
        return convert(value, element)

    if value is Unset:
        raise FormatFailure(
            "a value is required but none was given",
            code=FaultCode.MISSING_VALUE,
            title="missing value",
            hint="pass the value inline (--name=value) or as the next token",
        )

    segments = value.split(delimiter) if delimiter is not None else [value]
    if element is str:
        return container(segments)

    result = []
    for index, segment in enumerate(segments, 1):
        try:
            converted = convert(segment, element)
        except FormatFailure as failure:
            raise FormatFailure(
                "%s element %r is not a valid %s" % (
                    ordinal(index), segment, getattr(element, "__name__", element)
                ),
                code=FaultCode.INVALID_ELEMENT,
                title="invalid element",
                value=value,
                hint="separate the values with %r and check each of them" % delimiter
                if delimiter is not None else "check the expected format of this option",
            ) from failure
        if converted is Unset:
            return Unset
        result.append(converted)
    return container(result)


__all__ = (
    "unwrap",
    "sequence",
    "check",
    "convert",
    "coerce",
)
