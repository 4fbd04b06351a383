r"""
Argopt argument specifications and dataclass field factories.

Overview
- Specs (immutable metadata attached to a contract field)
  • Option: a named, value-bearing option (--name value, --name=value).
  • Flag: a named boolean switch (--name, --name+, --name-).
  • ComplexFlag: a flag that also directs a trailing value into an auxiliary field
    (/warnaserror+:1560,1680).
  • Values: the field receiving the leftover, non-option tokens.
  • Excluded: a field never resolved by name (still settable through a complex flag).

- Field factories
  • option(...), flag(...), complex_flag(target, ...), values(...), excluded(...)
  Each returns a dataclasses.field(...) whose metadata carries the spec under the
  ARGOPT key, so contracts stay plain dataclasses:

    >>> @dataclass
    ... class Greeter:
    ...     names: list[str] = option(delimiter=",", required=True, metavar="n1,n2")
    ...     repeat: int = option(descr="how many times", metavar="times", default=1)
    ...     loud: bool = flag(aliases=("l",))
    ...     greeting: str | None = values(metavar="greeting")

Metadata (sanitized on construction; mistakes raise ContractError)
- name: custom option name (defaults to the field name), a valid option name.
- aliases: additional names; when given it must be non-empty and duplicate free.
- case_sensitive: compare names exactly instead of case-insensitively.
- delimiter: split a single value into a sequence (Option and Excluded).
- descr / metavar / required: help-only metadata, never enforced while parsing.

Name rules
- non-empty, no whitespace, no '=' or ':' (they separate inline values),
- cannot start with '-', '/' or '+' (prefixes are added by the style),
- cannot end with '+' or '-' (reserved for switches).
"""
import dataclasses
import functools
import operator
import re

from .faults import ContractError, FaultCode
from .utils import *

ARGOPT = "argopt"
"""
dataclasses.field metadata key under which argopt stores a field's spec.
"""


class ArgumentType(type):
    """
    Metaclass giving specs a typename, read-only properties and stable representations.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    - every name listed in __introspectable__ becomes a read-only property mirroring
      the private "_name" backing attribute.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__())),
            )
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        @rename("__eq__")
        def __eq__(self, other):
            if type(self) is not type(other):
                return NotImplemented
            return tuple(self.__rich_repr__()) == tuple(other.__rich_repr__())
        self.__eq__ = __eq__

        @rename("__hash__")
        def __hash__(self):
            return hash((type(self), tuple(self.__rich_repr__())))
        self.__hash__ = __hash__

        return self


_names = re.compile(r"[^\s=:/+-]([^\s=:]*[^\s=:+-])?")


def _sanitize_name(cls, name, /, what="name"):
    if not isinstance(name, str):
        raise ContractError(
            f"{cls.__typename__} {what} must be a string",
            code=FaultCode.INVALID_METADATA,
            title="invalid %s" % what,
        )
    elif not (name := name.strip()):
        raise ContractError(
            f"{cls.__typename__} {what} cannot be empty",
            code=FaultCode.INVALID_METADATA,
            title="invalid %s" % what,
        )
    elif not _names.fullmatch(name):
        raise ContractError(
            f"{cls.__typename__} {what} {name!r} is not a valid option name",
            code=FaultCode.INVALID_METADATA,
            title="invalid %s" % what,
            hint="drop prefixes ('-', '--', '/'), separators ('=', ':') and trailing '+'/'-'",
        )
    return name


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate the help metadata shared by every spec.

    - descr: Unset -> "" ; otherwise a string, trimmed.
    - metavar: Unset -> None ; otherwise a string, non-empty after trimming.
    - required: coerced to bool.

    The metadata dict is mutated in place.
    """
    if not isinstance(descr := metadata["descr"], str | Unset):
        raise ContractError(
            f"{cls.__typename__} 'descr' must be a string",
            code=FaultCode.INVALID_METADATA,
            title="invalid description",
        )
    metadata["descr"] = coalesce(descr, "").strip()

    if not isinstance(metavar := metadata["metavar"], str | Unset):
        raise ContractError(
            f"{cls.__typename__} 'metavar' must be a string",
            code=FaultCode.INVALID_METADATA,
            title="invalid value name",
        )
    elif isinstance(metavar, str) and not (metavar := metavar.strip()):
        raise ContractError(
            f"{cls.__typename__} 'metavar' cannot be empty",
            code=FaultCode.INVALID_METADATA,
            title="invalid value name",
        )
    metadata["metavar"] = coalesce(metavar)
    metadata["required"] = bool(metadata["required"])


def _sanitize_named_metadata(cls, metadata, /):
    """
    Internal: validate name, aliases and case sensitivity of named specs.

    - name: Unset -> None (the field name is used later); otherwise a valid name.
    - aliases: Unset -> () ; otherwise a non-empty iterable of valid, unique names.
      Uniqueness follows case_sensitive (casefolded unless it is set).
    - case_sensitive: coerced to bool.
    """
    name = metadata["name"]
    metadata["name"] = None if name is Unset else _sanitize_name(cls, name)
    metadata["case_sensitive"] = bool(metadata["case_sensitive"])

    if (aliases := metadata["aliases"]) is Unset:
        metadata["aliases"] = ()
        return
    if isinstance(aliases, str):
        aliases = (aliases,)

    try:
        aliases = tuple(aliases)
    except TypeError:
        raise ContractError(
            f"{cls.__typename__} 'aliases' must be an iterable of strings",
            code=FaultCode.INVALID_METADATA,
            title="invalid aliases",
        ) from None
    if not aliases:
        raise ContractError(
            f"{cls.__typename__} must have at least one alias when 'aliases' is given",
            code=FaultCode.INVALID_METADATA,
            title="invalid aliases",
            hint="omit 'aliases' entirely when the option has none",
        )

    sanitized = []
    seen = set()
    for alias in aliases:
        alias = _sanitize_name(cls, alias, "alias")
        key = alias if metadata["case_sensitive"] else alias.casefold()
        if key in seen:
            raise ContractError(
                f"{cls.__typename__} aliases cannot contain duplicates ({alias!r})",
                code=FaultCode.INVALID_METADATA,
                title="invalid aliases",
            )
        seen.add(key)
        sanitized.append(alias)
    metadata["aliases"] = tuple(sanitized)


def _sanitize_delimiter(cls, metadata, /):
    if (delimiter := metadata["delimiter"]) is Unset:
        metadata["delimiter"] = None
    elif not isinstance(delimiter, str) or not delimiter.strip():
        raise ContractError(
            f"{cls.__typename__} 'delimiter' must be a non-blank string",
            code=FaultCode.INVALID_METADATA,
            title="invalid delimiter",
        )


class Option(metaclass=ArgumentType):
    """
    Named, value-bearing option specification.

    Highlights
    - Resolved by name (default: the field name) or any alias.
    - Values come inline (--name=value) or from the next token (--name value).
    - With a delimiter, a single value is split into the field's sequence type.
    """

    __introspectable__ = (
        "name",
        "aliases",
        "case_sensitive",
        "delimiter",
        "descr",
        "metavar",
        "required",
    )

    def __new__(
            cls,
            *,
            name=Unset,
            aliases=Unset,
            case_sensitive=False,
            delimiter=Unset,
            descr=Unset,
            metavar=Unset,
            required=False,
    ):
        metadata = {
            "name": name,
            "aliases": aliases,
            "case_sensitive": case_sensitive,
            "delimiter": delimiter,
            "descr": descr,
            "metavar": metavar,
            "required": required,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)
        _sanitize_delimiter(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self


class Flag(metaclass=ArgumentType):
    """
    Named boolean switch.

    Highlights
    - '--name' alone sets the field to True without consuming the next token.
    - '--name+' / '--name-' set True / False explicitly.
    - '--name=value' coerces the inline value as a boolean.
    """

    __introspectable__ = (
        "name",
        "aliases",
        "case_sensitive",
        "descr",
        "metavar",
        "required",
    )

    def __new__(
            cls,
            *,
            name=Unset,
            aliases=Unset,
            case_sensitive=False,
            descr=Unset,
            metavar=Unset,
            required=False,
    ):
        metadata = {
            "name": name,
            "aliases": aliases,
            "case_sensitive": case_sensitive,
            "descr": descr,
            "metavar": metavar,
            "required": required,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self


class ComplexFlag(metaclass=ArgumentType):
    """
    Boolean switch that also accepts values for an auxiliary field.

    '/warnaserror+:1560,1680' sets the flag to True and binds '1560,1680' into the
    field named by 'target' (which should normally be declared with excluded()).
    Without a switch it behaves like a plain Flag.
    """

    __introspectable__ = (
        "target",
        "name",
        "aliases",
        "case_sensitive",
        "descr",
        "metavar",
        "required",
    )

    def __new__(
            cls,
            target,
            /,
            *,
            name=Unset,
            aliases=Unset,
            case_sensitive=False,
            descr=Unset,
            metavar=Unset,
            required=False,
    ):
        if not isinstance(target, str) or not (target := target.strip()):
            raise ContractError(
                f"{cls.__typename__} 'target' must be a non-empty field name",
                code=FaultCode.INVALID_METADATA,
                title="invalid auxiliary field",
            )

        metadata = {
            "target": target,
            "name": name,
            "aliases": aliases,
            "case_sensitive": case_sensitive,
            "descr": descr,
            "metavar": metavar,
            "required": required,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self


class Values(metaclass=ArgumentType):
    """
    Receiver of the leftover (non-option) tokens; at most one per contract.
    """

    __introspectable__ = (
        "descr",
        "metavar",
        "required",
    )

    def __new__(cls, *, descr=Unset, metavar=Unset, required=False):
        metadata = {
            "descr": descr,
            "metavar": metavar,
            "required": required,
        }
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self


class Excluded(metaclass=ArgumentType):
    """
    Marks a field as not an option.

    The delimiter applies when a complex flag binds a value into the field.
    """

    __introspectable__ = (
        "delimiter",
    )

    def __new__(cls, *, delimiter=Unset):
        metadata = {"delimiter": delimiter}
        _sanitize_delimiter(cls, metadata)

        self = super().__new__(cls)
        self._delimiter = metadata["delimiter"]
        return self


def _field(spec, default, default_factory, /):
    options = {"metadata": {ARGOPT: spec}}
    if default is not dataclasses.MISSING:
        options["default"] = default
    if default_factory is not dataclasses.MISSING:
        options["default_factory"] = default_factory
    return dataclasses.field(**options)


def option(*, default=None, default_factory=dataclasses.MISSING, **kwargs):
    """
    Declare a value-bearing option field.

    Parameters
    - default / default_factory: forwarded to dataclasses.field (default is None
      unless a default_factory is given).
    - **kwargs: forwarded to Option(...) (name, aliases, case_sensitive, delimiter,
      descr, metavar, required).
    """
    if default_factory is not dataclasses.MISSING:
        default = dataclasses.MISSING
    return _field(Option(**kwargs), default, default_factory)


def flag(*, default=False, **kwargs):
    """
    Declare a boolean flag field (default False).
    """
    return _field(Flag(**kwargs), default, dataclasses.MISSING)


def complex_flag(target, /, *, default=False, **kwargs):
    """
    Declare a complex flag field whose trailing value is bound into 'target'.
    """
    return _field(ComplexFlag(target, **kwargs), default, dataclasses.MISSING)


def values(*, default=None, default_factory=dataclasses.MISSING, **kwargs):
    """
    Declare the field receiving leftover tokens (sequence: all of them, scalar: the first).
    """
    if default_factory is not dataclasses.MISSING:
        default = dataclasses.MISSING
    return _field(Values(**kwargs), default, default_factory)


def excluded(*, delimiter=Unset, default=None, default_factory=dataclasses.MISSING):
    """
    Declare a field that is never resolved as an option (complex flag targets, internal state).
    """
    if default_factory is not dataclasses.MISSING:
        default = dataclasses.MISSING
    return _field(Excluded(delimiter=delimiter), default, default_factory)


__all__ = (
    # Metadata key
    "ARGOPT",

    # Classes (specifications)
    "Option",
    "Flag",
    "ComplexFlag",
    "Values",
    "Excluded",

    # Field factories
    "option",
    "flag",
    "complex_flag",
    "values",
    "excluded",
)

# Not part of the public API.
del ArgumentType
