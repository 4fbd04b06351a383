"""
Field descriptors: a normalized, read-only view of a contract's fields.

describe(contract) introspects a dataclass once per call and returns one
FieldDescriptor per field, in declaration order. Every structural mistake in the
contract (two value collectors, a complex flag pointing at a missing field, a
delimiter on a scalar field, an uncoercible annotation) raises ContractError
here, before any token is looked at.

resolve(descriptors, name) implements option-name lookup:
- excluded fields and the value collector never resolve;
- the primary name is checked before the aliases;
- case-sensitive fields compare exactly, the others compare case-insensitively;
- the first matching field in declaration order wins.
"""
import dataclasses
import enum
import logging
import typing

from .arguments import ARGOPT, ComplexFlag, Excluded, Flag, Option, Values
from .coercion import check, sequence
from .faults import ContractError, FaultCode

logger = logging.getLogger(__name__)


class FieldKind(enum.Enum):
    PLAIN = "plain"
    FLAG = "flag"
    COMPLEX_FLAG = "complex-flag"
    VALUE_COLLECTOR = "value-collector"
    EXCLUDED = "excluded"

    @property
    def flaggable(self):
        """
        Whether the kind accepts '+'/'-' switches and works without a value.
        """
        return self in (FieldKind.FLAG, FieldKind.COMPLEX_FLAG)


@dataclasses.dataclass(frozen=True)
class FieldDescriptor:
    """
    Normalized metadata for one bindable field.

    - field: attribute name on the contract.
    - name: option name (defaults to the attribute name).
    - aliases: additional option names, in declaration order.
    - auxiliary: for complex flags, the descriptor of the field receiving values.
    - descr / metavar / required: help-only metadata.
    """
    field: str
    name: str
    kind: FieldKind
    type: typing.Any = str
    aliases: tuple = ()
    case_sensitive: bool = False
    delimiter: typing.Optional[str] = None
    auxiliary: typing.Optional["FieldDescriptor"] = None
    descr: str = ""
    metavar: typing.Optional[str] = None
    required: bool = False

    @property
    def display(self):
        """
        Name shown for value collectors (the metavar when declared).
        """
        return self.metavar or self.name

    def matches(self, name, /):
        """
        Whether an option name (switch already stripped) designates this field.
        """
        if self.name == name or (not self.case_sensitive and self.name.casefold() == name.casefold()):
            return True
        if self.case_sensitive:
            return name in self.aliases
        folded = name.casefold()
        return any(alias.casefold() == folded for alias in self.aliases)

    def header(self, style, /):
        """
        Help header: '--name', '--name=VALUE', '--name[+|-]=VALUE' (collectors: the display name).
        """
        if self.kind is FieldKind.VALUE_COLLECTOR:
            return self.display
        header = style.prefix + self.name
        if self.kind is FieldKind.COMPLEX_FLAG:
            header += "[+|-]"
        if self.metavar:
            header += style.separator + self.metavar
        return header


def _kind(spec):
    match spec:
        case Flag():
            return FieldKind.FLAG
        case ComplexFlag():
            return FieldKind.COMPLEX_FLAG
        case Values():
            return FieldKind.VALUE_COLLECTOR
        case Excluded():
            return FieldKind.EXCLUDED
        case Option() | None:
            return FieldKind.PLAIN
    raise ContractError(
        "unexpected argopt metadata %r" % (spec,),
        code=FaultCode.INVALID_METADATA,
        title="invalid metadata",
        hint="declare fields with option(), flag(), complex_flag(), values() or excluded()",
    )


def _build(field, hint, spec, /, auxiliary=None):
    check(hint)
    kind = _kind(spec)
    options = {
        "field": field.name,
        "name": field.name,
        "kind": kind,
        "type": hint,
        "auxiliary": auxiliary,
    }
    if spec is None:
        return FieldDescriptor(**options)

    if kind is not FieldKind.EXCLUDED:
        options.update(descr=spec.descr, metavar=spec.metavar, required=spec.required)
    if kind not in (FieldKind.VALUE_COLLECTOR, FieldKind.EXCLUDED):
        options.update(
            name=spec.name or field.name,
            aliases=spec.aliases,
            case_sensitive=spec.case_sensitive,
        )
    if kind in (FieldKind.PLAIN, FieldKind.EXCLUDED) and spec.delimiter is not None:
        if sequence(hint)[0] is None:
            raise ContractError(
                "field %r declares a delimiter but its type %r is not a sequence" % (field.name, hint),
                code=FaultCode.MISPLACED_DELIMITER,
                title="misplaced delimiter",
                hint="annotate the field as list[...] or tuple[..., ...]",
            )
        options.update(delimiter=spec.delimiter)
    return FieldDescriptor(**options)


def describe(contract, /):
    """
    Build the field descriptors of a contract (a dataclass type or instance).

    Returns
    - tuple[FieldDescriptor, ...] in field declaration order.

    Raises
    - ContractError on any structural mistake in the contract.
    """
    cls = contract if isinstance(contract, type) else type(contract)
    if not dataclasses.is_dataclass(cls):
        raise ContractError(
            "%r is not a dataclass" % (cls,),
            code=FaultCode.NOT_A_CONTRACT,
            title="not a contract",
            hint="decorate the contract class with @dataclasses.dataclass",
        )
    if cls.__dataclass_params__.frozen:
        raise ContractError(
            "%s is frozen and cannot be bound" % cls.__name__,
            code=FaultCode.FROZEN_CONTRACT,
            title="frozen contract",
            hint="drop frozen=True from the contract's @dataclass",
        )

    hints = typing.get_type_hints(cls, include_extras=True)
    fields = {field.name: field for field in dataclasses.fields(cls)}
    specs = {name: field.metadata.get(ARGOPT) for name, field in fields.items()}

    collectors = [name for name, spec in specs.items() if isinstance(spec, Values)]
    if len(collectors) > 1:
        raise ContractError(
            "%s declares more than one value collector (%s)" % (cls.__name__, ", ".join(collectors)),
            code=FaultCode.DUPLICATED_COLLECTOR,
            title="duplicated value collector",
            hint="keep values() on a single field",
        )

    descriptors = []
    for name, field in fields.items():
        spec = specs[name]
        auxiliary = None
        if isinstance(spec, ComplexFlag):
            if spec.target == name or spec.target not in fields:
                raise ContractError(
                    "complex flag %r targets %r, which is not another field of %s" % (
                        name, spec.target, cls.__name__
                    ),
                    code=FaultCode.UNKNOWN_AUXILIARY,
                    title="unknown auxiliary field",
                    hint="point complex_flag() at a field declared with excluded()",
                )
            target = fields[spec.target]
            auxiliary = _build(target, hints.get(target.name, str), specs[target.name])
        descriptors.append(_build(field, hints.get(name, str), spec, auxiliary))

    logger.debug(
        "described %s: %s",
        cls.__name__,
        ", ".join("%s(%s)" % (descriptor.field, descriptor.kind.value) for descriptor in descriptors),
    )
    return tuple(descriptors)


def resolve(descriptors, name, /):
    """
    Return the first descriptor whose name or alias matches, or None.
    """
    for descriptor in descriptors:
        if descriptor.kind in (FieldKind.EXCLUDED, FieldKind.VALUE_COLLECTOR):
            continue
        if descriptor.matches(name):
            return descriptor
    return None


__all__ = (
    "FieldKind",
    "FieldDescriptor",
    "describe",
    "resolve",
)
