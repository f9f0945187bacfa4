"""
Value constraints and the value validator.

A constraint decides which activation values a predicate accepts.
Pure functions and frozen records, no IO.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Iterable, Optional, Tuple

from build_cfg.core.errors import DuplicateValue, EmptyValueSet, ValueNotAllowed

# Placeholder in diagnostics for constraints built without a predicate.
_UNNAMED = "<unnamed>"


@unique
class ConstraintKind(str, Enum):
    NONE = "none"                      # presence-only flag
    ONE_OF = "one_of"
    ANY = "any"
    NONE_OR_ONE_OF = "none_or_one_of"


@dataclass(frozen=True)
class ValueConstraint:
    """Constraint kind plus its allowed values (empty unless value-set based)."""

    kind: ConstraintKind
    values: Tuple[str, ...] = ()

    def __post_init__(self):
        if self.is_value_set:
            object.__setattr__(
                self, "values", check_value_set(_UNNAMED, self.values)
            )
        elif self.values:
            raise ValueError(
                f"constraint '{self.kind.value}' takes no values, got {list(self.values)}"
            )

    @classmethod
    def unconstrained(cls) -> ValueConstraint:
        return cls(kind=ConstraintKind.NONE)

    @classmethod
    def any_value(cls) -> ValueConstraint:
        return cls(kind=ConstraintKind.ANY)

    @classmethod
    def one_of(cls, name: str, values: Iterable[str]) -> ValueConstraint:
        return cls(kind=ConstraintKind.ONE_OF, values=check_value_set(name, values))

    @classmethod
    def none_or_one_of(cls, name: str, values: Iterable[str]) -> ValueConstraint:
        return cls(
            kind=ConstraintKind.NONE_OR_ONE_OF,
            values=check_value_set(name, values),
        )

    @property
    def is_value_set(self) -> bool:
        return self.kind in (ConstraintKind.ONE_OF, ConstraintKind.NONE_OR_ONE_OF)

    def is_assignable(self, value: Optional[str]) -> bool:
        """Return True if *value* (None meaning "no value") satisfies the constraint."""
        if self.kind == ConstraintKind.NONE:
            return value is None
        if self.kind == ConstraintKind.ANY:
            return value is not None
        if self.kind == ConstraintKind.ONE_OF:
            return value is not None and value in self.values
        return value is None or value in self.values


def check_value_set(name: str, values: Iterable[str]) -> Tuple[str, ...]:
    """
    Validate an allowed-value list for predicate *name*.

    Returns the values as a tuple in input order.  Raises
    ``EmptyValueSet`` for zero values and ``DuplicateValue`` on the
    first repeated value.
    """
    if isinstance(values, str):
        raise TypeError(
            f"predicate '{name}': allowed values must be a sequence of strings, "
            f"not a single string"
        )
    checked: Tuple[str, ...] = tuple(values)
    if not checked:
        raise EmptyValueSet(name)

    seen = set()
    for value in checked:
        if not isinstance(value, str):
            raise TypeError(
                f"predicate '{name}': allowed values must be strings, got {value!r}"
            )
        if value in seen:
            raise DuplicateValue(name, value)
        seen.add(value)
    return checked


def validate_value(
    name: str,
    constraint: ValueConstraint,
    value: Optional[str],
) -> Optional[str]:
    """
    Check *value* against *constraint*.

    Returns the value, or raises ``ValueNotAllowed`` carrying the value
    and the full allowed set.
    """
    if not constraint.is_assignable(value):
        raise ValueNotAllowed(name, value, constraint.values)
    return value
