"""
Errors raised while declaring, constraining, activating or emitting a predicate.

Every error carries the fields a build-script diagnostic needs (predicate
name, offending value, allowed set) as attributes, not only in the message.
"""
from __future__ import annotations

from typing import Optional, Sequence, Tuple


class CfgError(Exception):
    """Base class for all build_cfg failures."""


class InvalidName(CfgError):
    """Predicate name is not a legal identifier."""

    def __init__(self, candidate: object):
        self.candidate = candidate
        super().__init__(f"invalid predicate name {candidate!r}")


class EmptyValueSet(CfgError):
    """A value-set constraint was given no values."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"predicate '{name}': at least one value should be provided")


class DuplicateValue(CfgError):
    """A value-set constraint lists the same value twice."""

    def __init__(self, name: str, value: str):
        self.name = name
        self.value = value
        super().__init__(f"predicate '{name}': value {value!r} is listed more than once")


class ValueNotAllowed(CfgError):
    """Activation value is not assignable under the declared constraint."""

    def __init__(self, name: str, value: Optional[str], allowed: Sequence[str]):
        self.name = name
        self.value = value
        self.allowed: Tuple[str, ...] = tuple(allowed)
        super().__init__(
            f"{value!r} is not assignable to predicate '{name}' "
            f"(allowed: {list(self.allowed)})"
        )


class EmissionFailure(CfgError):
    """Writing directives to the output channel failed."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"predicate '{name}': failed to emit directives: {reason}")


class PredicateStateError(CfgError, RuntimeError):
    """A transition was called on a builder that has already moved on."""

    def __init__(self, name: str, state: str, operation: str):
        self.name = name
        self.state = state
        self.operation = operation
        super().__init__(
            f"predicate '{name}': cannot call {operation}() on a {state} "
            f"predicate that has already transitioned"
        )
