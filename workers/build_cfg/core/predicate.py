"""
Predicate builder — Declared → Constrained → Activated.

Each state is its own class and exposes only the transitions legal from
it.  A transition consumes the builder it was called on; calling a
transition again raises ``PredicateStateError``.  Activation validates
the value and emits the directive pair before returning.

    cfg = declare("custom_cfg").assigned_one_of(["foo", "bar"])
    cfg.set("foo")
    # cargo::rustc-check-cfg=cfg(custom_cfg, values("foo", "bar"))
    # cargo::rustc-cfg=custom_cfg="foo"
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Optional, Sequence, TextIO, Tuple

from build_cfg.core.constraint import ValueConstraint, validate_value
from build_cfg.core.errors import PredicateStateError
from build_cfg.core.identifier import validate_name
from build_cfg.io.directives import emit
from build_cfg.io.schema import Directive
from build_cfg.policy.profile import DirectiveProfile

logger = logging.getLogger(__name__)


class _Stage:
    """Shared bookkeeping for the non-terminal states."""

    state = "?"

    def __init__(
        self,
        name: str,
        out: Optional[TextIO],
        profile: Optional[DirectiveProfile],
    ):
        self._name = name
        self._out = out
        self._profile = profile
        self._consumed = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def consumed(self) -> bool:
        return self._consumed

    def _check_live(self, operation: str) -> None:
        if self._consumed:
            raise PredicateStateError(self._name, self.state, operation)

    def _activate(self, constraint: ValueConstraint, value: Optional[str]) -> Activated:
        # Consumed before writing: a failed emission still ends the lifecycle.
        self._consumed = True
        activated = Activated(name=self._name, constraint=constraint, value=value)
        activated = replace(
            activated,
            directives=tuple(emit(activated, self._out, self._profile)),
        )
        logger.info("Activated predicate %s (value=%r)", self._name, value)
        return activated

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._name!r} consumed={self._consumed}>"


class Declared(_Stage):
    """A predicate with a validated name and no constraint yet."""

    state = "declared"

    def _constrain(self, operation: str, constraint: ValueConstraint) -> Constrained:
        self._consumed = True
        logger.debug("Constrained %s via %s: %s", self._name, operation, constraint)
        return Constrained(self._name, constraint, self._out, self._profile)

    def assigned_one_of(self, values: Sequence[str]) -> Constrained:
        """Restrict activation to exactly one of *values* (non-empty, distinct)."""
        self._check_live("assigned_one_of")
        return self._constrain(
            "assigned_one_of", ValueConstraint.one_of(self._name, values)
        )

    def assigned_none_or_one_of(self, values: Sequence[str]) -> Constrained:
        """Allow activation with no value, or with one of *values*."""
        self._check_live("assigned_none_or_one_of")
        return self._constrain(
            "assigned_none_or_one_of",
            ValueConstraint.none_or_one_of(self._name, values),
        )

    def assigned_any(self) -> Constrained:
        """Require some value at activation; any string is accepted."""
        self._check_live("assigned_any")
        return self._constrain("assigned_any", ValueConstraint.any_value())

    def assigned_none(self) -> Constrained:
        """Explicit presence-only constraint; equivalent to skipping straight to ``set()``."""
        self._check_live("assigned_none")
        return self._constrain("assigned_none", ValueConstraint.unconstrained())

    def set(self) -> Activated:
        """Activate as a boolean flag (no value) and emit."""
        self._check_live("set")
        return self._activate(ValueConstraint.unconstrained(), None)


class Constrained(_Stage):
    """A predicate with a name and a value constraint, awaiting activation."""

    state = "constrained"

    def __init__(
        self,
        name: str,
        constraint: ValueConstraint,
        out: Optional[TextIO] = None,
        profile: Optional[DirectiveProfile] = None,
    ):
        super().__init__(name, out, profile)
        self._constraint = constraint

    @property
    def constraint(self) -> ValueConstraint:
        return self._constraint

    @property
    def allowed(self) -> Tuple[str, ...]:
        return self._constraint.values

    def is_assignable(self, value: Optional[str]) -> bool:
        return self._constraint.is_assignable(value)

    def set(self, value: Optional[str] = None) -> Activated:
        """
        Validate *value* and activate.

        Raises ``ValueNotAllowed`` without emitting anything if the
        value does not satisfy the constraint; the builder stays live.
        """
        self._check_live("set")
        validate_value(self._name, self._constraint, value)
        return self._activate(self._constraint, value)


@dataclass(frozen=True)
class Activated:
    """
    Terminal state: the predicate and the value it was activated with.

    Construction re-checks the name and the value, so a record built
    directly obeys the same rules as one reached through ``set``.
    """

    name: str
    constraint: ValueConstraint
    value: Optional[str] = None
    directives: Tuple[Directive, ...] = field(default=(), compare=False)

    def __post_init__(self):
        validate_name(self.name)
        validate_value(self.name, self.constraint, self.value)
        object.__setattr__(self, "directives", tuple(self.directives))

    @property
    def allowed(self) -> Tuple[str, ...]:
        return self.constraint.values

    def _terminal(self, operation: str) -> PredicateStateError:
        return PredicateStateError(self.name, "activated", operation)

    def set(self, value: Optional[str] = None) -> Activated:
        raise self._terminal("set")

    def assigned_one_of(self, values: Sequence[str]) -> Constrained:
        raise self._terminal("assigned_one_of")

    def assigned_none_or_one_of(self, values: Sequence[str]) -> Constrained:
        raise self._terminal("assigned_none_or_one_of")

    def assigned_any(self) -> Constrained:
        raise self._terminal("assigned_any")

    def assigned_none(self) -> Constrained:
        raise self._terminal("assigned_none")


def declare(
    name: str,
    out: Optional[TextIO] = None,
    profile: Optional[DirectiveProfile] = None,
) -> Declared:
    """
    Start a predicate declaration.

    Parameters
    ----------
    name : str
        Predicate name; must be a legal identifier.
    out : TextIO, optional
        Output channel for the directives.  ``sys.stdout`` if omitted.
    profile : DirectiveProfile, optional
        Directive dialect.  ``DirectiveProfile.v0()`` if omitted.

    Raises
    ------
    InvalidName
        If *name* is not a legal identifier.
    """
    return Declared(validate_name(name), out, profile)
