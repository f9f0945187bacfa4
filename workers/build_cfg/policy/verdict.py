"""
Verdict — ACCEPT / REJECT decisions with reason enums for the report.

Maps build_cfg exceptions onto a frozen reason vocabulary so a run's
report can be read without parsing messages.
"""
from __future__ import annotations

from enum import Enum, unique
from typing import List, Tuple

from build_cfg.core.constraint import ConstraintKind
from build_cfg.core.errors import (
    CfgError,
    DuplicateValue,
    EmissionFailure,
    EmptyValueSet,
    InvalidName,
    PredicateStateError,
    ValueNotAllowed,
)
from build_cfg.io.schema import PredicateDeclaration


@unique
class Verdict(str, Enum):
    ACCEPT = "ACCEPT"
    REJECT = "REJECT"


@unique
class RejectReason(str, Enum):
    INVALID_NAME = "INVALID_NAME"
    EMPTY_VALUE_SET = "EMPTY_VALUE_SET"
    DUPLICATE_VALUE = "DUPLICATE_VALUE"
    VALUE_NOT_ALLOWED = "VALUE_NOT_ALLOWED"
    EMISSION_FAILURE = "EMISSION_FAILURE"
    STATE_MISUSE = "STATE_MISUSE"
    VALUES_NOT_APPLICABLE = "VALUES_NOT_APPLICABLE"
    VALUE_AND_ENV = "VALUE_AND_ENV"


_ERROR_REASONS = (
    (InvalidName, RejectReason.INVALID_NAME),
    (EmptyValueSet, RejectReason.EMPTY_VALUE_SET),
    (DuplicateValue, RejectReason.DUPLICATE_VALUE),
    (ValueNotAllowed, RejectReason.VALUE_NOT_ALLOWED),
    (EmissionFailure, RejectReason.EMISSION_FAILURE),
    (PredicateStateError, RejectReason.STATE_MISUSE),
)


def reason_for(error: CfgError) -> RejectReason:
    """Reason tag for a build_cfg exception."""
    for error_type, reason in _ERROR_REASONS:
        if isinstance(error, error_type):
            return reason
    raise TypeError(f"no reject reason for {type(error).__name__}")


def gate_declaration(decl: PredicateDeclaration) -> Tuple[Verdict, List[str]]:
    """
    Manifest-level checks that the builder cannot see.

    A value list only makes sense for value-set constraints, and a
    declaration takes either a literal value or an environment
    variable, not both.
    """
    reasons: List[str] = []

    if decl.values and decl.constraint in (ConstraintKind.NONE, ConstraintKind.ANY):
        reasons.append(RejectReason.VALUES_NOT_APPLICABLE.value)

    if decl.value is not None and decl.env is not None:
        reasons.append(RejectReason.VALUE_AND_ENV.value)

    if reasons:
        return Verdict.REJECT, reasons
    return Verdict.ACCEPT, reasons
