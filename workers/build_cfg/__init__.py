"""
build_cfg — custom conditional-compilation predicates for Cargo build scripts.

Declare a predicate, constrain its legal values, activate one value and emit
the ``rustc-check-cfg`` / ``rustc-cfg`` directive pair.  No persistence, no
predicate discovery.
"""

__version__ = "0.1.0"
PACKAGE_NAME = "build_cfg"
EMITTER_VERSION = "v0"
SCHEMA_VERSION = "0.1"

from build_cfg.core.errors import (  # noqa: E402
    CfgError,
    DuplicateValue,
    EmissionFailure,
    EmptyValueSet,
    InvalidName,
    PredicateStateError,
    ValueNotAllowed,
)
from build_cfg.core.predicate import Activated, Constrained, Declared, declare  # noqa: E402

__all__ = [
    "Activated",
    "CfgError",
    "Constrained",
    "Declared",
    "DuplicateValue",
    "EmissionFailure",
    "EmptyValueSet",
    "InvalidName",
    "PredicateStateError",
    "ValueNotAllowed",
    "declare",
]
