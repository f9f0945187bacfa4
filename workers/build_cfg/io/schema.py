"""
Schema — Pydantic models for directives, declaration manifests and reports.

  1. Directive            — one rendered directive line plus its parts.
  2. PredicateManifest    — declarations handed to the CLI (JSON input).
  3. BuildCfgReport       — per-predicate verdicts (build_cfg_report.json).

Runtime contract fields (present in the report):
  package_name, emitter_version, profile_id, schema_version.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from build_cfg import EMITTER_VERSION, PACKAGE_NAME, SCHEMA_VERSION
from build_cfg.core.constraint import ConstraintKind


# ── Directives ───────────────────────────────────────────────────────────────

class DirectiveKind(str, Enum):
    REGISTRATION = "registration"
    ACTIVATION = "activation"


class Directive(BaseModel):
    """One directive line as written to the output channel."""
    kind: DirectiveKind
    name: str
    constraint: ConstraintKind
    values: List[str] = Field(default_factory=list)
    value: Optional[str] = None
    line: str


# ── Manifest (input) ─────────────────────────────────────────────────────────

class PredicateDeclaration(BaseModel):
    """
    One predicate to declare and activate.

    ``value`` activates directly; ``env`` reads the value from an
    environment variable instead, falling back to ``default``.
    """
    name: str
    constraint: ConstraintKind = ConstraintKind.NONE
    values: List[str] = Field(default_factory=list)
    value: Optional[str] = None
    env: Optional[str] = None
    default: Optional[str] = None


class PredicateManifest(BaseModel):
    """Ordered list of declarations, processed first to last."""
    predicates: List[PredicateDeclaration] = Field(default_factory=list)


# ── Report (output) ──────────────────────────────────────────────────────────

class PredicateResult(BaseModel):
    """Outcome for one declared predicate."""
    name: str
    constraint: ConstraintKind
    value: Optional[str] = None
    verdict: str             # ACCEPT | REJECT
    reasons: List[str] = Field(default_factory=list)
    message: Optional[str] = None
    directives: List[str] = Field(default_factory=list)


class PredicateCounts(BaseModel):
    total: int = 0
    accept: int = 0
    reject: int = 0


class BuildCfgReport(BaseModel):
    """
    build_cfg_report.json — what was declared and emitted in one run.
    """
    package_name: str = PACKAGE_NAME
    emitter_version: str = EMITTER_VERSION
    schema_version: str = SCHEMA_VERSION
    profile_id: str
    results: List[PredicateResult] = Field(default_factory=list)
    counts: PredicateCounts = PredicateCounts()
