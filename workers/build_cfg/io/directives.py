"""
Directive emitter — render an activated predicate and write it out.

Two lines per predicate, always in this order:

    cargo::rustc-check-cfg=cfg(NAME, values(...))     registration
    cargo::rustc-cfg=NAME[="VALUE"]                   activation

The output channel is any text stream with ``write``; it is injected by
the caller (``sys.stdout`` for a real build script).
"""
from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, List, Optional, Sequence, TextIO

from build_cfg.core.constraint import ConstraintKind, ValueConstraint
from build_cfg.core.errors import EmissionFailure
from build_cfg.io.schema import Directive, DirectiveKind
from build_cfg.policy.profile import DirectiveProfile

if TYPE_CHECKING:
    from build_cfg.core.predicate import Activated

logger = logging.getLogger(__name__)


# ── Rendering ────────────────────────────────────────────────────────────────

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}


def _escape_char(ch: str) -> str:
    if ch in _ESCAPES:
        return _ESCAPES[ch]
    # Remaining C0/C1 controls and Unicode line separators
    if ord(ch) < 0x20 or 0x7F <= ord(ch) <= 0x9F or ch in "\u2028\u2029":
        return f"\\u{{{ord(ch):x}}}"
    return ch


def quote(value: str) -> str:
    """
    Render *value* as a double-quoted string literal.

    Control characters are escaped so the literal never spans lines.
    """
    escaped = "".join(_escape_char(ch) for ch in value)
    return f'"{escaped}"'


def _values_clause(constraint: ValueConstraint) -> str:
    parts: List[str] = []
    if constraint.kind in (ConstraintKind.NONE, ConstraintKind.NONE_OR_ONE_OF):
        parts.append("none()")
    if constraint.kind == ConstraintKind.ANY:
        parts.append("any()")
    parts.extend(quote(v) for v in constraint.values)
    return ", ".join(parts)


def render_registration(
    name: str,
    constraint: ValueConstraint,
    profile: DirectiveProfile,
) -> Directive:
    line = (
        f"{profile.prefix}{profile.registration_key}="
        f"cfg({name}, values({_values_clause(constraint)}))"
    )
    return Directive(
        kind=DirectiveKind.REGISTRATION,
        name=name,
        constraint=constraint.kind,
        values=list(constraint.values),
        line=line,
    )


def render_activation(
    name: str,
    constraint: ValueConstraint,
    value: Optional[str],
    profile: DirectiveProfile,
) -> Directive:
    line = f"{profile.prefix}{profile.activation_key}={name}"
    if value is not None:
        line += f"={quote(value)}"
    return Directive(
        kind=DirectiveKind.ACTIVATION,
        name=name,
        constraint=constraint.kind,
        value=value,
        line=line,
    )


# ── Emission ─────────────────────────────────────────────────────────────────

def write_directives(
    name: str,
    directives: Sequence[Directive],
    out: TextIO,
) -> None:
    """Write *directives* to *out* in one call, raising ``EmissionFailure`` on I/O errors."""
    text = "".join(d.line + "\n" for d in directives)
    try:
        out.write(text)
        flush = getattr(out, "flush", None)
        if flush is not None:
            flush()
    except (OSError, ValueError) as e:
        # ValueError: write to a closed stream
        raise EmissionFailure(name, str(e)) from e


def emit(
    predicate: Activated,
    out: Optional[TextIO] = None,
    profile: Optional[DirectiveProfile] = None,
) -> List[Directive]:
    """
    Emit the registration and activation lines for *predicate*.

    Parameters
    ----------
    predicate : Activated
        A validated, activated predicate.
    out : TextIO, optional
        Output channel.  Defaults to ``sys.stdout``, resolved at call
        time so that redirected streams are honoured.
    profile : DirectiveProfile, optional
        Directive dialect.  Defaults to ``DirectiveProfile.v0()``.

    Returns
    -------
    List[Directive]
        ``[registration, activation]`` as written.
    """
    if out is None:
        out = sys.stdout
    if profile is None:
        profile = DirectiveProfile.v0()

    directives = [
        render_registration(predicate.name, predicate.constraint, profile),
        render_activation(predicate.name, predicate.constraint, predicate.value, profile),
    ]
    write_directives(predicate.name, directives, out)

    for d in directives:
        logger.debug("Emitted %s for %s: %s", d.kind.value, predicate.name, d.line)
    return directives
