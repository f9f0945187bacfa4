"""
Profile descriptor for build_cfg directive emission.

Frozen dataclass with the directive prefix understood by the host.
``DirectiveProfile.v0()`` targets Cargo >= 1.77 (``cargo::``);
``DirectiveProfile.legacy()`` keeps the single-colon form older
toolchains require.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DirectiveProfile:
    """build_cfg directive dialect."""

    profile_id: str
    prefix: str = "cargo::"
    registration_key: str = "rustc-check-cfg"
    activation_key: str = "rustc-cfg"

    @classmethod
    def v0(cls) -> DirectiveProfile:
        """Default profile: double-colon Cargo directives."""
        return cls(profile_id="cargo-check-cfg")

    @classmethod
    def legacy(cls) -> DirectiveProfile:
        """Single-colon directives for Cargo before 1.77."""
        return cls(profile_id="cargo-check-cfg-legacy", prefix="cargo:")
