"""
Test fixtures for build_cfg.

Provides in-memory output channels and sample declaration manifests.
"""
from __future__ import annotations

import io
import json
import textwrap
from pathlib import Path

import pytest


# ── Sample manifests ────────────────────────────────────────────────────────

SIMPLE_MANIFEST = textwrap.dedent("""\
    {
      "predicates": [
        {"name": "custom_cfg", "constraint": "one_of", "values": ["foo", "bar"], "value": "foo"},
        {"name": "nightly"},
        {"name": "backend", "constraint": "any", "value": "vulkan"}
      ]
    }
""")

REJECTED_MANIFEST = {
    "predicates": [
        {"name": "first", "constraint": "one_of", "values": ["a"], "value": "a"},
        {"name": "custom_cfg", "constraint": "one_of", "values": ["foo", "bar"], "value": "baz"},
        {"name": "never_reached"},
    ]
}


class FailingSink(io.StringIO):
    """Text stream whose writes always fail."""

    def write(self, s: str) -> int:
        raise OSError("broken pipe")


# ── Fixtures ────────────────────────────────────────────────────────────────

@pytest.fixture
def sink() -> io.StringIO:
    """In-memory directive channel."""
    return io.StringIO()


@pytest.fixture
def failing_sink() -> FailingSink:
    return FailingSink()


@pytest.fixture
def simple_manifest_file(tmp_path: Path) -> Path:
    p = tmp_path / "cfg.json"
    p.write_text(SIMPLE_MANIFEST)
    return p


@pytest.fixture
def rejected_manifest_file(tmp_path: Path) -> Path:
    p = tmp_path / "rejected.json"
    p.write_text(json.dumps(REJECTED_MANIFEST))
    return p
