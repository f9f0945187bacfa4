"""Tests for directive rendering and emission."""
import io

import pytest

from build_cfg.core.constraint import ConstraintKind, ValueConstraint
from build_cfg.core.errors import EmissionFailure
from build_cfg.core.predicate import Activated
from build_cfg.io.directives import emit, quote, render_activation, render_registration
from build_cfg.io.schema import DirectiveKind
from build_cfg.policy.profile import DirectiveProfile


def _one_of(*values: str) -> ValueConstraint:
    return ValueConstraint.one_of("custom_cfg", values)


class TestQuote:
    def test_plain(self):
        assert quote("foo") == '"foo"'

    def test_escapes_quote_and_backslash(self):
        assert quote('a"b\\c') == '"a\\"b\\\\c"'


class TestRender:
    """Tests for render_registration() / render_activation()."""

    def test_registration_one_of(self):
        d = render_registration("custom_cfg", _one_of("foo", "bar"), DirectiveProfile.v0())
        assert d.kind == DirectiveKind.REGISTRATION
        assert d.values == ["foo", "bar"]
        assert d.line == 'cargo::rustc-check-cfg=cfg(custom_cfg, values("foo", "bar"))'

    def test_registration_boolean_has_empty_values(self):
        d = render_registration("nightly", ValueConstraint.unconstrained(), DirectiveProfile.v0())
        assert d.values == []
        assert d.constraint == ConstraintKind.NONE
        assert d.line == "cargo::rustc-check-cfg=cfg(nightly, values(none()))"

    def test_activation_without_value(self):
        d = render_activation("nightly", ValueConstraint.unconstrained(), None, DirectiveProfile.v0())
        assert d.kind == DirectiveKind.ACTIVATION
        assert d.value is None
        assert d.line == "cargo::rustc-cfg=nightly"

    def test_activation_with_value(self):
        d = render_activation("custom_cfg", _one_of("foo"), "foo", DirectiveProfile.v0())
        assert d.value == "foo"
        assert d.line == 'cargo::rustc-cfg=custom_cfg="foo"'

    def test_legacy_prefix(self):
        profile = DirectiveProfile.legacy()
        reg = render_registration("custom_cfg", _one_of("foo"), profile)
        act = render_activation("custom_cfg", _one_of("foo"), "foo", profile)
        assert reg.line == 'cargo:rustc-check-cfg=cfg(custom_cfg, values("foo"))'
        assert act.line == 'cargo:rustc-cfg=custom_cfg="foo"'


class TestEmit:
    """Tests for emit()."""

    def test_two_lines_in_order(self, sink: io.StringIO):
        pred = Activated(name="custom_cfg", constraint=_one_of("foo", "bar"), value="bar")
        directives = emit(pred, sink)
        assert [d.kind for d in directives] == [DirectiveKind.REGISTRATION, DirectiveKind.ACTIVATION]
        assert sink.getvalue() == (
            'cargo::rustc-check-cfg=cfg(custom_cfg, values("foo", "bar"))\n'
            'cargo::rustc-cfg=custom_cfg="bar"\n'
        )

    def test_no_deduplication(self, sink: io.StringIO):
        """Two activations of the same name both reach the channel."""
        pred = Activated(name="nightly", constraint=ValueConstraint.unconstrained())
        emit(pred, sink)
        emit(pred, sink)
        assert len(sink.getvalue().splitlines()) == 4

    def test_closed_stream(self):
        closed = io.StringIO()
        closed.close()
        pred = Activated(name="nightly", constraint=ValueConstraint.unconstrained())
        with pytest.raises(EmissionFailure):
            emit(pred, closed)

    def test_oserror(self, failing_sink):
        pred = Activated(name="nightly", constraint=ValueConstraint.unconstrained())
        with pytest.raises(EmissionFailure) as exc:
            emit(pred, failing_sink)
        assert "broken pipe" in exc.value.reason


class TestControlCharacters:
    """Values never split a directive across lines."""

    def test_quote_escapes_line_breaks(self):
        assert quote("a\nb\rc\td") == '"a\\nb\\rc\\td"'

    def test_quote_escapes_other_controls(self):
        assert quote("\x0b\x1b\x85\u2028") == '"\\u{b}\\u{1b}\\u{85}\\u{2028}"'

    def test_quote_leaves_printable_unicode(self):
        assert quote("ümlaut") == '"ümlaut"'

    def test_newline_in_value_emits_two_lines(self, sink: io.StringIO):
        pred = Activated(
            name="backend",
            constraint=ValueConstraint.any_value(),
            value="x\ncargo::rustc-link-lib=evil",
        )
        emit(pred, sink)
        lines = sink.getvalue().splitlines()
        assert len(lines) == 2
        assert lines[1] == 'cargo::rustc-cfg=backend="x\\ncargo::rustc-link-lib=evil"'

    def test_newline_in_allowed_values_emits_two_lines(self, sink: io.StringIO):
        pred = Activated(name="custom_cfg", constraint=_one_of("a\r\nb", "c"), value="c")
        emit(pred, sink)
        lines = sink.getvalue().splitlines()
        assert len(lines) == 2
        assert lines[0] == 'cargo::rustc-check-cfg=cfg(custom_cfg, values("a\\r\\nb", "c"))'
