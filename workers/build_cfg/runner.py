"""
build_cfg runner — top-level orchestration: declarations → directives + report.

Ties the predicate builder, the verdict vocabulary and IO together into
a single ``run_build_cfg`` function that can be called from a build
script, from the CLI, or programmatically.

Directives go to the output channel (stdout by default); logs and the
run summary go to stderr.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Mapping, Optional, TextIO, Union

from build_cfg.config import settings
from build_cfg.core.constraint import ConstraintKind
from build_cfg.core.errors import CfgError, ValueNotAllowed
from build_cfg.core.predicate import Activated, Constrained, Declared, declare
from build_cfg.env import activate_from_env
from build_cfg.io.schema import (
    BuildCfgReport,
    PredicateCounts,
    PredicateDeclaration,
    PredicateManifest,
    PredicateResult,
)
from build_cfg.io.writer import write_report
from build_cfg.policy.profile import DirectiveProfile
from build_cfg.policy.verdict import RejectReason, Verdict, gate_declaration, reason_for

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_FATAL = 2


# ── Declaration helpers ──────────────────────────────────────────────────────

def load_manifest(path: Path) -> PredicateManifest:
    """Read and validate a JSON declarations manifest."""
    return PredicateManifest.model_validate(json.loads(path.read_text()))


def _constrain(
    declared: Declared,
    decl: PredicateDeclaration,
) -> Union[Declared, Constrained]:
    if decl.constraint == ConstraintKind.ONE_OF:
        return declared.assigned_one_of(decl.values)
    if decl.constraint == ConstraintKind.NONE_OR_ONE_OF:
        return declared.assigned_none_or_one_of(decl.values)
    if decl.constraint == ConstraintKind.ANY:
        return declared.assigned_any()
    return declared


def declare_one(
    decl: PredicateDeclaration,
    out: Optional[TextIO] = None,
    profile: Optional[DirectiveProfile] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Activated:
    """Declare, constrain and activate one manifest entry."""
    builder = _constrain(declare(decl.name, out, profile), decl)

    if decl.env is not None:
        return activate_from_env(builder, decl.env, decl.default, environ)

    if isinstance(builder, Declared):
        if decl.value is not None:
            raise ValueNotAllowed(decl.name, decl.value, ())
        return builder.set()
    return builder.set(decl.value)


# ── Public API ───────────────────────────────────────────────────────────────

def run_build_cfg(
    manifest: PredicateManifest,
    out: Optional[TextIO] = None,
    profile: Optional[DirectiveProfile] = None,
    environ: Optional[Mapping[str, str]] = None,
    output_dir: Optional[Path] = None,
) -> BuildCfgReport:
    """
    Declare and activate every predicate in *manifest*, in order.

    Processing stops at the first rejected declaration: a build with a
    bad predicate is aborted, so later directives would be noise.

    Parameters
    ----------
    manifest : PredicateManifest
        Declarations to process.
    out : TextIO, optional
        Directive output channel.  Defaults to ``sys.stdout``.
    profile : DirectiveProfile, optional
        Directive dialect.  Defaults to DirectiveProfile.v0().
    environ : Mapping[str, str], optional
        Environment for ``env`` declarations.  Defaults to ``os.environ``.
    output_dir : Path, optional
        Directory to write build_cfg_report.json.  If None, the report
        is not written to disk.

    Returns
    -------
    BuildCfgReport
    """
    if profile is None:
        profile = DirectiveProfile.v0()

    report = BuildCfgReport(profile_id=profile.profile_id)
    counts = PredicateCounts()
    seen_names = set()

    for decl in manifest.predicates:
        counts.total += 1
        result = PredicateResult(
            name=decl.name,
            constraint=decl.constraint,
            value=decl.value,
            verdict=Verdict.ACCEPT.value,
        )
        report.results.append(result)

        # ── Step 1: manifest-level gate ──────────────────────────────
        verdict, reasons = gate_declaration(decl)
        if verdict == Verdict.REJECT:
            result.verdict = verdict.value
            result.reasons = reasons
            result.message = f"inconsistent declaration: {', '.join(reasons)}"
            logger.error("Predicate %s rejected: %s", decl.name, result.message)
            counts.reject += 1
            break

        # ── Step 2: declare, validate, emit ──────────────────────────
        if decl.name in seen_names:
            # Repeated names are left to the host to resolve.
            logger.debug("Predicate %s declared more than once", decl.name)
        seen_names.add(decl.name)

        try:
            activated = declare_one(decl, out, profile, environ)
        except CfgError as e:
            result.verdict = Verdict.REJECT.value
            result.reasons = [reason_for(e).value]
            result.message = str(e)
            logger.error("Predicate %s rejected: %s", decl.name, e)
            counts.reject += 1
            break

        result.value = activated.value
        result.directives = [d.line for d in activated.directives]
        counts.accept += 1

    report.counts = counts

    if output_dir:
        path = write_report(report, output_dir)
        logger.info("Wrote build_cfg report to %s", path)

    return report


def exit_code(report: BuildCfgReport) -> int:
    """Process exit status for a finished run."""
    reasons = {r for res in report.results for r in res.reasons}
    if RejectReason.EMISSION_FAILURE.value in reasons:
        return EXIT_FATAL
    if report.counts.reject:
        return EXIT_REJECTED
    return EXIT_OK


# ── CLI ──────────────────────────────────────────────────────────────────────

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="build-cfg",
        description="build_cfg — declare and activate custom cfg predicates for Cargo build scripts",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging (stderr)",
    )
    parser.add_argument(
        "--legacy-prefix",
        action="store_true",
        default=settings.LEGACY_PREFIX,
        help="Emit cargo: directives instead of cargo:: (Cargo < 1.77)",
    )
    parser.add_argument(
        "--report-dir",
        type=Path,
        default=Path(settings.REPORT_DIR) if settings.REPORT_DIR else None,
        help="Directory to write build_cfg_report.json",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_declare = sub.add_parser("declare", help="Declare and activate a single predicate")
    p_declare.add_argument("name", help="Predicate name")
    constraint = p_declare.add_mutually_exclusive_group()
    constraint.add_argument("--one-of", nargs="+", metavar="VALUE", help="Allowed values")
    constraint.add_argument(
        "--none-or-one-of", nargs="+", metavar="VALUE",
        help="Allowed values; activating with no value is also legal",
    )
    constraint.add_argument("--any", action="store_true", help="Any value is legal")
    source = p_declare.add_mutually_exclusive_group()
    source.add_argument("--value", help="Value to activate with")
    source.add_argument("--from-env", metavar="VAR", help="Read the value from VAR")
    p_declare.add_argument("--default", help="Value used when --from-env VAR is unset or empty")

    p_manifest = sub.add_parser("manifest", help="Process a JSON declarations manifest")
    p_manifest.add_argument("path", type=Path, help="Path to the manifest")

    return parser


def _declaration_from_args(args: argparse.Namespace) -> PredicateDeclaration:
    if args.one_of is not None:
        constraint, values = ConstraintKind.ONE_OF, args.one_of
    elif args.none_or_one_of is not None:
        constraint, values = ConstraintKind.NONE_OR_ONE_OF, args.none_or_one_of
    elif args.any:
        constraint, values = ConstraintKind.ANY, []
    else:
        constraint, values = ConstraintKind.NONE, []
    return PredicateDeclaration(
        name=args.name,
        constraint=constraint,
        values=values,
        value=args.value,
        env=args.from_env,
        default=args.default,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point for build_cfg."""
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.LOG_LEVEL.upper(),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command == "manifest":
        try:
            manifest = load_manifest(args.path)
        except (OSError, ValueError) as e:
            logger.error("Cannot load manifest %s: %s", args.path, e)
            return EXIT_FATAL
    else:
        manifest = PredicateManifest(predicates=[_declaration_from_args(args)])

    profile = DirectiveProfile.legacy() if args.legacy_prefix else DirectiveProfile.v0()
    report = run_build_cfg(
        manifest,
        out=sys.stdout,
        profile=profile,
        output_dir=args.report_dir,
    )

    print(
        f"Predicates: {report.counts.total} "
        f"(accept={report.counts.accept}, reject={report.counts.reject})",
        file=sys.stderr,
    )
    if args.report_dir:
        print(f"Report written to: {args.report_dir}", file=sys.stderr)

    return exit_code(report)


if __name__ == "__main__":
    sys.exit(main())
