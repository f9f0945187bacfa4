"""
Writer — serialize the build_cfg report to JSON.

Filesystem layout:
    <output_dir>/build_cfg_report.json
"""
import json
from pathlib import Path

from build_cfg.io.schema import BuildCfgReport

REPORT_FILENAME = "build_cfg_report.json"


def write_report(report: BuildCfgReport, output_dir: Path) -> Path:
    """
    Write *report* into *output_dir*.

    Creates *output_dir* if it does not exist.
    Returns the report file path.
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    report_path = output_dir / REPORT_FILENAME
    report_path.write_text(
        json.dumps(
            report.model_dump(mode="json"),
            indent=2,
            sort_keys=True,
        )
        + "\n"
    )
    return report_path
