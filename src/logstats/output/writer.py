"""JSON output for the statistics report."""

import json
import logging
from pathlib import Path

from logstats.models.report import Report

logger = logging.getLogger(__name__)


def render_report(report: Report) -> str:
    """Pretty-print the report, two-space indent like the files we've always shipped."""
    return json.dumps(report.to_json_dict(), indent=2, ensure_ascii=False)


def write_report(report: Report, path: str | Path) -> Path:
    """Write the report to path in one go.

    the whole document is rendered before the file is opened, so a failure
    while rendering never leaves a half-written file behind. OSError from the
    write itself is left to the caller.
    """
    path = Path(path)
    content = render_report(report)
    path.write_text(content, encoding="utf-8")
    logger.info("wrote report to %s", path)
    return path
