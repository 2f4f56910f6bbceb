"""Report export to CSV and JSON."""

import csv
import io
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional, Sequence, Union

from ..models.inspection import ImageResult, InspectionReport
from ..utils.logging import get_logger

logger = get_logger(__name__)

EXPORT_PREFIX = "kubearchinspect"
EXPORT_FORMATS = ("csv", "json")

CSV_HEADERS = [
    "Image",
    "ARM64 Compatible",
    "Architectures",
    "Resource Type",
    "Resource Name",
    "Namespace",
    "Error",
]


def to_csv(
    report: InspectionReport,
    results: Optional[Sequence[ImageResult]] = None,
) -> str:
    """
    Export results as CSV.

    Every data cell is quoted and embedded quotes are doubled.

    Args:
        report: Report to export
        results: Filtered/sorted view to export instead of all results
    """
    rows = report.results if results is None else results
    buffer = io.StringIO()
    buffer.write(",".join(CSV_HEADERS) + "\n")

    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(
        [
            result.image,
            "Yes" if result.is_arm_compatible else "No",
            "; ".join(result.supported_architectures),
            result.resource_kind.value,
            result.resource_name,
            result.namespace,
            result.error or "",
        ]
        for result in rows
    )

    # No terminator after the last line
    return buffer.getvalue()[:-1]


def to_json(report: InspectionReport) -> str:
    """Export the full report as indented JSON."""
    return report.to_json()


def export_filename(fmt: str, when: Optional[Union[date, datetime]] = None) -> str:
    """
    Build the dated export file name, e.g. kubearchinspect-2024-05-01.csv.

    Raises:
        ValueError: If fmt is not a supported format
    """
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt}")
    when = when or datetime.now(timezone.utc)
    return f"{EXPORT_PREFIX}-{when.strftime('%Y-%m-%d')}.{fmt}"


def write_export(
    report: InspectionReport,
    fmt: str,
    output_dir: str = ".",
    results: Optional[Sequence[ImageResult]] = None,
) -> Path:
    """
    Write an export file and return its path.

    Args:
        report: Report to export
        fmt: "csv" or "json"
        output_dir: Target directory (created if missing)
        results: View to export instead of all results (CSV only)
    """
    content = to_csv(report, results) if fmt == "csv" else to_json(report)
    path = Path(output_dir) / export_filename(fmt)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    logger.debug(f"Wrote {fmt} export to {path}")
    return path
