"""CLI for re-rendering and exporting a saved inspection report.

Also holds the view options and output helpers shared with `inspect`.
"""

import argparse
from pathlib import Path
from typing import Any, List, Sequence

from ..config import Settings
from ..core.errors import ParseError
from ..core.export import EXPORT_FORMATS, write_export
from ..core.report import FilterType, ReportView, SortDirection, SortKey, page_count
from ..models.inspection import ImageResult, InspectionReport, format_timestamp
from ..utils.logging import setup_logging, LogLevel


def add_view_arguments(parser: argparse.ArgumentParser, settings: Settings) -> None:
    """Add filter/sort/page/export options to a subparser."""
    view = parser.add_argument_group("view options")
    view.add_argument(
        "--filter",
        choices=[f.value for f in FilterType],
        default=FilterType.ALL.value,
        help="Result bucket to show (default: all)",
    )
    view.add_argument(
        "--search",
        default="",
        help="Case-insensitive text matched against image, resource, namespace and kind",
    )
    view.add_argument(
        "--sort-by",
        choices=[k.value for k in SortKey],
        default=SortKey.IMAGE.value,
        help="Column to sort by (default: image)",
    )
    view.add_argument(
        "--desc",
        action="store_true",
        help="Sort descending",
    )
    view.add_argument(
        "--page",
        type=int,
        default=1,
        help="Page number, starting at 1 (default: 1)",
    )
    view.add_argument(
        "--page-size",
        type=int,
        default=settings.page_size,
        help=f"Results per page (default: {settings.page_size})",
    )

    export = parser.add_argument_group("export options")
    export.add_argument(
        "--export",
        nargs="+",
        choices=EXPORT_FORMATS,
        default=[],
        help="Write export files (csv, json)",
    )
    export.add_argument(
        "--output-dir",
        default=".",
        help="Directory for export files (default: current directory)",
    )
    export.add_argument(
        "--export-view",
        action="store_true",
        help="Export only the filtered and sorted results to CSV",
    )


def build_view(args: argparse.Namespace) -> ReportView:
    """Build a ReportView from parsed arguments."""
    if args.page < 1:
        raise ValueError("--page must be at least 1")
    if args.page_size <= 0:
        raise ValueError("--page-size must be positive")
    return ReportView(
        filter_type=FilterType(args.filter),
        search_text=args.search,
        sort_key=SortKey(args.sort_by),
        direction=SortDirection.DESC if args.desc else SortDirection.ASC,
        page_index=args.page - 1,
        page_size=args.page_size,
    )


def print_summary(report: InspectionReport) -> None:
    """Print the report header and summary counts."""
    summary = report.summary
    print()
    print("📊 Inspection Summary")
    print(f"   • Context: {report.context or '(current)'}")
    print(f"   • Namespace: {report.namespace}")
    print(f"   • Scanned: {format_timestamp(report.scan_timestamp)}")
    print(f"   • Total images: {summary.total}")
    print(f"   • ARM64 compatible: {summary.arm_compatible}")
    print(f"   • Not compatible: {summary.not_compatible}")
    print(f"   • Errors: {summary.errors}")
    print()


def _status_label(result: ImageResult) -> str:
    return {
        "compatible": "✅ yes",
        "not-compatible": "❌ no",
        "error": "⚠️  error",
    }[result.status]


def print_results(page: Sequence[ImageResult], view: ReportView, matched: int) -> None:
    """Print one page of results as a table."""
    if not page:
        print("No results match the current view")
        return

    rows: List[List[str]] = [["IMAGE", "ARM64", "KIND", "NAME", "NAMESPACE", "ARCHITECTURES"]]
    for result in page:
        rows.append([
            result.image,
            _status_label(result),
            result.resource_kind.value,
            result.resource_name,
            result.namespace,
            result.error or ", ".join(result.supported_architectures),
        ])

    widths = [max(len(row[i]) for row in rows) for i in range(len(rows[0]))]
    for row in rows:
        print("  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip())

    pages = page_count(matched, view.page_size)
    print()
    print(f"Page {view.page_index + 1} of {pages} ({matched} matching results)")


def render_and_export(report: InspectionReport, args: argparse.Namespace) -> None:
    """Print the requested view and write any requested exports."""
    view = build_view(args)
    page, matched = view.apply(report)

    print_summary(report)
    print_results(page, view, matched)

    for fmt in args.export:
        selection = view.select(report) if args.export_view and fmt == "csv" else None
        path = write_export(report, fmt, args.output_dir, results=selection)
        print(f"💾 Exported {fmt.upper()} to {path}")


def load_report(path: str) -> InspectionReport:
    """
    Load a report from a JSON export.

    Raises:
        ParseError: If the file cannot be read or is not a report
    """
    try:
        text = Path(path).read_text()
    except OSError as e:
        raise ParseError(f"Cannot read report {path}: {e}") from e

    try:
        return InspectionReport.from_json(text)
    except ValueError as e:
        raise ParseError(f"Invalid report file {path}: {e}") from e


def create_report_parser(subparsers: Any, settings: Settings) -> argparse.ArgumentParser:
    """Create the report subparser."""
    parser = subparsers.add_parser(
        "report",
        help="View or export a saved JSON report",
        description="""
Load a JSON report written by `inspect --export json` and apply
filtering, sorting, paging and export again without contacting
the cluster or the inspection service.
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show incompatible images, sorted by namespace
  kubearch-py report --input kubearchinspect-2024-05-01.json --filter incompatible --sort-by namespace

  # Export only errored images as CSV
  kubearch-py report --input report.json --filter errors --export csv --export-view
""",
    )
    parser.add_argument(
        "--input", "-i",
        required=True,
        help="JSON report file",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    add_view_arguments(parser, settings)
    return parser


def run_report(args: argparse.Namespace) -> int:
    """
    Render a saved report.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    setup_logging(LogLevel.VERBOSE if args.verbose else LogLevel.INFO, show_errors=args.verbose)

    report = load_report(args.input)
    render_and_export(report, args)
    return 0
