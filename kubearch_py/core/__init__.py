"""Core functionality for the inspector package."""

from .errors import (
    KubeArchError,
    ParseError,
    ScanError,
    EmptyResultError,
    NoInputError,
    InspectionError,
)
from .contexts import load_contexts, parse_contexts, default_context, select_context
from .kubernetes import KubernetesConfig, WorkloadScanner, extract_workload_images
from .inspection import InspectionServiceClient, InspectionOrchestrator
from .pipeline import run_inspection, start_inspection
from .report import (
    FilterType,
    SortKey,
    SortDirection,
    ReportView,
    filter_results,
    sort_results,
    paginate,
)
from .export import to_csv, to_json, export_filename, write_export

__all__ = [
    "KubeArchError",
    "ParseError",
    "ScanError",
    "EmptyResultError",
    "NoInputError",
    "InspectionError",
    "load_contexts",
    "parse_contexts",
    "default_context",
    "select_context",
    "KubernetesConfig",
    "WorkloadScanner",
    "extract_workload_images",
    "InspectionServiceClient",
    "InspectionOrchestrator",
    "run_inspection",
    "start_inspection",
    "FilterType",
    "SortKey",
    "SortDirection",
    "ReportView",
    "filter_results",
    "sort_results",
    "paginate",
    "to_csv",
    "to_json",
    "export_filename",
    "write_export",
]
