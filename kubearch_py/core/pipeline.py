"""Inspection run lifecycle: scan, then inspect."""

from concurrent.futures import Future, ThreadPoolExecutor

from ..models.inspection import InspectionReport
from ..utils.logging import get_logger
from .inspection import InspectionOrchestrator
from .kubernetes import WorkloadScanner

logger = get_logger(__name__)


def run_inspection(
    scanner: WorkloadScanner,
    orchestrator: InspectionOrchestrator,
) -> InspectionReport:
    """
    Perform one complete run and return its report.

    Any failure ends the run; no partial report is produced.
    """
    references = scanner.scan()
    report = orchestrator.inspect(
        references,
        context=scanner.config.context or "",
        namespace=scanner.config.scope,
    )
    logger.success(
        f"Inspected {report.summary.total} images: "
        f"{report.summary.arm_compatible} ARM64 compatible"
    )
    return report


def start_inspection(
    scanner: WorkloadScanner,
    orchestrator: InspectionOrchestrator,
) -> "Future[InspectionReport]":
    """
    Start a run in the background.

    The returned future delivers exactly one report or one exception.
    To cancel, drop the future; the worker finishes on its own and its
    result is discarded.
    """
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="kubearch-run")
    try:
        return executor.submit(run_inspection, scanner, orchestrator)
    finally:
        executor.shutdown(wait=False)
