"""CLI for inspecting a cluster's images for ARM64 support."""

import argparse
from typing import Any

from ..config import Settings
from ..core.contexts import get_kubeconfig_path, load_contexts, select_context
from ..core.errors import EmptyResultError, InspectionError, KubeArchError, ParseError, ScanError
from ..core.inspection import InspectionOrchestrator, InspectionServiceClient
from ..core.kubernetes import KubernetesConfig, WorkloadScanner, load_ignore_patterns
from ..core.pipeline import start_inspection
from ..models.inspection import ALL_NAMESPACES
from ..utils.logging import setup_logging, LogLevel
from ..utils.progress import Spinner
from ..utils.subprocess import check_prerequisites
from .report import add_view_arguments, render_and_export


def create_inspect_parser(subparsers: Any, settings: Settings) -> argparse.ArgumentParser:
    """Create the inspect subparser."""
    parser = subparsers.add_parser(
        "inspect",
        help="Inspect cluster images for ARM64 support",
        description="""
Inspect all container images running in a Kubernetes cluster.

Lists pods, deployments, statefulsets, daemonsets, jobs and cronjobs,
deduplicates their container images per workload, sends them to the
inspection service and prints an ARM64 compatibility report.
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Inspect all namespaces of the current context
  kubearch-py inspect

  # Inspect one namespace of a specific context and export CSV + JSON
  kubearch-py inspect --context prod --namespace web --export csv json

  # Show only incompatible images
  kubearch-py inspect --filter incompatible

  # List the image references that would be inspected
  kubearch-py inspect --namespace web --dry-run
""",
    )

    # Kubernetes options
    parser.add_argument(
        "--context",
        help="Kubernetes context to use (default: current context)",
    )
    parser.add_argument(
        "--namespace", "-n",
        default=ALL_NAMESPACES,
        help="Namespace to inspect, or 'all' (default: all)",
    )
    parser.add_argument(
        "--kubeconfig",
        default=settings.kubeconfig,
        help="Path to kubeconfig file (default: $KUBECONFIG or ~/.kube/config)",
    )
    parser.add_argument(
        "--include-init-containers",
        action="store_true",
        help="Also inspect init container images",
    )
    parser.add_argument(
        "--ignore-file",
        help="File containing image patterns to ignore (one per line)",
    )

    # Service options
    parser.add_argument(
        "--service-url",
        default=settings.service_url,
        help=f"Inspection service URL (default: {settings.service_url})",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=settings.timeout,
        help=f"Timeout for kubectl and service calls in seconds (default: {settings.timeout})",
    )

    # Mode options
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List image references without inspecting them",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging (shows errors and debug info)",
    )

    add_view_arguments(parser, settings)
    return parser


def _resolve_context(args: argparse.Namespace) -> str:
    """Pick the context name to scan; empty means kubectl's current context."""
    contexts = load_contexts(get_kubeconfig_path(args.kubeconfig))
    if not contexts:
        if args.context:
            return args.context
        raise ParseError("No contexts available in kubeconfig")
    return select_context(contexts, args.context).name


def run_inspect(args: argparse.Namespace) -> int:
    """
    Run a cluster inspection.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    log_level = LogLevel.VERBOSE if args.verbose else LogLevel.INFO
    setup_logging(log_level, show_errors=args.verbose)

    missing = check_prerequisites(["kubectl"])
    if missing:
        print(f"❌ Missing required tools: {', '.join(missing)}")
        return 1

    context_name = _resolve_context(args)

    ignore_patterns = []
    if args.ignore_file:
        ignore_patterns = load_ignore_patterns(args.ignore_file)
        print(f"📂 Loaded {len(ignore_patterns)} ignore patterns")

    k8s_config = KubernetesConfig(
        namespace=args.namespace,
        kubeconfig=args.kubeconfig,
        context=context_name,
        include_init_containers=args.include_init_containers,
        ignore_patterns=ignore_patterns,
    )
    scanner = WorkloadScanner(config=k8s_config, timeout=args.timeout)

    print("🚀 KubeArchInspect - ARM64 Image Inspector")
    print()
    print("⚙️  Configuration:")
    print(f"   • Context: {context_name}")
    print(f"   • Namespace: {k8s_config.scope}")
    print(f"   • Inspection service: {args.service_url}")
    if args.dry_run:
        print("   • Mode: DRY RUN")
    print()

    if not scanner.test_connectivity():
        raise ScanError(
            f"Cannot reach cluster for context '{context_name}' (scope: {k8s_config.scope})"
        )

    if args.dry_run:
        try:
            references = scanner.scan()
        except EmptyResultError:
            print("⚠️  No resources found")
            return 0
        print(f"[DRY RUN] Would inspect {len(references)} image references:")
        for reference in references:
            print(
                f"     • {reference.image}  ({reference.resource_kind.value} "
                f"{reference.namespace}/{reference.resource_name})"
            )
        return 0

    client = InspectionServiceClient(args.service_url, timeout=args.timeout)
    if not client.health():
        raise InspectionError(f"Inspection service at {args.service_url} failed its health check")
    orchestrator = InspectionOrchestrator(client)

    spinner = Spinner("Scanning workloads and inspecting images...")
    try:
        report = spinner.wait(start_inspection(scanner, orchestrator))
    except EmptyResultError:
        spinner.finish("No resources found", success=True)
        return 0
    except KubeArchError:
        spinner.finish("Inspection failed", success=False)
        raise
    spinner.finish(f"Inspected {report.summary.total} images", success=True)

    render_and_export(report, args)
    return 0
