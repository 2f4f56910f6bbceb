"""CLI for listing kubeconfig contexts."""

import argparse
from typing import Any

from ..config import Settings
from ..core.contexts import get_kubeconfig_path, load_contexts
from ..utils.logging import setup_logging, LogLevel


def create_contexts_parser(subparsers: Any, settings: Settings) -> argparse.ArgumentParser:
    """Create the contexts subparser."""
    parser = subparsers.add_parser(
        "contexts",
        help="List Kubernetes contexts from the kubeconfig",
        description="List the contexts of a kubeconfig and mark the current one.",
    )
    parser.add_argument(
        "--kubeconfig",
        default=settings.kubeconfig,
        help="Path to kubeconfig file (default: $KUBECONFIG or ~/.kube/config)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def run_contexts(args: argparse.Namespace) -> int:
    """
    List contexts.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (1 when no contexts are available)
    """
    setup_logging(LogLevel.VERBOSE if args.verbose else LogLevel.INFO, show_errors=True)

    path = get_kubeconfig_path(args.kubeconfig)
    contexts = load_contexts(path)
    if not contexts:
        print(f"⚠️  No contexts available in {path}")
        return 1

    print(f"📂 Contexts in {path}:")
    for context in contexts:
        marker = "*" if context.is_current else " "
        print(
            f" {marker} {context.name}  "
            f"(cluster: {context.cluster or '-'}, user: {context.user or '-'}, "
            f"namespace: {context.namespace})"
        )
    return 0
