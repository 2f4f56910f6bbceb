"""CLI entry points for the inspector package."""

import sys
import argparse
from typing import List, Optional

from ..config import Settings
from ..core.errors import KubeArchError
from .contexts import create_contexts_parser, run_contexts
from .inspect_cluster import create_inspect_parser, run_inspect
from .report import create_report_parser, run_report


def create_main_parser(settings: Optional[Settings] = None) -> argparse.ArgumentParser:
    """Create the main argument parser."""
    settings = settings or Settings()
    parser = argparse.ArgumentParser(
        prog="kubearch-py",
        description="KubeArchInspect - Kubernetes ARM64 Image Inspector",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  contexts   List kubeconfig contexts
  inspect    Inspect cluster images for ARM64 support
  report     View or export a saved JSON report

Environment:
  KUBEARCH_SERVICE_URL   Inspection service URL
  KUBEARCH_TIMEOUT       Timeout in seconds for kubectl and service calls
  KUBEARCH_PAGE_SIZE     Default results per page
  KUBECONFIG             Kubeconfig path

Examples:
  kubearch-py contexts
  kubearch-py inspect --context prod --namespace web --export csv json
  kubearch-py report --input kubearchinspect-2024-05-01.json --filter errors
""",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    create_contexts_parser(subparsers, settings)
    create_inspect_parser(subparsers, settings)
    create_report_parser(subparsers, settings)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"❌ Invalid configuration: {e}", file=sys.stderr)
        return 1

    parser = create_main_parser(settings)
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    command_handlers = {
        "contexts": run_contexts,
        "inspect": run_inspect,
        "report": run_report,
    }

    handler = command_handlers.get(args.command)
    if handler:
        try:
            return handler(args)
        except KeyboardInterrupt:
            print("\n\nOperation cancelled by user", file=sys.stderr)
            return 130
        except KubeArchError as e:
            print(f"❌ {e.message}", file=sys.stderr)
            if e.hint:
                print(f"   {e.hint}", file=sys.stderr)
            return 1
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
    else:
        parser.print_help()
        return 1


__all__ = ["main", "create_main_parser"]
