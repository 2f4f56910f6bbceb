"""Tests for the command line interface."""

from concurrent.futures import Future
from unittest.mock import patch

import pytest

from kubearch_py.cli import create_main_parser, main
from kubearch_py.core.errors import EmptyResultError, InspectionError, ScanError
from kubearch_py.models.inspection import KubeContext


def completed(result=None, error=None):
    future = Future()
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(result)
    return future


@pytest.fixture
def inspect_env():
    """Patch the cluster-facing collaborators of the inspect command."""
    with patch("kubearch_py.cli.inspect_cluster.check_prerequisites", return_value=[]), \
            patch("kubearch_py.cli.inspect_cluster.load_contexts",
                  return_value=[KubeContext("dev"), KubeContext("prod", is_current=True)]), \
            patch("kubearch_py.cli.inspect_cluster.WorkloadScanner.test_connectivity", return_value=True), \
            patch("kubearch_py.cli.inspect_cluster.InspectionServiceClient.health", return_value=True), \
            patch("kubearch_py.cli.inspect_cluster.start_inspection") as start:
        yield start


class TestParser:
    """Test cases for argument parsing."""

    def test_inspect_defaults(self):
        args = create_main_parser().parse_args(["inspect"])
        assert args.namespace == "all"
        assert args.filter == "all"
        assert args.sort_by == "image"
        assert args.page == 1
        assert args.export == []

    def test_no_command(self, capsys):
        assert main([]) == 1

    def test_invalid_env(self, monkeypatch, capsys):
        monkeypatch.setenv("KUBEARCH_PAGE_SIZE", "lots")
        assert main(["contexts"]) == 1
        assert "KUBEARCH_PAGE_SIZE" in capsys.readouterr().err


class TestContextsCommand:
    """Test cases for the contexts command."""

    def test_lists_contexts(self, kubeconfig_file, capsys):
        assert main(["contexts", "--kubeconfig", str(kubeconfig_file)]) == 0
        out = capsys.readouterr().out
        assert " * prod" in out
        assert "   dev" in out

    def test_no_contexts(self, tmp_path, capsys):
        assert main(["contexts", "--kubeconfig", str(tmp_path / "missing")]) == 1
        assert "No contexts available" in capsys.readouterr().out


class TestInspectCommand:
    """Test cases for the inspect command."""

    def test_success_with_exports(self, inspect_env, sample_report, tmp_path, capsys):
        inspect_env.return_value = completed(sample_report)

        code = main([
            "inspect", "--namespace", "web", "--filter", "incompatible",
            "--export", "csv", "json", "--output-dir", str(tmp_path),
        ])

        assert code == 0
        scanner = inspect_env.call_args[0][0]
        assert scanner.config.context == "prod"
        assert scanner.config.namespace == "web"
        out = capsys.readouterr().out
        assert "ARM64 compatible: 2" in out
        assert "legacy/app:2.0" in out
        assert "nginx:1.25" not in out.split("ARCHITECTURES")[-1]
        assert len(list(tmp_path.glob("kubearchinspect-*.csv"))) == 1
        assert len(list(tmp_path.glob("kubearchinspect-*.json"))) == 1

    def test_explicit_context(self, inspect_env, sample_report):
        inspect_env.return_value = completed(sample_report)
        assert main(["inspect", "--context", "dev"]) == 0
        assert inspect_env.call_args[0][0].config.context == "dev"

    def test_unknown_context(self, inspect_env, capsys):
        assert main(["inspect", "--context", "staging"]) == 1
        err = capsys.readouterr().err
        assert "'staging' not found" in err
        inspect_env.assert_not_called()

    def test_empty_result_is_not_failure(self, inspect_env, capsys):
        inspect_env.return_value = completed(error=EmptyResultError("No container images found"))
        assert main(["inspect"]) == 0
        assert "No resources found" in capsys.readouterr().err

    @pytest.mark.parametrize("error,hint", [
        (ScanError("Failed to list workloads: connection refused"), "cluster connectivity"),
        (InspectionError("Inspection service unreachable: connection refused"), "inspection service"),
    ])
    def test_failures_name_cause_and_remedy(self, inspect_env, capsys, error, hint):
        inspect_env.return_value = completed(error=error)
        assert main(["inspect"]) == 1
        err = capsys.readouterr().err
        assert error.message in err
        assert hint in err

    def test_unreachable_cluster_stops_before_run(self, inspect_env, capsys):
        with patch("kubearch_py.cli.inspect_cluster.WorkloadScanner.test_connectivity",
                   return_value=False):
            assert main(["inspect", "--namespace", "web"]) == 1
        err = capsys.readouterr().err
        assert "Cannot reach cluster for context 'prod' (scope: web)" in err
        assert "cluster connectivity" in err
        inspect_env.assert_not_called()

    def test_unhealthy_service_stops_before_run(self, inspect_env, capsys):
        with patch("kubearch_py.cli.inspect_cluster.InspectionServiceClient.health",
                   return_value=False):
            assert main(["inspect", "--service-url", "http://inspector:9000"]) == 1
        err = capsys.readouterr().err
        assert "http://inspector:9000 failed its health check" in err
        assert "inspection service" in err
        inspect_env.assert_not_called()

    def test_missing_kubectl(self, capsys):
        with patch("kubearch_py.cli.inspect_cluster.check_prerequisites", return_value=["kubectl"]):
            assert main(["inspect"]) == 1
        assert "kubectl" in capsys.readouterr().out


class TestReportCommand:
    """Test cases for the report command."""

    def test_render_saved_report(self, sample_report, tmp_path, capsys):
        path = tmp_path / "report.json"
        path.write_text(sample_report.to_json())

        code = main([
            "report", "--input", str(path), "--filter", "errors",
            "--export", "csv", "--export-view", "--output-dir", str(tmp_path),
        ])

        assert code == 0
        out = capsys.readouterr().out
        assert "private.io/broken:1" in out
        assert "Page 1 of 1 (1 matching results)" in out
        csv_text = next(tmp_path.glob("kubearchinspect-*.csv")).read_text()
        assert len(csv_text.split("\n")) == 2

    def test_invalid_report(self, tmp_path, capsys):
        path = tmp_path / "report.json"
        path.write_text("{not json")
        assert main(["report", "--input", str(path)]) == 1
        assert "Invalid report file" in capsys.readouterr().err

    def test_page_must_be_positive(self, sample_report, tmp_path, capsys):
        path = tmp_path / "report.json"
        path.write_text(sample_report.to_json())
        assert main(["report", "--input", str(path), "--page", "0"]) == 1
        assert "--page must be at least 1" in capsys.readouterr().err

    def test_page_past_end(self, sample_report, tmp_path, capsys):
        path = tmp_path / "report.json"
        path.write_text(sample_report.to_json())
        assert main(["report", "--input", str(path), "--page", "9"]) == 0
        assert "No results match the current view" in capsys.readouterr().out
