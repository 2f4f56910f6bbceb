"""Tests for the inspection client, orchestrator and run lifecycle."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
import requests

from kubearch_py.core.errors import EmptyResultError, InspectionError, NoInputError, ScanError
from kubearch_py.core.inspection import InspectionOrchestrator, InspectionServiceClient
from kubearch_py.core.kubernetes import KubernetesConfig, WorkloadScanner
from kubearch_py.core.pipeline import run_inspection, start_inspection
from kubearch_py.core.report import FilterType, filter_results
from kubearch_py.models.inspection import ImageReference, ImageResult, ResourceKind, Summary


ALPINE = ImageReference("alpine:3.18", ResourceKind.POD, "tools", "default")


def make_response(status_code=200, payload=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


def make_client(response=None, side_effect=None):
    session = MagicMock(spec=requests.Session)
    if side_effect is not None:
        session.post.side_effect = side_effect
    else:
        session.post.return_value = response
    return InspectionServiceClient("http://inspector:8080/", timeout=7, session=session), session


class TestInspectionServiceClient:
    """Test cases for InspectionServiceClient."""

    def test_request_shape(self):
        client, session = make_client(make_response(payload={"results": []}))

        client.inspect_images([ALPINE], context="prod", namespace="all")

        args, kwargs = session.post.call_args
        assert args[0] == "http://inspector:8080/inspect"
        assert kwargs["json"] == {"images": [{
            "image": "alpine:3.18",
            "resourceType": "Pod",
            "resourceName": "tools",
            "namespace": "default",
        }]}
        assert kwargs["params"] == {"context": "prod", "namespace": "all"}
        assert kwargs["timeout"] == 7

    def test_results_parsed_in_order(self):
        payload = {
            "results": [
                {"image": "b:1", "isArmCompatible": False, "supportedArch": ["amd64"],
                 "resourceType": "Deployment", "resourceName": "b", "namespace": "x"},
                {"image": "a:1", "isArmCompatible": True, "supportedArch": ["amd64", "arm64"],
                 "resourceType": "Pod", "resourceName": "a", "namespace": "x"},
            ],
            "summary": {"total": 99},
            "scanTime": "2024-05-01T00:00:00Z",
        }
        client, _ = make_client(make_response(payload=payload))

        results = client.inspect_images([ALPINE])

        assert [r.image for r in results] == ["b:1", "a:1"]
        assert results[1].supported_architectures == ("amd64", "arm64")

    def test_connection_error(self):
        client, _ = make_client(side_effect=requests.exceptions.ConnectionError("connection refused"))
        with pytest.raises(InspectionError, match="connection refused"):
            client.inspect_images([ALPINE])

    def test_timeout(self):
        client, _ = make_client(side_effect=requests.exceptions.Timeout("read timed out"))
        with pytest.raises(InspectionError, match="read timed out"):
            client.inspect_images([ALPINE])

    def test_http_error_status(self):
        client, _ = make_client(make_response(500, text="registry exploded"))
        with pytest.raises(InspectionError, match="HTTP 500: registry exploded"):
            client.inspect_images([ALPINE])

    def test_invalid_json(self):
        client, _ = make_client(make_response(payload=ValueError("Expecting value")))
        with pytest.raises(InspectionError, match="invalid JSON"):
            client.inspect_images([ALPINE])

    @pytest.mark.parametrize("payload", [[], {"results": "nope"}, {"summary": {}}])
    def test_missing_results(self, payload):
        client, _ = make_client(make_response(payload=payload))
        with pytest.raises(InspectionError):
            client.inspect_images([ALPINE])

    def test_malformed_result_entry(self):
        client, _ = make_client(make_response(payload={"results": [{"image": "a:1", "resourceType": "Gizmo"}]}))
        with pytest.raises(InspectionError, match="Malformed"):
            client.inspect_images([ALPINE])

    def test_health(self):
        session = MagicMock(spec=requests.Session)
        session.get.return_value = make_response(200)
        client = InspectionServiceClient("http://inspector", session=session)
        assert client.health()
        session.get.side_effect = requests.exceptions.ConnectionError("down")
        assert not client.health()


class TestInspectionOrchestrator:
    """Test cases for InspectionOrchestrator."""

    def test_compatible_alpine(self):
        client = MagicMock(spec=InspectionServiceClient)
        client.inspect_images.return_value = [
            ImageResult.from_dict({
                "image": "alpine:3.18",
                "isArmCompatible": True,
                "supportedArch": ["amd64", "arm64"],
                "resourceType": "Pod",
                "resourceName": "tools",
                "namespace": "default",
            })
        ]
        before = datetime.now(timezone.utc)

        report = InspectionOrchestrator(client).inspect([ALPINE], context="dev", namespace="default")

        assert report.summary == Summary(total=1, arm_compatible=1, not_compatible=0, errors=0)
        assert report.context == "dev"
        assert report.namespace == "default"
        assert report.scan_timestamp >= before
        client.inspect_images.assert_called_once_with([ALPINE], context="dev", namespace="default")

    def test_errored_image(self, result_factory):
        client = MagicMock(spec=InspectionServiceClient)
        client.inspect_images.return_value = [
            result_factory("private/app:1", compatible=True, error="manifest unknown"),
        ]

        report = InspectionOrchestrator(client).inspect([ALPINE], "dev", "default")

        assert report.results[0].error == "manifest unknown"
        assert report.summary.errors == 1
        assert filter_results(report, FilterType.COMPATIBLE) == []
        assert filter_results(report, FilterType.INCOMPATIBLE) == []
        assert filter_results(report, FilterType.ERRORS) == list(report.results)

    def test_no_input(self):
        client = MagicMock(spec=InspectionServiceClient)
        with pytest.raises(NoInputError):
            InspectionOrchestrator(client).inspect([], "dev", "default")
        client.inspect_images.assert_not_called()

    def test_failure_yields_no_report(self):
        client = MagicMock(spec=InspectionServiceClient)
        client.inspect_images.side_effect = InspectionError("boom")
        with pytest.raises(InspectionError):
            InspectionOrchestrator(client).inspect([ALPINE], "dev", "default")
        assert client.inspect_images.call_count == 1

    def test_count_mismatch_still_reported(self, result_factory):
        client = MagicMock(spec=InspectionServiceClient)
        client.inspect_images.return_value = [result_factory("a:1"), result_factory("b:1")]
        report = InspectionOrchestrator(client).inspect([ALPINE], "dev", "default")
        assert report.summary.total == 2


class TestPipeline:
    """Test cases for run_inspection and start_inspection."""

    def _scanner(self, references=None, error=None):
        scanner = MagicMock(spec=WorkloadScanner)
        scanner.config = KubernetesConfig(namespace="all", context="prod")
        if error is not None:
            scanner.scan.side_effect = error
        else:
            scanner.scan.return_value = references
        return scanner

    def test_run_inspection(self, result_factory):
        scanner = self._scanner([ALPINE])
        client = MagicMock(spec=InspectionServiceClient)
        client.inspect_images.return_value = [result_factory("alpine:3.18")]

        report = run_inspection(scanner, InspectionOrchestrator(client))

        client.inspect_images.assert_called_once_with([ALPINE], context="prod", namespace="all")
        assert report.context == "prod"
        assert report.summary.total == 1

    def test_scan_failure_propagates(self):
        scanner = self._scanner(error=ScanError("unauthorized"))
        orchestrator = MagicMock(spec=InspectionOrchestrator)
        with pytest.raises(ScanError):
            run_inspection(scanner, orchestrator)
        orchestrator.inspect.assert_not_called()

    def test_start_inspection_delivers_single_outcome(self):
        scanner = self._scanner(error=EmptyResultError("nothing"))
        future = start_inspection(scanner, MagicMock(spec=InspectionOrchestrator))
        with pytest.raises(EmptyResultError):
            future.result(timeout=5)
