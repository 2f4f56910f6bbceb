"""Shared pytest fixtures for inspector tests."""

from datetime import datetime, timezone
from typing import Any, Dict, List

import pytest

from kubearch_py.models.inspection import ImageResult, InspectionReport, ResourceKind


KUBECONFIG_YAML = """
apiVersion: v1
kind: Config
current-context: prod
contexts:
  - name: dev
    context:
      cluster: dev-cluster
      user: dev-user
  - name: prod
    context:
      cluster: prod-cluster
      user: prod-user
      namespace: web
clusters: []
users: []
"""


def make_workload(kind: str, name: str, namespace: str, images: List[str]) -> Dict[str, Any]:
    """Build a workload object shaped like kubectl JSON output."""
    pod_spec = {"containers": [{"name": f"c{i}", "image": image} for i, image in enumerate(images)]}
    if kind == "Pod":
        spec = pod_spec
    elif kind == "CronJob":
        spec = {"jobTemplate": {"spec": {"template": {"spec": pod_spec}}}}
    else:
        spec = {"template": {"spec": pod_spec}}
    return {"kind": kind, "metadata": {"name": name, "namespace": namespace}, "spec": spec}


def make_result(
    image: str,
    compatible: bool = True,
    error: str = None,
    kind: ResourceKind = ResourceKind.DEPLOYMENT,
    name: str = "web",
    namespace: str = "default",
    archs=("amd64", "arm64"),
) -> ImageResult:
    return ImageResult(
        image=image,
        is_arm_compatible=compatible,
        resource_kind=kind,
        resource_name=name,
        namespace=namespace,
        supported_architectures=archs,
        error=error,
    )


@pytest.fixture
def kubeconfig_yaml() -> str:
    return KUBECONFIG_YAML


@pytest.fixture
def kubeconfig_file(tmp_path, kubeconfig_yaml):
    path = tmp_path / "config"
    path.write_text(kubeconfig_yaml)
    return path


@pytest.fixture
def sample_results() -> List[ImageResult]:
    return [
        make_result("nginx:1.25", True, name="frontend", namespace="web"),
        make_result("legacy/app:2.0", False, name="Backend", namespace="api",
                    kind=ResourceKind.STATEFUL_SET, archs=("amd64",)),
        make_result("private.io/broken:1", error="unauthorized", name="worker",
                    namespace="jobs", kind=ResourceKind.JOB, archs=()),
        make_result("alpine:3.18", True, name="cleanup", namespace="jobs",
                    kind=ResourceKind.CRON_JOB),
        make_result("Busybox:latest", False, name="debug", namespace="default",
                    kind=ResourceKind.POD, archs=("amd64", "386")),
    ]


@pytest.fixture
def sample_report(sample_results) -> InspectionReport:
    return InspectionReport.build(
        sample_results,
        context="prod",
        namespace="all",
        scan_timestamp=datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def workload_factory():
    return make_workload


@pytest.fixture
def result_factory():
    return make_result
