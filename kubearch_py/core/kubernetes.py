"""Kubernetes workload scanning.

Lists workloads in a context/namespace and flattens them into
deduplicated container image references.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..models.inspection import (
    ALL_NAMESPACES,
    DEFAULT_NAMESPACE,
    ImageReference,
    ResourceKind,
)
from ..utils.subprocess import run_command
from ..utils.logging import get_logger, is_verbose
from .errors import EmptyResultError, ParseError, ScanError

logger = get_logger(__name__)

WORKLOAD_RESOURCES = "pods,deployments,statefulsets,daemonsets,jobs,cronjobs"

# Where each kind keeps its pod spec
_POD_SPEC_PATHS: Dict[ResourceKind, Tuple[str, ...]] = {
    ResourceKind.POD: ("spec",),
    ResourceKind.DEPLOYMENT: ("spec", "template", "spec"),
    ResourceKind.STATEFUL_SET: ("spec", "template", "spec"),
    ResourceKind.DAEMON_SET: ("spec", "template", "spec"),
    ResourceKind.JOB: ("spec", "template", "spec"),
    ResourceKind.CRON_JOB: ("spec", "jobTemplate", "spec", "template", "spec"),
}


@dataclass
class KubernetesConfig:
    """Kubernetes connection configuration."""
    namespace: Optional[str] = None
    kubeconfig: Optional[str] = None
    context: Optional[str] = None
    include_init_containers: bool = False
    ignore_patterns: List[str] = field(default_factory=list)

    @property
    def all_namespaces(self) -> bool:
        """Whether the scan covers every namespace."""
        return not self.namespace or self.namespace == ALL_NAMESPACES

    @property
    def scope(self) -> str:
        """Namespace scope label used in reports."""
        return ALL_NAMESPACES if self.all_namespaces else self.namespace

    def get_kubectl_args(self) -> List[str]:
        """Get kubectl connection arguments."""
        args = []
        if self.kubeconfig:
            args.append(f"--kubeconfig={self.kubeconfig}")
        if self.context:
            args.append(f"--context={self.context}")
        return args

    def get_scope_args(self) -> List[str]:
        """Get kubectl namespace scope arguments."""
        if self.all_namespaces:
            return ["--all-namespaces"]
        return ["-n", self.namespace]


def pod_spec_path(kind: ResourceKind) -> Tuple[str, ...]:
    """
    Return the key path from a workload object to its pod spec.

    Raises:
        NotImplementedError: If the kind has no known pod spec location
    """
    try:
        return _POD_SPEC_PATHS[kind]
    except KeyError:
        raise NotImplementedError(f"No pod spec accessor for kind {kind.value}") from None


def _lookup(obj: Any, path: Iterable[str]) -> Dict[str, Any]:
    for key in path:
        if not isinstance(obj, dict):
            return {}
        obj = obj.get(key)
    return obj if isinstance(obj, dict) else {}


def extract_containers(
    item: Dict[str, Any],
    kind: ResourceKind,
    include_init_containers: bool = False,
) -> List[Dict[str, Any]]:
    """
    Get the container definitions of a workload object.

    Args:
        item: Workload object as returned by the API server
        kind: Kind of the workload
        include_init_containers: Also return init containers

    Returns:
        Container dictionaries (possibly empty)
    """
    pod_spec = _lookup(item, pod_spec_path(kind))
    keys = ["containers"]
    if include_init_containers:
        keys.append("initContainers")

    containers = []
    for key in keys:
        for container in pod_spec.get(key) or []:
            if isinstance(container, dict):
                containers.append(container)
    return containers


def _should_ignore(image: str, patterns: List[str]) -> bool:
    """Check if image matches any ignore pattern."""
    return any(pattern in image for pattern in patterns)


def extract_workload_images(
    items: Iterable[Dict[str, Any]],
    include_init_containers: bool = False,
    ignore_patterns: Optional[List[str]] = None,
) -> List[ImageReference]:
    """
    Flatten workload objects into unique image references.

    References sharing (kind, namespace, name, image) collapse into one;
    the result keeps first-seen order.

    Args:
        items: Workload objects with kind, metadata and spec
        include_init_containers: Also collect init container images
        ignore_patterns: Substrings; matching images are dropped

    Returns:
        Deduplicated image references
    """
    ignore_patterns = ignore_patterns or []
    references: Dict[Tuple[ResourceKind, str, str, str], ImageReference] = {}
    containers_seen = 0

    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            kind = ResourceKind.from_string(item.get("kind", ""))
        except ValueError:
            logger.debug(f"Skipping unsupported kind: {item.get('kind')}")
            continue

        metadata = item.get("metadata") or {}
        name = metadata.get("name") or ""
        namespace = metadata.get("namespace") or DEFAULT_NAMESPACE

        for container in extract_containers(item, kind, include_init_containers):
            containers_seen += 1
            image = str(container.get("image") or "").strip()
            if not image:
                continue
            if _should_ignore(image, ignore_patterns):
                logger.debug(f"Ignoring image: {image}")
                continue

            reference = ImageReference(
                image=image,
                resource_kind=kind,
                resource_name=name,
                namespace=namespace,
            )
            references.setdefault(reference.key, reference)

    logger.debug(
        f"Collected {len(references)} unique references from {containers_seen} containers"
    )
    return list(references.values())


class WorkloadScanner:
    """
    Extract container image references from a Kubernetes cluster.

    Discovers images from pods, deployments, statefulsets, daemonsets,
    jobs, and cronjobs with a single read-only kubectl query.
    """

    def __init__(
        self,
        config: Optional[KubernetesConfig] = None,
        timeout: int = 60,
    ):
        """
        Initialize scanner.

        Args:
            config: Kubernetes configuration
            timeout: Timeout for kubectl operations
        """
        self.config = config or KubernetesConfig()
        self.timeout = timeout
        self._kubectl_args = self.config.get_kubectl_args()

    def test_connectivity(self) -> bool:
        """
        Test Kubernetes cluster connectivity.

        Returns:
            True if the namespace (or the cluster, for all namespaces) is accessible
        """
        logger.debug(f"Testing Kubernetes connectivity (timeout: {self.timeout}s)")

        if self.config.all_namespaces:
            target = ["get", "namespaces", "-o", "name"]
        else:
            target = ["get", "namespace", self.config.namespace]

        result = run_command(["kubectl"] + self._kubectl_args + target, timeout=self.timeout)

        if result.success:
            logger.debug(f"Connected to cluster, scope: {self.config.scope}")
            return True
        if is_verbose():
            if result.timed_out:
                logger.error("Kubernetes connectivity test timed out")
            else:
                logger.error(f"kubectl output: {result.stderr.strip()}")
        return False

    def get_workloads(self) -> List[Dict[str, Any]]:
        """
        List workload objects in scope.

        Returns:
            Workload items

        Raises:
            ScanError: If kubectl fails, times out or is missing
            ParseError: If kubectl output is not a list document
        """
        args = ["kubectl"] + self._kubectl_args + [
            "get", WORKLOAD_RESOURCES,
        ] + self.config.get_scope_args() + ["-o", "json"]

        result = run_command(args, timeout=self.timeout)

        if not result.success:
            message = result.stderr.strip() or f"kubectl exited with code {result.returncode}"
            raise ScanError(f"Failed to list workloads: {message}")

        try:
            document = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid kubectl output: {e}") from e

        items = document.get("items") if isinstance(document, dict) else None
        if not isinstance(items, list):
            raise ParseError("kubectl output has no 'items' list")

        logger.debug(f"Found {len(items)} workloads in scope {self.config.scope}")
        return items

    def scan(self) -> List[ImageReference]:
        """
        Scan the cluster for image references.

        Returns:
            Deduplicated references in first-seen order

        Raises:
            ScanError: If the cluster query fails
            EmptyResultError: If no container images were found
        """
        logger.step(f"Scanning workloads in {self.config.context or 'current context'}"
                    f" / {self.config.scope}")

        references = extract_workload_images(
            self.get_workloads(),
            include_init_containers=self.config.include_init_containers,
            ignore_patterns=self.config.ignore_patterns,
        )

        if not references:
            raise EmptyResultError(
                f"No container images found in namespace scope '{self.config.scope}'"
            )

        logger.debug(f"Found {len(references)} image references to inspect")
        return references


def load_ignore_patterns(filepath: str) -> List[str]:
    """
    Load ignore patterns from a file.

    Args:
        filepath: Path to ignore file (one pattern per line, # comments)

    Returns:
        List of ignore patterns
    """
    patterns = []
    try:
        with open(filepath) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#"):
                    patterns.append(line)
        logger.debug(f"Loaded {len(patterns)} ignore patterns from {filepath}")
    except FileNotFoundError:
        logger.warning(f"Ignore file not found: {filepath}")
    return patterns
