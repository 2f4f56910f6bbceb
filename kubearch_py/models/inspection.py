"""Data models for contexts, image references and inspection reports."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
import json


DEFAULT_NAMESPACE = "default"
ALL_NAMESPACES = "all"


class ResourceKind(Enum):
    """Workload kinds that run containers."""
    POD = "Pod"
    DEPLOYMENT = "Deployment"
    STATEFUL_SET = "StatefulSet"
    DAEMON_SET = "DaemonSet"
    JOB = "Job"
    CRON_JOB = "CronJob"

    @classmethod
    def from_string(cls, value: str) -> "ResourceKind":
        """Convert a Kubernetes ``kind`` string to ResourceKind."""
        for kind in cls:
            if kind.value.lower() == str(value).lower():
                return kind
        raise ValueError(f"Unsupported resource kind: {value!r}")


def format_timestamp(value: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with a trailing ``Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601/RFC 3339 timestamp; naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class KubeContext:
    """A named cluster/user/namespace entry of a kubeconfig."""
    name: str
    cluster: str = ""
    user: str = ""
    namespace: str = DEFAULT_NAMESPACE
    is_current: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "cluster": self.cluster,
            "user": self.user,
            "namespace": self.namespace,
            "isCurrent": self.is_current,
        }


@dataclass(frozen=True)
class ImageReference:
    """A container image used by one workload, a candidate for inspection."""
    image: str
    resource_kind: ResourceKind
    resource_name: str
    namespace: str = DEFAULT_NAMESPACE

    @property
    def key(self) -> Tuple[ResourceKind, str, str, str]:
        """Identity of the reference: (kind, namespace, name, image)."""
        return (self.resource_kind, self.namespace, self.resource_name, self.image)

    def to_request(self) -> Dict[str, str]:
        """Convert to an inspection service request item."""
        return {
            "image": self.image,
            "resourceType": self.resource_kind.value,
            "resourceName": self.resource_name,
            "namespace": self.namespace,
        }


@dataclass(frozen=True)
class ImageResult:
    """Architecture inspection result for a single image reference.

    A result carrying an error is never ARM compatible; an empty error
    string is stored as ``None``.
    """
    image: str
    is_arm_compatible: bool
    resource_kind: ResourceKind
    resource_name: str
    namespace: str = DEFAULT_NAMESPACE
    supported_architectures: Tuple[str, ...] = ()
    error: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "supported_architectures", tuple(self.supported_architectures))
        if not self.error:
            object.__setattr__(self, "error", None)
        else:
            object.__setattr__(self, "is_arm_compatible", False)

    @property
    def has_error(self) -> bool:
        """Whether inspection failed for this reference."""
        return self.error is not None

    @property
    def status(self) -> str:
        """One of ``compatible``, ``not-compatible`` or ``error``."""
        if self.has_error:
            return "error"
        return "compatible" if self.is_arm_compatible else "not-compatible"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data: Dict[str, Any] = {
            "image": self.image,
            "isArmCompatible": self.is_arm_compatible,
            "supportedArch": list(self.supported_architectures),
            "resourceType": self.resource_kind.value,
            "resourceName": self.resource_name,
            "namespace": self.namespace,
        }
        if self.error is not None:
            data["error"] = self.error
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ImageResult":
        """
        Build a result from its dictionary form.

        Also accepts the status/message/kind/podName fields sent by
        older inspection service versions.

        Raises:
            ValueError: If required fields are missing or invalid
        """
        if not isinstance(data, dict):
            raise ValueError(f"Result entry must be an object, got {type(data).__name__}")
        image = data.get("image")
        if not image:
            raise ValueError("Result entry has no image")

        kind = data.get("resourceType") or data.get("kind")
        if not kind:
            raise ValueError(f"Result for {image} has no resource type")

        error = data.get("error")
        if not error and data.get("status") == "error":
            error = data.get("message") or "inspection failed"

        namespace = data.get("namespace")
        if namespace is None:
            namespace = DEFAULT_NAMESPACE

        return cls(
            image=image,
            is_arm_compatible=bool(data.get("isArmCompatible", False)),
            supported_architectures=tuple(data.get("supportedArch") or ()),
            resource_kind=ResourceKind.from_string(kind),
            resource_name=data.get("resourceName") or data.get("podName") or "",
            namespace=namespace,
            error=error,
        )


@dataclass(frozen=True)
class Summary:
    """Counts derived from a result collection."""
    total: int = 0
    arm_compatible: int = 0
    not_compatible: int = 0
    errors: int = 0

    @classmethod
    def from_results(cls, results: Iterable[ImageResult]) -> "Summary":
        """Compute the summary; errored results count only as errors."""
        total = arm = errors = 0
        for result in results:
            total += 1
            if result.has_error:
                errors += 1
            elif result.is_arm_compatible:
                arm += 1
        return cls(
            total=total,
            arm_compatible=arm,
            not_compatible=total - arm - errors,
            errors=errors,
        )

    def to_dict(self) -> Dict[str, int]:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "armCompatible": self.arm_compatible,
            "notCompatible": self.not_compatible,
            "errors": self.errors,
        }


@dataclass(frozen=True)
class InspectionReport:
    """Immutable outcome of one completed inspection run."""
    results: Tuple[ImageResult, ...]
    summary: Summary
    scan_timestamp: datetime
    context: str
    namespace: str

    @classmethod
    def build(
        cls,
        results: Sequence[ImageResult],
        context: str,
        namespace: str,
        scan_timestamp: Optional[datetime] = None,
    ) -> "InspectionReport":
        """Create a report, deriving the summary from the results."""
        results = tuple(results)
        return cls(
            results=results,
            summary=Summary.from_results(results),
            scan_timestamp=scan_timestamp or datetime.now(timezone.utc),
            context=context,
            namespace=namespace,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "results": [result.to_dict() for result in self.results],
            "summary": self.summary.to_dict(),
            "scanTime": format_timestamp(self.scan_timestamp),
            "context": self.context,
            "namespace": self.namespace,
        }

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InspectionReport":
        """
        Build a report from its dictionary form.

        The stored summary is ignored and recomputed from the results.

        Raises:
            ValueError: If the document is not a report
        """
        if not isinstance(data, dict):
            raise ValueError("Report must be a JSON object")
        raw_results = data.get("results")
        if not isinstance(raw_results, list):
            raise ValueError("Report has no 'results' list")
        scan_time = data.get("scanTime")
        if not scan_time:
            raise ValueError("Report has no 'scanTime'")

        results: List[ImageResult] = [ImageResult.from_dict(item) for item in raw_results]
        return cls.build(
            results,
            context=data.get("context", ""),
            namespace=data.get("namespace", ""),
            scan_timestamp=parse_timestamp(scan_time),
        )

    @classmethod
    def from_json(cls, text: str) -> "InspectionReport":
        """Parse a report from its JSON form."""
        return cls.from_dict(json.loads(text))
