"""Data models for the inspector package."""

from .inspection import (
    ALL_NAMESPACES,
    DEFAULT_NAMESPACE,
    ImageReference,
    ImageResult,
    InspectionReport,
    KubeContext,
    ResourceKind,
    Summary,
)

__all__ = [
    "ALL_NAMESPACES",
    "DEFAULT_NAMESPACE",
    "ImageReference",
    "ImageResult",
    "InspectionReport",
    "KubeContext",
    "ResourceKind",
    "Summary",
]
