"""
KubeArchInspect - Kubernetes ARM64 Image Inspector

Provides functionality for:
- Kubeconfig context discovery
- Kubernetes workload image extraction
- ARM64 compatibility inspection through the inspection service
- Filtering, sorting, paging and exporting inspection reports
"""

__version__ = "1.0.0"

from .core.kubernetes import WorkloadScanner
from .core.inspection import InspectionOrchestrator, InspectionServiceClient
from .models.inspection import InspectionReport

__all__ = [
    "WorkloadScanner",
    "InspectionOrchestrator",
    "InspectionServiceClient",
    "InspectionReport",
]
