"""ARM64 compatibility inspection.

Sends image references to the inspection service and turns its answer
into an InspectionReport.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

import requests

from ..models.inspection import ImageReference, ImageResult, InspectionReport
from ..utils.logging import get_logger
from .errors import InspectionError, NoInputError

logger = get_logger(__name__)


class InspectionServiceClient:
    """
    HTTP client for the inspection service.

    The service owns manifest retrieval and architecture detection; this
    client only moves references out and results back.
    """

    def __init__(
        self,
        base_url: str,
        timeout: int = 60,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize client.

        Args:
            base_url: Service base URL, e.g. http://localhost:8080
            timeout: Request timeout in seconds
            session: Optional requests session (one is created if None)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get_headers(self) -> Dict[str, str]:
        return {"Accept": "application/json", "Content-Type": "application/json"}

    def health(self) -> bool:
        """Check whether the service answers its health endpoint."""
        url = f"{self.base_url}/health"
        try:
            response = self.session.get(url, headers=self._get_headers(), timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.debug(f"Health check failed: {e}")
            return False
        return response.status_code == 200

    def inspect_images(
        self,
        references: Sequence[ImageReference],
        context: str = "",
        namespace: str = "",
    ) -> List[ImageResult]:
        """
        Request inspection of the given references in one call.

        Args:
            references: References to inspect
            context: Context name forwarded to the service
            namespace: Namespace scope forwarded to the service

        Returns:
            Results in the order the service returned them

        Raises:
            InspectionError: On transport failure, non-2xx status or a malformed answer
        """
        url = f"{self.base_url}/inspect"
        payload = {"images": [reference.to_request() for reference in references]}
        params = {"context": context, "namespace": namespace}

        logger.debug(f"Sending {len(references)} references to {url}")
        try:
            response = self.session.post(
                url,
                json=payload,
                params=params,
                headers=self._get_headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.debug(f"Network error contacting inspection service: {e}")
            raise InspectionError(f"Inspection service unreachable: {e}") from e

        if not 200 <= response.status_code < 300:
            detail = response.text.strip()[:500]
            raise InspectionError(
                f"Inspection service returned HTTP {response.status_code}: {detail}"
            )

        try:
            document = response.json()
        except ValueError as e:
            raise InspectionError(f"Inspection service returned invalid JSON: {e}") from e

        return self._parse_results(document)

    @staticmethod
    def _parse_results(document: Any) -> List[ImageResult]:
        if not isinstance(document, dict) or not isinstance(document.get("results"), list):
            raise InspectionError("Inspection service response has no 'results' list")

        try:
            results = [ImageResult.from_dict(item) for item in document["results"]]
        except ValueError as e:
            raise InspectionError(f"Malformed inspection result: {e}") from e

        if "scanTime" in document:
            logger.debug(f"Service scan time: {document['scanTime']}")
        return results


class InspectionOrchestrator:
    """Runs one inspection request and builds the report from its results."""

    def __init__(self, client: InspectionServiceClient):
        self.client = client

    def inspect(
        self,
        references: Sequence[ImageReference],
        context: str,
        namespace: str,
    ) -> InspectionReport:
        """
        Inspect references and build a new report.

        No retries are attempted; a failed call yields no report.

        Args:
            references: Deduplicated references from the workload scan
            context: Context the references were scanned from
            namespace: Namespace scope of the scan

        Returns:
            InspectionReport with a freshly computed summary

        Raises:
            NoInputError: If references is empty
            InspectionError: If the inspection service call fails
        """
        if not references:
            raise NoInputError("No image references to inspect")

        logger.step(f"Inspecting {len(references)} image references")
        results = self.client.inspect_images(references, context=context, namespace=namespace)

        if len(results) != len(references):
            logger.warning(
                f"Inspection service returned {len(results)} results "
                f"for {len(references)} references"
            )

        report = InspectionReport.build(
            results,
            context=context,
            namespace=namespace,
            scan_timestamp=datetime.now(timezone.utc),
        )
        summary = report.summary
        logger.debug(
            f"Summary: {summary.arm_compatible} compatible, "
            f"{summary.not_compatible} not compatible, {summary.errors} errors"
        )
        return report
