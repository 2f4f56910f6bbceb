"""Exceptions raised by an inspection run.

Every failure is terminal to the run it happens in; nothing here is
retried internally. Each class carries a ``hint`` with the remediation
shown to the user next to the underlying message.
"""


class KubeArchError(Exception):
    """Base exception for inspection run failures."""

    hint = ""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ParseError(KubeArchError):
    """Raised when a kubeconfig or cluster document is malformed."""

    hint = "Check that your kubeconfig is valid YAML with a 'contexts' list."


class ScanError(KubeArchError):
    """Raised when the cluster query fails (transport or authorization)."""

    hint = "Check cluster connectivity and credentials for the selected context."


class EmptyResultError(KubeArchError):
    """Raised when the cluster query succeeds but yields no images."""

    hint = "No workloads with container images were found; nothing to inspect."


class NoInputError(KubeArchError):
    """Raised when an inspection is requested without any image references."""

    hint = "Scan a namespace with running workloads before inspecting."


class InspectionError(KubeArchError):
    """Raised when the inspection service cannot be reached or answers badly."""

    hint = "Check that the inspection service is running and reachable."
