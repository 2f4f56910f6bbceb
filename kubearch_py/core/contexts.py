"""Kubeconfig context discovery.

Parses kubeconfig documents into KubeContext records and picks the
context a run should use.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..models.inspection import DEFAULT_NAMESPACE, KubeContext
from ..utils.logging import get_logger
from .errors import ParseError

logger = get_logger(__name__)

FALLBACK_KUBECONFIG = "/root/.kube/config"


def get_kubeconfig_path(explicit: Optional[str] = None) -> str:
    """
    Resolve the kubeconfig location.

    Order: explicit path, first entry of $KUBECONFIG, ~/.kube/config,
    then the root user's config. The home path is returned when none exist.
    """
    if explicit:
        return explicit

    env_value = os.environ.get("KUBECONFIG", "")
    for entry in env_value.split(os.pathsep):
        if entry:
            return entry

    home_config = str(Path.home() / ".kube" / "config")
    for candidate in (home_config, FALLBACK_KUBECONFIG):
        if Path(candidate).exists():
            return candidate
    return home_config


def parse_kubeconfig(text: str) -> Dict[str, Any]:
    """
    Parse kubeconfig YAML text.

    Raises:
        ParseError: If the text is not YAML or not a mapping
    """
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ParseError(f"Invalid kubeconfig YAML: {e}") from e

    if not isinstance(document, dict):
        raise ParseError("Kubeconfig must be a YAML mapping")
    return document


def parse_contexts(raw: Any) -> List[KubeContext]:
    """
    Build the context list from a parsed kubeconfig document.

    The entry named by ``current-context`` is marked current. When that
    name is absent or unknown no entry is marked; see default_context().

    Args:
        raw: Parsed kubeconfig document

    Returns:
        Contexts in document order

    Raises:
        ParseError: If the document is malformed or has no contexts list
    """
    if not isinstance(raw, dict):
        raise ParseError("Kubeconfig must be a mapping")

    descriptors = raw.get("contexts")
    if not isinstance(descriptors, list):
        raise ParseError("Kubeconfig has no 'contexts' list")

    current_name = raw.get("current-context") or ""
    contexts: List[KubeContext] = []
    seen = set()

    for descriptor in descriptors:
        if not isinstance(descriptor, dict):
            raise ParseError(f"Context entry must be a mapping, got {descriptor!r}")

        name = descriptor.get("name")
        if not name:
            logger.warning("Skipping kubeconfig context without a name")
            continue
        if name in seen:
            logger.warning(f"Duplicate kubeconfig context '{name}', keeping the first")
            continue
        seen.add(name)

        details = descriptor.get("context") or {}
        if not isinstance(details, dict):
            raise ParseError(f"Context '{name}' has a malformed 'context' section")

        contexts.append(KubeContext(
            name=str(name),
            cluster=str(details.get("cluster") or ""),
            user=str(details.get("user") or ""),
            namespace=str(details.get("namespace") or DEFAULT_NAMESPACE),
            is_current=(name == current_name),
        ))

    logger.debug(f"Parsed {len(contexts)} contexts (current: {current_name or 'none'})")
    return contexts


def load_contexts(path: Optional[str] = None, strict: bool = False) -> List[KubeContext]:
    """
    Read and parse the kubeconfig contexts.

    Args:
        path: Kubeconfig path (resolved with get_kubeconfig_path if None)
        strict: Raise ParseError instead of returning an empty list

    Returns:
        Contexts, or an empty list when none are available
    """
    kubeconfig = get_kubeconfig_path(path)
    try:
        try:
            text = Path(kubeconfig).read_text()
        except OSError as e:
            raise ParseError(f"Cannot read kubeconfig {kubeconfig}: {e}") from e
        return parse_contexts(parse_kubeconfig(text))
    except ParseError as e:
        if strict:
            raise
        logger.warning(f"No contexts available: {e}")
        return []


def default_context(contexts: List[KubeContext]) -> Optional[KubeContext]:
    """Return the current context, else the first one, else None."""
    for context in contexts:
        if context.is_current:
            return context
    return contexts[0] if contexts else None


def select_context(contexts: List[KubeContext], name: Optional[str] = None) -> KubeContext:
    """
    Pick the context to run against.

    Args:
        contexts: Available contexts
        name: Requested context name (default selection if None)

    Raises:
        ParseError: If there are no contexts or the name is unknown
    """
    if not name:
        selected = default_context(contexts)
        if selected is None:
            raise ParseError("No contexts found in kubeconfig")
        return selected

    for context in contexts:
        if context.name == name:
            return context
    raise ParseError(f"Context '{name}' not found in kubeconfig")
