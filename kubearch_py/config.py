"""Runtime settings read from the environment.

Command line flags take precedence; these values only provide defaults.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_SERVICE_URL = "http://localhost:8080"
DEFAULT_TIMEOUT = 60
DEFAULT_PAGE_SIZE = 10


def _get_int_env_var(env: Mapping[str, str], var_name: str, default: int) -> int:
    raw = env.get(var_name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{var_name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{var_name} must be positive, got {value}")
    return value


@dataclass
class Settings:
    """Inspector settings."""
    service_url: str = DEFAULT_SERVICE_URL
    timeout: int = DEFAULT_TIMEOUT
    page_size: int = DEFAULT_PAGE_SIZE
    kubeconfig: Optional[str] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Load settings from environment variables.

        Args:
            env: Mapping to read from (defaults to os.environ)

        Raises:
            ValueError: If a numeric variable is not a positive integer
        """
        env = os.environ if env is None else env
        return cls(
            service_url=env.get("KUBEARCH_SERVICE_URL", "").strip() or DEFAULT_SERVICE_URL,
            timeout=_get_int_env_var(env, "KUBEARCH_TIMEOUT", DEFAULT_TIMEOUT),
            page_size=_get_int_env_var(env, "KUBEARCH_PAGE_SIZE", DEFAULT_PAGE_SIZE),
            kubeconfig=env.get("KUBECONFIG") or None,
        )
