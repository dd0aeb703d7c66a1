"""
Relay configuration. Limits of the findings store and the HTTP surface live here,
so the API, the store and the tests read the same values.
"""

import os
from dataclasses import dataclass
from typing import Optional

API_VERSION = "1.0.0"

# Findings store limits
MAX_FINDINGS = 100
FINDING_EXPIRY_MS = 15 * 1000

# HTTP surface
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
MAX_BODY_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True)
class RelayConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    max_findings: int = MAX_FINDINGS
    expiry_ms: int = FINDING_EXPIRY_MS
    max_body_bytes: int = MAX_BODY_BYTES


_config_instance: Optional[RelayConfig] = None


def _parse_port(raw: Optional[str]) -> int:
    if raw is None or raw.strip() == "":
        return DEFAULT_PORT
    try:
        port = int(raw)
    except ValueError:
        raise ValueError(f"PORT must be an integer, got {raw!r}") from None
    if not 0 < port < 65536:
        raise ValueError(f"PORT out of range: {port}")
    return port


def get_config() -> RelayConfig:
    """
    Build the configuration from the environment (only PORT is read).
    Returns the same instance on repeated calls.
    """
    global _config_instance

    if _config_instance is not None:
        return _config_instance

    _config_instance = RelayConfig(port=_parse_port(os.getenv("PORT")))
    return _config_instance


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() re-reads the environment."""
    global _config_instance
    _config_instance = None
