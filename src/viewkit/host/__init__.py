"""Embedding host: capabilities, protocol and HTTP client."""

from .capabilities import DISCONNECTED, HostCapabilities, detect_capabilities
from .client import HostClient, HostUnavailableError
from .protocol import Host

__all__ = [
    "DISCONNECTED",
    "Host",
    "HostCapabilities",
    "HostClient",
    "HostUnavailableError",
    "detect_capabilities",
]
