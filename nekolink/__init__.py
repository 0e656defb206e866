"""
NekoLink - WireGuard to NekoRay link converter

Reads a WireGuard (Cloudflare WARP) configuration and turns candidate
endpoints into ``nekoray://custom#`` links for NekoRay / NekoBox.
"""

__version__ = "1.0.0"
__author__ = "NekoLink Project"

from .core.config import NekoLinkConfig
from .core.models import WireGuardParams, ParsedEndpoint, LinkRecord
from .parsers import WireGuardConfigParser, EndpointParser, resolve_mtu
from .generators import NekoRayLinkRenderer
from .orchestrator import LinkOrchestrator

__all__ = [
    "NekoLinkConfig",
    "WireGuardParams",
    "ParsedEndpoint",
    "LinkRecord",
    "WireGuardConfigParser",
    "EndpointParser",
    "resolve_mtu",
    "NekoRayLinkRenderer",
    "LinkOrchestrator"
]
