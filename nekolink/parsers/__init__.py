"""
Parsers module initialization.

This module provides access to the WireGuard configuration parser
and the endpoint token parser.
"""

from .wireguard_parser import (
    WireGuardConfigParser,
    parse_wireguard_file,
    resolve_mtu,
    is_valid_mtu
)
from .endpoint_parser import (
    EndpointMatchers,
    EndpointParser
)

__all__ = [
    "WireGuardConfigParser",
    "parse_wireguard_file",
    "resolve_mtu",
    "is_valid_mtu",
    "EndpointMatchers",
    "EndpointParser"
]
