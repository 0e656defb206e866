"""
Endpoint parser for "host:port" tokens.

Accepted forms:
    162.159.192.1:2408          IPv4 and port
    [2606:4700:d0::1]:2408      bracketed IPv6 and port
    engage.cloudflareclient.com:2408
    162.159.192.1 2408          host and port separated by whitespace

Unbracketed IPv6 literals are not supported: splitting at the first colon
leaves a host that matches none of the host patterns.
"""

import ipaddress
import logging
import re
from typing import Optional, Pattern, Tuple, Union

from nekolink.core.errors import EndpointRejected
from nekolink.core.models import HostKind, ParsedEndpoint, RejectReason

logger = logging.getLogger(__name__)

IPV4_PATTERN = (
    r"^(?:(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}"
    r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)$"
)

_H = r"[0-9a-fA-F]{1,4}"
IPV6_PATTERN = (
    r"^(?:"
    rf"(?:{_H}:){{7}}{_H}"
    rf"|(?:{_H}:){{1,7}}:"
    rf"|(?:{_H}:){{1,6}}:{_H}"
    rf"|(?:{_H}:){{1,5}}(?::{_H}){{1,2}}"
    rf"|(?:{_H}:){{1,4}}(?::{_H}){{1,3}}"
    rf"|(?:{_H}:){{1,3}}(?::{_H}){{1,4}}"
    rf"|(?:{_H}:){{1,2}}(?::{_H}){{1,5}}"
    rf"|{_H}:(?:(?::{_H}){{1,6}})"
    rf"|:(?:(?::{_H}){{1,7}}|:)"
    r")$"
)

# Coarse on purpose: labels of letters, digits and hyphens with at least one dot.
DOMAIN_PATTERN = r"^[a-zA-Z0-9-]+(\.[a-zA-Z0-9-]+)+$"

PORT_PATTERN = r"^[0-9]+$"
MAX_PORT = 65535


class EndpointMatchers:
    """Compiled host and port patterns, built once and shared read-only."""

    _default: Optional["EndpointMatchers"] = None

    def __init__(self):
        self.ipv4: Pattern[str] = re.compile(IPV4_PATTERN)
        self.ipv6: Pattern[str] = re.compile(IPV6_PATTERN)
        self.domain: Pattern[str] = re.compile(DOMAIN_PATTERN)
        self.port: Pattern[str] = re.compile(PORT_PATTERN)

    @classmethod
    def default(cls) -> "EndpointMatchers":
        """Return the lazily created shared instance."""
        if cls._default is None:
            cls._default = cls()
        return cls._default


class EndpointParser:
    """Parser turning raw endpoint tokens into ParsedEndpoint values."""

    def __init__(self, matchers: Optional[EndpointMatchers] = None):
        self.matchers = matchers or EndpointMatchers.default()

    @staticmethod
    def split(token: str) -> Optional[Tuple[str, str]]:
        """Split a token into (host, port) strings, or None if no form applies."""
        token = token.strip()

        if token.startswith("["):
            end = token.find("]")
            if end == -1:
                return None
            rest = token[end + 1:]
            colon = rest.find(":")
            if colon == -1:
                return None
            return token[1:end], rest[colon + 1:]

        if ":" in token:
            host, port = token.split(":", 1)
            return host, port

        fields = token.split()
        if len(fields) == 2:
            return fields[0], fields[1]

        return None

    def classify_host(self, host: str) -> Optional[HostKind]:
        """Return the HostKind of a host string, or None if it is not valid."""
        if self.matchers.ipv4.fullmatch(host):
            try:
                ipaddress.IPv4Address(host)
            except ValueError:
                return None
            return HostKind.IPV4

        if self.matchers.ipv6.fullmatch(host):
            try:
                ipaddress.IPv6Address(host)
            except ValueError:
                return None
            return HostKind.IPV6

        if self.matchers.domain.fullmatch(host):
            return HostKind.DOMAIN

        return None

    def parse_port(self, port: str) -> Optional[int]:
        if not self.matchers.port.fullmatch(port):
            return None
        value = int(port)
        if value > MAX_PORT:
            return None
        return value

    def try_parse(self, token: str) -> Union[ParsedEndpoint, RejectReason]:
        """Parse a token, returning the RejectReason instead of raising."""
        parts = self.split(token)
        if parts is None:
            return RejectReason.UNRECOGNIZED_FORMAT
        host, port_str = parts

        kind = self.classify_host(host)
        if kind is None:
            return RejectReason.INVALID_HOST

        port = self.parse_port(port_str)
        if port is None:
            return RejectReason.INVALID_PORT

        return ParsedEndpoint(host=host, host_kind=kind, port=port)

    def parse(self, token: str) -> ParsedEndpoint:
        """Parse a token, raising EndpointRejected on failure."""
        result = self.try_parse(token)
        if isinstance(result, RejectReason):
            logger.debug(f"Rejected endpoint {token!r}: {result.value}")
            raise EndpointRejected(token, result)
        return result
