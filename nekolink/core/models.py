"""
Core data models and structures for NekoLink.

This module contains the value types passed between the WireGuard
parser, the endpoint parser, the link renderer and the orchestrator.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class HostKind(Enum):
    """Syntactic kind of an endpoint host."""
    IPV4 = "ipv4"
    IPV6 = "ipv6"
    DOMAIN = "domain"


class RejectReason(Enum):
    """Why an endpoint token could not be parsed."""
    UNRECOGNIZED_FORMAT = "unrecognized format"
    INVALID_HOST = "invalid host"
    INVALID_PORT = "invalid port"


@dataclass
class WireGuardParams:
    """Parameters extracted from a WireGuard configuration file."""
    private_key: str
    public_key: str
    addresses: List[str] = field(default_factory=list)
    mtu: Optional[str] = None


@dataclass(frozen=True)
class ParsedEndpoint:
    """A validated endpoint host and port."""
    host: str
    host_kind: HostKind
    port: int

    @property
    def is_ipv6(self) -> bool:
        return self.host_kind is HostKind.IPV6


@dataclass(frozen=True)
class LinkRecord:
    """A generated NekoRay link and its display name."""
    display_name: str
    uri: str


@dataclass(frozen=True)
class GenerationOutcome:
    """Per-item result reported while generating links."""
    index: int
    token: str
    link: Optional[LinkRecord] = None
    reason: Optional[RejectReason] = None

    @property
    def ok(self) -> bool:
        return self.link is not None


@dataclass
class BatchReport:
    """Accumulated results of a batch run."""
    links: List[LinkRecord] = field(default_factory=list)
    skipped: List[GenerationOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.links) + len(self.skipped)

    def add(self, outcome: GenerationOutcome):
        if outcome.ok:
            self.links.append(outcome.link)
        else:
            self.skipped.append(outcome)
