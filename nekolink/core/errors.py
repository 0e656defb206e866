"""
Exception types raised by NekoLink.

Fatal errors (missing files, incomplete WireGuard configuration, unusable
MTU, unwritable output) stop a run before any link is generated. EndpointRejected is raised
per endpoint and is handled by the orchestrator.
"""

from typing import Any

from .models import RejectReason


class NekoLinkError(Exception):
    """Base class for all NekoLink errors."""


class MissingInputFile(NekoLinkError):
    """An input file is absent or empty."""

    def __init__(self, path: str, role: str = "input"):
        self.path = path
        self.role = role
        super().__init__(f"{role} file not found or empty: {path}")


class MissingRequiredField(NekoLinkError):
    """The WireGuard configuration lacks a required key."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"WireGuard configuration is missing {field_name}")


class InvalidMtu(NekoLinkError):
    """An MTU value is not an integer within the allowed range."""

    def __init__(self, value: Any, source: str = "config"):
        self.value = value
        self.source = source
        super().__init__(f"Invalid MTU from {source}: {value!r} (allowed 1280-1500)")


class EndpointRejected(NekoLinkError):
    """An endpoint token failed parsing or validation."""

    def __init__(self, token: str, reason: RejectReason):
        self.token = token
        self.reason = reason
        super().__init__(f"{token!r}: {reason.value}")


class OutputWriteError(NekoLinkError):
    """The output file could not be written."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write output file {path}: {reason}")
