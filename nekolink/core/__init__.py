"""
Core module initialization.

This module provides access to core functionality including
configuration, models, errors and utilities.
"""

from .config import NekoLinkConfig, DEFAULT_MTU, MIN_MTU, MAX_MTU, LINK_SCHEME
from .errors import (
    NekoLinkError, MissingInputFile, MissingRequiredField, InvalidMtu, EndpointRejected,
    OutputWriteError
)
from .models import (
    HostKind, RejectReason, WireGuardParams, ParsedEndpoint, LinkRecord,
    GenerationOutcome, BatchReport
)
from .utils import (
    safe_b64decode, check_input_file, read_text, read_lines, write_lines, setup_logging
)

__all__ = [
    "NekoLinkConfig",
    "DEFAULT_MTU",
    "MIN_MTU",
    "MAX_MTU",
    "LINK_SCHEME",
    "NekoLinkError",
    "MissingInputFile",
    "MissingRequiredField",
    "InvalidMtu",
    "EndpointRejected",
    "OutputWriteError",
    "HostKind",
    "RejectReason",
    "WireGuardParams",
    "ParsedEndpoint",
    "LinkRecord",
    "GenerationOutcome",
    "BatchReport",
    "safe_b64decode",
    "check_input_file",
    "read_text",
    "read_lines",
    "write_lines",
    "setup_logging"
]
