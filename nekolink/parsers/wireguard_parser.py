"""
WireGuard configuration parser.

Extracts the keys, interface addresses and MTU that a NekoRay WireGuard
outbound needs, and resolves the MTU used for generated links.
"""

import logging
from typing import Dict, List, Optional, Union

from nekolink.core.config import DEFAULT_MTU, MAX_MTU, MIN_MTU
from nekolink.core.errors import InvalidMtu, MissingRequiredField
from nekolink.core.models import WireGuardParams
from nekolink.core.utils import check_input_file, read_text

logger = logging.getLogger(__name__)


class WireGuardConfigParser:
    """Parser for WireGuard / WARP configuration text."""

    KEYS = ("PrivateKey", "PublicKey", "Address", "MTU")

    @classmethod
    def parse(cls, text: str) -> WireGuardParams:
        """Parse configuration text into WireGuardParams.

        Lines are matched by case-sensitive prefix on the recognised keys and
        all whitespace is removed before the value after ``Key=`` is taken.
        Address values accumulate across lines and comma-separated lists.
        """
        values: Dict[str, str] = {}
        addresses: List[str] = []

        for line in text.splitlines():
            key = next((k for k in cls.KEYS if line.startswith(k)), None)
            if key is None:
                continue

            cleaned = "".join(line.split())
            marker = key + "="
            if not cleaned.startswith(marker):
                logger.debug(f"Ignoring line without '=' after {key}: {line!r}")
                continue
            value = cleaned[len(marker):]

            if key == "Address":
                addresses.extend(a for a in value.split(",") if a)
            else:
                values[key] = value

        if not values.get("PrivateKey"):
            raise MissingRequiredField("PrivateKey")
        if not values.get("PublicKey"):
            raise MissingRequiredField("PublicKey")
        if not addresses:
            raise MissingRequiredField("Address")

        params = WireGuardParams(
            private_key=values["PrivateKey"],
            public_key=values["PublicKey"],
            addresses=addresses,
            mtu=values.get("MTU") or None,
        )
        logger.debug(f"Parsed WireGuard config: {len(addresses)} address(es), MTU={params.mtu}")
        return params


def parse_wireguard_file(path: str) -> WireGuardParams:
    """Check, read and parse a WireGuard configuration file."""
    check_input_file(path, "WireGuard config")
    return WireGuardConfigParser.parse(read_text(path))


def _as_mtu(value: Union[str, int, None]) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, int):
        return value
    value = value.strip()
    if not (value.isascii() and value.isdigit()):
        return None
    return int(value)


def is_valid_mtu(value: Union[str, int, None]) -> bool:
    """Check whether value is an integer MTU within [1280, 1500]."""
    mtu = _as_mtu(value)
    return mtu is not None and MIN_MTU <= mtu <= MAX_MTU


def resolve_mtu(override: Union[str, int, None] = None, config_mtu: Optional[str] = None) -> int:
    """Resolve the MTU used for generated links.

    A valid override wins; an invalid one is treated as absent. Otherwise the
    MTU from the config file is used, and if that is absent the default 1408.
    A config MTU that is present but unusable raises InvalidMtu.
    """
    if override is not None and override != "":
        if is_valid_mtu(override):
            return _as_mtu(override)
        logger.warning(f"Ignoring MTU override {override!r}: must be {MIN_MTU}-{MAX_MTU}")

    if config_mtu:
        if not is_valid_mtu(config_mtu):
            raise InvalidMtu(config_mtu, "config")
        return _as_mtu(config_mtu)

    return DEFAULT_MTU
