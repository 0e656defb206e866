"""
NekoRay custom-outbound link generator.

A NekoRay "custom" profile is a compact JSON object whose ``cs`` field holds
a sing-box WireGuard outbound serialised as an indented JSON string. The
profile is base64-encoded and prefixed with ``nekoray://custom#``.

The field set, order and fixed values below must stay exactly as they are:
NekoRay/NekoBox import the link by these names.
"""

import base64
import json
import logging
from typing import Any, Dict, Optional

from nekolink.core.config import LINK_SCHEME
from nekolink.core.models import LinkRecord, ParsedEndpoint, WireGuardParams
from nekolink.core.utils import safe_b64decode

logger = logging.getLogger(__name__)

INTERFACE_NAME = "WARP"
OUTBOUND_TAG = "proxy"
LOCAL_SOCKS_ADDR = "127.0.0.1"
LOCAL_SOCKS_PORT = 1080


def display_host(endpoint: ParsedEndpoint) -> str:
    """Host as shown in names: IPv6 literals wrapped in brackets."""
    if endpoint.is_ipv6:
        return f"[{endpoint.host}]"
    return endpoint.host


def node_name(endpoint: ParsedEndpoint, prefix: str = "") -> str:
    """Build the node name, e.g. ``CN_[2606:4700:d0::1]:2408``."""
    lead = f"{prefix}_" if prefix else ""
    return f"{lead}{display_host(endpoint)}:{endpoint.port}"


class NekoRayLinkRenderer:
    """Renders NekoRay links for one WireGuard profile and MTU.

    The per-run part of the outbound (addresses, MTU, keys) is built once in
    the constructor; ``render`` only fills in the endpoint and name.
    """

    def __init__(self, params: WireGuardParams, mtu: int):
        self.params = params
        self.mtu = mtu
        self._base_outbound = self._build_base_outbound()

    def _build_base_outbound(self) -> Dict[str, Any]:
        addresses = list(self.params.addresses)
        local_address: Any = addresses[0] if len(addresses) == 1 else addresses
        return {
            "interface_name": INTERFACE_NAME,
            "local_address": local_address,
            "mtu": self.mtu,
            "peer_public_key": self.params.public_key,
            "private_key": self.params.private_key,
        }

    def build_outbound(self, endpoint: ParsedEndpoint) -> Dict[str, Any]:
        """sing-box WireGuard outbound for one endpoint."""
        outbound = dict(self._base_outbound)
        outbound.update({
            "server": endpoint.host,
            "server_port": endpoint.port,
            "system_interface": False,
            "tag": OUTBOUND_TAG,
            "type": "wireguard",
        })
        return outbound

    def build_payload(self, endpoint: ParsedEndpoint, name: str) -> Dict[str, Any]:
        """NekoRay profile object with the outbound embedded as a string."""
        cs = json.dumps(self.build_outbound(endpoint), indent=2, ensure_ascii=False)
        return {
            "_v": 0,
            "addr": LOCAL_SOCKS_ADDR,
            "cmd": [""],
            "core": "internal",
            "cs": cs,
            "mapping_port": 0,
            "name": name,
            "port": LOCAL_SOCKS_PORT,
            "socks_port": 0,
        }

    def render(self, endpoint: ParsedEndpoint, name_prefix: str = "") -> LinkRecord:
        """Render the link for one endpoint."""
        name = node_name(endpoint, name_prefix)
        payload = json.dumps(self.build_payload(endpoint, name), separators=(",", ":"), ensure_ascii=False)
        encoded = base64.b64encode(payload.encode("utf-8")).decode("ascii")
        logger.debug(f"Rendered link for {name}")
        return LinkRecord(display_name=name, uri=LINK_SCHEME + encoded)


def render_link(params: WireGuardParams, mtu: int, endpoint: ParsedEndpoint,
                name_prefix: str = "") -> LinkRecord:
    """Render a single link without keeping a renderer around."""
    return NekoRayLinkRenderer(params, mtu).render(endpoint, name_prefix)


def decode_link(uri: str) -> Optional[Dict[str, Any]]:
    """Decode a NekoRay custom link back into its profile dict.

    The ``cs`` string is parsed too and returned under ``outbound``.
    Returns None if the link is not a well-formed NekoRay custom link.
    """
    if not uri.startswith(LINK_SCHEME):
        return None
    try:
        payload = json.loads(safe_b64decode(uri[len(LINK_SCHEME):]).decode("utf-8"))
        payload["outbound"] = json.loads(payload["cs"])
    except (ValueError, KeyError, TypeError):
        return None
    return payload
