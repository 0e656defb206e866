"""
Generators module initialization.
"""

from .nekoray_link import (
    NekoRayLinkRenderer,
    render_link,
    decode_link,
    display_host,
    node_name
)

__all__ = [
    "NekoRayLinkRenderer",
    "render_link",
    "decode_link",
    "display_host",
    "node_name"
]
