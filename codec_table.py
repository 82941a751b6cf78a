#!/usr/bin/env python3
"""
Static version table shipped with the protocol bridge.

The table lists every upstream protocol version the proxy accepts, oldest
first, with the release label shown to players. The last row is the default
version. Codecs themselves come from an external codec provider, a callable
that returns the codec for a protocol number; build_registry() pairs each row
with its codec and returns a validated VersionRegistry.

To add a version, append a row and a named constant. To retire one, delete
its row and constant; any feature gate still using the constant then fails
to import, which points at the code to remove.

Typical usage:
    from codec_table import build_registry

    registry = build_registry(codec_library.get_codec)
"""

import logging
from typing import Any, Callable, Optional, Sequence, Tuple

from codec_descriptor import CodecDescriptor
from version_registry import VersionRegistry

__version__ = "1.0.0"
__all__ = [
    "UPSTREAM_V589", "UPSTREAM_V594", "UPSTREAM_V618", "UPSTREAM_V622", "UPSTREAM_V630",
    "DOWNSTREAM_V764", "UPSTREAM_TABLE", "DOWNSTREAM_RECORD", "build_registry",
]

logger = logging.getLogger("BridgeProxy.CodecTable")

# Upstream protocol numbers
UPSTREAM_V589 = 589
UPSTREAM_V594 = 594
UPSTREAM_V618 = 618
UPSTREAM_V622 = 622
UPSTREAM_V630 = 630

# Downstream protocol number
DOWNSTREAM_V764 = 764

UPSTREAM_TABLE: Tuple[Tuple[int, str], ...] = (
    (UPSTREAM_V589, "1.20.0/1.20.1"),
    (UPSTREAM_V594, "1.20.10/1.20.15"),
    (UPSTREAM_V618, "1.20.30/1.20.32"),
    (UPSTREAM_V622, "1.20.40/1.20.41"),
    (UPSTREAM_V630, "1.20.50/1.20.51"),  # default
)

DOWNSTREAM_RECORD: Tuple[int, str] = (DOWNSTREAM_V764, "1.20.2")

CodecProvider = Callable[[int], Any]


def build_registry(codec_provider: CodecProvider,
                   upstream_table: Sequence[Tuple[int, str]] = UPSTREAM_TABLE,
                   downstream: Tuple[int, str] = DOWNSTREAM_RECORD,
                   downstream_provider: Optional[CodecProvider] = None) -> VersionRegistry:
    """
    Build the registry from a (version, label) table and a codec provider.

    Args:
        codec_provider: Returns the upstream codec for a protocol number
        upstream_table: Upstream rows, oldest first; the last row is the default
        downstream: The downstream (version, label) row
        downstream_provider: Returns the downstream codec. Defaults to codec_provider.

    Returns:
        A validated, read-only VersionRegistry

    Raises:
        RegistryError: If the table is inconsistent
        Exception: Whatever the codec provider raises for a version it cannot supply
    """
    downstream_provider = downstream_provider or codec_provider

    upstream = [
        CodecDescriptor(version, label, codec_provider(version))
        for version, label in upstream_table
    ]
    down_version, down_label = downstream
    downstream_descriptor = CodecDescriptor(down_version, down_label, downstream_provider(down_version))

    registry = VersionRegistry(upstream, downstream_descriptor)
    logger.debug(f"Built registry from static table: {registry!r}")
    return registry
