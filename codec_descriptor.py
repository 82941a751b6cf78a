#!/usr/bin/env python3
"""
Codec descriptor module for the protocol bridge.

A codec descriptor ties together a wire protocol version number, the
human-readable release label clients know it by, and the opaque codec
capability that encodes and decodes packets for that version. Codecs are
supplied by an external codec provider; descriptors never look inside them.

Labels may name several equivalent point releases separated by "/", e.g.
"1.19.21/1.19.22" for two game releases sharing protocol 545.

Typical usage:
    from codec_descriptor import CodecDescriptor

    descriptor = CodecDescriptor(630, "1.20.50/1.20.51", codec)
    descriptor.covers_release("1.20.51")  # True
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List

import semver

__version__ = "1.0.0"
__all__ = ["CodecDescriptor", "RELEASE_SEPARATOR"]

logger = logging.getLogger("BridgeProxy.CodecDescriptor")

# Separates equivalent point releases inside a single label
RELEASE_SEPARATOR = "/"


@dataclass(frozen=True)
class CodecDescriptor:
    """
    Immutable (version, label, codec) record for one protocol version.

    Attributes:
        version: Wire protocol version number
        label: Release label, possibly several releases joined by "/"
        codec: Opaque encode/decode capability for this version
    """

    version: int
    label: str
    codec: Any = field(default=None, hash=False)

    def with_label(self, label: str) -> "CodecDescriptor":
        """
        Return a copy of this descriptor under a different release label.

        Codec libraries ship codecs labelled with a single release; the
        proxy relabels them to list every release it accepts.

        Args:
            label: The new release label

        Returns:
            A new descriptor sharing this descriptor's version and codec
        """
        return replace(self, label=label)

    def releases(self) -> List[semver.Version]:
        """
        Parse the point releases named by the label.

        Returns:
            Releases in label order, short forms such as "1.19" padded to "1.19.0"

        Raises:
            ValueError: If any part of the label is not a release number
        """
        return [
            semver.Version.parse(part.strip(), optional_minor_and_patch=True)
            for part in self.label.split(RELEASE_SEPARATOR)
        ]

    def covers_release(self, release: str) -> bool:
        """
        Check whether a game release falls within this descriptor's label.

        The label's first and last releases bound an inclusive range, so
        "1.20.30/1.20.32" also covers 1.20.31.

        Args:
            release: Release string such as "1.20.31"

        Returns:
            True if the release is inside the labelled range
        """
        try:
            wanted = semver.Version.parse(release.strip(), optional_minor_and_patch=True)
            bounds = self.releases()
        except (ValueError, TypeError, AttributeError) as e:
            logger.debug(f"Cannot compare release {release!r} with label {self.label!r}: {e}")
            return False

        return min(bounds) <= wanted <= max(bounds)

    def to_dict(self) -> Dict[str, Any]:
        """Version number and label, for status reporting."""
        return {"version": self.version, "label": self.label}

    def __str__(self) -> str:
        return f"{self.label} (protocol {self.version})"
