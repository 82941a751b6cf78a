#!/usr/bin/env python3
"""
Version Registry Module for the Protocol Bridge

This module holds the single source of truth about which protocol versions
the proxy speaks:

- The ordered collection of supported upstream (client-facing) codecs
- Exact-match lookup from a wire-reported version number to its codec
- The designated default codec, always the newest registered version
- The one fixed downstream codec the proxy forwards to
- Human-readable "supported versions" summaries for logs and disconnect messages

A registry is validated once when it is constructed and is read-only from
then on, so a single instance can be shared by every session thread without
locking. Sessions receive the registry explicitly rather than importing a
global, which lets tests build isolated registries from synthetic tables.

Version: 1.0.0
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from codec_descriptor import CodecDescriptor

__version__ = "1.0.0"
__all__ = ["VersionRegistry", "RegistryError", "format_supported_labels", "SUPPORTED_LABEL_DELIMITER"]

logger = logging.getLogger("BridgeProxy.Registry")

# Delimiter between labels in supported-version summaries
SUPPORTED_LABEL_DELIMITER = ", "


class RegistryError(Exception):
    """Raised when a registry is built from an inconsistent version table."""
    pass


def format_supported_labels(collection: Iterable[CodecDescriptor]) -> str:
    """
    Join the labels of a collection of descriptors into one summary string.

    Args:
        collection: Descriptors in the order they should be listed

    Returns:
        Labels separated by ", ", empty string for an empty collection
    """
    return SUPPORTED_LABEL_DELIMITER.join(descriptor.label for descriptor in collection)


class VersionRegistry:
    """
    Immutable registry of supported upstream codecs plus the downstream codec.

    Upstream descriptors are kept in registration order, oldest first. The
    last one is the default descriptor advertised as the proxy's latest
    supported version.
    """

    def __init__(self, upstream: Sequence[CodecDescriptor], downstream: CodecDescriptor,
                 default: Optional[CodecDescriptor] = None):
        """
        Build and validate a registry.

        Args:
            upstream: Supported upstream descriptors, oldest to newest
            downstream: The single downstream descriptor
            default: Expected default descriptor. When given it must be the
                     last upstream entry; when omitted the last entry is used.

        Raises:
            RegistryError: If the table is empty, contains duplicate or
                           non-integer versions, has an empty label, or the
                           default disagrees with the last entry
        """
        self._upstream: Tuple[CodecDescriptor, ...] = tuple(upstream)
        self._downstream = downstream
        self._index: Dict[int, CodecDescriptor] = {}

        if not self._upstream:
            raise RegistryError("At least one upstream version must be registered")

        for descriptor in self._upstream + (downstream,):
            self._check_descriptor(descriptor)

        for descriptor in self._upstream:
            if descriptor.version in self._index:
                first = self._index[descriptor.version]
                raise RegistryError(
                    f"Duplicate upstream protocol version {descriptor.version}: "
                    f"{first.label!r} and {descriptor.label!r}"
                )
            self._index[descriptor.version] = descriptor

        latest = self._upstream[-1]
        if default is not None and default is not latest:
            raise RegistryError(
                f"Default descriptor {default} is not the last registered version {latest}"
            )
        self._default = latest

        logger.info(
            f"Loaded {len(self._upstream)} upstream versions "
            f"({self._upstream[0].label} to {latest.label}), "
            f"downstream {downstream.label} (protocol {downstream.version})"
        )

    @staticmethod
    def _check_descriptor(descriptor: CodecDescriptor) -> None:
        if not isinstance(descriptor, CodecDescriptor):
            raise RegistryError(f"Expected a CodecDescriptor, got {type(descriptor).__name__}")
        # bool is an int subclass but never a protocol number
        if isinstance(descriptor.version, bool) or not isinstance(descriptor.version, int):
            raise RegistryError(f"Protocol version must be an integer, got {descriptor.version!r}")
        if not descriptor.label:
            raise RegistryError(f"Protocol version {descriptor.version} has an empty label")

    # Upstream

    def lookup(self, version: int) -> Optional[CodecDescriptor]:
        """
        Find the upstream descriptor for a wire-reported protocol version.

        Args:
            version: Protocol version claimed by the client

        Returns:
            The matching descriptor, or None if the version is unsupported
        """
        if isinstance(version, bool) or not isinstance(version, int):
            descriptor = None
        else:
            descriptor = self._index.get(version)

        if descriptor is None:
            logger.debug(f"No codec registered for protocol version {version!r}")
        return descriptor

    def is_supported(self, version: int) -> bool:
        """Check whether a protocol version has a registered codec."""
        return self.lookup(version) is not None

    def default_descriptor(self) -> CodecDescriptor:
        """
        Get the default descriptor.

        Returns:
            The newest registered upstream descriptor
        """
        return self._default

    def all_supported(self) -> Tuple[CodecDescriptor, ...]:
        """
        Get every supported upstream descriptor.

        Returns:
            Descriptors in registration order, oldest to newest
        """
        return self._upstream

    def supported_versions(self) -> List[int]:
        """Protocol numbers of all supported upstream versions, oldest first."""
        return [descriptor.version for descriptor in self._upstream]

    def all_supported_labels(self) -> str:
        """
        Get a summary of every supported upstream version.

        Returns:
            All upstream labels separated by ", "
        """
        return format_supported_labels(self._upstream)

    @staticmethod
    def format_supported_labels(collection: Iterable[CodecDescriptor]) -> str:
        """Join the labels of the given descriptors with ", "."""
        return format_supported_labels(collection)

    # Downstream

    def downstream_codec(self) -> CodecDescriptor:
        """
        Get the downstream descriptor.

        Only one downstream version is ever supported, so there is no lookup.

        Returns:
            The downstream descriptor
        """
        return self._downstream

    def downstream_protocol_version(self) -> int:
        """Protocol number of the downstream codec."""
        return self._downstream.version

    def downstream_version_label(self) -> str:
        """Release label of the downstream codec."""
        return self._downstream.label

    def downstream_versions(self) -> List[str]:
        """Release labels supported downstream, as a list."""
        return [self._downstream.label]

    def all_supported_downstream_labels(self) -> str:
        """Summary of every supported downstream version."""
        return format_supported_labels((self._downstream,))

    # Reporting

    def get_version_info(self) -> Dict[str, Any]:
        """
        Get information about the versions this registry supports.

        Returns:
            Dictionary with the default version, every supported upstream
            version and the downstream version
        """
        return {
            "default": self._default.to_dict(),
            "supported": [descriptor.to_dict() for descriptor in self._upstream],
            "supported_labels": self.all_supported_labels(),
            "downstream": self._downstream.to_dict(),
        }

    def __len__(self) -> int:
        return len(self._upstream)

    def __contains__(self, version: object) -> bool:
        return self.lookup(version) is not None

    def __repr__(self) -> str:
        return (f"VersionRegistry(upstream={self.supported_versions()}, "
                f"downstream={self._downstream.version})")
