#!/usr/bin/env python3
"""
Protocol Version Module for the Protocol Bridge

This module decides, once per connection, whether the proxy can talk to a
client and with which codec. It sits between the session layer and the
version registry:

- Binding a claimed protocol version to its registered codec
- Rejecting unsupported versions with a reason and a disconnect message that
  lists the supported versions
- Advertising the proxy's supported versions to peers
- Processing version messages received from peers

Negotiation is a one-shot decision: an unsupported version is reported, never
retried or mapped to a neighbouring codec. The negotiator keeps no
per-connection state, so one instance serves every session.

Version: 1.0.0
"""

import logging
from enum import Enum, auto
from typing import Any, Dict, Optional, Tuple

from codec_descriptor import CodecDescriptor
from version_registry import VersionRegistry

__version__ = "1.0.0"
__all__ = ["ProtocolVersion", "NegotiationResult", "RejectionReason"]

logger = logging.getLogger("BridgeProxy.Versioning")


class RejectionReason(Enum):
    """
    Why a claimed protocol version was refused.

    - OUTDATED_CLIENT: The client is older than the newest supported version
    - OUTDATED_SERVER: The client is newer than anything the proxy supports
    - MALFORMED: The client did not send a usable version number
    """
    OUTDATED_CLIENT = auto()
    OUTDATED_SERVER = auto()
    MALFORMED = auto()


class NegotiationResult:
    """Outcome of negotiating one connection's protocol version."""

    def __init__(self, claimed_version: Any, descriptor: Optional[CodecDescriptor] = None,
                 reason: Optional[RejectionReason] = None, message: Optional[str] = None):
        """
        Initialize a negotiation result.

        Args:
            claimed_version: Version the client reported
            descriptor: Bound descriptor when accepted
            reason: Rejection reason when refused
            message: Disconnect message to show a refused client
        """
        self.claimed_version = claimed_version
        self.descriptor = descriptor
        self.reason = reason
        self.message = message

    @property
    def accepted(self) -> bool:
        """True if a codec was bound."""
        return self.descriptor is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "claimed_version": self.claimed_version,
            "accepted": self.accepted,
            "descriptor": self.descriptor.to_dict() if self.descriptor else None,
            "reason": self.reason.name if self.reason else None,
            "message": self.message,
        }

    def __repr__(self) -> str:
        if self.accepted:
            return f"NegotiationResult(accepted {self.descriptor})"
        return f"NegotiationResult(rejected {self.claimed_version!r}: {self.reason.name})"


class ProtocolVersion:
    """
    Negotiates client protocol versions against a version registry.

    The registry is passed in explicitly, so tests and embedded proxies can
    negotiate against their own version tables.
    """

    OUTDATED_CLIENT_MESSAGE = "Outdated client! Please use {latest}. Supported versions: {supported}"
    OUTDATED_SERVER_MESSAGE = "Outdated proxy! It supports up to {latest}. Supported versions: {supported}"
    MALFORMED_MESSAGE = "Invalid protocol version. Supported versions: {supported}"

    def __init__(self, registry: VersionRegistry):
        """
        Initialize with the registry to negotiate against.

        Args:
            registry: Registry of supported versions
        """
        self.registry = registry

    def get_version_info(self) -> Dict[str, Any]:
        """
        Get information about the supported protocol versions.

        Returns:
            Dictionary with default, supported and downstream versions
        """
        return self.registry.get_version_info()

    def negotiate(self, claimed_version: Any) -> NegotiationResult:
        """
        Bind a claimed protocol version to its codec.

        Args:
            claimed_version: Version number reported by the client

        Returns:
            An accepted result carrying the descriptor, or a rejected result
            carrying the reason and a disconnect message
        """
        if isinstance(claimed_version, bool) or not isinstance(claimed_version, int):
            return self._reject(claimed_version, RejectionReason.MALFORMED)

        descriptor = self.registry.lookup(claimed_version)
        if descriptor is not None:
            logger.debug(f"Bound protocol version {claimed_version} to codec {descriptor.label}")
            return NegotiationResult(claimed_version, descriptor=descriptor)

        if claimed_version > self.registry.default_descriptor().version:
            return self._reject(claimed_version, RejectionReason.OUTDATED_SERVER)
        return self._reject(claimed_version, RejectionReason.OUTDATED_CLIENT)

    def _reject(self, claimed_version: Any, reason: RejectionReason) -> NegotiationResult:
        templates = {
            RejectionReason.OUTDATED_CLIENT: self.OUTDATED_CLIENT_MESSAGE,
            RejectionReason.OUTDATED_SERVER: self.OUTDATED_SERVER_MESSAGE,
            RejectionReason.MALFORMED: self.MALFORMED_MESSAGE,
        }
        supported = self.registry.all_supported_labels()
        message = templates[reason].format(
            latest=self.registry.default_descriptor().label,
            supported=supported,
        )

        logger.info(
            f"Rejected protocol version {claimed_version!r} ({reason.name}); "
            f"supported versions: {supported}"
        )
        return NegotiationResult(claimed_version, reason=reason, message=message)

    def generate_version_message(self) -> Dict[str, Any]:
        """
        Generate a version advertisement message.

        Returns:
            Version message with the default version, its label and every
            supported protocol number
        """
        default = self.registry.default_descriptor()
        return {
            "_version": True,
            "version": default.version,
            "label": default.label,
            "supported": self.registry.supported_versions(),
        }

    def process_version_message(self, message: Dict[str, Any],
                                sender_addr: Tuple[str, int]) -> Optional[NegotiationResult]:
        """
        Process a version message from a peer.

        Args:
            message: Received message
            sender_addr: Sender's address as (host, port) tuple

        Returns:
            The negotiation result, or None if this was not a version message
        """
        if not message.get("_version"):
            return None

        claimed_version = message.get("version")
        if isinstance(claimed_version, bool) or not isinstance(claimed_version, int):
            logger.warning(f"Received invalid version message from {sender_addr}")
            return self._reject(claimed_version, RejectionReason.MALFORMED)

        logger.info(f"Peer {sender_addr} is using protocol version {claimed_version}")
        return self.negotiate(claimed_version)


# Example usage
def example_usage():
    """Demonstrate negotiating against the shipped version table."""
    from codec_table import build_registry

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    # Codecs are opaque to the registry; strings stand in for them here
    registry = build_registry(lambda version: f"codec-v{version}")
    versioning = ProtocolVersion(registry)

    print(f"Version info: {versioning.get_version_info()}")
    print(f"Advertisement: {versioning.generate_version_message()}")

    for claimed in (618, 600, 700):
        result = versioning.negotiate(claimed)
        print(f"Client {claimed}: {result.to_dict()}")

    incoming_message = {"_version": True, "version": 594}
    result = versioning.process_version_message(incoming_message, ("192.168.1.101", 19132))
    print(f"Peer result: {result}")


if __name__ == "__main__":
    example_usage()
