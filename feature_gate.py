#!/usr/bin/env python3
"""
Feature gate predicates for version-dependent proxy behavior.

Session and packet handling code branches on the client's negotiated
protocol version through these helpers instead of comparing numbers inline,
so every threshold lives in one named constant and is easy to find and
remove once the version it guards is retired.

Every predicate accepts either a protocol number or a session-like object
exposing ``protocol_version`` (directly or on its ``upstream`` connection).
"""

from typing import Any

from codec_table import UPSTREAM_V589, UPSTREAM_V594

__version__ = "1.0.0"
__all__ = [
    "protocol_version_of", "is_older_than", "is_at_least", "is_exactly",
    "is_pre_v594", "is_using_experimental_recipe_unlocking",
]


def protocol_version_of(session: Any) -> int:
    """
    Resolve the negotiated protocol version of a session.

    Args:
        session: A protocol number, or an object exposing protocol_version
                 itself or through its upstream attribute

    Returns:
        The protocol version number

    Raises:
        TypeError: If no protocol version can be found on the object
    """
    if isinstance(session, int) and not isinstance(session, bool):
        return session

    version = getattr(session, "protocol_version", None)
    if version is None:
        version = getattr(getattr(session, "upstream", None), "protocol_version", None)
    if not isinstance(version, int) or isinstance(version, bool):
        raise TypeError(f"{type(session).__name__} does not expose a protocol version")

    return version


def is_older_than(session: Any, threshold: int) -> bool:
    """True if the session's version is strictly below the threshold."""
    return protocol_version_of(session) < threshold


def is_at_least(session: Any, threshold: int) -> bool:
    """True if the session's version is the threshold or newer."""
    return protocol_version_of(session) >= threshold


def is_exactly(session: Any, threshold: int) -> bool:
    """True only for the threshold version itself, for single-release quirks."""
    return protocol_version_of(session) == threshold


def is_pre_v594(session: Any) -> bool:
    """
    Check if the client predates protocol 594 (release 1.20.10).

    Args:
        session: Session or protocol number to check

    Returns:
        True for clients older than protocol 594
    """
    return is_older_than(session, UPSTREAM_V594)


def is_using_experimental_recipe_unlocking(session: Any) -> bool:
    """
    Check if the client needs the recipe unlocking experiment enabled.

    Recipe unlocking shipped behind an experiment toggle in protocol 589
    (release 1.20.0) only.

    Args:
        session: Session or protocol number to check

    Returns:
        True if the session needs the experiment for recipe unlocking
    """
    return is_exactly(session, UPSTREAM_V589)
