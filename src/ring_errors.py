"""
Errors raised by the hash ring.

Every failure is raised at the offending call. Callers decide whether to
skip a duplicate, retry with another name, or give up.
"""

from typing import Optional


class HashRingError(Exception):
    """Base class for every error raised by the hash ring."""


class InvalidArgumentError(HashRingError, ValueError):
    """A missing or malformed argument (blank name, negative replica count...)."""


class DuplicateNodeError(HashRingError, ValueError):
    """
    Raised when a node (or one of its virtual nodes) hashes onto an
    occupied slot of the ring.

    `existing` is the real node already owning the slot, or None when the
    collision happened between replicas of the node being inserted.
    """

    def __init__(self, hash_value: int, existing=None, message: Optional[str] = None):
        self.hash_value = hash_value
        self.existing = existing
        if message is None:
            message = f"Node with hash <{hash_value}> already exists!"
        super().__init__(message)


class EmptyRingError(HashRingError, LookupError):
    """Lookup on a ring without any node."""
