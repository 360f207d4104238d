"""
Ring configuration.

Chosen once when a ring is built: the hash function placing nodes and keys,
and the number of virtual nodes created for each node unless a different
count is given when the node is added.
"""

from dataclasses import dataclass, field

from hash_functions import HashFunction, fnv1_32_hash_function
from ring_checks import is_positive
from ring_errors import InvalidArgumentError


@dataclass(frozen=True)
class RingConfiguration:
    hash_function: HashFunction = field(default_factory=fnv1_32_hash_function)
    replica_count: int = 0

    def __post_init__(self):
        if self.hash_function is None or not callable(getattr(self.hash_function, "compute", None)):
            raise InvalidArgumentError("Hash function must be defined")
        is_positive(self.replica_count, "Number of virtual nodes must be positive")

    @classmethod
    def builder(cls) -> "RingConfiguration.Builder":
        return cls.Builder()

    @classmethod
    def default(cls) -> "RingConfiguration":
        return cls.builder().build()

    class Builder:
        """
        Step-by-step construction of a RingConfiguration.

        Defaults to the FNV-1a hash function and no virtual nodes. Values are
        validated by build(), not by the setters.
        """

        def __init__(self):
            self._hash_function = fnv1_32_hash_function()
            self._replica_count = 0

        def hash_function(self, hash_function: HashFunction) -> "RingConfiguration.Builder":
            self._hash_function = hash_function
            return self

        def replica_count(self, replica_count: int) -> "RingConfiguration.Builder":
            self._replica_count = replica_count
            return self

        def build(self) -> "RingConfiguration":
            return RingConfiguration(
                hash_function=self._hash_function,
                replica_count=self._replica_count,
            )
