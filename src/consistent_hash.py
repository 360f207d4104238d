"""
Consistent Hashing Ring Implementation

Nodes and keys are hashed onto the same circular space [0, 2**32). A key
belongs to the first node found clockwise from its position, so adding or
removing a node only moves the keys of the arc next to it.

Two flavours share the lookup logic:

- ConsistentHashRing stores each real node and each virtual node as its own
  entry. Removing a node scans the ring for the replicas it owns.
- ConsistentHashCluster groups a real node with the virtual nodes it spawned,
  so removing a node touches only its own entries.

Neither is thread-safe: concurrent writers must be serialized by the caller.
"""

import bisect
import logging
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from hash_functions import to_uint32
from ring_checks import is_positive, not_empty
from ring_config import RingConfiguration
from ring_errors import DuplicateNodeError, InvalidArgumentError
from ring_nodes import Node, VirtualNode, node_of

logger = logging.getLogger(__name__)

RING_SIZE = 2 ** 32

NodeLike = Union[Node, str]


class BaseHashRing:
    """
    Ordered hash -> occupant mapping with successor lookup.

    `ring` maps each hash value to the entry placed there and `sorted_keys`
    keeps the same hash values in ascending order for bisect lookups.
    Subclasses decide what an entry is and how a node's entries are found
    on removal.
    """

    def __init__(self, nodes: Optional[Iterable[NodeLike]] = None,
                 configuration: Optional[RingConfiguration] = None):
        """
        Initialize the hash ring.

        Args:
            nodes: Initial nodes (Node instances or names), each one added
                with the configured number of virtual nodes
            configuration: Hash function and default replica count, the
                default configuration when omitted
        """
        if configuration is None:
            configuration = RingConfiguration.default()
        elif not isinstance(configuration, RingConfiguration):
            raise InvalidArgumentError("Ring configuration must be defined")

        self.configuration = configuration
        self.ring: Dict[int, Any] = {}
        self.sorted_keys: List[int] = []

        if nodes:
            for node in nodes:
                self.add_node(node)

    @classmethod
    def of(cls, nodes: Iterable[NodeLike], configuration: Optional[RingConfiguration] = None):
        return cls(nodes, configuration)

    @classmethod
    def empty(cls, configuration: Optional[RingConfiguration] = None):
        return cls(None, configuration)

    def size(self) -> int:
        """Number of entries on the ring, real and virtual nodes alike."""
        return len(self.ring)

    def is_empty(self) -> bool:
        return not self.ring

    def __len__(self) -> int:
        return len(self.ring)

    @property
    def nodes(self) -> FrozenSet[Node]:
        """Real nodes currently on the ring."""
        return frozenset(entry.root_node for entry in self.ring.values())

    def __contains__(self, node) -> bool:
        if isinstance(node, str):
            return any(n.name == node for n in self.nodes)
        return node in self.nodes

    def add_node(self, node: NodeLike, replica_count: Optional[int] = None) -> None:
        """
        Add a node and its virtual nodes to the ring.

        Every position is checked before the ring is touched: if the node or
        any of its replicas hashes onto an occupied position, DuplicateNodeError
        is raised and the ring is left as it was.

        Args:
            node: Node or node name
            replica_count: Virtual nodes to create for this node, overriding
                the configured default
        """
        node = node_of(node)
        if replica_count is None:
            replica_count = self.configuration.replica_count
        else:
            is_positive(replica_count, "Number of virtual nodes must be positive")

        virtual_nodes = tuple(VirtualNode(node, i) for i in range(replica_count))
        entries = self._entries_for(node, virtual_nodes)
        self._check_free(node, entries)

        for hash_value, entry in entries:
            self.ring[hash_value] = entry
            bisect.insort(self.sorted_keys, hash_value)

        logger.info("Added node %s with %d virtual nodes", node.name, len(virtual_nodes))

    def remove_node(self, node: NodeLike) -> None:
        """
        Remove a node and all of its virtual nodes.

        Removing a node that is not on the ring does nothing.
        """
        node = node_of(node)
        hash_value = self._hash(node.name)
        entry = self.ring.get(hash_value)
        if entry is None or self._node_at(entry) != node:
            return

        removed = self._hashes_owned_by(node, hash_value, entry)
        for owned_hash in removed:
            del self.ring[owned_hash]
            del self.sorted_keys[bisect.bisect_left(self.sorted_keys, owned_hash)]

        logger.info("Removed node %s and %d virtual nodes", node.name, len(removed) - 1)

    def find_node(self, value: str) -> Node:
        """
        Find which node owns the given value.

        1. Hash the value to get a position on the ring
        2. Take the first entry at or after that position, wrapping around
           to the lowest entry past the end of the ring
        3. Return the real node behind that entry
        """
        not_empty(self.ring, "Cannot find node from an empty ring")
        if value is None or not isinstance(value, str):
            raise InvalidArgumentError("Cannot find node for null value")

        hash_value = self._hash(value)

        # bisect_left: an entry exactly at hash_value owns the value
        idx = bisect.bisect_left(self.sorted_keys, hash_value)
        if idx == len(self.sorted_keys):
            idx = 0

        return self.ring[self.sorted_keys[idx]].root_node

    def load_distribution(self) -> Dict[Node, float]:
        """
        Percentage of the hash space owned by each real node.

        Each entry owns the arc running from the previous entry (exclusive)
        up to itself (inclusive). Useful for debugging and monitoring.
        """
        if not self.sorted_keys:
            return {}

        node_ranges: Dict[Node, int] = {}
        for i, key in enumerate(self.sorted_keys):
            # sorted_keys[-1] when i == 0: the first entry owns the wraparound arc
            range_size = (key - self.sorted_keys[i - 1]) % RING_SIZE or RING_SIZE
            node = self.ring[key].root_node
            node_ranges[node] = node_ranges.get(node, 0) + range_size

        return {node: (size / RING_SIZE) * 100 for node, size in node_ranges.items()}

    def _hash(self, value: str) -> int:
        return to_uint32(self.configuration.hash_function.compute(value))

    def _check_free(self, node: Node, entries: List[Tuple[int, Any]]) -> None:
        seen = set()
        for hash_value, _ in entries:
            existing = self.ring.get(hash_value)
            if existing is not None:
                logger.warning("Rejected node %s: hash %d is owned by %s",
                               node.name, hash_value, existing.root_node.name)
                raise DuplicateNodeError(hash_value, existing.root_node)
            if hash_value in seen:
                logger.warning("Rejected node %s: two of its replicas share hash %d",
                               node.name, hash_value)
                raise DuplicateNodeError(
                    hash_value,
                    message=f"Virtual nodes of <{node.name}> collide on hash <{hash_value}>",
                )
            seen.add(hash_value)

    def _entries_for(self, node: Node, virtual_nodes: Tuple[VirtualNode, ...]) -> List[Tuple[int, Any]]:
        raise NotImplementedError

    def _node_at(self, entry) -> Any:
        raise NotImplementedError

    def _hashes_owned_by(self, node: Node, hash_value: int, entry) -> List[int]:
        raise NotImplementedError

    def __eq__(self, other) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.ring == other.ring and self.configuration == other.configuration

    __hash__ = None

    def __repr__(self) -> str:
        entries = ", ".join(f"{key}: {self.ring[key]!r}" for key in self.sorted_keys)
        return f"{type(self).__name__}(entries={{{entries}}}, configuration={self.configuration!r})"

    def __str__(self) -> str:
        """String representation showing ring status."""
        if not self.ring:
            return "Empty hash ring"

        nodes = self.nodes
        distribution = self.load_distribution()
        lines = [f"Hash ring with {len(nodes)} nodes ({len(self.ring)} entries):"]
        for node in sorted(nodes, key=lambda n: n.name):
            lines.append(f"  {node.name}: {distribution.get(node, 0):.2f}% of hash space")

        return "\n".join(lines)


class ConsistentHashRing(BaseHashRing):
    """
    Consistent hashing ring where every node and virtual node is an entry.

    Uses virtual nodes (replicas) to spread each physical node over several
    positions, which evens out the share of keys each node receives.
    """

    def _entries_for(self, node, virtual_nodes):
        entries = [(self._hash(node.name), node)]
        entries.extend((self._hash(vn.name), vn) for vn in virtual_nodes)
        return entries

    def _node_at(self, entry):
        return entry

    def _hashes_owned_by(self, node, hash_value, entry):
        return [key for key, owner in self.ring.items() if owner.root_node == node]


@dataclass(frozen=True)
class ClusterNode:
    """
    Entry of a ConsistentHashCluster.

    The entry of a real node carries the virtual nodes it spawned; the
    entries of those virtual nodes carry none.
    """

    node: Union[Node, VirtualNode]
    virtual_nodes: Tuple[VirtualNode, ...] = ()

    @property
    def root_node(self) -> Node:
        return self.node.root_node


class ConsistentHashCluster(BaseHashRing):
    """
    Consistent hashing ring grouping each node with its virtual nodes.

    Removal reads the replicas from the node's own entry and drops them by
    hash, regardless of how many entries the ring holds.
    """

    def _entries_for(self, node, virtual_nodes):
        entries = [(self._hash(node.name), ClusterNode(node, virtual_nodes))]
        entries.extend((self._hash(vn.name), ClusterNode(vn)) for vn in virtual_nodes)
        return entries

    def _node_at(self, entry):
        return entry.node

    def _hashes_owned_by(self, node, hash_value, entry):
        return [hash_value] + [self._hash(vn.name) for vn in entry.virtual_nodes]
