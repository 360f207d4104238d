"""
Node identities placed on the ring.

A Node is a real member of the ring, identified by its name only (a logical
name, an ip address, a url...). A VirtualNode is an extra position owned by
a real node: it spreads the node's share of the key space over several arcs
of the ring so that nodes of equal weight get similar loads.
"""

from dataclasses import dataclass, field
from typing import Union

from ring_checks import is_positive, not_blank, not_none

VIRTUAL_NODE_DELIMITER = "@@@"


@dataclass(frozen=True)
class Node:
    """A real node. Two nodes are equal when they have the same name."""

    name: str

    def __post_init__(self):
        not_blank(self.name, "Node name must be defined")

    @property
    def root_node(self) -> "Node":
        return self


@dataclass(frozen=True)
class VirtualNode:
    """
    Replica of a real node.

    The synthetic name embeds the parent's name and the replica index between
    delimiters, e.g. "@@@10.0.0.1@@@3@@@", so that it never clashes with a
    plain node name and always lands on the same position for a given ring
    configuration.
    """

    parent: Node
    index: int
    name: str = field(init=False, compare=False)

    def __post_init__(self):
        not_none(self.parent, "Parent node must be defined")
        is_positive(self.index, "Virtual node index must be positive")
        # frozen dataclass: derived field must bypass __setattr__
        object.__setattr__(
            self,
            "name",
            f"{VIRTUAL_NODE_DELIMITER}{self.parent.name}{VIRTUAL_NODE_DELIMITER}"
            f"{self.index}{VIRTUAL_NODE_DELIMITER}",
        )

    @property
    def root_node(self) -> Node:
        return self.parent.root_node


def node_of(node: Union[Node, str]) -> Node:
    """Accept either a Node or a plain node name."""
    not_none(node, "Node cannot be null")
    if isinstance(node, Node):
        return node
    return Node(node)
