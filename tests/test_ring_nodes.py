"""
Tests for node identities: real nodes, virtual nodes and cluster entries.
"""

import dataclasses

import pytest

from consistent_hash import ClusterNode
from ring_errors import InvalidArgumentError
from ring_nodes import Node, VirtualNode, node_of


class TestNode:

    def test_create_node(self):
        node = Node("192.168.1.1")
        assert node.name == "192.168.1.1"
        assert node.root_node is node

    @pytest.mark.parametrize("name", [None, "", "   ", "\t\n", 42])
    def test_invalid_name(self, name):
        with pytest.raises(InvalidArgumentError):
            Node(name)

    def test_equality_by_name(self):
        assert Node("a") == Node("a")
        assert hash(Node("a")) == hash(Node("a"))
        assert Node("a") != Node("b")

    def test_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            Node("a").name = "b"

    def test_node_of_name(self):
        assert node_of("a") == Node("a")

    def test_node_of_node(self):
        node = Node("a")
        assert node_of(node) is node

    def test_node_of_none(self):
        with pytest.raises(InvalidArgumentError):
            node_of(None)


class TestVirtualNode:

    def test_name_embeds_parent_and_index(self):
        virtual_node = VirtualNode(Node("192.168.1.1"), 3)
        assert virtual_node.name == "@@@192.168.1.1@@@3@@@"

    def test_root_node_is_parent(self):
        parent = Node("192.168.1.1")
        assert VirtualNode(parent, 0).root_node is parent

    def test_never_equal_to_a_real_node(self):
        virtual_node = VirtualNode(Node("a"), 0)
        assert virtual_node != Node(virtual_node.name)

    def test_equality(self):
        parent = Node("a")
        assert VirtualNode(parent, 1) == VirtualNode(Node("a"), 1)
        assert VirtualNode(parent, 1) != VirtualNode(parent, 2)
        assert len({VirtualNode(parent, 1), VirtualNode(parent, 1)}) == 1

    def test_missing_parent(self):
        with pytest.raises(InvalidArgumentError):
            VirtualNode(None, 0)

    def test_negative_index(self):
        with pytest.raises(InvalidArgumentError):
            VirtualNode(Node("a"), -1)


class TestClusterNode:

    def test_create_node(self):
        root = Node("192.168.1.1")
        replicas = (VirtualNode(root, 0), VirtualNode(root, 1))
        entry = ClusterNode(root, replicas)

        assert entry.node is root
        assert entry.virtual_nodes == replicas
        assert entry.root_node is root

    def test_create_node_from_virtual_node(self):
        root = Node("192.168.1.1")
        entry = ClusterNode(VirtualNode(root, 0))

        assert entry.virtual_nodes == ()
        assert entry.root_node is root

    def test_repr(self):
        root = Node("192.168.1.1")
        entry = ClusterNode(root, (VirtualNode(root, 0),))

        assert repr(entry) == (
            "ClusterNode(node=Node(name='192.168.1.1'), "
            "virtual_nodes=(VirtualNode(parent=Node(name='192.168.1.1'), index=0, "
            "name='@@@192.168.1.1@@@0@@@'),))"
        )
