#!/usr/bin/env python3
"""
Consistent Hashing Demo

This script shows the hash ring working in-process:
1. Places a few servers on the ring and routes sample keys
2. Adds a server and measures how many keys move
3. Removes a server and checks only its keys moved
4. Prints the share of hash space each server owns

Usage: python src/demo.py [--replicas N] [--keys N] [--hash fnv|builtin]
"""

import argparse
import logging
from typing import Dict, List

from consistent_hash import ConsistentHashCluster
from hash_functions import builtin_hash_function, fnv1_32_hash_function
from ring_config import RingConfiguration

logger = logging.getLogger("demo")

SERVERS = ["server1", "server2", "server3"]

HASH_FUNCTIONS = {
    "fnv": fnv1_32_hash_function,
    "builtin": builtin_hash_function,
}


def assignments(cluster: ConsistentHashCluster, keys: List[str]) -> Dict[str, str]:
    return {key: cluster.find_node(key).name for key in keys}


def demo_routing(cluster: ConsistentHashCluster) -> None:
    """Show where some keys would go."""
    print("\n🔑 Demo 1: Key routing")
    print("=" * 40)

    for key in ["user:123", "user:456", "session:abc", "cache:data", "temp:file"]:
        print(f"  {key:12} -> {cluster.find_node(key).name}")


def demo_adding_node(cluster: ConsistentHashCluster, keys: List[str]) -> None:
    """Demonstrate adding a new node to the ring."""
    print("\n➕ Demo 2: Adding a node")
    print("=" * 40)

    before = assignments(cluster, keys)
    cluster.add_node("server4")
    after = assignments(cluster, keys)

    moved = [key for key in keys if before[key] != after[key]]
    stolen = sum(1 for key in moved if after[key] == "server4")
    print(f"  {len(moved)}/{len(keys)} keys moved ({len(moved) / len(keys) * 100:.1f}%)")
    print(f"  {stolen}/{len(moved)} of them moved to server4")


def demo_removing_node(cluster: ConsistentHashCluster, keys: List[str]) -> None:
    """Demonstrate that removing a node only moves that node's keys."""
    print("\n➖ Demo 3: Removing a node")
    print("=" * 40)

    before = assignments(cluster, keys)
    cluster.remove_node("server2")
    after = assignments(cluster, keys)

    moved = [key for key in keys if before[key] != after[key]]
    owned = sum(1 for key in keys if before[key] == "server2")
    print(f"  server2 owned {owned} keys, {len(moved)} keys moved")
    if any(before[key] != "server2" for key in moved):
        logger.error("A key not owned by server2 was moved")


def main():
    """Run the consistent hashing demo."""
    parser = argparse.ArgumentParser(description=__doc__.split("\n\n")[0].strip())
    parser.add_argument("--replicas", type=int, default=100,
                        help="virtual nodes per server (default: 100)")
    parser.add_argument("--keys", type=int, default=1000,
                        help="number of sample keys (default: 1000)")
    parser.add_argument("--hash", choices=sorted(HASH_FUNCTIONS), default="fnv",
                        help="hash function (default: fnv)")
    args = parser.parse_args()
    if args.keys <= 0:
        parser.error("--keys must be greater than zero")
    if args.replicas < 0:
        parser.error("--replicas must be positive")

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    configuration = (RingConfiguration.builder()
                     .hash_function(HASH_FUNCTIONS[args.hash]())
                     .replica_count(args.replicas)
                     .build())
    cluster = ConsistentHashCluster.of(SERVERS, configuration)
    print(cluster)

    keys = [f"distribution_test_{i:04d}" for i in range(args.keys)]

    demo_routing(cluster)
    demo_adding_node(cluster, keys)
    demo_removing_node(cluster, keys)

    print(f"\n📊 Final distribution:\n{cluster}")


if __name__ == "__main__":
    main()
