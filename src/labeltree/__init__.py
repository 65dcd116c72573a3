# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""LabelTree - Mutable rooted trees with topology moves.

A lightweight, zero-dependency library providing a labeled tree with
swap_labels and prune_and_reattach moves, meant as the state of
tree-topology samplers.
"""

__version__ = "0.1.0"

from .builders import create_chain_tree, create_star_tree
from .exceptions import (
    LabelTreeError,
    NodeAlreadyExistsError,
    NodeNotFoundError,
    TopologyError,
)
from .tree import Node, Tree, dump_tree, from_json, load_tree, to_json

__all__ = [
    # Core classes
    "Tree",
    "Node",
    # Builders
    "create_star_tree",
    "create_chain_tree",
    # Serialization
    "dump_tree",
    "load_tree",
    "to_json",
    "from_json",
    # Exceptions
    "LabelTreeError",
    "NodeNotFoundError",
    "NodeAlreadyExistsError",
    "TopologyError",
]
