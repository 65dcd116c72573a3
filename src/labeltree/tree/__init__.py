# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tree package - Mutable rooted tree with labeled nodes.

The package is organized into:
- core: Tree class with adjacency maps, queries and validation
- topology: swap_labels and prune_and_reattach moves
- loading: Conversion to and from dict / JSON

Example:
    >>> from labeltree import Tree
    >>> tree = Tree(0)
    >>> tree.add_node(0, 1)
    >>> tree.subtree_size(0)
    2
"""

from .core import Node, Tree
from .loading import dump_tree, from_json, load_tree, to_json

__all__ = ["Node", "Tree", "dump_tree", "load_tree", "to_json", "from_json"]
