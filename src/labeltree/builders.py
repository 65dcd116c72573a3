# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Helpers building common tree shapes through Tree.add_node()."""

from __future__ import annotations

from typing import Iterable

from .tree import Node, Tree


def create_star_tree(root: Node, labels: Iterable[Node]) -> Tree:
    """Build a tree with every label as a direct child of ``root``.

    Args:
        root: Label of the center node.
        labels: Labels of the leaves.

    Returns:
        The star-shaped tree.

    Raises:
        NodeAlreadyExistsError: If labels repeat, or one equals root.

    Example:
        >>> tree = create_star_tree(0, [10, 14, 20])
        >>> tree.subtree_size(0)
        4
    """
    tree = Tree(root)
    for label in labels:
        tree.add_node(root, label)
    return tree


def create_chain_tree(labels: Iterable[Node]) -> Tree:
    """Build a single path through ``labels``, in order.

    The first label becomes the root and each following label the only
    child of the previous one.

    Raises:
        ValueError: If labels is empty. This is a usage error, not a
            tree error.
        NodeAlreadyExistsError: If labels repeat.

    Example:
        >>> create_chain_tree([0, 1, 2]).edges()
        [(0, 1), (1, 2)]
    """
    iterator = iter(labels)
    try:
        root = next(iterator)
    except StopIteration:
        raise ValueError("create_chain_tree requires at least one label") from None

    tree = Tree(root)
    current = root
    for label in iterator:
        tree.add_node(current, label)
        current = label
    return tree
