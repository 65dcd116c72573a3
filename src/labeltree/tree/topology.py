# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Topology moves for Tree.

This module provides TopologyMixin, which adds the two shape-editing
operations to Tree:

- swap_labels(i, j): exchange the positions of two labels, keeping the shape
- prune_and_reattach(node, new_parent): move a whole subtree

Both operate directly on the label-keyed ``_children`` / ``_parents`` maps
owned by Tree. Preconditions are checked before any map is touched, so a
failed move leaves the tree exactly as it was. Samplers rely on this to
reject a proposal by simply not applying it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..exceptions import NodeAlreadyExistsError, TopologyError

if TYPE_CHECKING:
    from .core import Node

logger = logging.getLogger(__name__)


class TopologyMixin:
    """Mixin providing swap_labels and prune_and_reattach.

    Expects the host class to define ``_root``, ``_children``, ``_parents``,
    ``_link()``, ``_require()``, ``is_child()`` and ``get_descendants()``.
    """

    __slots__ = ()

    # ==================== Swap ====================

    def swap_labels(self, i: Node, j: Node) -> None:
        """Exchange the positions of labels ``i`` and ``j``.

        After the call, label ``i`` sits where ``j`` was and vice versa.
        Children stay with the position, not with the label, so the shape
        of the tree is unchanged up to the renaming.

        Args:
            i: First label.
            j: Second label.

        Raises:
            NodeNotFoundError: If either label is not in the tree.
            TopologyError: If each node claims to be the other's child.

        Example:
            >>> tree = Tree.from_edges(0, [(0, 1), (1, 2), (2, 3)])
            >>> tree.swap_labels(1, 3)
            >>> tree.edges()
            [(0, 3), (2, 1), (3, 2)]
        """
        self._require(i, j)
        if i == j:
            return

        i_under_j = self.is_child(i, j)
        j_under_i = self.is_child(j, i)
        if i_under_j and j_under_i:
            raise TopologyError(f"Nodes {i!r} and {j!r} are each other's parent")

        if self._root == i:
            self._root = j
        elif self._root == j:
            self._root = i

        if i_under_j:
            self._swap_adjacent(child=i, parent=j)
        elif j_under_i:
            self._swap_adjacent(child=j, parent=i)
        else:
            self._swap_apart(i, j)

    def _swap_adjacent(self, child: Node, parent: Node) -> None:
        """Swap a parent/child pair.

        The ``child`` label moves up to the parent position and takes over
        the grandparent edge and the siblings; the ``parent`` label moves
        down and takes over the grandchildren. All affected entries are
        removed first, then relinked.
        """
        logger.debug(f"swap_labels: adjacent pair child={child!r} parent={parent!r}")
        grandchildren = self._children.pop(child, set())
        siblings = self._children.pop(parent)
        siblings.discard(child)
        del self._parents[child]

        if parent in self._parents:
            grandparent = self._parents.pop(parent)
            self._children[grandparent].discard(parent)
            self._link(grandparent, child)

        self._link(child, parent)
        for node in grandchildren:
            self._link(parent, node)
        for node in siblings:
            self._link(child, node)

    def _swap_apart(self, i: Node, j: Node) -> None:
        """Swap two labels that are not parent and child.

        They may still be siblings, or one may be a deeper ancestor of
        the other.
        """
        children_i = self._children.pop(i, set())
        children_j = self._children.pop(j, set())
        has_parent_i = i in self._parents
        has_parent_j = j in self._parents
        parent_i = self._parents.pop(i, None)
        parent_j = self._parents.pop(j, None)

        # Children follow the position
        for node in children_i:
            self._link(j, node)
        for node in children_j:
            self._link(i, node)

        if has_parent_i and has_parent_j and parent_i == parent_j:
            # Siblings: the shared children set already holds both labels
            logger.debug(f"swap_labels: siblings {i!r} and {j!r} under {parent_i!r}")
            self._parents[i] = parent_i
            self._parents[j] = parent_i
            return

        logger.debug(f"swap_labels: {i!r} (parent {parent_i!r}) <-> {j!r} (parent {parent_j!r})")
        if has_parent_i:
            self._parents[j] = parent_i
            siblings = self._children[parent_i]
            siblings.discard(i)
            siblings.add(j)
        if has_parent_j:
            self._parents[i] = parent_j
            siblings = self._children[parent_j]
            siblings.discard(j)
            siblings.add(i)

    # ==================== Prune & Reattach ====================

    def prune_and_reattach(self, node: Node, new_parent: Node) -> None:
        """Move the subtree rooted at ``node`` under ``new_parent``.

        The subtree is detached from its current parent and attached,
        unchanged internally, as a child of ``new_parent``.

        Args:
            node: Root of the subtree to move.
            new_parent: Node that will become the parent of ``node``.

        Raises:
            NodeNotFoundError: If either label is not in the tree.
            NodeAlreadyExistsError: If node and new_parent are the same.
            TopologyError: If node is the root, or new_parent lies in the
                subtree of node.

        Example:
            >>> tree = Tree.from_edges(0, [(0, 1), (1, 2), (0, 10)])
            >>> tree.prune_and_reattach(1, 10)
            >>> tree.edges()
            [(0, 10), (1, 2), (10, 1)]
        """
        self._require(node, new_parent)
        if node == new_parent:
            raise NodeAlreadyExistsError(
                node, f"Cannot reattach node {node!r} to itself"
            )
        # Every other node descends from the root, so the descendant check
        # below would reject this too.
        if node == self._root:
            raise TopologyError(f"Cannot prune the root {node!r}")
        if new_parent in self.get_descendants(node):
            raise TopologyError(
                f"Cannot reattach {node!r} under its own descendant {new_parent!r}"
            )

        parent = self._parents[node]
        siblings = self._children[parent]
        siblings.discard(node)
        if not siblings:
            del self._children[parent]
        self._link(new_parent, node)
        logger.debug(f"prune_and_reattach: moved {node!r} from {parent!r} to {new_parent!r}")
