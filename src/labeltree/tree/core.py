# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tree - A mutable, rooted, labeled tree.

This module provides the Tree class, the core container of the labeltree
library. The tree shape is stored as two label-keyed maps kept in sync:
``children`` (parent -> set of children) and ``parents`` (child -> parent).
Labels double as node identity, so there is no separate node object.

Key Features:
    - **O(1) relations**: parent lookup and parent/child tests are dict lookups
    - **Subtree queries**: size, height and descendants of any node
    - **Topology moves**: swap_labels and prune_and_reattach (see topology.py)
    - **Validation**: full consistency re-derivation with is_valid()
    - **Serialization**: plain dict / JSON form (see loading.py)

Invariants:
    - Exactly one node (the root) has no entry in ``parents``.
    - ``children`` and ``parents`` describe the same edges.
    - No node is its own parent or child.
    - Every node is reachable from the root, and only once.

Example:
    Basic usage::

        tree = Tree(0)
        tree.add_node(0, 1)
        tree.add_node(1, 2)
        tree.add_node(0, 10)

        tree.subtree_size(1)       # 2
        tree.calculate_height()    # 3
        tree.get_descendants(0)    # {1, 2, 10}

        tree.swap_labels(1, 10)
        tree.edges()               # [(0, 1), (0, 10), (10, 2)]
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator

from ..exceptions import NodeAlreadyExistsError, NodeNotFoundError
from .loading import dump_tree, load_tree
from .topology import TopologyMixin

logger = logging.getLogger(__name__)

#: Node label type. Any hashable, mutually orderable value works.
Node = int


class Tree(TopologyMixin):
    """A rooted tree whose nodes are identified by their labels.

    A Tree is created with a single root node and grows one node at a time
    via add_node(). Nodes are never removed; they can only be moved with
    prune_and_reattach() or exchanged with swap_labels().

    Every mutating method checks its preconditions before touching any
    internal map: it either succeeds leaving a valid tree, or raises and
    leaves the tree unchanged.

    Example:
        >>> tree = Tree(0)
        >>> tree.add_node(0, 1)
        >>> tree.get_parent(1)
        0
        >>> tree.is_child(1, 0)
        True
    """

    __slots__ = ('_root', '_nodes', '_children', '_parents')

    def __init__(self, root: Node) -> None:
        """Initialize a Tree with a single root node.

        Args:
            root: Label of the root node.
        """
        self._root: Node = root
        self._nodes: set[Node] = {root}
        self._children: dict[Node, set[Node]] = {}
        self._parents: dict[Node, Node] = {}

    @classmethod
    def from_edges(cls, root: Node, edges: Iterable[tuple[Node, Node]]) -> Tree:
        """Build a tree from a root and (parent, child) pairs.

        Edges are applied in order, so each parent must already be
        present when its edge is reached.

        Args:
            root: Label of the root node.
            edges: Iterable of (parent, child) pairs.

        Returns:
            The new Tree.

        Raises:
            NodeNotFoundError: If a parent is not yet in the tree.
            NodeAlreadyExistsError: If a child is already in the tree.

        Example:
            >>> Tree.from_edges(0, [(0, 1), (1, 2)]).edges()
            [(0, 1), (1, 2)]
        """
        tree = cls(root)
        for parent, child in edges:
            tree.add_node(parent, child)
        return tree

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Tree:
        """Build a tree from its serialized form (see ``to_dict``)."""
        return load_tree(data, tree_class=cls)

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        return f"Tree(root={self._root!r}, size={len(self._nodes)})"

    def __len__(self) -> int:
        """Return the number of nodes in the tree."""
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        """Iterate over node labels in sorted order."""
        return iter(sorted(self._nodes))

    def __contains__(self, label: object) -> bool:
        return label in self._nodes

    def __eq__(self, other: object) -> bool:
        """Trees are equal when root, nodes and both adjacency maps match."""
        if not isinstance(other, Tree):
            return NotImplemented
        return (
            self._root == other._root
            and self._nodes == other._nodes
            and self._children == other._children
            and self._parents == other._parents
        )

    __hash__ = None  # type: ignore[assignment]

    def copy(self) -> Tree:
        """Return an independent copy of this tree."""
        new = type(self)(self._root)
        new._nodes = set(self._nodes)
        new._children = {p: set(c) for p, c in self._children.items()}
        new._parents = dict(self._parents)
        return new

    # ==================== Identity & Adjacency ====================

    @property
    def root(self) -> Node:
        """The current root label."""
        return self._root

    @property
    def nodes(self) -> frozenset[Node]:
        """All labels currently in the tree."""
        return frozenset(self._nodes)

    def get_root(self) -> Node:
        """Return the root label."""
        return self._root

    def contains(self, label: Node) -> bool:
        """True if ``label`` is a node of this tree."""
        return label in self._nodes

    def get_parent(self, label: Node) -> Node | None:
        """Return the parent of ``label``, or None for the root or an absent label."""
        return self._parents.get(label)

    def get_children(self, label: Node) -> frozenset[Node]:
        """Return the immediate children of ``label`` (empty for a leaf)."""
        return frozenset(self._children.get(label, ()))

    def is_child(self, child: Node, parent: Node) -> bool:
        """True if ``child`` is an immediate child of ``parent``."""
        return child in self._parents and self._parents[child] == parent

    def is_parent(self, parent: Node, child: Node) -> bool:
        """True if ``parent`` is the immediate parent of ``child``."""
        return self.is_child(child, parent)

    def is_root(self, label: Node) -> bool:
        return label == self._root

    def is_leaf(self, label: Node) -> bool:
        """True if ``label`` is in the tree and has no children.

        Raises:
            NodeNotFoundError: If label is not in the tree.
        """
        self._require(label)
        return label not in self._children

    def edges(self) -> list[tuple[Node, Node]]:
        """Return all (parent, child) pairs, sorted."""
        return sorted((parent, child) for child, parent in self._parents.items())

    def add_node(self, parent: Node, child: Node) -> None:
        """Add ``child`` as a new child of ``parent``.

        This is the only way to introduce a label into the tree.

        Args:
            parent: Existing node to attach under.
            child: New label.

        Raises:
            NodeNotFoundError: If parent is not in the tree.
            NodeAlreadyExistsError: If child is already in the tree.
        """
        self._require(parent)
        if child in self._nodes:
            raise NodeAlreadyExistsError(child)
        self._link(parent, child)

    def _link(self, parent: Node, child: Node) -> None:
        """Attach ``child`` under ``parent`` without any check."""
        self._nodes.add(child)
        self._children.setdefault(parent, set()).add(child)
        self._parents[child] = parent

    def _require(self, *labels: Node) -> None:
        """Raise NodeNotFoundError for the first label not in the tree."""
        for label in labels:
            if label not in self._nodes:
                raise NodeNotFoundError(label)

    # ==================== Queries ====================

    def subtree_size(self, label: Node) -> int:
        """Count the nodes of the subtree rooted at ``label``.

        The count includes ``label`` itself, so a leaf has size 1.

        Raises:
            NodeNotFoundError: If label is not in the tree.
        """
        self._require(label)
        return 1 + len(self.get_descendants(label))

    def calculate_height(self, label: Node | None = None) -> int:
        """Return the height of the subtree rooted at ``label``.

        A leaf has height 1; otherwise the height is one more than the
        tallest child. Defaults to the whole tree.

        Raises:
            NodeNotFoundError: If label is not in the tree.
        """
        if label is None:
            label = self._root
        self._require(label)

        # Post-order on an explicit stack: a node is finalized once all
        # its children have a height.
        heights: dict[Node, int] = {}
        stack: list[tuple[Node, bool]] = [(label, False)]
        while stack:
            node, expanded = stack.pop()
            children = self._children.get(node, ())
            if expanded or not children:
                heights[node] = 1 + max((heights[c] for c in children), default=0)
                continue
            stack.append((node, True))
            stack.extend((c, False) for c in children if c not in heights)
        return heights[label]

    def get_descendants(self, label: Node) -> set[Node]:
        """Return all strict descendants of ``label``.

        An absent label or a leaf has no descendants. The traversal keeps
        a visited set, so it terminates even on a corrupted (cyclic) map.
        """
        descendants: set[Node] = set()
        stack = [label]
        while stack:
            node = stack.pop()
            for child in self._children.get(node, ()):
                if child not in descendants:
                    descendants.add(child)
                    stack.append(child)
        descendants.discard(label)
        return descendants

    def get_ancestors(self, label: Node) -> list[Node]:
        """Return the ancestors of ``label``, from its parent up to the root.

        Raises:
            NodeNotFoundError: If label is not in the tree.
        """
        self._require(label)
        ancestors: list[Node] = []
        seen = {label}
        current = self._parents.get(label)
        while current is not None and current not in seen:
            ancestors.append(current)
            seen.add(current)
            current = self._parents.get(current)
        return ancestors

    def iter_depth_first(self, label: Node | None = None) -> Iterator[tuple[int, Node]]:
        """Yield (depth, label) pairs in pre-order, children sorted.

        Args:
            label: Subtree root. Defaults to the tree root.
        """
        if label is None:
            label = self._root
        self._require(label)
        stack: list[tuple[int, Node]] = [(0, label)]
        while stack:
            depth, node = stack.pop()
            yield depth, node
            children = sorted(self._children.get(node, ()), reverse=True)
            stack.extend((depth + 1, c) for c in children)

    # ==================== Validation ====================

    def validation_errors(self) -> list[str]:
        """Re-derive the tree invariants and report every violation.

        The check ignores how the maps were built and inspects them from
        scratch, so it is meant for tests and debugging rather than for
        the mutation path.

        Returns:
            A list of human readable reasons, empty if the tree is valid.

        Example:
            >>> tree = Tree(0)
            >>> tree.add_node(0, 1)
            >>> tree.validation_errors()
            []
        """
        errors: list[str] = []
        root = self._root

        if root not in self._nodes:
            errors.append(f"root {root!r} is not a node")
        if root in self._parents:
            errors.append(f"root {root!r} has parent {self._parents[root]!r}")

        for node in self._nodes:
            if node != root and node not in self._parents:
                errors.append(f"node {node!r} has no parent")

        for parent, children in self._children.items():
            if not children:
                errors.append(f"node {parent!r} has an empty children entry")
            for child in children:
                if child not in self._parents:
                    errors.append(f"child {child!r} of {parent!r} has no parent entry")
                elif self._parents[child] != parent:
                    errors.append(
                        f"child {child!r} of {parent!r} points to {self._parents[child]!r}"
                    )

        for child, parent in self._parents.items():
            if child not in self._nodes:
                errors.append(f"parent entry for unknown node {child!r}")
            if child not in self._children.get(parent, ()):
                errors.append(f"node {child!r} is missing from children of {parent!r}")

        for node in self._nodes:
            if node in self._parents and self._parents[node] == node:
                errors.append(f"node {node!r} is its own parent")
            if node in self._children.get(node, ()):
                errors.append(f"node {node!r} is its own child")

        # Reachability: every node exactly once from the root.
        reached: set[Node] = {root}
        stack = [root]
        while stack:
            node = stack.pop()
            for child in self._children.get(node, ()):
                if child in reached:
                    errors.append(f"node {child!r} is reached twice (cycle)")
                    continue
                reached.add(child)
                stack.append(child)
        unreachable = self._nodes - reached
        if unreachable:
            errors.append(f"nodes not reachable from root: {sorted(unreachable)!r}")

        return errors

    def is_valid(self) -> bool:
        """True if the tree satisfies all structural invariants."""
        return not self.validation_errors()

    # ==================== Conversion ====================

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain, deterministically ordered dict.

        Returns:
            Dict with 'root', 'nodes', 'children' and 'parents' keys.
        """
        return dump_tree(self)

    def render(self) -> str:
        """Draw the tree as text, children sorted.

        Example:
            >>> print(Tree.from_edges(0, [(0, 1), (1, 2), (0, 10)]).render())
            0
            ├─1
            │ └─2
            └─10
        """
        lines = [str(self._root)]
        # Each entry carries the prefix of its own line.
        stack: list[tuple[Node, str, bool]] = []
        children = sorted(self._children.get(self._root, ()))
        for i, child in reversed(list(enumerate(children))):
            stack.append((child, "", i == len(children) - 1))
        while stack:
            node, prefix, is_last = stack.pop()
            lines.append(f"{prefix}{'└─' if is_last else '├─'}{node}")
            child_prefix = prefix + ("  " if is_last else "│ ")
            children = sorted(self._children.get(node, ()))
            for i, child in reversed(list(enumerate(children))):
                stack.append((child, child_prefix, i == len(children) - 1))
        return "\n".join(lines)
