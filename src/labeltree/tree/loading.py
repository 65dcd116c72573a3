# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Serialization of Tree to and from plain data.

The serialized form is a dict with four keys:

- ``root``: the root label
- ``nodes``: sorted list of all labels
- ``children``: parent -> sorted list of children, ordered by parent
- ``parents``: child -> parent, ordered by child

Ordering is imposed here so that the output is deterministic even though
Tree keeps its adjacency in sets. Loading walks ``children`` from the root
through add_node(), so whatever is loaded satisfies the tree invariants;
``nodes`` and ``parents`` are optional and only cross-checked.

Example:
    >>> data = dump_tree(Tree.from_edges(0, [(0, 1), (0, 2)]))
    >>> data['children']
    {0: [1, 2]}
    >>> load_tree(data) == Tree.from_edges(0, [(0, 2), (0, 1)])
    True
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, TYPE_CHECKING

from ..exceptions import NodeAlreadyExistsError, TopologyError

if TYPE_CHECKING:
    from .core import Tree

logger = logging.getLogger(__name__)


def dump_tree(tree: Tree) -> dict[str, Any]:
    """Convert a tree to its deterministic serialized form."""
    return {
        'root': tree._root,
        'nodes': sorted(tree._nodes),
        'children': {
            parent: sorted(children)
            for parent, children in sorted(tree._children.items())
        },
        'parents': dict(sorted(tree._parents.items())),
    }


def load_tree(data: dict[str, Any], tree_class: type[Tree] | None = None) -> Tree:
    """Rebuild a tree from its serialized form.

    Args:
        data: Dict as produced by dump_tree(). Only 'root' is required;
            'children' defaults to empty, 'nodes' and 'parents' are
            verified against the rebuilt tree when present.
        tree_class: Tree subclass to instantiate. Defaults to Tree.

    Returns:
        The rebuilt tree.

    Raises:
        TypeError: If data is not a dict.
        ValueError: If 'root' is missing.
        TopologyError: If the data does not describe a single rooted tree.
    """
    if tree_class is None:
        from .core import Tree as tree_class

    if not isinstance(data, dict):
        raise TypeError(f"data must be dict, not {type(data).__name__}")
    if 'root' not in data:
        raise ValueError("Serialized tree has no 'root'")

    children: dict[Any, list[Any]] = data.get('children') or {}
    tree = tree_class(data['root'])

    pending = [tree._root]
    while pending:
        parent = pending.pop()
        for child in children.get(parent, ()):
            try:
                tree.add_node(parent, child)
            except NodeAlreadyExistsError as exc:
                raise TopologyError(
                    f"Node {child!r} is reached more than once"
                ) from exc
            pending.append(child)

    unreached = [parent for parent in children if parent not in tree]
    if unreached:
        raise TopologyError(f"Children entries not reachable from root: {unreached!r}")

    if data.get('parents') is not None and dict(data['parents']) != tree._parents:
        raise TopologyError("'parents' does not match 'children'")
    if data.get('nodes') is not None and set(data['nodes']) != tree._nodes:
        raise TopologyError("'nodes' does not match the nodes reachable from root")

    logger.debug(f"load_tree: loaded {len(tree)} nodes rooted at {tree._root!r}")
    return tree


def to_json(tree: Tree, indent: int | None = None) -> str:
    """Serialize a tree to a JSON string.

    JSON object keys are always strings, so integer labels come back as
    strings in the 'children' and 'parents' keys; from_json() converts
    them back.
    """
    return json.dumps(dump_tree(tree), indent=indent)


def from_json(
    text: str,
    label_type: Callable[[Any], Any] = int,
    tree_class: type[Tree] | None = None,
) -> Tree:
    """Rebuild a tree from a JSON string produced by to_json().

    Args:
        text: JSON document.
        label_type: Callable converting each serialized label back to a
            label (int by default, str for string labels).
        tree_class: Tree subclass to instantiate. Defaults to Tree.

    Example:
        >>> tree = Tree.from_edges(0, [(0, 1)])
        >>> from_json(to_json(tree)) == tree
        True
    """
    raw = json.loads(text)
    if not isinstance(raw, dict):
        raise TypeError(f"JSON document must be an object, not {type(raw).__name__}")
    if 'root' not in raw:
        raise ValueError("Serialized tree has no 'root'")

    data: dict[str, Any] = {'root': label_type(raw['root'])}
    if raw.get('children') is not None:
        data['children'] = {
            label_type(parent): [label_type(child) for child in children]
            for parent, children in raw['children'].items()
        }
    if raw.get('parents') is not None:
        data['parents'] = {
            label_type(child): label_type(parent)
            for child, parent in raw['parents'].items()
        }
    if raw.get('nodes') is not None:
        data['nodes'] = [label_type(node) for node in raw['nodes']]
    return load_tree(data, tree_class=tree_class)
