# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for the swap_labels and prune_and_reattach topology moves."""

import random

import pytest

from labeltree import (
    NodeAlreadyExistsError,
    NodeNotFoundError,
    TopologyError,
    Tree,
)


def simple_tree():
    """Build the tree 0-1-2-3 with a second branch 0-10-11."""
    return Tree.from_edges(0, [(0, 1), (1, 2), (2, 3), (0, 10), (10, 11)])


def random_tree(rng, size):
    """Build a random tree over shuffled labels 0..size-1."""
    labels = list(range(size))
    rng.shuffle(labels)
    tree = Tree(labels[0])
    for i, label in enumerate(labels[1:], start=1):
        tree.add_node(labels[rng.randrange(i)], label)
    return tree


def relabeled(tree, i, j):
    """Return (root, edges) of tree with labels i and j exchanged."""
    def swap(label):
        if label == i:
            return j
        if label == j:
            return i
        return label

    edges = sorted((swap(parent), swap(child)) for parent, child in tree.edges())
    return swap(tree.root), edges


class TestSwapLabels:
    """Tests for swap_labels on hand-checked cases."""

    def test_swap_siblings_subtrees(self):
        """Test swapping 1 and 10, two children of the root."""
        expected = Tree.from_edges(0, [(0, 10), (10, 2), (2, 3), (0, 1), (1, 11)])
        tree = simple_tree()
        tree.swap_labels(1, 10)
        assert tree == expected

    def test_swap_parent_and_leaf_child(self):
        """Test swapping 10 and its only child 11."""
        expected = Tree.from_edges(0, [(0, 1), (1, 2), (2, 3), (0, 11), (11, 10)])
        tree = simple_tree()
        tree.swap_labels(10, 11)
        assert tree == expected

    def test_swap_parent_and_inner_child(self):
        """Test swapping 1 and its child 2, which has a child of its own."""
        expected = Tree.from_edges(0, [(0, 2), (2, 1), (1, 3), (0, 10), (10, 11)])
        tree = simple_tree()
        tree.swap_labels(1, 2)
        assert tree == expected

    def test_swap_child_and_parent_order(self):
        """Test argument order does not matter for an adjacent pair."""
        a = simple_tree()
        b = simple_tree()
        a.swap_labels(1, 2)
        b.swap_labels(2, 1)
        assert a == b

    def test_swap_root_with_child(self):
        """Test swapping the root 0 with its child 1."""
        expected = Tree.from_edges(1, [(1, 0), (0, 2), (2, 3), (1, 10), (10, 11)])
        tree = simple_tree()
        tree.swap_labels(0, 1)
        assert tree == expected
        assert tree.root == 1
        assert tree.get_parent(0) == 1
        assert tree.get_children(0) == {2}
        assert tree.get_parent(10) == 1

    def test_swap_root_with_grandchild(self):
        """Test swapping the root 0 with its grandchild 2."""
        expected = Tree.from_edges(2, [(2, 1), (1, 0), (0, 3), (2, 10), (10, 11)])
        tree = simple_tree()
        tree.swap_labels(0, 2)
        assert tree == expected
        assert tree.root == 2

    def test_swap_ancestor_and_descendant(self):
        """Test swapping 1 and 3, two steps apart on the same chain."""
        expected = Tree.from_edges(0, [(0, 3), (3, 2), (2, 1), (0, 10), (10, 11)])
        tree = simple_tree()
        tree.swap_labels(1, 3)
        assert tree == expected
        assert tree.edges() == [(0, 3), (0, 10), (2, 1), (3, 2), (10, 11)]

    def test_swap_leaves_in_different_branches(self):
        """Test swapping 3 and 11."""
        expected = Tree.from_edges(0, [(0, 1), (1, 2), (2, 11), (0, 10), (10, 3)])
        tree = simple_tree()
        tree.swap_labels(3, 11)
        assert tree == expected

    def test_swap_sibling_leaves(self):
        """Test swapping two leaves sharing a parent."""
        tree = Tree.from_edges(0, [(0, 1), (0, 2), (1, 3)])
        tree.swap_labels(3, 2)
        assert tree == Tree.from_edges(0, [(0, 1), (0, 3), (1, 2)])
        tree = Tree.from_edges(0, [(0, 1), (0, 2)])
        tree.swap_labels(1, 2)
        assert tree == Tree.from_edges(0, [(0, 1), (0, 2)])

    def test_swap_same_label_is_noop(self):
        """Test i == j leaves the tree unchanged."""
        tree = simple_tree()
        tree.swap_labels(2, 2)
        assert tree == simple_tree()

    def test_swap_missing_label_raises(self):
        """Test swap with an absent label leaves the tree unchanged."""
        tree = simple_tree()
        with pytest.raises(NodeNotFoundError):
            tree.swap_labels(1, 99)
        with pytest.raises(NodeNotFoundError):
            tree.swap_labels(99, 0)
        with pytest.raises(NodeNotFoundError):
            tree.swap_labels(99, 99)
        assert tree == simple_tree()

    def test_swap_mutually_adjacent_raises(self):
        """Test a corrupted pair claiming to be each other's parent."""
        tree = simple_tree()
        tree._parents[0] = 1
        tree._children[1].add(0)
        with pytest.raises(TopologyError):
            tree.swap_labels(0, 1)
        assert tree.root == 0
        assert tree.get_children(1) == {0, 2}

    def test_swap_twice_restores(self):
        """Test swapping the same labels twice restores the tree."""
        for i, j in [(1, 3), (0, 1), (0, 2), (10, 11), (1, 10), (3, 11)]:
            tree = simple_tree()
            tree.swap_labels(i, j)
            assert tree != simple_tree()
            tree.swap_labels(i, j)
            assert tree == simple_tree()


class TestPruneAndReattach:
    """Tests for prune_and_reattach."""

    def test_move_subtree_to_other_branch(self):
        """Test moving subtree 1 under 10."""
        expected = Tree.from_edges(0, [(0, 10), (10, 11), (10, 1), (1, 2), (2, 3)])
        tree = simple_tree()
        tree.prune_and_reattach(1, 10)
        assert tree == expected

    def test_move_leaf(self):
        """Test moving leaf 3 under 10."""
        expected = Tree.from_edges(0, [(0, 10), (10, 11), (0, 1), (1, 2), (10, 3)])
        tree = simple_tree()
        tree.prune_and_reattach(3, 10)
        assert tree == expected

    def test_emptied_parent_becomes_leaf(self):
        """Test the old parent loses its children entry when emptied."""
        tree = simple_tree()
        tree.prune_and_reattach(11, 3)
        assert tree.is_leaf(10)
        assert 10 not in tree._children
        assert tree.is_valid()

    def test_move_up_to_ancestor(self):
        """Test moving a node up to its grandparent."""
        tree = simple_tree()
        tree.prune_and_reattach(3, 0)
        assert tree == Tree.from_edges(0, [(0, 1), (1, 2), (0, 3), (0, 10), (10, 11)])

    def test_reattach_to_current_parent(self):
        """Test reattaching under the current parent changes nothing."""
        tree = simple_tree()
        tree.prune_and_reattach(2, 1)
        assert tree == simple_tree()

    def test_missing_label_raises(self):
        """Test absent node or new parent."""
        tree = simple_tree()
        with pytest.raises(NodeNotFoundError):
            tree.prune_and_reattach(99, 0)
        with pytest.raises(NodeNotFoundError):
            tree.prune_and_reattach(1, 99)
        assert tree == simple_tree()

    def test_reattach_to_itself_raises(self):
        """Test node == new_parent is rejected."""
        tree = simple_tree()
        with pytest.raises(NodeAlreadyExistsError, match="itself"):
            tree.prune_and_reattach(2, 2)
        assert tree == simple_tree()

    def test_reattach_into_own_subtree_raises(self):
        """Test every descendant is rejected as new parent."""
        for descendant in (2, 3):
            tree = simple_tree()
            with pytest.raises(TopologyError, match="descendant"):
                tree.prune_and_reattach(1, descendant)
            assert tree == simple_tree()

    def test_prune_root_raises(self):
        """Test the root cannot be pruned."""
        tree = simple_tree()
        for new_parent in (1, 3, 11):
            with pytest.raises(TopologyError):
                tree.prune_and_reattach(0, new_parent)
        assert tree == simple_tree()


class TestTopologyProperties:
    """Randomized checks of the invariants kept by the moves."""

    @pytest.mark.parametrize('seed', range(20))
    def test_swap_is_relabeling(self, seed):
        """Test swap_labels exchanges the two labels and keeps the shape."""
        rng = random.Random(seed)
        tree = random_tree(rng, rng.randint(2, 30))
        labels = sorted(tree.nodes)
        for _ in range(20):
            i, j = rng.choice(labels), rng.choice(labels)
            expected_root, expected_edges = relabeled(tree, i, j)
            tree.swap_labels(i, j)
            assert tree.root == expected_root
            assert tree.edges() == expected_edges
            assert tree.is_valid()

    @pytest.mark.parametrize('seed', range(20))
    def test_swap_involution(self, seed):
        """Test swapping the same pair twice restores any tree."""
        rng = random.Random(seed)
        tree = random_tree(rng, rng.randint(2, 30))
        labels = sorted(tree.nodes)
        for _ in range(20):
            i, j = rng.choice(labels), rng.choice(labels)
            before = tree.copy()
            tree.swap_labels(i, j)
            tree.swap_labels(i, j)
            assert tree == before

    @pytest.mark.parametrize('seed', range(20))
    def test_random_moves_keep_invariants(self, seed):
        """Test validity and atomicity over a sequence of mixed moves."""
        rng = random.Random(seed)
        tree = random_tree(rng, rng.randint(1, 25))
        labels = sorted(tree.nodes)
        next_label = len(labels)
        for _ in range(100):
            move = rng.choice(['swap', 'prune', 'add'])
            a, b = rng.choice(labels), rng.choice(labels)
            before = tree.copy()
            if move == 'add':
                tree.add_node(a, next_label)
                labels.append(next_label)
                next_label += 1
            elif move == 'swap':
                tree.swap_labels(a, b)
            else:
                if a == b:
                    expected_error = NodeAlreadyExistsError
                elif a == tree.root or b in tree.get_descendants(a):
                    expected_error = TopologyError
                else:
                    expected_error = None
                if expected_error is None:
                    tree.prune_and_reattach(a, b)
                    assert tree.get_parent(a) == b
                else:
                    with pytest.raises(expected_error):
                        tree.prune_and_reattach(a, b)
                    assert tree == before
            assert tree.is_valid(), tree.validation_errors()
            assert tree.subtree_size(tree.root) == len(tree)
            assert len(tree) == len(labels)

    @pytest.mark.parametrize('seed', range(10))
    def test_prune_preserves_moved_subtree(self, seed):
        """Test the moved subtree keeps its internal edges."""
        rng = random.Random(seed)
        tree = random_tree(rng, 20)
        candidates = [n for n in tree.nodes if n != tree.root]
        node = rng.choice(candidates)
        subtree = tree.get_descendants(node)
        targets = sorted(tree.nodes - subtree - {node})
        new_parent = rng.choice(targets)
        inner_edges = [(p, c) for p, c in tree.edges() if p in subtree | {node}]

        tree.prune_and_reattach(node, new_parent)

        assert tree.get_descendants(node) == subtree
        assert [(p, c) for p, c in tree.edges() if p in subtree | {node}] == inner_edges
        assert tree.is_valid()
