# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""LabelTree exceptions."""

from __future__ import annotations

from typing import Any


class LabelTreeError(Exception):
    """Base exception for LabelTree errors."""

    pass


class NodeNotFoundError(LabelTreeError, KeyError):
    """Raised when an operand label is not in the tree."""

    def __init__(self, label: Any) -> None:
        super().__init__(f"Node {label!r} is not in the tree")
        self.label = label

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0])


class NodeAlreadyExistsError(LabelTreeError):
    """Raised when a label collides with an existing node.

    Also raised when a node is reattached to itself.
    """

    def __init__(self, label: Any, message: str | None = None) -> None:
        super().__init__(message or f"Node {label!r} already exists")
        self.label = label


class TopologyError(LabelTreeError):
    """Raised when an operation would break the tree shape."""

    pass
