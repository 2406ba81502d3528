# aad/core/topology.py
"""
Restricted reverse-topological traversal.

Only the part of the pass that can carry gradient to one target id is
walked. An operand p of node n is *relevant* iff p is the target or the
target is among p's progenitors. Counting and readiness are keyed by node
id, never by object identity, so repeated occurrences of one variable are
aggregated correctly.
"""

from __future__ import annotations
from collections import Counter
from typing import Iterator, List

from .node import Node


def relevant_operands(node: Node, target_id: int) -> List[Node]:
    return [p for p in node.operands if p.depends_on(target_id)]


def _count_pending(root: Node, target_id: int) -> Counter:
    """
    Discovery pass: depth-first from `root` along relevant operands only.
    For every id, count the relevant edges that reach it.
    """
    pending = Counter()
    seen = {root.id}
    stack = [root]
    while stack:
        node = stack.pop()
        for p in relevant_operands(node, target_id):
            pending[p.id] += 1
            if p.id not in seen:
                seen.add(p.id)
                stack.append(p)
    return pending


class RevTopology:
    """
    Lazy, single-pass iterator over the relevant subgraph of `root`.

    A node is yielded only after every relevant node that consumes it has
    been yielded, so all its gradient contributions are in place by then.
    Among several ready nodes the most recently readied comes first.
    """
    def __init__(self, root: Node, target_id: int):
        self.target_id = target_id
        self.pending = _count_pending(root, target_id)
        self._ready: List[Node] = [root]

    def __iter__(self) -> Iterator[Node]:
        return self

    def __next__(self) -> Node:
        if not self._ready:
            raise StopIteration
        node = self._ready.pop()
        for p in relevant_operands(node, self.target_id):
            self.pending[p.id] -= 1
            if self.pending[p.id] == 0:
                self._ready.append(p)
        return node


def reverse_topology(root: Node, target_id: int) -> RevTopology:
    return RevTopology(root, target_id)
