# aad/core/tape.py
from __future__ import annotations
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Tuple

from .node import Node
from .vjp import VJP

if TYPE_CHECKING:
    from .context import Context


class Tape:
    """
    Record of one forward pass: the node arena, in forward order, plus the
    pass-local id counter.

    A fresh Tape is opened for every evaluation, so the counter starts at
    zero on each pass. Ids are minted as `n_variables + k`, which keeps them
    clear of every variable index. Sub-expressions reused inside one
    expression are evaluated once per pass: the Tape memoises nodes by
    expression identity.
    """
    def __init__(self, context: "Context"):
        self.context = context
        self.nodes: List[Node] = []
        self._memo: Dict[int, Tuple[Any, Node]] = {}
        self._offset = context.n_variables
        self._count = 0

    def __len__(self):
        return len(self.nodes)

    def next_id(self) -> int:
        idx = self._offset + self._count
        self._count += 1
        return idx

    def lookup(self, expr) -> Optional[Node]:
        hit = self._memo.get(id(expr))
        return hit[1] if hit is not None else None

    def push_node(self, expr, node: Node) -> Node:
        """Append `node` (the evaluation of `expr`) to the tape."""
        # expr is kept alive so its id() cannot be reused during this pass
        self._memo[id(expr)] = (expr, node)
        self.nodes.append(node)
        return node

    def evaluate(self, root) -> Node:
        """
        Forward pass over `root` without recursion.

        Post-order over sub-expressions with an explicit stack: arguments are
        visited left to right, and an expression is evaluated once all of its
        arguments are on the tape. Already recorded expressions are skipped.
        """
        stack = [(root, False)]
        while stack:
            expr, ready = stack.pop()
            if self.lookup(expr) is not None:
                continue
            if ready:
                self.push_node(expr, expr._forward(self))
                continue
            stack.append((expr, True))
            for arg in reversed(expr.subexpressions()):
                if self.lookup(arg) is None:
                    stack.append((arg, False))
        return self.lookup(root)

    def make_leaf(self, idx: int, value: Any, op_tag: str) -> Node:
        return Node(id=idx, value=value, op_tag=op_tag)

    def make_node(self, value: Any, operands: Sequence[Node], rule: VJP, op_tag: str) -> Node:
        """
        Build an interior node: progenitors from the operands, then a fresh id
        (minted after the operands so ids follow evaluation order).
        """
        operands = list(operands)
        progenitors = Node.progenitors_of(operands)
        return Node(
            id=self.next_id(),
            value=value,
            operands=operands,
            progenitors=progenitors,
            rule=rule,
            op_tag=op_tag,
        )
