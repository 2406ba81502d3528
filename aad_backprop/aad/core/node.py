# aad/core/node.py
from dataclasses import dataclass, field
from typing import Any, FrozenSet, Iterable, List, Optional

from ..errors import InvalidArgnumError
from .vjp import VJP, IdentityVJP


@dataclass(eq=False)
class Node:
    """
    Record of one Expression evaluated during one forward pass.

    Attributes
    ----------
    id : int
        Variable index for leaves built from a Variable; otherwise a
        pass-local id minted above the highest variable index.
    value : Any
        Forward value (np.float64 or float64 ndarray).
    operands : List[Node]
        Input nodes in argument-position order. Position matters for the
        backward rule.
    progenitors : FrozenSet[int]
        Ids of every node transitively upstream of this one.
    rule : VJP
        Backward rule, with any forward snapshots it needs already captured.
    op_tag : str
        Debug tag (e.g., "add", "mul", "var").
    """
    id: int
    value: Any
    operands: List["Node"] = field(default_factory=list)
    progenitors: FrozenSet[int] = frozenset()
    rule: Optional[VJP] = None
    op_tag: str = "var"

    def __post_init__(self):
        if self.rule is None:
            self.rule = IdentityVJP()

    @staticmethod
    def progenitors_of(operands: Iterable["Node"]) -> FrozenSet[int]:
        """Union of the operand ids and all of their progenitor sets."""
        ids = set()
        for p in operands:
            ids.add(p.id)
            ids.update(p.progenitors)
        return frozenset(ids)

    def is_leaf(self) -> bool:
        return not self.operands

    def depends_on(self, target_id: int) -> bool:
        """True if `target_id` is this node or lies upstream of it."""
        return self.id == target_id or target_id in self.progenitors

    def vjp(self, g, operand: "Node", argnum: int):
        """Gradient contribution flowing from this node into `operand`."""
        if not 0 <= argnum < len(self.operands):
            raise InvalidArgnumError(self.op_tag, argnum, len(self.operands))
        return self.rule.vjp(g, self, operand, argnum)

    def __repr__(self):
        return (f"Node(id={self.id}, op={self.op_tag!r}, "
                f"operands={[p.id for p in self.operands]})")
