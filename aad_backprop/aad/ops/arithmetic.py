# aad/ops/arithmetic.py
import numpy as np

from ..core.var import Operation
from ..core.vjp import VJP, IdentityVJP, NegVJP, SubVJP, LinVJP, invalid_argnum
from ..core.utils import unbroadcast


class MulVJP(VJP):
    """Product rule; captures both factors at construction time."""

    def __init__(self, a, b):
        self.a = a
        self.b = b

    def vjp(self, g, node, operand, argnum):
        if argnum == 0:
            return unbroadcast(g * self.b, np.shape(self.a))
        if argnum == 1:
            return unbroadcast(g * self.a, np.shape(self.b))
        raise invalid_argnum(node, argnum)


class DivVJP(VJP):
    """Quotient rule for a / b."""

    def __init__(self, a, b):
        self.a = a
        self.b = b

    def vjp(self, g, node, operand, argnum):
        if argnum == 0:
            return unbroadcast(g / self.b, np.shape(self.a))
        if argnum == 1:
            return unbroadcast(-g * self.a / np.square(self.b), np.shape(self.b))
        raise invalid_argnum(node, argnum)


class PowVJP(VJP):
    """
    Power x ** p with both sides differentiable:
      ∂out/∂x = p * x^(p-1)
      ∂out/∂p = x^p * log(x)        (requires x>0; zero elsewhere)
    """

    def __init__(self, x, p, out):
        self.x = x
        self.p = p
        self.out = out

    def vjp(self, g, node, operand, argnum):
        if argnum == 0:
            return unbroadcast(g * self.p * self.x ** (self.p - 1.0), np.shape(self.x))
        if argnum == 1:
            safe = np.where(self.x > 0, self.x, 1.0)
            dp = np.where(self.x > 0, self.out * np.log(safe), 0.0)
            return unbroadcast(g * dp, np.shape(self.p))
        raise invalid_argnum(node, argnum)


class Add(Operation):
    """Addition x + y."""
    op_tag = "add"

    def forward(self, a, b):
        return a + b, IdentityVJP()


class Sub(Operation):
    """Subtraction x - y."""
    op_tag = "sub"

    def forward(self, a, b):
        return a - b, SubVJP()


class Mul(Operation):
    """Elementwise multiplication x * y."""
    op_tag = "mul"

    def forward(self, a, b):
        return a * b, MulVJP(a, b)


class Div(Operation):
    """Elementwise division x / y."""
    op_tag = "div"

    def forward(self, a, b):
        return a / b, DivVJP(a, b)


class Neg(Operation):
    """Unary negation -x."""
    op_tag = "neg"

    def forward(self, a):
        return -a, NegVJP()


class Pow(Operation):
    """x ** p where the exponent is itself an expression."""
    op_tag = "pow"

    def forward(self, x, p):
        out = x ** p
        return out, PowVJP(x, p, out)


class Powf(Operation):
    """x ** n for a constant exponent n."""
    op_tag = "powf"

    def __init__(self, x, n: float):
        super().__init__(x)
        self.n = float(n)

    def forward(self, x):
        n = self.n
        return x ** n, LinVJP(lambda v: n * v ** (n - 1.0))


def add(x, y): return Add(x, y)
def sub(x, y): return Sub(x, y)
def mul(x, y): return Mul(x, y)
def div(x, y): return Div(x, y)
def neg(x): return Neg(x)
def pow(x, p): return Pow(x, p)
def powf(x, n): return Powf(x, n)
