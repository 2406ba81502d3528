# aad/ops/transcendental.py
import numpy as np
from scipy.special import erf as scipy_erf

from ..core.var import Operation
from ..core.vjp import LinVJP, OutputVJP

TWO_OVER_SQRT_PI = 2.0 / np.sqrt(np.pi)


class Sin(Operation):
    op_tag = "sin"

    def forward(self, x):
        return np.sin(x), LinVJP(np.cos)


class Cos(Operation):
    op_tag = "cos"

    def forward(self, x):
        return np.cos(x), LinVJP(lambda v: -np.sin(v))


class Tan(Operation):
    op_tag = "tan"

    def forward(self, x):
        return np.tan(x), LinVJP(lambda v: 1.0 / np.square(np.cos(v)))


class Sinh(Operation):
    op_tag = "sinh"

    def forward(self, x):
        return np.sinh(x), LinVJP(np.cosh)


class Cosh(Operation):
    op_tag = "cosh"

    def forward(self, x):
        return np.cosh(x), LinVJP(np.sinh)


class Tanh(Operation):
    # d tanh = 1 - tanh^2, read off the output
    op_tag = "tanh"

    def forward(self, x):
        return np.tanh(x), OutputVJP(lambda y: 1.0 - y * y)


class Exp(Operation):
    op_tag = "exp"

    def forward(self, x):
        return np.exp(x), OutputVJP(lambda y: y)


class Log(Operation):
    op_tag = "log"

    def forward(self, x):
        return np.log(x), LinVJP(lambda v: 1.0 / v)


class Sqrt(Operation):
    op_tag = "sqrt"

    def forward(self, x):
        return np.sqrt(x), OutputVJP(lambda y: 0.5 / y)


class Erf(Operation):
    """
    Error function: erf(x) = (2/√π) ∫₀ˣ e^(-t²) dt

    Derivative: d/dx erf(x) = (2/√π) * e^(-x²)
    """
    op_tag = "erf"

    def forward(self, x):
        return scipy_erf(x), LinVJP(lambda v: TWO_OVER_SQRT_PI * np.exp(-v * v))


def sin(x): return Sin(x)
def cos(x): return Cos(x)
def tan(x): return Tan(x)
def sinh(x): return Sinh(x)
def cosh(x): return Cosh(x)
def tanh(x): return Tanh(x)
def exp(x): return Exp(x)
def log(x): return Log(x)
def sqrt(x): return Sqrt(x)
def erf(x): return Erf(x)
