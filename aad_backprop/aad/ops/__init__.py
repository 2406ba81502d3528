# aad/ops/__init__.py

# Convenience re-exports so users can do: from aad_backprop.aad.ops import mul, exp, ...
from .arithmetic import add, sub, mul, div, neg, pow, powf
from .transcendental import sin, cos, tan, sinh, cosh, tanh, exp, log, sqrt, erf
from .special import norm_cdf, sigmoid, maximum, relu, logsumexp, logsoftmax
from .reductions import reduce_sum, reduce_mean, sum_all
from .linalg import dot, matmul, transpose

__all__ = [
    "add", "sub", "mul", "div", "neg", "pow", "powf",
    "sin", "cos", "tan", "sinh", "cosh", "tanh", "exp", "log", "sqrt", "erf",
    "norm_cdf", "sigmoid", "maximum", "relu", "logsumexp", "logsoftmax",
    "reduce_sum", "reduce_mean", "sum_all",
    "dot", "matmul", "transpose",
]
