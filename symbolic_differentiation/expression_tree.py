"""Expression tree shared by the lexer/parser, the differentiator, the
simplifier and the printer.

Nodes are frozen dataclasses. Iterating a node yields its children, left to
right, which is what the generic helpers at the bottom rely on.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Union

import numpy as np

from derivative_errors import EvaluationError


class Expression:
    def __iter__(self) -> Iterator["Expression"]:
        return iter(())


@dataclass(frozen=True)
class Number(Expression):
    value: float

    def __post_init__(self):
        object.__setattr__(self, "value", float(self.value))


@dataclass(frozen=True)
class Variable(Expression):
    name: str = "x"

    def __post_init__(self):
        if len(self.name) != 1 or not self.name.isalpha():
            raise ValueError(f"Variable name must be a single letter, got {self.name!r}")


@dataclass(frozen=True)
class BinaryOp(Expression):
    left: Expression
    right: Expression

    symbol = "?"

    def __iter__(self):
        yield self.left
        yield self.right


@dataclass(frozen=True)
class Add(BinaryOp):
    symbol = "+"


@dataclass(frozen=True)
class Sub(BinaryOp):
    symbol = "-"


@dataclass(frozen=True)
class Mul(BinaryOp):
    symbol = "*"


@dataclass(frozen=True)
class Div(BinaryOp):
    symbol = "/"


@dataclass(frozen=True)
class Pow(BinaryOp):
    symbol = "^"


@dataclass(frozen=True)
class UnaryFunc(Expression):
    operand: Expression

    name = "?"

    def __iter__(self):
        yield self.operand


@dataclass(frozen=True)
class Sin(UnaryFunc):
    name = "sin"


@dataclass(frozen=True)
class Cos(UnaryFunc):
    name = "cos"


@dataclass(frozen=True)
class Exp(UnaryFunc):
    name = "exp"


@dataclass(frozen=True)
class Ln(UnaryFunc):
    name = "ln"


FUNCTIONS = {cls.name: cls for cls in (Sin, Cos, Exp, Ln)}


def is_zero(node: Optional[Expression]) -> bool:
    return isinstance(node, Number) and node.value == 0


def is_one(node: Optional[Expression]) -> bool:
    return isinstance(node, Number) and node.value == 1


def is_leaf(node: Expression) -> bool:
    return isinstance(node, (Number, Variable))


def is_constant(node: Optional[Expression], variable: str) -> bool:
    """True when ``variable`` does not occur anywhere below ``node``."""
    if node is None:
        return True
    if isinstance(node, Variable):
        return node.name != variable
    return all(is_constant(child, variable) for child in node)


def copy_tree(node: Optional[Expression]) -> Optional[Expression]:
    if node is None:
        return None
    if isinstance(node, Number):
        return Number(node.value)
    if isinstance(node, Variable):
        return Variable(node.name)
    if isinstance(node, BinaryOp):
        return type(node)(copy_tree(node.left), copy_tree(node.right))
    if isinstance(node, UnaryFunc):
        return type(node)(copy_tree(node.operand))
    raise TypeError(f"Unknown node: {node!r}")


def tree_depth(node: Optional[Expression]) -> int:
    # iterative on purpose: used to reject trees that are too deep to recurse on
    if node is None:
        return 0
    deepest = 0
    stack = [(node, 1)]
    while stack:
        current, depth = stack.pop()
        deepest = max(deepest, depth)
        for child in current:
            stack.append((child, depth + 1))
    return deepest


_BINARY_UFUNCS = {
    Add: np.add,
    Sub: np.subtract,
    Mul: np.multiply,
    Div: np.divide,
    Pow: np.power,
}

_UNARY_UFUNCS = {
    Sin: np.sin,
    Cos: np.cos,
    Exp: np.exp,
    Ln: np.log,
}

Value = Union[float, np.ndarray]


def evaluate(node: Expression, **values: Value) -> Value:
    """Evaluate ``node`` numerically.

    Variables are bound through keyword arguments and may be scalars or numpy
    arrays, in which case the whole tree is evaluated element-wise. Float64
    semantics apply throughout: ``1/0`` is ``inf`` and ``ln(-1)`` is ``nan``.
    """
    bound = {name: np.asarray(value, dtype=np.float64) for name, value in values.items()}
    with np.errstate(all="ignore"):
        return _evaluate(node, bound)


def _evaluate(node: Expression, values: Dict[str, np.ndarray]) -> Value:
    if isinstance(node, Number):
        return np.float64(node.value)
    if isinstance(node, Variable):
        try:
            return values[node.name]
        except KeyError:
            raise EvaluationError(f"No value given for variable '{node.name}'") from None
    if isinstance(node, BinaryOp):
        ufunc = _BINARY_UFUNCS[type(node)]
        return ufunc(_evaluate(node.left, values), _evaluate(node.right, values))
    if isinstance(node, UnaryFunc):
        return _UNARY_UFUNCS[type(node)](_evaluate(node.operand, values))
    raise TypeError(f"Unknown node: {node!r}")
