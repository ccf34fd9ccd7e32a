"""Single bottom-up rewriting pass.

Children are simplified first, then the first matching rule for the node
kind is applied once. The only rule that re-enters ``simplify`` is
``0 - x -> -1 * x``. Rule order decides the indeterminate forms:
``0^0`` simplifies to 1 and ``0/0`` to 0.
"""

import logging

import numpy as np

from expression_tree import (
    Add,
    BinaryOp,
    Div,
    Expression,
    Mul,
    Number,
    Pow,
    Sub,
    UnaryFunc,
    is_one,
    is_zero,
)

logger = logging.getLogger(__name__)


def _both_numbers(left, right):
    return isinstance(left, Number) and isinstance(right, Number)


def _real_pow(base: float, exponent: float) -> float:
    # float64 semantics: (-8)^0.5 is nan and overflow is inf, no exceptions
    with np.errstate(all="ignore"):
        return float(np.power(np.float64(base), np.float64(exponent)))


def _simplify_add(left, right):
    if is_zero(left):
        return right
    if is_zero(right):
        return left
    if _both_numbers(left, right):
        return Number(left.value + right.value)
    return Add(left, right)


def _simplify_sub(left, right):
    if is_zero(right):
        return left
    if is_zero(left):
        return simplify(Mul(Number(-1), right))
    if _both_numbers(left, right):
        return Number(left.value - right.value)
    return Sub(left, right)


def _simplify_mul(left, right):
    if is_zero(left) or is_zero(right):
        return Number(0)
    if is_one(left):
        return right
    if is_one(right):
        return left
    if _both_numbers(left, right):
        return Number(left.value * right.value)
    return Mul(left, right)


def _simplify_div(left, right):
    if is_zero(left):
        return Number(0)
    if is_one(right):
        return left
    if _both_numbers(left, right) and right.value != 0:
        return Number(left.value / right.value)
    return Div(left, right)


def _simplify_pow(left, right):
    if is_zero(right):
        return Number(1)
    if is_one(right):
        return left
    if is_zero(left):
        return Number(0)
    if is_one(left):
        return Number(1)
    if _both_numbers(left, right):
        return Number(_real_pow(left.value, right.value))
    return Pow(left, right)


RULES = {
    Add: _simplify_add,
    Sub: _simplify_sub,
    Mul: _simplify_mul,
    Div: _simplify_div,
    Pow: _simplify_pow,
}


def simplify(node: Expression) -> Expression:
    if isinstance(node, BinaryOp):
        left = simplify(node.left)
        right = simplify(node.right)
        result = RULES[type(node)](left, right)
        if type(result) is not type(node):
            logger.debug(f"{type(node).__name__} rewritten to {type(result).__name__}")
        return result
    if isinstance(node, UnaryFunc):
        return type(node)(simplify(node.operand))
    return node
