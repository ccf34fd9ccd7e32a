import math

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
    Variable,
    is_leaf,
)


def format_number(value: float) -> str:
    if not math.isfinite(value):
        return str(value)
    if value == int(value):
        return str(int(value))
    return f"{value:.2f}"


def _is_additive(node):
    return isinstance(node, (Add, Sub))


# (wrap left?, wrap right?) for each binary kind
PAREN_RULES = {
    Add: (lambda n: False, lambda n: False),
    Sub: (lambda n: False, _is_additive),
    Mul: (_is_additive, _is_additive),
    Div: (_is_additive, lambda n: not is_leaf(n)),
    Pow: (lambda n: not is_leaf(n), lambda n: not is_leaf(n)),
}


def _wrap(node, needed):
    text = to_infix(node)
    return f"({text})" if needed else text


def to_infix(node: Expression) -> str:
    if isinstance(node, Number):
        return format_number(node.value)
    if isinstance(node, Variable):
        return node.name
    if isinstance(node, BinaryOp):
        wrap_left, wrap_right = PAREN_RULES[type(node)]
        left = _wrap(node.left, wrap_left(node.left))
        right = _wrap(node.right, wrap_right(node.right))
        return f"{left}{node.symbol}{right}"
    if isinstance(node, UnaryFunc):
        return f"{node.name}({to_infix(node.operand)})"
    raise TypeError(f"Unsupported node: {node!r}")
