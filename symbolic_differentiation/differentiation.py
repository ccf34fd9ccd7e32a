"""Structural differentiation of expression trees.

``differentiate`` never touches its input: every subexpression a rule reuses
is rebuilt with ``copy_tree`` so the result shares no node with the input.
The result is left unsimplified.
"""

from expression_tree import (
    Add,
    Cos,
    Div,
    Exp,
    Expression,
    Ln,
    Mul,
    Number,
    Pow,
    Sin,
    Sub,
    Variable,
    copy_tree,
    is_constant,
)


def _number(node, var):
    return Number(0)


def _variable(node, var):
    return Number(1) if node.name == var else Number(0)


def _add(node, var):
    # (f + g)' = f' + g'
    return Add(_derive(node.left, var), _derive(node.right, var))


def _sub(node, var):
    # (f - g)' = f' - g'
    return Sub(_derive(node.left, var), _derive(node.right, var))


def _mul(node, var):
    # (f * g)' = f' * g + f * g'
    f, g = node.left, node.right
    return Add(
        Mul(_derive(f, var), copy_tree(g)),
        Mul(copy_tree(f), _derive(g, var)),
    )


def _div(node, var):
    # (f / g)' = (f' * g - f * g') / g^2
    f, g = node.left, node.right
    return Div(
        Sub(
            Mul(_derive(f, var), copy_tree(g)),
            Mul(copy_tree(f), _derive(g, var)),
        ),
        Pow(copy_tree(g), Number(2)),
    )


def _pow(node, var):
    f, g = node.left, node.right
    if is_constant(g, var):
        # (f^n)' = n * f^(n - 1) * f'
        return Mul(
            Mul(copy_tree(g), Pow(copy_tree(f), Sub(copy_tree(g), Number(1)))),
            _derive(f, var),
        )
    # (f^g)' = f^g * (g' * ln(f) + g * f' / f)
    return Mul(
        copy_tree(node),
        Add(
            Mul(_derive(g, var), Ln(copy_tree(f))),
            Mul(copy_tree(g), Div(_derive(f, var), copy_tree(f))),
        ),
    )


def _sin(node, var):
    return Mul(Cos(copy_tree(node.operand)), _derive(node.operand, var))


def _cos(node, var):
    return Mul(
        Mul(Number(-1), Sin(copy_tree(node.operand))),
        _derive(node.operand, var),
    )


def _exp(node, var):
    return Mul(Exp(copy_tree(node.operand)), _derive(node.operand, var))


def _ln(node, var):
    return Div(_derive(node.operand, var), copy_tree(node.operand))


RULES = {
    Number: _number,
    Variable: _variable,
    Add: _add,
    Sub: _sub,
    Mul: _mul,
    Div: _div,
    Pow: _pow,
    Sin: _sin,
    Cos: _cos,
    Exp: _exp,
    Ln: _ln,
}


def _derive(node, var):
    try:
        rule = RULES[type(node)]
    except KeyError:
        raise TypeError(f"Sorry, derivative for {node!r} not known or implemented") from None
    return rule(node, var)


def differentiate(node: Expression, var: str = "x") -> Expression:
    if len(var) != 1 or not var.isalpha():
        raise ValueError(f"Can only differentiate with respect to a single letter, got {var!r}")
    return _derive(node, var)
