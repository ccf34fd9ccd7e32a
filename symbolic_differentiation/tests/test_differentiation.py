import math

import pytest

from differentiation import differentiate
from expression_tree import (
    Add,
    Cos,
    Div,
    Exp,
    Ln,
    Mul,
    Number,
    Pow,
    Sin,
    Sub,
    Variable,
    copy_tree,
    evaluate,
)
from infix_parser import parse


def all_nodes(node):
    yield node
    for child in node:
        yield from all_nodes(child)


class TestLeaves:
    @pytest.mark.parametrize("value", [0, 1, -3.5, 1e10])
    def test_constant(self, value):
        assert differentiate(Number(value), "x") == Number(0)

    @pytest.mark.parametrize("name, expected", [("x", 1), ("y", 0), ("t", 0)])
    def test_variable(self, name, expected):
        assert differentiate(Variable(name), "x") == Number(expected)

    def test_other_target_variable(self):
        assert differentiate(Variable("t"), "t") == Number(1)
        assert differentiate(Variable("x"), "t") == Number(0)


class TestRules:
    def test_sum_is_linear(self, x, y):
        f, g = Pow(x, Number(2)), Sin(y)

        result = differentiate(Add(f, g), "x")

        assert result == Add(differentiate(f, "x"), differentiate(g, "x"))

    def test_difference_is_linear(self, x):
        f, g = Exp(x), Mul(Number(3), x)

        result = differentiate(Sub(f, g), "x")

        assert result == Sub(differentiate(f, "x"), differentiate(g, "x"))

    def test_product_rule(self, x):
        result = differentiate(Mul(x, Sin(x)), "x")

        assert result == Add(
            Mul(Number(1), Sin(x)),
            Mul(x, Mul(Cos(x), Number(1))),
        )

    def test_quotient_rule(self, x):
        result = differentiate(Div(Number(1), x), "x")

        assert result == Div(
            Sub(Mul(Number(0), x), Mul(Number(1), Number(1))),
            Pow(x, Number(2)),
        )

    def test_power_rule_with_constant_exponent(self, x):
        result = differentiate(Pow(x, Number(2)), "x")

        assert result == Mul(
            Mul(Number(2), Pow(x, Sub(Number(2), Number(1)))),
            Number(1),
        )

    def test_exponent_free_of_target_counts_as_constant(self, x, y):
        result = differentiate(Pow(x, y), "x")

        assert result == Mul(Mul(y, Pow(x, Sub(y, Number(1)))), Number(1))

    def test_general_power_rule(self, x):
        node = Pow(x, x)

        result = differentiate(node, "x")

        assert result == Mul(
            Pow(x, x),
            Add(
                Mul(Number(1), Ln(x)),
                Mul(x, Div(Number(1), x)),
            ),
        )

    def test_sin(self, x):
        assert differentiate(Sin(x), "x") == Mul(Cos(x), Number(1))

    def test_cos(self, x):
        assert differentiate(Cos(x), "x") == Mul(
            Mul(Number(-1), Sin(x)), Number(1)
        )

    def test_exp(self, x):
        assert differentiate(Exp(x), "x") == Mul(Exp(x), Number(1))

    def test_ln(self, x):
        assert differentiate(Ln(x), "x") == Div(Number(1), x)

    def test_chain_rule_multiplies_inner_derivative(self, x):
        inner = Mul(Number(2), x)

        result = differentiate(Sin(inner), "x")

        assert result == Mul(Cos(inner), differentiate(inner, "x"))


class TestPurity:
    @pytest.mark.parametrize(
        "text",
        [
            "x*sin(x)",
            "(x+1)/(x-1)",
            "x^3",
            "x^x",
            "cos(exp(x))",
            "ln(x^2+1)",
        ],
    )
    def test_result_shares_no_node_with_input(self, text):
        tree = parse(text)

        result = differentiate(tree, "x")

        input_ids = {id(node) for node in all_nodes(tree)}
        assert all(id(node) not in input_ids for node in all_nodes(result))

    def test_input_is_unchanged(self):
        tree = parse("x^2*sin(x)/ln(x)")
        before = copy_tree(tree)

        differentiate(tree, "x")

        assert tree == before

    def test_rejects_multi_letter_variable(self, x):
        with pytest.raises(ValueError):
            differentiate(x, "xy")

    def test_variable_is_checked_before_walking_the_tree(self, x):
        # the unknown node would raise TypeError if the walk started first
        with pytest.raises(ValueError):
            differentiate(Add(x, object()), "7")


class TestNumericValue:
    """Unsimplified derivatives already evaluate to the right numbers."""

    @pytest.mark.parametrize(
        "text, point, expected",
        [
            ("x^2", 3.0, 6.0),
            ("x*sin(x)", 1.0, math.sin(1.0) + math.cos(1.0)),
            ("exp(x)/x", 2.0, math.exp(2) * (2 - 1) / 2**2),
            ("cos(x+1)/exp(x)", 0.0, -math.sin(1) - math.cos(1)),
            ("x^x", 2.0, 4 * (math.log(2) + 1)),
            ("2^x", 1.0, 2 * math.log(2)),
            ("ln(x)", 4.0, 0.25),
        ],
    )
    def test_value_at_point(self, text, point, expected):
        result = differentiate(parse(text), "x")

        assert evaluate(result, x=point) == pytest.approx(expected)
