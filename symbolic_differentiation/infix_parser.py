import logging
import sys

from derivative_errors import NestingError, ParseError
from expression_lexer import FUNCTION_TOKENS, Lexer, Token, TokenKind, raise_for_error
from expression_tree import (
    FUNCTIONS,
    Add,
    Div,
    Expression,
    Mul,
    Number,
    Pow,
    Sub,
    Variable,
    tree_depth,
)

logger = logging.getLogger(__name__)

MAX_NESTING_DEPTH = 50
# a derivative can be three times deeper than its input and printing it
# spends two frames per level
MAX_TREE_DEPTH = sys.getrecursionlimit() // 8

ADDITIVE = {TokenKind.PLUS: Add, TokenKind.MINUS: Sub}
MULTIPLICATIVE = {TokenKind.MULT: Mul, TokenKind.DIV: Div}


class InfixParser:
    """Recursive descent over the token stream of one input string.

    expression := term (('+' | '-') term)*
    term       := power (('*' | '/') power)*
    power      := primary ('^' power)?
    primary    := NUMBER | VARIABLE | FUNC '(' expression ')' | '(' expression ')'

    The lexer cursor and the lookahead token are instance state, so parsers
    for different inputs never interfere with each other.
    """

    def __init__(
        self,
        text: str,
        max_depth: int = MAX_NESTING_DEPTH,
        max_tree_depth: int = MAX_TREE_DEPTH,
    ):
        self.lexer = Lexer(text)
        self.max_depth = max_depth
        self.max_tree_depth = max_tree_depth
        self.depth = 0
        self.current = self._next()

    def _next(self) -> Token:
        return raise_for_error(self.lexer.next_token())

    def peek(self) -> Token:
        return self.current

    def take(self) -> Token:
        token = self.current
        self.current = self._next()
        return token

    def expect(self, kind: TokenKind, message: str) -> Token:
        token = self.peek()
        if token.kind is not kind:
            raise ParseError(f"{message}, got {token.describe()}", token.position)
        return self.take()

    def parse(self) -> Expression:
        tree = self._expression()
        token = self.peek()
        if token.kind is not TokenKind.END:
            raise ParseError(
                f"Unexpected trailing token {token.describe()}", token.position
            )
        depth = tree_depth(tree)
        if depth > self.max_tree_depth:
            raise NestingError(
                f"Expression tree is deeper than {self.max_tree_depth} levels"
            )
        logger.debug(f"Parsed {type(tree).__name__} tree of depth {depth}")
        return tree

    def _enter(self):
        self.depth += 1
        if self.depth > self.max_depth:
            raise NestingError(
                f"Expression is nested deeper than {self.max_depth} levels",
                self.peek().position,
            )

    def _leave(self):
        self.depth -= 1

    def _expression(self) -> Expression:
        node = self._term()
        while self.peek().kind in ADDITIVE:
            op = ADDITIVE[self.take().kind]
            node = op(node, self._term())
        return node

    def _term(self) -> Expression:
        node = self._power()
        while self.peek().kind in MULTIPLICATIVE:
            op = MULTIPLICATIVE[self.take().kind]
            node = op(node, self._power())
        return node

    def _power(self) -> Expression:
        node = self._primary()
        if self.peek().kind is TokenKind.POW:
            self.take()
            self._enter()
            node = Pow(node, self._power())
            self._leave()
        return node

    def _primary(self) -> Expression:
        token = self.peek()

        if token.kind is TokenKind.NUMBER:
            self.take()
            return Number(token.value)

        if token.kind is TokenKind.VARIABLE:
            self.take()
            return Variable(token.text)

        if token.kind in FUNCTION_TOKENS:
            self.take()
            self.expect(TokenKind.LPAREN, f"Expected '(' after '{token.text}'")
            argument = self._nested_expression(token)
            return FUNCTIONS[token.text](argument)

        if token.kind is TokenKind.LPAREN:
            self.take()
            return self._nested_expression(token)

        raise ParseError(
            f"Expected a number, a variable, a function or '(' but got {token.describe()}",
            token.position,
        )

    def _nested_expression(self, opener: Token) -> Expression:
        self._enter()
        node = self._expression()
        self._leave()
        self.expect(
            TokenKind.RPAREN,
            f"Expected ')' closing the '{opener.text}' at position {opener.position}",
        )
        return node


def parse(
    text: str,
    max_depth: int = MAX_NESTING_DEPTH,
    max_tree_depth: int = MAX_TREE_DEPTH,
) -> Expression:
    return InfixParser(text, max_depth, max_tree_depth).parse()
