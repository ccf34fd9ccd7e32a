import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from derivative_errors import LexError

logger = logging.getLogger(__name__)

MAX_IDENTIFIER_LENGTH = 8

NUMBER_RE = re.compile(r"(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
IDENTIFIER_RE = re.compile(r"[A-Za-z]+")
NUMBER_START = "0123456789."
BLANKS = " \t"


class TokenKind(Enum):
    NUMBER = "number"
    VARIABLE = "variable"
    PLUS = "+"
    MINUS = "-"
    MULT = "*"
    DIV = "/"
    POW = "^"
    LPAREN = "("
    RPAREN = ")"
    SIN = "sin"
    COS = "cos"
    EXP = "exp"
    LN = "ln"
    END = "end of input"
    ERROR = "error"


SINGLE_CHAR_TOKENS = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.MULT,
    "/": TokenKind.DIV,
    "^": TokenKind.POW,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}

KEYWORDS = {
    "sin": TokenKind.SIN,
    "cos": TokenKind.COS,
    "exp": TokenKind.EXP,
    "ln": TokenKind.LN,
}

FUNCTION_TOKENS = frozenset(KEYWORDS.values())


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    position: int
    value: Optional[float] = None
    # why an ERROR token was produced
    reason: Optional[str] = None

    def describe(self) -> str:
        if self.kind is TokenKind.END:
            return "end of input"
        return repr(self.text)


class Lexer:
    """Cursor over one input string. Each call to ``next_token`` consumes one token."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def _skip_blanks(self):
        while self.pos < len(self.text) and self.text[self.pos] in BLANKS:
            self.pos += 1

    def next_token(self) -> Token:
        self._skip_blanks()
        start = self.pos
        if start >= len(self.text):
            return Token(TokenKind.END, "", start)

        char = self.text[start]

        if char in NUMBER_START:
            match = NUMBER_RE.match(self.text, start)
            if match:
                self.pos = match.end()
                literal = match.group()
                return Token(TokenKind.NUMBER, literal, start, value=float(literal))

        match = IDENTIFIER_RE.match(self.text, start)
        if match:
            self.pos = match.end()
            return self._identifier(match.group(), start)

        self.pos += 1
        kind = SINGLE_CHAR_TOKENS.get(char)
        if kind is not None:
            return Token(kind, char, start)
        return Token(
            TokenKind.ERROR, char, start, reason=f"Unexpected character {char!r}"
        )

    def _identifier(self, word: str, start: int) -> Token:
        if len(word) > MAX_IDENTIFIER_LENGTH:
            return Token(
                TokenKind.ERROR,
                word,
                start,
                reason=(
                    f"Identifier {word!r} is longer than "
                    f"{MAX_IDENTIFIER_LENGTH} characters"
                ),
            )
        if word in KEYWORDS:
            return Token(KEYWORDS[word], word, start)
        if len(word) == 1:
            return Token(TokenKind.VARIABLE, word, start)
        return Token(
            TokenKind.ERROR,
            word,
            start,
            reason=f"Unknown identifier {word!r}, variables are single letters",
        )


def raise_for_error(token: Token) -> Token:
    if token.kind is TokenKind.ERROR:
        raise LexError(token.reason or f"Invalid token {token.text!r}", token.position)
    return token


def tokenize(text: str) -> List[Token]:
    lexer = Lexer(text)
    tokens = []
    while True:
        token = raise_for_error(lexer.next_token())
        tokens.append(token)
        if token.kind is TokenKind.END:
            break
    logger.debug(f"Tokens: {[t.text or t.kind.value for t in tokens]}")
    return tokens
