#! /usr/bin/env python
"""Symbolic derivative calculator.

Reads one expression such as ``x^2*sin(x)`` from stdin and prints it back
followed by its simplified derivative::

    $ echo "x*sin(x)" | python derive.py
    x*sin(x)
    d/dx: sin(x)+x*cos(x)

Supported: + - * / ^, sin, cos, exp, ln, numbers and single-letter variables.
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import List, Optional, TextIO

from derivative_errors import DerivativeError, InputError
from differentiation import differentiate
from infix_parser import parse
from infix_printer import to_infix
from simplification import simplify

LOG_LEVEL = logging.ERROR
logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s:%(name)s:%(message)s")
logger = logging.getLogger()

DEFAULT_VARIABLE = "x"
MAX_LINE_LENGTH = 255
PROMPT = "Enter a function: "
BANNER = """\
=== Symbolic derivative calculator ===
Operators: +, -, *, /, ^
Functions: sin, cos, exp, ln
Example: x^2*sin(x)
"""


@dataclass(frozen=True)
class DerivativeResult:
    expression: str
    derivative: str
    variable: str = DEFAULT_VARIABLE

    def lines(self) -> List[str]:
        return [self.expression, f"d/d{self.variable}: {self.derivative}"]


def derive_text(text: str, variable: str = DEFAULT_VARIABLE) -> DerivativeResult:
    tree = parse(text)
    expression = to_infix(tree)
    derivative = simplify(differentiate(tree, variable))
    return DerivativeResult(expression, to_infix(derivative), variable)


def read_expression(stream: TextIO, max_length: int = MAX_LINE_LENGTH) -> str:
    line = stream.readline(max_length)
    if not line:
        raise InputError("No input to read an expression from")
    return line.split("\n", 1)[0]


def _single_letter(value: str) -> str:
    if len(value) != 1 or not value.isalpha():
        raise argparse.ArgumentTypeError(f"expected a single letter, got {value!r}")
    return value


def build_arg_parser():
    parser = argparse.ArgumentParser(
        description="Read one expression from stdin and print its simplified derivative."
    )
    parser.add_argument(
        "-v",
        "--var",
        default=DEFAULT_VARIABLE,
        type=_single_letter,
        help="Variable to differentiate with respect to (default: %(default)s).",
    )
    parser.add_argument(
        "--log-level",
        default=logging.getLevelName(LOG_LEVEL),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity (default: %(default)s).",
    )
    return parser


def main(
    argv: Optional[List[str]] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> int:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    args = build_arg_parser().parse_args(argv)
    logger.setLevel(args.log_level)

    if stdin.isatty():
        print(BANNER, file=stdout)
        print(PROMPT, end="", file=stdout, flush=True)

    try:
        text = read_expression(stdin)
        logger.debug(f"Read {text!r}")
        result = derive_text(text, args.var)
    except DerivativeError as error:
        print(f"error: {error.kind}: {error}", file=stderr)
        return 1

    for line in result.lines():
        print(line, file=stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
