from typing import Optional


class DerivativeError(Exception):
    """Base class for everything the calculator reports back to its caller."""

    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.position = position

    @property
    def kind(self) -> str:
        return type(self).__name__

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.message} (at position {self.position})"


class LexError(DerivativeError, ValueError):
    pass


class ParseError(DerivativeError, SyntaxError):
    pass


class NestingError(ParseError):
    pass


class InputError(DerivativeError):
    pass


class EvaluationError(DerivativeError, ValueError):
    pass
