"""
symcore ALG Model: Error Classes

Fixed taxonomy of algebraic errors surfaced at API boundaries.
"""

from typing import Optional


class AlgebraError(Exception):
    """Base class for algebraic errors."""

    def __init__(self, operation: str, detail: str, expr: Optional[object] = None):
        self.operation = operation
        self.detail = detail
        self.expr = expr
        message = f"{operation}: {detail}"
        if expr is not None:
            message += f" [in {expr}]"
        super().__init__(message)


class DivisionByZeroError(AlgebraError):
    """Numeric or polynomial division by a structurally zero divisor."""

    def __init__(self, operation: str, expr: Optional[object] = None):
        super().__init__(operation, "division by zero", expr)


class DomainError(AlgebraError):
    """Operation undefined on the given value."""


class NotPolynomialError(AlgebraError):
    """Polynomial operation invoked on a non-polynomial expression."""

    def __init__(self, operation: str, expr: Optional[object] = None, detail: str = "not a polynomial"):
        super().__init__(operation, detail, expr)


class MaxIterationsReachedError(AlgebraError):
    """A bounded fixpoint computation exceeded its iteration cap."""

    def __init__(self, operation: str, cap: int, expr: Optional[object] = None):
        self.cap = cap
        super().__init__(operation, f"exceeded iteration cap of {cap}", expr)


class ParseError(AlgebraError):
    """Raised by front-end parsers; never produced by the core itself."""

    def __init__(self, detail: str, position: int = -1):
        self.position = position
        super().__init__("parse", detail if position < 0 else f"{detail} at position {position}")
