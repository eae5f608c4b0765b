"""
symcore ALG Model: Expression Types

Defines the expression AST and the constructors that keep every node in
normal form:

1. Add/Mul are flattened and hold at least two children.
2. Numeric terms/factors are folded into at most one leading numeric child.
3. All-commutative aggregates are sorted by the canonical order; aggregates
   with a non-commutative child keep source order.
4. Pow(_, 0) = 1, Pow(_, 1) = base, Pow(1, _) = 1, Pow(0, n>0) = 0.

Node classes validate structure only; ``add``/``mul``/``pow_`` are the entry
points that normalize.
"""

import numbers
from collections import deque
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Union, List, Optional, Tuple, Iterable, Sequence

import numpy as np

from .alg_base import (
    AlgebraicExpr, Commutativity,
    RANK_CONSTANT, RANK_POW, RANK_MUL, RANK_ADD, RANK_FUNCTION,
    RANK_STRUCTURAL, RANK_MATRIX,
)
from .alg_errors import DomainError, DivisionByZeroError
from .alg_number import Number, ZERO, ONE, MINUS_ONE
from .alg_symbol import Symbol

ExprLike = Union[AlgebraicExpr, int, float, Fraction]


def as_expr(value: ExprLike) -> AlgebraicExpr:
    """Coerce Python numbers into Number leaves; expressions pass through."""
    if isinstance(value, AlgebraicExpr):
        return value
    if isinstance(value, (numbers.Real, Fraction)):
        return Number(value)
    raise TypeError(f"Cannot use {type(value).__name__} as an expression")


def _keys(exprs: Iterable[AlgebraicExpr]) -> tuple:
    return tuple(e.sort_key() for e in exprs)


# === Rendering helpers ===

def _precedence(e: AlgebraicExpr) -> int:
    if isinstance(e, Add):
        return 1
    if isinstance(e, Mul):
        return 2
    if isinstance(e, Number) and (e.is_negative() or e.is_rational()):
        return 2
    if isinstance(e, Pow):
        return 3
    return 4


def _wrap(e: AlgebraicExpr, threshold: int) -> str:
    text = str(e)
    return f"({text})" if _precedence(e) <= threshold else text


# === Leaves ===

@dataclass(frozen=True, eq=False, repr=False)
class Constant(AlgebraicExpr):
    """Named mathematical constant (pi, e, i, oo)."""
    name: str

    def children(self) -> Tuple[AlgebraicExpr, ...]:
        return ()

    def with_children(self, children) -> 'Constant':
        return self

    def _identity(self) -> tuple:
        return (self.name,)

    def _own_commutativity(self) -> Commutativity:
        return Commutativity.COMMUTATIVE

    def sort_key(self) -> tuple:
        return (RANK_CONSTANT, self.name)

    def __str__(self) -> str:
        return self.name


PI = Constant("pi")
E = Constant("e")
I = Constant("i")
INFINITY = Constant("oo")


# === Aggregates ===

@dataclass(frozen=True, eq=False, repr=False)
class Add(AlgebraicExpr):
    """Sum of two or more terms. Build with ``add``."""
    terms: Tuple[AlgebraicExpr, ...]

    def __post_init__(self):
        terms = tuple(self.terms)
        if len(terms) < 2:
            raise ValueError("Add needs at least two terms; use add()")
        if any(isinstance(t, Add) for t in terms):
            raise ValueError("Add may not directly contain Add; use add()")
        object.__setattr__(self, 'terms', terms)

    def children(self) -> Tuple[AlgebraicExpr, ...]:
        return self.terms

    def with_children(self, children) -> AlgebraicExpr:
        return add(children)

    def _identity(self) -> tuple:
        return self.terms

    def sort_key(self) -> tuple:
        return (RANK_ADD, _keys(self.terms))

    def __str__(self) -> str:
        parts = [str(self.terms[0])]
        for term in self.terms[1:]:
            coeff, _ = split_coefficient(term)
            if coeff.is_negative():
                parts.append(f"- {_wrap(neg(term), 1)}")
            else:
                parts.append(f"+ {_wrap(term, 1)}")
        return " ".join(parts)


@dataclass(frozen=True, eq=False, repr=False)
class Mul(AlgebraicExpr):
    """Product of two or more factors. Build with ``mul``."""
    factors: Tuple[AlgebraicExpr, ...]

    def __post_init__(self):
        factors = tuple(self.factors)
        if len(factors) < 2:
            raise ValueError("Mul needs at least two factors; use mul()")
        if any(isinstance(f, Mul) for f in factors):
            raise ValueError("Mul may not directly contain Mul; use mul()")
        object.__setattr__(self, 'factors', factors)

    def children(self) -> Tuple[AlgebraicExpr, ...]:
        return self.factors

    def with_children(self, children) -> AlgebraicExpr:
        return mul(children)

    def _identity(self) -> tuple:
        return self.factors

    def sort_key(self) -> tuple:
        return (RANK_MUL, _keys(self.factors))

    def __str__(self) -> str:
        first = self.factors[0]
        if isinstance(first, Number) and first == MINUS_ONE:
            return "-" + "*".join(_wrap(f, 2) for f in self.factors[1:])
        parts = [str(first) if isinstance(first, Number) else _wrap(first, 1)]
        parts.extend(_wrap(f, 1) for f in self.factors[1:])
        return "*".join(parts)


@dataclass(frozen=True, eq=False, repr=False)
class Pow(AlgebraicExpr):
    """Power base^exp. Build with ``pow_``."""
    base: AlgebraicExpr
    exp: AlgebraicExpr

    def children(self) -> Tuple[AlgebraicExpr, ...]:
        return (self.base, self.exp)

    def with_children(self, children) -> AlgebraicExpr:
        return pow_(children[0], children[1])

    def _identity(self) -> tuple:
        return (self.base, self.exp)

    def sort_key(self) -> tuple:
        return (RANK_POW, self.base.sort_key(), self.exp.sort_key())

    def __str__(self) -> str:
        return f"{_wrap(self.base, 3)}^{_wrap(self.exp, 3)}"


@dataclass(frozen=True, eq=False, repr=False)
class Function(AlgebraicExpr):
    """Named function application; the name may be unknown to the registry."""
    name: str
    args: Tuple[AlgebraicExpr, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'args', tuple(self.args))

    def children(self) -> Tuple[AlgebraicExpr, ...]:
        return self.args

    def with_children(self, children) -> 'Function':
        return Function(self.name, tuple(children))

    def _identity(self) -> tuple:
        return (self.name, self.args)

    def sort_key(self) -> tuple:
        return (RANK_FUNCTION, self.name, _keys(self.args))

    def __str__(self) -> str:
        return f"{self.name}({', '.join(str(a) for a in self.args)})"


UNDEFINED = Function("undefined", ())


def is_undefined(expr: AlgebraicExpr) -> bool:
    return isinstance(expr, Function) and expr.name == "undefined" and not expr.args


# === Calculus placeholders ===

@dataclass(frozen=True, eq=False, repr=False)
class Derivative(AlgebraicExpr):
    """Unevaluated derivative d^order/dvar^order body."""
    body: AlgebraicExpr
    var: Symbol
    order: int = 1

    def __post_init__(self):
        if not isinstance(self.var, Symbol):
            raise TypeError("Derivative variable must be a Symbol")
        if self.order < 1:
            raise ValueError(f"Derivative order must be >= 1, got {self.order}")

    def children(self) -> Tuple[AlgebraicExpr, ...]:
        return (self.body, self.var)

    def with_children(self, children) -> 'Derivative':
        return Derivative(children[0], children[1], self.order)

    def _identity(self) -> tuple:
        return (self.body, self.var, self.order)

    def sort_key(self) -> tuple:
        return (RANK_STRUCTURAL, "Derivative", str(self.order), _keys(self.children()))

    def __str__(self) -> str:
        if self.order == 1:
            return f"d/d{self.var}({self.body})"
        return f"d^{self.order}/d{self.var}^{self.order}({self.body})"


@dataclass(frozen=True, eq=False, repr=False)
class Integral(AlgebraicExpr):
    """Unevaluated integral; ``bounds`` is None for an antiderivative."""
    body: AlgebraicExpr
    var: Symbol
    bounds: Optional[Tuple[AlgebraicExpr, AlgebraicExpr]] = None

    def __post_init__(self):
        if not isinstance(self.var, Symbol):
            raise TypeError("Integral variable must be a Symbol")
        if self.bounds is not None:
            lo, hi = self.bounds
            object.__setattr__(self, 'bounds', (as_expr(lo), as_expr(hi)))

    def children(self) -> Tuple[AlgebraicExpr, ...]:
        if self.bounds is None:
            return (self.body, self.var)
        return (self.body, self.var) + self.bounds

    def with_children(self, children) -> 'Integral':
        bounds = (children[2], children[3]) if len(children) == 4 else None
        return Integral(children[0], children[1], bounds)

    def _identity(self) -> tuple:
        return self.children()

    def sort_key(self) -> tuple:
        return (RANK_STRUCTURAL, "Integral", "" if self.bounds is None else "definite",
                _keys(self.children()))

    def __str__(self) -> str:
        if self.bounds is None:
            return f"integral({self.body}, {self.var})"
        return f"integral({self.body}, ({self.var}, {self.bounds[0]}, {self.bounds[1]}))"


# === Matrices ===

class MatrixKind(Enum):
    """Storage shape of a matrix."""
    DENSE = "dense"
    IDENTITY = "identity"
    ZERO = "zero"
    DIAGONAL = "diagonal"
    SCALAR = "scalar"


@dataclass(frozen=True, eq=False, repr=False)
class Matrix(AlgebraicExpr):
    """
    Rectangular matrix of expressions.

    ``data`` depends on ``kind``: row-major entries for DENSE, the diagonal
    for DIAGONAL, the single scalar for SCALAR, and empty for IDENTITY and
    ZERO. Dimensions are checked at construction.
    """
    kind: MatrixKind
    rows: int
    cols: int
    data: Tuple[AlgebraicExpr, ...] = ()

    def __post_init__(self):
        data = tuple(as_expr(d) for d in self.data)
        object.__setattr__(self, 'data', data)
        if self.rows < 1 or self.cols < 1:
            raise DomainError("matrix", f"dimensions must be positive, got {self.rows}x{self.cols}")
        expected = {
            MatrixKind.DENSE: self.rows * self.cols,
            MatrixKind.IDENTITY: 0,
            MatrixKind.ZERO: 0,
            MatrixKind.DIAGONAL: self.rows,
            MatrixKind.SCALAR: 1,
        }[self.kind]
        if len(data) != expected:
            raise DomainError("matrix", f"{self.kind.value} matrix expects {expected} entries, got {len(data)}")
        if self.kind in (MatrixKind.IDENTITY, MatrixKind.DIAGONAL, MatrixKind.SCALAR) and self.rows != self.cols:
            raise DomainError("matrix", f"{self.kind.value} matrix must be square, got {self.rows}x{self.cols}")

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.rows, self.cols)

    def is_square(self) -> bool:
        return self.rows == self.cols

    def entry(self, i: int, j: int) -> AlgebraicExpr:
        if not (0 <= i < self.rows and 0 <= j < self.cols):
            raise IndexError(f"entry ({i}, {j}) outside {self.rows}x{self.cols} matrix")
        if self.kind is MatrixKind.DENSE:
            return self.data[i * self.cols + j]
        if self.kind is MatrixKind.ZERO or i != j:
            return ZERO
        if self.kind is MatrixKind.IDENTITY:
            return ONE
        if self.kind is MatrixKind.DIAGONAL:
            return self.data[i]
        return self.data[0]

    def to_rows(self) -> Tuple[Tuple[AlgebraicExpr, ...], ...]:
        return tuple(tuple(self.entry(i, j) for j in range(self.cols)) for i in range(self.rows))

    def to_array(self) -> np.ndarray:
        """Entries as a 2-D numpy object array."""
        arr = np.empty((self.rows, self.cols), dtype=object)
        for i in range(self.rows):
            for j in range(self.cols):
                arr[i, j] = self.entry(i, j)
        return arr

    def children(self) -> Tuple[AlgebraicExpr, ...]:
        return self.data

    def with_children(self, children) -> 'Matrix':
        return Matrix(self.kind, self.rows, self.cols, tuple(children))

    def _identity(self) -> tuple:
        return (self.kind.value, self.rows, self.cols, self.data)

    def _own_commutativity(self) -> Commutativity:
        return Commutativity.NON_COMMUTATIVE

    def sort_key(self) -> tuple:
        return (RANK_MATRIX, self.kind.value, self.rows, self.cols, _keys(self.data))

    def __str__(self) -> str:
        if self.kind is MatrixKind.IDENTITY:
            return f"I({self.rows})"
        if self.kind is MatrixKind.ZERO:
            return f"0({self.rows}x{self.cols})"
        rows = ", ".join("[" + ", ".join(str(e) for e in row) + "]" for row in self.to_rows())
        return f"[{rows}]"


# === Structural nodes ===

class RelationOp(Enum):
    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="


@dataclass(frozen=True, eq=False, repr=False)
class Relation(AlgebraicExpr):
    """Equation or inequality lhs op rhs."""
    lhs: AlgebraicExpr
    rhs: AlgebraicExpr
    op: RelationOp = RelationOp.EQ

    def children(self) -> Tuple[AlgebraicExpr, ...]:
        return (self.lhs, self.rhs)

    def with_children(self, children) -> 'Relation':
        return Relation(children[0], children[1], self.op)

    def _identity(self) -> tuple:
        return (self.lhs, self.rhs, self.op.value)

    def sort_key(self) -> tuple:
        return (RANK_STRUCTURAL, "Relation", self.op.value, _keys(self.children()))

    def __str__(self) -> str:
        return f"{self.lhs} {self.op.value} {self.rhs}"


@dataclass(frozen=True, eq=False, repr=False)
class Interval(AlgebraicExpr):
    """Real interval between two endpoints."""
    start: AlgebraicExpr
    end: AlgebraicExpr
    left_open: bool = False
    right_open: bool = False

    def children(self) -> Tuple[AlgebraicExpr, ...]:
        return (self.start, self.end)

    def with_children(self, children) -> 'Interval':
        return Interval(children[0], children[1], self.left_open, self.right_open)

    def _identity(self) -> tuple:
        return (self.start, self.end, self.left_open, self.right_open)

    def sort_key(self) -> tuple:
        flags = f"{int(self.left_open)}{int(self.right_open)}"
        return (RANK_STRUCTURAL, "Interval", flags, _keys(self.children()))

    def __str__(self) -> str:
        left = "(" if self.left_open else "["
        right = ")" if self.right_open else "]"
        return f"{left}{self.start}, {self.end}{right}"


@dataclass(frozen=True, eq=False, repr=False)
class Piecewise(AlgebraicExpr):
    """Ordered (value, condition) pieces with an optional fallback."""
    pieces: Tuple[Tuple[AlgebraicExpr, AlgebraicExpr], ...]
    otherwise: Optional[AlgebraicExpr] = None

    def __post_init__(self):
        object.__setattr__(self, 'pieces', tuple((v, c) for v, c in self.pieces))

    def children(self) -> Tuple[AlgebraicExpr, ...]:
        flat = tuple(e for piece in self.pieces for e in piece)
        if self.otherwise is not None:
            flat += (self.otherwise,)
        return flat

    def with_children(self, children) -> 'Piecewise':
        n = len(self.pieces)
        pieces = tuple((children[2 * k], children[2 * k + 1]) for k in range(n))
        otherwise = children[2 * n] if len(children) > 2 * n else None
        return Piecewise(pieces, otherwise)

    def _identity(self) -> tuple:
        return (self.pieces, self.otherwise)

    def sort_key(self) -> tuple:
        tag = "otherwise" if self.otherwise is not None else ""
        return (RANK_STRUCTURAL, "Piecewise", tag, _keys(self.children()))

    def __str__(self) -> str:
        parts = [f"{v} if {c}" for v, c in self.pieces]
        if self.otherwise is not None:
            parts.append(f"{self.otherwise} otherwise")
        return "piecewise(" + "; ".join(parts) + ")"


@dataclass(frozen=True, eq=False, repr=False)
class Complex(AlgebraicExpr):
    """Complex value re + im*i kept as a structural pair."""
    re: AlgebraicExpr
    im: AlgebraicExpr

    def children(self) -> Tuple[AlgebraicExpr, ...]:
        return (self.re, self.im)

    def with_children(self, children) -> AlgebraicExpr:
        return complex_(children[0], children[1])

    def _identity(self) -> tuple:
        return (self.re, self.im)

    def sort_key(self) -> tuple:
        return (RANK_STRUCTURAL, "Complex", "", _keys(self.children()))

    def __str__(self) -> str:
        return f"({self.re} + {_wrap(self.im, 2)}*i)"


# === Coefficient helpers ===

def split_coefficient(term: AlgebraicExpr) -> Tuple[Number, AlgebraicExpr]:
    """Split ``c * t`` into (c, t); any other term has coefficient one."""
    if isinstance(term, Number):
        return term, ONE
    if isinstance(term, Mul) and isinstance(term.factors[0], Number):
        rest = term.factors[1:]
        return term.factors[0], rest[0] if len(rest) == 1 else Mul(rest)
    return ONE, term


def split_power(factor: AlgebraicExpr) -> Tuple[AlgebraicExpr, AlgebraicExpr]:
    """Split ``b^e`` into (b, e); any other factor has exponent one."""
    if isinstance(factor, Pow):
        return factor.base, factor.exp
    return factor, ONE


# === Normal-form constructors ===

def integer(n: int) -> Number:
    if not isinstance(n, numbers.Integral):
        raise TypeError(f"integer() expects an integral value, got {type(n).__name__}")
    return Number(int(n))


def rational(numerator: int, denominator: int) -> Number:
    """Reduced rational numerator/denominator; a zero denominator is an error."""
    return Number.rational(numerator, denominator)


def float_(x: float) -> Number:
    return Number(float(x))


def function(name: str, args: Sequence[ExprLike] = ()) -> Function:
    return Function(name, tuple(as_expr(a) for a in args))


def _flatten(items: Iterable[ExprLike], node_type) -> List[AlgebraicExpr]:
    work = deque(as_expr(i) for i in items)
    flat = []
    while work:
        item = work.popleft()
        if isinstance(item, node_type):
            work.extendleft(reversed(item.children()))
        else:
            flat.append(item)
    return flat


def _canonical_order(items: List[AlgebraicExpr]) -> List[AlgebraicExpr]:
    if Commutativity.combine(i.commutativity for i in items).can_sort():
        return sorted(items, key=lambda e: e.sort_key())
    return items


def build_add(numeric: Optional[Number], others: List[AlgebraicExpr]) -> AlgebraicExpr:
    """Assemble an Add from one folded numeric term and non-numeric terms."""
    if numeric is not None and numeric.is_zero() and others:
        numeric = None
    children = ([numeric] if numeric is not None else []) + _canonical_order(others)
    if not children:
        return ZERO
    if len(children) == 1:
        return children[0]
    return Add(tuple(children))


def build_mul(numeric: Optional[Number], others: List[AlgebraicExpr]) -> AlgebraicExpr:
    """Assemble a Mul from one folded numeric factor and non-numeric factors."""
    if numeric is not None and numeric.is_exact_zero():
        if any(is_undefined(f) for f in others):
            return UNDEFINED
        return ZERO
    if numeric is not None and numeric.is_one() and others:
        numeric = None
    children = ([numeric] if numeric is not None else []) + _canonical_order(others)
    if not children:
        return ONE
    if len(children) == 1:
        return children[0]
    return Mul(tuple(children))


def add(terms: Iterable[ExprLike]) -> AlgebraicExpr:
    """Sum in normal form (flattened, numerics folded, canonically ordered)."""
    numeric = None
    others = []
    for term in _flatten(terms, Add):
        if isinstance(term, Number):
            numeric = term if numeric is None else numeric.add(term)
        else:
            others.append(term)
    return build_add(numeric, others)


def mul(factors: Iterable[ExprLike]) -> AlgebraicExpr:
    """Product in normal form; an exact zero factor annihilates the product."""
    numeric = None
    others = []
    annihilated = False
    for factor in _flatten(factors, Mul):
        if isinstance(factor, Number):
            annihilated = annihilated or factor.is_exact_zero()
            numeric = factor if numeric is None else numeric.mul(factor)
        else:
            others.append(factor)
    if annihilated:
        return UNDEFINED if any(is_undefined(f) for f in others) else ZERO
    return build_mul(numeric, others)


def pow_(base: ExprLike, exp: ExprLike) -> AlgebraicExpr:
    """Power with the 0/1 edge cases applied; 0 to a negative power is an error."""
    base = as_expr(base)
    exp = as_expr(exp)
    if isinstance(exp, Number) and exp.is_exact_zero():
        return ONE
    if isinstance(exp, Number) and exp.is_one():
        return base
    if isinstance(base, Number) and base.is_one():
        return ONE
    if isinstance(base, Number) and base.is_zero() and isinstance(exp, Number):
        if exp.is_negative():
            raise DomainError("pow", "zero raised to a negative power", Pow(base, exp))
        if base.is_exact():
            return ZERO
    return Pow(base, exp)


def neg(expr: ExprLike) -> AlgebraicExpr:
    expr = as_expr(expr)
    if isinstance(expr, Number):
        return expr.negate()
    return mul([MINUS_ONE, expr])


def sub(a: ExprLike, b: ExprLike) -> AlgebraicExpr:
    return add([a, neg(b)])


def div(a: ExprLike, b: ExprLike) -> AlgebraicExpr:
    """a / b as a * b^-1; numeric division is exact."""
    a = as_expr(a)
    b = as_expr(b)
    if isinstance(b, Number):
        if b.is_zero():
            raise DivisionByZeroError("divide", a)
        if isinstance(a, Number):
            return a.div(b)
        return mul([b.reciprocal(), a])
    return mul([a, pow_(b, MINUS_ONE)])


def complex_(re: ExprLike, im: ExprLike) -> AlgebraicExpr:
    re = as_expr(re)
    im = as_expr(im)
    if isinstance(im, Number) and im.is_exact_zero():
        return re
    return Complex(re, im)


def relation(lhs: ExprLike, rhs: ExprLike, op: Union[RelationOp, str] = RelationOp.EQ) -> Relation:
    if not isinstance(op, RelationOp):
        op = RelationOp(op)
    return Relation(as_expr(lhs), as_expr(rhs), op)


def interval(start: ExprLike, end: ExprLike, left_open: bool = False, right_open: bool = False) -> Interval:
    return Interval(as_expr(start), as_expr(end), left_open, right_open)


def piecewise(pieces: Sequence[Tuple[ExprLike, ExprLike]], otherwise: Optional[ExprLike] = None) -> Piecewise:
    return Piecewise(
        tuple((as_expr(v), as_expr(c)) for v, c in pieces),
        as_expr(otherwise) if otherwise is not None else None,
    )


def matrix(rows) -> Matrix:
    """Dense matrix from a list of rows or a 2-D array; ragged input is rejected."""
    if isinstance(rows, np.ndarray):
        if rows.ndim != 2:
            raise DomainError("matrix", f"expected a 2-D array, got {rows.ndim} dimensions")
        rows = rows.tolist()
    rows = [list(r) for r in rows]
    if not rows or not rows[0]:
        raise DomainError("matrix", "matrix must have at least one row and one column")
    width = len(rows[0])
    for index, row in enumerate(rows):
        if len(row) != width:
            raise DomainError("matrix", f"ragged rows: row {index} has {len(row)} entries, expected {width}")
    return Matrix(MatrixKind.DENSE, len(rows), width, tuple(as_expr(e) for row in rows for e in row))


def identity(n: int) -> Matrix:
    return Matrix(MatrixKind.IDENTITY, n, n)


def zero_matrix(rows: int, cols: int) -> Matrix:
    return Matrix(MatrixKind.ZERO, rows, cols)


def diagonal(values: Sequence[ExprLike]) -> Matrix:
    values = tuple(as_expr(v) for v in values)
    return Matrix(MatrixKind.DIAGONAL, len(values), len(values), values)


def scalar_matrix(k: ExprLike, n: int) -> Matrix:
    return Matrix(MatrixKind.SCALAR, n, n, (as_expr(k),))


# === Function shorthands ===

def sin(x: ExprLike) -> Function:
    return function("sin", [x])


def cos(x: ExprLike) -> Function:
    return function("cos", [x])


def tan(x: ExprLike) -> Function:
    return function("tan", [x])


def exp(x: ExprLike) -> Function:
    return function("exp", [x])


def ln(x: ExprLike) -> Function:
    return function("ln", [x])


def sqrt(x: ExprLike) -> Function:
    return function("sqrt", [x])


def sinh(x: ExprLike) -> Function:
    return function("sinh", [x])


def cosh(x: ExprLike) -> Function:
    return function("cosh", [x])
