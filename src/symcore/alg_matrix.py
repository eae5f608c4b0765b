"""
symcore ALG Model: Matrix Operations

Concrete matrix algebra over expression entries. Entries are held in numpy
object arrays while computing; every result entry is passed through the
simplifier. Identity/zero/diagonal/scalar shapes take fast paths that never
materialize a dense array.
"""

import logging
from typing import Callable, Optional

import numpy as np

from .alg_base import AlgebraicExpr
from .alg_errors import DomainError
from .alg_number import ZERO, ONE
from .alg_types import (
    Matrix, MatrixKind, ExprLike, as_expr, add, mul, pow_, neg,
    matrix, identity, zero_matrix, diagonal, scalar_matrix,
)

logger = logging.getLogger('symcore.matrix')

_DIAGONAL_KINDS = (MatrixKind.IDENTITY, MatrixKind.DIAGONAL, MatrixKind.SCALAR)


def _diagonal_entries(A: Matrix):
    return [A.entry(i, i) for i in range(A.rows)]


class MatrixOps:
    """Matrix operations and linear algebra."""

    def __init__(self, entry_simplifier: Optional[Callable[[AlgebraicExpr], AlgebraicExpr]] = None):
        if entry_simplifier is None:
            from .alg_simplify import simplify
            entry_simplifier = simplify
        self.simplify_entry = entry_simplifier
        self._simplify_array = np.frompyfunc(entry_simplifier, 1, 1)

    def _from_array(self, arr: np.ndarray) -> Matrix:
        return matrix(self._simplify_array(arr))

    def _require_same_shape(self, operation: str, A: Matrix, B: Matrix) -> None:
        if A.shape != B.shape:
            logger.debug(f"{operation}: shape mismatch {A.shape} vs {B.shape}")
            raise DomainError(operation, f"dimension mismatch: {A.rows}x{A.cols} vs {B.rows}x{B.cols}")

    def _require_square(self, operation: str, A: Matrix) -> None:
        if not A.is_square():
            logger.debug(f"{operation}: non-square {A.shape}")
            raise DomainError(operation, f"requires a square matrix, got {A.rows}x{A.cols}", A)

    # === Linear structure ===

    def add(self, A: Matrix, B: Matrix) -> Matrix:
        """Entrywise sum A + B."""
        self._require_same_shape("matrix_add", A, B)
        if A.kind is MatrixKind.ZERO:
            return B
        if B.kind is MatrixKind.ZERO:
            return A
        if A.kind in _DIAGONAL_KINDS and B.kind in _DIAGONAL_KINDS:
            if A.kind is not MatrixKind.DIAGONAL and B.kind is not MatrixKind.DIAGONAL:
                return scalar_matrix(self.simplify_entry(add([A.entry(0, 0), B.entry(0, 0)])), A.rows)
            return diagonal([self.simplify_entry(add([a, b]))
                             for a, b in zip(_diagonal_entries(A), _diagonal_entries(B))])
        summed = np.frompyfunc(lambda a, b: add([a, b]), 2, 1)(A.to_array(), B.to_array())
        return self._from_array(summed)

    def sub(self, A: Matrix, B: Matrix) -> Matrix:
        """Entrywise difference A - B."""
        self._require_same_shape("matrix_sub", A, B)
        return self.add(A, self.scale(-1, B))

    def scale(self, k: ExprLike, A: Matrix) -> Matrix:
        """Scalar multiple k*A; k stays on the left of every entry."""
        k = as_expr(k)
        if A.kind is MatrixKind.ZERO:
            return A
        if k.is_zero():
            return zero_matrix(A.rows, A.cols)
        if A.kind in (MatrixKind.IDENTITY, MatrixKind.SCALAR):
            return scalar_matrix(self.simplify_entry(mul([k, A.entry(0, 0)])), A.rows)
        if A.kind is MatrixKind.DIAGONAL:
            return diagonal([self.simplify_entry(mul([k, d])) for d in A.data])
        scaled = np.frompyfunc(lambda e: mul([k, e]), 1, 1)(A.to_array())
        return self._from_array(scaled)

    def negate(self, A: Matrix) -> Matrix:
        return self.scale(-1, A)

    # === Products ===

    def matmul(self, A: Matrix, B: Matrix) -> Matrix:
        """Matrix multiplication: C = A * B."""
        if A.cols != B.rows:
            logger.debug(f"matmul: inner dimension mismatch {A.shape} x {B.shape}")
            raise DomainError("matmul", f"dimension mismatch: {A.cols} != {B.rows}")
        if A.kind is MatrixKind.IDENTITY:
            return B
        if B.kind is MatrixKind.IDENTITY:
            return A
        if A.kind is MatrixKind.ZERO or B.kind is MatrixKind.ZERO:
            return zero_matrix(A.rows, B.cols)
        if A.kind is MatrixKind.SCALAR:
            return self.scale(A.data[0], B)
        if A.kind is MatrixKind.DIAGONAL and B.kind in _DIAGONAL_KINDS:
            return diagonal([self.simplify_entry(mul([a, b]))
                             for a, b in zip(_diagonal_entries(A), _diagonal_entries(B))])
        if B.kind is MatrixKind.SCALAR:
            right = np.frompyfunc(lambda e: mul([e, B.data[0]]), 1, 1)(A.to_array())
            return self._from_array(right)

        # Dot products keep operand order for non-commutative entries.
        left = A.to_array()
        right = B.to_array()
        product = np.empty((A.rows, B.cols), dtype=object)
        for i in range(A.rows):
            for j in range(B.cols):
                product[i, j] = add([mul([left[i, k], right[k, j]]) for k in range(A.cols)])
        return self._from_array(product)

    def power(self, A: Matrix, n: int) -> Matrix:
        """A^n for integer n >= 0 by repeated squaring."""
        self._require_square("matrix_power", A)
        if n < 0:
            raise DomainError("matrix_power", f"negative exponent {n} requires an inverse", A)
        if A.kind in (MatrixKind.IDENTITY, MatrixKind.ZERO) and n > 0:
            return A
        if A.kind is MatrixKind.SCALAR:
            return scalar_matrix(self.simplify_entry(pow_(A.data[0], n)), A.rows)
        if A.kind is MatrixKind.DIAGONAL:
            return diagonal([self.simplify_entry(pow_(d, n)) for d in A.data])
        result = identity(A.rows)
        base = A
        while n:
            if n & 1:
                result = self.matmul(result, base)
            n >>= 1
            if n:
                base = self.matmul(base, base)
        return result

    # === Structure ===

    def transpose(self, A: Matrix) -> Matrix:
        """Matrix transpose: A^T."""
        if A.kind is MatrixKind.ZERO:
            return zero_matrix(A.cols, A.rows)
        if A.kind in _DIAGONAL_KINDS:
            return A
        return matrix(A.to_array().T)

    def trace(self, A: Matrix) -> AlgebraicExpr:
        """Matrix trace: sum of diagonal elements."""
        self._require_square("trace", A)
        return self.simplify_entry(add(_diagonal_entries(A)))

    def determinant(self, A: Matrix) -> AlgebraicExpr:
        """Matrix determinant using Laplace expansion along the first row."""
        self._require_square("determinant", A)
        if A.kind is MatrixKind.IDENTITY:
            return ONE
        if A.kind is MatrixKind.ZERO:
            return ZERO
        if A.kind in (MatrixKind.DIAGONAL, MatrixKind.SCALAR):
            return self.simplify_entry(mul(_diagonal_entries(A)))
        return self.simplify_entry(self._laplace(A.to_array()))

    def _laplace(self, arr: np.ndarray) -> AlgebraicExpr:
        n = arr.shape[0]
        if n == 1:
            return arr[0, 0]
        if n == 2:
            return add([mul([arr[0, 0], arr[1, 1]]), neg(mul([arr[0, 1], arr[1, 0]]))])
        terms = []
        for j in range(n):
            entry = arr[0, j]
            if isinstance(entry, AlgebraicExpr) and entry.is_zero():
                continue
            minor = np.delete(np.delete(arr, 0, axis=0), j, axis=1)
            cofactor = self.simplify_entry(self._laplace(minor))
            term = mul([entry, cofactor])
            terms.append(term if j % 2 == 0 else neg(term))
        return add(terms)
