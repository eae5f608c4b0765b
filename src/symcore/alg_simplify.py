"""
symcore ALG Model: Symbolic Simplifier

Implements expression simplification to canonical form.

One bottom-up pass rewrites every node; Add and Mul flatten through an
explicit work queue so nesting depth never turns into recursion depth. A
single identity pass inside Add recognizes sin^2 + cos^2 and cosh^2 - sinh^2.
Named functions are simplified only through the Function Property Registry.
"""

import logging
from collections import deque
from typing import List, Dict, Optional, Tuple

from .alg_base import AlgebraicExpr, Commutativity
from .alg_config import get_config
from .alg_errors import DomainError
from .alg_number import Number, ZERO, ONE
from .alg_symbol import Symbol
from .alg_types import (
    Constant, Add, Mul, Pow, Function, Matrix, UNDEFINED, is_undefined,
    add, mul, build_add, build_mul, split_coefficient, split_power,
)
from .alg_registry import FunctionRegistry, get_registry

logger = logging.getLogger('symcore.simplify')


def _fold_numbers(numbers: List[Number], combine) -> Optional[Number]:
    """
    Fold numerics bucket by bucket (integers, rationals, floats) so exact
    parts are combined exactly before a float absorbs them.
    """
    buckets: Dict[str, Optional[Number]] = {'integer': None, 'rational': None, 'float': None}
    for n in numbers:
        key = 'float' if n.is_float() else ('rational' if n.is_rational() else 'integer')
        current = buckets[key]
        buckets[key] = n if current is None else combine(current, n)
    result = None
    for key in ('integer', 'rational', 'float'):
        value = buckets[key]
        if value is not None:
            result = value if result is None else combine(result, value)
    return result


def _squared_function(expr: AlgebraicExpr, name: str) -> Optional[AlgebraicExpr]:
    """Argument u when expr is name(u)^2, else None."""
    if (isinstance(expr, Pow) and isinstance(expr.base, Function) and expr.base.name == name
            and len(expr.base.args) == 1 and expr.exp == Number(2)):
        return expr.base.args[0]
    return None


class SymbolicSimplifier:
    """Simplify algebraic expressions to canonical form."""

    def __init__(self, registry: Optional[FunctionRegistry] = None):
        self.registry = registry if registry is not None else get_registry()
        self._matrix_ops = None

    @property
    def matrix_ops(self):
        if self._matrix_ops is None:
            from .alg_matrix import MatrixOps
            self._matrix_ops = MatrixOps(entry_simplifier=self.simplify)
        return self._matrix_ops

    def simplify(self, expr: AlgebraicExpr) -> AlgebraicExpr:
        """Simplify expression to normal form."""
        if isinstance(expr, (Number, Symbol, Constant)):
            return expr
        elif isinstance(expr, Add):
            return self._simplify_sum(expr)
        elif isinstance(expr, Mul):
            return self._simplify_product(expr)
        elif isinstance(expr, Pow):
            return self._simplify_power(expr)
        elif isinstance(expr, Function):
            return self._simplify_function(expr)
        elif isinstance(expr, AlgebraicExpr):
            return self._simplify_children(expr)
        raise TypeError(f"Cannot simplify {type(expr).__name__}")

    def _simplify_children(self, expr: AlgebraicExpr) -> AlgebraicExpr:
        """Simplify each child; rebuild only if one changed."""
        children = expr.children()
        simplified = tuple(self.simplify(c) for c in children)
        if all(a is b for a, b in zip(children, simplified)):
            return expr
        return expr.with_children(simplified)

    # === Sums ===

    def _distribute_numeric(self, term: AlgebraicExpr) -> Optional[Tuple[AlgebraicExpr, ...]]:
        """k*(a + b) -> (k*a, k*b) for a numeric k in a two-factor product."""
        if (isinstance(term, Mul) and len(term.factors) == 2
                and isinstance(term.factors[0], Number) and isinstance(term.factors[1], Add)):
            k = term.factors[0]
            return tuple(mul([k, t]) for t in term.factors[1].terms)
        return None

    def _simplify_sum(self, expr: Add) -> AlgebraicExpr:
        """Flatten, fold numerics, combine like terms, apply identities."""
        work = deque((t, False) for t in expr.terms)
        terms: List[AlgebraicExpr] = []
        while work:
            term, done = work.popleft()
            if not done:
                term = self.simplify(term)
            if isinstance(term, Add):
                work.extendleft(reversed([(t, True) for t in term.terms]))
                continue
            distributed = self._distribute_numeric(term)
            if distributed is not None:
                work.extendleft(reversed([(t, False) for t in distributed]))
                continue
            terms.append(term)

        numerics = [t for t in terms if isinstance(t, Number)]
        others = [t for t in terms if not isinstance(t, Number)]
        numeric = _fold_numbers(numerics, Number.add)

        others = self._sum_matrices(others)

        # Like terms, keyed by base in first-seen order.
        groups: Dict[AlgebraicExpr, Number] = {}
        for term in others:
            coeff, base = split_coefficient(term)
            groups[base] = groups[base].add(coeff) if base in groups else coeff

        identity_value = self._apply_identities(groups)
        if identity_value is not None:
            numeric = identity_value if numeric is None else numeric.add(identity_value)

        result_terms = []
        for base, coeff in groups.items():
            if coeff.is_zero():
                continue
            result_terms.append(base if coeff.is_one() else mul([coeff, base]))
        return build_add(numeric, result_terms)

    def _sum_matrices(self, terms: List[AlgebraicExpr]) -> List[AlgebraicExpr]:
        """Fold concrete matrix terms into one matrix at the first one's position."""
        matrices = [t for t in terms if isinstance(t, Matrix)]
        if len(matrices) < 2:
            return terms
        total = matrices[0]
        for m in matrices[1:]:
            total = self.matrix_ops.add(total, m)
        result = []
        placed = False
        for t in terms:
            if isinstance(t, Matrix):
                if not placed:
                    result.append(total)
                    placed = True
                continue
            result.append(t)
        return result

    def _apply_identities(self, groups: Dict[AlgebraicExpr, Number]) -> Optional[Number]:
        """
        c*sin(u)^2 + c*cos(u)^2 -> c and c*cosh(u)^2 - c*sinh(u)^2 -> c.

        Matching groups are removed from ``groups``; the returned number is
        the total to add to the numeric term.
        """
        total = None
        for base in list(groups):
            if base not in groups:
                continue
            u = _squared_function(base, "sin")
            if u is not None:
                partner = Pow(Function("cos", (u,)), Number(2))
                if partner in groups and groups[partner] == groups[base]:
                    value = groups.pop(base)
                    groups.pop(partner)
                    total = value if total is None else total.add(value)
                    logger.debug(f"Pythagorean identity applied to {u}")
                continue
            u = _squared_function(base, "cosh")
            if u is not None:
                partner = Pow(Function("sinh", (u,)), Number(2))
                if partner in groups and groups[partner] == groups[base].negate():
                    value = groups.pop(base)
                    groups.pop(partner)
                    total = value if total is None else total.add(value)
                    logger.debug(f"Hyperbolic identity applied to {u}")
        return total

    # === Products ===

    def _simplify_product(self, expr: Mul) -> AlgebraicExpr:
        """Flatten, multiply matrices, fold numerics, coalesce powers."""
        work = deque((f, False) for f in expr.factors)
        factors: List[AlgebraicExpr] = []
        while work:
            factor, done = work.popleft()
            if not done:
                factor = self.simplify(factor)
            if isinstance(factor, Mul):
                work.extendleft(reversed([(f, True) for f in factor.factors]))
                continue
            factors.append(factor)

        # An exact zero annihilates before floats can absorb it.
        if any(isinstance(f, Number) and f.is_exact_zero() for f in factors):
            return UNDEFINED if any(is_undefined(f) for f in factors) else ZERO

        # Two-factor numeric product.
        if len(factors) == 2 and all(isinstance(f, Number) for f in factors):
            return factors[0].mul(factors[1])

        matrix_result = self._multiply_matrices(factors)
        if matrix_result is not None:
            if isinstance(matrix_result, AlgebraicExpr):
                return matrix_result
            factors = matrix_result

        numeric = _fold_numbers([f for f in factors if isinstance(f, Number)], Number.mul)
        others = [f for f in factors if not isinstance(f, Number)]
        if numeric is not None and numeric.is_exact_zero():
            return UNDEFINED if any(is_undefined(f) for f in others) else ZERO

        commutative = Commutativity.combine(f.commutativity for f in others).can_sort()
        others, extra = self._coalesce_powers(others, commutative)
        if extra:
            folded = _fold_numbers(extra, Number.mul)
            numeric = folded if numeric is None else numeric.mul(folded)
            if numeric.is_exact_zero():
                return UNDEFINED if any(is_undefined(f) for f in others) else ZERO
        return build_mul(numeric, others)

    def _multiply_matrices(self, factors: List[AlgebraicExpr]):
        """
        Multiply adjacent concrete matrices. When a single matrix remains among
        scalar factors the whole product is that matrix scaled; otherwise the
        merged factor list is returned. None when there is no matrix.
        """
        if not any(isinstance(f, Matrix) for f in factors):
            return None
        merged: List[AlgebraicExpr] = []
        for f in factors:
            if isinstance(f, Matrix) and merged and isinstance(merged[-1], Matrix):
                merged[-1] = self.matrix_ops.matmul(merged[-1], f)
            else:
                merged.append(f)
        matrices = [f for f in merged if isinstance(f, Matrix)]
        scalars = [f for f in merged if not isinstance(f, Matrix)]
        if len(matrices) == 1 and all(s.commutativity.can_sort() for s in scalars):
            if not scalars:
                return matrices[0]
            k = self.simplify(mul(scalars))
            return self.matrix_ops.scale(k, matrices[0])
        return merged

    def _coalesce_powers(self, factors: List[AlgebraicExpr],
                         commutative: bool) -> Tuple[List[AlgebraicExpr], List[Number]]:
        """
        Merge b^p * b^q into b^(p+q). Commutative products merge any equal
        bases; otherwise only neighbours merge. Returns the remaining
        non-numeric factors and any numbers produced by merging.
        """
        numbers: List[Number] = []
        pending = list(factors)
        while True:
            merged: List[Tuple[AlgebraicExpr, List[AlgebraicExpr], AlgebraicExpr]] = []
            index: Dict[AlgebraicExpr, int] = {}
            for factor in pending:
                base, exp = split_power(factor)
                if commutative and base in index:
                    merged[index[base]][1].append(exp)
                elif not commutative and merged and merged[-1][0] == base:
                    merged[-1][1].append(exp)
                else:
                    index[base] = len(merged)
                    merged.append((base, [exp], factor))

            changed = False
            rebuilt: List[AlgebraicExpr] = []
            for base, exps, original in merged:
                if len(exps) == 1:
                    rebuilt.append(original)
                    continue
                changed = True
                rebuilt.append(self._power(base, self.simplify(add(exps))))

            pending = []
            flattened = False
            for f in rebuilt:
                if isinstance(f, Number):
                    numbers.append(f)
                elif isinstance(f, Mul):
                    flattened = True
                    for g in f.factors:
                        if isinstance(g, Number):
                            numbers.append(g)
                        else:
                            pending.append(g)
                else:
                    pending.append(f)
            if not (changed and flattened):
                return pending, numbers

    # === Powers ===

    def _simplify_power(self, expr: Pow) -> AlgebraicExpr:
        base = self.simplify(expr.base)
        exp = self.simplify(expr.exp)
        return self._power(base, exp)

    def _power(self, base: AlgebraicExpr, exp: AlgebraicExpr) -> AlgebraicExpr:
        """Power of two simplified operands."""
        if isinstance(exp, Number) and exp.is_exact_zero():
            return ONE
        if isinstance(exp, Number) and exp.is_one():
            return base
        if isinstance(base, Number) and base.is_one():
            return ONE
        if isinstance(base, Number) and base.is_zero() and isinstance(exp, Number):
            if exp.is_negative():
                return UNDEFINED
            if base.is_exact():
                return ZERO

        if isinstance(base, Matrix) and isinstance(exp, Number) and exp.is_integer() and not exp.is_negative():
            return self.matrix_ops.power(base, exp.value)

        if isinstance(base, Number) and isinstance(exp, Number):
            folded = self._numeric_power(base, exp)
            if folded is not None:
                return folded

        if isinstance(base, Pow) and base.commutativity.can_sort():
            return self._power(base.base, self.simplify(mul([base.exp, exp])))

        # sqrt(u)^(2k) = u^k
        if (isinstance(base, Function) and base.name == "sqrt" and len(base.args) == 1
                and isinstance(exp, Number) and exp.is_integer() and exp.value % 2 == 0):
            return self._power(base.args[0], Number(exp.value // 2))

        if (isinstance(base, Mul) and base.commutativity.can_sort()
                and isinstance(exp, Number) and exp.is_integer() and exp.value > 0):
            return self.simplify(mul([self._power(f, exp) for f in base.factors]))

        return Pow(base, exp)

    def _numeric_power(self, base: Number, exp: Number) -> Optional[Number]:
        if base.is_exact() and exp.is_integer():
            return base.pow_int(exp.value)
        if base.is_exact() and exp.is_rational() and exp.denominator == 2:
            root = base.sqrt_exact()
            if root is not None:
                return root.pow_int(exp.numerator)
            return None
        if base.is_float() or exp.is_float():
            if base.is_negative() and not exp.is_integer():
                return None
            if base.is_zero() and exp.is_negative():
                return None
            try:
                return Number(base.to_float() ** exp.to_float())
            except OverflowError:
                return None
        return None

    # === Functions ===

    def _simplify_function(self, expr: Function) -> AlgebraicExpr:
        args = tuple(self.simplify(a) for a in expr.args)
        node = expr if all(a is b for a, b in zip(args, expr.args)) else Function(expr.name, args)
        props = self.registry.get(expr.name)
        if props is None or props.strategy is None or not props.strategy.applies_to(props, args):
            return node
        result = props.strategy.simplify(props, args)
        if result == node:
            return node
        return self.simplify(result)

    # === Expansion ===

    def expand(self, expr: AlgebraicExpr) -> AlgebraicExpr:
        """Expand products and powers."""
        return self.simplify(self._expand(self.simplify(expr)))

    def _expand(self, expr: AlgebraicExpr) -> AlgebraicExpr:
        if isinstance(expr, Add):
            return add([self._expand(t) for t in expr.terms])
        elif isinstance(expr, Mul):
            return self._expand_product([self._expand(f) for f in expr.factors])
        elif isinstance(expr, Pow):
            return self._expand_power(expr)
        elif isinstance(expr, (Number, Symbol, Constant)):
            return expr
        return expr.with_children(tuple(self._expand(c) for c in expr.children()))

    def _expand_product(self, factors: List[AlgebraicExpr]) -> AlgebraicExpr:
        """Distribute left to right; operand order within each product is kept."""
        limit = get_config().max_expand_terms
        products: List[List[AlgebraicExpr]] = [[]]
        for factor in factors:
            parts = factor.terms if isinstance(factor, Add) else (factor,)
            if len(products) * len(parts) > limit:
                raise DomainError("expand", f"expansion exceeds {limit} terms")
            products = [p + [t] for p in products for t in parts]
        return add([mul(p) for p in products])

    def _expand_power(self, expr: Pow) -> AlgebraicExpr:
        base = self._expand(expr.base)
        exp = expr.exp
        if isinstance(base, Add) and isinstance(exp, Number) and exp.is_integer() and exp.value > 1:
            result = base
            for _ in range(exp.value - 1):
                result = self.simplify(self._expand_product([result, base]))
            return result
        return Pow(base, exp) if base is not expr.base else expr

    def canonicalize(self, expr: AlgebraicExpr) -> AlgebraicExpr:
        """Put expression in canonical form."""
        # Simplify first
        simplified = self.simplify(expr)

        # Then expand
        expanded = self.expand(simplified)

        # Then simplify again
        return self.simplify(expanded)

    def equivalence(self, expr1: AlgebraicExpr, expr2: AlgebraicExpr) -> bool:
        """Check algebraic equivalence."""
        return self.canonicalize(add([expr1, mul([-1, expr2])])) == ZERO


def simplify(expr: AlgebraicExpr) -> AlgebraicExpr:
    """Convenience function to simplify an expression."""
    simplifier = SymbolicSimplifier()
    return simplifier.simplify(expr)


def expand(expr: AlgebraicExpr) -> AlgebraicExpr:
    """Convenience function to expand an expression."""
    simplifier = SymbolicSimplifier()
    return simplifier.expand(expr)


def canonicalize(expr: AlgebraicExpr) -> AlgebraicExpr:
    """Convenience function to canonicalize an expression."""
    simplifier = SymbolicSimplifier()
    return simplifier.canonicalize(expr)
