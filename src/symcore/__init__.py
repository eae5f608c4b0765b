# symcore Main Package
# Symbolic Algebra Core

"""
symcore - Symbolic Algebra Core

An immutable expression AST with:
- Canonical simplification and expansion
- Polynomial engine (IntPoly, sparse multivariate, GCD, resultants, Gröbner bases)
- Function Property Registry driving simplification, derivatives and evaluation
- Thread-local polynomial cache
"""

# Errors and configuration
from .alg_errors import (
    AlgebraError, DivisionByZeroError, DomainError, NotPolynomialError,
    MaxIterationsReachedError, ParseError,
)
from .alg_config import EngineConfig, get_config, set_config
from .logging_config import setup_logging, JSONFormatter, Timer

# Expressions
from .alg_base import AlgebraicExpr, Commutativity
from .alg_number import Number, NumberKind
from .alg_symbol import AlgebraicKind, Symbol, symbol, symbols
from .alg_types import (
    Constant, Add, Mul, Pow, Function, Derivative, Integral, Matrix, MatrixKind,
    Relation, RelationOp, Interval, Piecewise, Complex,
    PI, E, I, INFINITY, UNDEFINED, is_undefined,
    as_expr, integer, rational, float_, function, add, mul, pow_, neg, sub, div,
    complex_, relation, interval, piecewise,
    matrix, identity, zero_matrix, diagonal, scalar_matrix,
    sin, cos, tan, exp, ln, sqrt, sinh, cosh,
)
from .alg_arena import ExprArena

# Simplification and matrices
from .alg_simplify import SymbolicSimplifier, simplify, expand, canonicalize
from .alg_matrix import MatrixOps

# Function Property Registry
from .alg_registry import (
    FunctionProperties, FunctionFamily, FunctionRegistry, Parity, Domain,
    DerivativeRule, AntiderivativeRule, AntiderivativeKind, SpecialValue,
    SimplificationStrategy, StandardStrategy,
    get_registry, register_function, get_function_properties,
)

# Calculus and evaluation
from .alg_calculus import derivative, nth_derivative, antiderivative, substitute
from .alg_evaluate import evaluate, evaluate_bulk

# Polynomials
from .alg_intpoly import IntPoly
from .alg_sparse import SparsePolynomial, MonomialOrder
from .alg_classify import ExpressionClass, Classification, classify, find_variables, is_polynomial_in
from .alg_polynomial import (
    degree, leading_coefficient, content, primitive_part,
    poly_div, poly_gcd, poly_cofactors, poly_resultant, poly_discriminant, sylvester_matrix,
)
from .alg_groebner import GroebnerBasis, groebner_basis, ideal_contains, elimination_ideal
from .alg_factor import factor, factor_out_gcd
from .alg_cache import PolynomialCache, CacheStats, get_cache, cache_stats, clear_cache

# Version
__version__ = "0.1.0"

__all__ = [
    # Errors and configuration
    'AlgebraError', 'DivisionByZeroError', 'DomainError', 'NotPolynomialError',
    'MaxIterationsReachedError', 'ParseError',
    'EngineConfig', 'get_config', 'set_config',
    'setup_logging', 'JSONFormatter', 'Timer',

    # Expressions
    'AlgebraicExpr', 'Commutativity', 'Number', 'NumberKind',
    'AlgebraicKind', 'Symbol', 'symbol', 'symbols',
    'Constant', 'Add', 'Mul', 'Pow', 'Function', 'Derivative', 'Integral',
    'Matrix', 'MatrixKind', 'Relation', 'RelationOp', 'Interval', 'Piecewise', 'Complex',
    'PI', 'E', 'I', 'INFINITY', 'UNDEFINED', 'is_undefined',
    'as_expr', 'integer', 'rational', 'float_', 'function', 'add', 'mul', 'pow_',
    'neg', 'sub', 'div', 'complex_', 'relation', 'interval', 'piecewise',
    'matrix', 'identity', 'zero_matrix', 'diagonal', 'scalar_matrix',
    'sin', 'cos', 'tan', 'exp', 'ln', 'sqrt', 'sinh', 'cosh',
    'ExprArena',

    # Simplification and matrices
    'SymbolicSimplifier', 'simplify', 'expand', 'canonicalize', 'MatrixOps',

    # Registry
    'FunctionProperties', 'FunctionFamily', 'FunctionRegistry', 'Parity', 'Domain',
    'DerivativeRule', 'AntiderivativeRule', 'AntiderivativeKind', 'SpecialValue',
    'SimplificationStrategy', 'StandardStrategy',
    'get_registry', 'register_function', 'get_function_properties',

    # Calculus and evaluation
    'derivative', 'nth_derivative', 'antiderivative', 'substitute',
    'evaluate', 'evaluate_bulk',

    # Polynomials
    'IntPoly', 'SparsePolynomial', 'MonomialOrder',
    'ExpressionClass', 'Classification', 'classify', 'find_variables', 'is_polynomial_in',
    'degree', 'leading_coefficient', 'content', 'primitive_part',
    'poly_div', 'poly_gcd', 'poly_cofactors', 'poly_resultant', 'poly_discriminant',
    'sylvester_matrix', 'factor', 'factor_out_gcd',
    'GroebnerBasis', 'groebner_basis', 'ideal_contains', 'elimination_ideal',
    'PolynomialCache', 'CacheStats', 'get_cache', 'cache_stats', 'clear_cache',
]
