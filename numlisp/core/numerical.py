"""Numeric primitives and the standard environment.

Every primitive takes and returns floats. Comparisons return 1.0 or 0.0 since numlisp has no boolean type.

Division by exactly zero raises DivisionByZero, and math domain/range failures (ln 0, a negative base to a fractional
power, exp overflow) raise DomainError. Otherwise floating-point special values propagate: (+ 1e308 1e308) is inf, and
any comparison with nan is false.
"""

import math
import operator
from functools import reduce

from numlisp.core.environment import Environment
from numlisp.core.value import Primitive

CONSTANTS = {"pi": math.pi, "e": math.e}


def add(*args):
    return sum(args, 0.0)


def multiply(*args):
    return reduce(operator.mul, args, 1.0)


def subtract(first, *rest):
    if not rest:
        return -first
    return reduce(operator.sub, rest, first)


def divide(first, *rest):
    if not rest:
        return 1.0 / first
    return reduce(operator.truediv, rest, first)


def first(*args):
    return args[0]


def compare(op):
    """Lifts a Python comparison into a numlisp one."""
    return lambda left, right: 1.0 if op(left, right) else 0.0


PRIMITIVES = [
    Primitive("+", add, 0, variadic=True),
    Primitive("*", multiply, 0, variadic=True),
    Primitive("-", subtract, 1, variadic=True),
    Primitive("/", divide, 1, variadic=True),
    Primitive("^", math.pow, 2),

    Primitive("<", compare(operator.lt), 2),
    Primitive("<=", compare(operator.le), 2),
    Primitive(">", compare(operator.gt), 2),
    Primitive(">=", compare(operator.ge), 2),
    Primitive("=", compare(operator.eq), 2),

    Primitive("abs", abs, 1),
    Primitive("sin", math.sin, 1),
    Primitive("cos", math.cos, 1),
    Primitive("tan", math.tan, 1),
    Primitive("sinh", math.sinh, 1),
    Primitive("cosh", math.cosh, 1),
    Primitive("tanh", math.tanh, 1),
    Primitive("exp", math.exp, 1),
    Primitive("ln", math.log, 1),
    Primitive("car", first, 1, variadic=True),
]


def standard_env():
    """Returns a fresh top-level Environment holding the primitives and constants."""
    env = Environment(CONSTANTS)
    for primitive in PRIMITIVES:
        env.define(primitive.name, primitive)
    return env
