"""Evaluator: reduces an Expression in an Environment to a value.

Dispatch, by expression shape:
    1. Number            -> its float
    2. Symbol            -> lookup in the environment chain
    3. ()                -> EmptyApplication
    4. (<keyword> ...)   -> special form: define, lambda, if, begin
    5. (<head> <arg>*)   -> application of a Closure or Primitive, call-by-value, left to right

Special form keywords are recognized by name before any lookup, so binding a variable called `if` does not change what
(if ...) means. Closure bodies run in a child of the closure's own environment, which makes scoping lexical.

Evaluation recurses on the Python stack; there is no tail-call elimination, so very deep recursion ends in a
RecursionError that the core does not catch.
"""

import logging

from numlisp.core.grammar import List, Number, Symbol, read, to_string
from numlisp.core.value import UNIT, Closure, Primitive, is_callable, truthy
from numlisp.core.value import to_string as value_to_string
from numlisp.lang.error import ArityMismatch, EmptyApplication, MalformedSpecialForm, NotCallable

logger = logging.getLogger(__name__)


def evaluate(expr, env):
    """Evaluates expr in env. The first error raised aborts the whole evaluation."""
    if isinstance(expr, Number):
        return expr.value
    if isinstance(expr, Symbol):
        return env.lookup(expr.name)
    if not expr.items:
        raise EmptyApplication(to_string(expr))

    head, *args = expr.items
    if isinstance(head, Symbol) and head.name in SPECIAL_FORMS:
        return SPECIAL_FORMS[head.name](expr, args, env)

    proc = evaluate(head, env)
    if not is_callable(proc):
        raise NotCallable(to_string(head), value_to_string(proc))

    values = [evaluate(arg, env) for arg in args]
    return apply(proc, values, head)


def apply(proc, args, head=None):
    """Calls a Closure or Primitive with already-evaluated args. head is the expression proc came from, only rendered
    for error messages.
    """
    logger.debug("applying %r to %r", proc, args)

    if isinstance(proc, Primitive):
        return proc(*args)

    if len(args) != proc.arity:
        raise ArityMismatch(proc.arity, len(args), "<closure>" if head is None else to_string(head))
    return evaluate(proc.body, proc.env.child_frame(zip(proc.params, args)))


def eval_define(expr, args, env):
    """(define <symbol> <expr>): binds in the current frame and returns the bound value."""
    if len(args) != 2 or not isinstance(args[0], Symbol):
        raise MalformedSpecialForm("define", to_string(expr))

    name, value_expr = args
    value = evaluate(value_expr, env)
    env.define(name.name, value)

    logger.debug("defined %s = %r", name.name, value)
    return value


def eval_lambda(expr, args, env):
    """(lambda <params> <body>), where <params> is a symbol, a list of symbols, or several bare symbols."""
    if len(args) < 2:
        raise MalformedSpecialForm("lambda", to_string(expr))

    *params, body = args
    if len(params) == 1 and isinstance(params[0], List):
        params = params[0].items

    if not all(isinstance(param, Symbol) for param in params):
        raise MalformedSpecialForm("lambda", to_string(expr))

    names = tuple(param.name for param in params)
    if len(set(names)) != len(names):
        raise MalformedSpecialForm("lambda", to_string(expr))

    closure = Closure(names, body, env)
    logger.debug("created %r", closure)
    return closure


def eval_if(expr, args, env):
    """(if <cond> <then> [<else>]): evaluates exactly one branch."""
    if len(args) not in (2, 3):
        raise MalformedSpecialForm("if", to_string(expr))

    if truthy(evaluate(args[0], env)):
        return evaluate(args[1], env)
    elif len(args) == 3:
        return evaluate(args[2], env)
    return UNIT


def eval_begin(expr, args, env):
    """(begin <expr>*): evaluates in order in the same frame, returns the last value."""
    result = UNIT
    for arg in args:
        result = evaluate(arg, env)
    return result


SPECIAL_FORMS = {
    "define": eval_define,
    "lambda": eval_lambda,
    "if": eval_if,
    "begin": eval_begin,
}


def run(source, env):
    """Reads and evaluates every top-level form of source in env, returning the value of the last one (Unit if none).
    """
    result = UNIT
    for expr in read(source):
        result = evaluate(expr, env)
    return result
