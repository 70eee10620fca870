"""Runtime values. A Python float is numlisp's only number type; everything else a program can produce is defined here.
"""

from dataclasses import dataclass

from numlisp.core.grammar import format_number
from numlisp.lang.error import ArityMismatch, DivisionByZero, DomainError, TypeMismatch


class Unit:
    """Result of forms with no meaningful value: an empty begin, or an if with no else branch taken."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "nil"


UNIT = Unit()


@dataclass(eq=False)
class Closure:
    """A lambda paired with the environment it was created in."""
    params: tuple
    body: object
    env: object

    @property
    def arity(self):
        return len(self.params)

    def __repr__(self):
        return f"<closure ({' '.join(self.params)})>"


@dataclass(frozen=True, eq=False)
class Primitive:
    """Built-in numeric operation. Takes floats only; variadic primitives take at least arity arguments."""
    name: str
    func: object
    arity: int
    variadic: bool = False

    def __call__(self, *args):
        if len(args) < self.arity or (len(args) > self.arity and not self.variadic):
            raise ArityMismatch(self.arity, len(args), self.name, at_least=self.variadic)

        for arg in args:
            if not is_number(arg):
                raise TypeMismatch(self.name, to_string(arg))

        try:
            return float(self.func(*args))
        except ZeroDivisionError:
            raise DivisionByZero(self.name)
        except (ValueError, OverflowError):
            raise DomainError(self.name)

    def __repr__(self):
        return f"<builtin {self.name}>"


def is_number(value):
    return isinstance(value, float)


def is_callable(value):
    return isinstance(value, (Closure, Primitive))


def truthy(value):
    """0.0 and Unit are false. Every other value, NaN and callables included, is true."""
    if is_number(value):
        return value != 0.0  # nan != 0.0
    return value is not UNIT


def to_string(value):
    """Textual form of a value, as printed by the shell."""
    if is_number(value):
        return format_number(value)
    if isinstance(value, Closure):
        return "<closure>"
    return repr(value)
