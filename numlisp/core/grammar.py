"""numlisp abstract syntax tree and parser.

Formally, the language grammar can be succinctly defined as
<Expression> ::= <Number>                   ; a float literal, see core/lexical.py
               | <Symbol>                   ; identifiers, operators and keywords alike
               | "(" <Expression>* ")"      ; a List: special form or application

Numbers and Symbols are the only terminals. Expressions are immutable: the evaluator reads them but never changes them,
so a Closure can safely keep a reference to its body.
"""

from abc import ABC
from dataclasses import dataclass, field

from numlisp.core.lexical import TokenType, tokenize
from numlisp.lang.error import UnbalancedParens, UnexpectedToken


class Expression(ABC):
    """Superclass for every node of the syntax tree."""

    def __str__(self):
        return to_string(self)


class Atom(Expression):
    """Leaf expression: Number or Symbol."""


@dataclass(frozen=True, repr=False)
class Number(Atom):
    value: float
    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)

    def __repr__(self):
        return f"Number({self.value!r})"


@dataclass(frozen=True, repr=False)
class Symbol(Atom):
    name: str
    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)

    def __repr__(self):
        return f"Symbol({self.name!r})"


@dataclass(frozen=True, repr=False)
class List(Expression):
    items: tuple = ()
    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    def __repr__(self):
        return f"List({list(self.items)!r})"


def _read(token, tokens, source):
    """Builds one Expression starting at token, pulling more tokens from tokens as needed."""
    if token.kind is TokenType.LEFT_PAREN:
        items = []
        for next_token in tokens:
            if next_token.kind is TokenType.RIGHT_PAREN:
                return List(items, token.start, next_token.end)
            items.append(_read(next_token, tokens, source))
        raise UnbalancedParens(source, token.start)

    elif token.kind is TokenType.RIGHT_PAREN:
        raise UnexpectedToken(source, token)

    elif token.kind is TokenType.NUMBER:
        return Number(token.value, token.start, token.end)

    return Symbol(token.value, token.start, token.end)


def parse(tokens, source=""):
    """Parses every top-level expression in tokens, in source order. source is only used for error messages."""
    tokens = iter(tokens)
    return [_read(token, tokens, source) for token in tokens]


def read(source):
    """Tokenizes and parses source."""
    return parse(tokenize(source), source)


def format_number(value):
    """Canonical text of a float: repr, so 3.0 stays '3.0' and inf/nan stay readable."""
    return repr(float(value))


def to_string(expr):
    """Renders expr back to numlisp source."""
    if isinstance(expr, Number):
        return format_number(expr.value)
    if isinstance(expr, Symbol):
        return expr.name
    return "(" + " ".join(to_string(item) for item in expr.items) + ")"
