"""Lexical analysis for numlisp: turns source text into a lazy stream of Tokens.

The token grammar can be loosely defined as follows:

```
<left_paren>  ::= "("
<right_paren> ::= ")"
<number>      ::= [+-]? (<digits> ("." <digits>?)? | "." <digits>) ([eE] [+-]? <digits>)?
<symbol>      ::= <symbol_char>+                 ; any run that is not a <number>
<symbol_char> ::= [A-Za-z0-9] | one of "+-*/^<>=!?_.%&:~$"
```

Whitespace separates tokens and is otherwise discarded. Parentheses are always single tokens, even when touching atoms,
so "(foo)" is "(", "foo", ")". Comments are not part of the token grammar: they are stripped by the session.
"""

import re
from dataclasses import dataclass, field
from enum import Enum

from numlisp.lang.error import LexError


class TokenType(Enum):
    LEFT_PAREN = "("
    RIGHT_PAREN = ")"
    SYMBOL = "symbol"
    NUMBER = "number"


@dataclass(frozen=True)
class Token:
    """A single token. start and end are offsets into the source, used only for error messages."""
    kind: TokenType
    text: str
    value: object = None
    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)

    @classmethod
    def atom(cls, text, start=0):
        """Classifies text as a NUMBER or SYMBOL token. Assumes text is a run of valid atom characters."""
        if NUMBER.fullmatch(text):
            return cls(TokenType.NUMBER, text, float(text), start, start + len(text))
        return cls(TokenType.SYMBOL, text, text, start, start + len(text))

    def __repr__(self):
        if self.kind in (TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN):
            return f"Token({self.text!r})"
        return f"Token({self.kind.name}, {self.value!r})"


WHITESPACE = " \t\n\r\f\v"
PARENS = {"(": TokenType.LEFT_PAREN, ")": TokenType.RIGHT_PAREN}
SYMBOL_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789+-*/^<>=!?_.%&:~$")
NUMBER = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def tokenize(source):
    """Lazily yields Tokens from source. Raises LexError when a character outside the token grammar is reached."""
    pos = 0
    while pos < len(source):
        char = source[pos]

        if char in WHITESPACE:
            pos += 1

        elif char in PARENS:
            yield Token(PARENS[char], char, None, pos, pos + 1)
            pos += 1

        else:
            start = pos
            while pos < len(source) and source[pos] not in WHITESPACE and source[pos] not in PARENS:
                if source[pos] not in SYMBOL_CHARS:
                    raise LexError(source, pos)
                pos += 1
            yield Token.atom(source[start:pos], start)
