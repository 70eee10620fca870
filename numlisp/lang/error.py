"""Error handling for numlisp. Only GenericExceptions should be encountered during running: if another type of error is
raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Taxonomy:

```
GenericException
 +-- LexError                 ; unrecognized character in source
 +-- ParseError
 |    +-- UnbalancedParens    ; '(' never closed
 |    +-- UnexpectedToken     ; stray ')'
 +-- EvalError
      +-- UnboundSymbolError
      +-- EmptyApplication
      +-- MalformedSpecialForm
      +-- NotCallable
      +-- ArityMismatch
      +-- TypeMismatch
      +-- DivisionByZero
      +-- DomainError
```
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a numlisp error/warning."""

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        """Parses args for GenericException or warning."""
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = exprs[0]  # exprs[0] should be the offending expr that caused the error
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.msg)


class LexError(GenericException):

    def __init__(self, source, pos):
        self.char = source[pos]
        self.pos = pos
        super().__init__("'{}' contains unrecognized character '{}'", (source, self.char), start=pos, end=pos + 1)


class ParseError(GenericException):
    """Raised by the parser on malformed token sequences."""


class UnbalancedParens(ParseError):

    def __init__(self, source, start):
        self.pos = start
        super().__init__("'{}' has unbalanced parentheses", source, start=start, end=start + 1)


class UnexpectedToken(ParseError):

    def __init__(self, source, token):
        self.token = token
        super().__init__("unexpected token '{1}'", (source, token.text), start=token.start, end=token.end)


class EvalError(GenericException):
    """Raised by the evaluator. expr is the rendered form (or symbol) that failed."""


class UnboundSymbolError(EvalError):

    def __init__(self, name):
        self.name = name
        super().__init__("unbound symbol '{}'", name)


class EmptyApplication(EvalError):

    def __init__(self, form="()"):
        super().__init__("'{}' is an empty application", form)


class MalformedSpecialForm(EvalError):

    def __init__(self, form_name, form):
        self.form_name = form_name
        self.form = form
        super().__init__("malformed '{1}' in '{0}'", (form, form_name))


class NotCallable(EvalError):

    def __init__(self, head, value):
        self.head = head
        self.value = value
        super().__init__("'{}' evaluates to '{}', which is not callable", (head, value))


class ArityMismatch(EvalError):

    def __init__(self, expected, got, name="<closure>", at_least=False):
        self.expected = expected
        self.got = got
        self.name = name
        self.at_least = at_least

        plural = "" if expected == 1 else "s"
        qualifier = "at least " if at_least else ""
        super().__init__(f"'{{}}' expects {qualifier}{expected} argument{plural}, got {got}", name)


class TypeMismatch(EvalError):

    def __init__(self, name, value):
        self.name = name
        self.value = value
        super().__init__("'{}' expects numbers, got '{}'", (name, value))


class DivisionByZero(EvalError):

    def __init__(self, form="/"):
        super().__init__("'{}' divides by zero", form)


class DomainError(EvalError):

    def __init__(self, name):
        self.name = name
        super().__init__("'{}' got an argument outside its domain", name)


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom numlisp errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.expr highlighted and bolded."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.expr[error.start:end], color, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        error = GenericException(*args, **kwargs)

        file, (line, line_num) = next(iter(self.traceback.items()))
        col = max(line.find(error.expr), 0) + error.start if line else error.start

        error_msg = colored(f"{file}:{line_num}:{col}: ", attrs=["bold"])
        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg

        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error, warning=True))

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a GenericException, and self.traceback must be a
        dict of file: (line, line_num) representing origination of error.
        """
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # assumes dict is insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines > 1:
            error_msg = "Traceback:\n" + error_msg

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)
        for file in self.traceback:  # if error occurred, reset traceback (no need if error is fatal)
            self.traceback[file] = (None, None)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded (see --recursion-limit)"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            details = f"{exc_type.__name__}: {exc_val}".replace("{", "{{").replace("}", "}}")
            self.throw(GenericException(f"unknown error: '{details}'", internal=True))
            do_exit = True

        return not do_exit
