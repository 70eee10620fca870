"""Session control for numlisp. Feeds source text to the core to run the interpreter, either in command-line mode,
file interpretation mode, or on a single expression passed with -e.
"""

import logging

from numlisp.core.evaluator import evaluate
from numlisp.core.grammar import List, Symbol, read
from numlisp.core.numerical import standard_env
from numlisp.core.value import UNIT, to_string
from numlisp.lang.error import GenericException

logger = logging.getLogger(__name__)


class Session:
    """Governs a numlisp session, which owns a single top-level environment for its whole lifetime."""
    SH_FILE = "<in>"    # command-line interpreter filename
    ARG_FILE = "<arg>"  # source passed on the command line
    COMMENT = ";"

    def __init__(self, error_handler, path=SH_FILE, cmd_line=True):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.env = standard_env()
        self.builtins = dict(self.env.bindings)  # used to warn when a builtin is shadowed
        self.to_exec = {}   # dict of line num: list of parsed forms to evaluate
        self.results = []   # values produced by run that have not been popped yet

        if self.cmd_line:
            self.error_handler.fatal = False

        if path not in (Session.SH_FILE, Session.ARG_FILE):
            exprs = []
            add_to_prev = False

            try:
                with open(path, "r") as file:
                    for line_num, line in enumerate(file):
                        __, add_to_prev = self.preprocess_line(line, line_num + 1, add_to_prev, exprs)
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            logger.debug("loaded %d expression(s) from %s", len(exprs), path)
            for expr, line_num in exprs:
                self.add(expr, line_num)

    @staticmethod
    def preprocess_line(line, line_num, add_to_prev, exprs=None):
        """Preprocesses a line from a file or command-line. In command-line mode, exprs can be ignored (used to keep
        track of file's exprs), but add_to_prev will indicate whether a line continuation is necessary. Returns
        updated value of line and add_to_prev. Must be called before calling add.
        """
        if Session.COMMENT in line:
            line = line[:line.index(Session.COMMENT)]  # get rid of comments
        line = line.rstrip()

        if exprs is not None:
            if add_to_prev and exprs:
                prev, prev_line_num = exprs.pop()
                line = f"{prev} {line.strip()}" if line.strip() else prev
                exprs.append((line, prev_line_num))
            elif line.strip():
                exprs.append((line, line_num))

        return line, line.count("(") > line.count(")")

    def add(self, expr, line_num):
        """Parses expr and queues its forms under line_num. Evaluation is delayed until run is called."""
        if not expr.strip():
            return

        self.error_handler.register_line(self.path, expr, line_num)  # in case error is raised
        self.to_exec[line_num] = read(expr)
        self.error_handler.remove_line(self.path)  # error was not raised

    def run(self):
        """Runs this session's queued forms in order. Will raise the first error that is encountered, leaving
        bindings made before it in place.
        """
        for line_num, forms in list(self.to_exec.items()):
            self.error_handler.register_line(self.path, " ".join(str(form) for form in forms), line_num)
            logger.debug("running %d form(s) from line %d", len(forms), line_num)

            try:
                for form in forms:
                    self._check_shadowing(form)
                    result = evaluate(form, self.env)
                    if result is not UNIT:
                        self.results.append(result)
            finally:
                del self.to_exec[line_num]  # a failed batch is not retried

            self.error_handler.remove_line(self.path)

    def pop(self):
        """Removes the oldest result and returns its printed form."""
        return to_string(self.results.pop(0))

    def _check_shadowing(self, form):
        """Warns when a top-level define rebinds one of the standard environment's names."""
        if isinstance(form, List) and len(form) == 3 and form[0] == Symbol("define") and isinstance(form[1], Symbol):
            name = form[1].name
            if name in self.builtins and self.env.bindings.get(name) is self.builtins[name]:
                self.error_handler.warn("'{}' shadows a builtin", name)
