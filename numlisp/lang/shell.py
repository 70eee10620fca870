"""Handles interactive/command-line mode for the numlisp interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """numlisp interpreter shell."""
    intro = "numlisp interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Executes arbitrary numlisp command."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            joined = f"{self._tmp_line} {line}" if self._tmp_line else line
            line, add_to_prev = self.sess.preprocess_line(joined, self.line_num, self._tmp_line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            self.sess.add(line, self.line_num)
            self.sess.run()

        while self.sess.results:
            print(self.sess.pop())

    def onecmd(self, line):
        """Sends every line to default while a form is open, so continuation lines are never read as commands. EOF
        still exits, after reporting the unfinished form.
        """
        if line == "EOF" and self._tmp_line:
            pending, self._tmp_line = self._tmp_line, ""
            self.prompt = self._tmp_prompt
            with self.sess.error_handler:
                self.sess.add(pending, self.line_num)  # raises UnbalancedParens
            return self.do_EOF(line)

        if self._tmp_line:
            return self.default(line)
        return super().onecmd(line)

    def completenames(self, text, *ignored):
        """Only complete names bound in the session, since every line is numlisp source."""
        return sorted(name for name in self._visible_names() if name.startswith(text))

    def _visible_names(self):
        env, names = self.sess.env, set()
        while env is not None:
            names.update(env.bindings)
            env = env.parent
        return names

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the numlisp interpreter!\n\n"
              "numlisp is a small Lisp whose only values are floating-point numbers and functions. \n"
              "It supports the special forms define, lambda, if and begin, plus arithmetic, \n"
              "comparison and math builtins such as +, <=, ^, sin and ln.\n\n"
              "Try it out by typing '(define square (lambda x (* x x)))'. This will bind a \n"
              "function to the name 'square'. Next, try typing '(square 4)', giving '16.0' as \n"
              "the result.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
