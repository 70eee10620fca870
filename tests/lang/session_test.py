import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout

from numlisp.lang.error import ErrorHandler, GenericException, UnbalancedParens, UnboundSymbolError
from numlisp.lang.session import Session


class PreprocessLineTestCase(unittest.TestCase):

    def test_comments(self):
        cases = {
            "(+ 1 2) ; adds": ("(+ 1 2)", False),
            "; only a comment": ("", False),
            "(define f   ": ("(define f", True),
            "(a (b)) )": ("(a (b)) )", False),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, Session.preprocess_line(case, 1, False), case)

    def test_continuations(self):
        lines = ["(define square ; a comment", "  (lambda x", "", "    (* x x)))", "(square 3)", "; done"]

        exprs = []
        add_to_prev = False
        for line_num, line in enumerate(lines):
            __, add_to_prev = Session.preprocess_line(line, line_num + 1, add_to_prev, exprs)

        self.assertFalse(add_to_prev)
        self.assertEqual([("(define square (lambda x (* x x)))", 1), ("(square 3)", 5)], exprs)


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.error_handler = ErrorHandler(fatal=False)
        self.sess = Session(self.error_handler, Session.SH_FILE, cmd_line=True)

    def test_persistent_env(self):
        self.sess.add("(define x 5)", 1)
        self.sess.run()
        self.sess.add("(* x x)", 2)
        self.sess.run()

        self.assertEqual(["5.0", "25.0"], [self.sess.pop(), self.sess.pop()])
        self.assertEqual([], self.sess.results)

    def test_many_forms(self):
        self.sess.add("(define f (lambda x (+ x 1))) (f 1) (f 2)", 1)
        self.sess.run()
        self.assertEqual(["<closure>", "2.0", "3.0"], [self.sess.pop() for __ in range(3)])

    def test_unit_not_collected(self):
        self.sess.add("(begin) (if 0 1)", 1)
        self.sess.run()
        self.assertEqual([], self.sess.results)

    def test_empty(self):
        self.sess.add("   ", 1)
        self.sess.run()
        self.assertEqual({}, self.sess.to_exec)

    def test_errors(self):
        self.assertRaises(UnbalancedParens, self.sess.add, "(+ 1", 1)

        self.sess.add("(define y 1) (undefined) (define z 2)", 2)
        self.assertRaises(UnboundSymbolError, self.sess.run)
        self.assertEqual({}, self.sess.to_exec)

        self.sess.add("y", 3)
        self.sess.run()
        self.assertEqual(["1.0", "1.0"], [self.sess.pop(), self.sess.pop()])
        self.assertNotIn("z", self.sess.env)

    def test_error_handler_recovers(self):
        out = io.StringIO()
        with redirect_stdout(out):
            with self.error_handler:
                self.sess.add("(foo 1 2)", 1)
                self.sess.run()
        self.assertIn("unbound symbol", out.getvalue())

        self.sess.add("(+ 1 2)", 2)
        self.sess.run()
        self.assertEqual("3.0", self.sess.pop())

    def test_shadow_warning(self):
        out = io.StringIO()
        with redirect_stdout(out):
            self.sess.add("(define + 1)", 1)
            self.sess.run()
        self.assertIn("warning: ", out.getvalue())

        out = io.StringIO()
        with redirect_stdout(out):
            self.sess.add("(define + 2) (define x 3)", 2)
            self.sess.run()
        self.assertEqual("", out.getvalue())

    def test_cmd_line(self):
        error_handler = ErrorHandler(fatal=True)
        Session(error_handler, Session.SH_FILE, cmd_line=True)
        self.assertFalse(error_handler.fatal)


class FileSessionTestCase(unittest.TestCase):

    def write(self, source):
        fd, path = tempfile.mkstemp(suffix=".nl")
        with os.fdopen(fd, "w") as file:
            file.write(source)
        self.addCleanup(os.remove, path)
        return path

    def test_file(self):
        path = self.write("; factorial\n"
                          "(define factorial\n"
                          "  (lambda n (if (<= n 1) 1 (* n (factorial (- n 1))))))\n"
                          "\n"
                          "(factorial 5) (factorial 6)\n")

        sess = Session(ErrorHandler(), path, cmd_line=False)
        self.assertEqual([2, 5], list(sess.to_exec))

        sess.run()
        self.assertEqual(["<closure>", "120.0", "720.0"], [sess.pop() for __ in range(3)])

    def test_missing_file(self):
        with self.assertRaises(GenericException):
            Session(ErrorHandler(), os.path.join(tempfile.gettempdir(), "does-not-exist.nl"), cmd_line=False)

    def test_parse_error_in_file(self):
        path = self.write("(+ 1 2)\n(+ 1 2))\n")
        self.assertRaises(GenericException, Session, ErrorHandler(), path, cmd_line=False)


if __name__ == '__main__':
    unittest.main()
