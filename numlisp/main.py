"""Runs numlisp source files, a single expression, or the interactive shell. Also uses the error handling context
manager. Called from the numlisp console script.
"""

import argparse
import logging
import os
import sys

from numlisp.lang.error import ErrorHandler
from numlisp.lang.session import Session
from numlisp.lang.shell import Shell


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="numlisp", description="Interpreter for a floating-point Lisp.")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("-e", "--eval", metavar="EXPR", help="evaluate EXPR and print its results")
    parser.add_argument("--recursion-limit", type=int, metavar="N",
                        help="maximum Python recursion depth, which bounds recursion in numlisp programs")
    parser.add_argument("--no-color", action="store_true", help="disable colored error messages")
    parser.add_argument("-v", "--verbose", action="store_true", help="log evaluation steps")
    return parser.parse_args(argv)


def configure(args):
    """Applies the process-wide settings requested on the command line."""
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(name)s: %(levelname)s: %(message)s")

    if args.no_color:
        os.environ["ANSI_COLORS_DISABLED"] = "1"

    if args.recursion_limit is not None:
        sys.setrecursionlimit(args.recursion_limit)


def main(argv=None):
    """Runs numlisp interpreter. Called from numlisp executable script."""
    args = parse_args(argv)
    configure(args)

    with ErrorHandler() as error_handler:
        if args.eval is not None:
            sess = Session(error_handler, Session.ARG_FILE, cmd_line=False)
            sess.add(args.eval, 1)

        elif args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False)

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True)).cmdloop()
            return

        try:
            sess.run()
        finally:
            while sess.results:  # results of forms that ran before an error are still shown
                print(sess.pop())


if __name__ == "__main__":
    main()
