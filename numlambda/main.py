"""Runs the numlambda interpreter on a file, or in command-line mode. Also uses error handling context manager. Called
from the numlambda console script and from `python -m numlambda`.
"""

import argparse
import sys

from numlambda.lang.error import ErrorHandler
from numlambda.lang.session import Session
from numlambda.lang.shell import Shell


def build_parser():
    parser = argparse.ArgumentParser(prog="numlambda", description="Lambda calculus interpreter with numbers.")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--tokens", action="store_true", help="print the tokens of every input before its value")
    parser.add_argument("--ast", action="store_true", help="print the expression tree of every input before its value")
    parser.add_argument("--recursion-limit", type=int, default=None, metavar="N",
                        help="maximum Python recursion depth (there is no tail-call elimination)")
    return parser


def main(argv=None):
    """Runs numlambda interpreter. Returns exit status."""
    args = build_parser().parse_args(argv)

    if args.recursion_limit is not None:
        sys.setrecursionlimit(args.recursion_limit)

    with ErrorHandler() as error_handler:
        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, show_tokens=args.tokens, show_ast=args.ast)
            print(sess.run())

        else:
            sess = Session(error_handler, Session.SH_FILE, cmd_line=True, show_tokens=args.tokens, show_ast=args.ast)
            Shell(sess).cmdloop()

    return 0


if __name__ == "__main__":
    sys.exit(main())
