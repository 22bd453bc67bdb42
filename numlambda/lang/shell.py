"""Handles interactive/command-line mode for the numlambda interpreter. Uses cmd as backend."""

import cmd

from numlambda.lang.grammar import parse
from numlambda.lang.lexical import tokenize
from numlambda.lang.term import display


class Shell(cmd.Cmd):
    """Lambda calculus interpreter shell."""
    intro = "Lambda calculus interpreter :: numbers, booleans and conditionals\nType 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Executes arbitrary numlambda expression."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line, add_to_prev = self.sess.preprocess_line(f"{self._tmp_line} {line}" if self._tmp_line else line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
            else:
                self._tmp_line = ""
                self.prompt = self._tmp_prompt

                if not line.strip():
                    return  # only a comment, nothing to run

                self.sess.execute(line, self.line_num)
                print(self.sess.pop())

    def do_tokens(self, arg):
        """Prints the tokens of an expression: tokens EXPR"""
        with self.sess.error_handler:
            self.line_num += 1
            self.sess.error_handler.register_line(self.sess.path, arg, self.line_num)
            print(" ".join(repr(token) for token in tokenize(arg)))
            self.sess.error_handler.remove_line(self.sess.path)

    def do_ast(self, arg):
        """Prints the expression tree of an expression: ast EXPR"""
        with self.sess.error_handler:
            self.line_num += 1
            self.sess.error_handler.register_line(self.sess.path, arg, self.line_num)
            print(display(parse(tokenize(arg))))
            self.sess.error_handler.remove_line(self.sess.path)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the numlambda interpreter!\n\n"
              "Abstractions are written '\\x.body' and applied by juxtaposition: '(\\x.x+1) 2' gives 3. \n"
              "Numbers are floating-point, and the operators + - * / > >= < <= == != are available, \n"
              "as well as the conditional 'cond ? then : else'. Abstractions close over the \n"
              "variables in scope where they are written.\n\n"
              "Commands: 'tokens EXPR' and 'ast EXPR' show how EXPR is tokenized and parsed; \n"
              "'exit' or 'quit' leaves the interpreter.")

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

    do_quit = do_exit
