"""Session control for the numlambda language. Runs the interpreter either in command-line mode or file interpretation
mode, and echoes intermediate stages when asked to.
"""

import math

from termcolor import colored

from numlambda.interpreter import execute
from numlambda.lang.error import GenericException
from numlambda.lang.grammar import parse
from numlambda.lang.lexical import tokenize
from numlambda.lang.term import display
from numlambda.lang.values import Number


class Session:
    """Governs a numlambda session: registers every input with the error handler and keeps track of results."""
    SH_FILE = "<in>"  # command-line interpreter filename
    COMMENT = ";;"

    def __init__(self, error_handler, path, cmd_line, show_tokens=False, show_ast=False):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path                # used for error messages
        self.cmd_line = cmd_line        # whether or not in command-line mode
        self.show_tokens = show_tokens  # echo token stream of every input
        self.show_ast = show_ast        # echo expression tree of every input

        self.results = []

        if self.cmd_line:
            self.error_handler.fatal = False

        if path == Session.SH_FILE and not cmd_line:
            raise GenericException("'{}' is a reserved filename", path)

    @staticmethod
    def preprocess_line(line):
        """Strips comments and trailing whitespace from line. Returns updated value of line and whether or not the line
        leaves parentheses open (in which case it should be continued).
        """
        if Session.COMMENT in line:
            line = line[:line.index(Session.COMMENT)]

        line = line.rstrip()
        return line, line.count("(") > line.count(")")

    def read(self):
        """Reads self.path and returns its contents as one line, with comments stripped and lines joined by spaces."""
        try:
            with open(self.path, "r", encoding="utf-8") as file:
                lines = [Session.preprocess_line(line)[0] for line in file]
        except OSError:
            raise GenericException("'{}' could not be opened", self.path)

        return " ".join(line.strip() for line in lines if line.strip())

    def run(self):
        """Runs the file this session was created with. Must not be called in command-line mode."""
        source = self.read()
        return self.execute(source, 1)

    def execute(self, line, line_num):
        """Executes line, registering it in case an error is raised. Returns the resulting Value."""
        self.error_handler.register_line(self.path, line, line_num)

        if self.show_tokens:
            self.echo("tokens", " ".join(repr(token) for token in tokenize(line)))
        if self.show_ast:
            self.echo("ast", display(parse(tokenize(line))))

        value = execute(line)
        if isinstance(value, Number) and not math.isfinite(value.value):
            self.error_handler.warn("result '{}' is not a finite number", str(value))

        self.results.append(value)
        self.error_handler.remove_line(self.path)  # error was not raised
        return value

    def pop(self):
        """Returns and removes the most recent result."""
        return self.results.pop()

    @staticmethod
    def echo(stage, text):
        print(colored(f"{stage}:", "cyan", attrs=["bold"]), text)
