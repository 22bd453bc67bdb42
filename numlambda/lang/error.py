"""Error handling for the numlambda language. Every stage of the pipeline raises a subclass of GenericException; if any
other type of error makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Taxonomy:

```
GenericException
 |-- LexicalError           ; raised by the tokenizer
 |    |-- EmptyInputError
 |    `-- IllegalCharacterError
 |-- ParseError             ; raised by the parser
 `-- EvaluationError        ; raised by the evaluator
      |-- TypeMismatchError
      `-- UnboundNameError
```
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a numlambda error/warning. start and end
    delimit the offending part of the source line (start=-1 when the error has no source position).
    """

    def __init__(self, msg, exprs=None, start=-1, end=-1, diagnosis=True, internal=False):
        if exprs is None:
            exprs = []
        if isinstance(exprs, str):
            exprs = [exprs]

        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.start = start
        self.end = end if end != -1 else start + 1

        self.diagnosis = diagnosis and start != -1
        self.internal = internal

        super().__init__(msg.format(*exprs))


class LexicalError(GenericException):
    """Superclass for errors raised during tokenization."""


class EmptyInputError(LexicalError):

    def __init__(self):
        super().__init__("the provided program is empty", diagnosis=False)


class IllegalCharacterError(LexicalError):

    def __init__(self, char, position):
        self.char = char
        self.position = position
        super().__init__("character '{}' is an illegal character", char, start=position)


class ParseError(GenericException):
    """Raised when no grammar production matches a token slice. unexpected_token is None at end of input."""

    def __init__(self, unexpected_token):
        self.unexpected_token = unexpected_token

        if unexpected_token is None:
            super().__init__("unexpected end of input", diagnosis=False)
        else:
            start = unexpected_token.pos
            end = start + len(unexpected_token.text) if start != -1 else -1
            super().__init__("the token '{}' isn't authorized here", unexpected_token.text, start=start, end=end)


class EvaluationError(GenericException):
    """Superclass for errors raised during evaluation. Expression trees carry no source positions."""


class TypeMismatchError(EvaluationError):

    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__("type needed: {}, but got type {}", (expected, actual))


class UnboundNameError(EvaluationError):

    def __init__(self, name):
        self.name = name
        super().__init__("unknown name '{}': this name is not bound to a value", name)


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom numlambda errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session.execute."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after a successful Session.execute."""
        self.traceback[path] = (None, None)

    def current_line(self):
        """Returns the most recently registered source line, or None."""
        for line, __ in reversed(list(self.traceback.values())):
            if line:
                return line
        return None

    @staticmethod
    def diagnose(error, line, warning=False):
        """Returns offending part of line highlighted and bolded, with a caret underneath."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR
        start = min(error.start, len(line))
        end = max(error.end, start + 1)

        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), color, attrs=["bold"])

        return diagnosis

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        error = GenericException(*args, **kwargs)

        location = ""
        for file, (line, line_num) in self.traceback.items():
            if line:
                location = f"{file}:{line_num}: "

        error_msg = colored(location, attrs=["bold"])
        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg
        print(error_msg, file=sys.stderr)

        line = self.current_line()
        if error.diagnosis and line:
            print(ErrorHandler.diagnose(error, line, warning=True), file=sys.stderr)

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a GenericException, and self.traceback must be a
        dict of file: (line, line_num) representing origination of error.
        """
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines > 1:
            error_msg = "Traceback:\n" + error_msg
        else:
            error_msg = ""

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg, file=sys.stderr)

        line = self.current_line()
        if not error.internal and error.diagnosis and line:
            print(ErrorHandler.diagnose(error, line), file=sys.stderr)

        if self.fatal:
            sys.exit(1)

        for file in self.traceback:  # if error occurred, reset traceback (no need if error is fatal)
            self.remove_line(file)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded (try --recursion-limit)"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
