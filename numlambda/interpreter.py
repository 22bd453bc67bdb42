"""Lambda calculus interpreter, extended with floating-point numbers, booleans, comparisons and a ternary conditional.

Basic program flow:
    1. Tokenizer: splits source text into Tokens, see numlambda/lang/lexical.py
    2. Parser: produces an expression tree by recursively matching grammar productions against token slices, see
       numlambda/lang/grammar.py
    3. Evaluator: walks the expression tree with an Environment, producing a Value, see numlambda/lang/evaluator.py

The first error raised by any stage aborts the rest of the pipeline.
"""

from numlambda.lang.evaluator import evaluate
from numlambda.lang.grammar import parse
from numlambda.lang.lexical import tokenize


def execute(source):
    """Tokenizes, parses and evaluates source, returning the resulting Value. Raises a GenericException subclass on
    the first error encountered.
    """
    return evaluate(parse(tokenize(source)))
