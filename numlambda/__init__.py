"""numlambda: a tree-walking interpreter for the untyped lambda calculus with numbers, booleans, comparisons and a
ternary conditional.
"""

from numlambda.interpreter import execute

__all__ = ["execute"]
