"""Tree-walking evaluation of numlambda expression trees.

Evaluation is strict and environment based: an Abstraction evaluates to a Closure over the current Environment, and
applying a Closure evaluates its body in the captured Environment extended with the argument. Scoping is therefore
lexical. Note that there is no tail-call elimination, so Python's recursion limit bounds how deep a program may
recurse.
"""

import math
import operator

from numlambda.lang.environment import Environment
from numlambda.lang.error import TypeMismatchError, UnboundNameError
from numlambda.lang.lexical import Operator
from numlambda.lang.term import (
    Abstraction, Application, Arithmetic, BoolLiteral, Comparison, Conditional, NumberLiteral, Variable
)
from numlambda.lang.values import Boolean, Closure, Number


def divide(x, y):
    """IEEE-754 division: x / 0 is +-inf, or nan if x is 0 or nan."""
    try:
        return x / y
    except ZeroDivisionError:
        if x == 0 or math.isnan(x):
            return math.nan
        return math.copysign(math.inf, x) * math.copysign(1.0, y)


ARITHMETIC = {
    Operator.ADD: operator.add,
    Operator.SUB: operator.sub,
    Operator.MUL: operator.mul,
    Operator.DIV: divide,
}

COMPARISON = {
    Operator.GT: operator.gt,
    Operator.GTE: operator.ge,
    Operator.LT: operator.lt,
    Operator.LTE: operator.le,
    Operator.EQ: operator.eq,
    Operator.NEQ: operator.ne,
}


def evaluate(expr):
    """Evaluates expr in an empty Environment."""
    return evaluate_in(expr, Environment())


def evaluate_in(expr, env):
    """Evaluates expr in env. Raises an EvaluationError on the first failure."""
    if isinstance(expr, Abstraction):
        return Closure(expr.parameter_name, expr.body, env)

    elif isinstance(expr, Application):
        argument = evaluate_in(expr.argument, env)  # argument is evaluated before the function
        function = expect(evaluate_in(expr.function, env), Closure)
        return evaluate_in(function.body, function.captured_environment.extend(function.parameter_name, argument))

    elif isinstance(expr, Arithmetic):
        left, right = evaluate_operands(expr, env)
        return Number(ARITHMETIC[expr.op](left.value, right.value))

    elif isinstance(expr, Comparison):
        left, right = evaluate_operands(expr, env)
        return Boolean(COMPARISON[expr.op](left.value, right.value))

    elif isinstance(expr, Conditional):
        condition = expect(evaluate_in(expr.condition, env), Boolean)
        return evaluate_in(expr.then_branch if condition.value else expr.else_branch, env)

    elif isinstance(expr, Variable):
        try:
            return env[expr.name]
        except KeyError:
            raise UnboundNameError(expr.name) from None

    elif isinstance(expr, NumberLiteral):
        return Number(expr.value)

    elif isinstance(expr, BoolLiteral):
        return Boolean(expr.value)

    raise TypeError(f"'{type(expr).__name__}' is not an expression")


def evaluate_operands(expr, env):
    """Evaluates both operands of a binary operation, left first, and only then checks that both are Numbers."""
    left = evaluate_in(expr.left, env)
    right = evaluate_in(expr.right, env)
    return expect(left, Number), expect(right, Number)


def expect(value, value_type):
    """Returns value if it is a value_type, raises TypeMismatchError otherwise."""
    if not isinstance(value, value_type):
        raise TypeMismatchError(value_type.kind, value.kind)
    return value
