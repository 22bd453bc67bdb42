"""Expression trees for the numlambda language. Nodes are immutable, so a sub-tree can be shared by reference between
its parse position and any closure that captures it.

```
<term> ::= Abstraction(parameter_name, body)
         | Application(function, argument)
         | Arithmetic(op, left, right)              ; op in + - * /
         | Comparison(op, left, right)              ; op in > >= < <= == !=
         | Conditional(condition, then_branch, else_branch)
         | Variable(name)
         | NumberLiteral(value)
         | BoolLiteral(value)
```
"""

from dataclasses import dataclass, fields
from typing import Union

from numlambda.lang.lexical import Operator


@dataclass(frozen=True)
class Abstraction:
    parameter_name: str
    body: "Expr"


@dataclass(frozen=True)
class Application:
    function: "Expr"
    argument: "Expr"


@dataclass(frozen=True)
class Arithmetic:
    op: Operator
    left: "Expr"
    right: "Expr"

    def __post_init__(self):
        assert self.op.is_arithmetic, f"{self.op} is not an arithmetic operator"


@dataclass(frozen=True)
class Comparison:
    op: Operator
    left: "Expr"
    right: "Expr"

    def __post_init__(self):
        assert self.op.is_comparison, f"{self.op} is not a comparison operator"


@dataclass(frozen=True)
class Conditional:
    condition: "Expr"
    then_branch: "Expr"
    else_branch: "Expr"


@dataclass(frozen=True)
class Variable:
    name: str


@dataclass(frozen=True)
class NumberLiteral:
    value: float


@dataclass(frozen=True)
class BoolLiteral:
    value: bool


Expr = Union[Abstraction, Application, Arithmetic, Comparison, Conditional, Variable, NumberLiteral, BoolLiteral]
NODES = (Abstraction, Application, Arithmetic, Comparison, Conditional, Variable, NumberLiteral, BoolLiteral)


def display(expr, indents=0):
    """Recursively displays an expression tree with readable format.

    Format:
    <Node>(<attr>=<value>, nodes=[
        <Node>(<attr>=<value>, nodes=[
            ...
            <Node>(<attr>=<value>)  # <-- leaf
        ])
    ])
    """
    attrs, nodes = [], []
    for node_field in fields(expr):
        value = getattr(expr, node_field.name)
        if isinstance(value, NODES):
            nodes.append(value)
        elif isinstance(value, Operator):
            attrs.append(f"{node_field.name}='{value.value}'")
        else:
            attrs.append(f"{node_field.name}={value!r}")

    result = f"{'    ' * indents}{type(expr).__name__}({', '.join(attrs)}"
    if nodes:
        result += (", " if attrs else "") + "nodes=["
        for node in nodes:
            result += "\n" + display(node, indents + 1) + ","
        result = result[:-1] + f"\n{'    ' * indents}]"
    return result + ")"
