"""Runtime values of the numlambda language: Number, Boolean and Closure."""

from dataclasses import dataclass
from typing import Union

from numlambda.lang.environment import Environment
from numlambda.lang.term import Expr


@dataclass(frozen=True)
class Number:
    value: float

    kind = "Number"

    def __str__(self):
        text = repr(float(self.value))
        return text[:-2] if text.endswith(".0") else text


@dataclass(frozen=True)
class Boolean:
    value: bool

    kind = "Boolean"

    def __str__(self):
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Closure:
    """A function value: an Abstraction together with the Environment it was evaluated in."""
    parameter_name: str
    body: Expr
    captured_environment: Environment

    kind = "Closure"

    def __str__(self):
        return "Closure"


Value = Union[Number, Boolean, Closure]
