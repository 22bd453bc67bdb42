"""Parser for the numlambda language: turns a list of Tokens into an expression tree.

There is no generated grammar and no cursor. Each Production checks the *whole* token slice it is given and, if the
slice matches, splits it into sub-slices that are parsed recursively. Productions are tried in the order they are
defined below (first match wins):

```
<expr> ::= "\\" <identifier> "." <expr>          ; Abstraction, bodies are greedy: \\x.x y = \\x.(x y)
         | <expr> "?" <expr> ":" <expr>          ; Conditional
         | <expr> <expr>                         ; Application, associating by left: a b c = ((a b) c)
         | <expr> <operator> <expr>              ; BinaryOperation
         | <identifier> | <number>               ; Terminal
```

Redundant outer parentheses are stripped before any production is tried.

Operator precedence, loosest first: comparisons (> >= < <= == !=), additive (+ -), multiplicative (* /). Operators of
equal precedence associate by left. Note that application binds looser than the binary operators when it is not
parenthesized: `f x + 1` = `f (x + 1)`.
"""

from abc import ABC, abstractmethod

from numlambda.lang.error import ParseError
from numlambda.lang.lexical import Operator, TokenKind
from numlambda.lang.term import (
    Abstraction, Application, Arithmetic, BoolLiteral, Comparison, Conditional, NumberLiteral, Variable
)


def depth_change(token, reverse=False):
    """Returns how token changes paren depth when scanning left-to-right (or right-to-left if reverse)."""
    if token.kind is TokenKind.PAREN_OPEN:
        return -1 if reverse else 1
    elif token.kind is TokenKind.PAREN_CLOSE:
        return 1 if reverse else -1
    return 0


def strip_parens(tokens):
    """Strips redundant outer parentheses from tokens. `(a) (b)` is left untouched."""
    while tokens and tokens[0].kind is TokenKind.PAREN_OPEN and tokens[-1].kind is TokenKind.PAREN_CLOSE:
        depth = 0
        for token in tokens[:-1]:
            depth += depth_change(token)
            if depth == 0:
                return tokens
        tokens = tokens[1:-1]
    return tokens


def parse(tokens):
    """Converts tokens to an expression tree, raises ParseError if tokens aren't a valid expression."""
    tokens = strip_parens(list(tokens))

    for production in Production.__subclasses__():
        expr = production.parse(tokens)
        if expr is not None:
            return expr

    raise ParseError(tokens[0] if tokens else None)


class Production(ABC):
    """Superclass for grammar productions. Subclasses are tried in definition order by parse."""

    @staticmethod
    @abstractmethod
    def parse(tokens):
        """This method should check tokens' top-level grammar and return the parsed expression tree if it matches, or
        None if the next production should be tried. It should raise a ParseError if tokens' top-level grammar
        matches but is syntactically invalid.
        """


class AbstractionProduction(Production):
    """"\\" <identifier> "." <expr>"""

    @staticmethod
    def parse(tokens):
        if len(tokens) < 3:
            return None

        bind, arg, decl = tokens[:3]
        if bind.is_a(TokenKind.LAMBDA) and arg.is_a(TokenKind.IDENTIFIER) and decl.is_a(TokenKind.DOT):
            return Abstraction(arg.text, parse(tokens[3:]))
        return None


class ConditionalProduction(Production):
    """<expr> "?" <expr> ":" <expr>"""

    @staticmethod
    def parse(tokens):
        question = ConditionalProduction.find_question_mark(tokens)
        if question is None:
            return None

        depth = 0
        for idx in range(len(tokens) - 1, question, -1):
            depth += depth_change(tokens[idx], reverse=True)
            if depth == 0 and tokens[idx].is_a(TokenKind.COLON):
                return Conditional(parse(tokens[:question]), parse(tokens[question + 1:idx]), parse(tokens[idx + 1:]))

        return None

    @staticmethod
    def find_question_mark(tokens):
        """Returns index of the first top-level "?" in tokens, or None."""
        depth = 0
        for idx, token in enumerate(tokens):
            depth += depth_change(token)
            if depth == 0 and token.is_a(TokenKind.QUESTION_MARK):
                return idx
        return None


class ApplicationProduction(Production):
    """<expr> <expr>, split at the rightmost top-level juxtaposition."""
    ENDS_FUNCTION = (TokenKind.IDENTIFIER, TokenKind.PAREN_CLOSE)
    CANNOT_START_ARGUMENT = (TokenKind.OPERATOR, TokenKind.QUESTION_MARK, TokenKind.COLON, TokenKind.DOT)

    @staticmethod
    def parse(tokens):
        depth = 0
        for idx in range(len(tokens) - 1, 0, -1):
            depth += depth_change(tokens[idx], reverse=True)
            if depth != 0:
                continue

            before, at = tokens[idx - 1], tokens[idx]
            if before.kind in ApplicationProduction.ENDS_FUNCTION \
                    and at.kind not in ApplicationProduction.CANNOT_START_ARGUMENT:
                return Application(parse(tokens[:idx]), parse(tokens[idx:]))

        return None


class BinaryOperation(Production):
    """<expr> <operator> <expr>, split at the loosest-binding top-level operator (rightmost among equals)."""
    PRECEDENCE = {
        Operator.GT: 0, Operator.GTE: 0, Operator.LT: 0, Operator.LTE: 0, Operator.EQ: 0, Operator.NEQ: 0,
        Operator.ADD: 1, Operator.SUB: 1,
        Operator.MUL: 2, Operator.DIV: 2,
    }

    @staticmethod
    def parse(tokens):
        split = BinaryOperation.find_split(tokens)
        if split is None:
            return None

        operator = tokens[split]
        left, right = tokens[:split], tokens[split + 1:]
        if not left or not right:
            raise ParseError(operator)

        node = Arithmetic if operator.op.is_arithmetic else Comparison
        return node(operator.op, parse(left), parse(right))

    @staticmethod
    def find_split(tokens):
        """Returns index of the operator tokens should be split at, or None if there is no top-level operator."""
        split = None
        depth = 0
        for idx, token in enumerate(tokens):
            depth += depth_change(token)
            if depth != 0 or not token.is_a(TokenKind.OPERATOR):
                continue

            if token.op not in BinaryOperation.PRECEDENCE:
                raise ParseError(token)  # "!" is only valid as part of "!="

            precedence = BinaryOperation.PRECEDENCE[token.op]
            if split is None or precedence <= BinaryOperation.PRECEDENCE[tokens[split].op]:
                split = idx
        return split


class Terminal(Production):
    """<identifier> | <number>, where numbers with a fractional part are split by the tokenizer: 3.14 is tokenized as
    3 "." 14 and rejoined here.
    """
    BOOLEANS = {"true": True, "false": False}

    @staticmethod
    def parse(tokens):
        if len(tokens) == 1 and tokens[0].is_a(TokenKind.IDENTIFIER):
            text = tokens[0].text
            if text in Terminal.BOOLEANS:
                return BoolLiteral(Terminal.BOOLEANS[text])
            elif text[0].isalpha():
                return Variable(text)
            return NumberLiteral(Terminal.to_number(text, tokens[0]))

        elif len(tokens) == 3 and Terminal.is_number(tokens):
            whole, __, fraction = tokens
            return NumberLiteral(Terminal.to_number(f"{whole.text}.{fraction.text}", whole))

        elif len(tokens) == 2 and Terminal.is_number(tokens):
            return NumberLiteral(Terminal.to_number(tokens[0].text, tokens[0]))

        raise ParseError(tokens[0] if tokens else None)

    @staticmethod
    def is_number(tokens):
        """Whether or not tokens look like `<identifier> "."` or `<identifier> "." <identifier>`."""
        return tokens[0].is_a(TokenKind.IDENTIFIER) and tokens[1].is_a(TokenKind.DOT) \
            and all(token.is_a(TokenKind.IDENTIFIER) for token in tokens[2:])

    @staticmethod
    def to_number(text, token):
        try:
            return float(text)
        except ValueError:
            raise ParseError(token)
