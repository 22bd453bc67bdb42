r"""Lexical analysis for the numlambda language: turns source text into a flat, ordered list of Tokens.

Any character that is not an ASCII letter or digit separates tokens. Maximal alphanumeric runs between separators
become identifiers; numbers are not recognized here (`3.14` is `Identifier(3), Dot, Identifier(14)`), that is left to
the parser. Accepted separators:

```
\  .  (  )  ?  :  +  -  *  /  >  <  =  !  <space>
```

`>=`, `<=`, `!=` and `==` are formed when `=` is scanned by merging it into the previous token.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from numlambda.lang.error import EmptyInputError, IllegalCharacterError


class TokenKind(Enum):
    LAMBDA = "\\"
    IDENTIFIER = "<identifier>"
    DOT = "."
    PAREN_OPEN = "("
    PAREN_CLOSE = ")"
    COLON = ":"
    QUESTION_MARK = "?"
    OPERATOR = "<operator>"


class Operator(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="
    EQ = "=="
    NEQ = "!="
    NOT = "!"

    @property
    def is_arithmetic(self):
        return self in (Operator.ADD, Operator.SUB, Operator.MUL, Operator.DIV)

    @property
    def is_comparison(self):
        return self in (Operator.GT, Operator.GTE, Operator.LT, Operator.LTE, Operator.EQ, Operator.NEQ)


@dataclass(frozen=True)
class Token:
    """A single lexeme. pos is the offset of the token in the source and is ignored by ==."""
    kind: TokenKind
    text: str
    op: Optional[Operator] = None
    pos: int = field(default=-1, compare=False)

    @classmethod
    def identifier(cls, text, pos=-1):
        return cls(TokenKind.IDENTIFIER, text, pos=pos)

    @classmethod
    def operator(cls, op, pos=-1):
        return cls(TokenKind.OPERATOR, op.value, op, pos)

    @classmethod
    def builtin(cls, kind, pos=-1):
        """Tokens whose text is fixed by their kind: '\\', '.', '(', ')', ':', '?'."""
        return cls(kind, kind.value, pos=pos)

    def is_a(self, kind, op=None):
        """Whether or not this token is of kind (and, if given, is operator op)."""
        return self.kind is kind and (op is None or self.op is op)

    def __repr__(self):
        if self.kind is TokenKind.IDENTIFIER:
            return f"Identifier({self.text!r})"
        elif self.kind is TokenKind.OPERATOR:
            return f"Operator({self.op.name})"
        return self.kind.name.title().replace("_", "")

    def __str__(self):
        return self.text


LAMBDA = Token.builtin(TokenKind.LAMBDA)
DOT = Token.builtin(TokenKind.DOT)
PAREN_OPEN = Token.builtin(TokenKind.PAREN_OPEN)
PAREN_CLOSE = Token.builtin(TokenKind.PAREN_CLOSE)
COLON = Token.builtin(TokenKind.COLON)
QUESTION_MARK = Token.builtin(TokenKind.QUESTION_MARK)

SEPARATORS = {
    "\\": TokenKind.LAMBDA,
    ".": TokenKind.DOT,
    "(": TokenKind.PAREN_OPEN,
    ")": TokenKind.PAREN_CLOSE,
    ":": TokenKind.COLON,
    "?": TokenKind.QUESTION_MARK,
}
OPERATORS = {op.value: op for op in Operator if len(op.value) == 1}
OPERATORS["="] = Operator.EQ

# previous operator -> merged operator, when followed by "="
MERGED = {
    Operator.GT: Operator.GTE,
    Operator.LT: Operator.LTE,
    Operator.NOT: Operator.NEQ,
    Operator.EQ: Operator.EQ,
}


def is_alphanumeric(char):
    return char.isascii() and char.isalnum()


def tokenize(source):
    """Returns the list of Tokens in source. Raises EmptyInputError if source holds nothing but spaces and
    IllegalCharacterError on the first character that isn't part of the language.
    """
    if not source.strip(" "):
        raise EmptyInputError()

    tokens = []
    start = 0  # start of the current alphanumeric run

    for idx, char in enumerate(source):
        if is_alphanumeric(char):
            continue

        if start < idx:
            tokens.append(Token.identifier(source[start:idx], start))
        start = idx + 1

        if char == " ":
            continue
        elif char in SEPARATORS:
            tokens.append(Token.builtin(SEPARATORS[char], idx))
        elif char == "=" and tokens and tokens[-1].op in MERGED:
            previous = tokens.pop()
            tokens.append(Token.operator(MERGED[previous.op], previous.pos))
        elif char in OPERATORS:
            tokens.append(Token.operator(OPERATORS[char], idx))
        else:
            raise IllegalCharacterError(char, idx)

    if start < len(source):
        tokens.append(Token.identifier(source[start:], start))

    return tokens
