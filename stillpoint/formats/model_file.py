"""Reader for the textual model format.

One species per line::

    # comment
    NAME[:MAX] = EXPRESSION

``MAX`` defaults to 1. Expressions combine constants and threshold
comparisons (``B >= 2``; a bare ``B`` means ``B >= 1``) with ``!``, ``&``
and ``|``, in decreasing order of precedence, and parentheses.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

from stillpoint.core.expressions import And, Const, Expression, Not, Or, Threshold
from stillpoint.core.model import Model, Species
from stillpoint.core.types import ModelError, ModelFileError, ModelSyntaxError

_LINE = re.compile(
    r"^(?P<name>[A-Za-z_][A-Za-z0-9_]*)\s*(?::\s*(?P<max>\d+))?\s*=(?!=)\s*(?P<rule>.*)$"
)
_TOKEN = re.compile(
    r"\s*(?:(?P<int>\d+)|(?P<name>[A-Za-z_][A-Za-z0-9_]*)"
    r"|(?P<cmp>>=|<=|==|!=|>|<)|(?P<op>[&|!()]))"
)


@dataclass(frozen=True)
class _Token:
    kind: str
    text: str
    column: int


@dataclass(frozen=True)
class _Declaration:
    name: str
    upper_bound: int
    rule_text: str
    line_number: int


def tokenize(text: str, line_number: int | None = None) -> list[_Token]:
    """Split a rule expression into tokens."""
    tokens = []
    position = 0
    text = text.rstrip()
    while position < len(text):
        match = _TOKEN.match(text, position)
        if match is None or match.end() == position:
            rest = text[position:]
            column = position + len(rest) - len(rest.lstrip()) + 1
            raise ModelSyntaxError(
                f"Unexpected character {rest.lstrip()[:1]!r} at column {column}",
                line_number,
            )
        kind = match.lastgroup or ""
        tokens.append(_Token(kind, match.group(kind), match.start(kind) + 1))
        position = match.end()
    return tokens


class _RuleParser:
    """Recursive descent parser for a single rule expression."""

    def __init__(self, tokens: list[_Token], names: dict[str, int], line_number: int | None):
        self.tokens = tokens
        self.names = names
        self.line_number = line_number
        self.position = 0

    def parse(self) -> Expression:
        if not self.tokens:
            raise ModelSyntaxError("Empty rule", self.line_number)
        expression = self._parse_or()
        if self.position != len(self.tokens):
            token = self.tokens[self.position]
            self._fail(f"Unexpected {token.text!r} at column {token.column}")
        return expression

    def _peek(self) -> _Token | None:
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return None

    def _take(self) -> _Token:
        token = self._peek()
        if token is None:
            self._fail("Unexpected end of rule")
        self.position += 1
        return token

    def _accept(self, text: str) -> bool:
        token = self._peek()
        if token is not None and token.kind == "op" and token.text == text:
            self.position += 1
            return True
        return False

    def _fail(self, message: str) -> NoReturn:
        raise ModelSyntaxError(message, self.line_number)

    def _parse_or(self) -> Expression:
        operands = [self._parse_and()]
        while self._accept("|"):
            operands.append(self._parse_and())
        return operands[0] if len(operands) == 1 else Or(*operands)

    def _parse_and(self) -> Expression:
        operands = [self._parse_not()]
        while self._accept("&"):
            operands.append(self._parse_not())
        return operands[0] if len(operands) == 1 else And(*operands)

    def _parse_not(self) -> Expression:
        if self._accept("!"):
            return Not(self._parse_not())
        return self._parse_atom()

    def _parse_atom(self) -> Expression:
        token = self._take()

        if token.kind == "int":
            return Const(int(token.text))

        if token.kind == "name":
            if token.text not in self.names:
                self._fail(f"Unknown species {token.text!r} at column {token.column}")
            index = self.names[token.text]
            following = self._peek()
            if following is None or following.kind != "cmp":
                return Threshold(index, ">=", 1)
            self.position += 1
            value = self._take()
            if value.kind != "int":
                self._fail(f"Expected a level after {following.text!r}, got {value.text!r}")
            return Threshold(index, following.text, int(value.text))

        if token.kind == "op" and token.text == "(":
            expression = self._parse_or()
            if not self._accept(")"):
                self._fail(f"Unclosed parenthesis at column {token.column}")
            return expression

        self._fail(f"Unexpected {token.text!r} at column {token.column}")


def parse_expression(text: str, names: dict[str, int], line_number: int | None = None) -> Expression:
    """
    Parse a rule expression.

    Args:
        text: Expression text
        names: Mapping of species names to indices
        line_number: Line reported in syntax errors

    Returns:
        The parsed expression tree
    """
    return _RuleParser(tokenize(text, line_number), names, line_number).parse()


def _declarations(lines: Iterable[str]) -> list[_Declaration]:
    declarations = []
    for line_number, raw in enumerate(lines, start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        match = _LINE.match(line)
        if match is None:
            raise ModelSyntaxError(f"Expected 'NAME[:MAX] = RULE', got {line!r}", line_number)
        if not match.group("rule").strip():
            raise ModelSyntaxError(f"Species {match.group('name')} has an empty rule", line_number)
        upper_bound = int(match.group("max")) if match.group("max") is not None else 1
        declarations.append(
            _Declaration(match.group("name"), upper_bound, match.group("rule"), line_number)
        )
    return declarations


def parse_model(lines: Iterable[str], name: str = "model", sort: bool = True) -> Model:
    """
    Build a model from the lines of a model description.

    Args:
        lines: Lines of the model text
        name: Name given to the model
        sort: Order species by name; otherwise keep the order of the text

    Returns:
        The parsed model

    Raises:
        ModelSyntaxError: If a line is malformed, a species is declared
            twice or a rule references an undeclared species
    """
    declarations = _declarations(lines)
    if sort:
        declarations.sort(key=lambda d: d.name)

    names: dict[str, int] = {}
    for declaration in declarations:
        if declaration.name in names:
            raise ModelSyntaxError(
                f"Species {declaration.name} declared more than once", declaration.line_number
            )
        names[declaration.name] = len(names)

    species = [
        Species(
            names[d.name],
            d.name,
            d.upper_bound,
            parse_expression(d.rule_text, names, d.line_number),
        )
        for d in declarations
    ]

    try:
        return Model(tuple(species), name=name)
    except ModelError as e:
        raise ModelSyntaxError(str(e)) from e


def read_model(path: str | Path, sort: bool = True) -> Model:
    """
    Read a model file.

    The model is named after the file stem.

    Raises:
        ModelFileError: If the path is missing, not a file or unreadable
        ModelSyntaxError: If the content is malformed
    """
    model_path = Path(path)
    if not model_path.exists():
        raise ModelFileError(f"Model file {model_path} does not exist")
    if not model_path.is_file():
        raise ModelFileError(f"Model path {model_path} is not a regular file")

    try:
        content = model_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ModelFileError(f"Cannot read model file {model_path}: {e}") from e

    return parse_model(content.splitlines(), name=model_path.stem, sort=sort)


def steady_output_path(model_path: str | Path, model_name: str | None = None) -> Path:
    """Default CSV path for the steady states of a model file."""
    model_path = Path(model_path)
    return model_path.parent / f"{model_name or model_path.stem}_stable.csv"


__all__ = [
    "parse_expression",
    "parse_model",
    "read_model",
    "steady_output_path",
    "tokenize",
]
