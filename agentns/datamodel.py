"""
In-memory data model with a small expression language parsed by Lark.

Expressions support string literals, numbers, ``true``/``false``/``null``,
dotted variable paths, parentheses, unary minus and ``+`` (addition, or
concatenation when either operand is a string).
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any
import copy
import logging
import re

from lark import Lark, Transformer, Tree, v_args
from lark.exceptions import LarkError, VisitError

from agentns.value_model import is_number, stringify

logger = logging.getLogger("agentns.datamodel")

_LOCATION_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}


class DataModelError(RuntimeError):
    """Raised for evaluation and storage failures."""


grammar = r"""
    ?start: sum

    ?sum: unary
        | sum "+" unary -> add

    ?unary: atom
          | "-" unary -> neg

    ?atom: ESCAPED_STRING -> string
         | SINGLE_STRING -> string
         | NUMBER -> number
         | "true" -> true
         | "false" -> false
         | "null" -> null
         | path
         | "(" sum ")"

    path: NAME ("." NAME)*

    SINGLE_STRING: /'[^'\\]*(\\.[^'\\]*)*'/

    %import common.ESCAPED_STRING
    %import common.NUMBER
    %import common.CNAME -> NAME
    %import common.WS
    %ignore WS
"""

parser = Lark(grammar, start="start", parser="lalr")


@lru_cache(maxsize=512)
def parse_expression(expression: str) -> Tree:
    try:
        return parser.parse(expression)
    except LarkError as exc:
        raise DataModelError(f"Invalid expression {expression!r}: {exc}") from exc


class ExpressionEvaluator(Transformer):
    """Evaluate a parsed expression against a variable mapping"""

    def __init__(self, variables: dict[str, Any]):
        super().__init__()
        self._variables = variables

    @v_args(inline=True)
    def string(self, token):
        body = token[1:-1]
        return re.sub(r"\\(.)", lambda m: _ESCAPES.get(m.group(1), m.group(1)), body)

    @v_args(inline=True)
    def number(self, token):
        text = str(token)
        if any(c in text for c in ".eE"):
            return float(text)
        return int(text)

    def true(self, _):
        return True

    def false(self, _):
        return False

    def null(self, _):
        return None

    @v_args(inline=True)
    def neg(self, value):
        if not is_number(value):
            raise DataModelError(f"Cannot negate {value!r}")
        return -value

    @v_args(inline=True)
    def add(self, left, right):
        if isinstance(left, str) or isinstance(right, str):
            return stringify(left) + stringify(right)
        if is_number(left) and is_number(right):
            return left + right
        raise DataModelError(f"Cannot add {left!r} and {right!r}")

    def path(self, names):
        current: Any = self._variables
        walked: list[str] = []
        for name in names:
            walked.append(str(name))
            if not isinstance(current, dict) or str(name) not in current:
                raise DataModelError(f"Undefined variable: {'.'.join(walked)}")
            current = current[str(name)]
        return current


class MemoryDataModel:
    """Variables held in a nested dict."""

    def __init__(self, variables: dict[str, Any] | None = None) -> None:
        self.variables: dict[str, Any] = dict(variables or {})

    def evaluate_value(self, expression: str) -> Any:
        tree = parse_expression(expression.strip())
        try:
            value = ExpressionEvaluator(self.variables).transform(tree)
        except VisitError as exc:
            if isinstance(exc.orig_exc, DataModelError):
                raise exc.orig_exc from None
            raise DataModelError(str(exc.orig_exc)) from exc.orig_exc
        logger.debug("Evaluated %r -> %r", expression, value)
        return value

    def set_variable(self, location: str, value: Any) -> None:
        *parents, leaf = _split_location(location)
        scope = self.variables
        for name in parents:
            child = scope.setdefault(name, {})
            if not isinstance(child, dict):
                raise DataModelError(f"Cannot assign {location}: {name} is not a mapping")
            scope = child
        scope[leaf] = value

    def get_variable(self, location: str) -> Any:
        scope: Any = self.variables
        for name in _split_location(location):
            if not isinstance(scope, dict) or name not in scope:
                raise DataModelError(f"Undefined variable: {location}")
            scope = scope[name]
        return scope

    def has_variable(self, location: str) -> bool:
        try:
            self.get_variable(location)
        except DataModelError:
            return False
        return True

    def snapshot(self) -> dict[str, Any]:
        return copy.deepcopy(self.variables)


def _split_location(location: str) -> list[str]:
    location = location.strip()
    if not _LOCATION_RE.match(location):
        raise DataModelError(f"Invalid location: {location!r}")
    return location.split(".")
