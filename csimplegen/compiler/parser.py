"""Compile csimple scripts into Java expressions."""

from __future__ import annotations

import re
from typing import Dict, List, Tuple

from .functions import java_string, translate_function
from .lexer import CSimpleSyntaxError, Token, TokenType, tokenize_predicate, tokenize_template

_INT_MAX = 2**31 - 1

_TYPE_NAME = re.compile(r"^[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*$")

# operator -> (helper function, negated)
_OPERATORS: Dict[str, Tuple[str, bool]] = {
    "==": ("isEqualTo", False),
    "!=": ("isNotEqualTo", False),
    "=~": ("isEqualToIgnoreCase", False),
    "!=~": ("isNotEqualToIgnoreCase", False),
    ">": ("isGreaterThan", False),
    ">=": ("isGreaterThanOrEqualTo", False),
    "<": ("isLessThan", False),
    "<=": ("isLessThanOrEqualTo", False),
    "contains": ("contains", False),
    "!contains": ("contains", True),
    "~~": ("containsIgnoreCase", False),
    "!~~": ("containsIgnoreCase", True),
    "regex": ("regexp", False),
    "!regex": ("regexp", True),
    "in": ("in", False),
    "!in": ("in", True),
    "range": ("range", False),
    "!range": ("range", True),
    "startsWith": ("startsWith", False),
    "starts with": ("startsWith", False),
    "!startsWith": ("startsWith", True),
    "endsWith": ("endsWith", False),
    "ends with": ("endsWith", False),
    "!endsWith": ("endsWith", True),
    "is": ("is", False),
    "!is": ("is", True),
}

_OPERAND_TYPES = {
    TokenType.FUNCTION,
    TokenType.STRING,
    TokenType.NUMBER,
    TokenType.BOOLEAN,
    TokenType.NULL,
    TokenType.WORD,
}


def compile_value(script: str) -> str:
    """Return a Java expression evaluating the value template ``script``."""
    tokens = tokenize_template(script)
    if not tokens:
        raise CSimpleSyntaxError("Empty expression", script, 0)

    parts: List[str] = []
    for token in tokens:
        if token.kind is TokenType.FUNCTION:
            parts.append(translate_function(token.value, script, token.index))
        else:
            parts.append(java_string(token.value))

    if len(parts) == 1:
        return parts[0]
    if tokens[0].kind is TokenType.FUNCTION:
        parts.insert(0, '""')
    return " + ".join(parts)


def compile_predicate(script: str) -> str:
    """Return a Java boolean expression evaluating the predicate ``script``."""
    parser = _PredicateParser(script, tokenize_predicate(script))
    return parser.parse()


class _PredicateParser:
    """Recursive descent over ``comparison (logical comparison)*``."""

    def __init__(self, script: str, tokens: List[Token]) -> None:
        self.script = script
        self.tokens = tokens
        self.pos = 0

    def parse(self) -> str:
        if not self.tokens:
            raise CSimpleSyntaxError("Empty predicate", self.script, 0)
        parts = [self._comparison()]
        while self.pos < len(self.tokens):
            token = self._next()
            if token.kind is not TokenType.LOGICAL:
                raise CSimpleSyntaxError(
                    f"Unexpected token '{token.value}', expected && or ||", self.script, token.index
                )
            if self.pos >= len(self.tokens):
                raise CSimpleSyntaxError(
                    f"Dangling logical operator '{token.value}'", self.script, token.index
                )
            parts.append(token.value)
            parts.append(self._comparison())
        return " ".join(parts)

    def _comparison(self) -> str:
        left_token = self._operand()
        if self.pos >= len(self.tokens) or self.tokens[self.pos].kind is not TokenType.OPERATOR:
            return self._single(left_token)

        operator = self._next()
        if self.pos >= len(self.tokens):
            raise CSimpleSyntaxError(
                f"Missing right operand for operator '{operator.value}'", self.script, operator.index
            )
        right_token = self._operand()
        helper, negated = _OPERATORS[operator.value]
        left = self._operand_code(left_token)
        if helper == "is":
            right = self._type_literal(right_token)
        else:
            right = self._operand_code(right_token)
        call = f"{helper}(exchange, {left}, {right})"
        return f"!{call}" if negated else call

    def _single(self, token: Token) -> str:
        if token.kind is TokenType.BOOLEAN:
            return token.value
        return f"toBoolean(exchange, {self._operand_code(token)})"

    def _operand(self) -> Token:
        token = self._next()
        if token.kind not in _OPERAND_TYPES:
            raise CSimpleSyntaxError(
                f"Unexpected token '{token.value}', expected an operand", self.script, token.index
            )
        return token

    def _operand_code(self, token: Token) -> str:
        if token.kind is TokenType.FUNCTION:
            return translate_function(token.value, self.script, token.index)
        if token.kind is TokenType.NUMBER:
            return _number_literal(token.value)
        if token.kind in {TokenType.BOOLEAN, TokenType.NULL}:
            return token.value
        return java_string(token.value)

    def _type_literal(self, token: Token) -> str:
        name = token.value
        if token.kind not in {TokenType.WORD, TokenType.STRING} or not _TYPE_NAME.match(name):
            raise CSimpleSyntaxError(f"Invalid type name '{name}'", self.script, token.index)
        return f"{name}.class"

    def _next(self) -> Token:
        token = self.tokens[self.pos]
        self.pos += 1
        return token


def _number_literal(value: str) -> str:
    if "." in value:
        return value
    if abs(int(value)) > _INT_MAX:
        return f"{value}L"
    return value


__all__ = ["compile_predicate", "compile_value"]
