"""Tokenizer for csimple scripts.

Scripts come in two shapes. Value scripts are templates: literal text with
embedded ``${...}`` functions. Predicate scripts are whitespace separated
operands and operators joined by ``&&`` / ``||``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Tuple

_FUNCTION_STARTS = ("${", "$simple{")

_LOGICAL = ("&&", "||")

# Longest first so that "!=~" wins over "!=".
_SYMBOL_OPERATORS = ("!=~", "!~~", "==", "=~", "!=", ">=", "<=", "~~", ">", "<")

_WORD_OPERATORS = (
    "!contains",
    "contains",
    "!regex",
    "regex",
    "!range",
    "range",
    "!startsWith",
    "startsWith",
    "!endsWith",
    "endsWith",
    "!in",
    "in",
    "!is",
    "is",
)

_SPACED_OPERATORS = {
    "starts with": re.compile(r"starts\s+with(?=\s|$)"),
    "ends with": re.compile(r"ends\s+with(?=\s|$)"),
}

_NUMBER = re.compile(r"-?\d+(?:\.\d+)?(?=\s|$)")
_WORD = re.compile(r"\S+")


class TokenType(Enum):
    """Lexical categories of csimple scripts."""

    TEXT = auto()  # literal template text
    FUNCTION = auto()  # ${header.foo}
    STRING = auto()  # 'quoted' or "quoted"
    NUMBER = auto()  # 42, -1.5
    BOOLEAN = auto()  # true, false
    NULL = auto()  # null
    OPERATOR = auto()  # ==, contains, ...
    LOGICAL = auto()  # &&, ||
    WORD = auto()  # unquoted literal


@dataclass(frozen=True)
class Token:
    """A lexical unit and the script index it starts at."""

    kind: TokenType
    value: str
    index: int


class CSimpleSyntaxError(ValueError):
    """Raised when a script cannot be tokenized or parsed."""

    def __init__(self, message: str, script: str, index: int) -> None:
        super().__init__(f"{message} at index {index}")
        self.message = message
        self.script = script
        self.index = index


def tokenize_template(script: str) -> List[Token]:
    """Split a value script into TEXT and FUNCTION tokens."""
    tokens: List[Token] = []
    text_start = 0
    pos = 0
    while pos < len(script):
        prefix = _function_prefix(script, pos)
        if prefix is None:
            pos += 1
            continue
        if pos > text_start:
            tokens.append(Token(TokenType.TEXT, script[text_start:pos], text_start))
        body, end = _read_function(script, pos, prefix)
        tokens.append(Token(TokenType.FUNCTION, body, pos))
        pos = text_start = end
    if text_start < len(script):
        tokens.append(Token(TokenType.TEXT, script[text_start:], text_start))
    return tokens


def tokenize_predicate(script: str) -> List[Token]:
    """Split a predicate script into operand, operator and logical tokens."""
    tokens: List[Token] = []
    pos = 0
    length = len(script)
    while pos < length:
        char = script[pos]
        if char.isspace():
            pos += 1
            continue

        prefix = _function_prefix(script, pos)
        if prefix is not None:
            body, end = _read_function(script, pos, prefix)
            tokens.append(Token(TokenType.FUNCTION, body, pos))
            pos = end
            continue

        if char in {"'", '"'}:
            value, end = _read_quoted(script, pos)
            tokens.append(Token(TokenType.STRING, value, pos))
            pos = end
            continue

        logical = next((op for op in _LOGICAL if script.startswith(op, pos)), None)
        if logical is not None:
            tokens.append(Token(TokenType.LOGICAL, logical, pos))
            pos += len(logical)
            continue

        symbol = next((op for op in _SYMBOL_OPERATORS if script.startswith(op, pos)), None)
        if symbol is not None:
            tokens.append(Token(TokenType.OPERATOR, symbol, pos))
            pos += len(symbol)
            continue

        operator, end = _match_word_operator(script, pos)
        if operator is not None:
            tokens.append(Token(TokenType.OPERATOR, operator, pos))
            pos = end
            continue

        number = _NUMBER.match(script, pos)
        if number is not None:
            tokens.append(Token(TokenType.NUMBER, number.group(0), pos))
            pos = number.end()
            continue

        word = _WORD.match(script, pos)
        if word is None:
            raise CSimpleSyntaxError(f"Unexpected character '{char}'", script, pos)
        value = word.group(0)
        if value in {"true", "false"}:
            tokens.append(Token(TokenType.BOOLEAN, value, pos))
        elif value == "null":
            tokens.append(Token(TokenType.NULL, value, pos))
        else:
            tokens.append(Token(TokenType.WORD, value, pos))
        pos = word.end()
    return tokens


def _function_prefix(script: str, pos: int) -> str | None:
    for prefix in _FUNCTION_STARTS:
        if script.startswith(prefix, pos):
            return prefix
    return None


def _read_function(script: str, start: int, prefix: str) -> Tuple[str, int]:
    """Return the body of the function starting at ``start`` and the index after it."""
    depth = 1
    pos = start + len(prefix)
    while pos < len(script):
        char = script[pos]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                body = script[start + len(prefix) : pos].strip()
                if not body:
                    raise CSimpleSyntaxError("Empty function", script, start)
                return body, pos + 1
        pos += 1
    raise CSimpleSyntaxError("Unclosed function, expected '}'", script, start)


def _read_quoted(script: str, start: int) -> Tuple[str, int]:
    quote = script[start]
    chars: List[str] = []
    pos = start + 1
    while pos < len(script):
        char = script[pos]
        if char == "\\" and pos + 1 < len(script) and script[pos + 1] == quote:
            chars.append(quote)
            pos += 2
            continue
        if char == quote:
            return "".join(chars), pos + 1
        chars.append(char)
        pos += 1
    raise CSimpleSyntaxError(f"Unclosed literal, expected {quote}", script, start)


def _match_word_operator(script: str, pos: int) -> Tuple[str | None, int]:
    for name, pattern in _SPACED_OPERATORS.items():
        match = pattern.match(script, pos)
        if match is not None:
            return name, match.end()
    for operator in _WORD_OPERATORS:
        end = pos + len(operator)
        if script.startswith(operator, pos) and (end == len(script) or script[end].isspace()):
            return operator, end
    return None, pos


__all__ = [
    "CSimpleSyntaxError",
    "Token",
    "TokenType",
    "tokenize_predicate",
    "tokenize_template",
]
