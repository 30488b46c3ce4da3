"""Translation of csimple ``${...}`` functions into Java code."""

from __future__ import annotations

import re
from re import Match, Pattern
from typing import Callable, Dict, List, Tuple

from .lexer import CSimpleSyntaxError

_JAVA_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
}

_TYPE_NAME = r"[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*(?:\[\])*"

_CONSTANT_FUNCTIONS: Dict[str, str] = {
    "body": "body",
    "in.body": "body",
    "bodyOneLine": "bodyOneLine(exchange)",
    "headers": "message.getHeaders()",
    "in.headers": "message.getHeaders()",
    "variables": "variables(exchange)",
    "exchangeId": "exchange.getExchangeId()",
    "id": "message.getMessageId()",
    "messageId": "message.getMessageId()",
    "exchange": "exchange",
    "camelContext": "context",
    "camelId": "context.getName()",
    "routeId": "routeId(exchange)",
    "threadName": "threadName()",
    "exception": "exception(exchange)",
    "exception.message": "exceptionMessage(exchange)",
    "exception.stacktrace": "exceptionStacktrace(exchange)",
    "null": "null",
}


def java_string(text: str) -> str:
    """Return ``text`` as a quoted Java string literal."""
    escaped = "".join(_JAVA_ESCAPES.get(char, char) for char in text)
    return f'"{escaped}"'


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        return value[1:-1]
    return value


def _keyed(accessor: str, target: str) -> Callable[[Match[str]], str]:
    def _render(match: Match[str]) -> str:
        return f"{accessor}({target}, {java_string(_unquote(match.group('key')))})"

    return _render


def _typed(accessor: str, target: str, keyed: bool) -> Callable[[Match[str]], str]:
    def _render(match: Match[str]) -> str:
        type_name = match.group("type")
        chain = match.group("chain") or ""
        if chain and not chain.startswith("."):
            raise ValueError(f"unexpected '{chain}' after {accessor}")
        if keyed:
            key = java_string(_unquote(match.group("key")))
            return f"{accessor}({target}, {key}, {type_name}.class){chain}"
        return f"{accessor}({target}, {type_name}.class){chain}"

    return _render


def _date(match: Match[str]) -> str:
    command = match.group("command")
    pattern = match.group("pattern")
    if pattern:
        return f"date(exchange, {java_string(command)}, {java_string(pattern)})"
    return f"date(exchange, {java_string(command)})"


def _random(match: Match[str]) -> str:
    first = match.group("first")
    second = match.group("second")
    if second is None:
        return f"random(exchange, 0, {first})"
    return f"random(exchange, {first}, {second})"


def _properties(match: Match[str]) -> str:
    key = java_string(match.group("key"))
    default = match.group("default")
    if default is not None:
        return f"properties(exchange, {key}, {java_string(default)})"
    return f"properties(exchange, {key})"


def _type(match: Match[str]) -> str:
    return f"type(exchange, {match.group('type')}.class, {java_string(match.group('field'))})"


def _accessor_patterns(names: str, accessor: str, target: str) -> List[Tuple[Pattern[str], Callable[[Match[str]], str]]]:
    """Patterns for ``name.key``, ``name[key]`` and ``name:key`` lookups."""
    render = _keyed(accessor, target)
    return [
        (re.compile(rf"^(?:{names})\.(?P<key>.+)$"), render),
        (re.compile(rf"^(?:{names})\[(?P<key>.+)\]$"), render),
        (re.compile(rf"^(?:{names}):(?P<key>.+)$"), render),
    ]


_PATTERN_FUNCTIONS: List[Tuple[Pattern[str], Callable[[Match[str]], str]]] = [
    (
        re.compile(rf"^bodyAs\(\s*(?P<type>{_TYPE_NAME})\s*\)(?P<chain>.*)$"),
        _typed("bodyAs", "message", keyed=False),
    ),
    (
        re.compile(rf"^mandatoryBodyAs\(\s*(?P<type>{_TYPE_NAME})\s*\)(?P<chain>.*)$"),
        _typed("mandatoryBodyAs", "message", keyed=False),
    ),
    (
        re.compile(rf"^headerAs\(\s*(?P<key>[^,]+?)\s*,\s*(?P<type>{_TYPE_NAME})\s*\)(?P<chain>.*)$"),
        _typed("headerAs", "message", keyed=True),
    ),
    (
        re.compile(
            rf"^exchangePropertyAs\(\s*(?P<key>[^,]+?)\s*,\s*(?P<type>{_TYPE_NAME})\s*\)(?P<chain>.*)$"
        ),
        _typed("exchangePropertyAs", "exchange", keyed=True),
    ),
    (
        re.compile(rf"^variableAs\(\s*(?P<key>[^,]+?)\s*,\s*(?P<type>{_TYPE_NAME})\s*\)(?P<chain>.*)$"),
        _typed("variableAs", "exchange", keyed=True),
    ),
    *_accessor_patterns(r"in\.headers?|headers?", "header", "message"),
    *_accessor_patterns(r"exchangeProperty", "exchangeProperty", "exchange"),
    *_accessor_patterns(r"variable", "variable", "exchange"),
    *_accessor_patterns(r"sys", "sys", "exchange"),
    *_accessor_patterns(r"sysenv|env", "sysenv", "exchange"),
    (re.compile(r"^date:(?P<command>[^:]+)(?::(?P<pattern>.+))?$"), _date),
    (re.compile(r"^random\(\s*(?P<first>-?\d+)\s*(?:,\s*(?P<second>-?\d+)\s*)?\)$"), _random),
    (re.compile(r"^properties:(?P<key>[^:]+)(?::(?P<default>.*))?$"), _properties),
    (re.compile(rf"^type:(?P<type>{_TYPE_NAME})\.(?P<field>[A-Za-z_$][\w$]*)$"), _type),
    (
        re.compile(r"^empty\(\s*(?P<key>\w+)\s*\)$"),
        lambda match: f"empty(exchange, {java_string(match.group('key'))})",
    ),
]


def translate_function(expression: str, script: str = "", index: int = 0) -> str:
    """Return the Java code for the body of one ``${...}`` function."""
    expression = expression.strip()
    constant = _CONSTANT_FUNCTIONS.get(expression)
    if constant is not None:
        return constant
    for pattern, render in _PATTERN_FUNCTIONS:
        match = pattern.match(expression)
        if match is None:
            continue
        try:
            return render(match)
        except ValueError as exc:
            raise CSimpleSyntaxError(f"Invalid function '{expression}': {exc}", script, index) from exc
    raise CSimpleSyntaxError(f"Unknown function '{expression}'", script, index)


__all__ = ["java_string", "translate_function"]
