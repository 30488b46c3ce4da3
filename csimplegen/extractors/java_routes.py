"""Tree-sitter powered extraction of csimple calls from Java route builders."""

from __future__ import annotations

import re
import textwrap
from pathlib import Path
from typing import Iterator, List, Optional

import tree_sitter_java
from tree_sitter import Language, Node, Parser

from ..models import Dialect, ExtractionSite, UsageKind
from .base import SiteExtractor, SourceParseError

JAVA_LANGUAGE = Language(tree_sitter_java.language())

CSIMPLE_METHOD = "csimple"

# Route DSL methods whose expression argument is evaluated as a predicate.
PREDICATE_METHODS = frozenset(
    {
        "completionPredicate",
        "continued",
        "filter",
        "handled",
        "loopDoWhile",
        "onWhen",
        "retryWhile",
        "validate",
        "when",
    }
)

PREDICATE_COMBINATORS = frozenset({"and", "not", "or"})

_TYPE_DECLARATIONS = {
    "class_declaration",
    "interface_declaration",
    "enum_declaration",
    "record_declaration",
    "annotation_type_declaration",
}

_COMMENTS = {"line_comment", "block_comment"}

_ESCAPE = re.compile(r"\\(u+[0-9a-fA-F]{4}|[0-3][0-7]{0,2}|[4-7][0-7]?|\r\n|[btnfrs\"'\\\n])")
_SIMPLE_ESCAPES = {
    "b": "\b",
    "t": "\t",
    "n": "\n",
    "f": "\f",
    "r": "\r",
    "s": " ",
    '"': '"',
    "'": "'",
    "\\": "\\",
    "\n": "",
    "\r\n": "",
}


class JavaSiteExtractor(SiteExtractor):
    """Finds ``csimple("...")`` calls inside Java route builder classes."""

    dialect = Dialect.CODE

    def __init__(self) -> None:
        super().__init__()
        self._parser = Parser(JAVA_LANGUAGE)

    def find_sites(self, path: Path) -> List[ExtractionSite]:
        source_bytes = path.read_bytes()
        tree = self._parser.parse(source_bytes)
        root = tree.root_node
        if root.has_error:
            raise SourceParseError(f"syntax error near line {_first_error_line(root)}")

        declaration = _first_type_declaration(root)
        # only classes carry routes; interfaces, enums and records are skipped
        if declaration is None or declaration.type != "class_declaration":
            return []

        owner = _qualified_name(root, declaration, source_bytes)
        invocations = [
            node
            for node in _walk(declaration)
            if node.type == "method_invocation" and _method_name(node, source_bytes) == CSIMPLE_METHOD
        ]
        # a chained call spans its receivers, so order by where the method name appears
        invocations.sort(key=_name_offset)

        sites: List[ExtractionSite] = []
        for invocation in invocations:
            script = _script_argument(invocation, source_bytes)
            if script is None:
                continue
            sites.append(
                ExtractionSite(
                    script=script,
                    kind=_usage_kind(invocation, source_bytes),
                    owner=owner,
                    origin=path,
                    dialect=self.dialect,
                )
            )
        return sites


def _node_text(node: Node, source_bytes: bytes) -> str:
    return source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def _walk(node: Node) -> Iterator[Node]:
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def _first_error_line(root: Node) -> int:
    for node in _walk(root):
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
    return root.start_point[0] + 1


def _first_type_declaration(root: Node) -> Optional[Node]:
    for child in root.named_children:
        if child.type in _TYPE_DECLARATIONS:
            return child
    return None


def _qualified_name(root: Node, declaration: Node, source_bytes: bytes) -> str:
    name_node = declaration.child_by_field_name("name")
    if name_node is None:
        raise SourceParseError("class declaration without a name")
    name = _node_text(name_node, source_bytes)
    for child in root.named_children:
        if child.type != "package_declaration":
            continue
        for part in child.named_children:
            if part.type in {"scoped_identifier", "identifier"}:
                return f"{_node_text(part, source_bytes)}.{name}"
    return name


def _method_name(invocation: Node, source_bytes: bytes) -> Optional[str]:
    name_node = invocation.child_by_field_name("name")
    return _node_text(name_node, source_bytes) if name_node is not None else None


def _name_offset(invocation: Node) -> int:
    name_node = invocation.child_by_field_name("name")
    return name_node.start_byte if name_node is not None else invocation.start_byte


def _arguments(invocation: Node) -> List[Node]:
    arguments = invocation.child_by_field_name("arguments")
    if arguments is None:
        return []
    return [child for child in arguments.named_children if child.type not in _COMMENTS]


def _script_argument(invocation: Node, source_bytes: bytes) -> Optional[str]:
    arguments = _arguments(invocation)
    if not arguments:
        return None
    return _literal_value(arguments[0], source_bytes)


def _literal_value(node: Node, source_bytes: bytes) -> Optional[str]:
    """Resolve string literals, text blocks and ``+`` concatenations of them."""
    if node.type == "string_literal":
        return decode_java_string(_node_text(node, source_bytes))
    if node.type == "parenthesized_expression":
        inner = [child for child in node.named_children if child.type not in _COMMENTS]
        return _literal_value(inner[0], source_bytes) if len(inner) == 1 else None
    if node.type == "binary_expression":
        operator = node.child_by_field_name("operator")
        if operator is None or _node_text(operator, source_bytes) != "+":
            return None
        left = node.child_by_field_name("left")
        right = node.child_by_field_name("right")
        if left is None or right is None:
            return None
        left_value = _literal_value(left, source_bytes)
        right_value = _literal_value(right, source_bytes)
        if left_value is None or right_value is None:
            return None
        return left_value + right_value
    return None


def _usage_kind(invocation: Node, source_bytes: bytes) -> UsageKind:
    # .when().csimple("...")
    receiver = invocation.child_by_field_name("object")
    if (
        receiver is not None
        and receiver.type == "method_invocation"
        and _method_name(receiver, source_bytes) in PREDICATE_METHODS
        and not _arguments(receiver)
    ):
        return UsageKind.PREDICATE

    # .when(csimple("...")) and not(csimple("..."))
    parent = invocation.parent
    if parent is not None and parent.type == "argument_list":
        caller = parent.parent
        if caller is not None and caller.type == "method_invocation":
            name = _method_name(caller, source_bytes)
            if name in PREDICATE_METHODS or name in PREDICATE_COMBINATORS:
                return UsageKind.PREDICATE
    return UsageKind.VALUE


def decode_java_string(literal: str) -> str:
    """Return the runtime value of a Java string literal or text block."""
    if literal.startswith('"""'):
        body = literal[3:-3]
        _, _, body = body.partition("\n")
        lines = textwrap.dedent(body).split("\n")
        body = "\n".join(line.rstrip() for line in lines)
    else:
        body = literal[1:-1]
    return _ESCAPE.sub(_unescape, body)


def _unescape(match: re.Match[str]) -> str:
    escape = match.group(1)
    if escape in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[escape]
    if escape.startswith("u"):
        return chr(int(escape.lstrip("u"), 16))
    return chr(int(escape, 8))


__all__ = [
    "CSIMPLE_METHOD",
    "JAVA_LANGUAGE",
    "JavaSiteExtractor",
    "PREDICATE_COMBINATORS",
    "PREDICATE_METHODS",
    "decode_java_string",
]
