"""csimple expression compiler."""

from .configuration import load_compiler_configuration
from .generator import ExpressionCompiler, IDENTITY_SUFFIX, derive_identity, number_sites
from .lexer import CSimpleSyntaxError
from .parser import compile_predicate, compile_value

__all__ = [
    "CSimpleSyntaxError",
    "ExpressionCompiler",
    "IDENTITY_SUFFIX",
    "compile_predicate",
    "compile_value",
    "derive_identity",
    "load_compiler_configuration",
    "number_sites",
]
