__version__ = "0.1.0"

from .parser import parse, parse_expression
from .codegen_py import generate
from .compiler import transpile
from .errors import (
    TranspileError,
    ParseError,
    BythonSyntaxError,
    StructuralError,
    UnsupportedExpressionError,
)

__all__ = [
    "__version__",
    "parse",
    "parse_expression",
    "generate",
    "transpile",
    "TranspileError",
    "ParseError",
    "BythonSyntaxError",
    "StructuralError",
    "UnsupportedExpressionError",
]
