# bython2py/errors.py


class TranspileError(Exception):
    def __init__(self, message, pos=None):
        super().__init__(message)
        self.message = message
        self.pos     = pos

    def __str__(self):
        if self.pos:
            return f"{self.pos[0]}:{self.pos[1]}: {self.message}"
        return self.message


class ParseError(TranspileError):
    """Raised by `parse`; no AST is produced."""


class BythonSyntaxError(ParseError):
    """Source text does not match the grammar."""


class StructuralError(ParseError):
    """
    The grammar accepted a construct the AST builder cannot interpret.
    Points at a grammar/builder mismatch, not at bad user input.
    """


class UnsupportedExpressionError(TranspileError):
    """The code generator has no rule for the node it was given."""
