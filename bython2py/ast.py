from enum import Enum
from types import MappingProxyType


class Operator(Enum):
    ADD    = "+"
    SUB    = "-"
    MUL    = "*"
    DIV    = "/"
    EQ     = "=="
    NOT_EQ = "!="
    LT     = "<"
    GT     = ">"
    LT_EQ  = "<="
    GT_EQ  = ">="
    AND    = "and"
    OR     = "or"
    NOT    = "not"

    def __str__(self):
        return self.value


# precedence table: higher number = higher priority, every binary tier is left-assoc.
# NOT is reserved and has no binary form.
BINARY_PRECEDENCE = MappingProxyType({
    Operator.OR:     (1,  "left"),
    Operator.AND:    (2,  "left"),
    Operator.EQ:     (5,  "left"),
    Operator.NOT_EQ: (5,  "left"),
    Operator.LT:     (5,  "left"),
    Operator.GT:     (5,  "left"),
    Operator.LT_EQ:  (5,  "left"),
    Operator.GT_EQ:  (5,  "left"),
    Operator.ADD:    (10, "left"),
    Operator.SUB:    (10, "left"),
    Operator.MUL:    (20, "left"),
    Operator.DIV:    (20, "left"),
})

COMPARISON_PRECEDENCE = 5


class Node:
    """Base for every AST node; equality is structural and ignores `pos`."""

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        mine   = {k: v for k, v in vars(self).items() if k != "pos"}
        theirs = {k: v for k, v in vars(other).items() if k != "pos"}
        return mine == theirs

    def __repr__(self):
        return str(self)


class Program(Node):
    def __init__(self, stmts, pos=None):
        self.stmts = stmts
        self.pos = pos

    def __str__(self):
        return f"Program[{', '.join(str(s) for s in self.stmts)}]"


class Block(Node):
    def __init__(self, stmts, pos=None):
        self.stmts = stmts    # may be empty
        self.pos = pos

    def __str__(self):
        return f"{{ {', '.join(str(s) for s in self.stmts)} }}"


# ---------------------------------------------------------------------------
# statements
# ---------------------------------------------------------------------------

class Assignment(Node):
    def __init__(self, name, value, pos=None):
        self.name = name      # "x" or a dotted target like "self.x"
        self.value = value
        self.pos = pos

    def __str__(self):
        return f"{self.name} <- {self.value}"


class Print(Node):
    def __init__(self, content, pos=None):
        self.content = content
        self.pos = pos

    def __str__(self):
        return f"print({self.content})"


class Return(Node):
    def __init__(self, value, pos=None):
        self.value = value
        self.pos = pos

    def __str__(self):
        return f"return {self.value}"


class If(Node):
    def __init__(self, condition, consequence, alternative=None, pos=None):
        self.condition = condition        # expression
        self.consequence = consequence    # Block
        self.alternative = alternative    # Block or None (no else branch)
        self.pos = pos

    def __str__(self):
        s = f"if({self.condition}) {self.consequence}"
        if self.alternative is not None:
            s += f" else {self.alternative}"
        return s


class For(Node):
    def __init__(self, target, iterator, body, pos=None):
        self.target = target      # loop variable name
        self.iterator = iterator  # iterable expression
        self.body = body
        self.pos = pos

    def __str__(self):
        return f"for({self.target} in {self.iterator}) {self.body}"


class While(Node):
    def __init__(self, condition, body, pos=None):
        self.condition = condition
        self.body = body
        self.pos = pos

    def __str__(self):
        return f"while({self.condition}) {self.body}"


class FunctionDef(Node):
    def __init__(self, name, params, body, pos=None):
        self.name = name        # "add", "__init__"
        self.params = params    # ["a", "b"]
        self.body = body
        self.pos = pos

    def __str__(self):
        return f"def {self.name}({', '.join(self.params)}) {self.body}"


class ClassDef(Node):
    def __init__(self, name, body, pos=None):
        self.name = name
        self.body = body
        self.pos = pos

    def __str__(self):
        return f"class {self.name} {self.body}"


# ---------------------------------------------------------------------------
# expressions
# ---------------------------------------------------------------------------

class Identifier(Node):
    def __init__(self, name, pos=None):
        self.name = name
        self.pos = pos

    def __str__(self):
        return f"id({self.name})"


class Number(Node):
    def __init__(self, value, pos=None):
        self.value = float(value)
        self.pos = pos

    def __str__(self):
        return f"num({self.value})"


class String(Node):
    def __init__(self, value, pos=None):
        self.value = value    # raw contents, escapes untouched
        self.pos = pos

    def __str__(self):
        return f'str("{self.value}")'


class BinaryOp(Node):
    def __init__(self, op, left, right, pos=None):
        self.op = op          # Operator
        self.left = left
        self.right = right
        self.pos = pos

    def __str__(self):
        return f"({self.left} {self.op} {self.right})"


class MemberAccess(Node):
    def __init__(self, obj, member, pos=None):
        self.obj    = obj       # an expression, possibly another MemberAccess
        self.member = member    # string
        self.pos    = pos

    def __str__(self):
        return f"{self.obj}.{self.member}"


class FunctionCall(Node):
    """Call by dotted name; used both as a statement and as an expression."""

    def __init__(self, name, args, pos=None):
        self.name = name; self.args = args; self.pos = pos

    def __str__(self):
        a = ", ".join(str(x) for x in self.args)
        return f"{self.name}({a})"


class MethodCall(Node):
    """Call on the result of another expression: `make(1).scale(2)`."""

    def __init__(self, obj, method, args, pos=None):
        self.obj    = obj       # any expression
        self.method = method    # string
        self.args   = args
        self.pos    = pos

    def __str__(self):
        a = ", ".join(str(x) for x in self.args)
        return f"{self.obj}.{self.method}({a})"


class ClassInstantiation(Node):
    def __init__(self, class_name, args, pos=None):
        self.class_name = class_name
        self.args = args
        self.pos = pos

    def __str__(self):
        a = ", ".join(str(x) for x in self.args)
        return f"new {self.class_name}({a})"
