import logging
import math

from .ast import (
    Program,
    Block,
    Assignment,
    Print,
    Return,
    If,
    For,
    While,
    FunctionDef,
    FunctionCall,
    ClassDef,
    Identifier,
    Number,
    String,
    BinaryOp,
    MemberAccess,
    MethodCall,
    ClassInstantiation,
    BINARY_PRECEDENCE,
    COMPARISON_PRECEDENCE,
)
from .errors import UnsupportedExpressionError

INDENT = "    "


def generate(program: Program) -> str:
    return CodeGen(program).gen()


class CodeGen:
    def __init__(self, program: Program):
        self.program = program
        self.out: list[str] = []
        self.level = 0

    def gen(self) -> str:
        # fresh state so repeated calls give identical text
        self.out = []
        self.level = 0
        for stmt in self.program.stmts:
            self.gen_stmt(stmt)
        logging.debug(f"Generated {len(self.out)} lines")
        return "".join(f"{line}\n" for line in self.out)

    def gen_block(self, block: Block):
        self.level += 1
        if not block.stmts:
            self.emit("pass")
        for stmt in block.stmts:
            self.gen_stmt(stmt)
        self.level -= 1

    def gen_stmt(self, stmt):
        if isinstance(stmt, Assignment):
            self.emit(f"{stmt.name} = {self.gen_expr(stmt.value)}")
            return

        if isinstance(stmt, Print):
            self.emit(f"print({self.gen_expr(stmt.content)})")
            return

        if isinstance(stmt, Return):
            self.emit(f"return {self.gen_expr(stmt.value)}")
            return

        if isinstance(stmt, If):
            self.emit(f"if {self.gen_expr(stmt.condition)}:")
            self.gen_block(stmt.consequence)
            if stmt.alternative is not None:
                self.emit("else:")
                self.gen_block(stmt.alternative)
            return

        if isinstance(stmt, For):
            self.emit(f"for {stmt.target} in {self.gen_expr(stmt.iterator)}:")
            self.gen_block(stmt.body)
            return

        if isinstance(stmt, While):
            self.emit(f"while {self.gen_expr(stmt.condition)}:")
            self.gen_block(stmt.body)
            return

        if isinstance(stmt, FunctionDef):
            self.emit(f"def {stmt.name}({', '.join(stmt.params)}):")
            self.gen_block(stmt.body)
            return

        # Bare FunctionCall
        if isinstance(stmt, FunctionCall):
            self.emit(self.gen_expr(stmt))
            return

        if isinstance(stmt, ClassDef):
            self.emit(f"class {stmt.name}:")
            self.gen_block(stmt.body)
            return

        raise UnsupportedExpressionError(
            f"Cannot codegen statement: {stmt}", pos=getattr(stmt, "pos", None)
        )

    def gen_expr(self, expr) -> str:
        if isinstance(expr, Identifier):
            return expr.name
        elif isinstance(expr, Number):
            return self.gen_number(expr)
        elif isinstance(expr, String):
            return f'"{expr.value}"'
        elif isinstance(expr, BinaryOp):
            self._precedence(expr)
            left = self.gen_operand(expr, expr.left, is_right=False)
            right = self.gen_operand(expr, expr.right, is_right=True)
            return f"{left} {expr.op} {right}"
        elif isinstance(expr, MemberAccess):
            return f"{self.gen_receiver(expr.obj)}.{expr.member}"
        elif isinstance(expr, MethodCall):
            return f"{self.gen_receiver(expr.obj)}.{expr.method}({self.gen_args(expr.args)})"
        elif isinstance(expr, FunctionCall):
            return f"{expr.name}({self.gen_args(expr.args)})"
        elif isinstance(expr, ClassInstantiation):
            return f"{expr.class_name}({self.gen_args(expr.args)})"
        else:
            raise UnsupportedExpressionError(
                f"Cannot codegen expression: {expr}", pos=getattr(expr, "pos", None)
            )

    def gen_operand(self, parent: BinaryOp, child, is_right: bool) -> str:
        text = self.gen_expr(child)
        if not isinstance(child, BinaryOp):
            return text
        parent_prec = self._precedence(parent)
        child_prec = self._precedence(child)
        if (
            child_prec != parent_prec
            or is_right
            # python would chain `a < b == c`
            or child_prec == COMPARISON_PRECEDENCE
        ):
            return f"({text})"
        return text

    def gen_args(self, args) -> str:
        return ", ".join(self.gen_expr(a) for a in args)

    def gen_receiver(self, obj) -> str:
        # `.` binds tighter than any binary operator and `1.x` lexes as a float
        text = self.gen_expr(obj)
        if isinstance(obj, (BinaryOp, Number)):
            return f"({text})"
        return text

    def gen_number(self, number: Number) -> str:
        value = number.value
        if not math.isfinite(value):
            raise UnsupportedExpressionError(
                f"Cannot codegen non-finite number: {value}", pos=number.pos
            )
        if value.is_integer():
            return str(int(value))
        return repr(value)

    def _precedence(self, expr: BinaryOp) -> int:
        if expr.op not in BINARY_PRECEDENCE:
            raise UnsupportedExpressionError(
                f"'{expr.op}' is not a binary operator", pos=expr.pos
            )
        return BINARY_PRECEDENCE[expr.op][0]

    def emit(self, line: str):
        self.out.append(f"{INDENT * self.level}{line}")
