import logging
import math

import lark
from lark.exceptions import (
    UnexpectedCharacters,
    UnexpectedEOF,
    UnexpectedInput,
    UnexpectedToken,
)

from . import ast
from .ast import BINARY_PRECEDENCE, Operator
from .errors import BythonSyntaxError, StructuralError
from .grammar import get_parser

BINARY_OP_TOKENS = ("COMP_OP", "ADD_OP", "MUL_OP", "AND", "OR")


def parse(source: str) -> ast.Program:
    """
    Match `source` against the grammar and build the AST.
    Raises BythonSyntaxError or StructuralError; never returns a partial tree.
    """
    try:
        tree = get_parser().parse(source, start="start")
    except UnexpectedInput as e:
        raise BythonSyntaxError(_describe(e), pos=_error_pos(e)) from e
    program = Parser(tree).parse()
    logging.debug(f"Parsed {len(program.stmts)} top-level statements")
    return program


def parse_expression(source: str):
    """Parse a single expression such as `1 + 2 * 3`."""
    try:
        tree = get_parser().parse(source.strip(), start="expr")
    except UnexpectedInput as e:
        raise BythonSyntaxError(_describe(e), pos=_error_pos(e)) from e
    return Parser(tree).parse_expr(tree)


def _describe(e: UnexpectedInput) -> str:
    if isinstance(e, UnexpectedCharacters):
        msg = f"Unexpected character {e.char!r}"
        expected = e.allowed
    elif isinstance(e, UnexpectedEOF):
        msg = "Unexpected end of input"
        expected = e.expected
    elif isinstance(e, UnexpectedToken):
        msg = f"Unexpected token {str(e.token)!r}"
        expected = e.expected
    else:
        return str(e)
    if expected:
        msg += f", expected one of: {', '.join(sorted(str(x) for x in expected))}"
    return msg


def _error_pos(e: UnexpectedInput):
    line = getattr(e, "line", -1)
    col = getattr(e, "column", -1)
    if line is None or line < 1:
        return None
    return (line, col)


def _pos(node):
    if isinstance(node, lark.Token):
        if node.line is None:
            return None
        return (node.line, node.column)
    meta = node.meta
    if getattr(meta, "empty", True):
        return None
    return (meta.line, meta.column)


class _Operands:
    """Cursor over a flat run of parse-tree children (expr operands, call suffixes)."""

    def __init__(self, items):
        self.items = items
        self.pos = 0

    def peek(self):
        if self.pos >= len(self.items):
            return None
        return self.items[self.pos]

    def next(self):
        item = self.peek()
        if item is None:
            raise StructuralError("Expression ends where an operand was expected")
        self.pos += 1
        return item


class Parser:
    # shared, read-only
    OP_PRECEDENCE = BINARY_PRECEDENCE

    # statement rule -> builder method
    STATEMENTS = {
        "assign_stmt": "parse_assignment",
        "print_stmt":  "parse_print",
        "return_stmt": "parse_return",
        "if_stmt":     "parse_if",
        "for_stmt":    "parse_for",
        "while_stmt":  "parse_while",
        "funcdef":     "parse_function_def",
        "call_stmt":   "parse_call_stmt",
        "classdef":    "parse_class_def",
    }

    def __init__(self, tree: lark.Tree):
        self.tree = tree

    def parse(self) -> ast.Program:
        if not isinstance(self.tree, lark.Tree) or self.tree.data != "start":
            raise StructuralError(f"Expected a program, got {self.tree!r}")
        return ast.Program(self.parse_stmts(self.tree), pos=_pos(self.tree))

    def parse_stmts(self, tree):
        return [self.parse_stmt(child) for child in tree.children]

    def parse_stmt(self, tree):
        if not isinstance(tree, lark.Tree):
            raise StructuralError(f"Unexpected token for statement: {tree!r}", pos=_pos(tree))
        method = self.STATEMENTS.get(tree.data)
        if method is None:
            raise StructuralError(f"Unexpected rule for statement: {tree.data}", pos=_pos(tree))
        return getattr(self, method)(tree)

    def parse_block(self, tree) -> ast.Block:
        self.expect(tree, "block")
        return ast.Block(self.parse_stmts(tree), pos=_pos(tree))

    # ---------------------------------------------------------------
    # statements
    # ---------------------------------------------------------------

    def parse_assignment(self, tree):
        target, value = self.children(tree, 2)
        return ast.Assignment(
            self.dotted_name(target), self.parse_expr(value), pos=_pos(tree)
        )

    def parse_print(self, tree):
        (content,) = self.children(tree, 1)
        return ast.Print(self.parse_expr(content), pos=_pos(tree))

    def parse_return(self, tree):
        (value,) = self.children(tree, 1)
        return ast.Return(self.parse_expr(value), pos=_pos(tree))

    def parse_if(self, tree):
        kids = tree.children
        if len(kids) not in (2, 3):
            raise StructuralError(
                f"if_stmt expects 2 or 3 children, got {len(kids)}", pos=_pos(tree)
            )
        cond = self.parse_expr(kids[0])
        consequence = self.parse_block(kids[1])

        alternative = None
        if len(kids) == 3:
            alt = kids[2]
            # `else if` chains nest as a block holding a single if
            if isinstance(alt, lark.Tree) and alt.data == "if_stmt":
                alternative = ast.Block([self.parse_if(alt)], pos=_pos(alt))
            else:
                alternative = self.parse_block(alt)

        return ast.If(cond, consequence, alternative, pos=_pos(tree))

    def parse_for(self, tree):
        target, iterator, body = self.children(tree, 3)
        return ast.For(
            self.name(target), self.parse_expr(iterator), self.parse_block(body),
            pos=_pos(tree),
        )

    def parse_while(self, tree):
        cond, body = self.children(tree, 2)
        return ast.While(self.parse_expr(cond), self.parse_block(body), pos=_pos(tree))

    def parse_function_def(self, tree):
        name, params, body = self.children(tree, 3)
        self.expect(params, "params")
        return ast.FunctionDef(
            self.name(name),
            [self.name(p) for p in params.children],
            self.parse_block(body),
            pos=_pos(tree),
        )

    def parse_call_stmt(self, tree):
        callee, arguments = self.children(tree, 2)
        return ast.FunctionCall(
            self.dotted_name(callee), self.parse_args(arguments), pos=_pos(tree)
        )

    def parse_class_def(self, tree):
        name, body = self.children(tree, 2)
        return ast.ClassDef(self.name(name), self.parse_block(body), pos=_pos(tree))

    # ---------------------------------------------------------------
    # expressions
    # ---------------------------------------------------------------

    def parse_expr(self, tree):
        self.expect(tree, "expr")
        operands = _Operands(tree.children)
        expr = self.climb(operands, 0)
        if operands.peek() is not None:
            raise StructuralError(
                f"Dangling {operands.peek()!r} after expression", pos=_pos(tree)
            )
        return expr

    def climb(self, operands, min_prec):
        lhs = self.parse_operand(operands.next())

        while operands.peek() is not None:
            tok = operands.peek()
            op = self.parse_operator(tok)
            prec, assoc = self.OP_PRECEDENCE[op]
            if prec < min_prec:
                break
            # consume operator
            operands.next()
            # for left-assoc, RHS must be strictly higher
            next_min = prec + (1 if assoc == "left" else 0)
            rhs = self.climb(operands, next_min)
            lhs = ast.BinaryOp(op, lhs, rhs, pos=_pos(tok))

        return lhs

    def parse_operator(self, tok) -> Operator:
        if not isinstance(tok, lark.Token) or tok.type not in BINARY_OP_TOKENS:
            raise StructuralError(f"Expected a binary operator, got {tok!r}", pos=_pos(tok))
        try:
            op = Operator(str(tok))
        except ValueError:
            raise StructuralError(f"Unknown operator: {tok}", pos=_pos(tok)) from None
        if op not in self.OP_PRECEDENCE:
            raise StructuralError(f"'{op}' is not a binary operator", pos=_pos(tok))
        return op

    def parse_operand(self, node):
        if isinstance(node, lark.Token):
            if node.type == "NUMBER":
                value = float(node)
                if math.isinf(value):
                    raise BythonSyntaxError(
                        f"Numeric literal out of range: {node}", pos=_pos(node)
                    )
                return ast.Number(value, pos=_pos(node))
            if node.type == "STRING":
                return ast.String(str(node)[1:-1], pos=_pos(node))
            raise StructuralError(f"Unexpected token in operand: {node.type}", pos=_pos(node))

        if node.data == "paren":
            (inner,) = self.children(node, 1)
            return self.parse_expr(inner)

        if node.data == "dotted_name":
            names = [self.name(n) for n in node.children]
            if not names:
                raise StructuralError("Empty name", pos=_pos(node))
            expr = ast.Identifier(names[0], pos=_pos(node))
            # a.b.c -> ((a).b).c, any depth
            for member in names[1:]:
                expr = ast.MemberAccess(expr, member, pos=_pos(node))
            return expr

        if node.data == "call":
            if len(node.children) < 2:
                raise StructuralError("call expects a callee and arguments", pos=_pos(node))
            callee, arguments, *suffixes = node.children
            name = self.dotted_name(callee)
            args = self.parse_args(arguments)
            if name.rsplit(".", 1)[-1][:1].isupper():
                expr = ast.ClassInstantiation(name, args, pos=_pos(node))
            else:
                expr = ast.FunctionCall(name, args, pos=_pos(node))
            return self.parse_suffixes(expr, suffixes, node)

        raise StructuralError(f"Unexpected rule for operand: {node.data}", pos=_pos(node))

    def parse_suffixes(self, expr, suffixes, node):
        # `.name` or `.name(args)` after a call, left to right
        items = _Operands(suffixes)
        while items.peek() is not None:
            member = self.name(items.next())
            following = items.peek()
            if isinstance(following, lark.Tree) and following.data == "arguments":
                items.next()
                expr = ast.MethodCall(
                    expr, member, self.parse_args(following), pos=_pos(node)
                )
            else:
                expr = ast.MemberAccess(expr, member, pos=_pos(node))
        return expr

    def parse_args(self, tree):
        self.expect(tree, "arguments")
        return [self.parse_expr(arg) for arg in tree.children]

    # ---------------------------------------------------------------
    # helpers
    # ---------------------------------------------------------------

    def expect(self, node, rule):
        if not isinstance(node, lark.Tree) or node.data != rule:
            got = node.data if isinstance(node, lark.Tree) else repr(node)
            raise StructuralError(f"Expected {rule}, got {got}", pos=_pos(node))
        return node

    def children(self, tree, count):
        if len(tree.children) != count:
            raise StructuralError(
                f"{tree.data} expects {count} children, got {len(tree.children)}",
                pos=_pos(tree),
            )
        return tree.children

    def name(self, tok) -> str:
        if not isinstance(tok, lark.Token) or tok.type != "NAME":
            raise StructuralError(f"Expected a name, got {tok!r}", pos=_pos(tok))
        return str(tok)

    def dotted_name(self, tree) -> str:
        self.expect(tree, "dotted_name")
        return ".".join(self.name(n) for n in tree.children)
