"""
grammar.py

Lark grammar for Bython: brace-scoped blocks, newline or `;` separated
statements, and a flat `operand (op operand)*` expression form whose
precedence is resolved by the parser, not by the grammar.
"""
from functools import lru_cache

import lark

# keywords are carved out of NAME by its negative lookahead; `not` is
# reserved even though no production uses it.
GRAMMAR = r"""
start: _stmts

block: "{" _stmts "}"

_stmts: _sep* (_statement _sep+)* _statement?
_sep: _NL | ";"

_statement: assign_stmt
          | print_stmt
          | return_stmt
          | if_stmt
          | for_stmt
          | while_stmt
          | funcdef
          | call_stmt
          | classdef

assign_stmt: dotted_name "=" expr
print_stmt: "print" "(" expr ")"
return_stmt: "return" expr
if_stmt: "if" expr block (_NL* "else" (block | if_stmt))?
for_stmt: "for" NAME "in" expr block
while_stmt: "while" expr block
funcdef: "def" NAME "(" params ")" block
params: (NAME ("," NAME)*)?
classdef: "class" NAME block
call_stmt: dotted_name arguments

arguments: "(" (expr ("," expr)*)? ")"
dotted_name: NAME ("." NAME)*

expr: _operand (_binop _operand)*
_binop: COMP_OP | ADD_OP | MUL_OP | AND | OR

_operand: NUMBER
        | STRING
        | paren
        | dotted_name
        | call
paren: "(" expr ")"
call: dotted_name arguments ("." NAME arguments?)*

COMP_OP: "==" | "!=" | "<=" | ">=" | "<" | ">"
ADD_OP: "+" | "-"
MUL_OP: "*" | "/"
AND: "and"
OR: "or"

NAME: /(?!(?:if|else|for|in|while|def|class|print|return|and|or|not)\b)[A-Za-z_][A-Za-z0-9_]*/
NUMBER: /\d+(\.\d+)?/
STRING: /"(?:[^"\\\n]|\\.)*"/

COMMENT: /#[^\n]*/
_NL: /\n/

%ignore /[ \t\f\r]+/
%ignore COMMENT
"""


@lru_cache(maxsize=None)
def get_parser() -> lark.Lark:
    """Build the Lark parser once; it is read-only afterwards."""
    return lark.Lark(
        GRAMMAR,
        start=["start", "expr"],
        parser="earley",
        lexer="basic",
        propagate_positions=True,
    )
