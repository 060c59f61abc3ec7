# main.py

"""
Command-line integer calculator.

Evaluates a single arithmetic expression given as the only command-line argument and writes either the
integer result or the name of the error kind to stderr. The pipeline is:

    text -> tokenize() -> parse() -> evaluate() -> int

Grammar (lowest precedence first):
    expression : term ((PLUS|MINUS) term)*
    term       : factor ((STAR|SLASH) factor)*
    factor     : NUMBER | LPAREN expression RPAREN

There are no unary operators, so a leading '-' or '+' is a syntax error. Division truncates toward zero.
"""

from __future__ import annotations

import argparse
import logging
import os
import re
import sys
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ValidationError, field_validator

logger = logging.getLogger(__name__)


# ---------------------------
# Error Classes
# ---------------------------

class CalculatorError(Exception):
    """Base class for calculator errors. `kind` is the name printed by the CLI."""
    kind = 'CalculatorError'

class CalcSyntaxError(CalculatorError):
    """Raised when the token sequence does not match the grammar."""
    kind = 'SyntaxError'

class IllegalCharacter(CalculatorError):
    """Raised by the lexer on the first character it cannot scan."""
    kind = 'IllegalCharacter'

class DivisionByZero(CalculatorError):
    """Raised when the right operand of '/' evaluates to zero."""
    kind = 'ZeroDivisionError'


# ---------------------------
# Tokenizer
# ---------------------------

class TokenType:
    """Enumeration of token types."""
    NUMBER = 'NUMBER'
    PLUS = 'PLUS'
    MINUS = 'MINUS'
    STAR = 'STAR'
    SLASH = 'SLASH'
    LPAREN = 'LPAREN'
    RPAREN = 'RPAREN'
    END = 'END'

@dataclass(frozen=True)
class Token:
    """A token with type, value and character position."""
    type: str
    value: Any = None
    pos: int = 0

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value!r}, pos={self.pos})"

# Only ASCII digits and a plain space are part of the alphabet; tabs, newlines and '.' fall into MISMATCH.
_TOKEN_SPECIFICATION = [
    (TokenType.NUMBER, r'[0-9]+'),
    (TokenType.PLUS,   r'\+'),
    (TokenType.MINUS,  r'-'),
    (TokenType.STAR,   r'\*'),
    (TokenType.SLASH,  r'/'),
    (TokenType.LPAREN, r'\('),
    (TokenType.RPAREN, r'\)'),
    ('SKIP',           r' +'),
    ('MISMATCH',       r'.'),
]
_TOKEN_REGEX = re.compile(
    '|'.join(f'(?P<{name}>{pattern})' for name, pattern in _TOKEN_SPECIFICATION),
    re.DOTALL,
)

def tokenize(text: str) -> List[Token]:
    """
    Converts the input string into a list of tokens terminated by an END token.
    Raises IllegalCharacter on the first character outside the calculator alphabet, and
    CalcSyntaxError for a digit run too long for int().
    """
    tokens: List[Token] = []
    for mo in _TOKEN_REGEX.finditer(text):
        kind = mo.lastgroup
        value = mo.group()
        pos = mo.start()
        if kind == TokenType.NUMBER:
            try:
                number = int(value)
            except ValueError:
                # CPython caps int() on very long digit strings
                raise CalcSyntaxError(f"Numeric literal too long at position {pos}")
            tokens.append(Token(TokenType.NUMBER, number, pos))
        elif kind == 'SKIP':
            pass
        elif kind == 'MISMATCH':
            raise IllegalCharacter(f"Unexpected character {value!r} at position {pos}")
        else:
            tokens.append(Token(kind, value, pos))
    tokens.append(Token(TokenType.END, None, len(text)))
    return tokens


# ---------------------------
# AST Nodes
# ---------------------------

@dataclass(frozen=True)
class Expression:
    """Base expression node."""
    pass

@dataclass(frozen=True)
class Literal(Expression):
    value: int

@dataclass(frozen=True)
class BinaryOp(Expression):
    op: str
    left: Expression
    right: Expression


# ---------------------------
# Parser
# ---------------------------

# Deepest parenthesis nesting accepted; anything deeper is a syntax error.
MAX_NESTING = 1000

class Parser:
    """
    Recursive descent parser over a token list ending with END.
    The first grammar violation raises CalcSyntaxError; there is no recovery.
    Each '(' costs three frames (factor -> expression -> term), so parse() widens the recursion
    limit to fit MAX_NESTING levels for its own duration.
    """
    def __init__(self, tokens: List[Token]):
        if not tokens or tokens[-1].type != TokenType.END:
            raise CalcSyntaxError("Token stream is not terminated by END")
        self.tokens = tokens
        self.pos = 0
        self.depth = 0

    def _current(self) -> Token:
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        tok = self.tokens[self.pos]
        # END is never consumed past
        if tok.type != TokenType.END:
            self.pos += 1
        return tok

    def _expect(self, type_: str) -> Token:
        tok = self._current()
        if tok.type != type_:
            raise CalcSyntaxError(f"Expected {type_}, got {tok.type} at position {tok.pos}")
        return self._advance()

    def parse(self) -> Expression:
        limit = sys.getrecursionlimit()
        sys.setrecursionlimit(limit + 3 * MAX_NESTING)
        try:
            node = self.expression()
        finally:
            sys.setrecursionlimit(limit)
        tok = self._current()
        if tok.type != TokenType.END:
            raise CalcSyntaxError(f"Unexpected token {tok.value!r} at position {tok.pos}")
        return node

    def expression(self) -> Expression:
        """
        expression : term ((PLUS|MINUS) term)*
        """
        node = self.term()
        while self._current().type in (TokenType.PLUS, TokenType.MINUS):
            op_tok = self._advance()
            node = BinaryOp(op_tok.type, node, self.term())
        return node

    def term(self) -> Expression:
        """
        term : factor ((STAR|SLASH) factor)*
        """
        node = self.factor()
        while self._current().type in (TokenType.STAR, TokenType.SLASH):
            op_tok = self._advance()
            node = BinaryOp(op_tok.type, node, self.factor())
        return node

    def factor(self) -> Expression:
        """
        factor : NUMBER | LPAREN expression RPAREN
        """
        tok = self._current()
        if tok.type == TokenType.NUMBER:
            self._advance()
            return Literal(tok.value)
        if tok.type == TokenType.LPAREN:
            if self.depth >= MAX_NESTING:
                raise CalcSyntaxError(f"Parentheses nested deeper than {MAX_NESTING} at position {tok.pos}")
            self._advance()
            self.depth += 1
            node = self.expression()
            self._expect(TokenType.RPAREN)
            self.depth -= 1
            return node
        if tok.type == TokenType.END:
            raise CalcSyntaxError(f"Unexpected end of input at position {tok.pos}")
        raise CalcSyntaxError(f"Expected number or '(', got {tok.value!r} at position {tok.pos}")

def parse(tokens: List[Token]) -> Expression:
    return Parser(tokens).parse()


# ---------------------------
# Evaluator
# ---------------------------

def _truncating_div(left: int, right: int) -> int:
    """Integer division rounding toward zero (Python's // rounds toward negative infinity)."""
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient

class Evaluator:
    """
    Post-order evaluation of an expression tree to an int.
    Walks with an explicit stack: a long chain such as 1+1+...+1 is a left-leaning tree as deep as
    the chain is long.
    """

    def eval(self, node: Expression) -> int:
        values: List[int] = []
        stack: List[Tuple[Expression, bool]] = [(node, False)]
        while stack:
            current, children_done = stack.pop()
            if isinstance(current, Literal):
                values.append(current.value)
            elif isinstance(current, BinaryOp):
                if children_done:
                    right = values.pop()
                    left = values.pop()
                    values.append(self.apply(current.op, left, right))
                else:
                    # left is popped, and so evaluated, first
                    stack.append((current, True))
                    stack.append((current.right, False))
                    stack.append((current.left, False))
            else:
                raise CalculatorError(f"Unsupported AST node: {type(current).__name__}")
        return values.pop()

    @staticmethod
    def apply(op: str, left: int, right: int) -> int:
        if op == TokenType.PLUS:
            return left + right
        if op == TokenType.MINUS:
            return left - right
        if op == TokenType.STAR:
            return left * right
        if op == TokenType.SLASH:
            if right == 0:
                raise DivisionByZero("Division by zero")
            return _truncating_div(left, right)
        raise CalculatorError(f"Unknown binary operator: {op}")

def evaluate(node: Expression) -> int:
    return Evaluator().eval(node)


# ---------------------------
# Pipeline
# ---------------------------

def calculate(text: str) -> int:
    """Runs tokenize -> parse -> evaluate and returns the integer result."""
    tokens = tokenize(text)
    logger.debug("tokenized %d tokens", len(tokens))
    tree = parse(tokens)
    logger.debug("parsed %s tree", type(tree).__name__)
    return evaluate(tree)

def format_result(value: int) -> str:
    try:
        return str(value)
    except ValueError:
        # same CPython int/str conversion cap as in tokenize()
        raise CalcSyntaxError("Result has too many digits to print")

def run(text: str) -> Tuple[bool, str]:
    """
    Evaluates `text` and returns (ok, output) where output is the decimal result, or the error kind
    name when ok is False. Only CalculatorError is converted; anything else propagates.
    """
    try:
        out = format_result(calculate(text))
        logger.debug("result: %s", out)
        return True, out
    except CalculatorError as e:
        logger.info("%s for %r: %s", e.kind, text, e)
        return False, e.kind


# ---------------------------
# Configuration
# ---------------------------

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

class Settings(BaseModel):
    """Runtime settings read from the environment (optionally via a .env file)."""
    log_level: str = 'WARNING'
    log_file: Optional[str] = None

    @field_validator('log_level')
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @field_validator('log_file')
    @classmethod
    def empty_log_file_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    values = {}
    if 'CALC_LOG_LEVEL' in env:
        values['log_level'] = env['CALC_LOG_LEVEL']
    if 'CALC_LOG_FILE' in env:
        values['log_file'] = env['CALC_LOG_FILE']
    return Settings(**values)

def configure_logging(settings: Settings) -> None:
    # stderr is the outcome channel, so records only reach it when the level is lowered explicitly
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format=LOG_FORMAT,
        filename=settings.log_file,
        force=True,
    )


# ---------------------------
# Main Entry Point
# ---------------------------

def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='cli_calculator',
        description="Evaluate an integer arithmetic expression and print the result to stderr.",
        add_help=False,
    )
    parser.add_argument(
        'expression',
        type=str,
        help="Expression using digits, + - * / and parentheses, e.g. '(10+5)*2'.",
    )
    return parser

def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point. Writes the outcome line to stderr and returns the exit status:
    0 for a result, 1 for a calculator error, 2 for bad arguments or configuration.
    """
    load_dotenv(find_dotenv(usecwd=True))
    try:
        settings = load_settings()
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        print(f"cli_calculator: error: invalid configuration: {problems}", file=sys.stderr)
        return 2
    configure_logging(settings)
    if argv is None:
        argv = sys.argv[1:]
    # '--' keeps expressions such as '-' or '-1+2' from being read as options
    args = build_arg_parser().parse_args(['--', *argv])
    ok, out = run(args.expression)
    print(out, file=sys.stderr)
    return 0 if ok else 1

if __name__ == '__main__':
    sys.exit(main())
