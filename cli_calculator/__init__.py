"""Command-line integer calculator: lexer, recursive descent parser and evaluator."""

from .main import (
    CalculatorError,
    CalcSyntaxError,
    IllegalCharacter,
    DivisionByZero,
    Token,
    TokenType,
    Literal,
    BinaryOp,
    tokenize,
    parse,
    evaluate,
    calculate,
    run,
)
