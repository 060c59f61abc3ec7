# test_cli.py

"""
Process-level checks: run the calculator as `python -m cli_calculator <expression>`, capture stderr only,
and compare it with the expected literal (an int when the output parses as one, else the raw string).
"""

import os
import subprocess
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent

CASES = [
    ("0+0", 0),
    ("0-0", 0),
    ("0*0", 0),
    ("10/5", 2),
    ("5-10", -5),
    ("100-50+25", 75),
    ("10+10*10", 110),
    ("100/10*2+5", 25),
    ("10*10/5-5", 15),
    ("99999+1", 100000),
    ("12345*6789", 83810205),
    ("1000000/1", 1000000),
    ("1000000-999999", 1),
    ("7/2", 3),
    ("10/3", 3),
    ("9/4", 2),
    ("(10+5)*2", 30),
    ("100/(5+5)", 10),
    ("  10   +   5  ", 15),
    ("", "SyntaxError"),
    ("2++2", "SyntaxError"),
    ("10**2", "SyntaxError"),
    ("a", "IllegalCharacter"),
    ("1a+2", "IllegalCharacter"),
    ("-", "SyntaxError"),
    ("1/", "SyntaxError"),
    ("/1", "SyntaxError"),
    ("10//2", "SyntaxError"),
    ("10/(5-5)", "ZeroDivisionError"),
]


def run_calculator(expression):
    env = {k: v for k, v in os.environ.items() if not k.startswith("CALC_")}
    result = subprocess.run(
        [sys.executable, "-m", "cli_calculator", expression],
        capture_output=True,
        cwd=PROJECT_ROOT,
        env=env,
        timeout=60,
    )
    output = result.stderr.decode("utf8").strip()
    try:
        return int(output)
    except ValueError:
        return output


@pytest.mark.parametrize("expression,expected", CASES)
def test_cli_outcome(expression, expected):
    assert run_calculator(expression) == expected


def test_cli_prints_nothing_to_stdout():
    result = subprocess.run(
        [sys.executable, "-m", "cli_calculator", "10+10*10"],
        capture_output=True,
        cwd=PROJECT_ROOT,
        timeout=60,
    )
    assert result.stdout == b""
    assert result.returncode == 0
