"""Detect built-in Python types from value expressions.

Detection is purely lexical: a fragment such as ``[1, 2]`` or
``dict(a=1)`` is matched against an ordered table of patterns and the
first matching row wins. Rows are ordered so that more specific forms
shadow less specific ones:

* ``list`` before ``bool`` and the numbers, so ``[True]`` is a list
* ``complex`` before ``float``/``int``, so a trailing ``j`` is seen first
* ``tuple`` before ``set``/``dict``/``str``, so ``('a', 'b')`` is a tuple
* ``str`` and ``bytes`` before ``int``, so quoted numerals stay strings
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from paramhint.constants import PythonType


@dataclass(frozen=True)
class TypeRule:
    """A type with its constructor-call and literal patterns."""

    type_name: PythonType
    call: re.Pattern[str]
    literal: re.Pattern[str] | None = None


def _rule(
    type_name: PythonType, literal: str | None = None
) -> TypeRule:
    return TypeRule(
        type_name=type_name,
        call=re.compile(rf"{type_name.value}\("),
        literal=re.compile(literal) if literal is not None else None,
    )


# A parenthesised run that reaches a comma is a tuple, not a number
_NOT_A_TUPLE = r"(?!\([^)]*,)"

# Patterns are applied with re.match against a stripped fragment, so they
# only need to recognise a telltale prefix, not parse the whole expression.
TYPE_RULES: tuple[TypeRule, ...] = (
    _rule(PythonType.LIST, r"\["),
    _rule(PythonType.BOOL, r"(?:True|False)\b"),
    _rule(PythonType.COMPLEX, _NOT_A_TUPLE + r"[()0-9+*/ .-]*[0-9][jJ]"),
    _rule(
        PythonType.FLOAT,
        _NOT_A_TUPLE
        + r"[-(]*(?:[0-9+*/ -]*\.[0-9]|[0-9]+[eE][-+]?[0-9])",
    ),
    _rule(
        PythonType.TUPLE,
        r"""\((?: *\)|[^'",)]+,| *"[^"]*" *,| *'[^']*' *,)""",
    ),
    _rule(
        PythonType.SET,
        r"""\{(?: *"[^"]*" *[},]+| *'[^']*' *[},]+|[^:]+\})""",
    ),
    _rule(PythonType.DICT, r"\{"),
    _rule(
        PythonType.STR,
        r"""(?:\( *)?[fFrRuU]{0,2}(?:['"]{2}|"[^"]*"|'[^']*')""",
    ),
    _rule(
        PythonType.BYTES,
        r"""[rR]?[bB][rR]?(?:['"]{2}|"[^"]*"|'[^']*')""",
    ),
    _rule(PythonType.INT, r"[-(]*[0-9]"),
    _rule(PythonType.OBJECT),
)

_LOOKS_LIKE_CALL = re.compile(r"[a-z]")

# `X if cond else Y` at the end of a value; group 1 is Y
_TERNARY = re.compile(r" if +.+? +else( +[^ ]+) *$")


def detect_type(value: str) -> PythonType | None:
    """Detect the type of a value, if it is a built-in Python type.

    Constructor calls (``list(x)``) are tried first for fragments that
    start like an identifier, then literal forms. A bare type keyword
    (``int``) is not a call and is treated as data.
    """
    value = value.strip()
    if not value:
        return None

    if _LOOKS_LIKE_CALL.match(value):
        for rule in TYPE_RULES:
            if rule.call.match(value):
                return rule.type_name

    for rule in TYPE_RULES:
        if rule.literal is not None and rule.literal.match(value):
            return rule.type_name
    return None


def invalid_ternary(type_name: str, value: str) -> bool:
    """Test if *value* is a conditional that may produce another type.

    Only the final ``else`` branch is inspected, which also resolves
    nested conditionals. An undetectable branch is not ambiguous.
    """
    match = _TERNARY.search(value)
    if match is None:
        return False
    else_type = detect_type(match.group(1))
    if else_type is None:
        return False
    return else_type != type_name
