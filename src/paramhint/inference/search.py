"""Text searches over a single document.

Everything here works on raw document text with line-anchored regular
expressions. Names coming from the caller are validated by
:func:`is_valid_name` and escaped before they are interpolated into a
pattern, so malformed input is a no-match rather than an error.
"""

from __future__ import annotations

import re

from paramhint.constants import (
    ANY_NAME_PATTERN,
    ANY_UNICODE_NAME_PATTERN,
    EstimationSource,
)
from paramhint.inference.detector import detect_type, invalid_ternary
from paramhint.inference.schemas import VariableSearchResult

# Start of a value: an identifier, optionally followed by a call
_VALUE_NAME = re.compile(rf" *({ANY_NAME_PATTERN})(\()?")

# Titlecase after an optional dotted prefix: ``Foo``, ``pkg.mod.Foo``
_PROBABLY_A_CLASS = re.compile(r"([a-zA-Z0-9_]+\.)*[A-Z]")

_PARAM_SPLIT = re.compile(r"[,(]")


def is_valid_name(name: str) -> bool:
    """Return True if *name* is a (possibly dotted) Python identifier."""
    if not name:
        return False
    return all(part.isidentifier() for part in name.split("."))


def class_with_same_name(
    name: str,
    document_text: str,
    *,
    ignore_case: bool = True,
) -> str | None:
    """Search for a class named *name* and return its declared name.

    The ``class`` keyword always matches case-insensitively; the name
    itself only when *ignore_case* is set (``test`` finds ``Test``).
    """
    if not is_valid_name(name):
        return None
    flags = re.MULTILINE | (re.IGNORECASE if ignore_case else 0)
    match = re.search(
        rf"^[ \t]*(?i:class)[ \t]+({re.escape(name)})[ \t]*[(:]",
        document_text,
        flags,
    )
    return match.group(1) if match else None


def find_same_named_variable(
    name: str, document_text: str
) -> VariableSearchResult | None:
    """Search for a variable named *name* and detect its type.

    Resolution order for the assigned value:

    1. a built-in literal or constructor call
    2. an instance of a class defined in the document
    3. a titlecase call with no matching ``def`` (implicit instantiation)
    4. a call to a function with a return annotation
    5. another local variable, one hop only
    """
    if not is_valid_name(name):
        return None
    match = _variable_search(name).search(document_text)
    if match is None:
        return None
    value_assignment = match.group(1)

    type_name = detect_type(value_assignment)
    if type_name is not None:
        return VariableSearchResult(
            type_name=type_name,
            estimation_source=EstimationSource.DIRECT_VALUE,
            value_assignment=value_assignment,
        )

    value_match = _VALUE_NAME.match(value_assignment)
    if value_match is None:
        return None
    value = value_match.group(1)

    if value_match.group(2):
        return _resolve_call(value, value_assignment, document_text)

    # Searching the import source document is not supported
    if is_imported(value, document_text):
        return None
    other = _variable_search(value).search(document_text)
    if other is None:
        return None
    other_value = other.group(1)
    other_type = detect_type(other_value)
    if other_type is None or invalid_ternary(other_type, other_value):
        return None
    return VariableSearchResult(
        type_name=other_type,
        estimation_source=EstimationSource.VALUE_OF_OTHER_VARIABLE,
        value_assignment=value_assignment,
    )


def _resolve_call(
    value: str, value_assignment: str, document_text: str
) -> VariableSearchResult | None:
    """Resolve the type of ``value(...)``."""
    if class_with_same_name(value, document_text, ignore_case=False):
        return VariableSearchResult(
            type_name=value,
            estimation_source=EstimationSource.CLASS_DEFINITION,
            value_assignment=value_assignment,
        )

    if looks_like_a_class(value):
        defined = re.search(
            rf"^[ \t]*def[ \t]+{re.escape(value)}[ \t]*\(",
            document_text,
            re.MULTILINE,
        )
        if defined is None:
            return VariableSearchResult(
                type_name=value,
                estimation_source=EstimationSource.DIRECT_VALUE,
                value_assignment=value_assignment,
            )
        return None

    function_name = value.rsplit(".", 1)[-1]
    return_hint = function_return_hint(function_name, document_text)
    if return_hint is None:
        return None
    return VariableSearchResult(
        type_name=return_hint,
        estimation_source=EstimationSource.FUNCTION_DEFINITION_RETURN_HINT,
        value_assignment=value_assignment,
    )


def function_return_hint(
    function_name: str, document_text: str
) -> str | None:
    """Return annotation of ``def function_name(...) -> X``, if any."""
    if not is_valid_name(function_name):
        return None
    match = re.search(
        rf"^[ \t]*(?:async[ \t]+)?def[ \t]+{re.escape(function_name)}"
        r"[ \t]*\([^)]*\) *-> *([a-zA-Z_][a-zA-Z0-9_.\[\], ]*[a-zA-Z0-9_\]])",
        document_text,
        re.MULTILINE,
    )
    return match.group(1) if match else None


def is_ambiguous(result: VariableSearchResult) -> bool:
    """True if the result's value is a conditional of mixed types.

    Class instantiations are never ambiguous.
    """
    if result.estimation_source == EstimationSource.CLASS_DEFINITION:
        return False
    return invalid_ternary(result.type_name, result.value_assignment)


def hint_of_similar_param(param: str, document_text: str) -> str | None:
    """Search for a previously hinted parameter with the same name.

    Matches ``def func(..., param: Hint`` unless the parameter sits in a
    comment. Comments on earlier lines of the signature are skipped.
    Default values are not part of the hint.
    """
    if not is_valid_name(param) or "." in param:
        return None
    match = re.search(
        rf"^[ \t]*(?:async[ \t]+)?def[ \t]+{ANY_UNICODE_NAME_PATTERN}"
        r"[ \t]*\((?:[^)#]|#[^\n]*\n)*"
        rf"(?<![\w.]){re.escape(param)}(?!\w)"
        r"[ \t]*:[ \t]*([^\s),:=#]+)",
        document_text,
        re.MULTILINE,
    )
    if match is None:
        return None
    hint = match.group(1).strip()
    return hint or None


def find_import(
    name: str,
    document_text: str,
    check_as_imports: bool = True,
) -> str | None:
    """Resolve *name* against the imports of a document.

    Returns the spelling that is valid in the document, or None:

    * ``pkg.mod.Type`` with ``import pkg.mod`` → ``pkg.mod.Type``
    * ``pkg.mod.Type`` with ``from pkg.mod import Type`` → ``Type``
    * ``x.Type`` with ``from y import x`` → ``x.Type``
    * ``Type`` with ``from m import Type`` → ``Type``
    """
    if not is_valid_name(name):
        return None

    if "." in name:
        module, type_name = name.rsplit(".", 1)
        escaped_module = re.escape(module)

        if "." not in module and module != type_name:
            match = re.search(
                rf"^[ \t]*import[ \t]+{escaped_module}(?!\w)"
                rf"|^[ \t]*from[ \t]+{ANY_NAME_PATTERN}[ \t]+import[ \t]+"
                rf"({escaped_module})(?!\w)",
                document_text,
                re.MULTILINE,
            )
            if match:
                # 'Object.Type' for 'from x import Object'
                return f"{match.group(1)}.{type_name}" if match.group(1) else name

        match = re.search(
            rf"^[ \t]*import[ \t]+{escaped_module}(?!\w)"
            rf"|^[ \t]*from[ \t]+{escaped_module}[ \t]+import[ \t]+"
            rf"(?:[\w \t]*,[ \t]*)*({re.escape(type_name)})(?!\w)",
            document_text,
            re.MULTILINE,
        )
        if match is None:
            return None
        return match.group(1) or name

    return name if is_imported(name, document_text, check_as_imports) else None


def is_imported(
    name: str,
    document_text: str,
    check_as_imports: bool = True,
) -> bool:
    """Detect whether *name* is bound by an import statement."""
    if not is_valid_name(name):
        return False
    escaped = re.escape(name)
    alternatives = [
        rf"import[ \t]+{escaped}(?![\w.])",
        rf"from[ \t]+{ANY_NAME_PATTERN}[ \t]+import[ \t]+\(?"
        rf"(?:[\w \t]*,[ \t]*)*{escaped}(?![\w.])(?![ \t]+as\b)",
    ]
    if check_as_imports:
        alternatives.append(
            rf"(?:from[ \t]+{ANY_NAME_PATTERN}[ \t]+)?import[ \t]+"
            rf"(?:[\w. \t]*,[ \t]*)*{ANY_NAME_PATTERN}[ \t]+as[ \t]+"
            rf"{escaped}(?!\w)"
        )
    pattern = r"^[ \t]*(?:" + "|".join(alternatives) + ")"
    return re.search(pattern, document_text, re.MULTILINE) is not None


def looks_like_a_class(name: str) -> bool:
    return _PROBABLY_A_CLASS.match(name) is not None


def find_param(line_text: str, character: int) -> str | None:
    """Find the parameter about to be hinted on a line.

    *character* is the cursor column, just after the typed ``:``.
    ``def f(self, value:`` → ``value``.
    """
    split = _PARAM_SPLIT.split(line_text[:character])
    if len(split) < 2:
        return None
    param = split[-1].strip()
    if param.endswith(":"):
        param = param[:-1].rstrip()
    return param if is_valid_name(param) else None


def _variable_search(name: str) -> re.Pattern[str]:
    """Match a line ``name = <value>``; group 1 is the value."""
    return re.compile(
        rf"^[ \t]*{re.escape(name)}[ \t]*=(?!=)[ \t]*(.+)$",
        re.MULTILINE,
    )
