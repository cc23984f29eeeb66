"""Shared constants, the single source of truth for cross-module values.

All type names, categories and tunables that appear in 2+ modules
belong here. StrEnum members are str-compatible, so hints built from
them can be compared against plain strings unchanged.
"""

from __future__ import annotations

from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class PythonType(StrEnum):
    """Built-in Python types that can be hinted.

    Member order is the enumeration order used for fallback hints.
    """

    BOOL = "bool"
    COMPLEX = "complex"
    DICT = "dict"
    FLOAT = "float"
    INT = "int"
    LIST = "list"
    OBJECT = "object"
    SET = "set"
    STR = "str"
    TUPLE = "tuple"
    BYTES = "bytes"


class TypeCategory(StrEnum):
    """Categories of built-in types."""

    ABSTRACT = "abstract"
    BASIC = "basic"
    COLLECTION = "collection"


class EstimationSource(StrEnum):
    """Where a resolved type came from.

    CLASS_DEFINITION results are exempt from ternary ambiguity checks.
    """

    CLASS_DEFINITION = "class_definition"
    FUNCTION_DEFINITION_RETURN_HINT = "function_definition_return_hint"
    DIRECT_VALUE = "direct_value"
    VALUE_OF_OTHER_VARIABLE = "value_of_other_variable"


class EstimateStage(StrEnum):
    """The estimator stage that decided a result (for logs)."""

    PARAM_SUFFIX = "param_suffix"
    SIMILAR_PARAM = "similar_param"
    CLASS_NAME = "class_name"
    VARIABLE = "variable"
    NAME_FALLBACK = "name_fallback"
    WORKSPACE = "workspace"
    NONE = "none"


TYPE_CATEGORIES: dict[PythonType, TypeCategory] = {
    PythonType.BOOL: TypeCategory.BASIC,
    PythonType.COMPLEX: TypeCategory.BASIC,
    PythonType.DICT: TypeCategory.COLLECTION,
    PythonType.FLOAT: TypeCategory.BASIC,
    PythonType.INT: TypeCategory.BASIC,
    PythonType.LIST: TypeCategory.COLLECTION,
    PythonType.OBJECT: TypeCategory.ABSTRACT,
    PythonType.SET: TypeCategory.COLLECTION,
    PythonType.STR: TypeCategory.BASIC,
    PythonType.TUPLE: TypeCategory.COLLECTION,
    PythonType.BYTES: TypeCategory.BASIC,
}


def category_of(type_name: str) -> TypeCategory | None:
    """Category of a built-in type name, None for anything else."""
    try:
        return TYPE_CATEGORIES[PythonType(type_name)]
    except ValueError:
        return None


_BUILTIN_TYPE_NAMES = frozenset(t.value for t in PythonType)


def is_builtin_type(type_name: str) -> bool:
    return type_name in _BUILTIN_TYPE_NAMES


# ── Estimation Tables ────────────────────────────────────

# Types a parameter name suffix may name (``items_list``, ``testlist``).
# Checked in this order.
LIKELY_TYPES: tuple[PythonType, ...] = (
    PythonType.LIST,
    PythonType.DICT,
    PythonType.STR,
    PythonType.BOOL,
    PythonType.INT,
    PythonType.TUPLE,
    PythonType.FLOAT,
)

# Parameter name → type guess when nothing else is known
TYPE_GUESSES: dict[str, PythonType] = {
    "string": PythonType.STR,
    "text": PythonType.STR,
    "path": PythonType.STR,
    "url": PythonType.STR,
    "uri": PythonType.STR,
    "fullpath": PythonType.STR,
    "full_path": PythonType.STR,
    "number": PythonType.INT,
    "num": PythonType.INT,
}

# ── Patterns ─────────────────────────────────────────────

# A class, function or module name, optionally dotted
ANY_NAME_PATTERN = r"[a-zA-Z_][a-zA-Z0-9_.]*"

# Same, but Unicode-aware (function names in signatures)
ANY_UNICODE_NAME_PATTERN = r"[^\W\d][\w.]*"

TYPING_MODULE = "typing"

# ── Workspace Search ─────────────────────────────────────

DEFAULT_SOURCE_GLOB = "**/*.py"
DEFAULT_WORKSPACE_SEARCH_LIMIT = 10

# ── Misc ─────────────────────────────────────────────────

ERROR_TRUNCATION_CHARS = 200
