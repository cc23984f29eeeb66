"""Type inference from raw document text."""

from paramhint.inference.detector import detect_type, invalid_ternary
from paramhint.inference.schemas import TypingImport, VariableSearchResult
from paramhint.inference.search import (
    class_with_same_name,
    find_import,
    find_param,
    find_same_named_variable,
    hint_of_similar_param,
)
from paramhint.inference.typing_hints import TypingHintProvider

__all__ = [
    "TypingHintProvider",
    "TypingImport",
    "VariableSearchResult",
    "class_with_same_name",
    "detect_type",
    "find_import",
    "find_param",
    "find_same_named_variable",
    "hint_of_similar_param",
    "invalid_ternary",
]
