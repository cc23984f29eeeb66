"""Type hints for the typing module's generic collections."""

from __future__ import annotations

import re

from paramhint.constants import (
    TYPE_CATEGORIES,
    TYPING_MODULE,
    PythonType,
    TypeCategory,
    category_of,
)
from paramhint.inference.detector import detect_type
from paramhint.inference.schemas import TypingImport, VariableSearchResult

_FROM_TYPING_IMPORT = re.compile(
    rf"^[ \t]*from[ \t]+{TYPING_MODULE}[ \t]+import[ \t]+\(?[ \t]*"
    r"([A-Z][a-zA-Z0-9 \t,]*)",
    re.MULTILINE,
)
_IMPORT_TYPING = re.compile(
    rf"^[ \t]*import[ \t]+{TYPING_MODULE}(?:[ \t]+as[ \t]+"
    r"([a-zA-Z_][a-zA-Z0-9_]*))?[ \t]*(?:#.*)?$",
    re.MULTILINE,
)

COLLECTION_TYPES: tuple[PythonType, ...] = tuple(
    t for t, c in TYPE_CATEGORIES.items() if c == TypeCategory.COLLECTION
)


class TypingHintProvider:
    """Provides hints such as ``List[`` and ``List[int]``.

    The spelling of a hint follows how the document imports typing:
    ``from typing import List`` gives ``List[``, ``import typing as t``
    gives ``t.List[``. Call :meth:`detect_typing_import` first; a
    provider describes one document.
    """

    def __init__(self, typing_import: TypingImport | None = None) -> None:
        self._typing_import = (
            typing_import if typing_import is not None else TypingImport()
        )

    @property
    def typing_import(self) -> TypingImport:
        return self._typing_import

    async def detect_typing_import(self, document_text: str) -> bool:
        """Determine if the document imports typing, and how."""
        match = _FROM_TYPING_IMPORT.search(document_text)
        if match:
            names: dict[str, str] = {}
            for imported in match.group(1).split(","):
                parts = imported.split()
                if len(parts) == 3 and parts[1] == "as":
                    names[parts[0]] = parts[2]
                elif len(parts) == 1:
                    names[parts[0]] = parts[0]
            self._typing_import = TypingImport(
                detected=True, from_import=True, names=names
            )
            return True

        match = _IMPORT_TYPING.search(document_text)
        if match:
            self._typing_import = TypingImport(
                detected=True, prefix=match.group(1) or TYPING_MODULE
            )
            return True

        self._typing_import = TypingImport()
        return False

    def get_hint(self, type_name: str) -> str | None:
        """Opening typing hint for a collection type, e.g. ``List[``."""
        if category_of(type_name) != TypeCategory.COLLECTION:
            return None
        return self._typing_string(type_name)

    def get_hints(
        self, search_result: VariableSearchResult | None
    ) -> list[str] | None:
        """Hints derived from a search result.

        Returns one or two hints for collections, e.g. ``List[`` and
        ``List[str]``. The element type comes from the first element
        of the assigned value. Dict value types are not detected, so
        hints that contain a ``Dict[`` are left open.
        """
        if search_result is None:
            return None
        if category_of(search_result.type_name) != TypeCategory.COLLECTION:
            return None
        result = [self._typing_string(search_result.type_name)]
        label = result[0]
        # Remove [, {, ( to detect the type of the first element
        element_value = search_result.value_assignment.strip()[1:]
        element_type = detect_type(element_value)
        collection_count = 1
        dict_element_found = False

        while (
            not dict_element_found
            and element_type is not None
            and TYPE_CATEGORIES[element_type] == TypeCategory.COLLECTION
        ):
            if element_type == PythonType.DICT:
                dict_element_found = True
            label += self._typing_string(element_type)
            element_value = element_value.strip()[1:]
            element_type = detect_type(element_value)
            collection_count += 1

        add_closing_brackets = False
        if element_type is not None:
            label += element_type.value
            add_closing_brackets = (
                not dict_element_found
                and search_result.type_name != PythonType.DICT
            )

        if label != result[0]:
            if add_closing_brackets:
                label += "]" * collection_count
            result.append(label)
        return result

    def get_remaining_hints(self) -> list[str]:
        """Opening hints for every collection type.

        Without a typing import the unprefixed hints come first,
        followed by the ``typing.``-prefixed ones.
        """
        if self._typing_import.detected:
            return [self._typing_string(t) for t in COLLECTION_TYPES]
        return [
            f"{t.value.capitalize()}[" for t in COLLECTION_TYPES
        ] + [
            f"{TYPING_MODULE}.{t.value.capitalize()}["
            for t in COLLECTION_TYPES
        ]

    def _typing_string(self, type_name: str) -> str:
        typing_name = type_name.capitalize()
        ti = self._typing_import
        if ti.from_import and typing_name in ti.names:
            return f"{ti.names[typing_name]}["
        return f"{ti.prefix}.{typing_name}["
