"""Pydantic models for the inference data flow."""

from pydantic import BaseModel, ConfigDict, Field

from paramhint.constants import TYPING_MODULE, EstimationSource


class VariableSearchResult(BaseModel):
    """Output of the variable search: a resolved type and its origin."""

    model_config = ConfigDict(frozen=True)

    type_name: str
    estimation_source: EstimationSource
    value_assignment: str  # raw right-hand side of the assignment


class TypingImport(BaseModel):
    """How (and whether) a document imports the typing module."""

    model_config = ConfigDict(frozen=True)

    detected: bool = False
    from_import: bool = False  # from typing import List, Dict
    prefix: str = TYPING_MODULE  # import typing [as prefix]
    # typing name → name bound in the document (``List as L``: List → L)
    names: dict[str, str] = Field(default_factory=dict)
