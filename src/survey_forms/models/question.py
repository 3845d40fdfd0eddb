"""Question schema models.

Two shapes of the same schema:

  - ``QuestionDefinition``: one flat record per question, as stored or
    imported.  ``parent_id`` links it into the hierarchy and ``labels`` holds
    every locale.
  - ``QuestionNode``: the locale-resolved tree node handed to the
    presentation layer, with its children nested and sorted.  It
    serialises with camelCase keys (``contentType``, ``enumOptions``).

Content types:
    - None: pure grouping node (no input, only children)
    - number / text: single input
    - enum: pick one of ``enum_options``
    - table: repeatable rows; the direct children are the per-row fields
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

from survey_forms.constants import TABLE_CONTENT_TYPE
from survey_forms.models.base import CamelModel

ContentType = Literal["number", "text", "enum", "table"]


class EnumOptionDefinition(BaseModel):
    """A selectable value of an enum question, with labels per locale."""

    id: str
    order: int = 0
    labels: dict[str, str] = Field(default_factory=dict)


class QuestionDefinition(BaseModel):
    """Flat schema record for one question."""

    id: str
    parent_id: Optional[str] = None
    order: int = 0
    content_type: Optional[ContentType] = None
    unit: Optional[str] = None
    labels: dict[str, str] = Field(default_factory=dict)
    enum_options: list[EnumOptionDefinition] = Field(default_factory=list)

    @property
    def is_table(self) -> bool:
        """True if this question is a repeatable-row container."""
        return self.content_type == TABLE_CONTENT_TYPE


class EnumOptionNode(CamelModel):
    """Enum option with its label resolved for one locale."""

    id: str
    label: str


class QuestionNode(CamelModel):
    """Locale-resolved question with its sorted children."""

    id: str
    label: str
    content_type: Optional[ContentType] = None
    order: int = 0
    unit: Optional[str] = None
    # None when the question has no options
    enum_options: Optional[list[EnumOptionNode]] = None
    children: list[QuestionNode] = Field(default_factory=list)
