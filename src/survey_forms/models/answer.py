"""Answer models — the flat wire record and the nested form value shapes.

``FlatAnswer`` is what a completed form is flattened into and what the
store persists, one per question (and table row).  Its JSON shape uses
camelCase keys and omits absent optional keys::

    {"questionId": "S1-6_05", "value": "850", "rowIndex": 0, "rowLabel": "France"}

Nested form values are a tagged variant:

    - Primitive: a single scalar answer
    - RowObject: one table row, field id -> value, plus ``_rowLabel``
    - RowArray: the ordered rows of a table question
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional, Protocol, Union

from survey_forms.models.base import CamelModel

Primitive = Union[str, int, float, bool, Decimal]
RowObject = dict[str, "NestedValue"]
RowArray = list[Optional[RowObject]]
NestedValue = Union[Primitive, RowObject, RowArray, None]
NestedValues = dict[str, NestedValue]


class FlatAnswer(CamelModel):
    """A single answer value, optionally scoped to a table row."""

    question_id: str
    value: str
    row_index: Optional[int] = None
    row_label: Optional[str] = None

    def to_wire(self) -> dict[str, Any]:
        """Serialise to the camelCase JSON shape, dropping unset row fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class AnswerLike(Protocol):
    """Anything carrying the four answer attributes (ORM rows, FlatAnswer)."""

    question_id: str
    value: Optional[str]
    row_index: Optional[int]
    row_label: Optional[str]
