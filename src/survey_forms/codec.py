"""Answer codec — flat answer rows <-> nested form values.

Flat (storage) shape, one record per question and table row::

    {question_id: "S1-6_05", value: "850", row_index: 0, row_label: "France"}

Nested (form) shape, singletons keyed by question id and table rows grouped
under the table's id::

    {
        "S1-1": "Acme",
        "S1-6_04": [
            {"_rowLabel": "France", "S1-6_05": "850", "S1-6_06": "820"},
            {"_rowLabel": "", "S1-6_05": "250"},
        ],
    }

``decode_answers`` goes flat -> nested, ``flatten_values`` nested -> flat.
Empty values (``None`` or ``""``) are dropped in both directions, so an
absent answer and an empty one are the same thing.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable, Optional

from survey_forms.constants import ROW_KEY_PREFIX, ROW_LABEL_KEY
from survey_forms.models.answer import (
    AnswerLike,
    FlatAnswer,
    NestedValue,
    NestedValues,
    Primitive,
)
from survey_forms.models.question import QuestionDefinition


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


# ---------------------------------------------------------------------------
# Question index — which questions are table row fields
# ---------------------------------------------------------------------------

@dataclass
class QuestionIndex:
    """The slice of schema shape that decoding needs.

    Attributes:
        parents: question id -> parent id (``None`` for roots)
        table_ids: ids of questions whose content type is ``table``
    """

    parents: dict[str, Optional[str]] = field(default_factory=dict)
    table_ids: set[str] = field(default_factory=set)

    @classmethod
    def from_definitions(cls, questions: Iterable[QuestionDefinition]) -> QuestionIndex:
        """Build an index from a full flat schema."""
        parents: dict[str, Optional[str]] = {}
        table_ids: set[str] = set()
        for question in questions:
            parents[question.id] = question.parent_id
            if question.is_table:
                table_ids.add(question.id)
        return cls(parents=parents, table_ids=table_ids)

    def table_of(self, question_id: str) -> Optional[str]:
        """Return the table id if ``question_id`` is a row field, else None."""
        parent_id = self.parents.get(question_id)
        if parent_id is not None and parent_id in self.table_ids:
            return parent_id
        return None


# ---------------------------------------------------------------------------
# Decode: flat -> nested
# ---------------------------------------------------------------------------

def row_key(row_label: Optional[str], row_index: Optional[int]) -> str:
    """Grouping key of a table row: its label, else ``row_<index>``."""
    if row_label:
        return row_label
    return f"{ROW_KEY_PREFIX}{row_index or 0}"


def decode_answers(
    answers: Iterable[AnswerLike], index: QuestionIndex
) -> NestedValues:
    """Rebuild nested form values from flat answer rows.

    Answers are stably sorted by ``row_index`` (missing counts as 0) before
    grouping, so table rows come out in row order and, within one index, in
    the order they were read.  Rows sharing a label are merged into one row
    object even when their indexes differ.
    """
    ordered = sorted(answers, key=lambda a: a.row_index or 0)

    result: NestedValues = {}
    tables: dict[str, dict[str, dict[str, str]]] = {}

    for answer in ordered:
        if _is_empty(answer.value):
            continue

        table_id = index.table_of(answer.question_id)
        if table_id is None:
            result[answer.question_id] = answer.value
            continue

        rows = tables.setdefault(table_id, {})
        key = row_key(answer.row_label, answer.row_index)
        if key not in rows:
            # Every row carries a label slot, even if the label is unset
            rows[key] = {ROW_LABEL_KEY: answer.row_label or ""}
        rows[key][answer.question_id] = answer.value

    for table_id, rows in tables.items():
        result[table_id] = list(rows.values())
    return result


# ---------------------------------------------------------------------------
# Encode: nested -> flat
# ---------------------------------------------------------------------------

def value_to_text(value: Primitive) -> str:
    """Text form of a primitive answer.

    Booleans become ``"true"``/``"false"`` and integral floats drop their
    fractional part, so ``850.0`` is stored as ``"850"``.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def flatten_values(values: Mapping[str, NestedValue]) -> list[FlatAnswer]:
    """Flatten nested form values into the list of answers to store.

    A top-level ``_rowLabel`` key is metadata like any other and is skipped.

    Raises:
        TypeError: a value is neither a primitive, a row object (mapping)
            nor a list of row objects.
    """
    flat: list[FlatAnswer] = []
    for key, value in values.items():
        if key == ROW_LABEL_KEY:
            continue
        _flatten(key, value, None, None, flat)
    return flat


def _flatten(
    key: str,
    value: NestedValue,
    row_index: Optional[int],
    row_label: Optional[str],
    out: list[FlatAnswer],
) -> None:
    if _is_empty(value):
        return

    # --- RowObject: a table row (or nested group) of field values ---
    if isinstance(value, Mapping):
        label = value.get(ROW_LABEL_KEY) or row_label
        for field_id, field_value in value.items():
            if field_id == ROW_LABEL_KEY:
                continue
            _flatten(field_id, field_value, row_index, label, out)
        return

    # --- RowArray: the rows of a table question ---
    if isinstance(value, (list, tuple)):
        for position, row in enumerate(value):
            if row is None:
                continue
            if not isinstance(row, Mapping):
                raise TypeError(
                    f"Row {position} of {key!r} must be a mapping, "
                    f"got {type(row).__name__}"
                )
            _flatten(key, row, position, None, out)
        return

    # --- Primitive ---
    if isinstance(value, (str, int, float, Decimal)):
        out.append(
            FlatAnswer(
                question_id=key,
                value=value_to_text(value),
                row_index=row_index,
                row_label=row_label,
            )
        )
        return

    raise TypeError(f"Unsupported value for {key!r}: {type(value).__name__}")
