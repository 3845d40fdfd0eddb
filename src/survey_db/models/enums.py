"""Database-level enumerations for the question schema."""

import enum


class ContentType(str, enum.Enum):
    """Input kind carried by a question row.

    A question with no content type (``NULL``) and children is a pure
    grouping node.  ``table`` marks a repeatable-row container whose direct
    children are the per-row fields.
    """

    NUMBER = "number"
    TEXT = "text"
    ENUM = "enum"
    TABLE = "table"
