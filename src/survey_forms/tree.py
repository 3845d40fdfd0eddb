"""Question tree builder — flat schema rows to a locale-resolved tree.

The whole schema is read in one bulk query; this module assembles it in
memory at any depth:

  1. One linear pass indexes questions by ``parent_id`` (``None`` for roots).
  2. Every sibling group is sorted by ``(order, id)``.
  3. A work queue walks down from the roots, realising each node (label and
     enum labels resolved for the locale) and attaching it to its parent's
     ``children``.  There is no recursion and no depth limit; a visited set
     stops the walk from looping on malformed data.

Questions that are never reached are dropped from the result with a
warning naming the cause: a missing parent, a missing ancestor further
up the chain, or a parent cycle.  Building never raises for these.

Usage::

    roots = build_tree(definitions, locale="en")
"""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from typing import Iterable, Optional

from survey_forms.models.question import (
    EnumOptionDefinition,
    EnumOptionNode,
    QuestionDefinition,
    QuestionNode,
)

logger = logging.getLogger(__name__)


def _sibling_key(question: QuestionDefinition) -> tuple[int, str]:
    return (question.order, question.id)


def resolve_question_label(question: QuestionDefinition, locale: str) -> str:
    """Label for ``locale``, or the question id when none exists."""
    return question.labels.get(locale) or question.id


def resolve_option_label(option: EnumOptionDefinition, locale: str) -> str:
    """Label for ``locale``, or an empty string when none exists.

    Unlike questions, options never fall back to their id.
    """
    return option.labels.get(locale) or ""


def _realise(question: QuestionDefinition, locale: str) -> QuestionNode:
    """Build the locale-resolved node for one question (children empty)."""
    options = [
        EnumOptionNode(id=opt.id, label=resolve_option_label(opt, locale))
        for opt in sorted(question.enum_options, key=lambda o: o.order)
    ]
    return QuestionNode(
        id=question.id,
        label=resolve_question_label(question, locale),
        content_type=question.content_type,
        order=question.order,
        unit=question.unit,
        enum_options=options or None,
    )


def index_children(
    questions: Iterable[QuestionDefinition],
) -> dict[Optional[str], list[QuestionDefinition]]:
    """Group questions by ``parent_id`` with each group sorted by ``(order, id)``."""
    children: dict[Optional[str], list[QuestionDefinition]] = defaultdict(list)
    for question in questions:
        children[question.parent_id].append(question)
    for siblings in children.values():
        siblings.sort(key=_sibling_key)
    return children


def build_tree(
    questions: Iterable[QuestionDefinition], locale: str
) -> list[QuestionNode]:
    """Assemble the flat question list into its list of root nodes.

    Args:
        questions: the complete flat schema (every node of every tree)
        locale: locale code used to resolve labels

    Returns:
        Root nodes (``parent_id is None``) sorted by ``(order, id)``, each
        with its descendants nested under ``children``.
    """
    questions = list(questions)
    children = index_children(questions)

    roots: list[QuestionNode] = []
    visited: set[str] = set()
    # FIFO keeps each sibling group's sorted order when appending
    queue: deque[tuple[QuestionDefinition, list[QuestionNode]]] = deque(
        (q, roots) for q in children.get(None, [])
    )

    while queue:
        question, siblings = queue.popleft()
        if question.id in visited:
            logger.warning(
                "Question %s reached more than once, skipping duplicate", question.id
            )
            continue
        visited.add(question.id)

        node = _realise(question, locale)
        siblings.append(node)
        for child in children.get(question.id, []):
            queue.append((child, node.children))

    _warn_unreachable(questions, visited)
    return roots


def _missing_ancestor(
    question_id: str, parents: dict[str, Optional[str]]
) -> Optional[str]:
    """First id up the parent chain that is not a known question.

    Returns None when the chain loops back on itself instead.
    """
    seen = {question_id}
    current = parents.get(question_id)
    while current is not None and current not in seen:
        if current not in parents:
            return current
        seen.add(current)
        current = parents[current]
    return None


def _warn_unreachable(
    questions: list[QuestionDefinition], visited: set[str]
) -> None:
    """Log every question that the walk from the roots never reached."""
    parents = {q.id: q.parent_id for q in questions}
    for question in questions:
        if question.id in visited:
            continue
        missing = _missing_ancestor(question.id, parents)
        if missing is None:
            logger.warning(
                "Question %s is on or below a parent cycle, excluded from tree",
                question.id,
            )
        elif missing == question.parent_id:
            logger.warning(
                "Question %s references missing parent %s, excluded from tree",
                question.id,
                missing,
            )
        else:
            logger.warning(
                "Question %s has missing ancestor %s, excluded from tree",
                question.id,
                missing,
            )
