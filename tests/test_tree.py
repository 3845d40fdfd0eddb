"""Tree builder tests.

Verifies that ``build_tree``:
  - sorts siblings by ``order`` at every level, whatever the input order
  - breaks ``order`` ties by question id
  - assembles arbitrarily deep chains without losing nodes
  - resolves question labels with an id fallback and enum labels with ""
  - drops (and logs) questions whose parent is missing or on a cycle
"""

import logging
import random

from helpers.factories import make_question, sample_definitions
from survey_forms.models.question import EnumOptionDefinition
from survey_forms.tree import build_tree, index_children


def _ids(nodes):
    return [n.id for n in nodes]


def _walk(nodes):
    """Yield every node of the tree, parents before children."""
    stack = list(nodes)
    while stack:
        node = stack.pop()
        yield node
        stack.extend(node.children)


# =====================================================================
# Ordering
# =====================================================================


class TestOrdering:

    def test_roots_and_children_sorted_by_order(self):
        roots = build_tree(sample_definitions(), "en")
        assert _ids(roots) == ["S1", "S2"]
        assert _ids(roots[0].children) == ["S1-1", "T", "S1-2"]
        assert _ids(roots[0].children[1].children) == ["A", "B"]

    def test_input_order_does_not_matter(self):
        expected = build_tree(sample_definitions(), "en")
        shuffled = sample_definitions()
        random.Random(7).shuffle(shuffled)
        assert build_tree(shuffled, "en") == expected

    def test_equal_order_broken_by_id(self):
        questions = [
            make_question("root"),
            make_question("c", "root", 1),
            make_question("a", "root", 1),
            make_question("b", "root", 0),
        ]
        roots = build_tree(questions, "en")
        assert _ids(roots[0].children) == ["b", "a", "c"]

    def test_index_children_groups_roots_under_none(self):
        index = index_children(sample_definitions())
        assert _ids(index[None]) == ["S1", "S2"]
        assert _ids(index["T"]) == ["A", "B"]


# =====================================================================
# Depth
# =====================================================================


class TestDepth:

    def test_chain_of_fifty_links(self):
        questions = [make_question("q0")]
        questions += [make_question(f"q{i}", f"q{i - 1}") for i in range(1, 51)]

        roots = build_tree(reversed(questions), "en")

        depth = 0
        node = roots[0]
        while node.children:
            assert len(node.children) == 1
            node = node.children[0]
            depth += 1
        assert depth == 50
        assert node.id == "q50"

    def test_deep_chain_does_not_hit_recursion_limit(self):
        questions = [make_question("q0")]
        questions += [make_question(f"q{i}", f"q{i - 1}") for i in range(1, 5000)]
        roots = build_tree(questions, "en")
        assert sum(1 for _ in _walk(roots)) == 5000


# =====================================================================
# Labels
# =====================================================================


class TestLabels:

    def test_label_resolved_for_locale(self):
        roots = build_tree(sample_definitions(), "fr")
        assert roots[0].label == "Entreprise"

    def test_missing_question_label_falls_back_to_id(self):
        roots = build_tree(sample_definitions(), "fr")
        table = roots[0].children[1]
        assert table.id == "T"
        assert table.label == "T"

    def test_missing_option_label_falls_back_to_empty_string(self):
        questions = [
            make_question(
                "Q", content_type="enum",
                enum_options=[
                    EnumOptionDefinition(id="opt-0", labels={"fr": "Oui"}),
                    EnumOptionDefinition(id="opt-1", labels={"en": "No"}),
                ],
            )
        ]
        roots = build_tree(questions, "en")
        options = roots[0].enum_options
        assert [(o.id, o.label) for o in options] == [("opt-0", ""), ("opt-1", "No")]

    def test_question_without_options_has_none(self):
        roots = build_tree(sample_definitions(), "en")
        assert roots[0].enum_options is None

    def test_node_carries_unit_and_content_type(self):
        roots = build_tree(sample_definitions(), "en")
        field = roots[0].children[1].children[0]
        assert field.content_type == "number"
        assert field.unit == "FTE"


# =====================================================================
# Malformed schemas
# =====================================================================


class TestMalformedSchema:

    def test_orphan_is_excluded_and_logged(self, caplog):
        questions = sample_definitions() + [
            make_question("orphan", "missing-parent"),
            make_question("orphan-child", "orphan"),
        ]
        with caplog.at_level(logging.WARNING, logger="survey_forms.tree"):
            roots = build_tree(questions, "en")

        reached = {n.id for n in _walk(roots)}
        assert "orphan" not in reached
        assert "orphan-child" not in reached
        assert len(reached) == len(sample_definitions())
        assert any("missing-parent" in r.getMessage() for r in caplog.records)

    def test_orphan_descendants_name_the_missing_ancestor(self, caplog):
        questions = [
            make_question("root"),
            make_question("orphan", "missing-parent"),
            make_question("orphan-child", "orphan"),
            make_question("orphan-grandchild", "orphan-child"),
        ]
        with caplog.at_level(logging.WARNING, logger="survey_forms.tree"):
            build_tree(questions, "en")

        messages = [r.getMessage() for r in caplog.records]
        assert len(messages) == 3
        assert all("missing-parent" in m for m in messages)
        assert not any("cycle" in m for m in messages)
        assert any("orphan-grandchild has missing ancestor" in m for m in messages)

    def test_descendant_of_cycle_reported_as_cycle(self, caplog):
        questions = [
            make_question("root"),
            make_question("x", "y"),
            make_question("y", "x"),
            make_question("below", "x"),
        ]
        with caplog.at_level(logging.WARNING, logger="survey_forms.tree"):
            roots = build_tree(questions, "en")

        assert _ids(roots) == ["root"]
        below = [r.getMessage() for r in caplog.records if "below" in r.getMessage()]
        assert len(below) == 1
        assert "parent cycle" in below[0]

    def test_cycle_is_excluded_without_looping(self, caplog):
        questions = [
            make_question("root"),
            make_question("x", "y"),
            make_question("y", "x"),
        ]
        with caplog.at_level(logging.WARNING, logger="survey_forms.tree"):
            roots = build_tree(questions, "en")

        assert _ids(roots) == ["root"]
        assert roots[0].children == []
        assert any("parent cycle" in r.getMessage() for r in caplog.records)

    def test_duplicate_id_realised_once(self):
        questions = [make_question("root"), make_question("root")]
        roots = build_tree(questions, "en")
        assert _ids(roots) == ["root"]

    def test_empty_input(self):
        assert build_tree([], "en") == []
