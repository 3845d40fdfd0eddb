"""Question schema loading — CSV or YAML files into ``QuestionDefinition`` lists.

CSV files are semicolon-delimited with one row per question::

    ID;question label en;question label fr;content;relatedQuestion ID;order;unit;enum en;enum fr
    S1-6_04;Employees by country;Salariés par pays;table;S1-6;2;;;
    S1-6_05;Headcount;Effectif;number;S1-6_04;1;FTE;;

YAML files hold a list of mappings with the ``QuestionDefinition`` fields::

    - id: S1-6_04
      parent_id: S1-6
      order: 2
      content_type: table
      labels: {en: Employees by country, fr: Salariés par pays}

Usage::

    definitions = load_questions("questions.csv")
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from survey_forms.models.question import EnumOptionDefinition, QuestionDefinition

logger = logging.getLogger(__name__)

CSV_DELIMITER = ";"

# --- CSV column names ---
COL_ID = "ID"
COL_LABEL_EN = "question label en"
COL_LABEL_FR = "question label fr"
COL_CONTENT = "content"
COL_PARENT = "relatedQuestion ID"
COL_ORDER = "order"
COL_UNIT = "unit"
COL_ENUM_EN = "enum en"
COL_ENUM_FR = "enum fr"


def load_yaml(path: Path | str) -> Any:
    """Load a single YAML file and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing YAML file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def load_questions(path: Path | str) -> list[QuestionDefinition]:
    """Load a question schema file, picking the parser from its suffix."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".csv":
        if not path.exists():
            raise FileNotFoundError(f"Missing CSV file: {path}")
        definitions = parse_questions_csv(path.read_text(encoding="utf-8"))
    elif suffix in (".yaml", ".yml"):
        definitions = parse_questions_yaml(load_yaml(path))
    else:
        raise ValueError(f"Unsupported question schema format: {path.name}")
    logger.info("Loaded %d question definitions from %s", len(definitions), path)
    return definitions


def parse_questions_yaml(raw: Any) -> list[QuestionDefinition]:
    """Validate a parsed YAML document (a list of question mappings)."""
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError("Question schema YAML must be a list of questions")
    return [QuestionDefinition(**item) for item in raw]


def parse_questions_csv(text: str) -> list[QuestionDefinition]:
    """Parse semicolon-delimited CSV text into question definitions.

    Rows with a blank ``ID`` are skipped.  A ``content`` value other than
    number, text, enum or table (blank means a grouping node) is rejected.

    Raises:
        ValueError: a row does not form a valid question; the message names
            the question id and the CSV line.
    """
    reader = csv.DictReader(io.StringIO(text), delimiter=CSV_DELIMITER)
    definitions: list[QuestionDefinition] = []
    for row in reader:
        qid = _cell(row, COL_ID)
        if not qid:
            continue
        try:
            definitions.append(_row_to_definition(qid, row))
        except ValidationError as exc:
            logger.error("Invalid question row %s at line %d", qid, reader.line_num)
            raise ValueError(
                f"Invalid question row {qid!r} at line {reader.line_num}: {exc}"
            ) from exc
    return definitions


def _cell(row: dict[str, Any], column: str) -> str:
    """Trimmed cell text; missing columns and cells read as ``""``."""
    value = row.get(column)
    return value.strip() if isinstance(value, str) else ""


def _parse_order(raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        return 0


def _row_to_definition(qid: str, row: dict[str, Any]) -> QuestionDefinition:
    content = _cell(row, COL_CONTENT).lower() or None

    labels: dict[str, str] = {}
    label_en = _cell(row, COL_LABEL_EN)
    label_fr = _cell(row, COL_LABEL_FR)
    if label_en:
        labels["en"] = label_en
    if label_fr:
        labels["fr"] = label_fr

    # Options need both language lists; French falls back to English per item
    enum_options: list[EnumOptionDefinition] = []
    enum_en = _cell(row, COL_ENUM_EN)
    enum_fr = _cell(row, COL_ENUM_FR)
    if content == "enum" and enum_en and enum_fr:
        options_en = [s.strip() for s in enum_en.split(",")]
        options_fr = [s.strip() for s in enum_fr.split(",")]
        for position, text_en in enumerate(options_en):
            text_fr = options_fr[position] if position < len(options_fr) else ""
            enum_options.append(
                EnumOptionDefinition(
                    id=f"{qid}-{position}",
                    order=position,
                    labels={"en": text_en, "fr": text_fr or text_en},
                )
            )

    return QuestionDefinition(
        id=qid,
        parent_id=_cell(row, COL_PARENT) or None,
        order=_parse_order(_cell(row, COL_ORDER)),
        content_type=content,
        unit=_cell(row, COL_UNIT) or None,
        labels=labels,
        enum_options=enum_options,
    )
