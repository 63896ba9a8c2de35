"""
CSV import/export for flashcards.

Columns (header row, case-insensitive): Front and Back are required; Notes,
Category and Gender are optional. When Category/Gender are absent they are
derived from the Notes column, which in exported vocabulary sheets carries
hints like "Verb: Ser" or "Feminine".
"""
from __future__ import annotations

import csv
import io
import re
import uuid
from datetime import datetime, timezone

from flashcat.models.flashcard import Flashcard, Gender

MAX_FILE_SIZE_BYTES = 5 * 1024 * 1024
MAX_ROWS = 10_000

_CATEGORY_PATTERNS: list[tuple[re.Pattern[str], str, str | None]] = [
    (re.compile(r"^Verb:\s*(\w+)", re.I), "Verbs", None),
    (re.compile(r"^Indefinite article", re.I), "Articles", "Indefinite"),
    (re.compile(r"^Definite article", re.I), "Articles", "Definite"),
    (re.compile(r"^Adjective", re.I), "Adjectives", None),
    (re.compile(r"^Occupation", re.I), "Nouns", None),
    (re.compile(r"^Condition", re.I), "Conditions", None),
    (re.compile(r"^Location", re.I), "Locations", None),
    (re.compile(r"^Immediate Future", re.I), "Verbs", "Future"),
    (re.compile(r"Must include", re.I), "Possessives", None),
    (re.compile(r"^Feminine$", re.I), "Nouns", None),
    (re.compile(r"^Masculine$", re.I), "Nouns", None),
]
_VERB_RE = re.compile(r"Verb:\s*(\w+)", re.I)


class CSVImportError(ValueError):
    """Raised when an uploaded CSV cannot be turned into flashcards."""


def parse_category(notes: str) -> tuple[str, str | None, Gender | None]:
    """Return (category, subcategory, gender) inferred from a notes string."""
    normalized = notes.strip()
    category = "Vocabulary"
    subcategory: str | None = None
    gender: Gender | None = None

    if re.search(r"\bFeminine\b", normalized, re.I):
        gender = Gender.FEMININE
    elif re.search(r"\bMasculine\b", normalized, re.I):
        gender = Gender.MASCULINE

    for pattern, cat, subcat in _CATEGORY_PATTERNS:
        match = pattern.search(normalized)
        if match:
            category = cat
            subcategory = subcat or (match.group(1) if match.groups() else None)
            break

    if category == "Verbs":
        verb = _VERB_RE.search(normalized)
        if verb:
            subcategory = verb.group(1)

    return category, subcategory, gender


def generate_icon_key(category: str, front: str) -> str:
    category_key = re.sub(r"\s+", "-", category.lower())
    word_key = re.sub(r"-+", "-", re.sub(r"[^a-z0-9]", "-", front.lower()))[:20]
    return f"{category_key}__{word_key}"


def new_card_id() -> str:
    return f"card_{uuid.uuid4().hex[:12]}"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def build_flashcard(
    front: str,
    back: str,
    notes: str = "",
    category: str | None = None,
    gender: Gender | str | None = None,
) -> Flashcard:
    parsed_category, subcategory, parsed_gender = parse_category(notes)
    final_category = category or parsed_category
    final_gender = _coerce_gender(gender) or parsed_gender
    return Flashcard(
        id=new_card_id(),
        front=front.strip(),
        back=back.strip(),
        notes=notes.strip(),
        category=final_category,
        subcategory=subcategory if final_category == parsed_category else None,
        gender=final_gender,
        icon_key=generate_icon_key(final_category, front.strip()),
        created_at=utc_timestamp(),
    )


def _coerce_gender(value: Gender | str | None) -> Gender | None:
    if value is None or isinstance(value, Gender):
        return value
    try:
        return Gender(value.strip().lower())
    except ValueError:
        return None


def parse_csv(content: str | bytes) -> list[Flashcard]:
    if isinstance(content, bytes):
        if len(content) > MAX_FILE_SIZE_BYTES:
            raise CSVImportError("CSV file too large (max 5MB)")
        content = content.decode("utf-8-sig")
    elif len(content.encode("utf-8")) > MAX_FILE_SIZE_BYTES:
        raise CSVImportError("CSV file too large (max 5MB)")

    rows = list(csv.reader(io.StringIO(content.strip())))
    if len(rows) < 2:
        raise CSVImportError("CSV must have at least a header row and one data row")
    if len(rows) - 1 > MAX_ROWS:
        raise CSVImportError(f"CSV has too many rows (max {MAX_ROWS})")

    headers = [h.strip().lower() for h in rows[0]]
    if "front" not in headers or "back" not in headers:
        raise CSVImportError('CSV must have "Front" and "Back" columns')

    def column(values: list[str], name: str) -> str:
        if name not in headers:
            return ""
        idx = headers.index(name)
        return values[idx].strip() if idx < len(values) else ""

    cards: list[Flashcard] = []
    for values in rows[1:]:
        front = column(values, "front")
        back = column(values, "back")
        if not front or not back:
            continue
        cards.append(
            build_flashcard(
                front,
                back,
                notes=column(values, "notes"),
                category=column(values, "category") or None,
                gender=column(values, "gender") or None,
            )
        )
    return cards


def export_csv(cards: list[Flashcard]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["Front", "Back", "Notes"])
    for card in cards:
        writer.writerow([card.front, card.back, card.notes])
    return buffer.getvalue().rstrip("\n")
