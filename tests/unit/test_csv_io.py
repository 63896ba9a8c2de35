"""Unit tests for flashcard CSV import and export."""
import pytest

from flashcat.models.flashcard import Gender
from flashcat.services.csv_io import (
    MAX_ROWS,
    CSVImportError,
    build_flashcard,
    export_csv,
    generate_icon_key,
    parse_category,
    parse_csv,
)
from flashcat.services.starter_vocabulary import starter_flashcards


class TestParseCategory:
    def test_verb_with_infinitive(self):
        assert parse_category("Verb: Ser") == ("Verbs", "Ser", None)

    def test_article_subcategories(self):
        assert parse_category("Definite article")[:2] == ("Articles", "Definite")
        assert parse_category("Indefinite article")[:2] == ("Articles", "Indefinite")

    def test_gender_only(self):
        assert parse_category("Feminine") == ("Nouns", None, Gender.FEMININE)

    def test_default(self):
        assert parse_category("") == ("Vocabulary", None, None)


class TestBuildFlashcard:
    def test_derives_fields(self):
        card = build_flashcard(" to be ", " ser ", "Verb: Ser")
        assert card.front == "to be"
        assert card.back == "ser"
        assert card.category == "Verbs"
        assert card.subcategory == "Ser"
        assert card.icon_key == "verbs__to-be"
        assert card.id.startswith("card_")

    def test_explicit_category_and_gender_win(self):
        card = build_flashcard("house", "casa", "Feminine", category="Home", gender="masculine")
        assert card.category == "Home"
        assert card.gender is Gender.MASCULINE
        assert card.subcategory is None

    def test_icon_key_sanitised(self):
        assert generate_icon_key("Food Items", "Ice-cream!") == "food-items__ice-cream-"

    def test_starter_deck_uses_the_same_icon_keys(self):
        cards = starter_flashcards("2026-01-01 00:00:00")
        assert cards[0].icon_key == "greetings__hello"
        assert all(c.icon_key == generate_icon_key(c.category, c.front) for c in cards)


class TestParseCSV:
    def test_basic(self, sample_csv):
        cards = parse_csv(sample_csv)
        assert [c.back for c in cards] == ["ser", "casa", "gran"]
        assert cards[0].category == "Verbs"
        assert cards[1].gender is Gender.FEMININE

    def test_headers_case_insensitive_and_bom(self):
        content = "\ufeffFRONT,back\nwater,aigua\n".encode("utf-8")
        cards = parse_csv(content)
        assert len(cards) == 1
        assert cards[0].front == "water"

    def test_quoted_commas(self):
        cards = parse_csv('Front,Back\n"hello, friend","hola, amic"\n')
        assert cards[0].front == "hello, friend"

    def test_rows_without_front_or_back_are_skipped(self):
        cards = parse_csv("Front,Back\nwater,aigua\n,buit\nsolo,\n")
        assert len(cards) == 1

    def test_missing_columns(self):
        with pytest.raises(CSVImportError, match="Front"):
            parse_csv("English,Catalan\nwater,aigua\n")

    def test_header_only(self):
        with pytest.raises(CSVImportError):
            parse_csv("Front,Back\n")

    def test_too_many_rows(self):
        content = "Front,Back\n" + "a,b\n" * (MAX_ROWS + 1)
        with pytest.raises(CSVImportError, match="too many rows"):
            parse_csv(content)

    def test_too_large(self):
        with pytest.raises(CSVImportError, match="too large"):
            parse_csv(b"Front,Back\n" + b"x" * (5 * 1024 * 1024))


def test_export_quotes_fields(make_card):
    cards = [make_card("hello, friend", "hola", notes="greeting")]
    assert export_csv(cards) == 'Front,Back,Notes\n"hello, friend",hola,greeting'
