"""
In-memory view of the card collection and its review progress.

The store mutates its local state first and then writes through to the
injected repository. There is no conflict resolution; the last write wins.
"""
from __future__ import annotations

import logging
import random
import re
from collections.abc import Iterable
from datetime import date
from typing import Protocol

import aiosqlite

from flashcat.db import sqlite as sqlite_db
from flashcat.models.flashcard import (
    DIRECTIONS,
    CardProgress,
    CategoryStats,
    DueCounts,
    Flashcard,
    FlashcardUpdate,
    Grade,
    ImportResult,
    ReviewResult,
    StudyCard,
    StudyDirection,
)
from flashcat.services import due_selector, scheduler
from flashcat.services.csv_io import parse_csv, utc_timestamp
from flashcat.services.starter_vocabulary import starter_flashcards

logger = logging.getLogger(__name__)


class UnknownCard(LookupError):
    """Raised when an operation names a card id that is not in the store."""


class CardRepository(Protocol):
    async def save_cards(self, cards: list[Flashcard]) -> None: ...

    async def update_card(self, card_id: str, updates: FlashcardUpdate) -> None: ...

    async def delete_cards(self, card_ids: list[str]) -> None: ...

    async def save_progress(self, progress: CardProgress) -> None: ...


class SqliteCardRepository:
    """CardRepository backed by the flashcards/card_progress tables."""

    def __init__(self, db: aiosqlite.Connection) -> None:
        self.db = db

    async def save_cards(self, cards: list[Flashcard]) -> None:
        await sqlite_db.insert_flashcards(self.db, cards)

    async def update_card(self, card_id: str, updates: FlashcardUpdate) -> None:
        await sqlite_db.update_flashcard(self.db, card_id, updates)

    async def delete_cards(self, card_ids: list[str]) -> None:
        await sqlite_db.delete_flashcards(self.db, card_ids)

    async def save_progress(self, progress: CardProgress) -> None:
        await sqlite_db.upsert_card_progress(self.db, progress)


def normalize_text(text: str) -> str:
    return re.sub(r"\s+", " ", text.lower().strip())


class CardStore:
    def __init__(
        self,
        cards: Iterable[Flashcard],
        progress: dict[str, CardProgress],
        repository: CardRepository,
    ) -> None:
        self.cards: list[Flashcard] = list(cards)
        self.progress = progress
        self.repository = repository

    @classmethod
    async def load(cls, db: aiosqlite.Connection) -> CardStore:
        cards, _ = await sqlite_db.list_flashcards(db)
        progress = await sqlite_db.get_all_progress(db)
        return cls(cards, progress, SqliteCardRepository(db))

    # --- Lookups ---

    def get_card(self, card_id: str) -> Flashcard:
        for card in self.cards:
            if card.id == card_id:
                return card
        raise UnknownCard(card_id)

    def get_progress(
        self, card_id: str, direction: StudyDirection, today: date | None = None
    ) -> CardProgress:
        existing = self.progress.get(due_selector.progress_key(card_id, direction))
        return existing or scheduler.create_initial_progress(card_id, direction, today)

    # --- Reviews ---

    async def review(
        self,
        card_id: str,
        direction: StudyDirection,
        grade: Grade | bool | int,
        today: date | None = None,
    ) -> ReviewResult:
        self.get_card(card_id)
        current = self.get_progress(card_id, direction, today)
        was_mastered = self._card_mastered(card_id)

        updated = scheduler.calculate_sm2(current, grade, today)
        self.progress[updated.key] = updated
        await self.repository.save_progress(updated)

        newly_mastered = not was_mastered and self._card_mastered(card_id)
        if newly_mastered:
            logger.info("Card %s reached mastery", card_id)
        return ReviewResult(progress=updated, newly_mastered=newly_mastered)

    def _card_mastered(self, card_id: str) -> bool:
        return any(
            scheduler.is_mastered(self.progress.get(due_selector.progress_key(card_id, d)))
            for d in DIRECTIONS
        )

    # --- Collection edits ---

    def _without_duplicates(self, candidates: list[Flashcard]) -> list[Flashcard]:
        fronts = {normalize_text(c.front) for c in self.cards}
        backs = {normalize_text(c.back) for c in self.cards}
        unique: list[Flashcard] = []
        for card in candidates:
            front, back = normalize_text(card.front), normalize_text(card.back)
            if front in fronts or back in backs:
                continue
            fronts.add(front)
            backs.add(back)
            unique.append(card)
        return unique

    async def add_cards(self, candidates: list[Flashcard]) -> list[Flashcard]:
        unique = self._without_duplicates(candidates)
        self.cards.extend(unique)
        if unique:
            await self.repository.save_cards(unique)
        return unique

    async def import_cards(self, content: str | bytes) -> ImportResult:
        """Parse a CSV upload and add the cards not already in the collection."""
        parsed = parse_csv(content)
        added = await self.add_cards(parsed)
        logger.info("Imported %d of %d cards", len(added), len(parsed))
        return ImportResult(imported=len(added), skipped=len(parsed) - len(added))

    async def load_starter_vocabulary(self) -> list[Flashcard]:
        return await self.add_cards(starter_flashcards(utc_timestamp()))

    async def update_card(self, card_id: str, updates: FlashcardUpdate) -> Flashcard:
        card = self.get_card(card_id)
        updated = card.model_copy(update=updates.model_dump(exclude_none=True))
        self.cards[self.cards.index(card)] = updated
        await self.repository.update_card(card_id, updates)
        return updated

    async def update_mnemonic(self, card_id: str, mnemonic: str) -> Flashcard:
        return await self.update_card(card_id, FlashcardUpdate(mnemonic=mnemonic))

    async def delete_card(self, card_id: str) -> None:
        card = self.get_card(card_id)
        self.cards.remove(card)
        for direction in DIRECTIONS:
            self.progress.pop(due_selector.progress_key(card_id, direction), None)
        await self.repository.delete_cards([card_id])

    async def deduplicate(self) -> int:
        """Keep the first card for each normalised front; return how many were removed."""
        seen: set[str] = set()
        duplicates: list[str] = []
        kept: list[Flashcard] = []
        for card in self.cards:
            key = normalize_text(card.front)
            if key in seen:
                duplicates.append(card.id)
                continue
            seen.add(key)
            kept.append(card)

        if duplicates:
            self.cards = kept
            for card_id in duplicates:
                for direction in DIRECTIONS:
                    self.progress.pop(due_selector.progress_key(card_id, direction), None)
            await self.repository.delete_cards(duplicates)
            logger.info("Removed %d duplicate cards", len(duplicates))
        return len(duplicates)

    # --- Queries ---

    def study_deck(
        self, limit: int, today: date | None = None, rng: random.Random | None = None
    ) -> list[StudyCard]:
        return due_selector.select_session_pairs(self.cards, self.progress, limit, today, rng)

    def due_counts(self, today: date | None = None) -> DueCounts:
        return DueCounts(
            total_due=due_selector.total_due_count(self.cards, self.progress, today),
            unique_cards_due=due_selector.unique_cards_due_count(
                self.cards, self.progress, today
            ),
            new_pairs=due_selector.new_count(self.cards, self.progress),
            total_cards=len(self.cards),
        )

    def category_stats(self) -> dict[str, CategoryStats]:
        return due_selector.category_stats(self.cards, self.progress)

    def mastered_card_count(self) -> int:
        return sum(1 for card in self.cards if self._card_mastered(card.id))
