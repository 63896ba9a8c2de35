"""
Due-card selection.

A (card, direction) pair is due when its due date is today or earlier, or
when it has never been reviewed. Session decks draw reviewed due pairs
first (oldest due date first), then never-seen pairs, and are shuffled
after truncation. When a deck is short of 30% typing pairs, struggling
reviews left past the limit replace its latest non-typing reviews. New
pairs always require typing and never move ahead of reviews.
"""
from __future__ import annotations

import math
import random
from collections.abc import Iterable, Mapping
from datetime import date

from flashcat.models.flashcard import (
    DIRECTIONS,
    CardProgress,
    CategoryStats,
    Flashcard,
    StudyCard,
    StudyDirection,
)
from flashcat.services import scheduler

MIN_TYPING_SHARE = 0.3


def progress_key(card_id: str, direction: StudyDirection) -> str:
    return f"{card_id}_{direction.value}"


def iter_pairs(
    cards: Iterable[Flashcard], progress: Mapping[str, CardProgress]
) -> Iterable[tuple[Flashcard, StudyDirection, CardProgress | None]]:
    for card in cards:
        for direction in DIRECTIONS:
            yield card, direction, progress.get(progress_key(card.id, direction))


def total_due_count(
    cards: Iterable[Flashcard],
    progress: Mapping[str, CardProgress],
    today: date | None = None,
) -> int:
    return sum(1 for _, _, p in iter_pairs(cards, progress) if scheduler.is_due(p, today))


def unique_cards_due_count(
    cards: Iterable[Flashcard],
    progress: Mapping[str, CardProgress],
    today: date | None = None,
) -> int:
    due_ids = {
        card.id
        for card, _, p in iter_pairs(cards, progress)
        if scheduler.is_due(p, today)
    }
    return len(due_ids)


def new_count(cards: Iterable[Flashcard], progress: Mapping[str, CardProgress]) -> int:
    return sum(
        1 for _, _, p in iter_pairs(cards, progress) if p is None or p.repetitions == 0
    )


def select_session_pairs(
    cards: Iterable[Flashcard],
    progress: Mapping[str, CardProgress],
    limit: int,
    today: date | None = None,
    rng: random.Random | None = None,
) -> list[StudyCard]:
    """Build a shuffled study deck of at most ``limit`` due pairs."""
    today = today or date.today()
    rng = rng or random.Random()

    reviews: list[StudyCard] = []
    fresh: list[StudyCard] = []
    for card, direction, p in iter_pairs(cards, progress):
        if p is None:
            initial = scheduler.create_initial_progress(card.id, direction, today)
            fresh.append(_study_card(card, direction, initial, is_new=True))
        elif scheduler.is_due(p, today):
            reviews.append(_study_card(card, direction, p, is_new=False))

    reviews.sort(key=lambda sc: sc.progress.due_date)
    ordered = reviews + fresh
    limit = max(0, limit)
    min_typing = math.ceil(limit * MIN_TYPING_SHARE)
    deck = _with_typing_share(ordered[:limit], ordered[limit:], min_typing)
    rng.shuffle(deck)
    return deck


def _study_card(
    card: Flashcard, direction: StudyDirection, p: CardProgress, is_new: bool
) -> StudyCard:
    return StudyCard(
        flashcard=card,
        progress=p,
        direction=direction,
        requires_typing=scheduler.requires_typing(p),
        is_new=is_new,
    )


def category_stats(
    cards: Iterable[Flashcard], progress: Mapping[str, CardProgress]
) -> dict[str, CategoryStats]:
    stats: dict[str, CategoryStats] = {}
    for card in cards:
        entry = stats.setdefault(card.category, CategoryStats())
        entry.total += 1

        mastered = 0
        learning = 0
        for direction in DIRECTIONS:
            p = progress.get(progress_key(card.id, direction))
            if scheduler.is_mastered(p):
                mastered += 1
            elif p is not None and p.repetitions > 0:
                learning += 1

        # Mastered needs both directions; any progress at all counts as learning
        if mastered == len(DIRECTIONS):
            entry.mastered += 1
        elif mastered or learning:
            entry.learning += 1
    return stats


def _with_typing_share(
    deck: list[StudyCard], overflow: list[StudyCard], min_typing: int
) -> list[StudyCard]:
    shortfall = min_typing - sum(1 for sc in deck if sc.requires_typing)
    extra = [sc for sc in overflow if sc.requires_typing and not sc.is_new][: max(0, shortfall)]
    if not extra:
        return deck
    optional = [i for i, sc in enumerate(deck) if not sc.requires_typing]
    dropped = set(optional[-len(extra):])
    return [sc for i, sc in enumerate(deck) if i not in dropped] + extra
