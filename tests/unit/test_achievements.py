"""Unit tests for achievement checks and progress percentages."""
from datetime import date, datetime, timezone

from flashcat.models.flashcard import StudyDirection
from flashcat.models.progress import UnlockedAchievement, UserProgress
from flashcat.services import scheduler
from flashcat.services.achievements import (
    ACHIEVEMENTS,
    ACHIEVEMENTS_BY_ID,
    AchievementContext,
    achievement_progress,
    achievement_statuses,
    check_achievements,
    count_mastered_cards,
    is_category_mastered,
)

TODAY = date(2026, 3, 11)


def mastered(card_id, direction=StudyDirection.ENGLISH_TO_CATALAN):
    p = scheduler.create_initial_progress(card_id, direction, TODAY)
    return p.model_copy(update={"repetitions": 5, "interval": 30})


def ids(achievements):
    return {a.id for a in achievements}


def test_catalog_ids_are_unique():
    assert len(ACHIEVEMENTS_BY_ID) == len(ACHIEVEMENTS)


class TestCheckAchievements:
    def test_nothing_for_a_new_learner(self):
        ctx = AchievementContext(progress=UserProgress(), card_progress={}, flashcards=[])
        assert check_achievements(ctx) == []

    def test_first_review_and_counts(self):
        ctx = AchievementContext(
            progress=UserProgress(total_cards_reviewed=12, current_streak=3),
            card_progress={},
            flashcards=[],
        )
        assert {"first_card", "cards_10", "streak_3"} <= ids(check_achievements(ctx))
        assert "cards_50" not in ids(check_achievements(ctx))

    def test_already_unlocked_are_skipped(self):
        ctx = AchievementContext(
            progress=UserProgress(total_cards_reviewed=1),
            card_progress={},
            flashcards=[],
            unlocked=[
                UnlockedAchievement(
                    achievement_id="first_card", unlocked_at=datetime.now(timezone.utc)
                )
            ],
        )
        assert "first_card" not in ids(check_achievements(ctx))

    def test_perfect_streak(self):
        ctx = AchievementContext(
            progress=UserProgress(), card_progress={}, flashcards=[], perfect_streak=10
        )
        assert {"perfect_5", "perfect_10"} <= ids(check_achievements(ctx))

    def test_import_counts_existing_cards(self, make_card):
        ctx = AchievementContext(
            progress=UserProgress(), card_progress={}, flashcards=[make_card()]
        )
        assert "first_import" in ids(check_achievements(ctx))


class TestMastery:
    def test_count_mastered_cards_counts_cards_not_directions(self):
        progress = {
            p.key: p
            for p in (
                mastered("a"),
                mastered("a", StudyDirection.CATALAN_TO_ENGLISH),
                mastered("b"),
            )
        }
        assert count_mastered_cards(progress) == 2

    def test_category_mastered_needs_both_directions(self, make_card):
        ser = make_card("to be", "ser", category="Verbs")
        estar = make_card("to be (state)", "estar", category="Verbs")
        both = [StudyDirection.ENGLISH_TO_CATALAN, StudyDirection.CATALAN_TO_ENGLISH]
        progress = {mastered(ser.id, d).key: mastered(ser.id, d) for d in both}
        progress[mastered(estar.id).key] = mastered(estar.id)
        assert not is_category_mastered(progress, [ser, estar], "Verbs")

        reverse = mastered(estar.id, StudyDirection.CATALAN_TO_ENGLISH)
        progress[reverse.key] = reverse
        assert is_category_mastered(progress, [ser, estar], "Verbs")

    def test_empty_category_is_never_mastered(self):
        assert not is_category_mastered({}, [], "Verbs")


class TestProgress:
    def test_percentages(self):
        ctx = AchievementContext(
            progress=UserProgress(total_cards_reviewed=25), card_progress={}, flashcards=[]
        )
        assert achievement_progress(ACHIEVEMENTS_BY_ID["cards_50"], ctx) == 50
        assert achievement_progress(ACHIEVEMENTS_BY_ID["cards_10"], ctx) == 100

    def test_statuses_mark_unlocked_as_complete(self):
        when = datetime(2026, 3, 1, tzinfo=timezone.utc)
        ctx = AchievementContext(
            progress=UserProgress(),
            card_progress={},
            flashcards=[],
            unlocked=[UnlockedAchievement(achievement_id="streak_7", unlocked_at=when)],
        )
        statuses = {s.achievement.id: s for s in achievement_statuses(ctx)}
        assert len(statuses) == len(ACHIEVEMENTS)
        assert statuses["streak_7"].progress == 100
        assert statuses["streak_7"].unlocked_at == when
        assert statuses["streak_3"].unlocked_at is None
