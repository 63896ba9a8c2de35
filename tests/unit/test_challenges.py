"""Unit tests for daily and weekly challenge generation and progress."""
import random
from datetime import date, timedelta

from flashcat.models.challenge import ChallengeType, Difficulty, SessionOutcome
from flashcat.services import challenges

TODAY = date(2026, 3, 11)  # Wednesday


def only(state, kind):
    """Keep just the first template of ``kind`` so progress is easy to follow."""
    template = next(t for t in challenges.DAILY_TEMPLATES if t.type is kind)
    challenge = challenges._instantiate(template, "c-1", TODAY, TODAY)
    return state.model_copy(update={"challenges": [challenge]})


class TestGeneration:
    def test_week_starts_on_monday(self):
        assert challenges.week_start(TODAY) == date(2026, 3, 9)
        assert challenges.week_start(date(2026, 3, 9)) == date(2026, 3, 9)
        assert challenges.week_start(date(2026, 3, 15)) == date(2026, 3, 9)

    def test_daily_draws_three_distinct(self):
        state = challenges.generate_daily_challenges(TODAY, random.Random(7))
        assert state.day == TODAY
        assert len(state.challenges) == challenges.DAILY_CHALLENGE_COUNT
        assert len({c.title for c in state.challenges}) == 3
        assert all(c.expires_on == TODAY for c in state.challenges)
        assert all("{target}" not in c.description for c in state.challenges)

    def test_weekly_has_one_per_difficulty(self):
        state = challenges.generate_weekly_challenges(TODAY, random.Random(2))
        assert state.week_start == date(2026, 3, 9)
        assert [c.difficulty for c in state.challenges] == [
            Difficulty.EASY,
            Difficulty.MEDIUM,
            Difficulty.HARD,
        ]
        assert all(c.expires_on == date(2026, 3, 15) for c in state.challenges)


class TestDailyProgress:
    def test_review_cards_accumulates_and_pays_once(self):
        state = only(challenges.generate_daily_challenges(TODAY), ChallengeType.REVIEW_CARDS)
        target = state.challenges[0].target

        state, xp = challenges.update_daily_challenges(
            state, SessionOutcome(cards_reviewed=target - 5)
        )
        assert xp == 0
        assert state.challenges[0].current == target - 5

        state, xp = challenges.update_daily_challenges(state, SessionOutcome(cards_reviewed=10))
        assert xp == state.challenges[0].xp_reward
        assert state.challenges[0].current == target
        assert state.challenges[0].completed_at is not None

        state, xp = challenges.update_daily_challenges(state, SessionOutcome(cards_reviewed=10))
        assert xp == 0

    def test_perfect_streak_keeps_best_value(self):
        state = only(challenges.generate_daily_challenges(TODAY), ChallengeType.PERFECT_STREAK)
        state, _ = challenges.update_daily_challenges(state, SessionOutcome(best_perfect_streak=3))
        state, _ = challenges.update_daily_challenges(state, SessionOutcome(best_perfect_streak=1))
        assert state.challenges[0].current == 3

    def test_accuracy_ignores_empty_sessions(self):
        state = only(challenges.generate_daily_challenges(TODAY), ChallengeType.ACCURACY_GOAL)
        state, _ = challenges.update_daily_challenges(state, SessionOutcome(accuracy=100.0))
        assert state.challenges[0].current == 0

    def test_category_focus_counts_matching_cards(self):
        state = only(challenges.generate_daily_challenges(TODAY), ChallengeType.CATEGORY_FOCUS)
        category = state.challenges[0].category
        outcome = SessionOutcome(
            cards_reviewed=6, categories_reviewed={category: 4, "Food": 2}
        )
        state, _ = challenges.update_daily_challenges(state, outcome)
        assert state.challenges[0].current == 4


class TestWeeklyProgress:
    def test_days_studied_are_unique(self):
        state = challenges.generate_weekly_challenges(TODAY, random.Random(0))
        outcome = SessionOutcome(cards_reviewed=1, accuracy=100.0)
        state, _ = challenges.update_weekly_challenges(state, outcome, TODAY)
        state, _ = challenges.update_weekly_challenges(state, outcome, TODAY)
        state, _ = challenges.update_weekly_challenges(
            state, outcome, TODAY + timedelta(days=1)
        )
        assert state.days_studied == [TODAY, TODAY + timedelta(days=1)]

    def test_completing_all_pays_the_bonus_once(self):
        state = challenges.generate_weekly_challenges(TODAY, random.Random(0))
        near_done = [c.model_copy(update={"current": c.target - 1}) for c in state.challenges]
        state = state.model_copy(update={"challenges": near_done})
        big = SessionOutcome(
            cards_reviewed=500,
            cards_mastered=50,
            accuracy=100.0,
            best_perfect_streak=50,
            fast_answers=200,
            typed_correct=100,
            categories_reviewed={"Verbs": 100},
        )
        # streak-days challenges need enough distinct days
        state = state.model_copy(
            update={"days_studied": [TODAY - timedelta(days=i) for i in range(1, 7)]}
        )

        state, xp = challenges.update_weekly_challenges(state, big, TODAY)
        assert all(c.completed_at is not None for c in state.challenges)
        rewards = sum(c.xp_reward for c in state.challenges)
        assert xp == rewards + challenges.WEEKLY_COMPLETION_BONUS
        assert state.bonus_xp_earned == xp

        _, again = challenges.update_weekly_challenges(state, big, TODAY)
        assert again == 0

