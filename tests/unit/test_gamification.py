"""Unit tests for XP, levels and streak bookkeeping."""
from datetime import date, timedelta

import pytest

from flashcat.models.progress import UserProgress
from flashcat.services import gamification

TODAY = date(2026, 3, 11)
YESTERDAY = TODAY - timedelta(days=1)


class TestXP:
    @pytest.mark.parametrize(
        "streak, multiplier", [(0, 1.0), (6, 1.0), (7, 1.1), (14, 1.15), (45, 1.25), (100, 1.5)]
    )
    def test_streak_multiplier(self, streak, multiplier):
        assert gamification.streak_multiplier(streak) == multiplier

    @pytest.mark.parametrize("quality, xp", [(5, 25), (4, 10), (3, 5), (2, 2), (0, 2)])
    def test_xp_for_quality(self, quality, xp):
        assert gamification.xp_for_quality(quality) == xp

    def test_award_applies_multiplier_and_tracks_day(self):
        progress = UserProgress(current_streak=7)
        updated, awarded = gamification.award_xp(progress, 10, TODAY)
        assert awarded == 11
        assert updated.xp == 11
        assert updated.daily_activity[TODAY.isoformat()].xp == 11
        assert progress.xp == 0

    @pytest.mark.parametrize(
        "cards_today, bonus", [(1, 15), (2, 0), (19, 0), (20, 50), (21, 0)]
    )
    def test_daily_bonus(self, cards_today, bonus):
        assert gamification.daily_bonus(cards_today, daily_goal=20) == bonus

    def test_daily_goal_of_one_pays_both(self):
        assert gamification.daily_bonus(1, daily_goal=1) == 65

    def test_cards_studied_today(self):
        progress = gamification.record_study_session(UserProgress(), 12, 10, 60_000, TODAY)
        assert gamification.cards_studied_today(progress, TODAY) == 12
        assert gamification.cards_studied_today(progress, YESTERDAY) == 0

    def test_award_levels_up(self):
        updated, _ = gamification.award_xp(UserProgress(xp=95), 10, TODAY)
        assert updated.level == 2


class TestLevels:
    def test_level_for_xp(self):
        assert gamification.level_for_xp(0).level == 1
        assert gamification.level_for_xp(99).level == 1
        assert gamification.level_for_xp(100).level == 2
        assert gamification.level_for_xp(20_000).level == 12

    def test_progress_to_next_level(self):
        result = gamification.xp_for_next_level(150)
        assert result.level.level == 2
        assert result.current == 50
        assert result.required == 200
        assert result.progress == 25

    def test_max_level_is_complete(self):
        result = gamification.xp_for_next_level(12_000)
        assert result.level.title == "Catalan Champion"
        assert result.progress == 100


class TestStreaks:
    def test_first_study_day(self):
        result = gamification.update_streak(UserProgress(), TODAY)
        assert result.changed
        assert result.progress.current_streak == 1
        assert result.progress.last_study_date == TODAY

    def test_same_day_is_a_no_op(self):
        progress = UserProgress(current_streak=4, last_study_date=TODAY)
        result = gamification.update_streak(progress, TODAY)
        assert not result.changed
        assert result.progress.current_streak == 4

    def test_consecutive_day_extends(self):
        progress = UserProgress(current_streak=4, longest_streak=4, last_study_date=YESTERDAY)
        result = gamification.update_streak(progress, TODAY)
        assert result.progress.current_streak == 5
        assert result.progress.longest_streak == 5

    def test_one_missed_day_uses_freeze(self):
        progress = UserProgress(current_streak=4, last_study_date=TODAY - timedelta(days=2))
        result = gamification.update_streak(progress, TODAY)
        assert result.used_freeze
        assert result.progress.current_streak == 5
        assert not result.progress.streak_freeze_available
        assert result.progress.last_streak_freeze_used == TODAY

    def test_missed_day_without_freeze_resets(self):
        progress = UserProgress(
            current_streak=4,
            longest_streak=9,
            last_study_date=TODAY - timedelta(days=2),
            streak_freeze_available=False,
        )
        result = gamification.update_streak(progress, TODAY)
        assert result.progress.current_streak == 1
        assert result.progress.longest_streak == 9

    def test_long_gap_resets_even_with_freeze(self):
        progress = UserProgress(current_streak=4, last_study_date=TODAY - timedelta(days=5))
        result = gamification.update_streak(progress, TODAY)
        assert result.progress.current_streak == 1
        assert result.progress.streak_freeze_available

    def test_manual_freeze(self):
        progress, used = gamification.use_streak_freeze(UserProgress(), TODAY)
        assert used
        assert not progress.streak_freeze_available
        _, used_again = gamification.use_streak_freeze(progress, TODAY)
        assert not used_again


def test_record_study_session_accumulates():
    progress = gamification.record_study_session(UserProgress(), 10, 8, 60_000, TODAY)
    progress = gamification.record_study_session(progress, 5, 5, 20_000, TODAY)
    assert progress.total_cards_reviewed == 15
    assert progress.total_correct == 13
    assert progress.total_time_spent_ms == 80_000
    assert progress.daily_activity[TODAY.isoformat()].cards == 15
