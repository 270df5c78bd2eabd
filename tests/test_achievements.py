from quest_focus.achievements import (
    ACHIEVEMENT_CATALOG,
    evaluate,
    merge_catalog,
    newly_unlocked,
)
from quest_focus.models import UserStats

from helpers import make_session


def unlocked_ids(achievements):
    return {a.id for a in achievements if a.unlocked}


class TestCatalog:
    def test_fixed_order(self):
        assert [a.id for a in ACHIEVEMENT_CATALOG] == [
            "first_step",
            "dedicated",
            "streak_3",
            "deep_work",
            "master",
        ]

    def test_all_locked_by_default(self):
        assert not any(a.unlocked for a in ACHIEVEMENT_CATALOG)


class TestEvaluate:
    def test_nothing_unlocks_without_sessions(self):
        result = evaluate(ACHIEVEMENT_CATALOG, UserStats(), [])
        assert unlocked_ids(result) == set()

    def test_each_condition(self):
        stats = UserStats(level=10, current_xp=0, next_level_xp=2579, total_study_minutes=300, streak_days=3)
        sessions = [make_session(60)]
        result = evaluate(ACHIEVEMENT_CATALOG, stats, sessions)
        assert unlocked_ids(result) == {"first_step", "dedicated", "streak_3", "deep_work", "master"}

    def test_thresholds_are_inclusive_lower_bounds(self):
        stats = UserStats(total_study_minutes=299, streak_days=2, level=9, next_level_xp=2149)
        result = evaluate(ACHIEVEMENT_CATALOG, stats, [make_session(59)])
        assert unlocked_ids(result) == {"first_step"}

    def test_preserves_catalog_order(self):
        result = evaluate(ACHIEVEMENT_CATALOG, UserStats(streak_days=5), [make_session(5)])
        assert [a.id for a in result] == [a.id for a in ACHIEVEMENT_CATALOG]

    def test_unlock_never_reverts(self):
        unlocked = evaluate(ACHIEVEMENT_CATALOG, UserStats(streak_days=3), [make_session(5)])
        again = evaluate(unlocked, UserStats(streak_days=0), [])
        assert unlocked_ids(again) == {"first_step", "streak_3"}

    def test_idempotent(self):
        stats = UserStats(total_study_minutes=400)
        sessions = [make_session(90)]
        first = evaluate(ACHIEVEMENT_CATALOG, stats, sessions)
        second = evaluate(first, stats, sessions)
        assert second == first
        assert newly_unlocked(first, second) == []

    def test_does_not_mutate_input(self):
        catalog = list(ACHIEVEMENT_CATALOG)
        evaluate(catalog, UserStats(), [make_session(5)])
        assert not any(a.unlocked for a in catalog)


class TestNewlyUnlocked:
    def test_lists_only_fresh_unlocks(self):
        before = evaluate(ACHIEVEMENT_CATALOG, UserStats(), [make_session(5)])
        after = evaluate(before, UserStats(streak_days=3), [make_session(5)])
        assert [a.id for a in newly_unlocked(before, after)] == ["streak_3"]


class TestMergeCatalog:
    def test_keeps_saved_flags(self):
        merged = merge_catalog([{"id": "master", "unlocked": True}, {"id": "dedicated", "unlocked": False}])
        assert unlocked_ids(merged) == {"master"}
        assert [a.id for a in merged] == [a.id for a in ACHIEVEMENT_CATALOG]

    def test_ignores_unknown_and_garbage(self):
        merged = merge_catalog([{"id": "bogus", "unlocked": True}, "nope", 3, {"unlocked": True}])
        assert unlocked_ids(merged) == set()
        assert len(merged) == 5

    def test_truthy_non_bool_is_not_an_unlock(self):
        merged = merge_catalog([{"id": "first_step", "unlocked": "yes"}])
        assert unlocked_ids(merged) == set()
