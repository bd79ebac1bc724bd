"""Tests for study/models.py -- user word records and review bookkeeping."""

import sys
from pathlib import Path
from datetime import datetime, timedelta

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from study.models import (
    ReviewResult,
    StudyActivity,
    UserWord,
    confidence_level,
    make_user_word_id,
    new_user_word,
    result_for_quality,
)
from study.scheduler import ReviewPhase, compute_next_review

NOW = datetime(2026, 3, 10, 9, 0)


def test_user_word_id_is_deterministic():
    assert make_user_word_id('alice', 'abate') == make_user_word_id('alice', 'abate')
    assert make_user_word_id('alice', 'abate') != make_user_word_id('bob', 'abate')
    assert len(make_user_word_id('alice', 'abate')) == 16


def test_new_user_word_is_due_now():
    uw = new_user_word('alice', 'abate', word='abate', now=NOW)
    assert uw.schedule.next_review_date == NOW
    assert uw.phase is ReviewPhase.NEW
    assert uw.status.studied is False
    assert uw.status.activity_counts == {'flashcard': 0, 'quiz': 0, 'typing': 0, 'review': 0}


def test_result_for_quality():
    assert result_for_quality(3) is ReviewResult.CORRECT
    assert result_for_quality(2) is ReviewResult.INCORRECT


def test_confidence_thresholds():
    assert confidence_level(80) == 'high'
    assert confidence_level(79) == 'medium'
    assert confidence_level(50) == 'medium'
    assert confidence_level(49) == 'low'


def test_record_correct_review():
    uw = new_user_word('alice', 'abate', now=NOW)
    new_schedule = compute_next_review(uw.schedule, 5, now=NOW)
    uw.record_review(ReviewResult.CORRECT, StudyActivity.QUIZ, new_schedule, now=NOW)

    assert uw.schedule is new_schedule
    assert uw.status.studied is True
    assert uw.status.total_reviews == 1
    assert uw.status.correct_count == 1
    assert uw.status.streak_count == 1
    assert uw.status.last_result == 'correct'
    assert uw.status.last_activity == 'quiz'
    assert uw.status.activity_counts['quiz'] == 1
    assert uw.updated_at == NOW.isoformat()


def test_record_incorrect_review_resets_streak():
    uw = new_user_word('alice', 'abate', now=NOW)
    uw.status.streak_count = 4
    uw.record_review('incorrect', 'typing', compute_next_review(uw.schedule, 1, now=NOW), now=NOW)
    assert uw.status.streak_count == 0
    assert uw.status.incorrect_count == 1
    assert uw.status.activity_counts['typing'] == 1


def test_skipped_review_keeps_schedule():
    uw = new_user_word('alice', 'abate', now=NOW)
    before = uw.schedule
    later = NOW + timedelta(hours=2)
    uw.record_review(ReviewResult.SKIPPED, StudyActivity.FLASHCARD,
                     compute_next_review(before, 5, now=later), now=later)
    assert uw.schedule is before
    assert uw.status.total_reviews == 1
    assert uw.status.last_result == 'skipped'
    assert uw.status.streak_count == 0


def test_dict_round_trip_preserves_schedule_and_status():
    uw = new_user_word('alice', 'abate', word='abate', now=NOW)
    uw.record_review(ReviewResult.CORRECT, StudyActivity.REVIEW,
                     compute_next_review(uw.schedule, 4, now=NOW), now=NOW)
    uw.is_bookmarked = True
    uw.custom_mnemonic = 'a-BAIT'

    restored = UserWord.from_dict(uw.to_dict())
    assert restored.schedule == uw.schedule
    assert restored.status == uw.status
    assert restored.is_bookmarked is True
    assert restored.custom_mnemonic == 'a-BAIT'
    assert restored.personal_notes is None
    assert restored.mastery_level == uw.mastery_level


def test_from_dict_fills_missing_id_and_ignores_unknown_fields():
    data = {'user_id': 'alice', 'word_id': 'abate', 'legacy_field': 1}
    uw = UserWord.from_dict(data)
    assert uw.user_word_id == make_user_word_id('alice', 'abate')
