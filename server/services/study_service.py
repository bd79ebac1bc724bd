"""Study engine service wrappers -- all return JSON-serializable dicts."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Tuple

_project_root = str(Path(__file__).resolve().parent.parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from study.analytics import compute_study_stats
from study.models import ReviewResult, StudyActivity, UserWord, result_for_quality
from study.scheduler import describe_next_review
from study.session import resolve_quality, submit_review
from study.storage import UserWordStore

logger = logging.getLogger("wordbook.study")


def _word_to_summary(uw: UserWord, now: Optional[datetime] = None) -> Dict:
    """Convert a UserWord to a JSON-safe dict with derived display fields."""
    d = uw.to_dict()
    d['mastery_level'] = uw.mastery_level
    d['confidence'] = uw.confidence
    d['phase'] = uw.phase.value
    d['next_review_label'] = describe_next_review(uw.schedule.next_review_date, now)
    return d


def introduce_word(
    store: UserWordStore,
    user_id: str,
    word_id: str,
    word: str = '',
    now: Optional[datetime] = None,
) -> Dict:
    uw = store.get_or_create(user_id, word_id, word=word, now=now)
    return _word_to_summary(uw, now)


def get_word(store: UserWordStore, user_id: str, word_id: str) -> Dict:
    """
    Raises:
        KeyError if the user has never seen this word.
    """
    uw = store.get(user_id, word_id)
    if uw is None:
        raise KeyError(f"Word not found for user {user_id}: {word_id}")
    return _word_to_summary(uw)


def review_word(
    store: UserWordStore,
    user_id: str,
    word_id: str,
    quality: Optional[int] = None,
    difficulty: Optional[str] = None,
    activity: str = StudyActivity.REVIEW.value,
    word: str = '',
    now: Optional[datetime] = None,
) -> Dict:
    """
    Record one review and return the new schedule.

    Returns:
        {quality, result, mastery_level, next_review_label, new_schedule, word}

    Raises:
        InvalidInput for a bad quality/difficulty; nothing is written.
    """
    q = resolve_quality(quality, difficulty)
    uw = submit_review(store, user_id, word_id, q,
                       activity=StudyActivity(activity), word=word, now=now)
    result = result_for_quality(q)
    logger.info(
        "Review user=%s word=%s quality=%d result=%s interval=%dd ease=%.2f",
        user_id, word_id, q, result.value, uw.schedule.interval, uw.schedule.ease_factor,
    )
    summary = _word_to_summary(uw, now)
    return {
        'quality': q,
        'result': result.value,
        'mastery_level': summary['mastery_level'],
        'next_review_label': summary['next_review_label'],
        'new_schedule': summary['schedule'],
        'word': summary,
    }


def skip_word(
    store: UserWordStore,
    user_id: str,
    word_id: str,
    activity: str = StudyActivity.REVIEW.value,
    now: Optional[datetime] = None,
) -> Dict:
    """Count a skipped presentation without touching the schedule."""
    if store.get(user_id, word_id) is None:
        raise KeyError(f"Word not found for user {user_id}: {word_id}")
    uw = store.update_review(user_id, word_id, ReviewResult.SKIPPED,
                             StudyActivity(activity), now=now)
    logger.info("Skip user=%s word=%s", user_id, word_id)
    return _word_to_summary(uw, now)


def get_due_words(
    store: UserWordStore,
    user_id: str,
    limit: Optional[int] = None,
    now: Optional[datetime] = None,
) -> Dict:
    """Today's study queue, soonest first. due_count covers the whole queue."""
    due = store.get_due_words(user_id, now=now)
    page = due[:limit] if limit else due
    return {
        'due_count': len(due),
        'words': [_word_to_summary(uw, now) for uw in page],
    }


def list_words(
    store: UserWordStore,
    user_id: str,
    bookmarked_only: bool = False,
    mastery_range: Optional[Tuple[int, int]] = None,
    confidence: Optional[str] = None,
    sort_by: Optional[str] = None,
    limit: Optional[int] = None,
) -> Dict:
    words = store.list_studied(
        user_id,
        bookmarked_only=bookmarked_only,
        mastery_range=mastery_range,
        confidence=confidence,
        sort_by=sort_by,
        limit=limit,
    )
    return {
        'count': len(words),
        'words': [_word_to_summary(uw) for uw in words],
    }


def set_bookmark(store: UserWordStore, user_id: str, word_id: str, bookmarked: bool) -> Dict:
    uw = store.set_bookmark(user_id, word_id, bookmarked)
    return _word_to_summary(uw)


def update_personal_info(
    store: UserWordStore,
    user_id: str,
    word_id: str,
    personal_notes: Optional[str] = None,
    custom_mnemonic: Optional[str] = None,
    custom_example: Optional[str] = None,
) -> Dict:
    uw = store.update_personal_info(
        user_id, word_id,
        personal_notes=personal_notes,
        custom_mnemonic=custom_mnemonic,
        custom_example=custom_example,
    )
    return _word_to_summary(uw)


def get_progress(store: UserWordStore, user_id: str, now: Optional[datetime] = None) -> Dict:
    return compute_study_stats(store.words_for_user(user_id), now=now)
