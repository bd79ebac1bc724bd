"""Data models for the study engine: per-user word records and their study status."""

import hashlib
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from study.scheduler import (
    SchedulingState,
    compute_mastery_level,
    initialize,
    review_phase,
    ReviewPhase,
)

MASTERED_THRESHOLD = 80


class StudyActivity(str, Enum):
    """Study modes that can submit a review."""
    FLASHCARD = "flashcard"
    QUIZ = "quiz"
    TYPING = "typing"
    REVIEW = "review"


class ReviewResult(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    SKIPPED = "skipped"


def result_for_quality(quality: int) -> ReviewResult:
    return ReviewResult.CORRECT if quality >= 3 else ReviewResult.INCORRECT


def confidence_level(mastery: int) -> str:
    if mastery >= MASTERED_THRESHOLD:
        return 'high'
    if mastery >= 50:
        return 'medium'
    return 'low'


@dataclass
class StudyStatus:
    """Review bookkeeping kept alongside the scheduling state."""
    studied: bool = False
    total_reviews: int = 0
    correct_count: int = 0
    incorrect_count: int = 0
    streak_count: int = 0
    last_result: Optional[str] = None
    last_activity: Optional[str] = None
    last_studied: Optional[str] = None
    activity_counts: Dict[str, int] = field(
        default_factory=lambda: {a.value: 0 for a in StudyActivity}
    )

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> 'StudyStatus':
        data = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        status = cls(**data)
        for activity in StudyActivity:
            status.activity_counts.setdefault(activity.value, 0)
        return status


@dataclass
class UserWord:
    """
    One learner's history with one word.

    user_word_id is a deterministic SHA-256 hash of (user_id, word_id), so
    the same pair always maps to the same record.
    """
    user_word_id: str
    user_id: str
    word_id: str
    word: str = ''
    schedule: SchedulingState = field(default_factory=initialize)
    status: StudyStatus = field(default_factory=StudyStatus)
    is_bookmarked: bool = False
    personal_notes: Optional[str] = None
    custom_mnemonic: Optional[str] = None
    custom_example: Optional[str] = None
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())
    updated_at: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def mastery_level(self) -> int:
        return compute_mastery_level(self.schedule)

    @property
    def confidence(self) -> str:
        return confidence_level(self.mastery_level)

    @property
    def phase(self) -> ReviewPhase:
        return review_phase(self.schedule)

    def record_review(
        self,
        result: ReviewResult,
        activity: StudyActivity,
        new_schedule: Optional[SchedulingState] = None,
        now: Optional[datetime] = None,
    ) -> None:
        """
        Apply the bookkeeping for one submitted review.

        A skipped review counts toward totals but leaves the schedule alone.
        """
        if now is None:
            now = datetime.now()
        result = ReviewResult(result)
        activity = StudyActivity(activity)

        status = self.status
        status.studied = True
        status.total_reviews += 1
        status.last_result = result.value
        status.last_activity = activity.value
        status.last_studied = now.isoformat()
        status.activity_counts[activity.value] = status.activity_counts.get(activity.value, 0) + 1

        if result is ReviewResult.CORRECT:
            status.correct_count += 1
            status.streak_count += 1
        elif result is ReviewResult.INCORRECT:
            status.incorrect_count += 1
            status.streak_count = 0

        if new_schedule is not None and result is not ReviewResult.SKIPPED:
            self.schedule = new_schedule
        self.updated_at = now.isoformat()

    def to_dict(self) -> Dict:
        return {
            'user_word_id': self.user_word_id,
            'user_id': self.user_id,
            'word_id': self.word_id,
            'word': self.word,
            'schedule': self.schedule.to_dict(),
            'status': self.status.to_dict(),
            'is_bookmarked': self.is_bookmarked,
            'personal_notes': self.personal_notes,
            'custom_mnemonic': self.custom_mnemonic,
            'custom_example': self.custom_example,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'UserWord':
        data = dict(data)  # shallow copy
        if isinstance(data.get('schedule'), dict):
            data['schedule'] = SchedulingState.from_dict(data['schedule'])
        if isinstance(data.get('status'), dict):
            data['status'] = StudyStatus.from_dict(data['status'])
        known = cls.__dataclass_fields__
        data = {k: v for k, v in data.items() if k in known}
        if not data.get('user_word_id'):
            data['user_word_id'] = make_user_word_id(data['user_id'], data['word_id'])
        return cls(**data)


def new_user_word(
    user_id: str,
    word_id: str,
    word: str = '',
    now: Optional[datetime] = None,
) -> UserWord:
    """Record for a word the learner has not seen yet."""
    if now is None:
        now = datetime.now()
    return UserWord(
        user_word_id=make_user_word_id(user_id, word_id),
        user_id=user_id,
        word_id=word_id,
        word=word,
        schedule=initialize(now),
        created_at=now.isoformat(),
        updated_at=now.isoformat(),
    )


def make_user_word_id(user_id: str, word_id: str) -> str:
    """SHA-256 of user_id|word_id truncated to 16 hex chars."""
    key = f'{user_id}|{word_id}'
    return hashlib.sha256(key.encode('utf-8')).hexdigest()[:16]
