"""SM-2 spaced repetition scheduler for vocabulary words."""

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, TypeVar

T = TypeVar('T')

MIN_EASE_FACTOR = 1.3
DEFAULT_EASE_FACTOR = 2.5
INITIAL_INTERVALS = (1, 6)  # days for the first two successful reviews

DIFFICULTY_TO_QUALITY: Dict[str, int] = {
    'again': 1,
    'hard': 3,
    'medium': 4,
    'easy': 5,
}


class InvalidInput(ValueError):
    """A review was submitted with an out-of-range quality or unknown label."""


class ReviewPhase(str, Enum):
    """Where a word sits in the learning cycle."""
    NEW = "new"
    LEARNING = "learning"
    REVIEWING = "reviewing"
    LAPSED = "lapsed"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass
class SchedulingState:
    """
    Scheduling state for one (user, word) pair.

    next_review_date is derived from last_review_date + interval and is
    never stored on its own.
    """
    ease_factor: float = DEFAULT_EASE_FACTOR
    interval: int = 0
    repetitions: int = 0
    last_review_date: datetime = field(default_factory=datetime.now)

    @property
    def next_review_date(self) -> datetime:
        return self.last_review_date + timedelta(days=self.interval)

    def to_dict(self) -> Dict:
        return {
            'ease_factor': self.ease_factor,
            'interval': self.interval,
            'repetitions': self.repetitions,
            'last_review_date': self.last_review_date.isoformat(),
            'next_review_date': self.next_review_date.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'SchedulingState':
        last = data.get('last_review_date')
        if isinstance(last, str):
            last = datetime.fromisoformat(last)
        return cls(
            ease_factor=float(data.get('ease_factor', DEFAULT_EASE_FACTOR)),
            interval=int(data.get('interval', 0)),
            repetitions=int(data.get('repetitions', 0)),
            last_review_date=last or datetime.now(),
        )


def validate_quality(quality) -> int:
    """Return quality unchanged, or raise InvalidInput if it is not an int in 0-5."""
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidInput(f"Quality must be an integer 0-5, got {quality!r}")
    if not (0 <= quality <= 5):
        raise InvalidInput(f"Quality must be 0-5, got {quality}")
    return quality


def initialize(now: Optional[datetime] = None) -> SchedulingState:
    """Fresh state for a word introduced to a learner; due immediately."""
    if now is None:
        now = datetime.now()
    return SchedulingState(
        ease_factor=DEFAULT_EASE_FACTOR,
        interval=0,
        repetitions=0,
        last_review_date=now,
    )


def update_ease_factor(ease_factor: float, quality: int) -> float:
    """SM-2 ease update with a 1.3 floor. There is no upper clamp."""
    # EF' = EF + (0.1 - (5-q) * (0.08 + (5-q) * 0.02))
    new_ease = ease_factor + (0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02))
    return max(MIN_EASE_FACTOR, new_ease)


def compute_next_review(
    current: SchedulingState,
    quality: int,
    now: Optional[datetime] = None,
) -> SchedulingState:
    """
    SM-2 scheduling step.

    Args:
        current: The word's existing state (or initialize() for new words)
        quality: Recall grade 0-5 (0=blackout, 5=perfect)
        now:     Review time; defaults to datetime.now()

    Returns:
        A new SchedulingState. `current` is not modified.

    Raises:
        InvalidInput if quality is not an integer in 0-5.
    """
    validate_quality(quality)
    if now is None:
        now = datetime.now()

    new_ease = update_ease_factor(current.ease_factor, quality)

    if quality < 3:
        # Failure forgets the streak
        new_interval = 1
        new_reps = 0
    else:
        if current.repetitions == 0:
            new_interval = INITIAL_INTERVALS[0]
        elif current.repetitions == 1:
            new_interval = INITIAL_INTERVALS[1]
        else:
            new_interval = round_half_up(current.interval * new_ease)
        new_reps = current.repetitions + 1

    return SchedulingState(
        ease_factor=new_ease,
        interval=new_interval,
        repetitions=new_reps,
        last_review_date=now,
    )


def compute_mastery_level(state: SchedulingState) -> int:
    """
    Progress-bar mastery percentage (0-100).

    Weights: repetitions up to 50, interval up to 30, ease up to 20.
    """
    repetition_score = min(state.repetitions * 10, 50)
    interval_score = min(state.interval / 2, 30)
    ease_score = ((state.ease_factor - MIN_EASE_FACTOR)
                  / (DEFAULT_EASE_FACTOR - MIN_EASE_FACTOR)) * 20
    level = round_half_up(repetition_score + interval_score + ease_score)
    return max(0, min(100, level))


def end_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=23, minute=59, second=59, microsecond=999999)


def select_due_items(
    items: Iterable[Tuple[SchedulingState, T]],
    now: Optional[datetime] = None,
) -> List[T]:
    """Payloads whose next review falls on or before the end of today, in input order."""
    if now is None:
        now = datetime.now()
    cutoff = end_of_day(now)
    return [payload for state, payload in items if state.next_review_date <= cutoff]


def difficulty_to_quality(label: str) -> int:
    """Map a UI difficulty button (again/hard/medium/easy) to a quality score."""
    key = (label or '').strip().lower()
    if key not in DIFFICULTY_TO_QUALITY:
        raise InvalidInput(
            f"Unknown difficulty {label!r}; expected one of "
            f"{', '.join(DIFFICULTY_TO_QUALITY)}"
        )
    return DIFFICULTY_TO_QUALITY[key]


def review_phase(state: SchedulingState) -> ReviewPhase:
    if state.repetitions >= 2:
        return ReviewPhase.REVIEWING
    if state.repetitions == 1:
        return ReviewPhase.LEARNING
    if state.interval == 0:
        return ReviewPhase.NEW
    return ReviewPhase.LAPSED


def describe_next_review(next_review_date: datetime, now: Optional[datetime] = None) -> str:
    """Short human-readable label for when a word comes back."""
    if now is None:
        now = datetime.now()
    diff_days = math.ceil((next_review_date - now) / timedelta(days=1))

    if diff_days < 0:
        return "Review needed"
    if diff_days == 0:
        return "Review today"
    if diff_days == 1:
        return "Review tomorrow"
    if diff_days <= 7:
        return f"In {diff_days} days"
    if diff_days <= 30:
        weeks = round_half_up(diff_days / 7)
        return f"In {weeks} week" + ("s" if weeks != 1 else "")
    months = round_half_up(diff_days / 30)
    return f"In {months} month" + ("s" if months != 1 else "")
