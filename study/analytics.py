"""Progress analytics for a learner's word collection."""

from datetime import datetime
from typing import Dict, List, Optional

from study.models import MASTERED_THRESHOLD, UserWord
from study.scheduler import ReviewPhase, round_half_up, select_due_items

STREAK_THRESHOLD = 3


def compute_study_stats(words: List[UserWord], now: Optional[datetime] = None) -> Dict:
    """
    Aggregate study statistics across one learner's words.

    Returns:
        {
            total_words, total_studied, total_mastered, total_bookmarked,
            average_mastery: int 0..100 over studied words,
            streak_words: words on a streak of 3+ correct answers,
            due_count, accuracy: float 0..1,
            by_phase: {phase: count},
        }
    """
    by_phase = {phase.value: 0 for phase in ReviewPhase}
    for uw in words:
        by_phase[uw.phase.value] += 1

    studied = [uw for uw in words if uw.status.studied]

    average_mastery = 0
    if studied:
        average_mastery = round_half_up(sum(uw.mastery_level for uw in studied) / len(studied))

    correct = sum(uw.status.correct_count for uw in words)
    incorrect = sum(uw.status.incorrect_count for uw in words)
    accuracy = 0.0
    if correct + incorrect:
        accuracy = round(correct / (correct + incorrect), 4)

    due = select_due_items([(uw.schedule, uw) for uw in words], now=now)

    return {
        'total_words': len(words),
        'total_studied': len(studied),
        'total_mastered': sum(1 for uw in words if uw.mastery_level >= MASTERED_THRESHOLD),
        'total_bookmarked': sum(1 for uw in words if uw.is_bookmarked),
        'average_mastery': average_mastery,
        'streak_words': sum(1 for uw in words if uw.status.streak_count >= STREAK_THRESHOLD),
        'due_count': len(due),
        'accuracy': accuracy,
        'by_phase': by_phase,
    }
