"""Interactive review session runner with injectable IO."""

import re
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional

from study.models import ReviewResult, StudyActivity, UserWord, result_for_quality
from study.scheduler import (
    DIFFICULTY_TO_QUALITY,
    InvalidInput,
    compute_next_review,
    describe_next_review,
    difficulty_to_quality,
    validate_quality,
)
from study.session_log import log_session
from study.storage import UserWordStore

QUIT = 'q'
SKIP = 's'


def parse_rating(raw: str) -> int:
    """
    Turn a typed rating into a quality score.

    Accepts a digit 0-5 or a difficulty label (again/hard/medium/easy).
    Raises InvalidInput for anything else.
    """
    text = raw.strip().lower()
    if re.fullmatch(r'-?\d+', text):
        return validate_quality(int(text))
    return difficulty_to_quality(text)


def resolve_quality(quality: Optional[int] = None, difficulty: Optional[str] = None) -> int:
    """
    Pick the quality score from exactly one of a raw score or a difficulty label.

    Raises:
        InvalidInput if both or neither are given, or the label is unknown.
        Range checking of a raw score is left to the scheduler.
    """
    if (quality is None) == (difficulty is None):
        raise InvalidInput("Provide exactly one of quality or difficulty")
    if difficulty is not None:
        return difficulty_to_quality(difficulty)
    return quality


def submit_review(
    storage: UserWordStore,
    user_id: str,
    word_id: str,
    quality: int,
    activity: StudyActivity = StudyActivity.REVIEW,
    word: str = '',
    now: Optional[datetime] = None,
) -> UserWord:
    """
    Schedule one review and persist it.

    The quality is validated before anything is read or written, so a
    rejected review leaves storage untouched. Unknown words are created on
    their first review.
    """
    validate_quality(quality)
    if now is None:
        now = datetime.now()
    uw = storage.get_or_create(user_id, word_id, word=word, now=now)
    new_schedule = compute_next_review(uw.schedule, quality, now=now)
    return storage.update_review(
        user_id, word_id, result_for_quality(quality), StudyActivity(activity),
        new_schedule=new_schedule, now=now,
    )


def run_review_session(
    storage: UserWordStore,
    user_id: str,
    due_words: List[UserWord],
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
    log_path: Optional[Path] = None,
    activity: StudyActivity = StudyActivity.REVIEW,
    now: Optional[datetime] = None,
) -> Dict:
    """
    Run an interactive review session over due words.

    Flow per word:
        1. Show the word
        2. Read a rating (label or 0-5), 's' to skip, 'q' to quit;
           unrecognized input re-prompts
        3. Compute the new schedule via SM-2
        4. Persist the outcome

    Returns:
        Summary dict: {reviewed, correct, incorrect, skipped}
    """
    reviewed = 0
    correct = 0
    incorrect = 0
    skipped = 0
    words_reviewed_log: List[Dict] = []
    labels = '/'.join(DIFFICULTY_TO_QUALITY)

    output_fn(f"\n{'='*60}")
    output_fn(f"REVIEW SESSION -- {len(due_words)} word(s) due")
    output_fn(f"{'='*60}")
    output_fn(f"Rate each word {labels} or 0-5. "
              f"Type '{QUIT}' to quit early, '{SKIP}' to skip.\n")

    stopped = False
    for idx, uw in enumerate(due_words, 1):
        output_fn(f"\n--- Word {idx}/{len(due_words)} [{uw.phase.value}] ---")
        output_fn(f"  {uw.word or uw.word_id}")

        quality = None
        while quality is None:
            try:
                raw = input_fn("\nHow well did you recall it? ")
            except (EOFError, KeyboardInterrupt):
                output_fn("\nSession ended.")
                stopped = True
                break

            choice = raw.strip().lower()
            if choice == QUIT:
                output_fn("Ending session early.")
                stopped = True
                break
            if choice == SKIP:
                break
            try:
                quality = parse_rating(raw)
            except InvalidInput as e:
                output_fn(f"  {e}")

        if stopped:
            break

        review_time = now or datetime.now()

        if quality is None:
            storage.update_review(user_id, uw.word_id, ReviewResult.SKIPPED,
                                  activity, now=review_time)
            skipped += 1
            output_fn("  (skipped)")
            continue

        updated = submit_review(storage, user_id, uw.word_id, quality,
                                activity=activity, now=review_time)
        new_schedule = updated.schedule
        result = result_for_quality(quality)

        output_fn(f"  Next review: {new_schedule.next_review_date.date().isoformat()} "
                  f"({describe_next_review(new_schedule.next_review_date, review_time)}, "
                  f"interval: {new_schedule.interval}d)")

        words_reviewed_log.append({
            'word_id': uw.word_id,
            'word': uw.word,
            'quality': quality,
            'interval': new_schedule.interval,
        })

        reviewed += 1
        if result is ReviewResult.CORRECT:
            correct += 1
        else:
            incorrect += 1

    summary = {
        'reviewed': reviewed,
        'correct': correct,
        'incorrect': incorrect,
        'skipped': skipped,
    }

    output_fn(f"\n{'='*60}")
    output_fn("SESSION COMPLETE")
    output_fn(f"  Reviewed: {reviewed}  Correct: {correct}  "
              f"Incorrect: {incorrect}  Skipped: {skipped}")
    output_fn(f"{'='*60}")

    if log_path and words_reviewed_log:
        log_session(log_path, user_id, summary, words_reviewed_log)

    return summary
