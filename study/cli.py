"""
Study mode CLI.

Usage:
    python -m study.cli --db user_words.jsonl --user alice add abate --word "abate"
    python -m study.cli --db user_words.jsonl --user alice due
    python -m study.cli --db user_words.jsonl --user alice review [--log sessions.jsonl]
    python -m study.cli --db user_words.jsonl --user alice grade abate 4
    python -m study.cli --db user_words.jsonl --user alice grade abate --difficulty easy
    python -m study.cli --db user_words.jsonl --user alice stats
    python -m study.cli --db user_words.jsonl --user alice show abate
    python -m study.cli --db user_words.jsonl --user alice bookmark abate [--off]
"""

import sys
import argparse
from pathlib import Path

from study.analytics import compute_study_stats
from study.models import StudyActivity
from study.scheduler import InvalidInput, describe_next_review
from study.session import resolve_quality, run_review_session, submit_review
from study.storage import UserWordStore


def cmd_add(args):
    """Introduce a word to the learner."""
    store = UserWordStore(args.db)
    uw = store.get_or_create(args.user, args.word_id, word=args.word or args.word_id)
    print(f"Added {uw.word or uw.word_id} (due {uw.schedule.next_review_date.date().isoformat()})")


def cmd_due(args):
    """Show due words."""
    store = UserWordStore(args.db)
    due = store.get_due_words(args.user)
    if not due:
        print("No words due today.")
        return
    print(f"\n{len(due)} word(s) due for review:\n")
    for i, uw in enumerate(due, 1):
        print(f"  {i}. {uw.word or uw.word_id}  [{uw.phase.value}]")
        print(f"     next={uw.schedule.next_review_date.date().isoformat()}  "
              f"ease={uw.schedule.ease_factor:.2f}  "
              f"reps={uw.schedule.repetitions}  mastery={uw.mastery_level}%")


def cmd_review(args):
    """Run interactive review session."""
    store = UserWordStore(args.db)
    due = store.get_due_words(args.user)
    if not due:
        print("No words due today. Come back later!")
        return
    log_path = Path(args.log) if args.log else Path(args.db).parent / 'session_log.jsonl'
    run_review_session(store, args.user, due, log_path=log_path,
                       activity=StudyActivity(args.activity))


def cmd_grade(args):
    """Record a single review without the interactive loop."""
    store = UserWordStore(args.db)
    try:
        quality = resolve_quality(args.quality, args.difficulty)
        uw = submit_review(store, args.user, args.word_id, quality,
                           activity=StudyActivity(args.activity))
    except InvalidInput as e:
        print(f"Rejected: {e}")
        sys.exit(1)

    next_review = uw.schedule.next_review_date
    print(f"{uw.word or uw.word_id}: quality {quality} -> interval {uw.schedule.interval}d, "
          f"next {next_review.date().isoformat()} ({describe_next_review(next_review)})")


def cmd_stats(args):
    """Show learner statistics."""
    store = UserWordStore(args.db)
    words = store.words_for_user(args.user)
    stats = compute_study_stats(words)

    print(f"\nLearner: {args.user}  ({args.db})")
    print(f"  Total words:     {stats['total_words']}")
    print(f"  Studied:         {stats['total_studied']}")
    print(f"  Mastered:        {stats['total_mastered']}")
    print(f"  Bookmarked:      {stats['total_bookmarked']}")
    print(f"  On a streak:     {stats['streak_words']}")
    print(f"  Due today:       {stats['due_count']}")
    print(f"  Average mastery: {stats['average_mastery']}%")
    print(f"  Accuracy:        {stats['accuracy'] * 100:.1f}%")
    print("  By phase:")
    for phase, count in stats['by_phase'].items():
        print(f"    {phase}: {count}")


def cmd_show(args):
    """Show details for a specific word."""
    store = UserWordStore(args.db)
    uw = store.get(args.user, args.word_id)
    if uw is None:
        print(f"Word not found: {args.word_id}")
        sys.exit(1)

    s = uw.schedule
    st = uw.status
    print(f"\nWord: {uw.word or uw.word_id}  (id={uw.word_id})")
    print(f"  Phase:      {uw.phase.value}")
    print(f"  Mastery:    {uw.mastery_level}% ({uw.confidence})")
    print(f"  Bookmarked: {'yes' if uw.is_bookmarked else 'no'}")

    print(f"\n  Schedule:")
    print(f"    Next:        {s.next_review_date.isoformat(timespec='minutes')} "
          f"({describe_next_review(s.next_review_date)})")
    print(f"    Interval:    {s.interval}d")
    print(f"    Ease:        {s.ease_factor:.2f}")
    print(f"    Repetitions: {s.repetitions}")
    print(f"    Last review: {s.last_review_date.isoformat(timespec='minutes')}")

    print(f"\n  History:")
    print(f"    Reviews:   {st.total_reviews}  (correct {st.correct_count}, "
          f"incorrect {st.incorrect_count})")
    print(f"    Streak:    {st.streak_count}")
    if st.last_result:
        print(f"    Last:      {st.last_result} via {st.last_activity}")


def cmd_bookmark(args):
    """Toggle a bookmark."""
    store = UserWordStore(args.db)
    try:
        uw = store.set_bookmark(args.user, args.word_id, not args.off)
    except KeyError:
        print(f"Word not found: {args.word_id}")
        sys.exit(1)
    state = 'bookmarked' if uw.is_bookmarked else 'unbookmarked'
    print(f"{uw.word or uw.word_id} {state}")


def main():
    parser = argparse.ArgumentParser(
        description="Study mode -- spaced repetition for vocabulary",
        prog="python -m study.cli",
    )
    parser.add_argument(
        '--db', default='user_words.jsonl',
        help="Path to user word storage JSONL file (default: user_words.jsonl)",
    )
    parser.add_argument('--user', default='local', help="Learner id (default: local)")

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    add_parser = subparsers.add_parser('add', help='Introduce a word')
    add_parser.add_argument('word_id', help='Word ID')
    add_parser.add_argument('--word', default=None, help='Display text (default: word ID)')

    subparsers.add_parser('due', help='Show words due for review')

    activities = [a.value for a in StudyActivity]
    review_parser = subparsers.add_parser('review', help='Run interactive review session')
    review_parser.add_argument('--activity', default='review', choices=activities)
    review_parser.add_argument('--log', default=None,
                               help='Session log JSONL (default: session_log.jsonl next to --db)')

    grade_parser = subparsers.add_parser('grade', help='Record one review')
    grade_parser.add_argument('word_id', help='Word ID')
    grade_parser.add_argument('quality', type=int, nargs='?', default=None,
                              help='Recall quality 0-5')
    grade_parser.add_argument('--difficulty', default=None,
                              help='again | hard | medium | easy')
    grade_parser.add_argument('--activity', default='review', choices=activities)

    subparsers.add_parser('stats', help='Show learner statistics')

    show_parser = subparsers.add_parser('show', help='Show word details')
    show_parser.add_argument('word_id', help='Word ID to display')

    bookmark_parser = subparsers.add_parser('bookmark', help='Bookmark a word')
    bookmark_parser.add_argument('word_id', help='Word ID')
    bookmark_parser.add_argument('--off', action='store_true', help='Remove the bookmark')

    args = parser.parse_args()

    if args.command == 'add':
        cmd_add(args)
    elif args.command == 'due':
        cmd_due(args)
    elif args.command == 'review':
        cmd_review(args)
    elif args.command == 'grade':
        cmd_grade(args)
    elif args.command == 'stats':
        cmd_stats(args)
    elif args.command == 'show':
        cmd_show(args)
    elif args.command == 'bookmark':
        cmd_bookmark(args)
    else:
        parser.print_help()


if __name__ == '__main__':
    main()
