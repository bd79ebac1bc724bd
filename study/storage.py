"""JSONL-backed storage for per-user word records."""

import json
import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from study.models import ReviewResult, StudyActivity, UserWord, new_user_word
from study.scheduler import SchedulingState, select_due_items

logger = logging.getLogger("wordbook.storage")

SORT_KEYS = ('recent', 'mastery', 'review')


class UserWordStore:
    """
    JSONL-backed user-word storage keyed by (user_id, word_id).

    Loads the whole file into memory on init and rewrites it on every
    mutation. Concurrent writers to the same word are last-write-wins.
    """

    def __init__(self, db_path):
        self.db_path = Path(db_path)
        self._words: Dict[Tuple[str, str], UserWord] = {}
        self._lock = threading.Lock()
        self._load()

    def _load(self) -> None:
        if not self.db_path.exists():
            return
        with open(self.db_path, 'r', encoding='utf-8') as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                uw = UserWord.from_dict(json.loads(line))
                self._words[(uw.user_id, uw.word_id)] = uw
        logger.debug("Loaded %d user word(s) from %s", len(self._words), self.db_path)

    def _save(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.db_path.with_suffix(self.db_path.suffix + '.tmp')
        with open(tmp_path, 'w', encoding='utf-8') as f:
            for uw in self._words.values():
                f.write(json.dumps(uw.to_dict(), ensure_ascii=False) + '\n')
        tmp_path.replace(self.db_path)

    def get(self, user_id: str, word_id: str) -> Optional[UserWord]:
        return self._words.get((user_id, word_id))

    def get_or_create(
        self,
        user_id: str,
        word_id: str,
        word: str = '',
        now: Optional[datetime] = None,
    ) -> UserWord:
        """Existing record, or a freshly initialized one (persisted)."""
        with self._lock:
            existing = self._words.get((user_id, word_id))
            if existing is not None:
                if word and not existing.word:
                    existing.word = word
                    self._save()
                return existing
            uw = new_user_word(user_id, word_id, word=word, now=now)
            self._words[(user_id, word_id)] = uw
            self._save()
        logger.info("Introduced word %s for user %s", word_id, user_id)
        return uw

    def upsert(self, user_word: UserWord) -> None:
        """Insert or replace a record."""
        with self._lock:
            self._words[(user_word.user_id, user_word.word_id)] = user_word
            self._save()

    def delete(self, user_id: str, word_id: str) -> bool:
        with self._lock:
            removed = self._words.pop((user_id, word_id), None)
            if removed is not None:
                self._save()
        return removed is not None

    def update_review(
        self,
        user_id: str,
        word_id: str,
        result: ReviewResult,
        activity: StudyActivity,
        new_schedule: Optional[SchedulingState] = None,
        now: Optional[datetime] = None,
    ) -> UserWord:
        """Apply a review outcome (and its new schedule, if any) to a stored word."""
        with self._lock:
            uw = self._words.get((user_id, word_id))
            if uw is None:
                raise KeyError(f"Word not found for user {user_id}: {word_id}")
            uw.record_review(result, activity, new_schedule=new_schedule, now=now)
            self._save()
        return uw

    def set_bookmark(self, user_id: str, word_id: str, bookmarked: bool) -> UserWord:
        with self._lock:
            uw = self._words.get((user_id, word_id))
            if uw is None:
                raise KeyError(f"Word not found for user {user_id}: {word_id}")
            uw.is_bookmarked = bookmarked
            uw.updated_at = datetime.now().isoformat()
            self._save()
        return uw

    def update_personal_info(
        self,
        user_id: str,
        word_id: str,
        personal_notes: Optional[str] = None,
        custom_mnemonic: Optional[str] = None,
        custom_example: Optional[str] = None,
    ) -> UserWord:
        """Set the learner's own notes. Fields left as None are not touched."""
        with self._lock:
            uw = self._words.get((user_id, word_id))
            if uw is None:
                raise KeyError(f"Word not found for user {user_id}: {word_id}")
            if personal_notes is not None:
                uw.personal_notes = personal_notes
            if custom_mnemonic is not None:
                uw.custom_mnemonic = custom_mnemonic
            if custom_example is not None:
                uw.custom_example = custom_example
            uw.updated_at = datetime.now().isoformat()
            self._save()
        return uw

    def words_for_user(self, user_id: str) -> List[UserWord]:
        return [uw for (uid, _), uw in self._words.items() if uid == user_id]

    def get_due_words(
        self,
        user_id: str,
        now: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[UserWord]:
        """Words due by the end of today, soonest first."""
        words = self.words_for_user(user_id)
        due = select_due_items([(uw.schedule, uw) for uw in words], now=now)
        due.sort(key=lambda uw: uw.schedule.next_review_date)
        if limit:
            due = due[:limit]
        return due

    def list_studied(
        self,
        user_id: str,
        bookmarked_only: bool = False,
        mastery_range: Optional[Tuple[int, int]] = None,
        confidence: Optional[str] = None,
        sort_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[UserWord]:
        """
        Studied words for a user.

        Args:
            bookmarked_only: Only bookmarked words
            mastery_range:   Inclusive (min, max) mastery filter
            confidence:      'low' | 'medium' | 'high'
            sort_by:         'recent' | 'mastery' | 'review'; default is
                             most recently updated first
            limit:           Max results
        """
        if sort_by is not None and sort_by not in SORT_KEYS:
            raise ValueError(f"sort_by must be one of {SORT_KEYS}, got {sort_by!r}")

        words = [uw for uw in self.words_for_user(user_id) if uw.status.studied]
        if bookmarked_only:
            words = [uw for uw in words if uw.is_bookmarked]
        if confidence:
            words = [uw for uw in words if uw.confidence == confidence]
        if mastery_range is not None:
            lo, hi = mastery_range
            words = [uw for uw in words if lo <= uw.mastery_level <= hi]

        if sort_by == 'recent':
            words.sort(key=lambda uw: uw.status.last_studied or '', reverse=True)
        elif sort_by == 'mastery':
            words.sort(key=lambda uw: uw.mastery_level, reverse=True)
        elif sort_by == 'review':
            words.sort(key=lambda uw: uw.schedule.next_review_date)
        else:
            words.sort(key=lambda uw: uw.updated_at, reverse=True)

        if limit:
            words = words[:limit]
        return words

    def count(self) -> int:
        return len(self._words)
