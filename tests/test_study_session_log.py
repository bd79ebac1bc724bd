"""Tests for study/session_log.py -- session logging."""

import sys
import tempfile
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from study.session_log import log_session, read_session_log


def _words():
    return [
        {'word_id': 'abate', 'word': 'abate', 'quality': 4, 'interval': 6},
        {'word_id': 'cogent', 'word': 'cogent', 'quality': 1, 'interval': 1},
        {'word_id': 'laconic', 'word': '', 'quality': 0, 'interval': 1},
    ]


def test_log_session_creates_file():
    with tempfile.TemporaryDirectory() as tmp:
        log_path = Path(tmp) / 'nested' / 'session_log.jsonl'
        summary = {'reviewed': 3, 'correct': 1, 'incorrect': 2, 'skipped': 0}
        record = log_session(log_path, 'alice', summary, _words())

        assert log_path.exists()
        assert record['words_reviewed'] == 3
        assert record['correct'] == 1
        assert record['incorrect'] == 2
        assert record['avg_quality'] == round(5 / 3, 2)


def test_log_session_histogram_and_hardest():
    with tempfile.TemporaryDirectory() as tmp:
        record = log_session(Path(tmp) / 'log.jsonl', 'alice', {}, _words())
        assert record['quality_histogram']['4'] == 1
        assert record['quality_histogram']['1'] == 1
        assert record['quality_histogram']['5'] == 0
        # Lowest quality first; falls back to word_id when the text is empty
        assert record['hardest_words'] == ['laconic', 'cogent']


def test_log_appends():
    with tempfile.TemporaryDirectory() as tmp:
        log_path = Path(tmp) / 'log.jsonl'
        log_session(log_path, 'alice', {'reviewed': 1}, _words()[:1])
        log_session(log_path, 'bob', {'reviewed': 1}, _words()[1:2])
        records = read_session_log(log_path)
        assert [r['user_id'] for r in records] == ['alice', 'bob']


def test_read_missing_log():
    with tempfile.TemporaryDirectory() as tmp:
        assert read_session_log(Path(tmp) / 'missing.jsonl') == []
