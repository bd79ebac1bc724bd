"""Tests for study/cli.py -- command dispatch against a temp store."""

import sys
import tempfile
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest
from study import cli
from study.storage import UserWordStore


def _run(monkeypatch, db, *argv):
    monkeypatch.setattr(sys, 'argv', ['study.cli', '--db', str(db), '--user', 'alice', *argv])
    cli.main()


def test_add_grade_show(monkeypatch, capsys):
    with tempfile.TemporaryDirectory() as tmp:
        db = Path(tmp) / 'words.jsonl'
        _run(monkeypatch, db, 'add', 'abate', '--word', 'abate')
        _run(monkeypatch, db, 'grade', 'abate', '5')
        _run(monkeypatch, db, 'grade', 'abate', '--difficulty', 'medium')
        _run(monkeypatch, db, 'show', 'abate')

        out = capsys.readouterr().out
        assert 'Added abate' in out
        assert 'interval 6d' in out
        assert 'Repetitions: 2' in out

        uw = UserWordStore(db).get('alice', 'abate')
        assert uw.status.total_reviews == 2


def test_grade_rejects_out_of_range(monkeypatch, capsys):
    with tempfile.TemporaryDirectory() as tmp:
        db = Path(tmp) / 'words.jsonl'
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, db, 'grade', 'abate', '6')
        assert exc.value.code == 1
        assert 'Rejected' in capsys.readouterr().out
        assert UserWordStore(db).count() == 0


def test_due_and_stats(monkeypatch, capsys):
    with tempfile.TemporaryDirectory() as tmp:
        db = Path(tmp) / 'words.jsonl'
        _run(monkeypatch, db, 'due')
        assert 'No words due today.' in capsys.readouterr().out

        _run(monkeypatch, db, 'add', 'cogent')
        _run(monkeypatch, db, 'due')
        assert '1 word(s) due' in capsys.readouterr().out

        _run(monkeypatch, db, 'stats')
        out = capsys.readouterr().out
        assert 'Total words:     1' in out
        assert 'new: 1' in out


def test_bookmark_missing_word_exits(monkeypatch):
    with tempfile.TemporaryDirectory() as tmp:
        db = Path(tmp) / 'words.jsonl'
        with pytest.raises(SystemExit):
            _run(monkeypatch, db, 'bookmark', 'nope')


def test_grade_rejects_quality_and_difficulty_together(monkeypatch, capsys):
    with tempfile.TemporaryDirectory() as tmp:
        db = Path(tmp) / 'words.jsonl'
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, db, 'grade', 'abate', '5', '--difficulty', 'again')
        assert exc.value.code == 1
        assert 'exactly one' in capsys.readouterr().out
        assert UserWordStore(db).count() == 0


def test_grade_needs_a_rating(monkeypatch, capsys):
    with tempfile.TemporaryDirectory() as tmp:
        db = Path(tmp) / 'words.jsonl'
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, db, 'grade', 'abate')
        assert exc.value.code == 1
        assert 'Rejected' in capsys.readouterr().out


def test_review_log_path(monkeypatch):
    calls = []
    monkeypatch.setattr(cli, 'run_review_session',
                        lambda *args, **kwargs: calls.append(kwargs['log_path']))
    with tempfile.TemporaryDirectory() as tmp:
        db = Path(tmp) / 'words.jsonl'
        custom = Path(tmp) / 'logs' / 'sessions.jsonl'
        _run(monkeypatch, db, 'add', 'abate')
        _run(monkeypatch, db, 'review')
        _run(monkeypatch, db, 'review', '--log', str(custom))
    assert calls == [Path(tmp) / 'session_log.jsonl', custom]
