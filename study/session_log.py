"""Session logging -- writes a JSONL line after each review session."""

import json
from datetime import datetime
from pathlib import Path
from typing import Dict, List


def log_session(
    log_path: Path,
    user_id: str,
    summary: Dict,
    words_reviewed: List[Dict],
) -> Dict:
    """
    Append a session record to the JSONL log file.

    Args:
        log_path:       Path to the session log file
        user_id:        Learner the session belongs to
        summary:        Summary dict from run_review_session
        words_reviewed: Per-word dicts with word_id, word, quality, interval

    Returns:
        The session record dict that was written.
    """
    histogram = {str(q): 0 for q in range(6)}
    for wr in words_reviewed:
        q = str(wr.get('quality', 0))
        if q in histogram:
            histogram[q] += 1

    # Hardest words: lowest quality first, ties keep review order
    hardest = sorted(
        (wr for wr in words_reviewed if wr.get('quality', 0) < 3),
        key=lambda wr: wr.get('quality', 0),
    )[:5]

    avg_quality = 0.0
    if words_reviewed:
        total_q = sum(wr.get('quality', 0) for wr in words_reviewed)
        avg_quality = round(total_q / len(words_reviewed), 2)

    record = {
        'timestamp': datetime.now().isoformat(),
        'user_id': user_id,
        'words_reviewed': summary.get('reviewed', 0),
        'correct': summary.get('correct', 0),
        'incorrect': summary.get('incorrect', 0),
        'skipped': summary.get('skipped', 0),
        'avg_quality': avg_quality,
        'quality_histogram': histogram,
        'hardest_words': [wr.get('word') or wr.get('word_id') for wr in hardest],
        'word_details': words_reviewed,
    }

    log_path.parent.mkdir(parents=True, exist_ok=True)
    with open(log_path, 'a', encoding='utf-8') as f:
        f.write(json.dumps(record, ensure_ascii=False) + '\n')

    return record


def read_session_log(log_path: Path) -> List[Dict]:
    """Read all session records from the log file."""
    records = []
    if not log_path.exists():
        return records
    with open(log_path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if line:
                records.append(json.loads(line))
    return records
