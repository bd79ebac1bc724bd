"""Configuration for the Wordbook API server."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


@dataclass
class Settings:
    """
    Filesystem paths and runtime knobs the server needs.

    Defaults resolve relative to the project root.
    Every field is overridable at construction for testing.
    """
    data_root: Optional[Path] = None
    user_words_path: Optional[Path] = None
    log_level: Optional[str] = None
    cors_origins: List[str] = field(default_factory=list)
    due_limit_default: int = 50

    def __post_init__(self):
        project_root = Path(__file__).resolve().parent.parent

        if self.data_root is None:
            env_root = os.environ.get("WORDBOOK_DATA_ROOT")
            self.data_root = Path(env_root) if env_root else project_root / "wordbook_data"
        self.data_root = Path(self.data_root)

        if self.user_words_path is None:
            self.user_words_path = self.data_root / 'user_words.jsonl'
        self.user_words_path = Path(self.user_words_path)

        if self.log_level is None:
            self.log_level = os.environ.get("LOG_LEVEL", "INFO")
        self.log_level = (self.log_level or "INFO").strip().upper()

        if not self.cors_origins:
            env_origins = os.environ.get("CORS_ORIGINS", "http://localhost:3000")
            self.cors_origins = [o.strip() for o in env_origins.split(",") if o.strip()]

        env_limit = os.environ.get("DUE_LIMIT_DEFAULT")
        if env_limit is not None:
            try:
                self.due_limit_default = int(env_limit)
            except ValueError:
                pass
