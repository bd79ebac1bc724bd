from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from study.storage import UserWordStore


@dataclass
class RuntimePaths:
    data_root: Path
    store_path: Path


class Runtime:
    """
    Process-wide runtime cache for objects that are expensive to rebuild.

    - User word store: loaded once from JSONL, cached
    """

    def __init__(self, paths: RuntimePaths):
        self.paths = paths
        self._store_lock = threading.Lock()
        self._store: Optional[UserWordStore] = None

    # ----------------------------
    # Store
    # ----------------------------
    def get_store(self) -> UserWordStore:
        if self._store is not None:
            return self._store
        with self._store_lock:
            if self._store is None:
                self._store = UserWordStore(str(self.paths.store_path))
        return self._store


# -------------------------------------------------------------------
# Runtime factory (for FastAPI dependency injection)
# -------------------------------------------------------------------
if TYPE_CHECKING:
    from server.config import Settings


def runtime_from_settings(settings: "Settings") -> Runtime:
    """Build Runtime from Settings. Used by get_runtime dependency."""
    paths = RuntimePaths(
        data_root=Path(settings.data_root),
        store_path=Path(settings.user_words_path),
    )
    return Runtime(paths)
