"""Request-scoped accessors for settings and the shared word store."""

import sys
from functools import lru_cache
from pathlib import Path

_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from fastapi import Depends

from server.config import Settings
from server.runtime import Runtime, runtime_from_settings
from study.storage import UserWordStore

# One Runtime per Settings object; a dependency override swaps in a fresh one
_runtime: Runtime | None = None
_runtime_settings: Settings | None = None


@lru_cache()
def get_settings() -> Settings:
    """Settings read once from the environment. Tests replace this via dependency_overrides."""
    return Settings()


def get_runtime(settings: Settings = Depends(get_settings)) -> Runtime:
    global _runtime, _runtime_settings
    if _runtime is None or _runtime_settings is not settings:
        _runtime = runtime_from_settings(settings)
        _runtime_settings = settings
    return _runtime


def get_word_store(runtime: Runtime = Depends(get_runtime)) -> UserWordStore:
    """The user word store every study route reads and writes."""
    return runtime.get_store()
