"""FastAPI application -- routes for the Wordbook study engine."""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Literal, Optional

_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from server.config import Settings
from server.dependencies import get_settings, get_word_store
from server.schemas import (
    BookmarkRequest,
    DueWordsResponse,
    IntroduceWordRequest,
    PersonalInfoRequest,
    ProgressResponse,
    ReviewRequest,
    ReviewResponse,
    SkipRequest,
    UserWordResponse,
    WordListResponse,
)
from server.services import study_service
from server.__version__ import __version__
from study.scheduler import InvalidInput
from study.storage import UserWordStore

logger = logging.getLogger("wordbook")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan: apply log level. The word store is loaded lazily on first request."""
    settings = get_settings()
    logger.setLevel(getattr(logging, settings.log_level, logging.INFO))
    ts = datetime.utcnow().isoformat() + "Z"
    logger.info("[%s] Startup: data_root=%s", ts, settings.data_root)
    yield
    ts_end = datetime.utcnow().isoformat() + "Z"
    logger.info("[%s] Shutdown: complete", ts_end)


app = FastAPI(title="Wordbook", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _not_found(e: KeyError) -> HTTPException:
    return HTTPException(status_code=404, detail=e.args[0] if e.args else "Not found")


@app.get("/health")
def health():
    """Minimal health check. No deps, no store load. Always returns immediately."""
    return {"ok": True}


# ---- Words ----

@app.post("/users/{user_id}/words", response_model=UserWordResponse)
def introduce_word(
    user_id: str,
    body: IntroduceWordRequest,
    store: UserWordStore = Depends(get_word_store),
):
    return study_service.introduce_word(store, user_id, body.word_id, word=body.word)


@app.get("/users/{user_id}/words", response_model=WordListResponse)
def list_words(
    user_id: str,
    bookmarked_only: bool = False,
    min_mastery: int = Query(default=0, ge=0, le=100),
    max_mastery: int = Query(default=100, ge=0, le=100),
    confidence: Optional[Literal["low", "medium", "high"]] = None,
    sort_by: Optional[Literal["recent", "mastery", "review"]] = None,
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    store: UserWordStore = Depends(get_word_store),
):
    mastery_range = None
    if (min_mastery, max_mastery) != (0, 100):
        mastery_range = (min_mastery, max_mastery)
    return study_service.list_words(
        store, user_id,
        bookmarked_only=bookmarked_only,
        mastery_range=mastery_range,
        confidence=confidence,
        sort_by=sort_by,
        limit=limit,
    )


@app.get("/users/{user_id}/words/{word_id}", response_model=UserWordResponse)
def get_word(user_id: str, word_id: str, store: UserWordStore = Depends(get_word_store)):
    try:
        return study_service.get_word(store, user_id, word_id)
    except KeyError as e:
        raise _not_found(e)


@app.put("/users/{user_id}/words/{word_id}/bookmark", response_model=UserWordResponse)
def bookmark_word(
    user_id: str,
    word_id: str,
    body: BookmarkRequest,
    store: UserWordStore = Depends(get_word_store),
):
    try:
        return study_service.set_bookmark(store, user_id, word_id, body.bookmarked)
    except KeyError as e:
        raise _not_found(e)


@app.put("/users/{user_id}/words/{word_id}/notes", response_model=UserWordResponse)
def update_notes(
    user_id: str,
    word_id: str,
    body: PersonalInfoRequest,
    store: UserWordStore = Depends(get_word_store),
):
    try:
        return study_service.update_personal_info(
            store, user_id, word_id,
            personal_notes=body.personal_notes,
            custom_mnemonic=body.custom_mnemonic,
            custom_example=body.custom_example,
        )
    except KeyError as e:
        raise _not_found(e)


# ---- Review ----

@app.post("/users/{user_id}/study/review", response_model=ReviewResponse)
def review(user_id: str, body: ReviewRequest, store: UserWordStore = Depends(get_word_store)):
    try:
        return study_service.review_word(
            store, user_id, body.word_id,
            quality=body.quality,
            difficulty=body.difficulty,
            activity=body.activity,
            word=body.word,
        )
    except InvalidInput as e:
        raise HTTPException(status_code=422, detail=str(e))


@app.post("/users/{user_id}/study/skip", response_model=UserWordResponse)
def skip(user_id: str, body: SkipRequest, store: UserWordStore = Depends(get_word_store)):
    try:
        return study_service.skip_word(store, user_id, body.word_id, activity=body.activity)
    except KeyError as e:
        raise _not_found(e)


# ---- Due Words ----

@app.get("/users/{user_id}/study/due", response_model=DueWordsResponse)
def due_words(
    user_id: str,
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    settings: Settings = Depends(get_settings),
    store: UserWordStore = Depends(get_word_store),
):
    return study_service.get_due_words(
        store, user_id, limit=limit or settings.due_limit_default,
    )


# ---- Progress ----

@app.get("/users/{user_id}/progress", response_model=ProgressResponse)
def progress(user_id: str, store: UserWordStore = Depends(get_word_store)):
    return study_service.get_progress(store, user_id)
