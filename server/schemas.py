"""Pydantic request/response models for the Wordbook API."""

from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, Field

Activity = Literal["flashcard", "quiz", "typing", "review"]


# ---- Words ----

class ScheduleSchema(BaseModel):
    ease_factor: float
    interval: int
    repetitions: int
    last_review_date: str
    next_review_date: str


class StudyStatusSchema(BaseModel):
    studied: bool
    total_reviews: int
    correct_count: int
    incorrect_count: int
    streak_count: int
    last_result: Optional[str] = None
    last_activity: Optional[str] = None
    last_studied: Optional[str] = None
    activity_counts: Dict[str, int] = Field(default_factory=dict)


class UserWordResponse(BaseModel):
    user_word_id: str
    user_id: str
    word_id: str
    word: str
    schedule: ScheduleSchema
    status: StudyStatusSchema
    is_bookmarked: bool
    personal_notes: Optional[str] = None
    custom_mnemonic: Optional[str] = None
    custom_example: Optional[str] = None
    mastery_level: int
    confidence: str
    phase: str
    next_review_label: str
    created_at: str
    updated_at: str


class IntroduceWordRequest(BaseModel):
    word_id: str = Field(..., min_length=1, max_length=200)
    word: str = Field(default="", max_length=200)


class WordListResponse(BaseModel):
    count: int
    words: List[UserWordResponse]


class BookmarkRequest(BaseModel):
    bookmarked: bool = True


class PersonalInfoRequest(BaseModel):
    """Learner-written notes. Omitted fields keep their stored value."""
    personal_notes: Optional[str] = Field(default=None, max_length=2000)
    custom_mnemonic: Optional[str] = Field(default=None, max_length=2000)
    custom_example: Optional[str] = Field(default=None, max_length=2000)


# ---- Review ----

class ReviewRequest(BaseModel):
    """
    One review outcome. Send either a raw quality score or a difficulty
    label; range checks happen in the scheduler so the error is uniform.
    """
    word_id: str = Field(..., min_length=1, max_length=200)
    quality: Optional[int] = None
    difficulty: Optional[str] = None
    activity: Activity = "review"
    word: str = Field(default="", max_length=200)


class ReviewResponse(BaseModel):
    quality: int
    result: str
    mastery_level: int
    next_review_label: str
    new_schedule: ScheduleSchema
    word: UserWordResponse


class SkipRequest(BaseModel):
    word_id: str = Field(..., min_length=1, max_length=200)
    activity: Activity = "review"


# ---- Due ----

class DueWordsResponse(BaseModel):
    due_count: int
    words: List[UserWordResponse]


# ---- Progress ----

class ProgressResponse(BaseModel):
    total_words: int
    total_studied: int
    total_mastered: int
    total_bookmarked: int
    average_mastery: int
    streak_words: int
    due_count: int
    accuracy: float
    by_phase: Dict[str, int]
