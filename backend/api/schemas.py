"""Pydantic schemas for API request/response models."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from backend.models import DEFAULT_CATEGORY, Difficulty

# --- Requests ---


class FlashcardCreate(BaseModel):
    """Request body for creating a flashcard."""

    question: str
    answer: str
    category: str | None = None
    difficulty: Difficulty | None = None

    @field_validator("question", "answer")
    @classmethod
    def strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("category")
    @classmethod
    def default_category(cls, value: str | None) -> str:
        return (value or "").strip() or DEFAULT_CATEGORY

    @field_validator("difficulty", mode="before")
    @classmethod
    def default_difficulty(cls, value: object) -> object:
        # null and "" both mean "use the default"
        if value is None or value == "":
            return Difficulty.MEDIUM
        return value


class FlashcardUpdate(FlashcardCreate):
    """Request body for updating a flashcard.

    Omitted category or difficulty keep their stored values.
    """

    @field_validator("category")
    @classmethod
    def default_category(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or DEFAULT_CATEGORY

    @field_validator("difficulty", mode="before")
    @classmethod
    def default_difficulty(cls, value: object) -> object:
        return None if value == "" else value


# --- Responses ---


class FlashcardResponse(BaseModel):
    """A stored flashcard as sent over the wire."""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    question: str
    answer: str
    category: str
    difficulty: Difficulty
    created_at: datetime
    last_reviewed: datetime
    review_count: int = Field(ge=0)

    @field_validator("created_at", "last_reviewed")
    @classmethod
    def as_utc(cls, value: datetime) -> datetime:
        # Stored naive in UTC
        return value.replace(tzinfo=UTC) if value.tzinfo is None else value


class MessageResponse(BaseModel):
    message: str
