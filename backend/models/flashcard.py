"""Flashcard model: a question/answer pair with review metadata."""

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from backend.config import utcnow
from backend.models.base import Base, TimestampMixin

DEFAULT_CATEGORY = "General"


class Difficulty(str, enum.Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


def _new_id() -> str:
    return uuid.uuid4().hex


class Flashcard(Base, TimestampMixin):
    __tablename__ = "flashcards"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    question: Mapped[str] = mapped_column(Text, nullable=False)
    answer: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(
        String(200), nullable=False, default=DEFAULT_CATEGORY, index=True
    )
    difficulty: Mapped[Difficulty] = mapped_column(
        Enum(Difficulty, values_callable=lambda e: [m.value for m in e], native_enum=False),
        nullable=False,
        default=Difficulty.MEDIUM,
    )
    last_reviewed: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    review_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Flashcard {self.id} {self.question[:30]!r}>"
