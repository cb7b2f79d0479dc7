"""SQLAlchemy ORM models for the flashcards database."""

from backend.models.base import Base
from backend.models.flashcard import DEFAULT_CATEGORY, Difficulty, Flashcard

__all__ = ["Base", "DEFAULT_CATEGORY", "Difficulty", "Flashcard"]
