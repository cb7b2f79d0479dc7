"""Client-side flashcard records and form drafts."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

DEFAULT_CATEGORY = "General"
DIFFICULTIES = ("Easy", "Medium", "Hard")


class DraftError(ValueError):
    """A draft failed the client-side checks and was not submitted."""


@dataclass(frozen=True)
class Flashcard:
    """A flashcard as returned by the server."""

    id: str
    question: str
    answer: str
    category: str
    difficulty: str
    created_at: datetime
    last_reviewed: datetime
    review_count: int = 0

    @classmethod
    def from_json(cls, data: dict) -> Flashcard:
        return cls(
            id=data["id"],
            question=data["question"],
            answer=data["answer"],
            category=data.get("category") or DEFAULT_CATEGORY,
            difficulty=data.get("difficulty") or "Medium",
            created_at=datetime.fromisoformat(data["createdAt"]),
            last_reviewed=datetime.fromisoformat(data["lastReviewed"]),
            review_count=int(data.get("reviewCount", 0)),
        )


@dataclass(frozen=True)
class FlashcardDraft:
    """User-entered flashcard fields, before submission."""

    question: str
    answer: str
    category: str = ""
    difficulty: str = "Medium"

    @classmethod
    def from_card(cls, card: Flashcard) -> FlashcardDraft:
        return cls(
            question=card.question,
            answer=card.answer,
            category=card.category,
            difficulty=card.difficulty,
        )

    def validated(self) -> FlashcardDraft:
        """Return a trimmed copy, or raise DraftError if it can't be submitted."""
        question = self.question.strip()
        answer = self.answer.strip()
        if not question or not answer:
            raise DraftError("Question and answer are required!")
        difficulty = self.difficulty.strip().capitalize() or "Medium"
        if difficulty not in DIFFICULTIES:
            raise DraftError(f"Difficulty must be one of: {', '.join(DIFFICULTIES)}")
        return replace(
            self,
            question=question,
            answer=answer,
            category=self.category.strip() or DEFAULT_CATEGORY,
            difficulty=difficulty,
        )

    def to_json(self) -> dict[str, str]:
        return {
            "question": self.question,
            "answer": self.answer,
            "category": self.category,
            "difficulty": self.difficulty,
        }
