"""Flashcard store.

Owns the persistent flashcard records: create, read, update, delete,
review bookkeeping and category enumeration. Every mutating operation
commits immediately.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.config import utcnow
from backend.errors import NotFoundError, StoreError, ValidationError
from backend.models import DEFAULT_CATEGORY, Difficulty, Flashcard

logger = logging.getLogger(__name__)


def clean_text(value: str | None, field: str) -> str:
    """Trim a required text field, rejecting empty values."""
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field.capitalize()} is required", field=field)
    return text


def clean_category(value: str | None) -> str:
    return (value or "").strip() or DEFAULT_CATEGORY


def parse_difficulty(value: str | Difficulty | None) -> Difficulty:
    if value is None or value == "":
        return Difficulty.MEDIUM
    try:
        return Difficulty(value)
    except ValueError:
        allowed = ", ".join(d.value for d in Difficulty)
        raise ValidationError(
            f"Difficulty must be one of: {allowed}", field="difficulty", details={"value": str(value)}
        ) from None


class FlashcardStore:
    """Flashcard persistence over an async SQLAlchemy session."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    @asynccontextmanager
    async def _guard(self, operation: str) -> AsyncIterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Store failure while %s: %s", operation, e)
            raise StoreError(operation, str(e)) from e

    async def list_all(self) -> list[Flashcard]:
        """Return all flashcards, newest first."""
        async with self._guard("fetching flashcards"):
            stmt = select(Flashcard).order_by(Flashcard.created_at.desc())
            result = await self.db.execute(stmt)
            return list(result.scalars().all())

    async def list_by_category(self, category: str) -> list[Flashcard]:
        """Return flashcards whose category matches exactly, newest first."""
        async with self._guard("fetching flashcards by category"):
            stmt = (
                select(Flashcard)
                .where(Flashcard.category == category)
                .order_by(Flashcard.created_at.desc())
            )
            result = await self.db.execute(stmt)
            return list(result.scalars().all())

    async def get(self, flashcard_id: str) -> Flashcard:
        async with self._guard("fetching flashcard"):
            card = await self.db.get(Flashcard, flashcard_id)
        if card is None:
            raise NotFoundError("Flashcard", flashcard_id)
        return card

    async def create(
        self,
        question: str,
        answer: str,
        category: str | None = None,
        difficulty: str | Difficulty | None = None,
    ) -> Flashcard:
        """Persist a new flashcard.

        Args:
            question: Front of the card; trimmed, must not be empty.
            answer: Back of the card; trimmed, must not be empty.
            category: Optional label, ``"General"`` when omitted or blank.
            difficulty: Optional Easy/Medium/Hard, Medium when omitted.

        Returns:
            The stored flashcard with its generated id and timestamps.

        Raises:
            ValidationError: If a required field is empty or the difficulty is unknown.
        """
        now = utcnow()
        card = Flashcard(
            question=clean_text(question, "question"),
            answer=clean_text(answer, "answer"),
            category=clean_category(category),
            difficulty=parse_difficulty(difficulty),
            created_at=now,
            last_reviewed=now,
            review_count=0,
        )
        async with self._guard("creating flashcard"):
            self.db.add(card)
            await self.db.commit()
            await self.db.refresh(card)
        logger.info("Created flashcard %s in %r", card.id, card.category)
        return card

    async def update(
        self,
        flashcard_id: str,
        question: str,
        answer: str,
        category: str | None = None,
        difficulty: str | Difficulty | None = None,
    ) -> Flashcard:
        """Replace the editable fields of a flashcard.

        Review metadata and the creation time are left untouched. A missing
        category or difficulty keeps the current value; a blank category
        resets it to ``"General"``.
        """
        question = clean_text(question, "question")
        answer = clean_text(answer, "answer")
        new_difficulty = parse_difficulty(difficulty) if difficulty is not None else None

        card = await self.get(flashcard_id)
        card.question = question
        card.answer = answer
        if category is not None:
            card.category = clean_category(category)
        if new_difficulty is not None:
            card.difficulty = new_difficulty

        async with self._guard("updating flashcard"):
            await self.db.commit()
            await self.db.refresh(card)
        logger.info("Updated flashcard %s", card.id)
        return card

    async def delete(self, flashcard_id: str) -> None:
        card = await self.get(flashcard_id)
        async with self._guard("deleting flashcard"):
            await self.db.delete(card)
            await self.db.commit()
        logger.info("Deleted flashcard %s", flashcard_id)

    async def increment_review(self, flashcard_id: str) -> Flashcard:
        """Bump the review count and stamp the review time."""
        card = await self.get(flashcard_id)
        now = utcnow()
        if now <= card.last_reviewed:
            now = card.last_reviewed + timedelta(microseconds=1)
        card.last_reviewed = now
        card.review_count += 1
        async with self._guard("updating review count"):
            await self.db.commit()
            await self.db.refresh(card)
        logger.debug("Flashcard %s reviewed %d times", card.id, card.review_count)
        return card

    async def distinct_categories(self) -> list[str]:
        """Return every category in use, once each."""
        async with self._guard("fetching categories"):
            stmt = select(Flashcard.category).distinct().order_by(Flashcard.category)
            result = await self.db.execute(stmt)
            return list(result.scalars().all())
