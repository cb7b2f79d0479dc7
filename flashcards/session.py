"""Study session controller.

Holds the client's working set of flashcards, the active filter and the
study state. The filtered view is a pure projection of the working set
and the filter; the study state moves only through the transition
functions below.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from flashcards.models import Flashcard, FlashcardDraft

if TYPE_CHECKING:
    from flashcards.api_client import FlashcardClient

logger = logging.getLogger(__name__)


class EmptySessionError(Exception):
    """Raised when a session is started with no cards to study."""


# --- Filter and view ---


@dataclass(frozen=True)
class Filter:
    """Optional category/difficulty constraint. ``None`` means no constraint."""

    category: str | None = None
    difficulty: str | None = None

    def matches(self, card: Flashcard) -> bool:
        if self.category and card.category != self.category:
            return False
        if self.difficulty and card.difficulty != self.difficulty:
            return False
        return True

    @property
    def is_active(self) -> bool:
        return bool(self.category or self.difficulty)


def filtered_view(cards: Iterable[Flashcard], flt: Filter) -> list[Flashcard]:
    """Return the cards matching the filter, in working-set order."""
    return [card for card in cards if flt.matches(card)]


class WorkingSet:
    """Ordered cache of the server's flashcards, newest first."""

    def __init__(self, cards: Iterable[Flashcard] = ()) -> None:
        self._cards: list[Flashcard] = list(cards)

    def __iter__(self) -> Iterator[Flashcard]:
        return iter(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def _index(self, flashcard_id: str) -> int | None:
        for i, card in enumerate(self._cards):
            if card.id == flashcard_id:
                return i
        return None

    def find(self, flashcard_id: str) -> Flashcard | None:
        i = self._index(flashcard_id)
        return self._cards[i] if i is not None else None

    def replace_all(self, cards: Iterable[Flashcard]) -> None:
        self._cards = list(cards)

    def prepend(self, card: Flashcard) -> None:
        self._cards.insert(0, card)

    def replace(self, card: Flashcard) -> None:
        """Swap in the updated record at its current position. Unknown ids are ignored."""
        i = self._index(card.id)
        if i is not None:
            self._cards[i] = card

    def remove(self, flashcard_id: str) -> None:
        i = self._index(flashcard_id)
        if i is not None:
            del self._cards[i]


# --- Study state machine ---


class Side(enum.Enum):
    FRONT = "front"
    BACK = "back"


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Studying:
    cards: tuple[Flashcard, ...]
    cursor: int = 0
    side: Side = Side.FRONT

    @property
    def current(self) -> Flashcard:
        return self.cards[self.cursor]


StudyState = Idle | Studying


def start(cards: Sequence[Flashcard]) -> Studying:
    """Begin a session over a snapshot of ``cards``."""
    if not cards:
        raise EmptySessionError("No flashcards available. Please add some first!")
    return Studying(cards=tuple(cards))


def flip(state: StudyState) -> StudyState:
    if isinstance(state, Studying):
        side = Side.BACK if state.side is Side.FRONT else Side.FRONT
        return replace(state, side=side)
    return state


def advance(state: StudyState) -> tuple[StudyState, Flashcard | None]:
    """Move past the current card.

    Returns the new state and the card that was just reviewed (``None``
    when idle). Advancing past the last card ends the session.
    """
    if not isinstance(state, Studying):
        return state, None
    reviewed = state.current
    if state.cursor + 1 < len(state.cards):
        return Studying(cards=state.cards, cursor=state.cursor + 1), reviewed
    return Idle(), reviewed


# --- Controller ---


class SessionController:
    """Client-side state: working set, filter, and study session."""

    def __init__(self, client: FlashcardClient) -> None:
        self.client = client
        self.cards = WorkingSet()
        self.categories: list[str] = []
        self.filter = Filter()
        self.state: StudyState = Idle()
        self._review_tasks: set[asyncio.Task] = set()

    @property
    def view(self) -> list[Flashcard]:
        return filtered_view(self.cards, self.filter)

    @property
    def is_studying(self) -> bool:
        return isinstance(self.state, Studying)

    @property
    def progress(self) -> tuple[int, int]:
        """Return (position, total) of the current session, 1-based."""
        if isinstance(self.state, Studying):
            return self.state.cursor + 1, len(self.state.cards)
        return 0, 0

    # Loading

    async def load(self) -> None:
        self.cards.replace_all(await self.client.list_flashcards())
        logger.debug("Loaded %d flashcards", len(self.cards))

    async def load_categories(self) -> list[str]:
        self.categories = await self.client.categories()
        if self.filter.category and self.filter.category not in self.categories:
            self.filter = replace(self.filter, category=None)
        return self.categories

    def set_filter(self, category: str | None = None, difficulty: str | None = None) -> None:
        self.filter = Filter(category=category or None, difficulty=difficulty or None)

    # Mutations

    async def create(self, draft: FlashcardDraft) -> Flashcard:
        card = await self.client.create(draft.validated())
        self.cards.prepend(card)
        return card

    async def update(self, flashcard_id: str, draft: FlashcardDraft) -> Flashcard:
        card = await self.client.update(flashcard_id, draft.validated())
        self.cards.replace(card)
        return card

    async def delete(self, flashcard_id: str) -> None:
        await self.client.delete(flashcard_id)
        self.cards.remove(flashcard_id)

    # Studying

    def start(self) -> Flashcard:
        self.state = start(self.view)
        logger.info("Study session started with %d cards", len(self.state.cards))
        return self.state.current

    def flip(self) -> None:
        self.state = flip(self.state)

    def next(self) -> Flashcard | None:
        """Advance the session; returns the new current card or None when done."""
        self.state, reviewed = advance(self.state)
        if reviewed is not None:
            self._record_review(reviewed)
        if isinstance(self.state, Studying):
            return self.state.current
        return None

    def _record_review(self, card: Flashcard) -> None:
        task = asyncio.create_task(self._increment_review(card.id))
        self._review_tasks.add(task)
        task.add_done_callback(self._review_tasks.discard)

    async def _increment_review(self, flashcard_id: str) -> None:
        try:
            updated = await self.client.increment_review(flashcard_id)
        except Exception:
            logger.warning("Error updating review count for %s", flashcard_id, exc_info=True)
            return
        self.cards.replace(updated)

    async def drain(self) -> None:
        """Wait for pending review updates."""
        if self._review_tasks:
            await asyncio.gather(*self._review_tasks)
