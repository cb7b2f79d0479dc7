"""API routes for flashcard CRUD, review bookkeeping and categories."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.api.schemas import (
    FlashcardCreate,
    FlashcardResponse,
    FlashcardUpdate,
    MessageResponse,
)
from backend.database import get_session
from backend.store import FlashcardStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["flashcards"])


def get_store(db: AsyncSession = Depends(get_session)) -> FlashcardStore:
    return FlashcardStore(db)


@router.get("/flashcards", response_model=list[FlashcardResponse])
async def list_flashcards(store: FlashcardStore = Depends(get_store)) -> list[FlashcardResponse]:
    """Get all flashcards, newest first."""
    cards = await store.list_all()
    return [FlashcardResponse.model_validate(card) for card in cards]


@router.get("/flashcards/category/{category}", response_model=list[FlashcardResponse])
async def list_flashcards_by_category(
    category: str,
    store: FlashcardStore = Depends(get_store),
) -> list[FlashcardResponse]:
    """Get flashcards in a single category."""
    cards = await store.list_by_category(category)
    return [FlashcardResponse.model_validate(card) for card in cards]


@router.post("/flashcards", response_model=FlashcardResponse, status_code=status.HTTP_201_CREATED)
async def create_flashcard(
    request: FlashcardCreate,
    store: FlashcardStore = Depends(get_store),
) -> FlashcardResponse:
    """Create a new flashcard."""
    card = await store.create(
        question=request.question,
        answer=request.answer,
        category=request.category,
        difficulty=request.difficulty,
    )
    return FlashcardResponse.model_validate(card)


@router.put("/flashcards/{flashcard_id}", response_model=FlashcardResponse)
async def update_flashcard(
    flashcard_id: str,
    request: FlashcardUpdate,
    store: FlashcardStore = Depends(get_store),
) -> FlashcardResponse:
    """Update the question, answer, category and difficulty of a flashcard."""
    card = await store.update(
        flashcard_id,
        question=request.question,
        answer=request.answer,
        category=request.category,
        difficulty=request.difficulty,
    )
    return FlashcardResponse.model_validate(card)


@router.delete("/flashcards/{flashcard_id}", response_model=MessageResponse)
async def delete_flashcard(
    flashcard_id: str,
    store: FlashcardStore = Depends(get_store),
) -> MessageResponse:
    """Permanently delete a flashcard."""
    await store.delete(flashcard_id)
    return MessageResponse(message="Flashcard deleted successfully")


@router.patch("/flashcards/{flashcard_id}/review", response_model=FlashcardResponse)
async def review_flashcard(
    flashcard_id: str,
    store: FlashcardStore = Depends(get_store),
) -> FlashcardResponse:
    """Record a review: bump the count and stamp the review time."""
    card = await store.increment_review(flashcard_id)
    return FlashcardResponse.model_validate(card)


@router.get("/categories", response_model=list[str])
async def list_categories(store: FlashcardStore = Depends(get_store)) -> list[str]:
    """Get the distinct categories currently in use."""
    return await store.distinct_categories()
