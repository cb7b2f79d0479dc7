"""Tests for the study session controller: filtered view, state machine, reconciliation."""

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from flashcards.api_client import ApiError
from flashcards.models import DraftError, Flashcard, FlashcardDraft
from flashcards.session import (
    EmptySessionError,
    Filter,
    Idle,
    SessionController,
    Side,
    Studying,
    WorkingSet,
    advance,
    filtered_view,
    flip,
    start,
)

# --- Helpers ---


def _card(
    card_id: str,
    category: str = "General",
    difficulty: str = "Medium",
    question: str | None = None,
) -> Flashcard:
    created = datetime(2024, 1, 1) + timedelta(minutes=int(card_id.strip("c") or 0))
    return Flashcard(
        id=card_id,
        question=question or f"question {card_id}",
        answer=f"answer {card_id}",
        category=category,
        difficulty=difficulty,
        created_at=created,
        last_reviewed=created,
    )


def _mixed_cards() -> list[Flashcard]:
    return [
        _card("c1", category="A", difficulty="Easy"),
        _card("c2", category="A", difficulty="Hard"),
        _card("c3", category="B", difficulty="Easy"),
    ]


def _controller(cards: list[Flashcard]) -> SessionController:
    client = AsyncMock()
    client.list_flashcards.return_value = list(cards)
    by_id = {c.id: c for c in cards}
    client.increment_review.side_effect = lambda fid: replace(by_id[fid], review_count=by_id[fid].review_count + 1)
    return SessionController(client)


# --- Filtered view ---


class TestFilteredView:
    def test_no_filter_keeps_everything(self) -> None:
        cards = _mixed_cards()
        assert filtered_view(cards, Filter()) == cards

    def test_category_only(self) -> None:
        view = filtered_view(_mixed_cards(), Filter(category="A"))
        assert [c.id for c in view] == ["c1", "c2"]

    def test_category_and_difficulty(self) -> None:
        view = filtered_view(_mixed_cards(), Filter(category="A", difficulty="Easy"))
        assert [c.id for c in view] == ["c1"]

    def test_difficulty_only(self) -> None:
        view = filtered_view(_mixed_cards(), Filter(difficulty="Easy"))
        assert [c.id for c in view] == ["c1", "c3"]

    def test_no_match(self) -> None:
        assert filtered_view(_mixed_cards(), Filter(category="C")) == []

    def test_filter_is_immutable(self) -> None:
        flt = Filter(category="A")
        with pytest.raises(AttributeError):
            flt.category = "B"  # type: ignore[misc]


# --- State machine ---


class TestStateMachine:
    def test_walkthrough(self) -> None:
        cards = [_card("c1"), _card("c2"), _card("c3")]

        state = start(cards)
        assert (state.cursor, state.side) == (0, Side.FRONT)

        state = flip(state)
        assert (state.cursor, state.side) == (0, Side.BACK)
        state = flip(state)
        assert (state.cursor, state.side) == (0, Side.FRONT)

        state, reviewed = advance(state)
        assert reviewed.id == "c1"
        assert (state.cursor, state.side) == (1, Side.FRONT)

        state, reviewed = advance(flip(state))
        assert reviewed.id == "c2"
        assert (state.cursor, state.side) == (2, Side.FRONT)

        state, reviewed = advance(state)
        assert reviewed.id == "c3"
        assert isinstance(state, Idle)

    def test_start_with_no_cards(self) -> None:
        with pytest.raises(EmptySessionError):
            start([])

    def test_idle_ignores_flip_and_next(self) -> None:
        assert flip(Idle()) == Idle()
        assert advance(Idle()) == (Idle(), None)

    def test_single_card_session(self) -> None:
        state, reviewed = advance(start([_card("c1")]))
        assert isinstance(state, Idle)
        assert reviewed.id == "c1"


# --- Working set ---


class TestWorkingSet:
    def test_prepend_replace_remove(self) -> None:
        ws = WorkingSet([_card("c2"), _card("c1")])
        ws.prepend(_card("c3"))
        assert [c.id for c in ws] == ["c3", "c2", "c1"]

        ws.replace(_card("c2", question="edited"))
        assert [c.id for c in ws] == ["c3", "c2", "c1"]
        assert ws.find("c2").question == "edited"

        ws.remove("c3")
        assert [c.id for c in ws] == ["c2", "c1"]

    def test_unknown_ids_are_ignored(self) -> None:
        ws = WorkingSet([_card("c1")])
        ws.replace(_card("c9"))
        ws.remove("c9")
        assert [c.id for c in ws] == ["c1"]
        assert ws.find("c9") is None


# --- Controller ---


class TestSessionController:
    @pytest.mark.asyncio
    async def test_study_session_fires_reviews(self) -> None:
        controller = _controller([_card("c1"), _card("c2"), _card("c3")])
        await controller.load()

        assert controller.start().id == "c1"
        assert controller.progress == (1, 3)
        controller.flip()
        assert controller.state.side is Side.BACK
        controller.flip()
        assert controller.state.side is Side.FRONT

        assert controller.next().id == "c2"
        assert controller.next().id == "c3"
        assert controller.next() is None
        assert not controller.is_studying
        assert controller.progress == (0, 0)

        await controller.drain()
        reviewed = [call.args[0] for call in controller.client.increment_review.await_args_list]
        assert reviewed == ["c1", "c2", "c3"]
        assert all(card.review_count == 1 for card in controller.cards)

    @pytest.mark.asyncio
    async def test_review_failure_does_not_block(self, caplog: pytest.LogCaptureFixture) -> None:
        controller = _controller([_card("c1"), _card("c2")])
        controller.client.increment_review.side_effect = ApiError("boom", status_code=500)
        await controller.load()

        controller.start()
        with caplog.at_level(logging.WARNING, logger="flashcards.session"):
            assert controller.next().id == "c2"
            await controller.drain()

        assert controller.state.cursor == 1
        assert "Error updating review count for c1" in caplog.text

    @pytest.mark.asyncio
    async def test_start_with_empty_working_set(self) -> None:
        controller = _controller([])
        await controller.load()
        with pytest.raises(EmptySessionError):
            controller.start()
        assert isinstance(controller.state, Idle)

    @pytest.mark.asyncio
    async def test_start_studies_filtered_view(self) -> None:
        controller = _controller(_mixed_cards())
        await controller.load()
        controller.set_filter(category="A")
        controller.start()
        assert isinstance(controller.state, Studying)
        assert [c.id for c in controller.state.cards] == ["c1", "c2"]

        # Changing the filter mid-session leaves the snapshot alone
        controller.set_filter(category="B")
        assert len(controller.state.cards) == 2

    @pytest.mark.asyncio
    async def test_start_rejected_when_filter_matches_nothing(self) -> None:
        controller = _controller(_mixed_cards())
        await controller.load()
        controller.set_filter(category="Nope")
        with pytest.raises(EmptySessionError):
            controller.start()

    @pytest.mark.asyncio
    async def test_view_follows_filter(self) -> None:
        controller = _controller(_mixed_cards())
        await controller.load()
        controller.set_filter(category="A", difficulty="Easy")
        assert [c.id for c in controller.view] == ["c1"]
        controller.set_filter(category="", difficulty="")
        assert controller.filter == Filter()
        assert len(controller.view) == 3

    @pytest.mark.asyncio
    async def test_create_prepends(self) -> None:
        controller = _controller([_card("c1")])
        controller.client.create.return_value = _card("c2", question="new")
        await controller.load()

        card = await controller.create(FlashcardDraft(question="  new ", answer=" a "))
        assert card.id == "c2"
        assert [c.id for c in controller.cards] == ["c2", "c1"]
        sent = controller.client.create.await_args.args[0]
        assert (sent.question, sent.answer, sent.category, sent.difficulty) == ("new", "a", "General", "Medium")

    @pytest.mark.asyncio
    async def test_create_rejects_empty_question_locally(self) -> None:
        controller = _controller([])
        with pytest.raises(DraftError):
            await controller.create(FlashcardDraft(question="   ", answer="A"))
        controller.client.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_replaces_in_place(self) -> None:
        controller = _controller([_card("c3"), _card("c2"), _card("c1")])
        controller.client.update.return_value = _card("c2", question="edited")
        await controller.load()

        await controller.update("c2", FlashcardDraft(question="edited", answer="a"))
        assert [c.id for c in controller.cards] == ["c3", "c2", "c1"]
        assert controller.cards.find("c2").question == "edited"

    @pytest.mark.asyncio
    async def test_delete_removes(self) -> None:
        controller = _controller([_card("c2"), _card("c1")])
        await controller.load()
        await controller.delete("c2")
        assert [c.id for c in controller.cards] == ["c1"]

    @pytest.mark.asyncio
    async def test_failed_delete_keeps_card(self) -> None:
        controller = _controller([_card("c1")])
        controller.client.delete.side_effect = ApiError("Flashcard not found", status_code=404)
        await controller.load()
        with pytest.raises(ApiError):
            await controller.delete("c1")
        assert [c.id for c in controller.cards] == ["c1"]

    @pytest.mark.asyncio
    async def test_load_categories_drops_stale_filter(self) -> None:
        controller = _controller([])
        controller.client.categories.return_value = ["General", "Math"]
        controller.set_filter(category="History", difficulty="Hard")
        await controller.load_categories()
        assert controller.filter == Filter(difficulty="Hard")

        controller.set_filter(category="Math")
        await controller.load_categories()
        assert controller.filter.category == "Math"


# --- Drafts ---


class TestFlashcardDraft:
    def test_validated_trims_and_defaults(self) -> None:
        draft = FlashcardDraft(question=" Q ", answer=" A ", category="  ", difficulty="hard").validated()
        assert draft == FlashcardDraft(question="Q", answer="A", category="General", difficulty="Hard")

    @pytest.mark.parametrize("question,answer", [("", "A"), ("Q", "  ")])
    def test_validated_rejects_empty(self, question: str, answer: str) -> None:
        with pytest.raises(DraftError):
            FlashcardDraft(question=question, answer=answer).validated()

    def test_validated_rejects_unknown_difficulty(self) -> None:
        with pytest.raises(DraftError):
            FlashcardDraft(question="Q", answer="A", difficulty="Trivial").validated()
