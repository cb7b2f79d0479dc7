"""Plain-text rendering of flashcards for the terminal."""

from __future__ import annotations

import shutil
import textwrap

from flashcards.models import Flashcard
from flashcards.session import Filter, Side, Studying


def _width() -> int:
    return min(shutil.get_terminal_size((80, 24)).columns, 80)


def boxed(text: str, indent: str = "  ") -> str:
    """Wrap text in a rounded box."""
    inner_width = max(10, _width() - len(indent) - 4)
    lines = textwrap.wrap(text, inner_width) or [""]
    width = max(len(line) for line in lines)
    out = [f"{indent}╭{'─' * (width + 2)}╮"]
    out.extend(f"{indent}│ {line.ljust(width)} │" for line in lines)
    out.append(f"{indent}╰{'─' * (width + 2)}╯")
    return "\n".join(out)


def format_card(card: Flashcard) -> str:
    """One list entry: meta line, question, answer, dates."""
    created = card.created_at.strftime("%Y-%m-%d")
    reviewed = card.last_reviewed.strftime("%Y-%m-%d") if card.last_reviewed else "Never"
    return "\n".join([
        f"  [{card.id}]  {card.category} · {card.difficulty} · {card.review_count} reviews",
        f"    Q: {card.question}",
        f"    A: {card.answer}",
        f"    Created: {created}   Last reviewed: {reviewed}",
    ])


def format_list(cards: list[Flashcard], total: int, flt: Filter) -> str:
    if not cards:
        if total == 0:
            return "  No flashcards found. Add your first flashcard to get started!"
        hint = " Try adjusting your filters." if flt.is_active else ""
        return f"  No flashcards found.{hint}"
    return "\n\n".join(format_card(card) for card in cards)


def format_progress(position: int, total: int) -> str:
    return f"{position} / {total} cards"


def format_study_card(state: Studying, progress: tuple[int, int]) -> str:
    """Header with position and side, then the visible face of the current card."""
    card = state.current
    if state.side is Side.FRONT:
        label, text = "Question", card.question
    else:
        label, text = "Answer", card.answer
    header = f"  [{format_progress(*progress)}]  {card.category} · {label}"
    return f"{header}\n{boxed(text)}"
