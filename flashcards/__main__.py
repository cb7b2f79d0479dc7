"""CLI client for the flashcard server.

Usage:
    python -m flashcards list [-c CATEGORY] [-d DIFFICULTY]    Show flashcards
    python -m flashcards categories                           Show categories in use
    python -m flashcards add "question" "answer"              Add a flashcard
    python -m flashcards edit ID --answer "new answer"        Edit a flashcard
    python -m flashcards delete ID                            Delete a flashcard
    python -m flashcards study [-c CATEGORY] [-d DIFFICULTY]  Start a study session
"""

import argparse
import asyncio
import logging

from flashcards.api_client import ApiError, FlashcardClient
from flashcards.display import format_list, format_study_card
from flashcards.models import DIFFICULTIES, DraftError, FlashcardDraft
from flashcards.session import EmptySessionError, SessionController


async def _prompt(message: str) -> str:
    # Keeps the event loop free for background review updates
    return (await asyncio.to_thread(input, message)).strip()


async def cmd_list(args: argparse.Namespace) -> None:
    """Show the filtered flashcard list."""
    async with FlashcardClient(base_url=args.api_url) as client:
        controller = SessionController(client)
        await controller.load()
        controller.set_filter(args.category, args.difficulty)
        print()
        print(format_list(controller.view, len(controller.cards), controller.filter))
        print()


async def cmd_categories(args: argparse.Namespace) -> None:
    async with FlashcardClient(base_url=args.api_url) as client:
        categories = await SessionController(client).load_categories()
    if not categories:
        print("  No categories yet.")
        return
    for category in categories:
        print(f"  {category}")


async def cmd_add(args: argparse.Namespace) -> None:
    """Create a flashcard."""
    draft = FlashcardDraft(
        question=args.question,
        answer=args.answer,
        category=args.category,
        difficulty=args.difficulty,
    )
    async with FlashcardClient(base_url=args.api_url) as client:
        card = await SessionController(client).create(draft)
    print(f"  Flashcard created successfully! (id={card.id})")


async def cmd_edit(args: argparse.Namespace) -> None:
    """Edit a flashcard; unspecified fields keep their current value."""
    async with FlashcardClient(base_url=args.api_url) as client:
        controller = SessionController(client)
        await controller.load()
        card = controller.cards.find(args.id)
        if card is None:
            print(f"  No flashcard with id {args.id}.")
            return

        current = FlashcardDraft.from_card(card)
        draft = FlashcardDraft(
            question=args.question if args.question is not None else current.question,
            answer=args.answer if args.answer is not None else current.answer,
            category=args.category if args.category is not None else current.category,
            difficulty=args.difficulty if args.difficulty is not None else current.difficulty,
        )
        await controller.update(args.id, draft)
    print("  Flashcard updated successfully!")


async def cmd_delete(args: argparse.Namespace) -> None:
    """Delete a flashcard after confirmation."""
    async with FlashcardClient(base_url=args.api_url) as client:
        controller = SessionController(client)
        if not args.yes:
            await controller.load()
            card = controller.cards.find(args.id)
            if card is None:
                print(f"  No flashcard with id {args.id}.")
                return
            answer = await _prompt(f'  Delete "{card.question}"? [y/N] ')
            if answer.lower() != "y":
                print("  Cancelled.")
                return
        await controller.delete(args.id)
    print("  Flashcard deleted successfully!")


async def cmd_study(args: argparse.Namespace) -> None:
    """Run an interactive study session."""
    async with FlashcardClient(base_url=args.api_url) as client:
        controller = SessionController(client)
        await controller.load()
        controller.set_filter(args.category, args.difficulty)

        try:
            controller.start()
        except EmptySessionError as e:
            print(f"\n  {e}\n")
            return

        print("\n  Study Session")
        print("  f=flip  n=next  q=quit\n")

        try:
            while controller.is_studying:
                print(format_study_card(controller.state, controller.progress))
                choice = (await _prompt("  > ")).lower()
                if choice == "q":
                    print("\n  Session ended early.")
                    break
                if choice == "f":
                    controller.flip()
                elif choice in ("n", ""):
                    if controller.next() is None:
                        print("\n  Study session complete! Great job!\n")
                else:
                    print("  Unknown command. Use f, n or q.")
        except (EOFError, KeyboardInterrupt):
            print("\n  Session ended early.")
        finally:
            await controller.drain()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flashcards",
        description="Study flashcards from the terminal",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--api-url", default=None, help="Server URL (default: FLASHCARDS_API_URL)")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # list
    list_parser = subparsers.add_parser("list", help="Show flashcards")
    list_parser.add_argument("-c", "--category", default=None, help="Only this category")
    list_parser.add_argument("-d", "--difficulty", choices=DIFFICULTIES, default=None)

    # categories
    subparsers.add_parser("categories", help="Show categories in use")

    # add
    add_parser = subparsers.add_parser("add", help="Add a new flashcard")
    add_parser.add_argument("question")
    add_parser.add_argument("answer")
    add_parser.add_argument("-c", "--category", default="", help="Category (default: General)")
    add_parser.add_argument("-d", "--difficulty", choices=DIFFICULTIES, default="Medium")

    # edit
    edit_parser = subparsers.add_parser("edit", help="Edit a flashcard")
    edit_parser.add_argument("id")
    edit_parser.add_argument("--question", default=None)
    edit_parser.add_argument("--answer", default=None)
    edit_parser.add_argument("--category", default=None)
    edit_parser.add_argument("--difficulty", choices=DIFFICULTIES, default=None)

    # delete
    delete_parser = subparsers.add_parser("delete", help="Delete a flashcard")
    delete_parser.add_argument("id")
    delete_parser.add_argument("-y", "--yes", action="store_true", help="Skip confirmation")

    # study
    study_parser = subparsers.add_parser("study", help="Start a study session")
    study_parser.add_argument("-c", "--category", default=None, help="Only this category")
    study_parser.add_argument("-d", "--difficulty", choices=DIFFICULTIES, default=None)

    return parser


def main() -> None:
    """Entry point for the flashcards CLI."""
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.ERROR)

    if not args.command:
        parser.print_help()
        return

    cmd_map = {
        "list": cmd_list,
        "categories": cmd_categories,
        "add": cmd_add,
        "edit": cmd_edit,
        "delete": cmd_delete,
        "study": cmd_study,
    }

    try:
        asyncio.run(cmd_map[args.command](args))
    except DraftError as e:
        print(f"  {e}")
        raise SystemExit(1) from None
    except ApiError as e:
        print(f"  Operation failed: {e.message}")
        raise SystemExit(1) from None


if __name__ == "__main__":
    main()
