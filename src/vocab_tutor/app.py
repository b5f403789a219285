"""Interactive CLI application."""
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Callable

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from vocab_tutor.activity import get_recent_activity
from vocab_tutor.collections_ import (
    add_item_to_collection, create_collection, delete_collection,
    get_collection_items, get_collections_by_user,
)
from vocab_tutor.dashboard import get_mastery_color, get_mastery_label, get_progress_stats
from vocab_tutor.db import DEFAULT_DB_PATH, init_db
from vocab_tutor.dictionary import fetch_word
from vocab_tutor.errors import VocabTutorError
from vocab_tutor.flashcards import add_flashcard, get_due_cards, record_review
from vocab_tutor.importer import import_word_list
from vocab_tutor.lookup import WordRecord, cached_lookup
from vocab_tutor.models import DueCard, User
from vocab_tutor.session import DailySessionCounter, load_counter, save_counter
from vocab_tutor.settings import DAILY_LIMIT_KEY, get_daily_limit, set_daily_limit
from vocab_tutor.sm2 import Rating, parse_rating
from vocab_tutor.storage import SqliteReviewStore
from vocab_tutor.users import get_or_create_user
from vocab_tutor.vocabulary import (
    delete_vocabulary_item, get_favorite_vocabulary, get_vocabulary_by_user,
    save_word, toggle_favorite,
)

console = Console()
logger = logging.getLogger(__name__)

LOCAL_USERNAME = "learner"
EXIT_WORDS = ("q", "menu")


class SessionExitRequested(Exception):
    """Raised when the user asks to leave a review session early."""
    pass


def session_prompt(prompt: str, **kwargs) -> str:
    """Prompt.ask that raises SessionExitRequested on 'q' or 'menu'."""
    if kwargs.get("choices"):
        kwargs["choices"] = [*kwargs["choices"], *EXIT_WORDS]
        kwargs.setdefault("show_choices", False)
    value = Prompt.ask(prompt, **kwargs)
    if value.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return value


def configure_logging() -> None:
    level = logging.DEBUG if os.environ.get("VOCAB_TUTOR_DEBUG") else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def show_welcome():
    console.print(Panel(
        "[bold]Vocabulary Tutor[/bold]\n[dim]Look up words, keep them, review them[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("lookup", "Look up and save a word"),
        ("words", "Your saved words"),
        ("favorites", "Favorite words"),
        ("collections", "Organize words into collections"),
        ("review", "Review due flashcards"),
        ("progress", "Learning progress"),
        ("import", "Import a word list"),
        ("settings", "Daily flashcard limit"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def show_word(record: WordRecord) -> None:
    lines = [f"[bold]{record.term}[/bold]" + (f"  [dim]{record.phonetics}[/dim]" if record.phonetics else "")]
    for i, d in enumerate(record.definitions, 1):
        lines.append(f"{i}. [italic]{d.part_of_speech}[/italic] {d.definition}")
        for example in d.examples:
            lines.append(f"   [dim]\"{example}\"[/dim]")
    if record.synonyms:
        lines.append(f"[green]Synonyms:[/green] {', '.join(record.synonyms)}")
    if record.antonyms:
        lines.append(f"[red]Antonyms:[/red] {', '.join(record.antonyms)}")
    console.print(Panel("\n".join(lines), border_style="cyan"))


def show_card_back(card: DueCard) -> None:
    vocab = card.vocabulary
    lines = []
    if vocab.part_of_speech:
        lines.append(f"[italic]{vocab.part_of_speech}[/italic]")
    lines.append(vocab.definition_text or "[dim](no definition)[/dim]")
    for example in vocab.example_sentences[:2]:
        lines.append(f"[dim]\"{example}\"[/dim]")
    console.print(Panel("\n".join(lines), border_style="green"))


def run_review_session(
    db_path: str,
    cards: list[DueCard],
    counter: DailySessionCounter,
    clock: Callable[[], datetime] = datetime.now,
) -> int:
    """Review cards one at a time until done or the daily limit is hit.

    Returns the number of cards rated.
    """
    if not cards:
        console.print("[yellow]No flashcards due right now![/yellow]")
        return 0
    store = SqliteReviewStore(db_path)
    rated = 0
    console.print(f"\n[bold]Review Session[/bold] - {len(cards)} cards [dim](q to stop)[/dim]\n")
    for i, card in enumerate(cards, 1):
        if counter.limit_reached(clock().date()):
            console.print(
                f"[yellow]Daily limit of {counter.limit} flashcards reached. "
                "Change it in settings or come back tomorrow![/yellow]"
            )
            break
        console.print(Panel(card.vocabulary.term, title=f"Card {i}/{len(cards)}", border_style="cyan"))
        session_prompt("[dim]Press Enter to reveal[/dim]", default="")
        show_card_back(card)
        rating = parse_rating(session_prompt(
            "How well did you know it?", choices=[r.value for r in Rating],
        ))
        now = clock()
        review = record_review(store, card.review_id, rating, now)
        counter.record_review(now.date())
        save_counter(db_path, counter)
        rated += 1
        console.print(f"[dim]Next review in {review.state.interval} day(s)[/dim]\n")
    else:
        console.print(f"[green]Session complete! Reviewed {rated} cards.[/green]")
    return rated


def cmd_lookup(db_path: str, user: User):
    term = Prompt.ask("Word to look up").strip()
    if not term:
        return
    record = cached_lookup(db_path, term, fetch_word)
    show_word(record)
    choice = Prompt.ask("Save it?", choices=["flashcard", "favorite", "no"], default="flashcard")
    if choice == "no":
        return
    item = save_word(db_path, user.id, record, favorite=(choice == "favorite"))
    if choice == "favorite" and not item.favorite:
        item = toggle_favorite(db_path, item.id)
    add_flashcard(SqliteReviewStore(db_path), user.id, item.id, datetime.now())
    console.print(f"[green]Saved '{item.term}' to your flashcards.[/green]")


def _word_table(title: str, items, store: SqliteReviewStore, user: User) -> Table:
    table = Table(title=title)
    table.add_column("ID", justify="right")
    table.add_column("Word", style="cyan")
    table.add_column("Definition")
    table.add_column("Status")
    for item in items:
        review = store.find_review(user.id, item.id)
        reps = review.state.repetitions if review else 0
        color = get_mastery_color(reps)
        table.add_row(
            str(item.id),
            ("* " if item.favorite else "") + item.term,
            item.definition_text[:60],
            f"[{color}]{get_mastery_label(reps)}[/{color}]" if review else "[dim]-[/dim]",
        )
    return table


def cmd_words(db_path: str, user: User):
    items = get_vocabulary_by_user(db_path, user.id)
    if not items:
        console.print("[yellow]No saved words yet. Try 'lookup' or 'import'.[/yellow]")
        return
    console.print(_word_table("Your Words", items, SqliteReviewStore(db_path), user))
    action = Prompt.ask("Action", choices=["back", "favorite", "delete"], default="back")
    if action == "back":
        return
    item_id = IntPrompt.ask("Word ID")
    if action == "favorite":
        item = toggle_favorite(db_path, item_id)
        console.print(f"[green]'{item.term}' {'added to' if item.favorite else 'removed from'} favorites.[/green]")
    elif delete_vocabulary_item(db_path, item_id):
        console.print("[green]Deleted.[/green]")
    else:
        console.print(f"[red]No word with ID {item_id}.[/red]")


def cmd_favorites(db_path: str, user: User):
    items = get_favorite_vocabulary(db_path, user.id)
    if not items:
        console.print("[yellow]No favorites yet.[/yellow]")
        return
    console.print(_word_table("Favorites", items, SqliteReviewStore(db_path), user))


def cmd_collections(db_path: str, user: User):
    collections = get_collections_by_user(db_path, user.id)
    table = Table(title="Collections")
    table.add_column("ID", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Words", justify="right")
    table.add_column("Description")
    for c in collections:
        table.add_row(str(c.id), f"[{c.color}]{c.name}[/{c.color}]",
                      str(len(get_collection_items(db_path, c.id))), c.description)
    console.print(table)
    action = Prompt.ask("Action", choices=["back", "new", "add", "show", "delete"], default="back")
    if action == "new":
        name = Prompt.ask("Name")
        description = Prompt.ask("Description", default="")
        created = create_collection(db_path, name, user_id=user.id, description=description)
        console.print(f"[green]Created collection '{created.name}'.[/green]")
    elif action == "add":
        collection_id = IntPrompt.ask("Collection ID")
        vocabulary_id = IntPrompt.ask("Word ID")
        add_item_to_collection(db_path, collection_id, vocabulary_id)
        console.print("[green]Added.[/green]")
    elif action == "show":
        collection_id = IntPrompt.ask("Collection ID")
        for item in get_collection_items(db_path, collection_id):
            console.print(f"  [cyan]{item.term}[/cyan] - {item.definition_text}")
    elif action == "delete":
        collection_id = IntPrompt.ask("Collection ID")
        if delete_collection(db_path, collection_id):
            console.print("[green]Collection deleted.[/green]")
        else:
            console.print(f"[red]No collection with ID {collection_id}.[/red]")


def cmd_review(db_path: str, user: User):
    now = datetime.now()
    counter = load_counter(db_path, now.date())
    console.print(f"Daily practice: [bold]{counter.reviewed_today}/{counter.limit}[/bold]")
    if counter.limit_reached(now.date()):
        console.print("[yellow]Daily limit reached! Change your limit in settings or come back tomorrow.[/yellow]")
        return
    cards = get_due_cards(SqliteReviewStore(db_path), user.id, now)
    try:
        run_review_session(db_path, cards, counter)
    except SessionExitRequested:
        console.print("[dim]Session paused. Your progress is saved.[/dim]")


def cmd_progress(db_path: str, user: User):
    stats = get_progress_stats(db_path, user.id, datetime.now())
    limit = get_daily_limit(db_path)
    console.print(Panel(
        f"Words: [bold]{stats['words_saved']}[/bold]  |  "
        f"Flashcards: [bold]{stats['flashcards']}[/bold]  |  "
        f"Due now: [bold]{stats['due_now']}[/bold]  |  "
        f"Today: [bold]{stats['reviews_today']}/{limit}[/bold]  |  "
        f"Retention: [bold]{stats['retention']}%[/bold]",
        title="Learning Progress", border_style="blue",
    ))
    table = Table(title="Mastery")
    table.add_column("Level")
    table.add_column("Words", justify="right")
    table.add_row("[green]Mastered[/green]", str(stats["mastered"]))
    table.add_row("[yellow]Learning[/yellow]", str(stats["learning"]))
    table.add_row("[cyan]New[/cyan]", str(stats["new"]))
    console.print(table)

    activity = get_recent_activity(db_path, user.id, limit=5)
    if activity:
        console.print("\n[bold]Recent activity:[/bold]")
        for entry in activity:
            term = entry.details.get("term", "")
            console.print(f"  [dim]{entry.timestamp:%Y-%m-%d %H:%M}[/dim] {entry.action.replace('_', ' ')} {term}")


def cmd_import(db_path: str, user: User):
    file_path = Prompt.ask("File path")
    if not Path(file_path).exists():
        console.print(f"[red]File not found: {file_path}[/red]")
        return
    result = import_word_list(db_path, user.id, file_path)
    console.print(
        f"[green]Imported {result['filename']}: {result['added']} new words[/green]"
        + (f" [dim]({result['skipped']} already saved)[/dim]" if result["skipped"] else "")
    )


def cmd_settings(db_path: str, user: User):
    current = get_daily_limit(db_path)
    console.print(f"{DAILY_LIMIT_KEY}: [bold]{current}[/bold]")
    new_limit = Prompt.ask("Daily flashcard limit", default=str(current))
    limit = set_daily_limit(db_path, new_limit)
    console.print(f"[green]Daily limit set to {limit}.[/green]")


COMMANDS = {
    "lookup": cmd_lookup,
    "words": cmd_words,
    "favorites": cmd_favorites,
    "collections": cmd_collections,
    "review": cmd_review,
    "progress": cmd_progress,
    "import": cmd_import,
    "settings": cmd_settings,
}


def main():
    configure_logging()
    db_path = os.environ.get("VOCAB_TUTOR_DB", DEFAULT_DB_PATH)
    init_db(db_path)
    user = get_or_create_user(db_path, LOCAL_USERNAME)

    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="review").strip().lower()
        try:
            if choice in COMMANDS:
                COMMANDS[choice](db_path, user)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]See you tomorrow![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except VocabTutorError as e:
            console.print(f"[red]{e}[/red]")
        except Exception as e:
            logger.exception("Command %r failed", choice)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
