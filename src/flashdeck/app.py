"""Interactive CLI application."""
from datetime import date, timedelta

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.prompt import Prompt

from flashdeck.db import init_db, DEFAULT_DB_PATH
from flashdeck.cards import create_card, get_due_cards, list_cards, review_card
from flashdeck.stats import get_heatmap_data, get_review_stats

console = Console()

EXIT_WORDS = ("q", "menu")
QUALITY_CHOICES = ["0", "1", "2", "3", "4", "5"]


class SessionExitRequested(Exception):
    """User asked to leave the current session and return to the menu."""


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def session_int_prompt(prompt: str, choices: list[str]) -> int:
    # Prompt.ask validates choices itself, so exit words must be allowed through
    answer = session_prompt(prompt, choices=choices + list(EXIT_WORDS), show_choices=False)
    return int(answer)


def show_welcome():
    console.print(Panel(
        "[bold]flashdeck[/bold]\n[dim]SM-2 spaced repetition flashcards[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("drill", "Review cards that are due"),
        ("add", "Add a card"),
        ("list", "Show all cards and their schedule"),
        ("stats", "Retention and review activity"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def run_drill_session(db_path: str, cards: list) -> int:
    """Drill the given cards. Returns how many were reviewed."""
    if not cards:
        console.print("[yellow]No cards due right now![/yellow]")
        return 0
    console.print(f"\n[bold]Drill[/bold] ({len(cards)} cards, 'q' to stop)\n")
    reviewed = 0
    for i, card in enumerate(cards, 1):
        console.print(Panel(card["front"], title=f"Card {i}/{len(cards)}", border_style="cyan"))
        session_prompt("[dim]Press Enter to reveal answer[/dim]", default="", show_default=False)
        console.print(Panel(card["back"], border_style="green"))
        quality = session_int_prompt(
            "Rate yourself (0=forgot, 3=hard, 4=good, 5=easy)", choices=QUALITY_CHOICES,
        )
        updated = review_card(db_path, card["id"], quality)
        reviewed += 1
        console.print(f"[dim]Next review in {updated['interval']} day(s)[/dim]\n")
    return reviewed


def cmd_drill(db_path: str):
    cards = get_due_cards(db_path, limit=15)
    try:
        run_drill_session(db_path, cards)
    except SessionExitRequested:
        console.print("[dim]Session stopped. Reviews so far are saved.[/dim]")


def cmd_add(db_path: str):
    front = Prompt.ask("Front")
    back = Prompt.ask("Back")
    card = create_card(db_path, front, back)
    console.print(f"[green]Added card {card['id']}[/green]")


def cmd_list(db_path: str):
    cards = list_cards(db_path)
    if not cards:
        console.print("[yellow]No cards yet. Use 'add' to create one.[/yellow]")
        return
    table = Table(title="Cards")
    table.add_column("ID", justify="right")
    table.add_column("Front", style="cyan")
    table.add_column("EF", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Interval", justify="right")
    table.add_column("Next Review")
    for c in cards:
        table.add_row(
            str(c["id"]),
            c["front"],
            f"{c['easiness_factor']:.2f}",
            str(c["repetitions"]),
            f"{c['interval']}d",
            c["next_review"].replace("T", " "),
        )
    console.print(table)


def cmd_stats(db_path: str):
    stats = get_review_stats(db_path)
    console.print(Panel(
        f"Cards: [bold]{stats['total_cards']}[/bold]  |  "
        f"Due: [bold]{stats['due_cards']}[/bold]  |  "
        f"Reviews: [bold]{stats['reviews']}[/bold]  |  "
        f"Lapses: [bold]{stats['lapses']}[/bold]\n"
        f"Retention: [bold]{stats['retention']}%[/bold]  |  "
        f"Avg EF: [bold]{stats['avg_easiness_factor']}[/bold]",
        title="Review Stats", border_style="blue",
    ))

    counts = {d["date"]: d["count"] for d in get_heatmap_data(db_path)}
    table = Table(title="Last 14 Days")
    table.add_column("Date")
    table.add_column("Reviews", justify="right")
    table.add_column("")
    today = date.today()
    for offset in range(13, -1, -1):
        day = (today - timedelta(days=offset)).isoformat()
        count = counts.get(day, 0)
        table.add_row(day, str(count), f"[green]{'█' * min(count, 30)}[/green]")
    console.print(table)


def main():
    db_path = DEFAULT_DB_PATH
    init_db(db_path)
    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="drill").strip().lower()
        try:
            if choice == "drill":
                cmd_drill(db_path)
            elif choice == "add":
                cmd_add(db_path)
            elif choice == "list":
                cmd_list(db_path)
            elif choice == "stats":
                cmd_stats(db_path)
            elif choice in ("quit", "exit"):
                console.print("[dim]See you next review![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
