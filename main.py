import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Prompt
from rich.markup import escape
from rich import box
import typer

from config import settings
from library_catalog.fees import assess_late_fee
from library_catalog.items import LibraryItem, create_item, generate_item_id
from library_catalog.library import Library
from library_catalog.member import Member
from library_catalog.models import ItemType
from library_catalog.sample_data import seed_sample_data
from utils.search import filter_by_availability
from utils.validators import ISBNValidator, TextValidator
from utils.ui_helpers import (
    format_item_info,
    print_fee_result,
    print_items_result,
    print_stats_result,
    set_output_mode,
)

APP_NAME = settings.app_name

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.WARNING),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

console = Console()


def build_library() -> Library:
    """Fresh in-memory library, seeded with the demo catalog when enabled."""
    library = Library()
    if settings.load_sample_data:
        seed_sample_data(library)
        logger.debug(f"Seeded sample data: {len(library.list_items())} items, {len(library.list_members())} members")
    return library


# --- Typer CLI Application ---
app = typer.Typer(help="Library console")


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    )
):
    """Global CLI options (e.g. output mode)."""
    if output:
        set_output_mode(output)


@app.command("list")
def cli_list(category: Optional[str] = typer.Option(None, "--category", "-c", help="Only items in this category")):
    """List catalog items."""
    lib = build_library()
    items = lib.items_in_category(category) if category else lib.list_items()
    print_items_result(items)


@app.command("search")
def cli_search(query: str = typer.Argument(..., help="Text to look for in titles")):
    """Case-insensitive title search."""
    result = build_library().search_by_title(query)
    print(f"Found {result.total_found} item(s) for {result.search_criteria}")
    print_items_result(result.items, empty_message="No matching items.")


@app.command("author")
def cli_author(author: str = typer.Argument(..., help="Exact author name, any case")):
    """List books by an author."""
    books = build_library().find_books_by_author(author)
    print_items_result(books, empty_message=f"No books by {author}")


@app.command("genre")
def cli_genre(genre: str = typer.Argument(..., help="DVD genre, any case")):
    """List DVDs in a genre."""
    wanted = genre.strip().lower()
    dvds = build_library().find_items_by(ItemType.DVD, lambda dvd: dvd.genre.lower() == wanted)
    print_items_result(dvds, empty_message=f"No DVDs in genre '{genre}'")


@app.command("stats")
def cli_stats():
    """Show library statistics."""
    print_stats_result(build_library().get_library_statistics())


@app.command("fee")
def cli_fee(
    item_id: str = typer.Argument(..., help="Catalog item id"),
    days_late: int = typer.Argument(..., help="Days past the due date"),
):
    """Show the late fee an item would be charged."""
    item = build_library().get_item(item_id)
    if item is None:
        print(f"Item {item_id} not found.")
        raise typer.Exit(code=1)
    print_fee_result(item.title, assess_late_fee(item, days_late, cap=settings.late_fee_cap))


def overdue_report_lines(lib: Library) -> List[str]:
    """One line per overdue loan with its base, compounded and charged fee."""
    lines: List[str] = []

    def report(item: LibraryItem, member: Member, days_late: int) -> None:
        fee = assess_late_fee(item, days_late, cap=lib.config.late_fee_cap, rate=lib.config.compound_rate)
        lines.append(
            f" - {item.title} (held by {member.name}) is {days_late} day(s) late. "
            f"Base: ${fee.base:.2f}, Compounded: ${fee.compounded:.2f}, Charged: ${fee.charged:.2f}"
        )

    if lib.process_overdue_items(report) == 0:
        lines.append("No overdue items.")
    return lines


@app.command("overdue")
def cli_overdue():
    """Report overdue loans and their late fees.

    Each command builds a fresh in-memory library, so this only finds loans
    when the library handed to it already holds some (the menu keeps one
    library for the whole session).
    """
    for line in overdue_report_lines(build_library()):
        print(line)


@app.command("menu")
def cli_menu():
    """Run the interactive menu."""
    run_menu(build_library())


# --- Interactive menu actions ---
def _ask_positive_int(label: str) -> Optional[int]:
    value = TextValidator.parse_positive_int(Prompt.ask(label))
    if value is None:
        console.print(f"[bold red]Invalid {label.lower()}.[/]")
    return value


def add_item(lib: Library) -> None:
    """Prompt for a new Book, DVD or Magazine and add it to the catalog."""
    kind = Prompt.ask("Type: 1) Book 2) DVD 3) Magazine", choices=["1", "2", "3"])
    item_type = {"1": ItemType.BOOK, "2": ItemType.DVD, "3": ItemType.MAGAZINE}[kind]
    title = Prompt.ask("Title").strip()
    if not title:
        console.print("[bold red]Title cannot be blank.[/]")
        return

    fields = {}
    if item_type is ItemType.BOOK:
        fields["author"] = Prompt.ask("Author")
        isbn = Prompt.ask("ISBN (10 or 13 digits, dashes ok)")
        if not ISBNValidator.is_valid_isbn(isbn):
            console.print("[bold red]Invalid ISBN.[/]")
            return
        fields["isbn"] = isbn
        pages = _ask_positive_int("Pages")
        if pages is None:
            return
        fields["pages"] = pages
    elif item_type is ItemType.DVD:
        fields["director"] = Prompt.ask("Director")
        duration = _ask_positive_int("Duration (minutes)")
        if duration is None:
            return
        fields["duration"] = duration
        fields["genre"] = Prompt.ask("Genre")
    else:
        issue = _ask_positive_int("Issue number")
        if issue is None:
            return
        fields["issue_number"] = issue
        fields["publisher"] = Prompt.ask("Publisher")

    category = Prompt.ask(f"Category ({', '.join(settings.categories)})", default=settings.categories[0])
    item_id = generate_item_id(item_type)
    lib.add_item(create_item(item_type, item_id, title, **fields), category)
    console.print(f"[green]{item_type.value} added with ID [bold]{item_id}[/][/]")


def register_member(lib: Library) -> None:
    member_id = Prompt.ask("Member ID").strip()
    name = Prompt.ask("Name")
    email = Prompt.ask("Email").strip()
    try:
        lib.register_member(Member(member_id, name, email))
    except ValueError as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        return
    console.print("[green]Member registered.[/]")


def borrow(lib: Library) -> None:
    member_id = Prompt.ask("Member ID").strip()
    item_id = Prompt.ask("Item ID").strip()
    result = lib.borrow_item(member_id, item_id)
    if result:
        console.print(f"[green]Borrowed. Due {result.due_date.isoformat()}[/]")
    else:
        console.print(f"[yellow]Borrow failed: {result.error.value}[/]")


def return_item(lib: Library) -> None:
    member_id = Prompt.ask("Member ID").strip()
    item_id = Prompt.ask("Item ID").strip()
    result = lib.return_item(member_id, item_id)
    if result:
        console.print(f"[green]Returned. Late fee: ${result.fee:.2f}[/]")
    else:
        console.print(f"[yellow]Return failed: {result.error.value}[/]")


def renew(lib: Library) -> None:
    member_id = Prompt.ask("Member ID").strip()
    item_id = Prompt.ask("Item ID").strip()
    result = lib.renew_item(member_id, item_id)
    if result:
        console.print(f"[green]Renewed. Due {result.due_date.isoformat()}[/]")
    else:
        console.print(f"[yellow]Renew failed: {result.error.value}[/]")


def _print_item_lines(items) -> None:
    for item in items:
        console.print(escape(format_item_info(item)))


def search(lib: Library) -> None:
    """Title search, available books by author, or DVDs by genre."""
    kind = Prompt.ask("Search: 1) By title 2) Books by author 3) DVDs by genre", choices=["1", "2", "3"])
    if kind == "1":
        query = Prompt.ask("Title contains")
        result = lib.search_by_title(query)
        console.print(f"Found {result.total_found} item(s) for {escape(result.search_criteria)}")
        _print_item_lines(result.items)
    elif kind == "2":
        author = Prompt.ask("Author")
        books = filter_by_availability(lib.find_books_by_author(author), True)
        if not books:
            console.print(f"[yellow]No available books by {escape(author)}[/]")
        _print_item_lines(books)
    else:
        genre = Prompt.ask("Genre equals")
        wanted = genre.strip().lower()
        dvds = lib.find_items_by(ItemType.DVD, lambda dvd: dvd.genre.lower() == wanted)
        if not dvds:
            console.print(f"[yellow]No DVDs in genre '{escape(genre)}'[/]")
        _print_item_lines(dvds)


def member_history(lib: Library) -> None:
    member_id = Prompt.ask("Member ID").strip()
    ids = lib.member_borrowed_ids(member_id)
    if not ids:
        console.print("No items currently borrowed.")
    else:
        console.print(f"Borrowed item IDs: {', '.join(ids)}")


def reports(lib: Library) -> None:
    print_stats_result(lib.get_library_statistics())


def process_overdue(lib: Library) -> None:
    console.print("Processing overdue items:")
    for line in overdue_report_lines(lib):
        console.print(escape(line))


MENU_ITEMS = [
    ("1", "Add new library item", "➕", add_item),
    ("2", "Register new member", "🧑", register_member),
    ("3", "Borrow item", "📤", borrow),
    ("4", "Return item", "📥", return_item),
    ("5", "Search items", "🔎", search),
    ("6", "View member borrowed items", "📋", member_history),
    ("7", "Generate library reports", "📊", reports),
    ("8", "Process late fees", "💰", process_overdue),
    ("9", "Renew item", "🔁", renew),
    ("0", "Exit", "🚪", None),
]


def run_menu(lib: Library) -> None:
    """Simple interactive menu over one in-memory library."""
    def render_menu() -> None:
        table = Table.grid(padding=(0, 2))
        table.add_column(justify="right", style="bold cyan", width=4)
        table.add_column(justify="left", style="white")
        for key, label, icon, _ in MENU_ITEMS:
            table.add_row(f"[reverse]{key}[/]", f"{icon} {label}")

        console.print(Panel(
            table,
            title=f"{APP_NAME}",
            border_style="cyan",
            box=box.HEAVY,
            padding=(1, 2),
        ))

    actions = {key: action for key, _, _, action in MENU_ITEMS}
    while True:
        render_menu()
        choice = Prompt.ask("Choose", choices=list(actions), default="0").strip()
        action = actions[choice]
        if action is None:
            console.print("[green]Goodbye![/]")
            break
        action(lib)
        console.print()  # spacing between actions


if __name__ == "__main__":
    if len(sys.argv) > 1:
        app()
    else:
        run_menu(build_library())
