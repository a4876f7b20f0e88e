import os
import json
from typing import List, Any, Dict
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

from library_catalog.models import ItemType

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()

def _status(item: Any) -> str:
    return "Available" if item.is_available else "On loan"

def format_item_info(item: Any) -> str:
    """One-line description of an item, shaped per item type."""
    if item.item_type is ItemType.BOOK:
        return f"[Book] '{item.title}' by {item.author} | ISBN {item.isbn} | {_status(item)}"
    if item.item_type is ItemType.DVD:
        return f"[DVD] '{item.title}' | {item.genre} | {item.duration}min | {_status(item)}"
    if item.item_type is ItemType.MAGAZINE:
        return f"[Magazine] '{item.title}' | Issue #{item.issue_number} | {item.publisher} | {_status(item)}"
    return f"[Item] {item.title} | {_status(item)}"

def print_items_result(items: List[Any], empty_message: str = "No items in library.") -> None:
    """Print an item list in the current output mode.
    - plain: 'ID - formatted info' lines, or the empty message
    - json: JSON array of item dicts
    - rich: Rich table
    """
    mode = get_output_mode()

    if not items:
        print(empty_message)
        return

    if mode == "json":
        print(json.dumps([item.to_dict() for item in items], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📚 Items", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Type", style="cyan")
        table.add_column("Title", style="white")
        table.add_column("Status", style="white")
        for item in items:
            table.add_row(item.item_id, item.item_type.value, item.title, _status(item))
        _console.print(table)
    else:
        for item in items:
            print(f"{item.item_id} - {format_item_info(item)}")

def print_stats_result(stats: Dict[str, Any]) -> None:
    """Print library statistics in the current output mode."""
    mode = get_output_mode()

    if not stats:
        print("No statistics available.")
        return

    by_type = stats.get("total_by_type", {})
    avg_pages = stats.get("average_pages_for_books", 0.0)
    genre = stats.get("most_popular_genre_for_dvds", "N/A")
    available = stats.get("percentage_available", 0.0)

    if mode == "json":
        print(json.dumps(stats, ensure_ascii=False))
    elif mode == "rich":
        type_line = ", ".join(f"{tag}: {count}" for tag, count in by_type.items()) or "-"
        content = (
            f"[bold]Total by type:[/] {type_line}\n"
            f"[bold]Average pages for books:[/] {avg_pages:.1f}\n"
            f"[bold]Most popular DVD genre:[/] {genre}\n"
            f"[bold]Availability:[/] {available:.2f}%"
        )
        _console.print(Panel.fit(content, title="📊 Stats", border_style="blue"))
    else:
        for tag, count in by_type.items():
            print(f"{tag}: {count}")
        print(f"Average pages for books: {avg_pages:.1f}")
        print(f"Most popular DVD genre: {genre}")
        print(f"Availability: {available:.2f}%")

def print_fee_result(title: str, fee: Any) -> None:
    """Print a late-fee assessment in the current output mode."""
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps({"title": title, **fee.to_dict()}, ensure_ascii=False))
    elif mode == "rich":
        content = (
            f"[bold]Days late:[/] {fee.days_late}\n"
            f"[bold]Base:[/] ${fee.base:.2f}\n"
            f"[bold]Compounded:[/] ${fee.compounded:.2f}\n"
            f"[bold]Charged:[/] ${fee.charged:.2f}"
        )
        _console.print(Panel.fit(content, title=f"💸 {escape(title)}", border_style="red"))
    else:
        print(f"{title}: {fee.days_late} day(s) late")
        print(f"Base: ${fee.base:.2f}")
        print(f"Compounded: ${fee.compounded:.2f}")
        print(f"Charged: ${fee.charged:.2f}")
