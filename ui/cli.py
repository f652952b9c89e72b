"""Command Line Interface (CLI) for user interaction."""

from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt
from rich.table import Table
from rich.text import Text

import config
from core.aggregator import pivot_row
from core.models import ReportRow
from utils.logger import get_logger
from utils.error_handler import UserCancelledError

logger = get_logger()
console = Console()

T = TypeVar('T')

NO_SCHOLARSHIP_MARKS_MESSAGE = "No scholarship marks found."

def display_welcome():
    """Displays a welcome message."""
    console.print(Panel(
        f"[bold green]{config.INSTITUTION_NAME}[/bold green]\nScholarship & Marks Reporter",
        title="Welcome",
        border_style="blue"
    ))
    console.rule()

def display_farewell():
    console.rule()
    console.print("[bold cyan]Done. Exiting.[/bold cyan]")

def display_error(message: str):
    """Displays an error message in a standard format."""
    console.print(Panel(f"[bold red]Error:[/bold red] {message}", title="Error", border_style="red"))

def display_warning(message: str):
    console.print(f"[yellow]Warning:[/yellow] {message}")

def display_success(message: str):
    console.print(f"[green]Success:[/green] {message}")

def display_step(step_number: int, description: str):
    """Displays the current step in the process."""
    console.print(f"\n[bold blue]Step {step_number}:[/bold blue] {description}")
    console.rule()

def prompt_for_selection(items: Sequence[T], display_func: Callable[[T], str], prompt_message: str) -> Optional[T]:
    """Prompts the user to select an item from a list.

    Args:
        items: The items to choose from.
        display_func: Returns the display string for an item.
        prompt_message: The message to display before the list.

    Returns:
        The selected item, or None if no items are available.

    Raises:
        UserCancelledError: If the user enters 0.
    """
    if not items:
        console.print("[yellow]No items available for selection.[/yellow]")
        return None

    console.print(prompt_message)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", width=4)
    table.add_column("Item", style="cyan")
    choices = []
    for i, item in enumerate(items):
        table.add_row(str(i + 1), display_func(item))
        choices.append(str(i + 1))
    console.print(table)
    console.print("Enter 0 to cancel.")

    choice = IntPrompt.ask("Select item number", choices=choices + ["0"], show_choices=False)
    if choice == 0:
        raise UserCancelledError("User cancelled selection.")
    return items[choice - 1]

def confirm_action(message: str, default: bool = True) -> bool:
    return Confirm.ask(message, default=default)

def build_scholarship_table(rows: Sequence[ReportRow], subject_names: Sequence[str] = config.SCHOLARSHIP_SUBJECT_NAMES) -> Table:
    """Builds the scholarship report table: one column per tracked subject, a dash where a row has no mark."""
    table = Table(title="Scholarship Exam Report", show_header=True, header_style="bold magenta", show_lines=False)
    table.add_column("Student Name", style="bold")
    table.add_column("Class")
    table.add_column("Exam Name")
    for name in subject_names:
        table.add_column(name, justify="center")
    table.add_column("Total Marks", justify="center", style="bold")

    if not rows:
        table.add_row(Text(NO_SCHOLARSHIP_MARKS_MESSAGE, style="dim"), *[""] * (len(subject_names) + 3))
        return table

    for row in rows:
        table.add_row(row.student_name, row.class_name, row.exam_name, *pivot_row(row, subject_names))
    return table

def display_scholarship_report(rows: Sequence[ReportRow]):
    console.print(build_scholarship_table(rows))
    console.print(f"{len(rows)} report rows.")

def display_summary(message: str, title: str = "Marks Summary"):
    """Prints a summary message verbatim (no rich markup) inside a panel."""
    console.print(Panel(Text(message), title=title, border_style="green"))

# --- Display functions for specific items ---

def format_catalog_entry_for_display(entry: Dict[str, Any]) -> str:
    """Formats a class or subject entry for display in selection prompts."""
    return f"{entry.get('name', 'Unnamed')} (ID: {entry.get('id', 'N/A')})"

def format_exam_for_display(exam: Dict[str, Any]) -> str:
    total = exam.get('totalMarks')
    out_of = f", out of {total}" if total is not None else ""
    return f"{exam.get('name', 'Unnamed Exam')} (ID: {exam.get('id', 'N/A')}{out_of})"

def format_report_choice(choice: Dict[str, str]) -> str:
    return choice["label"]

REPORT_CHOICES: List[Dict[str, str]] = [
    {"key": "scholarship", "label": "Scholarship exam report (table)"},
    {"key": "summary", "label": "Marks summary for one class and subject (message)"},
]
