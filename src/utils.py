"""Shared utility functions for the prompt generator.

Provides name sanitising, JSON input, prompt file output and Rich-based
console reporting used by the CLI.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table

from src.prompts.models import RenderResult, TemplateDescriptor

console = Console()


# ---------------------------------------------------------------------------
# Name helpers
# ---------------------------------------------------------------------------


def sanitize_name(name: str) -> str:
    """Convert an arbitrary project name to a safe file name.

    * Lowercases the input.
    * Replaces spaces and non-alphanumeric characters (except hyphens and
      underscores) with hyphens.
    * Collapses consecutive hyphens and strips leading/trailing hyphens.

    Examples::

        sanitize_name("Shop Master") -> "shop-master"
        sanitize_name("  Acme (Beta)  ") -> "acme-beta"
    """
    result = re.sub(r"[^a-zA-Z0-9_-]", "-", name.strip().lower())
    result = re.sub(r"-+", "-", result)
    return result.strip("-")


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


def load_json_list(path: str | Path) -> list[Any]:
    """Load a JSON file that contains a top-level array.

    Returns an empty list if the file does not exist.
    """
    file_path = Path(path)
    if not file_path.exists():
        return []
    raw = file_path.read_text(encoding="utf-8")
    data = json.loads(raw)
    if isinstance(data, list):
        return data
    return [data]


def save_prompt(prompt: str, path: str | Path) -> Path:
    """Write a rendered prompt to *path*, creating parent directories."""
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(prompt, encoding="utf-8")
    return file_path


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_section_header(title: str, color: str = "bright_cyan") -> None:
    """Print a full-width rule with *title*."""
    console.print()
    console.print(Rule(f"[bold {color}] {title} [/bold {color}]", style=color))
    console.print()


def print_summary_table(data: dict[str, Any], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_templates_table(descriptors: list[TemplateDescriptor]) -> None:
    """List the registered templates with their declared variables."""
    table = Table(title="Prompt Templates", show_header=True, header_style="bold cyan")
    table.add_column("Type", style="bold", no_wrap=True)
    table.add_column("Template")
    table.add_column("Description")
    table.add_column("Variables", style="dim")

    for descriptor in descriptors:
        table.add_row(
            descriptor.archetype,
            descriptor.id,
            descriptor.description,
            ", ".join(sorted(descriptor.declared_variables)),
        )
    console.print(table)


def print_result(result: RenderResult) -> None:
    """Summarise a render result in a panel."""
    meta = result.metadata
    if result.success:
        body = (
            f"[green]Prompt generated[/green]\n"
            f"  Type: {meta.archetype}\n"
            f"  Template: {meta.template_id}\n"
            f"  Features: {', '.join(meta.detected_features) or '-'}\n"
            f"  Confidence: {meta.confidence_score}%\n"
            f"  Size: {len(result.prompt or '')} chars"
        )
        console.print(Panel(body, title="Prompt Ready", border_style="green"))
    else:
        console.print(
            Panel(f"[red]{result.error}[/red]", title="Generation Failed", border_style="red")
        )


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
