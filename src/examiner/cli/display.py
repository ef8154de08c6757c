"""Rich display for file operation results.

Renders envelopes from :class:`~examiner.tools.executor.OperationExecutor`
as panels and tables. Accepts an optional :class:`~rich.console.Console`
for dependency injection in tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from examiner.policy.model import PolicyConfig
    from examiner.tools.result import OperationResult

_TRUNCATE_LEN = 4000


def _truncate(text: str, limit: int = _TRUNCATE_LEN) -> str:
    """Truncate text to *limit* characters with an ellipsis."""
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + " ..."


class FileDisplay:
    """Renders operation results for a terminal."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def show_error(self, result: OperationResult) -> None:
        kind = result.kind.value if result.kind else "Error"
        self._console.print(
            Panel(Text(result.error or ""), title=f"[bold red]{kind}[/bold red]", border_style="red")
        )

    def show_read(self, data: dict[str, Any]) -> None:
        subtitle = f"{data['sizeFormatted']} · {data['mimeType']}"
        if data["isBinary"]:
            body = Text(f"{data['content']}\n{data['message']}", style="yellow")
        else:
            body = Text(_truncate(data["content"]))
        title = f"[bold]{escape(data['path'])}[/bold]"
        self._console.print(Panel(body, title=title, subtitle=escape(subtitle)))

    def _entry_table(self, title: str, rows: list[dict[str, Any]]) -> Table:
        table = Table(title=title, show_lines=False)
        table.add_column("Name", style="bold")
        table.add_column("Type")
        table.add_column("Size", justify="right")
        table.add_column("Modified")
        table.add_column("MIME", style="dim")
        for row in rows:
            style = "cyan" if row["type"] == "directory" else None
            table.add_row(
                Text(row["name"], style=style or ""),
                row["type"],
                row["sizeFormatted"],
                row["lastModified"],
                row.get("mimeType") or "",
            )
        return table

    def show_listing(self, data: dict[str, Any]) -> None:
        title = escape(f"{data['path']} ({data['count']} items)")
        self._console.print(self._entry_table(title, data["items"]))

    def show_search(self, data: dict[str, Any]) -> None:
        mode = "recursive" if data["recursive"] else "top level"
        title = escape(
            f"{data['pattern']} in {data['searchPath']} ({mode}, {data['count']} found)"
        )
        rows = [{**r, "name": r["path"]} for r in data["results"]]
        self._console.print(self._entry_table(title, rows))

    def show_info(self, data: dict[str, Any]) -> None:
        table = Table(show_header=False, box=None)
        table.add_column("Field", style="bold")
        table.add_column("Value")
        for key, value in data.items():
            table.add_row(key, Text("" if value is None else str(value)))
        title = f"[bold]{escape(data['name'] or data['path'])}[/bold]"
        self._console.print(Panel(table, title=title))

    def show_policy(self, policy: PolicyConfig) -> None:
        table = Table(show_header=False, box=None)
        table.add_column("Setting", style="bold")
        table.add_column("Value")
        extensions = sorted(ext or "(none)" for ext in policy.allowed_extensions)
        table.add_row("Allowed extensions", Text(", ".join(extensions)))
        table.add_row(
            "Restricted paths",
            Text("\n".join(policy.restricted_prefixes) or "(none)"),
        )
        table.add_row("Max file size", f"{policy.max_file_size_bytes} bytes")
        for category, enabled in policy.category_enabled.items():
            label = "[green]on[/green]" if enabled else "[red]off[/red]"
            table.add_row(f"{category.label} files", label)
        self._console.print(Panel(table, title="[bold]Effective policy[/bold]"))
