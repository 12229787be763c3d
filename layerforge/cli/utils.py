"""Shared CLI plumbing: exit codes, dual-mode output and logging setup.

Every command reports through ``Output`` so that the same run can be read
by a person (rich text and tables) or by a script (``--json``, one JSON
document on stdout when the command finishes).

Example:
    out = Output(console=console, json_mode=get_json_mode())
    out.success("Loaded collection spec", phases=2, target_editions=500)
    out.table("Phase 1 Layers", ["Layer", "Elements"], [["Background", "4"]])
    raise typer.Exit(out.finish())
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, PrivateAttr
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..core.models import EditionRecord, GenerationStats


class ExitCode:
    """Process exit codes shared by all commands.

        0 = Success
        1 = Validation error (bad collection spec, too few combinations)
        3 = File not found
        4 = Generation error (layer configuration or DNA error)
        5 = Uniqueness exhausted (tolerance reached before the target size)
    """

    SUCCESS = 0
    VALIDATION_ERROR = 1
    FILE_NOT_FOUND = 3
    GENERATION_ERROR = 4
    EXHAUSTED = 5


class Output(BaseModel):
    """Collects a command's results for either rich or JSON rendering."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    console: Console
    json_mode: bool = False

    _data: dict[str, Any] = PrivateAttr(default_factory=dict)
    _errors: list[dict[str, str]] = PrivateAttr(default_factory=list)
    _exit_code: int = PrivateAttr(default=ExitCode.SUCCESS)

    @property
    def failed(self) -> bool:
        return self._exit_code != ExitCode.SUCCESS

    def _say(self, message: str) -> None:
        if not self.json_mode:
            self.console.print(message)

    def success(self, message: str, **data: Any) -> None:
        """Report progress; keyword data is kept for JSON output."""
        self._data.update(data)
        self._say(f"[green]✓[/green] {message}")

    def error(
        self,
        message: str,
        *,
        suggestion: str | None = None,
        exit_code: int = ExitCode.VALIDATION_ERROR,
    ) -> None:
        """Report a failure. The last error decides the exit code."""
        self._exit_code = exit_code
        entry = {"message": message}
        if suggestion:
            entry["suggestion"] = suggestion
        self._errors.append(entry)

        self._say(f"[red]✗[/red] {message}")
        if suggestion:
            self._say(f"  [dim]→ {suggestion}[/dim]")

    def text(self, message: str) -> None:
        self._say(message)

    def blank(self) -> None:
        self._say("")

    def divider(self) -> None:
        self._say("═" * 60)

    def table(
        self,
        title: str,
        columns: list[str],
        rows: list[list[str]],
        *,
        data_key: str | None = None,
        styles: list[str | None] | None = None,
    ) -> None:
        """Show a table, or store its rows as dicts under ``data_key``.

        The JSON key defaults to the snake_cased title.
        """
        if self.json_mode:
            key = data_key or title.lower().replace(" ", "_")
            self._data[key] = [dict(zip(columns, row)) for row in rows]
            return

        table = Table(title=title, show_header=True, header_style="bold")
        for i, column in enumerate(columns):
            style = styles[i] if styles and i < len(styles) else None
            # first column is a label, the rest are counts and scores
            table.add_column(column, style=style, justify="left" if i == 0 else "right")
        for row in rows:
            table.add_row(*row)
        self.console.print(table)

    def set_data(self, key: str, value: Any) -> None:
        self._data[key] = value

    def finish(self) -> int:
        """Emit the JSON document (JSON mode) and return the exit code."""
        if self.json_mode:
            document = {
                "status": "error" if self.failed else "success",
                **self._data,
                "errors": self._errors,
                "exit_code": self._exit_code,
            }
            print(json.dumps(document, indent=2, default=str))
        return self._exit_code


# =============================================================================
# Formatting helpers
# =============================================================================


def format_elapsed(seconds: float) -> str:
    """Format elapsed seconds as Xm Ys or Xs."""
    if seconds >= 60:
        mins = int(seconds // 60)
        secs = int(seconds % 60)
        return f"{mins}m {secs}s"
    return f"{seconds:.0f}s"


def rarest_rows(
    editions: list[EditionRecord], top: int, with_dna: bool = False
) -> list[list[str]]:
    """Table rows for the ``top`` best-ranked editions."""
    ranked = sorted(editions, key=lambda record: record.rank or 0)[:top]
    rows = []
    for record in ranked:
        row = [str(record.rank), str(record.edition), f"{record.score:.2f}"]
        if with_dna:
            row.append(record.dna_hash[:12])
        rows.append(row)
    return rows


def format_generation_stats_for_json(stats: GenerationStats) -> dict[str, Any]:
    """Generation counters in the shape used by ``generate --json``."""
    return {
        "accepted": stats.accepted,
        "duplicates": stats.duplicates,
        "phases": stats.phases,
        "layer_counts": stats.layer_counts,
    }


# =============================================================================
# Logging
# =============================================================================


def setup_logging(
    console: Console,
    verbose: bool = False,
    debug: bool = False,
    default_level: str = "WARNING",
) -> None:
    """Route layerforge logs through rich at the requested level.

    ``--debug`` beats ``--verbose``, which beats the configured default.
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.getLevelName(default_level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
        force=True,
    )
    logging.getLogger("layerforge").setLevel(level)
    # Pillow's plugin loader is chatty at DEBUG
    logging.getLogger("PIL").setLevel(logging.WARNING)
