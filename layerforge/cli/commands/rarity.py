"""Rarity command: re-rank an existing metadata document."""

from pathlib import Path

import typer

from ...metadata import load_metadata_document
from ...rarity import analyze_rarity, format_rarity_report
from ..app import app, console, get_json_mode
from ..utils import ExitCode, Output, rarest_rows


@app.command("rarity")
def rarity_command(
    metadata: Path = typer.Argument(..., help="Combined metadata file (_metadata.json)"),
    top: int = typer.Option(10, "--top", "-n", help="Number of rarest editions to show"),
    report: Path | None = typer.Option(
        None, "--report", "-r", help="Also write the rarity report to this file"
    ),
):
    """
    Recompute trait rarity and edition ranks from a metadata document.

    Examples:
        layerforge rarity build/json/_metadata.json
        layerforge rarity build/json/_metadata.json --top 25 -r rarity.txt
    """
    out = Output(console=console, json_mode=get_json_mode())

    try:
        editions = load_metadata_document(metadata)
    except FileNotFoundError:
        out.error(f"Metadata file not found: {metadata}", exit_code=ExitCode.FILE_NOT_FOUND)
        raise typer.Exit(out.finish())
    except (ValueError, KeyError) as e:
        out.error(f"Could not read editions from {metadata}: {e}")
        raise typer.Exit(out.finish())

    result = analyze_rarity(editions)
    total = result.total_editions
    out.success(
        f"Analyzed {total} editions ({len(result.trait_stats)} trait pairs)",
        total_editions=total,
    )

    trait_rows = [
        [key, str(stat.occurrence), f"{stat.occurrence / total:.1%}", f"{stat.score:.2f}"]
        for key, stat in sorted(
            result.trait_stats.items(), key=lambda item: -item[1].score
        )
    ]
    out.table(
        "Trait Rarity",
        ["Trait", "Occurrence", "Chance", "Score"],
        trait_rows,
        styles=["cyan", None, None, None],
    )

    out.table(
        "Rarest Editions",
        ["Rank", "Edition", "Score"],
        rarest_rows(result.editions, top),
        styles=["cyan", None, None],
    )

    if report:
        report.parent.mkdir(parents=True, exist_ok=True)
        report.write_text(
            "".join(f"{line}\n" for line in format_rarity_report(result)),
            encoding="utf-8",
        )
        out.success(f"Wrote rarity report to [bold]{report}[/bold]", report=str(report))

    raise typer.Exit(out.finish())
