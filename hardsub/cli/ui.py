"""UI utilities for run reporting using Rich."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from hardsub.types import BatchResult, RunSummary

console = Console()


def display_no_matches(out: Console = console) -> None:
    out.print("[yellow]No matching video/subtitle pairs found.[/yellow]")


def display_run_header(
    pair_count: int, encoder: str, batch_size: int, cpu_workers: int, out: Console = console
) -> None:
    """Display what is about to be processed.

    Args:
        pair_count: Number of matched pairs
        encoder: Video codec passed to the encoder
        batch_size: Pairs converted concurrently per batch
        cpu_workers: CPU cores available to the encoder, shown for reference
        out: Console to print to
    """
    config_table = Table.grid(padding=(0, 2))
    config_table.add_row("[bold]Matched pairs:[/bold]", str(pair_count))
    config_table.add_row("[bold]Video encoder:[/bold]", encoder)
    config_table.add_row("[bold]Batch size:[/bold]", str(batch_size))
    config_table.add_row("[bold]CPU workers:[/bold]", str(cpu_workers))

    out.print("\n[bold]Batch Configuration[/bold]")
    out.print(Panel(config_table, border_style="blue", padding=(0, 1)))


def display_batch_header(first: int, last: int, total: int, out: Console = console) -> None:
    out.print(f"\n[bold]Processing files {first} to {last} of {total}[/bold]")


def display_batch_summary(results: Sequence[BatchResult], out: Console = console) -> None:
    """Display per-batch counts and the failures with their error messages.

    Args:
        results: Outcomes of every conversion in the batch
        out: Console to print to
    """
    failed = [result for result in results if not result.success]
    summary_table = Table.grid(padding=(0, 2))
    summary_table.add_row("[bold]Succeeded:[/bold]", f"[green]{len(results) - len(failed)}[/green]")
    summary_table.add_row("[bold]Failed:[/bold]", f"[red]{len(failed)}[/red]")

    out.print("\n[bold]Batch complete[/bold]")
    out.print(Panel(summary_table, border_style="cyan", padding=(0, 1)))

    if failed:
        out.print("\n[bold red]Failed in this batch:[/bold red]")
        for index, result in enumerate(failed, start=1):
            out.print(f"{index}. {result.file}", markup=False, highlight=False)
            out.print(f"   Error: {result.error}", markup=False, highlight=False)


def display_final_summary(summary: RunSummary, out: Console = console) -> None:
    summary_table = Table.grid(padding=(0, 2))
    summary_table.add_row("[bold]Total files:[/bold]", str(summary.total))
    summary_table.add_row("[bold]Succeeded:[/bold]", f"[green]{summary.succeeded}[/green]")
    summary_table.add_row("[bold]Failed:[/bold]", f"[red]{summary.failed}[/red]")
    if summary.skipped:
        summary_table.add_row("[bold]Not started:[/bold]", f"[yellow]{summary.skipped}[/yellow]")

    out.print("\n[bold]Processing Summary[/bold]")
    out.print(Panel(summary_table, border_style="green", padding=(0, 1)))
