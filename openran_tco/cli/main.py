"""
CLI interface for OpenRAN TCO.

Provides command-line access to computation, persistence and sweeps.
"""

import logging
import sys
from dataclasses import replace
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from openran_tco.config.loader import (
    find_unresolved_scope_ids,
    load_scenario,
    load_sweep_parameters,
)
from openran_tco.core.engine import ComputeSummary, compute_scenario, resolve_assumptions
from openran_tco.core.sweep import run_sweep
from openran_tco.core.taxonomy import (
    CURRENCY_SYMBOLS,
    DAY_LABELS,
    DOMAIN_LABELS,
    LAYER_LABELS,
    Currency,
)
from openran_tco.storage.db import DEFAULT_DB_PATH
from openran_tco.storage.repository import ComputedFactRepository, initialize_schema

app = typer.Typer()
console = Console()
logger = logging.getLogger("openran_tco")

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging"
    )
):
    """OpenRAN TCO CLI."""
    _configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        console.print("OpenRAN TCO - Use --help to see available commands")


@app.command()
def init(
    db: str = typer.Option(DEFAULT_DB_PATH, "--db", help="SQLite database path")
):
    """Initialize the computed-fact database."""
    try:
        initialize_schema(db)
        console.print("[green]✓[/] Database initialized successfully")
        sys.exit(EXIT_CODE_PASS)
    except Exception as e:
        console.print(f"[red]Error initializing database:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)


@app.command("compute")
def compute_command(
    scenario: str = typer.Argument(..., help="Path to scenario YAML file"),
    breakdown: bool = typer.Option(
        False,
        "--breakdown",
        "-b",
        help="Show the per-input breakdown"
    ),
    persist: bool = typer.Option(
        False,
        "--persist",
        "-p",
        help="Store the result as computed facts"
    ),
    version_id: Optional[str] = typer.Option(
        None,
        "--version-id",
        help="Scenario version id to store the result under"
    ),
    db: str = typer.Option(DEFAULT_DB_PATH, "--db", help="SQLite database path")
):
    """
    Compute the TCO projection of a scenario file.

    Prints per-year CAPEX/OPEX/TCO/NPV, the day/domain rollup and totals.
    """
    if persist and not version_id:
        console.print("[red]Error:[/] --version-id is required with --persist")
        sys.exit(EXIT_CODE_FAIL)

    try:
        snapshot = load_scenario(scenario)
        for scope_id in find_unresolved_scope_ids(snapshot):
            logger.warning("Scope id %r is not in the topology; its inputs contribute 0", scope_id)

        assumptions = resolve_assumptions(snapshot)
        summary = compute_scenario(replace(snapshot, assumptions=assumptions))

        symbol = CURRENCY_SYMBOLS[assumptions.currency]
        _display_summary(summary, symbol, show_breakdown=breakdown)

        if persist:
            initialize_schema(db)
            rows = ComputedFactRepository(db).save_summary(version_id, summary)
            console.print(f"\n[green]✓[/] Stored {rows} computed facts for version {version_id}")

        sys.exit(EXIT_CODE_PASS)
    except Exception as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)


@app.command()
def facts(
    version_id: str = typer.Argument(..., help="Scenario version id"),
    metric: Optional[str] = typer.Option(None, "--metric", "-m", help="Filter by metric"),
    day: Optional[str] = typer.Option(None, "--day", help="Filter by day"),
    domain: Optional[str] = typer.Option(None, "--domain", help="Filter by domain"),
    year: Optional[int] = typer.Option(None, "--year", "-y", help="Filter by year"),
    db: str = typer.Option(DEFAULT_DB_PATH, "--db", help="SQLite database path")
):
    """Show stored computed facts of a scenario version."""
    try:
        repository = ComputedFactRepository(db)
        rows = repository.get_facts(version_id, metric=metric, day=day, domain=domain, year=year)
    except Exception as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    if not rows:
        console.print(f"\n[bold yellow]No computed facts found for version {version_id}[/]")
        console.print("Run `openran-tco compute <scenario> --persist --version-id <id>` first.\n")
        sys.exit(EXIT_CODE_PASS)

    table = Table(title=f"Computed facts: {version_id}")
    for column in ("Metric", "Year", "Day", "Domain", "Layer", "Bucket", "CAPEX", "OPEX", "TCO", "NPV"):
        table.add_column(column)
    for fact in rows:
        table.add_row(
            fact.metric,
            str(fact.year),
            fact.day or "",
            fact.domain or "",
            fact.layer or "",
            fact.bucket or "",
            _format_currency(fact.capex),
            _format_currency(fact.opex),
            _format_currency(fact.tco),
            _format_currency(fact.npv) if fact.npv is not None else ""
        )
    console.print(table)
    sys.exit(EXIT_CODE_PASS)


@app.command()
def sweep(
    scenario: str = typer.Argument(..., help="Path to scenario YAML file with a sweep section")
):
    """Run the scenario's parameter sweep and compare totals."""
    try:
        snapshot = load_scenario(scenario)
        parameters = load_sweep_parameters(scenario)
        if not parameters:
            console.print("\n[bold yellow]Scenario has no sweep section[/]\n")
            sys.exit(EXIT_CODE_PASS)

        runs = run_sweep(snapshot, parameters)
    except Exception as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    table = Table(title="Sweep Results")
    table.add_column("Run", justify="right")
    for parameter in parameters:
        table.add_column(parameter.bucket, justify="right")
    for column in ("Total CAPEX", "Total OPEX", "Total TCO", "Total NPV"):
        table.add_column(column, justify="right")

    for run in runs:
        table.add_row(
            str(run.run_index),
            *[f"{run.parameter_values[p.bucket]:,.2f}" for p in parameters],
            _format_currency(run.total_capex),
            _format_currency(run.total_opex),
            _format_currency(run.total_tco),
            _format_currency(run.total_npv)
        )
    console.print(table)
    sys.exit(EXIT_CODE_PASS)


def _configure_logging(verbose: bool) -> None:
    """Route package logging through rich, once."""
    if logger.handlers:
        logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
        return
    handler = RichHandler(console=console, show_path=False)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _format_currency(amount: float, symbol: str = CURRENCY_SYMBOLS[Currency.USD]) -> str:
    """Format currency with symbol and thousands separators."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def _display_summary(summary: ComputeSummary, symbol: str, show_breakdown: bool = False) -> None:
    """Display a compute summary in a clean, financial format."""
    console.print("\n[bold]TCO Projection[/bold]")
    console.print("-" * 40)

    years = Table(title="By Year")
    for column in ("Year", "CAPEX", "OPEX", "TCO", "NPV"):
        years.add_column(column, justify="right")
    for result in summary.by_year:
        years.add_row(
            str(result.year),
            _format_currency(result.capex, symbol),
            _format_currency(result.opex, symbol),
            _format_currency(result.tco, symbol),
            _format_currency(result.npv, symbol)
        )
    console.print(years)

    if summary.by_day_domain:
        rollup = Table(title="By Day / Domain (run-rate)")
        for column in ("Day:Domain", "CAPEX", "OPEX", "TCO"):
            rollup.add_column(column, justify="right")
        for key, totals in summary.by_day_domain.items():
            rollup.add_row(
                key,
                _format_currency(totals.capex, symbol),
                _format_currency(totals.opex, symbol),
                _format_currency(totals.tco, symbol)
            )
        console.print(rollup)

    if show_breakdown and summary.breakdown:
        detail = Table(title="Breakdown")
        for column in ("Day", "Domain", "Layer", "Bucket", "Year", "CAPEX", "OPEX", "TCO"):
            detail.add_column(column)
        for item in summary.breakdown:
            detail.add_row(
                DAY_LABELS[item.day],
                DOMAIN_LABELS[item.domain],
                LAYER_LABELS[item.layer],
                item.bucket,
                str(item.year),
                _format_currency(item.capex, symbol),
                _format_currency(item.opex, symbol),
                _format_currency(item.tco, symbol)
            )
        console.print(detail)

    console.print(f"\nTotal CAPEX: {_format_currency(summary.total_capex, symbol)}")
    console.print(f"Total OPEX: {_format_currency(summary.total_opex, symbol)}")
    console.print(f"Total TCO: {_format_currency(summary.total_tco, symbol)}")
    console.print(f"Total NPV: {_format_currency(summary.total_npv, symbol)}")


if __name__ == "__main__":
    app()
