"""CLI interface using Typer."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from datetime import date, timedelta
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from vaultbudget.analytics.engine import analyze
from vaultbudget.analytics.ema import trend_series
from vaultbudget.analytics.macros import MacroGrams, macro_budgets
from vaultbudget.analytics.models import BudgetEstimate, MaintenanceEstimate
from vaultbudget.analytics.serialization import (
    recompute_budget,
    serialize_budget,
    serialize_maintenance,
)
from vaultbudget.analytics.series import DailySeries
from vaultbudget.app_logging import configure_logging
from vaultbudget.config import Settings, get_settings
from vaultbudget.data import SeriesLoader

app = typer.Typer(
    help="Maintenance calorie estimation and weekly budgeting",
    no_args_is_help=True,
)
console = Console()

config_app = typer.Typer(help="Show or create the settings file")
app.add_typer(config_app, name="config")


# ============================================================================
# Helpers
# ============================================================================


def output_json(response: dict, file=None) -> None:
    """Output JSON response to stdout or file."""
    json_str = json.dumps(response, indent=2)
    if file:
        file.write(json_str)
    else:
        print(json_str)


def fail(message: str, json_output: bool, command: str) -> None:
    """Report an error and exit with status 1."""
    if json_output:
        output_json({"success": False, "command": command, "errors": [message]})
    else:
        console.print(f"[red]{message}[/red]")
    raise typer.Exit(1)


def parse_date(date_str: Optional[str]) -> date:
    """Parse YYYY-MM-DD, defaulting to today."""
    if date_str:
        return date.fromisoformat(date_str)
    return date.today()


def maintenance_table(estimate: MaintenanceEstimate) -> Table:
    table = Table(title=f"Maintenance as of {estimate.reference_date.isoformat()}")
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Maintenance", f"{estimate.maintenance:.0f} kcal/day")
    table.add_row("Weight confidence", f"{estimate.confidence:.2f}")
    table.add_row("Intake confidence", f"{estimate.intake_confidence:.2f}")
    table.add_row("Weight slope", f"{estimate.weight_slope:+.2f} kg/week")
    if estimate.slope_clamped:
        table.add_row("Raw weight slope", f"{estimate.raw_weight_slope:+.2f} kg/week")
    smoothed = estimate.smoothed_intake
    table.add_row("Smoothed intake", "-" if smoothed is None else f"{smoothed:.0f} kcal")
    table.add_row("Energy density", f"{estimate.rho:.0f} kcal/kg")
    table.add_row(
        "Fallback",
        f"{estimate.fallback_maintenance:.0f} kcal ({estimate.fallback_source})",
    )
    return table


def budget_table(budget: BudgetEstimate, consumed_today: float) -> Table:
    table = Table(title="Budget")
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Base budget", f"{budget.base_budget:.0f} kcal")
    table.add_row("Week start", budget.week_start.isoformat())
    table.add_row("Days left", str(budget.days_remaining_in_week))
    table.add_row("Credit", f"{budget.credit:+.0f} kcal")
    table.add_row("Daily adjustment", f"{budget.delta_adjustment:+.0f} kcal")
    table.add_row("Budget", f"[bold]{budget.final_budget:.0f} kcal[/bold]")
    table.add_row("Remaining today", f"{budget.remaining(consumed_today):.0f} kcal")
    return table


def macro_summary(settings: Settings, budget: BudgetEstimate) -> Optional[MacroGrams]:
    macros = settings.budget.macros
    if macros.protein is None and macros.fat is None and macros.carbs is None:
        return None
    return macro_budgets(
        budget.base_budget,
        protein_pct=macros.protein,
        fat_pct=macros.fat,
        carbs_pct=macros.carbs,
    )


# ============================================================================
# Main Commands
# ============================================================================


@app.command()
def estimate(
    weight_csv: Path = typer.Option(..., "--weight", "-w", help="Weight CSV (date,value in kg)"),
    intake_csv: Path = typer.Option(..., "--intake", "-i", help="Intake CSV (date,value in kcal)"),
    body_fat_csv: Optional[Path] = typer.Option(
        None, "--body-fat", "-b", help="Body-fat CSV (date,value as 0-1 fraction)"
    ),
    date_str: Optional[str] = typer.Option(
        None, "--date", "-d", help="Reference date (YYYY-MM-DD, default: today)"
    ),
    adjustment: Optional[float] = typer.Option(
        None, "--adjustment", "-a", help="Daily adjustment in kcal (default: from settings)"
    ),
    first_weekday: Optional[int] = typer.Option(
        None, "--first-weekday", help="Week start, 1=Sunday ... 7=Saturday"
    ),
    snapshot: Optional[Path] = typer.Option(
        None, "--save-snapshot", help="Write the maintenance snapshot to this JSON file"
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Settings YAML"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log fallback decisions"),
) -> None:
    """Estimate maintenance calories and today's budget."""
    configure_logging(logging.DEBUG if verbose else logging.WARNING)

    try:
        settings = get_settings(config_path)
        reference_date = parse_date(date_str)
        loader = SeriesLoader()
        weight = loader.load_metric(weight_csv, "weight")
        intake = loader.load_metric(intake_csv, "intake")
        body_fat = (
            loader.load_metric(body_fat_csv, "body_fat") if body_fat_csv else DailySeries()
        )
    except (ValueError, FileNotFoundError) as e:
        fail(str(e), json_output, "estimate")
        return

    weekday = first_weekday if first_weekday is not None else settings.budget.first_weekday
    if not 1 <= weekday <= 7:
        fail(f"first weekday must be between 1 and 7, got {weekday}", json_output, "estimate")
    daily_adjustment = adjustment if adjustment is not None else settings.budget.adjustment

    # Today's intake is partial: keep it out of the maintenance estimate
    yesterday = reference_date - timedelta(days=1)
    consumed_today = intake.between(reference_date, reference_date).total()

    maintenance, budget = analyze(
        weight,
        intake.through(yesterday),
        body_fat,
        reference_date,
        week_intake=intake,
        adjustment=daily_adjustment,
        first_weekday=weekday,
        config=settings.engine,
    )
    macros = macro_summary(settings, budget)

    if snapshot:
        snapshot.write_text(json.dumps(serialize_maintenance(maintenance), indent=2))

    if json_output:
        data = {
            "maintenance": serialize_maintenance(maintenance),
            "budget": serialize_budget(budget),
            "flags": maintenance.active_flags() + budget.active_flags(),
            "remaining_today": budget.remaining(consumed_today),
        }
        if macros is not None:
            data["macros"] = asdict(macros)
        output_json({
            "success": True,
            "command": "estimate",
            "data": data,
            "human_summary": (
                f"Maintenance {maintenance.maintenance:.0f} kcal/day, "
                f"budget {budget.final_budget:.0f} kcal today"
            ),
        })
        return

    console.print(maintenance_table(maintenance))
    console.print(budget_table(budget, consumed_today))
    if macros is not None:
        console.print(
            f"Macros: protein {macros.protein or 0:.0f} g, "
            f"fat {macros.fat or 0:.0f} g, carbs {macros.carbs or 0:.0f} g"
        )
    flags = maintenance.active_flags() + budget.active_flags()
    if flags:
        console.print(Panel(", ".join(flags), title="Flags", border_style="yellow"))


@app.command()
def budget(
    snapshot: Path = typer.Option(..., "--snapshot", "-s", help="Maintenance snapshot JSON"),
    intake_csv: Optional[Path] = typer.Option(
        None, "--intake", "-i", help="Intake CSV covering this week"
    ),
    adjustment: Optional[float] = typer.Option(None, "--adjustment", "-a", help="Daily adjustment"),
    first_weekday: Optional[int] = typer.Option(
        None, "--first-weekday", help="Week start, 1=Sunday ... 7=Saturday"
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Settings YAML"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Recompute the budget from a stored maintenance snapshot."""
    try:
        settings = get_settings(config_path)
        data = json.loads(snapshot.read_text())
        intake = (
            SeriesLoader().load_metric(intake_csv, "intake") if intake_csv else DailySeries()
        )
        result = recompute_budget(
            data,
            week_intake=intake,
            adjustment=adjustment if adjustment is not None else settings.budget.adjustment,
            first_weekday=(
                first_weekday if first_weekday is not None else settings.budget.first_weekday
            ),
            config=settings.engine,
        )
    except (ValueError, FileNotFoundError) as e:
        fail(str(e), json_output, "budget")
        return

    consumed_today = intake.between(result.reference_date, result.reference_date).total()
    if json_output:
        output_json({
            "success": True,
            "command": "budget",
            "data": {
                "budget": serialize_budget(result),
                "flags": result.active_flags(),
                "remaining_today": result.remaining(consumed_today),
            },
            "human_summary": f"Budget {result.final_budget:.0f} kcal on {result.reference_date}",
        })
    else:
        console.print(budget_table(result, consumed_today))


@app.command()
def trend(
    weight_csv: Path = typer.Option(..., "--weight", "-w", help="Weight CSV (date,value in kg)"),
    days: int = typer.Option(30, "--days", "-d", help="Days to show"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Settings YAML"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show daily weights beside the gap-aware EMA trend."""
    try:
        settings = get_settings(config_path)
        weight = SeriesLoader().load_metric(weight_csv, "weight")
    except (ValueError, FileNotFoundError) as e:
        fail(str(e), json_output, "trend")
        return

    if not weight:
        fail("No weight entries found", json_output, "trend")

    trends = trend_series(weight, settings.engine.smoothing_alpha)
    rows = list(zip(weight.days, weight.values, trends))
    end = weight.days[-1]
    rows = [row for row in rows if (end - row[0]).days < days]

    if json_output:
        output_json({
            "success": True,
            "command": "trend",
            "data": {
                "entries": [
                    {"date": d.isoformat(), "weight_kg": w, "trend_kg": round(t, 2)}
                    for d, w, t in rows
                ],
            },
            "human_summary": f"Trend: {trends[-1]:.1f} kg",
        })
        return

    table = Table(title=f"Weight trend (last {days} days)")
    table.add_column("Date", style="cyan")
    table.add_column("Weight", justify="right")
    table.add_column("Trend", justify="right")
    for d, w, t in rows:
        table.add_row(d.isoformat(), f"{w:.1f}", f"{t:.1f}")
    console.print(table)


# ============================================================================
# Settings Commands
# ============================================================================


@config_app.command("show")
def config_show(
    config_path: Optional[Path] = typer.Option(None, "--config", help="Settings YAML"),
) -> None:
    """Print the effective settings."""
    try:
        settings = get_settings(config_path)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    output_json(settings.to_dict())


@config_app.command("init")
def config_init(
    config_path: Path = typer.Option(..., "--config", help="Where to write the settings YAML"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Write a settings file with the default values."""
    if config_path.exists() and not force:
        console.print(f"[yellow]{config_path} already exists (use --force)[/yellow]")
        raise typer.Exit(1)
    Settings().save(config_path)
    console.print(f"[green]Wrote[/green] {config_path}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
