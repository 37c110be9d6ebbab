"""
KitchenLedger CLI — command-line interface.

Usage:
    kitchenledger inventory --data exports/ --year 2025 --month 3
    kitchenledger food-cost --data exports/ --year 2025 --month 3 -o food_cost.md
    kitchenledger dish-cost --data exports/ --dish carbonara
    kitchenledger scale-recipe --data exports/ --recipe ragu --target 5
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from kitchenledger import __version__

if TYPE_CHECKING:
    from kitchenledger.engine import KitchenLedger

app = typer.Typer(
    name="kitchenledger",
    help="KitchenLedger — food costing and inventory reconciliation",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()

_DATA_OPTION = typer.Option(None, "--data", "-d", help="Directory of CSV exports")
_CONFIG_OPTION = typer.Option("kitchenledger.yaml", "--config", "-c", help="Path to config file")


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold]KitchenLedger[/bold] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """KitchenLedger — real food cost, stock variance, real vs theoretical."""


def _build_ledger(config: str, data: str | None) -> KitchenLedger:
    from kitchenledger.config import ConnectorConfig, KitchenLedgerConfig
    from kitchenledger.engine import KitchenLedger

    config_path = config if Path(config).exists() else None
    cfg = KitchenLedgerConfig.load(config_path)
    if data:
        cfg.connectors.append(ConnectorConfig(type="csv", options={"data_dir": data}))

    logging.basicConfig(
        level=cfg.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    ledger = KitchenLedger(config=cfg)
    ledger._setup()
    if not len(ledger.connector_registry):
        console.print("[red]Error: Provide --data or configure a connector[/red]")
        raise typer.Exit(1)
    return ledger


def _default_period(year: int | None, month: int | None) -> tuple[int, int]:
    today = date.today()
    return year or today.year, month or today.month


@app.command()
def inventory(
    data: str = _DATA_OPTION,
    config: str = _CONFIG_OPTION,
    year: int = typer.Option(None, "--year", "-y", help="Year (default: current)"),
    month: int = typer.Option(None, "--month", "-m", help="Month 1-12 (default: current)"),
    output: str = typer.Option(None, "--output", "-o", help="Save report (.md or .json)"),
) -> None:
    """Reconcile counted stock against movements, waste, staff meals and sales."""
    from kitchenledger.analyzers.reconciliation import ReconciliationEngine
    from kitchenledger.exporters.markdown import render_inventory_markdown

    ledger = _build_ledger(config, data)
    year, month = _default_period(year, month)

    console.print(Panel.fit(
        f"[bold blue]KitchenLedger[/bold blue] — Inventory {year:04d}-{month:02d}",
        subtitle=f"v{__version__}",
    ))

    with console.status("[bold green]Reconciling...[/bold green]"):
        dataset = asyncio.run(ledger.load_dataset())
        report = ReconciliationEngine(dataset).reconcile_month(year, month)

    currency = ledger.config.currency
    table = Table(title="Inventory Reconciliation", show_lines=False)
    table.add_column("Product", style="bold")
    table.add_column("Initial", justify="right")
    table.add_column("IN", justify="right")
    table.add_column("OUT", justify="right")
    table.add_column("Final", justify="right")
    table.add_column("Variance", justify="right")
    table.add_column("Value", justify="right")
    for item in report.items:
        color = "green" if item.is_balanced else ("red" if item.variance > 0 else "yellow")
        table.add_row(
            f"{item.product_name} ({item.unit})",
            f"{item.initial_quantity:.2f}",
            f"{item.total_in:.2f}",
            f"{item.total_out:.2f}",
            f"{item.final_quantity:.2f}",
            f"[{color}]{item.variance:+.2f}[/{color}]",
            f"{currency}{item.variance_value:,.2f}",
        )
    console.print(table)
    console.print(
        f"Closing stock value: [bold]{currency}{report.total_final_value:,.2f}[/bold]  "
        f"Variance value: [bold]{currency}{report.total_variance_value:,.2f}[/bold]"
    )

    if output:
        _save(output, render_inventory_markdown(report, currency), report.to_dict())


@app.command("food-cost")
def food_cost(
    data: str = _DATA_OPTION,
    config: str = _CONFIG_OPTION,
    year: int = typer.Option(None, "--year", "-y", help="Year (default: current)"),
    month: int = typer.Option(None, "--month", "-m", help="Month 1-12 (default: current)"),
    output: str = typer.Option(None, "--output", "-o", help="Save report (.md or .json)"),
) -> None:
    """Real vs theoretical food cost for a calendar month."""
    from kitchenledger.exporters.markdown import render_food_cost_markdown

    ledger = _build_ledger(config, data)
    year, month = _default_period(year, month)

    with console.status("[bold green]Computing food cost...[/bold green]"):
        metrics = asyncio.run(ledger.food_cost(year, month))

    currency = ledger.config.currency
    table = Table(title=f"Food Cost {year:04d}-{month:02d}", show_lines=True)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Food sales (net)", f"{currency}{metrics.total_food_sales:,.2f}")
    table.add_row("Real food cost", f"{currency}{metrics.total_food_cost:,.2f}")
    table.add_row("Real food cost %", f"{metrics.food_cost_percentage:.1f}%")
    table.add_row("Theoretical food cost %", f"{metrics.theoretical_food_cost_percentage:.1f}%")
    table.add_row("Real vs theoretical", f"{metrics.real_vs_theoretical_diff:+.1f} pts")
    console.print(table)
    if not metrics.has_sales:
        console.print("[dim]No sales recorded for this month — percentages reported as 0.[/dim]")

    if output:
        _save(output, render_food_cost_markdown(metrics, currency), metrics.to_dict())


@app.command("dish-cost")
def dish_cost(
    data: str = _DATA_OPTION,
    config: str = _CONFIG_OPTION,
    dish: str = typer.Option(None, "--dish", help="Dish id (default: all dishes)"),
    target: float = typer.Option(None, "--target", "-t", help="Target food cost %"),
    output: str = typer.Option(None, "--output", "-o", help="Save report (.md or .json)"),
) -> None:
    """Nominal vs real dish cost and suggested selling price."""
    from kitchenledger.analyzers.cost_model import CostingError
    from kitchenledger.exporters.markdown import render_dish_costs_markdown

    ledger = _build_ledger(config, data)
    dataset = asyncio.run(ledger.load_dataset())
    resolver = ledger.resolver(dataset)

    try:
        analyses = (
            [resolver.analyze_dish(dish, target)] if dish
            else resolver.analyze_all_dishes(target)
        )
    except (CostingError, KeyError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    currency = ledger.config.currency
    table = Table(title="Dish Costs")
    table.add_column("Dish", style="bold")
    table.add_column("Nominal", justify="right")
    table.add_column("Real", justify="right")
    table.add_column("Net price", justify="right")
    table.add_column("Real FC %", justify="right")
    table.add_column("Suggested (gross)", justify="right")
    for a in analyses:
        table.add_row(
            a.dish_name,
            f"{currency}{a.nominal_cost:,.2f}",
            f"{currency}{a.real_cost:,.2f}",
            f"{currency}{a.net_price:,.2f}",
            f"{a.real_food_cost_pct:.1f}%" if a.is_priced else "n/a",
            f"{currency}{a.suggested_gross_price:,.2f}",
        )
    console.print(table)

    if output:
        _save(output, render_dish_costs_markdown(analyses, currency), [a.to_dict() for a in analyses])


@app.command("scale-recipe")
def scale_recipe(
    recipe: str = typer.Option(..., "--recipe", "-r", help="Recipe id"),
    target: float = typer.Option(..., "--target", "-t", help="Finished quantity to produce"),
    data: str = _DATA_OPTION,
    config: str = _CONFIG_OPTION,
) -> None:
    """Raw quantities to buy for a target finished yield."""
    from kitchenledger.analyzers.cost_model import CostingError

    ledger = _build_ledger(config, data)
    dataset = asyncio.run(ledger.load_dataset())

    try:
        scaled = ledger.resolver(dataset).scale_recipe(recipe, target)
    except (CostingError, KeyError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    currency = ledger.config.currency
    table = Table(title=f"{scaled.recipe_name} × {scaled.target_quantity:g}")
    table.add_column("Product", style="bold")
    table.add_column("Raw to buy", justify="right")
    table.add_column("Finished", justify="right")
    table.add_column("Cost", justify="right")
    for ing in scaled.ingredients:
        table.add_row(
            ing.product_name or ing.product_id,
            f"{ing.raw_quantity:.3f}",
            f"{ing.finished_quantity:.3f}",
            f"{currency}{ing.cost:,.2f}",
        )
    console.print(table)
    if scaled.weight_adjustment:
        console.print(f"[dim]Weight adjustment {scaled.weight_adjustment:+g}% applied to raw quantities[/dim]")
    console.print(f"Total cost: [bold]{currency}{scaled.total_cost:,.2f}[/bold]")


def _save(output: str, markdown: str, payload: object) -> None:
    """Save a result to file."""
    path = Path(output)
    if path.suffix == ".json":
        content = json.dumps(payload, indent=2, default=str)
    else:
        content = markdown

    path.write_text(content)
    console.print(f"[green]✓[/green] Report saved to [bold]{path}[/bold]")


if __name__ == "__main__":
    app()
