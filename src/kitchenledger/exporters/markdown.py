"""
Markdown report exporter.

Renders inventory reconciliation and monthly food cost results as Markdown,
suitable for GitHub, Notion, or any Markdown viewer.
"""

from __future__ import annotations

from kitchenledger.analyzers.composition import DishCostAnalysis
from kitchenledger.analyzers.cost_model import format_price
from kitchenledger.analyzers.reconciliation import FoodCostMetrics, ReconciliationReport


def render_inventory_markdown(report: ReconciliationReport, currency: str = "€") -> str:
    """Render a ReconciliationReport as Markdown."""
    lines: list[str] = []

    lines.append("# Inventory Reconciliation")
    lines.append("")
    if report.period_start and report.period_end:
        lines.append(f"*Period: {report.period_start} to {report.period_end}*")
        lines.append("")

    lines.append("| Metric | Value |")
    lines.append("|--------|-------|")
    lines.append(f"| **Products** | {len(report.items)} |")
    lines.append(f"| **Discrepancies** | {len(report.discrepancies)} |")
    lines.append(f"| **Closing stock value** | {format_price(report.total_final_value, currency)} |")
    lines.append(f"| **Variance value** | {format_price(report.total_variance_value, currency)} |")
    lines.append("")

    if report.uncounted:
        lines.append(
            f"> {len(report.uncounted)} product(s) have no inventory count; "
            "their initial and final quantities are taken as 0."
        )
        lines.append("")

    lines.append("## Products")
    lines.append("")
    lines.append("| Product | Initial | IN | OUT | Final | Variance | Variance value |")
    lines.append("|---------|--------:|---:|----:|------:|---------:|---------------:|")
    for item in sorted(report.items, key=lambda i: abs(i.variance_value), reverse=True):
        lines.append(
            f"| {item.product_name} ({item.unit}) "
            f"| {item.initial_quantity:.2f} | {item.total_in:.2f} | {item.total_out:.2f} "
            f"| {item.final_quantity:.2f} | {item.variance:+.2f} "
            f"| {format_price(item.variance_value, currency)} |"
        )
    lines.append("")

    lines.append("## OUT breakdown")
    lines.append("")
    lines.append("| Product | Sales movements | Waste | Staff meals | Dish sales |")
    lines.append("|---------|----------------:|------:|------------:|-----------:|")
    for item in report.items:
        m = item.movements
        lines.append(
            f"| {item.product_name} | {m.sales_out:.2f} | {m.waste_out:.2f} "
            f"| {m.personal_meals_out:.2f} | {m.dish_sales_out:.2f} |"
        )
    lines.append("")

    return "\n".join(lines)


def render_food_cost_markdown(metrics: FoodCostMetrics, currency: str = "€") -> str:
    """Render monthly FoodCostMetrics as Markdown."""
    lines: list[str] = []

    lines.append(f"# Food Cost — {metrics.year:04d}-{metrics.month:02d}")
    lines.append("")
    lines.append("| Metric | Value |")
    lines.append("|--------|-------|")
    lines.append(f"| **Food sales (net)** | {format_price(metrics.total_food_sales, currency)} |")
    lines.append(f"| **Real food cost** | {format_price(metrics.total_food_cost, currency)} |")
    lines.append(f"| **Real food cost %** | {metrics.food_cost_percentage:.1f}% |")
    lines.append(f"| **Theoretical food cost %** | {metrics.theoretical_food_cost_percentage:.1f}% |")
    lines.append(f"| **Real vs theoretical** | {metrics.real_vs_theoretical_diff:+.1f} pts |")
    lines.append("")

    if not metrics.has_sales:
        lines.append("> No sales recorded for this month; percentages are reported as 0.")
        lines.append("")
    elif metrics.real_vs_theoretical_diff > 0:
        lines.append(
            "> Actual consumption exceeds what recipes predict "
            "(spoilage, over-portioning or shrinkage)."
        )
        lines.append("")
    elif metrics.real_vs_theoretical_diff < 0:
        lines.append("> Recipes overstate the cost actually consumed.")
        lines.append("")

    return "\n".join(lines)


def render_dish_costs_markdown(analyses: list[DishCostAnalysis], currency: str = "€") -> str:
    """Render dish cost analyses as a Markdown table."""
    lines: list[str] = ["# Dish Costs", ""]
    lines.append("| Dish | Nominal | Real | Net price | Real FC % | Suggested (gross) |")
    lines.append("|------|--------:|-----:|----------:|----------:|------------------:|")
    for a in analyses:
        fc = f"{a.real_food_cost_pct:.1f}%" if a.is_priced else "n/a"
        lines.append(
            f"| {a.dish_name} | {format_price(a.nominal_cost, currency)} "
            f"| {format_price(a.real_cost, currency)} | {format_price(a.net_price, currency)} "
            f"| {fc} | {format_price(a.suggested_gross_price, currency)} |"
        )
    lines.append("")
    return "\n".join(lines)
