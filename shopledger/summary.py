from datetime import date
from typing import Iterable

from . import reports, settings
from .schemas import Sale


def _money(value: float, currency: str) -> str:
    return f"{currency}{value:.2f}"


def render_daily_summary(
    sales: Iterable[Sale], day: date, currency: str = settings.CURRENCY_SYMBOL
) -> str:
    """
    Builds the printable end-of-day summary: overview totals, top performers,
    a per-product breakdown and the day's sales in the order they happened.
    """
    sales = list(sales)
    totals = reports.daily_totals(sales, day)
    best = reports.best_selling_today(sales, day)
    most_profitable = reports.most_profitable_today(sales, day)
    breakdown = reports.product_breakdown(sales, day)
    # Stored newest first; the printout reads oldest first.
    timeline = list(reversed(reports.sales_for_day(sales, day)))

    lines = [
        "DAILY SALES SUMMARY",
        f"Date: {day.month}/{day.day}/{day.year}",
        "",
        "OVERVIEW",
        f"Total Sales: {totals.count}",
        f"Total Revenue: {_money(totals.revenue, currency)}",
        f"Total Cost: {_money(totals.cost, currency)}",
        f"Total Profit: {_money(totals.profit, currency)}",
        f"Profit Margin: {totals.margin:.1f}%",
        "",
        "TOP PERFORMERS",
    ]

    if best:
        lines.append(f"Best Selling: {best.name} ({best.quantity} units)")
    else:
        lines.append("Best Selling: N/A (0 units)")
    if most_profitable:
        lines.append(
            f"Most Profitable: {most_profitable.name} "
            f"({_money(most_profitable.profit, currency)})"
        )
    else:
        lines.append(f"Most Profitable: N/A ({_money(0, currency)})")

    lines += ["", "PRODUCT BREAKDOWN"]
    for item in breakdown:
        lines.append(
            f"{item.name}: {item.quantity} units, "
            f"{_money(item.revenue, currency)} revenue, "
            f"{_money(item.profit, currency)} profit"
        )

    lines += ["", "SALES DETAILS"]
    for sale in timeline:
        lines.append(
            f"{sale.time} - {sale.product_name} x{sale.quantity} "
            f"@ {_money(sale.price, currency)} = {_money(sale.revenue, currency)}"
        )

    return "\n".join(lines) + "\n"
