"""
Read-only aggregations over the product, sale and expense collections.

Every function here is pure: it takes the collections it needs as arguments,
never touches the store, and recomputes from scratch on each call. The result
depends only on the inputs and the date passed in as "today"/"now".
"""

from datetime import date, datetime, timedelta
from typing import Iterable, Optional

import pandas as pd

from . import frames, settings
from .errors import ValidationError
from .schemas import (
    DailyTotals,
    DashboardSummary,
    Expense,
    ExpenseSummary,
    PeriodBucket,
    Product,
    ProductPerformance,
    Sale,
    UnitMargin,
)
from .utils import round_money, shift_month, short_date_label


def _as_day(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


# --- Stock ---


def is_low_stock(product: Product) -> bool:
    return product.quantity <= product.min_stock


def low_stock_products(products: Iterable[Product]) -> list[Product]:
    return [p for p in products if is_low_stock(p)]


def in_stock_products(products: Iterable[Product]) -> list[Product]:
    """Products a sale can currently be recorded against."""
    return [p for p in products if p.quantity > 0]


def unit_margin(product: Product) -> UnitMargin:
    """
    Markup earned on one unit at the listed selling price. The percentage is of
    the selling price, one decimal, and 0 for an item given away.
    """
    amount = product.selling_price - product.cost_price
    percent = amount / product.selling_price * 100 if product.selling_price else 0.0
    return UnitMargin(amount=round_money(amount), percent=round(percent, 1))


# --- Sales ---


def sales_for_day(
    sales: Iterable[Sale], day: date, limit: Optional[int] = None
) -> list[Sale]:
    """The day's sales in stored order (newest first)."""
    matched = [sale for sale in sales if sale.date == day]
    return matched if limit is None else matched[:limit]


def _totals_from_frame(df: pd.DataFrame) -> tuple[int, float, float]:
    return len(df), float(df["revenue"].sum()), float(df["profit"].sum())


def daily_totals(sales: Iterable[Sale], day: date) -> DailyTotals:
    df = frames.sales_frame(sales)
    day_df = df[df["date"] == day.isoformat()]
    count, revenue, profit = _totals_from_frame(day_df)

    margin = (profit / revenue) * 100 if revenue > 0 else 0.0
    return DailyTotals(
        date=day,
        count=count,
        revenue=round_money(revenue),
        profit=round_money(profit),
        cost=round_money(revenue - profit),
        margin=round(margin, 2),
    )


def _period_masks(df: pd.DataFrame, granularity: str, today: date):
    """Yields (key, label, row mask) for each bucket, oldest first."""
    dates = df["date"]

    if granularity == "daily":
        for offset in range(6, -1, -1):
            day = today - timedelta(days=offset)
            key = day.isoformat()
            yield key, short_date_label(day), dates == key

    elif granularity == "monthly":
        for offset in range(5, -1, -1):
            year, month = shift_month(today, -offset)
            key = f"{year:04d}-{month:02d}"
            yield key, key, dates.str.startswith(key)

    else:
        # Weekly buckets are approximate: a sale lands in a bucket when its ISO
        # date merely contains that bucket's day-of-month as a substring.
        for offset in range(3, -1, -1):
            day = today - timedelta(days=offset * 7)
            key = f"W{day.day}"
            yield key, key, dates.str.contains(str(day.day), regex=False)


def period_series(
    sales: Iterable[Sale], granularity: str, now: date | datetime
) -> list[PeriodBucket]:
    """
    Fixed-size trend series: 7 days, 4 weeks or 6 months ending at `now`.
    """
    if granularity not in settings.PERIOD_GRANULARITIES:
        raise ValidationError(
            f"granularity must be one of {settings.PERIOD_GRANULARITIES}, got {granularity!r}"
        )

    df = frames.sales_frame(sales)
    buckets = []
    for key, label, mask in _period_masks(df, granularity, _as_day(now)):
        count, revenue, profit = _totals_from_frame(df[mask.astype(bool)])
        buckets.append(
            PeriodBucket(
                key=key,
                label=label,
                revenue=round_money(revenue),
                profit=round_money(profit),
                sales=count,
            )
        )
    return buckets


def top_products(
    sales: Iterable[Sale], limit: int = settings.TOP_PRODUCTS_LIMIT
) -> list[ProductPerformance]:
    """Best products by summed revenue across all given sales."""
    grouped = frames.group_by_product(frames.sales_frame(sales))
    grouped = grouped.sort_values("revenue", ascending=False, kind="stable")
    return frames.to_performance(grouped.head(limit))


def product_breakdown(sales: Iterable[Sale], day: date) -> list[ProductPerformance]:
    """Per-product totals for one day, in order of first appearance."""
    day_sales = sales_for_day(sales, day)
    return frames.to_performance(
        frames.group_by_product(frames.sales_frame(day_sales))
    )


def top_selling_today(
    sales: Iterable[Sale],
    products: Iterable[Product],
    today: date,
    limit: int = settings.TOP_SELLING_TODAY_LIMIT,
) -> list[ProductPerformance]:
    """
    Today's products ranked by units sold. Names come from the current catalog,
    so a product that no longer exists shows as "Unknown".
    """
    names = {p.id: p.name for p in products}
    ranked = sorted(
        product_breakdown(sales, today), key=lambda item: item.quantity, reverse=True
    )
    return [
        item.model_copy(
            update={"name": names.get(item.product_id, settings.UNKNOWN_PRODUCT_NAME)}
        )
        for item in ranked[:limit]
    ]


def best_selling_today(
    sales: Iterable[Sale], today: date
) -> Optional[ProductPerformance]:
    breakdown = product_breakdown(sales, today)
    if not breakdown:
        return None
    return max(breakdown, key=lambda item: item.quantity)


def most_profitable_today(
    sales: Iterable[Sale], today: date
) -> Optional[ProductPerformance]:
    breakdown = product_breakdown(sales, today)
    if not breakdown:
        return None
    return max(breakdown, key=lambda item: item.profit)


def dashboard_summary(
    sales: Iterable[Sale], products: Iterable[Product], today: date
) -> DashboardSummary:
    sales = list(sales)
    products = list(products)
    totals = daily_totals(sales, today)
    low = low_stock_products(products)
    return DashboardSummary(
        totals=totals,
        product_count=len(products),
        sales_count=totals.count,
        low_stock_count=len(low),
        low_stock=low[: settings.LOW_STOCK_ALERT_LIMIT],
        top_selling=top_selling_today(sales, products, today),
    )


# --- Expenses ---


def expense_summary(expenses: Iterable[Expense], today: date) -> ExpenseSummary:
    """
    Today's and month-to-date spend. The daily average spreads the month total
    over the days elapsed so far, including today.
    """
    expenses = list(expenses)
    month_prefix = today.isoformat()[:7]
    todays = [e for e in expenses if e.date == today]
    this_month = [e for e in expenses if e.date.isoformat().startswith(month_prefix)]

    month_total = sum(e.amount for e in this_month)
    return ExpenseSummary(
        today_count=len(todays),
        today_total=round_money(sum(e.amount for e in todays)),
        month_count=len(this_month),
        month_total=round_money(month_total),
        average_daily=round_money(month_total / today.day) if this_month else 0.0,
    )
