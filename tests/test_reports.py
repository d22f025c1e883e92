"""Pure aggregation functions over sales, products and expenses."""

from datetime import date, datetime

import pytest

from shopledger import reports
from shopledger.errors import ValidationError
from shopledger.schemas import Expense

from conftest import TODAY

YESTERDAY = date(2026, 10, 18)


@pytest.fixture
def mixed_sales(make_sale):
    # stored newest first, like the ledger keeps them
    return [
        make_sale(product_id="a", name="Soda", quantity=1, price=5.0),
        make_sale(product_id="b", name="Cake", quantity=1, price=20.0, profit=12.0),
        make_sale(product_id="a", name="Soda", quantity=2, price=5.0),
        make_sale(product_id="b", name="Cake", quantity=3, price=20.0, profit=24.0, day=YESTERDAY),
    ]


# ---------------------------------------------------------------------------
# Daily totals
# ---------------------------------------------------------------------------


def test_daily_totals_only_counts_the_day(mixed_sales):
    totals = reports.daily_totals(mixed_sales, TODAY)

    assert totals.count == 3
    assert totals.revenue == 35.0
    assert totals.profit == 21.0
    assert totals.cost == 14.0
    assert totals.margin == 60.0


def test_daily_totals_margin_is_zero_without_revenue(make_sale):
    totals = reports.daily_totals([make_sale(day=YESTERDAY)], TODAY)

    assert totals.count == 0
    assert totals.revenue == 0
    assert totals.margin == 0


def test_daily_totals_is_idempotent(mixed_sales):
    assert reports.daily_totals(mixed_sales, TODAY) == reports.daily_totals(
        mixed_sales, TODAY
    )


def test_daily_totals_on_empty_history():
    totals = reports.daily_totals([], TODAY)

    assert (totals.count, totals.revenue, totals.profit) == (0, 0, 0)


# ---------------------------------------------------------------------------
# Period series
# ---------------------------------------------------------------------------


def test_daily_series_covers_last_seven_days(mixed_sales):
    series = reports.period_series(mixed_sales, "daily", datetime(2026, 10, 19, 9, 0))

    assert [b.key for b in series] == [
        "2026-10-13",
        "2026-10-14",
        "2026-10-15",
        "2026-10-16",
        "2026-10-17",
        "2026-10-18",
        "2026-10-19",
    ]
    assert series[0].label == "Oct 13"
    assert (series[-1].sales, series[-1].revenue, series[-1].profit) == (3, 35.0, 21.0)
    assert (series[-2].sales, series[-2].revenue) == (1, 60.0)
    assert sum(b.sales for b in series[:5]) == 0


def test_monthly_series_crosses_year_boundary(make_sale):
    sales = [
        make_sale(day=date(2025, 9, 3), price=10.0),
        make_sale(day=date(2026, 2, 1), price=4.0),
        make_sale(day=date(2025, 8, 30), price=99.0),
    ]

    series = reports.period_series(sales, "monthly", date(2026, 2, 10))

    assert [b.key for b in series] == [
        "2025-09",
        "2025-10",
        "2025-11",
        "2025-12",
        "2026-01",
        "2026-02",
    ]
    assert series[0].revenue == 10.0
    assert series[-1].revenue == 4.0
    assert sum(b.sales for b in series) == 2


def test_weekly_series_uses_day_of_month_matching(make_sale):
    sales = [
        make_sale(day=date(2026, 10, 19)),
        make_sale(day=date(2026, 10, 5)),
        # unrelated date that happens to contain a "5"
        make_sale(day=date(2025, 3, 1)),
    ]

    series = reports.period_series(sales, "weekly", date(2026, 10, 19))

    assert [b.key for b in series] == ["W28", "W5", "W12", "W19"]
    assert [b.sales for b in series] == [0, 2, 0, 1]


def test_period_series_on_empty_history():
    series = reports.period_series([], "monthly", TODAY)

    assert len(series) == 6
    assert all(b.sales == 0 and b.revenue == 0 for b in series)


def test_period_series_rejects_unknown_granularity():
    with pytest.raises(ValidationError):
        reports.period_series([], "hourly", TODAY)


# ---------------------------------------------------------------------------
# Product rankings
# ---------------------------------------------------------------------------


def test_top_products_sorted_by_revenue(make_sale):
    sales = [
        make_sale(product_id="a", name="Soda", quantity=2, price=5.0),
        make_sale(product_id="b", name="Cake", quantity=1, price=20.0),
        make_sale(product_id="a", name="Soda", quantity=1, price=5.0),
    ]

    top = reports.top_products(sales, 5)

    assert [p.product_id for p in top] == ["b", "a"]
    assert (top[1].quantity, top[1].revenue, top[1].profit) == (3, 15.0, 9.0)


def test_top_products_respects_limit_and_ties(make_sale):
    sales = [
        make_sale(product_id=pid, name=pid.upper(), price=5.0)
        for pid in ["a", "b", "c", "d", "e", "f"]
    ]

    top = reports.top_products(sales, 5)

    assert [p.product_id for p in top] == ["a", "b", "c", "d", "e"]


def test_top_products_empty():
    assert reports.top_products([]) == []


def test_product_breakdown_first_appearance_order(mixed_sales):
    breakdown = reports.product_breakdown(mixed_sales, TODAY)

    assert [p.product_id for p in breakdown] == ["a", "b"]
    assert breakdown[0].quantity == 3
    assert breakdown[1].revenue == 20.0


def test_top_selling_today_uses_catalog_names(mixed_sales, make_product):
    products = [make_product(product_id="a", name="Cola")]

    top = reports.top_selling_today(mixed_sales, products, TODAY)

    assert [(p.product_id, p.name, p.quantity) for p in top] == [
        ("a", "Cola", 3),
        ("b", "Unknown", 1),
    ]


def test_top_selling_today_limit(make_sale):
    sales = [
        make_sale(product_id=str(n), quantity=n) for n in range(1, 6)
    ]

    top = reports.top_selling_today(sales, [], TODAY, limit=3)

    assert [p.quantity for p in top] == [5, 4, 3]


def test_best_and_most_profitable_today(mixed_sales):
    assert reports.best_selling_today(mixed_sales, TODAY).product_id == "a"
    assert reports.most_profitable_today(mixed_sales, TODAY).product_id == "b"


def test_best_and_most_profitable_without_sales(mixed_sales):
    assert reports.best_selling_today(mixed_sales, date(2026, 1, 1)) is None
    assert reports.most_profitable_today([], TODAY) is None


def test_dashboard_summary(mixed_sales, make_product):
    products = [
        make_product(product_id="a", quantity=2, min_stock=5),
        make_product(product_id="b", name="Cake", quantity=9, min_stock=5),
    ]

    dashboard = reports.dashboard_summary(mixed_sales, products, TODAY)

    assert dashboard.totals.count == 3
    assert dashboard.sales_count == 3
    assert dashboard.product_count == 2
    assert dashboard.low_stock_count == 1
    assert [p.id for p in dashboard.low_stock] == ["a"]
    assert [p.product_id for p in dashboard.top_selling] == ["a", "b"]

    dumped = dashboard.model_dump(mode="json", by_alias=True)
    assert dumped["productCount"] == 2
    assert dumped["lowStock"][0]["minStock"] == 5


def test_dashboard_low_stock_alerts_are_capped(make_product):
    products = [
        make_product(product_id=str(n), quantity=n, min_stock=10) for n in range(7)
    ]
    products.append(make_product(product_id="full", quantity=50))

    dashboard = reports.dashboard_summary([], products, TODAY)

    assert dashboard.product_count == 8
    assert dashboard.low_stock_count == 7
    assert [p.id for p in dashboard.low_stock] == ["0", "1", "2", "3", "4"]
    assert dashboard.sales_count == 0


# ---------------------------------------------------------------------------
# Expenses
# ---------------------------------------------------------------------------


def _expense(expense_id, amount, day):
    return Expense(
        id=expense_id, category="Supplies", description="misc", amount=amount, date=day
    )


def test_expense_summary():
    expenses = [
        _expense("1", 10, TODAY),
        _expense("2", 5, TODAY),
        _expense("3", 40, date(2026, 10, 2)),
        _expense("4", 100, date(2026, 9, 30)),
    ]

    summary = reports.expense_summary(expenses, TODAY)

    assert (summary.today_count, summary.today_total) == (2, 15.0)
    assert (summary.month_count, summary.month_total) == (3, 55.0)
    assert summary.average_daily == pytest.approx(2.89)


def test_expense_summary_empty_month():
    summary = reports.expense_summary([_expense("4", 100, date(2026, 9, 30))], TODAY)

    assert summary.month_total == 0
    assert summary.average_daily == 0
