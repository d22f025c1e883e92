import pandas as pd
from typing import Iterable

from .schemas import ProductPerformance, Sale

SALE_COLUMNS = [
    "id",
    "productId",
    "productName",
    "price",
    "quantity",
    "date",
    "time",
    "profit",
]

PERFORMANCE_COLUMNS = ["productId", "name", "quantity", "revenue", "profit"]


def sales_frame(sales: Iterable[Sale]) -> pd.DataFrame:
    """
    Flattens sale records into a DataFrame in their stored order, with a derived
    'revenue' column. Dates stay as ISO strings so prefix/substring matching works.
    An empty input still yields the full column set.
    """
    rows = [sale.model_dump(mode="json", by_alias=True) for sale in sales]
    df = pd.DataFrame(rows, columns=SALE_COLUMNS)
    df = df.astype(
        {
            "id": str,
            "productId": str,
            "productName": str,
            "date": str,
            "time": str,
            "price": float,
            "quantity": int,
            "profit": float,
        }
    )
    df["revenue"] = df["price"] * df["quantity"]
    return df


def group_by_product(df: pd.DataFrame) -> pd.DataFrame:
    """
    Sums quantity, revenue and profit per product id.
    Groups keep the order in which each product first appears; the display name
    is taken from that first sale.
    """
    if df.empty:
        return pd.DataFrame(columns=PERFORMANCE_COLUMNS)

    return (
        df.groupby("productId", sort=False)
        .agg(
            name=("productName", "first"),
            quantity=("quantity", "sum"),
            revenue=("revenue", "sum"),
            profit=("profit", "sum"),
        )
        .reset_index()
    )


def to_performance(grouped: pd.DataFrame) -> list[ProductPerformance]:
    # numpy scalars are converted explicitly before validation
    return [
        ProductPerformance(
            product_id=str(row["productId"]),
            name=str(row["name"]),
            quantity=int(row["quantity"]),
            revenue=round(float(row["revenue"]), 2),
            profit=round(float(row["profit"]), 2),
        )
        for row in grouped.to_dict("records")
    ]
