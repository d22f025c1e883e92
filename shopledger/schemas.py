from datetime import date as Date
from typing import Literal, Optional
from pydantic import BaseModel, Field, model_validator

from . import settings


class Product(BaseModel):
    """
    A catalog entry and its current stock level.
    Stored with camelCase keys (the aliases) so the key-value blob stays portable.
    """

    id: str
    name: str = Field(..., min_length=1)
    category: str = settings.DEFAULT_CATEGORY
    cost_price: float = Field(..., ge=0, allow_inf_nan=False, alias="costPrice")
    selling_price: float = Field(..., ge=0, allow_inf_nan=False, alias="sellingPrice")
    quantity: int = Field(..., ge=0)
    min_stock: int = Field(default=settings.DEFAULT_MIN_STOCK, ge=0, alias="minStock")
    image_url: Optional[str] = Field(default=None, alias="imageUrl")

    class Config:
        populate_by_name = True
        frozen = True


class Sale(BaseModel):
    """
    One recorded sale. Price, name and profit are snapshots taken when the sale
    was recorded; later product edits never change them.
    """

    id: str
    product_id: str = Field(..., alias="productId")
    product_name: str = Field(..., alias="productName")
    price: float = Field(..., ge=0, allow_inf_nan=False)
    quantity: int = Field(..., gt=0)
    date: Date
    time: str
    profit: float = Field(..., allow_inf_nan=False)

    class Config:
        populate_by_name = True
        frozen = True

    @property
    def revenue(self) -> float:
        return self.price * self.quantity


class Expense(BaseModel):
    id: str
    category: Literal[tuple(settings.EXPENSE_CATEGORIES)]
    description: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    date: Date
    recurring: bool = False
    frequency: Optional[Literal[tuple(settings.EXPENSE_FREQUENCIES)]] = None

    class Config:
        populate_by_name = True
        frozen = True

    @model_validator(mode="after")
    def _frequency_only_when_recurring(self):
        if self.recurring and self.frequency is None:
            raise ValueError("recurring expenses need a frequency")
        if not self.recurring and self.frequency is not None:
            raise ValueError("frequency is only allowed on recurring expenses")
        return self


# --- Aggregates ---


class ProductPerformance(BaseModel):
    """Per-product totals over a set of sales."""

    product_id: str = Field(..., alias="productId")
    name: str
    quantity: int = 0
    revenue: float = 0.0
    profit: float = 0.0

    class Config:
        populate_by_name = True


class DailyTotals(BaseModel):
    date: Date
    count: int = Field(default=0, ge=0)
    revenue: float = 0.0
    profit: float = 0.0
    cost: float = 0.0
    margin: float = 0.0


class PeriodBucket(BaseModel):
    """One point of a revenue/profit trend series."""

    key: str
    label: str
    revenue: float = 0.0
    profit: float = 0.0
    sales: int = Field(default=0, ge=0)


class SalePreview(BaseModel):
    price: float
    quantity: int
    total: float
    profit: float


class ExpenseSummary(BaseModel):
    today_count: int = Field(default=0, alias="todayCount")
    today_total: float = Field(default=0.0, alias="todayTotal")
    month_count: int = Field(default=0, alias="monthCount")
    month_total: float = Field(default=0.0, alias="monthTotal")
    average_daily: float = Field(default=0.0, alias="averageDaily")

    class Config:
        populate_by_name = True


class DashboardSummary(BaseModel):
    totals: DailyTotals
    product_count: int = Field(default=0, alias="productCount")
    sales_count: int = Field(default=0, alias="salesCount")
    low_stock_count: int = Field(default=0, alias="lowStockCount")
    low_stock: list[Product] = Field(default_factory=list, alias="lowStock")
    top_selling: list[ProductPerformance] = Field(
        default_factory=list, alias="topSelling"
    )

    class Config:
        populate_by_name = True


class UnitMargin(BaseModel):
    """Per-unit markup of a catalog entry, shown on its product card."""

    amount: float = 0.0
    percent: float = 0.0
