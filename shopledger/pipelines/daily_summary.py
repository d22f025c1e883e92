import logging
import pandas as pd
from datetime import date
from typing import Optional

from shopledger import data_handler, frames, reports
from shopledger.pipeline import ReportPipeline
from shopledger.schemas import ProductPerformance
from shopledger.store import KeyValueStore
from shopledger.summary import render_daily_summary

logger = logging.getLogger(__name__)


class DailySummaryPipeline(ReportPipeline):
    """End-of-day export: per-product breakdown plus the printable summary."""

    def __init__(
        self, store: KeyValueStore, day: Optional[date] = None, test_mode: bool = False
    ):
        super().__init__("daily_summary", store, day=day, test_mode=test_mode)

    def extract(self) -> pd.DataFrame | None:
        logger.info("--- Collecting Today's Sales ---")

        day_sales = reports.sales_for_day(self.ledger.sales, self.day)
        totals = reports.daily_totals(day_sales, self.day)
        self.metadata.update(
            {
                "sales": totals.count,
                "revenue": totals.revenue,
                "profit": totals.profit,
                "cost": totals.cost,
                "margin": totals.margin,
                "lowStock": len(self.ledger.low_stock_products()),
            }
        )
        logger.info(f"  > {totals.count} sales on {self.day.isoformat()}")
        return frames.sales_frame(day_sales)

    def transform(self, df: pd.DataFrame) -> list[ProductPerformance] | None:
        logger.info("\n--- Building Product Breakdown ---")
        breakdown = frames.to_performance(frames.group_by_product(df))

        best = reports.best_selling_today(self.ledger.sales, self.day)
        most_profitable = reports.most_profitable_today(self.ledger.sales, self.day)
        self.metadata["bestSelling"] = best.name if best else None
        self.metadata["mostProfitable"] = most_profitable.name if most_profitable else None

        logger.info(f"✅ Breakdown ready ({len(breakdown)} products).")
        return breakdown

    def load(self, validated_data: list[ProductPerformance]):
        text = render_daily_summary(self.ledger.sales, self.day)
        data_handler.save_text_report(text, self.report_type, self.day)
        super().load(validated_data)
