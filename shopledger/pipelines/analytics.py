import logging
import pandas as pd
from datetime import date
from typing import Optional

from shopledger import data_handler, reports, settings
from shopledger.errors import ValidationError
from shopledger.pipeline import ReportPipeline
from shopledger.schemas import PeriodBucket
from shopledger.store import KeyValueStore

logger = logging.getLogger(__name__)

BUCKET_COLUMNS = ["key", "label", "revenue", "profit", "sales"]


class AnalyticsPipeline(ReportPipeline):
    """Trend series for one granularity, plus the all-time top products."""

    def __init__(
        self,
        store: KeyValueStore,
        granularity: str = "daily",
        day: Optional[date] = None,
        test_mode: bool = False,
    ):
        if granularity not in settings.PERIOD_GRANULARITIES:
            raise ValidationError(f"Unknown granularity: {granularity!r}")
        super().__init__(
            f"{granularity}_analytics", store, day=day, test_mode=test_mode
        )
        self.granularity = granularity

    def extract(self) -> pd.DataFrame | None:
        """
        One row per trend bucket. The buckets are fixed by the granularity, so
        a shop with no sales still yields a full series of zeros.
        """
        logger.info(f"--- Collecting Sales for {self.granularity} trend ---")
        series = reports.period_series(self.ledger.sales, self.granularity, self.day)
        df = pd.DataFrame(
            [bucket.model_dump() for bucket in series], columns=BUCKET_COLUMNS
        )
        self.metadata["granularity"] = self.granularity
        self.metadata["sales"] = int(df["sales"].sum())
        return df

    def transform(self, df: pd.DataFrame) -> list[PeriodBucket] | None:
        logger.info("\n--- Bucketing Sales ---")
        series = []
        for row in df.to_dict("records"):
            bucket = PeriodBucket(
                key=row["key"],
                label=row["label"],
                revenue=float(row["revenue"]),
                profit=float(row["profit"]),
                sales=int(row["sales"]),
            )
            logger.info(
                f"  > {bucket.label}: {bucket.sales} sales, "
                f"revenue {bucket.revenue:.2f}, profit {bucket.profit:.2f}"
            )
            series.append(bucket)
        return series

    def load(self, validated_data: list[PeriodBucket]):
        top = reports.top_products(self.ledger.sales)
        self.metadata["topProducts"] = [item.name for item in top]
        if top:
            data_handler.save_outputs(top, "top_products", self.day)
        super().load(validated_data)
