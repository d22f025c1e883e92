import logging
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any, Optional
import pandas as pd

from shopledger import data_handler
from shopledger.ledger import Ledger
from shopledger.store import KeyValueStore

logger = logging.getLogger(__name__)


class ReportPipeline(ABC):
    """
    Abstract base class for report exports (daily summary, analytics).
    Follows an Extract -> Transform -> Load (ETL) pattern over the ledger's
    collections.
    """

    def __init__(
        self,
        report_type: str,
        store: KeyValueStore,
        day: Optional[date] = None,
        test_mode: bool = False,
    ):
        self.report_type = report_type
        self.day = day or date.today()
        self.test_mode = test_mode
        self.ledger = Ledger(
            store, clock=lambda: datetime.combine(self.day, datetime.now().time())
        )
        # Free-form facts about the run, sent along with the webhook payload
        self.metadata: dict[str, Any] = {"date": self.day.isoformat()}

    def run(self) -> list[Any] | None:
        """
        Orchestrates the pipeline execution. Returns the exported records, or
        None when the transform step failed.
        """
        logger.info(f"🚀 STEP: {self.report_type.upper()} REPORT")
        logger.info("-" * 30)

        # --- 1. EXTRACT ---
        raw_data = self.extract()
        if raw_data is None or raw_data.empty:
            logger.warning(f"⚠️ No sales found for {self.report_type}. Exporting an empty report.")
            self.load([])
            return []

        # --- 2. TRANSFORM ---
        validated_data = self.transform(raw_data)
        if validated_data is None:
            logger.error(f"❌ Transformation failed for {self.report_type}.")
            return None

        # --- 3. LOAD ---
        self.load(validated_data)

        logger.info(f"✅ {self.report_type.capitalize()} Pipeline Finished.\n")
        logger.info("=" * 60)
        return validated_data

    @abstractmethod
    def extract(self) -> pd.DataFrame | None:
        """
        Returns the rows this report covers as a DataFrame, and fills in
        self.metadata as it goes.
        """
        pass

    @abstractmethod
    def transform(self, df: pd.DataFrame) -> list[Any] | None:
        """
        Turns the extracted rows into a list of validated models.
        """
        pass

    def load(self, validated_data: list[Any]):
        """
        Saves data to disk and posts to webhook.
        """
        logger.info("\n--- Report Metadata ---")
        for key, value in self.metadata.items():
            logger.info(f"{key}: {value}")

        if validated_data:
            data_handler.save_outputs(validated_data, self.report_type, self.day)
        else:
            logger.warning("No data to save to disk.")

        if not self.test_mode:
            data_handler.post_to_webhook(
                validated_data=validated_data,
                metadata=self.metadata,
                report_type=self.report_type,
            )
        else:
            logger.info("🧪 Test Mode: Skipping webhook post.")
