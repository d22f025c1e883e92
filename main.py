import logging

from shopledger import settings
from shopledger.errors import LedgerError
from shopledger.logger import setup_logger
from shopledger.pipelines.analytics import AnalyticsPipeline
from shopledger.pipelines.daily_summary import DailySummaryPipeline
from shopledger.store import JsonFileStore

logger = logging.getLogger(__name__)


def run_process():
    """Runs the end-of-day exports against the configured store file."""
    setup_logger()

    logger.info("--- Starting Daily Report Process ---")
    logger.info(f"Store: {settings.STORE_FILE}")
    store = JsonFileStore(settings.STORE_FILE)

    try:
        DailySummaryPipeline(store, test_mode=settings.TEST_MODE).run()
        for granularity in settings.PERIOD_GRANULARITIES:
            AnalyticsPipeline(store, granularity, test_mode=settings.TEST_MODE).run()
    except LedgerError as e:
        logger.error(f"❌ Report run aborted: {e}")
        return

    logger.info("\n--- Process Finished Successfully ---")


if __name__ == "__main__":
    run_process()
