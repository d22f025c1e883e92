import os
from pathlib import Path
from dotenv import load_dotenv

# --- Base Directory ---
BASE_DIR = Path(__file__).resolve().parent.parent

# --- Load Environment Variables ---
load_dotenv(BASE_DIR / ".env")

# --- Path Configuration ---
DATA_DIR = BASE_DIR / os.getenv("DATA_DIR", "data")
OUTPUT_DIR = BASE_DIR / os.getenv("OUTPUT_DIR", "output")
LOG_DIR = BASE_DIR / os.getenv("LOG_DIR", "logs")

STORE_FILENAME = os.getenv("STORE_FILENAME", "store.json")
STORE_FILE = DATA_DIR / STORE_FILENAME

# --- Exports ---
WEBHOOK_URL = os.getenv("WEBHOOK_URL")
SAVE_JSON_OUTPUT = os.getenv("SAVE_JSON_OUTPUT", "true").lower() == "true"
CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "$")
TEST_MODE = os.getenv("TEST_MODE", "false").lower() == "true"

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILENAME = os.getenv("LOG_FILENAME", "shopledger.log")
LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", 5 * 1024 * 1024))  # 5 MB
LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", 3))

# --- Store Keys ---
PRODUCTS_KEY = "products"
SALES_KEY = "sales"
EXPENSES_KEY = "expenses"

# --- Shared Business Logic ---
DEFAULT_MIN_STOCK = 5
DEFAULT_CATEGORY = "General"
UNKNOWN_PRODUCT_NAME = "Unknown"

# Fixed list shown in the expense form, in display order.
EXPENSE_CATEGORIES = [
    "Rent",
    "Utilities",
    "Staff Salaries",
    "Transportation",
    "Marketing",
    "Equipment",
    "Supplies",
    "Insurance",
    "Taxes",
    "Maintenance",
    "Other",
]

EXPENSE_FREQUENCIES = ["daily", "weekly", "monthly"]
DEFAULT_EXPENSE_FREQUENCY = "monthly"

PERIOD_GRANULARITIES = ["daily", "weekly", "monthly"]

# --- List Limits ---
TOP_PRODUCTS_LIMIT = 5
TOP_SELLING_TODAY_LIMIT = 3
RECENT_SALES_LIMIT = 10
LOW_STOCK_ALERT_LIMIT = 5
