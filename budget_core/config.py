"""Configuration for the budget planner.

Values come from environment variables with sensible defaults so the app
runs out of the box with ``streamlit run app/main.py``.
"""
import logging
import os
from pathlib import Path

_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

DATA_DIR = Path(os.getenv("BUDGETAPP_DATA_DIR", _PROJECT_ROOT / "data"))
BUDGETS_FILE = DATA_DIR / "budgets.json"

# "memory" or "json"
STORE_BACKEND = os.getenv("BUDGETAPP_STORE", "json").lower()

# Product cap on members per budget
MAX_MEMBERS = int(os.getenv("BUDGETAPP_MAX_MEMBERS", "2"))

CURRENCY = os.getenv("BUDGETAPP_CURRENCY", "RM")

LOG_LEVEL = os.getenv("BUDGETAPP_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def ensure_data_directories() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
