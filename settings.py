"""
settings.py
Application configuration (constants with environment overrides).
"""

import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent

APP_TITLE = "Business Subscription Registry"

# How often the list view re-derives active/expiring/expired status
STATUS_REFRESH_SECONDS = int(os.getenv("BIZREG_REFRESH_SECONDS", "60"))

# Subscriptions ending within this many days are flagged "Expiring soon"
EXPIRING_SOON_DAYS = 30

LOG_DIR = Path(os.getenv("BIZREG_LOG_DIR", str(PROJECT_ROOT / "logs")))
DEBUG = os.getenv("BIZREG_DEBUG", "").strip().lower() in ("1", "true", "yes", "on")

# Display only; amounts are stored as plain floats
CURRENCY_SYMBOL = "€"
