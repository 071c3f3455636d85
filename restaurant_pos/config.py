"""Runtime configuration defaults for persistence, polling and printing."""

from __future__ import annotations

import os


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


DB_PATH = os.environ.get("POS_DB_PATH", "data/restaurant_pos.db")
DEBUG_LOG_PATH = os.environ.get("POS_DEBUG_LOG", "/tmp/restaurant-pos-debug.log")

# Seconds between change-feed polls while the app is running.
POLL_SECONDS = float(os.environ.get("POS_POLL_SECONDS", "2.0"))

# Account created on first start when the users table is empty.
DEFAULT_ADMIN_USERNAME = os.environ.get("POS_ADMIN_USERNAME", "admin")
DEFAULT_ADMIN_PASSWORD = os.environ.get("POS_ADMIN_PASSWORD", "admin")

PRINTER_ENABLED = _env_flag("POS_PRINTER_ENABLED")
PRINTER_USB_VENDOR_ID = int(os.environ.get("POS_PRINTER_VENDOR_ID", "0x28E9"), 16)
PRINTER_USB_PRODUCT_ID = int(os.environ.get("POS_PRINTER_PRODUCT_ID", "0x0289"), 16)
PRINTER_WIDTH_PX = 384
PRINTER_FONT_SIZE = 40
PRINTER_FONT_PATH = "/System/Library/Fonts/SFNS.ttf"
PRINTER_LEFT_INDENT_PX = 16
PRINTER_TAIL_SPACER_PX = 70
