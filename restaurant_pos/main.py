"""Entry point for the restaurant-pos Textual app."""

from __future__ import annotations

import logging
from pathlib import Path

from restaurant_pos.config import DEBUG_LOG_PATH, PRINTER_ENABLED
from restaurant_pos.pos_app import PosApp
from restaurant_pos.printer import check_printer_dependencies, print_kitchen_ticket


def configure_logging(path: str = DEBUG_LOG_PATH) -> None:
    """Send logs to a file; the terminal belongs to the UI."""
    log_file = Path(path)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=log_file,
        level=logging.DEBUG,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def main() -> None:
    """Run the Textual application."""
    configure_logging()
    logger = logging.getLogger("restaurant_pos")

    ticket_printer = None
    if PRINTER_ENABLED:
        ready, msg = check_printer_dependencies()
        logger.info("printer_status ready=%s msg=%r", ready, msg)
        if ready:
            ticket_printer = print_kitchen_ticket

    PosApp(ticket_printer=ticket_printer).run()


if __name__ == "__main__":
    main()
