"""Kitchen ticket printing on a USB ESC/POS thermal printer."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from restaurant_pos.config import (
    PRINTER_FONT_PATH,
    PRINTER_FONT_SIZE,
    PRINTER_LEFT_INDENT_PX,
    PRINTER_TAIL_SPACER_PX,
    PRINTER_USB_PRODUCT_ID,
    PRINTER_USB_VENDOR_ID,
    PRINTER_WIDTH_PX,
)
from restaurant_pos.models import Order

logger = logging.getLogger(__name__)

# Extra vertical headroom so descenders are not clipped on thermal output.
_LINE_EXTRA_PX = 16
_FONT_OVERRIDE_ENV = "POS_PRINTER_FONT_PATH"
_LINUX_FONT_FALLBACKS = (
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/liberation/LiberationSans-Regular.ttf",
)


def ticket_lines(order: Order) -> list[str]:
    """Text rows of a kitchen ticket, header first."""
    lines = [
        f"Table {order.table_id}",
        f"#{order.id[:8]}  {order.created_at.astimezone().strftime('%H:%M')}",
    ]
    lines.extend(f"{line.quantity}x {line.name}" for line in order.lines)
    if order.submitted_by_name:
        lines.append(f"by {order.submitted_by_name}")
    return lines


def resolve_printer_font_path() -> str:
    """
    Resolve a printer font path.

    Resolution order:
    1. POS_PRINTER_FONT_PATH (if set)
    2. PRINTER_FONT_PATH
    3. Known Linux fallbacks
    """
    env_override = os.environ.get(_FONT_OVERRIDE_ENV, "").strip()
    candidates: list[str] = []
    if env_override:
        candidates.append(env_override)
    candidates.append(PRINTER_FONT_PATH)
    candidates.extend(_LINUX_FONT_FALLBACKS)

    seen: set[str] = set()
    for candidate in candidates:
        if not candidate or candidate in seen:
            continue
        seen.add(candidate)
        if Path(candidate).is_file():
            return candidate

    raise RuntimeError(
        f"No usable printer font found. Set {_FONT_OVERRIDE_ENV} to a valid .ttf/.otf file. "
        f"Tried: {', '.join(seen)}"
    )


def check_printer_dependencies() -> tuple[bool, str]:
    """Check whether printer dependencies and a font are usable."""
    try:
        from escpos.printer import Usb  # noqa: F401
        from PIL import ImageFont

        font_path = resolve_printer_font_path()
        ImageFont.truetype(font_path, PRINTER_FONT_SIZE)
    except Exception as exc:
        return (False, f"Printer deps unavailable: {exc}")
    return (True, "Printer ready")


def _fit_text_to_px(text: str, font: object, max_width_px: int) -> str:
    from PIL import Image, ImageDraw

    probe = Image.new("1", (1, 1), color=1)
    draw = ImageDraw.Draw(probe)
    if draw.textbbox((0, 0), text, font=font)[2] <= max_width_px:
        return text
    ellipsis = "..."
    trimmed = text
    while trimmed:
        candidate = f"{trimmed}{ellipsis}"
        if draw.textbbox((0, 0), candidate, font=font)[2] <= max_width_px:
            return candidate
        trimmed = trimmed[:-1]
    return ellipsis


def _render_line(text: str, font: object) -> object:
    from PIL import Image, ImageDraw

    canvas_height = PRINTER_FONT_SIZE + _LINE_EXTRA_PX
    img = Image.new("1", (PRINTER_WIDTH_PX, canvas_height), color=1)
    draw = ImageDraw.Draw(img)

    text = _fit_text_to_px(text, font, PRINTER_WIDTH_PX - PRINTER_LEFT_INDENT_PX * 2)
    bbox = draw.textbbox((0, 0), text, font=font)
    text_height = bbox[3] - bbox[1]

    # Offset by bbox top so descenders are not clipped.
    y = (canvas_height - text_height) // 2 - bbox[1]
    draw.text((PRINTER_LEFT_INDENT_PX, y), text, font=font, fill=0)
    return img


def _render_spacer(height_px: int) -> object:
    from PIL import Image

    return Image.new("1", (PRINTER_WIDTH_PX, max(1, height_px)), color=1)


def print_kitchen_ticket(order: Order) -> None:
    """Print one ticket for the kitchen and cut it."""
    if not order.lines:
        return

    try:
        from escpos.printer import Usb
        from PIL import ImageFont
    except Exception as exc:
        raise RuntimeError(f"Printer dependencies unavailable: {exc}") from exc

    printer = Usb(PRINTER_USB_VENDOR_ID, PRINTER_USB_PRODUCT_ID)
    font_path = resolve_printer_font_path()
    font = ImageFont.truetype(font_path, PRINTER_FONT_SIZE)
    header_font = ImageFont.truetype(font_path, PRINTER_FONT_SIZE + 12)

    rows = ticket_lines(order)
    printer.image(_render_line(rows[0], header_font))
    for row in rows[1:]:
        printer.image(_render_line(row, font))
    printer.image(_render_spacer(PRINTER_TAIL_SPACER_PX))
    printer.cut()
    logger.info("ticket_printed order_id=%s rows=%s", order.id, len(rows))
