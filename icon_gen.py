"""Generate the system-tray icon (64×64 PIL Image, in-memory)."""

from datetime import date
from typing import Callable

from PIL import Image, ImageDraw, ImageFont

from calendar_logic import today

HEADER_COLOR = "#CC0000"
_HEADER_H = 16


def create_icon_image(clock: Callable[[], date] | None = None) -> Image.Image:
    """Return a 64×64 RGBA image: today's Jalali day under a red header band."""
    size = 64
    img = Image.new("RGBA", (size, size), "white")
    draw = ImageDraw.Draw(img)
    draw.rectangle((0, 0, size - 1, _HEADER_H - 1), fill=HEADER_COLOR)

    day = str(today(clock).day)
    body = size - _HEADER_H

    # Find the largest font size that fits below the header
    font_size = 120
    font = None
    while font_size > 10:
        try:
            font = ImageFont.truetype("DejaVuSans-Bold.ttf", font_size)
        except OSError:
            font = ImageFont.load_default()
            break
        bbox = draw.textbbox((0, 0), day, font=font)
        tw = bbox[2] - bbox[0]
        th = bbox[3] - bbox[1]
        if tw <= size - 4 and th <= body - 4:
            break
        font_size -= 1

    # Centre the actual visible pixels (compensate for font metric offsets)
    bbox = draw.textbbox((0, 0), day, font=font)
    x = (size - (bbox[2] - bbox[0])) / 2 - bbox[0]
    y = _HEADER_H + (body - (bbox[3] - bbox[1])) / 2 - bbox[1]
    draw.text((x, y), day, fill="black", font=font)

    return img
