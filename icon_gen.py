"""Generate the system-tray icon (64×64 PIL Image, in-memory)."""

from datetime import date
from functools import lru_cache

from PIL import Image, ImageDraw, ImageFont

SIZE = 64
DOT_RADIUS = 9

# Bold faces tried in order: Windows, then common Linux/macOS installs
FONT_CANDIDATES = ("segoeuib.ttf", "DejaVuSans-Bold.ttf", "Arial Bold.ttf")

# Save-state dot colours
SAVING = "#FFB300"
SAVED = "#2E7D32"
FAILED = "#C62828"


def _truetype(size: int) -> ImageFont.FreeTypeFont | None:
    for name in FONT_CANDIDATES:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    return None


@lru_cache(maxsize=None)
def _load_font(text: str, box: int) -> ImageFont.ImageFont:
    """Largest font that fits *text* into a box×box square."""
    draw = ImageDraw.Draw(Image.new("RGBA", (box, box)))
    font_size = 120
    font = None
    while font_size > 10:
        font = _truetype(font_size)
        if font is None:
            return ImageFont.load_default()
        bbox = draw.textbbox((0, 0), text, font=font)
        if bbox[2] - bbox[0] <= box and bbox[3] - bbox[1] <= box:
            return font
        font_size -= 1
    return font


@lru_cache(maxsize=64)
def _render(state: str | None, day: int) -> Image.Image:
    img = Image.new("RGBA", (SIZE, SIZE), "white")
    draw = ImageDraw.Draw(img)

    text = str(day)
    font = _load_font(text, SIZE - 8)
    bbox = draw.textbbox((0, 0), text, font=font)
    x = (SIZE - (bbox[2] - bbox[0])) / 2 - bbox[0]
    y = (SIZE - (bbox[3] - bbox[1])) / 2 - bbox[1]
    draw.text((x, y), text, fill="black", font=font)

    colour = {"saving": SAVING, "saved": SAVED, "failed": FAILED}.get(state)
    if colour is not None:
        cx = cy = SIZE - DOT_RADIUS - 1
        draw.ellipse(
            (cx - DOT_RADIUS, cy - DOT_RADIUS, cx + DOT_RADIUS, cy + DOT_RADIUS),
            fill=colour, outline="white",
        )
    return img


def create_icon_image(state: str | None = None, today: date | None = None) -> Image.Image:
    """Return a 64×64 RGBA image: today's day of month, with a save-state dot.

    *state* is one of "saving", "saved", "failed" or None (no dot). Images
    are cached per (state, day) and shared, so callers must not draw on them.
    """
    return _render(state, (today or date.today()).day)
