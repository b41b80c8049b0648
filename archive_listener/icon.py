"""Tray Icon Image - Draws the archive box shown in the system tray"""

from PIL import Image, ImageDraw

DEFAULT_COLOR = "#C8873A"


def _parse_color(color: str) -> tuple[int, int, int, int]:
    """Parse #RRGGBB, falling back to the default color"""
    if color.startswith('#') and len(color) == 7:
        try:
            return (int(color[1:3], 16), int(color[3:5], 16), int(color[5:7], 16), 255)
        except ValueError:
            pass
    return _parse_color(DEFAULT_COLOR)


def create_icon_image(size: int = 64, color: str = DEFAULT_COLOR) -> Image.Image:
    """Create an archive box icon image"""
    image = Image.new('RGBA', (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(image)

    fill_color = _parse_color(color)
    darker = tuple(max(c - 50, 0) for c in fill_color[:3]) + (255,)

    margin = size // 8
    lid_height = size // 5

    # Lid
    draw.rectangle(
        [margin // 2, margin, size - margin // 2, margin + lid_height],
        fill=darker
    )

    # Box body
    draw.rectangle(
        [margin, margin + lid_height, size - margin, size - margin],
        fill=fill_color
    )

    # Handle slot
    slot_width = size // 3
    slot_top = margin + lid_height + size // 8
    draw.rectangle(
        [(size - slot_width) // 2, slot_top, (size + slot_width) // 2, slot_top + max(size // 16, 1)],
        fill=darker
    )

    return image
