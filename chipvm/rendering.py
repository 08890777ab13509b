"""CHIP-8 rendering utilities for visualization."""

from typing import Tuple

import numpy as np
from PIL import Image

from chipvm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, FRAMEBUFFER_SIZE

COLOR_SCHEMES = {
    "classic": ((0, 255, 0), (0, 0, 0)),  # Green on black
    "amber": ((255, 176, 0), (0, 0, 0)),  # Amber on black
    "white": ((255, 255, 255), (0, 0, 0)),  # White on black
    "blue": ((0, 255, 255), (0, 0, 64)),  # Cyan on dark blue
    "retro": ((255, 255, 0), (64, 0, 64)),  # Yellow on purple
}


def create_color_scheme(
    scheme: str = "classic",
) -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
    """Get predefined color schemes for CHIP-8 rendering.

    Args:
        scheme: Color scheme name (see ``COLOR_SCHEMES``)

    Returns:
        Tuple of (on_color, off_color) as RGB tuples
    """
    if scheme not in COLOR_SCHEMES:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(COLOR_SCHEMES.keys())}"
        )

    return COLOR_SCHEMES[scheme]


def framebuffer_to_rgb(
    framebuffer,
    scale: int = 8,
    on_color: Tuple[int, int, int] = (0, 255, 0),
    off_color: Tuple[int, int, int] = (0, 0, 0),
) -> np.ndarray:
    """Convert the flat CHIP-8 framebuffer to an RGB array with optional upscaling.

    Args:
        framebuffer: 2048 cells holding 0 or 1, row-major 64x32
        scale: Upscaling factor for better visibility (default: 8x)
        on_color: RGB color for "on" pixels (default: green)
        off_color: RGB color for "off" pixels (default: black)

    Returns:
        RGB array of shape (32*scale, 64*scale, 3) with uint8 values
    """
    cells = np.asarray(framebuffer, dtype=np.uint8)
    if cells.size != FRAMEBUFFER_SIZE:
        raise ValueError(f"Expected {FRAMEBUFFER_SIZE} framebuffer cells, got {cells.size}")
    if scale < 1:
        raise ValueError(f"Scale must be at least 1, got {scale}")

    pixels = cells.reshape(SCREEN_HEIGHT, SCREEN_WIDTH).astype(np.bool_)

    rgb_frame = np.zeros((SCREEN_HEIGHT, SCREEN_WIDTH, 3), dtype=np.uint8)
    rgb_frame[pixels] = on_color
    rgb_frame[~pixels] = off_color

    # Nearest neighbor upscaling
    if scale > 1:
        rgb_frame = np.repeat(np.repeat(rgb_frame, scale, axis=0), scale, axis=1)

    return rgb_frame


def save_png(framebuffer, filename: str, scale: int = 8, color_scheme: str = "classic") -> None:
    """Write the framebuffer to a PNG file."""
    on_color, off_color = create_color_scheme(color_scheme)
    Image.fromarray(framebuffer_to_rgb(framebuffer, scale, on_color, off_color)).save(filename)
