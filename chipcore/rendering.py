"""Turn the 64x32 framebuffer into images and text for hosts."""

from typing import Dict, Tuple

import jax.numpy as jnp
import numpy as np

Color = Tuple[int, int, int]

# name -> (lit, unlit)
COLOR_SCHEMES: Dict[str, Tuple[Color, Color]] = {
    "classic": ((0, 255, 0), (0, 0, 0)),
    "amber": ((255, 176, 0), (0, 0, 0)),
    "white": ((255, 255, 255), (0, 0, 0)),
    "blue": ((0, 255, 255), (0, 0, 64)),
    "retro": ((255, 255, 0), (64, 0, 64)),
}


def _lit(display) -> np.ndarray:
    """Host copy of the framebuffer as 0/1 ints, rows first."""
    lit = np.asarray(display).astype(bool).astype(np.intp)
    if lit.ndim != 2:
        raise ValueError(f"Expected a 2D framebuffer, got shape {lit.shape}")
    return lit


def display_to_rgb(
    display: jnp.ndarray,
    scale: int = 8,
    on_color: Color = (0, 255, 0),
    off_color: Color = (0, 0, 0),
) -> np.ndarray:
    """Paint the framebuffer with a two-entry palette, each pixel a ``scale`` square.

    Returns:
        ``uint8`` array of shape ``(rows * scale, cols * scale, 3)``
    """
    if scale < 1:
        raise ValueError(f"Scale must be a positive integer, got {scale}")

    palette = np.array([off_color, on_color], dtype=np.uint8)
    block = np.ones((scale, scale), dtype=np.intp)
    return palette[np.kron(_lit(display), block)]


def display_to_text(display: jnp.ndarray, on: str = "#", off: str = ".") -> str:
    """One line per pixel row, ``on``/``off`` per pixel."""
    glyphs = np.array([off, on])
    return "\n".join("".join(row) for row in glyphs[_lit(display)])


def create_color_scheme(scheme: str = "classic") -> Tuple[Color, Color]:
    """Look up ``(on_color, off_color)`` by name in ``COLOR_SCHEMES``."""
    try:
        return COLOR_SCHEMES[scheme]
    except KeyError:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(COLOR_SCHEMES)}"
        ) from None
