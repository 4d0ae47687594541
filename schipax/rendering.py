"""Rendering utilities: logical-region extraction, RGB conversion, screenshots and video."""

from typing import Optional, Tuple

import cv2
import jax.numpy as jnp
import numpy as np
from PIL import Image

from schipax.constants import (
    SCREEN_WIDTH, SCREEN_HEIGHT, EXT_SCREEN_WIDTH, EXT_SCREEN_HEIGHT, STANDARD_COLORS, EXTENDED_COLORS,
)
from schipax.state import EmulatorState


def color_pair(hires: bool) -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
    """Foreground/background colors of the given mode."""
    return EXTENDED_COLORS if hires else STANDARD_COLORS


def logical_size(hires: bool) -> Tuple[int, int]:
    """(width, height) of the logical region of the given mode."""
    return (EXT_SCREEN_WIDTH, EXT_SCREEN_HEIGHT) if hires else (SCREEN_WIDTH, SCREEN_HEIGHT)


def logical_pixels(display: jnp.ndarray, hires: bool) -> np.ndarray:
    """Copy the logical region out of the fixed-size backing display."""
    width, height = logical_size(hires)
    return np.array(display[:width, :height], dtype=np.bool_)


def display_to_rgb(
    pixels: np.ndarray,
    scale: int = 8,
    on_color: Tuple[int, int, int] = STANDARD_COLORS[0],
    off_color: Tuple[int, int, int] = STANDARD_COLORS[1],
) -> np.ndarray:
    """Convert a boolean ``(width, height)`` pixel array to an upscaled RGB image.

    Args:
        pixels: Boolean array of shape (width, height)
        scale: Upscaling factor
        on_color: RGB color for "on" pixels
        off_color: RGB color for "off" pixels

    Returns:
        RGB array of shape (height*scale, width*scale, 3) with uint8 values
    """
    pixels = np.asarray(pixels, dtype=np.bool_).T
    height, width = pixels.shape

    rgb_frame = np.zeros((height, width, 3), dtype=np.uint8)
    rgb_frame[pixels] = on_color
    rgb_frame[~pixels] = off_color

    if scale > 1:
        rgb_frame = np.repeat(np.repeat(rgb_frame, scale, axis=0), scale, axis=1)

    return rgb_frame


def state_to_rgb(state: EmulatorState, scale: int = 8) -> np.ndarray:
    """Render the logical region of a state with its mode's colors."""
    hires = bool(state.hires)
    on_color, off_color = color_pair(hires)
    return display_to_rgb(logical_pixels(state.display, hires), scale, on_color, off_color)


def save_screenshot(state: EmulatorState, filename: str, scale: int = 8) -> None:
    """Write the current frame of ``state`` as an image file (format from the extension)."""
    Image.fromarray(state_to_rgb(state, scale)).save(filename)


def create_video(
    displays: jnp.ndarray,
    hires: jnp.ndarray,
    filename: str,
    fps: float = 60.0,
    scale: int = 4,
    persistence: bool = False,
) -> int:
    """Encode a sequence of backing displays as an MP4 file.

    Standard-mode frames are drawn at twice the scale of extended-mode frames
    so every frame has the same pixel size.

    Args:
        displays: Array of shape (N, MAX_WIDTH, MAX_HEIGHT)
        hires: Array of shape (N,) with the mode flag of each frame
        filename: Output MP4 path
        fps: Video frame rate
        scale: Pixel size of an extended-mode cell
        persistence: Blend frames to simulate phosphor decay

    Returns:
        Number of frames written
    """
    displays = np.asarray(displays)
    hires = np.asarray(hires)
    if displays.ndim != 3 or displays.shape[1:] != (EXT_SCREEN_WIDTH, EXT_SCREEN_HEIGHT):
        raise ValueError(
            f"Expected display shape (N, {EXT_SCREEN_WIDTH}, {EXT_SCREEN_HEIGHT}), got {displays.shape}"
        )

    width, height = EXT_SCREEN_WIDTH * scale, EXT_SCREEN_HEIGHT * scale
    fourcc = cv2.VideoWriter_fourcc(*'mp4v')
    writer = cv2.VideoWriter(filename, fourcc, fps, (width, height))

    glow: Optional[np.ndarray] = None
    decay = 0.8
    try:
        for frame_display, frame_hires in zip(displays, hires):
            frame_hires = bool(frame_hires)
            pixels = logical_pixels(frame_display, frame_hires)
            frame_scale = scale if frame_hires else scale * 2
            on_color, off_color = (np.array(c, dtype=np.float32) for c in color_pair(frame_hires))

            levels = pixels.astype(np.float32)
            if persistence:
                if glow is None or glow.shape != levels.shape:
                    glow = np.zeros_like(levels)
                glow = np.clip(glow * decay + levels, 0.0, 1.0)
                levels = glow

            frame = off_color + levels.T[..., None] * (on_color - off_color)
            frame = np.repeat(np.repeat(frame.astype(np.uint8), frame_scale, axis=0), frame_scale, axis=1)
            writer.write(cv2.cvtColor(frame, cv2.COLOR_RGB2BGR))
    finally:
        writer.release()

    return len(displays)
