"""
Image output.

The renderer produces 8-bit RGB arrays with row 0 at the top. They are
written either as plain-text PPM (P3): a header with width, height and
max channel value, then one "r g b" line per pixel, or through Pillow
for any other format.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import IO, Union

import numpy as np
from PIL import Image as PILImage

logger = logging.getLogger(__name__)

MAX_CHANNEL_VALUE = 255


def write_ppm(stream: IO[str], image: np.ndarray, bottom_to_top: bool = False) -> None:
    """Write an 8-bit RGB image as plain-text PPM.

    Args:
        stream: Text stream to write to
        image: Array of shape (height, width, 3) with row 0 at the top
        bottom_to_top: Emit the bottom scanline first instead of the top
    """
    height, width = image.shape[:2]
    stream.write(f"P3\n{width} {height}\n{MAX_CHANNEL_VALUE}\n")

    rows = image[::-1] if bottom_to_top else image
    for row in rows:
        stream.write(''.join(f"{int(r)} {int(g)} {int(b)}\n" for r, g, b in row))


def read_ppm(stream: IO[str]) -> np.ndarray:
    """Read a plain-text PPM back into an (height, width, 3) uint8 array."""
    tokens = []
    for line in stream:
        # Strip comments
        tokens.extend(line.split('#', 1)[0].split())

    if not tokens or tokens[0] != 'P3':
        raise ValueError("Not a plain-text PPM (missing P3 magic)")

    width, height, max_value = (int(t) for t in tokens[1:4])
    values = np.array([int(t) for t in tokens[4:]], dtype=np.int64)
    if values.size != width * height * 3:
        raise ValueError(f"Expected {width * height * 3} channel values, got {values.size}")

    if max_value != MAX_CHANNEL_VALUE:
        values = values * MAX_CHANNEL_VALUE // max_value
    return values.reshape(height, width, 3).astype(np.uint8)


def save_image(image: np.ndarray, filename: Union[str, Path], bottom_to_top: bool = False) -> None:
    """Save an 8-bit RGB image.

    Args:
        image: Image array of shape (height, width, 3), dtype uint8
        filename: Output path; ``.ppm`` is written as plain-text PPM,
            every other extension is handed to Pillow
        bottom_to_top: Scanline order for PPM output
    """
    path = Path(filename)
    logger.debug("Saving %dx%d image to %s", image.shape[1], image.shape[0], path)

    if path.suffix.lower() == '.ppm':
        with path.open('w') as f:
            write_ppm(f, image, bottom_to_top=bottom_to_top)
    else:
        PILImage.fromarray(np.ascontiguousarray(image, dtype=np.uint8)).save(path)
