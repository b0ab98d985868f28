"""
Fixed-capacity 8-bit RGB image buffer with PPM and PNG output.
"""

from __future__ import annotations
from pathlib import Path
from typing import TextIO, Union

import numpy as np


class ImageBuffer:
    """Stores exactly ``width * height`` RGB pixels, written in scan order.

    Appends past the capacity are rejected rather than raising so the
    caller decides how to treat a dimension mismatch.
    """

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"invalid image size {width}x{height}")
        self.width = width
        self.height = height
        self.capacity = width * height * 3
        self._data = np.zeros(self.capacity, dtype=np.uint8)
        self._index = 0

    def __len__(self) -> int:
        """Number of bytes written so far."""
        return self._index

    @property
    def is_full(self) -> bool:
        return self._index >= self.capacity

    def add_byte(self, b: int) -> bool:
        if self._index >= self.capacity:
            return False
        self._data[self._index] = b
        self._index += 1
        return True

    def add_pixel(self, r: int, g: int, b: int) -> bool:
        """Append one pixel.

        Returns:
            False if the buffer has no room for all three channels, in
            which case nothing is written.
        """
        if self._index + 3 > self.capacity:
            return False
        return self.add_byte(r) and self.add_byte(g) and self.add_byte(b)

    def to_array(self) -> np.ndarray:
        """Return a (height, width, 3) uint8 copy of the buffer."""
        return self._data.reshape(self.height, self.width, 3).copy()

    def write_ppm(self, out: TextIO) -> None:
        """Write the buffer as a plain-text (P3) PPM."""
        out.write(f"P3\n{self.width} {self.height}\n255\n")
        for r, g, b in self._data.reshape(-1, 3):
            out.write(f"{r} {g} {b}\n")

    def write_png(self, filename: Union[str, Path]) -> None:
        """Encode the buffer as PNG.

        Raises:
            OSError: if the file cannot be written
        """
        from PIL import Image as PILImage

        pil_image = PILImage.fromarray(self.to_array())
        pil_image.save(filename, format='PNG')

    def __repr__(self) -> str:
        return f"ImageBuffer({self.width}x{self.height}, {self._index}/{self.capacity} bytes)"
