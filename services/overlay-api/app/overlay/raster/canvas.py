"""
RGBA pixel buffer used as the drawing target for overlays.

Origin is top-left, rows are stored contiguously, and every pixel is four
bytes ``[r, g, b, a]``. A fresh canvas is fully transparent.
"""
from typing import Tuple

import numpy as np

Color = Tuple[int, int, int, int]


class InvalidDimension(ValueError):
    """Raised when a canvas size is non-positive, too large or not a number."""


class Canvas:
    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        # HxWx4 uint8, row-major, same layout as a packed RGBA byte buffer
        self.pixels = np.zeros((height, width, 4), dtype=np.uint8)

    @classmethod
    def create(cls, width: int, height: int, max_dimension: int = 8192) -> "Canvas":
        for name, value in (("width", width), ("height", height)):
            if not isinstance(value, (int, np.integer)) or isinstance(value, bool):
                raise InvalidDimension(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise InvalidDimension(f"{name} must be positive, got {value}")
            if value > max_dimension:
                raise InvalidDimension(f"{name} {value} exceeds maximum {max_dimension}")
        return cls(int(width), int(height))

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def set_pixel(self, x: int, y: int, r: int, g: int, b: int, a: int) -> None:
        # Out-of-bounds writes are clipped silently
        if not self.in_bounds(x, y):
            return
        self.pixels[y, x] = (r, g, b, a)

    def get_pixel(self, x: int, y: int) -> Color:
        r, g, b, a = (int(v) for v in self.pixels[y, x])
        return (r, g, b, a)

    def fill_square(self, cx: int, cy: int, half: int, color: Color) -> None:
        """
        Stamp a (2*half+1)-sided square centred on (cx, cy).

        Equivalent to calling set_pixel for every offset in [-half, half]^2,
        with the clipping done once on the slice bounds.
        """
        x0 = max(0, cx - half)
        x1 = min(self.width, cx + half + 1)
        y0 = max(0, cy - half)
        y1 = min(self.height, cy + half + 1)
        if x0 >= x1 or y0 >= y1:
            return
        self.pixels[y0:y1, x0:x1] = color

    def painted_count(self) -> int:
        """Number of pixels with any non-zero channel."""
        return int(np.count_nonzero(self.pixels.any(axis=2)))

    def tobytes(self) -> bytes:
        return self.pixels.tobytes()

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)
