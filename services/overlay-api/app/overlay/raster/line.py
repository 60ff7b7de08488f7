from typing import Tuple

from .canvas import Canvas, Color
from .coords import round_half_up


def line_thickness(width: int, ratio: float = 0.003, minimum: int = 3) -> int:
    # Scales with canvas width, never thinner than `minimum`
    return max(minimum, round_half_up(width * ratio))


def half_thickness(thickness: int) -> int:
    return max(0, thickness // 2)


def _window(start: int, step: int, lo: int, hi: int, length: int) -> Tuple[int, int]:
    """Step indices k in [0, length] where start + step*k lies in [lo, hi]."""
    if step > 0:
        first, last = lo - start, hi - start
    else:
        first, last = start - hi, start - lo
    return max(0, first), min(length, last)


def _minor_offset(k: int, major: int, minor: int) -> int:
    # Minor-axis steps taken after k major steps of the walk below
    if major == 0:
        return 0
    return (2 * minor * k + major) // (2 * major)


def draw_line(canvas: Canvas, x1: int, y1: int, x2: int, y2: int, half: int, color: Color) -> int:
    """
    Rasterize a straight segment with a square brush.

    Integer error-accumulation walk (Bresenham) from (x1, y1) to (x2, y2),
    endpoint inclusive. Every visited pixel gets a (2*half+1)^2 square stamp,
    which gives square caps and joins.

    The major axis advances on every step, so the walk starts directly at the
    first step whose brush can reach the canvas and stops after the last one.
    Returns the number of stamps made.
    """
    dx = abs(x2 - x1)
    dy = -abs(y2 - y1)
    sx = 1 if x2 >= x1 else -1
    sy = 1 if y2 >= y1 else -1

    if dx >= -dy:
        first, last = _window(x1, sx, -half, canvas.width - 1 + half, dx)
        nx, ny = first, _minor_offset(first, dx, -dy)
    else:
        first, last = _window(y1, sy, -half, canvas.height - 1 + half, -dy)
        nx, ny = _minor_offset(first, -dy, dx), first
    if first > last:
        return 0

    x, y = x1 + sx * nx, y1 + sy * ny
    err = dx + dy + nx * dy + ny * dx

    steps = 0
    for _ in range(first, last + 1):
        canvas.fill_square(x, y, half, color)
        steps += 1
        if x == x2 and y == y2:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x += sx
        if e2 <= dx:
            err += dx
            y += sy
    return steps
