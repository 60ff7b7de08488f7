import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties towards +infinity (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def resolve(value: float, extent: int) -> int:
    """
    Map one stroke coordinate to a pixel coordinate on an axis of size `extent`.

    Values <= 1 are fractions of the axis (so 1 is the far edge, not pixel 1),
    anything larger is already an absolute pixel position. The result is not
    clamped to the canvas.
    """
    if value <= 1:
        return round_half_up(value * extent)
    return round_half_up(value)


def resolve_point(x: float, y: float, width: int, height: int):
    return resolve(x, width), resolve(y, height)
