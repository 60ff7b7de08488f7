"""
Overlay rendering: canvas size -> stroke set -> rasterized RGBA canvas.

A render is a pure function of its request and config. Each call owns its
own Canvas, so concurrent renders need no coordination.
"""
import logging
import math
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from ..config import RenderConfig
from .ingestion.models import OverlayDescriptor, OverlayRequest, OverlayStroke
from .raster.canvas import Canvas, InvalidDimension
from .raster.coords import resolve
from .raster.line import draw_line, half_thickness, line_thickness
from .stroke_engine.defaults import build_strokes

logger = logging.getLogger("overlay.renderer")

DEFAULT_CONFIG = RenderConfig()


class RenderResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    canvas: Canvas
    descriptor: OverlayDescriptor
    drawn: int = 0
    skipped: int = 0


def clamp_dimension(value: Optional[float], default: int, config: RenderConfig, name: str) -> int:
    """Floor and clamp a requested size into [min_dimension, max_dimension]."""
    if value is None:
        value = default
    try:
        value = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidDimension(f"{name} is not a number: {value!r}") from e
    if not math.isfinite(value):
        raise InvalidDimension(f"{name} is not finite: {value!r}")
    return max(config.min_dimension, min(config.max_dimension, int(math.floor(value))))


def canvas_size(request: OverlayRequest, config: RenderConfig = DEFAULT_CONFIG) -> Tuple[int, int]:
    width = clamp_dimension(request.width, config.default_width, config, "width")
    height = clamp_dimension(request.height, config.default_height, config, "height")
    return width, height


def _finite(stroke: OverlayStroke) -> bool:
    return all(math.isfinite(v) for v in (stroke.x1, stroke.y1, stroke.x2, stroke.y2))


def render(request: OverlayRequest, config: RenderConfig = DEFAULT_CONFIG) -> RenderResult:
    width, height = canvas_size(request, config)
    canvas = Canvas.create(width, height, max_dimension=config.max_dimension)

    strokes = build_strokes(request)
    half = half_thickness(line_thickness(width, config.thickness_ratio, config.min_thickness))

    drawn = 0
    skipped = 0
    for stroke in strokes:
        if stroke.type != "line":
            skipped += 1
            continue
        if not _finite(stroke):
            logger.warning(
                "Skipping line with non-finite coordinates (%s, %s) -> (%s, %s)",
                stroke.x1, stroke.y1, stroke.x2, stroke.y2,
            )
            skipped += 1
            continue
        draw_line(
            canvas,
            resolve(stroke.x1, width),
            resolve(stroke.y1, height),
            resolve(stroke.x2, width),
            resolve(stroke.y2, height),
            half,
            config.stroke_color,
        )
        drawn += 1

    echoed: List[dict] = [s.echo() for s in strokes]
    descriptor = OverlayDescriptor(width=width, height=height, normalized=True, strokes=echoed)
    logger.info("Rendered %dx%d overlay: %d lines drawn, %d skipped", width, height, drawn, skipped)
    return RenderResult(canvas=canvas, descriptor=descriptor, drawn=drawn, skipped=skipped)
