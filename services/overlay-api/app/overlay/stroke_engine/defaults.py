from typing import List
from ..ingestion.models import OverlayRequest, OverlayStroke


def thirds_grid() -> List[OverlayStroke]:
    """Rule-of-thirds grid: two verticals, then two horizontals, full span."""
    return [
        OverlayStroke(type="line", x1=1 / 3, y1=0, x2=1 / 3, y2=1, label=""),
        OverlayStroke(type="line", x1=2 / 3, y1=0, x2=2 / 3, y2=1, label=""),
        OverlayStroke(type="line", x1=0, y1=1 / 3, x2=1, y2=1 / 3, label=""),
        OverlayStroke(type="line", x1=0, y1=2 / 3, x2=1, y2=2 / 3, label=""),
    ]


def guide_lines() -> List[OverlayStroke]:
    return [
        OverlayStroke(type="line", x1=0.06, y1=0.82, x2=0.94, y2=0.82, label="lower horizon"),
        OverlayStroke(type="line", x1=0.18, y1=0.96, x2=0.78, y2=0.56, label="leading diagonal"),
    ]


def build_strokes(request: OverlayRequest) -> List[OverlayStroke]:
    """
    Ordered strokes to draw for a request.

    Caller strokes win outright (show_thirds is ignored then). Otherwise the
    grid, if asked for, is drawn first and the two guide lines on top.
    """
    if request.strokes:
        return list(request.strokes)

    strokes: List[OverlayStroke] = []
    if request.show_thirds:
        strokes.extend(thirds_grid())
    strokes.extend(guide_lines())
    return strokes
