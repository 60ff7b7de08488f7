import logging
from typing import Optional

from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse

from ..config import load_render_config, load_service_settings
from ..utils import encode_png, to_base64
from .ingestion.models import ErrorResponse, OverlayRequest, OverlayResponse
from .raster.canvas import InvalidDimension
from .reference import apply_reference_size
from .renderer import RenderResult, render

logger = logging.getLogger("overlay.api")

router = APIRouter(prefix="/api", tags=["overlay"])

render_config = load_render_config()
settings = load_service_settings()


def error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    body = ErrorResponse(status_code=status_code, error_message=message)
    return JSONResponse(body.model_dump(), status_code=status_code, headers=headers)


def _render(request: Optional[OverlayRequest]) -> RenderResult:
    request = request or OverlayRequest()
    request = apply_reference_size(
        request,
        timeout=settings.reference_timeout,
        max_bytes=settings.reference_max_bytes,
    )
    return render(request, render_config)


# Sync handlers: FastAPI runs them on its thread pool, one canvas per call.
@router.post("/generate-overlay")
def generate_overlay(request: Optional[OverlayRequest] = None):
    """
    Render the overlay and return it as base64 PNG plus a descriptor of the
    strokes that were drawn.
    """
    try:
        result = _render(request)
        png = encode_png(result.canvas)
    except InvalidDimension as e:
        return error_response(400, str(e))
    except Exception as e:
        logger.exception("Overlay render failed")
        return error_response(500, str(e))

    return OverlayResponse(
        overlay_png_b64=to_base64(png),
        overlay_json=result.descriptor,
    )


@router.post("/generate-overlay.png")
def generate_overlay_png(request: Optional[OverlayRequest] = None):
    """Same render, returned as raw PNG bytes."""
    try:
        result = _render(request)
        png = encode_png(result.canvas)
    except InvalidDimension as e:
        return error_response(400, str(e))
    except Exception as e:
        logger.exception("Overlay render failed")
        return error_response(500, str(e))

    return Response(
        content=png,
        media_type="image/png",
        headers={
            "X-Overlay-Width": str(result.descriptor.width),
            "X-Overlay-Height": str(result.descriptor.height),
        },
    )
