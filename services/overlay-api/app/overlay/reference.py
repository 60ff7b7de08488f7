"""
Reference-image size probe.

When a caller points at a reference photo but leaves width or height out,
the overlay is sized to the photo. The probe is best-effort: it is bounded
by a timeout and a byte cap, and any failure just means "use the defaults".
"""
import logging
import time
from typing import Optional, Tuple
from urllib.parse import urlparse

import requests

from ..utils import image_size_from_bytes
from .ingestion.models import OverlayRequest

logger = logging.getLogger("overlay.reference")

_CHUNK = 64 * 1024


def fetch_reference_size(url: str, timeout: float = 5.0, max_bytes: int = 16 * 1024 * 1024) -> Optional[Tuple[int, int]]:
    """
    Size of the image at `url`, read from as few leading bytes as possible.

    `timeout` bounds each connect/read and also the whole download.
    """
    if urlparse(url).scheme not in ("http", "https"):
        logger.warning("Ignoring reference image with unsupported scheme: %s", url)
        return None

    started = time.monotonic()
    try:
        with requests.get(url, timeout=timeout, stream=True) as resp:
            resp.raise_for_status()
            data = bytearray()
            for chunk in resp.iter_content(chunk_size=_CHUNK):
                data.extend(chunk)
                size = image_size_from_bytes(bytes(data))
                if size is not None:
                    return size
                if len(data) > max_bytes:
                    logger.warning("Reference image larger than %d bytes: %s", max_bytes, url)
                    return None
                if time.monotonic() - started > timeout:
                    logger.warning("Reference image download exceeded %ss: %s", timeout, url)
                    return None
    except requests.RequestException as e:
        logger.warning("Reference image fetch failed for %s: %s", url, e)
        return None

    logger.warning("Reference image at %s is not a readable image", url)
    return None


def apply_reference_size(request: OverlayRequest, timeout: float = 5.0, max_bytes: int = 16 * 1024 * 1024) -> OverlayRequest:
    """Fill a missing width/height from the reference image, if there is one."""
    if not request.reference_image_url:
        return request
    if request.width is not None and request.height is not None:
        return request

    size = fetch_reference_size(request.reference_image_url, timeout=timeout, max_bytes=max_bytes)
    if size is None:
        return request

    w, h = size
    update = {}
    if request.width is None:
        update["width"] = w
    if request.height is None:
        update["height"] = h
    logger.info("Sizing overlay from reference image: %dx%d", w, h)
    return request.model_copy(update=update)
