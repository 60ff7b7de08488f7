from PIL import Image
import base64
import io
from typing import Optional, Tuple

from .overlay.raster.canvas import Canvas


def canvas_to_image(canvas: Canvas) -> Image.Image:
    return Image.frombuffer("RGBA", canvas.size, canvas.tobytes(), "raw", "RGBA", 0, 1)


def encode_png(canvas: Canvas) -> bytes:
    """Encode the canvas as an RGBA PNG (transparency preserved)."""
    buffer = io.BytesIO()
    canvas_to_image(canvas).save(buffer, format="PNG")
    return buffer.getvalue()


def to_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("utf-8")


def to_data_uri(data: bytes, mime: str = "image/png") -> str:
    return f"data:{mime};base64,{to_base64(data)}"


def image_size_from_bytes(data: bytes) -> Optional[Tuple[int, int]]:
    """
    Width and height of an encoded image, or None if Pillow can't identify it.
    Only the header is parsed; pixel data is never decoded.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            w, h = img.size
    except Exception:
        return None
    if w <= 0 or h <= 0:
        return None
    return (int(w), int(h))
