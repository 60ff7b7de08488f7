"""
Service configuration.

Values come from the environment (a local .env is loaded first). Every
recognised variable is listed in ENV_VARS; anything else is ignored.
"""
import os
from typing import Callable, Dict, Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

ENV_VARS = {
    "OVERLAY_DEFAULT_WIDTH": "default_width",
    "OVERLAY_DEFAULT_HEIGHT": "default_height",
    "OVERLAY_MIN_DIMENSION": "min_dimension",
    "OVERLAY_MAX_DIMENSION": "max_dimension",
    "OVERLAY_STROKE_COLOR": "stroke_color",
    "OVERLAY_THICKNESS_RATIO": "thickness_ratio",
    "OVERLAY_MIN_THICKNESS": "min_thickness",
    "OVERLAY_REFERENCE_TIMEOUT": "reference_timeout",
    "OVERLAY_REFERENCE_MAX_BYTES": "reference_max_bytes",
    "LOG_LEVEL": "log_level",
}


class RenderConfig(BaseModel):
    default_width: int = 1920
    default_height: int = 1080
    min_dimension: int = 16
    max_dimension: int = 8192
    stroke_color: Tuple[int, int, int, int] = (0, 0, 0, 230)  # near-black
    thickness_ratio: float = 0.003
    min_thickness: int = 3


class ServiceSettings(BaseModel):
    reference_timeout: float = 5.0
    reference_max_bytes: int = 16 * 1024 * 1024
    log_level: str = "INFO"


def parse_hex_color(s: str) -> Tuple[int, int, int, int]:
    """'#rgb', '#rrggbb' or '#rrggbbaa' -> (r, g, b, a); alpha defaults to 255."""
    s = s.strip()
    if s.startswith("#"):
        s = s[1:]
    if len(s) == 3:
        s = "".join(ch * 2 for ch in s)
    if len(s) == 6:
        s += "ff"
    if len(s) != 8:
        raise ValueError(f"not a hex colour: {s!r}")
    r, g, b, a = (int(s[i:i + 2], 16) for i in range(0, 8, 2))
    return (r, g, b, a)


_PARSERS: Dict[str, Callable[[str], object]] = {
    "default_width": int,
    "default_height": int,
    "min_dimension": int,
    "max_dimension": int,
    "stroke_color": parse_hex_color,
    "thickness_ratio": float,
    "min_thickness": int,
    "reference_timeout": float,
    "reference_max_bytes": int,
    "log_level": str,
}


def _from_env(model_cls, env: Optional[Dict[str, str]] = None):
    env = os.environ if env is None else env
    values = {}
    for var, field in ENV_VARS.items():
        if field not in model_cls.model_fields:
            continue
        raw = env.get(var)
        if raw is None or raw == "":
            continue
        try:
            values[field] = _PARSERS[field](raw)
        except ValueError as e:
            raise ValueError(f"{var}={raw!r} is invalid: {e}") from e
    return model_cls(**values)


def load_render_config(env: Optional[Dict[str, str]] = None) -> RenderConfig:
    cfg = _from_env(RenderConfig, env)
    if cfg.min_dimension <= 0 or cfg.min_dimension > cfg.max_dimension:
        raise ValueError(
            f"invalid dimension range: min={cfg.min_dimension}, "
            f"max={cfg.max_dimension}"
        )
    return cfg


def load_service_settings(env: Optional[Dict[str, str]] = None) -> ServiceSettings:
    return _from_env(ServiceSettings, env)
