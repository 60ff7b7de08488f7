from pydantic import AliasChoices, BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator
from typing import Any, Dict, List, Optional


class OverlayStroke(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Optional[str] = None  # only "line" is drawn, other kinds are carried through
    x1: float = 0.0  # each coordinate: <= 1 is a fraction of the axis, else pixels
    y1: float = 0.0
    x2: float = 0.0
    y2: float = 0.0
    label: Optional[str] = ""  # metadata only, never rasterized

    _raw: Optional[Dict[str, Any]] = PrivateAttr(default=None)

    @model_validator(mode="wrap")
    @classmethod
    def _keep_raw(cls, data, handler):
        stroke = handler(data)
        if isinstance(data, dict):
            stroke._raw = dict(data)
        return stroke

    def echo(self) -> Dict[str, Any]:
        """The stroke exactly as the caller sent it."""
        if self._raw is not None:
            return dict(self._raw)
        data = self.model_dump(exclude_unset=True)
        data.update(self.model_extra or {})
        return data


class OverlayRequest(BaseModel):
    width: Optional[float] = None
    height: Optional[float] = None
    show_thirds: bool = True
    strokes: List[OverlayStroke] = Field(default_factory=list)
    reference_image_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("reference_image_url", "student_image_url"),
    )

    @field_validator("show_thirds", mode="before")
    @classmethod
    def _null_thirds(cls, v):
        return True if v is None else v

    @field_validator("strokes", mode="before")
    @classmethod
    def _non_list_strokes(cls, v):
        return v if isinstance(v, list) else []


class OverlayDescriptor(BaseModel):
    width: int
    height: int
    normalized: bool = True
    strokes: List[Dict[str, Any]]


class OverlayResponse(BaseModel):
    status_code: int = 200
    overlay_png_b64: str
    overlay_json: OverlayDescriptor
    ai_critique: str = ""
    error_message: Optional[str] = None


class ErrorResponse(BaseModel):
    status_code: int
    error_message: str
