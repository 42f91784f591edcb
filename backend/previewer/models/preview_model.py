# backend/previewer/models/preview_model.py
"""
Preview pipeline models.

RawImage and Variant carry image bytes between pipeline stages, VariantSpec
and PreviewOptions describe a run's configuration, PersistedAsset and
AssetDescriptor describe what a run wrote to the asset store.
"""

import re
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..constants import VARIANT_KEY_PATTERN
from ..utils.format_helpers import normalize_format
from ..utils.time_utils import to_unix_seconds


class RawImage(BaseModel):
    """Fully buffered image with its probed dimensions"""

    buffer: bytes = Field(..., repr=False)
    length: int = Field(..., ge=0, description="Byte length of buffer")
    width: int = Field(..., ge=1)
    height: int = Field(..., ge=1)
    format: Optional[str] = Field(
        default=None, description="Format reported by the header probe"
    )

    model_config = ConfigDict(frozen=True)

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)


class VariantSpec(BaseModel):
    """Configuration entry controlling how one variant is derived"""

    key: str = ""
    width: Optional[int] = Field(default=None, ge=1)
    height: Optional[int] = Field(default=None, ge=1)
    max_width: Optional[int] = Field(default=None, ge=1)
    max_height: Optional[int] = Field(default=None, ge=1)
    type: Optional[str] = Field(default=None, description="Output format")
    from_: Optional[str] = Field(
        default=None, alias="from", description="Key of the variant to derive from"
    )
    skip_size: Optional[int] = Field(
        default=None,
        ge=1,
        description="Skip transformation when the base is smaller than this many bytes",
    )
    gif_animation: Optional[bool] = None
    jpeg_quality: Optional[int] = Field(default=None, ge=1, le=100)
    unsharp: bool = False

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @field_validator("type", mode="before")
    @classmethod
    def validate_type(cls, v):
        """Normalize output format aliases (jpg -> jpeg)"""
        return normalize_format(v)

    @property
    def has_geometry(self) -> bool:
        return self.width is not None or self.height is not None


class Variant(BaseModel):
    """One derived image produced for a configured key"""

    key: str
    image: RawImage
    type: str

    model_config = ConfigDict(frozen=True)


class PersistedAsset(BaseModel):
    """Record of one write to the asset store"""

    key: str
    id: str
    content_type: str
    width: int
    height: int
    length: int


class ImageRecord(BaseModel):
    """Per-variant entry of the result descriptor"""

    key: str
    width: int
    height: int
    length: int


class AssetDescriptor(BaseModel):
    """Result of a preview run"""

    id: str = Field(..., description="Asset identifier of the orig image")
    size: int = Field(..., description="Byte length of the orig image")
    images: List[ImageRecord] = Field(default_factory=list)


class PreviewOptions(BaseModel):
    """Per-invocation configuration of a preview run"""

    resize: Dict[str, VariantSpec] = Field(default_factory=dict)
    ext: Optional[str] = Field(
        default=None, description="Source format used when the probe reports none"
    )
    date: int = Field(
        ..., description="UNIX timestamp used to derive the orig asset identifier"
    )

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def attach_variant_keys(cls, data: Any) -> Any:
        """Copy each mapping key into its spec so specs know their own key"""
        if not isinstance(data, dict):
            return data

        resize = data.get("resize")
        if isinstance(resize, dict):
            keyed = {}
            for key, spec in resize.items():
                if isinstance(spec, VariantSpec):
                    keyed[key] = spec.model_copy(update={"key": key})
                elif isinstance(spec, dict):
                    keyed[key] = {**spec, "key": key}
                else:
                    keyed[key] = spec
            data = {**data, "resize": keyed}
        return data

    @field_validator("resize")
    @classmethod
    def validate_variant_keys(cls, v: Dict[str, VariantSpec]) -> Dict[str, VariantSpec]:
        """Variant keys become part of asset names"""
        for key in v:
            if not re.fullmatch(VARIANT_KEY_PATTERN, key) or ".." in key:
                raise ValueError(f"Invalid variant key: {key!r}")
        return v

    @field_validator("ext", mode="before")
    @classmethod
    def validate_ext(cls, v):
        return normalize_format(v)

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, v: Union[datetime, int, float, str]) -> int:
        seconds = to_unix_seconds(v)
        # Asset identifiers hold the timestamp in 4 bytes
        if seconds >= 2**32:
            raise ValueError(f"Timestamp too large for an asset identifier: {v}")
        return seconds
