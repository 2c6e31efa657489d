"""Option models for the WebP command-line tools."""

from enum import Enum, IntEnum, IntFlag
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WebpPreset(str, Enum):
    """Pre-defined encoder profiles."""

    DEFAULT = "default"
    PHOTO = "photo"
    PICTURE = "picture"
    DRAWING = "drawing"
    ICON = "icon"
    TEXT = "text"


class CompressionMethod(str, Enum):
    """Encoding algorithm."""

    LOSSY = "lossy"
    NEAR_LOSSLESS = "near_lossless"
    LOSSLESS = "lossless"


class MetadataType(IntFlag):
    """Metadata categories copied from the source image."""

    NONE = 0
    EXIF = 1 << 0
    ICC = 1 << 1
    XMP = 1 << 2
    ALL = EXIF | ICC | XMP


class AlphaFilter(str, Enum):
    """Predictive filtering for the alpha plane."""

    FAST = "fast"
    NONE = "none"
    BEST = "best"


class LosslessPreset(IntEnum):
    """Lossless effort level, 0 is fastest and 9 slowest."""

    LEVEL0 = 0
    LEVEL1 = 1
    LEVEL2 = 2
    LEVEL3 = 3
    LEVEL4 = 4
    LEVEL5 = 5
    LEVEL6 = 6
    LEVEL7 = 7
    LEVEL8 = 8
    LEVEL9 = 9
    FASTEST = 0
    SLOWEST = 9


class CommonOptions(BaseModel):
    """Options understood by both tools.

    Assignments are validated, so an out-of-range value raises
    ``pydantic.ValidationError`` and leaves the previous value in place.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    multithreading: bool = Field(
        default=True, description="Use multi-threading if available"
    )
    no_optimization: bool = Field(
        default=False, description="Disable all assembly optimizations"
    )


class EncoderOptions(CommonOptions):
    """Options for ``cwebp``. ``None`` leaves the tool's default in effect."""

    quality: Optional[int] = Field(
        default=None, ge=0, le=100, description="Quality factor, 0 is smallest"
    )
    compression_level: Optional[int] = Field(
        default=None, ge=0, le=6, description="Compression method, 0 is fastest"
    )
    alpha_quality: Optional[int] = Field(
        default=None, ge=0, le=100, description="Transparency-compression quality"
    )
    preset: WebpPreset = Field(
        default=WebpPreset.DEFAULT, description="Pre-defined profile"
    )
    compression_method: CompressionMethod = Field(
        default=CompressionMethod.LOSSY, description="Encoding algorithm"
    )
    metadata: MetadataType = Field(
        default=MetadataType.NONE, description="Metadata to copy from the source"
    )
    no_alpha: bool = Field(default=False, description="Ignore transparency")
    alpha_method: bool = Field(
        default=True, description="Compress the alpha plane (alpha_method 1)"
    )
    alpha_filter: AlphaFilter = Field(
        default=AlphaFilter.FAST, description="Alpha plane predictive filtering"
    )
    no_strong: bool = Field(
        default=False, description="Use simple filter instead of strong"
    )
    sharp_yuv: bool = Field(
        default=False, description="Use sharper (and slower) RGB->YUV conversion"
    )
    low_memory: bool = Field(
        default=False, description="Reduce memory usage (slower encoding)"
    )
    lossless_preset: Optional[LosslessPreset] = Field(
        default=None, description="Lossless effort level (lossless method only)"
    )

    @field_validator("metadata", mode="before")
    @classmethod
    def coerce_metadata_flags(cls, v):
        """Accept plain integers as flag combinations."""
        if isinstance(v, int) and not isinstance(v, MetadataType):
            return MetadataType(v)
        return v


class DecoderOptions(CommonOptions):
    """Options for ``dwebp``."""

    no_fancy: bool = Field(default=False, description="Skip the fancy YUV420 upscaler")
    no_dither: bool = Field(default=False, description="Disable dithering")
    no_filter: bool = Field(default=False, description="Disable in-loop filtering")
    dither_strength: Optional[int] = Field(
        default=None, ge=0, le=100, description="Dithering strength, None for auto"
    )
    alpha_dither: bool = Field(
        default=False, description="Use alpha-plane dithering if needed"
    )
    alpha_only: bool = Field(default=False, description="Only output the alpha plane")
