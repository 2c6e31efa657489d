"""Thin wrapper around the cwebp/dwebp command-line tools."""

from .decoder import DecoderWrapper
from .encoder import EncoderWrapper
from .exceptions import (
    ExecutableNotFoundError,
    ToolExecutionError,
    UnsupportedPlatformError,
    WebpWrapperError,
)
from .models import (
    AlphaFilter,
    CompressionMethod,
    DecoderOptions,
    EncoderOptions,
    LosslessPreset,
    MetadataType,
    WebpPreset,
)
from .wrapper import UNKNOWN_VERSION, CommandLineWrapper, ConversionResult, ExecutionMode

__version__ = "1.0.0"
__all__ = [
    "CommandLineWrapper",
    "EncoderWrapper",
    "DecoderWrapper",
    "ExecutionMode",
    "ConversionResult",
    "UNKNOWN_VERSION",
    "EncoderOptions",
    "DecoderOptions",
    "WebpPreset",
    "CompressionMethod",
    "MetadataType",
    "AlphaFilter",
    "LosslessPreset",
    "WebpWrapperError",
    "ExecutableNotFoundError",
    "UnsupportedPlatformError",
    "ToolExecutionError",
]
