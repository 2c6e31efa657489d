"""Encoding images to WebP through ``cwebp``."""

from concurrent.futures import Future
from typing import List, Optional, Union

from .config import Settings, get_settings
from .models import CompressionMethod, EncoderOptions, MetadataType, WebpPreset
from .platforms import Platform, get_traits
from .wrapper import CommandLineWrapper, ConversionResult, ExecutionMode, Source

_METADATA_NAMES = (
    (MetadataType.EXIF, "exif"),
    (MetadataType.ICC, "icc"),
    (MetadataType.XMP, "xmp"),
)


def metadata_argument(metadata: MetadataType) -> str:
    """Value of ``-metadata``: ``all`` or the selected names joined by commas."""
    if metadata == MetadataType.ALL:
        return "all"
    return ",".join(name for flag, name in _METADATA_NAMES if metadata & flag)


class EncoderWrapper(CommandLineWrapper):
    """Encode images to WebP with ``cwebp``.

    Example:
        >>> encoder = EncoderWrapper()
        >>> encoder.options.quality = 80
        >>> with open("in.png", "rb") as src, open("out.webp", "wb") as dst:
        ...     encoder.encode(src, dst)
    """

    options_class = EncoderOptions
    options: EncoderOptions

    def __init__(
        self,
        cli_path: Optional[str] = None,
        options: Optional[EncoderOptions] = None,
        settings: Optional[Settings] = None,
        platform: Optional[Platform] = None,
    ):
        settings = settings or get_settings()
        if cli_path is None:
            cli_path = settings.encoder_path or get_traits(platform).encoder_name
        super().__init__(cli_path, options, settings, platform)

    def encode(
        self,
        source: Source,
        destination: Source,
        length: Optional[int] = None,
        mode: ExecutionMode = ExecutionMode.BLOCKING,
    ) -> Union[ConversionResult, "Future[ConversionResult]"]:
        """Encode ``source`` into ``destination``; see ``CommandLineWrapper.convert``."""
        return self.convert(source, destination, length=length, mode=mode)

    def build_params(self, tokens: List[str]) -> List[str]:
        options = self.options

        if options.preset != WebpPreset.DEFAULT:
            tokens.append("-preset")
            tokens.append(options.preset.value)

        if options.compression_level is not None:
            tokens.append("-m")
            tokens.append(str(options.compression_level))

        if options.no_alpha:
            tokens.append("-noalpha")
        elif options.alpha_quality is not None:
            tokens.append("-alpha_q")
            tokens.append(str(options.alpha_quality))

        if options.compression_method == CompressionMethod.LOSSLESS:
            tokens.append("-lossless")
            if options.quality is not None:
                tokens.append("-q")
                tokens.append(str(options.quality))
            if options.lossless_preset is not None:
                tokens.append("-z")
                tokens.append(str(int(options.lossless_preset)))
        elif options.compression_method == CompressionMethod.NEAR_LOSSLESS:
            tokens.append("-near_lossless")
            tokens.append(str(options.quality if options.quality is not None else 100))
        else:
            if options.quality is not None:
                tokens.append("-q")
                tokens.append(str(options.quality))

            if not options.no_alpha:
                tokens.append("-alpha_method")
                tokens.append("1" if options.alpha_method else "0")
                tokens.append("-alpha_filter")
                tokens.append(options.alpha_filter.value)

        if options.no_strong:
            tokens.append("-nostrong")

        if options.sharp_yuv:
            tokens.append("-sharp_yuv")

        if options.low_memory:
            tokens.append("-low_memory")

        super().build_params(tokens)

        if options.metadata != MetadataType.NONE:
            tokens.append("-metadata")
            tokens.append(metadata_argument(options.metadata))

        return tokens
