"""Decoding WebP images through ``dwebp``."""

from concurrent.futures import Future
from typing import List, Optional, Union

from .config import Settings, get_settings
from .models import DecoderOptions
from .platforms import Platform, get_traits
from .wrapper import CommandLineWrapper, ConversionResult, ExecutionMode, Source


class DecoderWrapper(CommandLineWrapper):
    """Decode WebP images with ``dwebp``."""

    options_class = DecoderOptions
    options: DecoderOptions

    def __init__(
        self,
        cli_path: Optional[str] = None,
        options: Optional[DecoderOptions] = None,
        settings: Optional[Settings] = None,
        platform: Optional[Platform] = None,
    ):
        settings = settings or get_settings()
        if cli_path is None:
            cli_path = settings.decoder_path or get_traits(platform).decoder_name
        super().__init__(cli_path, options, settings, platform)

    def decode(
        self,
        source: Source,
        destination: Source,
        length: Optional[int] = None,
        mode: ExecutionMode = ExecutionMode.BLOCKING,
    ) -> Union[ConversionResult, "Future[ConversionResult]"]:
        """Decode ``source`` into ``destination``; see ``CommandLineWrapper.convert``."""
        return self.convert(source, destination, length=length, mode=mode)

    def build_params(self, tokens: List[str]) -> List[str]:
        super().build_params(tokens)
        options = self.options

        if options.no_fancy:
            tokens.append("-nofancy")

        if options.no_dither:
            tokens.append("-nodither")

        if options.no_filter:
            tokens.append("-nofilter")

        if options.dither_strength is not None:
            tokens.append("-dither")
            tokens.append(str(options.dither_strength))

        if options.alpha_dither:
            tokens.append("-alpha_dither")

        if options.alpha_only:
            tokens.append("-alpha")

        return tokens
