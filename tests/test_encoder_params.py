"""Unit tests for encoder argument building."""

import pytest
from pydantic import ValidationError

from webp_wrapper.encoder import metadata_argument
from webp_wrapper.models import (
    AlphaFilter,
    CompressionMethod,
    LosslessPreset,
    MetadataType,
    WebpPreset,
)


def _value_after(tokens, flag):
    return tokens[tokens.index(flag) + 1]


class TestEncoderDefaults:
    """Test the command line produced by default options."""

    def test_default_arguments(self, encoder):
        """Test default options render alpha settings and base flags."""
        assert encoder.build_arguments() == (
            "-alpha_method 1 -alpha_filter fast -mt -quiet -o - -- -"
        )

    def test_rendering_is_repeatable(self, encoder):
        """Test two renders without changes are identical."""
        encoder.options.quality = 75
        encoder.options.metadata = MetadataType.ICC

        first = encoder.build_arguments("in.png", "out.webp")
        second = encoder.build_arguments("in.png", "out.webp")

        assert first == second

    def test_token_lists_are_not_shared(self, encoder):
        """Test every build returns a fresh list."""
        first = encoder.build_tokens()
        first.append("-bogus")

        assert "-bogus" not in encoder.build_tokens()


class TestQuality:
    """Test quality validation and rendering."""

    @pytest.mark.parametrize("quality", [0, 1, 50, 99, 100])
    def test_quality_in_range(self, encoder, quality):
        """Test valid quality values appear after -q."""
        encoder.options.quality = quality

        tokens = encoder.build_tokens()

        assert _value_after(tokens, "-q") == str(quality)

    @pytest.mark.parametrize("quality", [-1, 101, 1000])
    def test_quality_out_of_range(self, encoder, quality):
        """Test invalid quality is rejected and the old value kept."""
        encoder.options.quality = 40

        with pytest.raises(ValidationError):
            encoder.options.quality = quality

        assert encoder.options.quality == 40
        assert _value_after(encoder.build_tokens(), "-q") == "40"

    def test_quality_unset_omits_flag(self, encoder):
        """Test no -q flag without a quality."""
        assert "-q" not in encoder.build_tokens()


class TestCompressionMethod:
    """Test the lossy / near-lossless / lossless branches."""

    def test_near_lossless_defaults_to_100(self, encoder):
        """Test near-lossless without quality renders 100."""
        encoder.options.compression_method = CompressionMethod.NEAR_LOSSLESS

        tokens = encoder.build_tokens()

        assert _value_after(tokens, "-near_lossless") == "100"
        assert "-q" not in tokens

    def test_near_lossless_uses_quality(self, encoder):
        """Test near-lossless takes the quality value."""
        encoder.options.compression_method = CompressionMethod.NEAR_LOSSLESS
        encoder.options.quality = 42

        tokens = encoder.build_tokens()

        assert _value_after(tokens, "-near_lossless") == "42"
        assert "-q" not in tokens

    def test_near_lossless_skips_alpha_method(self, encoder):
        """Test alpha method/filter only accompany lossy encoding."""
        encoder.options.compression_method = CompressionMethod.NEAR_LOSSLESS

        tokens = encoder.build_tokens()

        assert "-alpha_method" not in tokens
        assert "-alpha_filter" not in tokens

    def test_lossless_with_quality(self, encoder):
        """Test lossless flag followed by quality."""
        encoder.options.compression_method = CompressionMethod.LOSSLESS
        encoder.options.quality = 90

        tokens = encoder.build_tokens()

        assert tokens[:3] == ["-lossless", "-q", "90"]
        assert "-alpha_method" not in tokens

    def test_lossless_preset(self, encoder):
        """Test lossless preset renders -z after quality."""
        encoder.options.compression_method = CompressionMethod.LOSSLESS
        encoder.options.quality = 90
        encoder.options.lossless_preset = LosslessPreset.SLOWEST

        tokens = encoder.build_tokens()

        assert tokens[:5] == ["-lossless", "-q", "90", "-z", "9"]

    def test_lossless_preset_ignored_when_lossy(self, encoder):
        """Test -z is only rendered for lossless encoding."""
        encoder.options.lossless_preset = LosslessPreset.LEVEL3

        assert "-z" not in encoder.build_tokens()

    def test_lossy_alpha_method_off(self, encoder):
        """Test alpha method renders 0 when disabled."""
        encoder.options.alpha_method = False
        encoder.options.alpha_filter = AlphaFilter.BEST

        tokens = encoder.build_tokens()

        assert _value_after(tokens, "-alpha_method") == "0"
        assert _value_after(tokens, "-alpha_filter") == "best"


class TestAlpha:
    """Test alpha handling."""

    def test_no_alpha_suppresses_alpha_flags(self, encoder):
        """Test no-alpha mode drops every alpha setting."""
        encoder.options.no_alpha = True
        encoder.options.alpha_quality = 50
        encoder.options.alpha_method = False
        encoder.options.alpha_filter = AlphaFilter.NONE

        tokens = encoder.build_tokens()

        assert "-noalpha" in tokens
        assert "-alpha_q" not in tokens
        assert "-alpha_method" not in tokens
        assert "-alpha_filter" not in tokens

    def test_alpha_quality(self, encoder):
        """Test alpha quality renders when alpha is kept."""
        encoder.options.alpha_quality = 65

        assert _value_after(encoder.build_tokens(), "-alpha_q") == "65"

    def test_alpha_quality_range(self, encoder):
        """Test alpha quality outside 0-100 is rejected."""
        with pytest.raises(ValidationError):
            encoder.options.alpha_quality = 101

        assert encoder.options.alpha_quality is None


class TestMetadata:
    """Test -metadata rendering."""

    @pytest.mark.parametrize(
        "flags, expected",
        [
            (MetadataType.EXIF, "exif"),
            (MetadataType.ICC, "icc"),
            (MetadataType.XMP, "xmp"),
            (MetadataType.EXIF | MetadataType.XMP, "exif,xmp"),
            (MetadataType.ICC | MetadataType.XMP, "icc,xmp"),
            (MetadataType.EXIF | MetadataType.ICC, "exif,icc"),
            (MetadataType.ALL, "all"),
        ],
    )
    def test_metadata_argument(self, flags, expected):
        """Test names are emitted in exif, icc, xmp order."""
        assert metadata_argument(flags) == expected

    def test_exif_and_xmp_follow_metadata_flag(self, encoder):
        """Test the -metadata token pair for exif and xmp."""
        encoder.options.metadata = MetadataType.EXIF | MetadataType.XMP

        assert _value_after(encoder.build_tokens(), "-metadata") == "exif,xmp"

    def test_metadata_from_plain_int(self, encoder):
        """Test integer flag values are accepted."""
        encoder.options.metadata = 6

        assert encoder.options.metadata == MetadataType.ICC | MetadataType.XMP
        assert _value_after(encoder.build_tokens(), "-metadata") == "icc,xmp"

    def test_no_metadata(self, encoder):
        """Test no -metadata flag by default."""
        assert "-metadata" not in encoder.build_tokens()


class TestOrdering:
    """Test the fixed position of every flag."""

    def test_full_option_order(self, encoder):
        """Test flags render in the documented order."""
        options = encoder.options
        options.preset = WebpPreset.PHOTO
        options.compression_level = 4
        options.alpha_quality = 80
        options.quality = 75
        options.alpha_filter = AlphaFilter.NONE
        options.no_strong = True
        options.sharp_yuv = True
        options.low_memory = True
        options.no_optimization = True
        options.metadata = MetadataType.ALL

        tokens = encoder.build_tokens("in.png", "out.webp")

        assert tokens == [
            "-preset", "photo",
            "-m", "4",
            "-alpha_q", "80",
            "-q", "75",
            "-alpha_method", "1",
            "-alpha_filter", "none",
            "-nostrong",
            "-sharp_yuv",
            "-low_memory",
            "-mt",
            "-noasm",
            "-quiet",
            "-metadata", "all",
            "-o", "out.webp",
            "--", "in.png",
        ]

    def test_default_preset_omitted(self, encoder):
        """Test the default preset adds nothing."""
        assert "-preset" not in encoder.build_tokens()

    def test_compression_level_range(self, encoder):
        """Test compression level is limited to 0-6."""
        encoder.options.compression_level = 6

        with pytest.raises(ValidationError):
            encoder.options.compression_level = 7

        assert _value_after(encoder.build_tokens(), "-m") == "6"

    def test_multithreading_off(self, encoder):
        """Test -mt disappears when multithreading is disabled."""
        encoder.options.multithreading = False

        tokens = encoder.build_tokens()

        assert "-mt" not in tokens
        assert "-quiet" in tokens

    def test_paths_with_spaces_are_quoted(self, encoder):
        """Test paths containing spaces are wrapped in double quotes."""
        arguments = encoder.build_arguments("my photo.png", "out dir/photo.webp")

        assert arguments.endswith('-o "out dir/photo.webp" -- "my photo.png"')
