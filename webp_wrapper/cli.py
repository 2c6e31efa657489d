"""
Command-line front end
Encode and decode WebP images through the wrapped tools
"""

import sys
from typing import Annotated, BinaryIO, NoReturn, Optional, Union

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from . import __version__
from .config import get_settings
from .decoder import DecoderWrapper
from .encoder import EncoderWrapper
from .exceptions import WebpWrapperError
from .logging import get_logger, setup_logging
from .models import (
    AlphaFilter,
    CompressionMethod,
    DecoderOptions,
    EncoderOptions,
    MetadataType,
    WebpPreset,
)
from .wrapper import CommandLineWrapper

app = typer.Typer(
    name="webp-wrapper",
    help="Encode and decode WebP images with the cwebp/dwebp tools",
    no_args_is_help=True,
    pretty_exceptions_enable=False,
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

# stdout may carry image bytes
console = Console(stderr=True)
logger = get_logger()

STDIO = "-"


def parse_metadata(value: Optional[str]) -> MetadataType:
    """Turn ``all`` or a comma list such as ``exif,xmp`` into flags."""
    if not value:
        return MetadataType.NONE
    metadata = MetadataType.NONE
    for name in value.split(","):
        name = name.strip().upper()
        if not name:
            continue
        try:
            metadata |= MetadataType[name]
        except KeyError:
            raise typer.BadParameter(
                f"unknown metadata '{name.lower()}', expected all, exif, icc or xmp"
            )
    return metadata


def _source(path: str) -> Union[str, BinaryIO]:
    return sys.stdin.buffer if path == STDIO else path


def _destination(path: str) -> Union[str, BinaryIO]:
    return sys.stdout.buffer if path == STDIO else path


def _fail(message: str) -> NoReturn:
    console.print(f"[red]Error: {escape(message)}[/red]")
    raise typer.Exit(1)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: Annotated[
        bool, typer.Option("--version", "-V", help="Show wrapper version")
    ] = False,
    log_level: Annotated[
        Optional[str], typer.Option("--log-level", help="Logging level")
    ] = None,
    json_logs: Annotated[
        bool, typer.Option("--json-logs", help="Render logs as JSON")
    ] = False,
):
    """
    WebP command-line tool wrapper

    Use '-' as INPUT or OUTPUT to read stdin or write stdout.
    """
    if version:
        typer.echo(__version__)
        raise typer.Exit()

    settings = get_settings()
    setup_logging(
        log_level=(log_level or settings.log_level).upper(),
        json_logs=json_logs or settings.json_logs,
    )

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit()


@app.command()
def encode(
    input_path: Annotated[str, typer.Argument(metavar="INPUT", help="Image to encode")],
    output_path: Annotated[str, typer.Argument(metavar="OUTPUT", help="WebP output")],
    quality: Annotated[
        Optional[int], typer.Option("-q", "--quality", help="Quality factor (0-100)")
    ] = None,
    method: Annotated[
        CompressionMethod, typer.Option("--method", help="Compression method")
    ] = CompressionMethod.LOSSY,
    preset: Annotated[
        WebpPreset, typer.Option("--preset", help="Pre-defined profile")
    ] = WebpPreset.DEFAULT,
    compression_level: Annotated[
        Optional[int], typer.Option("-m", "--level", help="Compression level (0-6)")
    ] = None,
    alpha_quality: Annotated[
        Optional[int], typer.Option("--alpha-q", help="Alpha quality (0-100)")
    ] = None,
    lossless_preset: Annotated[
        Optional[int],
        typer.Option("-z", "--lossless-preset", help="Lossless effort level (0-9)"),
    ] = None,
    alpha_filter: Annotated[
        AlphaFilter, typer.Option("--alpha-filter", help="Alpha plane filtering")
    ] = AlphaFilter.FAST,
    no_alpha_method: Annotated[
        bool, typer.Option("--no-alpha-method", help="Store alpha uncompressed")
    ] = False,
    no_alpha: Annotated[
        bool, typer.Option("--no-alpha", help="Ignore transparency")
    ] = False,
    metadata: Annotated[
        Optional[str],
        typer.Option("--metadata", help="Metadata to copy: all or exif,icc,xmp"),
    ] = None,
    sharp_yuv: Annotated[
        bool, typer.Option("--sharp-yuv", help="Sharper RGB->YUV conversion")
    ] = False,
    no_strong: Annotated[
        bool, typer.Option("--no-strong", help="Use simple filter")
    ] = False,
    low_memory: Annotated[
        bool, typer.Option("--low-memory", help="Reduce memory usage")
    ] = False,
    single_thread: Annotated[
        bool, typer.Option("--single-thread", help="Disable multi-threading")
    ] = False,
    no_asm: Annotated[
        bool, typer.Option("--noasm", help="Disable assembly optimizations")
    ] = False,
    tool: Annotated[
        Optional[str], typer.Option("--tool", help="cwebp filename or path")
    ] = None,
):
    """
    Encode an image to WebP

    Examples:
      webp-wrapper encode photo.png photo.webp -q 80
      cat photo.png | webp-wrapper encode - - --method lossless > photo.webp
    """
    flags = parse_metadata(metadata)
    try:
        options = EncoderOptions(
            quality=quality,
            compression_method=method,
            preset=preset,
            compression_level=compression_level,
            alpha_quality=alpha_quality,
            lossless_preset=lossless_preset,
            alpha_filter=alpha_filter,
            alpha_method=not no_alpha_method,
            no_alpha=no_alpha,
            metadata=flags,
            sharp_yuv=sharp_yuv,
            no_strong=no_strong,
            low_memory=low_memory,
            multithreading=not single_thread,
            no_optimization=no_asm,
        )
    except ValidationError as e:
        _fail(_describe_validation(e))

    try:
        encoder = EncoderWrapper(tool, options=options)
        _run(encoder, input_path, output_path)
    except (WebpWrapperError, OSError) as e:
        _fail(str(e))


@app.command()
def decode(
    input_path: Annotated[str, typer.Argument(metavar="INPUT", help="WebP to decode")],
    output_path: Annotated[str, typer.Argument(metavar="OUTPUT", help="Image output")],
    no_fancy: Annotated[
        bool, typer.Option("--no-fancy", help="Skip the fancy upscaler")
    ] = False,
    no_dither: Annotated[
        bool, typer.Option("--no-dither", help="Disable dithering")
    ] = False,
    no_filter: Annotated[
        bool, typer.Option("--no-filter", help="Disable in-loop filtering")
    ] = False,
    dither: Annotated[
        Optional[int], typer.Option("--dither", help="Dithering strength (0-100)")
    ] = None,
    alpha_dither: Annotated[
        bool, typer.Option("--alpha-dither", help="Alpha-plane dithering")
    ] = False,
    alpha_only: Annotated[
        bool, typer.Option("--alpha-only", help="Only output the alpha plane")
    ] = False,
    single_thread: Annotated[
        bool, typer.Option("--single-thread", help="Disable multi-threading")
    ] = False,
    no_asm: Annotated[
        bool, typer.Option("--noasm", help="Disable assembly optimizations")
    ] = False,
    tool: Annotated[
        Optional[str], typer.Option("--tool", help="dwebp filename or path")
    ] = None,
):
    """
    Decode a WebP image

    Examples:
      webp-wrapper decode photo.webp photo.png
    """
    try:
        options = DecoderOptions(
            no_fancy=no_fancy,
            no_dither=no_dither,
            no_filter=no_filter,
            dither_strength=dither,
            alpha_dither=alpha_dither,
            alpha_only=alpha_only,
            multithreading=not single_thread,
            no_optimization=no_asm,
        )
    except ValidationError as e:
        _fail(_describe_validation(e))

    try:
        decoder = DecoderWrapper(tool, options=options)
        _run(decoder, input_path, output_path)
    except (WebpWrapperError, OSError) as e:
        _fail(str(e))


@app.command()
def version(
    decoder: Annotated[
        bool, typer.Option("--decoder", help="Query dwebp instead of cwebp")
    ] = False,
    tool: Annotated[
        Optional[str], typer.Option("--tool", help="Tool filename or path")
    ] = None,
):
    """Show the version reported by the wrapped tool"""
    try:
        wrapper = DecoderWrapper(tool) if decoder else EncoderWrapper(tool)
        typer.echo(wrapper.get_tool_version())
    except (WebpWrapperError, OSError) as e:
        _fail(str(e))


def _run(wrapper: CommandLineWrapper, input_path: str, output_path: str) -> None:
    result = wrapper.convert(_source(input_path), _destination(output_path))
    logger.info(
        "Conversion complete",
        tool=wrapper.tool_name,
        bytes_read=result.bytes_read,
        bytes_written=result.bytes_written,
        execution_time=result.execution_time,
    )
    if output_path != STDIO:
        console.print(f"[green]Wrote {escape(output_path)}[/green]")


def _describe_validation(error: ValidationError) -> str:
    first = error.errors()[0]
    field = ".".join(str(part) for part in first["loc"])
    return f"invalid {field}: {first['msg']}"


def main() -> None:
    app()


if __name__ == "__main__":
    main()
