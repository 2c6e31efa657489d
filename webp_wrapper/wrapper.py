"""Base class running the WebP command-line tools."""

import asyncio
import os
import subprocess
import threading
import time
from concurrent.futures import Future
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import IO, Any, BinaryIO, Callable, Iterator, List, Optional, Union

import structlog

from .arguments import append_io_tokens, args_to_string
from .config import Settings, get_settings
from .exceptions import ToolExecutionError
from .models import CommonOptions
from .platforms import Platform, get_traits
from .resolver import resolve_executable
from .streams import new_buffer, stream_copy, stream_copy_bounded

logger = structlog.get_logger()

PathLike = Union[str, "os.PathLike[str]"]
Source = Union[BinaryIO, PathLike]

VERSION_FLAG = "-version"
UNKNOWN_VERSION = "Unknown"


class ExecutionMode(str, Enum):
    """How a call waits for the external process."""

    BLOCKING = "blocking"
    BACKGROUND = "background"


@dataclass
class ConversionResult:
    """Outcome of one tool invocation."""

    returncode: int
    bytes_read: int
    bytes_written: int
    execution_time: float


def run_in_background(func: Callable[..., Any], *args: Any) -> Future:
    """Run ``func`` on its own thread and expose the outcome as a Future."""
    future: Future = Future()

    def runner() -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            result = func(*args)
        except Exception as exc:
            future.set_exception(exc)
        else:
            future.set_result(result)

    threading.Thread(target=runner, name="webp-wrapper-call").start()
    return future


def _is_path(value: Any) -> bool:
    return isinstance(value, (str, os.PathLike))


class _PipeFeeder(threading.Thread):
    """Writes the source into the process stdin, then closes it."""

    def __init__(
        self, source: BinaryIO, pipe: IO[bytes], length: Optional[int], buffer_size: int
    ):
        super().__init__(name="webp-wrapper-stdin", daemon=True)
        self.source = source
        self.pipe = pipe
        self.length = length
        self.buffer_size = buffer_size
        self.bytes_copied = 0
        self.error: Optional[BaseException] = None

    def run(self) -> None:
        try:
            buffer = new_buffer(self.buffer_size)
            if self.length is None:
                self.bytes_copied = stream_copy(self.source, self.pipe, buffer)
            else:
                self.bytes_copied = stream_copy_bounded(
                    self.source, self.length, self.pipe, buffer
                )
            self.pipe.flush()
        except Exception as exc:
            # Re-raised on the calling thread once the process has exited
            self.error = exc
        finally:
            try:
                self.pipe.close()
            except OSError as exc:
                if self.error is None:
                    self.error = exc


class CommandLineWrapper:
    """Shared plumbing for ``cwebp`` and ``dwebp``.

    Each call builds its own argument list and copy buffers, so one
    instance may serve concurrent calls as long as ``options`` is not
    changed while they run.
    """

    options_class = CommonOptions

    def __init__(
        self,
        filename: str,
        options: Optional[CommonOptions] = None,
        settings: Optional[Settings] = None,
        platform: Optional[Platform] = None,
    ):
        """
        Resolve the tool once and prepare default options.

        Args:
            filename: Tool filename (searched on the configured paths) or path
            options: Initial options (defaults if omitted)
            settings: Settings to use instead of the environment-loaded ones
            platform: Platform traits to use instead of the running platform's

        Raises:
            ExecutableNotFoundError: If the tool cannot be located
            UnsupportedPlatformError: If the platform has no known layout
        """
        self.settings = settings or get_settings()
        self.traits = get_traits(platform)
        self.executable = resolve_executable(
            filename,
            self.settings.search_path_variables,
            self.traits.path_separator,
        )
        self.options = options if options is not None else self.options_class()

    @property
    def tool_name(self) -> str:
        return os.path.basename(self.executable)

    def build_params(self, tokens: List[str]) -> List[str]:
        """Append the flags common to both tools."""
        if self.options.multithreading:
            tokens.append("-mt")

        if self.options.no_optimization:
            tokens.append("-noasm")

        tokens.append("-quiet")
        return tokens

    def build_tokens(
        self, input_path: Optional[str] = None, output_path: Optional[str] = None
    ) -> List[str]:
        """Fresh token list for the current options and the given paths."""
        tokens = self.build_params([])
        return append_io_tokens(tokens, input_path, output_path)

    def build_arguments(
        self, input_path: Optional[str] = None, output_path: Optional[str] = None
    ) -> str:
        """Rendered command line (without the executable)."""
        return args_to_string(self.build_tokens(input_path, output_path))

    def convert(
        self,
        source: Source,
        destination: Source,
        length: Optional[int] = None,
        mode: ExecutionMode = ExecutionMode.BLOCKING,
    ) -> Union[ConversionResult, "Future[ConversionResult]"]:
        """
        Run the tool once, relaying bytes as the source and destination require.

        A stream source is piped into stdin, a path source is handed to the
        tool. A stream destination receives the tool's stdout, a path
        destination is written by the tool itself.

        Args:
            source: Binary stream or path to read
            destination: Binary stream or path to write
            length: Copy at most this many bytes from a stream source
            mode: ``BLOCKING`` returns the result, ``BACKGROUND`` returns a
                Future resolved on a worker thread

        Returns:
            ConversionResult, or a Future of it in background mode

        Raises:
            ValueError: If ``length`` is negative or given with a path source
            FileNotFoundError: If a path source does not exist
            ToolExecutionError: If the tool exits with a non-zero status
        """
        input_path = os.fspath(source) if _is_path(source) else None
        output_path = os.fspath(destination) if _is_path(destination) else None

        if length is not None:
            if input_path is not None:
                raise ValueError("length only applies to stream sources")
            if length < 0:
                raise ValueError("length must not be negative")

        # Snapshot the options on the caller's thread
        tokens = self.build_tokens(input_path, output_path)
        return self._dispatch(
            mode,
            self._run,
            tokens,
            None if input_path is not None else source,
            None if output_path is not None else destination,
            length,
            input_path,
        )

    async def aconvert(
        self, source: Source, destination: Source, length: Optional[int] = None
    ) -> ConversionResult:
        """Awaitable form of ``convert``; the tool runs on a worker thread."""
        future = self.convert(
            source, destination, length=length, mode=ExecutionMode.BACKGROUND
        )
        return await asyncio.wrap_future(future)

    def get_tool_version(
        self, mode: ExecutionMode = ExecutionMode.BLOCKING
    ) -> Union[str, "Future[str]"]:
        """Version reported by the tool, or ``"Unknown"`` if it prints nothing."""
        return self._dispatch(mode, self._query_version)

    def _dispatch(self, mode: ExecutionMode, func: Callable[..., Any], *args: Any) -> Any:
        if ExecutionMode(mode) is ExecutionMode.BACKGROUND:
            return run_in_background(func, *args)
        return func(*args)

    @contextmanager
    def _spawn(
        self, tokens: List[str], stdin: Optional[int], stdout: Optional[int]
    ) -> Iterator[subprocess.Popen]:
        """Start the tool; pipes and process are released when the block exits."""
        command_line = args_to_string(tokens)
        if self.traits.uses_command_line:
            args: Union[str, List[str]] = f'"{self.executable}" {command_line}'
        else:
            args = [self.executable, *tokens]

        logger.debug(
            "Spawning external tool",
            tool=self.tool_name,
            args=command_line,
            pipe_stdin=stdin is not None,
            pipe_stdout=stdout is not None,
        )
        with subprocess.Popen(
            args,
            stdin=stdin,
            stdout=stdout,
            creationflags=self.traits.creationflags,
        ) as proc:
            yield proc

    def _run(
        self,
        tokens: List[str],
        source: Optional[BinaryIO],
        destination: Optional[BinaryIO],
        length: Optional[int],
        input_path: Optional[str],
    ) -> ConversionResult:
        if input_path is not None:
            # Fail fast before spawning anything
            with open(input_path, "rb"):
                pass

        start_time = time.monotonic()
        feeder: Optional[_PipeFeeder] = None
        bytes_written = 0

        try:
            with self._spawn(
                tokens,
                stdin=subprocess.PIPE if source is not None else None,
                stdout=subprocess.PIPE if destination is not None else None,
            ) as proc:
                if source is not None:
                    started = _PipeFeeder(
                        source, proc.stdin, length, self.settings.buffer_size
                    )
                    started.start()
                    feeder = started
                    # stdin is closed by the feeder, never by Popen.__exit__
                    proc.stdin = None
                if destination is not None:
                    bytes_written = stream_copy(
                        proc.stdout, destination, new_buffer(self.settings.buffer_size)
                    )
                proc.wait()
        finally:
            # The process has exited here, so writes to its stdin fail fast
            if feeder is not None:
                feeder.join()

        execution_time = time.monotonic() - start_time
        logger.debug(
            "External tool finished",
            tool=self.tool_name,
            returncode=proc.returncode,
            execution_time=execution_time,
        )

        feeder_error = feeder.error if feeder is not None else None
        if proc.returncode != 0:
            raise ToolExecutionError(self.tool_name, proc.returncode) from feeder_error
        if feeder_error is not None:
            if not isinstance(feeder_error, BrokenPipeError):
                raise feeder_error
            # The tool succeeded without consuming all of its input
            logger.debug("External tool closed stdin early", tool=self.tool_name)

        return ConversionResult(
            returncode=proc.returncode,
            bytes_read=feeder.bytes_copied if feeder is not None else 0,
            bytes_written=bytes_written,
            execution_time=execution_time,
        )

    def _query_version(self) -> str:
        with self._spawn([VERSION_FLAG], stdin=None, stdout=subprocess.PIPE) as proc:
            output = proc.stdout.read()
            proc.wait()

        version = output.decode("utf-8", errors="replace").strip()
        if not version:
            logger.debug("Empty version output", tool=self.tool_name)
            return UNKNOWN_VERSION
        return version

    def __repr__(self) -> str:
        return f"{type(self).__name__}(executable='{self.executable}')"
