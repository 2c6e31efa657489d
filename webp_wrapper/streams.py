"""Byte relaying between streams and process pipes."""

from typing import BinaryIO

from .config import DEFAULT_BUFFER_SIZE


def read_into(source: BinaryIO, view: memoryview) -> int:
    """Fill ``view`` from ``source``, using ``read`` when ``readinto`` is missing.

    Returns:
        Number of bytes placed in ``view``, 0 at end of stream
    """
    readinto = getattr(source, "readinto", None)
    if readinto is not None:
        return readinto(view) or 0
    chunk = source.read(len(view))
    if not chunk:
        return 0
    view[: len(chunk)] = chunk
    return len(chunk)


def stream_copy(source: BinaryIO, destination: BinaryIO, buffer: bytearray) -> int:
    """Copy ``source`` into ``destination`` until a read returns nothing.

    Returns:
        Number of bytes copied
    """
    view = memoryview(buffer)
    total = 0
    read = read_into(source, view)
    while read:
        destination.write(view[:read])
        total += read
        read = read_into(source, view)
    return total


def stream_copy_bounded(
    source: BinaryIO, length: int, destination: BinaryIO, buffer: bytearray
) -> int:
    """Copy at most ``length`` bytes from ``source`` into ``destination``.

    A source that runs dry first is not an error: the destination is
    flushed and the copy stops.

    Returns:
        Number of bytes copied
    """
    view = memoryview(buffer)
    remaining = length
    while remaining > 0:
        read = read_into(source, view[: min(remaining, len(buffer))])
        if not read:
            destination.flush()
            break
        destination.write(view[:read])
        remaining -= read
    return length - remaining


def new_buffer(size: int = DEFAULT_BUFFER_SIZE) -> bytearray:
    return bytearray(size)
