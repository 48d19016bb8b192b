"""Small utilities: range splitting, formatting, ordering and binary vectors."""

from __future__ import annotations

import struct
from typing import BinaryIO, Iterable, Sequence

_LENGTH = struct.Struct("<Q")


def equal_split(start: int, end: int, num_parts: int) -> list[int]:
    """Split the inclusive range start..end into at most num_parts parts.

    Returns the boundaries: part k covers result[k] up to result[k + 1] - 1.
    """
    if num_parts < 1:
        raise ValueError("num_parts must be at least 1.")
    if num_parts == 1:
        return [start, end + 1]
    length = end - start + 1
    num_parts = min(num_parts, length)
    short_length = length // num_parts
    long_length = -(-length // num_parts)
    cut = start + (length % num_parts) * long_length
    return [*range(start, cut, long_length), *range(cut, end + 2, short_length)]


def round_to_next_multiple(value: int, multiple: int) -> int:
    """Round value up to the next multiple of multiple."""
    if multiple <= 0:
        raise ValueError("multiple must be positive.")
    return -(-value // multiple) * multiple


def split_string(text: str, delimiter: str) -> list[str]:
    """Split text at delimiter the way line-wise reading does: no trailing empty part."""
    if not text:
        return []
    parts = text.split(delimiter)
    if parts[-1] == "":
        parts.pop()
    return parts


def _unit(count: int, name: str) -> str:
    return f"1 {name}" if count == 1 else f"{count} {name}s"


def beautify_time(seconds: int) -> str:
    """Format a duration in seconds as days, hours, minutes and seconds."""
    result = f"{seconds % 60} seconds"
    if seconds // 60 == 0:
        return result
    result = f"{_unit((seconds // 60) % 60, 'minute')}, {result}"
    if seconds // 3600 == 0:
        return result
    result = f"{_unit((seconds // 3600) % 24, 'hour')}, {result}"
    if seconds // 86400 == 0:
        return result
    return f"{_unit(seconds // 86400, 'day')}, {result}"


def order(values: Sequence[float], decreasing: bool = False) -> list[int]:
    """Indices that sort values, ascending unless decreasing is set."""
    return sorted(range(len(values)), key=values.__getitem__, reverse=decreasing)


def write_vector(stream: BinaryIO, values: Iterable, kind: str) -> None:
    """Write a length-prefixed vector of struct-format kind to a binary stream."""
    items = list(values)
    stream.write(_LENGTH.pack(len(items)))
    stream.write(struct.pack(f"<{len(items)}{kind}", *items))


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    chunk = stream.read(size)
    if len(chunk) != size:
        raise EOFError("Unexpected end of binary vector data.")
    return chunk


def read_vector(stream: BinaryIO, kind: str) -> list:
    """Read a vector written by write_vector."""
    (length,) = _LENGTH.unpack(_read_exact(stream, _LENGTH.size))
    layout = struct.Struct(f"<{length}{kind}")
    return list(layout.unpack(_read_exact(stream, layout.size)))


def write_matrix(stream: BinaryIO, rows: Iterable[Iterable], kind: str) -> None:
    """Write a length-prefixed list of vectors to a binary stream."""
    all_rows = list(rows)
    stream.write(_LENGTH.pack(len(all_rows)))
    for row in all_rows:
        write_vector(stream, row, kind)


def read_matrix(stream: BinaryIO, kind: str) -> list[list]:
    """Read a list of vectors written by write_matrix."""
    (length,) = _LENGTH.unpack(_read_exact(stream, _LENGTH.size))
    return [read_vector(stream, kind) for _ in range(length)]