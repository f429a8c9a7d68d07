"""Reading a here-document from a line-oriented stream."""

from __future__ import annotations

from collections.abc import Iterator
from typing import AnyStr, IO


def iter_lines(stream: IO[AnyStr]) -> Iterator[AnyStr]:
    """Yield lines from ``stream`` with their newline kept, until end of input.

    The final line is yielded even when it has no trailing newline.
    """
    while True:
        line = stream.readline()
        if not line:
            return
        yield line


def read_heredoc(stream: IO[AnyStr], limiter: AnyStr) -> AnyStr:
    """Collect lines from ``stream`` until one starts with ``limiter``.

    The limiting line is consumed but not included. End of input also ends the
    document. Text and byte streams are both accepted, matching ``limiter``.
    """
    collected = []
    for line in iter_lines(stream):
        if line.startswith(limiter):
            break
        collected.append(line)
    return limiter[:0].join(collected)