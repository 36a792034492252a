"""Robust buffered and unbuffered I/O on raw file descriptors."""

from __future__ import annotations

import os
from typing import Protocol, Union

RIO_BUFSIZE = 4096


class _HasFileno(Protocol):
    def fileno(self) -> int: ...


Descriptor = Union[int, _HasFileno]


def _fd(target: Descriptor) -> int:
    return target if isinstance(target, int) else target.fileno()


class RobustIO:
    """Reads and writes whole amounts on descriptors despite short transfers.

    Buffered reads (read_nb, readline_b, readline, read_to_eof) share one
    internal buffer of RIO_BUFSIZE bytes; read_n bypasses it. Interrupted
    system calls are retried; other failures raise OSError.
    """

    def __init__(self, read_fd: Descriptor, write_fd: Descriptor | None = None) -> None:
        self._read_fd = _fd(read_fd)
        self._write_fd = self._read_fd if write_fd is None else _fd(write_fd)
        self._buf = b""
        self._pos = 0

    @property
    def _available(self) -> int:
        return len(self._buf) - self._pos

    def _fill(self) -> bool:
        """Refill the buffer when empty; False at end of file."""
        while not self._available:
            chunk = os.read(self._read_fd, RIO_BUFSIZE)
            if not chunk:
                return False
            self._buf, self._pos = chunk, 0
        return True

    def _take(self, n: int) -> bytes:
        if not self._fill():
            return b""
        count = min(n, self._available)
        data = self._buf[self._pos : self._pos + count]
        self._pos += count
        return data

    def _read_line(self, limit: int | None) -> bytes:
        out = bytearray()
        while limit is None or len(out) < limit:
            if not self._fill():
                break
            newline = self._buf.find(b"\n", self._pos)
            end = newline + 1 if newline != -1 else len(self._buf)
            count = end - self._pos
            if limit is not None:
                count = min(count, limit - len(out))
            out += self._buf[self._pos : self._pos + count]
            self._pos += count
            if out.endswith(b"\n"):
                break
        return bytes(out)

    def write_n(self, data: bytes | bytearray | memoryview) -> int:
        """Write all of ``data`` (unbuffered) and return its length."""
        view = memoryview(data).cast("B")
        total = len(view)
        while view:
            written = os.write(self._write_fd, view)
            view = view[written:]
        return total

    def writeline(self, line: str | bytes) -> int:
        """Write ``line`` followed by a newline; return the bytes written."""
        data = line.encode("utf-8") if isinstance(line, str) else bytes(line)
        return self.write_n(data) + self.write_n(b"\n")

    def read_n(self, n: int) -> bytes:
        """Read up to ``n`` bytes straight from the descriptor, fewer only at EOF."""
        parts = bytearray()
        while len(parts) < n:
            chunk = os.read(self._read_fd, n - len(parts))
            if not chunk:
                break
            parts += chunk
        return bytes(parts)

    def read_nb(self, n: int) -> bytes:
        """Read up to ``n`` bytes through the buffer, fewer only at EOF."""
        parts = bytearray()
        while len(parts) < n:
            chunk = self._take(n - len(parts))
            if not chunk:
                break
            parts += chunk
        return bytes(parts)

    def readline_b(self, max_len: int) -> bytes:
        """Read one line of at most ``max_len - 1`` bytes, newline included."""
        if max_len <= 1:
            return b""
        return self._read_line(max_len - 1)

    def readline(self) -> bytes:
        """Read one whole line, newline included.

        At end of file the unterminated remainder is returned; b"" means
        nothing was left.
        """
        return self._read_line(None)

    def read_to_eof(self) -> bytes:
        """Return everything buffered plus all data until end of file."""
        out = bytearray(self._buf[self._pos :])
        self._buf, self._pos = b"", 0
        while chunk := os.read(self._read_fd, RIO_BUFSIZE):
            out += chunk
        return bytes(out)