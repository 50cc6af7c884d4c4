"""Line transports for the server loop.

Each transport satisfies the :class:`ServerTransport` protocol: ``receive``
returns one raw newline-terminated line (``None`` at end of input) and ``send``
writes one response line and flushes it immediately.
"""

import asyncio
import logging
import sys
from typing import BinaryIO, Optional, Protocol, runtime_checkable

log = logging.getLogger(__name__)

DEFAULT_MAX_LINE_BYTES = 16 * 1024 * 1024


class LineTooLongError(Exception):
    """An input line exceeded the transport's size limit and was discarded up to its newline."""

    def __init__(self, size: int, limit: Optional[int] = None):
        self.size = size
        self.limit = limit
        if limit is not None:
            message = f"line of {size} bytes exceeds the {limit}-byte limit"
        else:
            message = f"line of {size} bytes exceeds the size limit"
        super().__init__(message)


@runtime_checkable
class ServerTransport(Protocol):
    async def receive(self) -> Optional[bytes]: ...
    async def send(self, line: str) -> None: ...


class StreamTransport:
    """Reads lines from an asyncio ``StreamReader`` and writes to a binary stream.

    The line size limit is the one the reader was created with.
    """

    # Reported in LineTooLongError when known
    max_line_bytes: Optional[int] = None

    def __init__(self, reader: asyncio.StreamReader, output: BinaryIO) -> None:
        self._reader = reader
        self._output = output

    async def receive(self) -> Optional[bytes]:
        if self._reader is None:
            raise RuntimeError("Transport not connected")
        try:
            return await self._reader.readuntil(b"\n")
        except asyncio.IncompleteReadError as exc:
            # unterminated last line, or end of input
            return exc.partial or None
        except asyncio.LimitOverrunError as exc:
            size = await self._discard_line(exc.consumed)
            raise LineTooLongError(size, self.max_line_bytes) from exc

    async def _discard_line(self, buffered: int) -> int:
        """Drops an oversized line through its newline and returns its length."""
        size = 0
        while True:
            await self._reader.readexactly(buffered)
            size += buffered
            try:
                tail = await self._reader.readuntil(b"\n")
            except asyncio.IncompleteReadError as exc:
                return size + len(exc.partial)
            except asyncio.LimitOverrunError as exc:
                buffered = exc.consumed
                continue
            return size + len(tail) - 1

    async def send(self, line: str) -> None:
        # Lone surrogates are written as \u escapes instead of failing the encode
        self._output.write(line.encode("utf-8", errors="backslashreplace") + b"\n")
        self._output.flush()


class StdioTransport(StreamTransport):
    """
    Serves over the process's stdin/stdout.

    stdin is attached to the event loop as a read pipe. When stdin is a regular
    file (which cannot be registered as a pipe) each line is read on demand in a
    worker thread, at most ``max_line_bytes`` at a time.
    """

    def __init__(
        self,
        max_line_bytes: int = DEFAULT_MAX_LINE_BYTES,
        stdin: Optional[BinaryIO] = None,
        stdout: Optional[BinaryIO] = None,
    ) -> None:
        self._stdin = stdin if stdin is not None else sys.stdin.buffer
        self.max_line_bytes = max_line_bytes
        self._pipe_transport: Optional[asyncio.ReadTransport] = None
        self._blocking_input = False
        # The reader is bound to the running loop, so it is created in connect()
        self._reader = None
        self._output = stdout if stdout is not None else sys.stdout.buffer

    async def connect(self) -> None:
        loop = asyncio.get_running_loop()
        reader = asyncio.StreamReader(limit=self.max_line_bytes)
        protocol = asyncio.StreamReaderProtocol(reader)
        try:
            self._pipe_transport, _ = await loop.connect_read_pipe(lambda: protocol, self._stdin)
        except (ValueError, OSError, NotImplementedError) as exc:
            log.debug(f"stdin cannot be used as a pipe ({exc}); reading it from a worker thread")
            self._blocking_input = True
        else:
            self._reader = reader

    async def receive(self) -> Optional[bytes]:
        if self._blocking_input:
            return await asyncio.get_running_loop().run_in_executor(None, self._read_line)
        return await super().receive()

    def _read_line(self) -> Optional[bytes]:
        line = self._stdin.readline(self.max_line_bytes + 1)
        if len(line) <= self.max_line_bytes or line.endswith(b"\n"):
            return line or None

        size = len(line)
        chunk = line
        while chunk and not chunk.endswith(b"\n"):
            chunk = self._stdin.readline(self.max_line_bytes)
            size += len(chunk)
        if chunk.endswith(b"\n"):
            size -= 1
        raise LineTooLongError(size, self.max_line_bytes)

    async def close(self) -> None:
        if self._pipe_transport is not None:
            self._pipe_transport.close()
            self._pipe_transport = None
