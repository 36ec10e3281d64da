"""StreamTransport — JSON-RPC over a duplex byte stream (stdin/stdout).

Messages are bare JSON values with no framing beyond JSON's own structure;
newline-delimited and pretty-printed values both decode.  Requests are
handled strictly one at a time.
"""

from __future__ import annotations

import asyncio
import codecs
import json
import logging
import sys
from typing import IO, TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pprof_mcp.protocol.models import JsonRpcResponse
    from pprof_mcp.server.engine import ProtocolEngine

logger = logging.getLogger(__name__)

READ_CHUNK = 64 * 1024

_NEED_MORE = object()
_EOF = object()


class JsonStreamDecoder:
    """Incrementally splits a byte stream into JSON values.

    Usage::

        decoder = JsonStreamDecoder()
        decoder.feed(b'{"jsonrpc": "2.0", "method": "initialized"}\\n')
        value = decoder.decode_next()   # dict, or NEED_MORE
    """

    NEED_MORE = _NEED_MORE

    def __init__(self) -> None:
        self._text = ""
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._json = json.JSONDecoder()

    @property
    def pending(self) -> str:
        return self._text

    def feed(self, data: bytes) -> None:
        self._text += self._utf8.decode(data)

    def decode_next(self) -> Any:
        """Return the next complete value, or :attr:`NEED_MORE`.

        Raises :class:`json.JSONDecodeError` for a malformed value after
        discarding it.  When the error surfaces on a later line (the value
        was left unterminated), that line is kept and decoding resumes there;
        otherwise the rest of the offending line is dropped.
        """
        text = self._text.lstrip()
        if not text:
            self._text = ""
            return _NEED_MORE
        try:
            value, end = self._json.raw_decode(text)
        except json.JSONDecodeError as exc:
            last_newline = text.rfind("\n")
            if exc.pos >= last_newline:
                # Error sits in the unterminated tail: the value may still complete.
                self._text = text
                return _NEED_MORE
            line_start = text.rfind("\n", 0, exc.pos) + 1
            if line_start > 0:
                # An unterminated value ends where the failing line begins.
                self._text = text[line_start:]
            else:
                cut = text.find("\n", exc.pos)
                self._text = text[cut + 1 :]
            raise
        self._text = text[end:]
        return value

    def finish(self) -> None:
        """Flush at end of stream; raises if undecodable bytes remain."""
        leftover = (self._text + self._utf8.decode(b"", final=True)).strip()
        self._text = ""
        if leftover:
            raise json.JSONDecodeError("Unterminated JSON value at end of stream", leftover, 0)


class StreamTransport:
    """Serves a :class:`ProtocolEngine` over a reader/writer pair.

    Defaults to the process's stdin/stdout; tests pass an
    :class:`asyncio.StreamReader` and a binary buffer.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader | None = None,
        writer: IO[bytes] | None = None,
    ) -> None:
        self._reader = reader
        self._writer = writer
        self._pipe: asyncio.ReadTransport | None = None
        self._write_lock = asyncio.Lock()
        self._decoder = JsonStreamDecoder()

    async def connect(self) -> None:
        """Attach to stdin/stdout unless streams were supplied."""
        if self._reader is None:
            loop = asyncio.get_running_loop()
            reader = asyncio.StreamReader()
            protocol = asyncio.StreamReaderProtocol(reader)
            self._pipe, _ = await loop.connect_read_pipe(lambda: protocol, sys.stdin)
            self._reader = reader
        if self._writer is None:
            self._writer = sys.stdout.buffer

    async def run(self, engine: ProtocolEngine, shutdown: asyncio.Event | None = None) -> None:
        """Read, dispatch and answer requests until EOF or *shutdown*."""
        if self._reader is None or self._writer is None:
            msg = "Transport not connected"
            raise RuntimeError(msg)

        while True:
            if shutdown is not None and shutdown.is_set():
                logger.info("Shutdown requested; leaving stream loop")
                return

            try:
                message = await self._next_message(shutdown)
            except json.JSONDecodeError as exc:
                logger.warning("Error decoding request: %s", exc)
                continue

            if message is _EOF:
                logger.info("Input stream closed")
                return

            response = await engine.handle_message(message)
            if response is not None:
                await self.send(response)

    async def send(self, response: JsonRpcResponse) -> None:
        """Write one response as a JSON line."""
        if self._writer is None:
            msg = "Transport not connected"
            raise RuntimeError(msg)
        line = json.dumps(response.to_wire()) + "\n"
        async with self._write_lock:
            self._writer.write(line.encode())
            self._writer.flush()

    async def close(self) -> None:
        """Detach from stdin; flush stdout."""
        if self._pipe is not None:
            self._pipe.close()
            self._pipe = None
        if self._writer is not None:
            self._writer.flush()

    async def _next_message(self, shutdown: asyncio.Event | None) -> Any:
        while True:
            value = self._decoder.decode_next()
            if value is not _NEED_MORE:
                return value
            chunk = await self._read_chunk(shutdown)
            if not chunk:
                self._decoder.finish()
                return _EOF
            self._decoder.feed(chunk)

    async def _read_chunk(self, shutdown: asyncio.Event | None) -> bytes:
        assert self._reader is not None
        if shutdown is None:
            return await self._reader.read(READ_CHUNK)

        read_task = asyncio.ensure_future(self._reader.read(READ_CHUNK))
        stop_task = asyncio.ensure_future(shutdown.wait())
        try:
            done, _ = await asyncio.wait({read_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (read_task, stop_task):
                if not task.done():
                    task.cancel()
        if read_task in done:
            return read_task.result()
        return b""
