"""SSE and JSONL framing for protocol streams."""

import codecs
from collections.abc import AsyncGenerator, AsyncIterator, Callable
from dataclasses import dataclass, field
from typing import Any

from a2ui.core.json import JSONParseError, decode_json
from a2ui.core.logging_config import get_logger

logger = get_logger(__name__)

DATA_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"

# SSE fields that never carry a message
_SSE_FIELDS = ("event:", "id:", "retry:")


@dataclass(frozen=True)
class ParsedLine:
    data: Any


@dataclass(frozen=True)
class ParseError:
    message: str
    raw: str


@dataclass
class StreamParseResult:
    messages: list[Any] = field(default_factory=list)
    errors: list[ParseError] = field(default_factory=list)


def extract_payload(line: str) -> str | None:
    """
    JSON payload carried by one line, if any.

    ``data:`` lines yield their payload; bare lines are taken as JSONL.
    Blank lines, comments, other SSE fields and ``[DONE]`` yield None.
    """
    trimmed = line.strip()
    if not trimmed or trimmed.startswith(":") or trimmed.startswith(_SSE_FIELDS):
        return None
    if trimmed.startswith(DATA_PREFIX):
        trimmed = trimmed[len(DATA_PREFIX):].strip()
    if not trimmed or trimmed == DONE_SENTINEL:
        return None
    return trimmed


def parse_sse_line(line: str, repair: bool = False) -> ParsedLine | ParseError | None:
    """Decode one line; None when the line carries no payload."""
    payload = extract_payload(line)
    if payload is None:
        return None
    try:
        return ParsedLine(decode_json(payload, repair=repair))
    except JSONParseError as e:
        logger.warning("stream_parse_error", error=str(e), raw=payload[:200])
        return ParseError(message=f"JSON parse error: {e}", raw=payload)


def split_lines(text: str) -> list[str]:
    return text.replace("\r\n", "\n").split("\n")


def iter_payloads(text: str) -> list[str]:
    """All payloads of a complete SSE or JSONL body, in order."""
    return [payload for line in split_lines(text) if (payload := extract_payload(line)) is not None]


def parse_stream_text(text: str, repair: bool = False) -> StreamParseResult:
    """Decode a complete SSE or JSONL body."""
    result = StreamParseResult()
    for line in split_lines(text):
        parsed = parse_sse_line(line, repair)
        if isinstance(parsed, ParsedLine):
            result.messages.append(parsed.data)
        elif isinstance(parsed, ParseError):
            result.errors.append(parsed)
    return result


@dataclass
class LineBuffer:
    """Buffers stream chunks and releases complete lines."""

    _buffer: str = field(default="", init=False, repr=False)

    def feed(self, chunk: str) -> list[str]:
        """Add a chunk; return every line it completed, without terminators."""
        self._buffer += chunk
        *lines, self._buffer = self._buffer.split("\n")
        return [line[:-1] if line.endswith("\r") else line for line in lines]

    def flush(self) -> str | None:
        """Return the unterminated tail, if any."""
        if self._buffer:
            tail = self._buffer
            self._buffer = ""
            return tail.rstrip("\r")
        return None

    def clear(self) -> None:
        self._buffer = ""


async def aiter_payloads(chunks: AsyncIterator[str | bytes]) -> AsyncGenerator[str, None]:
    """
    Payloads from an async chunk stream.

    Args:
        chunks: Raw text or UTF-8 chunks, split anywhere

    Yields:
        JSON payload strings in arrival order
    """
    buffer = LineBuffer()
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    async for chunk in chunks:
        text = decoder.decode(chunk) if isinstance(chunk, bytes) else chunk
        for line in buffer.feed(text):
            if (payload := extract_payload(line)) is not None:
                yield payload

    # Flush remaining
    if (tail := buffer.flush()) is not None and (payload := extract_payload(tail)) is not None:
        yield payload


@dataclass(frozen=True)
class DisconnectInfo:
    reason: str  # "closed" or "error"
    error: BaseException | None = None


class StreamParser:
    """
    Incremental parser with connection lifecycle callbacks.

    Chunks fed while disconnected are ignored. Parse errors go to
    ``on_error``; nothing is raised.
    """

    def __init__(
        self,
        on_message: Callable[[Any], None] | None = None,
        on_error: Callable[[ParseError], None] | None = None,
        on_connect: Callable[[], None] | None = None,
        on_disconnect: Callable[[DisconnectInfo], None] | None = None,
        repair: bool = False,
    ) -> None:
        self.on_message = on_message
        self.on_error = on_error
        self.on_connect = on_connect
        self.on_disconnect = on_disconnect
        self.repair = repair
        self._buffer = LineBuffer()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._connected = False

    def is_connected(self) -> bool:
        return self._connected

    def connect(self) -> None:
        if self._connected:
            return
        self._connected = True
        self._buffer.clear()
        if self.on_connect:
            self.on_connect()

    def feed(self, chunk: str | bytes) -> None:
        if not self._connected:
            return
        text = self._decoder.decode(chunk) if isinstance(chunk, bytes) else chunk
        for line in self._buffer.feed(text):
            self._emit(line)

    def close(self) -> None:
        """Deliver a final unterminated line, then disconnect."""
        if not self._connected:
            return
        if (tail := self._buffer.flush()) is not None:
            self._emit(tail)
        self._disconnect(DisconnectInfo(reason="closed"))

    def error(self, error: BaseException) -> None:
        """Abort the stream; a partial line is discarded."""
        if not self._connected:
            return
        self._disconnect(DisconnectInfo(reason="error", error=error))

    def _disconnect(self, info: DisconnectInfo) -> None:
        self._connected = False
        self._buffer.clear()
        self._decoder.reset()
        if self.on_disconnect:
            self.on_disconnect(info)

    def _emit(self, line: str) -> None:
        parsed = parse_sse_line(line, self.repair)
        if isinstance(parsed, ParsedLine):
            if self.on_message:
                self.on_message(parsed.data)
        elif isinstance(parsed, ParseError):
            if self.on_error:
                self.on_error(parsed)
