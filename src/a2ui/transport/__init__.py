"""
Transport
Line framing for SSE and JSONL message streams
"""

from .sse import (
    DATA_PREFIX,
    DONE_SENTINEL,
    DisconnectInfo,
    LineBuffer,
    ParsedLine,
    ParseError,
    StreamParser,
    StreamParseResult,
    aiter_payloads,
    extract_payload,
    iter_payloads,
    parse_sse_line,
    parse_stream_text,
)

__all__ = [
    "DATA_PREFIX",
    "DONE_SENTINEL",
    "DisconnectInfo",
    "LineBuffer",
    "ParsedLine",
    "ParseError",
    "StreamParser",
    "StreamParseResult",
    "aiter_payloads",
    "extract_payload",
    "iter_payloads",
    "parse_sse_line",
    "parse_stream_text",
]
