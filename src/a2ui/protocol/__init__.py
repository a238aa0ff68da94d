"""
Protocol
Message shapes, codec and the store-applying processor
"""

from .codec import (
    MAX_JSON_DEPTH,
    MAX_MESSAGE_SIZE,
    ProtocolError,
    ProtocolErrorKind,
    decode_client_message,
    decode_message,
    encode_message,
)
from .messages import (
    ActionContext,
    ActionMessage,
    ClientMessage,
    CreateSurfaceMessage,
    ServerMessage,
    UpdateComponentsMessage,
    UpdateDataModelMessage,
)
from .processor import (
    MessageProcessor,
    component_errors,
    ProcessedMessage,
    ProcessingError,
    ProcessingStage,
    StreamReport,
)

__all__ = [
    "MAX_JSON_DEPTH",
    "MAX_MESSAGE_SIZE",
    "ProtocolError",
    "ProtocolErrorKind",
    "decode_client_message",
    "decode_message",
    "encode_message",
    "ActionContext",
    "ActionMessage",
    "ClientMessage",
    "CreateSurfaceMessage",
    "ServerMessage",
    "UpdateComponentsMessage",
    "UpdateDataModelMessage",
    "MessageProcessor",
    "ProcessedMessage",
    "ProcessingError",
    "ProcessingStage",
    "StreamReport",
    "component_errors",
]
