"""
Message Processor
Applies decoded server messages to the surface store in arrival order.
"""

from collections.abc import AsyncIterable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from returns.result import Failure, Result, Success

from a2ui.core.logging_config import LogContext, get_logger
from a2ui.monitoring import metrics_collector
from a2ui.surfaces import ComponentDiff, InvalidComponent, Surface, SurfaceStore
from .codec import MAX_JSON_DEPTH, MAX_MESSAGE_SIZE, ProtocolError, decode_message
from .messages import CreateSurfaceMessage, ServerMessage, UpdateComponentsMessage, UpdateDataModelMessage

logger = get_logger(__name__)


class ProcessingStage(str, Enum):
    DECODE = "decode"
    APPLY = "apply"
    COMPONENT = "component"


@dataclass(frozen=True)
class ProcessedMessage:
    message: ServerMessage
    surface: Surface | None = None
    diff: ComponentDiff | None = None


@dataclass(frozen=True)
class ProcessingError:
    """A message that was decoded or applied unsuccessfully."""

    stage: ProcessingStage
    kind: str
    message: str
    line: int | None = None
    message_type: str | None = None
    surface_id: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"stage": self.stage.value, "kind": self.kind, "message": self.message}
        if self.line is not None:
            data["line"] = self.line
        if self.message_type is not None:
            data["messageType"] = self.message_type
        if self.surface_id is not None:
            data["surfaceId"] = self.surface_id
        if self.details:
            data["details"] = self.details
        return data


@dataclass
class StreamReport:
    """Summary of a processed message stream."""

    processed: int = 0
    errors: list[ProcessingError] = field(default_factory=list)
    # Component payloads that failed inside an otherwise applied message
    component_errors: list[ProcessingError] = field(default_factory=list)
    surfaces: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "processed": self.processed,
            "failed": len(self.errors),
            "surfaces": list(self.surfaces),
            "errors": [error.to_dict() for error in self.errors],
            "componentErrors": [error.to_dict() for error in self.component_errors],
        }


class MessageProcessor:
    """
    Decodes and applies messages one at a time.

    A failing message is reported and skipped; it never stops the stream
    or disturbs messages before or after it.
    """

    def __init__(
        self,
        store: SurfaceStore,
        max_size: int = MAX_MESSAGE_SIZE,
        max_depth: int = MAX_JSON_DEPTH,
        repair: bool = False,
    ) -> None:
        self.store = store
        self.max_size = max_size
        self.max_depth = max_depth
        self.repair = repair

    def process(self, raw: Any, line: int | None = None) -> Result[ProcessedMessage, ProcessingError]:
        """Decode and apply a single message."""
        decoded = decode_message(raw, self.max_size, self.max_depth, self.repair)
        if isinstance(decoded, Failure):
            error: ProtocolError = decoded.failure()
            metrics_collector.record_message(error.message_type or "unknown", "rejected")
            return Failure(
                ProcessingError(
                    stage=ProcessingStage.DECODE,
                    kind=error.kind.value,
                    message=error.message,
                    line=line,
                    message_type=error.message_type,
                    details=error.to_dict(),
                )
            )
        return self.apply(decoded.unwrap(), line)

    def apply(self, message: ServerMessage, line: int | None = None) -> Result[ProcessedMessage, ProcessingError]:
        """Apply an already decoded message to the store."""
        with LogContext(surface_id=message.surface_id, message_type=message.type):
            if isinstance(message, CreateSurfaceMessage):
                result = self.store.create_surface(
                    message.surface_id,
                    message.catalog_id,
                    theme=message.theme,
                    send_data_model=bool(message.send_data_model),
                ).map(lambda surface: ProcessedMessage(message, surface=surface))
            elif isinstance(message, UpdateComponentsMessage):
                result = self.store.upsert_components(message.surface_id, message.components).map(
                    lambda diff: ProcessedMessage(
                        message, surface=self.store.get_surface(message.surface_id), diff=diff
                    )
                )
            elif isinstance(message, UpdateDataModelMessage):
                result = self.store.patch_data_model(message.surface_id, message.path, message.value).map(
                    lambda surface: ProcessedMessage(message, surface=surface)
                )
            else:
                raise TypeError(f"Unsupported message: {type(message).__name__}")

            if isinstance(result, Failure):
                store_error = result.failure()
                metrics_collector.record_message(message.type, "failed")
                return Failure(
                    ProcessingError(
                        stage=ProcessingStage.APPLY,
                        kind=store_error.kind.value,
                        message=store_error.message,
                        line=line,
                        message_type=message.type,
                        surface_id=message.surface_id,
                        details=store_error.to_dict(),
                    )
                )

            metrics_collector.record_message(message.type, "applied")
            logger.debug("message_applied")
            return result

    def _record(
        self, report: StreamReport, result: Result[ProcessedMessage, ProcessingError], line: int | None = None
    ) -> None:
        if isinstance(result, Failure):
            report.errors.append(result.failure())
            return
        processed = result.unwrap()
        report.processed += 1
        surface_id = processed.message.surface_id
        if surface_id not in report.surfaces:
            report.surfaces.append(surface_id)
        report.component_errors.extend(component_errors(processed, line))

    def process_lines(self, lines: Iterable[Any]) -> StreamReport:
        """Apply newline-delimited messages in order; blank lines are skipped."""
        report = StreamReport()
        for number, line in enumerate(lines, start=1):
            if isinstance(line, (str, bytes)) and not line.strip():
                continue
            self._record(report, self.process(line, number), number)
        if report.errors or report.component_errors:
            logger.info(
                "stream_processed",
                processed=report.processed,
                failed=len(report.errors),
                component_errors=len(report.component_errors),
            )
        return report

    async def aprocess_stream(self, lines: AsyncIterable[Any]) -> StreamReport:
        """Async variant of ``process_lines`` for streaming transports."""
        report = StreamReport()
        number = 0
        async for line in lines:
            number += 1
            if isinstance(line, (str, bytes)) and not line.strip():
                continue
            self._record(report, self.process(line, number), number)
        if report.errors or report.component_errors:
            logger.info(
                "stream_processed",
                processed=report.processed,
                failed=len(report.errors),
                component_errors=len(report.component_errors),
            )
        return report


def component_errors(processed: ProcessedMessage, line: int | None = None) -> list[ProcessingError]:
    """Invalid and rejected components of an applied ``updateComponents``."""
    diff = processed.diff
    if diff is None:
        return []
    message = processed.message
    failures = []
    for component_id in diff.invalid:
        entry = processed.surface.get(component_id) if processed.surface is not None else None
        if isinstance(entry, InvalidComponent):
            failures.append(entry.failure)
    failures.extend(diff.rejected)
    return [
        ProcessingError(
            stage=ProcessingStage.COMPONENT,
            kind=failure.kind.value,
            message=failure.message,
            line=line,
            message_type=message.type,
            surface_id=message.surface_id,
            details=failure.to_dict(),
        )
        for failure in failures
    ]
