"""
Lightweight Tracing
Spans around generation, rendering and action execution, logged via structlog.
"""

import contextvars
import time
import uuid
from contextlib import asynccontextmanager, contextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncGenerator, Generator

import structlog

logger = structlog.get_logger(__name__)

_trace_id: contextvars.ContextVar[str] = contextvars.ContextVar("trace_id", default="")
_span_id: contextvars.ContextVar[str] = contextvars.ContextVar("span_id", default="")

SLOW_SPAN_SECONDS = 1.0


@dataclass
class Span:
    """A single traced operation."""

    trace_id: str
    span_id: str
    parent_id: str
    name: str
    start_time: float
    duration: float = 0.0
    tags: dict[str, str] = field(default_factory=dict)
    error: Exception | None = None

    def finish(self) -> None:
        """Mark span as complete."""
        self.duration = time.time() - self.start_time

    def set_tag(self, key: str, value: str) -> None:
        """Add a tag to the span."""
        self.tags[key] = value

    def set_error(self, error: Exception) -> None:
        """Record an error in the span."""
        self.error = error


def _start_span(name: str, tags: dict[str, Any]) -> tuple[Span, contextvars.Token, contextvars.Token]:
    trace_id = _trace_id.get() or uuid.uuid4().hex
    span = Span(
        trace_id=trace_id,
        span_id=uuid.uuid4().hex[:16],
        parent_id=_span_id.get(),
        name=name,
        start_time=time.time(),
        tags={k: str(v) for k, v in tags.items()},
    )
    return span, _trace_id.set(trace_id), _span_id.set(span.span_id)


def _submit(span: Span, trace_token: contextvars.Token, span_token: contextvars.Token) -> None:
    span.finish()
    _span_id.reset(span_token)
    _trace_id.reset(trace_token)

    fields = {
        "trace_id": span.trace_id,
        "span_id": span.span_id,
        "operation": span.name,
        "duration_ms": round(span.duration * 1000, 2),
        **span.tags,
    }
    if span.parent_id:
        fields["parent_id"] = span.parent_id

    if span.error:
        logger.error("span_completed_with_error", error=str(span.error), **fields)
    elif span.duration > SLOW_SPAN_SECONDS:
        logger.warning("span_completed_slow", **fields)
    else:
        logger.debug("span_completed", **fields)


@contextmanager
def trace_operation(operation: str, **tags: Any) -> Generator[Span, None, None]:
    """Context manager for tracing synchronous operations."""
    span, trace_token, span_token = _start_span(operation, tags)
    try:
        yield span
    except Exception as e:
        span.set_error(e)
        raise
    finally:
        _submit(span, trace_token, span_token)


@asynccontextmanager
async def trace_operation_async(operation: str, **tags: Any) -> AsyncGenerator[Span, None]:
    """Async context manager for tracing operations."""
    span, trace_token, span_token = _start_span(operation, tags)
    try:
        yield span
    except Exception as e:
        span.set_error(e)
        raise
    finally:
        _submit(span, trace_token, span_token)


def get_trace_id() -> str:
    """Get current trace ID from context."""
    return _trace_id.get()
