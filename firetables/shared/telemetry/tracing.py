"""Tracing helpers (OpenTelemetry API; no-op unless an SDK is configured)."""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

T = TypeVar("T")

# Only these kwarg names are recorded as span attributes; documents never are.
_SAFE_SPAN_ATTR_KEYS = frozenset({"path", "id", "row_id", "field", "method"})


def _set_safe_span_attrs(span: trace.Span, kwargs: dict) -> None:
    for key, value in kwargs.items():
        if key in _SAFE_SPAN_ATTR_KEYS:
            span.set_attribute(f"arg.{key}", str(value))


async def _run_in_span_async(span: trace.Span, run: Callable[[], Any]) -> Any:
    """Run an async callable, set span status, and record exceptions."""
    try:
        result = await run()
    except Exception as e:
        span.set_status(Status(StatusCode.ERROR, str(e)))
        span.record_exception(e)
        raise
    else:
        span.set_status(Status(StatusCode.OK))
        return result


def traced(operation_name: str | None = None) -> Callable:
    """Decorator to create a span around an async accessor operation.

    Accessors expose their bound path as ``self.path``; it is recorded as the
    ``firetables.path`` attribute.

    Args:
        operation_name: Span name (defaults to module.funcname).

    Returns:
        Decorated coroutine function.
    """

    def decorator(func: Callable) -> Callable:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"traced() expects a coroutine function, got {func!r}")
        tracer = trace.get_tracer(__name__)
        span_name = operation_name or f"{func.__module__}.{func.__name__}"

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(span_name) as span:
                path = getattr(args[0], "path", None) if args else None
                if path is not None:
                    span.set_attribute("firetables.path", path)
                _set_safe_span_attrs(span, kwargs)
                return await _run_in_span_async(span, lambda: func(*args, **kwargs))

        return wrapper

    return decorator


def add_span_attributes(**attributes: str | int | float | bool) -> None:
    """Add attributes to the current span."""
    span = trace.get_current_span()
    if span and span.is_recording():
        for key, value in attributes.items():
            span.set_attribute(key, value)
