"""Span lifecycle port supplied by the instrumentation layer."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Protocol


class SpanPort(Protocol):
    """Begin/end surface of an external tracer; jvmlens never implements it."""

    def begin_span(self, name: str) -> object: ...

    def end_span(self, token: object, *, ok: bool) -> None: ...


@contextmanager
def traced(port: SpanPort | None, name: str) -> Iterator[None]:
    """Report the enclosed block to ``port`` as one span, failed if it raises."""
    if port is None:
        yield
        return
    token = port.begin_span(name)
    try:
        yield
    except BaseException:
        port.end_span(token, ok=False)
        raise
    port.end_span(token, ok=True)
