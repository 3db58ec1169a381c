"""OpenTelemetry tracing integration for novel-context.

Provides spans around context builds, compressions and completion calls with
support for stdout, OTLP and noop exporters.
"""

from __future__ import annotations

import contextlib
from collections.abc import Generator
from dataclasses import dataclass
from typing import Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.trace import NoOpTracer, Span, Tracer

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass
class TelemetryConfig:
    """Configuration for the tracing subsystem."""

    service_name: str = "novel-context"
    enabled: bool = True
    exporter: str = "none"  # "stdout" | "otlp" | "none"
    otlp_endpoint: str = "http://localhost:4317"


# ---------------------------------------------------------------------------
# ContextTracer
# ---------------------------------------------------------------------------


class ContextTracer:
    """Central tracer for the context engine.

    Wraps OpenTelemetry ``TracerProvider`` setup and provides helpers for
    creating spans and recording events.
    """

    def __init__(self, config: TelemetryConfig | None = None) -> None:
        self._config = config or TelemetryConfig()
        self._provider: TracerProvider | None = None
        self._tracer: Tracer = NoOpTracer()

    def init(self) -> None:
        """Set up the OTel TracerProvider based on config."""
        cfg = self._config

        if not cfg.enabled or cfg.exporter == "none":
            return

        resource = Resource.create({"service.name": cfg.service_name})

        if cfg.exporter == "stdout":
            from opentelemetry.sdk.trace.export import (
                ConsoleSpanExporter,
                SimpleSpanProcessor,
            )

            provider = TracerProvider(resource=resource)
            provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
            self._provider = provider
            self._tracer = provider.get_tracer(cfg.service_name)

        elif cfg.exporter == "otlp":
            try:
                from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
                    OTLPSpanExporter,
                )
                from opentelemetry.sdk.trace.export import SimpleSpanProcessor
            except ImportError:  # pragma: no cover
                # OTLP exporter is an optional extra; stay on the noop tracer.
                return

            exporter = OTLPSpanExporter(endpoint=cfg.otlp_endpoint, insecure=True)
            provider = TracerProvider(resource=resource)
            provider.add_span_processor(SimpleSpanProcessor(exporter))
            self._provider = provider
            self._tracer = provider.get_tracer(cfg.service_name)

    @contextlib.contextmanager
    def span(
        self,
        name: str,
        attributes: dict[str, str | int] | None = None,
    ) -> Generator[Span, None, None]:
        """Create a span as a context manager.

        Usage::

            with tracer.span("context/build", {"project.id": "p1"}) as s:
                ...
        """
        with self._tracer.start_as_current_span(name) as s:
            if attributes:
                for k, v in attributes.items():
                    s.set_attribute(k, v)
            yield s

    def record_event(
        self,
        name: str,
        attributes: dict[str, str | int] | None = None,
    ) -> None:
        """Record a named event on the current active span (if any)."""
        current_span = trace.get_current_span()
        if current_span.is_recording():
            otel_attrs: dict[str, Any] = dict(attributes) if attributes else {}
            current_span.add_event(name, otel_attrs)

    def shutdown(self) -> None:
        """Flush pending spans and shut down the provider.

        Safe to call multiple times.
        """
        if self._provider is not None:
            self._provider.shutdown()
            self._provider = None


_DEFAULT_TRACER: ContextTracer | None = None


def _get_default_tracer() -> ContextTracer:
    global _DEFAULT_TRACER  # noqa: PLW0603
    if _DEFAULT_TRACER is None:
        _DEFAULT_TRACER = ContextTracer()
    return _DEFAULT_TRACER


def set_default_tracer(tracer: ContextTracer) -> None:
    """Route the convenience context managers through *tracer*."""
    global _DEFAULT_TRACER  # noqa: PLW0603
    _DEFAULT_TRACER = tracer


# ---------------------------------------------------------------------------
# Convenience context managers
# ---------------------------------------------------------------------------


@contextlib.contextmanager
def trace_context_build(project_id: str, document_id: str) -> Generator[Span, None, None]:
    """Trace a context build."""
    attrs = {"project.id": project_id, "document.id": document_id}
    with _get_default_tracer().span("context/build", attrs) as s:
        yield s


@contextlib.contextmanager
def trace_context_compress(max_tokens: int) -> Generator[Span, None, None]:
    """Trace a context compression."""
    with _get_default_tracer().span("context/compress", {"budget.max_tokens": max_tokens}) as s:
        yield s


@contextlib.contextmanager
def trace_completion(backend: str) -> Generator[Span, None, None]:
    """Trace a completion backend call."""
    with _get_default_tracer().span("completion/generate", {"completion.backend": backend}) as s:
        yield s
