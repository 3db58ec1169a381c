"""Tests for telemetry module — OpenTelemetry tracing integration."""

from __future__ import annotations

from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from novel_context.assembler import ContextAssembler
from novel_context.store import InMemoryRecordStore
from novel_context.telemetry import (
    ContextTracer,
    TelemetryConfig,
    set_default_tracer,
    trace_completion,
    trace_context_build,
    trace_context_compress,
)


def test_init_with_none_config_succeeds() -> None:
    config = TelemetryConfig(exporter="none")
    tracer = ContextTracer(config)
    tracer.init()
    tracer.shutdown()


def test_span_context_manager_works() -> None:
    config = TelemetryConfig(exporter="none")
    tracer = ContextTracer(config)
    tracer.init()
    with tracer.span("test-span", {"key": "value"}) as s:
        assert s is not None
    tracer.shutdown()


def test_record_event_does_not_error() -> None:
    config = TelemetryConfig(exporter="none")
    tracer = ContextTracer(config)
    tracer.init()
    tracer.record_event("test-event", {"key": "value"})
    tracer.shutdown()


def test_disabled_tracer_does_not_record() -> None:
    tracer = ContextTracer(TelemetryConfig(exporter="stdout", enabled=False))
    tracer.init()
    with tracer.span("disabled") as s:
        assert not s.is_recording()
    tracer.shutdown()


def test_convenience_functions_do_not_error() -> None:
    with trace_context_build("p1", "d1") as s:
        assert s is not None
    with trace_context_compress(2048) as s:
        assert s is not None
    with trace_completion("stub") as s:
        assert s is not None


def test_build_span_is_recorded(store: InMemoryRecordStore) -> None:
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    tracer = ContextTracer()
    tracer._tracer = provider.get_tracer("test")
    set_default_tracer(tracer)
    try:
        ContextAssembler(store).build("p1", "d1", 0)
    finally:
        set_default_tracer(ContextTracer())

    spans = exporter.get_finished_spans()
    assert [s.name for s in spans] == ["context/build"]
    assert spans[0].attributes["project.id"] == "p1"
    assert spans[0].attributes["context.sections"] == 4


def test_config_defaults_are_correct() -> None:
    config = TelemetryConfig()
    assert config.service_name == "novel-context"
    assert config.enabled is True
    assert config.exporter == "none"
    assert config.otlp_endpoint == "http://localhost:4317"


def test_shutdown_is_safe_to_call_multiple_times() -> None:
    config = TelemetryConfig(exporter="none")
    tracer = ContextTracer(config)
    tracer.init()
    tracer.shutdown()
    tracer.shutdown()  # second call should not raise
    tracer.shutdown()  # third call should not raise
