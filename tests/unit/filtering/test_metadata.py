"""
Unit tests for service metadata
"""

from sternlog.filtering.metadata import ServiceMetadata, metadata_fields
from sternlog.telemetry.span_context import SpanContext


def test_to_fields_drops_unset():
    metadata = ServiceMetadata(component="voice", layer="orchestrator")
    assert metadata.to_fields() == {"component": "voice", "layer": "orchestrator"}


def test_extra_fields_kept():
    metadata = ServiceMetadata(service="api", region="eu-west-1")
    assert metadata.to_fields() == {"service": "api", "region": "eu-west-1"}


def test_span_context_dumped_as_dict():
    metadata = ServiceMetadata(
        component="voice", span_context=SpanContext(trace_id="t", span_id="s")
    )
    assert metadata.to_fields()["span_context"] == {"trace_id": "t", "span_id": "s"}


def test_metadata_fields_accepts_mappings_and_none():
    assert metadata_fields({"component": "voice"}) == {"component": "voice"}
    assert metadata_fields(None) == {}
