"""
Span context value type used for trace correlation.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SpanContext(BaseModel):
    """
    Distributed-tracing correlation record.

    Constructing a ``SpanContext`` validates it: trace and span identifiers
    must be non-empty strings. Flags and state are optional.

    Example:
        >>> ctx = SpanContext(trace_id="4bf92f3577b34da6a3ce929d0e0e4736",
        ...                   span_id="00f067aa0ba902b7", trace_flags="01")
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    trace_id: str = Field(min_length=1, alias="traceId")
    span_id: str = Field(min_length=1, alias="spanId")
    trace_flags: Optional[str] = Field(default=None, alias="traceFlags")
    trace_state: Optional[str] = Field(default=None, alias="traceState")
