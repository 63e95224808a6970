"""
Service metadata describing where a log line comes from.
"""

from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict

from sternlog.telemetry.span_context import SpanContext


class ServiceMetadata(BaseModel):
    """
    Identification fields bound to a component logger.

    Attributes:
        service: Top-level service name (api, worker, db-migrator)
        component: Major component or business domain (voice, payment)
        operation: Specific operation (create, validate, connect)
        layer: Architecture layer (handler, service, repository)
        domain: Cross-cutting business domain (auth, billing)
        integration: External system (stripe, postgres, twilio)
        span_context: Optional span context for trace correlation

    Any extra keyword is kept and bound to the logger as well.
    """

    model_config = ConfigDict(extra="allow")

    service: Optional[str] = None
    component: Optional[str] = None
    operation: Optional[str] = None
    layer: Optional[str] = None
    domain: Optional[str] = None
    integration: Optional[str] = None
    span_context: Optional[SpanContext] = None

    def to_fields(self) -> Dict[str, Any]:
        """Return the set fields as a plain dict, dropping ``None`` values."""
        return self.model_dump(exclude_none=True)


MetadataLike = Union[ServiceMetadata, Mapping[str, Any]]


def metadata_fields(metadata: Optional[MetadataLike]) -> Dict[str, Any]:
    if metadata is None:
        return {}
    if isinstance(metadata, ServiceMetadata):
        return metadata.to_fields()
    return dict(metadata)
