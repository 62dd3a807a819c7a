import contextlib
from typing import Any, Dict, Optional

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from common.errors.error_codes import error_code_for_exception, error_code_group

TRACER_NAME = "cms-content-core"


def _normalize_attributes(attributes: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    normalized: Dict[str, Any] = {}
    for key, value in (attributes or {}).items():
        if value is None:
            continue
        if isinstance(value, (str, bool, int, float)):
            normalized[key] = value
        else:
            normalized[key] = str(value)
    return normalized


class Telemetry:
    """Helper for OTEL tracing around storage and document operations."""

    @staticmethod
    @contextlib.contextmanager
    def start_span(
        name: str,
        attributes: Optional[Dict[str, Any]] = None,
    ):
        """Start an OTEL span; mark it failed and re-raise if the body raises."""
        tracer = trace.get_tracer(TRACER_NAME)

        with tracer.start_as_current_span(
            name=name,
            kind=trace.SpanKind.INTERNAL,
            attributes=_normalize_attributes(attributes),
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            try:
                yield span
            except Exception as exc:
                Telemetry.set_span_status(span, success=False, error=exc)
                raise
            else:
                Telemetry.set_span_status(span, success=True)

    @staticmethod
    def set_span_status(span, success: bool, error: Optional[Exception] = None):
        """Set span status based on success/error.

        Failed spans carry the canonical ``error.code`` and its ``error.group``.
        """
        if success:
            span.set_status(Status(StatusCode.OK))
        else:
            span.set_status(Status(StatusCode.ERROR, description=str(error)))
            if error:
                code = error_code_for_exception(error)
                span.set_attribute("error.code", code.value)
                span.set_attribute("error.group", error_code_group(code))
                span.record_exception(error)

    @staticmethod
    def set_attributes(span, attributes: Dict[str, Any]) -> None:
        """Attach low-cardinality attributes, dropping None values."""
        for key, value in _normalize_attributes(attributes).items():
            span.set_attribute(key, value)
