"""Document service: draft/published, per-locale content versions."""

from documents.cascade import CascadePlan, DeleteStep, resolve_cascade_plan
from documents.components import ComponentWriter
from documents.service import DocumentService

__all__ = [
    "CascadePlan",
    "ComponentWriter",
    "DeleteStep",
    "DocumentService",
    "resolve_cascade_plan",
]
