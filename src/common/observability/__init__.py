"""Shared observability helpers."""

from common.observability.telemetry import Telemetry

__all__ = ["Telemetry"]
