"""Telemetry backends for chain observability."""

from stagechain.telemetry.base import TelemetryPort
from stagechain.telemetry.inmemory import InMemoryTelemetry

__all__ = [
    "TelemetryPort",
    "InMemoryTelemetry",
]
