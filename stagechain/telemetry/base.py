"""Base telemetry port protocol."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

Labels = tuple[tuple[str, str], ...]


@runtime_checkable
class TelemetryPort(Protocol):
    """Protocol for metric sinks used by bundled stages.

    - Counters: monotonically increasing values (invocations, errors)
    - Timing: durations in seconds
    """

    def incr(self, name: str, value: int = 1, labels: Labels = ()) -> None:
        """Increase a named counter by ``value`` with optional labels.

        Args:
            name: Metric name (e.g., "stagechain_invocations_total")
            value: Amount to increment (default 1)
            labels: Optional label tuples (e.g., (("chain", "post_process"),))
        """

    def timing(self, name: str, value: float, labels: Labels = ()) -> None:
        """Record the duration of an operation in seconds."""
