"""Timing stage — counts invocations and measures the wrapped remainder."""

from __future__ import annotations

import time
from typing import Any

from stagechain.telemetry.base import TelemetryPort


class TimingStage:
    """Record how long everything downstream of this stage takes.

    Register it first to time the whole chain including the final action.
    Errors from downstream are counted and re-raised unchanged.
    """

    def __init__(self, telemetry: TelemetryPort, name: str = "chain") -> None:
        self._telemetry = telemetry
        self._labels = (("chain", name),)

    def call(self, *args: Any) -> Any:
        *_, next = args
        self._telemetry.incr("stagechain_invocations_total", labels=self._labels)
        started = time.perf_counter()
        try:
            return next()
        except Exception:
            self._telemetry.incr("stagechain_errors_total", labels=self._labels)
            raise
        finally:
            self._telemetry.timing(
                "stagechain_duration_seconds",
                time.perf_counter() - started,
                labels=self._labels,
            )
